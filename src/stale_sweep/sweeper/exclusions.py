"""Branch exclusion rules.

Exclusions are configured as a comma-separated list. Entries without ``*`` are
literal branch names; entries with ``*`` are patterns where ``*`` stands for any
sequence of characters (including none) and the whole branch name must match.
"""

import logging
import re

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class RuleSet(BaseModel):
    """Compiled exclusion rules."""

    model_config = {"frozen": True}

    names: frozenset[str] = Field(default_factory=frozenset, description="Literal branch names")
    patterns: tuple[re.Pattern[str], ...] = Field(default=(), description="Anchored patterns, in configured order")

    @property
    def is_empty(self) -> bool:
        """Check if no exclusions are configured."""
        return not self.names and not self.patterns


def glob_to_pattern(glob: str) -> re.Pattern[str]:
    """Compile a ``*`` wildcard into a pattern matching the entire string.

    Only ``*`` is special; every other character matches itself.

    Args:
        glob: Wildcard expression, e.g. ``release/*``

    Returns:
        Compiled pattern to be used with ``fullmatch``
    """
    regex = ".*".join(re.escape(part) for part in glob.split("*"))
    return re.compile(regex, re.DOTALL)


def compile_rules(rule_text: str) -> RuleSet:
    """Parse a comma-separated exclusion list.

    Args:
        rule_text: Raw exclusion list, e.g. ``"main, release/*, hotfix-*"``

    Returns:
        Rule set with literal names and compiled patterns
    """
    names: set[str] = set()
    patterns: list[re.Pattern[str]] = []

    entries = [item.strip() for item in rule_text.split(",")]
    for entry in entries:
        if not entry:
            continue
        if "*" in entry:
            patterns.append(glob_to_pattern(entry))
        else:
            names.add(entry)

    logger.debug(f"Excluded branch names: {sorted(names)}")
    logger.debug(f"Excluded branch patterns: {[p.pattern for p in patterns]}")

    return RuleSet(names=frozenset(names), patterns=tuple(patterns))


def matches(branch_name: str, rules: RuleSet) -> bool:
    """Check if a branch is excluded.

    Args:
        branch_name: Branch to test
        rules: Compiled exclusion rules

    Returns:
        True if the name is a literal exclusion or fully matches any pattern
    """
    if branch_name in rules.names:
        return True
    return any(pattern.fullmatch(branch_name) for pattern in rules.patterns)
