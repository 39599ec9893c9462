"""GitHub Actions step outputs."""

import json
import logging
from pathlib import Path

import aiofiles

from stale_sweep.sweeper.models import RunResult

logger = logging.getLogger(__name__)


def format_outputs(result: RunResult) -> str:
    """Render a run result in the ``name=value`` output file format.

    Args:
        result: Run result

    Returns:
        Output lines, newline-terminated
    """
    lines = [
        f"deleted-branches={json.dumps(result.deleted_branches)}",
        f"deleted-count={result.deleted_count}",
    ]
    return "\n".join(lines) + "\n"


async def write_outputs(output_file: Path, result: RunResult) -> None:
    """Append the run outputs to the Actions output file.

    Args:
        output_file: Path from ``GITHUB_OUTPUT``
        result: Run result, possibly from an aborted run
    """
    async with aiofiles.open(output_file, mode="a", encoding="utf-8") as f:
        await f.write(format_outputs(result))
    logger.debug(f"Wrote outputs to {output_file}")
