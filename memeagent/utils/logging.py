"""Loguru sink configuration.

Console output goes to stderr; `combined.log` keeps every record and
`error.log` keeps ERROR and above, both as JSON lines.
"""

import sys
from pathlib import Path
from typing import Union

from loguru import logger


def setup_logging(level: str = "INFO", log_dir: Union[str, Path, None] = "logs") -> None:
    """Replace loguru's default handler with the agent's sinks."""
    logger.remove()
    logger.add(sys.stderr, level=level)

    if log_dir is None:
        return

    path = Path(log_dir)
    path.mkdir(parents=True, exist_ok=True)
    logger.add(
        path / "combined.log",
        level=level,
        serialize=True,
        rotation="1 day",
        retention="30 days",
        enqueue=True,
    )
    logger.add(
        path / "error.log",
        level="ERROR",
        serialize=True,
        rotation="1 day",
        retention="30 days",
        enqueue=True,
    )
