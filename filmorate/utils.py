"""
Utility functions for Filmorate.

Logging setup shared by the CLI, the services and the API, and the
small console helpers the CLI prints with.
"""

import logging
import sys
from datetime import date
from pathlib import Path
from typing import Mapping, Optional, Union

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_level(level: Union[int, str]) -> int:
    """Numeric level for ``level``; unknown names fall back to INFO."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def log_file_path(name: str, log_dir: Path) -> Path:
    """Daily log file for a logger, e.g. ``filmorate_api_20240131.log``."""
    stem = name.replace(".", "_")
    return log_dir / f"{stem}_{date.today():%Y%m%d}.log"


def setup_logger(
    name: str,
    log_dir: Optional[Path] = None,
    level: Union[int, str] = logging.INFO,
    console_level: Optional[int] = logging.WARNING,
    fmt: str = LOG_FORMAT,
    log_filter: Optional[logging.Filter] = None,
) -> logging.Logger:
    """
    Configure ``name`` with a daily file handler and a console handler.

    Children such as ``filmorate.service`` propagate into these handlers,
    so configuring the package root once is enough.

    Args:
        name: Logger name, also used for the log file name
        log_dir: Directory for log files (defaults to ./logs)
        level: Logger and file level, as a number or a level name
        console_level: Level for stdout, or None for no console output
        fmt: Record format shared by both handlers
        log_filter: Filter attached to every handler

    Returns:
        The configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(resolve_level(level))

    if logger.handlers:
        return logger

    log_dir = Path(log_dir) if log_dir is not None else Path.cwd() / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)

    handlers = [logging.FileHandler(log_file_path(name, log_dir))]
    handlers[0].setLevel(logger.level)
    if console_level is not None:
        console = logging.StreamHandler(sys.stdout)
        console.setLevel(console_level)
        handlers.append(console)

    formatter = logging.Formatter(fmt, datefmt=LOG_DATE_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        if log_filter is not None:
            handler.addFilter(log_filter)
        logger.addHandler(handler)

    return logger


def format_count(n: int) -> str:
    return f"{n:,}"


def shorten(text: str, width: int = 50, placeholder: str = "...") -> str:
    """Cut ``text`` to ``width`` characters, ending in ``placeholder``."""
    if len(text) <= width:
        return text
    return text[: width - len(placeholder)] + placeholder


def print_banner(title: str, width: int = 60) -> None:
    rule = "=" * width
    print(f"{rule}\n{title.center(width)}\n{rule}")


def print_key_values(rows: Mapping[str, object], title: str) -> None:
    """Print ``rows`` as an aligned two-column block under ``title``."""
    pad = max((len(str(key)) for key in rows), default=10) + 2
    print(f"\n{title}\n{'-' * 40}")
    for key, value in rows.items():
        print(f"  {str(key):<{pad}}: {value}")
    print()


def ask_yes_no(question: str) -> bool:
    """Ask on stdin; anything but y/yes counts as no."""
    answer = input(f"{question} [y/N]: ")
    return answer.strip().lower() in ("y", "yes")
