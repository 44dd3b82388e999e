"""Logging setup and version lookup."""

import importlib.metadata
import logging
from datetime import datetime

from rich.console import Console
from rich.logging import RichHandler

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(verbose: bool = False) -> None:
    """Route log records through rich on stderr.

    Warnings and errors are shown by default; --verbose adds debug output.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    handler = RichHandler(
        console=Console(stderr=True),
        show_time=verbose,
        show_path=verbose,
        markup=False,
    )
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[handler],
        force=True,
    )


def get_version() -> str:
    """Return the installed dotctl version."""
    try:
        return importlib.metadata.version("dotctl")
    except importlib.metadata.PackageNotFoundError:
        return "(development)"


def timestamp() -> str:
    """Current local time, used in stash and commit messages."""
    return datetime.now().strftime(TIMESTAMP_FORMAT)
