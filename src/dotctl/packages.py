"""Discovery of package directories inside a dotfiles root."""

import fnmatch
import logging
from pathlib import Path
from typing import Iterable, List, Optional

from .config import CONFIG_FILENAMES

logger = logging.getLogger(__name__)

SHELL_PACKAGE = "shell"

SKIP_NAMES = {".git", "__pycache__", *CONFIG_FILENAMES}
TEMP_SUFFIX = ".tmp"


def _is_skipped(name: str, excludes: Iterable[str]) -> bool:
    if name in SKIP_NAMES or name.endswith(TEMP_SUFFIX):
        return True
    return any(fnmatch.fnmatch(name, pattern) for pattern in excludes)


def scan_packages(
    dotfiles_dir: Path, excludes: Optional[Iterable[str]] = None
) -> List[str]:
    """List the package directories directly under the dotfiles root.

    Dot-directories such as ``.oh-my-zsh`` count as packages; git metadata,
    config files, caches and ``*.tmp`` entries do not. ``excludes`` adds
    glob patterns on top of the built-in skip list.
    """
    if not dotfiles_dir.is_dir():
        return []

    patterns = list(excludes or [])
    packages = []
    for entry in dotfiles_dir.iterdir():
        if _is_skipped(entry.name, patterns):
            continue
        if entry.is_dir():
            packages.append(entry.name)

    return sorted(packages)


def scan_config_packages(dotfiles_dir: Path) -> List[str]:
    """List packages kept under the root's own ``.config`` directory.

    Returned with a ``.config/`` prefix so they deploy under ``~/.config``.
    """
    config_dir = dotfiles_dir / ".config"
    if not config_dir.is_dir():
        return []

    packages = []
    for entry in config_dir.iterdir():
        name = entry.name
        if name.startswith(".") or name == "__pycache__":
            continue
        if name.endswith(TEMP_SUFFIX):
            continue
        if entry.is_dir():
            packages.append(f".config/{name}")

    return sorted(packages)


def is_config_package(name: str) -> bool:
    """Whether a package is linked under ``~/.config`` rather than ``~``.

    Names starting with "." and the special "shell" package go to home.
    """
    return not (name.startswith(".") or name == SHELL_PACKAGE)
