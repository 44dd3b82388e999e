"""Adopting unmanaged ``~/.config`` directories into the dotfiles root."""

import logging
import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .config import Config
from .errors import DeployError
from .system import ALL_SYSTEMS, is_known_system

logger = logging.getLogger(__name__)

# Desktop-environment state and other directories that are never packages
SKIP_DIRECTORIES = {
    "pulse",
    "systemd",
    "dconf",
    "gconf",
    "ibus",
    "fontconfig",
    "gtk-2.0",
    "gtk-3.0",
    "gtk-4.0",
    "qt5ct",
    "qt6ct",
    "Trolltech.conf",
    "mimeapps.list",
    "user-dirs.dirs",
    "user-dirs.locale",
}


def parse_adopt_args(args: Sequence[str]) -> Tuple[List[str], List[str]]:
    """Split ``adopt`` arguments into target packages and systems.

    If the first argument is not a known system tag it names the package
    to adopt; every other argument is a system. Systems default to "all".
    """
    targets: List[str] = []
    systems: List[str] = list(args)

    if systems and not is_known_system(systems[0]):
        targets = [systems.pop(0)]

    return targets, systems or [ALL_SYSTEMS]


@dataclass
class AdoptResult:
    candidates: List[str] = field(default_factory=list)
    adopted: List[str] = field(default_factory=list)
    failures: Dict[str, Exception] = field(default_factory=dict)
    dry_run: bool = False


class Adopter:
    """Moves directories out of ``~/.config`` and links them back."""

    def __init__(
        self,
        dotfiles_dir: Path,
        config: Config,
        home: Path,
        reporter: Optional[Callable[[str], None]] = None,
    ):
        self.dotfiles_dir = Path(dotfiles_dir)
        self.config = config
        self.config_dir = Path(home) / ".config"
        self.report = reporter or logger.info

    def _check_target(self, name: str) -> bool:
        if name in self.config.packages:
            self.report(f"Package '{name}' is already managed")
            return False

        path = self.config_dir / name
        if path.is_symlink():
            self.report(f"Package '{name}' is already a symlink")
            return False

        if not path.exists():
            self.report(f"Package '{name}' not found in ~/.config")
            return False

        return True

    def find_candidates(self, targets: Sequence[str] = ()) -> List[str]:
        if targets:
            return [name for name in targets if self._check_target(name)]

        candidates = []
        for entry in sorted(self.config_dir.iterdir()):
            name = entry.name
            if entry.is_symlink() or not entry.is_dir():
                continue
            if name in self.config.packages or name in SKIP_DIRECTORIES:
                continue
            candidates.append(name)
        return candidates

    def adopt_one(self, name: str, systems: List[str]):
        """Move one directory into the dotfiles root and link it back.

        If the link cannot be created the directory is moved back; that
        compensating move is best effort.
        """
        source = self.config_dir / name
        destination = self.dotfiles_dir / name

        if os.path.lexists(destination):
            raise DeployError(f"{destination} already exists in dotfiles")

        self.dotfiles_dir.mkdir(parents=True, exist_ok=True)
        shutil.move(str(source), str(destination))

        try:
            relative = os.path.relpath(destination, self.config_dir)
            os.symlink(relative, source)
        except OSError as e:
            try:
                shutil.move(str(destination), str(source))
            except OSError as restore_error:
                logger.error(
                    f"Could not move {destination} back to {source}: "
                    f"{restore_error}"
                )
            raise DeployError(f"failed to create symlink {source}: {e}")

        self.config.add_package(name, systems)

    def adopt(
        self,
        targets: Sequence[str],
        systems: List[str],
        dry_run: bool = False,
    ) -> AdoptResult:
        result = AdoptResult(dry_run=dry_run)

        if not self.config_dir.is_dir():
            self.report("No ~/.config directory found")
            return result

        result.candidates = self.find_candidates(targets)
        if not result.candidates:
            if targets:
                self.report("No specified packages available to adopt")
            else:
                self.report("No new config directories found to adopt")
            return result

        if targets:
            self.report(
                f"Adopting specific package(s): {', '.join(result.candidates)}"
            )
        else:
            self.report(
                f"Found {len(result.candidates)} new config "
                "directories to adopt:"
            )
            for name in result.candidates:
                self.report(f"  - {name}")

        if dry_run:
            self.report(
                "\nDRY RUN: Would adopt these packages for systems: "
                f"{', '.join(systems)}"
            )
            return result

        self.report(f"\nAdopting packages for systems: {', '.join(systems)}")

        for name in result.candidates:
            try:
                self.adopt_one(name, systems)
            except (DeployError, OSError) as e:
                result.failures[name] = e
                self.report(f"✗ Failed to adopt {name}: {e}")
            else:
                result.adopted.append(name)
                self.report(f"✓ Adopted {name}")

        # One write for the whole run
        self.config.save()

        self.report(
            f"\nSuccessfully adopted {len(result.adopted)}/"
            f"{len(result.candidates)} packages"
        )
        return result
