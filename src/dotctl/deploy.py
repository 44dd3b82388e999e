"""Linking packages from the dotfiles root into the home directory."""

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .config import Config
from .errors import DeployError, DotctlError, PackageNotFoundError
from .packages import SHELL_PACKAGE, TEMP_SUFFIX, is_config_package
from .templates import expand_file, expand_tree, is_template, output_path_for

logger = logging.getLogger(__name__)

Reporter = Callable[[str], None]


class TargetKind(Enum):
    CONFIG = "config"  # ~/.config/<name>
    HOME = "home"  # ~/<name>
    SHELL = "shell"  # each file linked straight into ~


@dataclass
class PackageTarget:
    kind: TargetKind
    # For SHELL packages this is the home directory itself
    link_path: Path


@dataclass
class DeployResult:
    package: str
    dry_run: bool = False
    links: List[Tuple[Path, Path]] = field(default_factory=list)
    templates: List[Tuple[Path, Path]] = field(default_factory=list)


@dataclass
class UndeployResult:
    package: str
    dry_run: bool = False
    removed: List[Path] = field(default_factory=list)
    already_absent: bool = False


@dataclass
class BatchResult:
    packages: List[str]
    succeeded: List[str] = field(default_factory=list)
    failures: Dict[str, Exception] = field(default_factory=dict)

    @property
    def attempted(self) -> int:
        return len(self.packages)

    @property
    def ok(self) -> bool:
        return not self.failures


def _remove_existing(path: Path):
    """Clear a file or symlink out of the way of a new link."""
    if path.is_symlink() or path.is_file():
        path.unlink()
    elif path.exists():
        raise DeployError(
            f"{path} already exists and is a directory; "
            "move it away or adopt it first"
        )


def _relative_symlink(link: Path, source: Path) -> str:
    """Create ``link`` pointing at ``source`` by a path relative to it."""
    relative = os.path.relpath(source, link.parent)
    os.symlink(relative, link)
    return relative


class Deployer:
    """Deploys and undeploys packages for one system.

    Progress lines go to ``reporter`` (``logger.info`` when not given).
    """

    def __init__(
        self,
        dotfiles_dir: Path,
        config: Config,
        system: str,
        home: Path,
        reporter: Optional[Reporter] = None,
    ):
        self.dotfiles_dir = Path(dotfiles_dir)
        self.config = config
        self.system = system
        self.home = Path(home)
        self.report = reporter or logger.info

    def source_dir(self, name: str) -> Path:
        return self.dotfiles_dir / name

    def target_for(self, name: str) -> PackageTarget:
        entry = self.config.get_package(name)
        if entry is not None and entry.home:
            return PackageTarget(TargetKind.HOME, self.home / name)
        if is_config_package(name):
            return PackageTarget(
                TargetKind.CONFIG, self.home / ".config" / name
            )
        if name == SHELL_PACKAGE:
            return PackageTarget(TargetKind.SHELL, self.home)
        return PackageTarget(TargetKind.HOME, self.home / name)

    def _expand(self, action):
        try:
            return action()
        except ValueError as e:
            # Bad encodings and unusable template names
            raise DeployError(f"template expansion failed: {e}")

    def deploy(self, name: str, dry_run: bool = False) -> DeployResult:
        source = self.source_dir(name)
        if not source.is_dir():
            raise PackageNotFoundError(name, source)

        target = self.target_for(name)
        if target.kind is TargetKind.SHELL:
            return self._deploy_shell(name, source, dry_run)

        link = target.link_path
        result = DeployResult(name, dry_run=dry_run)

        if dry_run:
            self.report(f"DRY RUN: Would create symlink {link} -> {source}")
            result.links.append((link, source))
            return result

        self.report(f"Deploying {name}...")
        templates = self._expand(lambda: expand_tree(source, self.system))
        link.parent.mkdir(parents=True, exist_ok=True)
        _remove_existing(link)

        for template, output in templates:
            self.report(f"TEMPLATE: {template} -> {output}")
            result.templates.append((template, output))

        relative = _relative_symlink(link, source)
        result.links.append((link, source))
        self.report(f"✓ Successfully deployed {name}")
        self.report(f"LINK: {link} -> {relative}")
        return result

    def _deploy_shell(
        self, name: str, source: Path, dry_run: bool
    ) -> DeployResult:
        result = DeployResult(name, dry_run=dry_run)
        if not dry_run:
            self.report(f"Deploying {name}...")

        for entry in sorted(source.iterdir()):
            if entry.is_dir():
                continue

            if is_template(entry):
                target = self.home / output_path_for(entry).name
                if dry_run:
                    self.report(
                        f"DRY RUN: Would process template {entry} -> {target}"
                    )
                else:
                    # Expanded to a temp name so a failure leaves the old file
                    staged = target.with_name(target.name + TEMP_SUFFIX)
                    self._expand(
                        lambda: expand_file(entry, self.system, staged)
                    )
                    try:
                        _remove_existing(target)
                        os.replace(staged, target)
                    finally:
                        if staged.exists():
                            staged.unlink()
                    self.report(f"TEMPLATE: {entry} -> {target}")
                result.templates.append((entry, target))
            else:
                target = self.home / entry.name
                if dry_run:
                    self.report(
                        f"DRY RUN: Would create symlink {target} -> {entry}"
                    )
                else:
                    _remove_existing(target)
                    relative = _relative_symlink(target, entry)
                    self.report(f"LINK: {target} -> {relative}")
                result.links.append((target, entry))

        if not dry_run:
            self.report(f"✓ Successfully deployed {name}")
        return result

    def undeploy(self, name: str, dry_run: bool = False) -> UndeployResult:
        target = self.target_for(name)
        if target.kind is TargetKind.SHELL:
            return self._undeploy_shell(name, self.source_dir(name), dry_run)

        link = target.link_path
        result = UndeployResult(name, dry_run=dry_run)

        if dry_run:
            self.report(f"DRY RUN: Would remove symlink {link}")
            return result

        self.report(f"Undeploying {name}...")

        if not os.path.lexists(link):
            self.report(f"✓ {name} is not deployed")
            result.already_absent = True
            return result

        if not link.is_symlink():
            raise DeployError(f"{link} is not a symlink; leaving it in place")

        link.unlink()
        result.removed.append(link)
        self.report(f"✓ Successfully undeployed {name}")
        return result

    def _undeploy_shell(
        self, name: str, source: Path, dry_run: bool
    ) -> UndeployResult:
        if not source.is_dir():
            raise PackageNotFoundError(name, source)

        result = UndeployResult(name, dry_run=dry_run)
        if not dry_run:
            self.report(f"Undeploying {name}...")

        for entry in sorted(source.iterdir()):
            if entry.is_dir():
                continue

            generated = is_template(entry)
            if generated:
                target = self.home / output_path_for(entry).name
            else:
                target = self.home / entry.name

            if dry_run:
                self.report(f"DRY RUN: Would remove symlink {target}")
                continue

            if not os.path.lexists(target):
                continue

            # Expanded templates are regular files we wrote ourselves
            if target.is_symlink() or (generated and target.is_file()):
                target.unlink()
                result.removed.append(target)
                self.report(f"UNLINK: {target}")
            else:
                logger.warning(f"{target} is not a symlink; leaving it in place")

        if not dry_run and not result.removed:
            self.report(f"✓ {name} is not deployed")
            result.already_absent = True
        return result

    def _run_batch(
        self,
        action: Callable[[str, bool], object],
        names: Optional[Sequence[str]],
        dry_run: bool,
    ) -> BatchResult:
        packages = list(names) if names else self.config.packages_for_system(
            self.system
        )
        batch = BatchResult(packages=packages)

        for name in packages:
            try:
                action(name, dry_run)
            except (DotctlError, OSError) as e:
                batch.failures[name] = e
                self.report(f"✗ {e}")
            else:
                batch.succeeded.append(name)

        return batch

    def deploy_all(
        self, names: Optional[Sequence[str]] = None, dry_run: bool = False
    ) -> BatchResult:
        """Deploy the named packages, or everything eligible for this system.

        Failures are recorded and do not stop the rest of the batch.
        """
        return self._run_batch(self.deploy, names, dry_run)

    def undeploy_all(
        self, names: Optional[Sequence[str]] = None, dry_run: bool = False
    ) -> BatchResult:
        return self._run_batch(self.undeploy, names, dry_run)
