from __future__ import annotations

import copy
import json
import logging
import os
import stat
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .errors import ConfigParseError
from .system import ALL_SYSTEMS, is_simple_system

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "dotctl.yaml"
LEGACY_CONFIG_FILENAME = "dotctl.json"
CONFIG_FILENAMES = [CONFIG_FILENAME, "dotctl.yml", LEGACY_CONFIG_FILENAME]

DEFAULT_BRANCH = "main"
DEFAULT_EXCLUDES = [".git", ".DS_Store", "*.pyc", "__pycache__"]

CONFIG_HEADER = """\
# dotctl configuration file
# This file defines your dotfiles packages and their target systems

"""


@dataclass(frozen=True)
class SimplePackage:
    """A package stored as a bare system tag, e.g. ``vim: linux``."""

    system: str

    @property
    def systems(self) -> List[str]:
        return [self.system]

    @property
    def description(self) -> str:
        return ""

    @property
    def home(self) -> bool:
        return False

    def is_eligible(self, system: str) -> bool:
        return self.system == ALL_SYSTEMS or self.system == system

    def to_yaml(self) -> Any:
        return self.system


@dataclass
class DetailedPackage:
    """A package stored as a mapping with systems, description and home."""

    systems: List[str] = field(default_factory=list)
    description: str = ""
    home: bool = False

    def is_eligible(self, system: str) -> bool:
        # No systems listed means every system
        if not self.systems:
            return True
        return ALL_SYSTEMS in self.systems or system in self.systems

    def to_yaml(self) -> Any:
        data: Dict[str, Any] = {}
        if self.systems:
            data["systems"] = list(self.systems)
        if self.description:
            data["description"] = self.description
        if self.home:
            data["home"] = True
        return data


@dataclass
class InvalidPackage:
    """A package value that could not be understood.

    Never eligible; the raw value is written back untouched on save.
    """

    raw: Any

    systems: List[str] = field(default_factory=list, init=False)
    description: str = field(default="", init=False)
    home: bool = field(default=False, init=False)

    def is_eligible(self, system: str) -> bool:
        return False

    def to_yaml(self) -> Any:
        return self.raw


PackageEntry = Union[SimplePackage, DetailedPackage, InvalidPackage]


def parse_package_entry(name: str, raw: Any) -> PackageEntry:
    """Turn a raw config value into a package entry."""
    if isinstance(raw, str):
        return SimplePackage(raw)

    if isinstance(raw, dict):
        systems_raw = raw.get("systems")
        if systems_raw is None:
            systems: List[str] = []
        elif isinstance(systems_raw, list):
            systems = [s for s in systems_raw if isinstance(s, str)]
            if systems_raw and not systems:
                logger.warning(
                    f"Package '{name}': 'systems' has no valid system names"
                )
                return InvalidPackage(raw)
        else:
            logger.warning(
                f"Package '{name}': 'systems' must be a list, "
                f"got {type(systems_raw).__name__}"
            )
            return InvalidPackage(raw)

        description = raw.get("description")
        home = raw.get("home")
        return DetailedPackage(
            systems=systems,
            description=description if isinstance(description, str) else "",
            home=home if isinstance(home, bool) else False,
        )

    logger.warning(
        f"Package '{name}': unsupported configuration value {raw!r}"
    )
    return InvalidPackage(raw)


def entry_for_systems(systems: List[str]) -> PackageEntry:
    """Build the entry stored by add and adopt.

    A single well-known tag is stored as a bare string, anything else as a
    systems list.
    """
    if not systems:
        systems = [ALL_SYSTEMS]
    if len(systems) == 1 and is_simple_system(systems[0]):
        return SimplePackage(systems[0])
    return DetailedPackage(systems=list(systems))


def config_path_for(dotfiles_dir: Path) -> Path:
    """Find the config file in a dotfiles directory.

    Returns the first existing config file, or the canonical YAML path if
    none exist yet.
    """
    for filename in CONFIG_FILENAMES:
        path = dotfiles_dir / filename
        if path.exists():
            return path
    return dotfiles_dir / CONFIG_FILENAME


def has_config(dotfiles_dir: Path) -> bool:
    return any((dotfiles_dir / f).exists() for f in CONFIG_FILENAMES)


def _atomic_write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_path: Optional[Path] = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=str(path.parent),
            prefix=path.name + ".",
            suffix=".tmp",
            delete=False,
        ) as tmp:
            temp_path = Path(tmp.name)
            tmp.write(text)
            tmp.flush()
            os.fsync(tmp.fileno())
        # Temp files are created 0600; keep the existing file's mode
        mode = stat.S_IMODE(path.stat().st_mode) if path.exists() else 0o644
        os.chmod(temp_path, mode)
        os.replace(temp_path, path)
    finally:
        if temp_path is not None and temp_path.exists():
            temp_path.unlink()


class Config:
    """The dotctl configuration document.

    Holds the package map, exclusion patterns and the optional GitHub
    descriptor. A missing or broken file yields the defaults; a legacy
    ``dotctl.json`` is rewritten as ``dotctl.yaml`` on load.
    """

    DEFAULT_CONFIG: Dict[str, Any] = {
        "packages": {},
        "global_excludes": DEFAULT_EXCLUDES,
        # No longer used; kept so older files round-trip
        "stow_options": [],
    }

    def __init__(self, config_path: Optional[Path] = None):
        self.data: Dict[str, Any] = copy.deepcopy(self.DEFAULT_CONFIG)
        self.packages: Dict[str, PackageEntry] = {}
        self.path = Path(config_path) if config_path else None
        self._migrated = False

        if self.path and self.path.exists():
            self._load(self.path)

    @classmethod
    def initial(
        cls,
        packages: List[str],
        system: str,
        config_path: Optional[Path] = None,
    ) -> "Config":
        """Document written by ``dotctl init`` for freshly scanned packages."""
        config = cls()
        config.path = Path(config_path) if config_path else None
        config.data["stow_options"] = ["--verbose"]
        config.data["github"] = {
            "repository": "username/dotfiles",
            "branch": DEFAULT_BRANCH,
        }
        for name in packages:
            config.packages[name] = SimplePackage(system)
        return config

    @property
    def migrated(self) -> bool:
        """True if the config was migrated from the JSON format."""
        return self._migrated

    def _parse(self, text: str, path: Path) -> Any:
        if path.suffix == ".json":
            try:
                return json.loads(text)
            except json.JSONDecodeError as e:
                raise ConfigParseError(f"Error parsing JSON config: {e}")
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ConfigParseError(f"Error parsing YAML config: {e}")

    def _load(self, path: Path):
        try:
            text = path.read_text()
        except OSError as e:
            logger.warning(f"Could not read config file {path}: {e}")
            return

        try:
            user_config = self._parse(text, path)
        except ConfigParseError as e:
            logger.error(f"{e}")
            logger.debug(f"Config file content: {text}")
            return

        if user_config is None:
            return
        if not isinstance(user_config, dict):
            logger.error(
                f"Config file {path} must contain a mapping, "
                f"got {type(user_config).__name__}"
            )
            return

        self._apply(user_config)

        if path.suffix == ".json":
            self._migrate_json_to_yaml(path)

    def _apply(self, user_config: Dict[str, Any]):
        for key, value in user_config.items():
            if key == "packages":
                continue
            self.data[key] = value

        raw_packages = user_config.get("packages") or {}
        if not isinstance(raw_packages, dict):
            logger.error("'packages' must be a mapping; ignoring it")
            raw_packages = {}
        self.packages = {
            str(name): parse_package_entry(str(name), raw)
            for name, raw in raw_packages.items()
        }

        # Backfill anything the file left empty
        if not self.data.get("global_excludes"):
            self.data["global_excludes"] = list(DEFAULT_EXCLUDES)
        if self.data.get("stow_options") is None:
            self.data["stow_options"] = []

    def _migrate_json_to_yaml(self, json_path: Path):
        yaml_path = json_path.with_suffix(".yaml")
        logger.info("Migrating configuration from JSON to YAML...")

        try:
            self.save(yaml_path)
        except OSError as e:
            logger.warning(f"Failed to migrate JSON config to YAML: {e}")
            return

        try:
            json_path.unlink()
        except OSError as e:
            logger.warning(f"Could not remove old JSON config file: {e}")
        else:
            logger.info(
                f"Migrated config from {json_path.name} to {yaml_path.name}"
            )

        # Reload from the canonical file
        self.data = copy.deepcopy(self.DEFAULT_CONFIG)
        self.packages = {}
        self.path = yaml_path
        self._load(yaml_path)
        self._migrated = True

    def to_dict(self) -> Dict[str, Any]:
        """Serializable form of the whole document."""
        result: Dict[str, Any] = {
            "packages": {
                name: entry.to_yaml() for name, entry in self.packages.items()
            },
            "global_excludes": list(self.global_excludes),
            "stow_options": list(self.data.get("stow_options") or []),
        }
        github = self.data.get("github")
        if github:
            result["github"] = github
        for key, value in self.data.items():
            if key not in result and key != "github":
                result[key] = value
        return result

    def save(self, path: Optional[Path] = None):
        """Write the document as YAML, replacing the file atomically."""
        target = Path(path) if path else self.path
        if target is None:
            raise ValueError("No config path to save to")
        # Always saved as YAML
        if target.suffix == ".json":
            target = target.with_suffix(".yaml")

        content = yaml.safe_dump(
            self.to_dict(), default_flow_style=False, sort_keys=False
        )
        _atomic_write_text(target, CONFIG_HEADER + content)
        self.path = target
        logger.debug(f"Saved configuration to {target}")

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get a config value by dot-separated path."""
        keys = key_path.split(".")
        value: Any = self.data
        try:
            for key in keys:
                value = value[key]
            return value
        except (KeyError, TypeError):
            return default

    @property
    def global_excludes(self) -> List[str]:
        excludes = self.data.get("global_excludes")
        if isinstance(excludes, list):
            return [e for e in excludes if isinstance(e, str)]
        return list(DEFAULT_EXCLUDES)

    def get_package(self, name: str) -> Optional[PackageEntry]:
        return self.packages.get(name)

    def packages_for_system(self, system: str) -> List[str]:
        """Names of every package eligible for a system, sorted."""
        return sorted(
            name
            for name, entry in self.packages.items()
            if entry.is_eligible(system)
        )

    def add_package(self, name: str, systems: List[str]) -> PackageEntry:
        entry = entry_for_systems(systems)
        self.packages[name] = entry
        return entry

    def remove_package(self, name: str) -> bool:
        if name not in self.packages:
            return False
        del self.packages[name]
        return True

    @property
    def github_repository(self) -> Optional[str]:
        repository = self.get("github.repository")
        if isinstance(repository, str) and repository:
            return repository
        return None

    @property
    def github_branch(self) -> str:
        branch = self.get("github.branch")
        if isinstance(branch, str) and branch:
            return branch
        return DEFAULT_BRANCH

    def set_github(self, repository: str, branch: Optional[str] = None):
        self.data["github"] = {
            "repository": repository,
            "branch": branch or DEFAULT_BRANCH,
        }
