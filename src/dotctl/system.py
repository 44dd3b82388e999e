import getpass
import logging
import platform
from enum import Enum
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

OS_RELEASE = Path("/etc/os-release")

# Checked in order; the first substring found in os-release wins.
LINUX_DISTROS = ["arch", "ubuntu", "debian", "fedora"]

ALL_SYSTEMS = "all"

KNOWN_SYSTEMS = [
    "all",
    "linux",
    "macos",
    "arch",
    "ubuntu",
    "debian",
    "fedora",
    "windows",
]

# Tags that can be stored as a bare string in the config.
SIMPLE_SYSTEMS = [s for s in KNOWN_SYSTEMS if s != "windows"]


class OS(Enum):
    LINUX = "linux"
    MACOS = "macos"
    UNKNOWN = "unknown"


def _detect_os() -> OS:
    system = platform.system().lower()
    if system == "linux":
        return OS.LINUX
    elif system == "darwin":
        return OS.MACOS
    return OS.UNKNOWN


def detect_linux_distro(os_release: Path = OS_RELEASE) -> str:
    """Sniff the distribution tag out of an os-release file."""
    try:
        content = os_release.read_text().lower()
    except OSError as e:
        logger.debug(f"Could not read {os_release}: {e}")
        return "linux"

    for distro in LINUX_DISTROS:
        if distro in content:
            return distro
    return "linux"


def detect_system(os_release: Path = OS_RELEASE) -> str:
    """Return the system tag for the running machine.

    "macos" on Darwin, a distribution tag (or "linux") on Linux, and the
    raw platform name anywhere else.
    """
    system = platform.system().lower()
    if system == "darwin":
        return "macos"
    if system == "linux":
        return detect_linux_distro(os_release)
    return system


def is_known_system(name: str) -> bool:
    return name in KNOWN_SYSTEMS


def is_simple_system(name: str) -> bool:
    return name in SIMPLE_SYSTEMS


def template_condition_matches(condition: str, system: str) -> bool:
    """Check a template block condition against the current system.

    Unlike package eligibility, "linux" here matches every Linux
    distribution tag as well as the generic "linux".
    """
    if condition == "linux":
        return system == "linux" or system in LINUX_DISTROS
    return condition == system


class Environment:
    """Detects and provides info about the current system environment."""

    def __init__(self, home: Optional[Path] = None):
        self.os = _detect_os()
        self.system = detect_system()
        self.home = home or Path.home()
        self.user = self._detect_user()
        self.os_info = self._get_os_info()

    def _detect_user(self) -> str:
        try:
            return getpass.getuser()
        except (KeyError, OSError):
            return self.home.name

    def _get_os_info(self) -> dict:
        info = {
            "system": platform.system(),
            "release": platform.release(),
            "machine": platform.machine(),
            "pretty_name": platform.system(),
        }

        if self.is_linux():
            data = {}
            try:
                with open(OS_RELEASE) as f:
                    for line in f:
                        if "=" in line:
                            k, v = line.rstrip().split("=", 1)
                            data[k] = v.strip('"')
            except OSError as e:
                logger.debug(f"Could not read {OS_RELEASE}: {e}")
            info["pretty_name"] = data.get("PRETTY_NAME", "Linux")
        elif self.is_macos():
            info["pretty_name"] = f"macOS {platform.mac_ver()[0]}"

        return info

    def is_linux(self) -> bool:
        return self.os == OS.LINUX

    def is_macos(self) -> bool:
        return self.os == OS.MACOS

    @property
    def config_home(self) -> Path:
        return self.home / ".config"

    def __repr__(self) -> str:
        return (
            f"Environment(os={self.os.value}, system={self.system}, "
            f"home={self.home}, user={self.user})"
        )
