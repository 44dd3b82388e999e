"""dotctl - System-aware dotfiles manager."""

from .adopt import Adopter
from .cli import main
from .config import Config
from .deploy import Deployer
from .system import Environment, detect_system
from .utils import get_version

__all__ = [
    "Adopter",
    "Config",
    "Deployer",
    "Environment",
    "detect_system",
    "get_version",
    "main",
]
