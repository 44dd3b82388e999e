"""Exception types raised by dotctl."""

from typing import Sequence


class DotctlError(Exception):
    """Base class for all dotctl errors."""


class PackageNotFoundError(DotctlError):
    """A package directory does not exist under the dotfiles root."""

    def __init__(self, package: str, path):
        self.package = package
        self.path = path
        super().__init__(f"package '{package}' not found at {path}")


class DeployError(DotctlError):
    """A filesystem state prevents a deploy or undeploy from proceeding."""


class ConfigurationError(DotctlError):
    """A command needs configuration that is missing."""


class ConfigParseError(DotctlError):
    """The configuration file could not be parsed.

    Never fatal: the store logs it and falls back to defaults.
    """


class ToolUnavailableError(DotctlError):
    """A required external program is not installed or not usable."""


class ExternalToolError(DotctlError):
    """An external program exited with a non-zero status."""

    def __init__(self, command: Sequence[str], returncode: int, output: str = ""):
        self.command = list(command)
        self.returncode = returncode
        self.output = output.strip()
        message = f"{' '.join(self.command)} failed (exit {returncode})"
        if self.output:
            message += f"\nOutput: {self.output}"
        super().__init__(message)


class GitCommandError(ExternalToolError):
    """A git command failed."""


class MergeConflictError(DotctlError):
    """Restoring stashed changes left conflicts that need manual resolution."""
