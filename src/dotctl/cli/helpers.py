"""Shared state and helper functions for CLI commands."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import typer

from ..config import Config, config_path_for, has_config
from ..deploy import Deployer
from ..system import Environment
from .output import plain

logger = logging.getLogger(__name__)

DEFAULT_DOTFILES_DIRNAME = ".dotfiles"


def resolve_dotfiles_dir(
    override: Optional[str],
    home: Path,
    cwd: Optional[Path] = None,
) -> Path:
    """Work out which dotfiles root to operate on.

    An explicit path wins; then the current directory if it already holds
    a dotctl config; then ``~/.dotfiles``.
    """
    if override:
        path = Path(override).expanduser().absolute()
        logger.debug(f"Using specified dotfiles directory: {path}")
        return path

    cwd = cwd or Path.cwd()
    if has_config(cwd):
        logger.debug(f"Found dotctl config in current directory: {cwd}")
        return cwd.absolute()

    path = home / DEFAULT_DOTFILES_DIRNAME
    logger.debug(f"Using default dotfiles directory: {path}")
    return path


@dataclass
class AppState:
    """Everything a command needs, built once per invocation."""

    dotfiles_dir: Path
    env: Environment
    dry_run: bool = False

    @property
    def config_path(self) -> Path:
        return config_path_for(self.dotfiles_dir)

    def load_config(self) -> Config:
        return Config(self.config_path)

    def deployer(self, config: Config) -> Deployer:
        return Deployer(
            self.dotfiles_dir,
            config,
            self.env.system,
            self.env.home,
            reporter=plain,
        )


def get_state(ctx: typer.Context) -> AppState:
    state = ctx.obj
    if not isinstance(state, AppState):
        # Commands invoked without the main callback (e.g. in tests)
        env = Environment()
        state = AppState(resolve_dotfiles_dir(None, env.home), env)
        ctx.obj = state
    return state
