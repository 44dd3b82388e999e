"""Deploy and undeploy commands for dotctl CLI."""

from typing import List, Optional

import typer

from ..deploy import BatchResult
from .helpers import get_state
from .output import error, muted, plain, warning


def register(app: typer.Typer) -> None:
    """Register deploy commands with the app."""
    app.command()(deploy)
    app.command()(undeploy)


def _finish(batch: BatchResult, verb: str, explicit: bool):
    plain(
        f"\n{verb} complete: {len(batch.succeeded)}/{batch.attempted} "
        "packages successful"
    )
    if not batch.failures:
        return

    # A single named package failing is an error; a batch only warns
    if explicit and batch.attempted == 1:
        raise typer.Exit(1)
    warning(f"{len(batch.failures)} package(s) failed: "
            f"{', '.join(batch.failures)}")


def deploy(
    ctx: typer.Context,
    packages: Optional[List[str]] = typer.Argument(
        None, help="Packages to deploy (default: all for current system)"
    ),
):
    """Deploy packages by symlinking them into place.

    Examples:
        dotctl deploy              # Everything for this system
        dotctl deploy vim tmux     # Specific packages
        dotctl --dry-run deploy    # Preview
    """
    state = get_state(ctx)
    config = state.load_config()
    system = state.env.system

    names = list(packages or []) or config.packages_for_system(system)
    if not names:
        error(f"No packages configured for system '{system}'")
        muted("\nTo diagnose this issue, run: dotctl debug")
        muted("Or check your configuration with: dotctl status")
        raise typer.Exit(1)

    plain(f"Deploying packages for {system}: {', '.join(names)}")
    batch = state.deployer(config).deploy_all(names, dry_run=state.dry_run)
    _finish(batch, "Deployment", explicit=bool(packages))


def undeploy(
    ctx: typer.Context,
    packages: Optional[List[str]] = typer.Argument(
        None, help="Packages to undeploy (default: all for current system)"
    ),
):
    """Remove the symlinks created by deploy.

    Packages that are not deployed count as success.
    """
    state = get_state(ctx)
    config = state.load_config()

    names = list(packages or []) or config.packages_for_system(
        state.env.system
    )
    if not names:
        error("No packages to undeploy")
        raise typer.Exit(1)

    plain(f"Undeploying packages: {', '.join(names)}")
    batch = state.deployer(config).undeploy_all(names, dry_run=state.dry_run)
    _finish(batch, "Undeployment", explicit=bool(packages))
