"""CLI interface for pkgscout."""

from typing import NoReturn, Optional

import typer
from rich.markup import escape

from pkgscout import __version__
from pkgscout.config import config_path, load_user_config
from pkgscout.discovery import PackageDiscovery
from pkgscout.display import (
    confirm_action,
    console,
    show_config,
    show_failures,
    show_listing_progress,
    show_manager_status,
    show_packages,
    show_statuses,
    show_uninstall_result,
)
from pkgscout.errors import PkgScoutError
from pkgscout.logging_config import setup_logging
from pkgscout.models import ListingProgress, ManagerId, PackageLocation, ProgressStage

# Create Typer app
app = typer.Typer(
    name="pkgscout",
    help="Find package managers anywhere on this machine and list what they installed",
    add_completion=False,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"pkgscout version {__version__}")
        raise typer.Exit()


def build_discovery(config_file: Optional[str] = None) -> PackageDiscovery:
    """Create the session's discovery facade."""
    return PackageDiscovery(config=load_user_config(config_file))


def _discovery(ctx: typer.Context) -> PackageDiscovery:
    obj = ctx.ensure_object(dict)
    if "discovery" not in obj:
        obj["discovery"] = build_discovery(obj.get("config_file"))
    return obj["discovery"]


def _fail(error: Exception) -> NoReturn:
    console.print(f"[red]Error: {escape(str(error))}[/red]")
    raise typer.Exit(1)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Show debug logging."),
    config_file: Optional[str] = typer.Option(
        None, "--config", "-c", help="Config file to use instead of ~/.pkgscout/config.json"
    ),
) -> None:
    """pkgscout - find package managers and their packages."""
    setup_logging("DEBUG" if verbose else None)
    ctx.ensure_object(dict)["config_file"] = config_file

    # No command means discovery
    if ctx.invoked_subcommand is None:
        ctx.invoke(discover, ctx=ctx)


@app.command()
def discover(ctx: typer.Context) -> None:
    """Show which package managers are installed and where."""
    statuses = _discovery(ctx).discover_available_managers()
    show_statuses(statuses)


@app.command(name="list")
def list_packages(
    ctx: typer.Context,
    manager: Optional[str] = typer.Option(None, "--manager", "-m", help="Only list this manager"),
) -> None:
    """List installed packages."""
    discovery = _discovery(ctx)

    if manager:
        try:
            records = discovery.list_packages(manager)
        except PkgScoutError as e:
            _fail(e)
        show_packages(records)
        return

    failures: dict[str, str] = {}
    with show_listing_progress() as progress:
        task = progress.add_task("Discovering managers...", total=None)

        def update_progress(event: ListingProgress):
            if event.stage == ProgressStage.STARTING:
                progress.update(task, total=event.total, description="Listing packages...")
                return
            if event.stage == ProgressStage.FAILED:
                failures[event.manager.value] = event.error or "listing failed"
            progress.update(task, completed=event.completed, description=f"Listed {event.manager.value}")

        records = discovery.list_all_packages(on_progress=update_progress)

    console.print()
    show_packages(records)
    show_failures(failures)


@app.command()
def uninstall(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Package to remove (a Python version for pyenv)"),
    manager: str = typer.Option(..., "--manager", "-m", help="Manager that owns the package"),
    cask: bool = typer.Option(False, "--cask", help="Treat a Homebrew package as a cask"),
    yes: bool = typer.Option(False, "-y", "--yes", help="Skip confirmation prompt"),
) -> None:
    """Uninstall a package through its manager."""
    if not yes:
        if not confirm_action(f"Uninstall {name} with {manager}?"):
            console.print("[yellow]Cancelled[/yellow]")
            raise typer.Exit(0)

    location = PackageLocation.CASK if cask else None
    try:
        result = _discovery(ctx).uninstall_package(name, manager, location=location)
    except (PkgScoutError, ValueError) as e:
        _fail(e)

    show_uninstall_result(result)
    if not result.success:
        raise typer.Exit(1)


@app.command()
def status(
    ctx: typer.Context,
    manager: str = typer.Argument(..., help="Manager id (e.g. brew, conda, pyenv)"),
) -> None:
    """Show one manager's status."""
    try:
        manager_status = _discovery(ctx).get_manager_status(manager)
    except PkgScoutError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        console.print("\nKnown managers:")
        for manager_id in ManagerId:
            console.print(f"  • {manager_id.value}")
        raise typer.Exit(1)

    show_manager_status(manager_status)


@app.command()
def config(ctx: typer.Context) -> None:
    """Show the configuration file and its effective values."""
    config_file = ctx.ensure_object(dict).get("config_file")
    show_config(str(config_path(config_file)), load_user_config(config_file))


if __name__ == "__main__":
    app()
