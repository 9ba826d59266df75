"""Rich terminal display for pkgscout."""

from collections import Counter

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from pkgscout.config import UserConfig
from pkgscout.models import ManagerAvailability, PackageManagerStatus, PackageRecord, UninstallResult

console = Console()


def status_icon(status: ManagerAvailability) -> str:
    """Get icon for a manager status."""
    icons = {
        ManagerAvailability.AVAILABLE: "[green]✓[/green]",
        ManagerAvailability.PATH_MISSING: "[yellow]![/yellow]",
        ManagerAvailability.NOT_INSTALLED: "[dim]✗[/dim]",
    }
    return icons.get(status, "?")


def status_label(status: ManagerAvailability) -> str:
    """Get styled label for a manager status."""
    labels = {
        ManagerAvailability.AVAILABLE: "[green]Available[/green]",
        ManagerAvailability.PATH_MISSING: "[yellow]Not on PATH[/yellow]",
        ManagerAvailability.NOT_INSTALLED: "[dim]Not installed[/dim]",
    }
    return labels.get(status, "Unknown")


def show_statuses(statuses: list[PackageManagerStatus]) -> None:
    """Display the discovery table."""
    table = Table(title="Package Managers", show_header=True, header_style="bold")
    table.add_column("", width=3)
    table.add_column("Manager")
    table.add_column("Status")
    table.add_column("Found via")
    table.add_column("Path")

    for status in statuses:
        table.add_row(
            status_icon(status.status),
            status.manager.value,
            status_label(status.status),
            status.discovery_method.value if status.discovery_method else "-",
            escape(status.found_path or "-"),
        )

    console.print(table)

    hints = [s for s in statuses if s.message and s.status != ManagerAvailability.AVAILABLE]
    for status in hints:
        console.print(f"[dim]{status.manager.value}: {escape(status.message)}[/dim]")


def show_manager_status(status: PackageManagerStatus) -> None:
    """Display one manager's status panel."""
    color = {
        ManagerAvailability.AVAILABLE: "green",
        ManagerAvailability.PATH_MISSING: "yellow",
    }.get(status.status, "red")

    lines = [
        f"[bold]{status.manager.value}[/bold]",
        f"Status: [{color}]{status.status.value}[/{color}]",
    ]
    if status.discovery_method:
        lines.append(f"Found via: {status.discovery_method.value}")
    if status.found_path:
        lines.append(f"Path: {escape(status.found_path)}")
    lines.append(f"On PATH: {'yes' if status.in_path else 'no'}")
    if status.message:
        lines.append(f"\n{escape(status.message)}")

    console.print(Panel("\n".join(lines), border_style=color))


def show_packages(records: list[PackageRecord]) -> None:
    """Display installed packages grouped by manager."""
    if not records:
        console.print("[yellow]No packages found.[/yellow]")
        return

    table = Table(title="Installed Packages", show_header=True, header_style="bold")
    table.add_column("Manager", style="cyan")
    table.add_column("Name")
    table.add_column("Version")
    table.add_column("Kind")
    table.add_column("Channel / Env")

    for record in records:
        extra = " / ".join(v for v in (record.channel, record.environment) if v)
        table.add_row(
            record.manager.value,
            escape(record.name),
            escape(record.version),
            record.location.value,
            escape(extra),
        )

    console.print(table)

    counts = Counter(r.manager.value for r in records)
    summary = ", ".join(f"{manager}: {count}" for manager, count in counts.items())
    console.print(f"[bold]{len(records)} packages[/bold] [dim]({summary})[/dim]")


def show_failures(failures: dict[str, str]) -> None:
    """List managers whose listing failed."""
    if not failures:
        return
    console.print()
    console.print("[bold red]Some managers could not be listed:[/bold red]")
    for manager, error in failures.items():
        console.print(f"  [red]✗[/red] {manager}: {escape(error)}")


def show_uninstall_result(result: UninstallResult) -> None:
    """Display the result of an uninstall."""
    if result.success:
        console.print(f"  [green]✓[/green] {escape(result.name)} removed via {result.manager.value}")
    else:
        console.print(f"  [red]✗[/red] {escape(result.name)}: {escape(result.error or 'uninstall failed')}")


def show_config(path: str, config: UserConfig) -> None:
    """Display the effective configuration."""
    console.print(f"[bold]Config file:[/bold] {escape(path)}")
    console.print(f"Timeout: {config.timeout} ms" if config.timeout else "Timeout: default")

    if config.disabled:
        disabled = ", ".join(sorted(m.value for m in config.disabled))
        console.print(f"Disabled: {disabled}")
    else:
        console.print("Disabled: none")

    if config.custom_paths:
        console.print("\n[bold]Custom paths:[/bold]")
        for manager, paths in config.custom_paths.items():
            for path_str in paths:
                console.print(f"  • {manager.value}: {escape(path_str)}")


def show_listing_progress() -> Progress:
    """Create progress bar for listing packages."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("{task.completed}/{task.total}"),
        TimeElapsedColumn(),
        console=console,
    )


def confirm_action(message: str) -> bool:
    """Ask for confirmation."""
    from rich.prompt import Confirm

    return Confirm.ask(message)
