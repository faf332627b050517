"""Command-line interface using Typer."""

from decimal import Decimal, InvalidOperation
from typing import Optional
from uuid import UUID

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from frameup import __version__
from frameup.logging import setup_logging

# Setup logging
setup_logging()

app = typer.Typer(
    name="frameup",
    help="FrameUp - Batch video delivery and approval CLI",
    add_completion=False,
)

# Subcommand groups
projects_app = typer.Typer(help="Project (order) commands")
pricing_app = typer.Typer(help="Pricing commands")
app.add_typer(projects_app, name="projects")
app.add_typer(pricing_app, name="pricing")

console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"FrameUp v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """FrameUp - Deliver, review and approve batches of edited videos."""
    pass


def _parse_uuid(value: str, what: str) -> UUID:
    try:
        return UUID(value)
    except ValueError:
        console.print(f"[bold red]Invalid {what} ID: {value}[/bold red]")
        raise typer.Exit(code=1)


@app.command()
def health() -> None:
    """Check the health of all services."""
    import httpx

    from frameup.config import settings

    url = f"http://{settings.api_host}:{settings.api_port}/health/ready"

    try:
        response = httpx.get(url, timeout=10)
        data = response.json()

        table = Table(title="Service Health")
        table.add_column("Component", style="cyan")
        table.add_column("Status")

        table.add_row("Database", "✓" if data.get("database") else "✗")
        table.add_row("Redis", "✓" if data.get("redis") else "✗")

        for component, healthy in (data.get("components") or {}).items():
            table.add_row(component, "✓" if healthy else "✗")

        console.print(table)

        if data.get("ready"):
            console.print("[bold green]All services healthy![/bold green]")
        else:
            console.print("[bold yellow]Some services unhealthy[/bold yellow]")
            raise typer.Exit(code=1)

    except httpx.RequestError as e:
        console.print(f"[bold red]Cannot connect to API: {e}[/bold red]")
        console.print("[dim]Is the API server running?[/dim]")
        raise typer.Exit(code=1)


@app.command()
def worker() -> None:
    """Start a Celery worker (for development)."""
    console.print("[bold blue]Starting Celery worker...[/bold blue]")

    import subprocess
    import sys

    subprocess.run(
        [sys.executable, "-m", "celery", "-A", "frameup.worker", "worker", "--beat", "--loglevel=info"],
        check=True,
    )


# =============================================================================
# PROJECTS COMMANDS
# =============================================================================


@projects_app.command("show")
def projects_show(
    project_id: str = typer.Argument(..., help="Project ID (UUID)"),
    by_status: bool = typer.Option(
        False, "--by-status", help="List videos by workflow progress instead of sequence"
    ),
) -> None:
    """Show a project with its batch progress."""
    from frameup.db.session import get_session_context
    from frameup.domain.errors import NotFoundError
    from frameup.domain.status_config import get_project_status_badge, get_video_status_config
    from frameup.services.projects import get_batch_overview

    project_uuid = _parse_uuid(project_id, "project")

    with get_session_context() as session:
        try:
            overview = get_batch_overview(session, project_uuid)
        except NotFoundError:
            console.print(f"[bold red]Project not found: {project_id}[/bold red]")
            raise typer.Exit(code=1)

    stats = overview.stats
    badge = get_project_status_badge(overview.resolved_status)
    drift = "" if overview.in_sync else f" [yellow](stored: {overview.stored_status})[/yellow]"

    console.print(Panel.fit(
        f"[bold]{overview.title}[/bold]\n\n"
        f"[cyan]ID:[/cyan] {overview.project_id}\n"
        f"[cyan]Status:[/cyan] {badge.label}{drift}\n"
        f"[cyan]Delivery Mode:[/cyan] {overview.delivery_mode}\n"
        f"[cyan]Progress:[/cyan] {stats.approved}/{stats.total} approved ({stats.percent_complete}%)\n"
        f"[cyan]Earnings per Video:[/cyan] {overview.editor_earnings_per_video}\n"
        f"[cyan]Earnings Released:[/cyan] {overview.editor_earnings_released}",
        title="Project Details",
        border_style="blue",
    ))

    table = Table(title="Videos")
    table.add_column("#", style="dim")
    table.add_column("Title", style="cyan")
    table.add_column("Status")
    table.add_column("Revisions")
    table.add_column("Unlocked")

    editable = set(overview.editable_indices)
    rows = list(enumerate(overview.videos))
    if by_status:
        rows.sort(key=lambda row: (row[1].status.rank, row[1].sequence_order))

    for index, video in rows:
        display = get_video_status_config(video.status)
        table.add_row(
            str(video.sequence_order),
            video.title or "-",
            f"{display.icon} {display.label}",
            str(video.revision_count),
            "Yes" if index in editable else "No",
        )

    console.print(table)


@projects_app.command("reconcile")
def projects_reconcile(
    project_id: Optional[str] = typer.Argument(None, help="Project ID (all projects if omitted)"),
) -> None:
    """Repair stored project statuses that drifted from their videos."""
    from frameup.db.session import get_session_context
    from frameup.domain.errors import NotFoundError
    from frameup.services.projects import (
        reconcile_all_project_statuses,
        reconcile_project_status,
    )

    with get_session_context() as session:
        if project_id:
            project_uuid = _parse_uuid(project_id, "project")
            try:
                change = reconcile_project_status(session, project_uuid)
            except NotFoundError:
                console.print(f"[bold red]Project not found: {project_id}[/bold red]")
                raise typer.Exit(code=1)
            changes = [change] if change else []
        else:
            changes = reconcile_all_project_statuses(session)

    if not changes:
        console.print("[green]All project statuses are in sync.[/green]")
        return

    table = Table(title="Repaired Statuses")
    table.add_column("Project", style="dim")
    table.add_column("Previous", style="yellow")
    table.add_column("Current", style="green")
    for change in changes:
        table.add_row(str(change.project_id), str(change.previous), str(change.current))

    console.print(table)


# =============================================================================
# PRICING COMMANDS
# =============================================================================


@pricing_app.command("quote")
def pricing_quote(
    base_price: str = typer.Option(..., "--base-price", "-p", help="Price of one video"),
    quantity: int = typer.Option(1, "--quantity", "-q", help="Number of videos"),
    mode: str = typer.Option("sequential", "--mode", "-m", help="sequential or simultaneous"),
    days: int = typer.Option(3, "--days", "-d", help="Delivery days for a single video"),
) -> None:
    """Price an order."""
    from frameup.config import settings
    from frameup.domain.enums import DeliveryMode
    from frameup.domain.pricing import BusinessRules, calculate_price_quote

    try:
        price = Decimal(base_price)
    except InvalidOperation:
        console.print(f"[bold red]Invalid price: {base_price}[/bold red]")
        raise typer.Exit(code=1)

    try:
        delivery_mode = DeliveryMode(mode.lower())
    except ValueError:
        console.print(f"[bold red]Unknown delivery mode: {mode}[/bold red]")
        console.print("[dim]Available modes: sequential, simultaneous[/dim]")
        raise typer.Exit(code=1)

    quote = calculate_price_quote(
        base_price=price,
        quantity=quantity,
        delivery_mode=delivery_mode,
        rules=BusinessRules.from_settings(settings),
        estimated_delivery_days=days,
    )

    table = Table(title=f"Quote: {quantity} x {quote.base_price} ({quote.delivery_mode})")
    table.add_column("Item", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Batch discount", f"{quote.discount_percent}%")
    table.add_row("Urgency multiplier", str(quote.urgency_multiplier))
    table.add_row("Price per video", str(quote.price_per_video))
    table.add_row("Subtotal", str(quote.subtotal))
    table.add_row(f"Platform fee ({quote.platform_fee_percent}%)", str(quote.platform_fee))
    table.add_row("[bold]Total[/bold]", f"[bold]{quote.total_paid_by_creator}[/bold]")
    table.add_row("Editor earnings per video", str(quote.editor_earnings_per_video))
    table.add_row("Estimated delivery (days)", str(quote.estimated_delivery_days))

    console.print(table)


if __name__ == "__main__":
    app()
