"""Click CLI for huntctl.

Usage:
    python manage.py huntctl [command] [options]
"""

import click
from django.utils import timezone
from rich.console import Console
from rich.table import Table

console = Console()


def short_uuid(uuid_val) -> str:
    """Shorten a UUID to its first 8 characters, or "-" if None."""
    if uuid_val is None:
        return "-"
    return str(uuid_val)[:8]


def format_duration(delta) -> str:
    hours, remainder = divmod(int(delta.total_seconds()), 3600)
    return f"{hours}h {remainder // 60:02d}m"


def format_open_visits_table(visits: list, now=None) -> Table:
    """Format open visits as a Rich table."""
    now = now or timezone.now()
    table = Table(title="Occupied localities")
    table.add_column("Visit", style="dim")
    table.add_column("Locality", style="cyan")
    table.add_column("Member", style="green")
    table.add_column("Since")
    table.add_column("Duration", justify="right")
    table.add_column("Guest")

    for visit in visits:
        since = timezone.localtime(visit.start_date).strftime("%Y-%m-%d %H:%M")
        table.add_row(
            short_uuid(visit.pk),
            visit.locality.name,
            visit.member.display_name,
            since,
            format_duration(now - visit.start_date),
            visit.guest_name if visit.has_guest else "-",
        )

    return table


@click.group()
@click.pass_context
def cli(ctx):
    """Hunting ground operator commands.

    Close stale visits and inspect locality occupancy.
    """
    ctx.ensure_object(dict)


@cli.command(name="close-visits")
@click.option("--dry-run", is_flag=True, help="List the visits that would be closed without closing them")
def close_visits(dry_run):
    """Close visits left open past the daily cutoff."""
    from .models import Visit
    from .services.visits import auto_close_cutoff, close_stale_visits

    if dry_run:
        cutoff = auto_close_cutoff()
        stale = list(
            Visit.objects.open()
            .filter(start_date__lt=cutoff)
            .select_related("member", "locality")
            .order_by("start_date")
        )
        console.print(f"[yellow]Dry run:[/yellow] {len(stale)} visit(s) would be closed at {cutoff:%Y-%m-%d %H:%M}")
        if stale:
            console.print(format_open_visits_table(stale))
        return

    closed = close_stale_visits()
    console.print(f"[green]Closed {len(closed)} visit(s)[/green]")


@cli.command(name="occupancy")
def occupancy():
    """Show which localities are occupied right now."""
    from .selectors import free_localities, open_visits

    visits = open_visits()
    if not visits:
        console.print("[green]All localities are free[/green]")
    else:
        console.print(format_open_visits_table(visits))

    free = free_localities()
    if free:
        console.print(f"[bold]Free:[/bold] {', '.join(locality.name for locality in free)}")
