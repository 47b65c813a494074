"""Calendar event commands."""

import click

from sparkreceipt.cli.client_resolution import resolve_client_or_exit
from sparkreceipt.cli.date_filters import parse_date_or_exit, resolve_cli_date_range
from sparkreceipt.cli.error_handling import handle_domain_error
from sparkreceipt.domain.calendar import upcoming_events
from sparkreceipt.domain.client import ClientService
from sparkreceipt.domain.event import EVENT_TYPES, EventService


def _print_events(events, client_names) -> None:
    click.echo("-" * 95)
    click.echo(f"{'ID':<6} {'Date':<12} {'Time':<16} {'Title':<30} {'Type':<10} {'Client':<18}")
    click.echo("-" * 95)
    for e in events:
        time = e.start_time or ""
        if e.start_time and e.end_time:
            time = f"{e.start_time}-{e.end_time}"
        click.echo(
            f"{e.id:<6} {str(e.event_date):<12} {time[:16]:<16} {e.title[:30]:<30} "
            f"{e.event_type[:10]:<10} {client_names.get(e.client_id, '')[:18]:<18}"
        )


def _event_options(func):
    options = [
        click.option("--description", help="Description"),
        click.option("--start-time", help="Start time (e.g. 14:00)"),
        click.option("--end-time", help="End time (e.g. 22:00)"),
        click.option("--type", "event_type", type=click.Choice(EVENT_TYPES), help="Event type"),
        click.option("--client", help="Client name or ID"),
        click.option("--location", help="Location"),
        click.option("--color", help="Display color (e.g. #8B5CF6)"),
        click.option("--payment-due/--no-payment-due", default=None, help="Mark as a payment due date"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
def event_group():
    """Manage calendar events."""
    pass


@event_group.command("add")
@click.argument("title")
@click.argument("event_date")
@_event_options
@click.pass_context
def add_event(ctx, title, event_date, description, start_time, end_time, event_type, client, location, color, payment_due):
    """Add a calendar event.

    Examples:
        sparkreceipt event add "Doe wedding" 2025-06-14 --type Wedding --start-time 16:00
        sparkreceipt event add "Venue walkthrough" "next friday" --client "Jane Doe"
    """
    db = ctx.obj["db"]
    day = parse_date_or_exit(ctx, event_date, "event date")
    client_id = resolve_client_or_exit(ctx, ClientService(db), client)
    try:
        event_id = EventService(db).create_event(
            title=title,
            event_date=day,
            description=description,
            start_time=start_time,
            end_time=end_time,
            event_type=event_type or "Event",
            client_id=client_id,
            location=location,
            color=color,
            is_payment_due=bool(payment_due),
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Added event '{title}' on {day} (ID: {event_id})")


@event_group.command("list")
@click.option("--start-date", help="Earliest date")
@click.option("--end-date", help="Latest date")
@click.pass_context
def list_events(ctx, start_date, end_date):
    """List events in date order."""
    db = ctx.obj["db"]
    start, end = resolve_cli_date_range(ctx, start_date=start_date, end_date=end_date, period=None)
    events = EventService(db).list_events(start_date=start, end_date=end)
    if not events:
        click.echo("No events found.")
        return
    names = {c.id: c.name for c in ClientService(db).list_clients()}
    click.echo(f"\nFound {len(events)} event(s):")
    _print_events(events, names)


@event_group.command("upcoming")
@click.option("--limit", type=int, default=10, help="Maximum number of events (default: 10)")
@click.pass_context
def list_upcoming(ctx, limit: int):
    """List events from today onward."""
    db = ctx.obj["db"]
    events = upcoming_events(EventService(db).list_events(), limit=limit)
    if not events:
        click.echo("No upcoming events.")
        return
    names = {c.id: c.name for c in ClientService(db).list_clients()}
    _print_events(events, names)


@event_group.command("update")
@click.argument("event_id")
@click.option("--title", help="Title")
@click.option("--date", "event_date", help="Event date")
@_event_options
@click.pass_context
def update_event(ctx, event_id, title, event_date, description, start_time, end_time, event_type, client, location, color, payment_due):
    """Update an event. Invoice due dates shown on the calendar are read-only."""
    db = ctx.obj["db"]
    fields = {
        key: value
        for key, value in (
            ("title", title),
            ("description", description),
            ("start_time", start_time),
            ("end_time", end_time),
            ("event_type", event_type),
            ("location", location),
            ("color", color),
            ("is_payment_due", payment_due),
        )
        if value is not None
    }
    if event_date is not None:
        fields["event_date"] = parse_date_or_exit(ctx, event_date, "event date")
    if client is not None:
        fields["client_id"] = resolve_client_or_exit(ctx, ClientService(db), client)

    try:
        EventService(db).update_event(event_id, **fields)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated event {event_id}")


@event_group.command("delete")
@click.argument("event_id")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_event(ctx, event_id: str, yes: bool):
    """Delete an event. Invoice due dates cannot be deleted here."""
    service = EventService(ctx.obj["db"])
    try:
        event = service.get_event(event_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    if event is None:
        click.echo(f"Error: Event {event_id} not found", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(f"Are you sure you want to delete '{event.title}'?"):
        click.echo("Deletion cancelled.")
        return

    service.delete_event(event.id)
    click.echo(f"Deleted event '{event.title}'")


def register_commands(cli):
    """Register event commands with main CLI."""
    cli.add_command(event_group, name="event")
