import click
from flask import current_app

from seatwatch.dispatch.services import get_seatwatch
from seatwatch.errors import InvalidEmailError
from seatwatch.extensions import db
from seatwatch.notifications.services import request_notification
from seatwatch.sensors.models import SeatState


def register_commands(app):

    @app.cli.command('init-db')
    def init_db() -> None:
        """Create the database tables."""
        db.create_all()
        click.echo('Database initialized.')

    @app.cli.command('record-snapshot')
    @click.argument('states', nargs=-1, required=True,
                    type=click.Choice(SeatState.values(), case_sensitive=False))
    def record_snapshot(states) -> None:
        """Store a seat snapshot, e.g. `record-snapshot Occupied Empty Occupied Occupied`."""
        lookup = {value.lower(): value for value in SeatState.values()}
        seats = [lookup[s.lower()] for s in states]
        seat_count = current_app.config.get('SEAT_COUNT')
        if seat_count is not None and len(seats) != seat_count:
            raise click.BadParameter(f'expected {seat_count} seats, got {len(seats)}', param_hint='STATES')
        snapshot = get_seatwatch().snapshots.record(seats)
        click.echo(f"Recorded snapshot: {', '.join(snapshot.seats)}")

    @app.cli.command('enqueue')
    @click.argument('email')
    def enqueue(email: str) -> None:
        """Queue EMAIL for the next open seat."""
        try:
            pending = request_notification(email)
        except InvalidEmailError as e:
            raise click.BadParameter(str(e), param_hint='EMAIL')
        click.echo(f"Queued {pending.recipient_email}")

    @app.cli.command('dispatch')
    @click.option('--source', default='cli', help='Label recorded in the dispatch log')
    def dispatch(source: str) -> None:
        """Run one dispatch cycle and print the outcome."""
        outcome = get_seatwatch().dispatcher.on_trigger(source)
        line = f"status={outcome.status.value}"
        if outcome.email:
            line += f" email={outcome.email} delivered={outcome.delivered}"
        if outcome.error:
            line += f" error={outcome.error}"
        click.echo(line)
