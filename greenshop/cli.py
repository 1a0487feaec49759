# greenshop/cli.py
import click

from .services.checkout import reconcile_pending


@click.command("reconcile-checkouts")
@click.option("--limit", default=100, show_default=True, help="Maximum runs to process.")
def reconcile_checkouts(limit):
    """Finish checkouts whose order was placed but not fully finalized."""
    completed, pending = reconcile_pending(limit=limit)
    click.echo(f"Completed: {completed}, still pending: {pending}")


def register_cli(app):
    app.cli.add_command(reconcile_checkouts)
