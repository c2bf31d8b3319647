# scripts/cleanup_reports.py
import click
from flask import current_app
from flask.cli import with_appcontext

from ..models.generated_report_model import GeneratedReport
from ..utils.database_setup import setup_database_indexes
from ..utils.logger import Log


@click.command("cleanup-reports")
@click.option("--days", type=int, default=None, help="Delete snapshots generated more than N days ago.")
@with_appcontext
def cleanup_reports_command(days):
    """Delete old report snapshots, independent of the TTL index."""
    days = days if days is not None else current_app.config.get("REPORT_CLEANUP_DAYS", 90)
    deleted = GeneratedReport.cleanup_old_reports(days)
    Log.info(f"[cleanup_reports.py][cleanup_reports_command] deleted={deleted} days={days}")
    click.echo(f"Deleted {deleted} report snapshots older than {days} days")


@click.command("create-indexes")
@with_appcontext
def create_indexes_command():
    """Create (or re-create) the report indexes, TTL index included."""
    ok = setup_database_indexes(force=True)
    click.echo("Indexes created" if ok else "Some indexes could not be created, see logs")
