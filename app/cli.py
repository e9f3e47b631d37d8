import os
import click
from flask import current_app
from flask.cli import with_appcontext
from flask_migrate import upgrade as alembic_upgrade, stamp as alembic_stamp, migrate as alembic_migrate


def _assert_safe_for_upgrade():
    # Prevent accidental prod upgrades unless explicitly allowed
    env = (current_app.config.get("ENV") or "").lower()
    app_env = (os.getenv("APP_ENV") or "").lower()
    if app_env == "production" or env == "production":
        if (os.getenv("ALLOW_DB_MIGRATIONS") or "").lower() not in ("1", "true", "yes"):
            raise click.ClickException("Refusing to run DB migration in production without ALLOW_DB_MIGRATIONS=true")


@click.command("db-migrate-safe")
@click.option("-m", "--message", default="auto migration", help="Migration message")
@with_appcontext
def db_migrate_safe(message):
    """Generate a new migration script from current models."""
    alembic_migrate(message=message)
    click.echo("Migration script generated.")


@click.command("db-upgrade-safe")
@with_appcontext
def db_upgrade_safe():
    """Apply migrations to the configured database."""
    _assert_safe_for_upgrade()
    alembic_upgrade()
    click.echo("Database upgraded.")


@click.command("db-stamp-safe")
@click.option("--revision", default="head", help="Revision to stamp, default 'head'")
@with_appcontext
def db_stamp_safe(revision):
    """Mark the database at a given revision without running migrations."""
    _assert_safe_for_upgrade()
    alembic_stamp(revision)
    click.echo(f"Database stamped at {revision}.")


@click.command("pricing-selfcheck")
@click.option("--verbose", is_flag=True, help="Print passing scenarios too")
@with_appcontext
def pricing_selfcheck(verbose):
    """Run the discount scenarios; exit non-zero if any fails."""
    from app.services.discount_validation import PASS, run_discount_validation

    results = run_discount_validation()
    failed = [r for r in results if r.status != PASS]
    for r in results:
        if verbose or r.status != PASS:
            click.echo(f"{r.id} [{r.status}] {r.scenario} expected: {r.expected} actual: {r.actual}")
    click.echo(f"{len(results) - len(failed)}/{len(results)} scenarios passed.")
    if failed:
        raise click.ClickException(f"{len(failed)} discount scenario(s) failed")


@click.command("issue-token")
@click.argument("subject")
@click.option("--role", default="superadmin", type=click.Choice(["superadmin", "qa"]), help="Role claim")
@click.option("--minutes", default=None, type=int, help="Lifetime, defaults to ACCESS_TOKEN_LIFETIME_MIN")
@with_appcontext
def issue_token(subject, role, minutes):
    """Print a back-office access token for SUBJECT."""
    from app.utils.jwt import create_access_token

    click.echo(create_access_token(subject, role, minutes=minutes))


def register_cli(app):
    app.cli.add_command(db_migrate_safe)
    app.cli.add_command(db_upgrade_safe)
    app.cli.add_command(db_stamp_safe)
    app.cli.add_command(pricing_selfcheck)
    app.cli.add_command(issue_token)
