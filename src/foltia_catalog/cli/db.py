"""CLI commands for the catalog database itself."""

import click

from foltia_catalog.db.schema import create_schema


@click.group("db")
def db_group() -> None:
    """Manage the catalog database."""


@db_group.command("init")
@click.pass_context
def init_command(ctx: click.Context) -> None:
    """Create the catalog tables in a local database.

    Existing tables are left untouched, so this is safe to re-run.
    """
    conn = ctx.obj.get("db_conn")
    if conn is None:
        raise click.ClickException("Failed to connect to database.")
    create_schema(conn)
    click.echo("Catalog tables are ready.")
