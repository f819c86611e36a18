"""Main CLI entry point."""

import logging

import click
from accountshelper.database.factories import DB_PATH_ENVVAR, create_sqlite_database

from accountshelper.cli.commands import (
    add,
    categorize,
    mapping,
    reconcile,
    summary,
    transaction,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help=f"Path to database file (overrides {DB_PATH_ENVVAR} environment variable)",
    envvar=DB_PATH_ENVVAR,
)
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: bool):
    """AccountsHelper - household accounts bookkeeping.

    Record multi-currency transactions, learn payee categories, and
    reconcile accounts against monthly statements.
    """
    ctx.ensure_object(dict)
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    # Only open the database when running a command, not for --help
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


add.register_commands(cli)
transaction.register_commands(cli)
categorize.register_commands(cli)
mapping.register_commands(cli)
reconcile.register_commands(cli)
summary.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
