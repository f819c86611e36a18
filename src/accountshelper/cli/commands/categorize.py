"""Category assignment command."""

import click
from accountshelper.domain.errors import DomainError
from accountshelper.domain.transaction import TransactionService
from accountshelper.cli.resolution import resolve_category_or_exit


@click.command("categorize")
@click.argument("transaction_ids", nargs=-1, required=True, type=int)
@click.argument("category_name", nargs=1)
@click.pass_context
def categorize_transaction(ctx, transaction_ids: tuple[int, ...], category_name: str):
    """Assign a category to one or more transactions.

    Examples:
        accountshelper categorize 1 FoodHousehold
        accountshelper categorize 1 2 3 Travel
    """
    db = ctx.obj["db"]
    service = TransactionService(db)
    category = resolve_category_or_exit(ctx, category_name)

    # Remove duplicates while preserving order
    unique_ids = list(dict.fromkeys(transaction_ids))

    successes = []
    errors = []

    if len(unique_ids) > 1:
        click.echo(f"Categorizing {len(unique_ids)} transactions as '{category.description}'...")

    for txn_id in unique_ids:
        try:
            service.update_category(transaction_id=txn_id, category=category)
            successes.append(txn_id)
            if len(unique_ids) == 1:
                click.echo(f"Transaction {txn_id} categorized as '{category.description}'")
            else:
                click.echo(f"✓ Transaction {txn_id} categorized")
        except DomainError as e:
            errors.append((txn_id, str(e)))
            if len(unique_ids) > 1:
                click.echo(f"✗ Transaction {txn_id}: {e}")

    if len(unique_ids) > 1:
        click.echo(f"\nResults: {len(successes)} succeeded, {len(errors)} failed")
        if errors:
            ctx.exit(1)
    elif errors:
        click.echo(f"Error: {errors[0][1]}", err=True)
        ctx.exit(1)


def register_commands(cli):
    """Register categorize command with main CLI."""
    cli.add_command(categorize_transaction)
