"""Add transaction command."""

import click
from accountshelper.domain import counter
from accountshelper.domain.enums import Category, Currency, Payer
from accountshelper.domain.errors import DomainError
from accountshelper.domain.transaction import TransactionService
from accountshelper.cli.error_handling import handle_domain_error
from accountshelper.cli.resolution import (
    parse_amount_or_exit,
    parse_date_or_exit,
    resolve_account_or_exit,
    resolve_category_or_exit,
    resolve_currency_or_exit,
    resolve_payer_or_exit,
)
from accountshelper.utils.amounts import format_amount


@click.command("add")
@click.option("--account", required=True, help="Account name or code (e.g. 'BofS PV', CASH_GBP)")
@click.option(
    "--date",
    "date_str",
    required=True,
    help="Transaction date (YYYY-MM-DD, DD/MM/YYYY or relative like 'today')",
)
@click.option("--amount", required=True, help="Amount; debits positive, credits negative (e.g. 12.50 or -100)")
@click.option("--currency", default="GBP", show_default=True, help="ISO currency code")
@click.option("--rate", help="Exchange rate into GBP (ignored for GBP)")
@click.option("--commission", help="GBP commission added after conversion")
@click.option("--category", help="Category name (e.g. FoodHousehold)")
@click.option("--split-category", help="Category for the split portion")
@click.option("--split-amount", help="Split portion in the transaction currency")
@click.option("--payer", help="Who paid (Tony, Yokko)")
@click.option("--payee", help="Payee text")
@click.option("--explanation", help="Free-text explanation")
@click.option("--reference", help="Statement reference")
@click.option("--auto-categorize", is_flag=True, help="Guess the category from the payee when not given")
@click.option("--with-counter", is_flag=True, help="Also add the suggested counter transaction")
@click.pass_context
def add_transaction(
    ctx,
    account: str,
    date_str: str,
    amount: str,
    currency: str,
    rate: str | None,
    commission: str | None,
    category: str | None,
    split_category: str | None,
    split_amount: str | None,
    payer: str | None,
    payee: str | None,
    explanation: str | None,
    reference: str | None,
    auto_categorize: bool,
    with_counter: bool,
):
    """Add a transaction manually.

    Examples:
        accountshelper add --account "BofS PV" --date 2025-09-01 --amount 45.00 --payee Tesco --auto-categorize
        accountshelper add --account CASH_YEN --date today --amount 3000 --currency JPY --rate 0.0052
    """
    db = ctx.obj["db"]
    service = TransactionService(db)

    txn_account = resolve_account_or_exit(ctx, account)
    txn_currency = resolve_currency_or_exit(ctx, currency)
    txn_date = parse_date_or_exit(ctx, date_str)
    txn_amount = parse_amount_or_exit(ctx, amount)
    txn_rate = parse_amount_or_exit(ctx, rate, "exchange rate") if rate else None
    txn_commission = parse_amount_or_exit(ctx, commission, "commission") if commission else 0
    txn_split_amount = parse_amount_or_exit(ctx, split_amount, "split amount") if split_amount else 0
    txn_category = resolve_category_or_exit(ctx, category) if category else Category.unknown
    txn_split_category = resolve_category_or_exit(ctx, split_category) if split_category else Category.unknown
    txn_payer = resolve_payer_or_exit(ctx, payer) if payer else Payer.unknown

    try:
        transaction_id = service.create_transaction(
            amount=txn_amount,
            account=txn_account,
            transaction_date=txn_date,
            currency=txn_currency,
            exchange_rate=txn_rate,
            commission=txn_commission,
            category=txn_category,
            split_category=txn_split_category,
            split_amount=txn_split_amount,
            payer=txn_payer,
            payee=payee,
            explanation=explanation,
            reference=reference,
            auto_categorize=auto_categorize,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    txn = service.get_transaction(transaction_id)
    click.echo(f"Created transaction {transaction_id}")
    click.echo(f"  Account: {txn.account.description}")
    click.echo(f"  Date: {txn.transaction_date}")
    click.echo(f"  Amount: {format_amount(txn.amount, txn.currency)}")
    if txn.currency is not Currency.GBP:
        click.echo(f"  In GBP: {format_amount(txn.total_in_base_currency, Currency.GBP)}")
    if payee:
        click.echo(f"  Payee: {payee}")
    click.echo(f"  Category: {txn.category.description}")

    duplicates = service.find_possible_duplicates(txn) - 1
    if duplicates > 0:
        click.echo(f"Warning: {duplicates} similar transaction(s) already recorded")

    suggested = counter.trigger(txn.account, txn.category)
    if suggested is None:
        return
    if not with_counter:
        click.echo(f"Suggested counter transaction on {suggested.description} (use --with-counter)")
        return

    draft = counter.build_counter_transaction(txn, suggested)
    try:
        counter_id = service.create_transaction(
            amount=draft.amount,
            account=draft.account,
            transaction_date=draft.transaction_date,
            currency=draft.currency,
            exchange_rate=draft.exchange_rate,
            category=draft.category,
            payer=draft.payer,
            payee=draft.payee,
            debit_credit=draft.debit_credit,
            explanation=draft.explanation,
            reference=draft.reference,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(
        f"Created counter transaction {counter_id} on {draft.account.description}: "
        f"{format_amount(draft.amount, draft.currency)}"
    )


def register_commands(cli):
    """Register add command with main CLI."""
    cli.add_command(add_transaction)
