"""CLI helpers for turning option text into domain values."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import click

from accountshelper.cli.error_handling import handle_domain_error
from accountshelper.domain.errors import DomainError
from accountshelper.domain.entities import AccountingPeriod
from accountshelper.domain.enums import Category, Currency, Payer, ReconcilableAccount
from accountshelper.utils.amounts import parse_amount
from accountshelper.utils.date_parser import parse_date


def _require_known(ctx: click.Context, member, kind: str, value: str):
    if member.name == "unknown":
        click.echo(f"Error: Unknown {kind} '{value}'", err=True)
        ctx.exit(1)
    return member


def resolve_account_or_exit(ctx: click.Context, value: str) -> ReconcilableAccount:
    """Resolve an account by name, code or description, or exit with a CLI error."""
    return _require_known(ctx, ReconcilableAccount.from_string(value), "account", value)


def resolve_category_or_exit(ctx: click.Context, value: str) -> Category:
    return _require_known(ctx, Category.from_string(value), "category", value)


def resolve_currency_or_exit(ctx: click.Context, value: str) -> Currency:
    return _require_known(ctx, Currency.from_string(value), "currency", value)


def resolve_payer_or_exit(ctx: click.Context, value: str) -> Payer:
    return _require_known(ctx, Payer.from_string(value), "payer", value)


def parse_date_or_exit(ctx: click.Context, value: str, label: str = "date") -> date:
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def parse_amount_or_exit(ctx: click.Context, value: str, label: str = "amount") -> Decimal:
    try:
        return parse_amount(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def parse_period_or_exit(ctx: click.Context, value: str) -> AccountingPeriod:
    try:
        return AccountingPeriod.parse(value)
    except DomainError as e:
        handle_domain_error(ctx, e)
