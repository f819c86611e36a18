"""Counter-transaction inference.

Static rule tables that suggest the other side of a transfer, e.g. a VISA
payment out of the current account should also be recorded on the VISA card.
"""

import dataclasses
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from accountshelper.domain.entities import TransactionRecord
from accountshelper.domain.enums import Category, Currency, ReconcilableAccount


@dataclass(frozen=True)
class CounterPair:
    """Two accounts that move money between each other under a name."""

    from_account: ReconcilableAccount
    to_account: ReconcilableAccount
    name: str

    def involves(self, account: ReconcilableAccount) -> bool:
        return account in (self.from_account, self.to_account)

    def counterparty(self, account: ReconcilableAccount) -> Optional[ReconcilableAccount]:
        if account is self.from_account:
            return self.to_account
        if account is self.to_account:
            return self.from_account
        return None


@dataclass(frozen=True)
class CounterTrigger:
    """Account and category that imply a transaction on another account."""

    account: ReconcilableAccount
    category: Category
    suggested_account: ReconcilableAccount


COUNTER_RELATIONSHIPS: tuple[CounterPair, ...] = (
    CounterPair(ReconcilableAccount.BofSPV, ReconcilableAccount.CashGBP, "ATM Withdrawal"),
    CounterPair(ReconcilableAccount.BofSPV, ReconcilableAccount.AMEX, "AMEX Payment"),
    CounterPair(ReconcilableAccount.BofSPV, ReconcilableAccount.VISA, "VISA Payment"),
)

COUNTER_TRIGGERS: tuple[CounterTrigger, ...] = (
    CounterTrigger(ReconcilableAccount.BofSPV, Category.VisaPayment, ReconcilableAccount.VISA),
    CounterTrigger(ReconcilableAccount.BofSPV, Category.AMEXPayment, ReconcilableAccount.AMEX),
    CounterTrigger(ReconcilableAccount.BofSPV, Category.ToYenCash, ReconcilableAccount.CashYEN),
    CounterTrigger(ReconcilableAccount.BofSPV, Category.ToGBPCash, ReconcilableAccount.CashGBP),
)


def matches_for(account: ReconcilableAccount) -> list[CounterPair]:
    """Return every relationship the account takes part in."""
    return [pair for pair in COUNTER_RELATIONSHIPS if pair.involves(account)]


def suggested_counter(account: ReconcilableAccount) -> Optional[ReconcilableAccount]:
    """Return the counterparty of the first relationship for an account."""
    pairs = matches_for(account)
    if not pairs:
        return None
    return pairs[0].counterparty(account)


def transaction_name(
    first: ReconcilableAccount, second: ReconcilableAccount
) -> Optional[str]:
    """Return the relationship name for two accounts, in either order."""
    for pair in COUNTER_RELATIONSHIPS:
        if {pair.from_account, pair.to_account} == {first, second}:
            return pair.name
    return None


def trigger(
    account: ReconcilableAccount, category: Category
) -> Optional[ReconcilableAccount]:
    """Return the suggested counter account for an account and category, if any."""
    for rule in COUNTER_TRIGGERS:
        if rule.account is account and rule.category is category:
            return rule.suggested_account
    return None


def build_counter_transaction(
    record: TransactionRecord, suggested_account: ReconcilableAccount
) -> TransactionRecord:
    """Draft the linked transaction on the counter account.

    The draft is unsaved: it mirrors the amount with the opposite sign and
    flipped DR/CR, and takes the counter account's own currency.
    """
    currency = suggested_account.currency
    exchange_rate = Decimal("1") if currency is Currency.GBP else record.exchange_rate
    payee = transaction_name(record.account, suggested_account) or record.payee
    return dataclasses.replace(
        record,
        id=None,
        amount=-record.amount,
        account=suggested_account,
        currency=currency,
        exchange_rate=exchange_rate,
        commission=Decimal("0"),
        split_amount=Decimal("0"),
        split_category=Category.unknown,
        remainder_category=None,
        debit_credit=record.debit_credit.flipped(),
        payee=payee,
        closed=False,
        timestamp=None,
    )
