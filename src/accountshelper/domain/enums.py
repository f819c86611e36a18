"""Closed taxonomies with persisted integer codes.

Every member carries an explicit code. Codes are stored in the database, so
they must never be renumbered; add new members with new codes instead.
"""

from enum import IntEnum
from typing import Optional


class _CodedEnum(IntEnum):
    """IntEnum with a reverse lookup that falls back to ``unknown``."""

    @classmethod
    def from_code(cls, code: Optional[int]):
        """Return the member for a persisted code, or ``unknown``."""
        if code is None:
            return cls.unknown
        try:
            return cls(int(code))
        except ValueError:
            return cls.unknown

    @property
    def description(self) -> str:
        return "Unknown" if self.name == "unknown" else self.name

    def __str__(self) -> str:
        return self.description


class Currency(_CodedEnum):
    """Transaction currency."""

    GBP = 1
    USD = 2
    JPY = 3
    EUR = 4
    unknown = 99

    @classmethod
    def from_string(cls, value: str) -> "Currency":
        """Parse an ISO code such as "GBP"."""
        try:
            return cls[value.strip().upper()]
        except KeyError:
            return cls.unknown

    @property
    def iso_code(self) -> str:
        return "XXX" if self is Currency.unknown else self.name

    @property
    def symbol(self) -> str:
        return _CURRENCY_SYMBOLS[self]

    @property
    def minor_digits(self) -> int:
        """Number of fractional digits shown for this currency."""
        return 0 if self is Currency.JPY else 2


_CURRENCY_SYMBOLS = {
    Currency.GBP: "£",
    Currency.USD: "$",
    Currency.JPY: "¥",
    Currency.EUR: "€",
    Currency.unknown: "",
}


class Category(_CodedEnum):
    """Spending category. Zero is never used as it reads as unknown."""

    Spare1 = 1
    GardenHome = 2
    Insurance = 3
    CarTax = 4
    CarMaintenance = 5
    Spare2 = 6
    Maintenance = 7
    FoodHousehold = 8
    AMWAY = 9
    Wine = 10
    Entertainments = 11
    Travel = 12
    TransportPetrol = 13
    BooksCDs = 14
    Medical = 15
    OfficeCompAV = 16
    Hobbies = 17
    Presents = 18
    Spare3 = 19
    MiscOther = 20
    ToBalance = 21
    Spare4 = 22
    Phone = 23
    Utilities = 24
    CouncilTax = 25
    Spare5 = 26
    ToYokko = 27
    OpeningBalance = 28
    VisaPayment = 29
    AMEXPayment = 30
    ToGBPCash = 31
    ToYenCash = 32
    unknown = 99

    @classmethod
    def from_string(cls, value: str) -> "Category":
        """Parse a category name, case-insensitively."""
        wanted = value.strip().lower()
        for member in cls:
            if member.name.lower() == wanted:
                return member
        return cls.unknown


class DebitCredit(_CodedEnum):
    """Debit/credit indicator. Debits are positive amounts, credits negative."""

    DR = 1
    CR = 2
    unknown = 99

    @classmethod
    def for_amount(cls, amount) -> "DebitCredit":
        """Infer the indicator from the sign of an amount."""
        if amount > 0:
            return cls.DR
        if amount < 0:
            return cls.CR
        return cls.unknown

    def flipped(self) -> "DebitCredit":
        if self is DebitCredit.DR:
            return DebitCredit.CR
        if self is DebitCredit.CR:
            return DebitCredit.DR
        return DebitCredit.unknown


class Payer(_CodedEnum):
    """Who paid."""

    tony = 1
    yokko = 2
    ACHelper = 98
    unknown = 99

    @property
    def description(self) -> str:
        return _PAYER_DESCRIPTIONS[self]

    @classmethod
    def from_string(cls, value: str) -> "Payer":
        """Parse a payer name, including the spellings used on statements."""
        return _PAYER_ALIASES.get(value.strip(), cls.unknown)


_PAYER_DESCRIPTIONS = {
    Payer.tony: "Tony",
    Payer.yokko: "Yokko",
    Payer.ACHelper: "ACHelper",
    Payer.unknown: "Unknown",
}

_PAYER_ALIASES = {
    "Tony": Payer.tony,
    "Yokko": Payer.yokko,
    "ACHelper": Payer.ACHelper,
    "ANTHONY J STANNERS": Payer.tony,
    "YOSHIKO STANNERS": Payer.yokko,
}


class ShowCurrencySymbols(IntEnum):
    """Display setting for currency symbols."""

    ALWAYS = 1
    NEVER = 2
    WHEN_NOT_GBP = 3

    def show(self, currency: Currency) -> bool:
        return self is ShowCurrencySymbols.ALWAYS or (
            self is ShowCurrencySymbols.WHEN_NOT_GBP and currency is not Currency.GBP
        )


class ReconcilableAccount(_CodedEnum):
    """Account or payment method that can be reconciled against a statement."""

    CashGBP = 1
    CashUSD = 2
    CashEUR = 3
    CashYEN = 4
    AMEX = 5
    VISA = 6
    BofSPV = 7
    BofSCA = 8
    BofSC = 9
    BofSIASA = 10
    BofSISS = 11
    BofSVP = 12
    ItMkEquity = 13
    unknown = 99

    @property
    def description(self) -> str:
        return _ACCOUNT_INFO[self][0]

    @property
    def code(self) -> str:
        """Stable code used in reconciliation period keys."""
        return _ACCOUNT_INFO[self][1]

    @property
    def currency(self) -> Currency:
        """The account's intrinsic currency."""
        return _ACCOUNT_INFO[self][2]

    @classmethod
    def from_string(cls, value: str) -> "ReconcilableAccount":
        """Parse an account by member name, code or description."""
        wanted = value.strip().lower()
        for member in cls:
            description, code, _ = _ACCOUNT_INFO[member]
            if wanted in (member.name.lower(), code.lower(), description.lower()):
                return member
        return cls.unknown


_ACCOUNT_INFO = {
    ReconcilableAccount.CashGBP: ("Cash GBP", "CASH_GBP", Currency.GBP),
    ReconcilableAccount.CashUSD: ("Cash USD", "CASH_USD", Currency.USD),
    ReconcilableAccount.CashEUR: ("Cash EUR", "CASH_EUR", Currency.EUR),
    ReconcilableAccount.CashYEN: ("Cash YEN", "CASH_YEN", Currency.JPY),
    ReconcilableAccount.AMEX: ("AMEX", "AMEX", Currency.GBP),
    ReconcilableAccount.VISA: ("VISA", "VISA", Currency.GBP),
    ReconcilableAccount.BofSPV: ("BofS PV", "BOFS_PV", Currency.GBP),
    ReconcilableAccount.BofSCA: ("BofS CA", "BOFS_CA", Currency.GBP),
    ReconcilableAccount.BofSC: ("BofS C", "BOFS_C", Currency.GBP),
    ReconcilableAccount.BofSIASA: ("BofS IASA", "BOFS_IASA", Currency.GBP),
    ReconcilableAccount.BofSISS: ("BofS ISS", "BOFS_ISS", Currency.GBP),
    ReconcilableAccount.BofSVP: ("BofS VP", "BOFS_VP", Currency.GBP),
    ReconcilableAccount.ItMkEquity: ("ItMk Equity", "ITMK_EQUITY", Currency.GBP),
    ReconcilableAccount.unknown: ("Unknown", "UNKNOWN", Currency.unknown),
}
