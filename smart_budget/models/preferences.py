"""
Display Preferences and the Stored Application State

Preferences (currency, dark mode, balance visibility) are pure
presentation settings. They travel alongside the ledger in storage
but the reconciliation engine never looks at them.
"""

from pydantic import BaseModel, ConfigDict, Field

from smart_budget.models.record import LedgerState


class Currency(BaseModel):
    """A display currency. Amounts are never converted between currencies."""
    model_config = ConfigDict(frozen=True)

    code: str = Field(..., min_length=3, max_length=3)
    symbol: str = Field(..., min_length=1)
    name: str


SUPPORTED_CURRENCIES: tuple[Currency, ...] = (
    Currency(code="SAR", symbol="ر.س", name="Saudi Riyal"),
    Currency(code="EGP", symbol="ج.م", name="Egyptian Pound"),
    Currency(code="AED", symbol="د.إ", name="UAE Dirham"),
    Currency(code="KWD", symbol="د.ك", name="Kuwaiti Dinar"),
    Currency(code="USD", symbol="$", name="US Dollar"),
    Currency(code="QAR", symbol="ر.ق", name="Qatari Riyal"),
    Currency(code="OMR", symbol="ر.ع.", name="Omani Rial"),
    Currency(code="JOD", symbol="د.ا", name="Jordanian Dinar"),
    Currency(code="EUR", symbol="€", name="Euro"),
)

DEFAULT_CURRENCY = SUPPORTED_CURRENCIES[0]


def get_currency(code: str) -> Currency:
    """
    Look up a supported currency by its ISO code.

    Raises:
        KeyError: If the code is not supported
    """
    for currency in SUPPORTED_CURRENCIES:
        if currency.code == code.upper():
            return currency
    raise KeyError(f"Unsupported currency: {code}")


class Preferences(BaseModel):
    """User display preferences."""
    model_config = ConfigDict(frozen=True)

    currency: Currency = Field(default=DEFAULT_CURRENCY)
    dark_mode: bool = False
    balance_hidden: bool = Field(
        default=False,
        description="Mask amounts on screen"
    )


class AppState(BaseModel):
    """
    Everything the record store persists.

    The ledger is owned by the reconciliation engine;
    preferences are passed through unchanged.
    """
    model_config = ConfigDict(frozen=True)

    ledger: LedgerState = Field(default_factory=LedgerState)
    preferences: Preferences = Field(default_factory=Preferences)
