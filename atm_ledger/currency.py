"""
Currency Module

Money is held as an integer count of minor units (paise, cents) so that
ledger arithmetic never drifts. Conversion to and from major units happens
only at the edges: parsing user input and formatting for display.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from dataclasses import dataclass
from enum import Enum
from typing import Union
import re

from .errors import InvalidAmount

# Optional symbol, optional sign, digits with thousands separators, optional fraction
AMOUNT_PATTERN = re.compile(r'^\s*[₹$€£¥]?\s*([+-]?[\d,]*\.?\d*)\s*$')


class Currency(Enum):
    """ISO 4217 currency codes with display symbol and minor-unit exponent"""
    INR = ("INR", "₹", 2)  # Indian Rupee, 100 paise
    USD = ("USD", "$", 2)  # US Dollar, 100 cents
    EUR = ("EUR", "€", 2)  # Euro, 100 cents
    GBP = ("GBP", "£", 2)  # British Pound, 100 pence
    JPY = ("JPY", "¥", 0)  # Japanese Yen, no minor unit

    def __init__(self, code: str, symbol: str, exponent: int):
        self.code = code
        self.symbol = symbol
        self.exponent = exponent

    @property
    def quantum(self) -> Decimal:
        """Smallest representable major-unit step (0.01 for INR)"""
        return Decimal(1).scaleb(-self.exponent)


@dataclass(frozen=True)
class Money:
    """
    Immutable money amount in integer minor units.
    Floats are rejected outright.
    """
    minor_units: int
    currency: Currency = Currency.INR

    def __post_init__(self):
        if isinstance(self.minor_units, bool) or not isinstance(self.minor_units, int):
            raise TypeError(
                f"Money minor units must be int, got {type(self.minor_units).__name__}"
            )

    @classmethod
    def zero(cls, currency: Currency = Currency.INR) -> 'Money':
        return cls(0, currency)

    @classmethod
    def from_major(cls, value: Union[Decimal, int, str],
                   currency: Currency = Currency.INR) -> 'Money':
        """
        Build Money from a major-unit value (rupees, dollars)

        Args:
            value: Decimal, int or numeric string
            currency: Currency of the amount

        Returns:
            Money rounded half-up to the currency's minor unit

        Raises:
            TypeError: If value is a float
            ValueError: If value is not numeric
        """
        if isinstance(value, float):
            raise TypeError("Use Decimal or str for monetary values, not float")
        try:
            major = Decimal(value) if not isinstance(value, Decimal) else value
        except InvalidOperation:
            raise ValueError(f"Cannot convert '{value}' to a monetary amount")
        if not major.is_finite():
            raise ValueError(f"Monetary amount must be finite, got {value}")
        try:
            minor = (major.quantize(currency.quantum, rounding=ROUND_HALF_UP)
                     .scaleb(currency.exponent))
        except InvalidOperation:
            raise ValueError(f"Monetary amount {value} exceeds supported precision")
        return cls(int(minor), currency)

    def _check_currency(self, other: 'Money', verb: str) -> None:
        if not isinstance(other, Money):
            raise TypeError(f"Cannot {verb} Money and {type(other).__name__}")
        if self.currency != other.currency:
            raise ValueError(f"Cannot {verb} {self.currency.code} and {other.currency.code}")

    def __add__(self, other: 'Money') -> 'Money':
        self._check_currency(other, "add")
        return Money(self.minor_units + other.minor_units, self.currency)

    def __sub__(self, other: 'Money') -> 'Money':
        self._check_currency(other, "subtract")
        return Money(self.minor_units - other.minor_units, self.currency)

    def __neg__(self) -> 'Money':
        return Money(-self.minor_units, self.currency)

    def __abs__(self) -> 'Money':
        return Money(abs(self.minor_units), self.currency)

    def __lt__(self, other: 'Money') -> bool:
        self._check_currency(other, "compare")
        return self.minor_units < other.minor_units

    def __le__(self, other: 'Money') -> bool:
        self._check_currency(other, "compare")
        return self.minor_units <= other.minor_units

    def __gt__(self, other: 'Money') -> bool:
        self._check_currency(other, "compare")
        return self.minor_units > other.minor_units

    def __ge__(self, other: 'Money') -> bool:
        self._check_currency(other, "compare")
        return self.minor_units >= other.minor_units

    def is_zero(self) -> bool:
        return self.minor_units == 0

    def is_positive(self) -> bool:
        return self.minor_units > 0

    def is_negative(self) -> bool:
        return self.minor_units < 0

    def to_decimal(self) -> Decimal:
        """Amount in major units, exact"""
        return Decimal(self.minor_units).scaleb(-self.currency.exponent)

    def to_string(self) -> str:
        """Format for display, e.g. ₹50,000.00"""
        sign = "-" if self.minor_units < 0 else ""
        major = abs(self.to_decimal())
        return f"{sign}{self.currency.symbol}{major:,.{self.currency.exponent}f}"

    def __str__(self) -> str:
        return self.to_string()


def parse_amount(text: str, currency: Currency = Currency.INR) -> Money:
    """
    Parse user-entered text into Money, handling symbols and thousands separators

    Args:
        text: Amount as typed, e.g. "₹ 1,500.50" or "500"
        currency: Currency of the amount

    Returns:
        Money value

    Raises:
        InvalidAmount: If the text is empty or not a number
    """
    if not text or not isinstance(text, str):
        raise InvalidAmount("Amount must be a non-empty string")

    match = AMOUNT_PATTERN.match(text)
    if not match:
        raise InvalidAmount(f"Cannot convert '{text}' to an amount")
    clean_value = match.group(1).replace(',', '')

    try:
        return Money.from_major(Decimal(clean_value), currency)
    except (InvalidOperation, ValueError):
        raise InvalidAmount(f"Cannot convert '{text}' to an amount")
