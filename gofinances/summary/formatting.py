"""
pt-BR Display Formatting

Pure presentation transforms. Nothing here ever changes a stored value;
every function takes a number or an instant and returns text.

    format_currency(Decimal("1000"))      -> "R$ 1.000,00"
    format_currency(Decimal("-600"))      -> "-R$ 600,00"
    format_day_month(2024-01-10T..)       -> "10 de janeiro"
    format_short_date(2024-01-10T..)      -> "10/01/24"
"""

from datetime import datetime, timezone, tzinfo
from decimal import ROUND_HALF_UP, Decimal
from zoneinfo import ZoneInfo


MONTH_NAMES = (
    "janeiro",
    "fevereiro",
    "março",
    "abril",
    "maio",
    "junho",
    "julho",
    "agosto",
    "setembro",
    "outubro",
    "novembro",
    "dezembro",
)

CURRENCY_SYMBOLS = {
    "BRL": "R$",
    "USD": "US$",
    "EUR": "€",
}

CENTS = Decimal("0.01")


def resolve_timezone(name: str) -> tzinfo:
    """IANA name to tzinfo; "UTC" needs no tz database."""
    if name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)


def format_currency(value: Decimal, currency: str = "BRL") -> str:
    """
    Render an amount as pt-BR currency text.

    Two decimals, half-up rounding, "." for thousands and "," for decimals.
    """
    quantized = Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)
    sign = "-" if quantized < 0 else ""
    digits = f"{abs(quantized):,.2f}"
    # swap separators: 1,000.00 -> 1.000,00
    digits = digits.replace(",", "_").replace(".", ",").replace("_", ".")
    symbol = CURRENCY_SYMBOLS.get(currency, currency)
    return f"{sign}{symbol} {digits}"


def _localize(instant: datetime, tz: tzinfo) -> datetime:
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(tz)


def format_day_month(instant: datetime, tz: tzinfo = timezone.utc) -> str:
    """Day of month and month name, e.g. "5 de janeiro"."""
    local = _localize(instant, tz)
    return f"{local.day} de {MONTH_NAMES[local.month - 1]}"


def format_short_date(instant: datetime, tz: tzinfo = timezone.utc) -> str:
    """dd/mm/yy"""
    return _localize(instant, tz).strftime("%d/%m/%y")


def format_percent(part: Decimal, whole: Decimal) -> str:
    """Whole-number share, e.g. "63%". A zero whole yields "0%"."""
    if whole == 0:
        return "0%"
    share = (part / whole * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return f"{share}%"
