"""Currency, date and text helpers shared by the composer and the CLI."""

from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Union

DEFAULT_CURRENCY_SYMBOL = "R"

_CENTS = Decimal("0.01")


def to_decimal(amount) -> Decimal:
    """Coerce an amount to Decimal, treating missing or non-numeric values as 0."""
    if amount is None or isinstance(amount, bool):
        return Decimal(0)
    if isinstance(amount, Decimal):
        value = amount
    else:
        # str() first so floats round on their shortest repr (19.995, not 19.99499...)
        try:
            value = Decimal(str(amount).strip())
        except (InvalidOperation, ValueError):
            return Decimal(0)
    if not value.is_finite():
        return Decimal(0)
    return value


def format_currency(amount, symbol: str = DEFAULT_CURRENCY_SYMBOL) -> str:
    """Format an amount as ``"R 250.00"``, rounding half up to cents."""
    value = to_decimal(amount)
    with localcontext() as ctx:
        # room for every integer digit, the cents and a carry from rounding
        ctx.prec = max(ctx.prec, value.adjusted() + 4)
        value = value.quantize(_CENTS, rounding=ROUND_HALF_UP)
    return f"{symbol} {value}"


def format_date(value: Union[date, str]) -> str:
    """Render a date as ISO ``YYYY-MM-DD``."""
    if isinstance(value, str):
        return date.fromisoformat(value).isoformat()
    return value.isoformat()


def org_detail_line(org) -> str:
    """Join an organization's address and registration numbers for the header."""
    parts = []
    if org.address:
        parts.append(org.address)

    regs = []
    if org.reg_no:
        regs.append(f"Reg: {org.reg_no}")
    if org.tax_no:
        regs.append(f"Tax/PBO: {org.tax_no}")
    if regs:
        parts.append(" • ".join(regs))

    return "   |   ".join(parts)
