"""Receipt number generation."""

import random
import re
from datetime import date, datetime
from typing import Optional

SUFFIX_SPACE = 100000

_NUMBER_RE = re.compile(r"^(?P<prefix>.*)(?P<date>\d{8})-(?P<suffix>\d{5})$", re.DOTALL)


def generate_receipt_number(prefix: str, today: Optional[date] = None, rng=None) -> str:
    """Build a receipt number of the form ``{prefix}{YYYYMMDD}-{NNNNN}``.

    The prefix is used verbatim; callers substitute the default prefix
    before calling. The five digit suffix is random, so two numbers issued
    on the same day collide with probability 1/100000.

    Args:
        prefix: Organization receipt prefix, e.g. "REC-"
        today: Date to stamp (defaults to the local current date)
        rng: Object with a ``randrange`` method (defaults to the random module)

    Returns:
        Receipt number string
    """
    today = today or date.today()
    rng = rng or random
    suffix = rng.randrange(SUFFIX_SPACE)
    return f"{prefix}{today.year:04d}{today.month:02d}{today.day:02d}-{suffix:05d}"


def parse_receipt_number(value: str) -> tuple[str, date, str]:
    """Split a receipt number into (prefix, date, suffix).

    Raises:
        ValueError: if the value does not end in ``YYYYMMDD-NNNNN`` or the
            date stamp is not a real calendar date
    """
    match = _NUMBER_RE.match(value)
    if not match:
        raise ValueError(f"Not a receipt number: {value!r}")
    stamp = datetime.strptime(match.group("date"), "%Y%m%d").date()
    return match.group("prefix"), stamp, match.group("suffix")
