"""Display formatting for detail records."""

import math
import re
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Any

WIKIPEDIA_BASE_URL = "https://en.wikipedia.org/wiki/"

# Wide enough for any finite float at any fraction digit count
_ROUNDING = Context(prec=450, rounding=ROUND_HALF_UP)


def format_number(value: Any, max_fraction_digits: int) -> str | None:
    """Format a number with en-US grouping and at most N fraction digits.

    The services send population figures either as numbers or as strings,
    sometimes already containing thousands separators. Halves round away
    from zero.

    Returns:
        The formatted number; the raw text when it is not a finite number;
        None when there is no value.

    Example:
        format_number("8336817", 0)   -> "8,336,817"
        format_number(11313.84, 2)    -> "11,313.84"
        format_number(2.5, 0)         -> "3"
        format_number("n/a", 0)       -> "n/a"
    """
    if value is None:
        return None
    raw = str(value).strip()
    if not raw:
        return None

    normalized = raw.replace(",", "")
    if "_" in normalized:
        return raw
    try:
        numeric = float(normalized)
    except ValueError:
        return raw
    if not math.isfinite(numeric):
        return raw

    rounded = Decimal(str(numeric)).quantize(
        Decimal(1).scaleb(-max_fraction_digits), context=_ROUNDING
    )
    formatted = f"{rounded:,f}"
    if max_fraction_digits > 0:
        formatted = formatted.rstrip("0").rstrip(".")
    if formatted == "-0":
        formatted = "0"
    return formatted


def build_wikipedia_url(
    name: str | None,
    identifier: str | None = None,
    record_id: str | None = None,
) -> str | None:
    """Guess the English Wikipedia article of a region.

    The first non-empty of name, identifier and id is split into words on
    whitespace, underscores and dashes; each word is capitalised and the
    words are joined with underscores.
    """
    base = name or identifier or record_id
    if not base:
        return None
    words = re.sub(r"[_-]+", " ", base.strip()).split()
    if not words:
        return None
    title = "_".join(word[0].upper() + word[1:] for word in words)
    return f"{WIKIPEDIA_BASE_URL}{title}"
