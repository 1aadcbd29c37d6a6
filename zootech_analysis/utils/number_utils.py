"""
Lenient number parsing for field data.

Spreadsheets exported from Brazilian farm-management tools mix decimal
commas, thousands separators and trailing units ("450,5 kg"). Every
numeric-accepting function in the engine goes through parse_lenient_number
so all of them agree on what counts as a number.

Grammar (after trimming whitespace):
    [sign] digits [separator digits] [exponent] [trailing text]

    - sign: optional '+' or '-'
    - separator: ',' or '.' as decimal mark
    - thousands grouping is recognised when both marks are present:
      "1.234,56" (Brazilian) and "1,234.56" (international) both give 1234.56
    - trailing non-numeric text ("kg", "%", "dias") is ignored
    - anything else (empty, leading text, NaN/inf, booleans) is absent

Usage:
    >>> parse_lenient_number("10,5")
    10.5
    >>> parse_lenient_number("1.234,56 kg")
    1234.56
    >>> parse_lenient_number("n/a") is None
    True
"""

import math
import re
from numbers import Number
from typing import Any, Optional

from zootech_analysis.core.constants import MISSING_VALUE_TOKENS

_LEADING_NUMBER = re.compile(r'^[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?')
_FULL_NUMBER = re.compile(r'^[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?$')


def _normalize_separators(text: str) -> str:
    """Rewrite decimal comma / thousands grouping into a plain dot decimal."""
    if ',' not in text:
        return text

    last_comma = text.rfind(',')
    last_dot = text.rfind('.')

    if last_dot < last_comma:
        # "1.234,56" or "10,5": dots group thousands, comma is decimal
        return text.replace('.', '').replace(',', '.', 1)
    # "1,234.56": commas group thousands
    return text.replace(',', '')


def parse_lenient_number(raw: Any, strict: bool = False) -> Optional[float]:
    """
    Parse a raw cell value into a float.

    Args:
        raw: Value as delivered by the tabular source (str, int, float, None)
        strict: When True the whole string must be numeric; trailing text
            such as units makes the value absent. Used by type detection,
            where "12 animais" must not count as a number.

    Returns:
        The parsed finite float, or None when the value is absent or unparsable
    """
    if raw is None or isinstance(raw, bool):
        return None

    if isinstance(raw, Number):
        value = float(raw)
        return value if math.isfinite(value) else None

    if not isinstance(raw, str):
        return None

    text = raw.strip()
    if not text:
        return None

    text = _normalize_separators(text)

    pattern = _FULL_NUMBER if strict else _LEADING_NUMBER
    match = pattern.match(text)
    if not match:
        return None

    value = float(match.group(0))
    return value if math.isfinite(value) else None


def is_numeric_value(raw: Any, strict: bool = True) -> bool:
    """Check whether a raw value parses as a number."""
    return parse_lenient_number(raw, strict=strict) is not None


def is_missing_value(raw: Any) -> bool:
    """
    Check whether a raw cell counts as missing.

    None, NaN, empty/whitespace strings and the literal tokens "null" and
    "undefined" (as written by JavaScript-based exporters) are missing.
    """
    if raw is None:
        return True
    if isinstance(raw, float) and math.isnan(raw):
        return True
    if isinstance(raw, str):
        return raw.strip().lower() in MISSING_VALUE_TOKENS
    return False
