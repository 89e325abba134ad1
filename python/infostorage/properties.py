"""
String property surface shared by the calculators.

Property values travel as strings (or plain Python values) and are parsed
here, so that a malformed value always surfaces as a ParseError naming the
offending property.
"""

from typing import Any, Optional

from infostorage.errors import ParseError

_TRUE = ("true", "1", "yes", "on")
_FALSE = ("false", "0", "no", "off")


def parse_int(name: str, value: Any, minimum: Optional[int] = None) -> int:
    """Parse an integer property value, optionally enforcing a lower bound."""
    if isinstance(value, bool):
        raise ParseError(name, value, "expected an integer")
    try:
        parsed = int(str(value).strip())
    except ValueError:
        raise ParseError(name, value, "expected an integer") from None

    if minimum is not None and parsed < minimum:
        raise ParseError(name, value, f"must be >= {minimum}")
    return parsed


def parse_float(name: str, value: Any) -> float:
    if isinstance(value, bool):
        raise ParseError(name, value, "expected a number")
    try:
        return float(str(value).strip())
    except ValueError:
        raise ParseError(name, value, "expected a number") from None


def parse_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ParseError(name, value, "expected true or false")


def format_value(value: Any) -> str:
    """Render a property value the way get_property reports it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
