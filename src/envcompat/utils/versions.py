"""
Version token helpers.

Compiled matrices store versions as strings: a decimal numeral such as
``"49"`` or ``"10.1"``, or an environment's unreleased label such as
``"tp"``. These helpers parse, order and render such tokens.
"""

import math
import re

_LEADING_NUMBER = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)")


def parse_leading_number(text: str) -> float | None:
    """
    Parse the numeric prefix of a string.

    ``"10_1"`` gives 10.0, ``"3.5beta"`` gives 3.5, ``"tp"`` gives None.

    Args:
        text: Raw version text.

    Returns:
        Parsed number, or None when the text does not start with one.
    """
    match = _LEADING_NUMBER.match(text)
    if match is None:
        return None
    return float(match.group(0))


def format_number(value: float) -> str:
    """Render a version number the shortest way ("49", "10.1", "0.37")."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def is_numeric(value: object) -> bool:
    """Whether a target value is a real number (booleans are not)."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def token_value(token: str) -> float:
    """
    Comparable value of a persisted version token.

    Any token that is not a number is an unreleased label and sorts after
    every released version.
    """
    number = parse_leading_number(token)
    if number is None:
        return math.inf
    return number


def sort_tokens(tokens: set[str] | list[str]) -> list[str]:
    """Sort version tokens numerically, unreleased labels last."""
    return sorted(tokens, key=lambda token: (token_value(token), token))
