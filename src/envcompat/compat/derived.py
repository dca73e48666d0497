"""
Environments derived from Chrome support.

Opera has shipped Chromium since Opera 15 (Chrome 28) and Electron bundles
a known Chromium per release, so neither needs its own test data.
"""

from envcompat.catalog.electron import ElectronChromiumTable
from envcompat.utils.versions import format_number, parse_leading_number

OPERA_CHROMIUM_OFFSET = 13
FIRST_CHROMIUM_OPERA = 28


def derive_opera(chrome: float) -> float | None:
    """
    Opera version for a Chrome version.

    Chrome 28+ maps to Opera (chrome - 13); Chrome 5 maps to Opera 12.
    Anything else has no Opera counterpart.
    """
    if chrome >= FIRST_CHROMIUM_OPERA:
        return chrome - OPERA_CHROMIUM_OFFSET
    if chrome == 5:
        return 12
    return None


def add_derived_environments(
    record: dict[str, str], electron_table: ElectronChromiumTable
) -> dict[str, str]:
    """
    Add opera and electron entries derived from the chrome entry.

    A directly tested opera entry is kept when no Opera version can be
    derived.

    Args:
        record: Feature support record (environment -> version token).
        electron_table: Electron/Chromium correspondence.

    Returns:
        New record including derived environments.
    """
    derived = dict(record)
    chrome = parse_leading_number(record["chrome"]) if "chrome" in record else None
    if chrome is None:
        return derived

    opera = derive_opera(chrome)
    if opera is not None:
        derived["opera"] = format_number(opera)

    electron = electron_table.electron_for_chromium(chrome)
    if electron is not None:
        derived["electron"] = electron

    return derived
