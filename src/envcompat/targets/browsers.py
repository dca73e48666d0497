"""
Browser usage queries.

A ``browsers`` target ("last 2 versions", "> 1%", ...) is resolved by an
external query service into "name version" pairs and then reduced to the
lowest version per browser family.
"""

import shutil
import subprocess
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import Any, Protocol

from envcompat.utils.logging import get_logger

log = get_logger(__name__)

# Query service browser names -> target environment names.
BROWSER_NAME_MAP: dict[str, str] = {
    "chrome": "chrome",
    "edge": "edge",
    "firefox": "firefox",
    "ie": "ie",
    "ios_saf": "ios",
    "safari": "safari",
}


class BrowserQueryError(Exception):
    """Error reported by the browser query service."""


class BrowserQuery(Protocol):
    """Resolves browser queries into "name version" strings."""

    def __call__(self, queries: Sequence[str]) -> list[str]: ...


def is_browsers_query_valid(browsers: Any) -> bool:
    """A query is a string or a list of strings."""
    if isinstance(browsers, str):
        return True
    return isinstance(browsers, list) and all(isinstance(q, str) for q in browsers)


def find_browserslist() -> list[str] | None:
    """
    Command prefix for the browserslist CLI.

    Prefers a browserslist executable on PATH, then npx.
    """
    if (path := shutil.which("browserslist")) is not None:
        return [path]
    if (npx := shutil.which("npx")) is not None:
        return [npx, "--no-install", "browserslist"]
    return None


class BrowserslistCLI:
    """Browser query service backed by the browserslist command line tool."""

    def __init__(self, command: list[str] | None = None, cwd: Path | None = None) -> None:
        """
        Initialize the query service.

        Args:
            command: Explicit command prefix. Located automatically if omitted.
            cwd: Directory to run in (browserslist reads project config there).
        """
        self.command = command
        self.cwd = cwd

    def __call__(self, queries: Sequence[str]) -> list[str]:
        command = self.command or find_browserslist()
        if command is None:
            msg = "browserslist not found. Install it with `npm install -g browserslist`"
            raise FileNotFoundError(msg)

        query = ", ".join(queries)
        log.debug("Running browser query", query=query)
        try:
            result = subprocess.run(
                [*command, query],
                capture_output=True,
                text=True,
                check=True,
                timeout=120,
                cwd=self.cwd,
            )
        except subprocess.CalledProcessError as e:
            raise BrowserQueryError(e.stderr.strip() or str(e)) from e
        except subprocess.TimeoutExpired as e:
            msg = f"browserslist did not answer within {e.timeout} seconds"
            raise BrowserQueryError(msg) from e

        return [line.strip() for line in result.stdout.splitlines() if line.strip()]


def _leading_int(text: str) -> int | None:
    digits = ""
    for char in text:
        if not char.isdigit():
            break
        digits += char
    return int(digits) if digits else None


def lowest_versions(browsers: Iterable[str]) -> dict[str, int]:
    """
    Lowest version per browser family.

    Unknown browser names and non-numeric versions ("TP") are skipped;
    ranged versions ("11.0-11.2") count by their leading integer.

    Args:
        browsers: "name version" pairs, e.g. ["chrome 61", "ios_saf 10.3"].

    Returns:
        Family -> lowest major version.
    """
    lowest: dict[str, int] = {}
    for browser in browsers:
        name, _, version = browser.strip().partition(" ")
        family = BROWSER_NAME_MAP.get(name)
        parsed = _leading_int(version.strip())
        if family is None or parsed is None:
            continue
        lowest[family] = min(lowest.get(family, parsed), parsed)
    return lowest


def merge_browsers(
    from_query: Mapping[str, Any], targets: Mapping[str, Any]
) -> dict[str, Any]:
    """
    Overlay explicit targets onto query results.

    Every explicit target except ``browsers`` wins over the query value.
    """
    merged = dict(from_query)
    for key, value in targets.items():
        if key != "browsers":
            merged[key] = value
    return merged
