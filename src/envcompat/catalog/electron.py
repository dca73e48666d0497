"""
Electron / Chromium version correspondence.

Each Electron release line (``major.minor``) bundles one Chromium major.
The table is read in both directions: Electron targets become Chrome
targets, and Chrome support in the matrix yields the earliest Electron
release that ships it.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path

from envcompat.catalog.features import ELECTRON_TABLE_FILE
from envcompat.utils.versions import format_number


def _release_key(release: str) -> tuple[int, ...]:
    return tuple(int(part) for part in release.split("."))


def normalize_electron_version(version: str | int | float) -> str:
    """
    Reduce an Electron version to its ``major.minor`` release line.

    A bare major gets ``.0`` appended, so ``"1"`` becomes ``"1.0"``.
    """
    parts = str(version).strip().lstrip("v").split(".")
    if len(parts) == 1:
        parts.append("0")
    return ".".join(parts[:2])


@dataclass(frozen=True)
class ElectronChromiumTable:
    """
    Electron release line -> bundled Chromium major.

    Attributes:
        versions: Mapping such as {"1.0": "49", "1.1": "50"}.
    """

    versions: dict[str, str]
    _by_chromium: dict[int, str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        by_chromium: dict[int, str] = {}
        # Newest first, so the oldest release bundling a Chromium wins.
        for release in sorted(self.versions, key=_release_key, reverse=True):
            by_chromium[int(self.versions[release])] = release
        object.__setattr__(
            self, "_by_chromium", dict(sorted(by_chromium.items()))
        )

    @property
    def max_chromium(self) -> int | None:
        """Newest Chromium major known to the table."""
        if not self._by_chromium:
            return None
        return next(reversed(self._by_chromium))

    def chromium_for(self, electron_version: str | int | float) -> str | None:
        """
        Chromium major bundled with an Electron version.

        Args:
            electron_version: Any Electron version ("1", "1.4", "1.4.3").

        Returns:
            Chromium major as a string, or None if the release is unknown.
        """
        return self.versions.get(normalize_electron_version(electron_version))

    def electron_for_chromium(self, chromium: float) -> str | None:
        """
        Earliest Electron release that ships at least the given Chromium.

        An exact Chromium match returns that release; otherwise the release
        of the smallest Chromium above the value is returned. Values beyond
        the newest known Chromium give None.

        Args:
            chromium: Chromium (Chrome) version.

        Returns:
            Electron version token (e.g. "1", "0.37", "1.4") or None.
        """
        max_chromium = self.max_chromium
        if max_chromium is None or chromium > max_chromium:
            return None
        for known, release in self._by_chromium.items():
            if chromium <= known:
                return format_number(float(release))
        return None


def load_electron_table(path: Path | None = None) -> ElectronChromiumTable:
    """Load the correspondence table (packaged JSON by default)."""
    with (path or ELECTRON_TABLE_FILE).open(encoding="utf-8") as f:
        versions = json.load(f)
    return ElectronChromiumTable(versions={str(k): str(v) for k, v in versions.items()})
