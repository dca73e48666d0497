"""Tests for target resolution."""

import json
import subprocess
from collections.abc import Sequence
from pathlib import Path

import pytest

from envcompat.catalog.electron import ElectronChromiumTable
from envcompat.compat.artifacts import CompatData
from envcompat.targets import (
    BrowserQueryError,
    BrowserslistCLI,
    ManifestError,
    TargetsConfigurationError,
    TargetsResolver,
    desemverify,
    electron_version_to_chrome_version,
    lowest_versions,
    merge_browsers,
    supported_node_versions,
)
from envcompat.utils.versions import parse_leading_number


class FakeBrowserQuery:
    """Browser query service returning canned results."""

    def __init__(self, browsers: list[str]) -> None:
        self.browsers = browsers
        self.queries: list[Sequence[str]] = []

    def __call__(self, queries: Sequence[str]) -> list[str]:
        self.queries.append(queries)
        return self.browsers


class FailingBrowserQuery:
    """Browser query service rejecting every query."""

    def __call__(self, queries: Sequence[str]) -> list[str]:
        msg = f"Unknown browser query `{queries[0]}`"
        raise BrowserQueryError(msg)


BROWSERS = ["chrome 61", "chrome 60", "ios_saf 10.0-10.2", "ios_saf 9.3", "safari TP", "op_mini all"]


@pytest.fixture
def resolver(compat_data: CompatData, electron_table: ElectronChromiumTable) -> TargetsResolver:
    return TargetsResolver(
        data=compat_data,
        electron_table=electron_table,
        browser_query=FakeBrowserQuery(BROWSERS),
        node_version=lambda: 8.9,
    )


def _write_manifest(root: Path, engines: object) -> None:
    (root / "package.json").write_text(json.dumps({"name": "app", "engines": engines}), encoding="utf-8")


class TestBrowsers:
    """Tests for browser query reduction."""

    def test_lowest_versions(self) -> None:
        """One lowest major per family; unknown names and labels are skipped."""
        assert lowest_versions(BROWSERS) == {"chrome": 60, "ios": 9}

    def test_explicit_targets_win(self) -> None:
        """Explicit targets override query values and browsers is dropped."""
        merged = merge_browsers({"chrome": 60, "ios": 9}, {"browsers": "> 1%", "chrome": 55})
        assert merged == {"chrome": 55, "ios": 9}

    def test_resolve_browsers(self, resolver: TargetsResolver) -> None:
        """String queries are passed as a single-item list."""
        resolved = resolver.resolve({"browsers": "> 1%", "node": 6})

        assert resolved == {"chrome": 60, "ios": 9, "node": 6}
        assert resolver.browser_query.queries == [["> 1%"]]

    def test_invalid_query_type(self, resolver: TargetsResolver) -> None:
        """Queries must be strings."""
        with pytest.raises(TargetsConfigurationError, match="browsers"):
            resolver.resolve({"browsers": 5})

    def test_query_errors_propagate(self, compat_data: CompatData) -> None:
        """Errors from the query service are not wrapped."""
        resolver = TargetsResolver(data=compat_data, browser_query=FailingBrowserQuery())
        with pytest.raises(BrowserQueryError, match="Unknown browser query"):
            resolver.resolve({"browsers": ["nonsense"]})

    def test_cli_timeout(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """A browserslist timeout is reported as a query error."""

        def run(command: list[str], **kwargs: object) -> None:
            raise subprocess.TimeoutExpired(command, timeout=120)

        monkeypatch.setattr(subprocess, "run", run)
        query = BrowserslistCLI(command=["browserslist"])

        with pytest.raises(BrowserQueryError, match="120 seconds"):
            query(["last 2 versions"])


class TestNodeTargets:
    """Tests for node target resolution."""

    @pytest.mark.parametrize("node", [True, "current"])
    def test_current(self, resolver: TargetsResolver, node: object) -> None:
        """The running node version replaces the token."""
        assert resolver.resolve({"node": node}) == {"node": 8.9}

    def test_explicit_version_untouched(self, resolver: TargetsResolver) -> None:
        """Numeric node targets pass through."""
        assert resolver.resolve({"node": 6.5, "chrome": 49}) == {"node": 6.5, "chrome": 49}

    def test_desemverify(self) -> None:
        """Node --version output reduces to major.minor."""
        assert desemverify("v8.9.4") == 8.9
        assert desemverify("10.0.0") == 10.0

    def test_desemverify_matches_matrix_tokens(self) -> None:
        """A two-digit minor reads as a decimal fraction, like matrix tokens."""
        assert desemverify("v8.10.0") == 8.1
        assert desemverify("v8.10.0") == parse_leading_number("8.10")

    def test_supported_versions(self, compat_data: CompatData) -> None:
        """Node tokens come from the plugin matrix, optionally built-ins."""
        assert supported_node_versions(compat_data) == {"6", "6.5", "7"}
        assert supported_node_versions(compat_data, use_built_ins=True) == {
            "6",
            "6.5",
            "7",
            "0.12",
        }

    def test_engines(self, resolver: TargetsResolver, tmp_path: Path) -> None:
        """The lowest known version satisfying engines.node is used."""
        _write_manifest(tmp_path, {"node": ">=6.1"})
        assert resolver.resolve({"node": "engines"}, root=tmp_path) == {"node": 6.5}

    def test_engines_with_built_ins(self, resolver: TargetsResolver, tmp_path: Path) -> None:
        """Built-in versions are considered when polyfills are in use."""
        _write_manifest(tmp_path, {"node": ">=0.10"})
        assert resolver.resolve({"node": "engines"}, use_built_ins=True, root=tmp_path) == {
            "node": 0.12
        }

    def test_engines_unsatisfiable(self, resolver: TargetsResolver, tmp_path: Path) -> None:
        """No known version in range is a configuration error."""
        _write_manifest(tmp_path, {"node": ">=20"})
        with pytest.raises(TargetsConfigurationError, match="satisfies"):
            resolver.resolve({"node": "engines"}, root=tmp_path)

    def test_missing_manifest(self, resolver: TargetsResolver, tmp_path: Path) -> None:
        """A missing package.json is a manifest error."""
        with pytest.raises(ManifestError, match="package.json"):
            resolver.resolve({"node": "engines"}, root=tmp_path)

    def test_malformed_manifest(self, resolver: TargetsResolver, tmp_path: Path) -> None:
        """Malformed JSON is reported, not defaulted."""
        (tmp_path / "package.json").write_text("{not json", encoding="utf-8")
        with pytest.raises(ManifestError, match="Malformed"):
            resolver.resolve({"node": "engines"}, root=tmp_path)

    def test_manifest_without_engines(self, resolver: TargetsResolver, tmp_path: Path) -> None:
        """engines.node must be declared."""
        _write_manifest(tmp_path, {})
        with pytest.raises(ManifestError, match="engines.node"):
            resolver.resolve({"node": "engines"}, root=tmp_path)


class TestElectronTargets:
    """Tests for folding electron into chrome."""

    def test_bare_major(self, electron_table: ElectronChromiumTable) -> None:
        """'1' is looked up as '1.0'."""
        assert electron_version_to_chrome_version(electron_table, "1") == 49

    def test_unknown_release(self, electron_table: ElectronChromiumTable) -> None:
        """Releases outside the table are configuration errors."""
        with pytest.raises(TargetsConfigurationError, match="too old or too new"):
            electron_version_to_chrome_version(electron_table, "0.1")

    def test_malformed_release(self, electron_table: ElectronChromiumTable) -> None:
        """Non-version strings are rejected."""
        with pytest.raises(TargetsConfigurationError, match="semver"):
            electron_version_to_chrome_version(electron_table, "latest")

    def test_folded_into_chrome(self, resolver: TargetsResolver) -> None:
        """The electron target becomes a chrome target."""
        assert resolver.resolve({"electron": "1.1"}) == {"chrome": 50}

    def test_lower_of_chrome_and_electron(self, resolver: TargetsResolver) -> None:
        """With both present, the older chrome version wins."""
        assert resolver.resolve({"electron": "1.4", "chrome": 51}) == {"chrome": 51}
        assert resolver.resolve({"electron": "1.0", "chrome": 51}) == {"chrome": 49}

    def test_input_not_mutated(self, resolver: TargetsResolver) -> None:
        """Resolution returns a new mapping."""
        targets = {"electron": "1.0", "node": "current"}
        resolver.resolve(targets)
        assert targets == {"electron": "1.0", "node": "current"}
