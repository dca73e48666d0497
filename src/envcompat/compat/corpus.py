"""
Raw compat-table test data.

A suite (e.g. "es6", "es2016plus") is a list of tests. Each test carries a
result per environment key (``True``, ``False``, ``"flagged"`` or
``"strict"``) or, for composite tests, a list of subtests with their own
results.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Union

from envcompat.utils.logging import get_logger

log = get_logger(__name__)

RawResult = Union[bool, str, None]

BUILTIN_CATEGORIES = frozenset({"built-ins", "built-in extensions"})


class CorpusError(ValueError):
    """Raw compatibility data could not be read."""


@dataclass(frozen=True)
class CompatSubtest:
    """One subtest of a composite test."""

    name: str
    res: dict[str, RawResult] = field(default_factory=dict)


@dataclass(frozen=True)
class CompatTest:
    """
    A compat-table test.

    Attributes:
        name: Test name, e.g. "arrow functions" or "Map".
        category: Corpus category ("built-ins", "functions", ...).
        res: Results of a simple test, keyed by environment id.
        subtests: Subtests of a composite test (all must pass).
    """

    name: str
    category: str | None = None
    res: dict[str, RawResult] = field(default_factory=dict)
    subtests: tuple[CompatSubtest, ...] = ()

    @property
    def is_composite(self) -> bool:
        """Whether support is decided by subtests."""
        return bool(self.subtests)

    @property
    def is_builtin(self) -> bool:
        """Whether the test tracks a built-in API rather than syntax."""
        return self.category in BUILTIN_CATEGORIES


@dataclass(frozen=True)
class TestSuite:
    """A named collection of tests."""

    __test__ = False  # keep pytest from collecting this class

    name: str
    tests: tuple[CompatTest, ...]


def _parse_results(raw: Any, where: str) -> dict[str, RawResult]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        msg = f"Results of {where} must be an object, got {type(raw).__name__}"
        raise CorpusError(msg)
    return dict(raw)


def parse_test(raw: dict[str, Any]) -> CompatTest:
    """Parse one test from its JSON form."""
    name = raw.get("name")
    if not isinstance(name, str):
        msg = f"Test without a name: {raw!r}"
        raise CorpusError(msg)

    subtests = tuple(
        CompatSubtest(
            name=str(sub.get("name")),
            res=_parse_results(sub.get("res"), f"'{name} / {sub.get('name')}'"),
        )
        for sub in raw.get("subtests") or []
    )
    return CompatTest(
        name=name,
        category=raw.get("category"),
        res=_parse_results(raw.get("res"), f"'{name}'"),
        subtests=subtests,
    )


def parse_suite(name: str, raw: Any) -> TestSuite:
    """
    Parse a suite from ``{"tests": [...]}`` or a bare list of tests.

    Raises:
        CorpusError: If the structure is not recognised.
    """
    tests = raw.get("tests") if isinstance(raw, dict) else raw
    if not isinstance(tests, list):
        msg = f"Suite '{name}' must contain a list of tests"
        raise CorpusError(msg)
    return TestSuite(name=name, tests=tuple(parse_test(test) for test in tests))


def load_suite(name: str, path: Path) -> TestSuite:
    """Load a test suite from a JSON file."""
    try:
        with path.open(encoding="utf-8") as f:
            raw = json.load(f)
    except json.JSONDecodeError as e:
        msg = f"Malformed suite file {path}: {e}"
        raise CorpusError(msg) from e

    suite = parse_suite(name, raw)
    log.info("Loaded test suite", suite=name, path=str(path), tests=len(suite.tests))
    return suite
