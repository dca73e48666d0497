"""
Per-feature, per-environment minimum version scoring.

A feature is tracked by one or more tests. Composite tests are flattened
into one scoring unit per subtest. The feature is supported in an
environment only if every unit passes there in some version; its minimum
version is the latest of the units' minimums.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from envcompat.catalog.features import FeatureDefinition
from envcompat.compat.corpus import CompatTest, RawResult, TestSuite
from envcompat.utils.logging import get_logger
from envcompat.utils.versions import format_number, parse_leading_number

log = get_logger(__name__)

DEFAULT_REFERENCE_KEY = "babel"


@dataclass(frozen=True)
class ScoringUnit:
    """
    One independently scored result set.

    Attributes:
        name: Test name, or "parent/subtest" for flattened subtests.
        res: Interpolated results keyed by environment id.
        is_builtin: Whether the unit tracks a built-in API.
    """

    name: str
    res: dict[str, RawResult]
    is_builtin: bool = False


def is_passing(result: RawResult) -> bool:
    """True and strict-mode-only passes count; flagged results do not."""
    return result is True or result == "strict"


def build_test_catalog(suites: Iterable[TestSuite]) -> list[CompatTest]:
    """
    List every selectable test.

    Composite tests appear as themselves and each of their subtests also
    appears as a standalone test named "<parent> / <subtest>".
    """
    catalog: list[CompatTest] = []
    for suite in suites:
        for test in suite.tests:
            catalog.append(test)
            catalog.extend(
                CompatTest(name=f"{test.name} / {sub.name}", res=sub.res)
                for sub in test.subtests
            )
    return catalog


def select_units(
    feature: FeatureDefinition, catalog: Sequence[CompatTest]
) -> list[ScoringUnit]:
    """
    Collect the scoring units of a feature.

    Tests match by exact name, or by name prefix when the feature names a
    single test (so "DataView" also covers "DataView (Int8)").
    """
    prefix = feature.tests[0] if feature.is_prefix_match else None
    units: list[ScoringUnit] = []
    for test in catalog:
        if test.name not in feature.tests and not (
            prefix is not None and test.name.startswith(prefix)
        ):
            continue
        if test.is_composite:
            units.extend(
                ScoringUnit(
                    name=f"{test.name}/{sub.name}",
                    res=sub.res,
                    is_builtin=test.is_builtin,
                )
                for sub in test.subtests
            )
        else:
            units.append(ScoringUnit(name=test.name, res=test.res, is_builtin=test.is_builtin))
    return units


def _reposition_unreleased(keys: list[str], env: str, unreleased_key: str) -> list[str]:
    """Move the unreleased key right after the latest released key of env."""
    latest_key = None
    latest_version = None
    for key in keys:
        if not key.startswith(env) or key == unreleased_key:
            continue
        version = parse_leading_number(key[len(env):])
        if not latest_version or (version is not None and version > latest_version):
            latest_key = key
            latest_version = version

    if latest_key is None:
        return keys

    reordered = [key for key in keys if key != unreleased_key]
    reordered.insert(reordered.index(latest_key) + 1, unreleased_key)
    return reordered


def unit_minimum_version(
    unit: ScoringUnit,
    env: str,
    unreleased_label: str | None = None,
    reference_key: str = DEFAULT_REFERENCE_KEY,
) -> str | None:
    """
    First passing version of a unit in an environment.

    Built-in units only count where the reference implementation also
    passes the test; otherwise the unit never qualifies.

    Args:
        unit: Scoring unit.
        env: Environment id prefix (e.g. "chrome").
        unreleased_label: Label of the env's unreleased build (e.g. "tp").
        reference_key: Result key recording the reference implementation.

    Returns:
        Version token (e.g. "49", "10.1", "tp") or None.
    """
    if unit.is_builtin and not unit.res.get(reference_key):
        return None

    keys = list(unit.res)
    if unreleased_label:
        unreleased_key = env + unreleased_label
        if unreleased_key in unit.res:
            keys = _reposition_unreleased(keys, env, unreleased_key)

    for key in keys:
        if not key.startswith(env) or not is_passing(unit.res[key]):
            continue
        version = key.replace("_", ".", 1).replace(env, "", 1)
        if version == unreleased_label or parse_leading_number(version) is not None:
            return version
    return None


def lowest_implemented_version(
    units: Sequence[ScoringUnit],
    env: str,
    unreleased_label: str | None = None,
    reference_key: str = DEFAULT_REFERENCE_KEY,
) -> str | None:
    """
    Minimum version at which every unit of a feature passes.

    Args:
        units: The feature's scoring units.
        env: Environment id prefix.
        unreleased_label: Label of the env's unreleased build.
        reference_key: Result key recording the reference implementation.

    Returns:
        Version token, or None when any unit never qualifies.
    """
    if not units:
        return None

    minimums = [
        unit_minimum_version(unit, env, unreleased_label, reference_key) for unit in units
    ]
    missing = [unit.name for unit, version in zip(units, minimums) if version is None]
    if missing:
        log.debug("Unsupported units", env=env, units=missing)
        return None

    best: float | str | None = None
    for version in minimums:
        value: float | str = (
            version if version == unreleased_label else parse_leading_number(version)
        )
        if best is None or value == unreleased_label:
            best = value
        elif best != unreleased_label and best < value:
            best = value

    if best == unreleased_label:
        return unreleased_label
    return format_number(best)
