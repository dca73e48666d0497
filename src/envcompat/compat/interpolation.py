"""
Result interpolation across related environments.

Environments that equal another environment (node 4 and chrome 45) copy
its results, and consecutive builds of the same product or engine family
(edge and ie11) inherit results they lack from their predecessor. The
sweep runs in canonical declaration order; a different order gives
different results.
"""

from dataclasses import replace

from envcompat.compat.corpus import CompatSubtest, CompatTest, RawResult, TestSuite
from envcompat.compat.environments import EnvironmentLine
from envcompat.utils.logging import get_logger

log = get_logger(__name__)


def _sweep(res: dict[str, RawResult], environments: EnvironmentLine) -> None:
    """Fill gaps in one result set, in place."""
    previous = None
    for env in environments:
        if env.equals and env.id not in res:
            if env.equals in res:
                result = res[env.equals]
                res[env.id] = (
                    False if env.ignore_flagged and result == "flagged" else result
                )
        elif previous is not None and env.shares_lineage(previous):
            if previous.id in res and env.id not in res:
                res[env.id] = res[previous.id]
        previous = env


def interpolate_results(
    res: dict[str, RawResult], environments: EnvironmentLine
) -> dict[str, RawResult]:
    """
    Interpolate one result set.

    Args:
        res: Raw results keyed by environment id.
        environments: Environments in canonical order.

    Returns:
        A new result mapping; the input is left untouched.
    """
    filled = dict(res)
    _sweep(filled, environments)
    return filled


def _interpolate_test(test: CompatTest, environments: EnvironmentLine) -> CompatTest:
    if test.is_composite:
        subtests = tuple(
            CompatSubtest(name=sub.name, res=interpolate_results(sub.res, environments))
            for sub in test.subtests
        )
        return replace(test, subtests=subtests)
    return replace(test, res=interpolate_results(test.res, environments))


def interpolate_suite(suite: TestSuite, environments: EnvironmentLine) -> TestSuite:
    """
    Interpolate every test of a suite.

    Only environments taking part in the suite are considered.

    Args:
        suite: Raw test suite.
        environments: All environments in canonical order.

    Returns:
        New suite with interpolated results.
    """
    suite_environments = environments.for_suite(suite.name)
    log.debug(
        "Interpolating suite",
        suite=suite.name,
        tests=len(suite.tests),
        environments=len(suite_environments),
    )
    return TestSuite(
        name=suite.name,
        tests=tuple(_interpolate_test(test, suite_environments) for test in suite.tests),
    )
