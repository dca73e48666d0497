"""
Environment descriptors from the compat-table corpus.

Interpolation copies results between neighbouring environments, so the
descriptors are kept in an explicit ordered sequence that mirrors the
declaration order of the corpus file.
"""

import json
import re
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from envcompat.compat.corpus import CorpusError
from envcompat.utils.logging import get_logger

log = get_logger(__name__)

_QUALIFIER = re.compile(r",.+$")


@dataclass(frozen=True)
class EnvironmentDescriptor:
    """
    One browser or runtime build in the corpus.

    Attributes:
        id: Result key, e.g. "chrome49" or "node6_5".
        full: Full display name, e.g. "Chrome 49" or "Edge 14, Windows".
        short: Short display name.
        family: Engine family tag shared across products (e.g. "Chakra").
        equals: Id of an environment whose results this one duplicates.
        ignore_flagged: Treat copied "flagged" results as failures.
        test_suites: Suites this environment appears in; None means all.
    """

    id: str
    full: str
    short: str | None = None
    family: str | None = None
    equals: str | None = None
    ignore_flagged: bool = False
    test_suites: tuple[str, ...] | None = None

    @property
    def base_name(self) -> str:
        """Full name without a trailing ", qualifier"."""
        return _QUALIFIER.sub("", self.full)

    def shares_lineage(self, other: "EnvironmentDescriptor") -> bool:
        """Same product (base name) or same engine family."""
        if self.base_name == other.base_name:
            return True
        return self.family is not None and self.family == other.family

    def in_suite(self, suite: str) -> bool:
        """Whether the environment takes part in a test suite."""
        return self.test_suites is None or suite in self.test_suites

    @classmethod
    def from_dict(cls, env_id: str, data: dict[str, Any]) -> "EnvironmentDescriptor":
        """Build a descriptor from its corpus JSON form."""
        suites = data.get("test_suites")
        return cls(
            id=env_id,
            full=str(data.get("full", env_id)),
            short=data.get("short"),
            family=data.get("family"),
            equals=data.get("equals"),
            ignore_flagged=bool(data.get("ignore_flagged", False)),
            test_suites=tuple(suites) if isinstance(suites, list) else None,
        )


@dataclass(frozen=True)
class EnvironmentLine:
    """Environments in canonical declaration order."""

    environments: tuple[EnvironmentDescriptor, ...]

    def __iter__(self) -> Iterator[EnvironmentDescriptor]:
        return iter(self.environments)

    def __len__(self) -> int:
        return len(self.environments)

    def for_suite(self, suite: str) -> "EnvironmentLine":
        """Environments taking part in a suite, order preserved."""
        return EnvironmentLine(
            tuple(env for env in self.environments if env.in_suite(suite))
        )


def parse_environments(raw: Any) -> EnvironmentLine:
    """
    Parse environment descriptors.

    Accepts the corpus object form ({id: descriptor}, in file order) or a
    list of descriptors that each carry an ``id``.

    Raises:
        CorpusError: If the structure is not recognised.
    """
    if isinstance(raw, dict):
        items = [(str(env_id), data) for env_id, data in raw.items()]
    elif isinstance(raw, list):
        items = []
        for data in raw:
            if not isinstance(data, dict) or "id" not in data:
                msg = f"Environment entries must be objects with an 'id', got: {data!r}"
                raise CorpusError(msg)
            items.append((str(data["id"]), data))
    else:
        msg = f"Environments must be an object or a list, got {type(raw).__name__}"
        raise CorpusError(msg)

    for env_id, data in items:
        if not isinstance(data, dict):
            msg = f"Environment '{env_id}' must be an object, got {type(data).__name__}"
            raise CorpusError(msg)

    return EnvironmentLine(
        tuple(EnvironmentDescriptor.from_dict(env_id, data) for env_id, data in items)
    )


def load_environments(path: Path) -> EnvironmentLine:
    """Load environment descriptors from a JSON file."""
    try:
        with path.open(encoding="utf-8") as f:
            raw = json.load(f)
    except json.JSONDecodeError as e:
        msg = f"Malformed environments file {path}: {e}"
        raise CorpusError(msg) from e

    line = parse_environments(raw)
    log.info("Loaded environments", path=str(path), count=len(line))
    return line
