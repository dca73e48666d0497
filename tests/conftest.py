"""Pytest configuration and shared fixtures."""

import json
from pathlib import Path
from typing import Any

import pytest

from envcompat.catalog.electron import ElectronChromiumTable
from envcompat.catalog.features import FeatureDefinition
from envcompat.compat.artifacts import CompatData
from envcompat.compat.corpus import TestSuite, parse_suite
from envcompat.compat.environments import EnvironmentLine, parse_environments

ENVIRONMENTS: dict[str, Any] = {
    "ie11": {"full": "Internet Explorer", "family": "Chakra"},
    "edge13": {"full": "Microsoft Edge", "family": "Chakra"},
    "edge14": {"full": "Microsoft Edge", "family": "Chakra"},
    "firefox45": {"full": "Firefox"},
    "firefox52": {"full": "Firefox"},
    "chrome28": {"full": "Chrome"},
    "chrome49": {"full": "Chrome"},
    "chrome51": {"full": "Chrome"},
    "safari9": {"full": "Safari"},
    "safari10": {"full": "Safari"},
    "safaritp": {"full": "Safari Technology Preview"},
    "node6": {"full": "Node.js", "equals": "chrome51", "ignore_flagged": True},
    "node6_5": {"full": "Node.js"},
}

ES6_SUITE: dict[str, Any] = {
    "tests": [
        {
            "name": "arrow functions",
            "category": "functions",
            "res": {
                "babel": True,
                "ie11": False,
                "edge13": True,
                "firefox45": True,
                "chrome28": False,
                "chrome49": True,
                "safari9": False,
                "safari10": True,
            },
        },
        {
            "name": "default function parameters",
            "category": "functions",
            "subtests": [
                {
                    "name": "basic functionality",
                    "res": {
                        "babel": True,
                        "edge14": True,
                        "firefox45": True,
                        "chrome49": True,
                        "safari10": True,
                    },
                },
                {
                    "name": "temporal dead zone",
                    "res": {
                        "babel": True,
                        "edge14": True,
                        "firefox52": False,
                        "chrome51": True,
                        "safari10": True,
                    },
                },
            ],
        },
        {
            "name": "Map",
            "category": "built-ins",
            "res": {
                "babel": True,
                "ie11": True,
                "chrome28": False,
                "chrome49": True,
                "firefox45": True,
                "safari9": True,
            },
        },
        {
            "name": "WeakThing",
            "category": "built-ins",
            "res": {"babel": False, "chrome49": True, "firefox45": True},
        },
    ]
}

ES2016PLUS_SUITE: dict[str, Any] = {
    "tests": [
        {
            "name": "exponentiation (**) operator",
            "category": "2016 features",
            "res": {
                "babel": True,
                "chrome49": "flagged",
                "chrome51": "flagged",
                "edge14": True,
                "firefox52": True,
                "safaritp": True,
            },
        }
    ]
}

TARGET_ENVIRONMENTS = ["chrome", "opera", "edge", "firefox", "safari", "node", "ie"]

PLUGIN_FEATURES: dict[str, Any] = {
    "transform-es2015-arrow-functions": {"features": ["arrow functions"]},
    "transform-es2015-parameters": {"features": ["default function parameters"]},
    "transform-exponentiation-operator": {"features": ["exponentiation (**) operator"]},
}

BUILTIN_FEATURES: dict[str, Any] = {
    "es6.map": "Map",
    "es6.weak-thing": "WeakThing",
}


@pytest.fixture
def environments() -> EnvironmentLine:
    """Small environment line in canonical order."""
    return parse_environments(ENVIRONMENTS)


@pytest.fixture
def target_environments() -> list[str]:
    """Environments compiled into the sample matrices."""
    return list(TARGET_ENVIRONMENTS)


@pytest.fixture
def suites() -> list[TestSuite]:
    """The es6 and es2016plus sample suites."""
    return [
        parse_suite("es6", ES6_SUITE),
        parse_suite("es2016plus", ES2016PLUS_SUITE),
    ]


@pytest.fixture
def electron_table() -> ElectronChromiumTable:
    """Reduced Electron/Chromium correspondence table."""
    return ElectronChromiumTable(
        versions={
            "0.36": "47",
            "0.37": "49",
            "1.0": "49",
            "1.1": "50",
            "1.4": "53",
        }
    )


@pytest.fixture
def plugin_features() -> list[FeatureDefinition]:
    """Plugin feature definitions covering the sample suites."""
    return [
        FeatureDefinition(name=name, tests=tuple(entry["features"]))
        for name, entry in PLUGIN_FEATURES.items()
    ]


@pytest.fixture
def builtin_features() -> list[FeatureDefinition]:
    """Built-in feature definitions covering the sample suites."""
    return [
        FeatureDefinition(name=name, tests=(test,))
        for name, test in BUILTIN_FEATURES.items()
    ]


@pytest.fixture
def compat_data() -> CompatData:
    """Compiled matrices using names from the packaged catalog."""
    return CompatData(
        plugins={
            "transform-es2015-arrow-functions": {"chrome": "47", "node": "6", "safari": "10"},
            "transform-regenerator": {"chrome": "50", "node": "6.5"},
            "transform-exponentiation-operator": {"chrome": "52", "node": "7", "safari": "tp"},
        },
        built_ins={
            "es6.map": {"chrome": "51", "node": "6.5"},
            "es6.promise": {"chrome": "33", "node": "0.12"},
        },
    )


@pytest.fixture
def corpus_dir(tmp_path: Path) -> Path:
    """Write the sample corpus and catalog overrides to disk."""
    corpus = tmp_path / "compat-table"
    corpus.mkdir()
    (corpus / "environments.json").write_text(json.dumps(ENVIRONMENTS), encoding="utf-8")
    (corpus / "data-es6.json").write_text(json.dumps(ES6_SUITE), encoding="utf-8")
    (corpus / "data-es2016plus.json").write_text(
        json.dumps(ES2016PLUS_SUITE), encoding="utf-8"
    )
    (corpus / "plugin-features.json").write_text(
        json.dumps(PLUGIN_FEATURES), encoding="utf-8"
    )
    (corpus / "built-in-features.json").write_text(
        json.dumps(BUILTIN_FEATURES), encoding="utf-8"
    )
    return corpus


@pytest.fixture
def build_config_file(tmp_path: Path, corpus_dir: Path) -> Path:
    """Matrix build configuration pointing at the sample corpus."""
    config = tmp_path / "build.yaml"
    config.write_text(
        f"""
corpus:
  root: {corpus_dir}
  environments: environments.json
  suites:
    es6: data-es6.json
    es2016plus: data-es2016plus.json
catalog:
  plugin_features: {corpus_dir / 'plugin-features.json'}
  builtin_features: {corpus_dir / 'built-in-features.json'}
data:
  root: {tmp_path / 'data'}
environments: [{', '.join(TARGET_ENVIRONMENTS)}]
""",
        encoding="utf-8",
    )
    return config
