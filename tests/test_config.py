"""Tests for configuration system."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from envcompat.config import (
    CorpusConfig,
    PresetOptions,
    load_build_config,
    load_preset_config,
)
from envcompat.config.loader import load_yaml


class TestPresetOptions:
    """Tests for PresetOptions validation."""

    def test_defaults(self) -> None:
        """Defaults select commonjs modules and no polyfills."""
        options = PresetOptions()
        assert options.module_type == "commonjs"
        assert not options.use_built_ins
        assert options.targets == {}

    def test_modules_disabled(self) -> None:
        """False disables the module transform."""
        assert PresetOptions(modules=False).module_type is None

    @pytest.mark.parametrize("modules", ["es6", True])
    def test_invalid_modules(self, modules: object) -> None:
        """Unknown module types are rejected."""
        with pytest.raises(ValidationError, match="'modules' option"):
            PresetOptions(modules=modules)

    def test_use_built_ins_alias(self) -> None:
        """useBuiltIns is accepted alongside use_built_ins."""
        assert PresetOptions(useBuiltIns=True).use_built_ins
        assert PresetOptions(use_built_ins=True).use_built_ins

    def test_unknown_include(self) -> None:
        """Include names must be known transforms or polyfills."""
        with pytest.raises(ValidationError, match="transform-nope"):
            PresetOptions(include=["transform-nope"])

    def test_known_names(self) -> None:
        """Transforms, module transforms and polyfills are valid names."""
        options = PresetOptions(
            include=["transform-es2015-modules-amd", "web.timers"],
            exclude=["transform-regenerator", "es6.promise"],
        )
        assert options.exclude == ["transform-regenerator", "es6.promise"]

    def test_include_exclude_overlap(self) -> None:
        """A name may not be both included and excluded."""
        with pytest.raises(ValidationError, match="both"):
            PresetOptions(include=["es6.map"], exclude=["es6.map"])

    def test_frozen(self) -> None:
        """Options are immutable."""
        options = PresetOptions()
        with pytest.raises(ValidationError):
            options.debug = True  # type: ignore[misc]


class TestCorpusConfig:
    """Tests for CorpusConfig."""

    def test_resolve(self) -> None:
        """Corpus files resolve against the root."""
        config = CorpusConfig(root=Path("/corpus"))
        assert config.resolve(config.environments) == Path("/corpus/environments.json")
        assert list(config.suites) == ["es6", "es2016plus"]

    def test_suites_required(self) -> None:
        """At least one suite must be configured."""
        with pytest.raises(ValidationError, match="At least one test suite"):
            CorpusConfig(suites={})


class TestConfigLoader:
    """Tests for YAML loading."""

    def test_load_build_config(self, build_config_file: Path, corpus_dir: Path) -> None:
        """Build configuration maps onto the typed models."""
        config = load_build_config(build_config_file)

        assert config.corpus.root == corpus_dir
        assert list(config.corpus.suites) == ["es6", "es2016plus"]
        assert config.catalog.plugin_features == corpus_dir / "plugin-features.json"
        assert config.catalog.presets is None
        assert config.environments[0] == "chrome"
        assert config.reference_key == "babel"

    def test_env_var_interpolation(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """${VAR} and ${VAR:default} are expanded."""
        monkeypatch.setenv("ENVCOMPAT_CORPUS", "/srv/compat-table")
        monkeypatch.delenv("ENVCOMPAT_DATA", raising=False)
        config_file = tmp_path / "build.yaml"
        config_file.write_text(
            "corpus:\n  root: ${ENVCOMPAT_CORPUS}\ndata:\n  root: ${ENVCOMPAT_DATA:./out}\n",
            encoding="utf-8",
        )

        config = load_build_config(config_file)

        assert config.corpus.root == Path("/srv/compat-table")
        assert config.data.data_root == Path("./out")

    def test_base_config_merge(self, tmp_path: Path) -> None:
        """base.yaml next to the config is deep-merged underneath it."""
        (tmp_path / "base.yaml").write_text(
            "data:\n  root: ./shared-data\ntargets:\n  chrome: 49\n", encoding="utf-8"
        )
        config_file = tmp_path / "preset.yaml"
        config_file.write_text(
            "targets:\n  node: 6\nuseBuiltIns: true\nexclude: [transform-regenerator]\n",
            encoding="utf-8",
        )

        config = load_preset_config(config_file)

        assert config.data.data_root == Path("./shared-data")
        assert config.options.targets == {"chrome": 49, "node": 6}
        assert config.options.use_built_ins
        assert config.options.exclude == ["transform-regenerator"]

    def test_non_mapping_config(self, tmp_path: Path) -> None:
        """Config files must contain a mapping."""
        config_file = tmp_path / "broken.yaml"
        config_file.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ValueError, match="must contain a mapping"):
            load_yaml(config_file)

    def test_empty_config(self, tmp_path: Path) -> None:
        """An empty file gives defaults."""
        config_file = tmp_path / "preset.yaml"
        config_file.write_text("", encoding="utf-8")

        config = load_preset_config(config_file)

        assert config.options == PresetOptions()
        assert config.project_root is None
