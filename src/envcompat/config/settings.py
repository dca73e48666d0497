"""
Typed configuration models using Pydantic.

Two configurations exist: the matrix build (where the raw corpus lives and
where artifacts go) and the preset (targets and include/exclude options).
"""

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from envcompat.catalog.features import get_catalog


class CorpusConfig(BaseModel):
    """Location of the raw compat-table corpus."""

    model_config = ConfigDict(frozen=True)

    root: Path = Field(
        default=Path("./compat-table"), description="Root directory of the corpus"
    )
    environments: Path = Field(
        default=Path("environments.json"),
        description="Environment descriptors (relative to root)",
    )
    suites: dict[str, Path] = Field(
        default_factory=lambda: {
            "es6": Path("data-es6.json"),
            "es2016plus": Path("data-es2016plus.json"),
        },
        description="Suite name -> suite file (relative to root), in catalog order",
    )

    @field_validator("suites")
    @classmethod
    def validate_suites(cls, v: dict[str, Path]) -> dict[str, Path]:
        """Ensure at least one suite is configured."""
        if not v:
            msg = "At least one test suite must be configured"
            raise ValueError(msg)
        return v

    def resolve(self, relative: Path) -> Path:
        """Resolve a corpus path against root."""
        return self.root / relative


class CatalogConfig(BaseModel):
    """Optional overrides for the packaged catalog files."""

    model_config = ConfigDict(frozen=True)

    plugin_features: Path | None = Field(default=None)
    builtin_features: Path | None = Field(default=None)
    presets: Path | None = Field(default=None)
    electron_table: Path | None = Field(default=None)


class DataPathsConfig(BaseModel):
    """Where the compiled matrices live."""

    model_config = ConfigDict(frozen=True)

    data_root: Path = Field(
        default=Path("./data"),
        description="Directory holding plugins.json and built-ins.json",
    )


class MatrixBuildConfig(BaseModel):
    """Complete matrix build configuration."""

    model_config = ConfigDict(frozen=True)

    corpus: CorpusConfig = Field(default_factory=CorpusConfig)
    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    data: DataPathsConfig = Field(default_factory=DataPathsConfig)
    environments: list[str] | None = Field(
        default=None,
        description="Environments compiled into the matrix (catalog default if unset)",
    )
    reference_key: str = Field(
        default="babel",
        description="Result key recording whether the reference implementation passes",
    )


def _module_types() -> list[str]:
    return list(get_catalog().module_transformations)


class PresetOptions(BaseModel):
    """
    Options accepted by the preset.

    ``modules`` is a module type or False for no module transform.
    Include/exclude names must be known transforms or polyfills and may not
    appear in both lists.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    targets: dict[str, Any] = Field(default_factory=dict)
    include: list[str] = Field(default_factory=list)
    exclude: list[str] = Field(default_factory=list)
    debug: bool = Field(default=False)
    loose: bool = Field(default=False)
    use_built_ins: bool = Field(default=False, alias="useBuiltIns")
    modules: str | bool = Field(default="commonjs")

    @field_validator("modules")
    @classmethod
    def validate_modules(cls, v: str | bool) -> str | bool:
        """Module type must be False or a known module format."""
        if v is False:
            return v
        module_types = _module_types()
        if v is True or v not in module_types:
            msg = (
                "The 'modules' option must be either false to indicate no modules, "
                f"or a module type which can be one of: {', '.join(module_types)}"
            )
            raise ValueError(msg)
        return v

    @field_validator("include", "exclude")
    @classmethod
    def validate_names(cls, v: list[str], info: Any) -> list[str]:
        """Every include/exclude name must be known."""
        valid = get_catalog().valid_names()
        invalid = [name for name in v if name not in valid]
        if invalid:
            msg = (
                f"The plugins/built-ins {', '.join(invalid)} passed to the "
                f"'{info.field_name}' option are not valid"
            )
            raise ValueError(msg)
        return v

    @model_validator(mode="after")
    def validate_include_exclude_overlap(self) -> "PresetOptions":
        """A name cannot be both included and excluded."""
        duplicates = [name for name in self.include if name in self.exclude]
        if duplicates:
            msg = (
                f"The plugins/built-ins {', '.join(duplicates)} were found in both "
                "the 'include' and 'exclude' options"
            )
            raise ValueError(msg)
        return self

    @property
    def module_type(self) -> str | None:
        """Module format, or None when module transforms are disabled."""
        return None if self.modules is False else str(self.modules)


class PresetConfig(BaseModel):
    """Complete preset configuration."""

    model_config = ConfigDict(frozen=True)

    data: DataPathsConfig = Field(default_factory=DataPathsConfig)
    options: PresetOptions = Field(default_factory=PresetOptions)
    project_root: Path | None = Field(
        default=None,
        description="Project root holding package.json for 'node: engines'",
    )
