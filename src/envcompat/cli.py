"""Command-line interface for envcompat."""

from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from pandera.errors import SchemaError
from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from envcompat.compat.builder import CompiledMatrices
    from envcompat.config.settings import MatrixBuildConfig
    from envcompat.preset.core import PresetResult

app = typer.Typer(
    name="envcompat",
    help="Compile compatibility matrices and select transforms for target environments.",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)

MATRIX_CHOICES = ("plugins", "built-ins")


@app.callback()
def main(
    log_level: Annotated[
        str,
        typer.Option("--log-level", help="Log level (DEBUG, INFO, WARNING, ERROR)."),
    ] = "WARNING",
    json_logs: Annotated[
        bool,
        typer.Option("--json-logs", help="Emit log events as JSON lines."),
    ] = False,
) -> None:
    """Configure logging for every command."""
    from envcompat.utils.logging import configure_logging

    configure_logging(level=log_level, json_output=json_logs)


def _fail(message: str) -> typer.Exit:
    err_console.print(f"[red]Error: {message}[/red]")
    return typer.Exit(code=1)


def _compile(build_config: "MatrixBuildConfig") -> "CompiledMatrices":
    from envcompat.catalog import load_catalog, load_electron_table
    from envcompat.compat import (
        CompatibilityMatrixBuilder,
        load_environments,
        load_suite,
    )

    catalog = load_catalog(
        plugin_features=build_config.catalog.plugin_features,
        builtin_features=build_config.catalog.builtin_features,
        presets=build_config.catalog.presets,
    )
    corpus = build_config.corpus
    builder = CompatibilityMatrixBuilder(
        environments=load_environments(corpus.resolve(corpus.environments)),
        suites=[
            load_suite(name, corpus.resolve(path)) for name, path in corpus.suites.items()
        ],
        electron_table=load_electron_table(build_config.catalog.electron_table),
        target_environments=build_config.environments or list(catalog.environments),
        unreleased_labels=catalog.unreleased_labels,
        reference_key=build_config.reference_key,
    )
    return builder.build_all(catalog.plugin_features, catalog.builtin_features)


@app.command("build-data")
def build_data(
    config: Annotated[
        Path,
        typer.Option(
            "--config",
            "-c",
            help="Path to the matrix build configuration YAML file.",
            exists=True,
            dir_okay=False,
        ),
    ],
    check: Annotated[
        bool,
        typer.Option(
            "--check",
            help="Compare with the existing artifacts instead of writing them.",
        ),
    ] = False,
) -> None:
    """Compile plugins.json and built-ins.json from the compat-table corpus."""
    from envcompat.compat import check_matrices, write_matrices
    from envcompat.config.loader import load_build_config

    try:
        build_config = load_build_config(config)
        compiled = _compile(build_config)
    except (FileNotFoundError, ValueError, SchemaError) as e:
        raise _fail(str(e)) from e

    data_root = build_config.data.data_root

    if check:
        outcome = check_matrices(compiled, data_root)
        for name in outcome.missing:
            err_console.print(
                f"[red]{data_root / name} is missing. Run `envcompat build-data`.[/red]"
            )
        for name in outcome.mismatched:
            err_console.print(
                f"[red]{data_root / name} does not match the current files. "
                "Re-run `envcompat build-data`.[/red]"
            )
        if not outcome.ok:
            raise typer.Exit(code=outcome.exit_code)
        console.print("[green]Compatibility data is up to date.[/green]")
        return

    for path in write_matrices(compiled, data_root):
        console.print(f"[green]Wrote {path}[/green]")


def _print_selection(result: "PresetResult") -> None:
    table = Table(title="Transform units", show_header=True, header_style="bold")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Kind")
    table.add_column("Package", style="dim")

    for i, entry in enumerate(result.plugins, start=1):
        table.add_row(str(i), entry.unit.name, entry.unit.kind.value, entry.unit.package)

    console.print(table)
    console.print(f"Transformations: {len(result.transformations)}")
    if result.polyfills is not None:
        console.print(f"Polyfills: {len(result.polyfills)}")


@app.command()
def select(
    config: Annotated[
        Path,
        typer.Option(
            "--config",
            "-c",
            help="Path to the preset configuration YAML file.",
            exists=True,
            dir_okay=False,
        ),
    ],
    debug: Annotated[
        bool,
        typer.Option("--debug", help="Print the debug report."),
    ] = False,
) -> None:
    """Select the transforms and polyfills required by the configured targets."""
    from envcompat.compat import load_compat_data
    from envcompat.config.loader import load_preset_config
    from envcompat.preset import BuildSession, build_preset
    from envcompat.targets import BrowserQueryError

    try:
        preset_config = load_preset_config(config)
        options = preset_config.options
        if debug:
            options = options.model_copy(update={"debug": True})
        result = build_preset(
            options,
            data=load_compat_data(preset_config.data.data_root),
            session=BuildSession(),
            root=preset_config.project_root,
        )
    except (FileNotFoundError, ValueError, SchemaError, BrowserQueryError) as e:
        raise _fail(str(e)) from e

    _print_selection(result)


@app.command()
def inspect(
    data: Annotated[
        Path,
        typer.Option(
            "--data",
            "-d",
            help="Directory holding the compiled matrices.",
            exists=True,
            file_okay=False,
        ),
    ],
    matrix: Annotated[
        str,
        typer.Option("--matrix", "-m", help="Matrix to show: 'plugins' or 'built-ins'."),
    ] = "plugins",
    env: Annotated[
        list[str] | None,
        typer.Option("--env", "-e", help="Environment column to show (repeatable)."),
    ] = None,
) -> None:
    """Show a compiled matrix as a feature x environment table."""
    from envcompat.compat import load_compat_data
    from envcompat.schemas import support_table

    if matrix not in MATRIX_CHOICES:
        raise _fail(
            f"Invalid matrix '{matrix}'. Use one of: {', '.join(MATRIX_CHOICES)}"
        )

    try:
        compat_data = load_compat_data(data)
    except (FileNotFoundError, ValueError, SchemaError) as e:
        raise _fail(str(e)) from e

    selected = compat_data.plugins if matrix == "plugins" else compat_data.built_ins
    frame = support_table(selected, environments=env or None)

    table = Table(title=f"{matrix} support", show_header=True, header_style="bold")
    table.add_column("Feature", style="cyan")
    for column in frame.columns:
        table.add_column(str(column), justify="right")
    for feature, row in frame.iterrows():
        table.add_row(str(feature), *(str(value) for value in row))

    console.print(table)


@app.command()
def version() -> None:
    """Show version information."""
    from envcompat import __version__

    console.print(f"envcompat version {__version__}")


if __name__ == "__main__":
    app()
