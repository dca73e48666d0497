"""
Debug reporter for preset evaluations.

Shows the resolved targets and, for every selected transform or polyfill,
the targets that made it necessary.
"""

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from envcompat.compat.artifacts import CompatData
from envcompat.targets.requirement import unsatisfied_environments

if TYPE_CHECKING:
    from envcompat.preset.core import PresetResult


def _format_targets(targets: Mapping[str, object]) -> str:
    return ", ".join(f"{env} {version}" for env, version in targets.items())


class DebugReporter:
    """Prints the debug report for a preset result."""

    def __init__(self, console: Console | None = None) -> None:
        """
        Initialize reporter.

        Args:
            console: Rich console for output. Creates new if not provided.
        """
        self.console = console or Console(stderr=True)

    def print_report(self, result: "PresetResult", data: CompatData) -> None:
        """Print targets, module type, transforms and polyfills."""
        targets = Text(_format_targets(result.targets) or "(none: all transforms)")
        module = result.module_type or "disabled"
        self.console.print(
            Panel.fit(
                Text.assemble(
                    Text("Using targets: ", style="bold"),
                    targets,
                    "\n",
                    Text("Modules transform: ", style="bold"),
                    module,
                ),
                border_style="cyan",
            )
        )

        self._print_items("Using plugins", result.transformations, data.plugins, result)
        if result.polyfills is not None:
            self._print_items("Using polyfills", result.polyfills, data.built_ins, result)

    def _print_items(
        self,
        title: str,
        names: Sequence[str],
        matrix: Mapping[str, Mapping[str, str]],
        result: "PresetResult",
    ) -> None:
        table = Table(title=title, show_header=True, header_style="bold")
        table.add_column("Name", style="cyan")
        table.add_column("Required by")

        for name in names:
            if name in matrix:
                unsatisfied = unsatisfied_environments(result.targets, matrix[name])
                reason = _format_targets(unsatisfied) or "all targets"
            else:
                reason = Text("default or explicit include", style="dim")
            table.add_row(name, reason)

        self.console.print(table)
