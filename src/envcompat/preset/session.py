"""Build session state shared across preset evaluations."""

from dataclasses import dataclass


@dataclass
class BuildSession:
    """
    State owned by a long-lived build process.

    The debug report is printed once per session, however often the preset
    is evaluated. Create a new session (or call reset()) to isolate builds.
    """

    debug_logged: bool = False

    def reset(self) -> None:
        """Forget that the debug report was printed."""
        self.debug_logged = False
