"""Preset evaluation: target resolution, selection and unit assembly."""

from envcompat.preset.core import PluginEntry, PresetResult, build_preset
from envcompat.preset.reporter import DebugReporter
from envcompat.preset.session import BuildSession

__all__ = [
    "BuildSession",
    "DebugReporter",
    "PluginEntry",
    "PresetResult",
    "build_preset",
]
