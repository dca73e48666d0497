"""
Envcompat: environment-targeted transform selection.

Compiles a per-feature compatibility matrix from the compat-table corpus and
picks the syntax transforms and polyfills a set of target environments need.
"""

from importlib.metadata import version

__version__ = version("envcompat")

__all__ = ["__version__"]
