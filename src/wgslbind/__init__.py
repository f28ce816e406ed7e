"""
wgslbind - dependency resolution and composition for WGSL binding generation.

Resolves shader entry points into an ordered import graph, fingerprints the
build input and composes each entry into a validated module for code emission.
"""

from __future__ import annotations

from ._version import get_version
from .core import BindgenOptions, WgslBindgen, ir, load_options
from .core.errors import (
    BindGroupError,
    CompositionError,
    ConfigError,
    DependencyCycleError,
    ImportResolutionError,
    SourceError,
    WgslBindError,
)

__version__ = get_version()

__all__ = [
    "__version__",
    "ir",
    "BindgenOptions",
    "WgslBindgen",
    "load_options",
    "WgslBindError",
    "ConfigError",
    "SourceError",
    "ImportResolutionError",
    "DependencyCycleError",
    "CompositionError",
    "BindGroupError",
]
