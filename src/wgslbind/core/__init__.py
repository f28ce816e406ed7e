"""
wgslbind core pipeline.
"""

from . import ir
from .bindgen import CargoChangeTracker, ChangeTracker, WgslBindgen
from .composer import (
    ComposableModuleDescriptor,
    ComposerFailure,
    ModuleDescriptor,
    ShaderComposer,
    WgslTextComposer,
)
from .composition import compose_entry
from .dependency_tree import DependencyTree
from .emit import BindingEmitter, EntryConstantsEmitter
from .fingerprint import compute_fingerprint, is_up_to_date
from .options import BindgenOptions, load_options
from .registry import SourceRegistry
from .resolver import ImportResolver, SearchRoots
from .validator import get_bind_group_data, validate_bind_groups

__all__ = [
    "ir",
    "BindgenOptions",
    "load_options",
    "SourceRegistry",
    "SearchRoots",
    "ImportResolver",
    "DependencyTree",
    "compute_fingerprint",
    "is_up_to_date",
    "ShaderComposer",
    "ComposableModuleDescriptor",
    "ModuleDescriptor",
    "ComposerFailure",
    "WgslTextComposer",
    "compose_entry",
    "validate_bind_groups",
    "get_bind_group_data",
    "BindingEmitter",
    "EntryConstantsEmitter",
    "ChangeTracker",
    "CargoChangeTracker",
    "WgslBindgen",
]
