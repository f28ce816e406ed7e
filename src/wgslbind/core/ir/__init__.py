"""
wgslbind Intermediate Representation (IR) types.

Immutable values passed between the pipeline stages: loaded sources,
per-entry dependency lists and composed shader modules.
"""

from .shader import (
    ComposedModule,
    IrCapabilities,
    ResourceBinding,
    ShaderEntryPoint,
    ShaderStage,
    WgslEntryResult,
)
from .sources import (
    EntryDependencyResult,
    ImportReference,
    ModulePath,
    SourceFile,
)

__all__ = [
    # Sources
    "ModulePath",
    "ImportReference",
    "SourceFile",
    "EntryDependencyResult",
    # Shader modules
    "ShaderStage",
    "ResourceBinding",
    "ShaderEntryPoint",
    "ComposedModule",
    "IrCapabilities",
    "WgslEntryResult",
]
