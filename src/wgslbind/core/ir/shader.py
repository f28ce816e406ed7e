"""
Composed shader module IR types.

``ComposedModule`` is the slice of a composer's output that wgslbind relies
on: resource bindings for layout validation and the entry-point stage list.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from .sources import EntryDependencyResult


class ShaderStage(StrEnum):
    VERTEX = "vertex"
    FRAGMENT = "fragment"
    COMPUTE = "compute"


class ResourceBinding(BaseModel):
    """
    A resource variable bound to a bind group slot.

    Attributes:
        group: ``@group`` index
        binding: ``@binding`` index within the group
        name: Variable name
        address_space: ``var<...>`` qualifier (e.g. "uniform", "storage, read"), if any
        type_name: Declared type as written
    """

    group: int
    binding: int
    name: str
    address_space: str | None = None
    type_name: str = ""

    model_config = ConfigDict(frozen=True)


class ShaderEntryPoint(BaseModel):
    name: str
    stage: ShaderStage

    model_config = ConfigDict(frozen=True)


class ComposedModule(BaseModel):
    """
    Output of composing one entry point with its dependencies.

    Attributes:
        name: Identity of the entry the module was composed for
        source: Self-contained composed shader text
        bindings: Resource bindings in declaration order
        entry_points: Entry points of the entry file
    """

    name: str
    source: str = ""
    bindings: tuple[ResourceBinding, ...] = ()
    entry_points: tuple[ShaderEntryPoint, ...] = ()

    model_config = ConfigDict(frozen=True)

    def shader_stages(self) -> frozenset[ShaderStage]:
        return frozenset(entry.stage for entry in self.entry_points)


class IrCapabilities(BaseModel):
    """
    Optional shader IR capabilities handed to the composer.

    Attributes:
        capabilities: Capability flag names enabled for validation
        subgroup_stages: Stages where subgroup operations are allowed
    """

    capabilities: frozenset[str] = Field(default_factory=frozenset)
    subgroup_stages: frozenset[ShaderStage] = Field(default_factory=frozenset)

    model_config = ConfigDict(frozen=True)


class WgslEntryResult(BaseModel):
    """
    A composed and validated entry, ready for code emission.

    Attributes:
        mod_name: Generated module name (entry file prefix)
        module: Composed shader module
        source_including_deps: The entry with its ordered dependencies
        bind_groups: Bindings grouped by consecutive group index
    """

    mod_name: str
    module: ComposedModule
    source_including_deps: EntryDependencyResult
    bind_groups: dict[int, tuple[ResourceBinding, ...]] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)
