"""
Source-level IR types for wgslbind.

A ``SourceFile`` is created once per module path by the source registry and
shared by reference between the dependency graph and every entry result.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from pydantic import BaseModel, ConfigDict, Field

SHADER_SUFFIX = ".wgsl"


@dataclass(frozen=True, order=True)
class ModulePath:
    """
    Canonical identity of a shader source file.

    The file's location relative to the workspace root in POSIX form, or
    its absolute POSIX path when it lives outside the workspace root. The
    root that happened to find the file plays no part in it.
    """

    value: str

    @classmethod
    def from_file(cls, path: Path, workspace_root: Path) -> ModulePath:
        resolved = path.resolve()
        try:
            return cls(resolved.relative_to(workspace_root.resolve()).as_posix())
        except ValueError:
            return cls(resolved.as_posix())

    def file_prefix(self) -> str:
        """File name up to its first dot (``shaders/pbr.frag.wgsl`` -> ``pbr``)."""
        return PurePosixPath(self.value).name.split(".", 1)[0]

    def __str__(self) -> str:
        return self.value


class ImportReference(BaseModel):
    """
    A single module reference taken from an ``#import`` directive.

    Attributes:
        raw: Reference as written, without alias (``a::b::item`` or ``dir/x.wgsl``)
        quoted: True for ``#import "path"`` file references
        line: 1-indexed line of the directive in the importing file
    """

    raw: str
    quoted: bool = False
    line: int = 1

    model_config = ConfigDict(frozen=True)

    def candidate_paths(self) -> list[PurePosixPath]:
        """
        Relative file paths this reference may denote, most specific first.

        ``a::b::c`` may name module ``a::b::c`` or item ``c`` of module
        ``a::b`` (and so on), so every prefix is a candidate.
        """
        if self.quoted:
            return [PurePosixPath(self.raw)]
        parts = self.segments()
        return [
            PurePosixPath(*parts[:end]).with_suffix(SHADER_SUFFIX)
            for end in range(len(parts), 0, -1)
        ]

    def module_names(self) -> list[str]:
        """``::`` module names this reference may denote, most specific first."""
        if self.quoted:
            return []
        parts = self.segments()
        return ["::".join(parts[:end]) for end in range(len(parts), 0, -1)]

    def segments(self) -> list[str]:
        return [part for part in self.raw.split("::") if part]

    def __str__(self) -> str:
        return f'"{self.raw}"' if self.quoted else self.raw


class SourceFile(BaseModel):
    """
    A loaded shader source file.

    Attributes:
        module_path: Canonical identity (graph and cache key)
        file_path: On-disk location the content was read from
        module_name: Name declared with ``#define_import_path``, if any
        content: Raw text content
        imports: Import references in directive order
    """

    module_path: ModulePath
    file_path: Path
    module_name: str | None = None
    content: str
    imports: tuple[ImportReference, ...] = ()

    model_config = ConfigDict(frozen=True)


class EntryDependencyResult(BaseModel):
    """
    An entry point with its transitive dependencies.

    ``dependencies`` is topologically ordered: every module appears exactly
    once and strictly before any module that imports it. The entry itself is
    not included.

    ``resolved_imports`` maps the module path of the entry and of each
    dependency to the module path every one of its import references
    resolved to, keyed by the reference text (``str(ImportReference)``).
    """

    source_file: SourceFile
    dependencies: tuple[SourceFile, ...] = ()
    resolved_imports: dict[str, dict[str, str]] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    @property
    def module_path(self) -> ModulePath:
        return self.source_file.module_path
