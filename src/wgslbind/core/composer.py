"""
Shader composer interface and the built-in text composer.

A composer receives composable modules one by one, each before any module
that imports it, and finally the entry source. ``WgslTextComposer`` is a
lightweight reference implementation: it checks that every import is
satisfied by a module registered earlier, splices the sources together and
reads resource bindings and entry points off the WGSL attributes. It does not
type-check WGSL.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Protocol

from .directives import scan_directives, strip_directives
from .ir import (
    ComposedModule,
    ImportReference,
    IrCapabilities,
    ResourceBinding,
    ShaderEntryPoint,
    ShaderStage,
)

logger = logging.getLogger(__name__)

_BLOCK_COMMENT_RE = re.compile(r"/\*.*?\*/", re.DOTALL)
_LINE_COMMENT_RE = re.compile(r"//[^\n]*")
_VAR_DECL_RE = re.compile(
    r"((?:@\w+\s*(?:\([^)]*\))?\s*)+)var\s*(?:<([^>]*)>)?\s+(\w+)\s*:\s*([^;=]+)"
)
_GROUP_RE = re.compile(r"@group\s*\(\s*(\d+)\s*\)")
_BINDING_RE = re.compile(r"@binding\s*\(\s*(\d+)\s*\)")
_ENTRY_POINT_RE = re.compile(
    r"@(vertex|fragment|compute)\b(?:\s*@\w+\s*(?:\([^)]*\))?)*\s*fn\s+(\w+)"
)


@dataclass(frozen=True)
class ComposableModuleDescriptor:
    """
    A dependency registration: content, identity and optional import name.

    ``resolved_imports`` maps each import reference of the module (its
    ``str(ImportReference)`` text) to the ``file_path`` of the module it
    resolved to.
    """

    source: str
    file_path: str
    as_name: str | None = None
    resolved_imports: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ModuleDescriptor:
    """The final entry submission."""

    source: str
    file_path: str
    resolved_imports: Mapping[str, str] = field(default_factory=dict)


class ComposerFailure(Exception):
    """
    Raised by a composer when a module cannot be composed.

    Attributes:
        message: Short description
        file_path: Identity of the module being composed
        line: Optional 1-indexed line of the offending construct
    """

    def __init__(self, message: str, file_path: str, line: int | None = None):
        self.message = message
        self.file_path = file_path
        self.line = line
        super().__init__(message)

    def render(self) -> str:
        """Render a diagnostic in the ``error: ... --> file:line`` style."""
        location = self.file_path if self.line is None else f"{self.file_path}:{self.line}"
        return f"error: {self.message}\n  --> {location}"


class ShaderComposer(Protocol):
    def add_composable_module(self, descriptor: ComposableModuleDescriptor) -> None: ...

    def make_module(self, descriptor: ModuleDescriptor) -> ComposedModule: ...


ComposerFactory = Callable[[IrCapabilities | None], ShaderComposer]


@dataclass
class _Registered:
    descriptor: ComposableModuleDescriptor
    name: str | None
    requires: list[str] = field(default_factory=list)


class WgslTextComposer:
    """Reference composer working on WGSL text."""

    def __init__(self, capabilities: IrCapabilities | None = None):
        self.capabilities = capabilities
        self._modules: dict[str, _Registered] = {}
        self._names: dict[str, str] = {}

    def add_composable_module(self, descriptor: ComposableModuleDescriptor) -> None:
        if descriptor.file_path in self._modules:
            raise ComposerFailure("module registered twice", descriptor.file_path)

        directives = scan_directives(descriptor.source)
        name = descriptor.as_name or directives.module_name
        if name is not None and name in self._names:
            raise ComposerFailure(
                f"module name `{name}` already used by {self._names[name]}",
                descriptor.file_path,
            )

        requires = self._require_all(
            directives.imports, descriptor.file_path, descriptor.resolved_imports
        )
        self._modules[descriptor.file_path] = _Registered(descriptor, name, requires)
        if name is not None:
            self._names[name] = descriptor.file_path
        logger.debug("Registered composable module %s as %s", descriptor.file_path, name)

    def make_module(self, descriptor: ModuleDescriptor) -> ComposedModule:
        directives = scan_directives(descriptor.source)
        included = self._closure(
            self._require_all(directives.imports, descriptor.file_path, descriptor.resolved_imports)
        )

        bindings: list[ResourceBinding] = []
        parts: list[str] = []
        for file_path in included:
            body = strip_directives(self._modules[file_path].descriptor.source)
            parts.append(body)
            bindings.extend(_scan_bindings(body))

        entry_body = strip_directives(descriptor.source)
        parts.append(entry_body)
        bindings.extend(_scan_bindings(entry_body))

        return ComposedModule(
            name=descriptor.file_path,
            source="\n".join(part.strip("\n") for part in parts if part.strip()) + "\n",
            bindings=tuple(bindings),
            entry_points=tuple(_scan_entry_points(entry_body)),
        )

    def _require_all(
        self, imports: list[ImportReference], importer: str, resolved: Mapping[str, str]
    ) -> list[str]:
        required: list[str] = []
        for reference in imports:
            file_path = resolved.get(str(reference))
            if file_path is None:
                file_path = self._find(reference)
            if file_path is None or file_path not in self._modules:
                raise ComposerFailure(
                    f"required import `{reference}` not found", importer, reference.line
                )
            if file_path not in required:
                required.append(file_path)
        return required

    def _find(self, reference: ImportReference) -> str | None:
        """Best guess for an import nobody resolved: module name, exact path, then path suffix."""
        for name in reference.module_names():
            if name in self._names:
                return self._names[name]
        candidates = [candidate.as_posix() for candidate in reference.candidate_paths()]
        for candidate in candidates:
            if candidate in self._modules:
                return candidate
        for candidate in candidates:
            for file_path in self._modules:
                if file_path.endswith("/" + candidate):
                    return file_path
        return None

    def _closure(self, roots: list[str]) -> list[str]:
        """Registered modules reachable from ``roots``, in registration order."""
        reached: set[str] = set()
        pending = list(roots)
        while pending:
            file_path = pending.pop()
            if file_path in reached:
                continue
            reached.add(file_path)
            pending.extend(self._modules[file_path].requires)
        return [file_path for file_path in self._modules if file_path in reached]


def _strip_comments(text: str) -> str:
    return _LINE_COMMENT_RE.sub("", _BLOCK_COMMENT_RE.sub("", text))


def _scan_bindings(text: str) -> list[ResourceBinding]:
    bindings = []
    for match in _VAR_DECL_RE.finditer(_strip_comments(text)):
        attributes, address_space, name, type_name = match.groups()
        group = _GROUP_RE.search(attributes)
        binding = _BINDING_RE.search(attributes)
        if group is None or binding is None:
            continue
        bindings.append(
            ResourceBinding(
                group=int(group.group(1)),
                binding=int(binding.group(1)),
                name=name,
                address_space=address_space.strip() if address_space else None,
                type_name=type_name.strip(),
            )
        )
    return bindings


def _scan_entry_points(text: str) -> list[ShaderEntryPoint]:
    return [
        ShaderEntryPoint(name=name, stage=ShaderStage(stage))
        for stage, name in _ENTRY_POINT_RE.findall(_strip_comments(text))
    ]
