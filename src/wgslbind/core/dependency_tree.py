"""
Dependency graph over every shader file reachable from the entry points.

The graph is a node table keyed by module path plus ordered adjacency lists,
built depth-first from each entry point. A module found on the current
traversal path again is a cycle. Traversals keep their own stack, so import
chains of any depth are handled.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path

from .errors import DependencyCycleError
from .ir import EntryDependencyResult, ImportReference, ModulePath, SourceFile
from .registry import SourceRegistry
from .resolver import ImportResolver, SearchRoots

logger = logging.getLogger(__name__)


class DependencyTree:
    """
    Acyclic import graph for one build invocation.

    Built once by ``build()`` and read-only afterwards. Nodes and adjacency
    lists keep first-discovered order, which makes every derived ordering
    deterministic for a given set of inputs.
    """

    def __init__(self, registry: SourceRegistry, resolver: ImportResolver):
        self.registry = registry
        self.resolver = resolver
        self._nodes: dict[ModulePath, SourceFile] = {}
        self._edges: dict[ModulePath, list[ModulePath]] = {}
        self._resolved: dict[ModulePath, dict[str, ModulePath]] = {}
        self._entry_points: list[ModulePath] = []

    @classmethod
    def build(
        cls,
        entry_points: Iterable[Path],
        roots: SearchRoots,
        registry: SourceRegistry | None = None,
        detect_ambiguous: bool = False,
    ) -> DependencyTree:
        """
        Crawl the imports of every entry point.

        Args:
            entry_points: Entry shader files, processed in the order given
            roots: Search roots for import resolution
            registry: Source registry to load through; cleared before crawling
            detect_ambiguous: Fail on imports matching files under several roots

        Returns:
            The complete dependency tree

        Raises:
            SourceError: If an entry or imported file cannot be loaded
            ImportResolutionError: If an import cannot be resolved
            DependencyCycleError: If the imports form a cycle
        """
        if registry is None:
            registry = SourceRegistry(roots.workspace_root)
        registry.clear()

        tree = cls(registry, ImportResolver(roots, detect_ambiguous=detect_ambiguous))
        for entry_point in entry_points:
            tree._add_entry_point(Path(entry_point))

        logger.debug(
            "Dependency tree built: %d entry points, %d files",
            len(tree._entry_points),
            len(tree._nodes),
        )
        return tree

    def _add_entry_point(self, path: Path) -> None:
        source = self.registry.load(path)
        module_path = source.module_path
        if module_path not in self._entry_points:
            self._entry_points.append(module_path)
        if module_path not in self._nodes:
            self._nodes[module_path] = source
            self._crawl(source)

    def _crawl(self, root: SourceFile) -> None:
        stack: list[tuple[SourceFile, Iterator[ImportReference]]] = [
            (root, iter(root.imports))
        ]
        path = [root.module_path]
        visiting = {root.module_path}

        while stack:
            source, references = stack[-1]
            reference = next(references, None)
            if reference is None:
                stack.pop()
                visiting.discard(path.pop())
                continue

            dependency = self.registry.load(self.resolver.locate(source, reference))
            dep_path = dependency.module_path

            if dep_path in visiting:
                cycle = path[path.index(dep_path) :] + [dep_path]
                raise DependencyCycleError([str(p) for p in cycle])

            module_path = source.module_path
            self._resolved.setdefault(module_path, {})[str(reference)] = dep_path
            edges = self._edges.setdefault(module_path, [])
            if dep_path not in edges:
                edges.append(dep_path)

            if dep_path not in self._nodes:
                self._nodes[dep_path] = dependency
                stack.append((dependency, iter(dependency.imports)))
                path.append(dep_path)
                visiting.add(dep_path)

    @property
    def entry_points(self) -> list[ModulePath]:
        return list(self._entry_points)

    def all_files(self) -> list[SourceFile]:
        """Every resolved file, entry points included, in discovery order."""
        return list(self._nodes.values())

    def all_file_paths(self) -> list[Path]:
        return [source.file_path for source in self._nodes.values()]

    def source(self, module_path: ModulePath) -> SourceFile:
        return self._nodes[module_path]

    def imports_of(self, module_path: ModulePath) -> list[ModulePath]:
        """Direct dependencies of a module, in import order."""
        return list(self._edges.get(module_path, ()))

    def resolved_imports_of(self, module_path: ModulePath) -> dict[str, ModulePath]:
        """Module path each import reference of a module resolved to, keyed by reference text."""
        return dict(self._resolved.get(module_path, {}))

    def dependencies_of(self, module_path: ModulePath) -> list[SourceFile]:
        """
        Transitive dependencies of a module in topological order.

        Post-order depth-first walk: each dependency comes after everything
        it imports, appears once however many paths reach it, and ties keep
        first-discovered order.
        """
        order: list[ModulePath] = []
        visited = {module_path}
        stack = [(module_path, iter(self._edges.get(module_path, ())))]

        while stack:
            node, dependencies = stack[-1]
            dependency = next(dependencies, None)
            if dependency is None:
                stack.pop()
                if node != module_path:
                    order.append(node)
                continue
            if dependency in visited:
                continue
            visited.add(dependency)
            stack.append((dependency, iter(self._edges.get(dependency, ()))))

        return [self._nodes[node] for node in order]

    def entry_results(self) -> list[EntryDependencyResult]:
        """One result per entry point, in the order the entry points were given."""
        results = []
        for entry in self._entry_points:
            dependencies = self.dependencies_of(entry)
            resolved = {
                str(source.module_path): {
                    reference: str(target)
                    for reference, target in self._resolved.get(source.module_path, {}).items()
                }
                for source in [self._nodes[entry], *dependencies]
            }
            results.append(
                EntryDependencyResult(
                    source_file=self._nodes[entry],
                    dependencies=tuple(dependencies),
                    resolved_imports=resolved,
                )
            )
        return results

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, module_path: object) -> bool:
        return module_path in self._nodes
