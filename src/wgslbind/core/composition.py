"""
Composition driver: turns an entry's ordered dependency list into one module.
"""

import logging

from .composer import (
    ComposableModuleDescriptor,
    ComposerFactory,
    ComposerFailure,
    ModuleDescriptor,
    WgslTextComposer,
)
from .errors import CompositionError
from .ir import ComposedModule, EntryDependencyResult, IrCapabilities

logger = logging.getLogger(__name__)


def compose_entry(
    entry: EntryDependencyResult,
    capabilities: IrCapabilities | None = None,
    composer_factory: ComposerFactory = WgslTextComposer,
) -> ComposedModule:
    """
    Compose one entry point with its dependencies.

    Dependencies are registered in the topological order of ``entry`` so
    each one is known to the composer before any module importing it. Every
    descriptor carries the module paths its imports resolved to, so the
    composer binds imports to the files the graph chose. A fresh composer is
    used per entry.

    Args:
        entry: Entry source with its ordered dependencies
        capabilities: Optional IR capabilities for the composer
        composer_factory: Creates the composer for this entry

    Returns:
        The composed module

    Raises:
        CompositionError: If the composer rejects a dependency or the entry
    """
    composer = composer_factory(capabilities)
    entry_id = str(entry.source_file.module_path)

    try:
        for dependency in entry.dependencies:
            composer.add_composable_module(
                ComposableModuleDescriptor(
                    source=dependency.content,
                    file_path=str(dependency.module_path),
                    as_name=dependency.module_name,
                    resolved_imports=entry.resolved_imports.get(str(dependency.module_path), {}),
                )
            )

        module = composer.make_module(
            ModuleDescriptor(
                source=entry.source_file.content,
                file_path=entry_id,
                resolved_imports=entry.resolved_imports.get(entry_id, {}),
            )
        )
    except ComposerFailure as e:
        raise CompositionError(entry_id, e.render()) from e

    logger.debug(
        "Composed %s with %d dependencies: %d bindings, %d entry points",
        entry_id,
        len(entry.dependencies),
        len(module.bindings),
        len(module.entry_points),
    )
    return module
