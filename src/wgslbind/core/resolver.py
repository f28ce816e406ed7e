"""
Import resolution across ordered search roots.

Precedence is fixed and is part of the reproducibility contract:

1. the module import root
2. the workspace root
3. each additional scan directory, in configured order

The first root holding a matching file wins. With ambiguity detection on,
a reference matching distinct files under several roots is an error instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from .errors import AmbiguousImportError, UnresolvedImportError, make_import_error
from .ir import ImportReference, ModulePath, SourceFile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchRoots:
    """Directories imports are resolved against."""

    workspace_root: Path
    module_import_root: Path | None = None
    additional_scan_dirs: tuple[Path, ...] = field(default_factory=tuple)

    def ordered(self) -> list[Path]:
        """Roots in precedence order, each directory listed once."""
        roots: list[Path] = []
        seen: set[Path] = set()
        candidates = [self.module_import_root, self.workspace_root, *self.additional_scan_dirs]
        for root in candidates:
            if root is None:
                continue
            key = root.resolve()
            if key in seen:
                continue
            seen.add(key)
            roots.append(root)
        return roots


class ImportResolver:
    """Locates the file an import reference denotes."""

    def __init__(self, roots: SearchRoots, detect_ambiguous: bool = False):
        self.roots = roots
        self.detect_ambiguous = detect_ambiguous
        self._ordered_roots = roots.ordered()

    def resolve(self, importer: SourceFile, reference: ImportReference) -> ModulePath:
        return ModulePath.from_file(self.locate(importer, reference), self.roots.workspace_root)

    def locate(self, importer: SourceFile, reference: ImportReference) -> Path:
        """
        Find the file for ``reference`` imported by ``importer``.

        Raises:
            UnresolvedImportError: If no root contains a matching file
            AmbiguousImportError: If ambiguity detection is on and several
                roots contain distinct matching files
        """
        matches: list[Path] = []
        for root in self._ordered_roots:
            found = self._match_in_root(root, reference)
            if found is None:
                continue
            if not self.detect_ambiguous:
                logger.debug("Resolved %s from %s to %s", reference, importer.module_path, found)
                return found
            if all(found.resolve() != other.resolve() for other in matches):
                matches.append(found)

        if not matches:
            searched = ", ".join(str(root) for root in self._ordered_roots)
            raise make_import_error(
                UnresolvedImportError,
                f"Cannot resolve import {reference} (searched: {searched})",
                reference=reference.raw,
                importer=str(importer.module_path),
                file=importer.file_path,
                line=reference.line,
                snippet=_line_of(importer.content, reference.line),
                module=importer.module_name,
            )

        if len(matches) > 1:
            listing = "\n".join(f"  - {path}" for path in matches)
            raise make_import_error(
                AmbiguousImportError,
                f"Import {reference} matches files under several search roots:\n{listing}",
                reference=reference.raw,
                importer=str(importer.module_path),
                file=importer.file_path,
                line=reference.line,
                snippet=_line_of(importer.content, reference.line),
                module=importer.module_name,
                candidates=matches,
            )

        logger.debug("Resolved %s from %s to %s", reference, importer.module_path, matches[0])
        return matches[0]

    @staticmethod
    def _match_in_root(root: Path, reference: ImportReference) -> Path | None:
        for candidate in reference.candidate_paths():
            path = root / candidate
            if path.is_file():
                return path
        return None


def _line_of(content: str, line: int) -> str | None:
    lines = content.splitlines()
    if 1 <= line <= len(lines):
        return lines[line - 1]
    return None
