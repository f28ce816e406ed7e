"""
Source registry: loads shader files once per module path.
"""

import logging
from pathlib import Path

from .directives import scan_directives
from .errors import SourceNotFoundError, SourceReadError
from .ir import ModulePath, SourceFile

logger = logging.getLogger(__name__)


class SourceRegistry:
    """
    Loads and caches shader sources keyed by their canonical module path.

    Loading the same logical module twice returns the identical cached
    ``SourceFile`` without touching the file system again. The cache lives
    until ``clear()`` is called at the start of a fresh build.
    """

    def __init__(self, workspace_root: Path):
        self.workspace_root = workspace_root
        self._cache: dict[ModulePath, SourceFile] = {}

    def module_path_for(self, path: Path) -> ModulePath:
        return ModulePath.from_file(path, self.workspace_root)

    def load(self, path: Path) -> SourceFile:
        """
        Load a source file, reading it only on first request.

        Raises:
            SourceNotFoundError: If the file does not exist
            SourceReadError: If the file cannot be read or is not UTF-8
        """
        module_path = self.module_path_for(path)
        cached = self._cache.get(module_path)
        if cached is not None:
            return cached

        if not path.is_file():
            raise SourceNotFoundError(f"Shader source not found: {path}", path)

        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise SourceReadError(f"Failed to read shader source {path}: {e}", path) from e

        directives = scan_directives(content)
        source = SourceFile(
            module_path=module_path,
            file_path=path,
            module_name=directives.module_name,
            content=content,
            imports=tuple(directives.imports),
        )
        self._cache[module_path] = source
        logger.debug("Loaded %s (%d imports)", module_path, len(source.imports))
        return source

    def get(self, module_path: ModulePath) -> SourceFile | None:
        return self._cache.get(module_path)

    def __contains__(self, module_path: object) -> bool:
        return module_path in self._cache

    def __len__(self) -> int:
        return len(self._cache)

    def clear(self) -> None:
        self._cache.clear()
