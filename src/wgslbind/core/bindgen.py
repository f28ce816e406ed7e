"""
Bindgen pipeline: dependency tree -> fingerprint -> composition -> validation -> emission.
"""

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Protocol

from .._version import get_version
from .composer import ComposerFactory, WgslTextComposer
from .composition import compose_entry
from .dependency_tree import DependencyTree
from .emit import BindingEmitter, EntryConstantsEmitter
from .errors import OutputError, OutputFileNotSpecifiedError
from .fingerprint import compute_fingerprint, format_marker, is_up_to_date
from .ir import WgslEntryResult
from .options import BindgenOptions
from .registry import SourceRegistry
from .validator import get_bind_group_data

logger = logging.getLogger(__name__)

PKG_NAME = "wgslbind"


class ChangeTracker(Protocol):
    """Receives every file the build depends on, e.g. for build-system rerun rules."""

    def watch(self, paths: Iterable[Path]) -> None: ...


class CargoChangeTracker:
    """Prints ``cargo:rerun-if-changed=<path>`` lines for a build script."""

    def __init__(self, prefix: str = "cargo:rerun-if-changed="):
        self.prefix = prefix

    def watch(self, paths: Iterable[Path]) -> None:
        for path in paths:
            print(f"{self.prefix}{path}")


class WgslBindgen:
    """
    One bindgen invocation.

    Construction crawls the imports of every entry point and fingerprints
    the build input; ``generate()`` then regenerates the output only when
    that fingerprint differs from the one recorded in the existing output.
    """

    def __init__(
        self,
        options: BindgenOptions,
        *,
        composer_factory: ComposerFactory = WgslTextComposer,
        emitter: BindingEmitter | None = None,
        change_tracker: ChangeTracker | None = None,
        registry: SourceRegistry | None = None,
    ):
        options.validate()
        self.options = options
        self.composer_factory = composer_factory
        self.emitter = emitter or EntryConstantsEmitter()
        self.version = get_version()

        self.dependency_tree = DependencyTree.build(
            options.entry_points,
            options.search_roots(),
            registry=registry,
            detect_ambiguous=options.detect_ambiguous_imports,
        )
        self.content_hash = compute_fingerprint(
            options, self.dependency_tree.all_files(), self.version
        )

        if options.emit_rerun_if_change:
            tracker = change_tracker or CargoChangeTracker()
            tracker.watch(self.dependency_tree.all_file_paths())

    def header_texts(self) -> str:
        if self.options.skip_header_comments:
            return ""
        return "\n".join(
            [
                f"// File automatically generated by {PKG_NAME}^",
                "//",
                f"// ^ {PKG_NAME} version {self.version}",
                "// Changes made to this file will not be saved.",
                format_marker(self.content_hash),
                "",
                "",
            ]
        )

    def entry_results(self) -> list[WgslEntryResult]:
        """
        Compose and validate every entry point, in order.

        Stops at the first failing entry.

        Raises:
            CompositionError: If an entry fails to compose
            BindGroupError: If a composed module breaks bind group rules
        """
        results = []
        for entry in self.dependency_tree.entry_results():
            module = compose_entry(entry, self.options.ir_capabilities, self.composer_factory)
            bind_groups = get_bind_group_data(module)
            results.append(
                WgslEntryResult(
                    mod_name=entry.module_path.file_prefix(),
                    module=module,
                    source_including_deps=entry,
                    bind_groups=bind_groups,
                )
            )
        return results

    def generate_string(self) -> str:
        return self.header_texts() + self.emitter.emit(self.entry_results(), self.options)

    def generate(self, force: bool = False) -> bool:
        """
        Write the output file unless it is already up to date.

        Args:
            force: Regenerate even when the recorded fingerprint matches

        Returns:
            True if the output was written

        Raises:
            OutputFileNotSpecifiedError: If no output path is configured
            OutputError: If the output cannot be written
        """
        out = self.options.output
        if out is None:
            raise OutputFileNotSpecifiedError()

        try:
            old_content = out.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            old_content = ""

        if not (force or self.options.skip_hash_check) and is_up_to_date(
            old_content, self.content_hash
        ):
            logger.info("%s is up to date (SourceHash %s)", out, self.content_hash)
            return False

        content = self.generate_string()
        try:
            out.parent.mkdir(parents=True, exist_ok=True)
            out.write_text(content, encoding="utf-8")
        except OSError as e:
            raise OutputError(f"Failed to write {out}: {e}") from e

        logger.info("Generated %s (%d entry points)", out, len(self.dependency_tree.entry_points))
        return True
