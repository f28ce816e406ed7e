"""
Error types for wgslbind source loading, import resolution, composition and validation.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


class WgslBindError(Exception):
    """Base exception for all wgslbind errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class ConfigError(WgslBindError):
    """
    Raised when bindgen options are missing or malformed.

    Examples:
    - No entry points configured
    - Unknown serialization strategy
    - Unreadable or invalid wgslbind.toml
    """

    pass


class SourceError(WgslBindError):
    """Raised when a shader source file cannot be loaded."""

    def __init__(self, message: str, path: Path, context: Optional["ErrorContext"] = None):
        self.path = path
        super().__init__(message, context)


class SourceNotFoundError(SourceError):
    """The backing file of a module does not exist."""

    pass


class SourceReadError(SourceError):
    """The backing file exists but could not be read or decoded."""

    pass


class ImportResolutionError(WgslBindError):
    """
    Raised when an import directive cannot be mapped to a single file.

    Examples:
    - No search root contains the imported module
    - Several roots contain it and ambiguity detection is on
    """

    def __init__(
        self,
        message: str,
        reference: str,
        importer: str,
        context: Optional["ErrorContext"] = None,
    ):
        self.reference = reference
        self.importer = importer
        super().__init__(message, context)


class UnresolvedImportError(ImportResolutionError):
    pass


class AmbiguousImportError(ImportResolutionError):
    def __init__(
        self,
        message: str,
        reference: str,
        importer: str,
        candidates: Sequence[Path],
        context: Optional["ErrorContext"] = None,
    ):
        self.candidates = tuple(candidates)
        super().__init__(message, reference, importer, context)


class DependencyCycleError(WgslBindError):
    """
    Raised when the import graph contains a cycle.

    ``cycle`` lists the module paths along the cycle, starting and ending
    with the module that was re-entered.
    """

    def __init__(self, cycle: Sequence[str]):
        self.cycle = tuple(cycle)
        super().__init__("Circular import detected: " + " -> ".join(self.cycle))


class CompositionError(WgslBindError):
    """
    Raised when the shader composer rejects an entry point or one of its dependencies.

    Carries the entry identity and the composer's rendered diagnostic.
    """

    def __init__(self, entry: str, diagnostic: str):
        self.entry = entry
        self.diagnostic = diagnostic
        super().__init__(f"Failed to compose shader entry '{entry}':\n{diagnostic}")


class BindGroupError(WgslBindError):
    """Raised when a composed module's resource bindings break layout rules."""

    pass


class NonConsecutiveBindGroupsError(BindGroupError):
    """Bind group indices must be consecutive and start from 0."""

    def __init__(self, groups: Sequence[int], module: str | None = None):
        self.groups = tuple(groups)
        self.module = module
        where = f" in '{module}'" if module else ""
        super().__init__(
            f"Bind groups are non-consecutive or do not start from 0{where}: "
            f"found groups {list(self.groups)}"
        )


class DuplicateBindingError(BindGroupError):
    """Each resource must own exactly one binding index within its group."""

    def __init__(self, group: int, binding: int, module: str | None = None):
        self.group = group
        self.binding = binding
        self.module = module
        where = f" in '{module}'" if module else ""
        super().__init__(f"Duplicate binding found with index `{binding}` in group {group}{where}")


class OutputError(WgslBindError):
    """Raised when generated output cannot be written."""

    pass


class OutputFileNotSpecifiedError(OutputError):
    def __init__(self) -> None:
        super().__init__("No output file specified; set `output` in the bindgen options")


@dataclass
class ErrorContext:
    """
    Context information for an error, including source location.

    Attributes:
        file: Path to the source file where error occurred
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        snippet: Optional code snippet showing the error location
        module: Optional module name where error occurred
    """

    file: Path
    line: int
    column: int
    snippet: str | None = None
    module: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "shader.wgsl:10:5 in module foo::bar"
        """
        location = f"{self.file}:{self.line}:{self.column}"
        if self.module:
            location += f" in module {self.module}"

        if self.snippet:
            return f"{location}\n{self._format_snippet()}"
        return location

    def _format_snippet(self) -> str:
        """Format the offending line with its number and an error marker."""
        if not self.snippet:
            return ""

        prefix = f"{self.line:4d} | "
        marker_pos = len(prefix) + self.column - 1
        return f"{prefix}{self.snippet}\n" + " " * marker_pos + "^^^"


def make_import_error(
    error_type: type[ImportResolutionError],
    message: str,
    reference: str,
    importer: str,
    file: Path,
    line: int,
    snippet: str | None = None,
    module: str | None = None,
    **kwargs: object,
) -> ImportResolutionError:
    """
    Helper to create an import resolution error pointing at the directive.

    Args:
        error_type: Concrete ImportResolutionError subclass
        message: Error description
        reference: Raw import reference as written
        importer: Module path of the importing file
        file: On-disk path of the importing file
        line: Line number of the directive (1-indexed)
        snippet: Optional text of the directive line
        module: Optional declared module name of the importer

    Returns:
        Error with context attached
    """
    context = ErrorContext(file=file, line=line, column=1, snippet=snippet, module=module)
    return error_type(message, reference, importer, context=context, **kwargs)  # type: ignore[arg-type]
