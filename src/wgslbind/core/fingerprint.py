"""
Content fingerprinting for incremental generation.

The fingerprint covers the options, the tool version and the content of
every resolved file. Generated output embeds it as a marker line so the
next invocation can skip regeneration when nothing changed.
"""

import hashlib
from collections.abc import Iterable
from pathlib import Path

from .ir import SourceFile
from .options import BindgenOptions, portable_path

SOURCE_HASH_PREFIX = "// SourceHash:"


def compute_fingerprint(
    options: BindgenOptions, files: Iterable[SourceFile], tool_version: str
) -> str:
    """
    Compute the SHA256 content fingerprint of a build input.

    Files are hashed in order of their path relative to the workspace root,
    each framed by that path and its content length. The result does not
    depend on crawl order or on where the checkout lives, and moving text
    between files changes it.

    Args:
        options: Bindgen options (serialized canonically)
        files: Every file reachable from the entry points
        tool_version: wgslbind version string

    Returns:
        Hex-encoded SHA256 digest
    """
    sha256 = hashlib.sha256()
    sha256.update(options.canonical_json().encode("utf-8"))
    sha256.update(b"\0")
    sha256.update(tool_version.encode("utf-8"))
    sha256.update(b"\0")

    located = sorted(
        ((_fingerprint_location(source, options), source) for source in files),
        key=lambda pair: pair[0],
    )
    for location, source in located:
        content = source.content.encode("utf-8")
        sha256.update(f"{location}\0{len(content)}\0".encode())
        sha256.update(content)

    return sha256.hexdigest()


def format_marker(fingerprint: str) -> str:
    return f"{SOURCE_HASH_PREFIX} {fingerprint}"


def read_marker(text: str) -> str | None:
    """Return the first ``// SourceHash:`` line of previously generated text."""
    for line in text.splitlines():
        if line.startswith(SOURCE_HASH_PREFIX):
            return line
    return None


def is_up_to_date(previous_output: str, fingerprint: str) -> bool:
    return read_marker(previous_output) == format_marker(fingerprint)


def _fingerprint_location(source: SourceFile, options: BindgenOptions) -> str:
    # Files outside the workspace have absolute module paths.
    if Path(source.module_path.value).is_absolute():
        return portable_path(source.file_path, options.workspace_root)
    return source.module_path.value
