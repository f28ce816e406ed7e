"""
Preprocessor directive scanning for composable WGSL sources.

Recognised directives:

    #define_import_path my_lib::lighting
    #import my_lib::util
    #import my_lib::util::{saturate, remap as rm}
    #import "shaders/common.wgsl"

Import lists in braces may span several lines. Anything after ``//`` on a
directive line is ignored.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from .ir import ImportReference

_DEFINE_IMPORT_PATH_RE = re.compile(r"^\s*#define_import_path\s+([\w:]+)")
_IMPORT_RE = re.compile(r"^\s*#import\b(.*)$")


@dataclass
class Directives:
    """Directive data scanned from one source file."""

    module_name: str | None = None
    imports: list[ImportReference] = field(default_factory=list)


def scan_directives(content: str) -> Directives:
    """
    Scan ``#define_import_path`` and ``#import`` directives.

    Imports are returned in directive order with duplicates removed (first
    occurrence kept).
    """
    directives = Directives()
    seen: set[tuple[str, bool]] = set()

    lines = content.splitlines()
    index = 0
    while index < len(lines):
        line = _strip_line_comment(lines[index])
        line_no = index + 1
        index += 1

        if directives.module_name is None:
            define_match = _DEFINE_IMPORT_PATH_RE.match(line)
            if define_match:
                directives.module_name = define_match.group(1)
                continue

        import_match = _IMPORT_RE.match(line)
        if not import_match:
            continue

        body = import_match.group(1)
        # Brace lists may continue on the following lines.
        while body.count("{") > body.count("}") and index < len(lines):
            body += " " + _strip_line_comment(lines[index])
            index += 1

        for raw, quoted in expand_import_body(body):
            if (raw, quoted) in seen:
                continue
            seen.add((raw, quoted))
            directives.imports.append(ImportReference(raw=raw, quoted=quoted, line=line_no))

    return directives


def expand_import_body(body: str) -> list[tuple[str, bool]]:
    """
    Expand the text after ``#import`` into ``(reference, quoted)`` pairs.

    >>> expand_import_body(" a::{b, c::d as e}")
    [('a::b', False), ('a::c::d', False)]
    """
    references: list[tuple[str, bool]] = []
    for item in _split_top_level(body):
        item = item.strip()
        if not item:
            continue

        if item.startswith('"'):
            end = item.find('"', 1)
            path = item[1:end] if end != -1 else item[1:]
            if path:
                references.append((path, True))
            continue

        brace = item.find("{")
        if brace != -1:
            prefix = item[:brace].strip().rstrip(":")
            inner = item[brace + 1 : item.rfind("}")]
            for sub, _ in expand_import_body(inner):
                references.append((f"{prefix}::{sub}" if prefix else sub, False))
            continue

        # Drop ``as alias``
        references.append((item.split()[0], False))

    return references


def _split_top_level(text: str) -> list[str]:
    parts: list[str] = []
    depth = 0
    start = 0
    in_quotes = False
    for pos, ch in enumerate(text):
        if ch == '"':
            in_quotes = not in_quotes
        elif in_quotes:
            continue
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
        elif ch == "," and depth == 0:
            parts.append(text[start:pos])
            start = pos + 1
    parts.append(text[start:])
    return parts


def _strip_line_comment(line: str) -> str:
    pos = line.find("//")
    return line if pos == -1 else line[:pos]


def strip_directives(content: str) -> str:
    """Return ``content`` with every preprocessor directive line blanked out."""
    lines = content.splitlines()
    out: list[str] = []
    index = 0
    while index < len(lines):
        line = lines[index]
        index += 1
        code = _strip_line_comment(line)
        if not code.lstrip().startswith("#"):
            out.append(line)
            continue

        out.append("")
        while code.count("{") > code.count("}") and index < len(lines):
            code += _strip_line_comment(lines[index])
            index += 1
            out.append("")
    return "\n".join(out)
