"""
Code emission interface and a minimal Rust constants emitter.

Full target-language binding generation plugs in through ``BindingEmitter``.
``EntryConstantsEmitter`` covers the basics: one module per entry holding
entry point names, bind group counts and the composed shader source.
"""

import re
from collections.abc import Sequence
from typing import Protocol

from .ir import WgslEntryResult
from .options import BindgenOptions

_NON_IDENT_RE = re.compile(r"[^0-9A-Za-z_]")


class BindingEmitter(Protocol):
    def emit(self, entries: Sequence[WgslEntryResult], options: BindgenOptions) -> str: ...


def sanitize_identifier(name: str) -> str:
    return _NON_IDENT_RE.sub("", name)


class EntryConstantsEmitter:
    def emit(self, entries: Sequence[WgslEntryResult], options: BindgenOptions) -> str:
        lines = ["#![allow(unused, non_snake_case, non_camel_case_types, non_upper_case_globals)]"]
        for entry in entries:
            lines.append("")
            lines.extend(self._entry_module(entry))
        return "\n".join(lines) + "\n"

    def _entry_module(self, entry: WgslEntryResult) -> list[str]:
        mod_name = sanitize_identifier(entry.mod_name)
        lines = [f"pub mod {mod_name} {{"]

        for entry_point in entry.module.entry_points:
            const_name = "ENTRY_" + sanitize_identifier(entry_point.name).upper()
            lines.append(f'    pub const {const_name}: &str = "{entry_point.name}";')

        lines.append(f"    pub const BIND_GROUP_COUNT: u32 = {len(entry.bind_groups)};")
        for group, bindings in entry.bind_groups.items():
            slots = ", ".join(str(binding.binding) for binding in bindings)
            lines.append(f"    pub const BIND_GROUP_{group}_BINDINGS: &[u32] = &[{slots}];")

        hashes = "#" * (_longest_hash_run(entry.module.source) + 1)
        lines.append(f'    pub const SHADER_STRING: &str = r{hashes}"')
        lines.append(f'{entry.module.source}"{hashes};')
        lines.append("}")
        return lines


def _longest_hash_run(text: str) -> int:
    runs = re.findall(r'"(#+)', text)
    return max((len(run) for run in runs), default=0)
