"""
Bindgen options and their TOML loader.

Example wgslbind.toml:

    [bindgen]
    entry_points = ["shaders/triangle.wgsl", "shaders/blit.wgsl"]
    workspace_root = "shaders"
    module_import_root = "shaders/lib"
    additional_scan_dirs = ["vendor/shaders"]
    output = "src/shader_bindings.rs"
    serialization_strategy = "bytemuck"

    [bindgen.ir_capabilities]
    capabilities = ["SUBGROUP"]
    subgroup_stages = ["compute"]
"""

import json
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import ConfigError
from .ir import IrCapabilities, ShaderStage
from .resolver import SearchRoots

DEFAULT_OPTIONS_FILE = "wgslbind.toml"
SERIALIZATION_STRATEGIES = ("encase", "bytemuck")


def portable_path(path: Path, anchor: Path) -> str:
    """
    POSIX form of ``path`` relative to ``anchor``, stepping out with ``..`` if needed.

    Falls back to the absolute path when no relative form exists (another drive).
    """
    resolved = path.resolve()
    try:
        return Path(os.path.relpath(resolved, anchor.resolve())).as_posix()
    except ValueError:
        return resolved.as_posix()


@dataclass
class BindgenOptions:
    """
    Configuration for one bindgen invocation.

    Every field but ``base_dir`` takes part in the content fingerprint, so
    changing any option forces regeneration. Paths enter the fingerprint
    relative to ``base_dir`` (the options file directory when loaded from
    TOML) or, without one, to the workspace root, so the same checkout
    fingerprints the same wherever it lives and however it is invoked.
    """

    entry_points: list[Path]
    workspace_root: Path = field(default_factory=lambda: Path("."))
    module_import_root: Path | None = None
    additional_scan_dirs: list[Path] = field(default_factory=list)
    output: Path | None = None
    skip_hash_check: bool = False
    skip_header_comments: bool = False
    emit_rerun_if_change: bool = True
    detect_ambiguous_imports: bool = False
    serialization_strategy: str = "encase"
    ir_capabilities: IrCapabilities | None = None
    base_dir: Path | None = None

    def validate(self) -> None:
        """
        Check option values.

        Raises:
            ConfigError: If no entry point is configured or a value is unsupported
        """
        if not self.entry_points:
            raise ConfigError("At least one entry point is required")
        if self.serialization_strategy not in SERIALIZATION_STRATEGIES:
            raise ConfigError(
                f"Unknown serialization strategy '{self.serialization_strategy}'. "
                f"Expected one of: {', '.join(SERIALIZATION_STRATEGIES)}"
            )

    def search_roots(self) -> SearchRoots:
        return SearchRoots(
            workspace_root=self.workspace_root,
            module_import_root=self.module_import_root,
            additional_scan_dirs=tuple(self.additional_scan_dirs),
        )

    def to_dict(self) -> dict[str, Any]:
        """JSON-compatible view of the options."""
        capabilities = None
        if self.ir_capabilities is not None:
            capabilities = {
                "capabilities": sorted(self.ir_capabilities.capabilities),
                "subgroup_stages": sorted(str(s) for s in self.ir_capabilities.subgroup_stages),
            }
        anchor = self.base_dir if self.base_dir is not None else self.workspace_root
        return {
            "entry_points": [portable_path(p, anchor) for p in self.entry_points],
            "workspace_root": portable_path(self.workspace_root, anchor),
            "module_import_root": (
                portable_path(self.module_import_root, anchor) if self.module_import_root else None
            ),
            "additional_scan_dirs": [portable_path(p, anchor) for p in self.additional_scan_dirs],
            "output": portable_path(self.output, anchor) if self.output else None,
            "skip_hash_check": self.skip_hash_check,
            "skip_header_comments": self.skip_header_comments,
            "emit_rerun_if_change": self.emit_rerun_if_change,
            "detect_ambiguous_imports": self.detect_ambiguous_imports,
            "serialization_strategy": self.serialization_strategy,
            "ir_capabilities": capabilities,
        }

    def canonical_json(self) -> str:
        """Deterministic serialization used by the content fingerprint."""
        return json.dumps(self.to_dict(), sort_keys=True, separators=(",", ":"))


def load_options(path: Path) -> BindgenOptions:
    """
    Load bindgen options from the ``[bindgen]`` table of a TOML file.

    Relative paths are resolved against the file's directory.

    Raises:
        ConfigError: If the file is missing, malformed or holds invalid values
    """
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ConfigError(f"Options file not found: {path}") from e
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Failed to read options file {path}: {e}") from e

    bindgen = data.get("bindgen")
    if not isinstance(bindgen, dict):
        raise ConfigError(f"{path} has no [bindgen] table")

    base = path.parent

    def _path(value: Any, key: str) -> Path:
        if not isinstance(value, str):
            raise ConfigError(f"bindgen.{key} must be a string path, got {value!r}")
        return base / value

    def _paths(key: str) -> list[Path]:
        values = bindgen.get(key, [])
        if not isinstance(values, list):
            raise ConfigError(f"bindgen.{key} must be a list of paths")
        return [_path(value, key) for value in values]

    def _bool(key: str, default: bool) -> bool:
        value = bindgen.get(key, default)
        if not isinstance(value, bool):
            raise ConfigError(f"bindgen.{key} must be true or false, got {value!r}")
        return value

    ir_capabilities = None
    capabilities_data = bindgen.get("ir_capabilities")
    if capabilities_data is not None:
        try:
            ir_capabilities = IrCapabilities(
                capabilities=frozenset(capabilities_data.get("capabilities", [])),
                subgroup_stages=frozenset(
                    ShaderStage(stage) for stage in capabilities_data.get("subgroup_stages", [])
                ),
            )
        except (AttributeError, ValueError) as e:
            raise ConfigError(f"Invalid bindgen.ir_capabilities: {e}") from e

    module_import_root = bindgen.get("module_import_root")
    output = bindgen.get("output")

    options = BindgenOptions(
        entry_points=_paths("entry_points"),
        workspace_root=_path(bindgen.get("workspace_root", "."), "workspace_root"),
        module_import_root=(
            _path(module_import_root, "module_import_root") if module_import_root else None
        ),
        additional_scan_dirs=_paths("additional_scan_dirs"),
        output=_path(output, "output") if output else None,
        skip_hash_check=_bool("skip_hash_check", False),
        skip_header_comments=_bool("skip_header_comments", False),
        emit_rerun_if_change=_bool("emit_rerun_if_change", True),
        detect_ambiguous_imports=_bool("detect_ambiguous_imports", False),
        serialization_strategy=bindgen.get("serialization_strategy", "encase"),
        ir_capabilities=ir_capabilities,
        base_dir=base,
    )
    options.validate()
    return options
