"""Shared pytest fixtures for wgslbind tests."""

from collections.abc import Callable
from pathlib import Path
from textwrap import dedent

import pytest

from wgslbind.core.options import BindgenOptions
from wgslbind.core.registry import SourceRegistry
from wgslbind.core.resolver import SearchRoots

WriteShader = Callable[[str, str], Path]


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Return the workspace root of a temporary shader tree."""
    root = tmp_path / "shaders"
    root.mkdir()
    return root


@pytest.fixture
def write_shader(workspace: Path) -> WriteShader:
    """Return a helper writing a dedented shader file relative to the workspace."""

    def _write_shader(relative: str, content: str) -> Path:
        path = workspace / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(dedent(content).lstrip("\n"), encoding="utf-8")
        return path

    return _write_shader


@pytest.fixture
def roots(workspace: Path) -> SearchRoots:
    return SearchRoots(workspace_root=workspace)


@pytest.fixture
def registry(workspace: Path) -> SourceRegistry:
    return SourceRegistry(workspace)


@pytest.fixture
def triangle_project(workspace: Path, write_shader: WriteShader) -> BindgenOptions:
    """
    Two entry points sharing a diamond of dependencies.

    triangle.wgsl -> lighting, camera; lighting -> math; camera -> math
    blit.wgsl has no imports.
    """
    write_shader(
        "common/math.wgsl",
        """
        #define_import_path common::math

        fn saturate(x: f32) -> f32 {
            return clamp(x, 0.0, 1.0);
        }
        """,
    )
    write_shader(
        "common/camera.wgsl",
        """
        #define_import_path common::camera
        #import common::math

        struct Camera {
            view_proj: mat4x4<f32>,
        };

        @group(0) @binding(0) var<uniform> camera: Camera;
        """,
    )
    write_shader(
        "common/lighting.wgsl",
        """
        #define_import_path common::lighting
        #import common::math::saturate

        @group(1) @binding(0) var<storage, read> lights: array<vec4<f32>>;
        """,
    )
    write_shader(
        "triangle.wgsl",
        """
        #import common::lighting
        #import common::camera

        @vertex
        fn vs_main(@builtin(vertex_index) index: u32) -> @builtin(position) vec4<f32> {
            return vec4<f32>(0.0, 0.0, 0.0, 1.0);
        }

        @fragment
        fn fs_main() -> @location(0) vec4<f32> {
            return vec4<f32>(1.0);
        }
        """,
    )
    write_shader(
        "blit.wgsl",
        """
        @group(0) @binding(0) var src: texture_2d<f32>;
        @group(0) @binding(1) var src_sampler: sampler;

        @compute @workgroup_size(8, 8)
        fn main() {}
        """,
    )
    return BindgenOptions(
        entry_points=[workspace / "triangle.wgsl", workspace / "blit.wgsl"],
        workspace_root=workspace,
        output=workspace.parent / "out" / "bindings.rs",
        emit_rerun_if_change=False,
    )
