"""Tests for import resolution across search roots."""

from pathlib import Path

import pytest

from wgslbind.core.errors import AmbiguousImportError, UnresolvedImportError
from wgslbind.core.ir import ImportReference, ModulePath
from wgslbind.core.registry import SourceRegistry
from wgslbind.core.resolver import ImportResolver, SearchRoots


@pytest.fixture
def layout(tmp_path: Path) -> dict[str, Path]:
    """Workspace with a module import root inside it and a vendor scan dir beside it."""
    workspace = tmp_path / "ws"
    import_root = workspace / "modules"
    vendor = tmp_path / "vendor"
    for directory in (workspace, import_root, vendor):
        directory.mkdir(parents=True, exist_ok=True)

    (workspace / "main.wgsl").write_text("#import util::color\n", encoding="utf-8")
    return {"workspace": workspace, "import_root": import_root, "vendor": vendor}


def _write(path: Path, content: str = "fn f() {}\n") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def _importer(layout: dict[str, Path]):
    return SourceRegistry(layout["workspace"]).load(layout["workspace"] / "main.wgsl")


def _roots(layout: dict[str, Path]) -> SearchRoots:
    return SearchRoots(
        workspace_root=layout["workspace"],
        module_import_root=layout["import_root"],
        additional_scan_dirs=(layout["vendor"],),
    )


def test_module_import_root_wins_over_scan_dir(layout):
    preferred = _write(layout["import_root"] / "util" / "color.wgsl")
    _write(layout["vendor"] / "util" / "color.wgsl")
    resolver = ImportResolver(_roots(layout))

    found = resolver.locate(_importer(layout), ImportReference(raw="util::color"))

    assert found == preferred


def test_resolve_returns_canonical_module_path(layout):
    _write(layout["import_root"] / "util" / "color.wgsl")
    resolver = ImportResolver(_roots(layout))

    module_path = resolver.resolve(_importer(layout), ImportReference(raw="util::color"))

    assert module_path == ModulePath("modules/util/color.wgsl")


def test_workspace_root_wins_over_scan_dir(layout):
    preferred = _write(layout["workspace"] / "util" / "color.wgsl")
    _write(layout["vendor"] / "util" / "color.wgsl")
    resolver = ImportResolver(_roots(layout))

    assert resolver.locate(_importer(layout), ImportReference(raw="util::color")) == preferred


def test_scan_dirs_searched_in_order(layout, tmp_path: Path):
    second_vendor = tmp_path / "vendor2"
    first = _write(layout["vendor"] / "noise.wgsl")
    _write(second_vendor / "noise.wgsl")
    roots = SearchRoots(
        workspace_root=layout["workspace"],
        additional_scan_dirs=(layout["vendor"], second_vendor),
    )

    found = ImportResolver(roots).locate(_importer(layout), ImportReference(raw="noise"))

    assert found == first


def test_item_import_falls_back_to_module_file(layout):
    module_file = _write(layout["import_root"] / "util" / "color.wgsl")
    resolver = ImportResolver(_roots(layout))

    found = resolver.locate(_importer(layout), ImportReference(raw="util::color::srgb_to_linear"))

    assert found == module_file


def test_quoted_reference(layout):
    target = _write(layout["workspace"] / "shared" / "common.wgsl")
    resolver = ImportResolver(_roots(layout))

    found = resolver.locate(
        _importer(layout), ImportReference(raw="shared/common.wgsl", quoted=True)
    )

    assert found == target


def test_unresolved_import_points_at_directive(layout):
    resolver = ImportResolver(_roots(layout))

    with pytest.raises(UnresolvedImportError) as exc_info:
        resolver.locate(_importer(layout), ImportReference(raw="util::color", line=1))

    error = exc_info.value
    assert error.reference == "util::color"
    assert error.importer == "main.wgsl"
    assert error.context is not None
    assert error.context.line == 1
    assert "Cannot resolve import util::color" in str(error)
    assert "#import util::color" in str(error)


def test_ambiguity_is_first_match_by_default(layout):
    _write(layout["import_root"] / "util" / "color.wgsl")
    _write(layout["vendor"] / "util" / "color.wgsl")

    resolver = ImportResolver(_roots(layout), detect_ambiguous=False)

    assert resolver.locate(_importer(layout), ImportReference(raw="util::color")).is_relative_to(
        layout["import_root"]
    )


def test_ambiguity_detection(layout):
    _write(layout["import_root"] / "util" / "color.wgsl")
    _write(layout["vendor"] / "util" / "color.wgsl")
    resolver = ImportResolver(_roots(layout), detect_ambiguous=True)

    with pytest.raises(AmbiguousImportError) as exc_info:
        resolver.locate(_importer(layout), ImportReference(raw="util::color"))

    assert len(exc_info.value.candidates) == 2


def test_root_listed_twice_is_not_ambiguous(layout):
    # modules/ is configured both as import root and as a scan dir
    target = _write(layout["import_root"] / "tone.wgsl")
    roots = SearchRoots(
        workspace_root=layout["workspace"],
        module_import_root=layout["import_root"],
        additional_scan_dirs=(layout["import_root"],),
    )

    found = ImportResolver(roots, detect_ambiguous=True).locate(
        _importer(layout), ImportReference(raw="tone")
    )

    assert found == target


def test_search_roots_order_and_dedup(tmp_path: Path):
    roots = SearchRoots(
        workspace_root=tmp_path,
        module_import_root=tmp_path / "lib",
        additional_scan_dirs=(tmp_path / "a", tmp_path, tmp_path / "b"),
    )

    assert roots.ordered() == [tmp_path / "lib", tmp_path, tmp_path / "a", tmp_path / "b"]
