"""Tests for preprocessor directive scanning."""

from pathlib import PurePosixPath

from wgslbind.core.directives import expand_import_body, scan_directives, strip_directives
from wgslbind.core.ir import ImportReference


def test_define_import_path_and_imports():
    directives = scan_directives(
        "#define_import_path my_lib::lighting\n"
        "#import my_lib::math\n"
        "\n"
        "fn main() {}\n"
    )

    assert directives.module_name == "my_lib::lighting"
    assert [ref.raw for ref in directives.imports] == ["my_lib::math"]
    assert directives.imports[0].line == 2
    assert directives.imports[0].quoted is False


def test_no_directives():
    directives = scan_directives("fn main() {}\n")

    assert directives.module_name is None
    assert directives.imports == []


def test_quoted_import():
    directives = scan_directives('#import "shaders/common.wgsl"\n')

    assert directives.imports == [ImportReference(raw="shaders/common.wgsl", quoted=True, line=1)]


def test_alias_is_dropped():
    assert expand_import_body(" my_lib::math as m") == [("my_lib::math", False)]


def test_brace_list_expands():
    assert expand_import_body(" a::{b, c::d as e}") == [("a::b", False), ("a::c::d", False)]


def test_nested_brace_list_expands():
    assert expand_import_body(" a::{b::{c, d}, e}") == [
        ("a::b::c", False),
        ("a::b::d", False),
        ("a::e", False),
    ]


def test_multiline_brace_list():
    directives = scan_directives(
        "#import pbr::{\n"
        "    lighting,\n"
        "    shadows,\n"
        "}\n"
        "#import util\n"
    )

    assert [ref.raw for ref in directives.imports] == ["pbr::lighting", "pbr::shadows", "util"]
    assert directives.imports[-1].line == 5


def test_commented_directives_are_ignored():
    directives = scan_directives(
        "// #import not::this\n"
        "#import real::one // #import not::that\n"
    )

    assert [ref.raw for ref in directives.imports] == ["real::one"]


def test_duplicate_imports_keep_first():
    directives = scan_directives("#import a::b\n#import a::b\n#import a::c\n")

    assert [(ref.raw, ref.line) for ref in directives.imports] == [("a::b", 1), ("a::c", 3)]


def test_strip_directives_keeps_line_count():
    content = "#import a::{\n  b,\n}\nfn main() {}\n"

    stripped = strip_directives(content)

    assert stripped.splitlines() == ["", "", "", "fn main() {}"]


class TestImportReferenceCandidates:
    def test_module_path_candidates_most_specific_first(self):
        ref = ImportReference(raw="a::b::c")

        assert ref.candidate_paths() == [
            PurePosixPath("a/b/c.wgsl"),
            PurePosixPath("a/b.wgsl"),
            PurePosixPath("a.wgsl"),
        ]
        assert ref.module_names() == ["a::b::c", "a::b", "a"]

    def test_quoted_reference_is_literal(self):
        ref = ImportReference(raw="dir/x.wgsl", quoted=True)

        assert ref.candidate_paths() == [PurePosixPath("dir/x.wgsl")]
        assert ref.module_names() == []
