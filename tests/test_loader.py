"""
Unit tests for parsing generated rustdoc index files.
"""
from pathlib import Path

import pytest

from rustdoc_index.loader import (
    IndexFormatError,
    detect_kind,
    iter_index_files,
    load_index_file,
    parse_implementors,
    parse_index_file,
    parse_index_text,
    parse_sidebar_items,
    subject_from_path,
)
from rustdoc_index.registry import IMPLEMENTORS_SINK, SIDEBAR_SINK, new_sinks


class TestSidebarItems:
    """initSidebarItems() files."""

    def test_parse_fixture(self, sidebar_js):
        payload = parse_sidebar_items(sidebar_js, subject="image")

        assert payload.kind == "sidebar"
        assert sorted(payload.keys()) == ["enum", "fn", "mod", "struct", "trait", "type"]
        assert payload["fn"][0] == ("guess_format", "Guess image format from memory block")
        assert len(payload["mod"]) == 13
        assert payload.total_values() == 45

    def test_window_assignment_layout(self):
        text = 'window.SIDEBAR_ITEMS = {"fn":["load","open"],"struct":["Rgb"]};'
        payload = parse_sidebar_items(text)

        assert payload["fn"] == ("load", "open")
        assert payload["struct"] == ("Rgb",)

    def test_missing_call(self):
        with pytest.raises(IndexFormatError, match="initSidebarItems"):
            parse_sidebar_items("var x = 1;", source="bad.js")

    def test_invalid_json(self):
        with pytest.raises(IndexFormatError, match="invalid object literal"):
            parse_sidebar_items('initSidebarItems({"fn": [["load", ]);')

    def test_wrong_value_types(self):
        with pytest.raises(IndexFormatError, match="Invalid payload"):
            parse_sidebar_items('initSidebarItems({"fn": [1, 2]});')


class TestImplementors:
    """implementors/**/trait.*.js files."""

    def test_parse_fixture(self, fromstr_js):
        payload = parse_implementors(fromstr_js, subject="core::str::FromStr")

        assert payload.kind == "implementors"
        assert payload.keys() == [
            "num_bigint",
            "num_rational",
            "proc_macro2",
            "rustc_serialize",
            "serde_derive_internals",
        ]
        assert len(payload["num_bigint"]) == 2
        assert payload["num_bigint"][0].startswith('impl <a class="trait"')
        assert "BigUint" in payload["num_bigint"][0]
        assert "BigInt</a>" in payload["num_bigint"][1]

    def test_escaped_quotes_decoded(self, fromstr_js):
        payload = parse_implementors(fromstr_js)

        assert '\\"' not in payload["proc_macro2"][0]
        assert 'title="struct proc_macro2::TokenStream"' in payload["proc_macro2"][0]

    def test_object_literal_layout(self):
        text = (
            '(function() {var implementors = {"foo":["impl A for B"],"bar":["impl A for C"]};\n'
            'if (window.register_implementors) {window.register_implementors(implementors);} '
            'else {window.pending_implementors = implementors;}})()'
        )
        payload = parse_implementors(text)

        assert payload.keys() == ["foo", "bar"]
        assert payload["bar"] == ("impl A for C",)

    def test_object_literal_with_trailing_commas(self):
        text = '(function() {var implementors = {"foo":["impl A for B",],};})()'
        payload = parse_implementors(text)

        assert payload["foo"] == ("impl A for B",)

    def test_commas_inside_strings_untouched(self):
        text = '(function() {var implementors = {"foo":["impl A for [T, ]","impl B for {x, }",],};})()'
        payload = parse_implementors(text)

        assert payload["foo"] == ("impl A for [T, ]", "impl B for {x, }")

    def test_assignment_commas_inside_strings_untouched(self):
        text = '(function() {var implementors = {};\nimplementors["foo"] = ["impl A for [T, ]",];\n})()'
        payload = parse_implementors(text)

        assert payload["foo"] == ("impl A for [T, ]",)

    def test_repeated_assignment_keeps_last(self):
        text = (
            '(function() {var implementors = {};\n'
            'implementors["foo"] = ["impl A for B",];\n'
            'implementors["foo"] = ["impl A for C",];\n'
            '})()'
        )
        payload = parse_implementors(text)

        assert payload.keys() == ["foo"]
        assert payload["foo"] == ("impl A for C",)

    def test_empty_table(self):
        payload = parse_implementors("(function() {var implementors = {};\n})()")

        assert len(payload) == 0

    def test_broken_assignment_reports_line(self):
        text = (
            '(function() {var implementors = {};\n'
            'implementors["foo"] = ["impl A for B];\n'
            '})()'
        )
        with pytest.raises(IndexFormatError, match="line 2"):
            parse_implementors(text, source="trait.A.js")

    def test_missing_table(self):
        with pytest.raises(IndexFormatError, match="no implementors table"):
            parse_implementors("console.log(1);")


class TestDetection:
    """Dispatch by content."""

    def test_detect_kind(self, sidebar_js, fromstr_js):
        assert detect_kind(sidebar_js) == "sidebar"
        assert detect_kind(fromstr_js) == "implementors"

    def test_unrecognised_content(self):
        with pytest.raises(IndexFormatError, match="not a rustdoc index file"):
            detect_kind("var searchIndex = {};", source="search-index.js")

    def test_error_carries_source(self):
        with pytest.raises(IndexFormatError) as exc_info:
            parse_index_text("nothing here", source="static/main.js")

        assert exc_info.value.source == "static/main.js"
        assert str(exc_info.value).startswith("static/main.js: ")


class TestSubjects:
    """Subjects derived from file locations."""

    def test_trait_path_from_implementors_file(self):
        path = Path("doc/implementors/core/str/trait.FromStr.js")
        assert subject_from_path(path) == "core::str::FromStr"

    def test_trait_path_relative_to_doc_root(self, tmp_path):
        path = tmp_path / "implementors" / "rsx_shared" / "traits" / "layout_traits" / "trait.TLayoutNode.js"
        assert subject_from_path(path, tmp_path) == "rsx_shared::traits::layout_traits::TLayoutNode"

    def test_module_path_from_sidebar_file(self, tmp_path):
        path = tmp_path / "image" / "imageops" / "sidebar-items.js"
        assert subject_from_path(path, tmp_path) == "image::imageops"

    def test_module_name_without_doc_root(self):
        assert subject_from_path(Path("doc/image/sidebar-items.js")) == "image"


class TestFiles:
    """Reading files and performing the handoff."""

    def test_parse_index_file(self, doc_tree):
        payload = parse_index_file(doc_tree / "image" / "sidebar-items.js", doc_root=doc_tree)

        assert payload.kind == "sidebar"
        assert payload.subject == "image"
        assert payload.source.endswith("sidebar-items.js")

    def test_missing_file(self, tmp_path):
        with pytest.raises(IndexFormatError, match="cannot read file"):
            parse_index_file(tmp_path / "sidebar-items.js")

    def test_invalid_utf8_file(self, tmp_path):
        path = tmp_path / "sidebar-items.js"
        path.write_bytes(b'initSidebarItems({"fn":[["\xff","x"]]});')

        with pytest.raises(IndexFormatError, match="not valid UTF-8") as excinfo:
            parse_index_file(path)
        assert excinfo.value.source == str(path)

    def test_load_without_consumer_parks_payload(self, doc_tree):
        path = doc_tree / "implementors" / "core" / "str" / "trait.FromStr.js"
        payload = load_index_file(path, doc_root=doc_tree)

        assert IMPLEMENTORS_SINK.pending == payload
        assert SIDEBAR_SINK.pending is None

    def test_two_files_before_consumer_keeps_last(self, doc_tree):
        first = load_index_file(doc_tree / "implementors" / "core" / "str" / "trait.FromStr.js", doc_root=doc_tree)
        second = load_index_file(
            doc_tree / "implementors" / "rustc_serialize" / "serialize" / "trait.Decodable.js",
            doc_root=doc_tree,
        )

        received = []
        IMPLEMENTORS_SINK.install(received.append)

        assert received == [second]
        assert received[0] != first
        assert IMPLEMENTORS_SINK.dropped == 1

    def test_load_into_private_sinks(self, doc_tree):
        sinks = new_sinks()
        received = []
        sinks["sidebar"].install(received.append)

        payload = load_index_file(doc_tree / "image" / "sidebar-items.js", doc_root=doc_tree, sinks=sinks)

        assert received == [payload]
        assert SIDEBAR_SINK.pending is None

    def test_iter_index_files_order(self, doc_tree):
        files = [p.relative_to(doc_tree).as_posix() for p in iter_index_files(doc_tree)]

        assert files == [
            "image/sidebar-items.js",
            "implementors/core/str/trait.FromStr.js",
            "implementors/rsx_shared/traits/layout_traits/trait.TLayoutNode.js",
            "implementors/rustc_serialize/serialize/trait.Decodable.js",
        ]

    def test_iter_index_files_empty_dir(self, tmp_path):
        assert list(iter_index_files(tmp_path)) == []
