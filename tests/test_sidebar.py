"""
Unit tests for the sidebar view.
"""
import pytest

from rustdoc_index.loader import parse_sidebar_items
from rustdoc_index.payload import IndexPayload
from rustdoc_index.sidebar import (
    KIND_ORDER,
    SidebarItem,
    html_to_text,
    item_href,
    kind_sort_key,
    sidebar_items,
)


class TestSidebarItems:
    """Expanding sidebar payloads."""

    def test_fixture_items(self, sidebar_js):
        items = sidebar_items(parse_sidebar_items(sidebar_js, subject="image"))

        assert len(items) == 45
        assert items[0] == SidebarItem(
            kind="mod", name="bmp", description="Decoding and Encoding of BMP Images", module="image"
        )
        kinds = [item.kind for item in items]
        assert kinds.index("struct") < kinds.index("enum") < kinds.index("trait") < kinds.index("fn")

    def test_item_order_within_kind_preserved(self, sidebar_js):
        items = sidebar_items(parse_sidebar_items(sidebar_js, subject="image"))
        functions = [item.name for item in items if item.kind == "fn"]

        assert functions == [
            "guess_format",
            "load",
            "load_from_memory",
            "load_from_memory_with_format",
            "open",
            "save_buffer",
        ]

    def test_bare_names(self):
        payload = IndexPayload.from_mapping({"fn": ["load", "open"]}, kind="sidebar", subject="image")
        items = sidebar_items(payload)

        assert [(i.name, i.description) for i in items] == [("load", ""), ("open", "")]

    def test_html_description_reduced_to_text(self):
        payload = IndexPayload.from_mapping(
            {"fn": [["is_empty", "Returns <code>true</code> if&nbsp;empty &amp; clean"]]},
            kind="sidebar",
        )

        assert sidebar_items(payload)[0].description == "Returns true if empty & clean"

    def test_rejects_implementors_payload(self):
        payload = IndexPayload.from_mapping({"foo": ["impl A for B"]}, kind="implementors")

        with pytest.raises(ValueError, match="sidebar"):
            sidebar_items(payload)


class TestKindOrder:
    """rustdoc display order of kinds."""

    def test_known_kinds_in_order(self):
        assert sorted(["fn", "struct", "mod"], key=kind_sort_key) == ["mod", "struct", "fn"]

    def test_unknown_kinds_after_known(self):
        ordered = sorted(["zzz", "aaa", KIND_ORDER[-1]], key=kind_sort_key)

        assert ordered == [KIND_ORDER[-1], "aaa", "zzz"]


class TestItemHref:
    """Relative URLs of item pages."""

    def test_module_link(self):
        item = SidebarItem(kind="mod", name="imageops", module="image")
        assert item_href(item) == "image/imageops/index.html"

    def test_item_link(self):
        item = SidebarItem(kind="fn", name="load", module="image")
        assert item_href(item) == "image/fn.load.html"

    def test_nested_module_link(self):
        item = SidebarItem(kind="struct", name="Filter", module="image::imageops")
        assert item_href(item) == "image/imageops/struct.Filter.html"

    def test_path(self):
        assert SidebarItem(kind="fn", name="load", module="image").path == "image::load"
        assert SidebarItem(kind="fn", name="load").path == "load"


class TestHtmlToText:

    def test_plain_text_whitespace_collapsed(self):
        assert html_to_text("  Grayscale   colors ") == "Grayscale colors"

    def test_line_breaks_become_spaces(self):
        assert html_to_text("where<br>&nbsp;&nbsp;T: Clone") == "where T: Clone"
