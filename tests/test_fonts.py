"""Tests for web-font discovery and injection."""

from __future__ import annotations

import pytest

from tree2mjml.fonts import (
    BASELINE_FONTS,
    FontDeclaration,
    collect_fonts,
    declared_font_names,
    google_fonts_url,
    is_system_font,
    primary_font,
    resolve_fonts,
)
from tree2mjml.tree import Node


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def text(node_id: str, font: str | None = None) -> Node:
    attrs = {"font-family": font} if font is not None else {}
    return Node(id=node_id, type="mj-text", attributes=attrs, content="x")


def section(node_id: str, *children: Node) -> Node:
    return Node(id=node_id, type="mj-section", children=list(children))


def font_decl(node_id: str, name: str, href: str = "https://fonts.example/x") -> Node:
    return Node(id=node_id, type="mj-font", attributes={"name": name, "href": href})


# ---------------------------------------------------------------------------
# Primary font extraction
# ---------------------------------------------------------------------------

class TestPrimaryFont:

    @pytest.mark.parametrize("value, expected", [
        ('"Open Sans", Arial, sans-serif', "Open Sans"),
        ("'Open Sans', Arial", "Open Sans"),
        ("Georgia", "Georgia"),
        ("  Roboto  , sans-serif", "Roboto"),
        ("Lato,", "Lato"),
        ("", ""),
        (", Arial", ""),
    ])
    def test_extraction(self, value, expected):
        assert primary_font(value) == expected

    def test_only_one_quote_layer_stripped(self):
        assert primary_font("\"'Odd'\"") == "'Odd'"


class TestCollectFonts:

    def test_nested_nodes_visited(self):
        tree = [section("s", section("inner", text("t", "Roboto, Arial")))]
        assert collect_fonts(tree) == ["Roboto"]

    def test_discovery_order_and_dedup(self):
        tree = [
            text("a", "Lato"),
            section("s", text("b", "Roboto"), text("c", "Lato, serif")),
            text("d", "Merriweather"),
        ]
        assert collect_fonts(tree) == ["Lato", "Roboto", "Merriweather"]

    def test_dedup_is_case_sensitive(self):
        tree = [text("a", "Roboto"), text("b", "roboto")]
        assert collect_fonts(tree) == ["Roboto", "roboto"]

    def test_blank_values_ignored(self):
        assert collect_fonts([text("a", ""), text("b", "  ,Arial"), text("c")]) == []


class TestSystemFonts:

    @pytest.mark.parametrize("name", ["Arial", "ARIAL", "Helvetica Neue", "georgia", "sans-serif", "Comic Sans MS"])
    def test_system(self, name):
        assert is_system_font(name)

    @pytest.mark.parametrize("name", ["Inter", "Open Sans", "Roboto"])
    def test_not_system(self, name):
        assert not is_system_font(name)


class TestGoogleFontsUrl:

    def test_spaces_become_plus(self):
        assert google_fonts_url("Open Sans") == (
            "https://fonts.googleapis.com/css?family=Open+Sans:300,400,500,700"
        )

    def test_single_word(self):
        assert google_fonts_url("Roboto").endswith("family=Roboto:300,400,500,700")


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------

class TestResolveFonts:

    def test_baseline_always_injected(self):
        assert resolve_fonts([], []) == list(BASELINE_FONTS)

    def test_baseline_skipped_when_declared_any_case(self):
        head = [font_decl("f", "inter")]
        assert resolve_fonts(head, []) == []

    def test_declared_names_are_case_folded(self):
        head = [font_decl("f1", " Open Sans "), font_decl("f2", ""), Node(id="t", type="mj-title", content="x")]
        assert declared_font_names(head) == {"open sans"}

    def test_system_fonts_not_injected(self):
        fonts = resolve_fonts([], [text("a", "Arial"), text("b", "Georgia, serif")])
        assert [f.name for f in fonts] == ["Inter"]

    def test_discovered_fonts_follow_baseline(self):
        fonts = resolve_fonts([], [text("a", "Roboto"), text("b", "'Open Sans'")])
        assert fonts == [
            BASELINE_FONTS[0],
            FontDeclaration("Roboto", google_fonts_url("Roboto")),
            FontDeclaration("Open Sans", google_fonts_url("Open Sans")),
        ]

    def test_manual_declaration_wins(self):
        head = [font_decl("f", "Open Sans")]
        fonts = resolve_fonts(head, [text("a", '"open sans", Arial')])
        assert [f.name for f in fonts] == ["Inter"]

    def test_body_usage_of_baseline_not_duplicated(self):
        fonts = resolve_fonts([], [text("a", "Inter, Arial")])
        assert [f.name for f in fonts] == ["Inter"]

    def test_case_variants_injected_once(self):
        fonts = resolve_fonts([], [text("a", "Roboto"), text("b", "ROBOTO")])
        assert [f.name for f in fonts] == ["Inter", "Roboto"]

    def test_custom_baseline(self):
        baseline = [FontDeclaration("Lato", "https://fonts.example/lato")]
        fonts = resolve_fonts([], [text("a", "Inter")], baseline)
        assert [f.name for f in fonts] == ["Lato", "Inter"]
