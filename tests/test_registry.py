"""Tests for the component registry."""

from __future__ import annotations

import pytest

from tree2mjml import registry
from tree2mjml.registry import (
    COMPONENT_GROUPS,
    COMPONENTS,
    HEAD_TYPES,
    SELF_CLOSING,
    ComponentType,
)


class TestCatalogue:

    def test_every_type_registered(self):
        for ctype in ComponentType:
            assert registry.lookup(ctype.value) is not None, ctype

    def test_lookup_unknown_returns_none(self):
        assert registry.lookup("mj-unknown") is None

    def test_every_component_in_a_known_group(self):
        keys = {key for key, _label in COMPONENT_GROUPS}
        for definition in COMPONENTS.values():
            assert definition.group in keys

    def test_head_group_matches_head_types(self):
        head = {d.type for d in registry.components_in_group("head")}
        assert head == set(HEAD_TYPES)

    def test_self_closing_types_are_not_containers(self):
        for ctype in SELF_CLOSING:
            assert not registry.is_container(ctype)

    @pytest.mark.parametrize("ctype", [
        "mj-wrapper", "mj-section", "mj-column", "mj-group", "mj-hero",
        "mj-accordion", "mj-accordion-element", "mj-carousel", "mj-navbar", "mj-social",
    ])
    def test_layout_and_wrappers_are_containers(self, ctype):
        assert registry.is_container(ctype)

    def test_text_is_leaf(self):
        assert not registry.is_container("mj-text")
        assert registry.lookup("mj-text").default_content


class TestDefaults:

    def test_default_attrs_is_a_copy(self):
        attrs = registry.default_attrs("mj-section")
        attrs["padding"] = "0"
        assert registry.default_attrs("mj-section")["padding"] == "20px 0"

    def test_default_attrs_unknown_is_empty(self):
        assert registry.default_attrs("mj-unknown") == {}

    def test_registry_is_read_only(self):
        with pytest.raises(TypeError):
            COMPONENTS["mj-new"] = COMPONENTS["mj-text"]  # type: ignore[index]
        with pytest.raises(TypeError):
            COMPONENTS["mj-text"].default_attrs["color"] = "red"  # type: ignore[index]


class TestClassification:

    def test_head_and_self_closing_flags(self):
        font = registry.lookup("mj-font")
        assert font.is_head
        assert font.is_self_closing

        image = registry.lookup("mj-image")
        assert not image.is_head
        assert image.is_self_closing

    def test_unknown_type_is_body_and_not_self_closing(self):
        assert not registry.is_head_type("mj-custom")
        assert not registry.is_self_closing("mj-custom")
        assert not registry.is_container("mj-custom")
