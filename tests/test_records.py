"""Tests for saved template records."""

from __future__ import annotations

from datetime import datetime

import pytest

from tree2mjml.exceptions import TreeError
from tree2mjml.records import DEFAULT_TEMPLATE_NAME, TemplateRecord, TemplateSnapshot, build_record
from tree2mjml.serializer import serialize
from tree2mjml.tree import find_node, parse_tree, toggle_hidden


class TestBuildRecord:

    def test_fields(self, sample_data):
        nodes = parse_tree(sample_data)
        record = build_record("  Welcome  ", nodes)
        assert record.name == "Welcome"
        assert record.markup == serialize(nodes)
        assert record.elements == sample_data["elements"]
        assert record.created_at == record.updated_at
        assert datetime.fromisoformat(record.created_at).tzinfo is not None
        assert record.id

    def test_blank_name(self):
        assert build_record("   ", []).name == DEFAULT_TEMPLATE_NAME
        assert build_record(None, []).name == DEFAULT_TEMPLATE_NAME

    def test_nodes_reloaded(self, sample_data):
        nodes = parse_tree(sample_data)
        assert build_record("x", nodes).nodes == nodes


class TestUpdate:

    def test_update_reserializes(self, sample_data):
        nodes = parse_tree(sample_data)
        record = build_record("Welcome", nodes)
        shown = toggle_hidden(nodes, "draft-section")
        updated = record.update(shown)
        assert "Not ready yet" in updated.markup
        assert "Not ready yet" not in record.markup
        assert updated.id == record.id
        assert updated.name == "Welcome"
        assert updated.created_at == record.created_at
        assert updated.updated_at >= record.updated_at
        assert find_node(updated.nodes, "draft-section").hidden is False

    def test_update_renames(self):
        record = build_record("Old", [])
        assert record.update([], name="New").name == "New"


class TestSerialization:

    def test_dict_round_trip(self, sample_data):
        record = build_record("Welcome", parse_tree(sample_data))
        data = record.to_dict()
        assert data["mjml"] == record.markup
        assert TemplateRecord.from_dict(data) == record

    def test_markup_kept_verbatim(self):
        record = TemplateRecord.from_dict({"name": "x", "mjml": "<mjml>stored</mjml>", "elements": []})
        assert record.markup == "<mjml>stored</mjml>"

    def test_missing_markup_regenerated(self):
        record = TemplateRecord.from_dict({"name": "x", "elements": []})
        assert record.markup == serialize([])
        assert record.updated_at == record.created_at


class TestHistory:

    def test_build_records_initial_snapshot(self, sample_data):
        record = build_record("Welcome", parse_tree(sample_data))
        (snapshot,) = record.history
        assert snapshot.template_id == record.id
        assert snapshot.name == "Welcome"
        assert snapshot.markup == record.markup
        assert snapshot.elements == record.elements
        assert snapshot.created_at == record.updated_at

    def test_each_update_appends_snapshot(self, sample_data):
        nodes = parse_tree(sample_data)
        record = build_record("v1", nodes)
        record = record.update(toggle_hidden(nodes, "draft-section"), name="v2")
        record = record.update(nodes, name="v3")
        assert [s.name for s in record.history] == ["v1", "v2", "v3"]
        assert "Not ready yet" in record.history[1].markup
        assert len({s.id for s in record.history}) == 3

    def test_save_as_starts_new_history(self):
        record = build_record("Original", []).update([], name="Original edited")
        copy = record.save_as("  Copy  ")
        assert copy.id != record.id
        assert copy.name == "Copy"
        assert copy.elements == record.elements
        (snapshot,) = copy.history
        assert snapshot.template_id == copy.id
        assert snapshot.name == "Copy"

    def test_restore_brings_back_name_and_tree(self, sample_data):
        nodes = parse_tree(sample_data)
        record = build_record("First", nodes)
        first_id = record.history[0].id
        record = record.update(toggle_hidden(nodes, "draft-section"), name="Second")

        restored = record.restore(first_id)
        assert restored.name == "First"
        assert restored.nodes == nodes
        assert "Not ready yet" not in restored.markup
        assert restored.history == record.history
        assert restored.id == record.id

    def test_restore_unknown_snapshot(self):
        with pytest.raises(TreeError, match="No snapshot"):
            build_record("x", []).restore("missing")

    def test_snapshot_dict_round_trip(self, sample_data):
        snapshot = build_record("Welcome", parse_tree(sample_data)).history[0]
        data = snapshot.to_dict()
        assert set(data) == {"id", "template_id", "name", "mjml", "elements", "created_at"}
        assert TemplateSnapshot.from_dict(data) == snapshot
        assert TemplateSnapshot.from_dict(data).nodes == parse_tree(sample_data)
