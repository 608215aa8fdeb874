"""Saved template records.

A record stores the generated MJML verbatim next to the tree snapshot it
was generated from, so the editor can reopen the tree and other consumers
can use the markup without re-serializing.

Every save appends a :class:`TemplateSnapshot` to the record's history;
:meth:`TemplateRecord.restore` brings a snapshot's name and tree back.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Optional, Sequence

from tree2mjml.exceptions import TreeError
from tree2mjml.serializer import serialize
from tree2mjml.tree import Node, dump_tree, parse_tree

DEFAULT_TEMPLATE_NAME = "Untitled template"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _new_id() -> str:
    return str(uuid.uuid4())


def _clean_name(name: Optional[str]) -> str:
    return (name or "").strip() or DEFAULT_TEMPLATE_NAME


@dataclass(frozen=True)
class TemplateSnapshot:
    """One saved version of a template."""

    template_id: str
    name: str
    markup: str
    elements: list[dict[str, Any]]
    created_at: str
    id: str = field(default_factory=_new_id)

    @property
    def nodes(self) -> list[Node]:
        return parse_tree(self.elements)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "template_id": self.template_id,
            "name": self.name,
            "mjml": self.markup,
            "elements": self.elements,
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TemplateSnapshot:
        nodes = parse_tree(data.get("elements", []))
        return cls(
            id=str(data.get("id") or _new_id()),
            template_id=str(data.get("template_id", "")),
            name=_clean_name(data.get("name")),
            markup=data.get("mjml") or serialize(nodes),
            elements=dump_tree(nodes),
            created_at=data.get("created_at") or _now(),
        )


@dataclass(frozen=True)
class TemplateRecord:
    name: str
    markup: str
    elements: list[dict[str, Any]]
    created_at: str
    updated_at: str
    id: str = field(default_factory=_new_id)
    # Oldest first
    history: tuple[TemplateSnapshot, ...] = ()

    @property
    def nodes(self) -> list[Node]:
        return parse_tree(self.elements)

    def _snapshot(self) -> TemplateSnapshot:
        return TemplateSnapshot(
            template_id=self.id,
            name=self.name,
            markup=self.markup,
            elements=self.elements,
            created_at=self.updated_at,
        )

    def _with_snapshot(self) -> TemplateRecord:
        return replace(self, history=(*self.history, self._snapshot()))

    def update(self, nodes: Sequence[Node], name: Optional[str] = None) -> TemplateRecord:
        """Save *nodes* into this record, with fresh markup and a new snapshot."""
        saved = replace(
            self,
            name=_clean_name(name) if name is not None else self.name,
            markup=serialize(nodes),
            elements=dump_tree(nodes),
            updated_at=_now(),
        )
        return saved._with_snapshot()

    def save_as(self, name: Optional[str]) -> TemplateRecord:
        """Copy this record under a new id and name, with its own history."""
        timestamp = _now()
        copy = replace(
            self,
            id=_new_id(),
            name=_clean_name(name),
            created_at=timestamp,
            updated_at=timestamp,
            history=(),
        )
        return copy._with_snapshot()

    def find_snapshot(self, snapshot_id: str) -> TemplateSnapshot:
        for snapshot in self.history:
            if snapshot.id == snapshot_id:
                return snapshot
        raise TreeError(f"No snapshot {snapshot_id!r} for template {self.id!r}")

    def restore(self, snapshot_id: str) -> TemplateRecord:
        """Bring back the name and tree saved in *snapshot_id*.

        The restored state is not itself recorded until the next save.
        """
        snapshot = self.find_snapshot(snapshot_id)
        return replace(
            self,
            name=snapshot.name,
            markup=snapshot.markup,
            elements=snapshot.elements,
            updated_at=_now(),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "mjml": self.markup,
            "elements": self.elements,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "history": [snapshot.to_dict() for snapshot in self.history],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TemplateRecord:
        nodes = parse_tree(data.get("elements", []))
        created = data.get("created_at") or _now()
        return cls(
            id=str(data.get("id") or _new_id()),
            name=_clean_name(data.get("name")),
            # Older records may predate stored markup
            markup=data.get("mjml") or serialize(nodes),
            elements=dump_tree(nodes),
            created_at=created,
            updated_at=data.get("updated_at") or created,
            history=tuple(TemplateSnapshot.from_dict(s) for s in data.get("history") or []),
        )


def build_record(name: Optional[str], nodes: Sequence[Node]) -> TemplateRecord:
    """Create a new record for *nodes*, serializing them now.

    The record starts with one snapshot of its initial state.
    """
    timestamp = _now()
    record = TemplateRecord(
        name=_clean_name(name),
        markup=serialize(nodes),
        elements=dump_tree(nodes),
        created_at=timestamp,
        updated_at=timestamp,
    )
    return record._with_snapshot()
