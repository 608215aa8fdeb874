"""MJML serializer - converts a document tree to MJML markup.

This module turns the node list produced by :mod:`tree2mjml.tree` into an
MJML document string::

    <mjml>
      <mj-head>
        ...manual head nodes...
        ...injected <mj-font> declarations...
      </mj-head>
      <mj-body>
        ...body nodes...
      </mj-body>
    </mjml>

Serialization is pure and deterministic: the same tree always yields the
same string, and the input is never mutated.
"""

from __future__ import annotations

import logging
from typing import Callable, Mapping, Optional, Sequence

from tree2mjml import registry
from tree2mjml.fonts import BASELINE_FONTS, FontDeclaration, resolve_fonts
from tree2mjml.registry import ComponentDef
from tree2mjml.tree import Node, strip_hidden

logger = logging.getLogger(__name__)

INDENT_STEP = "  "
# Top-level nodes sit inside <mjml> and <mj-head>/<mj-body>
_SECTION_INDENT = INDENT_STEP
_NODE_INDENT = INDENT_STEP * 2


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _format_attrs(attributes: Mapping[str, str]) -> str:
    """Render ``key="value"`` pairs, skipping blank values.

    Values are emitted verbatim; escaping is left to the compiler.
    """
    pairs = [f'{key}="{value}"' for key, value in attributes.items() if value != ""]
    return f" {' '.join(pairs)}" if pairs else ""


def _font_line(font: FontDeclaration, indent: str) -> str:
    tag = registry.ComponentType.FONT.value
    return f'{indent}<{tag} name="{font.name}" href="{font.href}" />'


# ---------------------------------------------------------------------------
# Serializer
# ---------------------------------------------------------------------------

class MjmlSerializer:
    """Render a list of :class:`Node` objects as an MJML document.

    Usage::

        serializer = MjmlSerializer()
        mjml = serializer.serialize(nodes)

    *lookup* and *baseline_fonts* default to the built-in registry and the
    Inter baseline; tests may substitute their own.
    """

    def __init__(
        self,
        lookup: Callable[[str], Optional[ComponentDef]] = registry.lookup,
        baseline_fonts: Sequence[FontDeclaration] = BASELINE_FONTS,
    ) -> None:
        self._lookup = lookup
        self._baseline_fonts = tuple(baseline_fonts)

    # -- public API ---------------------------------------------------------

    def serialize(self, nodes: Sequence[Node]) -> str:
        """Return the MJML document for *nodes*."""
        visible = strip_hidden(nodes)
        head_nodes = [n for n in visible if registry.is_head_type(n.type)]
        body_nodes = [n for n in visible if not registry.is_head_type(n.type)]

        fonts = resolve_fonts(head_nodes, body_nodes, self._baseline_fonts)
        logger.debug(
            "Serializing %d head node(s), %d body node(s), injecting %d font(s)",
            len(head_nodes), len(body_nodes), len(fonts),
        )

        sections: list[str] = []
        head_block = self._render_head(head_nodes, fonts)
        if head_block:
            sections.append(head_block)
        sections.append(self._render_body(body_nodes))

        return "<mjml>\n" + "\n".join(sections) + "\n</mjml>\n"

    def render_node(self, node: Node, indent: str = _NODE_INDENT) -> str:
        """Render a single node (and its subtree) at *indent*."""
        attr_str = _format_attrs(self.effective_attributes(node))

        if registry.is_self_closing(node.type):
            return f"{indent}<{node.type}{attr_str} />"

        children = "\n".join(
            self.render_node(child, indent + INDENT_STEP)
            for child in node.children or []
        )
        inner = "\n".join(part for part in (node.content or "", children) if part)

        if not inner:
            return f"{indent}<{node.type}{attr_str}></{node.type}>"
        if "\n" in inner:
            return f"{indent}<{node.type}{attr_str}>\n{inner}\n{indent}</{node.type}>"
        return f"{indent}<{node.type}{attr_str}>{inner}</{node.type}>"

    def effective_attributes(self, node: Node) -> dict[str, str]:
        """Registry defaults overlaid with the node's own attributes."""
        definition = self._lookup(node.type)
        merged: dict[str, str] = dict(definition.default_attrs) if definition else {}
        merged.update(node.attributes)
        return merged

    # -- sections -----------------------------------------------------------

    def _render_head(self, head_nodes: Sequence[Node], fonts: Sequence[FontDeclaration]) -> str:
        lines = [self.render_node(node) for node in head_nodes]
        lines.extend(_font_line(font, _NODE_INDENT) for font in fonts)
        if not lines:
            return ""
        return f"{_SECTION_INDENT}<mj-head>\n" + "\n".join(lines) + f"\n{_SECTION_INDENT}</mj-head>"

    def _render_body(self, body_nodes: Sequence[Node]) -> str:
        rendered = "\n".join(self.render_node(node) for node in body_nodes)
        return f"{_SECTION_INDENT}<mj-body>\n{rendered}\n{_SECTION_INDENT}</mj-body>"


_DEFAULT_SERIALIZER = MjmlSerializer()


def serialize(nodes: Sequence[Node]) -> str:
    """Serialize *nodes* with the built-in registry and baseline fonts."""
    return _DEFAULT_SERIALIZER.serialize(nodes)
