"""Web-font discovery for the ``<mj-head>`` section.

Every font a body component names in its ``font-family`` attribute must be
loadable by the compiled email.  System fonts need nothing; anything else is
assumed to be a Google Font and gets an ``<mj-font>`` declaration unless the
author already declared it by hand.  A baseline set of fonts is always
declared.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from tree2mjml.registry import ComponentType
from tree2mjml.tree import Node


@dataclass(frozen=True)
class FontDeclaration:
    """One ``<mj-font>`` entry."""

    name: str
    href: str


# Web-safe families that never need a font link (compared lower-cased)
SYSTEM_FONTS: frozenset[str] = frozenset({
    "arial", "helvetica", "helvetica neue", "verdana", "tahoma", "trebuchet ms",
    "times new roman", "georgia", "garamond", "courier new", "courier",
    "palatino", "book antiqua", "impact", "comic sans ms", "lucida sans",
    "lucida grande", "sans-serif", "serif", "monospace", "cursive", "fantasy",
})

BASELINE_FONTS: tuple[FontDeclaration, ...] = (
    FontDeclaration(
        name="Inter",
        href="https://fonts.googleapis.com/css2?family=Inter:wght@300;400;500;700&display=swap",
    ),
)

_GOOGLE_FONTS_BASE = "https://fonts.googleapis.com/css?family="
_GOOGLE_FONTS_WEIGHTS = "300,400,500,700"
_QUOTES = "\"'"


def _fold(name: str) -> str:
    return name.strip().lower()


def primary_font(value: str) -> str:
    """Return the first family of a ``font-family`` value.

    ``'"Open Sans", Arial, sans-serif'`` gives ``'Open Sans'``.  Returns an
    empty string when there is nothing usable.
    """
    primary = value.split(",", 1)[0].strip()
    if primary[:1] in _QUOTES:
        primary = primary[1:]
    if primary[-1:] in _QUOTES:
        primary = primary[:-1]
    return primary


def collect_fonts(nodes: Iterable[Node]) -> list[str]:
    """Return the distinct primary fonts used under *nodes*, in discovery order."""
    fonts: dict[str, None] = {}

    def walk(items: Iterable[Node]) -> None:
        for node in items:
            value = node.attributes.get("font-family")
            if value:
                name = primary_font(value)
                if name:
                    fonts.setdefault(name, None)
            if node.children:
                walk(node.children)

    walk(nodes)
    return list(fonts)


def is_system_font(name: str) -> bool:
    return _fold(name) in SYSTEM_FONTS


def google_fonts_url(name: str) -> str:
    """Build the Google Fonts stylesheet URL for *name*.

    ``"Open Sans"`` gives
    ``https://fonts.googleapis.com/css?family=Open+Sans:300,400,500,700``.
    """
    encoded = name.strip().replace(" ", "+")
    return f"{_GOOGLE_FONTS_BASE}{encoded}:{_GOOGLE_FONTS_WEIGHTS}"


def declared_font_names(head_nodes: Iterable[Node]) -> set[str]:
    """Return the case-folded names of hand-written ``<mj-font>`` nodes."""
    names: set[str] = set()
    for node in head_nodes:
        if node.type != ComponentType.FONT.value:
            continue
        name = node.attributes.get("name", "")
        if name.strip():
            names.add(_fold(name))
    return names


def resolve_fonts(
    head_nodes: Sequence[Node],
    body_nodes: Sequence[Node],
    baseline: Sequence[FontDeclaration] = BASELINE_FONTS,
) -> list[FontDeclaration]:
    """Return the font declarations to add after the manual head nodes.

    Baseline fonts come first, then fonts discovered in the body.  Any font
    already declared in *head_nodes* (case-insensitively) is skipped, as are
    system fonts.
    """
    declared = declared_font_names(head_nodes)
    injected: list[FontDeclaration] = []

    for font in baseline:
        key = _fold(font.name)
        if key not in declared:
            injected.append(font)
            declared.add(key)

    for name in collect_fonts(body_nodes):
        if is_system_font(name):
            continue
        key = _fold(name)
        if key in declared:
            continue
        injected.append(FontDeclaration(name=name, href=google_fonts_url(name)))
        declared.add(key)

    return injected
