"""MJML component catalogue.

Maps every component type the editor can place to its metadata: default
attributes and content, whether it holds children, whether it renders as a
self-closing tag, and whether it lives in ``<mj-head>`` or ``<mj-body>``.
The table is built once at import and never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional


# ---------------------------------------------------------------------------
# Component types
# ---------------------------------------------------------------------------

class ComponentType(str, Enum):
    # Head
    ATTRIBUTES = "mj-attributes"
    BREAKPOINT = "mj-breakpoint"
    FONT = "mj-font"
    HTML_ATTRIBUTES = "mj-html-attributes"
    PREVIEW = "mj-preview"
    STYLE = "mj-style"
    TITLE = "mj-title"
    # Body: layout
    WRAPPER = "mj-wrapper"
    SECTION = "mj-section"
    COLUMN = "mj-column"
    GROUP = "mj-group"
    HERO = "mj-hero"
    # Body: content
    TEXT = "mj-text"
    BUTTON = "mj-button"
    IMAGE = "mj-image"
    DIVIDER = "mj-divider"
    SPACER = "mj-spacer"
    TABLE = "mj-table"
    RAW = "mj-raw"
    # Body: interactive
    ACCORDION = "mj-accordion"
    ACCORDION_ELEMENT = "mj-accordion-element"
    ACCORDION_TITLE = "mj-accordion-title"
    ACCORDION_TEXT = "mj-accordion-text"
    CAROUSEL = "mj-carousel"
    CAROUSEL_IMAGE = "mj-carousel-image"
    # Body: navigation
    NAVBAR = "mj-navbar"
    NAVBAR_LINK = "mj-navbar-link"
    # Body: social
    SOCIAL = "mj-social"
    SOCIAL_ELEMENT = "mj-social-element"


HEAD_TYPES: frozenset[str] = frozenset({
    ComponentType.ATTRIBUTES.value,
    ComponentType.BREAKPOINT.value,
    ComponentType.FONT.value,
    ComponentType.HTML_ATTRIBUTES.value,
    ComponentType.PREVIEW.value,
    ComponentType.STYLE.value,
    ComponentType.TITLE.value,
})

SELF_CLOSING: frozenset[str] = frozenset({
    ComponentType.BREAKPOINT.value,
    ComponentType.FONT.value,
    ComponentType.IMAGE.value,
    ComponentType.DIVIDER.value,
    ComponentType.SPACER.value,
    ComponentType.CAROUSEL_IMAGE.value,
    ComponentType.HTML_ATTRIBUTES.value,
})

COMPONENT_GROUPS: tuple[tuple[str, str], ...] = (
    ("head", "Head"),
    ("layout", "Layout"),
    ("content", "Content"),
    ("interactive", "Interactive"),
    ("navigation", "Navigation"),
    ("social", "Social"),
)


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ComponentDef:
    """Registry entry for one component type."""

    type: str
    label: str
    group: str
    default_attrs: Mapping[str, str] = field(default_factory=dict)
    default_content: Optional[str] = None
    is_container: bool = False

    @property
    def is_self_closing(self) -> bool:
        return self.type in SELF_CLOSING

    @property
    def is_head(self) -> bool:
        return self.type in HEAD_TYPES


def _define(
    ctype: ComponentType,
    label: str,
    group: str,
    *,
    attrs: Optional[dict[str, str]] = None,
    content: Optional[str] = None,
    container: bool = False,
) -> ComponentDef:
    return ComponentDef(
        type=ctype.value,
        label=label,
        group=group,
        default_attrs=MappingProxyType(dict(attrs or {})),
        default_content=content,
        is_container=container,
    )


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------

def _build_components() -> dict[str, ComponentDef]:
    """Build the component table, in palette order."""

    T = ComponentType
    defs = [
        # Head
        _define(T.TITLE, "Title", "head", content="Email title"),
        _define(T.PREVIEW, "Preview Text", "head", content="Preview text shown in the inbox"),
        _define(T.FONT, "Font", "head", attrs={"name": "", "href": ""}),
        _define(T.STYLE, "Style", "head", attrs={"inline": ""}, content=".custom { color: #000000; }"),
        _define(T.BREAKPOINT, "Breakpoint", "head", attrs={"width": "480px"}),
        _define(T.ATTRIBUTES, "Attributes", "head",
                content='<mj-all font-family="Inter, Arial, sans-serif" />'),
        _define(T.HTML_ATTRIBUTES, "HTML Attributes", "head"),

        # Layout
        _define(T.WRAPPER, "Wrapper", "layout", container=True, attrs={
            "padding": "20px 0",
            "background-color": "",
            "border": "",
            "border-radius": "",
            "full-width": "",
        }),
        _define(T.SECTION, "Section", "layout", container=True, attrs={
            "padding": "20px 0",
            "background-color": "#ffffff",
            "background-url": "",
            "text-align": "center",
            "full-width": "",
        }),
        _define(T.COLUMN, "Column", "layout", container=True, attrs={
            "width": "",
            "padding": "0px",
            "vertical-align": "top",
            "background-color": "",
        }),
        _define(T.GROUP, "Group", "layout", container=True, attrs={
            "width": "100%",
            "background-color": "",
            "direction": "ltr",
        }),
        _define(T.HERO, "Hero", "layout", container=True, attrs={
            "mode": "fluid-height",
            "background-url": "",
            "background-color": "#ffffff",
            "background-height": "",
            "background-width": "",
            "padding": "100px 0px",
            "vertical-align": "top",
        }),

        # Content
        _define(T.TEXT, "Text", "content", content="Hello World", attrs={
            "font-family": "Inter, Arial, sans-serif",
            "font-size": "14px",
            "line-height": "1.5",
            "color": "#000000",
            "align": "left",
            "padding": "10px 25px",
        }),
        _define(T.BUTTON, "Button", "content", content="Click me", attrs={
            "href": "#",
            "background-color": "#006dd8",
            "color": "#ffffff",
            "font-family": "Inter, Arial, sans-serif",
            "font-size": "14px",
            "border-radius": "4px",
            "padding": "10px 25px",
            "inner-padding": "10px 25px",
            "align": "center",
        }),
        _define(T.IMAGE, "Image", "content", attrs={
            "src": "https://via.placeholder.com/600x200",
            "alt": "",
            "href": "",
            "width": "",
            "align": "center",
            "padding": "10px 25px",
        }),
        _define(T.DIVIDER, "Divider", "content", attrs={
            "border-color": "#e2e8f0",
            "border-width": "1px",
            "border-style": "solid",
            "padding": "10px 25px",
        }),
        _define(T.SPACER, "Spacer", "content", attrs={"height": "20px"}),
        _define(T.TABLE, "Table", "content",
                content="<tr><th>Header</th></tr><tr><td>Cell</td></tr>",
                attrs={
                    "font-family": "Inter, Arial, sans-serif",
                    "font-size": "13px",
                    "color": "#000000",
                    "width": "100%",
                    "padding": "10px 25px",
                }),
        _define(T.RAW, "Raw HTML", "content", content="<!-- raw html -->"),

        # Interactive
        _define(T.ACCORDION, "Accordion", "interactive", container=True, attrs={
            "border": "1px solid #e2e8f0",
            "font-family": "Inter, Arial, sans-serif",
            "padding": "10px 25px",
        }),
        _define(T.ACCORDION_ELEMENT, "Accordion Element", "interactive", container=True),
        _define(T.ACCORDION_TITLE, "Accordion Title", "interactive", content="Accordion title",
                attrs={"font-size": "16px", "padding": "16px"}),
        _define(T.ACCORDION_TEXT, "Accordion Text", "interactive", content="Accordion content",
                attrs={"font-size": "14px", "padding": "16px"}),
        _define(T.CAROUSEL, "Carousel", "interactive", container=True, attrs={
            "align": "center",
            "thumbnails": "visible",
        }),
        _define(T.CAROUSEL_IMAGE, "Carousel Image", "interactive", attrs={
            "src": "https://via.placeholder.com/600x300",
            "alt": "",
            "href": "",
        }),

        # Navigation
        _define(T.NAVBAR, "Navbar", "navigation", container=True, attrs={
            "align": "center",
            "hamburger": "",
        }),
        _define(T.NAVBAR_LINK, "Navbar Link", "navigation", content="Link", attrs={
            "href": "#",
            "color": "#000000",
            "font-family": "Inter, Arial, sans-serif",
            "font-size": "13px",
            "padding": "15px 10px",
        }),

        # Social
        _define(T.SOCIAL, "Social", "social", container=True, attrs={
            "mode": "horizontal",
            "align": "center",
            "icon-size": "20px",
            "font-size": "13px",
        }),
        _define(T.SOCIAL_ELEMENT, "Social Element", "social", content="Share", attrs={
            "name": "facebook",
            "href": "#",
        }),
    ]
    return {d.type: d for d in defs}


COMPONENTS: Mapping[str, ComponentDef] = MappingProxyType(_build_components())


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------

def lookup(component_type: str) -> Optional[ComponentDef]:
    """Return the :class:`ComponentDef` for *component_type*, or ``None``."""
    return COMPONENTS.get(component_type)


def default_attrs(component_type: str) -> dict[str, str]:
    """Return a fresh copy of the default attributes (``{}`` if unknown)."""
    definition = COMPONENTS.get(component_type)
    if definition is None:
        return {}
    return dict(definition.default_attrs)


def is_container(component_type: str) -> bool:
    definition = COMPONENTS.get(component_type)
    return definition is not None and definition.is_container


def is_self_closing(component_type: str) -> bool:
    return component_type in SELF_CLOSING


def is_head_type(component_type: str) -> bool:
    return component_type in HEAD_TYPES


def components_in_group(group: str) -> list[ComponentDef]:
    """Return the components of *group* in palette order."""
    return [d for d in COMPONENTS.values() if d.group == group]
