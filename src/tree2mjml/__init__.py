"""tree2mjml: serialize email editor trees to MJML."""

__version__ = "0.1.0"

from tree2mjml.exceptions import CompileError, Tree2MjmlError, TreeError
from tree2mjml.fonts import FontDeclaration, collect_fonts, resolve_fonts
from tree2mjml.registry import COMPONENTS, HEAD_TYPES, SELF_CLOSING, ComponentDef, ComponentType, lookup
from tree2mjml.serializer import MjmlSerializer, serialize
from tree2mjml.tree import Node, parse_tree

__all__ = [
    "COMPONENTS",
    "CompileError",
    "ComponentDef",
    "ComponentType",
    "FontDeclaration",
    "HEAD_TYPES",
    "MjmlSerializer",
    "Node",
    "SELF_CLOSING",
    "Tree2MjmlError",
    "TreeError",
    "collect_fonts",
    "lookup",
    "parse_tree",
    "resolve_fonts",
    "serialize",
]
