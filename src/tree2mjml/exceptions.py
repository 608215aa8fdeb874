"""Custom exceptions for tree2mjml."""


class Tree2MjmlError(Exception):
    """Base exception for tree2mjml operations."""


class TreeError(Tree2MjmlError):
    """Document tree data is malformed or an edit references a missing node."""


class CompileError(Tree2MjmlError):
    """The external MJML compiler failed or could not be reached."""
