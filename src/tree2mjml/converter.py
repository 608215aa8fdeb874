"""High-level tree-to-MJML conversion orchestrator.

Ties together the tree loader, serializer and compiler client into a
single public API for converting editor JSON to MJML (and on to HTML).
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

import httpx

from tree2mjml.compiler import CompileResult, compile_markup
from tree2mjml.exceptions import TreeError
from tree2mjml.records import TemplateRecord, build_record
from tree2mjml.serializer import MjmlSerializer
from tree2mjml.tree import Node, TreeParser, validate_tree

logger = logging.getLogger(__name__)


class Converter:
    """Convert editor tree data to MJML.

    Usage::

        converter = Converter()
        converter.convert_file("template.json", "template.mjml")

        # or from data
        mjml = converter.convert_data([{"id": "a", "type": "mj-section", ...}])
    """

    def __init__(self, *, strict: bool = False, compiler_url: Optional[str] = None) -> None:
        self.strict = strict
        self.compiler_url = compiler_url
        self.parser = TreeParser()
        self.serializer = MjmlSerializer()

    def load(self, data: Any) -> list[Node]:
        """Load tree data, checking invariants first when ``strict`` is set.

        Raises:
            TreeError: If the data is malformed, or breaks an invariant in
                strict mode.
        """
        nodes = self.parser.parse(data)
        if self.strict:
            problems = validate_tree(nodes)
            if problems:
                raise TreeError("Invalid tree: " + "; ".join(problems))
        return nodes

    def convert_data(self, data: Any) -> str:
        """Convert JSON-shaped tree data to an MJML string."""
        return self.serializer.serialize(self.load(data))

    def convert_text(self, json_text: str) -> str:
        """Convert a JSON document holding the tree to an MJML string."""
        try:
            data = json.loads(json_text)
        except json.JSONDecodeError as exc:
            raise TreeError(f"Invalid JSON: {exc}") from exc
        return self.convert_data(data)

    def convert_file(
        self,
        input_path: str | Path,
        output_path: str | Path,
        *,
        encoding: str = "utf-8",
    ) -> str:
        """Read a tree JSON file and write the MJML output.

        Args:
            input_path: Path to the input ``.json`` file.
            output_path: Path for the output ``.mjml`` file.
            encoding: Text encoding of the source file.

        Returns:
            The generated MJML.
        """
        input_path = Path(input_path)
        output_path = Path(output_path)

        mjml = self.convert_text(input_path.read_text(encoding=encoding))

        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(mjml, encoding="utf-8")
        logger.info("Wrote %s (%d bytes)", output_path, len(mjml))
        return mjml

    async def compile_data(
        self, data: Any, *, client: httpx.AsyncClient | None = None
    ) -> tuple[str, CompileResult]:
        """Serialize tree data and compile it; returns ``(mjml, result)``."""
        mjml = self.convert_data(data)
        result = await compile_markup(mjml, url=self.compiler_url, client=client)
        return mjml, result

    def build_record(self, name: Optional[str], data: Any) -> TemplateRecord:
        """Build a saveable template record from tree data."""
        return build_record(name, self.load(data))
