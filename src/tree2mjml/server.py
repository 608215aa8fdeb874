"""FastAPI web service for tree-to-MJML conversion.

Endpoints::

    GET  /health          Health check.
    GET  /components      List the component catalogue.
    POST /serialize       Send tree JSON, receive {"mjml": ...}.
    POST /serialize/file  Upload a tree .json file, receive .mjml back.
    POST /compile         Send tree JSON, receive MJML plus compiled HTML.

Run::

    uvicorn tree2mjml.server:app --host 0.0.0.0 --port 8000
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

from fastapi import FastAPI, File, HTTPException, UploadFile
from fastapi.responses import Response
from pydantic import BaseModel, Field

from tree2mjml import __version__
from tree2mjml.converter import Converter
from tree2mjml.exceptions import CompileError, TreeError
from tree2mjml.registry import COMPONENT_GROUPS, components_in_group

logger = logging.getLogger(__name__)

app = FastAPI(
    title="tree2mjml",
    description="Email editor tree to MJML conversion service",
    version=__version__,
)

MJML_MEDIA_TYPE = "application/xml"


class SerializeRequest(BaseModel):
    elements: list[dict[str, Any]] = Field(default_factory=list, description="Top-level tree nodes")
    strict: bool = Field(default=False, description="Reject trees that break invariants")


def _content_disposition(filename: str) -> str:
    """Build Content-Disposition header, RFC 5987 for non-ASCII names."""
    try:
        filename.encode("ascii")
        return f'attachment; filename="{filename}"'
    except UnicodeEncodeError:
        encoded = quote(filename)
        return f"attachment; filename*=UTF-8''{encoded}"


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


@app.get("/components")
async def list_components() -> dict[str, list[dict[str, Any]]]:
    """List component types grouped the way the palette shows them."""
    groups = []
    for key, label in COMPONENT_GROUPS:
        groups.append({
            "key": key,
            "label": label,
            "components": [
                {
                    "type": d.type,
                    "label": d.label,
                    "isContainer": d.is_container,
                    "isSelfClosing": d.is_self_closing,
                    "defaultAttrs": dict(d.default_attrs),
                    "defaultContent": d.default_content,
                }
                for d in components_in_group(key)
            ],
        })
    return {"groups": groups}


@app.post("/serialize")
async def serialize_tree(request: SerializeRequest) -> dict[str, str]:
    """Serialize a tree to MJML.

    - **elements**: top-level tree nodes
    - **strict**: fail on invariant violations instead of coercing
    """
    try:
        mjml = Converter(strict=request.strict).convert_data(request.elements)
    except TreeError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return {"mjml": mjml}


@app.post("/serialize/file")
async def serialize_file(file: UploadFile = File(...)) -> Response:
    """Upload a tree JSON file and receive the MJML document back."""
    raw = await file.read()
    try:
        mjml = Converter().convert_text(raw.decode("utf-8"))
    except (TreeError, UnicodeDecodeError) as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    filename = (file.filename or "template.json").rsplit(".", 1)[0] + ".mjml"

    return Response(
        content=mjml,
        media_type=MJML_MEDIA_TYPE,
        headers={"Content-Disposition": _content_disposition(filename)},
    )


@app.post("/compile")
async def compile_tree(request: SerializeRequest) -> dict[str, Any]:
    """Serialize a tree and compile it to HTML through the compiler service."""
    # Endpoint comes from TREE2MJML_COMPILER_URL only
    converter = Converter(strict=request.strict)
    try:
        mjml, result = await converter.compile_data(request.elements)
    except TreeError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except CompileError as exc:
        logger.error("Compilation failed: %s", exc)
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    return {
        "mjml": mjml,
        "html": result.html,
        "warnings": [w.to_dict() for w in result.warnings],
    }
