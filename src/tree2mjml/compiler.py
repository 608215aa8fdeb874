"""Client for the external MJML-to-HTML compiler service.

The service accepts ``POST {"mjml": "<mjml>..."}`` and answers either
``{"html": "...", "errors": [{"message": ..., "tagName": ..., "line": ...}]}``
or ``{"error": "..."}``.  Compiler diagnostics are soft warnings; only a
missing HTML payload is a failure.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Final, Optional

import httpx

from tree2mjml.config import (
    TREE2MJML_COMPILER_BACKOFF_S,
    TREE2MJML_COMPILER_MAX_RETRIES,
    TREE2MJML_COMPILER_TIMEOUT_S,
    TREE2MJML_COMPILER_URL,
    TREE2MJML_USER_AGENT,
)
from tree2mjml.exceptions import CompileError

logger = logging.getLogger(__name__)

RETRY_STATUS_CODES: Final[frozenset[int]] = frozenset({429, 502, 503, 504})


@dataclass(frozen=True)
class CompileWarning:
    message: str
    tag_name: Optional[str] = None
    line: Optional[int] = None

    @classmethod
    def from_payload(cls, payload: Any) -> CompileWarning:
        if not isinstance(payload, dict):
            return cls(message=str(payload))
        line = payload.get("line")
        return cls(
            message=str(payload.get("message", "")),
            tag_name=payload.get("tagName") or None,
            line=line if isinstance(line, int) else None,
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"message": self.message}
        if self.tag_name is not None:
            data["tagName"] = self.tag_name
        if self.line is not None:
            data["line"] = self.line
        return data


@dataclass(frozen=True)
class CompileResult:
    html: str
    warnings: list[CompileWarning] = field(default_factory=list)


def _parse_response(response: httpx.Response) -> CompileResult:
    try:
        data = response.json()
    except ValueError as exc:
        raise CompileError(f"Compiler returned a non-JSON response (HTTP {response.status_code})") from exc

    if not isinstance(data, dict):
        raise CompileError("Compiler returned an unexpected payload")
    if data.get("error"):
        raise CompileError(str(data["error"]))
    html = data.get("html")
    if not isinstance(html, str) or not html:
        raise CompileError(f"Compilation failed (HTTP {response.status_code})")

    raw_warnings = data.get("warnings", data.get("errors")) or []
    if not isinstance(raw_warnings, list):
        raise CompileError("Compiler returned malformed warnings; expected a list")
    return CompileResult(
        html=html,
        warnings=[CompileWarning.from_payload(item) for item in raw_warnings],
    )


async def compile_markup(
    markup: str,
    *,
    url: Optional[str] = None,
    client: httpx.AsyncClient | None = None,
) -> CompileResult:
    """Compile MJML *markup* to HTML through the external compiler.

    Args:
        markup: The MJML document.
        url: Compiler endpoint. Defaults to ``TREE2MJML_COMPILER_URL``.
        client: Optional httpx.AsyncClient for connection pooling. If not
            provided, a new client is created for this request.

    Returns:
        The compiled HTML and any compiler warnings.

    Raises:
        CompileError: If the markup is blank, the compiler reports an
            error, or the service stays unreachable after all retries.
    """
    if not markup.strip():
        raise CompileError("No MJML provided")

    endpoint = url or TREE2MJML_COMPILER_URL
    last_exc: Exception | None = None

    async def do_compile(http_client: httpx.AsyncClient) -> CompileResult:
        nonlocal last_exc

        for attempt in range(TREE2MJML_COMPILER_MAX_RETRIES + 1):
            try:
                response = await http_client.post(endpoint, json={"mjml": markup})
                if response.status_code not in RETRY_STATUS_CODES:
                    return _parse_response(response)
                last_exc = CompileError(f"HTTP {response.status_code} from {endpoint}")
            except httpx.RequestError as exc:
                last_exc = exc

            if attempt < TREE2MJML_COMPILER_MAX_RETRIES:
                backoff = TREE2MJML_COMPILER_BACKOFF_S * (2**attempt)
                logger.warning(
                    "Compiler request failed (%s); retrying in %.1fs", last_exc, backoff
                )
                await asyncio.sleep(backoff)

        raise CompileError(f"Failed to reach compiler at {endpoint}: {last_exc}")

    if client is not None:
        return await do_compile(client)

    async with httpx.AsyncClient(
        timeout=httpx.Timeout(TREE2MJML_COMPILER_TIMEOUT_S),
        headers={"User-Agent": TREE2MJML_USER_AGENT},
    ) as new_client:
        return await do_compile(new_client)
