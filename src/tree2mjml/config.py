"""Environment configuration for tree2mjml."""

from __future__ import annotations

import os


DEFAULT_COMPILER_URL = "http://localhost:3000/api/compile-mjml"
DEFAULT_COMPILER_TIMEOUT_S = 10.0
DEFAULT_COMPILER_MAX_RETRIES = 2
DEFAULT_COMPILER_BACKOFF_S = 0.5
DEFAULT_USER_AGENT = "tree2mjml/0.1"
DEFAULT_LOG_LEVEL = "WARNING"

# Endpoint that accepts {"mjml": ...} and answers {"html": ..., "errors": [...]}.
TREE2MJML_COMPILER_URL = os.getenv("TREE2MJML_COMPILER_URL", DEFAULT_COMPILER_URL)
TREE2MJML_COMPILER_TIMEOUT_S = float(os.getenv("TREE2MJML_COMPILER_TIMEOUT_S", str(DEFAULT_COMPILER_TIMEOUT_S)))
TREE2MJML_COMPILER_MAX_RETRIES = int(os.getenv("TREE2MJML_COMPILER_MAX_RETRIES", str(DEFAULT_COMPILER_MAX_RETRIES)))
TREE2MJML_COMPILER_BACKOFF_S = float(os.getenv("TREE2MJML_COMPILER_BACKOFF_S", str(DEFAULT_COMPILER_BACKOFF_S)))
TREE2MJML_USER_AGENT = os.getenv("TREE2MJML_USER_AGENT", DEFAULT_USER_AGENT)
_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def _log_level(value: str) -> str:
    """Return *value* upper-cased if it names a logging level, else the default."""
    level = value.strip().upper()
    return level if level in _LOG_LEVELS else DEFAULT_LOG_LEVEL


TREE2MJML_LOG_LEVEL = _log_level(os.getenv("TREE2MJML_LOG_LEVEL", DEFAULT_LOG_LEVEL))
