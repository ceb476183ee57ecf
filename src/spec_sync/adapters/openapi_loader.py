"""Loading of the local OpenAPI document."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from spec_sync.core.errors import OpenAPIDocumentError

DEFAULT_MAX_BYTES = 10 * 1024 * 1024


def load_openapi_document(path: Path, *, max_bytes: int = DEFAULT_MAX_BYTES) -> dict[str, Any]:
    """Read and parse `path`, refusing files above `max_bytes`."""

    try:
        size = path.stat().st_size
    except OSError as exc:
        raise OpenAPIDocumentError(f"Cannot read OpenAPI file {path}: {exc}") from exc
    if size > max_bytes:
        raise OpenAPIDocumentError(
            f"OpenAPI file exceeds {max_bytes // (1024 * 1024)} MB limit ({size} bytes)"
        )

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except ValueError as exc:
        raise OpenAPIDocumentError(f"OpenAPI file {path} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise OpenAPIDocumentError(f"OpenAPI file {path} must contain a JSON object")
    return data


def render_document(document: dict[str, Any]) -> str:
    """Serialized form uploaded to Spec Hub."""

    return json.dumps(document, ensure_ascii=False, indent=2)
