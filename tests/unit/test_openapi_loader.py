import json

import pytest

from spec_sync.adapters.openapi_loader import load_openapi_document, render_document
from spec_sync.core.errors import OpenAPIDocumentError


def test_loads_json_object(tmp_path):
    path = tmp_path / "openapi.json"
    path.write_text(json.dumps({"openapi": "3.0.1"}), encoding="utf-8")

    assert load_openapi_document(path) == {"openapi": "3.0.1"}


def test_rejects_oversized_file(tmp_path):
    path = tmp_path / "openapi.json"
    path.write_text(json.dumps({"x": "y" * 100}), encoding="utf-8")

    with pytest.raises(OpenAPIDocumentError, match="limit"):
        load_openapi_document(path, max_bytes=10)


def test_rejects_invalid_json(tmp_path):
    path = tmp_path / "openapi.json"
    path.write_text("openapi: 3.0.1", encoding="utf-8")

    with pytest.raises(OpenAPIDocumentError):
        load_openapi_document(path)


def test_rejects_missing_file(tmp_path):
    with pytest.raises(OpenAPIDocumentError):
        load_openapi_document(tmp_path / "missing.json")


def test_render_is_indented():
    assert render_document({"a": 1}) == '{\n  "a": 1\n}'
