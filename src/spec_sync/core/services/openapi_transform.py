"""Make an API Gateway OpenAPI export acceptable to Postman Spec Hub.

API Gateway exports carry `x-amazon-apigateway-*` extensions, CloudFormation
tags, `{proxy+}` routes declared through an "any method" construct and a
`{basePath}` server variable. Postman either rejects or mis-renders those, so
they are cleaned here before upload.

The transform is pure: the input is deep-copied and never mutated, and running
it on its own output changes nothing.
"""

from __future__ import annotations

import copy
from typing import Any

VENDOR_EXTENSION_PREFIX = "x-amazon-apigateway-"
ANY_METHOD_KEY = "x-amazon-apigateway-any-method"
RESERVED_TAG_PREFIXES: tuple[str, ...] = ("aws:", "httpapi:")
HTTP_METHODS = frozenset({"get", "post", "put", "patch", "delete", "head", "options"})
BASE_PATH_VARIABLE = "basePath"

_PROXY_DESCRIPTION = "Generic proxy route that forwards requests to the backing integration"


def _default_responses() -> dict[str, Any]:
    return {
        "200": {"description": "Success response"},
        "500": {"description": "Error response"},
    }


def _strip_vendor_keys(obj: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in obj.items() if not str(k).startswith(VENDOR_EXTENSION_PREFIX)}


def _clean_parameters(parameters: Any) -> Any:
    if not isinstance(parameters, list):
        return parameters
    return [_strip_vendor_keys(p) if isinstance(p, dict) else p for p in parameters]


def _is_reserved_tag(tag: Any) -> bool:
    if not isinstance(tag, dict):
        return True
    name = tag.get("name")
    if not name or not isinstance(name, str):
        return True
    return name.startswith(RESERVED_TAG_PREFIXES)


def _expand_proxy(path: str, path_item: dict[str, Any]) -> dict[str, Any]:
    any_method = path_item.get(ANY_METHOD_KEY)
    responses = None
    if isinstance(any_method, dict):
        responses = any_method.get("responses")
    parameters = _clean_parameters(path_item.get("parameters")) or []

    return {
        "post": {
            "summary": f"Proxy route: {path}",
            "description": _PROXY_DESCRIPTION,
            "parameters": copy.deepcopy(parameters),
            "responses": copy.deepcopy(responses) if responses else _default_responses(),
            "requestBody": {
                "description": "Request body",
                "content": {"application/json": {"schema": {"type": "object"}}},
            },
        },
        "get": {
            "summary": f"Proxy route: {path}",
            "description": _PROXY_DESCRIPTION,
            "parameters": [
                *copy.deepcopy(parameters),
                {
                    "name": "query",
                    "in": "query",
                    "description": "Query parameters",
                    "required": False,
                    "schema": {"type": "object"},
                },
            ],
            "responses": copy.deepcopy(responses) if responses else _default_responses(),
        },
    }


def _clean_operations(path_item: dict[str, Any]) -> dict[str, Any]:
    cleaned: dict[str, Any] = {}
    for method, operation in path_item.items():
        if not isinstance(method, str) or method.lower() not in HTTP_METHODS:
            continue
        if isinstance(operation, dict):
            operation = _strip_vendor_keys(operation)
            if "parameters" in operation:
                operation["parameters"] = _clean_parameters(operation["parameters"])
        cleaned[method] = operation
    return cleaned


def _has_http_method(path_item: dict[str, Any]) -> bool:
    return any(isinstance(k, str) and k.lower() in HTTP_METHODS for k in path_item)


def _clean_path_item(path: str, path_item: Any) -> dict[str, Any] | None:
    if not isinstance(path_item, dict):
        return None

    if path_item.get(ANY_METHOD_KEY) is not None:
        cleaned = _expand_proxy(path, path_item)
    else:
        cleaned = _clean_operations(path_item)

    if "parameters" in path_item:
        cleaned["parameters"] = _clean_parameters(path_item["parameters"])

    if not _has_http_method(cleaned):
        return None
    return cleaned


def _inline_base_path(server: Any) -> Any:
    if not isinstance(server, dict):
        return server
    variables = server.get("variables")
    url = server.get("url")
    if not isinstance(variables, dict) or not isinstance(url, str):
        return server
    base_path = variables.get(BASE_PATH_VARIABLE)
    if not isinstance(base_path, dict):
        return server

    default = base_path.get("default") or ""
    placeholder = "{" + BASE_PATH_VARIABLE + "}"
    if not default or placeholder not in url:
        return server

    cleaned = dict(server)
    cleaned["url"] = url.replace(placeholder, str(default), 1)
    remaining = {k: v for k, v in variables.items() if k != BASE_PATH_VARIABLE}
    if remaining:
        cleaned["variables"] = remaining
    else:
        cleaned.pop("variables", None)
    return cleaned


def transform_for_postman(document: dict[str, Any]) -> dict[str, Any]:
    """Return a cleaned deep copy of `document` ready for Spec Hub."""

    transformed = _strip_vendor_keys(copy.deepcopy(document))

    tags = transformed.get("tags")
    if isinstance(tags, list):
        transformed["tags"] = [tag for tag in tags if not _is_reserved_tag(tag)]

    paths = transformed.get("paths")
    if isinstance(paths, dict):
        cleaned_paths: dict[str, Any] = {}
        for path, path_item in paths.items():
            cleaned = _clean_path_item(path, path_item)
            if cleaned is not None:
                cleaned_paths[path] = cleaned
        transformed["paths"] = cleaned_paths

    servers = transformed.get("servers")
    if isinstance(servers, list):
        transformed["servers"] = [_inline_base_path(server) for server in servers]

    return transformed
