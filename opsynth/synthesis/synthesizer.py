"""
Document synthesizer - build an OpenAPI surface document from a descriptor.

The document describes a single path ("/") with one operation per HTTP
method. It is rendered as YAML from dicts built in a fixed key order, so
identical descriptors always yield byte-identical documents.

Document shape:
    openapi: 3.1.0
    info: {title, version}
    servers: [{url}]
    paths:
      /:
        <method>:
          operationId: <operationId>_<METHOD>
          parameters: [...]        # one string query param per queryParams key
          requestBody: {...}       # post/put/patch with an effective body only
          responses: {"200": ...}  # fixed; response shape is never inferred
"""

import logging
from pathlib import Path
from typing import Any

import yaml

from opsynth.schemas import PerMethodBody, RequestDescriptor
from opsynth.synthesis.inference import infer_schema

logger = logging.getLogger(__name__)


OPENAPI_VERSION = "3.1.0"
DOCUMENT_INFO = {"title": "Generated API", "version": "1.0.0"}
BODY_METHODS = ("post", "put", "patch")
NO_BODY_METHODS = ("get", "delete")
BODY_PARAMETER_NAME = "body"
JSON_CONTENT = "application/json"


def _success_response() -> dict[str, Any]:
    return {
        "200": {
            "description": "Successful response",
            "content": {JSON_CONTENT: {"schema": {"type": "object"}}},
        }
    }


def _query_parameters(descriptor: RequestDescriptor) -> list[dict[str, Any]]:
    return [
        {"name": name, "in": "query", "schema": {"type": "string"}}
        for name in sorted(descriptor.query_params)
    ]


def _request_body(descriptor: RequestDescriptor, method: str) -> dict[str, Any] | None:
    if method not in BODY_METHODS:
        return None
    body = descriptor.body_for(method)
    if body is None:
        return None
    logger.debug(f"Request body for {method}: {body!r}")
    return {"content": {JSON_CONTENT: {"schema": infer_schema(body)}}}


def _operation(descriptor: RequestDescriptor, method: str) -> dict[str, Any]:
    operation: dict[str, Any] = {}
    if descriptor.operation_id:
        operation["operationId"] = f"{descriptor.operation_id}_{method.upper()}"

    parameters = _query_parameters(descriptor)
    if parameters:
        operation["parameters"] = parameters

    request_body = _request_body(descriptor, method)
    if request_body is not None:
        operation["requestBody"] = request_body
        operation["x-codegen-request-body-name"] = BODY_PARAMETER_NAME

    operation["responses"] = _success_response()
    return operation


def _warn_missing_bodies(descriptor: RequestDescriptor) -> None:
    """Log methods that will fall back to the default body (or none)."""
    if not descriptor.http_methods:
        return
    if not isinstance(descriptor.body, PerMethodBody):
        return
    bodies = descriptor.body.bodies
    for method in descriptor.methods:
        if method not in NO_BODY_METHODS and method not in bodies:
            logger.warning(
                f"No body provided for method: {method}. "
                "Consider adding it to the 'bodies' map."
            )


def build_document(descriptor: RequestDescriptor) -> dict[str, Any]:
    """
    Build the document as an ordered dict.

    Raises:
        ValidationError: If the URL is missing or malformed (checked first)
    """
    url = descriptor.validate_url()
    _warn_missing_bodies(descriptor)

    path_item = {method: _operation(descriptor, method) for method in descriptor.methods}

    return {
        "openapi": OPENAPI_VERSION,
        "info": dict(DOCUMENT_INFO),
        "servers": [{"url": url}],
        "paths": {"/": path_item},
    }


def render_document(document: dict[str, Any]) -> str:
    """Render a document dict to YAML text, preserving key order."""
    return yaml.safe_dump(
        document,
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
    )


def synthesize(descriptor: RequestDescriptor) -> str:
    """
    Synthesize the API-surface document for a descriptor.

    Args:
        descriptor: The request descriptor

    Returns:
        YAML document text

    Raises:
        ValidationError: If the URL is missing or malformed
    """
    logger.info(f"Synthesizing OpenAPI document for {descriptor.url} {descriptor.methods}")
    text = render_document(build_document(descriptor))
    logger.debug(f"Generated YAML:\n{text}")
    return text


def write_document(text: str, path: Path) -> Path:
    """
    Persist a synthesized document to its well-known path.

    Args:
        text: Document text from synthesize()
        path: Destination file; parent directories are created

    Returns:
        The written path
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    logger.info(f"YAML saved at: {path}")
    return path
