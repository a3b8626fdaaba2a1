"""Schema acquisition from the schema registry."""

import logging
from dataclasses import dataclass
from typing import Any, Optional, Union

import requests

from . import utils
from .config import Config, SchemaMode
from .errors import RegistryError, SchemaBuildError, UpstreamError
from .queries import DOCUMENT_QUERY, INTROSPECTION_QUERY
from .resolver import API_KEY_HEADER, Target

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IntrospectionPayload:
    """The ``__schema`` object of an introspection result."""

    schema: dict


@dataclass(frozen=True)
class DocumentPayload:
    """The schema definition language text of a schema."""

    document: str


SchemaPayload = Union[IntrospectionPayload, DocumentPayload]

QUERIES = {
    SchemaMode.INTROSPECTION: INTROSPECTION_QUERY,
    SchemaMode.DOCUMENT: DOCUMENT_QUERY,
}


def registry_request(target: Target, mode: SchemaMode) -> dict:
    """Build the JSON body sent to the registry for a target."""
    return {"query": QUERIES[mode], "variables": target.variables()}


def fetch_schema(target: Target, mode: SchemaMode, cfg: Optional[Config] = None) -> SchemaPayload:
    """
    Fetch a graph's schema from the registry.

    Args:
        target: Resolved graph, variant or hash, and API key
        mode: Whether to fetch an introspection result or the schema document
        cfg: Configuration with registry URL, timeout and extra headers

    Returns:
        IntrospectionPayload or DocumentPayload, depending on mode

    Raises:
        UpstreamError: If the registry returns a non-200 status
        RegistryError: If the registry reports errors or the schema is missing
        SchemaBuildError: If the schema record holds no usable payload
    """
    cfg = cfg or Config()
    headers = {**cfg.registry_headers, "Content-Type": "application/json", API_KEY_HEADER: target.api_key}

    logger.debug(
        "Fetching %s for %s:%s from %s", mode.value, target.graph_id, target.specifier, cfg.registry_url
    )
    resp = requests.post(
        cfg.registry_url,
        json=registry_request(target, mode),
        headers=headers,
        timeout=cfg.registry_timeout,
    )

    if resp.status_code != 200:
        raise UpstreamError(resp.status_code, resp.reason or "", resp.text)

    try:
        body = utils.safe_json_response(resp, context="Registry schema request")
    except ValueError as e:
        raise RegistryError(str(e)) from e

    return decode_response(body, target, mode)


def _record(parent: Any, key: str) -> Any:
    if not isinstance(parent, dict):
        return None
    return parent.get(key)


def decode_response(body: Any, target: Target, mode: SchemaMode) -> SchemaPayload:
    """
    Decode a registry response body into a schema payload.

    Every unexpected shape fails with RegistryError or SchemaBuildError.
    """
    if not isinstance(body, dict):
        raise RegistryError("Registry response is not a JSON object")

    errors = body.get("errors")
    if errors:
        raise RegistryError(f"Registry GraphQL errors ({utils.to_json(errors, indent=None)})", errors=errors)

    data = body.get("data")
    if not data:
        raise RegistryError("No data in registry response")

    service = _record(data, "service")
    if not service:
        raise RegistryError(f"Could not find graph {target.graph_id}.")

    schema = _record(service, "schema")
    if not schema:
        raise RegistryError(f"Could not find schema {target.graph_id}:{target.specifier}")

    if mode is SchemaMode.DOCUMENT:
        document = _record(schema, "document")
        if not isinstance(document, str) or not document.strip():
            raise SchemaBuildError(f"Schema document for {target.graph_id}:{target.specifier} is empty")
        return DocumentPayload(document=document)

    introspection = _record(schema, "introspection")
    if not isinstance(introspection, dict) or not introspection:
        raise SchemaBuildError(f"Introspection for {target.graph_id}:{target.specifier} is empty")
    return IntrospectionPayload(schema=introspection)
