"""Executable schema construction from registry payloads."""

from typing import Optional

from graphql import GraphQLError, GraphQLSchema, build_client_schema, build_schema as build_sdl_schema

from .errors import SchemaBuildError
from .schema_loader import DocumentPayload, IntrospectionPayload, SchemaPayload


def build_schema(payload: Optional[SchemaPayload]) -> GraphQLSchema:
    """
    Build an executable GraphQL schema from a fetched payload.

    Args:
        payload: Introspection ``__schema`` object or schema document text

    Returns:
        GraphQLSchema object

    Raises:
        SchemaBuildError: If the payload is empty or structurally invalid
    """
    if isinstance(payload, IntrospectionPayload):
        if not payload.schema:
            raise SchemaBuildError("Introspection payload is empty")
        return _build(build_client_schema, {"__schema": payload.schema}, "introspection")

    if isinstance(payload, DocumentPayload):
        if not payload.document or not payload.document.strip():
            raise SchemaBuildError("Schema document is empty")
        return _build(build_sdl_schema, payload.document, "schema document")

    raise SchemaBuildError("No schema payload to build from")


def _build(builder, source, label: str) -> GraphQLSchema:
    try:
        return builder(source)
    except (GraphQLError, TypeError, KeyError, ValueError) as e:
        raise SchemaBuildError(f"Could not build schema from {label}: {e}") from e
