"""Shared fixtures for registry-proxy tests."""

import json
from typing import Any, Optional
from unittest.mock import patch

import pytest
import requests
from graphql import build_schema, introspection_from_schema

SDL = """
type Query {
  hello(name: String): String
  item(id: ID!): Item
}

type Item {
  id: ID!
  tags: [[String!]!]
}
"""

KEY = "service:my-graph:secret"
HASH = "a" * 64 + "0123456789abcdef" * 4


def make_response(
    status: int = 200, body: Any = None, text: Optional[str] = None, reason: str = "OK"
) -> requests.Response:
    """Build a real requests.Response without touching the network."""
    resp = requests.Response()
    resp.status_code = status
    resp.reason = reason
    resp.encoding = "utf-8"
    resp.headers["Content-Type"] = "application/json"
    resp._content = (text if text is not None else json.dumps(body)).encode()
    return resp


def introspection_body(sdl: str = SDL) -> dict:
    """A registry response carrying the introspection of a schema."""
    introspection = introspection_from_schema(build_schema(sdl))["__schema"]
    return {"data": {"service": {"schema": {"introspection": introspection}}}}


def document_body(sdl: str = SDL) -> dict:
    """A registry response carrying a schema document."""
    return {"data": {"service": {"schema": {"document": sdl}}}}


@pytest.fixture
def registry():
    """Patch the outbound registry call; set ``return_value`` per test."""
    with patch("registry_proxy.schema_loader.requests.post") as mock_post:
        mock_post.return_value = make_response(body=introspection_body())
        yield mock_post
