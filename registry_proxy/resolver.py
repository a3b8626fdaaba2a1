"""Resolve a request URL into the graph, variant or hash and credential to load."""

import re
from dataclasses import dataclass
from typing import Mapping, Optional
from urllib.parse import parse_qs, urlsplit

from . import utils
from .errors import ConfigurationError

HASH_PATTERN = re.compile(r"^[0-9a-f]{128}$")
DEFAULT_VARIANT = "current"
API_KEY_HEADER = "X-API-Key"


@dataclass(frozen=True)
class Target:
    """A schema lookup in the registry."""

    graph_id: str
    api_key: str
    variant: Optional[str] = None
    hash: Optional[str] = None

    @property
    def specifier(self) -> str:
        """The variant or hash that selects the schema, for messages."""
        return self.hash or self.variant or DEFAULT_VARIANT

    def variables(self) -> dict:
        """Query variables for the registry lookup."""
        return {"graph": self.graph_id, "variant": self.variant, "hash": self.hash}


def is_schema_hash(value: str) -> bool:
    """Check whether a path specifier is a 128-character schema hash."""
    return bool(HASH_PATTERN.match(value))


def _header(headers: Optional[Mapping[str, str]], name: str) -> Optional[str]:
    if not headers:
        return None
    value = headers.get(name)
    if value is not None:
        return value
    lowered = name.lower()
    for key, value in headers.items():
        if key.lower() == lowered:
            return value
    return None


def resolve(url: str, headers: Optional[Mapping[str, str]] = None) -> Target:
    """
    Resolve a request URL into a registry Target.

    Path segments win over query parameters: ``/<graph>/<variant-or-hash>``.
    A second segment of exactly 128 lowercase hex characters is a hash,
    anything else is a variant. With neither, the ``current`` variant is used.

    Args:
        url: Full request URL or path with query string
        headers: Request headers, searched for X-API-Key

    Returns:
        Target for the schema lookup

    Raises:
        ConfigurationError: If no graph id or API key can be determined
    """
    parts = urlsplit(url)
    params = parse_qs(parts.query)

    def param(name: str) -> Optional[str]:
        values = params.get(name)
        return values[0] if values else None

    segments = parts.path.split("/")
    path_graph = segments[1] if len(segments) > 1 else None
    specifier = segments[2] if len(segments) > 2 else None

    graph_id = utils.first_present(path_graph, param("graph"), param("service"))

    spec_hash = spec_variant = None
    if specifier:
        if is_schema_hash(specifier):
            spec_hash = specifier
        else:
            spec_variant = specifier

    schema_hash = utils.first_present(spec_hash, param("hash"))
    variant = utils.first_present(spec_variant, param("variant"), param("tag"))

    # Fall back to default variant if only the graph is specified
    if not schema_hash and not variant:
        variant = DEFAULT_VARIANT

    if not graph_id:
        raise ConfigurationError("graph identifier required: use a /<graph> URL path or graph search parameter")

    api_key = utils.first_present(_header(headers, API_KEY_HEADER), param("apiKey"))
    if not api_key:
        raise ConfigurationError(f"api key required: use the {API_KEY_HEADER} header or apiKey search parameter")

    return Target(graph_id=graph_id, api_key=api_key, variant=variant, hash=schema_hash)
