"""Error taxonomy for the proxy pipeline."""

import json
from typing import Any, Iterator, Optional


class ProxyError(Exception):
    """Base class for every failure raised by the proxy pipeline."""

    kind = "ProxyError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def chain(self) -> list[str]:
        """Render this error and its causes as ``Kind: message`` lines."""
        return error_chain(self)


class ConfigurationError(ProxyError):
    """Required routing input or configuration is missing or invalid."""

    kind = "ConfigurationError"


class UpstreamError(ProxyError):
    """The schema registry answered with a non-200 HTTP status."""

    kind = "UpstreamError"

    def __init__(self, status: int, reason: str, body: str):
        self.status = status
        self.reason = reason
        self.body = body
        super().__init__(f"Registry HTTP request failed ({status} {reason}, {_quote(body)})")


class RegistryError(ProxyError):
    """The registry reported GraphQL errors or the schema lookup missed."""

    kind = "RegistryError"

    def __init__(self, message: str, errors: Optional[list[Any]] = None):
        super().__init__(message)
        self.errors = errors or []


class SchemaBuildError(ProxyError):
    """The fetched payload could not be turned into an executable schema."""

    kind = "SchemaBuildError"


class RequestBodyError(ProxyError):
    """The inbound POST body is not a usable GraphQL request."""

    kind = "RequestBodyError"


def _quote(body: str) -> str:
    return json.dumps(body)


def _causes(exc: BaseException) -> Iterator[BaseException]:
    seen = set()
    current: Optional[BaseException] = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or (None if current.__suppress_context__ else current.__context__)


def error_chain(exc: BaseException) -> list[str]:
    """
    Describe an exception and everything it was raised from.

    Args:
        exc: Any exception

    Returns:
        One ``Kind: message`` line per link, outermost first
    """
    lines = []
    for link in _causes(exc):
        kind = getattr(link, "kind", None) if isinstance(link, ProxyError) else type(link).__name__
        lines.append(f"{kind}: {link}")
    return lines


def error_envelope(exc: BaseException) -> dict:
    """Build the ``{"errors": [{message, stack}]}`` envelope for a failure."""
    message = exc.message if isinstance(exc, ProxyError) else str(exc)
    return {"errors": [{"message": message, "stack": error_chain(exc)}]}
