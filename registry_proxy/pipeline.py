"""Request-to-schema pipeline shared by the HTTP handler and the CLI."""

import logging
from typing import Mapping, Optional

from graphql import GraphQLSchema

from . import builder, executor, resolver, schema_loader
from .config import Config, SchemaMode
from .errors import ConfigurationError, SchemaBuildError
from .executor import QueryRequest, QueryResult
from .resolver import Target
from .schema_loader import DocumentPayload, SchemaPayload

logger = logging.getLogger(__name__)


class Pipeline:
    """
    Resolve, fetch, build and execute, parameterized by schema mode.

    Nothing is kept between calls: every schema is fetched and built anew.
    """

    def __init__(self, cfg: Optional[Config] = None):
        self.cfg = cfg or Config()

    @property
    def mode(self) -> SchemaMode:
        return self.cfg.mode

    def target(self, url: str, headers: Optional[Mapping[str, str]] = None) -> Target:
        target = resolver.resolve(url, headers)
        logger.debug("Resolved %s to %s:%s", url.split("?")[0], target.graph_id, target.specifier)
        return target

    def payload(self, target: Target) -> SchemaPayload:
        return schema_loader.fetch_schema(target, self.mode, self.cfg)

    def schema(self, target: Target) -> GraphQLSchema:
        return builder.build_schema(self.payload(target))

    def run(self, target: Target, request: QueryRequest) -> QueryResult:
        """Fetch and build the target's schema, then execute the request on it."""
        return self._execute(target, self.schema(target), request)

    def run_body(self, target: Target, body: bytes) -> QueryResult:
        """Like run, decoding the raw POST body only once the schema is built."""
        schema = self.schema(target)
        return self._execute(target, schema, executor.parse_request_body(body))

    def _execute(self, target: Target, schema: GraphQLSchema, request: QueryRequest) -> QueryResult:
        result = executor.execute_query(schema, request)
        if result.errors:
            logger.info("Query on %s:%s returned %d error(s)", target.graph_id, target.specifier, len(result.errors))
        return result

    def document(self, target: Target) -> str:
        """Fetch the raw schema document; only available in document mode."""
        if self.mode is not SchemaMode.DOCUMENT:
            raise ConfigurationError("schema documents are only served in document mode")
        payload = self.payload(target)
        if not isinstance(payload, DocumentPayload):
            raise SchemaBuildError(f"Registry returned no schema document for {target.graph_id}:{target.specifier}")
        return payload.document
