"""Client query decoding and execution."""

import json
from dataclasses import dataclass
from typing import Any, Optional

from graphql import ExecutionResult, GraphQLSchema, graphql_sync

from .errors import RequestBodyError


@dataclass(frozen=True)
class QueryRequest:
    """A client GraphQL request."""

    query: str
    variables: Optional[dict[str, Any]] = None
    operation_name: Optional[str] = None


@dataclass
class QueryResult:
    """Outcome of executing a query; GraphQL errors are data here."""

    data: Optional[Any] = None
    errors: Optional[list[dict[str, Any]]] = None

    @classmethod
    def from_execution(cls, result: ExecutionResult) -> "QueryResult":
        errors = [e.formatted for e in result.errors] if result.errors else None
        return cls(data=result.data, errors=errors)

    @property
    def formatted(self) -> dict[str, Any]:
        """The standard ``{data, errors}`` response body, omitting absent keys."""
        out: dict[str, Any] = {}
        if self.errors:
            out["errors"] = self.errors
        if self.data is not None or not self.errors:
            out["data"] = self.data
        return out


def parse_request(payload: Any) -> QueryRequest:
    """
    Decode a JSON request object into a QueryRequest.

    Raises:
        RequestBodyError: If the object is not a GraphQL request
    """
    if not isinstance(payload, dict):
        raise RequestBodyError("Request body must be a JSON object")

    query = payload.get("query")
    if not isinstance(query, str):
        raise RequestBodyError("Request body must contain a query string")

    variables = payload.get("variables")
    if variables is not None and not isinstance(variables, dict):
        raise RequestBodyError("variables must be a JSON object")

    operation_name = payload.get("operationName")
    if operation_name is not None and not isinstance(operation_name, str):
        raise RequestBodyError("operationName must be a string")

    return QueryRequest(query=query, variables=variables, operation_name=operation_name)


def parse_request_body(body: bytes) -> QueryRequest:
    """Decode a raw POST body into a QueryRequest."""
    try:
        payload = json.loads(body)
    except ValueError as e:
        raise RequestBodyError(f"Request body is not valid JSON: {e}") from e
    return parse_request(payload)


def execute_query(schema: GraphQLSchema, request: QueryRequest) -> QueryResult:
    """
    Execute a client query against a built schema.

    Runs with no root value and no context; variables pass through unchanged.
    Syntax, validation and resolver errors come back in QueryResult.errors.
    """
    result = graphql_sync(
        schema,
        request.query,
        root_value=None,
        context_value=None,
        variable_values=request.variables,
        operation_name=request.operation_name,
    )
    return QueryResult.from_execution(result)
