"""Tests for the mode-parameterized pipeline."""

import logging
from unittest.mock import patch

import pytest

from registry_proxy.config import Config, SchemaMode
from registry_proxy.errors import ConfigurationError, RequestBodyError, SchemaBuildError
from registry_proxy.executor import QueryRequest
from registry_proxy.logs import setup_logging
from registry_proxy.pipeline import Pipeline
from registry_proxy.schema_loader import IntrospectionPayload

from .conftest import KEY, SDL, document_body, make_response


def test_run_introspection_mode(registry):
    pipeline = Pipeline(Config())
    target = pipeline.target(f"/my-graph?apiKey={KEY}")

    result = pipeline.run(target, QueryRequest(query="{ __typename }"))

    assert result.data == {"__typename": "Query"}
    assert result.errors is None


def test_run_document_mode(registry):
    registry.return_value = make_response(body=document_body())
    pipeline = Pipeline(Config(mode=SchemaMode.DOCUMENT))

    result = pipeline.run(pipeline.target("/g", {"X-API-Key": KEY}), QueryRequest(query="{ hello }"))

    assert result.data == {"hello": None}


def test_document_in_document_mode(registry):
    registry.return_value = make_response(body=document_body())
    pipeline = Pipeline(Config(mode=SchemaMode.DOCUMENT))

    assert pipeline.document(pipeline.target(f"/g?apiKey={KEY}")) == SDL


def test_document_requires_document_mode(registry):
    pipeline = Pipeline(Config())

    with pytest.raises(ConfigurationError, match="document mode"):
        pipeline.document(pipeline.target(f"/g?apiKey={KEY}"))
    registry.assert_not_called()


def test_setup_logging_installs_one_handler():
    root = logging.getLogger()
    before = list(root.handlers)
    level = root.level
    try:
        setup_logging("debug")
        setup_logging("warning")
        added = [h for h in root.handlers if h not in before]
        assert len(added) <= 1
        assert root.level == logging.WARNING
    finally:
        for handler in root.handlers[:]:
            if handler not in before:
                root.removeHandler(handler)
        root.setLevel(level)


def test_run_body_logs_query_errors(registry, caplog):
    pipeline = Pipeline(Config())

    with caplog.at_level(logging.INFO, logger="registry_proxy.pipeline"):
        result = pipeline.run_body(pipeline.target(f"/g?apiKey={KEY}"), b'{"query": "{ nope }"}')

    assert result.errors
    assert "returned 1 error(s)" in caplog.text


def test_run_body_decodes_body_after_fetching_schema(registry):
    pipeline = Pipeline(Config())

    with pytest.raises(RequestBodyError):
        pipeline.run_body(pipeline.target(f"/g?apiKey={KEY}"), b"{not json")
    registry.assert_called_once()


def test_document_rejects_non_document_payload():
    pipeline = Pipeline(Config(mode=SchemaMode.DOCUMENT))
    target = pipeline.target(f"/g?apiKey={KEY}")

    with patch.object(Pipeline, "payload", return_value=IntrospectionPayload(schema={"types": []})):
        with pytest.raises(SchemaBuildError, match="no schema document"):
            pipeline.document(target)
