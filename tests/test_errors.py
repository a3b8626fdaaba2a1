"""Tests for error chains and the error envelope."""

from registry_proxy.errors import (
    ConfigurationError,
    RegistryError,
    SchemaBuildError,
    UpstreamError,
    error_chain,
    error_envelope,
)


def test_upstream_error_message_quotes_body():
    e = UpstreamError(502, "Bad Gateway", 'proxy said "no"')
    assert e.message == 'Registry HTTP request failed (502 Bad Gateway, "proxy said \\"no\\"")'
    assert (e.status, e.reason, e.body) == (502, "Bad Gateway", 'proxy said "no"')


def test_chain_follows_causes():
    try:
        try:
            raise KeyError("types")
        except KeyError as inner:
            raise SchemaBuildError("Could not build schema") from inner
    except SchemaBuildError as e:
        chain = e.chain()

    assert chain == ["SchemaBuildError: Could not build schema", "KeyError: 'types'"]


def test_chain_follows_implicit_context():
    try:
        try:
            raise ValueError("bad json")
        except ValueError:
            raise RegistryError("lookup failed")
    except RegistryError as e:
        assert error_chain(e) == ["RegistryError: lookup failed", "ValueError: bad json"]


def test_envelope_for_proxy_error():
    envelope = error_envelope(ConfigurationError("api key required"))
    assert envelope == {
        "errors": [{"message": "api key required", "stack": ["ConfigurationError: api key required"]}]
    }


def test_envelope_for_unexpected_error():
    envelope = error_envelope(RuntimeError("boom"))
    assert envelope["errors"][0] == {"message": "boom", "stack": ["RuntimeError: boom"]}
