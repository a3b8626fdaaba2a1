"""Tests for request URL resolution."""

import pytest

from registry_proxy.errors import ConfigurationError
from registry_proxy.resolver import DEFAULT_VARIANT, Target, is_schema_hash, resolve

from .conftest import HASH, KEY


def test_graph_from_path_defaults_to_current_variant():
    target = resolve(f"https://proxy.example/my-graph?apiKey={KEY}")
    assert target == Target(graph_id="my-graph", api_key=KEY, variant="current", hash=None)


def test_hash_specifier_sets_hash_only():
    target = resolve(f"/my-graph/{HASH}?apiKey={KEY}")
    assert target.hash == HASH
    assert target.variant is None


@pytest.mark.parametrize(
    "specifier",
    [
        "staging",
        HASH[:-1],  # 127 chars
        HASH + "0",  # 129 chars
        HASH.upper(),  # uppercase hex is not a hash
        "g" * 128,
    ],
)
def test_non_hash_specifier_is_variant(specifier):
    target = resolve(f"/my-graph/{specifier}?apiKey={KEY}")
    assert target.variant == specifier
    assert target.hash is None


def test_graph_query_parameter_aliases():
    assert resolve(f"/?graph=g1&service=g2&apiKey={KEY}").graph_id == "g1"
    assert resolve(f"/?service=g2&apiKey={KEY}").graph_id == "g2"


def test_path_graph_wins_over_query_parameters():
    assert resolve(f"/from-path?graph=g1&service=g2&apiKey={KEY}").graph_id == "from-path"


def test_variant_query_parameter_and_tag_alias():
    assert resolve(f"/g?variant=prod&tag=old&apiKey={KEY}").variant == "prod"
    assert resolve(f"/g?tag=old&apiKey={KEY}").variant == "old"


def test_path_variant_wins_over_query_variant():
    assert resolve(f"/g/staging?variant=prod&apiKey={KEY}").variant == "staging"


def test_hash_query_parameter_suppresses_default_variant():
    target = resolve(f"/g?hash=abc&apiKey={KEY}")
    assert target.hash == "abc"
    assert target.variant is None


def test_path_hash_wins_over_query_hash():
    assert resolve(f"/g/{HASH}?hash=other&apiKey={KEY}").hash == HASH


def test_api_key_header_wins_over_query_parameter():
    target = resolve("/g?apiKey=from-query", {"X-API-Key": "from-header"})
    assert target.api_key == "from-header"


def test_api_key_header_lookup_ignores_case():
    assert resolve("/g", {"x-api-key": KEY}).api_key == KEY


def test_missing_graph_raises():
    with pytest.raises(ConfigurationError, match="graph identifier required"):
        resolve(f"/?apiKey={KEY}")


def test_missing_api_key_raises():
    with pytest.raises(ConfigurationError, match="api key required"):
        resolve("/my-graph")


def test_empty_values_count_as_absent():
    target = resolve(f"/g/?variant=&apiKey={KEY}")
    assert target.variant == DEFAULT_VARIANT


def test_resolve_is_idempotent():
    url = f"/my-graph/staging?apiKey={KEY}"
    assert resolve(url) == resolve(url)


def test_target_variables_and_specifier():
    target = resolve(f"/g/{HASH}?apiKey={KEY}")
    assert target.variables() == {"graph": "g", "variant": None, "hash": HASH}
    assert target.specifier == HASH


def test_is_schema_hash():
    assert is_schema_hash(HASH)
    assert not is_schema_hash("current")
