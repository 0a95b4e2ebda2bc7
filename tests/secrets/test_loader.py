"""Tests for _loader.py — merging raw sources into a SecretsBundle."""

import logging

import pytest

from node_secrets.secrets._loader import load_secrets, merge_raw
from node_secrets.secrets._sources import EnvSource, MappingSource
from node_secrets.secrets._types import ABSENT, InvalidValueTypeError, UnknownPathError


class TestPrecedence:
    def test_last_write_wins(self):
        bundle = load_secrets([{"l1.l1_rpc_url": "x"}, {"l1.l1_rpc_url": "y"}])
        assert bundle.get("l1.l1_rpc_url").secret_value == "y"

    def test_siblings_from_earlier_sources_kept(self):
        bundle = load_secrets(
            [
                {"database": {"server_url": "postgres://a", "prover_url": "postgres://p"}},
                {"database.server_url": "postgres://b"},
            ]
        )
        assert bundle.get("database.server_url").secret_value == "postgres://b"
        assert bundle.get("database.prover_url").secret_value == "postgres://p"

    def test_env_overrides_mapping(self):
        bundle = load_secrets(
            [
                MappingSource({"l1": {"l1_rpc_url": "http://file"}}),
                EnvSource(environ={"L1_L1_RPC_URL": "http://env"}),
            ]
        )
        assert bundle.get("l1.l1_rpc_url").secret_value == "http://env"

    def test_later_empty_clears(self):
        bundle = load_secrets([{"da.avail.seed_phrase": "words"}, {"da.avail.seed_phrase": ""}])
        assert bundle.get("da.avail.seed_phrase") is ABSENT
        assert bundle.da is None

    def test_none_is_absent(self):
        bundle = load_secrets([{"l1.gateway_rpc_url": None}])
        assert bundle.get("l1.gateway_rpc_url") is ABSENT

    def test_whitespace_only_is_absent(self):
        bundle = load_secrets([{"l1.gateway_rpc_url": "   "}])
        assert bundle.get("l1.gateway_rpc_url") is ABSENT

    def test_no_sources(self):
        assert load_secrets([]).present_paths() == []


class TestDataAvailabilityMerge:
    def test_variants_from_different_sources_both_kept(self):
        bundle = load_secrets([{"da.avail.seed_phrase": "words"}, {"da.celestia.private_key": "0x1"}])
        assert set(bundle.da.populated_paths()) == {"avail", "celestia"}

    def test_later_source_clears_earlier_variant(self):
        bundle = load_secrets(
            [
                {"da.avail.seed_phrase": "words", "da.avail.gas_relay_api_key": "key"},
                {
                    "da.avail.seed_phrase": "",
                    "da.avail.gas_relay_api_key": "",
                    "da.eigen.private_key": "0x1",
                },
            ]
        )
        assert bundle.da.populated_paths() == {"eigen": ["da.eigen.private_key"]}


class TestErrors:
    def test_unknown_path_rejected(self):
        with pytest.raises(UnknownPathError, match="database.unknown_field"):
            load_secrets([{"database.unknown_field": "x"}])

    def test_unknown_nested_group_rejected(self):
        with pytest.raises(UnknownPathError):
            load_secrets([{"vault": {"token": "x"}}])

    def test_unknown_path_reports_source(self):
        with pytest.raises(UnknownPathError) as exc_info:
            load_secrets([{"l1.l1_rpc_url": "x"}, MappingSource({"l1.nope": "y"}, name="overrides")])
        assert exc_info.value.source == "overrides"

    def test_unknown_path_in_later_source_aborts_whole_load(self):
        with pytest.raises(UnknownPathError):
            merge_raw([{"l1.l1_rpc_url": "x"}, {"bogus": "y"}])

    @pytest.mark.parametrize("value", [42, True, ["a"], 1.5])
    def test_non_string_rejected(self, value):
        with pytest.raises(InvalidValueTypeError) as exc_info:
            load_secrets([{"contract_verifier.etherscan_api_key": value}])
        assert exc_info.value.path == "contract_verifier.etherscan_api_key"

    def test_type_error_does_not_echo_value(self):
        with pytest.raises(InvalidValueTypeError) as exc_info:
            load_secrets([{"l1.l1_rpc_url": 8675309}])
        assert "8675309" not in str(exc_info.value)


class TestLogging:
    def test_log_records_carry_no_values(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="node_secrets"):
            load_secrets([{"consensus.node_key": "node:secret:ed25519:LOGLEAK"}])
        assert caplog.records
        assert "LOGLEAK" not in caplog.text
