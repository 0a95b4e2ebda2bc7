"""Tests for _schema.py — group models, field paths, and SecretsBundle path access."""

import pytest
from pydantic import TypeAdapter, ValidationError

from node_secrets.secrets._schema import (
    FIELD_PATHS,
    AvailSecrets,
    CelestiaSecrets,
    DataAvailabilitySecrets,
    EigenSecrets,
    L1Secrets,
    SecretsBundle,
    field_spec,
    variant_paths,
)
from node_secrets.secrets._types import (
    ABSENT,
    AttesterSecretKey,
    NodeSecretKey,
    Secret,
    UnknownPathError,
    ValidatorSecretKey,
)


class TestFieldPaths:
    def test_all_paths_listed(self):
        assert FIELD_PATHS == (
            "database.server_url",
            "database.server_replica_url",
            "database.prover_url",
            "l1.l1_rpc_url",
            "l1.gateway_rpc_url",
            "consensus.validator_key",
            "consensus.node_key",
            "consensus.attester_key",
            "da.avail.seed_phrase",
            "da.avail.gas_relay_api_key",
            "da.celestia.private_key",
            "da.eigen.private_key",
            "contract_verifier.etherscan_api_key",
        )

    def test_unknown_path_raises(self):
        with pytest.raises(UnknownPathError, match="database.unknown_field"):
            field_spec("database.unknown_field")

    def test_variant_paths(self):
        assert variant_paths("avail") == ["da.avail.seed_phrase", "da.avail.gas_relay_api_key"]
        assert variant_paths("eigen") == ["da.eigen.private_key"]

    def test_variant_field(self):
        assert field_spec("da.avail.gas_relay_api_key").variant_field == "gas_relay_api_key"


class TestBundleAccess:
    def test_empty_bundle(self):
        bundle = SecretsBundle()
        assert all(bundle.get(path) is ABSENT for path in FIELD_PATHS)
        assert bundle.present_paths() == []

    def test_set_and_get(self):
        bundle = SecretsBundle()
        bundle.set("l1.l1_rpc_url", "http://rpc")
        value = bundle.get("l1.l1_rpc_url")
        assert isinstance(value, Secret)
        assert value.secret_value == "http://rpc"

    def test_unknown_path_is_not_absent(self):
        bundle = SecretsBundle()
        assert bundle.get("l1.gateway_rpc_url") is ABSENT
        with pytest.raises(UnknownPathError):
            bundle.get("l1.unknown")

    def test_set_unknown_path_raises(self):
        with pytest.raises(UnknownPathError):
            SecretsBundle().set("consensus.bogus_key", "x")

    @pytest.mark.parametrize(
        ("path", "key_type"),
        [
            ("consensus.validator_key", ValidatorSecretKey),
            ("consensus.node_key", NodeSecretKey),
            ("consensus.attester_key", AttesterSecretKey),
        ],
    )
    def test_consensus_keys_typed(self, path, key_type):
        bundle = SecretsBundle()
        bundle.set(path, "k")
        assert type(bundle.get(path)) is key_type

    def test_siblings_preserved(self):
        bundle = SecretsBundle()
        bundle.set("database.server_url", "postgres://a")
        bundle.set("database.prover_url", "postgres://b")
        assert bundle.get("database.server_url").secret_value == "postgres://a"
        assert bundle.get("database.prover_url").secret_value == "postgres://b"

    def test_empty_string_clears(self):
        bundle = SecretsBundle()
        bundle.set("database.server_url", "postgres://a")
        bundle.set("database.server_url", "")
        assert bundle.get("database.server_url") is ABSENT

    def test_empty_group_collapses(self):
        bundle = SecretsBundle()
        bundle.set("l1.l1_rpc_url", "http://rpc")
        bundle.set("l1.l1_rpc_url", None)
        assert bundle.l1 is None

    def test_groups_are_frozen(self):
        bundle = SecretsBundle()
        bundle.set("l1.l1_rpc_url", "http://rpc")
        with pytest.raises(ValidationError):
            bundle.l1.l1_rpc_url = Secret("other")

    def test_draft_holds_several_backends(self):
        bundle = SecretsBundle()
        bundle.set("da.avail.seed_phrase", "words")
        bundle.set("da.eigen.private_key", "0x1")
        assert bundle.da.populated_paths() == {
            "avail": ["da.avail.seed_phrase"],
            "eigen": ["da.eigen.private_key"],
        }

    def test_repr_redacts(self):
        bundle = SecretsBundle()
        bundle.set("contract_verifier.etherscan_api_key", "ETHERSCAN-RAW")
        assert "ETHERSCAN-RAW" not in repr(bundle)
        assert "ETHERSCAN-RAW" not in str(bundle)

    def test_model_dump_redacts(self):
        bundle = SecretsBundle()
        bundle.set("da.celestia.private_key", "0xdeadbeef")
        assert "0xdeadbeef" not in bundle.model_dump_json()


class TestDataAvailabilityUnion:
    adapter = TypeAdapter(DataAvailabilitySecrets)

    def test_discriminates_by_backend(self):
        value = self.adapter.validate_python({"backend": "eigen", "private_key": "0x1"})
        assert isinstance(value, EigenSecrets)

    def test_avail_requires_both_fields(self):
        with pytest.raises(ValidationError):
            AvailSecrets(seed_phrase="words")

    def test_backend_tag_fixed(self):
        assert CelestiaSecrets(private_key="0x1").backend == "celestia"

    def test_l1_fields_optional(self):
        assert L1Secrets().l1_rpc_url is None
