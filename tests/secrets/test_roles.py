"""Tests for _roles.py — Role parsing and the required-path tables."""

import pytest

from node_secrets.secrets._roles import EXPOSED_GROUPS, REQUIRED_PATHS, Role


class TestRoleParse:
    @pytest.mark.parametrize(
        ("text", "role"),
        [
            ("validator", Role.VALIDATOR),
            ("MAIN_NODE", Role.MAIN_NODE),
            ("MainNode", Role.MAIN_NODE),
            ("contract-verifier", Role.CONTRACT_VERIFIER),
            ("Data Availability Client", Role.DATA_AVAILABILITY_CLIENT),
            ("ConsensusParticipant", Role.CONSENSUS_PARTICIPANT),
            (Role.ATTESTER, Role.ATTESTER),
        ],
    )
    def test_spellings(self, text, role):
        assert Role.parse(text) is role

    def test_invalid(self):
        with pytest.raises(ValueError, match="not a valid role"):
            Role.parse("sequencer")


class TestRequiredPaths:
    def test_every_role_has_entry(self):
        assert set(REQUIRED_PATHS) == set(Role)
        assert set(EXPOSED_GROUPS) == set(Role)

    def test_validator(self):
        assert REQUIRED_PATHS[Role.VALIDATOR] == {
            "l1.l1_rpc_url",
            "consensus.node_key",
            "consensus.validator_key",
        }

    def test_attester(self):
        assert REQUIRED_PATHS[Role.ATTESTER] == {
            "l1.l1_rpc_url",
            "consensus.node_key",
            "consensus.attester_key",
        }

    def test_contract_verifier_requires_nothing(self):
        assert REQUIRED_PATHS[Role.CONTRACT_VERIFIER] == frozenset()

    @pytest.mark.parametrize("role", [Role.MAIN_NODE, Role.PROVER, Role.DATA_AVAILABILITY_CLIENT])
    def test_l1_only(self, role):
        assert REQUIRED_PATHS[role] == {"l1.l1_rpc_url"}
