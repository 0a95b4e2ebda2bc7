"""Deployment roles and the role -> required-path tables.

Kept apart from the schema so adding a role never touches the group models.
"""

from __future__ import annotations

import re
from enum import Enum


class Role(str, Enum):
    MAIN_NODE = "main_node"
    PROVER = "prover"
    VALIDATOR = "validator"
    CONSENSUS_PARTICIPANT = "consensus_participant"
    ATTESTER = "attester"
    DATA_AVAILABILITY_CLIENT = "data_availability_client"
    CONTRACT_VERIFIER = "contract_verifier"

    @classmethod
    def parse(cls, value: "str | Role") -> "Role":
        """Accept enum values, enum names, CamelCase and kebab spellings.

        >>> Role.parse("Contract-Verifier") is Role.CONTRACT_VERIFIER
        True
        >>> Role.parse("DataAvailabilityClient") is Role.DATA_AVAILABILITY_CLIENT
        True
        """
        if isinstance(value, Role):
            return value
        text = str(value).strip()
        for candidate in (text, _CAMEL_BOUNDARY.sub("_", text)):
            normalized = candidate.lower().replace("-", "_").replace(" ", "_")
            try:
                return cls(normalized)
            except ValueError:
                continue
        raise ValueError(f"{value!r} is not a valid role. Must be one of {[r.value for r in cls]}")


_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


# Rule 1: L1 RPC
L1_RPC_EXEMPT_ROLES = frozenset({Role.CONTRACT_VERIFIER})

# Rule 2: consensus keys
CONSENSUS_KEY_REQUIREMENTS: dict[Role, tuple[str, ...]] = {
    Role.VALIDATOR: ("consensus.node_key", "consensus.validator_key"),
    Role.CONSENSUS_PARTICIPANT: ("consensus.node_key",),
    Role.ATTESTER: ("consensus.node_key", "consensus.attester_key"),
}

# Rule 3: data availability
DA_REQUIRED_ROLES = frozenset({Role.DATA_AVAILABILITY_CLIENT})


def _required_paths(role: Role) -> frozenset[str]:
    paths: list[str] = []
    if role not in L1_RPC_EXEMPT_ROLES:
        paths.append("l1.l1_rpc_url")
    paths.extend(CONSENSUS_KEY_REQUIREMENTS.get(role, ()))
    return frozenset(paths)


REQUIRED_PATHS: dict[Role, frozenset[str]] = {role: _required_paths(role) for role in Role}

# Groups each role's validated view exposes.
EXPOSED_GROUPS: dict[Role, frozenset[str]] = {
    Role.MAIN_NODE: frozenset({"database", "l1", "consensus", "da", "contract_verifier"}),
    Role.PROVER: frozenset({"database", "l1"}),
    Role.VALIDATOR: frozenset({"l1", "consensus"}),
    Role.CONSENSUS_PARTICIPANT: frozenset({"l1", "consensus"}),
    Role.ATTESTER: frozenset({"l1", "consensus"}),
    Role.DATA_AVAILABILITY_CLIENT: frozenset({"l1", "da"}),
    Role.CONTRACT_VERIFIER: frozenset({"database", "l1", "contract_verifier"}),
}
