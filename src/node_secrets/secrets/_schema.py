"""Secrets schema: the five secret groups and the root ``SecretsBundle``.

Every leaf is addressed by a stable dotted path (``"consensus.node_key"``).
The schema only describes shape; which fields a deployment needs is decided
by the role tables in ``_roles``.

The data availability group exists in two forms. While merging, the bundle
holds a ``DataAvailabilityDraft`` that records whatever fields each backend
received. Validation resolves the draft into ``DataAvailabilitySecrets``, a
tagged union in which exactly one backend is populated::

    bundle = SecretsBundle()
    bundle.set("da.celestia.private_key", "0xabc")
    bundle.get("da.celestia.private_key")   # Secret('***')
    bundle.get("da.eigen.private_key")      # ABSENT
    bundle.get("da.bogus")                  # raises UnknownPathError
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from ._types import (
    ABSENT,
    AttesterSecretKey,
    NodeSecretKey,
    Secret,
    UnknownPathError,
    ValidatorSecretKey,
    _Absent,
)

_GROUP_CONFIG = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)


# ---------------------------------------------------------------------------
# Groups
# ---------------------------------------------------------------------------


class DatabaseSecrets(BaseModel):
    model_config = _GROUP_CONFIG

    server_url: Secret[str] | None = None
    server_replica_url: Secret[str] | None = None
    prover_url: Secret[str] | None = None


class L1Secrets(BaseModel):
    model_config = _GROUP_CONFIG

    l1_rpc_url: Secret[str] | None = None
    gateway_rpc_url: Secret[str] | None = None


class ConsensusSecrets(BaseModel):
    model_config = _GROUP_CONFIG

    validator_key: ValidatorSecretKey | None = None
    node_key: NodeSecretKey | None = None
    attester_key: AttesterSecretKey | None = None


class ContractVerifierSecrets(BaseModel):
    model_config = _GROUP_CONFIG

    etherscan_api_key: Secret[str] | None = None


class AvailSecrets(BaseModel):
    model_config = _GROUP_CONFIG

    backend: Literal["avail"] = "avail"
    seed_phrase: Secret[str]
    gas_relay_api_key: Secret[str]


class CelestiaSecrets(BaseModel):
    model_config = _GROUP_CONFIG

    backend: Literal["celestia"] = "celestia"
    private_key: Secret[str]


class EigenSecrets(BaseModel):
    model_config = _GROUP_CONFIG

    backend: Literal["eigen"] = "eigen"
    private_key: Secret[str]


DataAvailabilitySecrets = Annotated[
    Union[AvailSecrets, CelestiaSecrets, EigenSecrets],
    Field(discriminator="backend"),
]

DA_VARIANTS: dict[str, type[BaseModel]] = {
    "avail": AvailSecrets,
    "celestia": CelestiaSecrets,
    "eigen": EigenSecrets,
}


class DataAvailabilityDraft(BaseModel):
    """Merge-time record of data availability fields, one slot per backend field.

    May hold fields for several backends at once; only validation decides
    whether that is acceptable.
    """

    model_config = _GROUP_CONFIG

    avail_seed_phrase: Secret[str] | None = None
    avail_gas_relay_api_key: Secret[str] | None = None
    celestia_private_key: Secret[str] | None = None
    eigen_private_key: Secret[str] | None = None

    def populated_paths(self) -> dict[str, list[str]]:
        """Return ``{variant: [path, ...]}`` for every variant with at least one field set."""
        populated: dict[str, list[str]] = {}
        for path, spec in FIELD_SPECS.items():
            if spec.variant is None:
                continue
            if getattr(self, spec.attr) is not None:
                populated.setdefault(spec.variant, []).append(path)
        return populated


# ---------------------------------------------------------------------------
# Field paths
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FieldSpec:
    """Where a dotted path lives in the bundle and which leaf type it holds."""

    group: str
    attr: str
    leaf_type: type[Secret[Any]] = Secret
    variant: str | None = None

    @property
    def variant_field(self) -> str:
        """Field name on the resolved variant model (``seed_phrase`` for ``da.avail.seed_phrase``)."""
        return self.attr.removeprefix(f"{self.variant}_")


FIELD_SPECS: dict[str, FieldSpec] = {
    "database.server_url": FieldSpec("database", "server_url"),
    "database.server_replica_url": FieldSpec("database", "server_replica_url"),
    "database.prover_url": FieldSpec("database", "prover_url"),
    "l1.l1_rpc_url": FieldSpec("l1", "l1_rpc_url"),
    "l1.gateway_rpc_url": FieldSpec("l1", "gateway_rpc_url"),
    "consensus.validator_key": FieldSpec("consensus", "validator_key", ValidatorSecretKey),
    "consensus.node_key": FieldSpec("consensus", "node_key", NodeSecretKey),
    "consensus.attester_key": FieldSpec("consensus", "attester_key", AttesterSecretKey),
    "da.avail.seed_phrase": FieldSpec("da", "avail_seed_phrase", variant="avail"),
    "da.avail.gas_relay_api_key": FieldSpec("da", "avail_gas_relay_api_key", variant="avail"),
    "da.celestia.private_key": FieldSpec("da", "celestia_private_key", variant="celestia"),
    "da.eigen.private_key": FieldSpec("da", "eigen_private_key", variant="eigen"),
    "contract_verifier.etherscan_api_key": FieldSpec("contract_verifier", "etherscan_api_key"),
}

FIELD_PATHS: tuple[str, ...] = tuple(FIELD_SPECS)

GROUP_TYPES: dict[str, type[BaseModel]] = {
    "database": DatabaseSecrets,
    "l1": L1Secrets,
    "consensus": ConsensusSecrets,
    "da": DataAvailabilityDraft,
    "contract_verifier": ContractVerifierSecrets,
}


def field_spec(path: str) -> FieldSpec:
    """Return the ``FieldSpec`` for *path* or raise ``UnknownPathError``."""
    try:
        return FIELD_SPECS[path]
    except KeyError:
        raise UnknownPathError(path) from None


def variant_paths(variant: str) -> list[str]:
    """All dotted paths that belong to a data availability backend."""
    return [path for path, spec in FIELD_SPECS.items() if spec.variant == variant]


# ---------------------------------------------------------------------------
# Bundle
# ---------------------------------------------------------------------------


class SecretsBundle(BaseModel):
    """Root aggregate. Each group is optional; an empty group collapses to ``None``."""

    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    database: DatabaseSecrets | None = None
    l1: L1Secrets | None = None
    consensus: ConsensusSecrets | None = None
    da: DataAvailabilityDraft | None = None
    contract_verifier: ContractVerifierSecrets | None = None

    def get(self, path: str) -> Secret[str] | _Absent:
        """Return the leaf at *path*, or ``ABSENT`` if the known field is unset."""
        spec = field_spec(path)
        group = getattr(self, spec.group)
        if group is None:
            return ABSENT
        value = getattr(group, spec.attr)
        return ABSENT if value is None else value

    def set(self, path: str, value: str | Secret[str] | None) -> None:
        """Set the leaf at *path*. Empty strings and ``None`` clear the field."""
        spec = field_spec(path)
        if isinstance(value, Secret):
            value = value.secret_value
        leaf = spec.leaf_type(value) if value else None

        group = getattr(self, spec.group) or GROUP_TYPES[spec.group]()
        group = group.model_copy(update={spec.attr: leaf})
        if all(getattr(group, name) is None for name in _leaf_attrs(spec.group)):
            group = None
        setattr(self, spec.group, group)

    def is_set(self, path: str) -> bool:
        return not isinstance(self.get(path), _Absent)

    def present_paths(self) -> list[str]:
        """Dotted paths that currently hold a value, in schema order."""
        return [path for path in FIELD_PATHS if self.is_set(path)]


def _leaf_attrs(group: str) -> list[str]:
    return [spec.attr for spec in FIELD_SPECS.values() if spec.group == group]
