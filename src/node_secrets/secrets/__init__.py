"""Typed secrets model and role validation for node deployments.

Merges raw key/value sources into a ``SecretsBundle``, validates it against a
deployment ``Role``, and hands out read-only, redacted, role-scoped views.
Secret values never appear in ``repr``, logs, error messages or dumps.
"""

from ._exposure import (
    AttesterView,
    ConsensusParticipantView,
    ContractVerifierView,
    DataAvailabilityClientView,
    MainNodeView,
    ProverView,
    ValidatedSecrets,
    ValidatorView,
    redacted_dump,
    reveal_for_transport,
)
from ._loader import load_secrets, merge_raw
from ._roles import REQUIRED_PATHS, Role
from ._schema import (
    FIELD_PATHS,
    AvailSecrets,
    CelestiaSecrets,
    ConsensusSecrets,
    ContractVerifierSecrets,
    DatabaseSecrets,
    DataAvailabilityDraft,
    DataAvailabilitySecrets,
    EigenSecrets,
    L1Secrets,
    SecretsBundle,
)
from ._sources import EnvSource, MappingSource, SecretsSource, YamlFileSource
from ._testing import make_view
from ._types import (
    ABSENT,
    AttesterSecretKey,
    InvalidValueTypeError,
    MergeAmbiguityError,
    NodeSecretKey,
    Secret,
    SecretAbsentError,
    SecretAccessError,
    SecretsError,
    SecretsValidationError,
    UnknownPathError,
    ValidatorSecretKey,
)
from ._validator import IssueKind, ValidationIssue, ValidationReport, check, validate

__all__ = [
    # Core
    "load_secrets",
    "merge_raw",
    "validate",
    "check",
    "Role",
    "REQUIRED_PATHS",
    # Schema
    "FIELD_PATHS",
    "ABSENT",
    "SecretsBundle",
    "DatabaseSecrets",
    "L1Secrets",
    "ConsensusSecrets",
    "DataAvailabilityDraft",
    "DataAvailabilitySecrets",
    "AvailSecrets",
    "CelestiaSecrets",
    "EigenSecrets",
    "ContractVerifierSecrets",
    "Secret",
    "ValidatorSecretKey",
    "NodeSecretKey",
    "AttesterSecretKey",
    # Validation
    "IssueKind",
    "ValidationIssue",
    "ValidationReport",
    # Views
    "ValidatedSecrets",
    "MainNodeView",
    "ProverView",
    "ValidatorView",
    "ConsensusParticipantView",
    "AttesterView",
    "DataAvailabilityClientView",
    "ContractVerifierView",
    "redacted_dump",
    "reveal_for_transport",
    # Sources
    "SecretsSource",
    "MappingSource",
    "EnvSource",
    "YamlFileSource",
    # Errors
    "SecretsError",
    "UnknownPathError",
    "InvalidValueTypeError",
    "MergeAmbiguityError",
    "SecretsValidationError",
    "SecretAccessError",
    "SecretAbsentError",
    # Testing
    "make_view",
]
