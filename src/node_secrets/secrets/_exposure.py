"""Role-scoped validated views and redacted serialization.

Views are only produced by ``validate()``. Each role gets its own view class
carrying just the group accessors that role needs, so asking a
``ValidatorView`` for database credentials fails at attribute lookup rather
than at some later network call::

    view = validate(bundle, Role.PROVER)
    view.database.server_url           # Secret('***')
    reveal_for_transport(view, "database.server_url")   # the raw URL
    redacted_dump(view)                # {"database": {"server_url": "***", ...}, ...}

``reveal_for_transport`` is the only way to get a raw value out and it does
not log.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, ClassVar, Mapping, Union

from pydantic import BaseModel

from ._roles import EXPOSED_GROUPS, Role
from ._schema import (
    FIELD_SPECS,
    AvailSecrets,
    CelestiaSecrets,
    ConsensusSecrets,
    ContractVerifierSecrets,
    DatabaseSecrets,
    EigenSecrets,
    L1Secrets,
    SecretsBundle,
    field_spec,
)
from ._types import (
    ABSENT,
    REDACTED,
    Secret,
    SecretAbsentError,
    SecretAccessError,
    _Absent,
)


# ---------------------------------------------------------------------------
# Views
# ---------------------------------------------------------------------------


class ValidatedSecrets:
    """Read-only projection of a bundle that passed validation for ``role``."""

    __slots__ = ("_groups",)

    role: ClassVar[Role]

    def __init__(self, groups: Mapping[str, BaseModel | None]) -> None:
        exposed = EXPOSED_GROUPS[self.role]
        object.__setattr__(
            self,
            "_groups",
            MappingProxyType({name: groups.get(name) for name in sorted(exposed)}),
        )

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is read-only")

    @property
    def exposed_groups(self) -> frozenset[str]:
        return EXPOSED_GROUPS[self.role]

    def _group(self, name: str) -> Any:
        return self._groups[name]

    def lookup(self, path: str) -> Secret[str] | _Absent:
        """Return the leaf at *path* (still wrapped) or ``ABSENT``.

        Raises ``SecretAccessError`` for paths outside this role's groups.
        """
        spec = field_spec(path)
        if spec.group not in self._groups:
            raise SecretAccessError(path, self.role.value)
        group = self._groups[spec.group]
        if group is None:
            return ABSENT
        if spec.variant is not None:
            if group.backend != spec.variant:
                return ABSENT
            value = getattr(group, spec.variant_field)
        else:
            value = getattr(group, spec.attr)
        return ABSENT if value is None else value

    def present_paths(self) -> list[str]:
        return [
            path
            for path, spec in FIELD_SPECS.items()
            if spec.group in self._groups and not isinstance(self.lookup(path), _Absent)
        ]

    def to_bundle(self) -> SecretsBundle:
        """Rebuild a ``SecretsBundle`` holding exactly this view's values."""
        bundle = SecretsBundle()
        for path in self.present_paths():
            bundle.set(path, self.lookup(path))
        return bundle

    def reveal_for_transport(self, path: str) -> str:
        return reveal_for_transport(self, path)

    def dump(self) -> dict[str, Any]:
        return redacted_dump(self)

    # -- comparison / display -----------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ValidatedSecrets):
            return NotImplemented
        return self.role is other.role and dict(self._groups) == dict(other._groups)

    def __hash__(self) -> int:
        return hash((self.role, tuple(self._groups.items())))

    def __repr__(self) -> str:
        groups = ", ".join(f"{name}={value!r}" for name, value in self._groups.items())
        return f"{type(self).__name__}({groups})"

    __str__ = __repr__


class _DatabaseAccess:
    __slots__ = ()

    @property
    def database(self) -> DatabaseSecrets | None:
        return self._group("database")  # type: ignore[attr-defined]


class _L1Access:
    __slots__ = ()

    @property
    def l1(self) -> L1Secrets | None:
        return self._group("l1")  # type: ignore[attr-defined]


class _ConsensusAccess:
    __slots__ = ()

    @property
    def consensus(self) -> ConsensusSecrets | None:
        return self._group("consensus")  # type: ignore[attr-defined]


class _DataAvailabilityAccess:
    __slots__ = ()

    @property
    def data_availability(self) -> Union[AvailSecrets, CelestiaSecrets, EigenSecrets, None]:
        return self._group("da")  # type: ignore[attr-defined]


class _ContractVerifierAccess:
    __slots__ = ()

    @property
    def contract_verifier(self) -> ContractVerifierSecrets | None:
        return self._group("contract_verifier")  # type: ignore[attr-defined]


class MainNodeView(
    ValidatedSecrets,
    _DatabaseAccess,
    _L1Access,
    _ConsensusAccess,
    _DataAvailabilityAccess,
    _ContractVerifierAccess,
):
    __slots__ = ()
    role = Role.MAIN_NODE


class ProverView(ValidatedSecrets, _DatabaseAccess, _L1Access):
    __slots__ = ()
    role = Role.PROVER


class ValidatorView(ValidatedSecrets, _L1Access, _ConsensusAccess):
    __slots__ = ()
    role = Role.VALIDATOR


class ConsensusParticipantView(ValidatedSecrets, _L1Access, _ConsensusAccess):
    __slots__ = ()
    role = Role.CONSENSUS_PARTICIPANT


class AttesterView(ValidatedSecrets, _L1Access, _ConsensusAccess):
    __slots__ = ()
    role = Role.ATTESTER


class DataAvailabilityClientView(ValidatedSecrets, _L1Access, _DataAvailabilityAccess):
    __slots__ = ()
    role = Role.DATA_AVAILABILITY_CLIENT


class ContractVerifierView(ValidatedSecrets, _DatabaseAccess, _L1Access, _ContractVerifierAccess):
    __slots__ = ()
    role = Role.CONTRACT_VERIFIER


VIEW_TYPES: dict[Role, type[ValidatedSecrets]] = {
    view_type.role: view_type
    for view_type in (
        MainNodeView,
        ProverView,
        ValidatorView,
        ConsensusParticipantView,
        AttesterView,
        DataAvailabilityClientView,
        ContractVerifierView,
    )
}


def build_view(
    role: Role,
    bundle: SecretsBundle,
    data_availability: BaseModel | None = None,
) -> ValidatedSecrets:
    """Project *bundle* onto *role*'s view. Callers must have validated first."""
    groups: dict[str, BaseModel | None] = {
        "database": bundle.database,
        "l1": bundle.l1,
        "consensus": bundle.consensus,
        "da": data_availability,
        "contract_verifier": bundle.contract_verifier,
    }
    return VIEW_TYPES[role](groups)


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------


def _nest(flat: dict[str, Any]) -> dict[str, Any]:
    nested: dict[str, Any] = {}
    for path, value in flat.items():
        *parents, leaf = path.split(".")
        node = nested
        for segment in parents:
            node = node.setdefault(segment, {})
        node[leaf] = value
    return nested


def redacted_dump(obj: SecretsBundle | ValidatedSecrets) -> dict[str, Any]:
    """Nested dict of every visible leaf: ``"***"`` if set, ``None`` if absent.

    For a view only the role's groups appear. The marker is fixed and never
    depends on the underlying value.
    """
    if isinstance(obj, ValidatedSecrets):
        paths = [path for path, spec in FIELD_SPECS.items() if spec.group in obj.exposed_groups]
        getter = obj.lookup
    elif isinstance(obj, SecretsBundle):
        paths = list(FIELD_SPECS)
        getter = obj.get
    else:
        raise TypeError(f"Cannot dump {type(obj).__name__}")

    flat = {path: None if isinstance(getter(path), _Absent) else REDACTED for path in paths}
    return _nest(flat)


def reveal_for_transport(view: ValidatedSecrets, path: str) -> str:
    """Return the raw value at *path* for handing to a network client.

    Only accepts validated views. Raises ``UnknownPathError``,
    ``SecretAccessError`` (path outside the view's role) or
    ``SecretAbsentError``. Nothing on this path logs.
    """
    if not isinstance(view, ValidatedSecrets):
        raise TypeError("reveal_for_transport() requires a validated view")
    value = view.lookup(path)
    if isinstance(value, _Absent):
        raise SecretAbsentError(path)
    return value.secret_value
