"""Foundation types for the secrets module.

Provides the absent marker, the redacting ``Secret`` wrapper and its
consensus-key subclasses, and the exception hierarchy. No exception defined
here ever formats a secret value into its message.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar, get_args

from pydantic import GetCoreSchemaHandler
from pydantic_core import CoreSchema, core_schema

T = TypeVar("T")

REDACTED = "***"


# ---------------------------------------------------------------------------
# Sentinel
# ---------------------------------------------------------------------------


class _Absent:
    """Marker for a known field path that holds no value (distinct from ``None``)."""

    _instance: _Absent | None = None

    def __new__(cls) -> _Absent:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT = _Absent()


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class SecretsError(Exception):
    """Base exception for secrets-related errors."""


class UnknownPathError(SecretsError):
    """Raised when a field path is not part of the secrets schema."""

    def __init__(self, path: str, source: str | None = None) -> None:
        self.path = path
        self.source = source
        origin = f" (from source '{source}')" if source else ""
        super().__init__(f"Unknown secrets field path '{path}'{origin}.")


class InvalidValueTypeError(SecretsError):
    """Raised when raw input supplies a non-string value for a field."""

    def __init__(self, path: str, type_name: str) -> None:
        self.path = path
        self.type_name = type_name
        super().__init__(f"Secrets field '{path}' must be a string, got {type_name}.")


class MergeAmbiguityError(SecretsError):
    """Reserved for data-availability conflicts that last-write-wins cannot settle.

    Currently every such conflict is settled by merging and reported by the
    validator, so nothing raises this.
    """

    def __init__(self, paths: list[str]) -> None:
        self.paths = list(paths)
        super().__init__(f"Ambiguous data availability input: {', '.join(self.paths)}.")


class SecretsValidationError(SecretsError):
    """Raised when a bundle fails role validation. Carries the full report."""

    def __init__(self, report: Any) -> None:
        self.report = report
        super().__init__(str(report))


class SecretAccessError(SecretsError):
    """Raised when a view is asked for a field its role does not expose."""

    def __init__(self, path: str, role: str) -> None:
        self.path = path
        self.role = role
        super().__init__(f"Field '{path}' is not exposed to role '{role}'.")


class SecretAbsentError(SecretsError):
    """Raised when revealing a field that holds no value."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Secrets field '{path}' is not set.")


# ---------------------------------------------------------------------------
# Secret
# ---------------------------------------------------------------------------


class Secret(Generic[T]):
    """Wraps a value so it is redacted in ``repr`` / ``str`` output.

    Access the real value via ``.secret_value``.
    """

    __slots__ = ("_value",)

    def __init__(self, value: T) -> None:
        object.__setattr__(self, "_value", value)

    @property
    def secret_value(self) -> T:
        return self._value  # type: ignore[return-value]

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __reduce__(self) -> tuple[Any, ...]:
        # copy/deepcopy/pickle rebuild through __init__ instead of setattr.
        return (type(self), (self._value,))

    # -- redaction ----------------------------------------------------------

    def __repr__(self) -> str:
        return f"{type(self).__name__}('{REDACTED}')"

    def __str__(self) -> str:
        return REDACTED

    def __format__(self, format_spec: str) -> str:
        return REDACTED

    # -- comparison ---------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Secret) and type(other) is type(self):
            return bool(self._value == other._value)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)

    def __bool__(self) -> bool:
        return bool(self._value)

    # -- Pydantic v2 integration --------------------------------------------

    @classmethod
    def __get_pydantic_core_schema__(
        cls,
        source_type: Any,
        handler: GetCoreSchemaHandler,
    ) -> CoreSchema:
        # Extract the inner type arg (e.g., ``str`` from ``Secret[str]``).
        args = get_args(source_type)
        inner_type = args[0] if args else Any

        handler.generate_schema(inner_type)

        def _validate(value: Any) -> "Secret[Any]":
            if isinstance(value, cls):
                return value
            if isinstance(value, Secret):
                return cls(value.secret_value)
            return cls(value)

        def _serialize(value: "Secret[Any]", _info: Any) -> str:
            return REDACTED

        return core_schema.no_info_plain_validator_function(
            _validate,
            serialization=core_schema.plain_serializer_function_ser_schema(
                _serialize,
                info_arg=True,
            ),
            metadata={"pydantic_js_functions": []},
        )


# ---------------------------------------------------------------------------
# Consensus keys
# ---------------------------------------------------------------------------


class ValidatorSecretKey(Secret[str]):
    """Consensus validator signing key."""

    __slots__ = ()


class NodeSecretKey(Secret[str]):
    """Consensus network node key."""

    __slots__ = ()


class AttesterSecretKey(Secret[str]):
    """Consensus attester signing key."""

    __slots__ = ()
