"""Role validation: check a bundle against a deployment role.

Rules run in a fixed order and every violation is collected, so one report
lists everything an operator has to fix:

1. ``l1-rpc``          L1 RPC URL, required for all roles but the contract verifier
2. ``consensus-keys``  node / validator / attester keys by consensus role
3. ``da-choice``       exactly one fully populated data availability backend

Issue messages and log records mention paths, roles and rule ids only.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel

from ._exposure import ValidatedSecrets, build_view
from ._roles import CONSENSUS_KEY_REQUIREMENTS, DA_REQUIRED_ROLES, L1_RPC_EXEMPT_ROLES, Role
from ._schema import DA_VARIANTS, FIELD_SPECS, SecretsBundle, variant_paths
from ._types import SecretsValidationError

logger = logging.getLogger(__name__)


class IssueKind(str, Enum):
    MISSING_REQUIRED_FIELD = "MissingRequiredField"
    CONFLICTING_VARIANT = "ConflictingVariant"
    PARTIAL_VARIANT = "PartialVariant"


@dataclass(frozen=True)
class ValidationIssue:
    """One violated rule. ``paths`` lists every field involved (conflicts name several)."""

    path: str
    kind: IssueKind
    rule: str
    reason: str
    paths: tuple[str, ...] = ()

    def as_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "kind": self.kind.value,
            "rule": self.rule,
            "reason": self.reason,
            "paths": list(self.paths),
        }


@dataclass(frozen=True)
class ValidationReport:
    role: Role
    issues: tuple[ValidationIssue, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return not self.issues

    def of_kind(self, kind: IssueKind) -> list[ValidationIssue]:
        return [issue for issue in self.issues if issue.kind is kind]

    def as_list(self) -> list[dict[str, Any]]:
        return [issue.as_dict() for issue in self.issues]

    def __str__(self) -> str:
        if self.ok:
            return f"Secrets are valid for role '{self.role.value}'."
        lines = [f"Secrets are invalid for role '{self.role.value}' ({len(self.issues)} issue(s)):"]
        lines.extend(f"  - [{i.kind.value}] {i.path}: {i.reason}" for i in self.issues)
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------


def _missing(path: str, rule: str, role: Role) -> ValidationIssue:
    return ValidationIssue(
        path=path,
        kind=IssueKind.MISSING_REQUIRED_FIELD,
        rule=rule,
        reason=f"required for role '{role.value}'",
        paths=(path,),
    )


def _check_l1(bundle: SecretsBundle, role: Role) -> list[ValidationIssue]:
    if role in L1_RPC_EXEMPT_ROLES or bundle.is_set("l1.l1_rpc_url"):
        return []
    return [_missing("l1.l1_rpc_url", "l1-rpc", role)]


def _check_consensus(bundle: SecretsBundle, role: Role) -> list[ValidationIssue]:
    return [
        _missing(path, "consensus-keys", role)
        for path in CONSENSUS_KEY_REQUIREMENTS.get(role, ())
        if not bundle.is_set(path)
    ]


def _resolve_data_availability(
    bundle: SecretsBundle,
    role: Role,
) -> tuple[BaseModel | None, list[ValidationIssue]]:
    """Turn the merge-time draft into a single backend model, or report why not."""
    populated = bundle.da.populated_paths() if bundle.da is not None else {}

    if not populated:
        if role in DA_REQUIRED_ROLES:
            return None, [
                ValidationIssue(
                    path="da",
                    kind=IssueKind.MISSING_REQUIRED_FIELD,
                    rule="da-choice",
                    reason=(
                        f"one data availability backend ({', '.join(DA_VARIANTS)}) "
                        f"is required for role '{role.value}'"
                    ),
                    paths=(),
                )
            ]
        return None, []

    if len(populated) > 1:
        paths = tuple(path for variant_list in populated.values() for path in variant_list)
        return None, [
            ValidationIssue(
                path="da",
                kind=IssueKind.CONFLICTING_VARIANT,
                rule="da-choice",
                reason=(
                    f"only one data availability backend may be set, found "
                    f"{', '.join(populated)}: {', '.join(paths)}"
                ),
                paths=paths,
            )
        ]

    (variant,) = populated
    missing = [path for path in variant_paths(variant) if not bundle.is_set(path)]
    if missing and role not in DA_REQUIRED_ROLES:
        # Incomplete backend on a role that does not need one: left unresolved.
        return None, []
    issues = [
        ValidationIssue(
            path=path,
            kind=IssueKind.PARTIAL_VARIANT,
            rule="da-choice",
            reason=f"'{variant}' backend is incomplete without this field",
            paths=(path,),
        )
        for path in missing
    ]
    if issues:
        return None, issues

    values = {
        FIELD_SPECS[path].variant_field: bundle.get(path) for path in variant_paths(variant)
    }
    return DA_VARIANTS[variant](**values), []


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def _as_bundle(source: SecretsBundle | ValidatedSecrets) -> SecretsBundle:
    if isinstance(source, ValidatedSecrets):
        return source.to_bundle()
    return source


def _evaluate(
    bundle: SecretsBundle,
    role: Role,
) -> tuple[ValidationReport, BaseModel | None]:
    issues: list[ValidationIssue] = []
    issues.extend(_check_l1(bundle, role))
    issues.extend(_check_consensus(bundle, role))
    data_availability, da_issues = _resolve_data_availability(bundle, role)
    issues.extend(da_issues)
    return ValidationReport(role=role, issues=tuple(issues)), data_availability


def check(bundle: SecretsBundle | ValidatedSecrets, role: Role | str) -> ValidationReport:
    """Return the full validation report without raising."""
    report, _ = _evaluate(_as_bundle(bundle), Role.parse(role))
    return report


def validate(bundle: SecretsBundle | ValidatedSecrets, role: Role | str) -> ValidatedSecrets:
    """Validate *bundle* for *role* and return that role's read-only view.

    Raises ``SecretsValidationError`` with the complete report if any rule
    fails; no view is produced in that case. The bundle is not modified.
    """
    role = Role.parse(role)
    bundle = _as_bundle(bundle)
    report, data_availability = _evaluate(bundle, role)

    if not report.ok:
        logger.warning(
            "Secrets validation failed for role %s: %s",
            role.value,
            ", ".join(f"{i.rule}/{i.kind.value}/{i.path}" for i in report.issues),
        )
        raise SecretsValidationError(report)

    logger.info(
        "Secrets validated for role %s (%d field(s) present)",
        role.value,
        len(bundle.present_paths()),
    )
    return build_view(role, bundle, data_availability)
