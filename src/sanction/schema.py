"""
Schema definitions for sanction.

This module defines the Pydantic models used throughout sanction:
- Approval: The terminal grant/deny decision
- Role: The subject a Privilege is evaluated against
- GrantPolicy: YAML-configurable allow/deny scope rules
- ScopeDecision: The result of evaluating a role against a GrantPolicy

Design Decisions:
    - Approval and Role are immutable (frozen=True)
    - The error field is an opaque caller-defined payload, never interpreted
    - Approval and Role accept arbitrary extra fields (reasons, capabilities)
    - GrantPolicy is deny-by-default, like every sanction check
"""

from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from sanction.errors import PolicyLoadError


# =============================================================================
# Terminal Models
# =============================================================================


class Approval(BaseModel):
    """
    The result of an approval step.

    Every resolution step produces fresh Approvals; they are never mutated.

    Attributes:
        value: True if access is approved, False otherwise
        error: The cause of the denial (opaque, meaningful chiefly on denial)

    Extra fields such as a reason are kept as attributes.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    value: bool = Field(
        ...,
        description="True if the access is approved",
        strict=True,
    )
    error: Any | None = Field(
        default=None,
        description="The error that caused the approval to fail",
    )

    @classmethod
    def grant(cls, error: Any | None = None) -> "Approval":
        """Create a granting Approval."""
        return cls(value=True, error=error)

    @classmethod
    def deny(cls, error: Any | None = None) -> "Approval":
        """Create a denying Approval."""
        return cls(value=False, error=error)


class Role(BaseModel):
    """
    A capability set a Privilege is checked against.

    Roles isolate what is being checked (a scope, an ownership claim, a
    tier) from both the Permit that produces them and the Privilege that
    accepts them. Extra fields are kept as attributes:

        Role(scope="repo:write", error="write access required").scope

    Attributes:
        error: The error to report when no Privilege responds to this role
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    error: Any | None = Field(
        default=None,
        description="The error to be passed when this role is not met",
    )


def role_error(role: Any) -> Any | None:
    """Return the denial cause carried by a role, if any."""
    if isinstance(role, Mapping):
        return role.get("error")
    return getattr(role, "error", None)


# =============================================================================
# Policy Models
# =============================================================================


class PolicyBoundary(str, Enum):
    """
    The default policy behavior.

    DENY_BY_DEFAULT means every role is denied unless explicitly allowed.
    """

    DENY_BY_DEFAULT = "deny_by_default"


class GrantPolicy(BaseModel):
    """
    Allow/deny rules for role scopes.

    A GrantPolicy is turned into a Privilege by
    sanction.policy.scope_privilege().

    Attributes:
        boundary: Default behavior (always deny_by_default)
        scope_field: Role attribute holding the scope to match
        allow_scopes: Glob patterns for granted scopes (e.g., ["repo:*"])
        deny_scopes: Glob patterns for denied scopes (takes precedence)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    boundary: PolicyBoundary = Field(
        default=PolicyBoundary.DENY_BY_DEFAULT,
        description="Default policy behavior",
    )
    scope_field: str = Field(
        default="scope",
        description="Role attribute holding the scope to match",
        min_length=1,
    )
    allow_scopes: list[str] = Field(
        default_factory=list,
        description="Glob patterns for granted scopes",
    )
    deny_scopes: list[str] = Field(
        default_factory=list,
        description="Glob patterns for denied scopes (takes precedence)",
    )


class ScopeDecision(BaseModel):
    """
    Result of evaluating one role against a GrantPolicy.

    Attributes:
        allowed: Whether the scope is granted
        reason: Human-readable explanation of the decision
        scope: The scope that was evaluated (None if the role had none)
        rule_matched: Which policy rule caused this decision
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    allowed: bool = Field(..., description="Whether the scope is granted")
    reason: str = Field(..., description="Human-readable explanation")
    scope: str | None = Field(default=None, description="The evaluated scope")
    rule_matched: str | None = Field(
        default=None,
        description="Which policy rule caused this decision",
    )

    @classmethod
    def allow(cls, reason: str, scope: str, rule: str | None = None) -> "ScopeDecision":
        """Create an ALLOW decision."""
        return cls(allowed=True, reason=reason, scope=scope, rule_matched=rule)

    @classmethod
    def deny(
        cls,
        reason: str,
        scope: str | None = None,
        rule: str | None = None,
    ) -> "ScopeDecision":
        """Create a DENY decision."""
        return cls(allowed=False, reason=reason, scope=scope, rule_matched=rule)


# =============================================================================
# YAML Loading Helpers
# =============================================================================


def load_policy(path: Path | str) -> GrantPolicy:
    """
    Load a grant policy from a YAML file.

    Args:
        path: Path to the YAML file

    Returns:
        Validated GrantPolicy object

    Raises:
        PolicyLoadError: If the file is unreadable or doesn't match the schema
    """
    path = Path(path)
    try:
        with path.open() as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise PolicyLoadError(path=str(path), underlying_error=str(e)) from e

    return _validate_policy(data, str(path))


def load_policy_from_string(content: str) -> GrantPolicy:
    """Load a grant policy from a YAML string."""
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise PolicyLoadError(underlying_error=str(e)) from e

    return _validate_policy(data, "")


def _validate_policy(data: Any, path: str) -> GrantPolicy:
    """Validate parsed YAML; an empty document is the empty policy."""
    try:
        return GrantPolicy.model_validate(data or {})
    except ValidationError as e:
        raise PolicyLoadError(path=path, underlying_error=str(e)) from e
