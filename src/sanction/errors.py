"""
Exception hierarchy for sanction.

All sanction exceptions inherit from SanctionError, allowing callers to catch
all sanction-specific exceptions with a single except clause.

Exception Categories:
    - AccessDeniedError: A denial surfaced at a require_* boundary
    - InvalidRuleTypeError: A rule value that cannot be resolved
    - PolicyLoadError: A grant policy file that cannot be loaded

Two failure classes are kept strictly apart:
    - Denials are data (an Approval with value=False). They only become
      exceptions at require_* boundaries.
    - Structural errors (InvalidRuleTypeError) are faults in the rule graph.
      They are raised immediately and never converted into denials.
"""

from dataclasses import dataclass, field
from typing import Any


# =============================================================================
# Error Codes
# =============================================================================

# Access errors: 1xxx
ERROR_ACCESS_DENIED = 1001

# Rule errors: 2xxx
ERROR_RULE_INVALID_TYPE = 2001

# Policy errors: 3xxx
ERROR_POLICY_LOAD = 3001


# =============================================================================
# Base Exception
# =============================================================================


@dataclass
class SanctionError(Exception):
    """
    Base exception for all sanction errors.

    Attributes:
        message: Human-readable error description
        code: Numeric error code for programmatic handling
        suggestion: Optional hint for how to resolve the error
        context: Optional dict with additional debugging info
    """

    message: str = ""
    code: int = 0
    suggestion: str | None = None
    context: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        """Format error for display."""
        parts = [f"[E{self.code}] {self.message}"]
        if self.suggestion:
            parts.append(f"\nSuggestion: {self.suggestion}")
        return "".join(parts)

    def __repr__(self) -> str:
        """Format error for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code}, "
            f"context={self.context!r})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "code": self.code,
            "suggestion": self.suggestion,
            "context": self.context,
        }


# =============================================================================
# Access Errors
# =============================================================================


@dataclass
class AccessDeniedError(SanctionError):
    """
    Raised by require_* functions when the check is denied.

    The engine never interprets denial causes. When the failing Approval
    carries an exception, that exception is raised directly; any other cause
    (a string, a dict, None) is attached here unchanged.

    Attributes:
        cause: The opaque error of the failing Approval
    """

    cause: Any = None

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = "Access denied"
            if self.cause is not None:
                self.message += f": {self.cause}"
        if self.code == 0:
            self.code = ERROR_ACCESS_DENIED
        self.context["cause"] = self.cause


# =============================================================================
# Rule Errors
# =============================================================================


@dataclass
class RuleError(SanctionError):
    """
    Base class for structural rule errors.

    These indicate a misconfigured rule graph, never a policy outcome.

    Attributes:
        layer: The layer being resolved ("privilege", "permit", "permission")
    """

    layer: str = ""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        self.context["layer"] = self.layer


@dataclass
class InvalidRuleTypeError(RuleError):
    """Raised when a rule value has no resolvable shape."""

    rule_type: str = ""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = f"Invalid {self.layer} rule type: {self.rule_type}"
        if self.code == 0:
            self.code = ERROR_RULE_INVALID_TYPE
        if not self.suggestion:
            self.suggestion = (
                "Rules must be a terminal value, an awaitable, "
                "a list or tuple of rules, or a callable"
            )
        super().__post_init__()
        self.context["rule_type"] = self.rule_type


# =============================================================================
# Policy Errors
# =============================================================================


@dataclass
class PolicyLoadError(SanctionError):
    """Raised when a grant policy cannot be read or validated."""

    path: str = ""
    underlying_error: str = ""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            source = self.path or "<string>"
            self.message = f"Failed to load policy from {source}: {self.underlying_error}"
        if self.code == 0:
            self.code = ERROR_POLICY_LOAD
        if not self.suggestion:
            self.suggestion = "Check the policy YAML against the GrantPolicy schema"
        self.context.update({
            "path": self.path,
            "underlying_error": self.underlying_error,
        })


def denial_exception(cause: Any) -> BaseException:
    """
    Return the exception a require_* function raises for a denial cause.

    Exception causes are raised unchanged; anything else is wrapped in
    AccessDeniedError with the cause attached verbatim.
    """
    if isinstance(cause, BaseException):
        return cause
    return AccessDeniedError(cause=cause)
