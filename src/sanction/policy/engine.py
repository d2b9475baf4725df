"""
Grant policy engine for sanction.

Turns a GrantPolicy into a Privilege. Each role is judged by the scope it
carries (the attribute named by policy.scope_field):

    1. A role without a scope is denied
    2. A scope matching any deny_scopes pattern is denied
    3. A scope matching an allow_scopes pattern is granted
    4. Everything else is denied

Patterns are shell-style globs matched case-sensitively ("repo:*").

Denials carry the role's own error when it has one, so the caller's error
surfaces from require_* unchanged. Otherwise the cause is an
AccessDeniedError naming the rule that denied.
"""

from collections.abc import Mapping
from fnmatch import fnmatchcase
from typing import Any

from sanction.errors import AccessDeniedError
from sanction.logging import get_logger
from sanction.schema import Approval, GrantPolicy, ScopeDecision, role_error

logger = get_logger(__name__)


class PolicyEngine:
    """
    Evaluates roles against a GrantPolicy.

    Instances are callable with a role, so an engine is itself a Privilege:

        engine = PolicyEngine(load_policy("grants.yaml"))
        await require_permit(repo_permit, engine, repo)

    Attributes:
        policy: The GrantPolicy to enforce
    """

    def __init__(self, policy: GrantPolicy) -> None:
        """
        Initialize the policy engine.

        Args:
            policy: The grant policy to enforce
        """
        self.policy = policy

    def __call__(self, role: Any) -> Approval:
        return self.evaluate(role)

    def evaluate(self, role: Any) -> Approval:
        """Return the Approval for a role."""
        decision = self.decide(role)

        if decision.allowed:
            return Approval.grant()

        error = role_error(role)
        if error is None:
            error = AccessDeniedError(
                message=decision.reason,
                context={"scope": decision.scope, "rule": decision.rule_matched},
            )
        return Approval.deny(error)

    def decide(self, role: Any) -> ScopeDecision:
        """
        Evaluate a role and explain the outcome.

        Args:
            role: A Role, a mapping, or any object carrying the scope field

        Returns:
            ScopeDecision indicating allow/deny with reason
        """
        scope = self._scope_of(role)
        if scope is None:
            return ScopeDecision.deny(
                f"Role has no {self.policy.scope_field}",
                rule="missing_scope",
            )

        # Deny takes precedence
        for pattern in self.policy.deny_scopes:
            if fnmatchcase(scope, pattern):
                logger.debug("scope_denied", scope=scope, pattern=pattern)
                return ScopeDecision.deny(
                    f"Scope matches deny pattern: {pattern}",
                    scope=scope,
                    rule=f"deny_scopes[{pattern}]",
                )

        if not self.policy.allow_scopes:
            return ScopeDecision.deny(
                "No scopes allowed",
                scope=scope,
                rule="allow_scopes=[]",
            )

        for pattern in self.policy.allow_scopes:
            if fnmatchcase(scope, pattern):
                return ScopeDecision.allow(
                    f"Scope allowed by pattern: {pattern}",
                    scope=scope,
                    rule=f"allow_scopes[{pattern}]",
                )

        return ScopeDecision.deny(
            f"Scope not in allowlist: {scope}",
            scope=scope,
            rule="allow_scopes",
        )

    def _scope_of(self, role: Any) -> str | None:
        if isinstance(role, Mapping):
            scope = role.get(self.policy.scope_field)
        else:
            scope = getattr(role, self.policy.scope_field, None)
        return None if scope is None else str(scope)


def scope_privilege(policy: GrantPolicy) -> PolicyEngine:
    """Return a Privilege enforcing the given grant policy."""
    return PolicyEngine(policy)
