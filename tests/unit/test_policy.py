"""
Unit tests for the grant policy engine.

Tests cover:
- Deny-by-default behavior
- allow_scopes / deny_scopes precedence
- Custom scope fields and mapping roles
- Use of the engine as a Privilege
"""

import pytest

from sanction.errors import AccessDeniedError
from sanction.policy import PolicyEngine, scope_privilege
from sanction.privilege import check_privilege, require_privilege
from sanction.schema import Approval, GrantPolicy, Role


@pytest.fixture
def repo_policy() -> GrantPolicy:
    """A policy allowing repo scopes except deletion."""
    return GrantPolicy(
        allow_scopes=["repo:*", "issues:read"],
        deny_scopes=["repo:delete"],
    )


class TestDecide:
    """Tests for PolicyEngine.decide."""

    def test_default_policy_denies(self) -> None:
        """An empty policy denies every scope."""
        decision = PolicyEngine(GrantPolicy()).decide(Role(scope="repo:read"))
        assert decision.allowed is False
        assert decision.rule_matched == "allow_scopes=[]"

    def test_missing_scope(self, repo_policy: GrantPolicy) -> None:
        decision = PolicyEngine(repo_policy).decide(Role(tag="admin"))
        assert decision.allowed is False
        assert decision.rule_matched == "missing_scope"

    def test_allowed_by_pattern(self, repo_policy: GrantPolicy) -> None:
        decision = PolicyEngine(repo_policy).decide(Role(scope="repo:write"))
        assert decision.allowed is True
        assert decision.scope == "repo:write"
        assert decision.rule_matched == "allow_scopes[repo:*]"

    def test_deny_takes_precedence(self, repo_policy: GrantPolicy) -> None:
        decision = PolicyEngine(repo_policy).decide(Role(scope="repo:delete"))
        assert decision.allowed is False
        assert decision.rule_matched == "deny_scopes[repo:delete]"

    def test_not_in_allowlist(self, repo_policy: GrantPolicy) -> None:
        decision = PolicyEngine(repo_policy).decide(Role(scope="issues:write"))
        assert decision.allowed is False
        assert decision.rule_matched == "allow_scopes"

    def test_case_sensitive(self, repo_policy: GrantPolicy) -> None:
        assert PolicyEngine(repo_policy).decide(Role(scope="REPO:read")).allowed is False

    def test_custom_scope_field(self) -> None:
        policy = GrantPolicy(scope_field="permission", allow_scopes=["billing.*"])
        engine = PolicyEngine(policy)
        assert engine.decide(Role(permission="billing.view")).allowed is True
        assert engine.decide(Role(scope="billing.view")).allowed is False

    def test_mapping_role(self, repo_policy: GrantPolicy) -> None:
        assert PolicyEngine(repo_policy).decide({"scope": "issues:read"}).allowed is True


class TestEvaluate:
    """Tests for PolicyEngine.evaluate."""

    def test_grant(self, repo_policy: GrantPolicy) -> None:
        assert PolicyEngine(repo_policy).evaluate(Role(scope="repo:read")) == Approval.grant()

    def test_denial_uses_role_error(self, repo_policy: GrantPolicy) -> None:
        """The role's own error is the cause when it has one."""
        role = Role(scope="repo:delete", error="deletion is restricted")
        approval = PolicyEngine(repo_policy).evaluate(role)
        assert approval == Approval.deny("deletion is restricted")

    def test_denial_describes_rule(self, repo_policy: GrantPolicy) -> None:
        approval = PolicyEngine(repo_policy).evaluate(Role(scope="admin"))
        assert approval.value is False
        assert isinstance(approval.error, AccessDeniedError)
        assert approval.error.message == "Scope not in allowlist: admin"
        assert approval.error.context["rule"] == "allow_scopes"


class TestAsPrivilege:
    """The engine is usable wherever a Privilege is expected."""

    @pytest.mark.asyncio
    async def test_check_privilege(self, repo_policy: GrantPolicy) -> None:
        privilege = scope_privilege(repo_policy)
        assert (await check_privilege(privilege, Role(scope="repo:read"))).value is True

    @pytest.mark.asyncio
    async def test_require_privilege_raises_rule_error(self, repo_policy: GrantPolicy) -> None:
        privilege = scope_privilege(repo_policy)
        with pytest.raises(AccessDeniedError) as exc_info:
            await require_privilege(privilege, Role(scope="repo:delete"))
        assert exc_info.value.context["rule"] == "deny_scopes[repo:delete]"
