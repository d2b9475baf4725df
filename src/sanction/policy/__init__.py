"""
Grant policy module for sanction.

This module turns declarative, YAML-loaded scope rules into a Privilege.

Key concepts:
    - Deny-by-default: Every scope is denied unless explicitly allowed
    - ScopeDecision: The result of evaluating a role (ALLOW/DENY + reason)
    - PolicyEngine: A callable Privilege that checks roles against the rules
"""

from sanction.policy.engine import PolicyEngine, scope_privilege

__all__ = [
    "PolicyEngine",
    "scope_privilege",
]
