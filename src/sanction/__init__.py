"""
sanction - Composable authorization decisions.

sanction builds access checks from three kinds of rules:
- Privilege: does the ambient policy accept this role?
- Permit: which roles does this target call for?
- Permission: is this target allowed under the ambient privilege?

Each rule is an Approval (or Role), an awaitable, a list of rules, or a
function producing any of these. Rules resolve to flat lists of Approvals,
and the combinators in the privilege, permit and permission modules
(every, some, map, cached, create) build new rules.

Example usage:
    from sanction import Approval, Role, privilege, require_privilege

    admin = lambda role: Approval(value=role.tag == "admin", error=role.error)
    owner = lambda role: Approval(value=role.tag == "owner", error=role.error)
    await require_privilege(privilege.some(admin, owner), Role(tag="guest"))
"""

__version__ = "0.1.0"
__author__ = "sanction Contributors"

from sanction import permission, permit, privilege
from sanction.errors import (
    AccessDeniedError,
    InvalidRuleTypeError,
    PolicyLoadError,
    SanctionError,
)
from sanction.permission import (
    check_permission,
    is_permissioned,
    require_permission,
    resolve_permission,
)
from sanction.permit import check_permit, is_permitted, require_permit, resolve_permit
from sanction.privilege import (
    check_privilege,
    is_privileged,
    require_privilege,
    resolve_privilege,
)
from sanction.rules import call, deferred, sequence, terminal
from sanction.schema import Approval, GrantPolicy, Role

__all__ = [
    "__version__",
    "__author__",
    "permission",
    "permit",
    "privilege",
    "call",
    "deferred",
    "sequence",
    "terminal",
    "AccessDeniedError",
    "Approval",
    "GrantPolicy",
    "InvalidRuleTypeError",
    "PolicyLoadError",
    "Role",
    "SanctionError",
    "check_permission",
    "check_permit",
    "check_privilege",
    "is_permissioned",
    "is_permitted",
    "is_privileged",
    "require_permission",
    "require_permit",
    "require_privilege",
    "resolve_permission",
    "resolve_permit",
    "resolve_privilege",
]
