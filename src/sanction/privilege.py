"""
Privilege layer for sanction.

A Privilege answers "does the ambient policy accept this role?". It is a
rule whose terminal results are Approvals and whose callables receive the
role being checked:

    async def admin_only(role):
        return Approval(value=role.tag == "admin", error=role.error)

Entry points:
    check_privilege     the aggregate Approval
    require_privilege   the role, or raises on denial
    is_privileged       the aggregate as a bool

Combinators every(), some() and cached() build new privileges.
"""

from collections.abc import Awaitable, Callable, Sequence
from typing import Any, TypeVar

from sanction.errors import denial_exception
from sanction.logging import get_logger
from sanction.rules import Resolver, RuleVariant
from sanction.schema import Approval, role_error

logger = get_logger(__name__)

R = TypeVar("R")

PrivilegeFunction = Callable[[Any], Any]
Privilege = (
    Approval
    | Awaitable[Any]
    | Sequence[Any]
    | PrivilegeFunction
    | RuleVariant
)

privilege_resolver: Resolver[Approval] = Resolver("privilege", Approval)


async def resolve_privilege(privilege: Privilege, role: Any) -> list[Approval]:
    """
    Evaluate a privilege into its Approvals.

    Args:
        privilege: The privilege to evaluate
        role: The role passed to privilege functions

    Returns:
        The Approvals in rule order
    """
    return await privilege_resolver.resolve(privilege, role)


async def check_privilege(privilege: Privilege, role: Any) -> Approval:
    """
    Check a privilege against a role.

    No Approval at all is a denial carrying the role's error. Otherwise the
    first denying Approval is returned, or the first Approval if none deny.
    """
    approvals = await resolve_privilege(privilege, role)

    if not approvals:
        logger.debug("privilege_unanswered")
        return Approval.deny(role_error(role))

    for approval in approvals:
        if not approval.value:
            logger.debug("privilege_denied", error=repr(approval.error))
            return approval

    return approvals[0]


async def require_privilege(privilege: Privilege, role: R) -> R:
    """
    Check a privilege and raise the denial cause if it fails.

    Returns:
        The role, unchanged

    Raises:
        AccessDeniedError: If denied with a non-exception cause
        BaseException: The denial cause itself, if it is an exception
    """
    approval = await check_privilege(privilege, role)

    if not approval.value:
        raise denial_exception(approval.error)

    return role


async def is_privileged(privilege: Privilege, role: Any) -> bool:
    """Return True if the privilege approves the role."""
    approval = await check_privilege(privilege, role)
    return approval.value


# =============================================================================
# Combinators
# =============================================================================


def every(*privileges: Privilege) -> PrivilegeFunction:
    """
    Return a privilege that requires all the given privileges.

    Privileges are evaluated in order and evaluation stops at the first
    denial. An empty argument list always grants. A privilege that yields
    no Approval denies with the role's error.
    """

    async def check_every(role: Any) -> Approval:
        for privilege in privileges:
            approvals = await resolve_privilege(privilege, role)

            if not approvals:
                return Approval.deny(role_error(role))

            for approval in approvals:
                if not approval.value:
                    return approval

        return Approval.grant()

    return check_every


def some(*privileges: Privilege) -> PrivilegeFunction:
    """
    Return a privilege that requires any of the given privileges.

    Privileges are evaluated in order and evaluation stops at the first
    granting Approval. An empty argument list always denies.
    """

    async def check_some(role: Any) -> Approval:
        for privilege in privileges:
            approvals = await resolve_privilege(privilege, role)

            for approval in approvals:
                if approval.value:
                    return approval

        return Approval.deny(role_error(role))

    return check_some


def cached(privilege: Privilege) -> PrivilegeFunction:
    """
    Return a privilege that remembers its decision for each role instance.

    Roles are matched by identity: two equal but distinct roles are checked
    separately. Entries are never evicted, and concurrent first checks of
    the same role may both evaluate the wrapped privilege.
    """
    # id(role) -> (role, approval); holding the role keeps its id unique
    table: dict[int, tuple[Any, Approval]] = {}

    async def check_cached(role: Any) -> Approval:
        entry = table.get(id(role))
        if entry is not None:
            logger.debug("privilege_cache_hit")
            return entry[1]

        approval = await check_privilege(privilege, role)
        table[id(role)] = (role, approval)
        return approval

    return check_cached
