"""
Permit layer for sanction.

A Permit answers "which roles does this target call for?". It is a rule
whose terminal results are roles and whose callables receive the target.
A role is any caller object (a Role, a mapping, a dataclass); it is passed
to the Privilege exactly as given, never copied or validated:

    def repo_permit(repo):
        return [Role(scope="repo:read"), Role(scope=f"repo:{repo.name}")]

Checking a permit resolves its roles and checks each one, in order,
against the ambient Privilege. The first role that is denied decides.
"""

from collections.abc import Awaitable, Callable, Sequence
from typing import Any, TypeVar

from sanction.errors import denial_exception
from sanction.logging import get_logger
from sanction.privilege import Privilege, resolve_privilege
from sanction.rules import Resolver, RuleVariant, maybe_await
from sanction.schema import Approval, Role, role_error

logger = get_logger(__name__)

T = TypeVar("T")

PermitFunction = Callable[[Any], Any]
Permit = (
    Role
    | Awaitable[Any]
    | Sequence[Any]
    | PermitFunction
    | RuleVariant
)

permit_resolver: Resolver[Any] = Resolver("permit", Role, passthrough=True)


async def resolve_permit(permit: Permit, target: Any) -> list[Any]:
    """
    Evaluate a permit into the roles to check.

    Args:
        permit: The permit to evaluate
        target: The target passed to permit functions

    Returns:
        The roles in rule order, as supplied
    """
    return await permit_resolver.resolve(permit, target)


async def check_permit(permit: Permit, privilege: Privilege, target: Any) -> Approval:
    """
    Check a permit for a target under a privilege.

    Roles are checked one by one. A role the privilege doesn't answer
    denies with the role's error; the first denying Approval is returned
    as-is. A permit without roles denies.
    """
    roles = await resolve_permit(permit, target)

    if not roles:
        logger.debug("permit_without_roles")
        return Approval.deny()

    for role in roles:
        approvals = await resolve_privilege(privilege, role)

        if not approvals:
            logger.debug("permit_role_unanswered")
            return Approval.deny(role_error(role))

        for approval in approvals:
            if not approval.value:
                logger.debug("permit_denied", error=repr(approval.error))
                return approval

    return Approval.grant()


async def require_permit(permit: Permit, privilege: Privilege, target: T) -> T:
    """
    Check a permit and raise the denial cause if it fails.

    Returns:
        The target, unchanged
    """
    approval = await check_permit(permit, privilege, target)

    if not approval.value:
        raise denial_exception(approval.error)

    return target


async def is_permitted(permit: Permit, privilege: Privilege, target: Any) -> bool:
    """Return True if the privilege is permitted the permit for the target."""
    approval = await check_permit(permit, privilege, target)
    return approval.value


# =============================================================================
# Combinators
# =============================================================================


def map(permit: Permit, mapper: Callable[[Any], Any]) -> PermitFunction:
    """
    Return a permit over a different target type.

    The new permit passes its target through mapper (sync or async) and
    resolves the original permit against the result.
    """

    async def mapped(target: Any) -> list[Any]:
        return await resolve_permit(permit, await maybe_await(mapper(target)))

    return mapped
