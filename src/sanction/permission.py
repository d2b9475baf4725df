"""
Permission layer for sanction.

A Permission is the top-level decision: given the ambient Privilege and a
target, it resolves to Approvals. Permission functions receive both:

    async def can_edit(privilege, document):
        if document.locked:
            return Approval.deny("document is locked")
        return await check_permit(document_permit, privilege, document)

create() lifts a Permit into a Permission, so most permissions are
written in terms of the roles a target calls for.
"""

from collections.abc import Awaitable, Callable, Sequence
from typing import Any, TypeVar

from sanction.errors import denial_exception
from sanction.logging import get_logger
from sanction.permit import Permit, check_permit
from sanction.privilege import Privilege
from sanction.rules import Resolver, RuleVariant, maybe_await
from sanction.schema import Approval

logger = get_logger(__name__)

T = TypeVar("T")

PermissionFunction = Callable[[Any, Any], Any]
Permission = (
    Approval
    | Awaitable[Any]
    | Sequence[Any]
    | PermissionFunction
    | RuleVariant
)

permission_resolver: Resolver[Approval] = Resolver("permission", Approval)


async def resolve_permission(
    permission: Permission,
    privilege: Privilege,
    target: Any,
) -> list[Approval]:
    """
    Evaluate a permission into its Approvals.

    Args:
        permission: The permission to evaluate
        privilege: The ambient privilege
        target: The target to evaluate the permission for

    Returns:
        The Approvals in rule order
    """
    return await permission_resolver.resolve(permission, privilege, target)


async def check_permission(
    permission: Permission,
    privilege: Privilege,
    target: Any,
) -> Approval:
    """
    Check a permission for a target under a privilege.

    No Approval at all denies without a cause. Otherwise the first denying
    Approval is returned, or the first Approval if none deny.
    """
    approvals = await resolve_permission(permission, privilege, target)

    if not approvals:
        logger.debug("permission_unanswered")
        return Approval.deny()

    for approval in approvals:
        if not approval.value:
            logger.debug("permission_denied", error=repr(approval.error))
            return approval

    return approvals[0]


async def require_permission(
    permission: Permission,
    privilege: Privilege,
    target: T,
) -> T:
    """
    Check a permission and raise the denial cause if it fails.

    Returns:
        The target, unchanged
    """
    approval = await check_permission(permission, privilege, target)

    if not approval.value:
        raise denial_exception(approval.error)

    return target


async def is_permissioned(
    permission: Permission,
    privilege: Privilege,
    target: Any,
) -> bool:
    """Return True if the privilege is granted the permission for the target."""
    approval = await check_permission(permission, privilege, target)
    return approval.value


# =============================================================================
# Combinators
# =============================================================================


def every(*permissions: Permission) -> PermissionFunction:
    """
    Return a permission that requires all the given permissions.

    Evaluation is sequential and stops at the first denial. An empty
    argument list always grants; a permission with no Approval denies.
    """

    async def check_every(privilege: Privilege, target: Any) -> Approval:
        for permission in permissions:
            approvals = await resolve_permission(permission, privilege, target)

            if not approvals:
                return Approval.deny()

            for approval in approvals:
                if not approval.value:
                    return approval

        return Approval.grant()

    return check_every


def some(*permissions: Permission) -> PermissionFunction:
    """
    Return a permission that requires any of the given permissions.

    Evaluation is sequential and stops at the first granting Approval. An
    empty argument list always denies.
    """

    async def check_some(privilege: Privilege, target: Any) -> Approval:
        for permission in permissions:
            approvals = await resolve_permission(permission, privilege, target)

            for approval in approvals:
                if approval.value:
                    return approval

        return Approval.deny()

    return check_some


def map(permission: Permission, mapper: Callable[[Any], Any]) -> PermissionFunction:
    """Return a permission over a target type adapted by mapper (sync or async)."""

    async def mapped(privilege: Privilege, target: Any) -> list[Approval]:
        return await resolve_permission(
            permission,
            privilege,
            await maybe_await(mapper(target)),
        )

    return mapped


def create(permit: Permit) -> PermissionFunction:
    """Return a permission that checks the given permit."""

    def permitted(privilege: Privilege, target: Any) -> Awaitable[Approval]:
        return check_permit(permit, privilege, target)

    return permitted
