"""
Role-based authorization.

Permissions are coarse role membership: an action names the roles allowed to
perform it, and Admin and Management are allowed everything. There are no
resource-scoped rules. The checks perform no I/O.
"""

from enum import Enum
from typing import Dict, FrozenSet, Iterable, Optional, Union

from salesflow.core.logging import get_logger
from salesflow.database.models.user import UserRole
from salesflow.services.errors import PermissionDeniedError

logger = get_logger(__name__)

RoleLike = Union[UserRole, str]

SUPERUSER_ROLES: FrozenSet[UserRole] = frozenset({UserRole.ADMIN, UserRole.MANAGEMENT})


class Action(str, Enum):
    """Mutating operations gated by role."""

    CREATE_ORDER = "create_order"
    APPROVE_ORDER = "approve_order"
    REJECT_ORDER = "reject_order"
    DISPATCH_ORDER = "dispatch_order"
    DELIVER_ORDER = "deliver_order"
    MANAGE_CUSTOMERS = "manage_customers"
    MANAGE_PRODUCTS = "manage_products"
    MANAGE_VEHICLES = "manage_vehicles"
    MANAGE_USERS = "manage_users"


ACTION_ROLES: Dict[Action, FrozenSet[UserRole]] = {
    Action.CREATE_ORDER: frozenset({UserRole.ADMIN, UserRole.MANAGER, UserRole.SALES}),
    Action.APPROVE_ORDER: frozenset({UserRole.ADMIN, UserRole.MANAGER}),
    Action.REJECT_ORDER: frozenset({UserRole.ADMIN, UserRole.MANAGER}),
    Action.DISPATCH_ORDER: frozenset({UserRole.ADMIN, UserRole.MANAGER, UserRole.INVENTORY}),
    Action.DELIVER_ORDER: frozenset({UserRole.ADMIN, UserRole.MANAGER, UserRole.INVENTORY}),
    Action.MANAGE_CUSTOMERS: frozenset({UserRole.ADMIN, UserRole.MANAGEMENT, UserRole.MANAGER}),
    Action.MANAGE_PRODUCTS: frozenset({UserRole.ADMIN, UserRole.MANAGER, UserRole.INVENTORY}),
    Action.MANAGE_VEHICLES: frozenset({UserRole.ADMIN, UserRole.MANAGEMENT, UserRole.MANAGER}),
    Action.MANAGE_USERS: frozenset({UserRole.ADMIN}),
}


def _coerce_role(role: Optional[RoleLike]) -> Optional[UserRole]:
    if role is None or isinstance(role, UserRole):
        return role
    try:
        return UserRole.from_string(role)
    except ValueError:
        return None


def has_permission(role: Optional[RoleLike], required_roles: Iterable[RoleLike]) -> bool:
    """
    Decide whether a role may perform an action requiring ``required_roles``.

    Admin and Management are always permitted, whatever the required set.
    Any other role is permitted only if it appears in the required set. A
    missing or unknown role is never permitted.

    Example:
        >>> has_permission(UserRole.MANAGEMENT, [])
        True
        >>> has_permission("Sales", ["Admin", "Manager"])
        False
    """
    actor_role = _coerce_role(role)
    if actor_role is None:
        return False
    if actor_role in SUPERUSER_ROLES:
        return True
    return actor_role in {_coerce_role(r) for r in required_roles}


def can_perform(role: Optional[RoleLike], action: Action) -> bool:
    """Check a role against the roles registered for an action."""
    return has_permission(role, ACTION_ROLES[action])


def require_permission(role: Optional[RoleLike], action: Action, **context) -> None:
    """
    Enforce that a role may perform an action.

    Raises:
        PermissionDeniedError: If the role is not permitted
    """
    if can_perform(role, action):
        return

    role_value = role.value if isinstance(role, UserRole) else role
    logger.warning(
        "Access denied: Insufficient permissions",
        role=role_value,
        action=action.value,
        **context,
    )
    raise PermissionDeniedError(
        f"Role {role_value!r} may not perform {action.value}",
        role=role_value,
        action=action.value,
        required_roles=sorted(r.value for r in ACTION_ROLES[action]),
    )
