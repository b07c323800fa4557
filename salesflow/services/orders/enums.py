"""Order status enum and state transition table.

This module defines the closed set of order statuses together with the
transition graph every status change is validated against.
"""

from enum import Enum
from typing import Dict, Set


class OrderStatus(str, Enum):
    """Order lifecycle status.

    Valid transitions:
    - PENDING -> APPROVED, REJECTED
    - APPROVED -> DISPATCHED
    - DISPATCHED -> DELIVERED
    - REJECTED -> (terminal state)
    - DELIVERED -> (terminal state)
    """

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    DISPATCHED = "dispatched"
    DELIVERED = "delivered"

    def is_terminal(self) -> bool:
        """Check if status is a terminal state (DELIVERED, REJECTED)."""
        return not ORDER_STATUS_TRANSITIONS[self]


ORDER_STATUS_TRANSITIONS: Dict[OrderStatus, Set[OrderStatus]] = {
    OrderStatus.PENDING: {
        OrderStatus.APPROVED,
        OrderStatus.REJECTED,
    },
    OrderStatus.APPROVED: {
        OrderStatus.DISPATCHED,
    },
    OrderStatus.DISPATCHED: {
        OrderStatus.DELIVERED,
    },
    OrderStatus.REJECTED: set(),  # Terminal
    OrderStatus.DELIVERED: set(),  # Terminal
}


def validate_order_status_transition(
    current: OrderStatus,
    new: OrderStatus
) -> bool:
    """Validate if order status transition is allowed."""
    return new in ORDER_STATUS_TRANSITIONS.get(current, set())


def get_allowed_order_transitions(
    current: OrderStatus
) -> Set[OrderStatus]:
    """Get all allowed transitions from current order status."""
    return ORDER_STATUS_TRANSITIONS.get(current, set()).copy()
