"""Order state machine implementation with transition validation.

This module implements the OrderStateMachine class for managing order
lifecycle transitions. Every transition is checked in the same order:
the actor's role, then the order's current status against the transition
table, then the inputs the transition requires. Nothing on the order is
touched until all checks pass.
"""

from typing import Any, Callable, Dict, List, Optional, Set

from sqlalchemy.orm import Session

from salesflow.core.logging import get_logger
from salesflow.database.base import utc_now
from salesflow.database.models.order import Order, OrderStatusHistory
from salesflow.database.models.user import User, UserRole
from salesflow.services.authorization import Action, can_perform, require_permission
from salesflow.services.errors import InvalidInputError, SalesFlowError
from salesflow.services.orders.enums import (
    OrderStatus,
    get_allowed_order_transitions,
    validate_order_status_transition,
)

logger = get_logger(__name__)

# Every target status is reached through exactly one edge, so the target
# identifies the action being performed.
TRANSITION_ACTIONS: Dict[OrderStatus, Action] = {
    OrderStatus.APPROVED: Action.APPROVE_ORDER,
    OrderStatus.REJECTED: Action.REJECT_ORDER,
    OrderStatus.DISPATCHED: Action.DISPATCH_ORDER,
    OrderStatus.DELIVERED: Action.DELIVER_ORDER,
}


class StateTransitionError(SalesFlowError):
    """Raised when an order is not in the source status of a transition.

    Callers that only offer allowed actions never see this; it signals a
    broken invariant rather than bad user input.
    """

    def __init__(
        self,
        message: str,
        current_state: OrderStatus,
        target_state: OrderStatus,
        **context: Any
    ):
        super().__init__(
            message,
            current_state=current_state.value,
            target_state=target_state.value,
            **context
        )
        self.current_state = current_state
        self.target_state = target_state


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


class OrderStateMachine:
    """State machine for managing order lifecycle transitions.

    Guards list the missing inputs of a transition; side effects stamp the
    lifecycle fields of the stage being entered.
    """

    def __init__(self, db_session: Session):
        """Initialize state machine with database session.

        Args:
            db_session: SQLAlchemy session of the current unit of work
        """
        self.db = db_session
        self._transition_guards: Dict[
            OrderStatus,
            Callable[[Dict[str, Any]], List[str]]
        ] = self._initialize_guards()
        self._side_effects: Dict[
            OrderStatus,
            Callable[[Order, Dict[str, Any]], None]
        ] = self._initialize_side_effects()

    def _initialize_guards(
        self
    ) -> Dict[OrderStatus, Callable[[Dict[str, Any]], List[str]]]:
        return {
            OrderStatus.APPROVED: self._guard_approval,
            OrderStatus.REJECTED: self._guard_rejection,
            OrderStatus.DISPATCHED: self._guard_dispatch,
            OrderStatus.DELIVERED: self._guard_delivery,
        }

    def _initialize_side_effects(
        self
    ) -> Dict[OrderStatus, Callable[[Order, Dict[str, Any]], None]]:
        return {
            OrderStatus.APPROVED: self._effect_approved,
            OrderStatus.REJECTED: self._effect_rejected,
            OrderStatus.DISPATCHED: self._effect_dispatched,
            OrderStatus.DELIVERED: self._effect_delivered,
        }

    def validate_transition(
        self,
        order: Order,
        target_status: OrderStatus,
        actor: User,
        details: Optional[Dict[str, Any]] = None,
    ) -> bool:
        """Validate if transition to target status is allowed.

        Args:
            order: Order to validate
            target_status: Desired target status
            actor: User initiating the transition
            details: Inputs for the transition

        Returns:
            True if transition is valid

        Raises:
            PermissionDeniedError: If the actor's role may not perform it
            StateTransitionError: If the order is not in the source status
            InvalidInputError: If a required input is missing
        """
        self.check_entry(order, target_status, actor)

        missing = self._transition_guards[target_status](details or {})
        if missing:
            raise InvalidInputError(
                f"Cannot move order {order.id} to {target_status.value}: "
                f"missing {', '.join(missing)}",
                order_id=order.id,
                fields=missing,
            )

        return True

    def check_entry(self, order: Order, target_status: OrderStatus, actor: User) -> None:
        """Check the actor's role, then the order's source status.

        Callers that must resolve inputs before the guards run call this
        first, so a lookup failure never masks either error.

        Raises:
            PermissionDeniedError: If the actor's role may not perform it
            StateTransitionError: If the order is not in the source status
        """
        current_status = order.status

        action = TRANSITION_ACTIONS.get(target_status)
        if action is None:
            raise StateTransitionError(
                f"No transition leads to {target_status.value}",
                current_state=current_status,
                target_state=target_status,
            )

        require_permission(actor.role, action, order_id=order.id, user_id=actor.id)

        if not validate_order_status_transition(current_status, target_status):
            allowed = get_allowed_order_transitions(current_status)
            logger.warning(
                "Invariant violation: transition from wrong status",
                order_id=order.id,
                current_status=current_status.value,
                target_status=target_status.value,
            )
            raise StateTransitionError(
                f"Invalid transition from {current_status.value} to "
                f"{target_status.value}",
                current_state=current_status,
                target_state=target_status,
                order_id=order.id,
                allowed_transitions=sorted(s.value for s in allowed),
            )

    def apply_transition(
        self,
        order: Order,
        target_status: OrderStatus,
        actor: User,
        **details: Any
    ) -> Order:
        """Apply state transition to order with side effects.

        Args:
            order: Order to transition
            target_status: Target status
            actor: User initiating the transition
            **details: Inputs required by the transition

        Returns:
            The transitioned order

        Raises:
            PermissionDeniedError, StateTransitionError, InvalidInputError:
                If validation fails; the order is left untouched
        """
        cleaned = {
            key: _clean(value) if isinstance(value, str) or value is None else value
            for key, value in details.items()
        }
        cleaned["actor_name"] = actor.full_name
        self.validate_transition(order, target_status, actor, cleaned)

        old_status = order.status
        order.status = target_status
        self._side_effects[target_status](order, cleaned)
        self._record_status_change(
            order,
            old_status,
            target_status,
            actor,
            cleaned.get("reason") or cleaned.get("comment") or cleaned.get("delivery_notes"),
        )
        self.db.flush()

        logger.info(
            "State transition applied",
            order_id=order.id,
            transition=f"{old_status.value}->{target_status.value}",
            user_id=actor.id,
        )
        return order

    def record_creation(self, order: Order, actor: User) -> None:
        """Open the status history of a newly created pending order."""
        self._record_status_change(order, None, OrderStatus.PENDING, actor, "Order created")

    def get_allowed_transitions(self, order: Order) -> Set[OrderStatus]:
        """Get allowed transitions from current order status."""
        return get_allowed_order_transitions(order.status)

    def allowed_actions(self, order: Order, role: Optional[UserRole]) -> List[Action]:
        """Actions the role may perform on the order in its current status."""
        return sorted(
            (
                TRANSITION_ACTIONS[target]
                for target in self.get_allowed_transitions(order)
                if can_perform(role, TRANSITION_ACTIONS[target])
            ),
            key=lambda action: action.value,
        )

    def _record_status_change(
        self,
        order: Order,
        old_status: Optional[OrderStatus],
        new_status: OrderStatus,
        actor: User,
        reason: Optional[str],
    ) -> None:
        self.db.add(
            OrderStatusHistory(
                order_id=order.id,
                from_status=old_status,
                to_status=new_status,
                changed_by=actor.id,
                changed_by_name=actor.full_name,
                reason=reason,
            )
        )

    # Transition Guards

    @staticmethod
    def _guard_approval(details: Dict[str, Any]) -> List[str]:
        return [] if details.get("approver_name") else ["approver_name"]

    @staticmethod
    def _guard_rejection(details: Dict[str, Any]) -> List[str]:
        return [] if details.get("reason") else ["reason"]

    @staticmethod
    def _guard_dispatch(details: Dict[str, Any]) -> List[str]:
        missing = [
            field
            for field in ("dispatcher_name", "tracking_number")
            if not details.get(field)
        ]
        vehicle = details.get("vehicle")
        if vehicle is None:
            missing.append("vehicle")
        elif not vehicle.is_active:
            missing.append("active vehicle")
        return missing

    @staticmethod
    def _guard_delivery(details: Dict[str, Any]) -> List[str]:
        return [] if details.get("pod_image") else ["pod_image"]

    # Side Effects

    def _effect_approved(self, order: Order, details: Dict[str, Any]) -> None:
        order.approved_by = details["approver_name"]
        order.approved_at = utc_now()
        order.approval_comment = details.get("comment")

    def _effect_rejected(self, order: Order, details: Dict[str, Any]) -> None:
        order.notes = details["reason"]
        order.rejected_by = details["actor_name"]
        order.rejected_at = utc_now()

    def _effect_dispatched(self, order: Order, details: Dict[str, Any]) -> None:
        vehicle = details["vehicle"]
        order.dispatched_by = details["dispatcher_name"]
        order.dispatched_at = utc_now()
        order.tracking_number = details["tracking_number"]
        order.dispatched_vehicle_id = vehicle.id

    def _effect_delivered(self, order: Order, details: Dict[str, Any]) -> None:
        order.delivered_at = utc_now()
        order.pod_image = details["pod_image"]
        order.delivery_notes = details.get("delivery_notes")


def get_order_state_machine(db_session: Session) -> OrderStateMachine:
    """Factory function to create OrderStateMachine instance."""
    return OrderStateMachine(db_session)
