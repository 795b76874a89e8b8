"""Order lifecycle after checkout.

Two operations drive it: payment confirmation by the order owner and status
updates by an admin. Admin updates follow ALLOWED_TRANSITIONS; there is no way
to move an order backwards or out of a terminal status.
"""
from datetime import datetime
import logging

from sqlmodel import Session

from storefront.constants.order_status import ALLOWED_TRANSITIONS, OrderStatus
from storefront.errors import (
    AccessDeniedError,
    InvalidStatusTransitionError,
    OrderAlreadyPaidError,
    ValidationFailedError,
)
from storefront.models.order import Order
from storefront.models.user import User
from storefront.services.order_event_service import (
    PAYMENT_CONFIRMED,
    STATUS_CHANGED,
    log_order_event,
)
from storefront.services.order_service import get_order

logger = logging.getLogger(__name__)


def can_transition(current: str, requested: str) -> bool:
    return requested in ALLOWED_TRANSITIONS.get(current, [])


def confirm_payment(session: Session, order_id: int, user: User, payment_result: dict) -> Order:
    """Mark an order paid with the gateway result reported by its owner.

    The reported result is stored as-is; it is not checked with the gateway.
    """
    order = get_order(session, order_id)

    if order.user_id != user.id:
        raise AccessDeniedError()

    if order.is_paid:
        raise OrderAlreadyPaidError(order.id)

    if order.status == OrderStatus.cancelled.value:
        raise ValidationFailedError("Cannot pay for a cancelled order")

    now = datetime.utcnow()
    previous = order.status

    order.is_paid = True
    order.paid_at = now
    order.payment_result = dict(payment_result)
    # later statuses are kept, e.g. cash on delivery paid at the door
    if order.status == OrderStatus.pending.value:
        order.status = OrderStatus.processing.value
    order.updated_at = now

    session.add(order)
    log_order_event(
        session,
        order.id,
        PAYMENT_CONFIRMED,
        "Payment confirmed",
        created_by=f"user:{user.id}",
        meta={"from": previous, "to": order.status, "paymentId": payment_result.get("id")},
    )
    session.commit()
    session.refresh(order)

    logger.info(f"Order {order.id} marked paid by user {user.id}")
    return order


def update_status(session: Session, order_id: int, new_status: str, admin: User) -> Order:
    order = get_order(session, order_id)
    new_status = OrderStatus(new_status).value
    current = order.status

    if not can_transition(current, new_status):
        raise InvalidStatusTransitionError(current, new_status)

    now = datetime.utcnow()
    order.status = new_status
    if new_status == OrderStatus.delivered.value:
        order.is_delivered = True
        order.delivered_at = now
    order.updated_at = now

    session.add(order)
    log_order_event(
        session,
        order.id,
        STATUS_CHANGED,
        f"Status changed to {new_status}",
        created_by=f"admin:{admin.id}",
        meta={"from": current, "to": new_status},
    )
    session.commit()
    session.refresh(order)

    logger.info(f"Order {order.id} status {current} -> {new_status} by admin {admin.id}")
    return order
