from typing import Dict
import logging

from sqlmodel import Session, select

from storefront.constants.order_status import PaymentMethod
from storefront.constants.roles import ADMIN
from storefront.errors import (
    AccessDeniedError,
    NotFoundError,
    PriceMismatchError,
    StorefrontError,
    ValidationFailedError,
)
from storefront.models.order import Order
from storefront.models.order_item import OrderItem
from storefront.models.product import Product
from storefront.models.user import User
from storefront.schemas.order_schemas import OrderCreate
from storefront.services.cart_service import clear_cart
from storefront.services.inventory_service import reduce_stock, verify_stock
from storefront.services.order_event_service import ORDER_PLACED, log_order_event
from storefront.services.pricing import PriceBreakdown, calculate_prices, find_mismatch
from storefront.utils.pagination import paginate

logger = logging.getLogger(__name__)


def reconcile_prices(payload: OrderCreate, products: Dict[int, Product]) -> PriceBreakdown:
    """Recompute totals from catalog prices and reject submitted totals that disagree."""
    canonical = calculate_prices(
        (products[item.product].price, item.quantity) for item in payload.order_items
    )
    submitted = PriceBreakdown(
        items_price=payload.items_price,
        tax_price=payload.tax_price,
        shipping_price=payload.shipping_price,
        total_price=payload.total_price,
    )

    mismatch = find_mismatch(submitted, canonical)
    if mismatch:
        raise PriceMismatchError(*mismatch)

    return canonical


def write_order(
    session: Session,
    user_id: int,
    payload: OrderCreate,
    products: Dict[int, Product],
    prices: PriceBreakdown,
) -> Order:
    """Persist the order and its line item snapshots. Flushes, does not commit."""
    if not payload.order_items:
        raise ValidationFailedError("No order items")
    if payload.payment_method not in list(PaymentMethod):
        raise ValidationFailedError("Invalid payment method")

    order = Order(
        user_id=user_id,
        shipping_address=payload.shipping_address.model_dump(by_alias=True),
        payment_method=payload.payment_method.value,
        items_price=prices.items_price,
        tax_price=prices.tax_price,
        shipping_price=prices.shipping_price,
        total_price=prices.total_price,
        notes=payload.notes,
    )
    session.add(order)
    session.flush()

    for item in payload.order_items:
        product = products[item.product]
        session.add(
            OrderItem(
                order_id=order.id,
                product_id=product.id,
                name=product.name,
                image=product.primary_image,
                price=product.price,
                quantity=item.quantity,
            )
        )

    log_order_event(
        session,
        order.id,
        ORDER_PLACED,
        "Order placed",
        created_by=f"user:{user_id}",
        meta={
            "trackingNumber": order.tracking_number,
            "totalPrice": order.total_price,
        },
    )
    session.flush()
    return order


def place_order(session: Session, user: User, payload: OrderCreate) -> Order:
    """Checkout: verify stock, reconcile prices, decrement, write, clear cart.

    Runs in a single transaction; any failure rolls everything back.
    """
    try:
        products = verify_stock(session, payload.order_items)
        prices = reconcile_prices(payload, products)
        reduce_stock(session, payload.order_items)
        order = write_order(session, user.id, payload, products, prices)
        clear_cart(session, user.id)
        session.commit()
    except StorefrontError as e:
        session.rollback()
        logger.warning(f"Checkout rejected for user {user.id}: {e.message}")
        raise
    except Exception as e:
        session.rollback()
        logger.error(f"Checkout failed for user {user.id}: {e}")
        raise

    session.refresh(order)
    logger.info(
        f"Order {order.id} ({order.tracking_number}) placed by user {user.id}, "
        f"total {order.total_price}"
    )
    return order


def get_order(session: Session, order_id: int) -> Order:
    order = session.get(Order, order_id)
    if not order:
        raise NotFoundError("Order not found")
    return order


def get_order_for_user(session: Session, order_id: int, user: User) -> Order:
    """Owners see their own orders, admins see all."""
    order = get_order(session, order_id)
    if user.role != ADMIN and order.user_id != user.id:
        raise AccessDeniedError()
    return order


def list_user_orders(session: Session, user_id: int, page: int = 1, limit: int = 10):
    query = (
        select(Order)
        .where(Order.user_id == user_id)
        .order_by(Order.created_at.desc(), Order.id.desc())
    )
    return paginate(session=session, query=query, page=page, limit=limit)


def list_all_orders(session: Session, page: int = 1, limit: int = 20):
    query = select(Order).order_by(Order.created_at.desc(), Order.id.desc())
    return paginate(session=session, query=query, page=page, limit=limit)
