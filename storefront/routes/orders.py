from fastapi import APIRouter, Depends, status
from sqlmodel import Session
from storefront.database import get_session
from storefront.dependencies.admin import require_admin
from storefront.models.order import Order
from storefront.models.user import User
from storefront.schemas.order_schemas import OrderCreate, OrderStatusUpdate, PaymentResultIn
from storefront.services import order_service, order_status
from storefront.services.order_event_service import list_order_events
from storefront.utils.responses import success
from storefront.utils.token import get_current_user

router = APIRouter()


def order_to_dict(order: Order, include_user: bool = False) -> dict:
    data = {
        "id": order.id,
        "trackingNumber": order.tracking_number,
        "user": order.user_id,
        "orderItems": [
            {
                "product": i.product_id,
                "name": i.name,
                "image": i.image,
                "price": i.price,
                "quantity": i.quantity,
            }
            for i in order.items
        ],
        "shippingAddress": order.shipping_address,
        "paymentMethod": order.payment_method,
        "paymentResult": order.payment_result,
        "itemsPrice": order.items_price,
        "taxPrice": order.tax_price,
        "shippingPrice": order.shipping_price,
        "totalPrice": order.total_price,
        "isPaid": order.is_paid,
        "paidAt": order.paid_at,
        "isDelivered": order.is_delivered,
        "deliveredAt": order.delivered_at,
        "status": order.status,
        "notes": order.notes,
        "createdAt": order.created_at,
        "updatedAt": order.updated_at,
    }

    if include_user and order.user:
        data["user"] = {
            "id": order.user.id,
            "username": order.user.username,
            "email": order.user.email,
        }

    return data


def page_to_dict(data: dict, include_user: bool = False) -> dict:
    return {
        "orders": [order_to_dict(o, include_user=include_user) for o in data["results"]],
        "totalPages": data["total_pages"],
        "currentPage": data["current_page"],
        "total": data["total"],
    }


# Checkout

@router.post("", status_code=status.HTTP_201_CREATED)
def create_order(
    payload: OrderCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    order = order_service.place_order(session, current_user, payload)
    return success(order_to_dict(order), message="Order created successfully")


# My Orders

@router.get("")
def my_orders(
    page: int = 1,
    limit: int = 10,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    data = order_service.list_user_orders(session, current_user.id, page=page, limit=limit)
    return success(page_to_dict(data))


# -------- ADMIN ORDERS --------

@router.get("/admin/all")
def all_orders(
    page: int = 1,
    limit: int = 20,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin)
):
    data = order_service.list_all_orders(session, page=page, limit=limit)
    return success(page_to_dict(data, include_user=True))


@router.get("/{order_id}")
def get_order(
    order_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    order = order_service.get_order_for_user(session, order_id, current_user)
    return success(order_to_dict(order, include_user=True))


@router.get("/{order_id}/timeline")
def order_timeline(
    order_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    order = order_service.get_order_for_user(session, order_id, current_user)
    events = list_order_events(session, order.id)
    return success([
        {
            "type": e.event_type,
            "label": e.label,
            "meta": e.meta,
            "createdBy": e.created_by,
            "createdAt": e.created_at,
        }
        for e in events
    ])


@router.put("/{order_id}/pay")
def pay_order(
    order_id: int,
    payload: PaymentResultIn,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    order = order_status.confirm_payment(session, order_id, current_user, payload.to_record())
    return success(order_to_dict(order), message="Order updated to paid")


@router.put("/{order_id}/status")
def update_order_status(
    order_id: int,
    payload: OrderStatusUpdate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin)
):
    order = order_status.update_status(session, order_id, payload.status.value, admin)
    return success(order_to_dict(order), message="Order status updated")
