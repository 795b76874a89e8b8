from fastapi import APIRouter, Depends
from sqlmodel import Session
from typing import Optional
from storefront.database import get_session
from storefront.models.cart import Cart
from storefront.models.product import Product
from storefront.models.user import User
from storefront.schemas.cart_schemas import CartAddRequest, CartUpdateRequest
from storefront.services import cart_service
from storefront.utils.responses import success
from storefront.utils.token import get_current_user  # JWT dependency


router = APIRouter()


def cart_to_dict(session: Session, cart: Optional[Cart]) -> dict:
    items = []
    total_amount = 0.0
    total_items = 0

    for item in (cart.items if cart else []):
        product = session.get(Product, item.product_id)
        items.append({
            "product": {
                "id": product.id,
                "name": product.name,
                "images": product.images or [],
                "price": product.price,
                "stock": product.stock,
            },
            "quantity": item.quantity,
            "price": item.price,
        })
        total_amount += item.price * item.quantity
        total_items += item.quantity

    return {
        "items": items,
        "totalAmount": round(total_amount, 2),
        "totalItems": total_items,
    }


# View Cart

@router.get("")
def get_cart(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    cart = cart_service.get_cart(session, current_user.id)
    return success(cart_to_dict(session, cart))


# Add to Cart

@router.post("/add")
def add_to_cart(
    data: CartAddRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    cart = cart_service.add_item(session, current_user.id, data.product_id, data.quantity)
    return success(cart_to_dict(session, cart), message="Item added to cart")


# Update Cart

@router.put("/update/{product_id}")
def update_cart_item(
    product_id: int,
    data: CartUpdateRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    cart = cart_service.update_item(session, current_user.id, product_id, data.quantity)
    return success(cart_to_dict(session, cart), message="Cart updated")


# Remove Cart

@router.delete("/remove/{product_id}")
def remove_item(
    product_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    cart = cart_service.remove_item(session, current_user.id, product_id)
    return success(cart_to_dict(session, cart), message="Item removed from cart")


# Clear Cart

@router.delete("/clear")
def clear_cart_endpoint(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    cart = cart_service.clear_cart(session, current_user.id)
    session.commit()
    return success(cart_to_dict(session, cart), message="Cart cleared")
