from datetime import datetime
from typing import Optional
import logging

from sqlmodel import Session, select

from storefront.errors import InsufficientStockError, NotFoundError
from storefront.models.cart import Cart, CartItem
from storefront.models.product import Product

logger = logging.getLogger(__name__)


def get_cart(session: Session, user_id: int) -> Optional[Cart]:
    return session.exec(select(Cart).where(Cart.user_id == user_id)).first()


def get_or_create_cart(session: Session, user_id: int) -> Cart:
    cart = get_cart(session, user_id)
    if cart is None:
        cart = Cart(user_id=user_id)
        session.add(cart)
        session.flush()
    return cart


def _active_product(session: Session, product_id: int) -> Product:
    product = session.get(Product, product_id)
    if not product or not product.is_active:
        raise NotFoundError("Product not found")
    return product


def _find_item(cart: Cart, product_id: int) -> Optional[CartItem]:
    for item in cart.items:
        if item.product_id == product_id:
            return item
    return None


def add_item(session: Session, user_id: int, product_id: int, quantity: int = 1) -> Cart:
    product = _active_product(session, product_id)
    cart = get_or_create_cart(session, user_id)

    existing = _find_item(cart, product_id)
    new_quantity = quantity + (existing.quantity if existing else 0)

    if new_quantity > product.stock:
        raise InsufficientStockError(product.name, product.stock, new_quantity)

    if existing:
        existing.quantity = new_quantity
        existing.price = product.price
        session.add(existing)
    else:
        cart.items.append(
            CartItem(product_id=product.id, quantity=quantity, price=product.price)
        )

    cart.updated_at = datetime.utcnow()
    session.add(cart)
    session.commit()
    session.refresh(cart)
    return cart


def update_item(session: Session, user_id: int, product_id: int, quantity: int) -> Cart:
    """Set the quantity of a cart line; zero or less removes it."""
    cart = get_cart(session, user_id)
    item = _find_item(cart, product_id) if cart else None
    if item is None:
        raise NotFoundError("Cart item not found")

    if quantity <= 0:
        cart.items.remove(item)
    else:
        product = _active_product(session, product_id)
        if quantity > product.stock:
            raise InsufficientStockError(product.name, product.stock, quantity)
        item.quantity = quantity
        item.price = product.price
        session.add(item)

    cart.updated_at = datetime.utcnow()
    session.add(cart)
    session.commit()
    session.refresh(cart)
    return cart


def remove_item(session: Session, user_id: int, product_id: int) -> Cart:
    cart = get_cart(session, user_id)
    item = _find_item(cart, product_id) if cart else None
    if item is None:
        raise NotFoundError("Cart item not found")

    cart.items.remove(item)
    cart.updated_at = datetime.utcnow()
    session.add(cart)
    session.commit()
    session.refresh(cart)
    return cart


def clear_cart(session: Session, user_id: int) -> Optional[Cart]:
    """Empty the owner's cart without deleting it. Does not commit.

    Clearing a missing or already-empty cart is a no-op.
    """
    cart = get_cart(session, user_id)
    if cart is None or not cart.items:
        return cart

    cart.items.clear()
    cart.updated_at = datetime.utcnow()
    session.add(cart)
    logger.info(f"Cleared cart for user {user_id}")
    return cart
