from collections import OrderedDict
from datetime import datetime
from typing import Dict, Iterable
import logging

from sqlalchemy import update
from sqlmodel import Session

from storefront.errors import InsufficientStockError, NotFoundError
from storefront.models.product import Product

logger = logging.getLogger(__name__)


def requested_quantities(items: Iterable) -> "OrderedDict[int, int]":
    """Sum quantities per product id, keeping first-seen order."""
    totals: "OrderedDict[int, int]" = OrderedDict()
    for item in items:
        totals[item.product] = totals.get(item.product, 0) + item.quantity
    return totals


def verify_stock(session: Session, items: list) -> Dict[int, Product]:
    """Check every line item against current stock. Read-only; reserves nothing."""
    requested = requested_quantities(items)
    products: Dict[int, Product] = {}

    for item in items:
        if item.product in products:
            continue

        product = session.get(Product, item.product)
        if not product or not product.is_active:
            raise NotFoundError(f"Product {item.name or item.product} not found")

        if product.stock < requested[item.product]:
            raise InsufficientStockError(
                product.name, product.stock, requested[item.product]
            )

        products[item.product] = product

    return products


def reduce_stock(session: Session, items: list) -> None:
    """Conditionally decrement stock for each product.

    Each UPDATE only matches while stock covers the quantity, so stock never
    goes negative. Raises InsufficientStockError on the first miss; the caller
    owns the transaction and must roll back the decrements already applied.
    """
    for product_id, quantity in requested_quantities(items).items():
        result = session.exec(
            update(Product)
            .where(Product.id == product_id, Product.stock >= quantity)
            .values(stock=Product.stock - quantity, updated_at=datetime.utcnow())
        )

        if result.rowcount == 0:
            product = session.get(Product, product_id)
            name = product.name if product else f"#{product_id}"
            logger.warning(f"Stock decrement refused for product {product_id} (qty {quantity})")
            raise InsufficientStockError(name, product.stock if product else None, quantity)

        logger.info(f"Reduced stock of product {product_id} by {quantity}")
