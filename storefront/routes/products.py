from datetime import datetime
from enum import Enum
from fastapi import APIRouter, Depends, status
from sqlmodel import Session, select
import logging

from storefront.database import get_session
from storefront.dependencies.admin import require_staff
from storefront.errors import NotFoundError
from storefront.models.product import Product
from storefront.models.user import User
from storefront.schemas.product_schemas import ProductCreate, ProductUpdate
from storefront.utils.pagination import paginate
from storefront.utils.responses import success

logger = logging.getLogger(__name__)

router = APIRouter()


class ProductSort(str, Enum):
    newest = "newest"
    price_asc = "price_asc"
    price_desc = "price_desc"
    name = "name"


SORT_COLUMNS = {
    ProductSort.newest: (Product.created_at.desc(), Product.id.desc()),
    ProductSort.price_asc: (Product.price.asc(), Product.id.asc()),
    ProductSort.price_desc: (Product.price.desc(), Product.id.asc()),
    ProductSort.name: (Product.name.asc(), Product.id.asc()),
}


def product_to_dict(product: Product) -> dict:
    return {
        "id": product.id,
        "name": product.name,
        "description": product.description,
        "price": product.price,
        "category": product.category,
        "brand": product.brand,
        "images": product.images or [],
        "stock": product.stock,
        "inStock": product.in_stock,
        "isActive": product.is_active,
        "createdAt": product.created_at,
        "updatedAt": product.updated_at,
    }


def get_active_product(session: Session, product_id: int) -> Product:
    product = session.get(Product, product_id)
    if not product or not product.is_active:
        raise NotFoundError("Product not found")
    return product


# -------- PUBLIC --------

@router.get("")
def list_products(
    page: int = 1,
    limit: int = 12,
    search: str | None = None,
    category: str | None = None,
    sort: ProductSort = ProductSort.newest,
    session: Session = Depends(get_session),
):
    query = select(Product).where(Product.is_active == True)  # noqa: E712

    if search:
        like = f"%{search}%"
        query = query.where(
            Product.name.ilike(like) | Product.description.ilike(like)
        )

    if category:
        query = query.where(Product.category == category)

    query = query.order_by(*SORT_COLUMNS[sort])

    data = paginate(session=session, query=query, page=page, limit=limit)

    return success({
        "products": [product_to_dict(p) for p in data["results"]],
        "totalPages": data["total_pages"],
        "currentPage": data["current_page"],
        "total": data["total"],
    })


@router.get("/categories")
def list_categories(session: Session = Depends(get_session)):
    categories = session.exec(
        select(Product.category)
        .where(Product.is_active == True)  # noqa: E712
        .distinct()
        .order_by(Product.category)
    ).all()
    return success(list(categories))


@router.get("/{product_id}")
def get_product(product_id: int, session: Session = Depends(get_session)):
    return success(product_to_dict(get_active_product(session, product_id)))


# -------- ADMIN / EDITOR --------

@router.post("", status_code=status.HTTP_201_CREATED)
def create_product(
    data: ProductCreate,
    session: Session = Depends(get_session),
    staff: User = Depends(require_staff),
):
    product = Product(
        name=data.name,
        description=data.description,
        price=data.price,
        category=data.category,
        brand=data.brand,
        images=[image.model_dump() for image in data.images],
        stock=data.stock,
    )
    session.add(product)
    session.commit()
    session.refresh(product)

    logger.info(f"Product {product.id} created by {staff.role} {staff.id}")
    return success(product_to_dict(product), message="Product created")


@router.put("/{product_id}")
def update_product(
    product_id: int,
    data: ProductUpdate,
    session: Session = Depends(get_session),
    staff: User = Depends(require_staff),
):
    product = session.get(Product, product_id)
    if not product:
        raise NotFoundError("Product not found")

    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    for field, value in changes.items():
        setattr(product, field, value)
    product.updated_at = datetime.utcnow()

    session.add(product)
    session.commit()
    session.refresh(product)

    logger.info(f"Product {product.id} updated by {staff.role} {staff.id}: {sorted(changes)}")
    return success(product_to_dict(product), message="Product updated")


@router.delete("/{product_id}")
def delete_product(
    product_id: int,
    session: Session = Depends(get_session),
    staff: User = Depends(require_staff),
):
    """Soft delete: past orders keep referencing the product."""
    product = get_active_product(session, product_id)

    product.is_active = False
    product.updated_at = datetime.utcnow()
    session.add(product)
    session.commit()

    logger.info(f"Product {product.id} deactivated by {staff.role} {staff.id}")
    return success(message="Product deleted")
