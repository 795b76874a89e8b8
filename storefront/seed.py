"""Create demo accounts and a few catalog products.

    python -m storefront.seed

Existing users (matched by email) and products (matched by name) are left
as they are, so the script can be run repeatedly.
"""
import logging

from sqlmodel import Session, select

from storefront.config import settings
from storefront.constants.roles import ADMIN, EDITOR, USER
from storefront.database import create_db_and_tables, engine
from storefront.models.product import Product
from storefront.models.user import User
from storefront.utils.hash import hash_password

logger = logging.getLogger(__name__)

DEMO_USERS = [
    {"username": "adminuser", "email": "admin@shophub.com", "first_name": "Admin", "last_name": "User", "role": ADMIN},
    {"username": "editoruser", "email": "editor@shophub.com", "first_name": "Editor", "last_name": "User", "role": EDITOR},
    {"username": "regularuser", "email": "user@shophub.com", "first_name": "Regular", "last_name": "User", "role": USER},
]

DEMO_PRODUCTS = [
    {"name": "Wireless Headphones", "category": "Electronics", "brand": "SoundMax", "price": 59.99, "stock": 25,
     "description": "Over-ear bluetooth headphones with 30 hour battery."},
    {"name": "Cotton T-Shirt", "category": "Clothing", "brand": "Basics", "price": 12.50, "stock": 100,
     "description": "Plain crew neck t-shirt."},
    {"name": "Ceramic Mug", "category": "Home", "brand": None, "price": 8.00, "stock": 40,
     "description": "350ml stoneware mug."},
]


def seed_users(session: Session, password: str) -> int:
    created = 0
    for data in DEMO_USERS:
        if session.exec(select(User).where(User.email == data["email"])).first():
            continue
        session.add(User(password=hash_password(password), **data))
        created += 1
    return created


def seed_products(session: Session) -> int:
    created = 0
    for data in DEMO_PRODUCTS:
        if session.exec(select(Product).where(Product.name == data["name"])).first():
            continue
        session.add(Product(images=[], **data))
        created += 1
    return created


def main():
    logging.basicConfig(level=settings.log_level)
    create_db_and_tables()

    with Session(engine) as session:
        users = seed_users(session, settings.seed_password)
        products = seed_products(session)
        session.commit()

    logger.info(f"Seeded {users} users and {products} products")


if __name__ == "__main__":
    main()
