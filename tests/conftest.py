"""Pytest fixtures for storefront tests."""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"

from functools import lru_cache

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel

from storefront.database import build_engine, create_db_and_tables, get_session
from storefront.main import app
from storefront.models.cart import Cart, CartItem
from storefront.models.product import Product
from storefront.models.user import User
from storefront.utils.hash import hash_password
from storefront.utils.token import create_access_token

PASSWORD = "secret123"

ADDRESS = {
    "firstName": "Jane",
    "lastName": "Doe",
    "street": "1 Main St",
    "city": "Springfield",
    "state": "IL",
    "zipCode": "62701",
    "country": "USA",
    "phone": "555-0100",
}


@lru_cache(maxsize=1)
def password_hash():
    return hash_password(PASSWORD)


@pytest.fixture
def engine(tmp_path):
    """A fresh sqlite file database per test."""
    engine = build_engine(f"sqlite:///{tmp_path / 'storefront.db'}")
    create_db_and_tables(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(engine):
    def override_get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_user(session, username, role="user", is_active=True):
    user = User(
        username=username,
        email=f"{username}@shophub.com",
        password=password_hash(),
        first_name=username.capitalize(),
        last_name="Tester",
        role=role,
        is_active=is_active,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def make_product(session, name="Widget", price=10.0, stock=5, **kwargs):
    product = Product(
        name=name,
        description=kwargs.pop("description", f"A {name.lower()}"),
        price=price,
        category=kwargs.pop("category", "General"),
        images=kwargs.pop("images", [{"url": f"/img/{name.lower()}.jpg", "alt": name}]),
        stock=stock,
        **kwargs,
    )
    session.add(product)
    session.commit()
    session.refresh(product)
    return product


def fill_cart(session, user, *lines):
    cart = Cart(user_id=user.id)
    session.add(cart)
    session.flush()
    for product, quantity in lines:
        session.add(CartItem(cart_id=cart.id, product_id=product.id, quantity=quantity, price=product.price))
    session.commit()
    session.refresh(cart)
    return cart


def auth_header(user):
    token = create_access_token(user)
    return {"Authorization": f"Bearer {token}"}


def client_totals(*lines):
    """Totals the way the browser computes them: plain float sums, no rounding."""
    subtotal = 0
    for product, quantity in lines:
        subtotal += product.price * quantity
    tax = subtotal * 0.08
    shipping = 0 if subtotal > 50 else 9.99
    return {
        "itemsPrice": subtotal,
        "taxPrice": tax,
        "shippingPrice": shipping,
        "totalPrice": subtotal + tax + shipping,
    }


def order_payload(*lines, payment_method="Credit Card", **overrides):
    """Order body as the storefront client builds it, totals derived client-side."""
    payload = {
        "orderItems": [
            {
                "product": product.id,
                "name": product.name,
                "image": product.primary_image,
                "price": product.price,
                "quantity": quantity,
            }
            for product, quantity in lines
        ],
        "shippingAddress": dict(ADDRESS),
        "paymentMethod": payment_method,
        **client_totals(*lines),
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def user(session):
    return make_user(session, "regularuser")


@pytest.fixture
def other_user(session):
    return make_user(session, "otheruser")


@pytest.fixture
def admin(session):
    return make_user(session, "adminuser", role="admin")


@pytest.fixture
def editor(session):
    return make_user(session, "editoruser", role="editor")


@pytest.fixture
def product(session):
    return make_product(session, "Ceramic Mug", price=10.0, stock=10)


@pytest.fixture
def expensive_product(session):
    return make_product(session, "Headphones", price=30.0, stock=5)
