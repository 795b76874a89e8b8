"""Tests for the catalog endpoints."""

import pytest

from conftest import auth_header, make_product

NEW_PRODUCT = {
    "name": "Desk Lamp",
    "description": "LED lamp with dimmer",
    "price": 24.5,
    "category": "Home",
    "brand": "Lumo",
    "images": [{"url": "/img/lamp.jpg", "alt": "Desk lamp"}],
    "stock": 12,
}


@pytest.fixture
def catalog(session):
    return [
        make_product(session, "Banana Hook", price=5.0, category="Kitchen"),
        make_product(session, "Apple Slicer", price=15.0, category="Kitchen"),
        make_product(session, "Cotton Tee", price=9.0, category="Clothing", description="soft cotton"),
        make_product(session, "Old Stock", price=1.0, category="Clothing", is_active=False),
    ]


class TestListProducts:
    def test_active_only(self, client, catalog):
        data = client.get("/products").json()["data"]
        assert data["total"] == 3
        assert "Old Stock" not in [p["name"] for p in data["products"]]

    def test_filter_by_category(self, client, catalog):
        data = client.get("/products?category=Kitchen").json()["data"]
        assert {p["name"] for p in data["products"]} == {"Banana Hook", "Apple Slicer"}

    def test_search_name_and_description(self, client, catalog):
        data = client.get("/products?search=cotton").json()["data"]
        assert [p["name"] for p in data["products"]] == ["Cotton Tee"]

    @pytest.mark.parametrize(
        "sort,expected",
        [
            ("price_asc", ["Banana Hook", "Cotton Tee", "Apple Slicer"]),
            ("price_desc", ["Apple Slicer", "Cotton Tee", "Banana Hook"]),
            ("name", ["Apple Slicer", "Banana Hook", "Cotton Tee"]),
        ],
    )
    def test_sorting(self, client, catalog, sort, expected):
        data = client.get(f"/products?sort={sort}").json()["data"]
        assert [p["name"] for p in data["products"]] == expected

    def test_pagination(self, client, catalog):
        data = client.get("/products?page=2&limit=2&sort=name").json()["data"]
        assert data["totalPages"] == 2
        assert data["currentPage"] == 2
        assert [p["name"] for p in data["products"]] == ["Cotton Tee"]

    def test_categories(self, client, catalog):
        response = client.get("/products/categories")
        assert response.json()["data"] == ["Clothing", "Kitchen"]


class TestGetProduct:
    def test_found(self, client, product):
        response = client.get(f"/products/{product.id}")
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["name"] == "Ceramic Mug"
        assert data["stock"] == 10
        assert data["inStock"] is True

    def test_inactive_is_not_found(self, client, catalog):
        response = client.get(f"/products/{catalog[3].id}")
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Product not found"}


class TestManageProducts:
    def test_admin_creates(self, client, admin):
        response = client.post("/products", json=NEW_PRODUCT, headers=auth_header(admin))
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["id"] is not None
        assert data["images"] == NEW_PRODUCT["images"]
        assert data["isActive"] is True

    def test_editor_creates(self, client, editor):
        response = client.post("/products", json=NEW_PRODUCT, headers=auth_header(editor))
        assert response.status_code == 201

    def test_user_cannot_create(self, client, user):
        response = client.post("/products", json=NEW_PRODUCT, headers=auth_header(user))
        assert response.status_code == 403
        assert response.json()["success"] is False

    def test_negative_price_rejected(self, client, admin):
        response = client.post("/products", json={**NEW_PRODUCT, "price": -1}, headers=auth_header(admin))
        assert response.status_code == 400

    def test_update(self, client, session, admin, product):
        response = client.put(
            f"/products/{product.id}",
            json={"price": 12.0, "stock": 3},
            headers=auth_header(admin),
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["price"] == 12.0
        assert data["stock"] == 3
        assert data["name"] == "Ceramic Mug"

    def test_update_missing(self, client, admin):
        response = client.put("/products/999", json={"price": 1.0}, headers=auth_header(admin))
        assert response.status_code == 404

    def test_soft_delete(self, client, session, editor, product):
        response = client.delete(f"/products/{product.id}", headers=auth_header(editor))
        assert response.status_code == 200
        assert response.json()["message"] == "Product deleted"

        session.refresh(product)
        assert product.is_active is False
        assert client.get(f"/products/{product.id}").status_code == 404
