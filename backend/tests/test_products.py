from decimal import Decimal

import pytest

from conftest import auth_headers
from sherpamomo.models.product import Product, ProductCategory, ProductUnit

NEW_PRODUCT = {
    "name": "Veg Momo",
    "description": "Cabbage, carrot and paneer wrapped in thin dough.",
    "price": 10.99,
    "category": "Veg",
    "image": "https://images.example.com/veg-momo.jpg",
    "ingredients": ["Cabbage", "Carrot", "Paneer"],
    "amount": 10,
    "unit": "pcs",
    "stock": 40,
}


@pytest.fixture(name="catalog")
def catalog_fixture(session):
    rows = [
        ("Chicken Momo", "12.99", ProductCategory.CHICKEN, 4.8, 25, True),
        ("Pork Momo", "13.99", ProductCategory.PORK, 4.6, 4, True),
        ("Buff Momo", "14.99", ProductCategory.BUFF, 4.9, 0, False),
        ("Momo Sauce (Achar)", "5.99", ProductCategory.SAUCE, 4.5, 60, False),
    ]
    products = []
    for name, price, category, rating, stock, featured in rows:
        product = Product(
            name=name,
            description=f"{name} from the Sherpa kitchen.",
            price=Decimal(price),
            category=category,
            image=f"https://images.example.com/{name.lower().replace(' ', '-')}.jpg",
            rating=rating,
            review_count=10,
            unit=ProductUnit.JAR if category == ProductCategory.SAUCE else ProductUnit.PCS,
            stock=stock,
            in_stock=stock > 0,
            featured=featured,
        )
        session.add(product)
        products.append(product)
    session.commit()
    for product in products:
        session.refresh(product)
    return products


def names(response) -> list:
    return [p["name"] for p in response.json()["products"]]


def test_list_products(client, catalog):
    response = client.get("/api/products")
    assert response.status_code == 200
    data = response.json()
    assert len(data["products"]) == 4
    assert data["pagination"] == {
        "currentPage": 1,
        "totalPages": 1,
        "totalItems": 4,
        "hasNextPage": False,
        "hasPrevPage": False,
    }
    first = data["products"][0]
    assert {"reviewCount", "inStock", "createdAt"} <= first.keys()


def test_filter_by_category(client, catalog):
    assert names(client.get("/api/products", params={"category": "Pork"})) == ["Pork Momo"]
    assert len(names(client.get("/api/products", params={"category": "all"}))) == 4
    assert names(client.get("/api/products", params={"category": "Lamb"})) == []


def test_filter_featured_and_search(client, catalog):
    featured = names(client.get("/api/products", params={"featured": "true", "sort": "name"}))
    assert featured == ["Chicken Momo", "Pork Momo"]

    assert names(client.get("/api/products", params={"search": "achar"})) == ["Momo Sauce (Achar)"]


def test_sort_and_paginate(client, catalog):
    by_price = names(client.get("/api/products", params={"sort": "price_asc"}))
    assert by_price == ["Momo Sauce (Achar)", "Chicken Momo", "Pork Momo", "Buff Momo"]

    page = client.get("/api/products", params={"sort": "-rating", "limit": 3, "page": 2}).json()
    assert [p["name"] for p in page["products"]] == ["Momo Sauce (Achar)"]
    assert page["pagination"]["hasPrevPage"] is True
    assert page["pagination"]["hasNextPage"] is False
    assert page["pagination"]["totalPages"] == 2


def test_unknown_sort_rejected(client, catalog):
    response = client.get("/api/products", params={"sort": "random"})
    assert response.status_code == 400
    assert response.json()["message"] == "Unknown sort: random"


def test_categories_and_featured(client, catalog):
    assert client.get("/api/products/categories").json() == {
        "categories": ["Buff", "Chicken", "Pork", "Sauce"],
    }
    featured = client.get("/api/products/featured").json()
    assert [p["name"] for p in featured] == ["Chicken Momo", "Pork Momo"]


def test_get_product(client, product):
    response = client.get(f"/api/products/{product.id}")
    assert response.status_code == 200
    assert response.json()["price"] == 12.99
    assert response.json()["ingredients"] == ["Minced Chicken", "Onion", "Ginger"]

    missing = client.get("/api/products/9999")
    assert missing.status_code == 404
    assert missing.json()["message"] == "Product not found"


def test_admin_creates_product(client, admin):
    response = client.post("/api/products", json=NEW_PRODUCT, headers=auth_headers(admin))
    assert response.status_code == 201
    created = response.json()
    assert created["name"] == "Veg Momo"
    assert created["price"] == 10.99
    assert created["inStock"] is True

    assert client.get(f"/api/products/{created['id']}").status_code == 200


@pytest.mark.parametrize("change", [
    {"price": 0},
    {"price": -3},
    {"category": "Lamb"},
    {"rating": 6},
    {"name": ""},
])
def test_invalid_product_rejected(client, admin, change):
    response = client.post("/api/products", json={**NEW_PRODUCT, **change}, headers=auth_headers(admin))
    assert response.status_code == 400
    assert "message" in response.json()


def test_customer_cannot_create_product(client, admin, customer):
    response = client.post("/api/products", json=NEW_PRODUCT, headers=auth_headers(customer))
    assert response.status_code == 403


def test_admin_updates_product(client, admin, product):
    response = client.put(
        f"/api/products/{product.id}",
        json={"stock": 3, "featured": False},
        headers=auth_headers(admin),
    )
    assert response.status_code == 200
    assert response.json()["stock"] == 3
    assert response.json()["featured"] is False
    assert response.json()["name"] == "Chicken Momo"


@pytest.mark.parametrize("field", ["name", "price", "category", "image", "stock", "ingredients"])
def test_update_rejects_null_fields(client, session, admin, product, field):
    response = client.put(f"/api/products/{product.id}", json={field: None}, headers=auth_headers(admin))
    assert response.status_code == 400
    assert "cannot be null" in response.json()["message"]

    session.refresh(product)
    assert product.name == "Chicken Momo"
    assert product.price == Decimal("12.99")


def test_admin_deletes_product(client, admin, product):
    response = client.delete(f"/api/products/{product.id}", headers=auth_headers(admin))
    assert response.json() == {"message": "Product deleted successfully"}
    assert client.get(f"/api/products/{product.id}").status_code == 404


def test_product_stats(client, admin, catalog):
    stats = client.get("/api/products/stats", headers=auth_headers(admin)).json()
    assert stats["totalProducts"] == 4
    assert stats["inStockProducts"] == 3
    assert stats["outOfStockProducts"] == 1
    assert stats["featuredProducts"] == 2
    assert [p["name"] for p in stats["lowStockProducts"]] == ["Pork Momo"]
    assert stats["totalReviews"] == 40
    # 12.99*25 + 13.99*4 + 5.99*60
    assert stats["totalInventoryValue"] == 740.11
    assert {c["category"] for c in stats["categoryStats"]} == {"Buff", "Chicken", "Pork", "Sauce"}
