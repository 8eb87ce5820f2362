import json
from decimal import Decimal

import pytest

from sherpamomo.client.api import ApiClient, ApiError
from sherpamomo.client.cart import Cart, MemoryStorage, JsonFileStorage, CART_STORAGE_KEY
from sherpamomo.schemas.order import CustomerInfo


def test_adding_same_product_merges_rows():
    cart = Cart()
    cart.add("1", "Chicken Momo", Decimal("12.99"), quantity=2)
    cart.add("1", "Chicken Momo", Decimal("12.99"), quantity=3)

    assert len(cart.items) == 1
    assert cart.get("1").quantity == 5
    assert cart.total_items == 5
    assert cart.subtotal == Decimal("64.95")


def test_cart_totals_across_products():
    cart = Cart()
    cart.add("1", "Chicken Momo", 12.99, quantity=2)
    cart.add("6", "Momo Sauce (Achar)", 5.99)

    assert cart.total_items == 3
    assert cart.subtotal == Decimal("31.97")
    assert cart.contains("6")
    assert not cart.contains("2")


def test_add_requires_positive_quantity():
    with pytest.raises(ValueError):
        Cart().add("1", "Chicken Momo", 12.99, quantity=0)


def test_update_quantity_below_one_removes():
    cart = Cart()
    cart.add("1", "Chicken Momo", 12.99)
    cart.update_quantity("1", 4)
    assert cart.get("1").quantity == 4

    cart.update_quantity("1", 0)
    assert cart.items == []


def test_remove_and_clear():
    cart = Cart()
    cart.add("1", "Chicken Momo", 12.99)
    cart.add("2", "Pork Momo", 13.99)

    cart.remove("1")
    assert [item.id for item in cart.items] == ["2"]

    cart.clear()
    assert cart.total_items == 0
    assert cart.subtotal == Decimal("0")


def test_items_are_copies():
    cart = Cart()
    cart.add("1", "Chicken Momo", 12.99)
    cart.items[0].quantity = 99
    assert cart.get("1").quantity == 1


def test_cart_survives_restart_in_memory():
    storage = MemoryStorage()
    Cart(storage).add("1", "Chicken Momo", 12.99, quantity=2, unit="pcs")

    restored = Cart(storage)
    assert restored.get("1").quantity == 2
    assert restored.get("1").unit == "pcs"
    assert json.loads(storage.values[CART_STORAGE_KEY])[0]["id"] == "1"


def test_cart_survives_restart_on_disk(tmp_path):
    cart = Cart(JsonFileStorage(tmp_path))
    cart.add("1", "Chicken Momo", 12.99)
    cart.add("6", "Momo Sauce (Achar)", 5.99, quantity=2)

    assert (tmp_path / f"{CART_STORAGE_KEY}.json").exists()
    restored = Cart(JsonFileStorage(tmp_path))
    assert restored.subtotal == Decimal("24.97")


def test_unreadable_saved_cart_is_discarded():
    storage = MemoryStorage()
    storage.save(CART_STORAGE_KEY, '[{"id": "1", "quantity": "lots"}]')
    assert Cart(storage).items == []


def test_order_request_from_cart():
    cart = Cart()
    cart.add("1", "Chicken Momo", 12.99, quantity=3, image="https://images.example.com/chicken-momo.jpg")

    order = cart.to_order_request(customer_info=CustomerInfo(name="Pemba", email="pemba@gmail.com"))
    assert [(i.product_id, i.quantity, i.price) for i in order.items] == [("1", 3, Decimal("12.99"))]
    assert order.payment_info.method == "cash_on_delivery"
    assert order.customer_info.name == "Pemba"


def test_checkout_through_api_client(client):
    api = ApiClient(client)
    code = api.request_code("416-555-1234")["devCode"]
    api.verify_code("416-555-1234", code)
    client.cookies.clear()

    cart = Cart()
    cart.add("1", "Chicken Momo", 12.99, quantity=3)
    created = api.create_order(cart.to_order_request())
    cart.clear()

    assert created["order"]["total"] == 47.09
    order_id = created["orderId"]
    assert api.get_order(order_id)["status"] == "pending"
    assert [o["orderId"] for o in api.my_orders()["orders"]] == [order_id]

    cancelled = api.cancel_order(order_id)
    assert cancelled["order"]["status"] == "cancelled"

    with pytest.raises(ApiError) as exc:
        api.cancel_order(order_id)
    assert exc.value.status_code == 400
    assert exc.value.message == "Cannot change order status from cancelled to cancelled"


def test_api_client_reports_errors(client):
    with pytest.raises(ApiError) as exc:
        ApiClient(client).get_order("ORD-NOPE-00000")
    assert exc.value.status_code == 404
    assert exc.value.message == "Order not found"


def test_catalog_ids_and_string_ids_are_the_same_row():
    cart = Cart()
    cart.add(7, "Jhol Momo", 14.99)
    cart.add("7", "Jhol Momo", 14.99)

    assert [item.id for item in cart.items] == ["7"]
    assert cart.get(7).quantity == 2
    assert cart.contains("7")

    cart.update_quantity(7, 5)
    assert cart.to_order_request().items[0].product_id == "7"
    cart.remove(7)
    assert cart.items == []


def test_saved_cart_with_numeric_ids_loads():
    storage = MemoryStorage()
    storage.save(CART_STORAGE_KEY, '[{"id": 3, "name": "Pork Momo", "price": "13.99", "quantity": 1}]')
    assert Cart(storage).get("3").quantity == 1
