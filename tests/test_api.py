# tests/test_api.py
from decimal import Decimal
from uuid import uuid4

from fastapi.routing import APIRoute

from main import app
from models.log import Log

PRODUCT = {
    "name": "Cordless drill",
    "description": "Compact drill driver",
    "sku": "abc-123",
    "price": "10.00",
    "stock_quantity": 5,
    "category": "Power Tools",
}


def _create_product(client, **overrides):
    resp = client.post("/products", json={**PRODUCT, **overrides})
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


def _create_order(client, number, *product_ids, quantity=2):
    resp = client.post("/orders", json={
        "number": number,
        "description": "Order placed through the API",
        "products": [{"product_id": pid, "quantity": quantity} for pid in product_ids],
    })
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


def _assert_envelope(body, success):
    assert set(body) == {"success", "message", "errors", "data"}
    assert body["success"] is success


def test_routers_are_registered_with_tags():
    routes = [r for r in app.routes if isinstance(r, APIRoute)]
    tags = {prefix: {tag for r in routes if r.path.startswith(prefix) for tag in r.tags}
            for prefix in ("/products", "/orders", "/logs")}
    assert "Products" in tags["/products"]
    assert "Orders" in tags["/orders"]
    assert "Logs" in tags["/logs"]


def test_lookup_errors_are_not_reported_as_not_found():
    assert LookupError not in app.exception_handlers
    assert Exception in app.exception_handlers


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


# =========================
# PRODUCTS
# =========================

def test_create_product_returns_201_with_location(client):
    resp = client.post("/products", json=PRODUCT)
    assert resp.status_code == 201
    body = resp.json()
    _assert_envelope(body, True)
    product_id = body["data"]["id"]
    assert resp.headers["location"].endswith(f"/products/{product_id}")
    assert body["data"]["sku"] == "ABC-123"
    assert Decimal(body["data"]["price"]) == Decimal("10.00")

    fetched = client.get(resp.headers["location"])
    assert fetched.status_code == 200
    assert fetched.json()["data"]["id"] == product_id


def test_duplicate_sku_is_400(client):
    _create_product(client)
    resp = client.post("/products", json={**PRODUCT, "sku": "ABC-123"})
    assert resp.status_code == 400
    body = resp.json()
    _assert_envelope(body, False)
    assert body["errors"] == ["A product with this SKU already exists"]
    assert "kind" not in body


def test_invalid_payload_is_400_envelope(client):
    resp = client.post("/products", json={**PRODUCT, "price": "0", "sku": "a b"})
    assert resp.status_code == 400
    body = resp.json()
    _assert_envelope(body, False)
    assert body["message"] == "Validation failed"
    assert any(e.startswith("price:") for e in body["errors"])
    assert any(e.startswith("sku:") for e in body["errors"])


def test_get_unknown_product_is_404(client):
    resp = client.get(f"/products/{uuid4()}")
    assert resp.status_code == 404
    assert resp.json()["errors"] == ["Product not found"]


def test_product_listings(client):
    _create_product(client, sku="HAM-1", category="Hand Tools", price="40.00", stock_quantity=100)
    _create_product(client, sku="SAW-1", category="Power Tools", price="250.00", stock_quantity=3)
    _create_product(client, sku="GLV-1", category="Garden", price="12.00", stock_quantity=0)

    assert len(client.get("/products").json()["data"]) == 3
    assert {p["sku"] for p in client.get("/products/available").json()["data"]} == {"HAM-1", "SAW-1"}
    assert [p["sku"] for p in client.get("/products/category/power tools").json()["data"]] == ["SAW-1"]
    assert [p["sku"] for p in client.get("/products/low-stock", params={"threshold": 5}).json()["data"]] == ["GLV-1", "SAW-1"]
    assert client.get("/products/sku/saw-1").json()["data"]["sku"] == "SAW-1"
    assert client.get("/products/sku/NOPE").status_code == 404

    in_range = client.get("/products/price-range", params={"min_price": "10", "max_price": "50"})
    assert [p["sku"] for p in in_range.json()["data"]] == ["GLV-1", "HAM-1"]


def test_invalid_price_range_is_400(client):
    resp = client.get("/products/price-range", params={"min_price": "50", "max_price": "10"})
    assert resp.status_code == 400
    assert resp.json()["errors"] == ["Invalid price range"]


def test_discount_price_endpoint(client):
    product = _create_product(client, price="100.00")
    resp = client.get(f"/products/{product['id']}/discount-price", params={"percentage": "10"})
    assert resp.status_code == 200
    assert Decimal(resp.json()["data"]["discounted_price"]) == Decimal("90")

    resp = client.get(f"/products/{product['id']}/discount-price", params={"percentage": "101"})
    assert resp.status_code == 400


def test_update_product(client):
    product = _create_product(client)
    resp = client.put(f"/products/{product['id']}", json={**PRODUCT, "name": "Hammer drill", "price": "15.50"})
    assert resp.status_code == 200
    assert resp.json()["data"]["name"] == "Hammer drill"
    assert resp.json()["message"] == "Product updated successfully"

    missing = client.put(f"/products/{uuid4()}", json=PRODUCT)
    assert missing.status_code == 404


def test_stock_patch(client):
    product = _create_product(client, stock_quantity=5)
    url = f"/products/{product['id']}/stock"

    resp = client.patch(url, json={"quantity": 3, "operation": "subtract"})
    assert resp.status_code == 200
    assert resp.json()["data"]["stock_quantity"] == 2

    resp = client.patch(url, json={"quantity": 3, "operation": "subtract"})
    assert resp.status_code == 400
    assert resp.json()["errors"] == ["Insufficient stock for this operation"]

    resp = client.patch(url, json={"quantity": 1, "operation": "divide"})
    assert resp.status_code == 400


def test_delete_product(client):
    product = _create_product(client)
    resp = client.delete(f"/products/{product['id']}")
    assert resp.status_code == 200
    _assert_envelope(resp.json(), True)
    assert resp.json()["data"] is None

    assert client.get(f"/products/{product['id']}").status_code == 404
    assert client.delete(f"/products/{product['id']}").status_code == 404

    listed = client.get("/products", params={"include_deleted": True}).json()["data"]
    assert [p["is_deleted"] for p in listed] == [True]


# =========================
# ORDERS
# =========================

def test_order_lifecycle(client):
    product = _create_product(client)

    resp = client.post("/orders", json={
        "number": "ORD-001",
        "description": "Order placed through the API",
        "products": [{"product_id": product["id"], "quantity": 2, "unit_price": "10.00"}],
    })
    assert resp.status_code == 201
    order = resp.json()["data"]
    assert Decimal(order["amount"]) == Decimal("20.00")
    assert order["status"] == 1
    assert order["status_description"] == "Pending"
    assert resp.headers["location"].endswith(f"/orders/{order['id']}")

    assert client.get("/orders/by-number/ORD-001").json()["data"]["id"] == order["id"]
    assert [o["id"] for o in client.get("/orders/by-status/1").json()["data"]] == [order["id"]]
    assert [o["id"] for o in client.get(f"/orders/by-product/{product['id']}").json()["data"]] == [order["id"]]

    approved = client.patch(f"/orders/{order['id']}/approve")
    assert approved.status_code == 200
    assert client.get(f"/orders/{order['id']}").json()["data"]["status"] == 3

    canceled = client.patch(f"/orders/{order['id']}/cancel")
    assert canceled.status_code == 400
    assert canceled.json()["errors"] == ["Order cannot be canceled in current status"]


def test_order_listing_is_summary(client):
    product = _create_product(client)
    _create_order(client, "ORD-001", product["id"])
    listed = client.get("/orders").json()["data"]
    assert len(listed) == 1
    assert "products" not in listed[0]


def test_create_order_with_unknown_product_is_400(client):
    missing = str(uuid4())
    resp = client.post("/orders", json={
        "number": "ORD-001",
        "description": "Order with a ghost product",
        "products": [{"product_id": missing, "quantity": 1}],
    })
    assert resp.status_code == 400
    assert resp.json()["errors"] == [f"Product with ID {missing} not found"]


def test_create_order_without_lines_is_400(client):
    resp = client.post("/orders", json={"number": "ORD-001", "description": "No lines at all", "products": []})
    assert resp.status_code == 400


def test_unknown_status_is_400(client):
    resp = client.get("/orders/by-status/42")
    assert resp.status_code == 400
    _assert_envelope(resp.json(), False)


def test_date_range(client):
    product = _create_product(client)
    order = _create_order(client, "ORD-001", product["id"])
    day = order["order_date"][:10]

    resp = client.get("/orders/date-range", params={"start": day, "end": day})
    assert [o["id"] for o in resp.json()["data"]] == [order["id"]]

    resp = client.get("/orders/date-range", params={"start": "2025-02-01", "end": "2025-01-01"})
    assert resp.status_code == 400


def test_update_order_id_mismatch(client):
    product = _create_product(client)
    order = _create_order(client, "ORD-001", product["id"])
    payload = {"id": str(uuid4()), "number": "ORD-002", "description": "Changed", "status": 2}

    resp = client.put(f"/orders/{order['id']}", json=payload)
    assert resp.status_code == 400
    assert resp.json()["errors"] == ["URL ID does not match object ID"]

    resp = client.put(f"/orders/{order['id']}", json={**payload, "id": order["id"]})
    assert resp.status_code == 200
    assert resp.json()["data"]["status"] == 2
    assert resp.json()["data"]["number"] == "ORD-002"


def test_add_and_remove_order_products(client):
    first = _create_product(client, sku="DRL-1")
    second = _create_product(client, sku="SAW-1", price="50.00")
    order = _create_order(client, "ORD-001", first["id"], quantity=1)

    resp = client.post("/orders/add-product", json={"order_id": order["id"], "product_id": second["id"], "quantity": 1})
    assert resp.status_code == 200
    assert Decimal(client.get(f"/orders/{order['id']}").json()["data"]["amount"]) == Decimal("60.00")

    resp = client.post("/orders/add-product", json={"order_id": order["id"], "product_id": second["id"], "quantity": 1})
    assert resp.status_code == 400

    resp = client.delete(f"/orders/{order['id']}/products/{first['id']}")
    assert resp.status_code == 200
    lines = client.get(f"/orders/{order['id']}").json()["data"]["products"]
    assert [line["product_sku"] for line in lines] == ["SAW-1"]


def test_delete_order(client):
    product = _create_product(client)
    order = _create_order(client, "ORD-001", product["id"])
    assert client.delete(f"/orders/{order['id']}").status_code == 200
    assert client.get(f"/orders/{order['id']}").status_code == 404
    assert client.get("/orders").json()["data"] == []
    assert len(client.get("/orders", params={"include_deleted": True}).json()["data"]) == 1


# =========================
# AUDIT LOG
# =========================

def test_mutations_are_audited(client, db_session):
    product = _create_product(client)
    client.post("/products", json=PRODUCT)
    client.patch(f"/products/{product['id']}/stock", json={"quantity": 1, "operation": "add"})

    entries = [(log.action, log.status) for log in db_session.query(Log).order_by(Log.id).all()]
    assert entries == [
        ("PRODUCT_CREATE", "SUCCESS"),
        ("PRODUCT_CREATE", "FAIL"),
        ("STOCK_ADJUSTMENT", "SUCCESS"),
    ]

    resp = client.get("/logs", params={"status": "FAIL"})
    assert resp.status_code == 200
    page = resp.json()["data"]
    assert page["total"] == 1
    assert page["items"][0]["resource"] == "products"
    assert page["items"][0]["ip"] == "testclient"


def test_logs_filter_by_resource_and_reject_inverted_dates(client):
    product = _create_product(client)
    _create_order(client, "ORD-001", product["id"])

    orders_only = client.get("/logs", params={"resource": "orders"}).json()["data"]
    assert [item["action"] for item in orders_only["items"]] == ["ORDER_CREATE"]
    assert orders_only["items"][0]["meta"]["number"] == "ORD-001"

    resp = client.get("/logs", params={"date_from": "2025-02-01", "date_to": "2025-01-01"})
    assert resp.status_code == 400


def test_quantity_out_of_column_range_is_400_and_stores_nothing(client):
    product = _create_product(client)
    resp = client.post("/orders", json={
        "number": "ORD-001",
        "description": "Order with an absurd quantity",
        "products": [{"product_id": product["id"], "quantity": 10 ** 20}],
    })
    assert resp.status_code == 400
    assert client.get("/orders", params={"include_deleted": True}).json()["data"] == []
