import pytest
from sqlmodel import Session

from app.models.customer import Customer
from app.models.order import Order

from conftest import auth_header

STATUSES = ["pending", "processing", "shipped", "completed", "cancelled"]


def place(client, products, email="hoa@example.com", quantity=1, headers=None):
    payload = {
        "items": [{"product_id": products["rose"], "quantity": quantity, "price": 50000}],
        "customer_info": {
            "full_name": "Le Thi Hoa",
            "email": email,
            "phone": "0933000111",
            "address": "3 Nguyen Hue, HCMC",
        },
    }
    resp = client.post("/api/orders", json=payload, headers=headers or {})
    assert resp.status_code == 200
    return resp.json()["order_id"]


# -------- Access control --------


@pytest.mark.parametrize(
    "method, path",
    [
        ("get", "/api/orders"),
        ("get", "/api/orders/stats"),
        ("get", "/api/customers"),
        ("get", "/api/customers/stats"),
        ("delete", "/api/categories/1"),
        ("put", "/api/orders/1/status"),
    ],
)
def test_admin_routes_require_admin(client, method, path):
    kwargs = {"json": {"status": "shipped"}} if method == "put" else {}

    anonymous = getattr(client, method)(path, **kwargs)
    customer = getattr(client, method)(path, headers=auth_header(7), **kwargs)

    assert anonymous.status_code == 401
    assert customer.status_code == 403


# -------- Status overwrite --------


@pytest.mark.parametrize("start", STATUSES)
@pytest.mark.parametrize("target", STATUSES)
def test_status_overwrite_from_any_status(client, engine, products, admin_headers, start, target):
    order_id = place(client, products)
    with Session(engine) as session:
        order = session.get(Order, order_id)
        order.status = start
        session.add(order)
        session.commit()

    resp = client.put(
        f"/api/orders/{order_id}/status",
        json={"status": target},
        headers=admin_headers,
    )

    assert resp.status_code == 200
    assert resp.json()["message"]
    detail = client.get(f"/api/orders/{order_id}", headers=admin_headers).json()
    assert detail["status"] == target


def test_status_outside_enum_is_rejected(client, products, admin_headers):
    order_id = place(client, products)
    resp = client.put(
        f"/api/orders/{order_id}/status",
        json={"status": "lost"},
        headers=admin_headers,
    )
    assert resp.status_code == 422


def test_status_of_missing_order_is_404(client, admin_headers):
    resp = client.put("/api/orders/999/status", json={"status": "shipped"}, headers=admin_headers)
    assert resp.status_code == 404


# -------- Listing --------


def test_admin_order_detail(client, products, admin_headers):
    order_id = place(client, products, quantity=3)

    detail = client.get(f"/api/orders/{order_id}", headers=admin_headers).json()

    assert detail["customer_name"] == "Le Thi Hoa"
    assert detail["customer_email"] == "hoa@example.com"
    assert detail["items"] == [
        {
            "product_id": products["rose"],
            "product_name": "Red rose box",
            "quantity": 3,
            "price": 50000,
            "line_total": 150000,
        }
    ]


def test_admin_lists_all_orders_newest_first(client, products, admin_headers):
    first = place(client, products, email="a@example.com")
    second = place(client, products, email="b@example.com", quantity=2)

    rows = client.get("/api/orders", headers=admin_headers).json()

    assert [r["order_id"] for r in rows] == [second, first]
    assert rows[0]["customer_email"] == "b@example.com"
    assert rows[0]["items"] == "Red rose box (x2)"


def test_my_orders(client, products, registered_customer):
    headers = auth_header(7)
    order_id = place(client, products, headers=headers)
    place(client, products, email="other@example.com")

    rows = client.get("/api/orders/my", headers=headers).json()

    assert [r["order_id"] for r in rows] == [order_id]
    assert rows[0]["customer_id"] == registered_customer


def test_my_orders_without_profile_is_empty(client):
    resp = client.get("/api/orders/my", headers=auth_header(55))
    assert resp.status_code == 200
    assert resp.json() == []


# -------- Stats --------


def test_order_stats(client, engine, products, admin_headers):
    place(client, products, quantity=2)
    cancelled = place(client, products, email="x@example.com")
    with Session(engine) as session:
        order = session.get(Order, cancelled)
        order.status = "cancelled"
        session.add(order)
        session.commit()

    stats = client.get("/api/orders/stats", headers=admin_headers).json()

    assert stats["total_orders"] == 2
    assert stats["today"] == {"revenue": 100000, "count": 1}
    assert stats["month"] == {"revenue": 100000, "count": 1}


# -------- Customers --------


def test_customer_admin_listing_and_orders(client, products, admin_headers, registered_customer):
    order_id = place(client, products, headers=auth_header(7))

    customers = client.get("/api/customers", headers=admin_headers).json()
    assert [c["email"] for c in customers] == ["lan@example.com"]

    one = client.get(f"/api/customers/{registered_customer}", headers=admin_headers).json()
    assert one["user_id"] == 7

    orders = client.get(f"/api/customers/{registered_customer}/orders", headers=admin_headers).json()
    assert [o["order_id"] for o in orders] == [order_id]


def test_update_customer(client, engine, admin_headers, registered_customer):
    resp = client.put(
        f"/api/customers/{registered_customer}",
        json={"phone": "0999888777", "email": "Lan.New@Example.com"},
        headers=admin_headers,
    )

    assert resp.status_code == 200
    with Session(engine) as session:
        customer = session.get(Customer, registered_customer)
        assert customer.phone == "0999888777"
        assert customer.email == "lan.new@example.com"
        assert customer.name == "Nguyen Thi Lan"


def test_update_customer_duplicate_email(client, engine, products, admin_headers, registered_customer):
    place(client, products, email="taken@example.com")

    resp = client.put(
        f"/api/customers/{registered_customer}",
        json={"email": "taken@example.com"},
        headers=admin_headers,
    )

    assert resp.status_code == 400


def test_missing_customer_is_404(client, admin_headers):
    assert client.get("/api/customers/404", headers=admin_headers).status_code == 404


# -------- Products --------


def test_product_crud(client, admin_headers, products):
    created = client.post(
        "/api/products",
        json={"name": "Sunflower bouquet", "price": 250000, "stock": 5},
        headers=admin_headers,
    )
    assert created.status_code == 201
    product_id = created.json()["product_id"]

    updated = client.put(
        f"/api/products/{product_id}",
        json={"price": 270000},
        headers=admin_headers,
    )
    assert updated.json()["price"] == 270000
    assert updated.json()["stock"] == 5

    assert client.get(f"/api/products/{product_id}").status_code == 200
    assert client.delete(f"/api/products/{product_id}", headers=admin_headers).status_code == 204
    assert client.get(f"/api/products/{product_id}").status_code == 404


def test_product_write_requires_admin(client):
    resp = client.post(
        "/api/products",
        json={"name": "Orchid", "price": 1},
        headers=auth_header(7),
    )
    assert resp.status_code == 403


def test_product_with_unknown_category(client, admin_headers):
    resp = client.post(
        "/api/products",
        json={"name": "Orchid", "price": 1, "category_id": 777},
        headers=admin_headers,
    )
    assert resp.status_code == 400


def test_categories(client, admin_headers, products):
    created = client.post("/api/categories", json={"name": "Fruit"}, headers=admin_headers)
    assert created.status_code == 201

    duplicate = client.post("/api/categories", json={"name": "Fruit"}, headers=admin_headers)
    assert duplicate.status_code == 400

    names = [c["name"] for c in client.get("/api/categories").json()]
    assert names == ["Flowers", "Fruit"]

    in_flowers = client.get("/api/products", params={"category_id": 1}).json()
    assert {p["name"] for p in in_flowers} == {"Red rose box", "Fruit basket"}


def test_category_rename_onto_existing_name(client, admin_headers, products):
    fruit = client.post("/api/categories", json={"name": "Fruit"}, headers=admin_headers).json()

    resp = client.put(
        f"/api/categories/{fruit['category_id']}",
        json={"name": " Flowers "},
        headers=admin_headers,
    )

    assert resp.status_code == 400
    assert client.get(f"/api/categories/{fruit['category_id']}").json()["name"] == "Fruit"


def test_category_duplicate_create_keeps_one_row(client, admin_headers, products):
    resp = client.post("/api/categories", json={"name": "Flowers"}, headers=admin_headers)

    assert resp.status_code == 400
    assert [c["name"] for c in client.get("/api/categories").json()] == ["Flowers"]


def test_category_update(client, admin_headers, products):
    resp = client.put(
        "/api/categories/1",
        json={"name": "Fresh flowers", "description": "Cut daily"},
        headers=admin_headers,
    )

    assert resp.status_code == 200
    assert resp.json() == {"category_id": 1, "name": "Fresh flowers", "description": "Cut daily"}

    # Keeping its own name is not a conflict
    same = client.put("/api/categories/1", json={"name": "Fresh flowers"}, headers=admin_headers)
    assert same.status_code == 200
    assert same.json()["description"] == "Cut daily"


@pytest.mark.parametrize("body", [{}, {"name": "   "}, {"name": None}])
def test_category_update_requires_name(client, admin_headers, products, body):
    resp = client.put("/api/categories/1", json=body, headers=admin_headers)

    assert resp.status_code == 400
    assert client.get("/api/categories/1").json()["name"] == "Flowers"


def test_category_delete_refused_while_in_use(client, admin_headers, products):
    resp = client.delete("/api/categories/1", headers=admin_headers)

    assert resp.status_code == 400
    assert client.get("/api/categories/1").status_code == 200


def test_category_delete_and_lookup(client, admin_headers):
    created = client.post("/api/categories", json={"name": "Gift boxes"}, headers=admin_headers).json()
    category_id = created["category_id"]

    assert client.get(f"/api/categories/{category_id}").json()["name"] == "Gift boxes"
    assert client.delete(f"/api/categories/{category_id}", headers=admin_headers).json() == {
        "message": "Category deleted"
    }
    assert client.get(f"/api/categories/{category_id}").status_code == 404
    assert client.put(
        f"/api/categories/{category_id}", json={"name": "X"}, headers=admin_headers
    ).status_code == 404


def test_featured_products_rank_best_sellers_first(client, engine, products):
    basket_order = client.post(
        "/api/orders",
        json={
            "items": [{"product_id": products["basket"], "quantity": 2, "price": 30000}],
            "customer_info": {"full_name": "Le Thi Hoa", "email": "hoa@example.com"},
        },
    ).json()["order_id"]

    featured = client.get("/api/products/featured").json()
    assert [p["product_id"] for p in featured] == [products["basket"], products["rose"]]

    # Cancelled orders do not count as sales
    with Session(engine) as session:
        order = session.get(Order, basket_order)
        order.status = "cancelled"
        session.add(order)
        session.commit()
    place(client, products, quantity=1)

    featured = client.get("/api/products/featured", params={"limit": 1}).json()
    assert [p["product_id"] for p in featured] == [products["rose"]]


def test_product_stats(client, products):
    stats = client.get("/api/products/stats").json()
    assert stats == {"total": 2, "in_stock": 2, "low_stock": 1, "out_of_stock": 0, "categories": 1}

    client.post(
        "/api/orders",
        json={
            "items": [{"product_id": products["basket"], "quantity": 3, "price": 30000}],
            "customer_info": {"full_name": "Le Thi Hoa", "email": "hoa@example.com"},
        },
    )

    stats = client.get("/api/products/stats").json()
    assert stats == {"total": 2, "in_stock": 1, "low_stock": 0, "out_of_stock": 1, "categories": 1}


def test_customer_stats(client, engine, products, admin_headers, registered_customer):
    place(client, products, email="guest1@example.com")
    place(client, products, email="guest1@example.com")
    with Session(engine) as session:
        session.add(Customer(name="Pham Van Duc", email="duc@example.com"))
        session.commit()

    stats = client.get("/api/customers/stats", headers=admin_headers).json()

    assert stats == {"total_customers": 3, "registered": 1, "guests": 2, "with_orders": 1}
