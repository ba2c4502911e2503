"""Tests for the /products routes."""

import pytest


@pytest.fixture
def admin(make_user):
    return make_user(role="admin")


@pytest.fixture
def customer(make_user):
    return make_user()


def _book(**overrides):
    body = {"name": "Dune", "price": 10, "category": "fiction", "quantity": 3}
    body.update(overrides)
    return body


class TestCreateProduct:
    def test_admin_creates(self, client, admin, auth_header):
        response = client.post("/products", json=_book(name="  Dune  ", category="Fiction"), headers=auth_header(admin))
        assert response.status_code == 201
        product = response.json()["product"]
        assert product["name"] == "Dune"
        assert product["category"] == "fiction"
        assert product["formatted_price"] == "10.00"
        assert product["in_stock"] is True

    def test_customer_is_forbidden(self, client, customer, auth_header):
        assert client.post("/products", json=_book(), headers=auth_header(customer)).status_code == 403

    def test_without_token(self, client):
        assert client.post("/products", json=_book()).status_code == 401

    def test_duplicate_name(self, client, admin, auth_header, make_product):
        make_product(name="Dune")
        response = client.post("/products", json=_book(), headers=auth_header(admin))
        assert response.status_code == 400
        assert response.json()["message"] == "Product already exists"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"price": 0},
            {"price": -3},
            {"category": "poetry"},
            {"quantity": -1},
            {"quantity": 1.5},
            {"name": ""},
            {"name": "x" * 101},
        ],
    )
    def test_invalid_fields(self, client, admin, auth_header, overrides):
        response = client.post("/products", json=_book(**overrides), headers=auth_header(admin))
        assert response.status_code == 400

    def test_missing_fields(self, client, admin, auth_header):
        response = client.post("/products", json={"name": "Dune"}, headers=auth_header(admin))
        assert response.status_code == 400


class TestReadProducts:
    def test_list_all(self, client, make_product):
        make_product(name="A")
        make_product(name="B", quantity=0)
        products = client.get("/products/all").json()["products"]
        assert [p["name"] for p in products] == ["A", "B"]
        assert [p["in_stock"] for p in products] == [True, False]

    def test_by_category(self, client, make_product):
        make_product(name="Novel", category="fiction")
        make_product(name="Essay", category="non-fiction")
        response = client.get("/products/category/non-fiction")
        assert response.status_code == 200
        assert [p["name"] for p in response.json()["products"]] == ["Essay"]

    def test_by_category_empty(self, client, make_product):
        make_product(category="fiction")
        assert client.get("/products/category/non-fiction").status_code == 404

    def test_by_unknown_category(self, client):
        assert client.get("/products/category/poetry").status_code == 400

    def test_get_one(self, client, make_product):
        product = make_product(price=3.5)
        response = client.get(f"/products/{product.id}")
        assert response.status_code == 200
        assert response.json()["product"]["formatted_price"] == "3.50"

    def test_get_missing(self, client):
        assert client.get("/products/999").status_code == 404


class TestUpdateProduct:
    def test_partial_update(self, client, admin, auth_header, make_product):
        product = make_product(price=10.0, name="Dune")
        response = client.put(f"/products/{product.id}", json={"price": 12.5}, headers=auth_header(admin))
        assert response.status_code == 200
        data = response.json()["product"]
        assert data["price"] == 12.5
        assert data["name"] == "Dune"

    def test_customer_is_forbidden(self, client, customer, auth_header, make_product):
        product = make_product()
        response = client.put(f"/products/{product.id}", json={"price": 1}, headers=auth_header(customer))
        assert response.status_code == 403

    def test_missing(self, client, admin, auth_header):
        assert client.put("/products/999", json={"price": 1}, headers=auth_header(admin)).status_code == 404

    def test_rename_to_taken_name(self, client, admin, auth_header, make_product):
        make_product(name="Taken")
        product = make_product(name="Free")
        response = client.put(f"/products/{product.id}", json={"name": "Taken"}, headers=auth_header(admin))
        assert response.status_code == 400


class TestDeleteProduct:
    def test_admin_deletes(self, client, admin, auth_header, make_product):
        product = make_product(name="Gone")
        response = client.delete(f"/products/{product.id}", headers=auth_header(admin))
        assert response.status_code == 200
        assert response.json()["product"]["name"] == "Gone"
        assert client.get(f"/products/{product.id}").status_code == 404

    def test_customer_is_forbidden(self, client, customer, auth_header, make_product):
        product = make_product()
        assert client.delete(f"/products/{product.id}", headers=auth_header(customer)).status_code == 403

    def test_existing_orders_keep_their_snapshot(self, client, admin, customer, auth_header, make_product):
        product = make_product(price=8.0, name="Snapshot")
        client.post(
            "/orders/create",
            json={"items": [{"product": product.id, "quantity": 2}]},
            headers=auth_header(customer),
        )
        client.delete(f"/products/{product.id}", headers=auth_header(admin))

        orders = client.get("/orders/all", headers=auth_header(customer)).json()["orders"]
        assert orders[0]["total_amount"] == pytest.approx(16.0)
        assert orders[0]["items"][0]["name_snapshot"] == "Snapshot"


class TestUnusableProductIds:
    @pytest.mark.parametrize("product_id", ["abc", str(2**70), "0"])
    def test_get(self, client, product_id):
        assert client.get(f"/products/{product_id}").status_code == 404

    def test_delete_non_numeric(self, client, admin, auth_header):
        assert client.delete("/products/abc", headers=auth_header(admin)).status_code == 404

    def test_huge_quantity(self, client, admin, auth_header):
        response = client.post("/products", json=_book(quantity=2**70), headers=auth_header(admin))
        assert response.status_code == 400
