import pytest

from app.exceptions import EmptyCart, InsufficientStock
from app.models.cart import CartItem
from app.services.cart_service import CartRepository, read_cart_snapshot


# ============================================================================
# Repository
# ============================================================================

class TestCartRepository:

    def test_add_same_product_increments_quantity(self, session, customer, products):
        earrings, _ = products
        repo = CartRepository(session)

        repo.add(customer.id, earrings.id, 1)
        session.commit()
        repo.add(customer.id, earrings.id, 2)
        session.commit()

        lines = repo.list_with_products(customer.id)
        assert len(lines) == 1
        item, product = lines[0]
        assert item.quantity == 3
        assert product.id == earrings.id

    def test_list_is_joined_and_ordered(self, session, customer, filled_cart):
        earrings, bangles = filled_cart

        lines = CartRepository(session).list_with_products(customer.id)

        assert [p.id for _, p in lines] == [earrings.id, bangles.id]
        assert [i.quantity for i, _ in lines] == [2, 1]

    def test_add_rejects_non_positive_quantity(self, session, customer, products):
        with pytest.raises(ValueError):
            CartRepository(session).add(customer.id, products[0].id, 0)

    def test_clear_removes_only_that_users_rows(self, session, customer, other_customer, filled_cart):
        earrings, _ = filled_cart
        session.add(CartItem(user_id=other_customer.id, product_id=earrings.id, quantity=1))
        session.commit()

        removed = CartRepository(session).clear(customer.id)
        session.commit()

        assert removed == 2
        assert CartRepository(session).list_with_products(customer.id) == []
        assert len(CartRepository(session).list_with_products(other_customer.id)) == 1


class TestCartSnapshot:

    def test_empty_cart_fails(self, session, customer):
        with pytest.raises(EmptyCart):
            read_cart_snapshot(session, customer.id)

    def test_quantity_above_stock_fails(self, session, customer, products):
        earrings, _ = products
        session.add(CartItem(user_id=customer.id, product_id=earrings.id, quantity=11))
        session.commit()

        with pytest.raises(InsufficientStock) as exc:
            read_cart_snapshot(session, customer.id)
        assert exc.value.available == 10
        assert exc.value.requested == 11


# ============================================================================
# API
# ============================================================================

class TestCartApi:

    def test_requires_authentication(self, client):
        assert client.get("/api/cart").status_code == 401

    def test_add_and_view(self, client, customer_headers, products):
        earrings, _ = products

        res = client.post("/api/cart", json={"productId": earrings.id, "quantity": 2}, headers=customer_headers)
        assert res.status_code == 200
        assert res.json()["quantity"] == 2

        res = client.post("/api/cart", json={"productId": earrings.id}, headers=customer_headers)
        assert res.json()["quantity"] == 3

        res = client.get("/api/cart", headers=customer_headers)
        assert res.status_code == 200
        body = res.json()
        assert len(body) == 1
        assert body[0]["product"]["slug"] == "silver-jhumka-earrings"
        assert body[0]["product"]["price"] == "500.00"

    def test_add_unknown_product(self, client, customer_headers):
        res = client.post("/api/cart", json={"productId": 999}, headers=customer_headers)
        assert res.status_code == 404

    def test_update_quantity(self, client, customer_headers, filled_cart):
        item_id = client.get("/api/cart", headers=customer_headers).json()[0]["id"]

        res = client.patch(f"/api/cart/{item_id}", json={"quantity": 5}, headers=customer_headers)

        assert res.status_code == 200
        assert res.json()["quantity"] == 5

    def test_update_to_zero_removes(self, client, customer_headers, filled_cart):
        item_id = client.get("/api/cart", headers=customer_headers).json()[0]["id"]

        res = client.patch(f"/api/cart/{item_id}", json={"quantity": 0}, headers=customer_headers)

        assert res.status_code == 204
        assert len(client.get("/api/cart", headers=customer_headers).json()) == 1

    def test_remove(self, client, customer_headers, filled_cart):
        item_id = client.get("/api/cart", headers=customer_headers).json()[0]["id"]

        res = client.delete(f"/api/cart/{item_id}", headers=customer_headers)

        assert res.status_code == 204
        assert len(client.get("/api/cart", headers=customer_headers).json()) == 1

    def test_cannot_touch_someone_elses_item(self, client, other_headers, customer_headers, filled_cart):
        item_id = client.get("/api/cart", headers=customer_headers).json()[0]["id"]
        other = other_headers

        assert client.patch(f"/api/cart/{item_id}", json={"quantity": 1}, headers=other).status_code == 404
        assert client.delete(f"/api/cart/{item_id}", headers=other).status_code == 404
