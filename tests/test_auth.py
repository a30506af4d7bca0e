from datetime import timedelta

from argon2 import PasswordHasher

from app.utils.hash import hash_password, needs_rehash, verify_password
from app.utils.token import token_for_user


class TestPasswordHashing:

    def test_round_trip(self):
        stored = hash_password("gold-and-silver")

        assert stored.startswith("$argon2id$")
        assert verify_password("gold-and-silver", stored)
        assert not verify_password("wrong", stored)

    def test_salted(self):
        assert hash_password("same") != hash_password("same")

    def test_malformed_hash(self):
        assert verify_password("anything", "not-a-hash") is False

    def test_weaker_parameters_need_rehash(self):
        weak = PasswordHasher(time_cost=1, memory_cost=8192, parallelism=1).hash("same")

        assert verify_password("same", weak)
        assert needs_rehash(weak)
        assert not needs_rehash(hash_password("same"))


class TestAuthApi:

    def test_register_login_and_me(self, client):
        res = client.post("/api/register", json={"username": "meera", "password": "secret123"})
        assert res.status_code == 201
        assert res.json()["token_type"] == "bearer"
        assert res.json()["user"]["username"] == "meera"

        res = client.post("/api/login", json={"username": "meera", "password": "secret123"})
        assert res.status_code == 200
        token = res.json()["access_token"]

        res = client.get("/api/user", headers={"Authorization": f"Bearer {token}"})
        assert res.status_code == 200
        assert res.json()["username"] == "meera"
        assert res.json()["isAdmin"] is False

    def test_duplicate_username(self, client, customer):
        res = client.post("/api/register", json={"username": "priya", "password": "secret123"})

        assert res.status_code == 400

    def test_wrong_password(self, client, customer):
        res = client.post("/api/login", json={"username": "priya", "password": "nope"})

        assert res.status_code == 401

    def test_bad_token(self, client):
        res = client.get("/api/user", headers={"Authorization": "Bearer garbage"})

        assert res.status_code == 401

    def test_disabled_account(self, client, session, customer, customer_headers):
        customer.can_login = False
        session.add(customer)
        session.commit()

        assert client.get("/api/user", headers=customer_headers).status_code == 403

    def test_expired_token(self, client, customer):
        token = token_for_user(customer, timedelta(seconds=-5))

        res = client.get("/api/user", headers={"Authorization": f"Bearer {token}"})

        assert res.status_code == 401

    def test_login_upgrades_weak_hash(self, client, session, customer):
        customer.password = PasswordHasher(time_cost=1, memory_cost=8192, parallelism=1).hash("secret123")
        session.add(customer)
        session.commit()

        res = client.post("/api/login", json={"username": "priya", "password": "secret123"})

        assert res.status_code == 200
        session.refresh(customer)
        assert not needs_rehash(customer.password)
        assert verify_password("secret123", customer.password)
