"""HTTP tests for the auth and inventory endpoints through FastAPI's TestClient."""

import shutil
import tempfile
import unittest
from pathlib import Path

from fastapi.testclient import TestClient
from pydantic import SecretStr

from sweetshop.application import create_app
from sweetshop.core.config import Settings

CHOC = {"name": "Choc", "category": "Chocolate", "price": 5.00, "quantity": 3}


class ApiTestCase(unittest.TestCase):
    """App wired to a fresh SQLite file database, with one admin and one regular user."""

    def setUp(self) -> None:
        self.tmpdir = tempfile.mkdtemp()
        settings = Settings(
            _env_file=None,
            APP_ENV="dev",
            DATABASE_URL=f"sqlite:///{Path(self.tmpdir) / 'api.db'}",
            DB_AUTO_CREATE=True,
            JWT_SECRET=SecretStr("api-test-secret"),
            BCRYPT_ROUNDS=4,
            API_PREFIX="/api",
        )
        self.app = create_app(settings)
        self.client = TestClient(self.app)
        self.admin = self.register("admin_user", "adminpass", role="admin")
        self.user = self.register("plain_user", "userpass")

    def tearDown(self) -> None:
        self.client.close()
        self.app.state.engine.dispose()
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def register(self, username: str, password: str, role: str | None = None) -> dict[str, str]:
        """Register and return Authorization headers for the new account."""
        body = {"username": username, "password": password}
        if role is not None:
            body["role"] = role
        res = self.client.post("/api/auth/register", json=body)
        self.assertEqual(res.status_code, 201, res.text)
        return {"Authorization": f"Bearer {res.json()['token']}"}

    def create_sweet(self, **overrides: object) -> dict:
        res = self.client.post("/api/sweets", json={**CHOC, **overrides}, headers=self.admin)
        self.assertEqual(res.status_code, 201, res.text)
        return res.json()

    def error_fields(self, res) -> list[str]:
        return sorted(e["field"] for e in res.json()["errors"])


class TestRegister(ApiTestCase):
    def test_register_returns_token_and_user_without_password(self) -> None:
        res = self.client.post("/api/auth/register", json={"username": "alice", "password": "password1"})
        self.assertEqual(res.status_code, 201)
        data = res.json()
        self.assertTrue(data["token"])
        self.assertEqual(data["user"]["username"], "alice")
        self.assertEqual(data["user"]["role"], "user")
        self.assertNotIn("password", data["user"])
        self.assertNotIn("password_hash", data["user"])

    def test_duplicate_username_conflicts(self) -> None:
        """Scenario B: second registration of the same name gives 409."""
        first = self.client.post("/api/auth/register", json={"username": "alice", "password": "password1"})
        self.assertEqual(first.status_code, 201)
        second = self.client.post("/api/auth/register", json={"username": "alice", "password": "password1"})
        self.assertEqual(second.status_code, 409)
        self.assertEqual(second.json(), {"message": "Username already exists"})

    def test_invalid_fields_all_reported(self) -> None:
        res = self.client.post(
            "/api/auth/register",
            json={"username": "al", "password": "123", "role": "owner"},
        )
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.json()["message"], "Validation failed")
        self.assertEqual(self.error_fields(res), ["password", "role", "username"])

    def test_token_from_register_is_usable(self) -> None:
        headers = self.register("bob_the_buyer", "secret1")
        self.assertEqual(self.client.get("/api/sweets", headers=headers).status_code, 200)


class TestLogin(ApiTestCase):
    def test_login_success(self) -> None:
        res = self.client.post("/api/auth/login", json={"username": "plain_user", "password": "userpass"})
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()["user"]["username"], "plain_user")
        token = res.json()["token"]
        listed = self.client.get("/api/sweets", headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(listed.status_code, 200)

    def test_wrong_password_and_unknown_user_look_the_same(self) -> None:
        wrong = self.client.post("/api/auth/login", json={"username": "plain_user", "password": "nope"})
        unknown = self.client.post("/api/auth/login", json={"username": "ghost", "password": "nope"})
        self.assertEqual(wrong.status_code, 401)
        self.assertEqual(unknown.status_code, 401)
        self.assertEqual(wrong.json(), unknown.json())

    def test_missing_fields_rejected(self) -> None:
        res = self.client.post("/api/auth/login", json={"username": ""})
        self.assertEqual(res.status_code, 400)
        self.assertEqual(self.error_fields(res), ["password", "username"])


class TestAuthenticationGate(ApiTestCase):
    def test_missing_header(self) -> None:
        res = self.client.get("/api/sweets")
        self.assertEqual(res.status_code, 401)
        self.assertEqual(res.json(), {"message": "Authentication required"})
        self.assertEqual(res.headers.get("www-authenticate"), "Bearer")

    def test_non_bearer_scheme(self) -> None:
        res = self.client.get("/api/sweets", headers={"Authorization": "Basic YWxpY2U6cHc="})
        self.assertEqual(res.status_code, 401)

    def test_invalid_token(self) -> None:
        res = self.client.get("/api/sweets", headers={"Authorization": "Bearer not-a-jwt"})
        self.assertEqual(res.status_code, 401)
        self.assertEqual(res.json(), {"message": "Invalid or expired token"})

    def test_unauthenticated_before_forbidden(self) -> None:
        res = self.client.delete("/api/sweets/1")
        self.assertEqual(res.status_code, 401)


class TestSweetsCrud(ApiTestCase):
    def test_create_and_list(self) -> None:
        created = self.create_sweet()
        self.assertEqual({k: created[k] for k in CHOC}, CHOC)
        self.assertIsInstance(created["id"], int)
        listed = self.client.get("/api/sweets", headers=self.user)
        self.assertEqual(listed.status_code, 200)
        self.assertEqual(listed.json(), [created])

    def test_price_and_quantity_are_json_numbers(self) -> None:
        created = self.create_sweet(price=2.5, quantity=10)
        self.assertIsInstance(created["price"], float)
        self.assertIsInstance(created["quantity"], int)

    def test_regular_user_may_create(self) -> None:
        res = self.client.post("/api/sweets", json=CHOC, headers=self.user)
        self.assertEqual(res.status_code, 201)

    def test_create_reports_every_invalid_field(self) -> None:
        res = self.client.post(
            "/api/sweets",
            json={"name": "", "category": "Gum", "price": 0, "quantity": -1},
            headers=self.user,
        )
        self.assertEqual(res.status_code, 400)
        self.assertEqual(self.error_fields(res), ["category", "name", "price", "quantity"])

    def test_non_finite_price_rejected(self) -> None:
        for literal in ("Infinity", "-Infinity", "NaN"):
            body = f'{{"name": "Choc", "category": "Chocolate", "price": {literal}, "quantity": 3}}'
            res = self.client.post(
                "/api/sweets",
                content=body,
                headers={"Content-Type": "application/json", **self.user},
            )
            self.assertEqual(res.status_code, 400, literal)
            self.assertEqual(self.error_fields(res), ["price"])

    def test_price_must_be_a_json_number(self) -> None:
        for price in ("5", "5.00", True, None):
            res = self.client.post("/api/sweets", json={**CHOC, "price": price}, headers=self.user)
            self.assertEqual(res.status_code, 400, price)
            self.assertEqual(self.error_fields(res), ["price"])

    def test_price_fits_the_stored_column(self) -> None:
        for price in (1.234, 0.001, 1e8, 1e20):
            res = self.client.post("/api/sweets", json={**CHOC, "price": price}, headers=self.user)
            self.assertEqual(res.status_code, 400, price)
            self.assertEqual(self.error_fields(res), ["price"])
        self.assertEqual(self.create_sweet(price=5)["price"], 5.0)
        self.assertEqual(self.create_sweet(price=99999999.99)["price"], 99999999.99)

    def test_quantity_fits_the_stored_column(self) -> None:
        for quantity in (10**20, 2**31, True):
            res = self.client.post("/api/sweets", json={**CHOC, "quantity": quantity}, headers=self.user)
            self.assertEqual(res.status_code, 400, quantity)
            self.assertEqual(self.error_fields(res), ["quantity"])
        self.assertEqual(self.create_sweet(quantity=2**31 - 1)["quantity"], 2**31 - 1)

    def test_create_missing_body(self) -> None:
        res = self.client.post("/api/sweets", headers=self.user)
        self.assertEqual(res.status_code, 400)

    def test_list_is_repeatable(self) -> None:
        self.create_sweet(name="A")
        self.create_sweet(name="B")
        first = self.client.get("/api/sweets", headers=self.user).json()
        second = self.client.get("/api/sweets", headers=self.user).json()
        self.assertEqual(first, second)
        self.assertEqual([s["name"] for s in first], ["A", "B"])

    def test_update_replaces_fields(self) -> None:
        sweet = self.create_sweet()
        new = {"name": "Fudge", "category": "Other", "price": 2.25, "quantity": 0}
        res = self.client.put(f"/api/sweets/{sweet['id']}", json=new, headers=self.user)
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json(), {"id": sweet["id"], **new})

    def test_update_missing_is_not_found(self) -> None:
        res = self.client.put("/api/sweets/999", json=CHOC, headers=self.user)
        self.assertEqual(res.status_code, 404)
        self.assertEqual(res.json(), {"message": "Sweet not found"})

    def test_update_validates_before_lookup(self) -> None:
        res = self.client.put("/api/sweets/999", json={**CHOC, "price": -1}, headers=self.user)
        self.assertEqual(res.status_code, 400)
        self.assertEqual(self.error_fields(res), ["price"])

    def test_delete_as_admin(self) -> None:
        sweet = self.create_sweet()
        res = self.client.delete(f"/api/sweets/{sweet['id']}", headers=self.admin)
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json(), {"message": "Sweet deleted successfully"})
        self.assertEqual(self.client.get("/api/sweets", headers=self.admin).json(), [])

    def test_delete_as_user_forbidden(self) -> None:
        sweet = self.create_sweet()
        res = self.client.delete(f"/api/sweets/{sweet['id']}", headers=self.user)
        self.assertEqual(res.status_code, 403)
        self.assertEqual(res.json(), {"message": "Admin access required"})
        self.assertEqual(len(self.client.get("/api/sweets", headers=self.user).json()), 1)

    def test_delete_missing_is_not_found(self) -> None:
        """Scenario E."""
        res = self.client.delete("/api/sweets/999", headers=self.admin)
        self.assertEqual(res.status_code, 404)

    def test_non_integer_id_is_validation_error(self) -> None:
        res = self.client.post("/api/sweets/abc/purchase", headers=self.user)
        self.assertEqual(res.status_code, 400)
        self.assertEqual(self.error_fields(res), ["sweet_id"])


class TestPurchase(ApiTestCase):
    def test_scenario_purchase_until_out_of_stock(self) -> None:
        """Scenario A: three purchases succeed, the fourth is a business-rule 400."""
        sweet = self.create_sweet()
        quantities = []
        for _ in range(3):
            res = self.client.post(f"/api/sweets/{sweet['id']}/purchase", headers=self.user)
            self.assertEqual(res.status_code, 200)
            quantities.append(res.json()["quantity"])
        self.assertEqual(quantities, [2, 1, 0])

        res = self.client.post(f"/api/sweets/{sweet['id']}/purchase", headers=self.user)
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.json(), {"message": "Item is out of stock"})
        listed = self.client.get("/api/sweets", headers=self.user).json()
        self.assertEqual(listed[0]["quantity"], 0)

    def test_purchase_missing_is_not_found(self) -> None:
        res = self.client.post("/api/sweets/999/purchase", headers=self.user)
        self.assertEqual(res.status_code, 404)

    def test_purchase_requires_authentication(self) -> None:
        sweet = self.create_sweet()
        res = self.client.post(f"/api/sweets/{sweet['id']}/purchase")
        self.assertEqual(res.status_code, 401)


class TestRestock(ApiTestCase):
    def test_restock_then_purchase(self) -> None:
        sweet = self.create_sweet(quantity=0)
        res = self.client.post(f"/api/sweets/{sweet['id']}/restock", json={"amount": 5}, headers=self.admin)
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()["quantity"], 5)
        for _ in range(2):
            self.client.post(f"/api/sweets/{sweet['id']}/purchase", headers=self.user)
        listed = self.client.get("/api/sweets", headers=self.user).json()
        self.assertEqual(listed[0]["quantity"], 3)

    def test_non_admin_forbidden_regardless_of_id(self) -> None:
        """Scenario C: existing id, missing id and malformed id all give 403."""
        sweet = self.create_sweet()
        for sweet_id in (sweet["id"], 999, "abc"):
            res = self.client.post(f"/api/sweets/{sweet_id}/restock", json={"amount": 1}, headers=self.user)
            self.assertEqual(res.status_code, 403, sweet_id)

    def test_non_admin_forbidden_with_invalid_body(self) -> None:
        res = self.client.post("/api/sweets/1/restock", json={"amount": 0}, headers=self.user)
        self.assertEqual(res.status_code, 403)

    def test_invalid_amounts(self) -> None:
        sweet = self.create_sweet()
        for amount in (0, -3, 2.5, "4"):
            res = self.client.post(
                f"/api/sweets/{sweet['id']}/restock", json={"amount": amount}, headers=self.admin
            )
            self.assertEqual(res.status_code, 400, amount)
            self.assertEqual(self.error_fields(res), ["amount"])

    def test_oversized_amount_rejected(self) -> None:
        sweet = self.create_sweet()
        for amount in (2**31, 2**63, 10**20):
            res = self.client.post(
                f"/api/sweets/{sweet['id']}/restock", json={"amount": amount}, headers=self.admin
            )
            self.assertEqual(res.status_code, 400, amount)
            self.assertEqual(self.error_fields(res), ["amount"])

    def test_restock_past_maximum_stock_level_refused(self) -> None:
        sweet = self.create_sweet(quantity=2**31 - 1)
        res = self.client.post(f"/api/sweets/{sweet['id']}/restock", json={"amount": 1}, headers=self.admin)
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.json()["message"], "Restock would exceed the maximum stock level")
        listed = self.client.get("/api/sweets", headers=self.user).json()
        self.assertEqual(listed[0]["quantity"], 2**31 - 1)

    def test_restock_missing_is_not_found(self) -> None:
        res = self.client.post("/api/sweets/999/restock", json={"amount": 1}, headers=self.admin)
        self.assertEqual(res.status_code, 404)


class TestSearch(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.create_sweet(name="Gummy Bears", category="Candy", price=1.0)
        self.create_sweet(name="Lollipop", category="Candy", price=5.0)
        self.create_sweet(name="Jawbreaker", category="Candy", price=6.0)
        self.create_sweet(name="Truffle", category="Chocolate", price=3.0)
        self.create_sweet(name="Vanilla Cone", category="Ice Cream", price=2.0)

    def search(self, **params: object):
        return self.client.get("/api/sweets/search", params=params, headers=self.user)

    def test_category_and_inclusive_price_range(self) -> None:
        """Scenario D."""
        res = self.search(category="Candy", minPrice=1, maxPrice=5)
        self.assertEqual(res.status_code, 200)
        self.assertEqual([s["name"] for s in res.json()], ["Gummy Bears", "Lollipop"])

    def test_name_case_insensitive(self) -> None:
        res = self.search(name="TRUF")
        self.assertEqual([s["name"] for s in res.json()], ["Truffle"])

    def test_category_with_space(self) -> None:
        res = self.search(category="Ice Cream")
        self.assertEqual([s["name"] for s in res.json()], ["Vanilla Cone"])

    def test_no_params_returns_all(self) -> None:
        self.assertEqual(len(self.search().json()), 5)

    def test_unknown_category_rejected(self) -> None:
        res = self.search(category="Gum")
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.json()["message"], "Invalid search parameters")
        self.assertEqual(self.error_fields(res), ["category"])

    def test_non_numeric_price_rejected(self) -> None:
        res = self.search(minPrice="cheap")
        self.assertEqual(res.status_code, 400)
        self.assertEqual(self.error_fields(res), ["minPrice"])

    def test_non_finite_price_bounds_rejected(self) -> None:
        for params in ({"minPrice": "nan"}, {"maxPrice": "inf"}, {"minPrice": "-Infinity"}):
            res = self.search(**params)
            self.assertEqual(res.status_code, 400, params)
            self.assertEqual(res.json()["message"], "Invalid search parameters")
            self.assertEqual(self.error_fields(res), sorted(params))

    def test_inverted_price_range_rejected(self) -> None:
        res = self.search(minPrice=5, maxPrice=1)
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.json()["message"], "Invalid search parameters")
        self.assertEqual(self.error_fields(res), ["minPrice"])

    def test_search_requires_authentication(self) -> None:
        res = self.client.get("/api/sweets/search", params={"name": "a"})
        self.assertEqual(res.status_code, 401)


class TestHealth(ApiTestCase):
    def test_health_reports_database(self) -> None:
        res = self.client.get("/api/health")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json(), {"status": "ok", "environment": "dev", "database": "connected"})


if __name__ == "__main__":
    unittest.main()
