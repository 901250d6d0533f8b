"""Tests for user CRUD and status routes."""

import unittest
from unittest.mock import patch, MagicMock
import sys
from pathlib import Path

# test_users_routes.py is at <root>/src/api/tests/, src is 3 levels up
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from fastapi.testclient import TestClient
from api.main import app
from api.dependencies import get_event_publisher, get_user_service
from adapter.fake.event_publisher import FakeEventPublisher
from adapter.fake.user_repository import FakeUserRepository
from adapter.security.hmac_hasher import HmacPasswordHasher
from domain.model.errors import StorageError
from services.user_service import UserService

CREATE_BODY = {
    "first_name": "firstname",
    "last_name": "lastname",
    "nickname": "nickname",
    "email": "test@email.com",
    "password": "my_test_password",
    "country": "EN",
}


class UsersRouteTestCase(unittest.TestCase):
    def setUp(self):
        self.client = TestClient(app)
        self.repo = FakeUserRepository()
        self.publisher = FakeEventPublisher()
        self.service = UserService(self.repo, self.publisher, HmacPasswordHasher('TestSecretKey'))
        app.dependency_overrides[get_user_service] = lambda: self.service

    def tearDown(self):
        app.dependency_overrides.clear()

    def _create(self, **overrides) -> dict:
        response = self.client.post("/users", json={**CREATE_BODY, **overrides})
        self.assertEqual(response.status_code, 201)
        return response.json()["user"]


class TestStatusRoute(unittest.TestCase):
    def test_status_is_up_without_dependencies(self):
        response = TestClient(app).get("/status")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "UP")
        self.assertIn("message", response.json())


class TestHealthRoute(unittest.TestCase):
    def tearDown(self):
        app.dependency_overrides.clear()

    @patch('api.routes.health.get_mongodb_client')
    def test_health_all_dependencies_up(self, mock_get_client):
        mock_get_client.return_value = MagicMock()
        app.dependency_overrides[get_event_publisher] = lambda: FakeEventPublisher()

        response = TestClient(app).get("/health")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "healthy")

    @patch('api.routes.health.get_mongodb_client')
    def test_health_degraded_when_redis_down(self, mock_get_client):
        mock_get_client.return_value = MagicMock()
        app.dependency_overrides[get_event_publisher] = lambda: FakeEventPublisher(fail=True)

        response = TestClient(app).get("/health")

        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json()["services"]["redis"]["status"], "unhealthy")


class TestCreateUserRoute(UsersRouteTestCase):
    def test_create_user(self):
        user = self._create()

        self.assertTrue(user["id"])
        self.assertEqual(user["country"], "EN")
        self.assertEqual(user["first_name"], "firstname")
        self.assertNotIn("password", user)
        self.assertNotIn("password_hash", user)

    def test_create_user_unknown_country_returns_400(self):
        response = self.client.post("/users", json={**CREATE_BODY, "country": "UNKNOWN"})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "Received country is not valid")
        self.assertEqual(self.repo.store, {})

    def test_create_user_missing_country_returns_400(self):
        body = {k: v for k, v in CREATE_BODY.items() if k != "country"}

        response = self.client.post("/users", json=body)

        self.assertEqual(response.status_code, 400)

    def test_create_user_storage_failure_returns_500(self):
        repo = MagicMock()
        repo.create.side_effect = StorageError("write concern error")
        self.service.repo = repo

        response = self.client.post("/users", json=CREATE_BODY)

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()["detail"], "write concern error")


class TestGetUsersRoute(UsersRouteTestCase):
    def test_get_users_with_filter(self):
        en_user = self._create(country="EN")
        self._create(country="IT")

        response = self.client.get("/users", params={"filter_country": "EN", "page": 0, "page_size": 10})

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual([u["id"] for u in data["results"]], [en_user["id"]])
        self.assertEqual(data["total_count"], 1)
        self.assertEqual(data["page"], 0)
        self.assertEqual(data["page_size"], 10)

    def test_get_users_repeatable(self):
        self._create()
        self._create(country="FR")

        first = self.client.get("/users", params={"page": 0, "page_size": 10})
        second = self.client.get("/users", params={"page": 0, "page_size": 10})

        self.assertEqual(first.content, second.content)

    def test_get_users_invalid_page_returns_500(self):
        response = self.client.get("/users", params={"page": -1, "page_size": 10})

        self.assertEqual(response.status_code, 500)


class TestUpdateUserRoute(UsersRouteTestCase):
    def test_update_user_partial(self):
        user = self._create()

        response = self.client.patch(f"/users/{user['id']}", json={"nickname": "Unickname"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {})
        stored = self.repo.get_by_id(user["id"])
        self.assertEqual(stored.nickname, "Unickname")
        self.assertEqual(stored.first_name, "firstname")

    def test_update_user_unknown_country_returns_400(self):
        user = self._create()

        response = self.client.patch(f"/users/{user['id']}", json={"country": "UNKNOWN"})

        self.assertEqual(response.status_code, 400)

    def test_update_missing_user_returns_500(self):
        response = self.client.patch("/users/missing-id", json={"nickname": "x"})

        self.assertEqual(response.status_code, 500)
        self.assertIn("missing-id", response.json()["detail"])


class TestDeleteUserRoute(UsersRouteTestCase):
    def test_delete_user(self):
        user = self._create()

        response = self.client.delete(f"/users/{user['id']}")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {})

    def test_delete_missing_user_returns_404(self):
        response = self.client.delete("/users/missing-id")

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["detail"], "user missing-id not found")


class TestUserCrudFlowOverHttp(UsersRouteTestCase):
    def test_crud_flow(self):
        user = self._create(country="EN")
        user_id = user["id"]

        en = self.client.get("/users", params={"filter_country": "EN", "page": 0, "page_size": 10}).json()
        self.assertEqual([u["id"] for u in en["results"]], [user_id])

        response = self.client.patch(f"/users/{user_id}", json={"country": "IT"})
        self.assertEqual(response.status_code, 200)

        it = self.client.get("/users", params={"filter_country": "IT", "page": 0, "page_size": 10}).json()
        self.assertEqual(len(it["results"]), 1)
        self.assertEqual(it["results"][0]["country"], "IT")

        en = self.client.get("/users", params={"filter_country": "EN", "page": 0, "page_size": 10}).json()
        self.assertEqual(en["results"], [])

        self.assertEqual(self.client.delete(f"/users/{user_id}").status_code, 200)

        remaining = self.client.get("/users", params={"page": 0, "page_size": 10}).json()
        self.assertEqual(remaining["results"], [])
        self.assertEqual(self.publisher.messages, [
            f"Created user {user_id}",
            f"Updated user {user_id}",
            f"Deleted user {user_id}",
        ])


if __name__ == '__main__':
    unittest.main()
