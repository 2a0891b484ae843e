"""HTTP tests for the account routes: envelope, auth gate, and error mapping."""

import unittest
from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock
from uuid import uuid4

from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from user_service.api.v1.auth import get_signature_validator, get_token_service, get_user_service
from user_service.core.config import settings
from user_service.core.database import get_db
from user_service.core.errors import DuplicateAccountError
from user_service.core.security import PasswordHasher
from user_service.core.signature import SignatureValidator
from user_service.core.tokens import TokenService
from user_service.main import app
from user_service.models.role import ADMIN_ROLE_ID
from user_service.repositories.database import SqlAlchemyUserRepository
from user_service.repositories.memory import InMemoryUserRepository
from user_service.schemas.users import AccountCreate, RegisterRequest
from user_service.services.users import UserService

PREFIX = "/api/v1/auth"

SIGNUP_BODY = {
    "name": "Jane Doe",
    "username": "jane",
    "password": "password123",
    "confirmPassword": "password123",
    "email": "jane@example.com",
    "phoneNumber": "0800123",
}


class ApiTestCase(unittest.TestCase):
    """Wires the app to an in-memory repository and fixed secrets."""

    def setUp(self) -> None:
        self.repo = InMemoryUserRepository()
        self.hasher = PasswordHasher(rounds=4)
        self.tokens = TokenService("test-secret", expire_minutes=5)
        self.signatures = SignatureValidator("sig-key")
        self.service = UserService(self.repo, self.hasher, self.tokens)
        app.dependency_overrides[get_user_service] = lambda: self.service
        app.dependency_overrides[get_token_service] = lambda: self.tokens
        app.dependency_overrides[get_signature_validator] = lambda: self.signatures
        limiter = getattr(app.state, "rate_limiter", None)
        if limiter is not None:
            limiter.reset()
        self.client = TestClient(app, raise_server_exceptions=False)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()

    def _signup(self, **overrides: str):
        return self.client.post(f"{PREFIX}/signup", json={**SIGNUP_BODY, **overrides})

    def _signin(self, email: str = "jane@example.com", password: str = "password123"):
        return self.client.post(f"{PREFIX}/signin", json={"email": email, "password": password})

    def _headers(self, token: str) -> dict[str, str]:
        return {
            "Authorization": token,
            "x-service-name": "svc",
            "x-request-at": "123",
            "x-api-key": self.signatures.compute("svc", "123"),
        }

    def _login_headers(self) -> dict[str, str]:
        self._signup()
        return self._headers(self._signin().json()["token"])


class TestSignUp(ApiTestCase):
    def test_created_profile_without_hash_or_role(self) -> None:
        res = self._signup()
        self.assertEqual(res.status_code, 201)
        body = res.json()
        self.assertEqual(body["status"], "success")
        self.assertNotIn("token", body)
        data = body["data"]
        self.assertEqual(
            set(data), {"uuid", "name", "username", "email", "phoneNumber"}
        )
        self.assertEqual(data["phoneNumber"], "0800123")

    def test_duplicate_username(self) -> None:
        self._signup()
        res = self._signup(email="other@example.com")
        self.assertEqual(res.status_code, 409)
        self.assertEqual(res.json(), {"status": "error", "message": "username already exists"})

    def test_duplicate_email(self) -> None:
        self._signup()
        res = self._signup(username="other")
        self.assertEqual(res.status_code, 409)
        self.assertEqual(res.json()["message"], "email already exists")

    def test_password_mismatch(self) -> None:
        res = self._signup(confirmPassword="different")
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.json()["message"], "password does not match")

    def test_missing_fields(self) -> None:
        body = dict(SIGNUP_BODY)
        del body["confirmPassword"]
        res = self.client.post(f"{PREFIX}/signup", json=body)
        self.assertEqual(res.status_code, 422)
        payload = res.json()
        self.assertEqual(payload["status"], "error")
        self.assertEqual(payload["message"], "Unprocessable Entity")
        self.assertIn("confirmPassword", [e["field"] for e in payload["data"]])


class TestSignIn(ApiTestCase):
    def test_success(self) -> None:
        self._signup()
        res = self._signin()
        self.assertEqual(res.status_code, 200)
        body = res.json()
        self.assertEqual(body["message"], "OK")
        self.assertEqual(body["data"]["role"], "customer")
        self.assertEqual(body["token"].count(" "), 1)
        self.assertTrue(body["token"].startswith("Bearer "))

    def test_wrong_password(self) -> None:
        self._signup()
        res = self._signin(password="wrong")
        self.assertEqual(res.status_code, 401)
        self.assertNotIn("token", res.json())

    def test_unknown_email(self) -> None:
        res = self._signin(email="nobody@example.com")
        self.assertEqual(res.status_code, 401)


class TestAuthGateRoutes(ApiTestCase):
    def test_current_user(self) -> None:
        headers = self._login_headers()
        res = self.client.get(f"{PREFIX}/user", headers=headers)
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()["data"]["username"], "jane")
        self.assertEqual(res.json()["data"]["role"], "customer")

    def test_missing_token(self) -> None:
        headers = self._login_headers()
        del headers["Authorization"]
        res = self.client.get(f"{PREFIX}/user", headers=headers)
        self.assertEqual(res.status_code, 401)
        self.assertEqual(res.json(), {"status": "error", "message": "unauthorized"})

    def test_bad_api_key(self) -> None:
        headers = self._login_headers()
        headers["x-api-key"] = "0" * 64
        res = self.client.get(f"{PREFIX}/user", headers=headers)
        self.assertEqual(res.status_code, 401)

    def test_expired_token(self) -> None:
        profile = self.service.register(RegisterRequest.model_validate(SIGNUP_BODY))
        snapshot = profile.model_copy(update={"role": "customer"})
        expired = self.tokens.issue(snapshot, datetime.now(UTC) - timedelta(minutes=1))
        res = self.client.get(f"{PREFIX}/user", headers=self._headers(f"Bearer {expired}"))
        self.assertEqual(res.status_code, 401)
        self.assertEqual(res.json()["message"], "token has expired")

    def test_token_without_scheme(self) -> None:
        headers = self._login_headers()
        headers["Authorization"] = headers["Authorization"].split(" ")[1]
        res = self.client.get(f"{PREFIX}/cust", headers=headers)
        self.assertEqual(res.status_code, 401)


class TestProtectedRoutes(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.headers = self._login_headers()
        self.jane_uuid = self.repo.find_by_username("jane").uuid

    def test_get_by_uuid_omits_role(self) -> None:
        res = self.client.get(f"{PREFIX}/{self.jane_uuid}", headers=self.headers)
        self.assertEqual(res.status_code, 200)
        data = res.json()["data"]
        self.assertEqual(data["uuid"], str(self.jane_uuid))
        self.assertNotIn("role", data)

    def test_get_unknown_uuid(self) -> None:
        res = self.client.get(f"{PREFIX}/{uuid4()}", headers=self.headers)
        self.assertEqual(res.status_code, 404)
        self.assertEqual(res.json()["message"], "user not found")

    def test_get_malformed_uuid(self) -> None:
        res = self.client.get(f"{PREFIX}/not-a-uuid", headers=self.headers)
        self.assertEqual(res.status_code, 422)

    def test_listings(self) -> None:
        self.repo.create(
            AccountCreate(
                name="Root",
                username="root",
                email="root@example.com",
                phone_number="0",
                password_hash="x",
                role_id=ADMIN_ROLE_ID,
            )
        )
        customers = self.client.get(f"{PREFIX}/cust", headers=self.headers).json()["data"]
        admins = self.client.get(f"{PREFIX}/admin", headers=self.headers).json()["data"]
        everyone = self.client.get(f"{PREFIX}/users", headers=self.headers).json()["data"]
        self.assertEqual([u["username"] for u in customers], ["jane"])
        self.assertEqual([u["username"] for u in admins], ["root"])
        self.assertEqual([u["role"] for u in everyone], ["Customer", "Administrator"])

    def test_empty_listing(self) -> None:
        res = self.client.get(f"{PREFIX}/admin", headers=self.headers)
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()["data"], [])

    def test_update(self) -> None:
        res = self.client.put(
            f"{PREFIX}/{self.jane_uuid}",
            json={"name": "Jane Smith", "username": "jane"},
            headers=self.headers,
        )
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()["data"]["name"], "Jane Smith")

    def test_update_to_taken_username(self) -> None:
        self._signup(username="john", email="john@example.com")
        res = self.client.put(
            f"{PREFIX}/{self.jane_uuid}", json={"username": "john"}, headers=self.headers
        )
        self.assertEqual(res.status_code, 409)

    def test_update_requires_auth(self) -> None:
        res = self.client.put(f"{PREFIX}/{self.jane_uuid}", json={"name": "x"})
        self.assertEqual(res.status_code, 401)


class TestErrorBoundary(ApiTestCase):
    def test_unexpected_error_is_generic_500(self) -> None:
        broken = MagicMock()
        broken.login.side_effect = RuntimeError("db password is hunter2")
        app.dependency_overrides[get_user_service] = lambda: broken
        res = self._signin()
        self.assertEqual(res.status_code, 500)
        self.assertEqual(res.json(), {"status": "error", "message": "internal server error"})

    def test_lost_uniqueness_race_is_409(self) -> None:
        repo = MagicMock()
        repo.find_by_username.return_value = None
        repo.find_by_email.return_value = None
        repo.create.side_effect = DuplicateAccountError()
        app.dependency_overrides[get_user_service] = lambda: UserService(repo, self.hasher, self.tokens)
        res = self._signup()
        self.assertEqual(res.status_code, 409)
        self.assertEqual(
            res.json(), {"status": "error", "message": "username or email already exists"}
        )

    def test_storage_failure_is_generic_500(self) -> None:
        session = MagicMock()
        session.query.return_value.filter.return_value.first.side_effect = OperationalError(
            "SELECT", {}, Exception("connection to 10.0.0.5 refused")
        )
        service = UserService(SqlAlchemyUserRepository(session), self.hasher, self.tokens)
        app.dependency_overrides[get_user_service] = lambda: service
        res = self._signin()
        self.assertEqual(res.status_code, 500)
        self.assertEqual(
            res.json(),
            {"status": "error", "message": "database server failed to execute query"},
        )
        self.assertNotIn("10.0.0.5", res.text)

    def test_unknown_path(self) -> None:
        res = self.client.get("/api/v1/nope")
        self.assertEqual(res.status_code, 404)
        self.assertEqual(res.json()["message"], "Path Not Found")

    def test_root(self) -> None:
        res = self.client.get("/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()["status"], "success")


class TestHealth(ApiTestCase):
    def test_health_reports_database(self) -> None:
        db = MagicMock()
        app.dependency_overrides[get_db] = lambda: db
        res = self.client.get("/api/v1/health")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()["database"], "connected")
        db.execute.assert_called_once()


@unittest.skipUnless(
    settings.RATE_LIMIT_ENABLED and settings.APP_ENV == "dev", "needs rate limiting and dev CORS"
)
class TestRateLimitWiring(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.limiter = app.state.rate_limiter
        self.saved_max = self.limiter.max_requests
        self.limiter.max_requests = 1

    def tearDown(self) -> None:
        self.limiter.max_requests = self.saved_max
        self.limiter.reset()
        super().tearDown()

    def test_rejection_carries_cors_headers(self) -> None:
        origin = {"Origin": "http://localhost:3000"}
        self.assertEqual(self.client.get("/", headers=origin).status_code, 200)
        res = self.client.get("/", headers=origin)
        self.assertEqual(res.status_code, 429)
        self.assertIn("access-control-allow-origin", res.headers)

    def test_preflight_is_not_counted(self) -> None:
        preflight = {
            "Origin": "http://localhost:3000",
            "Access-Control-Request-Method": "POST",
        }
        for _ in range(3):
            self.assertEqual(self.client.options(f"{PREFIX}/signin", headers=preflight).status_code, 200)
        self.assertEqual(self.client.get("/").status_code, 200)


if __name__ == "__main__":
    unittest.main()
