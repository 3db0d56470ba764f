import pytest

from lms.core.config import Settings
from lms.core.exceptions import ConfigurationError
from tests.conftest import auth_headers

REQUIRED = {"JWT_SECRET": "x", "EMAIL_FROM": "a@test.com", "EMAIL_PASSWORD": "pw"}


class TestHealth:
    def test_live(self, client):
        assert client.get("/health/live").json() == {"status": "ok"}

    def test_db(self, client):
        resp = client.get("/health/db")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}


class TestErrorBodies:
    def test_validation_error_is_400(self, client, admin):
        resp = client.post("/departments", json={}, headers=auth_headers(admin))
        assert resp.status_code == 400
        body = resp.json()
        assert body["code"] == "invalid_request"
        assert body["error"] == "invalid request"
        assert isinstance(body["details"], list)

    def test_not_found_shape(self, client):
        body = client.get("/courses/404").json()
        assert body == {"error": "course not found", "code": "course_not_found"}

    def test_bad_path_param(self, client):
        resp = client.get("/courses/not-a-number")
        assert resp.status_code == 400


class TestDepartmentsCrud:
    def test_admin_lifecycle(self, client, admin):
        headers = auth_headers(admin)
        created = client.post(
            "/departments", json={"name": "Physics", "description": "atoms"}, headers=headers
        ).json()

        resp = client.put(f"/departments/{created['id']}", json={"name": "Astrophysics"}, headers=headers)
        assert resp.json()["name"] == "Astrophysics"
        assert resp.json()["description"] == "atoms"

        assert [d["name"] for d in client.get("/departments").json()] == ["Astrophysics"]

        resp = client.delete(f"/departments/{created['id']}", headers=headers)
        assert resp.status_code == 200
        assert client.get(f"/departments/{created['id']}").status_code == 404


class TestSettings:
    def test_components_build_dsn(self):
        s = Settings(
            _env_file=None,
            DATABASE_URL=None,
            DB_USER="lms",
            DB_PASS="pw",
            DB_HOST="db",
            DB_PORT="5432",
            DB_NAME="lms",
            **REQUIRED,
        )
        assert s.database_url == "postgresql+psycopg2://lms:pw@db:5432/lms"

    def test_missing_components_raise(self):
        s = Settings(
            _env_file=None,
            DATABASE_URL=None,
            DB_USER="lms",
            DB_PASS=None,
            DB_HOST=None,
            DB_PORT=None,
            DB_NAME=None,
            **REQUIRED,
        )
        with pytest.raises(ConfigurationError) as exc:
            s.database_url
        assert "DB_PASS" in str(exc.value)

    def test_cors_origins_split(self):
        s = Settings(_env_file=None, CORS_ORIGINS="http://a, http://b,", **REQUIRED)
        assert s.cors_origins == ["http://a", "http://b"]
