from datetime import datetime, timedelta, timezone

from lms.core.config import settings
from lms.core.security import decode_access_token
from lms.models.user import Role, User

REGISTRATION = {"name": "Alice", "email": "alice@test.com", "password": "secret123"}


def _register(client, **overrides):
    return client.post("/users/register", json={**REGISTRATION, **overrides})


class TestRegister:
    def test_register_creates_pending_entry_only(self, client, db_session, mailer, pending_store):
        resp = _register(client)
        assert resp.status_code == 200, resp.text

        pending = pending_store.get("alice@test.com")
        assert pending is not None
        assert len(pending.code) == 6 and pending.code.isdigit()
        assert pending.role is Role.STUDENT

        # nothing persisted until verification
        assert db_session.query(User).count() == 0

        assert len(mailer.sent) == 1
        to, _subject, body = mailer.sent[0]
        assert to == "alice@test.com"
        assert pending.code in body

    def test_register_existing_email(self, client, student):
        resp = _register(client, email=student.email)
        assert resp.status_code == 400
        assert resp.json()["code"] == "email_exists"

    def test_reregister_replaces_pending_entry(self, client, pending_store):
        _register(client)
        first = pending_store.get("alice@test.com")
        _register(client, name="Alice Again")
        second = pending_store.get("alice@test.com")
        assert second.name == "Alice Again"
        assert len(pending_store) == 1
        assert second is not first

    def test_email_failure_drops_pending_entry(self, client, mailer, pending_store):
        mailer.fail = True
        resp = _register(client)
        assert resp.status_code == 500
        assert resp.json()["code"] == "email_delivery_failed"
        assert pending_store.get("alice@test.com") is None

    def test_short_password_is_rejected(self, client):
        resp = _register(client, password="123")
        assert resp.status_code == 400
        assert resp.json()["code"] == "invalid_request"

    def test_admin_registration_disabled(self, client, monkeypatch):
        monkeypatch.setattr(settings, "ADMIN_REGISTRATION_TOKEN", None)
        resp = _register(client, role="admin")
        assert resp.status_code == 500
        assert resp.json()["code"] == "admin_registration_disabled"

    def test_admin_registration_bad_token(self, client, monkeypatch):
        monkeypatch.setattr(settings, "ADMIN_REGISTRATION_TOKEN", "let-me-in")
        resp = _register(client, role="admin", admin_token="wrong")
        assert resp.status_code == 403
        assert resp.json()["code"] == "invalid_admin_token"

    def test_admin_registration_with_token(self, client, monkeypatch, pending_store):
        monkeypatch.setattr(settings, "ADMIN_REGISTRATION_TOKEN", "let-me-in")
        resp = _register(client, role="admin", admin_token="let-me-in")
        assert resp.status_code == 200, resp.text
        assert pending_store.get("alice@test.com").role is Role.ADMIN


class TestVerifyEmail:
    def test_unknown_email(self, client):
        resp = client.post("/users/verify_email", json={"email": "nobody@test.com", "code": "123456"})
        assert resp.status_code == 400
        assert resp.json()["code"] == "registration_not_found"

    def test_wrong_code_keeps_entry(self, client, pending_store):
        _register(client)
        code = pending_store.get("alice@test.com").code
        wrong = "000000" if code != "000000" else "111111"

        resp = client.post("/users/verify_email", json={"email": "alice@test.com", "code": wrong})
        assert resp.status_code == 400
        assert resp.json()["code"] == "invalid_code"
        assert pending_store.get("alice@test.com") is not None

        # the right code still works afterwards
        resp = client.post("/users/verify_email", json={"email": "alice@test.com", "code": code})
        assert resp.status_code == 200

    def test_expired_code(self, client, pending_store):
        _register(client)
        pending = pending_store.get("alice@test.com")
        pending.expires_at = datetime.now(timezone.utc) - timedelta(seconds=1)

        resp = client.post(
            "/users/verify_email", json={"email": "alice@test.com", "code": pending.code}
        )
        assert resp.status_code == 400
        assert resp.json()["code"] == "code_expired"

    def test_success_persists_verified_user(self, client, db_session, pending_store):
        _register(client)
        code = pending_store.get("alice@test.com").code

        resp = client.post("/users/verify_email", json={"email": "alice@test.com", "code": code})
        assert resp.status_code == 200, resp.text

        user = db_session.query(User).filter(User.email == "alice@test.com").one()
        assert user.is_verified is True
        assert user.role is Role.STUDENT
        assert user.password_hash != "secret123"
        assert pending_store.get("alice@test.com") is None

    def test_missing_password_is_corrupt(self, client, pending_store):
        _register(client)
        pending = pending_store.get("alice@test.com")
        pending.password = ""

        resp = client.post(
            "/users/verify_email", json={"email": "alice@test.com", "code": pending.code}
        )
        assert resp.status_code == 500
        assert resp.json()["code"] == "registration_corrupt"


class TestLogin:
    def _verified_user(self, client, pending_store):
        _register(client)
        code = pending_store.get("alice@test.com").code
        client.post("/users/verify_email", json={"email": "alice@test.com", "code": code})

    def test_full_flow(self, client, pending_store):
        self._verified_user(client, pending_store)
        resp = client.post(
            "/users/login", json={"email": "alice@test.com", "password": "secret123"}
        )
        assert resp.status_code == 200, resp.text
        body = resp.json()
        assert body["token_type"] == "bearer"
        principal = decode_access_token(body["access_token"])
        assert principal.role is Role.STUDENT

    def test_oauth2_form(self, client, pending_store):
        self._verified_user(client, pending_store)
        resp = client.post(
            "/users/token", data={"username": "alice@test.com", "password": "secret123"}
        )
        assert resp.status_code == 200, resp.text
        assert resp.json()["access_token"]

    def test_unknown_email(self, client):
        resp = client.post("/users/login", json={"email": "ghost@test.com", "password": "secret123"})
        assert resp.status_code == 400
        assert resp.json()["code"] == "invalid_credentials"

    def test_unverified_user(self, client, db_session):
        from tests.conftest import TEST_PASSWORD_HASH

        db_session.add(
            User(
                name="Bob",
                email="bob@test.com",
                password_hash=TEST_PASSWORD_HASH,
                role=Role.STUDENT,
                is_verified=False,
            )
        )
        db_session.commit()
        resp = client.post("/users/login", json={"email": "bob@test.com", "password": "secret123"})
        assert resp.status_code == 401
        assert resp.json()["code"] == "email_not_verified"

    def test_wrong_password(self, client, student):
        resp = client.post("/users/login", json={"email": student.email, "password": "nope-nope"})
        assert resp.status_code == 401
        assert resp.json()["code"] == "invalid_password"


class TestPasswordReset:
    def test_unknown_email(self, client):
        resp = client.post("/users/forget_password", json={"email": "ghost@test.com"})
        assert resp.status_code == 404

    def test_reset_flow(self, client, db_session, mailer, student):
        resp = client.post("/users/forget_password", json={"email": student.email})
        assert resp.status_code == 200, resp.text
        assert len(mailer.sent) == 1

        db_session.refresh(student)
        code = student.reset_code
        assert code and len(code) == 6

        resp = client.post(
            "/users/reset_password",
            json={"email": student.email, "code": code, "new_password": "brand-new"},
        )
        assert resp.status_code == 200, resp.text

        db_session.refresh(student)
        assert student.reset_code is None

        resp = client.post("/users/login", json={"email": student.email, "password": "brand-new"})
        assert resp.status_code == 200

    def test_wrong_code(self, client, db_session, student):
        client.post("/users/forget_password", json={"email": student.email})
        db_session.refresh(student)
        wrong = "000000" if student.reset_code != "000000" else "111111"

        resp = client.post(
            "/users/reset_password",
            json={"email": student.email, "code": wrong, "new_password": "brand-new"},
        )
        assert resp.status_code == 400

    def test_expired_code(self, client, db_session, student):
        student.reset_code = "123456"
        student.reset_expires_at = datetime.now(timezone.utc) - timedelta(minutes=1)
        db_session.commit()

        resp = client.post(
            "/users/reset_password",
            json={"email": student.email, "code": "123456", "new_password": "brand-new"},
        )
        assert resp.status_code == 400
        assert resp.json()["code"] == "code_expired"
