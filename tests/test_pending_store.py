import threading
from datetime import datetime, timedelta, timezone

from lms.models.user import Role
from lms.services.pending_store import (
    InMemoryPendingStore,
    PendingRegistration,
    RedisPendingStore,
)


def _entry(email="alice@test.com", code="123456"):
    return PendingRegistration(
        email=email,
        name="Alice",
        role=Role.TEACHER,
        password="secret123",
        code=code,
        expires_at=datetime.now(timezone.utc) + timedelta(minutes=5),
    )


class FakeRedis:
    """Just enough of the redis client API for the store."""

    def __init__(self):
        self.data = {}
        self.ttls = {}

    def setex(self, key, ttl, value):
        self.data[key] = value.encode() if isinstance(value, str) else value
        self.ttls[key] = ttl

    def get(self, key):
        return self.data.get(key)

    def delete(self, key):
        self.data.pop(key, None)


class TestInMemoryPendingStore:
    def test_put_get_delete(self):
        store = InMemoryPendingStore(retention_seconds=60)
        store.put(_entry())
        assert store.get("alice@test.com").code == "123456"

        store.delete("alice@test.com")
        assert store.get("alice@test.com") is None
        # deleting twice is harmless
        store.delete("alice@test.com")

    def test_put_replaces(self):
        store = InMemoryPendingStore(retention_seconds=60)
        store.put(_entry(code="111111"))
        store.put(_entry(code="222222"))
        assert store.get("alice@test.com").code == "222222"
        assert len(store) == 1

    def test_entries_are_evicted_after_retention(self):
        store = InMemoryPendingStore(retention_seconds=0)
        store.put(_entry())
        assert store.get("alice@test.com") is None
        assert len(store) == 0

    def test_retention_outlives_code_expiry(self):
        store = InMemoryPendingStore(retention_seconds=3600)
        entry = _entry()
        entry.expires_at = datetime.now(timezone.utc) - timedelta(minutes=1)
        store.put(entry)
        # still retrievable so verification can report "expired"
        assert store.get("alice@test.com") is entry

    def test_concurrent_registrations_do_not_clobber_each_other(self):
        store = InMemoryPendingStore(retention_seconds=3600)
        emails = [f"user{i}@test.com" for i in range(50)]
        misses = []

        def register(email, code):
            store.put(_entry(email=email, code=code))
            got = store.get(email)
            if got is None or got.code != code:
                misses.append(email)

        threads = [
            threading.Thread(target=register, args=(email, f"{i:06d}"))
            for i, email in enumerate(emails)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert misses == []
        assert len(store) == len(emails)
        for i, email in enumerate(emails):
            assert store.get(email).code == f"{i:06d}", f"entry for {email} was overwritten"


class TestRedisPendingStore:
    def test_serialises_with_ttl(self):
        redis = FakeRedis()
        store = RedisPendingStore(redis, retention_seconds=3600)
        original = _entry()
        store.put(original)

        key = "pending_registration:alice@test.com"
        assert redis.ttls[key] == 3600

        loaded = store.get("alice@test.com")
        assert loaded == original
        assert loaded.role is Role.TEACHER

        store.delete("alice@test.com")
        assert store.get("alice@test.com") is None
