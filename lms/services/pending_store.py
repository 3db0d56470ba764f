# lms/services/pending_store.py
"""Storage for registrations awaiting email verification.

Entries are keyed by email and replaced on re-register. Each backend keeps an
entry for ``retention_seconds`` after it was written, independent of the code
expiry, so a late verify reports "expired" rather than "not found". After
retention the entry is gone.

- ``InMemoryPendingStore``: process-local, lost on restart. Expired entries are
  swept on every access, under one lock.
- ``RedisPendingStore``: ``SETEX`` with the retention TTL; redis evicts.
"""
import json
import logging
import threading
import time
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Dict, Protocol, Tuple

from redis import Redis

from lms.core.config import settings
from lms.models.user import Role

logger = logging.getLogger(__name__)


@dataclass
class PendingRegistration:
    email: str
    name: str
    role: Role
    password: str  # plaintext until verify hashes it
    code: str
    expires_at: datetime

    def to_json(self) -> str:
        data = asdict(self)
        data["role"] = self.role.value
        data["expires_at"] = self.expires_at.isoformat()
        return json.dumps(data)

    @classmethod
    def from_json(cls, raw: str | bytes) -> "PendingRegistration":
        data = json.loads(raw)
        data["role"] = Role(data["role"])
        data["expires_at"] = datetime.fromisoformat(data["expires_at"])
        return cls(**data)


class PendingRegistrationStore(Protocol):
    def put(self, entry: PendingRegistration) -> None: ...

    def get(self, email: str) -> PendingRegistration | None: ...

    def delete(self, email: str) -> None: ...


class InMemoryPendingStore:
    def __init__(self, retention_seconds: int):
        self.retention_seconds = retention_seconds
        self._entries: Dict[str, Tuple[float, PendingRegistration]] = {}
        self._lock = threading.Lock()

    def _sweep(self, now: float) -> None:
        stale = [k for k, (evict_at, _) in self._entries.items() if evict_at <= now]
        for key in stale:
            del self._entries[key]
        if stale:
            logger.debug("Evicted %d stale pending registrations", len(stale))

    def put(self, entry: PendingRegistration) -> None:
        now = time.monotonic()
        with self._lock:
            self._sweep(now)
            self._entries[entry.email] = (now + self.retention_seconds, entry)

    def get(self, email: str) -> PendingRegistration | None:
        with self._lock:
            self._sweep(time.monotonic())
            item = self._entries.get(email)
        return item[1] if item else None

    def delete(self, email: str) -> None:
        with self._lock:
            self._entries.pop(email, None)

    def __len__(self) -> int:
        with self._lock:
            self._sweep(time.monotonic())
            return len(self._entries)


class RedisPendingStore:
    KEY_PREFIX = "pending_registration:"

    def __init__(self, redis_conn: Redis, retention_seconds: int):
        self.redis = redis_conn
        self.retention_seconds = retention_seconds

    def _key(self, email: str) -> str:
        return f"{self.KEY_PREFIX}{email}"

    def put(self, entry: PendingRegistration) -> None:
        self.redis.setex(self._key(entry.email), self.retention_seconds, entry.to_json())

    def get(self, email: str) -> PendingRegistration | None:
        raw = self.redis.get(self._key(email))
        if raw is None:
            return None
        return PendingRegistration.from_json(raw)

    def delete(self, email: str) -> None:
        self.redis.delete(self._key(email))


_store: PendingRegistrationStore | None = None


def get_pending_store() -> PendingRegistrationStore:
    global _store
    if _store is None:
        backend = settings.PENDING_STORE_BACKEND.lower()
        retention = settings.PENDING_REGISTRATION_RETENTION_SECONDS
        if backend == "redis":
            from lms.workers.queue import get_redis_connection

            _store = RedisPendingStore(get_redis_connection(), retention)
        elif backend == "memory":
            _store = InMemoryPendingStore(retention)
        else:
            raise ValueError(f"Unknown PENDING_STORE_BACKEND: {backend}")
        logger.info("Pending registration store: %s", backend)
    return _store
