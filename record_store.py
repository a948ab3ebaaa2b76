"""
Session stores for pre-fill data.

The pre-fill service only talks to the RecordStore interface, so the
process-local map can be swapped for an external store without touching the
mapping logic. Callers wrap read-modify-write cycles in `lock(session_id)`.
"""

import logging
import threading
from abc import ABC, abstractmethod
from collections import defaultdict
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

import config
import storage
from canonical import PreFillSession

logger = logging.getLogger(__name__)


class RecordStore(ABC):
    """Key-value store of session id -> PreFillSession."""

    def __init__(self):
        self._locks_guard = threading.Lock()
        self._locks: Dict[str, threading.RLock] = defaultdict(threading.RLock)

    @contextmanager
    def lock(self, session_id: str) -> Iterator[None]:
        """Serialize access to one session. Locks are process-local."""
        with self._locks_guard:
            session_lock = self._locks[session_id]
        with session_lock:
            yield

    def _discard_lock(self, session_id: str) -> None:
        with self._locks_guard:
            self._locks.pop(session_id, None)

    @abstractmethod
    def get(self, session_id: str) -> Optional[PreFillSession]:
        ...

    @abstractmethod
    def put(self, session_id: str, session: PreFillSession) -> None:
        ...

    @abstractmethod
    def delete(self, session_id: str) -> None:
        ...


class InMemoryRecordStore(RecordStore):
    """Process-local store. Does not survive restarts or span several workers."""

    def __init__(self):
        super().__init__()
        self._sessions: Dict[str, PreFillSession] = {}

    def get(self, session_id: str) -> Optional[PreFillSession]:
        session = self._sessions.get(session_id)
        return session.model_copy(deep=True) if session is not None else None

    def put(self, session_id: str, session: PreFillSession) -> None:
        self._sessions[session_id] = session.model_copy(deep=True)

    def delete(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)
        self._discard_lock(session_id)


class S3RecordStore(RecordStore):
    """Keeps each session as a JSON object so several processes share one record."""

    def __init__(self, client=None, bucket: str = None, prefix: str = None):
        super().__init__()
        self.client = client
        self.bucket = bucket or config.S3_BUCKET
        self.prefix = (prefix or config.SESSION_RECORD_PREFIX).rstrip("/")

    def _key(self, session_id: str) -> str:
        return f"{self.prefix}/{session_id}.json"

    def get(self, session_id: str) -> Optional[PreFillSession]:
        body = storage.read_object(self._key(session_id), client=self.client, bucket=self.bucket)
        if body is None:
            return None
        return PreFillSession.model_validate_json(body)

    def put(self, session_id: str, session: PreFillSession) -> None:
        storage.write_object(self._key(session_id), session.model_dump_json().encode("utf-8"),
                             client=self.client, bucket=self.bucket)

    def delete(self, session_id: str) -> None:
        storage.delete_object(self._key(session_id), client=self.client, bucket=self.bucket)
        self._discard_lock(session_id)


def create_record_store(kind: str = None) -> RecordStore:
    kind = (kind or config.RECORD_STORE).lower()
    if kind == "s3":
        logger.info("Using S3 record store (bucket=%s)", config.S3_BUCKET)
        return S3RecordStore()
    if kind != "memory":
        logger.warning("Unknown RECORD_STORE %r, falling back to memory", kind)
    return InMemoryRecordStore()
