"""Session-scoped credential storage."""

from __future__ import annotations

import json
import sqlite3
import threading
from pathlib import Path
from typing import TYPE_CHECKING, Dict, Optional, Protocol

from google_oauth.models.credential import Credential

if TYPE_CHECKING:
    from google_oauth.services.token_cipher import TokenCipherService


class SessionStore(Protocol):
    """Key-value store holding at most one credential per session id.

    Each call is atomic on its own; nothing is assumed across calls.
    """

    def get(self, session_id: str) -> Optional[Credential]: ...

    def set(self, session_id: str, credential: Credential) -> None: ...

    def delete(self, session_id: str) -> None: ...


class InMemorySessionStore:
    """Process-local store, suitable for a single worker and for tests."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._credentials: Dict[str, Credential] = {}

    def get(self, session_id: str) -> Optional[Credential]:
        with self._lock:
            return self._credentials.get(session_id)

    def set(self, session_id: str, credential: Credential) -> None:
        with self._lock:
            self._credentials[session_id] = credential

    def delete(self, session_id: str) -> None:
        with self._lock:
            self._credentials.pop(session_id, None)


class SQLiteSessionStore:
    """SQLite-backed store keeping tokens encrypted at rest."""

    _ENCRYPTED_FIELDS = ("access_token", "refresh_token")

    def __init__(self, db_path: str, token_cipher: TokenCipherService) -> None:
        self._db_path = Path(db_path)
        self._cipher = token_cipher
        if self._db_path.parent and not self._db_path.parent.exists():
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS session_credentials (
                    session_id TEXT PRIMARY KEY,
                    data TEXT NOT NULL
                )
                """
            )

    def get(self, session_id: str) -> Optional[Credential]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT data FROM session_credentials WHERE session_id = ?",
                (session_id,),
            ).fetchone()
        if not row:
            return None

        record = json.loads(row["data"])
        for field in self._ENCRYPTED_FIELDS:
            encrypted = record.pop(f"{field}_encrypted", None)
            record[field] = self._cipher.decrypt(encrypted) if encrypted else None
        return Credential.model_validate(record)

    def set(self, session_id: str, credential: Credential) -> None:
        record = credential.model_dump(mode="json")
        for field in self._ENCRYPTED_FIELDS:
            value = record.pop(field)
            record[f"{field}_encrypted"] = self._cipher.encrypt(value) if value else None

        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO session_credentials (session_id, data)
                VALUES (?, ?)
                ON CONFLICT(session_id) DO UPDATE SET data = excluded.data
                """,
                (session_id, json.dumps(record)),
            )

    def delete(self, session_id: str) -> None:
        with self._connect() as conn:
            conn.execute(
                "DELETE FROM session_credentials WHERE session_id = ?",
                (session_id,),
            )


__all__ = ["InMemorySessionStore", "SQLiteSessionStore", "SessionStore"]
