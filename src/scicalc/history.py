"""
=============================================================================
MODULE NAME: history.py
=============================================================================

INPUT FILES:
- SQLite database at Settings.db_path (SqliteHistoryStore only).

OUTPUT FILES:
- Same database; one row per completed calculation.

NOTES:
- Append-only, per-owner log. Records are never updated or deleted here.
- Creation order is the store-assigned record_id, not the wall clock, so two
  records created in the same millisecond still list deterministically.
- A missing owner is "unauthenticated": append raises Unauthorized,
  list_recent returns [].
=============================================================================
"""

from __future__ import annotations

import itertools
import logging
import sqlite3
import threading
from abc import ABC, abstractmethod
from contextlib import closing, contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterator, List, Optional

from .errors import Unauthorized

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 20


@dataclass(frozen=True, slots=True)
class CalculationRecord:
    """One persisted calculation, owned by a single user."""

    record_id: int
    owner: str
    expression: str
    result: str
    created_at: datetime

    def to_dict(self) -> Dict:
        return {
            "id": self.record_id,
            "expression": self.expression,
            "result": self.result,
            "created_at": self.created_at.isoformat(),
        }


def _now() -> datetime:
    return datetime.now(timezone.utc)


class HistoryStore(ABC):
    """Contract shared by the history backends."""

    @abstractmethod
    def append(self, owner: Optional[str], expression: str, result: str) -> CalculationRecord:
        """
        Record a completed calculation.

        Args:
            owner: Opaque user id from the authentication collaborator
            expression: Expression text, e.g. "7 + 3"
            result: Display text of the result, e.g. "10"

        Returns:
            The stored record

        Raises:
            Unauthorized: If owner is missing or empty
        """
        raise NotImplementedError

    @abstractmethod
    def list_recent(self, owner: Optional[str], limit: int = DEFAULT_LIMIT) -> List[CalculationRecord]:
        """
        Return up to ``limit`` of the owner's records, newest first.

        An unauthenticated caller gets an empty list, never an error.
        """
        raise NotImplementedError

    @staticmethod
    def _require_owner(owner: Optional[str]) -> str:
        if not owner:
            raise Unauthorized()
        return owner


class InMemoryHistoryStore(HistoryStore):
    """Process-local store; the default for tests and ``:memory:`` configs."""

    def __init__(self) -> None:
        self._records: Dict[str, List[CalculationRecord]] = {}
        self._lock = threading.Lock()
        self._ids = itertools.count(1)

    def append(self, owner: Optional[str], expression: str, result: str) -> CalculationRecord:
        owner = self._require_owner(owner)
        with self._lock:
            record = CalculationRecord(
                record_id=next(self._ids),
                owner=owner,
                expression=expression,
                result=result,
                created_at=_now(),
            )
            self._records.setdefault(owner, []).append(record)
        return record

    def list_recent(self, owner: Optional[str], limit: int = DEFAULT_LIMIT) -> List[CalculationRecord]:
        if not owner or limit <= 0:
            return []
        with self._lock:
            records = list(self._records.get(owner, []))
        return records[::-1][:limit]


_SCHEMA = """
CREATE TABLE IF NOT EXISTS calculations (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    owner TEXT NOT NULL,
    expression TEXT NOT NULL,
    result TEXT NOT NULL,
    created_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS by_owner ON calculations (owner, id);
"""


class SqliteHistoryStore(HistoryStore):
    """Durable store backed by a SQLite file.

    A fresh connection is opened per call so appends can run on the
    session's background threads without sharing a connection.
    """

    def __init__(self, db_path: str) -> None:
        self.db_path = str(db_path)
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        with self._connect() as conn:
            conn.executescript(_SCHEMA)
        logger.debug("History database ready at %s", self.db_path)

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        with closing(sqlite3.connect(self.db_path)) as conn:
            conn.row_factory = sqlite3.Row
            with conn:
                yield conn

    def append(self, owner: Optional[str], expression: str, result: str) -> CalculationRecord:
        owner = self._require_owner(owner)
        created_at = _now()
        with self._connect() as conn:
            cursor = conn.execute(
                "INSERT INTO calculations (owner, expression, result, created_at) "
                "VALUES (?, ?, ?, ?)",
                (owner, expression, result, created_at.isoformat()),
            )
            record_id = cursor.lastrowid
        return CalculationRecord(
            record_id=record_id,
            owner=owner,
            expression=expression,
            result=result,
            created_at=created_at,
        )

    def list_recent(self, owner: Optional[str], limit: int = DEFAULT_LIMIT) -> List[CalculationRecord]:
        if not owner or limit <= 0:
            return []
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT id, owner, expression, result, created_at FROM calculations "
                "WHERE owner = ? ORDER BY id DESC LIMIT ?",
                (owner, limit),
            ).fetchall()
        return [
            CalculationRecord(
                record_id=row["id"],
                owner=row["owner"],
                expression=row["expression"],
                result=row["result"],
                created_at=datetime.fromisoformat(row["created_at"]),
            )
            for row in rows
        ]


def open_store(db_path: str) -> HistoryStore:
    """Build the store for ``db_path``; ``":memory:"`` keeps history in-process."""
    if db_path == ":memory:":
        return InMemoryHistoryStore()
    return SqliteHistoryStore(db_path)


__all__ = [
    "DEFAULT_LIMIT",
    "CalculationRecord",
    "HistoryStore",
    "InMemoryHistoryStore",
    "SqliteHistoryStore",
    "open_store",
]
