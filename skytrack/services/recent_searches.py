"""Most-recent-first list of searched flight codes."""

from __future__ import annotations

from datetime import datetime
import logging
from typing import Callable, Iterable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from skytrack.db import SessionLocal
from skytrack.db_models import ClientState

logger = logging.getLogger("skytrack.recent_searches")

RECENT_SEARCHES_KEY = "recentSearches"
MAX_RECENT_SEARCHES = 5


def push_recent(
    history: Iterable[str], flight_code: str, limit: int = MAX_RECENT_SEARCHES
) -> list[str]:
    """Move ``flight_code`` to the front, dropping duplicates and overflow."""

    code = flight_code.strip().upper()
    existing = [item for item in history if item != code]
    if not code:
        return existing[:limit]
    return [code, *existing][:limit]


def _sanitize(raw: object, limit: int) -> list[str]:
    items: list[str] = []
    if not isinstance(raw, list):
        return items
    for entry in raw:
        if not isinstance(entry, str):
            continue
        code = entry.strip().upper()
        if code and code not in items:
            items.append(code)
    return items[:limit]


class RecentSearchStore:
    """Recent searches kept in memory and mirrored to one ``client_state`` row.

    The row is read once, on first access. Write failures are logged and the
    in-memory list stays authoritative for the rest of the process.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session] | None = None,
        *,
        key: str = RECENT_SEARCHES_KEY,
        limit: int = MAX_RECENT_SEARCHES,
    ) -> None:
        self._session_factory = session_factory or SessionLocal
        self.key = key
        self.limit = limit
        self._items: list[str] | None = None

    @property
    def items(self) -> list[str]:
        return self.load()

    def load(self) -> list[str]:
        if self._items is not None:
            return list(self._items)

        raw: object = []
        session = self._session_factory()
        try:
            record = session.get(ClientState, self.key)
            if record is not None:
                raw = record.value
        except SQLAlchemyError as exc:
            logger.warning("Failed to load recent searches: %s", exc)
        finally:
            session.close()

        self._items = _sanitize(raw, self.limit)
        return list(self._items)

    def add(self, flight_code: str) -> list[str]:
        self._items = push_recent(self.load(), flight_code, self.limit)
        self._persist(self._items)
        return list(self._items)

    def _persist(self, items: list[str]) -> None:
        session = self._session_factory()
        try:
            record = session.get(ClientState, self.key)
            if record is None:
                session.add(
                    ClientState(key=self.key, value=list(items), updated_at=datetime.utcnow())
                )
            else:
                record.value = list(items)
                record.updated_at = datetime.utcnow()
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            logger.warning("Failed to persist recent searches: %s", exc)
        finally:
            session.close()


__all__ = [
    "MAX_RECENT_SEARCHES",
    "RECENT_SEARCHES_KEY",
    "RecentSearchStore",
    "push_recent",
]
