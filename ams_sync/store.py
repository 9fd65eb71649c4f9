from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Protocol

from .utils import ensure_utc


class BookmarkStore(Protocol):
    def get_last_update_date(self) -> Optional[datetime]: ...

    def store_last_update_date(self, value: datetime) -> None: ...


class InMemoryBookmarkStore:
    """Holds the bookmark for the lifetime of the process.

    Stand-in for a real data store; `history` records every write.
    """

    def __init__(self, initial: Optional[datetime] = None) -> None:
        self._value = ensure_utc(initial) if initial is not None else None
        self.history: List[datetime] = []

    def get_last_update_date(self) -> Optional[datetime]:
        return self._value

    def store_last_update_date(self, value: datetime) -> None:
        value = ensure_utc(value)
        self._value = value
        self.history.append(value)
