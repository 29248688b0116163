"""Short-lived handoff store for text captured by the browser extension.

Lifecycle: entries live in process memory only and are gone after a restart.
Each entry expires ``ttl_sec`` after it is stored, and once more than
``max_items`` entries are held the oldest is evicted first.
"""

from __future__ import annotations

import secrets
import string
import threading
import time
from collections import OrderedDict
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from jobintake.types import InboxItem

_BASE36 = string.digits + string.ascii_lowercase


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def make_token() -> str:
    suffix = "".join(secrets.choice(_BASE36) for _ in range(8))
    return f"{_to_base36(int(time.time() * 1000))}-{suffix}"


class ExtensionInbox:
    def __init__(
        self,
        *,
        max_items: int = 50,
        ttl_sec: int = 3600,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        if max_items < 1:
            raise ValueError("max_items must be at least 1")
        self.max_items = max_items
        self.ttl = timedelta(seconds=ttl_sec)
        self._clock = clock or (lambda: datetime.now(UTC))
        self._items: OrderedDict[str, InboxItem] = OrderedDict()
        self._lock = threading.Lock()

    def put(self, *, extracted_text: str, url: str | None = None, page_title: str | None = None) -> InboxItem:
        now = self._clock()
        item = InboxItem(
            token=make_token(),
            received_at=now,
            expires_at=now + self.ttl,
            url=url,
            page_title=page_title,
            extracted_text=extracted_text,
        )
        with self._lock:
            self._purge_expired(now)
            self._items[item.token] = item
            while len(self._items) > self.max_items:
                self._items.popitem(last=False)
        return item

    def get(self, token: str) -> InboxItem | None:
        now = self._clock()
        with self._lock:
            self._purge_expired(now)
            return self._items.get(token)

    def __len__(self) -> int:
        with self._lock:
            self._purge_expired(self._clock())
            return len(self._items)

    def clear(self) -> None:
        with self._lock:
            self._items.clear()

    def _purge_expired(self, now: datetime) -> None:
        # insertion order is expiry order since the ttl is fixed
        while self._items:
            token, item = next(iter(self._items.items()))
            if item.expires_at > now:
                break
            del self._items[token]
