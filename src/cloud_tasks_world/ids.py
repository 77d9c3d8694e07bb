"""Monotonic ULID generation for message identifiers.

ULIDs come from ``python-ulid`` and sort lexicographically by creation time.
Two ULIDs minted in the same millisecond are only ordered by their random
component, so the factory below remembers the last value it handed out and,
whenever a fresh ULID would not sort after it, returns the last value plus
one instead.
"""

from __future__ import annotations

import threading
from collections.abc import Callable

from ulid import ULID

MESSAGE_ID_PREFIX = "msg_"


class MonotonicUlid:
    """Thread-safe factory producing strictly increasing ULID strings."""

    def __init__(self, *, factory: Callable[[], ULID] = ULID) -> None:
        self._factory = factory
        self._lock = threading.Lock()
        self._last: ULID | None = None

    def __call__(self) -> str:
        with self._lock:
            candidate = self._factory()
            if self._last is not None and int(candidate) <= int(self._last):
                # Same millisecond, or the clock went backwards.
                candidate = ULID.from_int(int(self._last) + 1)
            self._last = candidate
            return str(candidate)


def new_message_id(factory: MonotonicUlid) -> str:
    """Return a message id of the form ``msg_<ULID>``."""

    return f"{MESSAGE_ID_PREFIX}{factory()}"
