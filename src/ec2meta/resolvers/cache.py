# SPDX-FileCopyrightText: 2026 The ec2meta Authors
# SPDX-License-Identifier: Apache-2.0

"""Process-lifetime memo of resolved instance fields.

Entries are keyed by ``(instance_id, field)`` and never expire.  A field that
resolved to nothing is stored as ``CachedValue(None)`` so that a known-absent
optional field (no fleet, say) is not looked up again; :meth:`AttributeCache.get`
returns ``None`` only for a genuine miss.

One cache is created per process and injected into the assembler.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

CacheKey = Tuple[str, str]


@dataclass(frozen=True)
class CachedValue:
    """A resolved field.  ``value is None`` means "resolved to absent"."""

    value: Any = None

    @property
    def is_absent(self) -> bool:
        return self.value is None


class AttributeCache:
    """Thread-safe ``(instance_id, field) -> CachedValue`` map.

    Reads and writes of one key are serialised by a per-key lock, so two
    concurrent resolutions of the same field run the resolver once.  No lock
    is held while waiting on another key.
    """

    def __init__(self) -> None:
        self._entries: Dict[CacheKey, CachedValue] = {}
        self._key_locks: Dict[CacheKey, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def get(self, instance_id: str, field: str) -> Optional[CachedValue]:
        with self._lock_for((instance_id, field)):
            return self._entries.get((instance_id, field))

    def put(self, instance_id: str, field: str, value: Any) -> CachedValue:
        entry = value if isinstance(value, CachedValue) else CachedValue(value)
        with self._lock_for((instance_id, field)):
            self._entries[(instance_id, field)] = entry
        return entry

    def get_or_resolve(self, instance_id: str, field: str, resolver: Callable[[], Any]) -> Any:
        """Return the cached value for the key, running *resolver* on a miss.

        A resolver exception leaves the key unresolved.
        """
        key = (instance_id, field)
        with self._lock_for(key):
            entry = self._entries.get(key)
            if entry is None:
                entry = CachedValue(resolver())
                self._entries[key] = entry
                logger.debug("Cached %s for %s: %r", field, instance_id, entry.value)
            return entry.value

    def clear(self) -> None:
        """Drop every entry.  Per-key locks are kept so in-flight resolutions stay serialised."""
        with self._registry_lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def _lock_for(self, key: CacheKey) -> threading.Lock:
        with self._registry_lock:
            lock = self._key_locks.get(key)
            if lock is None:
                lock = self._key_locks[key] = threading.Lock()
            return lock
