"""Expiring key-value store used to remember registry lookups.

:class:`TransientStore` mirrors the host's transient API: each key maps to a
value and the moment it was written, and reads older than the freshness window
behave like misses. The clock is injected so tests can move time forward, and
an optional JSON file lets separate CLI runs share the same cache.
"""

from __future__ import annotations

import dataclasses as dc
import datetime as dt
import json
import logging
import typing as typ

from ._constants import CACHE_TTL_SECONDS

if typ.TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

Clock = typ.Callable[[], dt.datetime]


def utc_now() -> dt.datetime:
    """Return the current timezone-aware UTC time."""
    return dt.datetime.now(dt.UTC)


@dc.dataclass(slots=True)
class CacheEntry:
    """A stored value together with the moment it was fetched."""

    value: typ.Any
    fetched_at: dt.datetime


class TransientStore:
    """Key-value store whose entries expire after a fixed window."""

    def __init__(
        self,
        *,
        ttl: dt.timedelta = dt.timedelta(seconds=CACHE_TTL_SECONDS),
        clock: Clock = utc_now,
        path: Path | None = None,
    ) -> None:
        """Create a store, loading persisted entries from ``path`` if given.

        Parameters
        ----------
        ttl : datetime.timedelta, optional
            Freshness window; defaults to one day.
        clock : Callable[[], datetime], optional
            Source of the current time. Defaults to :func:`utc_now`.
        path : Path, optional
            JSON file backing the store. When ``None`` the store lives in
            memory only.
        """
        self.ttl = ttl
        self._clock = clock
        self._path = path
        self._entries: dict[str, CacheEntry] = {}
        if path is not None:
            self._load(path)

    def get(self, key: str) -> typ.Any | None:
        """Return the fresh value stored under ``key`` or ``None``."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.fetched_at >= self.ttl:
            del self._entries[key]
            return None
        return entry.value

    def set(self, key: str, value: typ.Any) -> None:
        """Store ``value`` under ``key``, restarting its freshness window."""
        self._entries[key] = CacheEntry(value=value, fetched_at=self._clock())
        if self._path is not None:
            self._save(self._path)

    def delete(self, key: str) -> None:
        """Forget ``key`` if present."""
        if self._entries.pop(key, None) is not None and self._path is not None:
            self._save(self._path)

    def _load(self, path: Path) -> None:
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Ignoring unreadable cache file %s: %s", path, exc)
            return
        if not isinstance(raw, dict):
            logger.warning("Ignoring cache file %s: not a JSON object", path)
            return
        for key, payload in raw.items():
            try:
                fetched_at = dt.datetime.fromisoformat(payload["fetched_at"])
                value = payload["value"]
            except (KeyError, TypeError, ValueError):
                continue
            if fetched_at.tzinfo is None:
                fetched_at = fetched_at.replace(tzinfo=dt.UTC)
            self._entries[key] = CacheEntry(value=value, fetched_at=fetched_at)

    def _save(self, path: Path) -> None:
        payload = {
            key: {"value": entry.value, "fetched_at": entry.fetched_at.isoformat()}
            for key, entry in self._entries.items()
        }
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        logger.debug("Saved %d cache entries to %s", len(payload), path)


__all__ = ["CacheEntry", "Clock", "TransientStore", "utc_now"]
