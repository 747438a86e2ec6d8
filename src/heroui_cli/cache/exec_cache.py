"""On-disk TTL cache for registry lookups and command output.

The store is a single JSON object keyed by package name or command string:

    {
      "<key>": {
        "version": "...",          # package version lookups
        "execResult": ...,          # command output lookups
        "date": "<ISO timestamp>",
        "formatDate": "<human readable>",
        "expiredDate": <epoch ms>,
        "expiredFormatDate": "<human readable>"
      }
    }

The file is re-read on every access and rewritten whole on every write.
There is no locking; concurrent CLI processes race and the last writer wins.
"""

from __future__ import annotations

import asyncio
import inspect
import json
import logging
import os
import shlex
import subprocess
import threading
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Optional, Union

from ..common.logging_utils import extra_context, is_debug_enabled
from ..constants import Constants

logger = logging.getLogger(__name__)

VERSION_FIELD = "version"
EXEC_RESULT_FIELD = "execResult"

ComputeFn = Callable[[], Union[Any, Awaitable[Any]]]


def _format_date(epoch_seconds: float) -> str:
    stamp = datetime.fromtimestamp(epoch_seconds, tz=timezone.utc).astimezone()
    return stamp.strftime("%a %b %d %Y %H:%M:%S GMT%z (%Z)")


@dataclass
class CacheEntry:
    """A single persisted cache record."""

    key: str
    value: Any
    computed_at: float
    expires_at: float
    field: str = EXEC_RESULT_FIELD

    def is_expired(self, now: float) -> bool:
        """Check if this entry has expired at ``now`` (epoch seconds)."""
        return now > self.expires_at

    def to_json(self) -> Dict[str, Any]:
        expired_ms = int(self.expires_at * 1000)
        return {
            self.field: self.value,
            "date": datetime.fromtimestamp(self.computed_at, tz=timezone.utc).isoformat(),
            "formatDate": _format_date(self.computed_at),
            "expiredDate": expired_ms,
            "expiredFormatDate": _format_date(self.expires_at),
        }

    @classmethod
    def from_json(cls, key: str, raw: Dict[str, Any]) -> Optional["CacheEntry"]:
        """Build an entry from its stored form; None when it has no expiry."""
        expired_ms = raw.get("expiredDate")
        if not isinstance(expired_ms, (int, float)):
            return None
        field = VERSION_FIELD if VERSION_FIELD in raw else EXEC_RESULT_FIELD
        expires_at = expired_ms / 1000.0
        try:
            computed_at = datetime.fromisoformat(
                str(raw.get("date", "")).replace("Z", "+00:00")
            ).timestamp()
        except ValueError:
            computed_at = expires_at - Constants.CACHE_TTL_SEC
        return cls(
            key=key,
            value=raw.get(field),
            computed_at=computed_at,
            expires_at=expires_at,
            field=field,
        )


class ExecCache:
    """TTL cache persisted to a JSON file.

    Avoids repeating registry queries and shell commands within the TTL
    window (30 minutes by default) across CLI invocations.
    """

    def __init__(
        self,
        path: Optional[str] = None,
        ttl: int = Constants.CACHE_TTL_SEC,
        disabled: bool = False,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize the cache.

        Args:
            path: Cache file location; defaults to ``~/.heroui-cli/cache.json``.
            ttl: Time-to-live in seconds.
            disabled: When True every lookup is treated as expired.
            clock: Returns the current epoch time in seconds.
        """
        self.path = path or os.path.join(Constants.CACHE_DIR, Constants.CACHE_FILE)
        self.ttl = ttl
        self.disabled = disabled
        self._clock = clock
        # Guards read-modify-write of the store across worker threads.
        self._lock = threading.RLock()

    def init(self, disable_cache: Optional[bool] = None) -> None:
        """Set the disable flag and make sure the store exists. Idempotent."""
        if disable_cache is not None:
            self.disabled = bool(disable_cache)
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        if not os.path.exists(self.path):
            self._write({})

    def read(self) -> Dict[str, Any]:
        """Load the whole store, resetting it when corrupt or unreadable."""
        with self._lock:
            if not os.path.exists(self.path):
                self.init()
            try:
                with open(self.path, "r", encoding="utf-8") as fh:
                    data = json.load(fh)
            except (OSError, ValueError) as exc:
                logger.warning("Cache store at %s is unreadable (%s); resetting", self.path, exc)
                self._write({})
                return {}
            if not isinstance(data, dict):
                logger.warning("Cache store at %s is not an object; resetting", self.path)
                self._write({})
                return {}
            return data

    def entry(self, key: str, data: Optional[Dict[str, Any]] = None) -> Optional[CacheEntry]:
        raw = (data if data is not None else self.read()).get(key)
        if not isinstance(raw, dict):
            return None
        return CacheEntry.from_json(key, raw)

    def get(self, key: str) -> Optional[Any]:
        """Return the stored value for ``key`` (expired or not), or None."""
        found = self.entry(key)
        return found.value if found else None

    def is_expired(self, key: str, data: Optional[Dict[str, Any]] = None) -> bool:
        """True if caching is disabled, ``key`` is absent, or its TTL has passed."""
        if self.disabled:
            return True
        found = self.entry(key, data)
        if found is None:
            return True
        return found.is_expired(self._clock())

    def set(self, key: str, value: Any, field: str = EXEC_RESULT_FIELD) -> CacheEntry:
        """Store ``value`` under ``key`` and rewrite the store."""
        now = self._clock()
        new_entry = CacheEntry(
            key=key, value=value, computed_at=now, expires_at=now + self.ttl, field=field
        )
        # Re-read so sibling writes from the same fan-out are not lost.
        with self._lock:
            data = self.read()
            data[key] = new_entry.to_json()
            self._write(data)
        return new_entry

    async def get_or_compute(
        self, key: str, compute: ComputeFn, field: str = EXEC_RESULT_FIELD
    ) -> Any:
        """Return the cached value for ``key`` or compute, store and return it.

        ``compute`` may be a plain callable or return an awaitable. Errors it
        raises propagate and nothing is stored. Store reads and writes run in
        a worker thread so the event loop is not blocked on file I/O.
        """
        data = await asyncio.to_thread(self.read)
        if not self.is_expired(key, data):
            if is_debug_enabled(logger):
                logger.debug(
                    "Cache hit",
                    extra=extra_context(event="cache_hit", component="exec_cache", target=key),
                )
            return data[key].get(field)

        if is_debug_enabled(logger):
            logger.debug(
                "Cache miss",
                extra=extra_context(
                    event="cache_miss",
                    component="exec_cache",
                    target=key,
                    disabled=self.disabled or None,
                ),
            )
        result = compute()
        if inspect.isawaitable(result):
            result = await result
        await asyncio.to_thread(self.set, key, result, field)
        return result

    async def get_package_version(
        self, package_name: str, fetch: Callable[[str], Union[str, Awaitable[str]]]
    ) -> str:
        """Cached latest version of ``package_name`` using ``fetch(name)``."""
        return await self.get_or_compute(
            package_name, lambda: fetch(package_name), field=VERSION_FIELD
        )

    async def get_exec_data(
        self,
        command: str,
        runner: Optional[Callable[[str], Union[Any, Awaitable[Any]]]] = None,
    ) -> Any:
        """Cached output of a shell command, keyed by the command string."""
        run = runner or run_command
        return await self.get_or_compute(command, lambda: run(command))

    def remove(self) -> None:
        """Delete the store file if present."""
        try:
            os.remove(self.path)
        except FileNotFoundError:
            pass

    def _write(self, data: Dict[str, Any]) -> None:
        with open(self.path, "w", encoding="utf-8") as fh:
            json.dump(data, fh, indent=2)


async def run_command(command: str) -> str:
    """Run ``command`` without a shell and return its stripped stdout.

    Raises:
        subprocess.CalledProcessError: If the command exits non-zero.
    """
    completed = await asyncio.to_thread(
        subprocess.run,
        shlex.split(command),
        capture_output=True,
        text=True,
        check=True,
    )
    return completed.stdout.strip()
