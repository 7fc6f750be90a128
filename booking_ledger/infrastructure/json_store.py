"""
JSON file persistence for the ledger's collections.

WRITE STRATEGY
==============

The whole document (users, bookings, favorites, trips and anything else found
in the file) lives in one JSON file. Every flush rewrites the full document:

  1. Merge the flushed collections over the last known document
  2. Write to a temp file in the same directory and fsync it
  3. os.replace() the temp file over the target

os.replace() is atomic on POSIX and Windows, so a crash mid-write leaves the
previous document intact rather than a truncated file.

Deadlines:
  The write runs in a worker thread. If the deadline passes, the caller gets
  Timeout, but the thread cannot be killed. A _FlushTicket fences the rename:
  the thread only renames if the ticket was not cancelled, and the timeout
  path checks under the same lock whether the rename already happened. Either
  the write lands and the flush counts as a success, or it never lands.

Retries:
  OSError is treated as transient: one more attempt (PERSISTENCE_MAX_ATTEMPTS)
  before PersistenceError. Timeouts are not retried.

Only one process may write the file; flushes within the process are
serialized by an asyncio.Lock.
"""

import asyncio
import json
import os
import shutil
import tempfile
import threading
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from booking_ledger.core.exceptions import PersistenceError, Timeout
from booking_ledger.core.logging import get_logger
from booking_ledger.core.metrics import persistence_flush_latency, record_flush

logger = get_logger(__name__)

DEFAULT_COLLECTIONS = ("users", "bookings", "favorites", "trips")

Collections = dict[str, list[dict[str, Any]]]


def empty_document() -> Collections:
    return {name: [] for name in DEFAULT_COLLECTIONS}


class _FlushTicket:
    def __init__(self):
        self.lock = threading.Lock()
        self.cancelled = False
        self.committed = False

    def cancel(self) -> bool:
        """Stop a pending rename. Returns True if the rename already happened."""
        with self.lock:
            self.cancelled = True
            return self.committed


class JsonFileStore:
    """Single-writer persistence adapter over one JSON document."""

    def __init__(
        self,
        path: str | os.PathLike,
        backup_dir: str | os.PathLike,
        timeout: Optional[float] = 5.0,
        max_attempts: int = 2,
    ):
        self.path = Path(path)
        self.backup_dir = Path(backup_dir)
        self.timeout = timeout
        self.max_attempts = max(1, max_attempts)
        self._document: Collections = empty_document()
        self._lock = asyncio.Lock()

    async def load(self) -> Collections:
        """
        Read the document from disk.
        A missing file yields empty collections; an unreadable one raises.
        """
        async with self._lock:
            try:
                document = await asyncio.wait_for(
                    asyncio.to_thread(self._read), timeout=self.timeout
                )
            except asyncio.TimeoutError:
                logger.error("store_load_timeout", path=str(self.path))
                raise Timeout("Loading the data file timed out")

            for name in DEFAULT_COLLECTIONS:
                document.setdefault(name, [])
            self._document = document

        logger.info(
            "store_loaded",
            path=str(self.path),
            collections={name: len(items) for name, items in document.items() if isinstance(items, list)},
        )
        return {name: list(items) for name, items in document.items()}

    async def flush(self, collections: Collections, timeout: Optional[float] = None) -> None:
        """
        Durably replace the named collections.
        Collections not named keep their last known contents.
        """
        deadline = self.timeout if timeout is None else timeout

        async with self._lock:
            document = {**self._document, **{name: list(items) for name, items in collections.items()}}
            payload = json.dumps(document, indent=2, ensure_ascii=False)

            for attempt in range(1, self.max_attempts + 1):
                ticket = _FlushTicket()
                started = time.perf_counter()
                try:
                    await asyncio.wait_for(
                        asyncio.to_thread(self._write_atomic, payload, ticket),
                        timeout=deadline,
                    )
                except asyncio.TimeoutError:
                    if not ticket.cancel():
                        record_flush("timeout")
                        logger.error("store_flush_timeout", path=str(self.path), timeout=deadline)
                        raise Timeout(f"Flush did not complete within {deadline}s")
                    # rename landed just before the deadline fired
                except OSError as e:
                    if attempt < self.max_attempts:
                        record_flush("retry")
                        logger.warning("store_flush_retry", path=str(self.path), attempt=attempt, error=str(e))
                        continue
                    record_flush("error")
                    logger.error("store_flush_failed", path=str(self.path), attempts=attempt, error=str(e))
                    raise PersistenceError(f"Could not write {self.path.name}: {e}") from e

                persistence_flush_latency.observe(time.perf_counter() - started)
                record_flush("success")
                self._document = document
                logger.debug("store_flushed", path=str(self.path), collections=sorted(collections), attempt=attempt)
                return

    async def backup(self) -> Optional[Path]:
        """Copy the data file to a timestamped backup directory."""
        async with self._lock:
            return await asyncio.to_thread(self._backup)

    async def reset(self, reseed: Optional[Collections] = None, backup: bool = True) -> Optional[Path]:
        """
        Delete every collection, optionally backing up first and reseeding
        from a fixture. Returns the backup location, if one was made.
        """
        async with self._lock:
            backup_path = await asyncio.to_thread(self._backup) if backup else None
            try:
                await asyncio.to_thread(self._delete)
            except OSError as e:
                raise PersistenceError(f"Could not delete {self.path.name}: {e}") from e
            self._document = empty_document()
            logger.warning("store_reset", path=str(self.path), backup=str(backup_path) if backup_path else None)

        if reseed is not None:
            await self.flush(reseed)
            logger.info("store_reseeded", collections={name: len(items) for name, items in reseed.items()})
        return backup_path

    def _read(self) -> Collections:
        if not self.path.exists():
            return empty_document()
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                document = json.load(fh)
        except (OSError, json.JSONDecodeError) as e:
            logger.error("store_load_failed", path=str(self.path), error=str(e))
            raise PersistenceError(f"Could not read {self.path.name}: {e}") from e

        if not isinstance(document, dict):
            raise PersistenceError(f"{self.path.name} must contain a JSON object")
        return document

    def _write_atomic(self, payload: str, ticket: _FlushTicket) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
                fh.flush()
                os.fsync(fh.fileno())
            with ticket.lock:
                if ticket.cancelled:
                    return
                os.replace(tmp_name, self.path)
                ticket.committed = True
        finally:
            if not ticket.committed and os.path.exists(tmp_name):
                os.unlink(tmp_name)

    def _backup(self) -> Optional[Path]:
        if not self.path.exists():
            logger.info("store_backup_skipped", reason="no_data_file")
            return None

        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S-%f")
        target_dir = self.backup_dir / f"backup-{timestamp}"
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            target = target_dir / self.path.name
            shutil.copy2(self.path, target)
        except OSError as e:
            logger.error("store_backup_failed", path=str(self.path), error=str(e))
            raise PersistenceError(f"Could not back up {self.path.name}: {e}") from e

        logger.info("store_backed_up", path=str(target))
        return target

    def _delete(self) -> None:
        if self.path.exists():
            self.path.unlink()
