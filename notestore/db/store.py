"""
EntityStore - плоский JSON-документ с атомарным commit.

Все изменения идут через commit(mutator): под одним asyncio.Lock
загружается свежий снапшот, применяется mutator, результат пишется
во временный файл и подменяется через os.replace. Читатели видят
либо состояние до commit, либо после, но не частично записанный файл.
"""
from __future__ import annotations

import asyncio
import logging
import os
import tempfile
from pathlib import Path
from typing import Callable, TypeVar

from pydantic import ValidationError as PydanticValidationError

from notestore.core.errors import StoreCorrupt
from notestore.models.entities import Snapshot

logger = logging.getLogger(__name__)

T = TypeVar("T")


class EntityStore:
    def __init__(self, path: str | os.PathLike) -> None:
        self.path = Path(path)
        self._lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Disk I/O (sync, runs in a worker thread)
    # ------------------------------------------------------------------

    def _read(self) -> Snapshot:
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            return Snapshot()
        except OSError as e:
            logger.error("store_read_failed", extra={"path": str(self.path), "error": str(e)})
            raise StoreCorrupt(f"Cannot read {self.path.name}") from e
        try:
            return Snapshot.model_validate_json(raw)
        except PydanticValidationError as e:
            logger.error("store_document_invalid", extra={"path": str(self.path), "error": str(e)})
            raise StoreCorrupt(f"{self.path.name} is corrupt") from e

    def _write(self, snapshot: Snapshot) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = snapshot.model_dump_json(by_alias=True, indent=2)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, self.path)
        except BaseException:
            try:
                os.unlink(tmp)
            except FileNotFoundError:
                pass
            raise

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def open(self) -> Snapshot:
        """Проверить документ при старте. Нет файла - пустой снапшот; битый - StoreCorrupt."""
        snapshot = await asyncio.to_thread(self._read)
        logger.info(
            "store_opened",
            extra={"path": str(self.path)},
        )
        return snapshot

    async def load(self) -> Snapshot:
        """Fully materialized copy of the last committed state."""
        return await asyncio.to_thread(self._read)

    async def commit(self, mutator: Callable[[Snapshot], T]) -> T:
        """
        Apply mutator to a freshly loaded snapshot and persist the result atomically.
        If mutator raises, nothing is written. Returns whatever mutator returns.
        """
        async with self._lock:
            snapshot = await asyncio.to_thread(self._read)
            before = snapshot.model_dump(by_alias=True)
            result = mutator(snapshot)
            if snapshot.model_dump(by_alias=True) != before:
                await asyncio.to_thread(self._write, snapshot)
            return result
