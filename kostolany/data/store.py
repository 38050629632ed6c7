"""Diagnosis stores: per-user latest result plus bounded history.

The store only persists what it is given.  Prepending the new result and
truncating to the history size is done by DiagnosisService before save().
"""

from __future__ import annotations

import asyncio
import json
import os
import re
import tempfile
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path

from kostolany.config import get_settings
from kostolany.exceptions import StorageError
from kostolany.models.diagnosis import DiagnosisHistory, DiagnosisResult, HistoryStats


class DiagnosisStore(ABC):
    """Abstract async record store for one user's diagnoses."""

    @abstractmethod
    async def load(self) -> DiagnosisHistory:
        """Full stored state. Empty history when nothing was saved yet."""
        ...

    @abstractmethod
    async def save(self, history: DiagnosisHistory) -> None:
        ...

    @abstractmethod
    async def clear_all(self) -> None:
        ...

    async def load_latest(self) -> DiagnosisResult | None:
        return (await self.load()).latest

    async def load_history(self) -> list[DiagnosisResult]:
        """Newest first."""
        return list((await self.load()).entries)

    async def find_by_timestamp(self, created_at: datetime) -> DiagnosisResult | None:
        history = await self.load()
        for result in history.entries:
            if result.created_at == created_at:
                return result
        if history.latest is not None and history.latest.created_at == created_at:
            return history.latest
        return None

    async def delete_by_timestamp(
        self, created_at: datetime, updated_at: datetime | None = None
    ) -> None:
        """Drop one result. Deleting the latest promotes the next remaining entry.

        ``updated_at`` becomes ``last_updated``; defaults to now (UTC).
        """
        history = await self.load()
        entries = [r for r in history.entries if r.created_at != created_at]
        latest = history.latest
        if latest is not None and latest.created_at == created_at:
            latest = entries[0] if entries else None
        await self.save(DiagnosisHistory(
            latest=latest,
            entries=entries,
            last_updated=updated_at or datetime.now(timezone.utc),
        ))

    async def stats(self) -> HistoryStats:
        history = await self.load()
        return HistoryStats(
            has_latest=history.latest is not None,
            history_count=len(history.entries),
            last_updated=history.last_updated,
        )


class InMemoryDiagnosisStore(DiagnosisStore):
    """Process-local store. Keeps a deep copy so callers cannot mutate it."""

    def __init__(self) -> None:
        self._history = DiagnosisHistory()

    async def load(self) -> DiagnosisHistory:
        return self._history.model_copy(deep=True)

    async def save(self, history: DiagnosisHistory) -> None:
        self._history = history.model_copy(deep=True)

    async def clear_all(self) -> None:
        self._history = DiagnosisHistory()


class JsonFileDiagnosisStore(DiagnosisStore):
    """One JSON file per user under ~/.kostolany/diagnosis/."""

    def __init__(self, user_key: str, storage_dir: Path | None = None) -> None:
        if storage_dir is None:
            cfg_dir = get_settings().diagnosis.storage_dir
            storage_dir = Path(cfg_dir) if cfg_dir else Path.home() / ".kostolany" / "diagnosis"
        self.storage_dir = storage_dir
        self.user_key = user_key

    @property
    def path(self) -> Path:
        safe = re.sub(r"[^A-Za-z0-9_.-]", "_", self.user_key)
        return self.storage_dir / f"{safe}.json"

    def _read(self) -> DiagnosisHistory:
        if not self.path.exists():
            return DiagnosisHistory()
        try:
            return DiagnosisHistory.model_validate_json(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise StorageError("json", f"Failed to read {self.path}: {e}") from e

    def _write(self, history: DiagnosisHistory) -> None:
        """Write atomically: temp file + rename."""
        data = json.dumps(history.model_dump(mode="json"), indent=2)
        try:
            self.storage_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.storage_dir, suffix=".tmp")
        except OSError as e:
            raise StorageError("json", f"Failed to prepare {self.storage_dir}: {e}") from e
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(data)
            os.replace(tmp, self.path)
        except OSError as e:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise StorageError("json", f"Failed to write {self.path}: {e}") from e

    def _remove(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError("json", f"Failed to remove {self.path}: {e}") from e

    async def load(self) -> DiagnosisHistory:
        return await asyncio.to_thread(self._read)

    async def save(self, history: DiagnosisHistory) -> None:
        await asyncio.to_thread(self._write, history)

    async def clear_all(self) -> None:
        await asyncio.to_thread(self._remove)
