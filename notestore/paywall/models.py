"""
DTO paywall: AccessContext (вход decide_access), AccessDecision, NoteFile.
"""
from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


# ----- Вход для decide_access (единый контракт, чтобы не расползаться по сигнатурам) -----


class AccessContext(BaseModel):
    """user_id=None означает, что запрос без авторизации."""

    user_id: str | None = None
    note_id: int
    # Целевой источник истины: note_id в purchased_notes пользователя
    owns_note: bool = False

    model_config = {"frozen": True}


class DenyReason(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    NOT_ENTITLED = "not_entitled"


# ----- Решение доступа (чистая логика, без I/O) -----


class AccessDecision(BaseModel):
    allowed: bool = Field(..., description="True = можно отдавать содержимое заметки")
    reason: DenyReason | None = Field(None, description="Причина отказа при allowed=False")

    model_config = {"frozen": True}


# ----- Результат resolve_note_file (путь + тип для отдачи) -----


class NoteFile(BaseModel):
    path: Path
    media_type: str
    download_name: str

    model_config = {"frozen": True}

    def read_bytes(self) -> bytes:
        return self.path.read_bytes()
