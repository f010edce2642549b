"""
Paywall для заметок (внутренняя библиотека).
Decision (access) и execution (delivery) разделены; контракт через AccessContext.
"""
from notestore.paywall.access import decide_access
from notestore.paywall.delivery import resolve_note_file
from notestore.paywall.models import (
    AccessContext,
    AccessDecision,
    DenyReason,
    NoteFile,
)

__all__ = [
    "AccessContext",
    "AccessDecision",
    "DenyReason",
    "NoteFile",
    "decide_access",
    "resolve_note_file",
]
