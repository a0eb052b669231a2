"""
joplin-export models package.
"""

from .mail import MailAttachment, MailBody, MailHeader, TagDefinition
from .note import (
    AttachmentOutcome,
    ExportSummary,
    MailExportResult,
    NoteDraft,
    OutcomeStatus,
    RemoteNote,
    TagOutcome,
)
from .settings import AttachmentPolicy, ExportSettings, NoteFormat, NotificationMode

__all__ = [
    "AttachmentOutcome",
    "AttachmentPolicy",
    "ExportSettings",
    "ExportSummary",
    "MailAttachment",
    "MailBody",
    "MailExportResult",
    "MailHeader",
    "NoteDraft",
    "NoteFormat",
    "NotificationMode",
    "OutcomeStatus",
    "RemoteNote",
    "TagDefinition",
    "TagOutcome",
]
