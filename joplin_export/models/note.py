"""
Note-related Pydantic models for joplin-export.
"""
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class NoteDraft(BaseModel):
    """Payload of the note creation request."""

    title: str = Field(description="Rendered note title")
    parent_id: str = Field(description="Destination notebook id")
    is_todo: int = Field(default=0, ge=0, le=1, description="1 to create a to-do")
    author: str = Field(default="", description="Unmodified mail author")
    user_created_time: int = Field(default=0, description="Mail date in epoch millis, 0 if unknown")
    body: Optional[str] = Field(default=None, description="Markdown/plain body")
    body_html: Optional[str] = Field(default=None, description="HTML body, converted by Joplin")

    def to_payload(self) -> dict:
        """Request body with the unselected body fields left out."""
        return self.model_dump(exclude_none=True)


class RemoteNote(BaseModel):
    """The note as last returned by Joplin."""

    model_config = ConfigDict(extra="ignore")

    id: str
    body: str = ""

    @field_validator("body", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        return "" if value is None else value


class OutcomeStatus(str, Enum):
    ATTACHED = "attached"
    SKIPPED = "skipped"


class TagOutcome(BaseModel):
    """What happened to one tag candidate."""

    tag: str
    status: OutcomeStatus
    tag_id: Optional[str] = None
    reason: Optional[str] = None

    @property
    def attached(self) -> bool:
        return self.status == OutcomeStatus.ATTACHED


class AttachmentOutcome(BaseModel):
    """What happened to one mail attachment."""

    name: str
    status: OutcomeStatus
    resource_id: Optional[str] = None
    reason: Optional[str] = None

    @property
    def attached(self) -> bool:
        return self.status == OutcomeStatus.ATTACHED


class MailExportResult(BaseModel):
    """Terminal outcome of one mail's pipeline."""

    mail_id: Optional[str] = Field(default=None, description="Host message id, if known")
    error: Optional[str] = Field(default=None, description="Failure reason, None on success")
    note_id: Optional[str] = Field(default=None, description="Created note id")
    tags: List[TagOutcome] = Field(default_factory=list)
    attachments: List[AttachmentOutcome] = Field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.error is None


class ExportSummary(BaseModel):
    """Aggregate of one triggering action."""

    success: bool
    title: str
    message: str
    results: List[MailExportResult] = Field(default_factory=list)
    notified: bool = False
