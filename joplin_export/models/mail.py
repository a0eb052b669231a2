"""
Mail-related Pydantic models for joplin-export.

These mirror what a mail client host hands over: the displayed message
header, its MIME body tree, its attachment listing and the tag definitions.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MailHeader(BaseModel):
    """Metadata of one displayed message."""

    # Hosts send more than we model (recipients, ccList, folder, ...).
    # Extra fields are kept so templates can reference them.
    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    id: str = Field(description="Host-side message identifier")
    subject: str = Field(default="", description="Subject line")
    author: str = Field(default="", description='Sender in display form, e.g. "Name <addr>"')
    date: Optional[datetime] = Field(default=None, description="Date the message was sent")
    tags: List[str] = Field(default_factory=list, description="Opaque tag keys of the message")

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value):
        return str(value)

    @field_validator("subject", "author", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        return "" if value is None else value

    @field_validator("tags", mode="before")
    @classmethod
    def _none_to_list(cls, value):
        return [] if value is None else value


class MailBody(BaseModel):
    """One node of a MIME body tree."""

    model_config = ConfigDict(populate_by_name=True)

    content_type: Optional[str] = Field(default=None, alias="contentType")
    body: Optional[str] = None
    parts: List["MailBody"] = Field(default_factory=list)

    @field_validator("parts", mode="before")
    @classmethod
    def _none_to_list(cls, value):
        return [] if value is None else value


class MailAttachment(BaseModel):
    """An attachment as listed by the host."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    part_name: str = Field(alias="partName")
    content_type: Optional[str] = Field(default=None, alias="contentType")
    size: Optional[int] = None


class TagDefinition(BaseModel):
    """Mapping from a host tag key to its human readable label."""

    key: str
    tag: str


MailBody.model_rebuild()
