"""
Export options as read from the settings store.

ExportSettings is resolved once per pipeline run and never mutated, so
concurrent pipelines each work on their own snapshot.
"""
from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..exceptions import ConfigurationError


class NotificationMode(str, Enum):
    ALWAYS = "always"
    ON_SUCCESS = "onSuccess"
    ON_FAILURE = "onFailure"
    NEVER = "never"


class NoteFormat(str, Enum):
    HTML = "text/html"
    PLAIN = "text/plain"


class AttachmentPolicy(str, Enum):
    ATTACH = "attach"
    IGNORE = "ignore"


class ExportSettings(BaseModel):
    """Immutable snapshot of the user's export options."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    # Transport
    scheme: str = Field(default="http", description="Joplin Web Clipper scheme")
    host: str = Field(default="127.0.0.1", description="Joplin Web Clipper host")
    port: int = Field(default=41184, ge=1, le=65535, description="Joplin Web Clipper port")
    token: str = Field(default="", description="Joplin API token")

    # Destination and notification
    note_parent_folder: str = Field(default="", description="Notebook id that receives the notes")
    show_notifications: NotificationMode = NotificationMode.ON_FAILURE

    # Customization
    subject_trim_regex: str = ""
    author_trim_regex: str = ""
    date_format: str = Field(default="", description="strftime format used for {{date}}")
    note_title_template: str = "{{subject}} from {{author}}"
    note_header_template: str = ""
    note_format: NoteFormat = NoteFormat.HTML
    export_as_todo: bool = False

    # Tags and attachments
    note_tags: str = Field(default="", description="Comma separated tags added to every note")
    note_tags_from_email: bool = False
    attachments: AttachmentPolicy = AttachmentPolicy.ATTACH

    @field_validator(
        "token",
        "note_parent_folder",
        "subject_trim_regex",
        "author_trim_regex",
        "date_format",
        "note_header_template",
        "note_tags",
        mode="before",
    )
    @classmethod
    def _optional_string(cls, value):
        return "" if value is None else value

    @field_validator("export_as_todo", "note_tags_from_email", mode="before")
    @classmethod
    def _optional_flag(cls, value):
        return False if value is None else value

    @property
    def base_url(self) -> str:
        return f"{self.scheme}://{self.host}:{self.port}"

    @classmethod
    def from_mapping(cls, values: Dict[str, Any]) -> "ExportSettings":
        """
        Build a snapshot from raw store values.

        Keys the store does not know (None) fall back to the defaults above.

        Raises:
            ConfigurationError: if a value has the wrong type or an unknown enum value
        """
        present = {key: value for key, value in values.items() if value is not None}
        try:
            return cls.model_validate(present)
        except ValidationError as e:
            fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err["loc"])
            raise ConfigurationError(f"Invalid export settings: {fields}") from e

    @classmethod
    async def load(cls, store) -> "ExportSettings":
        """Resolve every option from a SettingsStore."""
        values = {}
        for name in cls.model_fields:
            values[name] = await store.get(name)
        return cls.from_mapping(values)
