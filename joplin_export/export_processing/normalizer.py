"""
Header field normalization for template rendering.

Subject and author can be trimmed with user defined patterns (e.g. to strip
"Re: Fwd:" prefixes) and the date can be formatted. The result only feeds the
rendering context; the note metadata keeps the original values.
"""
import re
from datetime import datetime
from typing import Any, Dict, Optional, Union

from ..exceptions import ConfigurationError
from ..models.mail import MailHeader
from ..models.settings import ExportSettings


def _compile(pattern: str, field_name: str) -> Optional["re.Pattern[str]"]:
    if not pattern:
        return None
    try:
        return re.compile(pattern)
    except re.error as e:
        raise ConfigurationError(f"Invalid {field_name} trim pattern: {e}") from e


class FieldNormalizer:
    """Applies the trim patterns and date format of one settings snapshot."""

    def __init__(self, settings: ExportSettings):
        self.subject_pattern = _compile(settings.subject_trim_regex, "subject")
        self.author_pattern = _compile(settings.author_trim_regex, "author")
        self.date_format = settings.date_format

    def trim_subject(self, subject: str) -> str:
        return self._trim(self.subject_pattern, subject)

    def trim_author(self, author: str) -> str:
        return self._trim(self.author_pattern, author)

    def format_date(self, date: Optional[datetime]) -> Union[str, datetime, None]:
        """Format the date if a format is configured, else pass it through."""
        if not self.date_format or date is None:
            return date
        return date.strftime(self.date_format)

    def build_context(self, header: MailHeader) -> Dict[str, Any]:
        """
        Build the rendering context of a mail.

        All header fields, including host specific extras like recipients,
        are available to templates. Subject, author and date are normalized.
        """
        context = header.model_dump()
        context.update(
            subject=self.trim_subject(header.subject),
            author=self.trim_author(header.author),
            date=self.format_date(header.date),
        )
        return context

    @staticmethod
    def _trim(pattern: Optional["re.Pattern[str]"], value: str) -> str:
        # Only the first match is removed.
        if pattern is None:
            return value
        return pattern.sub("", value, count=1)
