"""
Exception types for the export pipeline.

An ExportError ends the pipeline of a single mail; its message is what the
orchestrator logs for that mail. JoplinAPIError is raised by the REST client
and is only fatal when it happens on the note's critical path.
"""
from typing import Optional


class ExportError(Exception):
    """A mail could not be exported."""


class ConfigurationError(ExportError):
    """A required or malformed export setting."""


class ContentError(ExportError):
    """The mail has nothing that can be exported."""


class JoplinAPIError(Exception):
    """A request to the Joplin Data API did not succeed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        return self.message
