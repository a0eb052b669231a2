"""
Note creation and header insertion.

Both calls are on the critical path of a mail: if either fails the remaining
steps are skipped. A note that was already created stays in Joplin.
"""
from pydantic import ValidationError

from ..exceptions import ExportError, JoplinAPIError
from ..models.note import NoteDraft, RemoteNote
from ..utils.logging import get_logger
from .joplin_client import JoplinClient

logger = get_logger(__name__)


class NoteUploader:
    """Creates the note of a mail and keeps its body prefix up to date."""

    def __init__(self, client: JoplinClient):
        self.client = client

    async def create_note(self, draft: NoteDraft) -> RemoteNote:
        try:
            note_info = await self.client.create_note(draft.to_payload())
        except JoplinAPIError as e:
            raise ExportError(f"Failed to create note: {e}") from e

        try:
            note = RemoteNote.model_validate(note_info)
        except ValidationError as e:
            raise ExportError(f"Failed to create note: unexpected response {note_info!r}") from e
        logger.debug(
            "Created note",
            extra={"data": {"note_id": note.id, "title": draft.title}}
        )
        return note

    async def append_header(self, note: RemoteNote, header_info: str) -> RemoteNote:
        """
        Put the rendered header in front of the note body.

        This is done after creation because Joplin converts body_html to
        markdown, so the header needs no html/plain switching here.
        """
        try:
            note_info = await self.client.update_note_body(
                note.id, header_info + note.body
            )
        except JoplinAPIError as e:
            raise ExportError(f"Failed to add header info to note: {e}") from e

        try:
            return RemoteNote.model_validate(note_info)
        except ValidationError as e:
            raise ExportError(
                f"Failed to add header info to note: unexpected response {note_info!r}"
            ) from e
