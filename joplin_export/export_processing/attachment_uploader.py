"""
Attachment upload for exported notes.

Each mail attachment becomes a Joplin resource. The note body then gets a
list of links to the uploaded resources. A failed upload skips only that
attachment; a failed body update leaves the resources unlinked.
"""
from typing import List, Tuple

from ..exceptions import JoplinAPIError
from ..models.mail import MailAttachment, MailHeader
from ..models.note import AttachmentOutcome, OutcomeStatus, RemoteNote
from ..utils.logging import get_logger
from .interface import MailHost
from .joplin_client import JoplinClient

logger = get_logger(__name__)

ATTACHMENTS_HEADING = "\n\n**Attachments**: "


def resource_link(name: str, resource_id: str) -> str:
    return f"\n[{name}](:/{resource_id})"


class AttachmentUploader:
    """Uploads the attachments of a mail and links them in its note."""

    def __init__(self, client: JoplinClient, host: MailHost):
        self.client = client
        self.host = host

    async def upload_all(
        self, header: MailHeader, note: RemoteNote
    ) -> Tuple[RemoteNote, List[AttachmentOutcome]]:
        """
        Upload every attachment and append the links to the note body.

        Args:
            header: The exported mail
            note: The note as currently stored in Joplin

        Returns:
            The note with its new body, and one outcome per attachment
        """
        attachments = [
            item if isinstance(item, MailAttachment) else MailAttachment.model_validate(item)
            for item in await self.host.list_attachments(header.id) or []
        ]
        if not attachments:
            return note, []

        outcomes = []
        attachment_string = ATTACHMENTS_HEADING
        for attachment in attachments:
            outcome = await self.upload(header.id, attachment)
            outcomes.append(outcome)
            if outcome.attached:
                attachment_string += resource_link(attachment.name, outcome.resource_id)

        # Always operate on body, even if the note was created from body_html.
        new_body = note.body + attachment_string
        try:
            await self.client.update_note_body(note.id, new_body, return_note=False)
        except JoplinAPIError as e:
            logger.warning(f"Failed to attach resource to note: {e}")
            return note, outcomes

        return note.model_copy(update={"body": new_body}), outcomes

    async def upload(self, mail_id: str, attachment: MailAttachment) -> AttachmentOutcome:
        attachment_file = await self.host.get_attachment_file(mail_id, attachment.part_name)
        try:
            resource_info = await self.client.create_resource(
                attachment.name, attachment_file, attachment.content_type
            )
        except JoplinAPIError as e:
            return self._skip(attachment, f"Failed to create resource: {e}")

        if not isinstance(resource_info, dict) or not resource_info.get("id"):
            return self._skip(
                attachment, f"Failed to create resource: unexpected response {resource_info!r}"
            )

        return AttachmentOutcome(
            name=attachment.name,
            status=OutcomeStatus.ATTACHED,
            resource_id=resource_info["id"],
        )

    @staticmethod
    def _skip(attachment: MailAttachment, reason: str) -> AttachmentOutcome:
        logger.warning(reason)
        return AttachmentOutcome(
            name=attachment.name, status=OutcomeStatus.SKIPPED, reason=reason
        )
