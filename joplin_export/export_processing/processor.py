"""
Export pipeline orchestration for a single mail.

Runs the steps of one mail strictly in order:
header check -> destination check -> body selection -> title rendering ->
note creation -> optional header -> tags -> optional attachments.

Failures up to and including the header insertion end the pipeline with an
error message. Tags and attachments only produce warnings.
"""
from typing import Any, Dict, Optional, Union

import structlog
from pydantic import ValidationError

from ..exceptions import ConfigurationError, ContentError, ExportError
from ..models.mail import MailHeader
from ..models.note import MailExportResult, NoteDraft
from ..models.settings import AttachmentPolicy, ExportSettings
from ..utils.datetime_utils import to_epoch_millis
from ..utils.logging import get_logger
from .attachment_uploader import AttachmentUploader
from .content_selector import ContentSelector
from .interface import MailHost, SettingsStore
from .joplin_client import JoplinClient
from .normalizer import FieldNormalizer
from .note_uploader import NoteUploader
from .renderer import render_template
from .tag_resolver import TagResolver

logger = get_logger(__name__)


class ExportProcessor:
    """Exports mails as Joplin notes."""

    def __init__(self, host: MailHost, settings_store: SettingsStore, client: JoplinClient):
        """
        Initialize the export processor.

        Args:
            host: MailHost giving access to the displayed mails
            settings_store: SettingsStore with the user's export options
            client: Joplin API client shared by all pipelines of one action
        """
        self.host = host
        self.settings_store = settings_store
        self.client = client
        self.content_selector = ContentSelector(host)
        self.note_uploader = NoteUploader(client)
        self.tag_resolver = TagResolver(client, host)
        self.attachment_uploader = AttachmentUploader(client, host)

    async def process_mail(self, mail_header: Union[MailHeader, Dict[str, Any], None]) -> Optional[str]:
        """Export one mail. Returns None on success, else the error message."""
        result = await self.export_mail(mail_header)
        return result.error

    async def export_mail(
        self, mail_header: Union[MailHeader, Dict[str, Any], None]
    ) -> MailExportResult:
        """
        Export one mail and report what happened.

        Args:
            mail_header: Header of the displayed mail as given by the host

        Returns:
            The result of the pipeline. ExportErrors are reported in its
            error field, everything else propagates.
        """
        if not mail_header:
            return MailExportResult(error="Mail header is empty")

        try:
            header = self._to_header(mail_header)
        except ContentError as e:
            return MailExportResult(error=str(e))

        with structlog.contextvars.bound_contextvars(mail_id=header.id):
            try:
                return await self._run_pipeline(header)
            except ExportError as e:
                return MailExportResult(mail_id=header.id, error=str(e))

    async def _run_pipeline(self, header: MailHeader) -> MailExportResult:
        settings = await ExportSettings.load(self.settings_store)

        # Technically a note can be created without a parent notebook.
        # It ends up in a random one though, which is rather annoying.
        parent_id = settings.note_parent_folder
        if not parent_id:
            raise ConfigurationError(f"Invalid destination notebook: {parent_id}.")

        normalizer = FieldNormalizer(settings)
        rendering_context = normalizer.build_context(header)

        title_rendered = render_template(settings.note_title_template, rendering_context)
        selected = await self.content_selector.select(header.id, settings.note_format)

        draft = NoteDraft(
            title=title_rendered,
            parent_id=parent_id,
            is_todo=int(settings.export_as_todo),
            author=header.author,
            user_created_time=to_epoch_millis(header.date),
            body=selected.body,
            body_html=selected.body_html,
        )
        note = await self.note_uploader.create_note(draft)

        if settings.note_header_template:
            header_info = render_template(settings.note_header_template, rendering_context)
            note = await self.note_uploader.append_header(note, header_info)

        candidates = await self.tag_resolver.collect_candidates(settings, header)
        tag_outcomes = await self.tag_resolver.resolve_all(note.id, candidates)

        attachment_outcomes = []
        if settings.attachments != AttachmentPolicy.IGNORE:
            note, attachment_outcomes = await self.attachment_uploader.upload_all(header, note)

        logger.debug(
            "Mail exported",
            extra={"data": {
                "note_id": note.id,
                "tags_attached": sum(1 for outcome in tag_outcomes if outcome.attached),
                "attachments_attached": sum(1 for outcome in attachment_outcomes if outcome.attached),
            }}
        )
        return MailExportResult(
            mail_id=header.id,
            note_id=note.id,
            tags=tag_outcomes,
            attachments=attachment_outcomes,
        )

    @staticmethod
    def _to_header(mail_header: Union[MailHeader, Dict[str, Any]]) -> MailHeader:
        if isinstance(mail_header, MailHeader):
            return mail_header
        try:
            return MailHeader.model_validate(mail_header)
        except ValidationError as e:
            raise ContentError(f"Invalid mail header: {e.error_count()} validation error(s)") from e
