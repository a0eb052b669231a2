"""
Export triggers and result aggregation.

There are three ways to export the displayed mails: the toolbar button, the
hotkey and the context menu. Each trigger runs one pipeline per displayed
mail concurrently and ends with exactly one notification decision.
"""
import asyncio
from typing import Any, List, Optional

import httpx

from .config import settings as app_settings
from .exceptions import ConfigurationError
from .export_processing.interface import MailHost, Notifier, SettingsStore
from .export_processing.joplin_client import JoplinClient
from .export_processing.processor import ExportProcessor
from .models.note import ExportSummary, MailExportResult
from .models.settings import ExportSettings, NotificationMode
from .utils.logging import get_logger

logger = get_logger(__name__)

EXPORT_COMMAND = "export_to_joplin"

SUCCESS_TITLE = "Joplin export succeeded"
FAILURE_TITLE = "Joplin export failed"
FAILURE_MESSAGE = "Please check the export log."
TOKEN_MISSING_MESSAGE = "API token missing."


def should_notify(mode: NotificationMode, success: bool) -> bool:
    if success:
        return mode in (NotificationMode.ALWAYS, NotificationMode.ON_SUCCESS)
    return mode in (NotificationMode.ALWAYS, NotificationMode.ON_FAILURE)


def success_message(count: int) -> str:
    return "Exported one email." if count == 1 else f"Exported {count} emails."


class MailExporter:
    """Entry point for all export triggers of a mail client."""

    def __init__(
        self,
        host: MailHost,
        settings_store: SettingsStore,
        notifier: Notifier,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
    ):
        """
        Args:
            host: MailHost of the mail client
            settings_store: SettingsStore with the export options
            notifier: Notifier that shows the final result
            transport: Optional httpx transport, e.g. for a mocked Joplin
            timeout: Request timeout, defaults to REQUEST_TIMEOUT_SECONDS
        """
        self.host = host
        self.settings_store = settings_store
        self.notifier = notifier
        self.transport = transport
        self.timeout = timeout if timeout is not None else app_settings.REQUEST_TIMEOUT_SECONDS

    async def handle_menu_button(self, tab_id: Any) -> ExportSummary:
        logger.debug("Export via menu button.")
        return await self.get_and_process_messages(tab_id)

    async def handle_context_menu(self, menu_item_id: str, tab_id: Any) -> Optional[ExportSummary]:
        if menu_item_id != EXPORT_COMMAND:
            return None
        logger.debug("Export via context menu.")
        return await self.get_and_process_messages(tab_id)

    async def handle_hotkey(self, command: str) -> Optional[ExportSummary]:
        if command != EXPORT_COMMAND:
            return None
        logger.debug("Export via hotkey.")
        # Only the active tab is exported.
        tab_id = await self.host.get_active_tab_id()
        return await self.get_and_process_messages(tab_id)

    async def get_and_process_messages(self, tab_id: Any) -> ExportSummary:
        """
        Export all mails displayed in a tab.

        Args:
            tab_id: Host tab whose displayed messages are exported

        Returns:
            Summary with one result per mail and the notification text
        """
        results: List[MailExportResult] = []
        notification_mode = NotificationMode.ON_FAILURE
        try:
            export_settings = await ExportSettings.load(self.settings_store)
        except ConfigurationError as e:
            logger.error(str(e))
            success, message = False, FAILURE_MESSAGE
        else:
            notification_mode = export_settings.show_notifications
            # Without token nothing can be exported, so skip everything else.
            if not export_settings.token:
                success, message = False, TOKEN_MISSING_MESSAGE
            else:
                results = await self._export_displayed(tab_id, export_settings)
                success = all(result.success for result in results)
                message = success_message(len(results)) if success else FAILURE_MESSAGE

        summary = ExportSummary(
            success=success,
            title=SUCCESS_TITLE if success else FAILURE_TITLE,
            message=message,
            results=results,
        )

        if should_notify(notification_mode, success):
            await self.notifier.notify(summary.title, summary.message, success)
            summary.notified = True
        return summary

    async def _export_displayed(
        self, tab_id: Any, export_settings: ExportSettings
    ) -> List[MailExportResult]:
        mail_headers = await self.host.get_displayed_messages(tab_id) or []
        logger.debug(f"Got {len(mail_headers)} emails at tab {tab_id}.")

        async with JoplinClient(
            export_settings.base_url,
            export_settings.token,
            timeout=self.timeout,
            transport=self.transport,
        ) as client:
            processor = ExportProcessor(self.host, self.settings_store, client)
            outcomes = await asyncio.gather(
                *(processor.export_mail(header) for header in mail_headers),
                return_exceptions=True,
            )

        results = []
        for outcome in outcomes:
            if isinstance(outcome, BaseException) and not isinstance(outcome, Exception):
                raise outcome
            if isinstance(outcome, Exception):
                logger.error("Unexpected error while exporting mail", exc_info=outcome)
                outcome = MailExportResult(error=f"Unexpected error: {outcome}")
            if outcome.error:
                logger.error(outcome.error, extra={"data": {"mail_id": outcome.mail_id}})
            results.append(outcome)
        return results
