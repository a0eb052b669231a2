"""
Collaborator interfaces of the export pipeline.

The pipeline never talks to a mail client, a settings backend or a
notification area directly. It is handed objects implementing these
protocols, so a Thunderbird bridge, the .eml command line host and test
doubles are interchangeable.
"""
from typing import Any, List, Optional, Protocol, runtime_checkable

from ..models.mail import MailAttachment, MailBody, MailHeader, TagDefinition


@runtime_checkable
class MailHost(Protocol):
    """Access to the messages shown by the mail client."""

    async def get_displayed_messages(self, tab_id: Any) -> List[Optional[MailHeader]]:
        ...

    async def get_full_body(self, mail_id: str) -> Optional[MailBody]:
        ...

    async def get_selected_text(self) -> str:
        ...

    async def list_attachments(self, mail_id: str) -> List[MailAttachment]:
        ...

    async def get_attachment_file(self, mail_id: str, part_name: str) -> bytes:
        ...

    async def list_tags(self) -> List[TagDefinition]:
        ...

    async def get_active_tab_id(self) -> Any:
        ...


@runtime_checkable
class SettingsStore(Protocol):
    """Named export options. Unknown names resolve to None."""

    async def get(self, name: str) -> Any:
        ...


@runtime_checkable
class Notifier(Protocol):
    """Shows the one notification emitted per triggering action."""

    async def notify(self, title: str, message: str, success: bool) -> None:
        ...
