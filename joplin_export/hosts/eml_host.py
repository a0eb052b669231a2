"""
Mail host backed by .eml files.

Lets the export pipeline run from the command line: every given file counts
as a displayed message of the one and only "tab". There is never a text
selection, and tags come from the Keywords / X-Mozilla-Keys headers with
their key doubling as label.
"""
from email import policy
from email.message import EmailMessage
from email.parser import BytesParser
from email.utils import getaddresses
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from ..models.mail import MailAttachment, MailBody, MailHeader, TagDefinition
from ..utils.datetime_utils import parse_datetime
from ..utils.logging import get_logger

logger = get_logger(__name__)

KEYWORD_HEADERS = ("Keywords", "X-Mozilla-Keys")


def _addresses(message: EmailMessage, name: str) -> List[str]:
    values = message.get_all(name) or []
    return [
        f"{display} <{address}>" if display else address
        for display, address in getaddresses([str(value) for value in values])
        if address
    ]


def _keywords(message: EmailMessage) -> List[str]:
    keywords = []
    for header_name in KEYWORD_HEADERS:
        for value in message.get_all(header_name) or []:
            for keyword in str(value).replace(",", " ").split():
                if keyword not in keywords:
                    keywords.append(keyword)
    return keywords


def body_tree(part: EmailMessage) -> MailBody:
    """Convert a parsed message into the MailBody tree the pipeline walks."""
    content_type = part.get_content_type()
    if content_type == "message/rfc822":
        # iter_parts() only covers multipart/*; a forwarded mail is the payload.
        return MailBody(
            content_type=content_type,
            parts=[body_tree(child) for child in part.get_payload()],
        )
    if part.is_multipart():
        return MailBody(
            content_type=content_type,
            parts=[body_tree(child) for child in part.iter_parts()],
        )

    body = None
    if part.get_content_maintype() == "text" and not part.is_attachment():
        body = part.get_content()
    return MailBody(content_type=content_type, body=body)


class EmlFileHost:
    """MailHost over a fixed list of .eml files."""

    def __init__(self, paths: Sequence[Path]):
        self.messages: Dict[str, EmailMessage] = {}
        parser = BytesParser(policy=policy.default)
        for path in paths:
            path = Path(path)
            with open(path, "rb") as file:
                self.messages[str(path)] = parser.parse(file)
        logger.debug("Loaded mail files", extra={"data": {"count": len(self.messages)}})

    def _message(self, mail_id: str) -> EmailMessage:
        return self.messages[mail_id]

    def header(self, mail_id: str) -> MailHeader:
        message = self._message(mail_id)
        date_header = message["Date"]
        return MailHeader(
            id=mail_id,
            subject=str(message["Subject"] or ""),
            author=str(message["From"] or ""),
            date=parse_datetime(str(date_header)) if date_header else None,
            tags=_keywords(message),
            recipients=_addresses(message, "To"),
            ccList=_addresses(message, "Cc"),
            bccList=_addresses(message, "Bcc"),
            headerMessageId=str(message["Message-ID"] or "").strip("<>"),
        )

    async def get_displayed_messages(self, tab_id: Any = None) -> List[Optional[MailHeader]]:
        return [self.header(mail_id) for mail_id in self.messages]

    async def get_full_body(self, mail_id: str) -> Optional[MailBody]:
        return body_tree(self._message(mail_id))

    async def get_selected_text(self) -> str:
        return ""

    def _attachment_parts(self, mail_id: str):
        # Part names are positions in the walk order, stable for one file.
        for index, part in enumerate(self._message(mail_id).walk()):
            if part.is_attachment():
                yield str(index), part

    async def list_attachments(self, mail_id: str) -> List[MailAttachment]:
        return [
            MailAttachment(
                name=part.get_filename() or f"attachment-{part_name}",
                part_name=part_name,
                content_type=part.get_content_type(),
            )
            for part_name, part in self._attachment_parts(mail_id)
        ]

    async def get_attachment_file(self, mail_id: str, part_name: str) -> bytes:
        for name, part in self._attachment_parts(mail_id):
            if name == part_name:
                return part.get_payload(decode=True) or b""
        raise KeyError(f"No attachment {part_name} in {mail_id}")

    async def list_tags(self) -> List[TagDefinition]:
        keys = []
        for message in self.messages.values():
            for keyword in _keywords(message):
                if keyword not in keys:
                    keys.append(keyword)
        return [TagDefinition(key=key, tag=key) for key in keys]

    async def get_active_tab_id(self) -> Any:
        return None


class LogNotifier:
    """Notifier for headless runs: the notification goes to the log."""

    async def notify(self, title: str, message: str, success: bool) -> None:
        if success:
            logger.info(title, extra={"data": {"message": message}})
        else:
            logger.error(title, extra={"data": {"message": message}})
