"""
Mail body selection.

Decides which text of a mail ends up in the note: the user's selection if
there is one, otherwise the HTML or plain text parts of the full message,
depending on the preferred format and on what the message actually contains.
"""
from typing import List, NamedTuple, Optional, Tuple

from ..exceptions import ContentError
from ..models.mail import MailBody
from ..models.settings import NoteFormat
from ..utils.logging import get_logger
from .interface import MailHost
from .renderer import only_whitespace

logger = get_logger(__name__)

# The host guarantees an acyclic tree; this only bounds malformed input.
MAX_PART_DEPTH = 64


class SelectedBody(NamedTuple):
    body: Optional[str] = None
    body_html: Optional[str] = None


def get_mail_content(mail: Optional[MailBody], content_type: str) -> str:
    """
    Concatenate the payload of every part with the given content type.

    Parts are visited depth first in document order.

    Args:
        mail: Root of the MIME tree, may be None
        content_type: MIME type to collect, e.g. "text/html"

    Returns:
        The collected text, empty if nothing matched
    """
    if mail is None:
        return ""

    content = []
    stack: List[Tuple[MailBody, int]] = [(mail, 0)]
    while stack:
        part, depth = stack.pop()
        if part.body and part.content_type == content_type:
            content.append(part.body)
        if depth >= MAX_PART_DEPTH:
            if part.parts:
                logger.warning(
                    "Ignoring nested mail parts beyond maximum depth",
                    extra={"data": {"max_depth": MAX_PART_DEPTH}}
                )
            continue
        # Reversed, so the first child is popped first.
        for child in reversed(part.parts):
            stack.append((child, depth + 1))
    return "".join(content)


class ContentSelector:
    """Chooses the note body for one mail."""

    def __init__(self, host: MailHost):
        self.host = host

    async def select(self, mail_id: str, preferred: NoteFormat) -> SelectedBody:
        """
        Select the body fields of the note.

        Raises:
            ContentError: if the mail has neither HTML nor plain text content
        """
        # If there is selected text, prefer it over the full email.
        selected_text = await self.host.get_selected_text() or ""
        if not only_whitespace(selected_text):
            logger.info("Sending selection in plain format.")
            return SelectedBody(body=selected_text)

        mail = await self.host.get_full_body(mail_id)
        if isinstance(mail, dict):
            mail = MailBody.model_validate(mail)
        body_html = get_mail_content(mail, NoteFormat.HTML.value)
        body_plain = get_mail_content(mail, NoteFormat.PLAIN.value)
        if not body_html and not body_plain:
            raise ContentError("Mail body is empty")

        # A format without content falls back to the other one.
        selected = SelectedBody()
        if (preferred == NoteFormat.HTML and body_html) or not body_plain:
            logger.info("Sending complete email in HTML format.")
            selected = selected._replace(body_html=body_html)
        if (preferred == NoteFormat.PLAIN and body_plain) or not body_html:
            logger.info("Sending complete email in plain format.")
            selected = selected._replace(body=body_plain)
        return selected
