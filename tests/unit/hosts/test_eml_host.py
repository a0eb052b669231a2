"""
Tests for the .eml file host.
"""

from datetime import datetime, timedelta, timezone
from email.message import EmailMessage

import pytest

from joplin_export.export_processing.content_selector import get_mail_content
from joplin_export.export_processing.interface import MailHost, Notifier, SettingsStore
from joplin_export.hosts.eml_host import EmlFileHost, LogNotifier
from joplin_export.settings_store import DictSettingsStore


def write_mail(path, attachment: bool = True):
    message = EmailMessage()
    message["Subject"] = "Re: Quarterly report"
    message["From"] = "Jane Doe <jane@example.com>"
    message["To"] = "Bob <bob@example.com>, carol@example.com"
    message["Cc"] = "dave@example.com"
    message["Date"] = "Mon, 31 Aug 2025 10:00:00 +0200"
    message["Message-ID"] = "<abc@example.com>"
    message["Keywords"] = "work, important"
    message.set_content("plain body\n")
    message.add_alternative("<p>html body</p>\n", subtype="html")
    if attachment:
        message.add_attachment(
            b"%PDF-1.4", maintype="application", subtype="pdf", filename="report.pdf"
        )
    path.write_bytes(bytes(message))
    return path


@pytest.fixture
def eml_host(tmp_path):
    return EmlFileHost([write_mail(tmp_path / "mail.eml")])


class TestEmlFileHost:

    @pytest.mark.asyncio
    async def test_header(self, eml_host, tmp_path):
        headers = await eml_host.get_displayed_messages()

        assert len(headers) == 1
        header = headers[0]
        assert header.id == str(tmp_path / "mail.eml")
        assert header.subject == "Re: Quarterly report"
        assert header.author == "Jane Doe <jane@example.com>"
        assert header.date == datetime(2025, 8, 31, 10, 0, tzinfo=timezone(timedelta(hours=2)))
        assert header.tags == ["work", "important"]
        assert header.recipients == ["Bob <bob@example.com>", "carol@example.com"]
        assert header.ccList == ["dave@example.com"]
        assert header.bccList == []
        assert header.headerMessageId == "abc@example.com"

    @pytest.mark.asyncio
    async def test_body_tree(self, eml_host, tmp_path):
        body = await eml_host.get_full_body(str(tmp_path / "mail.eml"))

        assert body.content_type == "multipart/mixed"
        assert get_mail_content(body, "text/plain") == "plain body\n"
        assert get_mail_content(body, "text/html") == "<p>html body</p>\n"

    @pytest.mark.asyncio
    async def test_attachments(self, eml_host, tmp_path):
        mail_id = str(tmp_path / "mail.eml")

        attachments = await eml_host.list_attachments(mail_id)

        assert [attachment.name for attachment in attachments] == ["report.pdf"]
        assert attachments[0].content_type == "application/pdf"
        content = await eml_host.get_attachment_file(mail_id, attachments[0].part_name)
        assert content == b"%PDF-1.4"

    @pytest.mark.asyncio
    async def test_unknown_attachment(self, eml_host, tmp_path):
        with pytest.raises(KeyError):
            await eml_host.get_attachment_file(str(tmp_path / "mail.eml"), "99")

    @pytest.mark.asyncio
    async def test_tags_map_to_themselves(self, eml_host):
        definitions = await eml_host.list_tags()
        assert [(definition.key, definition.tag) for definition in definitions] == [
            ("work", "work"),
            ("important", "important"),
        ]

    @pytest.mark.asyncio
    async def test_no_selection_and_no_tab(self, eml_host):
        assert await eml_host.get_selected_text() == ""
        assert await eml_host.get_active_tab_id() is None

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            EmlFileHost([tmp_path / "absent.eml"])


class TestLogNotifier:

    @pytest.mark.asyncio
    async def test_failure_is_logged_as_error(self, logged_errors):
        await LogNotifier().notify("Joplin export failed", "Please check the export log.", False)
        assert any("Joplin export failed" in message for message in logged_errors())


class TestProtocols:
    """The command line collaborators satisfy the pipeline's protocols."""

    def test_eml_host_is_mail_host(self, eml_host):
        assert isinstance(eml_host, MailHost)

    def test_log_notifier_is_notifier(self):
        assert isinstance(LogNotifier(), Notifier)

    def test_dict_store_is_settings_store(self):
        assert isinstance(DictSettingsStore(), SettingsStore)

    def test_test_double_is_mail_host(self, mail_host):
        assert isinstance(mail_host, MailHost)


class TestForwardedMail:

    @pytest.mark.asyncio
    async def test_forwarded_text_is_kept(self, tmp_path):
        forwarded = EmailMessage()
        forwarded["Subject"] = "Original"
        forwarded["From"] = "alice@example.com"
        forwarded.set_content("forwarded body\n")

        message = EmailMessage()
        message["Subject"] = "Fwd: Original"
        message["From"] = "jane@example.com"
        message.set_content("see below\n")
        message.add_attachment(forwarded, disposition="inline")
        path = tmp_path / "forward.eml"
        path.write_bytes(bytes(message))

        body = await EmlFileHost([path]).get_full_body(str(path))

        assert get_mail_content(body, "text/plain") == "see below\nforwarded body\n"
        assert body.parts[1].content_type == "message/rfc822"
