"""
Test doubles for unit tests.

FakeJoplin stands in for the Joplin Web Clipper service through an
httpx.MockTransport and records every request it receives. FakeMailHost
serves mails from memory. Neither needs a network or a mail client.
"""

import itertools
import json
import logging
from typing import Any, Dict, List, Optional, Tuple

import httpx
import pytest
from unittest.mock import AsyncMock

from joplin_export.export_processing.joplin_client import JoplinClient
from joplin_export.models.mail import MailAttachment, MailBody, MailHeader, TagDefinition
from joplin_export.settings_store import DictSettingsStore

VALID_TOKEN = "validToken"


class FakeJoplin:
    """In-memory Joplin Data API."""

    def __init__(self, token: str = VALID_TOKEN):
        self.token = token
        self.requests: List[httpx.Request] = []
        # Search results per tag query; unknown queries find nothing.
        self.search_results: Dict[str, List[Dict[str, str]]] = {}
        self._failures: List[Tuple[str, str, int, str]] = []
        self._replies: List[Tuple[str, str, Any]] = []
        self._ids = itertools.count(1)
        self.transport = httpx.MockTransport(self.handler)

    def fail(self, method: str, path_prefix: str, status: int = 500, text: str = "Internal error"):
        """Answer matching requests with an error."""
        self._failures.append((method, path_prefix, status, text))

    def reply(self, method: str, path_prefix: str, json_body: Any):
        """Answer matching requests with 200 and the given JSON."""
        self._replies.append((method, path_prefix, json_body))

    def client(self) -> JoplinClient:
        return JoplinClient("http://127.0.0.1:41184", VALID_TOKEN, transport=self.transport)

    def calls(self, method: Optional[str] = None, path: Optional[str] = None) -> List[httpx.Request]:
        return [
            request
            for request in self.requests
            if (method is None or request.method == method)
            and (path is None or request.url.path == path)
        ]

    @staticmethod
    def json_body(request: httpx.Request) -> Any:
        return json.loads(request.content)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if request.url.params.get("token") != self.token:
            return httpx.Response(401, text="Invalid token")

        path = request.url.path
        for method, prefix, status, text in self._failures:
            if request.method == method and path.startswith(prefix):
                return httpx.Response(status, text=text)
        for method, prefix, json_body in self._replies:
            if request.method == method and path.startswith(prefix):
                return httpx.Response(200, json=json_body)

        if request.method == "GET" and path == "/ping":
            return httpx.Response(200, text="JoplinClipperServer")

        if request.method == "POST" and path == "/notes":
            payload = self.json_body(request)
            body = payload.get("body", payload.get("body_html", ""))
            return httpx.Response(200, json={"id": f"note-{next(self._ids)}", "body": body})

        if request.method == "PUT" and path.startswith("/notes/"):
            note_id = path.rsplit("/", 1)[-1]
            return httpx.Response(200, json={"id": note_id, "body": self.json_body(request)["body"]})

        if request.method == "GET" and path == "/search":
            query = request.url.params.get("query")
            return httpx.Response(200, json={"items": self.search_results.get(query, [])})

        if request.method == "POST" and path == "/tags":
            title = self.json_body(request)["title"]
            if title.strip() != title:
                return httpx.Response(500, text="Tag shouldn't start or end with whitespaces.")
            return httpx.Response(200, json={"id": f"tag-{next(self._ids)}", "title": title})

        if request.method == "POST" and path.startswith("/tags/") and path.endswith("/notes"):
            return httpx.Response(200, json={})

        if request.method == "POST" and path == "/resources":
            return httpx.Response(200, json={"id": f"resource-{next(self._ids)}"})

        return httpx.Response(404, text=f"Not found: {request.method} {path}")


DEFAULT_BODY = MailBody(
    content_type="multipart/alternative",
    parts=[
        MailBody(content_type="text/plain", body="test body"),
        MailBody(content_type="text/html", body="<p>test body</p>"),
    ],
)


class FakeMailHost:
    """MailHost serving mails from memory."""

    def __init__(self):
        self.displayed: Optional[List[Optional[MailHeader]]] = []
        self.bodies: Dict[str, Optional[MailBody]] = {}
        self.selected_text = ""
        self.attachments: Dict[str, List[MailAttachment]] = {}
        self.files: Dict[Tuple[str, str], bytes] = {}
        self.tag_definitions: List[TagDefinition] = []
        self.active_tab_id: Any = 1
        self.displayed_requests: List[Any] = []

    def add_attachment(self, mail_id: str, name: str, content: bytes = b"data"):
        part_name = f"1.{len(self.attachments.get(mail_id, [])) + 2}"
        self.attachments.setdefault(mail_id, []).append(
            MailAttachment(name=name, part_name=part_name)
        )
        self.files[(mail_id, part_name)] = content

    async def get_displayed_messages(self, tab_id):
        self.displayed_requests.append(tab_id)
        return None if self.displayed is None else list(self.displayed)

    async def get_full_body(self, mail_id):
        return self.bodies.get(mail_id, DEFAULT_BODY)

    async def get_selected_text(self):
        return self.selected_text

    async def list_attachments(self, mail_id):
        return list(self.attachments.get(mail_id, []))

    async def get_attachment_file(self, mail_id, part_name):
        return self.files[(mail_id, part_name)]

    async def list_tags(self):
        return list(self.tag_definitions)

    async def get_active_tab_id(self):
        return self.active_tab_id


def default_settings() -> Dict[str, Any]:
    """Mostly default options, kept minimal so tests only see what they set."""
    return {
        "scheme": "http",
        "host": "127.0.0.1",
        "port": 41184,
        "token": VALID_TOKEN,
        "show_notifications": "onFailure",
        "subject_trim_regex": "",
        "author_trim_regex": "",
        "date_format": "",
        "note_title_template": "{{subject}} from {{author}}",
        "note_header_template": "",
        "note_parent_folder": "arbitrary folder",
        "note_format": "text/html",
        "export_as_todo": False,
        "note_tags": "",
        "note_tags_from_email": False,
        "attachments": "ignore",
    }


@pytest.fixture
def joplin():
    return FakeJoplin()


@pytest.fixture
def mail_host():
    return FakeMailHost()


@pytest.fixture
def settings_store():
    return DictSettingsStore(default_settings())


@pytest.fixture
def notifier():
    notifier = AsyncMock()
    notifier.notify = AsyncMock(return_value=None)
    return notifier


@pytest.fixture
def logged_warnings(caplog):
    """Messages of all warnings logged during the test."""
    caplog.set_level(logging.DEBUG)

    def collect() -> List[str]:
        return [record.getMessage() for record in caplog.records if record.levelno == logging.WARNING]

    return collect


@pytest.fixture
def logged_errors(caplog):
    """Messages of all errors logged during the test."""
    caplog.set_level(logging.DEBUG)

    def collect() -> List[str]:
        return [record.getMessage() for record in caplog.records if record.levelno == logging.ERROR]

    return collect
