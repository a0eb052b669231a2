"""
Joplin Data API client.

Thin async wrapper around the REST endpoints the exporter needs. Every
request carries the API token as query parameter. Any non-2xx response or
transport failure is raised as JoplinAPIError carrying Joplin's response text
verbatim; deciding whether that is fatal is up to the caller.
Reference: https://joplinapp.org/help/api/references/rest_api/
"""

import time
from typing import Any, Dict, List, Optional, Sequence, Tuple

import httpx
import orjson

from ..exceptions import JoplinAPIError
from ..utils.logging import get_logger, log_external_api_call

logger = get_logger(__name__)

SERVICE_NAME = "joplin"
NOTE_FIELDS = "id,body"


class JoplinClient:
    """Client for the Joplin Web Clipper REST API."""

    def __init__(
        self,
        base_url: str,
        token: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "JoplinClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    def _params(self, params: Sequence[Tuple[str, str]] = ()) -> List[Tuple[str, str]]:
        # The token always goes last, after the endpoint's own parameters.
        return list(params) + [("token", self.token)]

    async def _request(
        self,
        method: str,
        path: str,
        params: Sequence[Tuple[str, str]] = (),
        **kwargs: Any,
    ) -> httpx.Response:
        """Send a request and raise JoplinAPIError unless it succeeded."""
        started = time.monotonic()
        try:
            response = await self._client.request(
                method, f"/{path}", params=self._params(params), **kwargs
            )
        except httpx.HTTPError as e:
            log_external_api_call(SERVICE_NAME, path, method, logger=logger)
            raise JoplinAPIError(str(e) or type(e).__name__) from e

        log_external_api_call(
            SERVICE_NAME,
            path,
            method,
            status_code=response.status_code,
            duration_ms=(time.monotonic() - started) * 1000,
            logger=logger,
        )
        if not response.is_success:
            raise JoplinAPIError(response.text, status_code=response.status_code)
        return response

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise JoplinAPIError(
                f"Invalid JSON response: {response.text}",
                status_code=response.status_code,
            ) from e

    async def ping(self) -> str:
        """Check that the Web Clipper service is reachable."""
        response = await self._request("GET", "ping")
        return response.text

    async def create_note(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Create a note and return its id and body."""
        response = await self._request(
            "POST", "notes", params=[("fields", NOTE_FIELDS)], json=payload
        )
        return self._json(response)

    async def update_note_body(
        self, note_id: str, body: str, return_note: bool = True
    ) -> Optional[Dict[str, Any]]:
        """
        Replace the body of a note.

        Args:
            note_id: Id of the note to update
            body: The new body
            return_note: Ask Joplin for the updated id and body

        Returns:
            The updated note if return_note is set, else None
        """
        params = [("fields", NOTE_FIELDS)] if return_note else []
        response = await self._request(
            "PUT", f"notes/{note_id}", params=params, json={"body": body}
        )
        if return_note:
            return self._json(response)
        return None

    async def search_tags(self, query: str) -> List[Dict[str, Any]]:
        """Find tags matching a title."""
        response = await self._request(
            "GET", "search", params=[("query", query), ("type", "tag")]
        )
        return self._json(response).get("items") or []

    async def create_tag(self, title: str) -> Dict[str, Any]:
        response = await self._request("POST", "tags", json={"title": title})
        return self._json(response)

    async def attach_tag(self, tag_id: str, note_id: str) -> None:
        await self._request("POST", f"tags/{tag_id}/notes", json={"id": note_id})

    async def create_resource(
        self,
        title: str,
        data: bytes,
        content_type: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Upload a file as a resource."""
        files = {
            "data": (title, data, content_type or "application/octet-stream"),
        }
        form = {"props": orjson.dumps({"title": title}).decode()}
        response = await self._request("POST", "resources", files=files, data=form)
        return self._json(response)
