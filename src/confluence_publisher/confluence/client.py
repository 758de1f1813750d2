"""HTTP client wrapper for publishing through the Confluence REST API."""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, Optional

import httpx

from ..errors import MultipleResultsError, RemoteUnreachableError, RequestFailedError
from .models import RemoteAttachment, RemotePage

logger = logging.getLogger(__name__)

REST_API_CONTEXT = "rest/api/"
INITIAL_VERSION = 1
PAGE_LIMIT = 25
NO_CHECK_HEADERS = {"X-Atlassian-Token": "no-check"}


class ConfluenceRestClient:
    """Thin wrapper above the Confluence REST API implementing ``RemoteClient``."""

    def __init__(
        self,
        *,
        root_url: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        timeout: float = 30.0,
        notify_watchers: bool = True,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        api_root = root_url.rstrip("/") + "/" + REST_API_CONTEXT
        headers: dict[str, str] = {"Accept": "application/json"}
        auth: Optional[tuple[str, str]] = None
        if username and password:
            auth = (username, password)
        elif password:
            # personal access token
            headers["Authorization"] = f"Bearer {password}"
        self.notify_watchers = notify_watchers
        self._client = httpx.Client(
            base_url=api_root,
            timeout=timeout,
            auth=auth,
            headers=headers,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "ConfluenceRestClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: D401 - standard context manager signature
        self.close()

    # ------------------------------------------------------------------
    # Low-level helpers
    # ------------------------------------------------------------------
    def _send(self, method: str, url: str, *, not_found_ok: bool = False, **kwargs) -> Optional[httpx.Response]:
        logger.debug("%s %s", method, url)
        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.TransportError as exc:
            raise RemoteUnreachableError(method, url, exc) from exc

        if not_found_ok and response.status_code == 404:
            return None
        if not response.is_success:
            raise RequestFailedError(
                response.status_code,
                response.reason_phrase,
                method,
                str(response.request.url),
                response.text,
            )
        return response

    def _request(self, method: str, url: str, **kwargs) -> dict:
        response = self._send(method, url, **kwargs)
        if response is None or not response.content:
            return {}
        return response.json()

    def _iter_paginated(self, url: str, *, params: Optional[dict] = None) -> Iterator[dict]:
        start = 0
        while True:
            page_params = dict(params or {}, limit=PAGE_LIMIT, start=start)
            data = self._request("GET", url, params=page_params)
            results = data.get("results", [])
            yield from results
            if len(results) < PAGE_LIMIT:
                break
            start += len(results)

    @staticmethod
    def _single_result(data: dict, what: str) -> Optional[dict]:
        results = data.get("results", [])
        if not results:
            return None
        if len(results) > 1:
            raise MultipleResultsError(what, len(results))
        return results[0]

    # ------------------------------------------------------------------
    # Parsers
    # ------------------------------------------------------------------
    @staticmethod
    def _to_remote_page(data: dict) -> RemotePage:
        body = data.get("body", {}).get("storage", {})
        return RemotePage(
            content_id=str(data["id"]),
            title=data["title"],
            version=data.get("version", {}).get("number", INITIAL_VERSION),
            content=body.get("value"),
        )

    @staticmethod
    def _to_remote_attachment(data: dict) -> RemoteAttachment:
        return RemoteAttachment(id=str(data["id"]), title=data["title"])

    def _page_payload(
        self,
        *,
        title: str,
        content: str,
        version: int,
        ancestor_id: Optional[str],
        version_message: Optional[str],
        space_key: Optional[str] = None,
    ) -> dict[str, object]:
        version_payload: dict[str, object] = {"number": version}
        if version_message:
            version_payload["message"] = version_message
        if version > INITIAL_VERSION and not self.notify_watchers:
            version_payload["minorEdit"] = True

        payload: dict[str, object] = {
            "type": "page",
            "title": title,
            "body": {"storage": {"value": content, "representation": "storage"}},
            "version": version_payload,
        }
        if space_key:
            payload["space"] = {"key": space_key}
        if ancestor_id:
            payload["ancestors"] = [{"id": str(ancestor_id)}]
        return payload

    # ------------------------------------------------------------------
    # Pages
    # ------------------------------------------------------------------
    def get_page_by_title(self, space_key: str, title: str) -> Optional[str]:
        data = self._request("GET", "content", params={"spaceKey": space_key, "title": title})
        result = self._single_result(data, f"page '{title}' in space {space_key}")
        return str(result["id"]) if result else None

    def get_page_with_content_and_version_by_id(self, content_id: str) -> RemotePage:
        data = self._request("GET", f"content/{content_id}", params={"expand": "body.storage,version"})
        return self._to_remote_page(data)

    def add_page_under_ancestor(
        self,
        space_key: str,
        ancestor_id: str,
        title: str,
        content: str,
        version_message: Optional[str] = None,
    ) -> str:
        payload = self._page_payload(
            title=title,
            content=content,
            version=INITIAL_VERSION,
            ancestor_id=ancestor_id,
            version_message=version_message,
            space_key=space_key,
        )
        data = self._request("POST", "content", json=payload)
        return str(data["id"])

    def update_page(
        self,
        content_id: str,
        ancestor_id: Optional[str],
        title: str,
        content: str,
        version: int,
        version_message: Optional[str] = None,
    ) -> None:
        payload = self._page_payload(
            title=title,
            content=content,
            version=version,
            ancestor_id=ancestor_id,
            version_message=version_message,
        )
        payload["id"] = str(content_id)
        self._send("PUT", f"content/{content_id}", json=payload)

    def delete_page(self, content_id: str) -> None:
        self._send("DELETE", f"content/{content_id}")

    def get_child_pages(self, content_id: str) -> list[RemotePage]:
        return [
            self._to_remote_page(child)
            for child in self._iter_paginated(f"content/{content_id}/child/page", params={"expand": "version"})
        ]

    # ------------------------------------------------------------------
    # Attachments
    # ------------------------------------------------------------------
    def get_attachments(self, content_id: str) -> list[RemoteAttachment]:
        return [
            self._to_remote_attachment(attachment)
            for attachment in self._iter_paginated(f"content/{content_id}/child/attachment")
        ]

    def get_attachment_by_file_name(self, content_id: str, file_name: str) -> Optional[RemoteAttachment]:
        data = self._request(
            "GET",
            f"content/{content_id}/child/attachment",
            params={"filename": file_name},
        )
        result = self._single_result(data, f"attachment '{file_name}' on page {content_id}")
        return self._to_remote_attachment(result) if result else None

    def add_attachment(self, content_id: str, file_name: str, content: bytes) -> RemoteAttachment:
        data = self._request(
            "POST",
            f"content/{content_id}/child/attachment",
            headers=NO_CHECK_HEADERS,
            files={"file": (file_name, content, "application/octet-stream")},
        )
        results = data.get("results")
        return self._to_remote_attachment(results[0] if results else data)

    def update_attachment_content(
        self, content_id: str, attachment_id: str, file_name: str, content: bytes
    ) -> None:
        self._send(
            "POST",
            f"content/{content_id}/child/attachment/{attachment_id}/data",
            headers=NO_CHECK_HEADERS,
            files={"file": (file_name, content, "application/octet-stream")},
        )

    def delete_attachment(self, attachment_id: str) -> None:
        self._send("DELETE", f"content/{attachment_id}")

    # ------------------------------------------------------------------
    # Content properties
    # ------------------------------------------------------------------
    def get_property_by_key(self, content_id: str, key: str) -> Optional[str]:
        response = self._send(
            "GET",
            f"content/{content_id}/property/{key}",
            params={"expand": "value"},
            not_found_ok=True,
        )
        if response is None:
            return None
        value = response.json().get("value")
        return None if value is None else str(value)

    def set_property_by_key(self, content_id: str, key: str, value: str) -> None:
        self._send("POST", f"content/{content_id}/property", json={"key": key, "value": value})

    def delete_property_by_key(self, content_id: str, key: str) -> None:
        self._send("DELETE", f"content/{content_id}/property/{key}", not_found_ok=True)

    # ------------------------------------------------------------------
    # Labels
    # ------------------------------------------------------------------
    def get_labels(self, content_id: str) -> list[str]:
        return [label["name"] for label in self._iter_paginated(f"content/{content_id}/label")]

    def add_labels(self, content_id: str, labels: Iterable[str]) -> None:
        payload = [{"prefix": "global", "name": label} for label in labels]
        if payload:
            self._send("POST", f"content/{content_id}/label", json=payload)

    def delete_label(self, content_id: str, label: str) -> None:
        self._send("DELETE", f"content/{content_id}/label", params={"name": label})
