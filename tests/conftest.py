"""Shared fixtures: an in-memory Confluence and helpers to build page trees."""

from __future__ import annotations

import itertools
from pathlib import Path
from typing import Callable, Iterable, Optional

import pytest

from confluence_publisher.confluence.models import RemoteAttachment, RemotePage
from confluence_publisher.errors import MultipleResultsError, RequestFailedError
from confluence_publisher.publisher.models import PageNode

SPACE_KEY = "DOCS"
ANCESTOR_ID = "100"

MUTATING_CALLS = frozenset(
    {
        "add_page_under_ancestor",
        "update_page",
        "delete_page",
        "add_attachment",
        "update_attachment_content",
        "delete_attachment",
        "set_property_by_key",
        "delete_property_by_key",
        "add_labels",
        "delete_label",
    }
)


class FakeConfluenceClient:
    """Minimal Confluence replacement keeping pages, attachments and properties in dicts.

    Deleting a page removes its attachments and properties, like Confluence does.
    """

    def __init__(self) -> None:
        self.pages: dict[str, dict] = {}
        self.attachments: dict[str, dict] = {}
        self.properties: dict[tuple[str, str], str] = {}
        self.labels: dict[str, set[str]] = {}
        self.calls: list[tuple] = []
        self.fail_on: dict[str, Exception] = {}
        self._ids = itertools.count(1000)

    # ------------------------------------------------------------------
    # Test helpers
    # ------------------------------------------------------------------
    def seed_page(
        self,
        title: str,
        *,
        parent_id: Optional[str] = None,
        content: str = "",
        version: int = 1,
        content_id: Optional[str] = None,
        space_key: str = SPACE_KEY,
    ) -> str:
        content_id = content_id or str(next(self._ids))
        self.pages[content_id] = {
            "title": title,
            "content": content,
            "version": version,
            "parent_id": parent_id,
            "space_key": space_key,
        }
        return content_id

    def seed_attachment(self, content_id: str, title: str, content: bytes = b"") -> str:
        attachment_id = str(next(self._ids))
        self.attachments[attachment_id] = {"page_id": content_id, "title": title, "content": content}
        return attachment_id

    def mutations(self) -> list[tuple]:
        return [call for call in self.calls if call[0] in MUTATING_CALLS]

    def reset_calls(self) -> None:
        self.calls.clear()

    def child_titles(self, content_id: str) -> set[str]:
        return {page.title for page in self._children(content_id)}

    def attachment_titles(self, content_id: str) -> set[str]:
        return {a["title"] for a in self.attachments.values() if a["page_id"] == content_id}

    def page_id(self, title: str) -> str:
        return next(pid for pid, page in self.pages.items() if page["title"] == title)

    def _record(self, name: str, *args) -> None:
        self.calls.append((name, *args))
        if name in self.fail_on:
            raise self.fail_on[name]

    def _children(self, content_id: str) -> list[RemotePage]:
        return [
            RemotePage(content_id=pid, title=page["title"], version=page["version"])
            for pid, page in self.pages.items()
            if page["parent_id"] == content_id
        ]

    def _require_page(self, content_id: str) -> dict:
        if content_id not in self.pages:
            raise RequestFailedError(404, "Not Found", "GET", f"content/{content_id}")
        return self.pages[content_id]

    # ------------------------------------------------------------------
    # RemoteClient
    # ------------------------------------------------------------------
    def get_page_by_title(self, space_key: str, title: str) -> Optional[str]:
        self._record("get_page_by_title", space_key, title)
        matches = [
            pid
            for pid, page in self.pages.items()
            if page["space_key"] == space_key and page["title"] == title
        ]
        if len(matches) > 1:
            raise MultipleResultsError(title, len(matches))
        return matches[0] if matches else None

    def get_page_with_content_and_version_by_id(self, content_id: str) -> RemotePage:
        self._record("get_page_with_content_and_version_by_id", content_id)
        page = self._require_page(content_id)
        return RemotePage(
            content_id=content_id,
            title=page["title"],
            version=page["version"],
            content=page["content"],
        )

    def add_page_under_ancestor(self, space_key, ancestor_id, title, content, version_message=None) -> str:
        self._record("add_page_under_ancestor", space_key, ancestor_id, title, content, version_message)
        return self.seed_page(title, parent_id=ancestor_id, content=content, space_key=space_key)

    def update_page(self, content_id, ancestor_id, title, content, version, version_message=None) -> None:
        self._record("update_page", content_id, ancestor_id, title, content, version, version_message)
        page = self._require_page(content_id)
        if version != page["version"] + 1:
            raise RequestFailedError(409, "Conflict", "PUT", f"content/{content_id}")
        page.update(title=title, content=content, version=version)
        if ancestor_id:
            page["parent_id"] = ancestor_id

    def delete_page(self, content_id: str) -> None:
        self._record("delete_page", content_id)
        self._require_page(content_id)
        del self.pages[content_id]
        for attachment_id in [aid for aid, a in self.attachments.items() if a["page_id"] == content_id]:
            del self.attachments[attachment_id]
        for key in [key for key in self.properties if key[0] == content_id]:
            del self.properties[key]
        self.labels.pop(content_id, None)

    def get_child_pages(self, content_id: str) -> list[RemotePage]:
        self._record("get_child_pages", content_id)
        return self._children(content_id)

    def get_attachments(self, content_id: str) -> list[RemoteAttachment]:
        self._record("get_attachments", content_id)
        return [
            RemoteAttachment(id=aid, title=a["title"])
            for aid, a in self.attachments.items()
            if a["page_id"] == content_id
        ]

    def get_attachment_by_file_name(self, content_id: str, file_name: str) -> Optional[RemoteAttachment]:
        self._record("get_attachment_by_file_name", content_id, file_name)
        for aid, attachment in self.attachments.items():
            if attachment["page_id"] == content_id and attachment["title"] == file_name:
                return RemoteAttachment(id=aid, title=file_name)
        return None

    def add_attachment(self, content_id: str, file_name: str, content: bytes) -> RemoteAttachment:
        self._record("add_attachment", content_id, file_name)
        attachment_id = self.seed_attachment(content_id, file_name, content)
        return RemoteAttachment(id=attachment_id, title=file_name)

    def update_attachment_content(self, content_id: str, attachment_id: str, file_name: str, content: bytes) -> None:
        self._record("update_attachment_content", content_id, attachment_id, file_name)
        self.attachments[attachment_id].update(title=file_name, content=content)

    def delete_attachment(self, attachment_id: str) -> None:
        self._record("delete_attachment", attachment_id)
        del self.attachments[attachment_id]

    def get_property_by_key(self, content_id: str, key: str) -> Optional[str]:
        self._record("get_property_by_key", content_id, key)
        return self.properties.get((content_id, key))

    def set_property_by_key(self, content_id: str, key: str, value: str) -> None:
        self._record("set_property_by_key", content_id, key, value)
        self.properties[(content_id, key)] = value

    def delete_property_by_key(self, content_id: str, key: str) -> None:
        self._record("delete_property_by_key", content_id, key)
        self.properties.pop((content_id, key), None)

    def get_labels(self, content_id: str) -> list[str]:
        self._record("get_labels", content_id)
        return sorted(self.labels.get(content_id, set()))

    def add_labels(self, content_id: str, labels: Iterable[str]) -> None:
        labels = list(labels)
        self._record("add_labels", content_id, labels)
        self.labels.setdefault(content_id, set()).update(labels)

    def delete_label(self, content_id: str, label: str) -> None:
        self._record("delete_label", content_id, label)
        self.labels.get(content_id, set()).discard(label)


class RecordingListener:
    """Listener remembering every notification as a tuple."""

    def __init__(self) -> None:
        self.events: list[tuple] = []

    def page_added(self, page):
        self.events.append(("page_added", page))

    def page_updated(self, existing, updated):
        self.events.append(("page_updated", existing, updated))

    def page_deleted(self, page):
        self.events.append(("page_deleted", page))

    def attachment_added(self, file_name, content_id):
        self.events.append(("attachment_added", file_name, content_id))

    def attachment_updated(self, file_name, content_id):
        self.events.append(("attachment_updated", file_name, content_id))

    def attachment_deleted(self, file_name, content_id):
        self.events.append(("attachment_deleted", file_name, content_id))

    def publish_completed(self):
        self.events.append(("publish_completed",))

    def names(self) -> list[str]:
        return [event[0] for event in self.events]


@pytest.fixture
def confluence() -> FakeConfluenceClient:
    client = FakeConfluenceClient()
    client.seed_page("Ancestor", content_id=ANCESTOR_ID, content="<p>ancestor</p>")
    return client


@pytest.fixture
def listener() -> RecordingListener:
    return RecordingListener()


PageFactory = Callable[..., PageNode]


@pytest.fixture
def make_page(tmp_path: Path) -> PageFactory:
    """Write a page's content (and attachments) to disk and return its node."""

    counter = itertools.count()

    def _make(
        title: str,
        content: str = "",
        *,
        attachments: Optional[dict[str, bytes]] = None,
        children: Iterable[PageNode] = (),
        labels: Iterable[str] = (),
    ) -> PageNode:
        directory = tmp_path / f"page-{next(counter)}"
        directory.mkdir()
        content_path = directory / "content.xhtml"
        content_path.write_text(content, encoding="utf-8")
        attachment_paths: dict[str, Path] = {}
        for file_name, data in (attachments or {}).items():
            path = directory / file_name
            path.write_bytes(data)
            attachment_paths[file_name] = path
        return PageNode(
            title=title,
            content_path=content_path,
            attachments=attachment_paths,
            children=tuple(children),
            labels=frozenset(labels),
        )

    return _make
