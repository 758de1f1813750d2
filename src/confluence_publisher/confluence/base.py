"""Capabilities the publisher needs from a Confluence client."""

from __future__ import annotations

from typing import Iterable, Optional, Protocol, runtime_checkable

from .models import RemoteAttachment, RemotePage


@runtime_checkable
class RemoteClient(Protocol):
    """Blocking operations against the remote content service.

    Lookups return ``None`` when the resource does not exist. Any other
    failure raises a :class:`~confluence_publisher.errors.RemoteError`.
    """

    def get_page_by_title(self, space_key: str, title: str) -> Optional[str]:
        ...

    def get_page_with_content_and_version_by_id(self, content_id: str) -> RemotePage:
        ...

    def add_page_under_ancestor(
        self,
        space_key: str,
        ancestor_id: str,
        title: str,
        content: str,
        version_message: Optional[str] = None,
    ) -> str:
        ...

    def update_page(
        self,
        content_id: str,
        ancestor_id: Optional[str],
        title: str,
        content: str,
        version: int,
        version_message: Optional[str] = None,
    ) -> None:
        ...

    def delete_page(self, content_id: str) -> None:
        ...

    def get_child_pages(self, content_id: str) -> list[RemotePage]:
        ...

    def get_attachments(self, content_id: str) -> list[RemoteAttachment]:
        ...

    def get_attachment_by_file_name(self, content_id: str, file_name: str) -> Optional[RemoteAttachment]:
        ...

    def add_attachment(self, content_id: str, file_name: str, content: bytes) -> RemoteAttachment:
        ...

    def update_attachment_content(self, content_id: str, attachment_id: str, file_name: str, content: bytes) -> None:
        ...

    def delete_attachment(self, attachment_id: str) -> None:
        ...

    def get_property_by_key(self, content_id: str, key: str) -> Optional[str]:
        ...

    def set_property_by_key(self, content_id: str, key: str, value: str) -> None:
        ...

    def delete_property_by_key(self, content_id: str, key: str) -> None:
        ...

    def get_labels(self, content_id: str) -> list[str]:
        ...

    def add_labels(self, content_id: str, labels: Iterable[str]) -> None:
        ...

    def delete_label(self, content_id: str, label: str) -> None:
        ...
