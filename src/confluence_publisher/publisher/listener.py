"""Lifecycle notifications emitted while publishing."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from ..confluence.models import RemotePage

logger = logging.getLogger(__name__)


class PublisherListener(Protocol):
    """Receives a record of every change the publisher made remotely.

    Notifications are informational only; the publisher never looks at what
    a listener does with them.
    """

    def page_added(self, page: RemotePage) -> None: ...

    def page_updated(self, existing: RemotePage, updated: RemotePage) -> None: ...

    def page_deleted(self, page: RemotePage) -> None: ...

    def attachment_added(self, file_name: str, content_id: str) -> None: ...

    def attachment_updated(self, file_name: str, content_id: str) -> None: ...

    def attachment_deleted(self, file_name: str, content_id: str) -> None: ...

    def publish_completed(self) -> None: ...


class NoOpPublisherListener:
    """Listener for callers that do not care about notifications."""

    def page_added(self, page: RemotePage) -> None:
        pass

    def page_updated(self, existing: RemotePage, updated: RemotePage) -> None:
        pass

    def page_deleted(self, page: RemotePage) -> None:
        pass

    def attachment_added(self, file_name: str, content_id: str) -> None:
        pass

    def attachment_updated(self, file_name: str, content_id: str) -> None:
        pass

    def attachment_deleted(self, file_name: str, content_id: str) -> None:
        pass

    def publish_completed(self) -> None:
        pass


def describe_page_added(page: RemotePage) -> str:
    return f"Added page '{page.title}' (id {page.content_id})"


def describe_page_updated(existing: RemotePage, updated: RemotePage) -> str:
    return (
        f"Updated page '{updated.title}' (id {updated.content_id}, "
        f"version {existing.version} -> {updated.version})"
    )


def describe_page_deleted(page: RemotePage) -> str:
    return f"Deleted page '{page.title}' (id {page.content_id})"


def describe_attachment(action: str, file_name: str, content_id: str) -> str:
    return f"{action} attachment '{file_name}' (page id {content_id})"


class LoggingPublisherListener:
    """Write every notification to the ``logging`` system at INFO level."""

    def page_added(self, page: RemotePage) -> None:
        logger.info(describe_page_added(page))

    def page_updated(self, existing: RemotePage, updated: RemotePage) -> None:
        logger.info(describe_page_updated(existing, updated))

    def page_deleted(self, page: RemotePage) -> None:
        logger.info(describe_page_deleted(page))

    def attachment_added(self, file_name: str, content_id: str) -> None:
        logger.info(describe_attachment("Added", file_name, content_id))

    def attachment_updated(self, file_name: str, content_id: str) -> None:
        logger.info(describe_attachment("Updated", file_name, content_id))

    def attachment_deleted(self, file_name: str, content_id: str) -> None:
        logger.info(describe_attachment("Deleted", file_name, content_id))

    def publish_completed(self) -> None:
        logger.info("Documentation successfully published to Confluence")


@dataclass(slots=True)
class PublishSummary:
    """Listener counting the changes of one publish run."""

    added_pages: int = 0
    updated_pages: int = 0
    deleted_pages: int = 0
    added_attachments: int = 0
    updated_attachments: int = 0
    deleted_attachments: int = 0
    completed: bool = False

    @property
    def changes(self) -> int:
        return (
            self.added_pages
            + self.updated_pages
            + self.deleted_pages
            + self.added_attachments
            + self.updated_attachments
            + self.deleted_attachments
        )

    def page_added(self, page: RemotePage) -> None:
        self.added_pages += 1

    def page_updated(self, existing: RemotePage, updated: RemotePage) -> None:
        self.updated_pages += 1

    def page_deleted(self, page: RemotePage) -> None:
        self.deleted_pages += 1

    def attachment_added(self, file_name: str, content_id: str) -> None:
        self.added_attachments += 1

    def attachment_updated(self, file_name: str, content_id: str) -> None:
        self.updated_attachments += 1

    def attachment_deleted(self, file_name: str, content_id: str) -> None:
        self.deleted_attachments += 1

    def publish_completed(self) -> None:
        self.completed = True


class CompositePublisherListener:
    """Fan notifications out to several listeners in order."""

    def __init__(self, *listeners: PublisherListener) -> None:
        self.listeners = listeners

    def page_added(self, page: RemotePage) -> None:
        for listener in self.listeners:
            listener.page_added(page)

    def page_updated(self, existing: RemotePage, updated: RemotePage) -> None:
        for listener in self.listeners:
            listener.page_updated(existing, updated)

    def page_deleted(self, page: RemotePage) -> None:
        for listener in self.listeners:
            listener.page_deleted(page)

    def attachment_added(self, file_name: str, content_id: str) -> None:
        for listener in self.listeners:
            listener.attachment_added(file_name, content_id)

    def attachment_updated(self, file_name: str, content_id: str) -> None:
        for listener in self.listeners:
            listener.attachment_updated(file_name, content_id)

    def attachment_deleted(self, file_name: str, content_id: str) -> None:
        for listener in self.listeners:
            listener.attachment_deleted(file_name, content_id)

    def publish_completed(self) -> None:
        for listener in self.listeners:
            listener.publish_completed()
