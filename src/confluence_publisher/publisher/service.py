"""Entry point tying validation, strategy selection and notifications together."""

from __future__ import annotations

import logging
from typing import Optional

from ..confluence.base import RemoteClient
from ..confluence.client import ConfluenceRestClient
from ..errors import mandatory, too_many_root_pages
from .attachments import AttachmentReconciler
from .labels import LabelReconciler
from .listener import NoOpPublisherListener, PublisherListener
from .models import PublisherMetadata, PublishingStrategy
from .pages import PageReconciler
from .tree import TreeReconciler

logger = logging.getLogger(__name__)


class ConfluencePublisher:
    """Publish a ``PublisherMetadata`` tree into a Confluence space.

    Callers must not run two publishers against the same space and ancestor
    at the same time; the remote page versions are the only guard.
    """

    def __init__(
        self,
        metadata: PublisherMetadata,
        client: RemoteClient,
        *,
        strategy: PublishingStrategy = PublishingStrategy.APPEND_TO_ANCESTOR,
        listener: Optional[PublisherListener] = None,
        version_message: Optional[str] = None,
    ) -> None:
        self.metadata = metadata
        self.client = client
        self.strategy = PublishingStrategy(strategy)
        self.listener = listener or NoOpPublisherListener()
        self.version_message = version_message

    def validate(self) -> None:
        mandatory(self.metadata.space_key, "spaceKey")
        mandatory(self.metadata.ancestor_id, "ancestorId")
        for page in self.metadata.iter_pages():
            mandatory(page.title, "title")
        if self.strategy.replaces_ancestor and len(self.metadata.pages) > 1:
            raise too_many_root_pages(page.title for page in self.metadata.pages)

    def publish(self) -> None:
        self.validate()
        logger.info(
            "Publishing %d root page(s) to space %s under %s (%s)",
            len(self.metadata.pages),
            self.metadata.space_key,
            self.metadata.ancestor_id,
            self.strategy.value,
        )
        self._tree_reconciler().publish(self.metadata.ancestor_id, self.metadata.pages)
        self.listener.publish_completed()

    def _tree_reconciler(self) -> TreeReconciler:
        pages = PageReconciler(
            self.client,
            self.listener,
            space_key=self.metadata.space_key,
            version_message=self.version_message,
        )
        return TreeReconciler(
            self.client,
            self.listener,
            pages,
            AttachmentReconciler(self.client, self.listener),
            LabelReconciler(self.client),
            self.strategy,
        )


def create_client(
    *,
    root_url: str,
    username: Optional[str],
    password: str,
    timeout: float = 30.0,
    notify_watchers: bool = True,
) -> ConfluenceRestClient:
    return ConfluenceRestClient(
        root_url=root_url,
        username=username,
        password=password,
        timeout=timeout,
        notify_watchers=notify_watchers,
    )
