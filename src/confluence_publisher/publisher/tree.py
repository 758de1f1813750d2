"""Depth-first reconciliation of a page tree under an ancestor page."""

from __future__ import annotations

import logging
from typing import Sequence

from ..confluence.base import RemoteClient
from ..confluence.models import RemotePage
from ..errors import too_many_root_pages
from .attachments import AttachmentReconciler
from .labels import LabelReconciler
from .listener import PublisherListener
from .models import PageNode, PublishingStrategy
from .pages import PageReconciler

logger = logging.getLogger(__name__)


class TreeReconciler:
    """Walk the desired tree pre-order and converge the remote tree onto it.

    Every node is handled as page, then labels, then attachments, then
    children. The first error aborts the walk; pages already published stay
    published.
    """

    def __init__(
        self,
        client: RemoteClient,
        listener: PublisherListener,
        pages: PageReconciler,
        attachments: AttachmentReconciler,
        labels: LabelReconciler,
        strategy: PublishingStrategy,
    ) -> None:
        self.client = client
        self.listener = listener
        self.pages = pages
        self.attachments = attachments
        self.labels = labels
        self.strategy = strategy

    def publish(self, ancestor_id: str, root_pages: Sequence[PageNode]) -> None:
        if not self.strategy.replaces_ancestor:
            self.reconcile_children(ancestor_id, root_pages)
            return

        if len(root_pages) > 1:
            raise too_many_root_pages(page.title for page in root_pages)
        if not root_pages:
            logger.info("No root page to publish onto ancestor %s", ancestor_id)
            return

        root = root_pages[0]
        logger.debug("Replacing ancestor %s with page '%s'", ancestor_id, root.title)
        self.pages.reconcile_existing(ancestor_id, root)
        self._reconcile_page_content(ancestor_id, root)
        self.reconcile_children(ancestor_id, root.children)

    def reconcile_children(self, parent_id: str, nodes: Sequence[PageNode]) -> None:
        if self.strategy.deletes_orphans:
            self.delete_orphans(parent_id, nodes)

        for node in nodes:
            content_id = self.pages.reconcile(parent_id, node)
            self._reconcile_page_content(content_id, node)
            self.reconcile_children(content_id, node.children)

    def delete_orphans(self, parent_id: str, nodes: Sequence[PageNode]) -> None:
        """Delete remote children of ``parent_id`` whose title is not in ``nodes``."""

        keep = {node.title for node in nodes}
        for child in self.client.get_child_pages(parent_id):
            if child.title not in keep:
                self._delete_subtree(child)

    def _delete_subtree(self, page: RemotePage) -> None:
        for child in self.client.get_child_pages(page.content_id):
            self._delete_subtree(child)
        self.client.delete_page(page.content_id)
        logger.debug("Deleted page '%s' (id %s)", page.title, page.content_id)
        self.listener.page_deleted(page)

    def _reconcile_page_content(self, content_id: str, node: PageNode) -> None:
        self.labels.reconcile(content_id, node.labels)
        self.attachments.reconcile(content_id, node.attachments)
