"""Create or update a single Confluence page from a page node."""

from __future__ import annotations

import logging
from typing import Optional

from ..confluence.base import RemoteClient
from ..confluence.models import RemotePage
from .hashing import CONTENT_HASH_PROPERTY_KEY, changed, content_hash, read_text
from .listener import PublisherListener
from .models import PageNode

logger = logging.getLogger(__name__)


class PageReconciler:
    """Make one remote page match one ``PageNode``.

    Pages are matched by title within the space, not by position in the
    tree, so two nodes sharing a title publish onto the same remote page.
    """

    def __init__(
        self,
        client: RemoteClient,
        listener: PublisherListener,
        *,
        space_key: str,
        version_message: Optional[str] = None,
    ) -> None:
        self.client = client
        self.listener = listener
        self.space_key = space_key
        self.version_message = version_message

    def reconcile(self, parent_id: str, node: PageNode) -> str:
        """Publish ``node`` and return the remote content id."""

        content = read_text(node.content_path)
        content_id = self.client.get_page_by_title(self.space_key, node.title)
        if content_id is None:
            logger.debug("No page titled '%s' in space %s", node.title, self.space_key)
            return self._add(parent_id, node, content)

        self._update_if_changed(content_id, node, content)
        return content_id

    def reconcile_existing(self, content_id: str, node: PageNode) -> str:
        """Publish ``node`` onto a known page without touching its parent."""

        self._update_if_changed(content_id, node, read_text(node.content_path))
        return content_id

    def _add(self, parent_id: str, node: PageNode, content: str) -> str:
        content_id = self.client.add_page_under_ancestor(
            self.space_key,
            parent_id,
            node.title,
            content,
            self.version_message,
        )
        self.client.set_property_by_key(content_id, CONTENT_HASH_PROPERTY_KEY, content_hash(content))
        logger.debug("Created page '%s' (id %s) under %s", node.title, content_id, parent_id)
        self.listener.page_added(RemotePage(content_id=content_id, title=node.title, version=1, content=content))
        return content_id

    def _update_if_changed(self, content_id: str, node: PageNode, content: str) -> None:
        existing = self.client.get_page_with_content_and_version_by_id(content_id)
        stored_hash = self.client.get_property_by_key(content_id, CONTENT_HASH_PROPERTY_KEY)
        new_hash = content_hash(content)

        if not changed(stored_hash, new_hash) and existing.title == node.title:
            logger.debug("Page '%s' (id %s) is up to date", node.title, content_id)
            return

        updated = existing.next_version(title=node.title, content=content)
        self.client.delete_property_by_key(content_id, CONTENT_HASH_PROPERTY_KEY)
        # ancestor is left as-is: existing pages are never re-parented
        self.client.update_page(
            content_id,
            None,
            node.title,
            content,
            updated.version,
            self.version_message,
        )
        self.client.set_property_by_key(content_id, CONTENT_HASH_PROPERTY_KEY, new_hash)
        logger.debug("Updated page '%s' (id %s) to version %d", node.title, content_id, updated.version)
        self.listener.page_updated(existing, updated)
