"""Synchronize the attachments of one Confluence page."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping

from ..confluence.base import RemoteClient
from .hashing import changed, content_hash, read_bytes
from .listener import PublisherListener

logger = logging.getLogger(__name__)


class AttachmentReconciler:
    """Make the attachments under a page match a ``{file name: path}`` mapping.

    The content hash of an attachment is stored as a property of the page,
    keyed by the attachment id, so a renamed file is a delete plus a create.
    """

    def __init__(self, client: RemoteClient, listener: PublisherListener) -> None:
        self.client = client
        self.listener = listener

    def reconcile(self, content_id: str, desired: Mapping[str, Path]) -> None:
        self.delete_absent(content_id, desired)
        for file_name, path in desired.items():
            self._add_or_update(content_id, file_name, Path(path))

    def delete_absent(self, content_id: str, desired: Mapping[str, Path]) -> None:
        for attachment in self.client.get_attachments(content_id):
            if attachment.title in desired:
                continue
            # property first, so a failure never leaves a dangling hash
            self.client.delete_property_by_key(content_id, attachment.id)
            self.client.delete_attachment(attachment.id)
            logger.debug("Deleted attachment '%s' (id %s) from page %s", attachment.title, attachment.id, content_id)
            self.listener.attachment_deleted(attachment.title, content_id)

    def _add_or_update(self, content_id: str, file_name: str, path: Path) -> None:
        data = read_bytes(path)
        new_hash = content_hash(data)
        existing = self.client.get_attachment_by_file_name(content_id, file_name)

        if existing is None:
            attachment = self.client.add_attachment(content_id, file_name, data)
            self.client.set_property_by_key(content_id, attachment.id, new_hash)
            logger.debug("Added attachment '%s' (id %s) to page %s", file_name, attachment.id, content_id)
            self.listener.attachment_added(file_name, content_id)
            return

        stored_hash = self.client.get_property_by_key(content_id, existing.id)
        if not changed(stored_hash, new_hash):
            logger.debug("Attachment '%s' on page %s is up to date", file_name, content_id)
            return

        self.client.delete_property_by_key(content_id, existing.id)
        self.client.update_attachment_content(content_id, existing.id, file_name, data)
        self.client.set_property_by_key(content_id, existing.id, new_hash)
        logger.debug("Updated attachment '%s' (id %s) on page %s", file_name, existing.id, content_id)
        self.listener.attachment_updated(file_name, content_id)
