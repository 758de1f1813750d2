"""Keep the labels of a remote page equal to the labels of its node."""

from __future__ import annotations

import logging
from typing import AbstractSet

from ..confluence.base import RemoteClient

logger = logging.getLogger(__name__)


class LabelReconciler:
    def __init__(self, client: RemoteClient) -> None:
        self.client = client

    def reconcile(self, content_id: str, desired: AbstractSet[str]) -> None:
        existing = set(self.client.get_labels(content_id))

        for label in sorted(existing - desired):
            logger.info("Removing label '%s' from page %s", label, content_id)
            self.client.delete_label(content_id, label)

        missing = sorted(set(desired) - existing)
        if missing:
            logger.info("Adding labels %s to page %s", ", ".join(missing), content_id)
            self.client.add_labels(content_id, missing)
