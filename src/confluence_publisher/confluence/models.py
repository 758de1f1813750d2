"""Typed models for remote Confluence content."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional


@dataclass(frozen=True, slots=True)
class RemotePage:
    """Confluence page as seen through the remote client.

    ``content`` is only populated when the page was fetched together with its
    storage body; child page listings leave it unset.
    """

    content_id: str
    title: str
    version: int = 1
    content: Optional[str] = None

    def next_version(self, *, title: str, content: str) -> "RemotePage":
        """Return the page as it looks after one more published revision."""

        return replace(self, title=title, content=content, version=self.version + 1)


@dataclass(frozen=True, slots=True)
class RemoteAttachment:
    """Attachment stored on a Confluence page; ``title`` is the file name."""

    id: str
    title: str
