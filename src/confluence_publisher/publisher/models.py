"""Dataclasses describing the documentation tree to publish."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterator


class PublishingStrategy(str, Enum):
    """How the published tree attaches to the ancestor page."""

    APPEND_TO_ANCESTOR = "APPEND_TO_ANCESTOR"
    APPEND_TO_ANCESTOR_KEEP_CHILDREN = "APPEND_TO_ANCESTOR_KEEP_CHILDREN"
    REPLACE_ANCESTOR = "REPLACE_ANCESTOR"

    @property
    def replaces_ancestor(self) -> bool:
        return self is PublishingStrategy.REPLACE_ANCESTOR

    @property
    def deletes_orphans(self) -> bool:
        return self is not PublishingStrategy.APPEND_TO_ANCESTOR_KEEP_CHILDREN


@dataclass(frozen=True, slots=True)
class PageNode:
    """One page of the rendered documentation tree.

    ``content_path`` points at the rendered storage-format file, read as
    UTF-8. ``attachments`` maps the attachment file name to its local path.
    """

    title: str
    content_path: Path
    attachments: dict[str, Path] = field(default_factory=dict)
    children: tuple["PageNode", ...] = ()
    labels: frozenset[str] = frozenset()

    def iter_subtree(self) -> Iterator["PageNode"]:
        """Yield the page and all descendants in depth-first order."""

        yield self
        for child in self.children:
            yield from child.iter_subtree()


@dataclass(frozen=True, slots=True)
class PublisherMetadata:
    """Everything needed to publish one documentation tree."""

    space_key: str
    ancestor_id: str
    pages: tuple[PageNode, ...] = ()

    def iter_pages(self) -> Iterator[PageNode]:
        for page in self.pages:
            yield from page.iter_subtree()
