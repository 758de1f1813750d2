"""Reconcile a rendered documentation tree with a Confluence space."""

from .listener import (
    CompositePublisherListener,
    LoggingPublisherListener,
    NoOpPublisherListener,
    PublisherListener,
    PublishSummary,
)
from .metadata import load_metadata
from .models import PageNode, PublisherMetadata, PublishingStrategy
from .service import ConfluencePublisher

__all__ = [
    "CompositePublisherListener",
    "ConfluencePublisher",
    "LoggingPublisherListener",
    "NoOpPublisherListener",
    "PageNode",
    "PublishSummary",
    "PublisherListener",
    "PublisherMetadata",
    "PublishingStrategy",
    "load_metadata",
]
