"""Exception hierarchy for the Confluence publisher.

Every error raised by this package derives from ``PublisherError`` so
callers can catch the whole family at once. A missing remote resource is
not an error: lookups return ``None`` for that case.
"""

from __future__ import annotations

from typing import Iterable, Optional


class PublisherError(Exception):
    """Base exception for all confluence-publisher errors."""


class InvalidMetadataError(PublisherError, ValueError):
    """Raised when the publisher metadata cannot be published as given."""


class ConfigurationError(PublisherError):
    """Raised when no usable configuration could be resolved."""


class ContentReadError(PublisherError):
    """Raised when local page content or attachment bytes cannot be read."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Could not read content from {path}")
        self.path = path


class RemoteError(PublisherError):
    """Base exception for failures reported by the remote client."""


class RequestFailedError(RemoteError):
    """Raised when Confluence answers with an unexpected status code."""

    def __init__(
        self,
        status_code: int,
        reason: str,
        method: str,
        url: str,
        body: str = "",
    ) -> None:
        super().__init__(f"{status_code} {reason} {method} {url} {body}".rstrip())
        self.status_code = status_code
        self.reason = reason
        self.method = method
        self.url = url
        self.body = body


class RemoteUnreachableError(RemoteError):
    """Raised when a request could not be sent to Confluence at all."""

    def __init__(self, method: str, url: str, cause: Optional[Exception] = None) -> None:
        detail = f": {cause}" if cause else ""
        super().__init__(f"Request could not be sent {method} {url}{detail}")
        self.method = method
        self.url = url


class MultipleResultsError(RemoteError):
    """Raised when a lookup that must be unique matches several resources."""

    def __init__(self, what: str, matches: int) -> None:
        super().__init__(f"Expected exactly one result for {what}, got {matches}")
        self.what = what
        self.matches = matches


def mandatory(value: Optional[str], name: str) -> str:
    """Return ``value`` or raise ``InvalidMetadataError`` if it is blank."""

    if value is None or not str(value).strip():
        raise InvalidMetadataError(f"{name} must be set")
    return value


def too_many_root_pages(titles: Iterable[str]) -> InvalidMetadataError:
    joined = ", ".join(f"'{title}'" for title in titles)
    return InvalidMetadataError(
        f"Multiple root pages found ({joined}), but the replace-ancestor strategy "
        "only supports a single root page"
    )
