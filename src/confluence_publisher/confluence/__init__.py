"""Access to the remote Confluence content service."""

from .base import RemoteClient
from .models import RemoteAttachment, RemotePage

__all__ = ["RemoteAttachment", "RemoteClient", "RemotePage"]
