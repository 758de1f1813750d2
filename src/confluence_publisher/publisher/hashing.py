"""Content digests used to detect whether published content changed."""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Optional, Union

from ..errors import ContentReadError

CONTENT_HASH_PROPERTY_KEY = "content-hash"


def content_hash(content: Union[str, bytes]) -> str:
    """Return the hex SHA-256 digest of ``content`` (text is hashed as UTF-8)."""

    if isinstance(content, str):
        content = content.encode("utf-8")
    return hashlib.sha256(content).hexdigest()


def changed(stored_hash: Optional[str], new_hash: str) -> bool:
    """A missing stored hash always counts as a change."""

    return stored_hash is None or stored_hash != new_hash


def read_text(path: Path) -> str:
    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ContentReadError(str(path)) from exc


def read_bytes(path: Path) -> bytes:
    try:
        return Path(path).read_bytes()
    except OSError as exc:
        raise ContentReadError(str(path)) from exc
