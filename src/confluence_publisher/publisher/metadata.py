"""Load the ``metadata.json`` written by the documentation renderer."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..errors import InvalidMetadataError
from .models import PageNode, PublisherMetadata


class PageMetadataFile(BaseModel):
    """One page entry as the renderer writes it."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1)
    content_file_path: str = Field(..., alias="contentFilePath")
    attachments: dict[str, str] = Field(default_factory=dict)
    children: list["PageMetadataFile"] = Field(default_factory=list)
    labels: list[str] = Field(default_factory=list)

    def to_node(self, content_root: Path) -> PageNode:
        return PageNode(
            title=self.title,
            content_path=_resolve(content_root, self.content_file_path),
            attachments={
                file_name: _resolve(content_root, path)
                for file_name, path in self.attachments.items()
            },
            children=tuple(child.to_node(content_root) for child in self.children),
            labels=frozenset(self.labels),
        )


PageMetadataFile.model_rebuild()


class PublisherMetadataFile(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    space_key: Optional[str] = Field(None, alias="spaceKey")
    ancestor_id: Optional[str] = Field(None, alias="ancestorId")
    pages: list[PageMetadataFile] = Field(default_factory=list)

    @field_validator("space_key", "ancestor_id", mode="before")
    @classmethod
    def _ids_as_text(cls, value: object) -> object:
        # ancestor ids are often written as JSON numbers
        return str(value) if isinstance(value, int) else value


def _resolve(content_root: Path, raw_path: str) -> Path:
    path = Path(raw_path)
    return path if path.is_absolute() else content_root / path


def load_metadata(
    path: Path,
    *,
    space_key: Optional[str] = None,
    ancestor_id: Optional[str] = None,
) -> PublisherMetadata:
    """Read ``path`` into a ``PublisherMetadata`` tree.

    Relative content and attachment paths are resolved against the directory
    holding the metadata file. ``space_key`` and ``ancestor_id`` override the
    values stored in the file.
    """

    path = Path(path)
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise InvalidMetadataError(f"Could not read metadata from {path}: {exc}") from exc

    try:
        parsed = PublisherMetadataFile.model_validate_json(raw)
    except ValidationError as exc:
        raise InvalidMetadataError(f"Invalid metadata in {path}: {exc}") from exc

    content_root = path.resolve().parent
    return PublisherMetadata(
        space_key=space_key or parsed.space_key or "",
        ancestor_id=ancestor_id or parsed.ancestor_id or "",
        pages=tuple(page.to_node(content_root) for page in parsed.pages),
    )
