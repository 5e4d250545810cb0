"""Pydantic models for standard.site records and note frontmatter.

Wire models serialise with their lexicon field names (``$type``,
``publishedAt`` ...) via ``to_record()``; optional fields that are unset
are omitted rather than sent as ``null``.

- ``BlobRef``: uploaded media reference.
- ``MarkpubMarkdown``: markdown content block of a document.
- ``DocumentRecord``: ``site.standard.document``.
- ``PublicationRecord``: ``site.standard.publication``.
- ``RecordRef`` / ``ListedRecord``: repository responses.
- ``NoteFrontmatter``: publish-related keys read from a vault note.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field, field_validator

MARKDOWN_CONTENT_TYPE = "at.markpub.markdown"
DOCUMENT_TYPE = "site.standard.document"
PUBLICATION_TYPE = "site.standard.publication"


def utc_timestamp(now: datetime | None = None) -> str:
    """ISO 8601 UTC timestamp with millisecond precision and ``Z`` suffix."""
    moment = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class _WireModel(BaseModel):
    model_config = {"frozen": True, "populate_by_name": True}

    def to_record(self) -> dict[str, Any]:
        """Serialise to the JSON shape stored in the repository."""
        return self.model_dump(by_alias=True, exclude_none=True)


class BlobRef(_WireModel):
    """Reference to a blob uploaded with ``com.atproto.repo.uploadBlob``."""

    record_type: str = Field(default="blob", alias="$type")
    ref: dict[str, str]
    mime_type: str = Field(alias="mimeType")
    size: int


class MarkpubMarkdown(_WireModel):
    record_type: str = Field(default=MARKDOWN_CONTENT_TYPE, alias="$type")
    text: str
    flavor: str = "GFM"


class DocumentRecord(_WireModel):
    """A published note.

    Attributes:
        site: AT-URI of the owning publication record.
        title: Display title.
        path: Document path under the site root (e.g. ``/blog/post``).
        published_at: First publish time; never changes on update.
        updated_at: Set only when an existing record is rewritten.
        text_content: Plain-text rendering for search and previews.
        content: Portable markdown body.
        cover_image: Optional uploaded cover image.
        references: ``{"uri": ...}`` entries for linked documents.
    """

    record_type: str = Field(default=DOCUMENT_TYPE, alias="$type")
    site: str
    title: str
    path: str | None = None
    description: str | None = None
    tags: list[str] | None = None
    published_at: str = Field(alias="publishedAt")
    updated_at: str | None = Field(default=None, alias="updatedAt")
    text_content: str | None = Field(default=None, alias="textContent")
    content: MarkpubMarkdown | None = None
    cover_image: BlobRef | None = Field(default=None, alias="coverImage")
    references: list[dict[str, str]] | None = None


class PublicationRecord(_WireModel):
    record_type: str = Field(default=PUBLICATION_TYPE, alias="$type")
    url: str
    name: str
    description: str | None = None


class RecordRef(BaseModel):
    """``{uri, cid}`` returned by create/put record calls."""

    uri: str
    cid: str

    model_config = {"frozen": True}


class ListedRecord(BaseModel):
    """A record as returned by get/list record calls."""

    uri: str
    cid: str = ""
    value: dict[str, Any] = {}

    model_config = {"frozen": True}


class NoteFrontmatter(BaseModel):
    """Publish-related frontmatter keys of a vault note.

    Parsing is lenient: unknown keys are ignored, blank strings count as
    unset and a comma-separated ``tags`` string is split.
    """

    title: str | None = None
    publish: bool = False
    tags: list[str] = []
    description: str | None = None
    slug: str | None = None
    rkey: str | None = None
    cover_image: str | None = Field(default=None, alias="coverImage")

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "extra": "ignore",
    }

    @field_validator(
        "title", "description", "slug", "rkey", "cover_image", mode="before"
    )
    @classmethod
    def _blank_to_none(cls, value: Any) -> str | None:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @field_validator("publish", mode="before")
    @classmethod
    def _none_is_false(cls, value: Any) -> Any:
        return False if value is None else value

    @field_validator("tags", mode="before")
    @classmethod
    def _coerce_tags(cls, value: Any) -> list[str]:
        if value is None:
            return []
        if isinstance(value, str):
            return [t.strip() for t in value.split(",") if t.strip()]
        return [str(t) for t in value if t is not None and str(t).strip()]


@dataclass(frozen=True)
class DocumentInput:
    """Everything needed to assemble a ``DocumentRecord``."""

    site_uri: str
    title: str
    path: str
    published_at: str
    markdown: str
    plain_text: str
    description: str | None = None
    tags: list[str] = field(default_factory=list)
    updated_at: str | None = None
    cover_image: BlobRef | None = None
    references: list[dict[str, str]] = field(default_factory=list)


def build_document_record(doc: DocumentInput) -> DocumentRecord:
    """Assemble a document record, omitting empty optional fields."""
    return DocumentRecord(
        site=doc.site_uri,
        title=doc.title,
        path=doc.path,
        description=doc.description or None,
        tags=list(doc.tags) or None,
        published_at=doc.published_at,
        updated_at=doc.updated_at or None,
        text_content=doc.plain_text,
        content=MarkpubMarkdown(text=doc.markdown),
        cover_image=doc.cover_image,
        references=list(doc.references) or None,
    )
