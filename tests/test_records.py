"""Tests for record models, frontmatter parsing and record assembly."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from standard_site_sync.records import (
    BlobRef,
    DocumentInput,
    DocumentRecord,
    NoteFrontmatter,
    PublicationRecord,
    build_document_record,
    utc_timestamp,
)

SITE = "at://did:plc:a/site.standard.publication/p"


def _input(**overrides) -> DocumentInput:
    fields = {
        "site_uri": SITE,
        "title": "Title",
        "path": "/title",
        "published_at": "2024-01-01T00:00:00.000Z",
        "markdown": "**hi**",
        "plain_text": "hi",
    }
    fields.update(overrides)
    return DocumentInput(**fields)


# -------------------------------------------------------------------------
# utc_timestamp()
# -------------------------------------------------------------------------


class TestUtcTimestamp:
    def test_millisecond_z_format(self):
        moment = datetime(2024, 5, 6, 7, 8, 9, 123456, tzinfo=timezone.utc)
        assert utc_timestamp(moment) == "2024-05-06T07:08:09.123Z"

    def test_converts_to_utc(self):
        from datetime import timedelta

        moment = datetime(
            2024, 5, 6, 9, 0, 0, tzinfo=timezone(timedelta(hours=2))
        )
        assert utc_timestamp(moment) == "2024-05-06T07:00:00.000Z"

    def test_default_now(self):
        assert utc_timestamp().endswith("Z")


# -------------------------------------------------------------------------
# build_document_record()
# -------------------------------------------------------------------------


class TestBuildDocumentRecord:
    def test_minimal_record_wire_shape(self):
        record = build_document_record(_input()).to_record()
        assert record == {
            "$type": "site.standard.document",
            "site": SITE,
            "title": "Title",
            "path": "/title",
            "publishedAt": "2024-01-01T00:00:00.000Z",
            "textContent": "hi",
            "content": {
                "$type": "at.markpub.markdown",
                "text": "**hi**",
                "flavor": "GFM",
            },
        }

    def test_empty_optionals_omitted(self):
        record = build_document_record(
            _input(description="", tags=[], references=[])
        ).to_record()
        for key in ("description", "tags", "references", "updatedAt", "coverImage"):
            assert key not in record

    def test_full_record(self):
        blob = BlobRef(ref={"$link": "bafy"}, mime_type="image/png", size=3)
        record = build_document_record(
            _input(
                description="d",
                tags=["a", "b"],
                updated_at="2024-02-01T00:00:00.000Z",
                cover_image=blob,
                references=[{"uri": "at://x/y/z"}],
            )
        ).to_record()
        assert record["description"] == "d"
        assert record["tags"] == ["a", "b"]
        assert record["updatedAt"] == "2024-02-01T00:00:00.000Z"
        assert record["coverImage"] == {
            "$type": "blob",
            "ref": {"$link": "bafy"},
            "mimeType": "image/png",
            "size": 3,
        }
        assert record["references"] == [{"uri": "at://x/y/z"}]

    def test_records_are_frozen(self):
        record = build_document_record(_input())
        with pytest.raises(ValidationError):
            record.title = "changed"

    def test_document_parses_wire_names(self):
        record = DocumentRecord.model_validate(
            {"site": SITE, "title": "t", "publishedAt": "x"}
        )
        assert record.published_at == "x"

    def test_publication_record(self):
        assert PublicationRecord(url="https://b.example", name="Blog").to_record() == {
            "$type": "site.standard.publication",
            "url": "https://b.example",
            "name": "Blog",
        }


# -------------------------------------------------------------------------
# NoteFrontmatter
# -------------------------------------------------------------------------


class TestNoteFrontmatter:
    def test_defaults(self):
        fm = NoteFrontmatter.model_validate({})
        assert fm.publish is False
        assert fm.tags == []
        assert fm.rkey is None

    def test_full(self):
        fm = NoteFrontmatter.model_validate(
            {
                "title": "T",
                "publish": True,
                "tags": ["x", "y"],
                "description": "D",
                "slug": "s",
                "rkey": "r1",
                "coverImage": "img/c.png",
                "unrelated": 42,
            }
        )
        assert fm.title == "T"
        assert fm.publish is True
        assert fm.tags == ["x", "y"]
        assert fm.cover_image == "img/c.png"

    def test_blank_strings_are_unset(self):
        fm = NoteFrontmatter.model_validate(
            {"slug": "", "description": "  ", "coverImage": "", "rkey": None}
        )
        assert fm.slug is None
        assert fm.description is None
        assert fm.cover_image is None
        assert fm.rkey is None

    def test_comma_separated_tags(self):
        fm = NoteFrontmatter.model_validate({"tags": "a, b,,c"})
        assert fm.tags == ["a", "b", "c"]

    def test_null_tags_and_publish(self):
        fm = NoteFrontmatter.model_validate({"tags": None, "publish": None})
        assert fm.tags == []
        assert fm.publish is False

    def test_numeric_title_coerced(self):
        assert NoteFrontmatter.model_validate({"title": 2024}).title == "2024"
