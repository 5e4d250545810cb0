"""Shared pytest fixtures for standard-site-sync tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import pytest

from standard_site_sync.config import Config
from standard_site_sync.core.client import XrpcError
from standard_site_sync.paths import DOCUMENT_COLLECTION, PUBLICATION_COLLECTION
from standard_site_sync.records import (
    BlobRef,
    DocumentRecord,
    ListedRecord,
    PublicationRecord,
    RecordRef,
)
from standard_site_sync.vault import LocalVault

TEST_DID = "did:plc:testuser"
TEST_SITE_URI = f"at://{TEST_DID}/{PUBLICATION_COLLECTION}/site1"


class FakeStandardSiteClient:
    """In-memory replacement for StandardSiteClient.

    Records are stored per collection keyed by rkey; new rkeys are
    ``gen1``, ``gen2`` ... in creation order.
    """

    def __init__(self, did: str = TEST_DID) -> None:
        self.did = did
        self.records: dict[str, dict[str, dict[str, Any]]] = {
            DOCUMENT_COLLECTION: {},
            PUBLICATION_COLLECTION: {},
        }
        self.calls: list[tuple] = []
        self.blobs: list[tuple[bytes, str]] = []
        self.fail_on: set[str] = set()
        self._counter = 0

    def _uri(self, collection: str, rkey: str) -> str:
        return f"at://{self.did}/{collection}/{rkey}"

    def _check(self, op: str, key: str = "") -> None:
        if op in self.fail_on or f"{op}:{key}" in self.fail_on:
            raise XrpcError(500, "InternalServerError", f"{op} failed")

    # -- seeding helpers ------------------------------------------------

    def seed(self, collection: str, rkey: str, value: dict[str, Any]) -> str:
        self.records[collection][rkey] = dict(value)
        return self._uri(collection, rkey)

    def seed_document(self, rkey: str, **value: Any) -> str:
        return self.seed(DOCUMENT_COLLECTION, rkey, value)

    # -- client surface -------------------------------------------------

    def login(self) -> None:
        self._check("login")

    def list_records(self, collection: str) -> list[ListedRecord]:
        return [
            ListedRecord(uri=self._uri(collection, rkey), cid="c", value=value)
            for rkey, value in self.records[collection].items()
        ]

    def get_record(self, collection: str, rkey: str) -> ListedRecord | None:
        value = self.records[collection].get(rkey)
        if value is None:
            return None
        return ListedRecord(uri=self._uri(collection, rkey), cid="c", value=value)

    def create_document(self, record: DocumentRecord) -> RecordRef:
        self._check("create", record.path or "")
        self._counter += 1
        rkey = f"gen{self._counter}"
        self.records[DOCUMENT_COLLECTION][rkey] = record.to_record()
        self.calls.append(("create", rkey, record))
        return RecordRef(uri=self._uri(DOCUMENT_COLLECTION, rkey), cid="c")

    def update_document(self, rkey: str, record: DocumentRecord) -> RecordRef:
        self._check("update", rkey)
        self.records[DOCUMENT_COLLECTION][rkey] = record.to_record()
        self.calls.append(("update", rkey, record))
        return RecordRef(uri=self._uri(DOCUMENT_COLLECTION, rkey), cid="c")

    def delete_document(self, rkey: str) -> None:
        self._check("delete", rkey)
        self.records[DOCUMENT_COLLECTION].pop(rkey, None)
        self.calls.append(("delete", rkey))

    def get_document(self, rkey: str) -> ListedRecord | None:
        return self.get_record(DOCUMENT_COLLECTION, rkey)

    def list_documents(self) -> list[ListedRecord]:
        return self.list_records(DOCUMENT_COLLECTION)

    def get_publication(self, rkey: str) -> ListedRecord | None:
        return self.get_record(PUBLICATION_COLLECTION, rkey)

    def list_publications(self) -> list[ListedRecord]:
        return self.list_records(PUBLICATION_COLLECTION)

    def update_publication(
        self, rkey: str, record: PublicationRecord | dict[str, Any]
    ) -> RecordRef:
        value = (
            record.to_record()
            if isinstance(record, PublicationRecord)
            else dict(record)
        )
        self.records[PUBLICATION_COLLECTION][rkey] = value
        self.calls.append(("update_publication", rkey, value))
        return RecordRef(uri=self._uri(PUBLICATION_COLLECTION, rkey), cid="c")

    def upload_blob(self, data: bytes, mime_type: str) -> BlobRef:
        self.blobs.append((data, mime_type))
        return BlobRef(
            ref={"$link": "bafyblob"}, mime_type=mime_type, size=len(data)
        )


@pytest.fixture
def mock_config() -> Config:
    """A valid Config pointing at a test publication."""
    return Config(
        handle="alice.test",
        app_password="app-pass",
        pds_url="https://pds.example.com",
        publication_uri=TEST_SITE_URI,
    )


@pytest.fixture
def fake_client() -> FakeStandardSiteClient:
    return FakeStandardSiteClient()


@pytest.fixture
def vault_dir(tmp_path: Path) -> Path:
    root = tmp_path / "vault"
    root.mkdir()
    return root


@pytest.fixture
def vault(vault_dir: Path) -> LocalVault:
    return LocalVault(vault_dir)


@pytest.fixture
def write_note(vault_dir: Path) -> Callable[[str, str], Path]:
    """Factory fixture writing a note into the temp vault."""

    def _write(rel_path: str, content: str) -> Path:
        path = vault_dir / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write
