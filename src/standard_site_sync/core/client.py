"""XRPC client for the standard.site record collections on a PDS."""

from __future__ import annotations

import logging
from typing import Any

import requests

from ..config import Config
from ..paths import DOCUMENT_COLLECTION, PUBLICATION_COLLECTION
from ..records import (
    BlobRef,
    DocumentRecord,
    ListedRecord,
    PublicationRecord,
    RecordRef,
)

logger = logging.getLogger(__name__)

LIST_PAGE_SIZE = 100


class XrpcError(Exception):
    """Non-2xx response from an XRPC endpoint.

    Attributes:
        status: HTTP status code.
        error: XRPC error name (e.g. ``RecordNotFound``), if given.
        message: Human-readable error message, if given.
    """

    def __init__(self, status: int, error: str | None, message: str | None):
        self.status = status
        self.error = error
        self.message = message
        super().__init__(
            f"XRPC error {status}: {error or 'Unknown'}"
            + (f" ({message})" if message else "")
        )

    @property
    def is_not_found(self) -> bool:
        return self.status == 404 or self.error == "RecordNotFound"


class StandardSiteClient:
    def __init__(self, config: Config):
        self.config = config
        self.session = requests.Session()
        self._did: str | None = None

    @property
    def did(self) -> str:
        if self._did is None:
            raise RuntimeError(
                "StandardSiteClient is not logged in. Call login() before accessing did."
            )
        return self._did

    def _xrpc_url(self, method: str) -> str:
        return f"{self.config.pds_url.rstrip('/')}/xrpc/{method}"

    def _request(
        self,
        http_method: str,
        method: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
        data: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """
        Call an XRPC method and return the decoded JSON body.
        """
        response = self.session.request(
            http_method,
            self._xrpc_url(method),
            params=params,
            json=json,
            data=data,
            headers=headers,
            timeout=(10, 60),
        )
        if not response.ok:
            try:
                body = response.json()
            except ValueError:
                body = {}
            raise XrpcError(
                response.status_code,
                body.get("error"),
                body.get("message"),
            )
        if not response.content:
            return {}
        return response.json()

    def login(self) -> None:
        """
        Create a session with the configured handle and app password.
        """
        result = self._request(
            "POST",
            "com.atproto.server.createSession",
            json={
                "identifier": self.config.handle,
                "password": self.config.app_password,
            },
        )
        self._did = result["did"]
        self.session.headers["Authorization"] = f"Bearer {result['accessJwt']}"
        logger.info("Logged in as %s (%s)", self.config.handle, self._did)

    # ------------------------------------------------------------------
    # Generic record operations
    # ------------------------------------------------------------------

    def create_record(
        self, collection: str, record: dict[str, Any]
    ) -> RecordRef:
        result = self._request(
            "POST",
            "com.atproto.repo.createRecord",
            json={"repo": self.did, "collection": collection, "record": record},
        )
        return RecordRef(uri=result["uri"], cid=result["cid"])

    def put_record(
        self, collection: str, rkey: str, record: dict[str, Any]
    ) -> RecordRef:
        result = self._request(
            "POST",
            "com.atproto.repo.putRecord",
            json={
                "repo": self.did,
                "collection": collection,
                "rkey": rkey,
                "record": record,
            },
        )
        return RecordRef(uri=result["uri"], cid=result["cid"])

    def delete_record(self, collection: str, rkey: str) -> None:
        self._request(
            "POST",
            "com.atproto.repo.deleteRecord",
            json={"repo": self.did, "collection": collection, "rkey": rkey},
        )

    def get_record(self, collection: str, rkey: str) -> ListedRecord | None:
        """
        Fetch one record. Returns None if it does not exist.
        """
        try:
            result = self._request(
                "GET",
                "com.atproto.repo.getRecord",
                params={
                    "repo": self.did,
                    "collection": collection,
                    "rkey": rkey,
                },
            )
        except XrpcError as exc:
            if exc.is_not_found:
                return None
            raise
        return ListedRecord(
            uri=result["uri"],
            cid=result.get("cid") or "",
            value=result.get("value") or {},
        )

    def list_records(self, collection: str) -> list[ListedRecord]:
        """
        List every record of a collection, following the cursor.
        """
        records: list[ListedRecord] = []
        cursor: str | None = None
        while True:
            params: dict[str, Any] = {
                "repo": self.did,
                "collection": collection,
                "limit": LIST_PAGE_SIZE,
            }
            if cursor:
                params["cursor"] = cursor
            page = self._request(
                "GET", "com.atproto.repo.listRecords", params=params
            )
            for item in page.get("records", []):
                records.append(
                    ListedRecord(
                        uri=item["uri"],
                        cid=item.get("cid") or "",
                        value=item.get("value") or {},
                    )
                )
            cursor = page.get("cursor")
            if not cursor:
                break
        logger.debug("Listed %d %s records", len(records), collection)
        return records

    def upload_blob(self, data: bytes, mime_type: str) -> BlobRef:
        result = self._request(
            "POST",
            "com.atproto.repo.uploadBlob",
            data=data,
            headers={"Content-Type": mime_type},
        )
        return BlobRef.model_validate(result["blob"])

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------

    def create_document(self, record: DocumentRecord) -> RecordRef:
        return self.create_record(DOCUMENT_COLLECTION, record.to_record())

    def update_document(
        self, rkey: str, record: DocumentRecord
    ) -> RecordRef:
        return self.put_record(DOCUMENT_COLLECTION, rkey, record.to_record())

    def delete_document(self, rkey: str) -> None:
        self.delete_record(DOCUMENT_COLLECTION, rkey)

    def get_document(self, rkey: str) -> ListedRecord | None:
        return self.get_record(DOCUMENT_COLLECTION, rkey)

    def list_documents(self) -> list[ListedRecord]:
        return self.list_records(DOCUMENT_COLLECTION)

    # ------------------------------------------------------------------
    # Publications
    # ------------------------------------------------------------------

    def update_publication(
        self, rkey: str, record: PublicationRecord | dict[str, Any]
    ) -> RecordRef:
        value = (
            record.to_record()
            if isinstance(record, PublicationRecord)
            else record
        )
        return self.put_record(PUBLICATION_COLLECTION, rkey, value)

    def get_publication(self, rkey: str) -> ListedRecord | None:
        return self.get_record(PUBLICATION_COLLECTION, rkey)

    def list_publications(self) -> list[ListedRecord]:
        return self.list_records(PUBLICATION_COLLECTION)
