"""CouchDB note store compatible with the Obsidian LiveSync plugin.

LiveSync keeps one metadata document per note (id = lower-cased path)
whose ``children`` list points at content-addressed ``leaf`` chunk
documents. Deletion must be soft: LiveSync only propagates a delete when
the metadata document survives with ``deleted: true``; a CouchDB hard
delete is invisible to other devices.
"""

from __future__ import annotations

import hashlib
import logging
import time
from typing import Any
from urllib.parse import quote

import httpx

from curator.domain.paths import normalize_path
from curator.errors import NoteNotFoundError, StoreError
from curator.infrastructure.store import NoteRef, StoredNote

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 50_000
DEFAULT_TIMEOUT = 30.0
CHUNK_PREFIX = "h:"
VERSION_DOC_ID = "obsydian_livesync_version"


def path_to_id(path: str) -> str:
    """LiveSync document id for a note path.

    Ids are lower-cased; ids starting with ``_`` (reserved by CouchDB)
    get a leading ``/``.
    """
    doc_id = normalize_path(path).lower()
    if doc_id.startswith("_"):
        doc_id = "/" + doc_id
    return doc_id


def chunk_id(data: str) -> str:
    digest = hashlib.sha256(data.encode("utf-8")).hexdigest()
    return f"{CHUNK_PREFIX}{digest[:12]}"


def split_chunks(content: str, size: int = DEFAULT_CHUNK_SIZE) -> list[str]:
    chunks = [content[i : i + size] for i in range(0, len(content), size)]
    return chunks or [""]


class LiveSyncStore:
    """Read and write notes in a LiveSync CouchDB database."""

    def __init__(
        self,
        url: str,
        database: str,
        *,
        username: str | None = None,
        password: str | None = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        auth = (username, password or "") if username else None
        self._db = quote(database, safe="")
        self._chunk_size = chunk_size
        self._client = httpx.Client(
            base_url=url.rstrip("/"),
            auth=auth,
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

    def close(self) -> None:
        self._client.close()

    # ------------------------------------------------------------------
    # NoteStore contract
    # ------------------------------------------------------------------

    def list_notes(self) -> list[NoteRef]:
        data = self._request("GET", f"/{self._db}/_all_docs", params={"include_docs": "true"})
        refs: list[NoteRef] = []
        for row in data.get("rows", []):
            doc_id = row.get("id", "")
            doc = row.get("doc") or {}
            if doc_id.startswith((CHUNK_PREFIX, "_")) or doc_id == VERSION_DOC_ID:
                continue
            if doc.get("deleted") or doc.get("_deleted") or not doc.get("path"):
                continue
            refs.append(NoteRef(path=doc["path"], mtime=doc.get("mtime"), size=doc.get("size")))
        return refs

    def read(self, path: str) -> StoredNote | None:
        doc = self._get_doc(path_to_id(path))
        if doc is None or doc.get("deleted"):
            return None
        if doc.get("e_"):
            raise StoreError(f"Note is encrypted (disable end-to-end encryption): {path}")
        parts: list[str] = []
        for child in doc.get("children", []):
            chunk = self._get_doc(child)
            if chunk is None:
                raise StoreError(f"Missing chunk {child} for {path}")
            parts.append(chunk.get("data", ""))
        return StoredNote(path=doc.get("path", path), content="".join(parts))

    def write(self, path: str, content: str) -> None:
        doc_id = path_to_id(path)
        existing = self._get_doc(doc_id)
        now = int(time.time() * 1000)

        children: list[str] = []
        for data in split_chunks(content, self._chunk_size):
            cid = chunk_id(data)
            children.append(cid)
            # Chunks are content-addressed; an existing chunk is already correct.
            if self._get_doc(cid) is None:
                self._put(cid, {"_id": cid, "type": "leaf", "data": data})

        metadata: dict[str, Any] = {
            "_id": doc_id,
            "children": children,
            "path": normalize_path(path),
            "ctime": existing.get("ctime", now) if existing else now,
            "mtime": now,
            "size": len(content.encode("utf-8")),
            "type": "plain",
            "eden": {},
        }
        if existing:
            metadata["_rev"] = existing["_rev"]
        self._put(doc_id, metadata)

    def delete(self, path: str) -> None:
        doc_id = path_to_id(path)
        doc = self._get_doc(doc_id)
        if doc is None or doc.get("deleted"):
            raise NoteNotFoundError(path)
        doc = {**doc, "deleted": True, "data": "", "children": [], "mtime": int(time.time() * 1000)}
        self._put(doc_id, doc)

    # ------------------------------------------------------------------
    # HTTP helpers
    # ------------------------------------------------------------------

    def _doc_url(self, doc_id: str) -> str:
        return f"/{self._db}/{quote(doc_id, safe='')}"

    def _get_doc(self, doc_id: str) -> dict[str, Any] | None:
        try:
            resp = self._client.get(self._doc_url(doc_id))
        except httpx.HTTPError as exc:
            raise StoreError(f"CouchDB request failed: {exc}") from exc
        if resp.status_code == 404:
            return None
        return self._json(resp)

    def _put(self, doc_id: str, doc: dict[str, Any]) -> dict[str, Any]:
        try:
            resp = self._client.put(self._doc_url(doc_id), json=doc)
        except httpx.HTTPError as exc:
            raise StoreError(f"CouchDB request failed: {exc}") from exc
        return self._json(resp)

    def _request(self, method: str, url: str, **kwargs: Any) -> dict[str, Any]:
        try:
            resp = self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise StoreError(f"CouchDB request failed: {exc}") from exc
        return self._json(resp)

    @staticmethod
    def _json(resp: httpx.Response) -> dict[str, Any]:
        try:
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise StoreError(
                f"CouchDB returned {exc.response.status_code}: {exc.response.text}"
            ) from exc
        data: dict[str, Any] = resp.json()
        return data
