"""Per-user document persistence."""
from __future__ import annotations

import asyncio
import hashlib
import json
import logging
import re
import uuid
from pathlib import Path
from typing import Dict, List, Optional, Protocol

from docassist.core.config import settings
from docassist.core.exceptions import SizeExceededError
from docassist.schemas.documents import Document

logger = logging.getLogger(__name__)

_SAFE_USER_ID = re.compile(r'^[A-Za-z0-9_-]{1,128}$')


class DocumentStore(Protocol):
    """Document records partitioned by user id."""

    async def add(self, user_id: str, document: Document) -> str: ...

    async def list(self, user_id: str) -> List[Document]:
        """All documents of the user, newest first."""
        ...

    async def get(self, user_id: str, document_id: str) -> Optional[Document]: ...

    async def delete(self, user_id: str, document_id: str) -> None: ...


def _newest_first(documents: List[Document]) -> List[Document]:
    return sorted(documents, key=lambda d: d.createdAt, reverse=True)


def _prepare(user_id: str, document: Document, max_size_bytes: int) -> Document:
    if document.fileSize > max_size_bytes:
        raise SizeExceededError(document.fileSize, max_size_bytes)
    return document.model_copy(update={"id": uuid.uuid4().hex, "userId": user_id})


class InMemoryDocumentStore:
    """Process-local store, used for development and tests."""

    def __init__(self, max_size_bytes: int = None):
        self.max_size_bytes = max_size_bytes if max_size_bytes is not None else settings.max_file_size_bytes
        self._documents: Dict[str, Dict[str, Document]] = {}

    async def add(self, user_id: str, document: Document) -> str:
        stored = _prepare(user_id, document, self.max_size_bytes)
        self._documents.setdefault(user_id, {})[stored.id] = stored
        return stored.id

    async def list(self, user_id: str) -> List[Document]:
        return _newest_first(list(self._documents.get(user_id, {}).values()))

    async def get(self, user_id: str, document_id: str) -> Optional[Document]:
        return self._documents.get(user_id, {}).get(document_id)

    async def delete(self, user_id: str, document_id: str) -> None:
        self._documents.get(user_id, {}).pop(document_id, None)


class JsonFileDocumentStore:
    """
    Stores each user's documents in one JSON file.

    Responsibilities:
    - Map user ids to files under base_path
    - Load/save the user's records
    - Keep extractedText out of records that have none
    """

    def __init__(self, base_path: str = None, max_size_bytes: int = None, logger: Optional[logging.Logger] = None):
        self.base_path = Path(base_path or settings.DOCUMENT_STORE_PATH)
        self.max_size_bytes = max_size_bytes if max_size_bytes is not None else settings.max_file_size_bytes
        self.logger = logger or logging.getLogger(__name__)
        self._lock = asyncio.Lock()

    def _user_file(self, user_id: str) -> Path:
        if _SAFE_USER_ID.match(user_id):
            name = user_id
        else:
            name = hashlib.sha256(user_id.encode("utf-8")).hexdigest()
        return self.base_path / f"{name}.json"

    def _load(self, user_id: str) -> Dict[str, Document]:
        file_path = self._user_file(user_id)
        if not file_path.exists():
            return {}
        with open(file_path, "r", encoding="utf-8") as f:
            records = json.load(f)
        documents = {}
        for record in records:
            document = Document(**record)
            # Records are keyed by file, but never trust a foreign userId inside one
            if document.userId == user_id:
                documents[document.id] = document
        return documents

    def _save(self, user_id: str, documents: Dict[str, Document]) -> None:
        self.base_path.mkdir(parents=True, exist_ok=True)
        file_path = self._user_file(user_id)
        tmp_path = file_path.with_suffix(".json.tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump([d.to_record() for d in documents.values()], f, indent=2, ensure_ascii=False)
        tmp_path.replace(file_path)

    async def add(self, user_id: str, document: Document) -> str:
        stored = _prepare(user_id, document, self.max_size_bytes)
        async with self._lock:
            documents = await asyncio.to_thread(self._load, user_id)
            documents[stored.id] = stored
            await asyncio.to_thread(self._save, user_id, documents)
        self.logger.info(f"Saved document {stored.id} ({stored.fileName})")
        return stored.id

    async def list(self, user_id: str) -> List[Document]:
        async with self._lock:
            documents = await asyncio.to_thread(self._load, user_id)
        return _newest_first(list(documents.values()))

    async def get(self, user_id: str, document_id: str) -> Optional[Document]:
        async with self._lock:
            documents = await asyncio.to_thread(self._load, user_id)
        return documents.get(document_id)

    async def delete(self, user_id: str, document_id: str) -> None:
        async with self._lock:
            documents = await asyncio.to_thread(self._load, user_id)
            if documents.pop(document_id, None) is not None:
                await asyncio.to_thread(self._save, user_id, documents)
                self.logger.info(f"Deleted document {document_id}")


def create_document_store(backend: str = None) -> DocumentStore:
    backend = (backend or settings.DOCUMENT_STORE_BACKEND).lower()
    if backend == "json":
        return JsonFileDocumentStore()
    if backend == "memory":
        return InMemoryDocumentStore()
    raise ValueError(f"Unknown document store backend: {backend}")
