"""
Document upload and library management.

Upload flow:
1. Resolve the signed-in user
2. Reject oversize or empty payloads (before any encoding work)
3. Encode content (plain text or base64)
4. Extract PDF text (best effort, never fails the upload)
5. Persist the record
"""
from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from docassist.core.exceptions import DocumentNotFoundError, EmptyUploadError, PdfExtractionError
from docassist.schemas.documents import Document
from docassist.services.auth.session import AuthSession
from docassist.services.documents.content import resolve_document_content
from docassist.services.documents.encoder import UploadEncoder
from docassist.services.documents.pdf_extractor import PdfTextExtractor
from docassist.services.documents.store import DocumentStore

logger = logging.getLogger(__name__)


class UploadService:
    """Creates, lists, downloads and deletes the current user's documents."""

    def __init__(
        self,
        store: DocumentStore,
        auth: AuthSession,
        encoder: UploadEncoder = None,
        extractor: PdfTextExtractor = None,
    ):
        self.store = store
        self.auth = auth
        self.encoder = encoder or UploadEncoder()
        self.extractor = extractor or PdfTextExtractor()

    async def _user_id(self) -> str:
        user = await self.auth.require_ready_user()
        return user.uid

    async def _extract_pdf_text(self, data: bytes, file_name: str) -> Optional[str]:
        if not self.encoder.has_pdf_signature(data):
            logger.warning(f"{file_name} does not start with a PDF header, skipping text extraction")
            return None
        try:
            return await self.extractor.extract(data)
        except PdfExtractionError as e:
            logger.warning(f"PDF text extraction failed for {file_name} ({type(e).__name__}): {e.message}")
            return None

    async def upload_file(self, data: bytes, file_name: str, mime_type: str = "", title: str = None) -> Document:
        """
        Store an uploaded file.

        Raises:
            UnauthenticatedError: No signed-in user
            SizeExceededError: File is larger than the configured ceiling
            EmptyUploadError: File has no bytes
        """
        user_id = await self._user_id()

        self.encoder.check_size(len(data))
        if not data:
            raise EmptyUploadError(f"Uploaded file is empty: {file_name}")

        file_type = mime_type or UploadEncoder.DEFAULT_MIME_TYPE
        encoded = self.encoder.encode(data, file_type, file_name)

        extracted_text: Optional[str] = None
        if not encoded.is_base64:
            extracted_text = encoded.content
        elif self.encoder.is_pdf(file_type, file_name):
            logger.info(f"Processing PDF {file_name} ({len(data)} bytes)")
            extracted_text = await self._extract_pdf_text(data, file_name)

        if extracted_text is not None and not extracted_text.strip():
            extracted_text = None

        document = Document(
            title=title or file_name,
            fileName=file_name,
            fileSize=len(data),
            fileType=file_type,
            content=encoded.content,
            isBase64=encoded.is_base64,
            extractedText=extracted_text,
            userId=user_id,
        )
        document_id = await self.store.add(user_id, document)
        logger.info(
            f"Saved document {document_id} ({file_name}) "
            f"{'with' if extracted_text else 'without'} extracted text"
        )
        return document.model_copy(update={"id": document_id})

    async def upload_text(self, text: str, title: str) -> Document:
        """Store pasted text as a plain-text document named after its title."""
        user_id = await self._user_id()

        size = len(text.encode("utf-8"))
        self.encoder.check_size(size)
        if not text.strip():
            raise EmptyUploadError("Text content is empty")

        document = Document(
            title=title,
            fileName=f"{title}.txt",
            fileSize=size,
            fileType="text/plain",
            content=text,
            isBase64=False,
            userId=user_id,
        )
        document_id = await self.store.add(user_id, document)
        return document.model_copy(update={"id": document_id})

    async def get_documents(self) -> List[Document]:
        user_id = await self._user_id()
        return await self.store.list(user_id)

    async def get_document(self, document_id: str) -> Document:
        user_id = await self._user_id()
        document = await self.store.get(user_id, document_id)
        if document is None:
            raise DocumentNotFoundError(f"Document not found: {document_id}")
        return document

    async def delete_document(self, document_id: str) -> None:
        user_id = await self._user_id()
        await self.store.delete(user_id, document_id)
        logger.info(f"Deleted document {document_id}")

    async def get_document_content(self, document: Document) -> str:
        return resolve_document_content(document)

    @staticmethod
    def download_document(document: Document) -> Tuple[bytes, str]:
        """Return the original bytes and MIME type of a stored document."""
        return UploadEncoder.decode(document.content, document.isBase64), document.fileType
