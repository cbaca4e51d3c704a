import logging
from typing import List, Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Form, HTTPException, Response, UploadFile, status

from docassist.api.deps import get_upload_service
from docassist.core.exceptions import SizeExceededError
from docassist.schemas.documents import DocumentSummary, TextUploadRequest
from docassist.services.documents.upload_service import UploadService

logger = logging.getLogger(__name__)

documents_router = APIRouter(prefix="/documents")


@documents_router.post("/upload", response_model=DocumentSummary, status_code=status.HTTP_201_CREATED)
async def upload_document(
    file: UploadFile = File(...),
    title: Optional[str] = Form(default=None),
    uploads: UploadService = Depends(get_upload_service),
):
    """
    Upload a file to the user's library.

    Flow:
    1. Validate filename
    2. Reject oversize uploads from the declared size (before reading)
    3. Read at most one byte past the limit, so an undeclared oversize body is
       rejected by the upload service without being buffered whole
    4. Encode, extract and store
    """
    if not file.filename:
        raise HTTPException(status_code=400, detail="No file provided.")

    max_size = uploads.encoder.max_size_bytes
    if file.size is not None and file.size > max_size:
        raise SizeExceededError(file.size, max_size)

    data = await file.read(max_size + 1)
    document = await uploads.upload_file(
        data,
        file_name=file.filename,
        mime_type=file.content_type or "",
        title=title,
    )
    logger.info(f"Uploaded {document.fileName} as {document.id}")
    return DocumentSummary.from_document(document)


@documents_router.post("/text", response_model=DocumentSummary, status_code=status.HTTP_201_CREATED)
async def upload_text(
    request: TextUploadRequest,
    uploads: UploadService = Depends(get_upload_service),
):
    document = await uploads.upload_text(request.text, request.title)
    return DocumentSummary.from_document(document)


@documents_router.get("", response_model=List[DocumentSummary])
async def list_documents(uploads: UploadService = Depends(get_upload_service)):
    documents = await uploads.get_documents()
    return [DocumentSummary.from_document(d) for d in documents]


@documents_router.get("/{document_id}/download")
async def download_document(document_id: str, uploads: UploadService = Depends(get_upload_service)):
    document = await uploads.get_document(document_id)
    data, media_type = uploads.download_document(document)
    return Response(
        content=data,
        media_type=media_type,
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(document.fileName)}"},
    )


@documents_router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_document(document_id: str, uploads: UploadService = Depends(get_upload_service)):
    await uploads.delete_document(document_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
