"""
Document ingestion and storage.

Architecture:
- encoder.py: Size ceiling and text/base64 encoding
- pdf_extractor.py: PDF text extraction (pypdf adapter)
- store.py: Per-user document persistence
- content.py: Text representation of a document for AI context
- upload_service.py: Upload/list/download/delete orchestration
"""

from .encoder import UploadEncoder, EncodedContent, encode_upload
from .pdf_extractor import PdfTextExtractor, PypdfDecoder
from .store import DocumentStore, InMemoryDocumentStore, JsonFileDocumentStore, create_document_store
from .content import resolve_document_content
from .upload_service import UploadService

__all__ = [
    'UploadEncoder',
    'EncodedContent',
    'encode_upload',
    'PdfTextExtractor',
    'PypdfDecoder',
    'DocumentStore',
    'InMemoryDocumentStore',
    'JsonFileDocumentStore',
    'create_document_store',
    'resolve_document_content',
    'UploadService',
]
