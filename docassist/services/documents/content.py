import logging
from typing import Awaitable, Callable

from docassist.schemas.documents import Document

logger = logging.getLogger(__name__)

PDF_UNAVAILABLE_NOTE = (
    "[PDF text extraction failed or PDF contains no text. The PDF might be image-based, "
    "scanned, or password-protected. Please upload a text-based PDF for AI analysis.]"
)
BINARY_UNAVAILABLE_NOTE = (
    "[Text content could not be extracted from this file. "
    "Please upload text files or text-based PDFs for AI analysis.]"
)


def _is_pdf(document: Document) -> bool:
    return document.fileType == "application/pdf" or document.fileName.lower().endswith(".pdf")


def resolve_document_content(document: Document) -> str:
    """
    Return the text that represents a document in AI context.

    Precedence: extracted text, then plain-text content, then a metadata
    placeholder. Always returns a string.
    """
    if document.extractedText and document.extractedText.strip():
        return document.extractedText

    if not document.isBase64 and document.content and document.content.strip():
        return document.content

    if document.isBase64:
        if _is_pdf(document):
            logger.warning(f"PDF {document.fileName} has no extracted text")
            note = PDF_UNAVAILABLE_NOTE
        else:
            note = BINARY_UNAVAILABLE_NOTE
        return (
            f"File: {document.fileName}\n"
            f"Title: {document.title}\n"
            f"Type: {document.fileType}\n"
            f"Size: {document.fileSize} bytes\n\n"
            f"{note}"
        )

    logger.warning(f"No content available for document: {document.fileName}")
    return f"No content available for {document.fileName}"


ContentFetcher = Callable[[Document], Awaitable[str]]


async def fetch_document_content(document: Document) -> str:
    """Awaitable form of resolve_document_content, the default ContentFetcher."""
    return resolve_document_content(document)
