"""
PDF text extraction.

The extractor talks to a PdfDecoder. The decoder adapter is the only place that
knows about the PDF library; it hands back pages as lists of plain strings.
"""
from __future__ import annotations

import asyncio
import io
import logging
from typing import Any, Iterable, List, Protocol

import pypdf
from pypdf.errors import FileNotDecryptedError, WrongPasswordError

from docassist.core.config import settings
from docassist.core.exceptions import (
    PdfMalformedError,
    PdfNoExtractableTextError,
    PdfPasswordProtectedError,
)

logger = logging.getLogger(__name__)


class PdfHandle(Protocol):
    page_count: int

    def get_page_text(self, page_number: int) -> List[str]:
        """Return the text items of a 1-based page."""
        ...


class PdfDecoder(Protocol):
    def open(self, data: bytes) -> PdfHandle:
        """Open a PDF. Raises PdfPasswordProtectedError or PdfMalformedError."""
        ...


def normalize_text_items(items: Iterable[Any]) -> List[str]:
    """Flatten library text items (plain strings or objects carrying .str / .text) to strings."""
    normalized = []
    for item in items:
        if isinstance(item, str):
            normalized.append(item)
        elif getattr(item, "str", None) is not None:
            normalized.append(item.str or "")
        elif getattr(item, "text", None) is not None:
            normalized.append(item.text or "")
        else:
            normalized.append("")
    return normalized


def _looks_encrypted(error: Exception) -> bool:
    if isinstance(error, (FileNotDecryptedError, WrongPasswordError)):
        return True
    message = str(error).lower()
    return "password" in message or "encrypt" in message


class _PypdfHandle:
    def __init__(self, reader: pypdf.PdfReader):
        self._reader = reader
        self.page_count = len(reader.pages)

    def get_page_text(self, page_number: int) -> List[str]:
        text = self._reader.pages[page_number - 1].extract_text() or ""
        return normalize_text_items(text.splitlines())


class PypdfDecoder:
    """PdfDecoder backed by pypdf."""

    def open(self, data: bytes) -> PdfHandle:
        try:
            reader = pypdf.PdfReader(io.BytesIO(data))
            if reader.is_encrypted:
                # Owner-password-only files open with an empty user password
                if not reader.decrypt(""):
                    raise PdfPasswordProtectedError()
            # Touch the page tree so structural damage surfaces here, not mid-loop
            len(reader.pages)
        except PdfPasswordProtectedError:
            raise
        except Exception as e:
            if _looks_encrypted(e):
                raise PdfPasswordProtectedError() from e
            raise PdfMalformedError(f"Failed to load PDF: {e}") from e
        return _PypdfHandle(reader)


class PdfTextExtractor:
    """
    Extracts plain text from PDF bytes.

    Pages are processed strictly in order, one at a time, up to max_pages.
    A failing page is logged and skipped.
    """

    def __init__(self, decoder: PdfDecoder = None, max_pages: int = None):
        self.decoder = decoder or PypdfDecoder()
        self.max_pages = max_pages if max_pages is not None else settings.PDF_MAX_PAGES

    async def extract(self, data: bytes) -> str:
        """
        Extract text from a PDF.

        Raises:
            PdfPasswordProtectedError: The document is encrypted
            PdfMalformedError: The document could not be opened or has no pages
            PdfNoExtractableTextError: No page produced any text (likely a scanned PDF)
        """
        document = await asyncio.to_thread(self.decoder.open, data)

        if document.page_count == 0:
            raise PdfMalformedError("PDF has no pages")

        page_limit = min(document.page_count, self.max_pages)
        if document.page_count > page_limit:
            logger.info(f"PDF has {document.page_count} pages, extracting the first {page_limit}")

        parts = []
        for page_number in range(1, page_limit + 1):
            try:
                items = await asyncio.to_thread(document.get_page_text, page_number)
            except Exception as e:
                logger.warning(f"Error extracting text from page {page_number}: {e}")
                continue

            page_text = " ".join(item for item in items if item and item.strip())
            if page_text.strip():
                parts.append(page_text + "\n\n")

            if page_number % 10 == 0:
                logger.debug(f"Processed {page_number}/{page_limit} pages")

        text = "".join(parts).strip()
        if not text:
            raise PdfNoExtractableTextError()

        logger.info(f"Extracted {len(text)} characters from {page_limit} page(s)")
        return text
