"""
Context assembly for prompting.

Documents are resolved one at a time, in store order. A document whose content
cannot be fetched contributes a placeholder block and is reported in the
result; it never stops the others from being included.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List

from docassist.core.config import settings
from docassist.schemas.documents import Document
from docassist.services.documents.content import ContentFetcher, fetch_document_content

logger = logging.getLogger(__name__)

CONTENT_UNAVAILABLE = "[Content unavailable]"
TRUNCATION_MARKER = "\n\n[Context truncated]"


@dataclass
class ContextFailure:
    title: str
    error: str


@dataclass
class BuiltContext:
    text: str
    included: List[str] = field(default_factory=list)
    failures: List[ContextFailure] = field(default_factory=list)

    @property
    def has_failures(self) -> bool:
        return bool(self.failures)


class ContextBuilder:
    """Concatenates document text into "Document: <title>" blocks."""

    def __init__(self, fetch_content: ContentFetcher = None, max_chars: int = None):
        self.fetch_content = fetch_content or fetch_document_content
        self.max_chars = settings.MAX_CONTEXT_CHARS if max_chars is None else max_chars

    async def build(self, documents: Iterable[Document], header: str = "", content_label: str = "") -> BuiltContext:
        """
        Build the context for a set of documents.

        Args:
            documents: Documents in the order they should appear
            header: Text placed before the first block
            content_label: Prefix for each document's content line (e.g. "Content: ")
        """
        blocks = [header] if header else []
        result = BuiltContext(text="")

        for document in documents:
            try:
                content = await self.fetch_content(document)
            except Exception as e:
                logger.error(f"Error fetching content for {document.title}: {e}")
                result.failures.append(ContextFailure(title=document.title, error=str(e)))
                blocks.append(f"Document: {document.title}\n{CONTENT_UNAVAILABLE}\n\n")
                continue

            result.included.append(document.title)
            blocks.append(f"Document: {document.title}\n{content_label}{content}\n\n")

        text = "".join(blocks)
        if self.max_chars and len(text) > self.max_chars:
            logger.warning(f"Context of {len(text)} chars truncated to {self.max_chars}")
            text = text[:self.max_chars] + TRUNCATION_MARKER

        result.text = text
        if result.failures:
            logger.warning(
                f"Context built with {len(result.failures)} unavailable document(s): "
                f"{[f.title for f in result.failures]}"
            )
        return result
