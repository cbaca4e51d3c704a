"""
Heuristic resume detection.

Tier 1 looks at the file name and title only. Tier 2 needs the document text
and counts distinct resume section terms. False positives and negatives are
expected; this is a heuristic.
"""
from __future__ import annotations

import logging
from typing import List, Tuple

from docassist.schemas.documents import Document
from docassist.services.documents.content import ContentFetcher, fetch_document_content

logger = logging.getLogger(__name__)

RESUME_NAME_KEYWORDS: Tuple[str, ...] = ('resume', 'cv', 'curriculum vitae', 'bio', 'biography')

RESUME_SECTION_TERMS: Tuple[str, ...] = (
    'objective', 'summary', 'experience', 'education', 'skills',
    'work history', 'employment', 'professional experience',
    'qualifications', 'achievements', 'projects', 'certifications',
    'references', 'contact information', 'phone', 'email', 'address',
)

MIN_SECTION_MATCHES = 3


def is_resume_by_name(document: Document) -> bool:
    file_name = document.fileName.lower()
    title = document.title.lower()
    return any(keyword in file_name or keyword in title for keyword in RESUME_NAME_KEYWORDS)


def count_section_terms(text: str) -> int:
    """Number of distinct section terms present in text (case-insensitive)."""
    lowered = text.lower()
    return sum(1 for term in RESUME_SECTION_TERMS if term in lowered)


class ResumeClassifier:
    def __init__(self, fetch_content: ContentFetcher = None, min_section_matches: int = MIN_SECTION_MATCHES):
        self.fetch_content = fetch_content or fetch_document_content
        self.min_section_matches = min_section_matches

    async def is_resume(self, document: Document) -> bool:
        if is_resume_by_name(document):
            return True

        try:
            content = await self.fetch_content(document)
        except Exception as e:
            logger.error(f"Error checking document content for resume ({document.title}): {e}")
            return False

        return count_section_terms(content) >= self.min_section_matches

    async def filter_resumes(self, documents: List[Document]) -> List[Document]:
        """
        Keep the resumes among documents, in their original order.

        Name matches are accepted without reading content; the rest are checked
        one at a time.
        """
        resumes = []
        for document in documents:
            if is_resume_by_name(document) or await self.is_resume(document):
                resumes.append(document)
        logger.info(f"Found {len(resumes)} resume(s) among {len(documents)} document(s)")
        return resumes
