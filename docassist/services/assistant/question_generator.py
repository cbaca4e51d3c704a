"""
Resume interview question generation.

Flow:
1. Find resume documents (heuristic classifier)
2. Build a resume-only context
3. Ask for a fixed number of numbered questions and parse them
4. Repair a short answer: regenerate from scratch when the yield is very low,
   otherwise backfill the shortfall with one extra request
"""
from __future__ import annotations

import logging
from typing import List, Optional

from docassist.core.config import settings
from docassist.core.exceptions import NoResumeDocumentsError
from docassist.core.logger import log_async_execution_time
from docassist.core.prompts import (
    generate_backfill_system_prompt,
    generate_backfill_user_prompt,
    generate_resume_questions_system_prompt,
    generate_resume_questions_user_prompt,
)
from docassist.schemas.documents import Document, ResumeQuestionsResponse
from docassist.services.assistant.context_builder import ContextBuilder
from docassist.services.assistant.llm_service import LLMService
from docassist.services.assistant.question_parser import dedupe, parse_questions
from docassist.services.assistant.resume_classifier import ResumeClassifier
from docassist.services.documents.upload_service import UploadService

logger = logging.getLogger(__name__)

RESUME_CONTEXT_HEADER = "Resume Content:\n\n"
GENERATION_MAX_TOKENS = 2500
BACKFILL_MAX_TOKENS = 1000
GENERATION_TEMPERATURE = 0.7
BACKFILL_SEED_COUNT = 5


class QuestionGeneratorService:
    """Generates interview questions from the user's resume documents."""

    def __init__(
        self,
        uploads: UploadService,
        llm: LLMService,
        classifier: ResumeClassifier = None,
        context_builder: ContextBuilder = None,
        question_count: int = None,
        backfill_threshold: int = None,
        max_full_retries: int = None,
    ):
        self.uploads = uploads
        self.llm = llm
        self.classifier = classifier or ResumeClassifier(fetch_content=uploads.get_document_content)
        self.context_builder = context_builder or ContextBuilder(fetch_content=uploads.get_document_content)
        self.question_count = question_count or settings.RESUME_QUESTION_COUNT
        self.backfill_threshold = backfill_threshold or settings.RESUME_BACKFILL_THRESHOLD
        self.max_full_retries = settings.RESUME_MAX_FULL_RETRIES if max_full_retries is None else max_full_retries

    async def get_resume_documents(self) -> List[Document]:
        documents = await self.uploads.get_documents()
        return await self.classifier.filter_resumes(documents)

    async def _draw(self, resume_context: str, attempt: int) -> List[str]:
        response = await self.llm.complete(
            generate_resume_questions_system_prompt(self.question_count),
            generate_resume_questions_user_prompt(resume_context, self.question_count),
            max_tokens=GENERATION_MAX_TOKENS,
            temperature=GENERATION_TEMPERATURE,
            label=f"Resume questions #{attempt + 1}",
        )
        return parse_questions(response)

    async def _backfill(self, resume_context: str, questions: List[str]) -> List[str]:
        missing = self.question_count - len(questions)
        logger.info(f"Requesting {missing} additional question(s)")
        try:
            response = await self.llm.complete(
                generate_backfill_system_prompt(missing),
                generate_backfill_user_prompt(resume_context, missing, questions[:BACKFILL_SEED_COUNT]),
                max_tokens=BACKFILL_MAX_TOKENS,
                temperature=GENERATION_TEMPERATURE,
                label="Resume questions backfill",
            )
        except Exception as e:
            logger.warning(f"Failed to generate additional questions: {e}")
            return questions

        return dedupe(questions + parse_questions(response))

    @log_async_execution_time
    async def generate_resume_questions(self, resume_documents: List[Document]) -> List[str]:
        """
        Generate up to question_count interview questions for the given resumes.

        Raises:
            NotConfiguredError: No LLM credential configured
            NoResumeDocumentsError: resume_documents is empty
            ProviderError: The main generation request failed
        """
        self.llm.ensure_configured()
        if not resume_documents:
            raise NoResumeDocumentsError()

        context = await self.context_builder.build(resume_documents, header=RESUME_CONTEXT_HEADER)

        best: List[str] = []
        for attempt in range(self.max_full_retries + 1):
            questions = await self._draw(context.text, attempt)
            logger.info(f"Attempt {attempt + 1}: parsed {len(questions)}/{self.question_count} question(s)")
            if len(questions) > len(best):
                best = questions
            if len(best) >= self.backfill_threshold:
                break
            if attempt < self.max_full_retries:
                logger.warning(f"Too few questions generated ({len(questions)}), retrying from scratch")

        if self.backfill_threshold <= len(best) < self.question_count:
            best = await self._backfill(context.text, best)
        elif len(best) < self.backfill_threshold:
            logger.warning(f"Returning {len(best)} question(s) after {self.max_full_retries + 1} attempt(s)")

        return best[:self.question_count]

    async def generate_questions_for_resume(self, resume_document: Document) -> List[str]:
        return await self.generate_resume_questions([resume_document])

    async def generate_for_user(self, document_id: Optional[str] = None) -> ResumeQuestionsResponse:
        """
        Generate questions for the current user's resumes, or for one document.

        Raises:
            NoResumeDocumentsError: The user has no resume documents
            DocumentNotFoundError: document_id does not exist
        """
        self.llm.ensure_configured()
        if document_id:
            documents = [await self.uploads.get_document(document_id)]
        else:
            documents = await self.get_resume_documents()

        questions = await self.generate_resume_questions(documents)
        return ResumeQuestionsResponse(
            questions=questions,
            source_documents=[d.title for d in documents],
        )
