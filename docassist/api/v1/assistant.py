import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Response

from docassist.api.deps import get_question_generator, get_rag_service
from docassist.schemas.documents import (
    AskRequest,
    AskResponse,
    DocumentSummary,
    QuestionsReportRequest,
    ResumeQuestionsRequest,
    ResumeQuestionsResponse,
)
from docassist.services.assistant.question_generator import QuestionGeneratorService
from docassist.services.assistant.rag_service import RAGService, welcome_message
from docassist.services.assistant.report_generator import ReportGenerator

logger = logging.getLogger(__name__)

assistant_router = APIRouter()


@assistant_router.post("/assistant/ask", response_model=AskResponse)
async def ask_question(request: AskRequest, rag: RAGService = Depends(get_rag_service)):
    """Answer a question from the user's documents. Provider failures come back as the answer text."""
    answer = await rag.ask_question(request.question)
    return AskResponse(answer=answer)


@assistant_router.get("/assistant/welcome", response_model=AskResponse)
async def welcome(rag: RAGService = Depends(get_rag_service)):
    documents = await rag.uploads.get_documents()
    return AskResponse(answer=welcome_message(len(documents)))


@assistant_router.get("/resume/documents", response_model=List[DocumentSummary])
async def list_resume_documents(generator: QuestionGeneratorService = Depends(get_question_generator)):
    resumes = await generator.get_resume_documents()
    return [DocumentSummary.from_document(d) for d in resumes]


@assistant_router.post("/resume/questions", response_model=ResumeQuestionsResponse)
async def generate_resume_questions(
    request: Optional[ResumeQuestionsRequest] = None,
    generator: QuestionGeneratorService = Depends(get_question_generator),
):
    """
    Generate interview questions from the user's resume documents.

    Errors (no resume, provider not configured, provider failure) are mapped
    to HTTP responses by the application's exception handlers.
    """
    result = await generator.generate_for_user(request.document_id if request else None)
    logger.info(f"Generated {len(result.questions)} question(s) from {result.source_documents}")
    return result


@assistant_router.post("/resume/questions/download")
async def download_questions(request: QuestionsReportRequest):
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    download_filename = f"interview_questions_{timestamp}.txt"
    text_content = ReportGenerator.generate_txt_report(request.questions, request.source_title)
    return Response(
        content=text_content,
        media_type="text/plain",
        headers={"Content-Disposition": f'attachment; filename="{download_filename}"'},
    )
