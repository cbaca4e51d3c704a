from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header

from docassist.core.llm import LlmConfig, get_completion_provider
from docassist.schemas.documents import UserProfile
from docassist.services.assistant.llm_service import LLMService
from docassist.services.assistant.question_generator import QuestionGeneratorService
from docassist.services.assistant.rag_service import RAGService
from docassist.services.auth.session import AuthSession
from docassist.services.documents.store import DocumentStore, create_document_store
from docassist.services.documents.upload_service import UploadService


@lru_cache
def get_document_store() -> DocumentStore:
    """Process-wide document store."""
    return create_document_store()


@lru_cache
def get_llm_service() -> LLMService:
    config = LlmConfig.from_settings()
    return LLMService(get_completion_provider(config), config)


async def get_auth_session(
    x_user_id: Optional[str] = Header(default=None),
    x_user_anonymous: bool = Header(default=False),
) -> AuthSession:
    """
    Auth session for the request.

    Identity is asserted by the upstream identity provider through headers;
    a missing user id yields a signed-out session.
    """
    session = AuthSession()
    user = UserProfile(uid=x_user_id, isAnonymous=x_user_anonymous) if x_user_id else None
    session.set_user(user)
    return session


def get_upload_service(
    store: DocumentStore = Depends(get_document_store),
    auth: AuthSession = Depends(get_auth_session),
) -> UploadService:
    return UploadService(store=store, auth=auth)


def get_rag_service(
    uploads: UploadService = Depends(get_upload_service),
    llm: LLMService = Depends(get_llm_service),
) -> RAGService:
    return RAGService(uploads=uploads, llm=llm)


def get_question_generator(
    uploads: UploadService = Depends(get_upload_service),
    llm: LLMService = Depends(get_llm_service),
) -> QuestionGeneratorService:
    return QuestionGeneratorService(uploads=uploads, llm=llm)
