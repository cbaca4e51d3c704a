"""Shared fakes and fixtures for the DocAssist test suite."""
from typing import List, Optional, Sequence, Union

import pytest

from docassist.core.llm import LlmConfig
from docassist.schemas.documents import Document, UserProfile
from docassist.services.assistant.llm_service import LLMService
from docassist.services.auth.session import AuthSession
from docassist.services.documents.pdf_extractor import PdfTextExtractor
from docassist.services.documents.store import InMemoryDocumentStore
from docassist.services.documents.upload_service import UploadService

USER_ID = "user-1"


class FakeCompletionProvider:
    """Returns queued responses in order; an Exception in the queue is raised instead."""

    def __init__(self, responses: Sequence[Union[str, Exception]] = ()):
        self.responses = list(responses)
        self.calls: List[dict] = []

    async def complete(self, system_prompt, user_prompt, max_tokens, temperature):
        self.calls.append({
            "system_prompt": system_prompt,
            "user_prompt": user_prompt,
            "max_tokens": max_tokens,
            "temperature": temperature,
        })
        if not self.responses:
            raise AssertionError("FakeCompletionProvider called more times than expected")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class FakePdfHandle:
    def __init__(self, pages, decoder):
        self._pages = pages
        self._decoder = decoder
        self.page_count = len(pages)

    def get_page_text(self, page_number: int) -> List[str]:
        self._decoder.requested_pages.append(page_number)
        page = self._pages[page_number - 1]
        if isinstance(page, Exception):
            raise page
        return list(page)


class FakePdfDecoder:
    """Pages are lists of text items, or an Exception raised for that page."""

    def __init__(self, pages=(), open_error: Optional[Exception] = None):
        self.pages = list(pages)
        self.open_error = open_error
        self.open_calls = 0
        self.requested_pages: List[int] = []

    def open(self, data: bytes):
        self.open_calls += 1
        if self.open_error is not None:
            raise self.open_error
        return FakePdfHandle(self.pages, self)


def numbered_questions(count: int, start: int = 1, topic: str = "topic") -> str:
    return "\n".join(
        f"{i}. What is your experience with {topic} number {i} in production?"
        for i in range(start, start + count)
    )


def make_document(
    title: str = "notes.txt",
    file_name: Optional[str] = None,
    content: str = "plain notes",
    is_base64: bool = False,
    extracted_text: Optional[str] = None,
    file_type: str = "text/plain",
    **kwargs,
) -> Document:
    return Document(
        title=title,
        fileName=file_name or title,
        fileSize=len(content),
        fileType=file_type,
        content=content,
        isBase64=is_base64,
        extractedText=extracted_text,
        userId=kwargs.pop("userId", USER_ID),
        **kwargs,
    )


@pytest.fixture
def auth() -> AuthSession:
    session = AuthSession()
    session.set_user(UserProfile(uid=USER_ID, displayName="Test User"))
    return session


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def pdf_decoder() -> FakePdfDecoder:
    return FakePdfDecoder(pages=[["Page one text"]])


@pytest.fixture
def uploads(store, auth, pdf_decoder) -> UploadService:
    return UploadService(store=store, auth=auth, extractor=PdfTextExtractor(decoder=pdf_decoder))


@pytest.fixture
def provider() -> FakeCompletionProvider:
    return FakeCompletionProvider()


@pytest.fixture
def llm(provider) -> LLMService:
    return LLMService(provider, LlmConfig(credential="test-key"), max_attempts=3, base_delay=0, max_delay=0)
