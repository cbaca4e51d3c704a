"""Question answering over the user's documents."""
from __future__ import annotations

import logging
from typing import List

from docassist.core.exceptions import AppError, UnauthenticatedError
from docassist.core.prompts import QA_SYSTEM_PROMPT, generate_qa_user_prompt
from docassist.schemas.documents import Message
from docassist.services.assistant.context_builder import ContextBuilder
from docassist.services.assistant.llm_service import LLMService
from docassist.services.documents.upload_service import UploadService

logger = logging.getLogger(__name__)

NOT_CONFIGURED_MESSAGE = (
    "The AI provider API key is not configured. Please set GROQ_API_KEY in the environment file."
)
NO_DOCUMENTS_MESSAGE = (
    "You have not uploaded any documents yet. "
    "Please upload some documents first to get contextual answers."
)
EMPTY_RESPONSE_MESSAGE = "Sorry, I could not generate a response."
QA_CONTEXT_HEADER = "User has uploaded the following documents:\n\n"

QA_MAX_TOKENS = 1000
QA_TEMPERATURE = 0.7


class RAGService:
    """
    Answers questions using the full text of every document in the library.

    Failures other than a missing sign-in are rendered as the assistant's
    reply, never raised.
    """

    def __init__(self, uploads: UploadService, llm: LLMService, context_builder: ContextBuilder = None):
        self.uploads = uploads
        self.llm = llm
        self.context_builder = context_builder or ContextBuilder(fetch_content=uploads.get_document_content)

    async def ask_question(self, question: str) -> str:
        if not self.llm.is_configured:
            return NOT_CONFIGURED_MESSAGE

        try:
            documents = await self.uploads.get_documents()
            if not documents:
                return NO_DOCUMENTS_MESSAGE

            context = await self.context_builder.build(
                documents, header=QA_CONTEXT_HEADER, content_label="Content: "
            )
            logger.info(
                f"Answering question over {len(context.included)} document(s) "
                f"({len(context.failures)} unavailable)"
            )

            answer = await self.llm.complete(
                QA_SYSTEM_PROMPT,
                generate_qa_user_prompt(context.text, question),
                max_tokens=QA_MAX_TOKENS,
                temperature=QA_TEMPERATURE,
                label="QA",
            )
            return answer or EMPTY_RESPONSE_MESSAGE

        except UnauthenticatedError:
            raise
        except AppError as e:
            logger.error(f"RAG service error: {e.message}")
            return f"Error: {e.user_message}"
        except Exception as e:
            logger.error(f"RAG service error: {e}", exc_info=True)
            return "Error: Unknown error occurred"


def welcome_message(document_count: int) -> str:
    if document_count == 0:
        return (
            "Hello! I'm your AI assistant. To get started, please upload some documents first. "
            "Then I can answer questions based on your uploaded content."
        )
    return (
        f"Hello! I'm your AI assistant. I have access to {document_count} document(s) in your library. "
        "Ask me anything about your documents!"
    )


class ChatSession:
    """
    In-process chat API: a conversation transcript held in memory.

    Embedding applications drive it directly (start, then send per turn).
    The HTTP layer is stateless and calls welcome_message and
    RAGService.ask_question instead, so transcripts never outlive the
    process and are never persisted.
    """

    def __init__(self, rag: RAGService):
        self.rag = rag
        self.messages: List[Message] = []

    async def start(self) -> Message:
        try:
            count = len(await self.rag.uploads.get_documents())
        except AppError as e:
            logger.warning(f"Could not count documents for welcome message: {e.message}")
            count = 0
        message = Message(role="assistant", content=welcome_message(count))
        self.messages.append(message)
        return message

    async def send(self, text: str) -> Message:
        """Append the user's message and the assistant's reply; returns the reply."""
        self.messages.append(Message(role="user", content=text))
        try:
            answer = await self.rag.ask_question(text)
        except AppError as e:
            logger.error(f"Chat error: {e.message}")
            answer = f"Sorry, I encountered an error: {e.user_message}"
        reply = Message(role="assistant", content=answer)
        self.messages.append(reply)
        return reply
