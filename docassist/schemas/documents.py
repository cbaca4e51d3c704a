from datetime import datetime, timezone
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# --- Persisted Models ---

class Document(BaseModel):
    """A user-owned upload record, as persisted by the document store."""
    model_config = ConfigDict(frozen=True)

    id: Optional[str] = Field(default=None, description="Store-assigned identifier.")
    title: str
    fileName: str
    fileSize: int = Field(..., ge=0, description="Size of the original upload in bytes.")
    fileType: str = Field(..., description="MIME type of the original upload.")
    content: str = Field(..., description="Plain text, or base64 of the original bytes when isBase64 is set.")
    isBase64: bool = False
    extractedText: Optional[str] = Field(
        default=None,
        description="Best-effort text derivative used for AI context. Absent when extraction failed.",
    )
    createdAt: datetime = Field(default_factory=utcnow)
    userId: str

    def to_record(self) -> dict:
        """Serialise for storage; extractedText is dropped rather than stored as null."""
        return self.model_dump(mode="json", exclude_none=True)


class DocumentSummary(BaseModel):
    """Document metadata without the content payload."""
    id: Optional[str]
    title: str
    fileName: str
    fileSize: int
    fileType: str
    isBase64: bool
    hasExtractedText: bool
    createdAt: datetime

    @classmethod
    def from_document(cls, doc: Document) -> "DocumentSummary":
        return cls(
            id=doc.id,
            title=doc.title,
            fileName=doc.fileName,
            fileSize=doc.fileSize,
            fileType=doc.fileType,
            isBase64=doc.isBase64,
            hasExtractedText=doc.extractedText is not None,
            createdAt=doc.createdAt,
        )


class UserProfile(BaseModel):
    uid: str
    isAnonymous: bool = False
    displayName: Optional[str] = None
    email: Optional[str] = None
    phoneNumber: Optional[str] = None


# --- Ephemeral Models ---

class Message(BaseModel):
    """A chat message; lives only for the duration of a chat session."""
    role: Literal["user", "assistant"]
    content: str
    timestamp: datetime = Field(default_factory=utcnow)


# --- API Request/Response Models ---

class TextUploadRequest(BaseModel):
    title: str = Field(..., min_length=1)
    text: str


class AskRequest(BaseModel):
    question: str = Field(..., min_length=1)


class AskResponse(BaseModel):
    answer: str


class ResumeQuestionsRequest(BaseModel):
    document_id: Optional[str] = Field(default=None, description="Limit generation to one resume document.")


class ResumeQuestionsResponse(BaseModel):
    questions: list[str] = Field(default_factory=list)
    source_documents: list[str] = Field(default_factory=list)


class QuestionsReportRequest(BaseModel):
    questions: list[str]
    source_title: str = "resume"
