"""
Custom exceptions for the DocAssist application.

This module defines a hierarchy of exceptions to provide specific error handling
and plain user-facing messages throughout the application.
"""
import logging
from typing import Optional
from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


# ============================================================================
# Custom Exception Classes
# ============================================================================

class AppError(Exception):
    """Base exception for all application errors."""
    status_code: int = 500

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    @property
    def user_message(self) -> str:
        return self.message


class SizeExceededError(AppError):
    """Raised when an upload is larger than the configured ceiling."""
    status_code = 413

    def __init__(self, size: int, max_size: int):
        super().__init__(
            f"File size exceeds limit of {max_size // 1024}KB. "
            "Please upload smaller files or use text upload for large documents.",
            details={"size": size, "max_size": max_size},
        )
        self.size = size
        self.max_size = max_size


class EmptyUploadError(AppError):
    """Raised when an uploaded file or text has no content."""
    status_code = 400


class UnauthenticatedError(AppError):
    """Raised when a store call is attempted without a signed-in user."""
    status_code = 401

    def __init__(self, message: str = "User not authenticated"):
        super().__init__(message)


class DocumentNotFoundError(AppError):
    """Raised when a document id does not exist for the current user."""
    status_code = 404


class PdfExtractionError(AppError):
    """Base class for PDF text extraction failures (never fatal to an upload)."""
    status_code = 422


class PdfPasswordProtectedError(PdfExtractionError):
    def __init__(self, message: str = "PDF is password-protected. Please remove the password and try again."):
        super().__init__(message)


class PdfMalformedError(PdfExtractionError):
    pass


class PdfNoExtractableTextError(PdfExtractionError):
    def __init__(self, message: str = (
        "No text content found in PDF. The PDF might be image-based (scanned document) "
        "or contain only images."
    )):
        super().__init__(message)


class NotConfiguredError(AppError):
    """Raised when no LLM credential is configured."""
    status_code = 503

    def __init__(self, message: str = "The AI provider API key is not configured."):
        super().__init__(message)


class NoResumeDocumentsError(AppError):
    """Raised when resume question generation finds no resume documents."""
    status_code = 404

    def __init__(self, message: str = "No resume documents found. Please upload a resume first."):
        super().__init__(message)


class ProviderError(AppError):
    """Raised when the LLM provider call fails (network, auth, rate limit)."""
    status_code = 502

    @property
    def user_message(self) -> str:
        return "The AI service could not complete the request. Please try again later."


# ============================================================================
# FastAPI Exception Handlers
# ============================================================================

async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__}: {exc.message}")
    else:
        logger.warning(f"{type(exc).__name__}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.user_message, "error_type": type(exc).__name__},
    )


async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Global exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal Server Error"},
    )


async def http_exception_handler(request: Request, exc: HTTPException):
    logger.warning(f"HTTP exception: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
    )
