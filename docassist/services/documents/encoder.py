"""Upload encoding: size ceiling, text/binary sniffing and storage representation."""

import base64
import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from docassist.core.config import settings
from docassist.core.exceptions import SizeExceededError


@dataclass(frozen=True)
class EncodedContent:
    content: str
    is_base64: bool


class UploadEncoder:
    """
    Decides how an uploaded file is stored.

    Responsibilities:
    - Enforce the per-document size ceiling
    - Classify text vs. binary by MIME type and extension
    - Encode text as-is and everything else as base64
    - Sniff PDF magic bytes
    """

    TEXT_EXTENSIONS: Tuple[str, ...] = ('.txt', '.md', '.json', '.csv')

    MIME_SIGNATURES: Dict[str, bytes] = {
        '.pdf': b'%PDF',
    }

    PDF_MIME_TYPE = 'application/pdf'
    DEFAULT_MIME_TYPE = 'application/octet-stream'

    def __init__(self, max_size_bytes: Optional[int] = None, logger: logging.Logger = None):
        self.max_size_bytes = max_size_bytes if max_size_bytes is not None else settings.max_file_size_bytes
        self.logger = logger or logging.getLogger(__name__)

    def check_size(self, size: int) -> None:
        """
        Raises:
            SizeExceededError: If size is above the configured ceiling
        """
        if size > self.max_size_bytes:
            self.logger.warning(f"Rejected upload of {size} bytes (limit {self.max_size_bytes})")
            raise SizeExceededError(size, self.max_size_bytes)

    def is_text_file(self, mime_type: str, file_name: str) -> bool:
        return (mime_type or '').startswith('text/') or file_name.lower().endswith(self.TEXT_EXTENSIONS)

    def is_pdf(self, mime_type: str, file_name: str) -> bool:
        return mime_type == self.PDF_MIME_TYPE or file_name.lower().endswith('.pdf')

    def has_pdf_signature(self, data: bytes) -> bool:
        return data.startswith(self.MIME_SIGNATURES['.pdf'])

    def encode(self, data: bytes, mime_type: str, file_name: str) -> EncodedContent:
        """
        Encode file bytes for storage.

        Args:
            data: Raw file bytes
            mime_type: Declared MIME type (may be empty)
            file_name: Original file name

        Returns:
            EncodedContent with the stored string and its encoding mode

        Raises:
            SizeExceededError: If the file is larger than the ceiling
        """
        self.check_size(len(data))

        if self.is_text_file(mime_type, file_name):
            return EncodedContent(content=data.decode('utf-8', errors='replace'), is_base64=False)

        return EncodedContent(content=base64.b64encode(data).decode('ascii'), is_base64=True)

    @staticmethod
    def decode(content: str, is_base64: bool) -> bytes:
        """Recover the original bytes of a stored document."""
        if is_base64:
            return base64.b64decode(content)
        return content.encode('utf-8')


def encode_upload(data: bytes, mime_type: str, file_name: str, max_size_bytes: Optional[int] = None) -> EncodedContent:
    return UploadEncoder(max_size_bytes).encode(data, mime_type, file_name)
