from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path
from dotenv import load_dotenv


# Path to the .env file in the project root (two levels up from docassist/core)
CONFIG_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = CONFIG_DIR.parent.parent
ENV_FILE_PATH = PROJECT_ROOT / '.env'

# Load environment variables from .env file
load_dotenv(ENV_FILE_PATH)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE_PATH),
        env_file_encoding='utf-8',
        extra='ignore'
    )

    DEBUG_MODE: bool = False
    LOG_USE_JSON: bool = False

    # LLM credentials and model (empty key means "not configured")
    GROQ_API_KEY: str = ""
    LLM_MODEL: str = "llama-3.3-70b-versatile"
    LLM_TEMPERATURE: float = 0.7
    LLM_REQUEST_TIMEOUT: int = 120  # seconds

    # Retry Configuration (transient provider failures only)
    LLM_RETRY_ATTEMPTS: int = 3
    LLM_RETRY_BASE_DELAY: float = 1.0
    LLM_RETRY_MAX_DELAY: float = 30.0

    # Upload Limits
    # The document store caps a record at 1MB, 900KB leaves room for metadata
    MAX_FILE_SIZE_KB: int = 900
    PDF_MAX_PAGES: int = 100

    # Resume question generation
    RESUME_QUESTION_COUNT: int = 30
    RESUME_BACKFILL_THRESHOLD: int = 15
    RESUME_MAX_FULL_RETRIES: int = 1

    # Context assembly (0 disables the bound)
    MAX_CONTEXT_CHARS: int = 200_000

    # Document store: "memory" or "json"
    DOCUMENT_STORE_BACKEND: str = "memory"
    DOCUMENT_STORE_PATH: str = str(PROJECT_ROOT / "data" / "documents")

    @property
    def max_file_size_bytes(self) -> int:
        return self.MAX_FILE_SIZE_KB * 1024


settings = Settings()
