import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware

from docassist import __version__
from docassist.api.v1.assistant import assistant_router
from docassist.api.v1.documents import documents_router
from docassist.core.config import settings
from docassist.core.exceptions import AppError, app_error_handler, global_exception_handler, http_exception_handler
from docassist.core.llm import LlmConfig
from docassist.core.logger import set_correlation_id, setup_logger

setup_logger(log_level=logging.DEBUG if settings.DEBUG_MODE else logging.INFO, use_json=settings.LOG_USE_JSON)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Application startup: DocAssist (store={settings.DOCUMENT_STORE_BACKEND})")
    if not LlmConfig.from_settings().is_configured:
        logger.warning("GROQ_API_KEY is not set; AI features will report that they are not configured")
    yield
    logger.info("Application shutdown")


app = FastAPI(
    title="DocAssist",
    description="Document library with an AI assistant and resume interview questions.",
    version=__version__,
    lifespan=lifespan
)

app.add_exception_handler(AppError, app_error_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def correlation_id_middleware(request: Request, call_next):
    correlation_id = set_correlation_id(request.headers.get("X-Correlation-ID"))
    response = await call_next(request)
    response.headers["X-Correlation-ID"] = correlation_id
    return response


app.include_router(documents_router, prefix="/api/v1", tags=["documents"])
app.include_router(assistant_router, prefix="/api/v1", tags=["assistant"])


@app.get("/health")
async def health():
    return {"status": "ok", "llm_configured": LlmConfig.from_settings().is_configured}
