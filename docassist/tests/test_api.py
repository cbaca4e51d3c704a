import io

import pytest
from fastapi import UploadFile
from fastapi.testclient import TestClient

from docassist.api.deps import get_document_store, get_llm_service
from docassist.api.v1.documents import upload_document
from docassist.core.exceptions import SizeExceededError
from docassist.main import app
from docassist.services.assistant.rag_service import NO_DOCUMENTS_MESSAGE
from docassist.services.documents.store import InMemoryDocumentStore
from docassist.tests.conftest import numbered_questions

HEADERS = {"X-User-Id": "api-user"}


@pytest.fixture
def client(llm):
    store = InMemoryDocumentStore()
    app.dependency_overrides[get_document_store] = lambda: store
    app.dependency_overrides[get_llm_service] = lambda: llm
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_requests_without_user_are_unauthorized(client):
    response = client.get("/api/v1/documents")

    assert response.status_code == 401
    assert response.json() == {"detail": "User not authenticated", "error_type": "UnauthenticatedError"}


def test_document_lifecycle(client):
    upload = client.post(
        "/api/v1/documents/upload",
        files={"file": ("photo.png", b"\x89PNG\r\n\x1a\n\x00\x01", "image/png")},
        headers=HEADERS,
    )
    assert upload.status_code == 201
    summary = upload.json()
    assert summary["isBase64"] is True
    assert summary["hasExtractedText"] is False
    assert "content" not in summary

    listed = client.get("/api/v1/documents", headers=HEADERS).json()
    assert [d["id"] for d in listed] == [summary["id"]]
    assert client.get("/api/v1/documents", headers={"X-User-Id": "someone-else"}).json() == []

    download = client.get(f"/api/v1/documents/{summary['id']}/download", headers=HEADERS)
    assert download.status_code == 200
    assert download.content == b"\x89PNG\r\n\x1a\n\x00\x01"
    assert download.headers["content-type"] == "image/png"

    assert client.delete(f"/api/v1/documents/{summary['id']}", headers=HEADERS).status_code == 204
    assert client.get(f"/api/v1/documents/{summary['id']}/download", headers=HEADERS).status_code == 404


def test_oversize_upload_is_rejected(client):
    response = client.post(
        "/api/v1/documents/upload",
        files={"file": ("big.txt", b"a" * (900 * 1024 + 1), "text/plain")},
        headers=HEADERS,
    )

    assert response.status_code == 413
    assert "900KB" in response.json()["detail"]
    assert client.get("/api/v1/documents", headers=HEADERS).json() == []


def test_ask_without_documents(client, provider):
    response = client.post("/api/v1/assistant/ask", json={"question": "Hi?"}, headers=HEADERS)

    assert response.status_code == 200
    assert response.json() == {"answer": NO_DOCUMENTS_MESSAGE}
    assert provider.calls == []


def test_resume_questions_flow(client, provider):
    client.post("/api/v1/documents/text", json={"title": "My Resume", "text": "Backend engineer"}, headers=HEADERS)
    client.post("/api/v1/documents/text", json={"title": "Recipes", "text": "Pancakes"}, headers=HEADERS)
    provider.responses = [numbered_questions(30)]

    resumes = client.get("/api/v1/resume/documents", headers=HEADERS).json()
    assert [d["title"] for d in resumes] == ["My Resume"]

    response = client.post("/api/v1/resume/questions", headers=HEADERS)
    assert response.status_code == 200
    body = response.json()
    assert body["source_documents"] == ["My Resume"]
    assert len(body["questions"]) == 30

    report = client.post(
        "/api/v1/resume/questions/download",
        json={"questions": body["questions"][:2], "source_title": "My Resume"},
    )
    assert report.status_code == 200
    assert report.text.startswith("RESUME INTERVIEW QUESTIONS")
    assert "attachment;" in report.headers["content-disposition"]


def test_resume_questions_without_resumes(client):
    client.post("/api/v1/documents/text", json={"title": "Recipes", "text": "Pancakes"}, headers=HEADERS)

    response = client.post("/api/v1/resume/questions", headers=HEADERS)

    assert response.status_code == 404
    assert response.json()["error_type"] == "NoResumeDocumentsError"


class RecordingStream(io.BytesIO):
    def __init__(self, data):
        super().__init__(data)
        self.read_sizes = []

    def read(self, size=-1):
        self.read_sizes.append(size)
        return super().read(size)


@pytest.mark.asyncio
async def test_undeclared_size_upload_reads_only_past_the_limit(uploads, store):
    limit = uploads.encoder.max_size_bytes
    stream = RecordingStream(b"a" * (limit * 2))
    file = UploadFile(stream, filename="stream.txt", size=None)

    with pytest.raises(SizeExceededError):
        await upload_document(file=file, title=None, uploads=uploads)

    assert stream.read_sizes == [limit + 1]
    assert stream.tell() == limit + 1
    assert await store.list("user-1") == []
