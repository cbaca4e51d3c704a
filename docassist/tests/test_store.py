import json
from datetime import datetime, timedelta, timezone

import pytest

from docassist.core.exceptions import SizeExceededError
from docassist.services.documents.store import InMemoryDocumentStore, JsonFileDocumentStore
from docassist.tests.conftest import make_document

BASE_TIME = datetime(2024, 5, 1, tzinfo=timezone.utc)


@pytest.fixture(params=["memory", "json"])
def any_store(request, tmp_path):
    if request.param == "memory":
        return InMemoryDocumentStore()
    return JsonFileDocumentStore(base_path=str(tmp_path))


@pytest.mark.asyncio
async def test_list_is_newest_first(any_store):
    for day, title in enumerate(["old", "middle", "new"]):
        await any_store.add("alice", make_document(title=title, createdAt=BASE_TIME + timedelta(days=day)))

    titles = [d.title for d in await any_store.list("alice")]
    assert titles == ["new", "middle", "old"]


@pytest.mark.asyncio
async def test_users_are_partitioned(any_store):
    alice_id = await any_store.add("alice", make_document(title="alice notes"))
    await any_store.add("bob", make_document(title="bob notes"))

    assert [d.title for d in await any_store.list("bob")] == ["bob notes"]
    assert await any_store.get("bob", alice_id) is None

    await any_store.delete("bob", alice_id)
    assert (await any_store.get("alice", alice_id)).userId == "alice"


@pytest.mark.asyncio
async def test_store_rejects_oversize_records(any_store):
    document = make_document().model_copy(update={"fileSize": 900 * 1024 + 1})
    with pytest.raises(SizeExceededError):
        await any_store.add("alice", document)


@pytest.mark.asyncio
async def test_delete_is_hard(any_store):
    document_id = await any_store.add("alice", make_document())
    await any_store.delete("alice", document_id)

    assert await any_store.get("alice", document_id) is None
    assert await any_store.list("alice") == []


@pytest.mark.asyncio
async def test_json_store_omits_missing_extracted_text(tmp_path):
    store = JsonFileDocumentStore(base_path=str(tmp_path))
    await store.add("alice", make_document(title="scan.pdf", is_base64=True, content="AAAA"))

    records = json.loads((tmp_path / "alice.json").read_text(encoding="utf-8"))
    assert len(records) == 1
    assert "extractedText" not in records[0]
    assert records[0]["isBase64"] is True


@pytest.mark.asyncio
async def test_json_store_hashes_unsafe_user_ids(tmp_path):
    store = JsonFileDocumentStore(base_path=str(tmp_path))
    await store.add("../escape", make_document())

    files = list(tmp_path.iterdir())
    assert len(files) == 1
    assert files[0].parent == tmp_path
    assert ".." not in files[0].name
