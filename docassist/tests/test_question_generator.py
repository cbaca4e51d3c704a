import pytest

from docassist.core.exceptions import DocumentNotFoundError, NoResumeDocumentsError, NotConfiguredError, ProviderError
from docassist.core.llm import LlmConfig
from docassist.services.assistant.llm_service import LLMService
from docassist.services.assistant.question_generator import QuestionGeneratorService
from docassist.tests.conftest import FakeCompletionProvider, make_document, numbered_questions

MAIN_PROMPT_MARKER = "expert interview question generator"
BACKFILL_PROMPT_MARKER = "additional interview questions"


@pytest.fixture
def generator(uploads, llm):
    return QuestionGeneratorService(
        uploads=uploads, llm=llm, question_count=30, backfill_threshold=15, max_full_retries=1
    )


@pytest.fixture
def resume():
    return make_document(title="Jane_Resume.txt", content="Senior engineer. Skills: Python, Kubernetes.")


@pytest.mark.asyncio
async def test_full_answer_needs_one_call(generator, provider, resume):
    provider.responses = [numbered_questions(30)]

    questions = await generator.generate_resume_questions([resume])

    assert len(questions) == 30
    assert len(provider.calls) == 1
    assert provider.calls[0]["user_prompt"].startswith("Resume Content:\n\nDocument: Jane_Resume.txt\n")
    assert provider.calls[0]["max_tokens"] == 2500


@pytest.mark.asyncio
async def test_low_yield_triggers_full_retry_not_backfill(generator, provider, resume):
    provider.responses = [numbered_questions(12), numbered_questions(12, topic="retry")]

    questions = await generator.generate_resume_questions([resume])

    assert len(provider.calls) == 2
    assert all(MAIN_PROMPT_MARKER in call["system_prompt"] for call in provider.calls)
    assert not any(BACKFILL_PROMPT_MARKER in call["system_prompt"] for call in provider.calls)
    assert len(questions) == 12


@pytest.mark.asyncio
async def test_retry_result_can_then_be_backfilled(generator, provider, resume):
    provider.responses = [
        numbered_questions(5),
        numbered_questions(25, topic="second"),
        numbered_questions(5, start=26, topic="second"),
    ]

    questions = await generator.generate_resume_questions([resume])

    assert len(provider.calls) == 3
    assert BACKFILL_PROMPT_MARKER in provider.calls[2]["system_prompt"]
    assert len(questions) == 30


@pytest.mark.asyncio
async def test_partial_answer_gets_exactly_one_backfill(generator, provider, resume):
    provider.responses = [numbered_questions(20), numbered_questions(15, start=18)]

    questions = await generator.generate_resume_questions([resume])

    assert len(provider.calls) == 2
    backfill = provider.calls[1]
    assert BACKFILL_PROMPT_MARKER in backfill["system_prompt"]
    assert "Generate 10 additional" in backfill["system_prompt"]
    assert "number 5 in production" in backfill["user_prompt"]
    assert "number 6 in production" not in backfill["user_prompt"]
    assert backfill["max_tokens"] == 1000

    assert len(questions) == 30
    assert len(set(questions)) == len(questions)


@pytest.mark.asyncio
async def test_backfill_failure_keeps_existing_questions(generator, provider, resume):
    provider.responses = [numbered_questions(20), ValueError("invalid request")]

    questions = await generator.generate_resume_questions([resume])

    assert len(questions) == 20


@pytest.mark.asyncio
async def test_oversized_answer_is_truncated(generator, provider, resume):
    provider.responses = [numbered_questions(34)]

    questions = await generator.generate_resume_questions([resume])

    assert len(questions) == 30
    assert questions[-1] == "What is your experience with topic number 30 in production?"


@pytest.mark.asyncio
async def test_main_call_failure_propagates(generator, provider, resume):
    provider.responses = [ValueError("invalid api key")]

    with pytest.raises(ProviderError):
        await generator.generate_resume_questions([resume])


@pytest.mark.asyncio
async def test_no_resumes(generator, provider):
    with pytest.raises(NoResumeDocumentsError):
        await generator.generate_resume_questions([])
    assert provider.calls == []


@pytest.mark.asyncio
async def test_not_configured_fails_before_any_work(uploads, resume):
    provider = FakeCompletionProvider()
    llm = LLMService(provider, LlmConfig(credential=None), max_attempts=1, base_delay=0, max_delay=0)
    generator = QuestionGeneratorService(uploads=uploads, llm=llm)

    with pytest.raises(NotConfiguredError):
        await generator.generate_resume_questions([resume])
    assert provider.calls == []


@pytest.mark.asyncio
async def test_generate_for_user_uses_only_resumes(generator, provider, uploads):
    await uploads.upload_text("Groceries: eggs and milk", "shopping")
    await uploads.upload_text("Education, Skills, Projects and more", "profile")
    provider.responses = [numbered_questions(30)]

    result = await generator.generate_for_user()

    assert result.source_documents == ["profile"]
    assert len(result.questions) == 30
    assert "Groceries" not in provider.calls[0]["user_prompt"]


@pytest.mark.asyncio
async def test_generate_for_user_without_resumes(generator, uploads):
    await uploads.upload_text("Groceries: eggs and milk", "shopping")

    with pytest.raises(NoResumeDocumentsError):
        await generator.generate_for_user()


@pytest.mark.asyncio
async def test_generate_for_single_document(generator, provider, uploads):
    document = await uploads.upload_text("Ten years of backend work", "Portfolio notes")
    provider.responses = [numbered_questions(30)]

    result = await generator.generate_for_user(document.id)

    assert result.source_documents == ["Portfolio notes"]
    with pytest.raises(DocumentNotFoundError):
        await generator.generate_for_user("missing-id")
