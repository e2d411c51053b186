import json
from datetime import datetime, timezone

import pytest

from app.config.settings import settings
from app.core.exceptions import GenerationError
from app.models.schemas import FileRecord, TestCasePriority, TestCaseType
from app.repositories.implementations.gemini_service import GeminiService, fallback_test_cases
from tests.conftest import SAMPLE_TEST_CASES, FakeGeminiModel, make_gemini_response


def make_file(file_id, name, stored_name=None):
    return FileRecord(
        id=file_id,
        name=name,
        size=1,
        type="text/plain",
        stored_name=stored_name,
        uploaded_at=datetime.now(timezone.utc),
    )


@pytest.fixture
def blob_dir(tmp_path):
    (tmp_path / "files-1-1.txt").write_text("A" * 600 + "TAIL", encoding="utf-8")
    (tmp_path / "files-2-2.txt").write_text("Second document", encoding="utf-8")
    return tmp_path


@pytest.mark.asyncio
async def test_generate_parses_json_array(blob_dir):
    model = FakeGeminiModel(make_gemini_response(
        "Here are your test cases:\n```json\n" + json.dumps(SAMPLE_TEST_CASES) + "\n```"
    ))
    service = GeminiService(model=model, upload_dir=str(blob_dir))

    result = await service.generate_test_cases([make_file(1, "spec.txt", "files-1-1.txt")])

    assert [tc.test_id for tc in result] == ["TC-001", "TC-002", "TC-003"]
    assert result[1].type == TestCaseType.NON_FUNCTIONAL
    assert result[0].steps == ["Open login page", "Enter credentials", "Submit"]


@pytest.mark.asyncio
async def test_generation_config_uses_fixed_sampling(blob_dir):
    model = FakeGeminiModel(make_gemini_response(json.dumps(SAMPLE_TEST_CASES)))
    service = GeminiService(model=model, upload_dir=str(blob_dir))

    await service.generate_test_cases([make_file(1, "spec.txt", "files-1-1.txt")])

    config = model.generation_configs[0]
    assert config.temperature == 0.4
    assert config.top_k == 32
    assert config.top_p == 0.8
    assert config.max_output_tokens == 8192


@pytest.mark.asyncio
async def test_prompt_embeds_name_and_first_500_characters(blob_dir):
    model = FakeGeminiModel(make_gemini_response(json.dumps(SAMPLE_TEST_CASES)))
    service = GeminiService(model=model, upload_dir=str(blob_dir))

    await service.generate_test_cases([
        make_file(1, "spec.txt", "files-1-1.txt"),
        make_file(2, "second.txt", "files-2-2.txt"),
    ])

    prompt = model.prompts[0]
    assert "- spec.txt: " + "A" * 500 + "... (truncated)" in prompt
    assert "TAIL" not in prompt
    assert "- second.txt: Second document" in prompt
    assert '"expectedResults": "Expected result"' in prompt
    assert "Non-functional testing" in prompt


@pytest.mark.asyncio
async def test_missing_blob_uses_placeholder(blob_dir):
    model = FakeGeminiModel(make_gemini_response(json.dumps(SAMPLE_TEST_CASES)))
    service = GeminiService(model=model, upload_dir=str(blob_dir))

    await service.generate_test_cases([
        make_file(4, "missing.md", "files-4-4.md"),
        make_file(5, "unstored.txt", None),
    ])

    assert "[Failed to read file content: missing.md]" in model.prompts[0]
    assert "[Failed to read file content: unstored.txt]" in model.prompts[0]


@pytest.mark.asyncio
async def test_binary_documents_are_decoded_lossily(blob_dir):
    (blob_dir / "files-3-3.pdf").write_bytes(b"%PDF-1.4\n%\xe2\xe3\xcf\xd3\nLogin requirements")
    model = FakeGeminiModel(make_gemini_response(json.dumps(SAMPLE_TEST_CASES)))
    service = GeminiService(model=model, upload_dir=str(blob_dir))

    await service.generate_test_cases([make_file(3, "spec.pdf", "files-3-3.pdf")])

    prompt = model.prompts[0]
    assert "%PDF-1.4" in prompt
    assert "Login requirements" in prompt
    assert "[Failed to read file content: spec.pdf]" not in prompt


@pytest.mark.asyncio
async def test_trailing_commas_are_tolerated(blob_dir):
    text = """[
      {"testId": "TC-001", "description": "d", "prerequisites": "p",
       "steps": ["s1", "s2",], "expectedResults": "e",
       "priority": "LOW", "type": "integration",},
    ]"""
    service = GeminiService(model=FakeGeminiModel(make_gemini_response(text)), upload_dir=str(blob_dir))

    result = await service.generate_test_cases([make_file(1, "spec.txt", "files-1-1.txt")])

    assert len(result) == 1
    assert result[0].steps == ["s1", "s2"]
    assert result[0].priority == TestCasePriority.LOW
    assert result[0].type == TestCaseType.INTEGRATION


@pytest.mark.asyncio
@pytest.mark.parametrize("response", [
    make_gemini_response("I cannot help with that."),
    make_gemini_response('[{"testId": "TC-001", "description": }]'),
    make_gemini_response('[{"testId": "TC-001"}]'),
    make_gemini_response('[{"testId": "TC-1", "description": "d", "steps": ["s"], '
                         '"expectedResults": "e", "priority": "Urgent", "type": "Functional"}]'),
    type("Empty", (), {"candidates": []})(),
])
async def test_unusable_responses_raise_generation_error(blob_dir, response):
    service = GeminiService(model=FakeGeminiModel(response), upload_dir=str(blob_dir))

    with pytest.raises(GenerationError) as exc_info:
        await service.generate_test_cases([make_file(1, "spec.txt", "files-1-1.txt")])

    assert exc_info.value.message == "Failed to generate test cases"


@pytest.mark.asyncio
async def test_api_error_raises_generation_error(blob_dir):
    model = FakeGeminiModel(error=RuntimeError("429 quota exceeded"))
    service = GeminiService(model=model, upload_dir=str(blob_dir))

    with pytest.raises(GenerationError) as exc_info:
        await service.generate_test_cases([make_file(1, "spec.txt", "files-1-1.txt")])

    assert "quota exceeded" in exc_info.value.error


@pytest.mark.asyncio
async def test_missing_api_key_raises_generation_error(monkeypatch, blob_dir):
    monkeypatch.setattr(settings, "gemini_api_key", None)
    service = GeminiService(upload_dir=str(blob_dir))

    with pytest.raises(GenerationError) as exc_info:
        await service.generate_test_cases([make_file(1, "spec.txt", "files-1-1.txt")])

    assert "GEMINI_API_KEY" in exc_info.value.error


def test_fallback_test_cases_are_stamped_with_file_ids():
    cases = fallback_test_cases([7, 9])

    assert len(cases) == 5
    assert len({tc.test_id for tc in cases}) == 5
    assert all(tc.file_ids == [7, 9] for tc in cases)
    assert {tc.type for tc in cases} == set(TestCaseType)
