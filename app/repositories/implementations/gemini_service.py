import json
import asyncio
import re
from pathlib import Path
from typing import Any, List, Optional

import google.generativeai as genai
import structlog
from pydantic import ValidationError

from app.config.settings import settings
from app.core.exceptions import GenerationError
from app.models.schemas import FileRecord, GeneratedTestCase, TestCaseCreate
from app.repositories.interfaces.ai_service import IAIService

logger = structlog.get_logger()

# Characters of each document embedded in the prompt
CONTENT_EXCERPT_LENGTH = 500

_TRAILING_COMMA_RE = re.compile(r",\s*([\]}])")
_JSON_ARRAY_RE = re.compile(r"\[\s*\{[\s\S]*\}\s*\]")

INSTRUCTIONS = """Create test cases covering:
1. Functional testing
2. Non-functional testing
3. Integration testing

For each test case, provide:
- A unique test ID (format: TC-XXX)
- Description
- Prerequisites
- Test steps (as a list)
- Expected results
- Priority (High, Medium, or Low)
- Test type (Functional, Non-functional, or Integration)

Format the response as JSON with the following structure:
[
  {
    "testId": "TC-001",
    "description": "Test description",
    "prerequisites": "Test prerequisites",
    "steps": ["Step 1", "Step 2", "..."],
    "expectedResults": "Expected result",
    "priority": "High | Medium | Low",
    "type": "Functional | Non-functional | Integration"
  },
  ...
]
"""


class GeminiService(IAIService):
    """Google Gemini implementation of the AI service."""

    def __init__(self, model: Optional[Any] = None, upload_dir: Optional[str] = None) -> None:
        self.model = model
        if self.model is None and settings.gemini_api_key:
            genai.configure(api_key=settings.gemini_api_key)
            self.model = genai.GenerativeModel(settings.gemini_model)
        self.upload_dir = Path(upload_dir or settings.upload_dir)

    async def generate_test_cases(self, files: List[FileRecord]) -> List[GeneratedTestCase]:
        if not self.model:
            logger.error("Gemini model not configured")
            raise GenerationError("GEMINI_API_KEY environment variable is not set")

        loop = asyncio.get_running_loop()
        contents = [(f.name, await loop.run_in_executor(None, self._read_file_content, f)) for f in files]
        prompt = self._build_generation_prompt(contents)
        logger.info("Requesting test cases from Gemini", files=len(files), prompt_chars=len(prompt))

        def sync_call():
            model = self.model
            assert model is not None
            kwargs = {}
            if settings.gemini_timeout_seconds:
                kwargs["request_options"] = {"timeout": settings.gemini_timeout_seconds}
            return model.generate_content(
                prompt,
                generation_config=genai.types.GenerationConfig(
                    temperature=0.4,
                    top_k=32,
                    top_p=0.8,
                    max_output_tokens=8192,
                ),
                **kwargs,
            )

        try:
            response = await loop.run_in_executor(None, sync_call)
        except Exception as e:
            logger.error("Gemini API call failed", error=str(e))
            raise GenerationError(f"Gemini API error: {e}") from e

        text = self._response_text(response)
        logger.debug("Raw text content from Gemini", text=text)
        return self._parse_test_cases(text)

    def _read_file_content(self, file: FileRecord) -> str:
        try:
            if not file.stored_name:
                raise FileNotFoundError(f"No stored blob recorded for {file.name}")
            # Binary formats (PDF, DOCX) are decoded lossily rather than rejected
            return (self.upload_dir / file.stored_name).read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            logger.warning("Error reading file content", file_id=file.id, file=file.name, error=str(e))
            return f"[Failed to read file content: {file.name}]"

    def _build_generation_prompt(self, contents: List[tuple]) -> str:
        listing = "\n".join(
            f"\n- {name}: {content[:CONTENT_EXCERPT_LENGTH]}... (truncated)" for name, content in contents
        )
        return (
            "Generate a comprehensive test plan based on the following files:\n"
            f"{listing}\n\n{INSTRUCTIONS}"
        )

    def _response_text(self, response: Any) -> str:
        candidates = getattr(response, "candidates", None)
        if not candidates:
            raise GenerationError("No response from Gemini API")
        try:
            return candidates[0].content.parts[0].text
        except (AttributeError, IndexError) as e:
            raise GenerationError("Malformed response from Gemini API") from e

    def _parse_test_cases(self, content: str) -> List[GeneratedTestCase]:
        sanitized = _TRAILING_COMMA_RE.sub(r"\1", content or "")
        match = _JSON_ARRAY_RE.search(sanitized)
        if not match:
            logger.error("Failed to extract JSON from Gemini response", content=sanitized[:1000])
            raise GenerationError("Failed to extract JSON from Gemini response")

        try:
            items = json.loads(match.group())
            return [GeneratedTestCase.model_validate(item) for item in items]
        except (json.JSONDecodeError, ValidationError, TypeError) as e:
            logger.error("Gemini parse generated failed", error=str(e))
            raise GenerationError(f"Invalid test case JSON from Gemini: {e}") from e


def fallback_test_cases(file_ids: List[int]) -> List[TestCaseCreate]:
    """Fixed example test cases used when generation is unavailable and fallback is enabled."""
    examples = [
        (
            "TC-001", "Verify user can upload a supported document",
            "User is on the upload page",
            ["Open the upload page", "Select a PDF file under 10MB", "Click Upload"],
            "File is uploaded and listed with its name and size", "High", "Functional",
        ),
        (
            "TC-002", "Verify unsupported file types are rejected",
            "User is on the upload page",
            ["Open the upload page", "Select an executable file", "Click Upload"],
            "An error explains that only PDF, DOCX, TXT and MD files are supported", "Medium", "Functional",
        ),
        (
            "TC-003", "Verify test case generation completes within acceptable time",
            "At least one document is uploaded",
            ["Select uploaded documents", "Click Generate Test Cases", "Measure the time until results appear"],
            "Test cases are displayed within 60 seconds", "Medium", "Non-functional",
        ),
        (
            "TC-004", "Verify generated test cases can be exported to CSV",
            "Test cases have been generated",
            ["Select one or more test cases", "Click Export CSV", "Open the downloaded file"],
            "CSV contains one row per test step for each selected test case", "High", "Integration",
        ),
        (
            "TC-005", "Verify filtering test cases by priority",
            "Test cases with different priorities exist",
            ["Open the test case list", "Choose priority Low in the filter"],
            "Only test cases with Low priority are shown", "Low", "Functional",
        ),
    ]
    return [
        TestCaseCreate(
            test_id=test_id,
            description=description,
            prerequisites=prerequisites,
            steps=steps,
            expected_results=expected,
            priority=priority,
            type=test_type,
            file_ids=list(file_ids),
        )
        for test_id, description, prerequisites, steps, expected, priority, test_type in examples
    ]
