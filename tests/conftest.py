from types import SimpleNamespace
from typing import List

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from main import app
from app.core.dependencies import get_ai_service, get_storage, get_upload_dir
from app.core.exceptions import GenerationError
from app.models.database import Base
from app.models.schemas import FileRecord, GeneratedTestCase
from app.repositories.implementations.memory_storage import InMemoryStorage
from app.repositories.implementations.sql_storage import DatabaseStorage
from app.repositories.interfaces.ai_service import IAIService


SAMPLE_TEST_CASES = [
    {
        "testId": "TC-001",
        "description": "Login with valid credentials",
        "prerequisites": "User account exists",
        "steps": ["Open login page", "Enter credentials", "Submit"],
        "expectedResults": "User lands on the dashboard",
        "priority": "High",
        "type": "Functional",
    },
    {
        "testId": "TC-002",
        "description": "Login page loads quickly",
        "prerequisites": "",
        "steps": ["Open login page"],
        "expectedResults": "Page renders within 2 seconds",
        "priority": "Medium",
        "type": "Non-functional",
    },
    {
        "testId": "TC-003",
        "description": "Login writes an audit record",
        "prerequisites": "Audit service is running",
        "steps": ["Log in", "Query the audit service"],
        "expectedResults": "Audit entry is present",
        "priority": "Low",
        "type": "Integration",
    },
]


class FakeAIService(IAIService):
    """Records calls and returns canned test cases (or fails on demand)."""

    def __init__(self):
        self.calls: List[List[FileRecord]] = []
        self.fail = False

    async def generate_test_cases(self, files):
        self.calls.append(list(files))
        if self.fail:
            raise GenerationError("Gemini API error: quota exceeded")
        return [GeneratedTestCase.model_validate(tc) for tc in SAMPLE_TEST_CASES]


def make_gemini_response(text: str):
    """Build an object shaped like a google.generativeai GenerateContentResponse."""
    part = SimpleNamespace(text=text)
    candidate = SimpleNamespace(content=SimpleNamespace(parts=[part]))
    return SimpleNamespace(candidates=[candidate])


class FakeGeminiModel:
    def __init__(self, response=None, error: Exception = None):
        self.response = response
        self.error = error
        self.prompts: List[str] = []
        self.generation_configs = []

    def generate_content(self, prompt, generation_config=None, **kwargs):
        self.prompts.append(prompt)
        self.generation_configs.append(generation_config)
        if self.error:
            raise self.error
        return self.response


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def db_storage(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'test.db'}", connect_args={"check_same_thread": False})
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    yield DatabaseStorage(session)
    session.close()
    engine.dispose()


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def ai_service():
    return FakeAIService()


@pytest.fixture
def test_client(storage, upload_dir, ai_service):
    """Synchronous test client wired to an in-memory store and a fake AI service"""
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_upload_dir] = lambda: upload_dir
    app.dependency_overrides[get_ai_service] = lambda: ai_service
    yield TestClient(app)
    app.dependency_overrides.clear()
