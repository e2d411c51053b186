from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import datetime
from enum import Enum


MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB

ALLOWED_MIME_TYPES = (
    "application/pdf",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "text/plain",
    "text/markdown",
)

UNSUPPORTED_TYPE_MESSAGE = "File type not supported. Please upload PDF, DOCX, TXT, or MD files."


class TestCasePriority(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class TestCaseType(str, Enum):
    FUNCTIONAL = "Functional"
    NON_FUNCTIONAL = "Non-functional"
    INTEGRATION = "Integration"


def _match_enum(enum_cls, value):
    # Model output is not consistent about casing ("high", "HIGH", "non-functional")
    if isinstance(value, str):
        for member in enum_cls:
            if member.value.lower() == value.strip().lower():
                return member
    return value


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# Files

class FileCreate(CamelModel):
    name: str = Field(..., min_length=1, description="Original file name")
    size: int = Field(..., ge=0, description="Size in bytes")
    type: str = Field(..., description="MIME type")
    stored_name: Optional[str] = Field(None, exclude=True, description="Blob name under the upload directory")

    @field_validator("size")
    @classmethod
    def check_size(cls, value: int) -> int:
        if value > MAX_FILE_SIZE:
            raise ValueError("File exceeds the 10MB size limit")
        return value

    @field_validator("type", mode="before")
    @classmethod
    def check_type(cls, value):
        # "Text/Plain; charset=utf-8" -> "text/plain"
        if isinstance(value, str):
            value = value.split(";")[0].strip().lower()
        if value not in ALLOWED_MIME_TYPES:
            raise ValueError(UNSUPPORTED_TYPE_MESSAGE)
        return value


class FileRecord(FileCreate):
    id: int
    uploaded_at: datetime


# Test cases

class GeneratedTestCase(CamelModel):
    """A test case as returned by the generator, before it is stored."""

    test_id: str = Field(..., description="Identifier such as TC-001")
    description: str
    prerequisites: Optional[str] = None
    steps: List[str] = Field(..., min_length=1)
    expected_results: str
    priority: TestCasePriority
    type: TestCaseType

    @field_validator("priority", mode="before")
    @classmethod
    def normalize_priority(cls, value):
        return _match_enum(TestCasePriority, value)

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, value):
        return _match_enum(TestCaseType, value)


class TestCaseCreate(GeneratedTestCase):
    file_ids: List[int] = Field(default_factory=list)


class TestCase(TestCaseCreate):
    id: int
    created_at: datetime
    selected: bool = False


class GenerateTestCasesRequest(CamelModel):
    file_ids: List[int]


class SelectTestCaseRequest(CamelModel):
    selected: bool


class ExportCsvRequest(CamelModel):
    test_case_ids: List[int]


class MessageResponse(BaseModel):
    message: str


# Test plans and users are stored but not exposed through the API

class TestPlanCreate(CamelModel):
    name: str
    description: Optional[str] = None
    test_case_ids: List[int] = Field(default_factory=list)


class TestPlan(TestPlanCreate):
    id: int
    created_at: datetime


class UserCreate(CamelModel):
    username: str
    password: str


class User(UserCreate):
    id: int
