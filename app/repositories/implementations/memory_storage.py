from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, List, Optional
import threading

from app.core.exceptions import InvalidRequestError, NotFoundError
from app.repositories.interfaces.storage import IStorage
from app.models.schemas import (
    FileCreate, FileRecord,
    TestCase, TestCaseCreate,
    TestPlan, TestPlanCreate,
    User, UserCreate,
)


class InMemoryStorage(IStorage):
    """Dict-backed storage for development and tests.

    - One instance per process (or per test); nothing is shared at module level.
    - Id counters and mutations are guarded by a single lock, so concurrent
    writers always get distinct, increasing ids.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._users: Dict[int, User] = {}
        self._files: Dict[int, FileRecord] = {}
        self._test_cases: Dict[int, TestCase] = {}
        self._test_plans: Dict[int, TestPlan] = {}
        self._next_ids: Dict[str, int] = {"users": 1, "files": 1, "test_cases": 1, "test_plans": 1}

    def _next_id(self, collection: str) -> int:
        # Caller holds the lock
        value = self._next_ids[collection]
        self._next_ids[collection] = value + 1
        return value

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)

    # User operations

    async def create_user(self, user: UserCreate) -> User:
        with self._lock:
            if any(u.username == user.username for u in self._users.values()):
                raise InvalidRequestError(f"Username '{user.username}' already exists")
            record = User(id=self._next_id("users"), **user.model_dump())
            self._users[record.id] = record
            return record

    async def get_user(self, user_id: int) -> Optional[User]:
        return self._users.get(user_id)

    async def get_user_by_username(self, username: str) -> Optional[User]:
        return next((u for u in self._users.values() if u.username == username), None)

    # File operations

    async def create_file(self, file: FileCreate) -> FileRecord:
        with self._lock:
            record = FileRecord(
                id=self._next_id("files"),
                uploaded_at=self._now(),
                stored_name=file.stored_name,
                **file.model_dump(),
            )
            self._files[record.id] = record
            return record

    async def get_file(self, file_id: int) -> Optional[FileRecord]:
        return self._files.get(file_id)

    async def get_all_files(self) -> List[FileRecord]:
        return list(self._files.values())

    async def delete_file(self, file_id: int) -> None:
        with self._lock:
            self._files.pop(file_id, None)

    # Test case operations

    async def create_test_case(self, test_case: TestCaseCreate) -> TestCase:
        with self._lock:
            record = TestCase(
                id=self._next_id("test_cases"),
                created_at=self._now(),
                selected=False,
                **test_case.model_dump(),
            )
            self._test_cases[record.id] = record
            return record

    async def get_test_case(self, test_case_id: int) -> Optional[TestCase]:
        return self._test_cases.get(test_case_id)

    async def get_all_test_cases(self) -> List[TestCase]:
        return list(self._test_cases.values())

    async def update_test_case_selection(self, test_case_id: int, selected: bool) -> TestCase:
        with self._lock:
            existing = self._test_cases.get(test_case_id)
            if existing is None:
                raise NotFoundError(f"Test case with ID {test_case_id} not found")
            updated = existing.model_copy(update={"selected": selected})
            self._test_cases[test_case_id] = updated
            return updated

    # Test plan operations

    async def create_test_plan(self, test_plan: TestPlanCreate) -> TestPlan:
        with self._lock:
            record = TestPlan(id=self._next_id("test_plans"), created_at=self._now(), **test_plan.model_dump())
            self._test_plans[record.id] = record
            return record

    async def get_test_plan(self, test_plan_id: int) -> Optional[TestPlan]:
        return self._test_plans.get(test_plan_id)

    async def get_all_test_plans(self) -> List[TestPlan]:
        return list(self._test_plans.values())
