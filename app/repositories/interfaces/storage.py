from abc import ABC, abstractmethod
from typing import List, Optional
from app.models.schemas import (
    FileCreate, FileRecord,
    TestCase, TestCaseCreate,
    TestPlan, TestPlanCreate,
    User, UserCreate,
)


class IStorage(ABC):
    """Interface for persistence of users, files, test cases and test plans.

    Lookups by id return ``None`` when the record does not exist. Only
    ``update_test_case_selection`` raises ``NotFoundError``.
    """

    # User operations

    @abstractmethod
    async def create_user(self, user: UserCreate) -> User:
        pass

    @abstractmethod
    async def get_user(self, user_id: int) -> Optional[User]:
        pass

    @abstractmethod
    async def get_user_by_username(self, username: str) -> Optional[User]:
        pass

    # File operations

    @abstractmethod
    async def create_file(self, file: FileCreate) -> FileRecord:
        pass

    @abstractmethod
    async def get_file(self, file_id: int) -> Optional[FileRecord]:
        pass

    @abstractmethod
    async def get_all_files(self) -> List[FileRecord]:
        pass

    @abstractmethod
    async def delete_file(self, file_id: int) -> None:
        pass

    # Test case operations

    @abstractmethod
    async def create_test_case(self, test_case: TestCaseCreate) -> TestCase:
        pass

    @abstractmethod
    async def get_test_case(self, test_case_id: int) -> Optional[TestCase]:
        pass

    @abstractmethod
    async def get_all_test_cases(self) -> List[TestCase]:
        pass

    @abstractmethod
    async def update_test_case_selection(self, test_case_id: int, selected: bool) -> TestCase:
        pass

    # Test plan operations

    @abstractmethod
    async def create_test_plan(self, test_plan: TestPlanCreate) -> TestPlan:
        pass

    @abstractmethod
    async def get_test_plan(self, test_plan_id: int) -> Optional[TestPlan]:
        pass

    @abstractmethod
    async def get_all_test_plans(self) -> List[TestPlan]:
        pass
