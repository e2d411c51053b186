from typing import List, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.core.exceptions import InvalidRequestError, NotFoundError
from app.repositories.interfaces.storage import IStorage
from app.models.database import FileModel, TestCaseModel, TestPlanModel, UserModel
from app.models.schemas import (
    FileCreate, FileRecord,
    TestCase, TestCaseCreate,
    TestPlan, TestPlanCreate,
    User, UserCreate,
)


class DatabaseStorage(IStorage):
    """SQLAlchemy implementation of the storage interface"""

    def __init__(self, db: Session):
        self.db = db

    def _add(self, instance):
        self.db.add(instance)
        self.db.commit()
        self.db.refresh(instance)
        return instance

    # User operations

    async def create_user(self, user: UserCreate) -> User:
        try:
            return User.model_validate(self._add(UserModel(**user.model_dump())))
        except IntegrityError:
            self.db.rollback()
            raise InvalidRequestError(f"Username '{user.username}' already exists")

    async def get_user(self, user_id: int) -> Optional[User]:
        db_user = self.db.query(UserModel).filter(UserModel.id == user_id).first()
        return User.model_validate(db_user) if db_user else None

    async def get_user_by_username(self, username: str) -> Optional[User]:
        db_user = self.db.query(UserModel).filter(UserModel.username == username).first()
        return User.model_validate(db_user) if db_user else None

    # File operations

    async def create_file(self, file: FileCreate) -> FileRecord:
        db_file = FileModel(**file.model_dump(), stored_name=file.stored_name)
        return FileRecord.model_validate(self._add(db_file))

    async def get_file(self, file_id: int) -> Optional[FileRecord]:
        db_file = self.db.query(FileModel).filter(FileModel.id == file_id).first()
        if db_file:
            return FileRecord.model_validate(db_file)
        return None

    async def get_all_files(self) -> List[FileRecord]:
        db_files = self.db.query(FileModel).order_by(FileModel.id).all()
        return [FileRecord.model_validate(f) for f in db_files]

    async def delete_file(self, file_id: int) -> None:
        self.db.query(FileModel).filter(FileModel.id == file_id).delete()
        self.db.commit()

    # Test case operations

    async def create_test_case(self, test_case: TestCaseCreate) -> TestCase:
        db_test_case = TestCaseModel(**test_case.model_dump(mode="json"), selected=False)
        return TestCase.model_validate(self._add(db_test_case))

    async def get_test_case(self, test_case_id: int) -> Optional[TestCase]:
        db_test_case = self.db.query(TestCaseModel).filter(TestCaseModel.id == test_case_id).first()
        if db_test_case:
            return TestCase.model_validate(db_test_case)
        return None

    async def get_all_test_cases(self) -> List[TestCase]:
        db_test_cases = self.db.query(TestCaseModel).order_by(TestCaseModel.id).all()
        return [TestCase.model_validate(tc) for tc in db_test_cases]

    async def update_test_case_selection(self, test_case_id: int, selected: bool) -> TestCase:
        db_test_case = self.db.query(TestCaseModel).filter(TestCaseModel.id == test_case_id).first()
        if not db_test_case:
            raise NotFoundError(f"Test case with ID {test_case_id} not found")

        db_test_case.selected = selected
        self.db.commit()
        self.db.refresh(db_test_case)
        return TestCase.model_validate(db_test_case)

    # Test plan operations

    async def create_test_plan(self, test_plan: TestPlanCreate) -> TestPlan:
        return TestPlan.model_validate(self._add(TestPlanModel(**test_plan.model_dump())))

    async def get_test_plan(self, test_plan_id: int) -> Optional[TestPlan]:
        db_plan = self.db.query(TestPlanModel).filter(TestPlanModel.id == test_plan_id).first()
        return TestPlan.model_validate(db_plan) if db_plan else None

    async def get_all_test_plans(self) -> List[TestPlan]:
        return [TestPlan.model_validate(p) for p in self.db.query(TestPlanModel).order_by(TestPlanModel.id).all()]
