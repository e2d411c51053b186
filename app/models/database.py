from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text, JSON
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(255), nullable=False, unique=True)
    password = Column(String(255), nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}')>"


class FileModel(Base):
    __tablename__ = "files"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(Text, nullable=False)
    size = Column(Integer, nullable=False)  # bytes
    type = Column(String(255), nullable=False)
    # Generated blob name under the upload directory
    stored_name = Column(String(255), nullable=True)
    uploaded_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<File(id={self.id}, name='{self.name}', type='{self.type}')>"


class TestCaseModel(Base):
    __tablename__ = "test_cases"

    id = Column(Integer, primary_key=True, index=True)
    test_id = Column(String(50), nullable=False)
    description = Column(Text, nullable=False)
    prerequisites = Column(Text, nullable=True)
    steps = Column(JSON, nullable=False)
    expected_results = Column(Text, nullable=False)
    priority = Column(String(20), nullable=False, index=True)
    type = Column(String(50), nullable=False, index=True)
    file_ids = Column(JSON, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    selected = Column(Boolean, default=False, nullable=False)

    def __repr__(self):
        return f"<TestCase(id={self.id}, test_id='{self.test_id}', selected={self.selected})>"


class TestPlanModel(Base):
    __tablename__ = "test_plans"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    test_case_ids = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
