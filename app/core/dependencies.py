from pathlib import Path
from fastapi import Depends
from sqlalchemy.orm import Session
from app.config.settings import settings
from app.repositories.interfaces.storage import IStorage
from app.repositories.interfaces.ai_service import IAIService

from app.repositories.implementations.sql_storage import DatabaseStorage
from app.repositories.implementations.memory_storage import InMemoryStorage
from app.repositories.implementations.gemini_service import GeminiService

from app.services.file_service import FileIngestionService
from app.services.test_case_service import TestCaseService
from app.core.database import get_database


class Container:
    """Dependency injection container"""

    def __init__(self):
        self._memory_storage = None
        self._ai_service = None

    def storage(self, db: Session) -> IStorage:
        """Get storage for the configured backend"""
        if settings.storage_backend.lower() == "memory":
            # One in-memory store per process
            if self._memory_storage is None:
                self._memory_storage = InMemoryStorage()
            return self._memory_storage
        return DatabaseStorage(db)

    def ai_service(self, upload_dir: Path) -> IAIService:
        """Get AI service instance (singleton per upload directory)"""
        if self._ai_service is None or self._ai_service.upload_dir != Path(upload_dir):
            self._ai_service = GeminiService(upload_dir=str(upload_dir))
        return self._ai_service

    def upload_dir(self) -> Path:
        return Path(settings.upload_dir)


# Global container instance
container = Container()


# Dependency providers for FastAPI
def get_storage(db: Session = Depends(get_database)) -> IStorage:
    """FastAPI dependency for storage"""
    return container.storage(db)


def get_upload_dir() -> Path:
    """FastAPI dependency for the blob directory"""
    return container.upload_dir()


def get_ai_service(upload_dir: Path = Depends(get_upload_dir)) -> IAIService:
    """FastAPI dependency for AI service"""
    return container.ai_service(upload_dir)


def get_file_service(
    storage: IStorage = Depends(get_storage),
    upload_dir: Path = Depends(get_upload_dir),
) -> FileIngestionService:
    """FastAPI dependency for file ingestion service"""
    return FileIngestionService(storage, upload_dir)


def get_test_case_service(
    storage: IStorage = Depends(get_storage),
    ai_service: IAIService = Depends(get_ai_service),
) -> TestCaseService:
    """FastAPI dependency for test case service"""
    return TestCaseService(storage=storage, ai_service=ai_service)
