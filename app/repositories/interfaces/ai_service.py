from abc import ABC, abstractmethod
from typing import List
from app.models.schemas import FileRecord, GeneratedTestCase


class IAIService(ABC):
    """Interface for AI/LLM operations"""

    @abstractmethod
    async def generate_test_cases(self, files: List[FileRecord]) -> List[GeneratedTestCase]:
        """Generate test cases from the content of the given uploaded files.

        Raises ``GenerationError`` when no usable test cases could be produced.
        """
        pass
