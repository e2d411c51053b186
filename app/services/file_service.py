from pathlib import Path
from typing import List, Optional
import random
import time

from fastapi import UploadFile
from pydantic import ValidationError
import structlog

from app.config.settings import settings
from app.core.exceptions import InvalidRequestError
from app.models.schemas import FileCreate, FileRecord
from app.repositories.interfaces.storage import IStorage

logger = structlog.get_logger()

UPLOAD_FIELD_NAME = "files"


def generate_stored_name(original_name: str, field_name: str = UPLOAD_FIELD_NAME) -> str:
    """Blob name made of the form field, a millisecond timestamp, a random suffix and the original extension."""
    unique_suffix = f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}"
    return f"{field_name}-{unique_suffix}{Path(original_name).suffix}"


class FileIngestionService:
    """Stores uploaded documents on disk and records their metadata."""

    def __init__(self, storage: IStorage, upload_dir: Path, max_files: Optional[int] = None):
        self.storage = storage
        self.upload_dir = Path(upload_dir)
        self.max_files = max_files or settings.max_files_per_upload

    async def _write_blob(self, upload: UploadFile) -> Path:
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        path = self.upload_dir / generate_stored_name(upload.filename or "")
        content = await upload.read()
        with open(path, "wb") as out:
            out.write(content)
        return path

    async def upload(self, uploads: List[UploadFile]) -> List[FileRecord]:
        """Persist every valid upload; fail with the reasons for any rejected ones.

        Valid files are committed even when other files in the same batch are rejected.
        """
        if not uploads:
            raise InvalidRequestError("No files uploaded")
        if len(uploads) > self.max_files:
            raise InvalidRequestError(f"Too many files. A maximum of {self.max_files} files can be uploaded at once")

        saved: List[FileRecord] = []
        rejected: List[str] = []

        for upload in uploads:
            path = await self._write_blob(upload)
            try:
                file_data = FileCreate(
                    name=upload.filename or "",
                    size=path.stat().st_size,
                    type=upload.content_type or "",
                    stored_name=path.name,
                )
            except ValidationError as e:
                path.unlink(missing_ok=True)
                reasons = "; ".join(err["msg"].removeprefix("Value error, ") for err in e.errors())
                rejected.append(f"{upload.filename or '<unnamed>'}: {reasons}")
                logger.warning("Rejected uploaded file", file=upload.filename, reasons=reasons)
                continue

            try:
                record = await self.storage.create_file(file_data)
            except Exception:
                path.unlink(missing_ok=True)
                raise
            saved.append(record)
            logger.info("Stored uploaded file", file_id=record.id, file=record.name, size=record.size)

        if rejected:
            raise InvalidRequestError("Invalid files: " + " | ".join(rejected))
        return saved

    async def list_files(self) -> List[FileRecord]:
        return await self.storage.get_all_files()

    async def delete_file(self, file_id: int) -> None:
        """Delete the record and its blob. Unknown ids are ignored."""
        record = await self.storage.get_file(file_id)
        await self.storage.delete_file(file_id)
        if record and record.stored_name:
            (self.upload_dir / record.stored_name).unlink(missing_ok=True)
            logger.info("Deleted file", file_id=file_id, file=record.name)
