from typing import List, Optional
from fastapi import APIRouter, Depends, File, UploadFile, status
import structlog

from app.core.exceptions import AppError, ServiceError
from app.core.dependencies import get_file_service
from app.models.schemas import FileRecord, MessageResponse
from app.services.file_service import FileIngestionService

logger = structlog.get_logger()

router = APIRouter(prefix="/files", tags=["files"])


@router.post("/upload", response_model=List[FileRecord], status_code=status.HTTP_201_CREATED)
async def upload_files(
    files: Optional[List[UploadFile]] = File(None),
    service: FileIngestionService = Depends(get_file_service)
):
    """Upload up to 10 specification documents"""
    try:
        logger.info("Uploading files", count=len(files or []))
        return await service.upload(files or [])
    except AppError:
        raise
    except Exception as e:
        logger.error("File upload error", error=str(e), exc_info=True)
        raise ServiceError("File upload failed", error=str(e))


@router.get("", response_model=List[FileRecord])
async def get_all_files(service: FileIngestionService = Depends(get_file_service)):
    """List uploaded files"""
    try:
        return await service.list_files()
    except Exception as e:
        logger.error("Error fetching files", error=str(e))
        raise ServiceError("Failed to fetch files", error=str(e))


@router.delete("/{file_id}", response_model=MessageResponse)
async def delete_file(
    file_id: int,
    service: FileIngestionService = Depends(get_file_service)
):
    """Delete a file and its stored blob"""
    try:
        await service.delete_file(file_id)
        return MessageResponse(message="File deleted successfully")
    except Exception as e:
        logger.error("Error deleting file", file_id=file_id, error=str(e))
        raise ServiceError("Failed to delete file", error=str(e))
