# backend/pixelforge/services/cleanup.py
from pathlib import Path
from typing import Iterable

from ..config import settings
from ..utils.logging import service_logger


class CleanupService:
    """Service to remove stored files that belong to deleted records"""

    @staticmethod
    def document_path(stored_filename: str) -> Path:
        return settings.UPLOADS_PATH / stored_filename

    @staticmethod
    async def delete_document_file(stored_filename: str) -> bool:
        """Delete one stored file; failures are logged and reported as False"""
        file_path = CleanupService.document_path(stored_filename)
        try:
            if file_path.exists():
                file_path.unlink()
                service_logger.info(f"Deleted document file: {file_path}")
                return True
        except OSError as e:
            service_logger.error(f"Error deleting document file: {str(e)}", extra={
                "stored_filename": stored_filename
            })
        return False

    @staticmethod
    async def delete_project_artifacts(project_id: str, stored_filenames: Iterable[str]) -> int:
        """Delete the files of a project whose rows are already gone.

        A file that cannot be removed is left behind and logged; the
        deletion itself has already been committed.
        """
        stored_filenames = list(stored_filenames)
        removed = 0
        for stored_filename in stored_filenames:
            if await CleanupService.delete_document_file(stored_filename):
                removed += 1

        service_logger.info(f"Deleted artifacts for project {project_id}", extra={
            "document_count": len(stored_filenames),
            "removed": removed
        })
        return removed


cleanup_service = CleanupService()
