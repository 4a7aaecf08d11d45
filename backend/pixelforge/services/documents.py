# backend/pixelforge/services/documents.py
"""Document intake pipeline: validate, rename, store, record."""
from pathlib import Path
from typing import List, Tuple

from fastapi import UploadFile
from starlette.datastructures import UploadFile as StarletteUploadFile
from sqlalchemy.orm import Session

from ..config import settings
from ..exceptions import ResourceNotFoundError, ValidationError
from ..models import Project, ProjectDocument
from ..utils.files import delete_file, generate_stored_filename, save_upload_file
from ..utils.logging import service_logger
from .policy import Action, Caller, ProjectAccess, authorize
from .projects import ProjectService

DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

# Extension -> the only content type accepted alongside it
ALLOWED_TYPES = {
    ".pdf": "application/pdf",
    ".docx": DOCX_MIME_TYPE,
}

UPLOAD_FIELD = "document"


def validate_document(filename: str, content_type: str) -> str:
    """Check extension and declared content type; return the lower-cased extension.

    The content type is whatever the client declared; file contents are not sniffed.
    """
    extension = Path(filename or "").suffix.lower()
    if extension not in ALLOWED_TYPES:
        raise ValidationError(
            f"Invalid file type. Only {', '.join(ALLOWED_TYPES)} are allowed.", field=UPLOAD_FIELD
        )

    declared = (content_type or "").split(";")[0].strip().lower()
    if declared != ALLOWED_TYPES[extension]:
        raise ValidationError("Invalid MIME type. File type does not match content.", field=UPLOAD_FIELD)
    return extension


def select_single_upload(parts: List[Tuple[str, object]]) -> UploadFile:
    """Pick the one `document` file out of a multipart form's items"""
    files = [(name, value) for name, value in parts if isinstance(value, StarletteUploadFile)]
    if len(files) > 1:
        raise ValidationError("Only one file allowed per request", field=UPLOAD_FIELD)
    if not files or files[0][0] != UPLOAD_FIELD:
        raise ValidationError("No file uploaded. Please upload a PDF or DOCX file.", field=UPLOAD_FIELD)
    return files[0][1]


class DocumentService:

    @staticmethod
    async def upload(db: Session, caller: Caller, project_id: str, parts: List[Tuple[str, object]]) -> Project:
        """Store the single `document` part of a multipart form on the project"""
        project = ProjectService.load(db, project_id)
        authorize(
            Action.UPLOAD_DOCUMENT, caller, ProjectAccess.of(project),
            message="Forbidden - Only Admin or Project Lead can upload documents"
        )

        upload_file = select_single_upload(parts)
        validate_document(upload_file.filename, upload_file.content_type)
        stored_filename = generate_stored_filename(upload_file.filename)
        file_path = await save_upload_file(
            upload_file,
            settings.UPLOADS_PATH,
            filename=stored_filename,
            max_size=settings.MAX_UPLOAD_SIZE
        )

        try:
            DocumentService.attach(db, project, stored_filename, upload_file.filename)
        except Exception:
            # No orphaned files: undo the write when the metadata never lands
            removed = await delete_file(file_path)
            service_logger.error("Document metadata save failed, removed stored file", extra={
                "project_id": project.id,
                "stored_filename": stored_filename,
                "removed": removed
            })
            raise

        service_logger.info("Document uploaded", extra={
            "project_id": project.id,
            "stored_filename": stored_filename,
            "original_filename": upload_file.filename
        })
        return ProjectService.reload(db, project.id)

    @staticmethod
    def attach(db: Session, project: Project, stored_filename: str, original_filename: str) -> ProjectDocument:
        document = ProjectDocument(
            project_id=project.id,
            stored_filename=stored_filename,
            original_filename=original_filename
        )
        db.add(document)
        try:
            db.commit()
        except Exception:
            db.rollback()
            raise
        return document

    @staticmethod
    def resolve_download(db: Session, caller: Caller, project_id: str, filename: str) -> Tuple[Path, ProjectDocument]:
        """Return the on-disk path and metadata of a document the caller may read"""
        project = ProjectService.load(db, project_id)

        document = next((doc for doc in project.documents if doc.stored_filename == filename), None)
        if document is None:
            raise ResourceNotFoundError("Document not found")

        authorize(
            Action.DOWNLOAD_DOCUMENT, caller, ProjectAccess.of(project),
            message="Forbidden - You do not have access to this document"
        )

        file_path = settings.UPLOADS_PATH / document.stored_filename
        if not file_path.is_file():
            service_logger.warning("Document file missing from storage", extra={
                "project_id": project.id,
                "stored_filename": document.stored_filename
            })
            raise ResourceNotFoundError("File not found on server")
        return file_path, document


document_service = DocumentService()
