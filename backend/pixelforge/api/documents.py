# backend/pixelforge/api/documents.py
import time

from fastapi import APIRouter, Depends, Request
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from ..database import get_db
from ..exceptions import AppException
from ..schemas.base import ApiResponse
from ..schemas.project import Project as ProjectSchema
from ..services.documents import ALLOWED_TYPES, document_service
from ..services.policy import Caller
from ..utils.ids import ensure_object_id
from ..utils.logging import api_logger
from .dependencies import get_current_caller

router = APIRouter(prefix="/api/projects", tags=["documents"])


@router.post(
    "/{project_id}/documents",
    response_model=ApiResponse[ProjectSchema],
    response_model_exclude_none=True
)
async def upload_document(
        project_id: str,
        request: Request,
        caller: Caller = Depends(get_current_caller),
        db: Session = Depends(get_db)
):
    """Upload one PDF or DOCX as multipart field `document`"""
    project_id = ensure_object_id(project_id, "project")
    api_logger.info("Uploading document", extra={
        "project_id": project_id,
        "caller_id": caller.id
    })

    start_time = time.time()
    form = await request.form()
    try:
        project = await document_service.upload(db, caller, project_id, list(form.multi_items()))

        execution_time = time.time() - start_time
        api_logger.info("Successfully uploaded document", extra={
            "project_id": project_id,
            "document_count": len(project.documents),
            "execution_time_ms": round(execution_time * 1000, 2)
        })
        return ApiResponse(message="Document uploaded successfully", data=ProjectSchema.model_validate(project))

    except AppException as e:
        api_logger.warning("Document upload rejected", extra={
            "project_id": project_id,
            "reason": e.message
        })
        raise
    except Exception as e:
        api_logger.error("Error uploading document", extra={
            "project_id": project_id,
            "error": str(e)
        })
        raise
    finally:
        await form.close()


@router.get("/{project_id}/documents/{filename}")
async def download_document(
        project_id: str,
        filename: str,
        caller: Caller = Depends(get_current_caller),
        db: Session = Depends(get_db)
):
    api_logger.info("Downloading document", extra={
        "project_id": project_id,
        "stored_filename": filename
    })

    file_path, document = document_service.resolve_download(db, caller, project_id, filename)
    return FileResponse(
        path=file_path,
        filename=document.original_filename,
        media_type=ALLOWED_TYPES.get(file_path.suffix.lower(), "application/octet-stream")
    )
