# chatplatform/api/routers/files.py
"""
File upload and download API routes.
Bytes are stored on local disk; rows record the metadata.
"""

from typing import Optional

from fastapi import APIRouter, Depends, File as FormFile, UploadFile, status
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from chatplatform.api.deps import CurrentUser, get_current_user, get_db
from chatplatform.api.schemas import serialize_file
from chatplatform.core.exceptions import NotFoundError, ValidationError
from chatplatform.db import storage
from chatplatform.db.models import File
from chatplatform.services.file_service import file_service
from chatplatform.utils.logger import setup_logger

logger = setup_logger(__name__)

router = APIRouter(prefix="/api/files", tags=["Files"])


@router.get("/project/{project_id}")
async def list_files(
    project_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    project = storage.get_owned_project(db, project_id, current_user.id)
    files = (
        db.query(File)
        .filter(File.project_id == project.id)
        .order_by(File.created_at.desc())
        .all()
    )
    return {"files": [serialize_file(f) for f in files]}


@router.post("/project/{project_id}", status_code=status.HTTP_201_CREATED)
async def upload_file(
    project_id: str,
    file: Optional[UploadFile] = FormFile(None),
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Upload a file to a project (multipart field `file`).

    **Errors:**
    - 400: No file, or file type not allowed
    - 404: Project not found
    - 413: File exceeds the size limit
    """
    if file is None or not file.filename:
        raise ValidationError("No file uploaded")

    # Ownership is checked before any bytes are written
    project = storage.get_owned_project(db, project_id, current_user.id)

    stored = await file_service.save_upload(file)
    try:
        record = File(
            filename=stored.filename,
            original_name=stored.original_name,
            mime_type=stored.mime_type,
            size=stored.size,
            project_id=project.id,
        )
        db.add(record)
        db.commit()
        db.refresh(record)
    except Exception:
        db.rollback()
        file_service.remove(stored.filename)
        raise

    return {"message": "File uploaded successfully", "file": serialize_file(record)}


@router.get("/{file_id}/download")
async def download_file(
    file_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    record = storage.get_owned_file(db, file_id, current_user.id)

    path = file_service.path_for(record.filename)
    if not path.exists():
        logger.warning(f"Stored bytes missing for file {record.id}")
        raise NotFoundError("File on disk")

    return FileResponse(
        path,
        media_type=record.mime_type,
        filename=record.original_name,
    )


@router.delete("/{file_id}")
async def delete_file(
    file_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    record = storage.get_owned_file(db, file_id, current_user.id)

    stored_name = record.filename
    db.delete(record)
    db.commit()
    file_service.remove(stored_name)
    return {"message": "File deleted successfully"}
