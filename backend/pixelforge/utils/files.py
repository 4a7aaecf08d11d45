# backend/pixelforge/utils/files.py
import time
from pathlib import Path
from typing import Optional
from uuid import uuid4

from fastapi import UploadFile

from ..exceptions import ValidationError
from .logging import service_logger

CHUNK_SIZE = 64 * 1024


def generate_stored_filename(original_name: str) -> str:
    """`{unix-ms}-{8 hex}{ext}`, never derived from anything but the extension"""
    extension = Path(original_name).suffix.lower()
    return f"{int(time.time() * 1000)}-{uuid4().hex[:8]}{extension}"


async def save_upload_file(
        upload_file: UploadFile,
        directory: Path,
        filename: Optional[str] = None,
        max_size: Optional[int] = None
) -> Path:
    """Stream an upload to `directory` and return the written path.

    When `max_size` is given the partial file is removed and a
    ValidationError raised as soon as more bytes than that arrive.
    """
    filename = filename or generate_stored_filename(upload_file.filename or "")
    directory.mkdir(parents=True, exist_ok=True)
    file_path = directory / filename

    written = 0
    try:
        with file_path.open("wb") as buffer:
            while True:
                chunk = await upload_file.read(CHUNK_SIZE)
                if not chunk:
                    break
                written += len(chunk)
                if max_size is not None and written > max_size:
                    raise ValidationError(
                        f"File size exceeds {max_size // (1024 * 1024)}MB limit", field="document"
                    )
                buffer.write(chunk)
    except Exception:
        await delete_file(file_path)
        raise

    return file_path


async def delete_file(file_path: Path) -> bool:
    """Delete a file if it exists; report whether anything was removed"""
    try:
        if file_path.exists():
            file_path.unlink()
            return True
    except OSError as e:
        service_logger.error(f"Error deleting file {file_path}: {e}")
    return False
