# tests/utils/test_files.py
import io
import re

import pytest
from fastapi import UploadFile

from pixelforge.exceptions import ValidationError
from pixelforge.utils.files import delete_file, generate_stored_filename, save_upload_file

@pytest.fixture
def mock_upload_file():
    async def _create_upload_file(filename: str, content: bytes):
        spooled_file = io.BytesIO(content)
        return UploadFile(
            filename=filename,
            file=spooled_file
        )
    return _create_upload_file

def test_generate_stored_filename():
    """Stored names keep only the lower-cased extension"""
    name = generate_stored_filename("../../Quarterly Report.PDF")

    assert re.fullmatch(r"\d{13}-[0-9a-f]{8}\.pdf", name)
    assert "Quarterly" not in name
    assert generate_stored_filename("a.pdf") != generate_stored_filename("a.pdf")

@pytest.mark.asyncio
async def test_save_upload_file(mock_upload_file, temp_storage_dir):
    """Test saving an uploaded file"""
    test_content = b"test file content"
    upload_file = await mock_upload_file("test.pdf", test_content)

    saved_path = await save_upload_file(upload_file, temp_storage_dir)

    assert saved_path.exists()
    assert saved_path.read_bytes() == test_content
    assert saved_path.suffix == ".pdf"
    assert saved_path.name != "test.pdf"

@pytest.mark.asyncio
async def test_save_upload_file_creates_directory(mock_upload_file, temp_storage_dir):
    """Test saving file creates directory if it doesn't exist"""
    new_dir = temp_storage_dir / "new_directory"

    upload_file = await mock_upload_file("test.docx", b"content")
    saved_path = await save_upload_file(upload_file, new_dir, filename="fixed-name.docx")

    assert new_dir.exists()
    assert saved_path == new_dir / "fixed-name.docx"
    assert saved_path.read_bytes() == b"content"

@pytest.mark.asyncio
async def test_save_upload_file_size_limit(mock_upload_file, temp_storage_dir):
    """Oversized uploads leave nothing behind"""
    upload_file = await mock_upload_file("big.pdf", b"x" * 2048)

    with pytest.raises(ValidationError) as exc_info:
        await save_upload_file(upload_file, temp_storage_dir, filename="big.pdf", max_size=1024)

    assert exc_info.value.status_code == 400
    assert not (temp_storage_dir / "big.pdf").exists()

@pytest.mark.asyncio
async def test_save_upload_file_at_limit(mock_upload_file, temp_storage_dir):
    upload_file = await mock_upload_file("exact.pdf", b"x" * 1024)
    saved_path = await save_upload_file(upload_file, temp_storage_dir, max_size=1024)
    assert saved_path.stat().st_size == 1024

@pytest.mark.asyncio
async def test_delete_file(temp_storage_dir):
    file_path = temp_storage_dir / "doomed.pdf"
    file_path.write_bytes(b"bye")

    assert await delete_file(file_path) is True
    assert not file_path.exists()
    assert await delete_file(file_path) is False
