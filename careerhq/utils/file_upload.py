"""
File Upload Utility - read admin form submissions.

Admin forms post either plain JSON, or multipart/form-data with:
- "data": the JSON document as a string
- one file field per image (imageFile, flagImageFile)

Image limits:
- extensions: .jpg .jpeg .png .webp .gif .svg
- max size: settings.max_image_size_mb (5MB default)

Bulk import sheets are uploaded as .csv files.
"""

import json
from typing import Dict, Optional, Tuple, Type, TypeVar

from fastapi import HTTPException, Request
from pydantic import BaseModel, ValidationError
from starlette.datastructures import UploadFile

from careerhq.core.config import get_settings
from careerhq.core.errors import ValidationFailure, summarize_validation_error

ALLOWED_IMAGE_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.webp', '.gif', '.svg'}
ALLOWED_SHEET_EXTENSIONS = {'.csv'}
MAX_SHEET_SIZE_BYTES = 5 * 1024 * 1024

ModelT = TypeVar("ModelT", bound=BaseModel)


def get_file_extension(filename: str) -> str:
    """Get lowercase file extension."""
    if '.' not in filename:
        return ''
    return '.' + filename.rsplit('.', 1)[1].lower()


async def read_image(file: UploadFile) -> bytes:
    """
    Validate and read an uploaded image.

    Raises:
        HTTPException on bad type/size
    """
    ext = get_file_extension(file.filename or "")
    if ext not in ALLOWED_IMAGE_EXTENSIONS:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported image type '{ext}'. Allowed: {', '.join(sorted(ALLOWED_IMAGE_EXTENSIONS))}"
        )

    content = await file.read()

    max_mb = get_settings().max_image_size_mb
    if len(content) > max_mb * 1024 * 1024:
        raise HTTPException(status_code=413, detail=f"File too large. Maximum size: {max_mb}MB")
    if not content:
        raise HTTPException(status_code=400, detail="Uploaded image is empty")
    return content


async def read_form_payload(request: Request, file_fields: Tuple[str, ...] = ()) -> Tuple[dict, Dict[str, Optional[bytes]]]:
    """
    Read a JSON or multipart admin submission.

    Returns:
        Tuple of (data dict, {file field: bytes or None})
    """
    files: Dict[str, Optional[bytes]] = {name: None for name in file_fields}
    content_type = request.headers.get("content-type", "")

    if "multipart/form-data" in content_type:
        form = await request.form()
        raw = form.get("data")
        if not isinstance(raw, str):
            raise HTTPException(status_code=400, detail="Missing 'data' field")
        data = _loads(raw)
        for name in file_fields:
            upload = form.get(name)
            if isinstance(upload, UploadFile) and upload.filename:
                files[name] = await read_image(upload)
    else:
        data = _loads(await request.body())

    if not isinstance(data, dict):
        raise HTTPException(status_code=400, detail="Request body must be a JSON object")
    return data, files


async def read_json_object(request: Request) -> dict:
    data = _loads(await request.body())
    if not isinstance(data, dict):
        raise HTTPException(status_code=400, detail="Request body must be a JSON object")
    return data


def _loads(raw) -> object:
    try:
        return json.loads(raw or "null")
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid JSON")


def validate_payload(model: Type[ModelT], data: dict) -> ModelT:
    """Validate with pydantic, turning errors into a 400 ValidationFailure."""
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ValidationFailure(summarize_validation_error(e))


def require_fields(data: dict, fields) -> None:
    """400 naming the first missing field, checked in order."""
    for field in fields:
        if data.get(field) in (None, "", []):
            raise HTTPException(status_code=400, detail=f"Missing required field: {field}")


async def read_sheet(file: UploadFile) -> str:
    """Validate and decode an uploaded CSV sheet."""
    if not file.filename:
        raise HTTPException(status_code=400, detail="No filename provided")
    ext = get_file_extension(file.filename)
    if ext not in ALLOWED_SHEET_EXTENSIONS:
        raise HTTPException(status_code=400, detail=f"Unsupported file type '{ext}'. Allowed: CSV")

    content = await file.read()
    if len(content) > MAX_SHEET_SIZE_BYTES:
        raise HTTPException(status_code=413, detail="File too large. Maximum size: 5MB")

    for encoding in ['utf-8', 'latin-1']:
        try:
            text = content.decode(encoding)
            break
        except UnicodeDecodeError:
            continue
    if not text.strip():
        raise HTTPException(status_code=400, detail="Uploaded file is empty")
    return text
