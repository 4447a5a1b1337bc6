"""Reading write payloads that arrive either as JSON or as multipart forms."""

from typing import Any, Dict, Optional, Tuple

from fastapi import Request
from starlette.datastructures import UploadFile

from core.exceptions import ValidationError
from utils.file_storage import UploadedFile


async def read_payload(request: Request) -> Tuple[Dict[str, Any], Dict[str, UploadedFile]]:
    """Split a request body into plain fields and uploaded files.

    Multipart forms yield their text fields and every file part; JSON bodies
    yield their object and no files; an empty body yields neither.

    Args:
        request: The incoming request.

    Returns:
        Tuple of (fields, files keyed by form field name).

    Raises:
        ValidationError: If a JSON body is not an object.
    """
    content_type = request.headers.get("content-type", "")
    fields: Dict[str, Any] = {}
    files: Dict[str, UploadedFile] = {}

    if content_type.startswith("multipart/form-data") or content_type.startswith(
        "application/x-www-form-urlencoded"
    ):
        form = await request.form()
        for key, value in form.multi_items():
            if isinstance(value, UploadFile):
                files[key] = UploadedFile(
                    filename=value.filename or key,
                    content=await value.read(),
                    content_type=value.content_type,
                )
            else:
                fields[key] = value
        return fields, files

    raw = await request.body()
    if not raw:
        return fields, files
    try:
        body = await request.json()
    except ValueError:
        raise ValidationError("Request body must be JSON or a multipart form")
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body, files


def pick_file(files: Dict[str, UploadedFile], name: str = "file") -> Optional[UploadedFile]:
    """Return the named upload, or the only upload when a single one was sent."""
    if name in files:
        return files[name]
    if len(files) == 1:
        return next(iter(files.values()))
    return None
