"""Shared schema pieces: the camelCase base model, pagination and envelopes.

Every entity crosses the wire with camelCase keys and its identifier under
``_id``. Successful calls answer ``{"success": true, "data": ...}``, failed
calls ``{"success": false, "error": ..., "code": ...}``.
"""

from typing import Any, Dict, Optional, Sequence, Type, TypeVar

from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from core.exceptions import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


class CamelModel(BaseModel):
    """Base model serialized with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Pagination(BaseModel):
    page: int = Field(description="1-based page number")
    limit: int = Field(description="Page size")
    total: int = Field(description="Number of matching records")
    pages: int = Field(description="Number of pages, ceil(total / limit)")


class FileInfo(CamelModel):
    """A stored upload as referenced by assignments, submissions and materials."""

    file_name: str = Field(description="Name of the stored file inside the upload directory")
    original_name: str = Field(description="File name as sent by the client")
    mime_type: Optional[str] = Field(default=None)
    size: int = Field(default=0, description="Size in bytes")
    url: str = Field(description="URL the file is served from")


def to_wire(data: Any) -> Any:
    """Convert schemas (or lists/dicts of them) into plain JSON data."""
    return jsonable_encoder(data, by_alias=True)


def success_envelope(data: Any = None, **extra: Any) -> Dict[str, Any]:
    """Build a success envelope.

    Args:
        data: Payload placed under ``data``; omitted when None.
        **extra: Additional top-level keys such as ``pagination`` or ``message``.

    Returns:
        The JSON-ready envelope.
    """
    envelope: Dict[str, Any] = {"success": True}
    if data is not None:
        envelope["data"] = to_wire(data)
    for key, value in extra.items():
        if value is not None:
            envelope[key] = to_wire(value)
    return envelope


def error_envelope(message: str, code: str) -> Dict[str, Any]:
    return {"success": False, "error": message, "code": code}


def describe_errors(errors: Sequence[Dict[str, Any]]) -> str:
    """Render pydantic error entries as one line, e.g. ``capacity: Input should be ...``."""
    parts = []
    for error in errors:
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "; ".join(parts) or "Invalid request"


def parse_payload(model_cls: Type[ModelT], data: Optional[Dict[str, Any]]) -> ModelT:
    """Validate a raw payload into a request schema.

    Raises:
        ValidationError: If the payload does not fit the schema.
    """
    try:
        return model_cls.model_validate(data or {})
    except PydanticValidationError as e:
        raise ValidationError(describe_errors(e.errors())) from e
