"""Course material schemas."""

from typing import Any, Dict, Literal, Optional

from pydantic import Field

from schemas.common import CamelModel

FileType = Literal["pdf", "video", "image", "document", "docx", "other"]


class Material(CamelModel):
    id: str = Field(alias="_id")
    title: str
    description: str = ""
    course: Dict[str, Any]
    file_type: FileType = "other"
    file_name: Optional[str] = None
    original_name: Optional[str] = None
    mime_type: Optional[str] = None
    size: int = 0
    file_url: Optional[str] = None
    uploaded_by: Optional[Dict[str, Any]] = None
    created_at: str
    updated_at: str


class CreateMaterialRequest(CamelModel):
    title: Optional[str] = None
    description: str = ""
    course_id: Optional[str] = None
    file_type: Optional[FileType] = None


class UpdateMaterialRequest(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    file_type: Optional[FileType] = None
