"""Course material routes."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request

from api.request_payload import pick_file, read_payload
from api.routes.auth import get_current_user_id, get_optional_user_id
from core.dependencies import MaterialManagerDep
from schemas.common import parse_payload, success_envelope
from schemas.material import CreateMaterialRequest, UpdateMaterialRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/materials", tags=["Materials"])


@router.get("", summary="List materials")
def list_materials(
    course: Optional[str] = None,
    material_manager: MaterialManagerDep = None,
) -> dict:
    return success_envelope(material_manager.list_materials(course_id=course))


@router.get("/enrolled", summary="Materials of the session student's courses")
def list_enrolled_materials(
    user_id: str = Depends(get_current_user_id),
    material_manager: MaterialManagerDep = None,
) -> dict:
    return success_envelope(material_manager.list_for_student(user_id))


@router.get("/{material_id}", summary="Get a material")
def get_material(material_id: str, material_manager: MaterialManagerDep = None) -> dict:
    return success_envelope(material_manager.get_material(material_id))


@router.post("", summary="Upload a material")
async def create_material(
    request: Request,
    user_id: Optional[str] = Depends(get_optional_user_id),
    material_manager: MaterialManagerDep = None,
) -> dict:
    """Create a material from form fields (title, description, courseId) and a file."""
    fields, files = await read_payload(request)
    req = parse_payload(CreateMaterialRequest, fields)
    material = material_manager.create_material(req, file=pick_file(files), uploader_id=user_id)
    return success_envelope(material)


@router.api_route("/{material_id}", methods=["PUT", "PATCH"], summary="Update a material")
async def update_material(
    material_id: str,
    request: Request,
    material_manager: MaterialManagerDep = None,
) -> dict:
    fields, files = await read_payload(request)
    req = parse_payload(UpdateMaterialRequest, fields)
    material = material_manager.update_material(material_id, req, file=pick_file(files))
    return success_envelope(material)


@router.delete("/{material_id}", summary="Delete a material")
def delete_material(material_id: str, material_manager: MaterialManagerDep = None) -> dict:
    material_manager.delete_material(material_id)
    return success_envelope(message="Material deleted successfully")
