from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, UploadFile

from civicfix.dependencies import get_lifecycle_service
from civicfix.schemas import AttachmentUpload, ComplaintCreate, ComplaintUpdate
from civicfix.services.lifecycle import ComplaintLifecycleService

router = APIRouter(prefix="/api/complaints", tags=["complaints"])


async def _read_upload(file: UploadFile | None) -> AttachmentUpload | None:
    """Browsers post an empty part when no file is chosen; treat that as absent."""
    if file is None or not file.filename:
        return None
    data = await file.read()
    if not data:
        return None
    return AttachmentUpload(
        data=data,
        filename=file.filename,
        content_type=file.content_type or "application/octet-stream",
    )


@router.get("")
async def list_complaints(service: ComplaintLifecycleService = Depends(get_lifecycle_service)):
    complaints = await service.list_all()
    return {"complaints": [c.model_dump(mode="json") for c in complaints]}


@router.get("/{complaint_id}")
async def get_complaint(
    complaint_id: str,
    service: ComplaintLifecycleService = Depends(get_lifecycle_service),
):
    complaint = await service.get(complaint_id)
    return {"complaint": complaint.model_dump(mode="json")}


@router.post("", status_code=201)
async def create_complaint(
    location: str = Form(""),
    description: str = Form(""),
    contact: str = Form(""),
    image: UploadFile | None = File(None),
    service: ComplaintLifecycleService = Depends(get_lifecycle_service),
):
    complaint = await service.create(ComplaintCreate(
        location=location,
        description=description,
        contact=contact or None,
        image=await _read_upload(image),
    ))
    return {
        "success": True,
        "message": "Complaint created successfully",
        "complaint": complaint.model_dump(mode="json"),
    }


@router.put("/{complaint_id}")
async def update_complaint(
    complaint_id: str,
    status: str = Form(""),
    assigned_to: str = Form(""),
    after_image: UploadFile | None = File(None),
    service: ComplaintLifecycleService = Depends(get_lifecycle_service),
):
    complaint = await service.update(complaint_id, ComplaintUpdate(
        status=status or None,
        assigned_to=assigned_to or None,
        after_image=await _read_upload(after_image),
    ))
    return {
        "success": True,
        "message": "Complaint updated successfully",
        "complaint": complaint.model_dump(mode="json"),
    }


@router.delete("/{complaint_id}")
async def delete_complaint(
    complaint_id: str,
    service: ComplaintLifecycleService = Depends(get_lifecycle_service),
):
    deletion = await service.delete(complaint_id)
    return {
        "success": True,
        "message": "Complaint deleted successfully",
        "deletedId": deletion.complaint.id,
        "attachmentFailures": deletion.failed,
    }
