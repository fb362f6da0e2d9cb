from fastapi import APIRouter, HTTPException, Depends, Query
from typing import Optional

from redrelief.database import BLOOD_REQUESTS, DocumentStore, get_store
from redrelief.middleware import optional_auth
from redrelief.models import (
    BloodRequest, BloodRequestCreate, BloodRequestUpdate, BloodRequestStatusUpdate,
    BloodGroup, RequestStatus, utc_now,
)
from redrelief.services import store_failure

router = APIRouter(prefix="/blood-requests", tags=["Blood Requests"], dependencies=[Depends(optional_auth)])

@router.get("")
async def get_blood_requests(
    status: Optional[RequestStatus] = None,
    blood_type: Optional[BloodGroup] = Query(None, alias="bloodType"),
    blood_bank_id: Optional[str] = Query(None, alias="bloodBankId"),
    store: DocumentStore = Depends(get_store),
):
    filters = {}
    if status:
        filters["status"] = status.value
    if blood_type:
        filters["bloodType"] = blood_type.value
    if blood_bank_id:
        filters["bloodBankId"] = blood_bank_id

    with store_failure("Failed to fetch blood requests"):
        requests = await store.fetch_collection(BLOOD_REQUESTS, filters)
    return {"success": True, "data": requests, "count": len(requests)}

@router.get("/{request_id}")
async def get_blood_request(request_id: str, store: DocumentStore = Depends(get_store)):
    with store_failure("Failed to fetch blood request"):
        request = await store.fetch_by_id(BLOOD_REQUESTS, request_id)
    if not request:
        raise HTTPException(status_code=404, detail="Blood request not found")
    return {"success": True, "data": request}

@router.post("", status_code=201)
async def create_blood_request(payload: BloodRequestCreate, store: DocumentStore = Depends(get_store)):
    doc = BloodRequest(**payload.model_dump()).to_document()
    with store_failure("Failed to create blood request"):
        await store.insert(BLOOD_REQUESTS, doc)
    return {"success": True, "data": doc, "message": "Blood request created successfully"}

@router.put("/{request_id}")
async def update_blood_request(request_id: str, payload: BloodRequestUpdate, store: DocumentStore = Depends(get_store)):
    changes = payload.to_changes()
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")
    changes["updatedAt"] = utc_now().isoformat()

    with store_failure("Failed to update blood request"):
        updated = await store.update(BLOOD_REQUESTS, request_id, changes)
    if not updated:
        raise HTTPException(status_code=404, detail="Blood request not found")
    return {"success": True, "message": "Blood request updated successfully"}

@router.patch("/{request_id}/status")
async def update_blood_request_status(
    request_id: str,
    payload: BloodRequestStatusUpdate,
    store: DocumentStore = Depends(get_store),
):
    changes = {"status": payload.status.value, "updatedAt": utc_now().isoformat()}
    with store_failure("Failed to update blood request status"):
        updated = await store.update(BLOOD_REQUESTS, request_id, changes)
    if not updated:
        raise HTTPException(status_code=404, detail="Blood request not found")
    return {"success": True, "message": f"Blood request status updated to {payload.status.value}"}

@router.delete("/{request_id}")
async def delete_blood_request(request_id: str, store: DocumentStore = Depends(get_store)):
    with store_failure("Failed to delete blood request"):
        deleted = await store.delete(BLOOD_REQUESTS, request_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Blood request not found")
    return {"success": True, "message": "Blood request deleted successfully"}
