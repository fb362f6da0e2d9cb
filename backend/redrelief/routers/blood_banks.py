from fastapi import APIRouter, HTTPException, Depends
from typing import Optional

from redrelief.database import BLOOD_BANKS, INVENTORY, DocumentStore, get_store
from redrelief.middleware import optional_auth
from redrelief.models import BloodBank, BloodBankCreate, BloodBankUpdate, BankStatus, utc_now
from redrelief.services import store_failure

router = APIRouter(prefix="/blood-banks", tags=["Blood Banks"], dependencies=[Depends(optional_auth)])

@router.get("")
async def get_blood_banks(
    city: Optional[str] = None,
    status: Optional[BankStatus] = None,
    approved: Optional[bool] = None,
    store: DocumentStore = Depends(get_store),
):
    filters = {}
    if city:
        filters["city"] = city
    if status:
        filters["status"] = status.value
    if approved is not None:
        filters["approved"] = approved

    with store_failure("Failed to fetch blood banks"):
        banks = await store.fetch_collection(BLOOD_BANKS, filters)
    return {"success": True, "data": banks, "count": len(banks)}

@router.get("/{bank_id}")
async def get_blood_bank(bank_id: str, store: DocumentStore = Depends(get_store)):
    with store_failure("Failed to fetch blood bank"):
        bank = await store.fetch_by_id(BLOOD_BANKS, bank_id)
    if not bank:
        raise HTTPException(status_code=404, detail="Blood bank not found")
    return {"success": True, "data": bank}

@router.post("", status_code=201)
async def create_blood_bank(payload: BloodBankCreate, store: DocumentStore = Depends(get_store)):
    doc = BloodBank(**payload.model_dump()).to_document()
    with store_failure("Failed to create blood bank"):
        await store.insert(BLOOD_BANKS, doc)
    return {"success": True, "data": doc, "message": "Blood bank created successfully"}

@router.put("/{bank_id}")
async def update_blood_bank(bank_id: str, payload: BloodBankUpdate, store: DocumentStore = Depends(get_store)):
    changes = payload.to_changes()
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")
    changes["updatedAt"] = utc_now().isoformat()

    with store_failure("Failed to update blood bank"):
        updated = await store.update(BLOOD_BANKS, bank_id, changes)
    if not updated:
        raise HTTPException(status_code=404, detail="Blood bank not found")
    return {"success": True, "message": "Blood bank updated successfully"}

@router.delete("/{bank_id}")
async def delete_blood_bank(bank_id: str, store: DocumentStore = Depends(get_store)):
    # Inventory and campaigns pointing at the bank are left in place.
    with store_failure("Failed to delete blood bank"):
        deleted = await store.delete(BLOOD_BANKS, bank_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Blood bank not found")
    return {"success": True, "message": "Blood bank deleted successfully"}

@router.get("/{bank_id}/inventory")
async def get_blood_bank_inventory(bank_id: str, store: DocumentStore = Depends(get_store)):
    with store_failure("Failed to fetch blood bank inventory"):
        inventory = await store.fetch_collection(INVENTORY, {"bloodBankId": bank_id})
    return {"success": True, "data": inventory, "count": len(inventory)}
