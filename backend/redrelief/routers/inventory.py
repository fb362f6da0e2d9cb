from fastapi import APIRouter, HTTPException, Depends, Query
from typing import Optional

from redrelief.database import BLOOD_BANKS, INVENTORY, DocumentStore, get_store
from redrelief.middleware import optional_auth
from redrelief.models import InventoryItem, InventoryCreate, InventoryUpdate, BloodGroup, utc_now
from redrelief.services import store_failure

router = APIRouter(prefix="/blood-inventory", tags=["Blood Inventory"], dependencies=[Depends(optional_auth)])

@router.get("")
async def get_inventory(
    blood_type: Optional[BloodGroup] = Query(None, alias="bloodType"),
    blood_bank_id: Optional[str] = Query(None, alias="bloodBankId"),
    city: Optional[str] = None,
    store: DocumentStore = Depends(get_store),
):
    filters = {}
    if blood_type:
        filters["bloodType"] = blood_type.value
    if blood_bank_id:
        filters["bloodBankId"] = blood_bank_id

    with store_failure("Failed to fetch blood inventory"):
        inventory = await store.fetch_collection(INVENTORY, filters)
        if city:
            banks = await store.fetch_collection(BLOOD_BANKS, {"city": city})
            bank_ids = {bank.get("id") for bank in banks}
            inventory = [item for item in inventory if item.get("bloodBankId") in bank_ids]

    return {"success": True, "data": inventory, "count": len(inventory)}

@router.get("/{item_id}")
async def get_inventory_item(item_id: str, store: DocumentStore = Depends(get_store)):
    with store_failure("Failed to fetch blood inventory item"):
        item = await store.fetch_by_id(INVENTORY, item_id)
    if not item:
        raise HTTPException(status_code=404, detail="Blood inventory item not found")
    return {"success": True, "data": item}

@router.post("", status_code=201)
async def create_inventory_item(payload: InventoryCreate, store: DocumentStore = Depends(get_store)):
    doc = InventoryItem(**payload.model_dump()).to_document()
    with store_failure("Failed to create blood inventory item"):
        await store.insert(INVENTORY, doc)
    return {"success": True, "data": doc, "message": "Blood inventory item created successfully"}

@router.put("/{item_id}")
async def update_inventory_item(item_id: str, payload: InventoryUpdate, store: DocumentStore = Depends(get_store)):
    changes = payload.to_changes()
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")
    changes["updatedAt"] = utc_now().isoformat()

    with store_failure("Failed to update blood inventory item"):
        updated = await store.update(INVENTORY, item_id, changes)
    if not updated:
        raise HTTPException(status_code=404, detail="Blood inventory item not found")
    return {"success": True, "message": "Blood inventory item updated successfully"}

@router.delete("/{item_id}")
async def delete_inventory_item(item_id: str, store: DocumentStore = Depends(get_store)):
    with store_failure("Failed to delete blood inventory item"):
        deleted = await store.delete(INVENTORY, item_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Blood inventory item not found")
    return {"success": True, "message": "Blood inventory item deleted successfully"}
