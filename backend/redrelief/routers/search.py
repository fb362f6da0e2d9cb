"""
Search API
Blood availability lookups across blood banks and their inventory.
"""
from fastapi import APIRouter, Depends, Query
from typing import Optional

from redrelief.database import DocumentStore, get_store
from redrelief.middleware import optional_auth
from redrelief.services import store_failure
from redrelief.services.search_service import (
    list_available_blood_types, list_cities, normalize_blood_type,
    search_banks_by_blood_type, search_banks_by_city, slim_bank_view,
)

router = APIRouter(prefix="/search", tags=["Search"], dependencies=[Depends(optional_auth)])

@router.get("")
async def search_blood(
    blood_type: Optional[str] = Query(None, alias="bloodType"),
    city: Optional[str] = None,
    urgency: Optional[str] = None,
    store: DocumentStore = Depends(get_store),
):
    """Combined search used by the mobile apps"""
    blood_type = normalize_blood_type(blood_type)
    with store_failure("Failed to perform search"):
        banks = await search_banks_by_blood_type(store, blood_type, city=city or None, urgency=urgency)
    return {
        "success": True,
        "data": banks,
        "count": len(banks),
        "searchParams": {"bloodType": blood_type, "city": city, "urgency": urgency},
    }

@router.get("/blood-type/{blood_type}")
async def search_by_blood_type(
    blood_type: str,
    city: Optional[str] = None,
    store: DocumentStore = Depends(get_store),
):
    blood_type = normalize_blood_type(blood_type)
    with store_failure("Failed to search by blood type"):
        banks = await search_banks_by_blood_type(store, blood_type, city=city or None)
    data = [slim_bank_view(bank) for bank in banks]
    return {"success": True, "data": data, "count": len(data), "bloodType": blood_type}

@router.get("/city/{city}")
async def search_by_city(
    city: str,
    blood_type: Optional[str] = Query(None, alias="bloodType"),
    store: DocumentStore = Depends(get_store),
):
    with store_failure("Failed to search by city"):
        banks = await search_banks_by_city(store, city, blood_type=blood_type or None)
    return {"success": True, "data": banks, "count": len(banks), "city": city}

@router.get("/available-types")
async def get_available_types(store: DocumentStore = Depends(get_store)):
    with store_failure("Failed to fetch available blood types"):
        types = await list_available_blood_types(store)
    return {"success": True, "data": types, "count": len(types)}

@router.get("/cities")
async def get_cities(store: DocumentStore = Depends(get_store)):
    with store_failure("Failed to fetch cities"):
        cities = await list_cities(store)
    return {"success": True, "data": cities, "count": len(cities)}
