"""
Blood availability search
Joins inventory to blood banks and applies the filters the store cannot run natively.
"""
import logging
from typing import Dict, List, Optional
from urllib.parse import unquote

from redrelief.database import BLOOD_BANKS, INVENTORY, DocumentStore
from redrelief.models import Urgency
from .exceptions import ValidationError

logger = logging.getLogger(__name__)


def normalize_blood_type(value: Optional[str]) -> str:
    if value is None:
        raise ValidationError("Blood type is required")
    value = unquote(value).strip()
    if not value:
        raise ValidationError("Blood type is required")
    return value


def available_units(item: dict) -> int:
    units = item.get("availableUnits")
    if isinstance(units, bool) or not isinstance(units, (int, float)):
        return 0
    return units


def in_stock(item: dict) -> bool:
    return available_units(item) > 0


def aggregate_bank_view(bank: dict, bank_id: str, items: List[dict]) -> dict:
    return {
        **bank,
        "id": bank_id,
        "inventory": items,
        "totalAvailable": sum(available_units(item) for item in items),
    }


def slim_bank_view(view: dict) -> dict:
    return {
        "id": view["id"],
        "name": view.get("name"),
        "address": view.get("address"),
        "city": view.get("city"),
        "phone": view.get("phone"),
        "availableUnits": view["totalAvailable"],
    }


async def search_banks_by_blood_type(
    store: DocumentStore,
    blood_type: Optional[str],
    city: Optional[str] = None,
    urgency: Optional[str] = None,
) -> List[dict]:
    """Banks holding positive stock of ``blood_type``, each with its matching inventory.

    Banks come back in the order their first matching inventory item was seen,
    or by ``totalAvailable`` descending when ``urgency`` is ``high``. Matching is
    literal: no donor/recipient compatibility is applied.
    """
    blood_type = normalize_blood_type(blood_type)

    inventory = await store.fetch_collection(INVENTORY)
    matching = [
        item for item in inventory
        if item.get("bloodType") == blood_type and in_stock(item)
    ]
    logger.info("Found %d inventory items for %s", len(matching), blood_type)

    by_bank: Dict[str, List[dict]] = {}
    for item in matching:
        bank_id = item.get("bloodBankId")
        if bank_id:
            by_bank.setdefault(bank_id, []).append(item)
    logger.info("Found %d unique blood banks for %s", len(by_bank), blood_type)

    banks = []
    for bank_id, items in by_bank.items():
        bank = await store.fetch_by_id(BLOOD_BANKS, bank_id)
        if bank is None:
            logger.debug("Skipping missing blood bank %s", bank_id)
            continue
        if city and bank.get("city") != city:
            continue
        banks.append(aggregate_bank_view(bank, bank_id, items))

    if urgency == Urgency.HIGH.value:
        banks.sort(key=lambda view: view["totalAvailable"], reverse=True)
    return banks


async def search_banks_by_city(
    store: DocumentStore,
    city: str,
    blood_type: Optional[str] = None,
) -> List[dict]:
    """Banks in ``city`` with at least one in-stock item (optionally of ``blood_type``)."""
    banks = await store.fetch_collection(BLOOD_BANKS, {"city": city})
    logger.info("Found %d blood banks in %s", len(banks), city)
    if not banks:
        return []

    stocked = [item for item in await store.fetch_collection(INVENTORY) if in_stock(item)]
    if blood_type:
        stocked = [item for item in stocked if item.get("bloodType") == blood_type]

    result = []
    for bank in banks:
        if not bank.get("id"):
            continue
        items = [item for item in stocked if item.get("bloodBankId") == bank["id"]]
        if items:
            result.append(aggregate_bank_view(bank, bank["id"], items))
    return result


async def list_available_blood_types(store: DocumentStore) -> List[str]:
    inventory = await store.fetch_collection(INVENTORY)
    types = (item.get("bloodType") for item in inventory if in_stock(item))
    return list(dict.fromkeys(t for t in types if t))


async def list_cities(store: DocumentStore) -> List[str]:
    banks = await store.fetch_collection(BLOOD_BANKS)
    return list(dict.fromkeys(bank["city"] for bank in banks if bank.get("city")))
