"""
Campaigns API
Donation drives run by blood banks, subject to admin approval.
"""
from fastapi import APIRouter, HTTPException, Depends, Query
from typing import Optional

from redrelief.database import CAMPAIGNS, DocumentStore, get_store
from redrelief.middleware import optional_auth, require_admin
from redrelief.models import (
    Campaign, CampaignCreate, CampaignUpdate, CampaignStatusUpdate,
    CampaignStatus, utc_now,
)
from redrelief.services import store_failure
from redrelief.services.campaign_service import (
    CampaignFilters, CampaignListing, approved_campaigns_in_city,
    campaigns_for_blood_bank, list_campaigns,
)

router = APIRouter(prefix="/campaigns", tags=["Campaigns"], dependencies=[Depends(optional_auth)])


def listing_response(listing: CampaignListing, **extra) -> dict:
    body = {"success": True, "data": listing.campaigns, "count": len(listing.campaigns), **extra}
    if listing.degraded:
        body["note"] = listing.note
    return body


@router.get("")
async def get_campaigns(
    status: Optional[CampaignStatus] = None,
    city: Optional[str] = None,
    blood_bank_id: Optional[str] = Query(None, alias="bloodBankId"),
    blood_type: Optional[str] = Query(None, alias="bloodType"),
    store: DocumentStore = Depends(get_store),
):
    filters = CampaignFilters(
        blood_bank_id=blood_bank_id or None,
        location=city or None,
        status=status.value if status else None,
        blood_type=blood_type or None,
    )
    with store_failure("Failed to fetch campaigns"):
        listing = await list_campaigns(store, filters)
    return listing_response(listing)


@router.get("/blood-bank/{blood_bank_id}")
async def get_campaigns_by_blood_bank(
    blood_bank_id: str,
    status: Optional[CampaignStatus] = None,
    store: DocumentStore = Depends(get_store),
):
    with store_failure("Failed to fetch campaigns by blood bank"):
        listing = await campaigns_for_blood_bank(store, blood_bank_id, status.value if status else None)
    return listing_response(listing)


@router.get("/city/{city}")
async def get_campaigns_by_city(
    city: str,
    blood_type: Optional[str] = Query(None, alias="bloodType"),
    store: DocumentStore = Depends(get_store),
):
    """Approved campaigns running in a city"""
    with store_failure("Failed to fetch campaigns by city"):
        listing = await approved_campaigns_in_city(store, city, blood_type or None)
    return listing_response(listing, city=city)


@router.get("/{campaign_id}")
async def get_campaign(campaign_id: str, store: DocumentStore = Depends(get_store)):
    with store_failure("Failed to fetch campaign"):
        campaign = await store.fetch_by_id(CAMPAIGNS, campaign_id)
    if not campaign:
        raise HTTPException(status_code=404, detail="Campaign not found")
    return {"success": True, "data": campaign}


@router.post("", status_code=201)
async def create_campaign(payload: CampaignCreate, store: DocumentStore = Depends(get_store)):
    doc = Campaign(**payload.model_dump()).to_document()
    with store_failure("Failed to create campaign"):
        await store.insert(CAMPAIGNS, doc)
    return {"success": True, "data": doc, "message": "Campaign created successfully"}


@router.put("/{campaign_id}")
async def update_campaign(
    campaign_id: str,
    payload: CampaignUpdate,
    store: DocumentStore = Depends(get_store),
):
    changes = payload.to_changes()
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")
    changes["updatedAt"] = utc_now().isoformat()

    with store_failure("Failed to update campaign"):
        updated = await store.update(CAMPAIGNS, campaign_id, changes)
    if not updated:
        raise HTTPException(status_code=404, detail="Campaign not found")
    return {"success": True, "message": "Campaign updated successfully"}


@router.patch("/{campaign_id}/status")
async def update_campaign_status(
    campaign_id: str,
    payload: CampaignStatusUpdate,
    store: DocumentStore = Depends(get_store),
    current_user: dict = Depends(require_admin),
):
    """Admin approval or rejection of a campaign"""
    now = utc_now().isoformat()
    changes = {
        "status": payload.status.value,
        "approved": payload.status == CampaignStatus.APPROVED,
        "adminNotes": payload.admin_notes,
        "updatedAt": now,
    }
    if payload.status == CampaignStatus.APPROVED:
        changes["approvedAt"] = now

    with store_failure("Failed to update campaign status"):
        updated = await store.update(CAMPAIGNS, campaign_id, changes)
    if not updated:
        raise HTTPException(status_code=404, detail="Campaign not found")
    return {"success": True, "message": f"Campaign {payload.status.value} successfully"}


@router.delete("/{campaign_id}")
async def delete_campaign(campaign_id: str, store: DocumentStore = Depends(get_store)):
    with store_failure("Failed to delete campaign"):
        deleted = await store.delete(CAMPAIGNS, campaign_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Campaign not found")
    return {"success": True, "message": "Campaign deleted successfully"}
