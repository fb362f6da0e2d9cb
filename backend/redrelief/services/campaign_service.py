"""
Campaign listing
Tries the indexed filter+sort query first and falls back to a full scan with
in-memory filtering and ordering when the store cannot run it.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

from redrelief.database import CAMPAIGNS, DocumentStore, OrderBy
from redrelief.models import CampaignStatus

logger = logging.getLogger(__name__)

FALLBACK_NOTE = "Using client-side filtering due to missing index"
NEWEST_FIRST = OrderBy("createdAt", descending=True)


def created_at_seconds(value) -> float:
    """Numeric creation time of a campaign; anything unreadable counts as 0."""
    if isinstance(value, dict):
        seconds = value.get("seconds", value.get("_seconds"))
        return float(seconds) if isinstance(seconds, (int, float)) else 0.0
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.timestamp()
    if isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return 0.0
        return created_at_seconds(parsed)
    return 0.0


@dataclass
class CampaignFilters:
    blood_bank_id: Optional[str] = None
    location: Optional[str] = None
    status: Optional[str] = None
    blood_type: Optional[str] = None

    def store_filters(self) -> dict:
        filters = {}
        if self.status:
            filters["status"] = self.status
        if self.location:
            filters["location"] = self.location
        if self.blood_bank_id:
            filters["bloodBankId"] = self.blood_bank_id
        return filters

    def carries_blood_type(self, campaign: dict) -> bool:
        if not self.blood_type:
            return True
        return self.blood_type in (campaign.get("bloodTypes") or [])

    def matches(self, campaign: dict) -> bool:
        for key, value in self.store_filters().items():
            if campaign.get(key) != value:
                return False
        return self.carries_blood_type(campaign)


@dataclass
class CampaignListing:
    campaigns: List[dict] = field(default_factory=list)
    degraded: bool = False

    @property
    def note(self) -> Optional[str]:
        return FALLBACK_NOTE if self.degraded else None


async def list_campaigns(store: DocumentStore, filters: CampaignFilters) -> CampaignListing:
    """Campaigns matching ``filters``, newest first."""
    result = await store.query(CAMPAIGNS, filters.store_filters(), NEWEST_FIRST)
    if not result.index_unsupported:
        return CampaignListing([c for c in result.rows if filters.carries_blood_type(c)])

    logger.warning("Index not available for campaigns query (%s), using client-side filter", result.reason)
    campaigns = [c for c in await store.fetch_collection(CAMPAIGNS) if filters.matches(c)]
    campaigns.sort(key=lambda c: created_at_seconds(c.get("createdAt")), reverse=True)
    return CampaignListing(campaigns, degraded=True)


async def campaigns_for_blood_bank(
    store: DocumentStore,
    blood_bank_id: str,
    status: Optional[str] = None,
) -> CampaignListing:
    return await list_campaigns(store, CampaignFilters(blood_bank_id=blood_bank_id, status=status))


async def approved_campaigns_in_city(
    store: DocumentStore,
    city: str,
    blood_type: Optional[str] = None,
) -> CampaignListing:
    return await list_campaigns(
        store,
        CampaignFilters(location=city, status=CampaignStatus.APPROVED.value, blood_type=blood_type),
    )
