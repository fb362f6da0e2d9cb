from pydantic import Field, field_validator
from typing import List, Optional
from datetime import datetime
import uuid
from .base import StoreModel, utc_now
from .enums import BloodGroup, CampaignStatus


def _dedupe(values: Optional[List[BloodGroup]]) -> Optional[List[BloodGroup]]:
    if values is None:
        return None
    return list(dict.fromkeys(values))


class Campaign(StoreModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    title: str
    description: str
    location: str
    blood_bank_id: str
    blood_bank_name: str
    target_units: int = Field(default=0, ge=0)
    current_units: int = Field(default=0, ge=0)
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    contact_person: str = ""
    contact_phone: str = ""
    contact_email: str = ""
    blood_types: List[BloodGroup] = []
    status: CampaignStatus = CampaignStatus.PENDING
    approved: bool = False
    admin_notes: str = ""
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator("blood_types")
    @classmethod
    def unique_blood_types(cls, value):
        return _dedupe(value)

class CampaignCreate(StoreModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    location: str = Field(min_length=1)
    blood_bank_id: str = Field(min_length=1)
    blood_bank_name: str = Field(min_length=1)
    target_units: int = Field(default=0, ge=0)
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    contact_person: str = ""
    contact_phone: str = ""
    contact_email: str = ""
    blood_types: List[BloodGroup] = []

    @field_validator("blood_types")
    @classmethod
    def unique_blood_types(cls, value):
        return _dedupe(value)

class CampaignUpdate(StoreModel):
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = Field(default=None, min_length=1)
    location: Optional[str] = Field(default=None, min_length=1)
    blood_bank_name: Optional[str] = Field(default=None, min_length=1)
    target_units: Optional[int] = Field(default=None, ge=0)
    current_units: Optional[int] = Field(default=None, ge=0)
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    contact_person: Optional[str] = None
    contact_phone: Optional[str] = None
    contact_email: Optional[str] = None
    blood_types: Optional[List[BloodGroup]] = None

    @field_validator("blood_types")
    @classmethod
    def unique_blood_types(cls, value):
        return _dedupe(value)

class CampaignStatusUpdate(StoreModel):
    status: CampaignStatus
    admin_notes: str = ""
