from pydantic import Field
from typing import Optional
from datetime import datetime
import uuid
from .base import StoreModel, utc_now
from .enums import BloodGroup

class InventoryItem(StoreModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    blood_type: BloodGroup
    available_units: int = Field(ge=0)
    blood_bank_id: str = Field(min_length=1)
    expiry_date: Optional[str] = None  # YYYY-MM-DD
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

class InventoryCreate(StoreModel):
    blood_type: BloodGroup
    available_units: int = Field(ge=0)
    blood_bank_id: str = Field(min_length=1)
    expiry_date: Optional[str] = None

class InventoryUpdate(StoreModel):
    blood_type: Optional[BloodGroup] = None
    available_units: Optional[int] = Field(default=None, ge=0)
    blood_bank_id: Optional[str] = Field(default=None, min_length=1)
    expiry_date: Optional[str] = None
