from pydantic import Field
from typing import Optional
from datetime import datetime
import uuid
from .base import StoreModel, utc_now
from .enums import BankStatus

class BloodBank(StoreModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str
    address: str
    city: str
    phone: str
    email: str
    capacity: int = Field(default=0, ge=0)
    license_number: str = ""
    contact_person: str = ""
    status: BankStatus = BankStatus.PENDING
    approved: bool = False
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

class BloodBankCreate(StoreModel):
    name: str = Field(min_length=1)
    address: str = Field(min_length=1)
    city: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    email: str = Field(min_length=1)
    capacity: int = Field(default=0, ge=0)
    license_number: str = ""
    contact_person: str = ""

class BloodBankUpdate(StoreModel):
    name: Optional[str] = Field(default=None, min_length=1)
    address: Optional[str] = Field(default=None, min_length=1)
    city: Optional[str] = Field(default=None, min_length=1)
    phone: Optional[str] = None
    email: Optional[str] = None
    capacity: Optional[int] = Field(default=None, ge=0)
    license_number: Optional[str] = None
    contact_person: Optional[str] = None
    status: Optional[BankStatus] = None
    approved: Optional[bool] = None
