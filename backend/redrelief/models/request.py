from pydantic import Field
from typing import Optional
from datetime import datetime
import uuid
from .base import StoreModel, utc_now
from .enums import BloodGroup, RequestStatus, Urgency

class BloodRequest(StoreModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    blood_type: BloodGroup
    units: int = Field(gt=0)
    urgency: Urgency = Urgency.NORMAL
    patient_name: str
    contact_number: str
    hospital: str = ""
    blood_bank_id: str = ""
    notes: str = ""
    status: RequestStatus = RequestStatus.PENDING
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

class BloodRequestCreate(StoreModel):
    blood_type: BloodGroup
    units: int = Field(gt=0)
    urgency: Urgency = Urgency.NORMAL
    patient_name: str = Field(min_length=1)
    contact_number: str = Field(min_length=1)
    hospital: str = ""
    blood_bank_id: str = ""
    notes: str = ""

class BloodRequestUpdate(StoreModel):
    blood_type: Optional[BloodGroup] = None
    units: Optional[int] = Field(default=None, gt=0)
    urgency: Optional[Urgency] = None
    patient_name: Optional[str] = Field(default=None, min_length=1)
    contact_number: Optional[str] = Field(default=None, min_length=1)
    hospital: Optional[str] = None
    blood_bank_id: Optional[str] = None
    notes: Optional[str] = None

class BloodRequestStatusUpdate(StoreModel):
    status: RequestStatus
