from .enums import BloodGroup, BankStatus, Urgency, RequestStatus, CampaignStatus
from .base import StoreModel, utc_now
from .inventory import InventoryItem, InventoryCreate, InventoryUpdate
from .blood_bank import BloodBank, BloodBankCreate, BloodBankUpdate
from .request import BloodRequest, BloodRequestCreate, BloodRequestUpdate, BloodRequestStatusUpdate
from .campaign import Campaign, CampaignCreate, CampaignUpdate, CampaignStatusUpdate
