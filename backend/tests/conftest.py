import asyncio
import uuid

import jwt
import pytest
from fastapi.testclient import TestClient

from redrelief.config import Settings
from redrelief.database import BLOOD_BANKS, CAMPAIGNS, INVENTORY, DocumentStore, IndexUnavailable
from redrelief.server import create_app

JWT_SECRET = "test-secret"


class InMemoryStore(DocumentStore):
    """Dict-backed store that records every call it receives."""

    def __init__(self, collections=None, compound_queries_enabled=True):
        self.collections = {name: [dict(doc) for doc in docs] for name, docs in (collections or {}).items()}
        self.compound_queries_enabled = compound_queries_enabled
        self.reject_compound = False
        self.failure = None
        self.calls = []

    def _record(self, op, name):
        self.calls.append((op, name))
        if self.failure is not None:
            raise self.failure

    async def fetch_collection(self, name, filters=None, order_by=None):
        self._record("fetch_collection", name)
        filters = filters or {}
        if self.reject_compound and len(filters) + (1 if order_by else 0) > 1:
            raise IndexUnavailable("The query requires an index")
        rows = [
            dict(doc) for doc in self.collections.get(name, [])
            if all(doc.get(key) == value for key, value in filters.items())
        ]
        if order_by:
            rows.sort(key=lambda doc: str(doc.get(order_by.field, "")), reverse=order_by.descending)
        return rows

    async def fetch_by_id(self, name, doc_id):
        self._record("fetch_by_id", name)
        for doc in self.collections.get(name, []):
            if doc.get("id") == doc_id:
                return dict(doc)
        return None

    async def insert(self, name, doc):
        self._record("insert", name)
        doc = dict(doc)
        doc.setdefault("id", str(uuid.uuid4()))
        self.collections.setdefault(name, []).append(doc)
        return doc["id"]

    async def update(self, name, doc_id, fields):
        self._record("update", name)
        for doc in self.collections.get(name, []):
            if doc.get("id") == doc_id:
                doc.update(fields)
                return True
        return False

    async def delete(self, name, doc_id):
        self._record("delete", name)
        docs = self.collections.get(name, [])
        for index, doc in enumerate(docs):
            if doc.get("id") == doc_id:
                del docs[index]
                return True
        return False

    def get(self, name, doc_id):
        return next((doc for doc in self.collections.get(name, []) if doc.get("id") == doc_id), None)


def bank(bank_id, city="Lagos", **fields):
    return {"id": bank_id, "name": f"Bank {bank_id}", "address": "1 Main St", "city": city,
            "phone": "0800", "email": f"{bank_id}@example.org", "status": "active",
            "approved": True, **fields}


def stock(item_id, bank_id, blood_type="O+", units=5):
    return {"id": item_id, "bloodBankId": bank_id, "bloodType": blood_type, "availableUnits": units}


def campaign(campaign_id, bank_id="X", location="Lagos", status="approved", created_at=None, blood_types=()):
    doc = {"id": campaign_id, "title": f"Drive {campaign_id}", "bloodBankId": bank_id,
           "location": location, "status": status, "bloodTypes": list(blood_types)}
    if created_at is not None:
        doc["createdAt"] = created_at
    return doc


def run(coro):
    return asyncio.run(coro)


def make_token(**claims):
    return jwt.encode({"sub": "user-1", **claims}, JWT_SECRET, algorithm="HS256")


@pytest.fixture
def settings():
    return Settings(jwt_secret=JWT_SECRET, environment="test", log_level="WARNING")


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def client(store, settings):
    return TestClient(create_app(store=store, settings=settings))


@pytest.fixture
def seeded_store(store):
    store.collections[BLOOD_BANKS] = [bank("B1"), bank("B2"), bank("B3", city="Abuja")]
    store.collections[INVENTORY] = [
        stock("I1", "B1", "O+", 5),
        stock("I2", "B2", "O+", 0),
        stock("I3", "B3", "O+", 9),
        stock("I4", "B1", "A-", 2),
        stock("I5", "B1", "O+", 3),
    ]
    store.collections[CAMPAIGNS] = []
    return store
