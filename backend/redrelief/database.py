"""
Document store access
Wraps the Motor client behind a small interface so the aggregation services can be
handed any store at startup (and an in-memory one under test).
"""
import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, NamedTuple, Optional

from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import OperationFailure, PyMongoError

from redrelief.config import Settings

logger = logging.getLogger(__name__)

INVENTORY = "inventory"
BLOOD_BANKS = "blood_banks"
BLOOD_REQUESTS = "blood_requests"
CAMPAIGNS = "campaigns"

# NoQueryExecutionPlans (server running with notablescan) and the in-memory sort limit
# both mean the query needs an index the deployment does not have.
INDEX_FAILURE_CODES = {291, 292}


class StoreUnavailable(Exception):
    """The store rejected or could not serve a request."""


class IndexUnavailable(StoreUnavailable):
    """A filter/sort combination needs an index the store does not have.

    Only `DocumentStore.query` turns this into an unsupported result; anywhere else it is
    an ordinary store failure.
    """


class OrderBy(NamedTuple):
    field: str
    descending: bool = True


@dataclass
class QueryResult:
    rows: List[dict] = field(default_factory=list)
    index_unsupported: bool = False
    reason: Optional[str] = None

    @classmethod
    def ok(cls, rows: List[dict]) -> "QueryResult":
        return cls(rows=rows)

    @classmethod
    def unsupported(cls, reason: str) -> "QueryResult":
        return cls(index_unsupported=True, reason=reason)


class DocumentStore:
    """Collection access used by routers and services.

    Subclasses implement the five primitives; ``query`` layers the compound-query
    capability check on top of ``fetch_collection``.
    """

    compound_queries_enabled: bool = True

    async def fetch_collection(
        self,
        name: str,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[OrderBy] = None,
    ) -> List[dict]:
        raise NotImplementedError

    async def fetch_by_id(self, name: str, doc_id: str) -> Optional[dict]:
        raise NotImplementedError

    async def insert(self, name: str, doc: dict) -> str:
        raise NotImplementedError

    async def update(self, name: str, doc_id: str, fields: dict) -> bool:
        raise NotImplementedError

    async def delete(self, name: str, doc_id: str) -> bool:
        raise NotImplementedError

    async def close(self) -> None:
        return None

    async def query(
        self,
        name: str,
        filters: Dict[str, Any],
        order_by: Optional[OrderBy] = None,
    ) -> QueryResult:
        """Run a possibly index-dependent query.

        Returns ``QueryResult.unsupported`` instead of raising when the store cannot
        execute the filter/sort combination; any other failure propagates.
        """
        clauses = len(filters) + (1 if order_by else 0)
        if clauses > 1 and not self.compound_queries_enabled:
            return QueryResult.unsupported("compound queries are disabled for this store")
        try:
            rows = await self.fetch_collection(name, filters, order_by)
        except IndexUnavailable as exc:
            return QueryResult.unsupported(str(exc))
        return QueryResult.ok(rows)


class MotorDocumentStore(DocumentStore):
    def __init__(self, client: AsyncIOMotorClient, db_name: str, compound_queries_enabled: bool = True):
        self._client = client
        self._db = client[db_name]
        self.compound_queries_enabled = compound_queries_enabled

    @classmethod
    def from_settings(cls, settings: Settings) -> "MotorDocumentStore":
        client = AsyncIOMotorClient(
            settings.mongo_url,
            serverSelectionTimeoutMS=settings.mongo_timeout_ms,
        )
        logger.info("Connected document store %s/%s", settings.mongo_url, settings.db_name)
        return cls(client, settings.db_name, settings.compound_queries_enabled)

    async def fetch_collection(self, name, filters=None, order_by=None):
        try:
            cursor = self._db[name].find(filters or {}, {"_id": 0})
            if order_by:
                cursor = cursor.sort(order_by.field, DESCENDING if order_by.descending else ASCENDING)
            return await cursor.to_list(None)
        except OperationFailure as exc:
            if exc.code in INDEX_FAILURE_CODES:
                raise IndexUnavailable(str(exc)) from exc
            raise StoreUnavailable(str(exc)) from exc
        except PyMongoError as exc:
            raise StoreUnavailable(str(exc)) from exc

    async def fetch_by_id(self, name, doc_id):
        try:
            return await self._db[name].find_one({"id": doc_id}, {"_id": 0})
        except PyMongoError as exc:
            raise StoreUnavailable(str(exc)) from exc

    async def insert(self, name, doc):
        doc = dict(doc)
        doc.setdefault("id", str(uuid.uuid4()))
        try:
            await self._db[name].insert_one(doc)
        except PyMongoError as exc:
            raise StoreUnavailable(str(exc)) from exc
        return doc["id"]

    async def update(self, name, doc_id, fields):
        try:
            result = await self._db[name].update_one({"id": doc_id}, {"$set": fields})
        except PyMongoError as exc:
            raise StoreUnavailable(str(exc)) from exc
        return result.matched_count > 0

    async def delete(self, name, doc_id):
        try:
            result = await self._db[name].delete_one({"id": doc_id})
        except PyMongoError as exc:
            raise StoreUnavailable(str(exc)) from exc
        return result.deleted_count > 0

    async def close(self):
        self._client.close()


def get_store(request: Request) -> DocumentStore:
    return request.app.state.store
