import pytest
from fastapi.testclient import TestClient
from pymongo.errors import OperationFailure, ServerSelectionTimeoutError

from redrelief.database import IndexUnavailable, MotorDocumentStore, OrderBy, QueryResult, StoreUnavailable
from redrelief.server import create_app
from .conftest import InMemoryStore, run


class FailingCursor:
    def __init__(self, error):
        self.error = error

    def sort(self, field, direction):
        return self

    async def to_list(self, length):
        raise self.error


class FailingCollection:
    def __init__(self, error):
        self.error = error

    def find(self, filters, projection):
        return FailingCursor(self.error)


def motor_store(error):
    db = {"campaigns": FailingCollection(error)}
    return MotorDocumentStore({"redrelief": db}, "redrelief")


def test_single_clause_queries_never_count_as_compound():
    store = InMemoryStore({"campaigns": [{"id": "C1"}]}, compound_queries_enabled=False)
    result = run(store.query("campaigns", {}, OrderBy("createdAt")))
    assert result == QueryResult.ok([{"id": "C1"}])


def test_disabled_compound_queries_skip_the_store():
    store = InMemoryStore(compound_queries_enabled=False)
    result = run(store.query("campaigns", {"status": "approved"}, OrderBy("createdAt")))
    assert result.index_unsupported is True
    assert store.calls == []


def test_missing_index_is_reported_as_unsupported():
    store = motor_store(OperationFailure("No query solutions", code=291))
    result = run(store.query("campaigns", {"bloodBankId": "X"}, OrderBy("createdAt")))
    assert result.index_unsupported is True
    assert "No query solutions" in result.reason


@pytest.mark.parametrize("error", [
    OperationFailure("not authorized", code=13),
    ServerSelectionTimeoutError("no servers"),
])
def test_other_driver_errors_propagate(error):
    store = motor_store(error)
    with pytest.raises(StoreUnavailable):
        run(store.query("campaigns", {"bloodBankId": "X"}, OrderBy("createdAt")))


def test_missing_index_outside_query_is_a_store_failure():
    store = motor_store(OperationFailure("No query solutions", code=291))
    with pytest.raises(StoreUnavailable):
        run(store.fetch_collection("campaigns"))
    assert issubclass(IndexUnavailable, StoreUnavailable)


def test_failed_full_scan_after_missing_index_reports_details(settings):
    store = motor_store(OperationFailure("No query solutions", code=291))
    client = TestClient(create_app(store=store, settings=settings))

    r = client.get("/api/campaigns/blood-bank/X")
    assert r.status_code == 500
    body = r.json()
    assert body["success"] is False
    assert body["error"] == "Failed to fetch campaigns by blood bank"
    assert "No query solutions" in body["details"]
