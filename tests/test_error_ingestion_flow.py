"""End-to-end: a browser reports an error, it is symbolicated, listed and deleted.

Runs the real FastAPI app and SymbolicationPipeline; only the network edges
(source-map host, DynamoDB, Nominatim) are replaced.
"""
import json
import os
from decimal import Decimal

import pytest

os.environ.setdefault("ERRORS_TABLE", "test-errors-table")
os.environ.setdefault("AWS_REGION", "us-east-1")

from fastapi.testclient import TestClient  # noqa: E402

from src.app import app  # noqa: E402
from src.dependencies import get_errors_store, get_geocoder, get_pipeline  # noqa: E402
from src.sanitize import sanitize  # noqa: E402
from symbolicator import FetchResult, SourceMapCache, SymbolicationPipeline  # noqa: E402

CDN = "https://cdn.example.com/static"

# generated 1:50 -> app.js 42:10; generated 1:120 -> vendor.js 3:0
BUNDLE_MAP = {
    "version": 3,
    "file": "app.min.js",
    "sources": ["app.js", "vendor.js"],
    "names": [],
    "mappings": "kDAyCU,sECvCV",
    "sourcesContent": ["\n".join(f"app line {i}" for i in range(1, 61)), None],
}
VENDOR_SOURCE = "\n".join(f"vendor line {i}" for i in range(1, 11))

CHROME_STACK = (
    "TypeError: Cannot read properties of undefined (reading 'id')\n"
    f"    at renderRow ({CDN}/app.min.js:1:50)\n"
    "    at Array.map (<anonymous>)\n"
    f"    at Object.render ({CDN}/app.min.js:1:120)"
)
FIREFOX_STACK = (
    "TypeError: row is undefined\n"
    f"renderRow@{CDN}/app.min.js:1:50\n"
    f"@{CDN}/app.min.js:1:120"
)


class RecordingFetcher:
    def __init__(self, responses):
        self.responses = responses
        self.calls = []

    def fetch_text(self, url):
        self.calls.append(url)
        if url not in self.responses:
            return FetchResult(url=url, ok=False, status=404, error="HTTP 404")
        return FetchResult(url=url, ok=True, status=200, text=self.responses[url])


class FakeTable:
    """The slice of a boto3 Table the errors store drives."""

    def __init__(self):
        self.items = {}

    def put_item(self, Item):
        for value in Item["geo"].values():
            assert isinstance(value, Decimal)
        self.items[Item["pk"]] = Item


class DictErrorsStore:
    def __init__(self, table):
        self.table = table

    def insert(self, rec):
        self.table.put_item(Item=rec.to_item())
        return rec.error_id

    def _rows(self):
        return [sanitize({k: v for k, v in i.items() if k not in ("pk", "sk")}) for i in self.table.items.values()]

    def list_recent(self, project_id=None, limit=100):
        rows = [r for r in self._rows() if not project_id or r["project_id"] == project_id]
        return sorted(rows, key=lambda r: r["created_at"], reverse=True)[:limit]

    def delete_one(self, error_id):
        return self.table.items.pop(f"ERROR#{error_id}", None) is not None

    def delete_many(self, error_ids):
        return sum(1 for i in dict.fromkeys(error_ids) if self.delete_one(i))

    def delete_by_project(self, project_id):
        return self.delete_many([r["error_id"] for r in self._rows() if r["project_id"] == project_id])

    def delete_all(self):
        n = len(self.table.items)
        self.table.items.clear()
        return n


class NoGeocoder:
    def reverse(self, latitude, longitude):
        return {}


@pytest.fixture
def fetcher():
    return RecordingFetcher({
        f"{CDN}/app.min.js.map": json.dumps(BUNDLE_MAP),
        f"{CDN}/vendor.js": VENDOR_SOURCE,
    })


@pytest.fixture
def table():
    return FakeTable()


@pytest.fixture
def client(fetcher, table):
    pipeline = SymbolicationPipeline(fetcher, cache=SourceMapCache(max_entries=4))
    store = DictErrorsStore(table)
    app.dependency_overrides[get_pipeline] = lambda: pipeline
    app.dependency_overrides[get_errors_store] = lambda: store
    app.dependency_overrides[get_geocoder] = NoGeocoder
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def _post(client, stack, project):
    return client.post("/api/error", json={
        "error": {"name": "TypeError", "message": "Cannot read properties of undefined", "stack": stack},
        "deviceInfo": {"userAgent": "Mozilla/5.0"},
        "geo": {"lat": 51.5, "lon": -0.12},
        "projectId": project,
    })


def test_report_list_delete(client, fetcher):
    first = _post(client, CHROME_STACK, "dashboard")
    assert first.status_code == 200
    assert first.json()["mappedFrames"] == 2

    second = _post(client, FIREFOX_STACK, "checkout")
    assert second.json()["mappedFrames"] == 2

    # map fetched once thanks to the shared cache; remote source fetched per report
    assert fetcher.calls.count(f"{CDN}/app.min.js.map") == 1
    assert fetcher.calls.count(f"{CDN}/vendor.js") == 2

    listing = client.get("/api/error", params={"projectId": "dashboard"}).json()
    assert listing["count"] == 1
    record = listing["data"][0]
    assert record["city"] is None
    assert record["geo"] == {"lat": 51.5, "lon": -0.12}

    stack = record["mapped_stack"]
    assert [e.get("separator", False) for e in stack] == [False, True, False]
    assert (stack[0]["function"], stack[0]["source"], stack[0]["line"], stack[0]["column"]) == (
        "renderRow", "app.js", 42, 10,
    )
    assert ">>   42 | app line 42" in stack[0]["snippet"]
    assert stack[2]["function"] == "Object.render"
    assert stack[2]["source"] == "vendor.js"
    assert stack[2]["snippet"].startswith("──────── vendor.js ────────")
    assert ">>    3 | vendor line 3" in stack[2]["snippet"]

    gecko = client.get("/api/error", params={"projectId": "checkout"}).json()["data"][0]["mapped_stack"]
    assert gecko[0]["function"] == "renderRow"
    assert gecko[2]["function"] is None

    deleted = client.request("DELETE", "/api/error", json={"projectId": "dashboard"}).json()
    assert deleted["message"] == "Deleted 1 record(s) for project 'dashboard'."
    assert client.get("/api/error").json()["count"] == 1

    assert client.request("DELETE", "/api/error", json={"deleteAll": True}).json()["message"] == (
        "All 1 record(s) deleted."
    )
    assert client.get("/api/error").json()["count"] == 0
