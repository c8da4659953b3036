import os

import pytest

# API env vars must exist before src.dependencies builds settings
os.environ.setdefault("ERRORS_TABLE", "test-errors-table")
os.environ.setdefault("AWS_REGION", "us-east-1")

from src.sanitize import sanitize  # noqa: E402
from symbolicator.fetch import FetchResult  # noqa: E402


class InMemoryErrorsStore:
    """ErrorsStore stand-in keyed by error_id."""

    def __init__(self):
        self.items: dict[str, dict] = {}

    def insert(self, rec):
        item = rec.to_item()
        self.items[rec.error_id] = sanitize({k: v for k, v in item.items() if k not in ("pk", "sk")})
        return rec.error_id

    def get(self, error_id):
        return self.items.get(error_id)

    def list_recent(self, project_id=None, limit=100):
        items = [i for i in self.items.values() if not project_id or i["project_id"] == project_id]
        items.sort(key=lambda i: i["created_at"], reverse=True)
        return items[:limit]

    def delete_one(self, error_id):
        return self.items.pop(error_id, None) is not None

    def delete_many(self, error_ids):
        return sum(1 for i in set(error_ids) if self.delete_one(i))

    def delete_by_project(self, project_id):
        ids = [k for k, v in self.items.items() if v["project_id"] == project_id]
        return self.delete_many(ids)

    def delete_all(self):
        n = len(self.items)
        self.items.clear()
        return n


class StaticFetcher:
    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls = []

    def fetch_text(self, url):
        self.calls.append(url)
        body = self.responses.get(url)
        if body is None:
            return FetchResult(url=url, ok=False, status=404, error="HTTP 404")
        return FetchResult(url=url, ok=True, status=200, text=body)


class StubGeocoder:
    def __init__(self, result=None):
        self.result = result if result is not None else {"city": "Pune", "state": "Maharashtra", "country": "India"}
        self.calls = []

    def reverse(self, latitude, longitude):
        self.calls.append((latitude, longitude))
        if latitude is None or longitude is None:
            return {}
        return dict(self.result)


@pytest.fixture
def store():
    return InMemoryErrorsStore()


@pytest.fixture
def map_fetcher():
    return StaticFetcher()


@pytest.fixture
def geocoder():
    return StubGeocoder()


@pytest.fixture
def client(store, map_fetcher, geocoder):
    from fastapi.testclient import TestClient

    from src.app import app
    from src.dependencies import get_errors_store, get_geocoder, get_pipeline
    from symbolicator import SymbolicationPipeline

    app.dependency_overrides[get_errors_store] = lambda: store
    app.dependency_overrides[get_pipeline] = lambda: SymbolicationPipeline(map_fetcher)
    app.dependency_overrides[get_geocoder] = lambda: geocoder
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
