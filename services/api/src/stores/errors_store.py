"""
Error reports store – one DynamoDB item per reported error.

Keys: pk = ERROR#<error_id>, sk = META.
A GSI on (project_id, created_at) serves per-project listing and bulk delete.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, Optional

import boto3
from boto3.dynamodb.conditions import Key

from ..sanitize import sanitize as _sanitize, to_dynamo

# Large client payloads never returned by listings
_LIST_EXCLUDED_FIELDS = ("screenshot",)


def _pk_error(error_id: str) -> str:
    return f"ERROR#{error_id}"


@dataclass(frozen=True)
class ErrorRecord:
    error_id: str
    project_id: str
    created_at: str  # ISO
    error: dict[str, Any]
    mapped_stack: list[dict[str, Any]] = field(default_factory=list)
    device_info: Any = None
    location_info: Any = None
    geo: dict[str, Any] = field(default_factory=dict)
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None

    def to_item(self) -> dict[str, Any]:
        item: dict[str, Any] = {
            "pk": _pk_error(self.error_id),
            "sk": "META",
            "error_id": self.error_id,
            "project_id": self.project_id,
            "created_at": self.created_at,
            "error": self.error,
            "mapped_stack": self.mapped_stack,
            "device_info": self.device_info,
            "location_info": self.location_info,
            "geo": self.geo,
            "city": self.city,
            "state": self.state,
            "country": self.country,
        }
        return to_dynamo(item)


def _public(item: dict[str, Any]) -> dict[str, Any]:
    out = {k: v for k, v in item.items() if k not in ("pk", "sk") and k not in _LIST_EXCLUDED_FIELDS}
    return _sanitize(out)


class ErrorsStore:
    def __init__(self, table_name: str, region: str, *, project_index: str = "project_id-created_at-index"):
        self.table = boto3.resource("dynamodb", region_name=region).Table(table_name)
        self.project_index = project_index

    # ── writes ───────────────────────────────────────────────────
    def insert(self, rec: ErrorRecord) -> str:
        self.table.put_item(Item=rec.to_item())
        return rec.error_id

    def delete_one(self, error_id: str) -> bool:
        resp = self.table.delete_item(
            Key={"pk": _pk_error(error_id), "sk": "META"},
            ReturnValues="ALL_OLD",
        )
        return bool(resp.get("Attributes"))

    def delete_many(self, error_ids: list[str]) -> int:
        return sum(1 for error_id in dict.fromkeys(error_ids) if self.delete_one(error_id))

    def delete_by_project(self, project_id: str) -> int:
        keys = [
            {"pk": item["pk"], "sk": item["sk"]}
            for item in self._query_project(project_id, projection="pk, sk")
        ]
        return self._batch_delete(keys)

    def delete_all(self) -> int:
        keys = [{"pk": item["pk"], "sk": item["sk"]} for item in self._scan(projection="pk, sk")]
        return self._batch_delete(keys)

    def _batch_delete(self, keys: list[dict[str, str]]) -> int:
        if not keys:
            return 0
        with self.table.batch_writer() as batch:
            for key in keys:
                batch.delete_item(Key=key)
        return len(keys)

    # ── reads ────────────────────────────────────────────────────
    def get(self, error_id: str) -> Optional[dict[str, Any]]:
        resp = self.table.get_item(Key={"pk": _pk_error(error_id), "sk": "META"})
        item = resp.get("Item")
        return _sanitize({k: v for k, v in item.items() if k not in ("pk", "sk")}) if item else None

    def list_recent(self, project_id: Optional[str] = None, limit: int = 100) -> list[dict[str, Any]]:
        """Newest first. Per-project via the GSI, otherwise a full scan."""
        if project_id:
            items = []
            for item in self._query_project(project_id, limit=limit):
                items.append(item)
                if len(items) >= limit:
                    break
        else:
            items = sorted(self._scan(), key=lambda i: i.get("created_at", ""), reverse=True)[:limit]
        return [_public(i) for i in items]

    def _query_project(
        self,
        project_id: str,
        *,
        projection: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> Iterator[dict[str, Any]]:
        kwargs: dict[str, Any] = {
            "IndexName": self.project_index,
            "KeyConditionExpression": Key("project_id").eq(project_id),
            "ScanIndexForward": False,  # descending created_at
        }
        if projection:
            kwargs["ProjectionExpression"] = projection
        if limit:
            kwargs["Limit"] = limit
        while True:
            resp = self.table.query(**kwargs)
            yield from resp.get("Items", [])
            last = resp.get("LastEvaluatedKey")
            if not last:
                return
            kwargs["ExclusiveStartKey"] = last

    def _scan(self, *, projection: Optional[str] = None) -> Iterator[dict[str, Any]]:
        kwargs: dict[str, Any] = {}
        if projection:
            kwargs["ProjectionExpression"] = projection
        while True:
            resp = self.table.scan(**kwargs)
            yield from resp.get("Items", [])
            last = resp.get("LastEvaluatedKey")
            if not last:
                return
            kwargs["ExclusiveStartKey"] = last
