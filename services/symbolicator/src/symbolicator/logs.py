"""JSON-line structured logging shared by the symbolicator and the API."""
from __future__ import annotations

import json


def log_event(msg: str, **extra) -> None:
    entry = {"msg": msg}
    entry.update(extra)
    print(json.dumps(entry, default=str))
