"""Client for the employee contact API proxied by /api/bio-data."""
import json
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.parse import quote
from urllib.request import Request, urlopen


class ContactClient:
    def __init__(self, base_url: str, timeout_seconds: float = 10.0):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_seconds

    def notify(self, employee_hash: str, contact_hash: str) -> Any:
        url = f"{self._base_url}/{quote(employee_hash, safe='')}/contact/{quote(contact_hash, safe='')}"
        body = json.dumps({"id": contact_hash}).encode("utf-8")
        req = Request(url, data=body, method="POST")
        req.add_header("Content-Type", "application/json")
        req.add_header("Accept", "application/json")

        try:
            with urlopen(req, timeout=self._timeout) as resp:
                raw = resp.read().decode("utf-8")
                return json.loads(raw) if raw else {}
        except HTTPError as e:
            error_body = ""
            try:
                error_body = e.read().decode("utf-8")[:500]
            except OSError:
                pass
            raise RuntimeError(f"Contact API error {e.code}: {error_body}") from e
        except URLError as e:
            raise RuntimeError(f"Contact API connection error: {e.reason}") from e
        except ValueError as e:
            raise RuntimeError(f"Contact API returned invalid JSON: {e}") from e
