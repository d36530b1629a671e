"""Shared test doubles and payload builders"""

import json
import threading
from datetime import UTC, datetime

import requests

SUBSCRIPTION_ID = "00000000-1111-2222-3333-444444444444"


def make_response(status_code: int = 200, payload=None, text: str | None = None) -> requests.Response:
    """Build a real requests.Response without touching the network"""
    response = requests.Response()
    response.status_code = status_code
    if text is None:
        text = json.dumps(payload if payload is not None else {"value": []})
    response._content = text.encode("utf-8")
    response._content_consumed = True
    response.encoding = "utf-8"
    return response


class FakeSession:
    """Stand-in for requests.Session that replays scripted outcomes.

    Each outcome is a Response, an exception instance (raised) or a callable
    taking the URL and returning either of those.
    """

    def __init__(self, outcomes=None, default=None):
        self.outcomes = list(outcomes or [])
        self.default = default
        self.calls: list[str] = []
        self.timeouts: list[float] = []
        self.headers: dict[str, str] = {}
        self.closed = False
        self._lock = threading.Lock()

    def get(self, url, timeout=None):
        with self._lock:
            self.calls.append(url)
            self.timeouts.append(timeout)
            outcome = self.outcomes.pop(0) if self.outcomes else self.default
        if callable(outcome) and not isinstance(outcome, requests.Response):
            outcome = outcome(url)
        if isinstance(outcome, BaseException):
            raise outcome
        if outcome is None:
            return make_response(200, {"value": []})
        return outcome

    def close(self):
        self.closed = True


def ts(year: int, month: int = 1, day: int = 1) -> datetime:
    return datetime(year, month, day, tzinfo=UTC)


def storage_account_payload(
    name: str,
    location: str = "eastus",
    account_type: str = "Standard_LRS",
    creation_time: str | None = "2022-01-01T00:00:00Z",
    resource_group: str = "rg-storage",
) -> dict:
    return {
        "id": f"/subscriptions/{SUBSCRIPTION_ID}/resourceGroups/{resource_group}"
        f"/providers/Microsoft.Storage/storageAccounts/{name}",
        "name": name,
        "location": location,
        "type": "Microsoft.Storage/storageAccounts",
        "kind": "StorageV2",
        "properties": {
            "provisioningState": "Succeeded",
            "creationTime": creation_time,
            "accountType": account_type,
            "primaryEndpoints": {
                "blob": f"https://{name}.blob.core.windows.net/",
                "queue": f"https://{name}.queue.core.windows.net/",
                "table": f"https://{name}.table.core.windows.net/",
                "file": f"https://{name}.file.core.windows.net/",
            },
        },
        "tags": {"env": "test"},
    }
