"""Pytest configuration - loads .env and fakes the HTTP transport."""

import io
import json
import urllib.error
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pytest
from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(env_path)

BASE_URL = "https://api.test/2.2"


# =============================================================================
# Fake Transport
# =============================================================================


@dataclass
class RecordedRequest:
    """One request seen by the fake transport."""

    method: str
    path: str
    headers: dict[str, str]
    body: Any
    timeout: float | None

    @property
    def cookie(self) -> str | None:
        return self.headers.get("Cookie")


class FakeResponse:
    """Stands in for the object urlopen returns."""

    def __init__(self, status: int, payload: bytes):
        self.status = status
        self._payload = payload

    def read(self) -> bytes:
        return self._payload

    def __enter__(self) -> "FakeResponse":
        return self

    def __exit__(self, *exc: Any) -> bool:
        return False


class FakeTransport:
    """
    Replacement for urllib.request.urlopen.

    Responses are queued per (method, path); the last one queued for a
    route is reused once the queue is down to it.
    """

    def __init__(self):
        self.routes: dict[tuple[str, str], list[Any]] = {}
        self.requests: list[RecordedRequest] = []

    def add(self, method: str, path: str, body: Any = None, status: int = 200) -> None:
        """Queue a response. body may be a dict (sent as JSON), str/bytes (sent raw) or an exception."""
        self.routes.setdefault((method, path), []).append((status, body))

    def paths(self) -> list[str]:
        return [r.path for r in self.requests]

    def __call__(self, req, timeout=None):
        path = req.full_url[len(BASE_URL) + 1 :] if req.full_url.startswith(BASE_URL) else req.full_url
        body = json.loads(req.data.decode("utf-8")) if req.data else None
        self.requests.append(
            RecordedRequest(
                method=req.get_method(),
                path=path,
                headers=dict(req.header_items()),
                body=body,
                timeout=timeout,
            )
        )

        queue = self.routes.get((req.get_method(), path))
        if not queue:
            raise AssertionError(f"Unexpected request: {req.get_method()} {path}")
        status, response_body = queue.pop(0) if len(queue) > 1 else queue[0]

        if isinstance(response_body, BaseException):
            raise response_body

        if isinstance(response_body, bytes):
            payload = response_body
        elif isinstance(response_body, str):
            payload = response_body.encode("utf-8")
        elif response_body is None:
            payload = b""
        else:
            payload = json.dumps(response_body).encode("utf-8")

        if status >= 400:
            raise urllib.error.HTTPError(req.full_url, status, "Error", None, io.BytesIO(payload))
        return FakeResponse(status, payload)


def envelope(data: Any = None, code: int = 200, error: str | None = None) -> dict[str, Any]:
    """Build a response body the way the API wraps it."""
    body: dict[str, Any] = {"meta": {"code": code, "server_time": "2024-01-02T03:04:05.000Z"}}
    if error is not None:
        body["meta"]["error"] = error
    if data is not None:
        body["data"] = data
    return body


# =============================================================================
# Sample Payloads
# =============================================================================


def network_payload(network_id: int, name: str) -> dict[str, Any]:
    return {
        "url": f"/2.2/networks/{network_id}",
        "name": name,
        "created": "2021-05-01T10:00:00.000Z",
    }


def device_payload(mac: str, nickname: str | None = None, **overrides: Any) -> dict[str, Any]:
    payload = {
        "url": f"/2.2/devices/{mac.replace(':', '')}",
        "mac": mac,
        "manufacturer": "Acme Inc.",
        "ip": "192.168.4.20",
        "ips": ["192.168.4.20"],
        "nickname": nickname,
        "connected": True,
        "wireless": True,
        "connection_type": "wireless",
        "last_active": "2024-01-02T03:00:00.000Z",
        "first_active": "2023-06-01T12:00:00.000Z",
        "interface": {"frequency": "5", "frequency_unit": "GHz"},
        "device_type": "phone",
        "blacklisted": False,
        "is_guest": False,
        "paused": False,
        "ssid": "Home",
        "display_name": nickname or "Acme phone",
    }
    payload.update(overrides)
    return payload


def account_payload(networks: list[dict[str, Any]], count: int | None = None) -> dict[str, Any]:
    return {
        "name": "Jamie Doe",
        "phone": {
            "value": "+15555550100",
            "country_code": "1",
            "national_number": "5555550100",
            "verified": True,
        },
        "email": {"value": "user@example.com", "verified": True},
        "log_id": "LOG123",
        "networks": {"count": len(networks) if count is None else count, "data": networks},
    }


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def transport(monkeypatch):
    """Route all urllib traffic to a FakeTransport."""
    fake = FakeTransport()
    monkeypatch.setattr("urllib.request.urlopen", fake)
    return fake


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep tests away from the user's real session and config."""
    monkeypatch.delenv("EERO_BASE_URL", raising=False)
    monkeypatch.delenv("EERO_TIMEOUT", raising=False)
    monkeypatch.delenv("SESSION_FILE", raising=False)
    monkeypatch.setenv("EERO_SESSION_FILE", str(tmp_path / "eero_session.txt"))
