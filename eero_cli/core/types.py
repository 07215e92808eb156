"""
Core types for the eero cloud API.

These dataclasses mirror the JSON the API returns. Each one decodes with
from_dict() and re-encodes with to_dict(), keeping field order and raw
values (timestamps stay ISO-8601 strings) so payloads survive a round trip.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

from eero_cli.core.errors import APIError, CLIError, MalformedNetworkReference

T = TypeVar("T")

SUCCESS_CODE = 200

_TRAILING_DIGITS = re.compile(r"\d+\Z")


def extract_network_id(url: str) -> str:
    """
    Extract the numeric network ID from the end of a network URL.

    Args:
        url: Network URL, e.g. "/2.2/networks/12345"

    Returns:
        The trailing run of digits, e.g. "12345"

    Raises:
        MalformedNetworkReference: If the URL does not end in digits

    """
    match = _TRAILING_DIGITS.search(url or "")
    if not match:
        raise MalformedNetworkReference(url)
    return match.group(0)


def _encode(value: Any) -> Any:
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, list):
        return [_encode(v) for v in value]
    return value


# =============================================================================
# Session State
# =============================================================================


class SessionState(str, Enum):
    """Credential lifecycle of a client instance."""

    UNAUTHENTICATED = "unauthenticated"
    PENDING_VERIFICATION = "pending_verification"
    AUTHENTICATED = "authenticated"


# =============================================================================
# Envelope
# =============================================================================


@dataclass
class Meta:
    """Status metadata carried by every response."""

    code: int = 0
    server_time: str | None = None
    error: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Meta":
        """Create from API response dict."""
        return cls(
            code=data.get("code") or 0,
            server_time=data.get("server_time"),
            error=data.get("error"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert back to the API's JSON shape."""
        return {
            "code": self.code,
            "server_time": self.server_time,
            "error": self.error,
        }


@dataclass
class Envelope(Generic[T]):
    """
    The API's uniform response wrapper: {"meta": {...}, "data": <payload>}.

    The server echoes the HTTP status inside the body, so success requires
    both the transport status and meta.code to be 200. On failure the
    payload is never parsed and the envelope itself becomes the error.
    """

    meta: Meta
    data: T | None = None
    transport_status: int = SUCCESS_CODE

    @property
    def is_success(self) -> bool:
        """Check transport status, body status and error message together."""
        return self.transport_status == SUCCESS_CODE and self.meta.code == SUCCESS_CODE and not self.meta.error

    @property
    def code(self) -> int:
        """Status code to report: the body's, falling back to the transport's."""
        return self.meta.code or self.transport_status

    @property
    def error_message(self) -> str:
        """Human-readable failure description."""
        return f"[Eero API Error] Http Status {self.code}: {self.meta.error or ''}"

    def to_error(self) -> APIError:
        """Build the error to propagate for a failed envelope."""
        message = self.meta.error or f"Request failed with status {self.code}"
        return APIError(message, status=self.code, details={"meta": self.meta.to_dict()})

    @classmethod
    def from_dict(
        cls,
        body: dict[str, Any],
        parser: Callable[[Any], T] | None = None,
        transport_status: int = SUCCESS_CODE,
    ) -> "Envelope[T]":
        """
        Decode a response body.

        Args:
            body: Decoded JSON body
            parser: Optional function turning the raw payload into its type
            transport_status: HTTP status the body arrived with

        Returns:
            Envelope with typed data (raw data when no parser is given,
            None when the envelope failed)

        """
        if not isinstance(body, dict):
            raise APIError("Response is not a JSON object", status=transport_status, details={"body": body})

        meta = body.get("meta")
        envelope: Envelope[Any] = cls(
            meta=Meta.from_dict(meta if isinstance(meta, dict) else {}),
            transport_status=transport_status,
        )
        raw = body.get("data")
        if envelope.is_success and raw is not None:
            envelope.data = parser(raw) if parser else raw
        return envelope

    def to_dict(self) -> dict[str, Any]:
        """Convert back to the API's JSON shape."""
        result: dict[str, Any] = {"meta": self.meta.to_dict()}
        if self.data is not None:
            result["data"] = _encode(self.data)
        return result


# =============================================================================
# Login Types
# =============================================================================


@dataclass
class LoginAttempt:
    """A login in progress, waiting for its one-time code."""

    identifier: str
    user_token: str

    @classmethod
    def from_dict(cls, identifier: str, data: dict[str, Any]) -> "LoginAttempt":
        """Create from the login endpoint's payload."""
        return cls(identifier=identifier, user_token=data.get("user_token") or "")


# =============================================================================
# Network Types
# =============================================================================


@dataclass
class Network:
    """A network owned by the account."""

    url: str
    name: str | None = None
    created: str | None = None

    @property
    def network_id(self) -> str:
        """Numeric ID taken from the end of the URL."""
        return extract_network_id(self.url)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Network":
        """Create from API response dict."""
        return cls(
            url=data.get("url") or "",
            name=data.get("name"),
            created=data.get("created"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert back to the API's JSON shape."""
        return {
            "url": self.url,
            "name": self.name,
            "created": self.created,
        }


@dataclass
class NetworkList:
    """The networks summary embedded in the account."""

    count: int = 0
    data: list[Network] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NetworkList":
        """Create from API response dict."""
        return cls(
            count=data.get("count") or 0,
            data=[Network.from_dict(n) for n in data.get("data") or []],
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert back to the API's JSON shape."""
        return {
            "count": self.count,
            "data": [n.to_dict() for n in self.data],
        }


# =============================================================================
# Account Types
# =============================================================================


@dataclass
class Phone:
    """Account phone number."""

    value: str | None = None
    country_code: str | None = None
    national_number: str | None = None
    verified: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Phone":
        """Create from API response dict."""
        return cls(
            value=data.get("value"),
            country_code=data.get("country_code"),
            national_number=data.get("national_number"),
            verified=bool(data.get("verified", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert back to the API's JSON shape."""
        return {
            "value": self.value,
            "country_code": self.country_code,
            "national_number": self.national_number,
            "verified": self.verified,
        }


@dataclass
class Email:
    """Account email address."""

    value: str | None = None
    verified: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Email":
        """Create from API response dict."""
        return cls(value=data.get("value"), verified=bool(data.get("verified", False)))

    def to_dict(self) -> dict[str, Any]:
        """Convert back to the API's JSON shape."""
        return {"value": self.value, "verified": self.verified}


@dataclass
class Account:
    """The authenticated user's profile."""

    name: str | None = None
    phone: Phone = field(default_factory=Phone)
    email: Email = field(default_factory=Email)
    log_id: str | None = None
    networks: NetworkList = field(default_factory=NetworkList)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Account":
        """Create from API response dict."""
        return cls(
            name=data.get("name"),
            phone=Phone.from_dict(data.get("phone") or {}),
            email=Email.from_dict(data.get("email") or {}),
            log_id=data.get("log_id"),
            networks=NetworkList.from_dict(data.get("networks") or {}),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert back to the API's JSON shape."""
        return {
            "name": self.name,
            "phone": self.phone.to_dict(),
            "email": self.email.to_dict(),
            "log_id": self.log_id,
            "networks": self.networks.to_dict(),
        }


# =============================================================================
# Device Types
# =============================================================================


@dataclass
class DeviceInterface:
    """Radio details for a wireless device."""

    frequency: str | None = None
    frequency_unit: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DeviceInterface":
        """Create from API response dict."""
        return cls(frequency=data.get("frequency"), frequency_unit=data.get("frequency_unit"))

    def to_dict(self) -> dict[str, Any]:
        """Convert back to the API's JSON shape."""
        return {"frequency": self.frequency, "frequency_unit": self.frequency_unit}


@dataclass
class Device:
    """A client device attached to a network."""

    url: str
    mac: str | None = None
    manufacturer: str | None = None
    ip: str | None = None
    ips: list[str] | None = None
    nickname: str | None = None
    connected: bool = False
    wireless: bool = False
    connection_type: str | None = None
    last_active: str | None = None
    first_active: str | None = None
    interface: DeviceInterface | None = None
    device_type: str | None = None
    blacklisted: bool = False
    is_guest: bool = False
    paused: bool = False
    ssid: str | None = None
    display_name: str | None = None

    @property
    def name(self) -> str:
        """Best human label for the device."""
        return self.display_name or self.nickname or self.manufacturer or self.mac or ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Device":
        """Create from API response dict."""
        interface = data.get("interface")
        return cls(
            url=data.get("url") or "",
            mac=data.get("mac"),
            manufacturer=data.get("manufacturer"),
            ip=data.get("ip"),
            ips=data.get("ips"),
            nickname=data.get("nickname"),
            connected=bool(data.get("connected", False)),
            wireless=bool(data.get("wireless", False)),
            connection_type=data.get("connection_type"),
            last_active=data.get("last_active"),
            first_active=data.get("first_active"),
            # Wired devices report "interface": null
            interface=DeviceInterface.from_dict(interface) if isinstance(interface, dict) else None,
            device_type=data.get("device_type"),
            blacklisted=bool(data.get("blacklisted", False)),
            is_guest=bool(data.get("is_guest", False)),
            paused=bool(data.get("paused", False)),
            ssid=data.get("ssid"),
            display_name=data.get("display_name"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert back to the API's JSON shape."""
        return {
            "url": self.url,
            "mac": self.mac,
            "manufacturer": self.manufacturer,
            "ip": self.ip,
            "ips": list(self.ips) if self.ips is not None else None,
            "nickname": self.nickname,
            "connected": self.connected,
            "wireless": self.wireless,
            "connection_type": self.connection_type,
            "last_active": self.last_active,
            "first_active": self.first_active,
            "interface": self.interface.to_dict() if self.interface is not None else None,
            "device_type": self.device_type,
            "blacklisted": self.blacklisted,
            "is_guest": self.is_guest,
            "paused": self.paused,
            "ssid": self.ssid,
            "display_name": self.display_name,
        }


@dataclass
class DeviceScan:
    """Devices gathered across networks, with the networks that failed."""

    devices: list[Device] = field(default_factory=list)
    errors: dict[str, CLIError] = field(default_factory=dict)

    @property
    def is_complete(self) -> bool:
        """Check if every network answered."""
        return not self.errors

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON output."""
        return {
            "data": [d.to_dict() for d in self.devices],
            "errors": {url: e.to_dict() for url, e in self.errors.items()},
        }
