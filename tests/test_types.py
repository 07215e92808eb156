"""
Tests for the envelope model and payload types.

Run with: python -m pytest tests/test_types.py -v
"""

import json

import pytest
from conftest import account_payload, device_payload, network_payload

from eero_cli.core.errors import APIError, MalformedNetworkReference, TransportError
from eero_cli.core.types import (
    Account,
    Device,
    DeviceScan,
    Envelope,
    Meta,
    Network,
    extract_network_id,
)

# =============================================================================
# Envelope
# =============================================================================


class TestEnvelope:
    """The single success predicate and the envelope-as-error duality."""

    def test_success_requires_both_statuses(self):
        env = Envelope.from_dict({"meta": {"code": 200}, "data": {"x": 1}})
        assert env.is_success
        assert env.data == {"x": 1}

    def test_body_code_mismatch_is_failure(self):
        env = Envelope.from_dict({"meta": {"code": 500, "error": "boom"}}, transport_status=200)
        assert not env.is_success

    def test_transport_status_mismatch_is_failure(self):
        env = Envelope.from_dict({"meta": {"code": 200}}, transport_status=503)
        assert not env.is_success
        assert env.code == 200

    def test_error_message_alone_is_failure(self):
        env = Envelope.from_dict({"meta": {"code": 200, "error": "something off"}})
        assert not env.is_success

    def test_missing_meta_is_failure(self):
        env = Envelope.from_dict({"data": {"x": 1}})
        assert not env.is_success
        assert env.data is None

    def test_non_object_meta_is_failure(self):
        env = Envelope.from_dict({"meta": "oops", "data": {"x": 1}})
        assert not env.is_success
        assert env.data is None
        assert env.meta.code == 0

    def test_failed_envelope_does_not_parse_payload(self):
        calls = []
        env = Envelope.from_dict(
            {"meta": {"code": 401, "error": "invalid session"}, "data": {"x": 1}},
            parser=lambda d: calls.append(d),
        )
        assert env.data is None
        assert calls == []

    def test_parser_applied_on_success(self):
        env = Envelope.from_dict({"meta": {"code": 200}, "data": [network_payload(1, "Home")]},
                                 parser=lambda d: [Network.from_dict(n) for n in d])
        assert env.data == [Network.from_dict(network_payload(1, "Home"))]

    def test_error_message_composition(self):
        env = Envelope.from_dict({"meta": {"code": 401, "error": "invalid session"}})
        assert env.error_message == "[Eero API Error] Http Status 401: invalid session"

    def test_to_error(self):
        env = Envelope.from_dict({"meta": {"code": 401, "error": "invalid session"}}, transport_status=401)
        error = env.to_error()
        assert isinstance(error, APIError)
        assert error.status == 401
        assert error.message == "invalid session"
        assert str(error) == "[Eero API Error] Http Status 401: invalid session"

    def test_to_error_without_message_falls_back_to_transport_status(self):
        error = Envelope.from_dict({}, transport_status=502).to_error()
        assert error.status == 502
        assert "502" in error.message

    def test_non_object_body_is_api_error(self):
        with pytest.raises(APIError) as excinfo:
            Envelope.from_dict(["not", "an", "envelope"], transport_status=200)
        assert excinfo.value.status == 200

    def test_meta_defaults(self):
        meta = Meta.from_dict({})
        assert meta.code == 0
        assert meta.server_time is None
        assert meta.error is None


# =============================================================================
# Network ID extraction
# =============================================================================


class TestExtractNetworkId:
    """Trailing-digit network references."""

    @pytest.mark.parametrize(
        "url,expected",
        [
            ("/2.2/networks/12345", "12345"),
            ("https://api-user.e2ro.com/2.2/networks/987", "987"),
            ("networks/a1b22", "22"),
            ("42", "42"),
        ],
    )
    def test_extracts_trailing_digits(self, url, expected):
        assert extract_network_id(url) == expected

    @pytest.mark.parametrize("url", ["/2.2/networks/abc", "/2.2/networks/12345/", "", "/2.2/networks/12a"])
    def test_malformed(self, url):
        with pytest.raises(MalformedNetworkReference) as excinfo:
            extract_network_id(url)
        assert excinfo.value.url == url

    def test_network_id_property(self):
        assert Network.from_dict(network_payload(555, "Cabin")).network_id == "555"


# =============================================================================
# Round trips
# =============================================================================


class TestRoundTrip:
    """Decoding then re-encoding keeps every known field byte-for-byte."""

    def test_device(self):
        raw = device_payload("aa:bb:cc:dd:ee:ff", nickname=None, interface={"frequency": "2.4", "frequency_unit": "GHz"})
        assert json.dumps(Device.from_dict(raw).to_dict()) == json.dumps(raw)

    def test_wired_device_with_nulls(self):
        raw = device_payload(
            "aa:bb:cc:00:00:09",
            wireless=False,
            connection_type="wired",
            interface=None,
            ips=None,
            ssid=None,
        )
        assert json.dumps(Device.from_dict(raw).to_dict()) == json.dumps(raw)

    def test_account(self):
        raw = account_payload([network_payload(1, "Home"), network_payload(2, "Office")])
        assert json.dumps(Account.from_dict(raw).to_dict()) == json.dumps(raw)

    def test_envelope_with_device_list(self):
        raw = {
            "meta": {"code": 200, "server_time": "2024-01-02T03:04:05.000Z", "error": None},
            "data": [device_payload("aa:bb:cc:00:00:01"), device_payload("aa:bb:cc:00:00:02", "Laptop")],
        }
        env = Envelope.from_dict(raw, parser=lambda d: [Device.from_dict(x) for x in d])
        assert json.dumps(env.to_dict()) == json.dumps(raw)


# =============================================================================
# Device helpers
# =============================================================================


class TestDevice:
    """Device conveniences."""

    def test_name_prefers_display_name(self):
        device = Device.from_dict(device_payload("aa:bb:cc:00:00:01", "Laptop", display_name="Work laptop"))
        assert device.name == "Work laptop"

    def test_name_falls_back_to_mac(self):
        device = Device(url="/2.2/devices/1", mac="aa:bb:cc:00:00:01")
        assert device.name == "aa:bb:cc:00:00:01"

    def test_wired_device_with_null_interface(self):
        device = Device.from_dict(device_payload("aa:bb:cc:00:00:01", wireless=False, interface=None))
        assert device.interface is None
        assert not device.wireless

    def test_scan_to_dict(self):
        scan = DeviceScan(
            devices=[Device.from_dict(device_payload("aa:bb:cc:00:00:01"))],
            errors={"/2.2/networks/2": TransportError("Connection error: refused")},
        )
        result = scan.to_dict()
        assert not scan.is_complete
        assert result["data"][0]["mac"] == "aa:bb:cc:00:00:01"
        assert result["errors"] == {"/2.2/networks/2": {"error": "Connection error: refused"}}
