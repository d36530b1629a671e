"""
Tests for the error taxonomy
"""

import pytest

from azrg_inventory.core.exceptions import (
    FETCH_HTTP_STATUS,
    FETCH_TRANSPORT,
    ConfigurationError,
    FetchError,
    InventoryError,
    OutputError,
    ParseError,
    TransportError,
)


class TestFetchError:
    def test_unknown_kind_rejected(self):
        with pytest.raises(ValueError):
            FetchError("timeout", "nope")

    def test_str_with_status_and_body(self):
        error = FetchError(FETCH_HTTP_STATUS, "API request failed", status_code=404, body="NotFound")
        assert str(error) == "API request failed (status 404): NotFound"

    def test_str_transport(self):
        assert str(FetchError(FETCH_TRANSPORT, "Request failed for x: ConnectionError")) == (
            "Request failed for x: ConnectionError"
        )


class TestTransportError:
    def test_str(self):
        error = TransportError(
            "Failed to fetch resource groups", operation="resource groups", status_code=403, details="Forbidden"
        )
        assert str(error) == "Failed to fetch resource groups - HTTP 403 - during resource groups - Forbidden"

    def test_str_minimal(self):
        assert str(TransportError("Failed")) == "Failed"


def test_hierarchy():
    for cls in (ConfigurationError, TransportError, ParseError, OutputError):
        assert issubclass(cls, InventoryError)
    assert issubclass(FetchError, InventoryError)
    assert not issubclass(FetchError, TransportError)


def test_details_in_message():
    assert str(ParseError("Invalid timestamp", details="yesterday")) == "Invalid timestamp: yesterday"
    assert str(OutputError("Failed to write CSV file", output_path="/x")) == "Failed to write CSV file"
