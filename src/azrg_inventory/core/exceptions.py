"""Custom exceptions for azrg-inventory.

Only a failed listing call is fatal to a run. Per-entity failures
(``FetchError`` and ``ParseError``) are recovered by the worker pool and
rendered inline next to the entity they belong to.
"""

# FetchError kinds
FETCH_TRANSPORT = "transport"
FETCH_RATE_LIMITED = "rate-limited-exhausted"
FETCH_HTTP_STATUS = "http-status"
FETCH_KINDS = (FETCH_TRANSPORT, FETCH_RATE_LIMITED, FETCH_HTTP_STATUS)


class InventoryError(Exception):
    """Base exception for all inventory errors."""

    def __init__(self, message: str, details: str | None = None):
        self.message = message
        self.details = details
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class ConfigurationError(InventoryError):
    """Exception raised for configuration-related errors.

    Examples:
        - Missing subscription ID
        - No access token and no usable Azure credential
    """

    def __init__(self, message: str, field: str | None = None, details: str | None = None):
        self.field = field
        super().__init__(message, details)


class TransportError(InventoryError):
    """A listing call failed; the whole run is aborted.

    There is no per-entity granularity before the entity list is known, so
    this error always propagates to the command entry point.
    """

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        status_code: int | None = None,
        details: str | None = None,
        original_error: Exception | None = None,
    ):
        self.operation = operation
        self.status_code = status_code
        self.original_error = original_error
        super().__init__(message, details)

    def __str__(self) -> str:
        parts = [self.message]
        if self.status_code:
            parts.append(f"HTTP {self.status_code}")
        if self.operation:
            parts.append(f"during {self.operation}")
        if self.details:
            parts.append(self.details)
        return " - ".join(parts)


class FetchError(InventoryError):
    """A single outbound call failed.

    Attributes:
        kind: One of ``transport``, ``rate-limited-exhausted`` or ``http-status``
        status_code: HTTP status of the last response, if any
        body: Body of the last response, if any
        attempts: Number of requests issued before giving up
    """

    def __init__(
        self,
        kind: str,
        message: str,
        status_code: int | None = None,
        body: str = "",
        attempts: int = 1,
        original_error: Exception | None = None,
    ):
        if kind not in FETCH_KINDS:
            raise ValueError(f"Unknown fetch error kind: {kind}")
        self.kind = kind
        self.status_code = status_code
        self.body = body
        self.attempts = attempts
        self.original_error = original_error
        super().__init__(message, body or None)

    def __str__(self) -> str:
        if self.status_code is not None:
            text = f"{self.message} (status {self.status_code})"
        else:
            text = self.message
        if self.body:
            text = f"{text}: {self.body}"
        return text


class ParseError(InventoryError):
    """Response body was not valid JSON or did not have the expected shape."""


class OutputError(InventoryError):
    """Exception raised when a report file cannot be written."""

    def __init__(self, message: str, output_path: str | None = None, details: str | None = None):
        self.output_path = output_path
        super().__init__(message, details)
