"""Operator-facing error messages for Azure Management API failures."""

from typing import NamedTuple

from azrg_inventory.core.constants import BANNER_WIDTH

AZURE_STATUS_URL = "https://azure.status.microsoft/status"


class ErrorGuide(NamedTuple):
    title: str
    reason: str
    suggestions: tuple[str, ...]


class ErrorMessageHelper:
    """Turn a failed listing call into a banner with likely causes and fixes."""

    HTTP_GUIDES = {
        400: ErrorGuide(
            "Bad Request",
            "Azure Resource Manager rejected the request parameters",
            (
                "Verify the subscription ID is a GUID (xxxxxxxx-xxxx-xxxx-xxxx-xxxxxxxxxxxx)",
                "Check that the resource group name contains no unsupported characters",
            ),
        ),
        401: ErrorGuide(
            "Authentication Failed",
            "The access token is invalid or has expired",
            (
                "Get a fresh token: az account get-access-token --query accessToken -o tsv",
                "Set it via --access-token or the AZURE_ACCESS_TOKEN environment variable",
                "Or omit the token and sign in with 'az login' to use the Azure credential chain",
            ),
        ),
        403: ErrorGuide(
            "Access Forbidden",
            "The identity does not have permission to read this subscription",
            (
                "Assign the Reader role on the subscription to the signed-in identity",
                "Confirm the token was issued for the correct tenant",
            ),
        ),
        404: ErrorGuide(
            "Not Found",
            "The subscription or resource group does not exist",
            (
                "Verify the subscription ID (az account list -o table)",
                "The resource group may have been deleted while the inventory was running",
            ),
        ),
        429: ErrorGuide(
            "Throttled",
            "Azure Resource Manager kept throttling requests after every retry",
            (
                "Lower the concurrency (--max-concurrency 3)",
                "Allow more retries (--max-retries 8) or a longer base delay (--retry-base-delay 2)",
                "Wait a few minutes before running again",
            ),
        ),
        500: ErrorGuide(
            "Internal Server Error",
            "Azure Resource Manager failed to process the request",
            ("Retry in a few minutes", f"Check Azure status: {AZURE_STATUS_URL}"),
        ),
        502: ErrorGuide(
            "Bad Gateway",
            "A gateway in front of Azure Resource Manager returned an invalid response",
            ("Retry in a few minutes",),
        ),
        503: ErrorGuide(
            "Service Unavailable",
            "Azure Resource Manager is temporarily unavailable",
            ("Wait 5-10 minutes and retry", f"Check Azure status: {AZURE_STATUS_URL}"),
        ),
        504: ErrorGuide(
            "Gateway Timeout",
            "Azure Resource Manager did not answer in time",
            (
                "Very large subscriptions can be slow to list; retry during off-peak hours",
                "Lower the concurrency (--max-concurrency 3)",
            ),
        ),
    }

    # Keyed by requests exception class name; subclasses are matched through their MRO
    NETWORK_GUIDES = {
        "ConnectionError": ErrorGuide(
            "Connection Failed",
            "Cannot establish connection to management.azure.com",
            (
                "Check network access to management.azure.com on port 443",
                "Set HTTPS_PROXY if a corporate proxy is required",
                "Verify DNS resolution: nslookup management.azure.com",
            ),
        ),
        "Timeout": ErrorGuide(
            "Timed Out",
            "management.azure.com did not respond before the request timeout",
            ("Retry on a more stable connection", "Lower the concurrency (--max-concurrency 3)"),
        ),
        "SSLError": ErrorGuide(
            "TLS Failure",
            "The TLS certificate presented for management.azure.com could not be verified",
            (
                "Update the CA bundle: pip install --upgrade certifi",
                "Set REQUESTS_CA_BUNDLE if a TLS-inspecting proxy is in use",
            ),
        ),
    }

    @staticmethod
    def _banner(header: str, context: list[str], guide: ErrorGuide) -> str:
        rule = "=" * BANNER_WIDTH
        lines = [rule, header, rule, *context, "", "Why this happened:", f"  {guide.reason}", "", "How to fix it:"]
        lines.extend(f"  {n}. {tip}" for n, tip in enumerate(guide.suggestions, 1))
        return "\n".join(lines)

    @classmethod
    def get_http_error_message(cls, status_code: int, operation: str = "API call") -> str:
        guide = cls.HTTP_GUIDES.get(status_code) or ErrorGuide(
            f"HTTP {status_code}",
            "Azure Resource Manager returned an unexpected status",
            ("Re-run with --log-level DEBUG and check the log file",),
        )
        return cls._banner(f"HTTP {status_code}: {guide.title}", [f"Operation: {operation}"], guide)

    @classmethod
    def get_network_error_message(cls, error: BaseException, operation: str = "operation") -> str:
        """Message for a request that never produced an HTTP response."""
        guide = next(
            (cls.NETWORK_GUIDES[base.__name__] for base in type(error).__mro__ if base.__name__ in cls.NETWORK_GUIDES),
            ErrorGuide("Network Error", "A network error occurred", ("Retry in a few moments",)),
        )
        return cls._banner(
            f"Network Error: {type(error).__name__}",
            [f"During: {operation}", f"Error details: {error!s}"],
            guide,
        )
