"""Credential loading and resolution helpers for azrg-inventory."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

from azure.core.exceptions import ClientAuthenticationError
from azure.identity import CredentialUnavailableError, DefaultAzureCredential
from dotenv import load_dotenv

from azrg_inventory.core.constants import MANAGEMENT_SCOPE
from azrg_inventory.core.exceptions import ConfigurationError

ENV_SUBSCRIPTION_ID = "AZURE_SUBSCRIPTION_ID"
ENV_ACCESS_TOKEN = "AZURE_ACCESS_TOKEN"


def normalize_credential_value(value: object) -> str:
    """Strip whitespace and surrounding quotes (common in .env files)."""
    if value is None:
        return ""
    s = str(value).strip()
    if len(s) >= 2 and s[0] == s[-1] and s[0] in {'"', "'"}:
        s = s[1:-1]
    return s


def bootstrap_dotenv(logger: logging.Logger) -> bool:
    """Load variables from a ``.env`` file in the working directory, if present.

    Existing environment variables are never overridden.
    """
    loaded = load_dotenv(override=False)
    if loaded:
        logger.debug(".env file found and loaded")
    else:
        logger.debug(".env file not found")
    return loaded


@dataclass
class ResolvedCredentials:
    """Subscription and token plus where each one came from."""

    subscription_id: str
    access_token: str = field(repr=False)
    subscription_source: str
    token_source: str


class CredentialResolver:
    """Resolve the subscription ID and bearer token for one run.

    Priority:
        1. Command-line flags
        2. ``AZURE_SUBSCRIPTION_ID`` / ``AZURE_ACCESS_TOKEN`` (``.env`` included)
        3. Token only: ``DefaultAzureCredential`` for the management scope
    """

    def __init__(self, logger: logging.Logger, use_credential_chain: bool = True, credential=None):
        self.logger = logger
        self.use_credential_chain = use_credential_chain
        self._credential = credential

    def _credential_chain(self):
        if self._credential is None:
            self._credential = DefaultAzureCredential(exclude_interactive_browser_credential=True)
        return self._credential

    def _token_from_chain(self) -> str:
        try:
            token = self._credential_chain().get_token(MANAGEMENT_SCOPE)
        except (ClientAuthenticationError, CredentialUnavailableError) as e:
            raise ConfigurationError(
                "Access token is required. Set via --access-token flag or "
                f"{ENV_ACCESS_TOKEN} environment variable, or sign in with 'az login'",
                field="access_token",
                details=str(e).splitlines()[0] if str(e) else None,
            ) from e
        return token.token

    def resolve(self, subscription_id: str | None = None, access_token: str | None = None) -> ResolvedCredentials:
        sub = normalize_credential_value(subscription_id)
        sub_source = "flag"
        if not sub:
            sub = normalize_credential_value(os.environ.get(ENV_SUBSCRIPTION_ID))
            sub_source = "environment"
        if not sub:
            raise ConfigurationError(
                f"Subscription ID is required. Set via --subscription-id flag or {ENV_SUBSCRIPTION_ID} "
                "environment variable",
                field="subscription_id",
            )

        token = normalize_credential_value(access_token)
        token_source = "flag"
        if not token:
            token = normalize_credential_value(os.environ.get(ENV_ACCESS_TOKEN))
            token_source = "environment"
        if not token:
            if not self.use_credential_chain:
                raise ConfigurationError(
                    f"Access token is required. Set via --access-token flag or {ENV_ACCESS_TOKEN} "
                    "environment variable",
                    field="access_token",
                )
            self.logger.debug("No access token supplied, requesting one from DefaultAzureCredential")
            token = self._token_from_chain()
            token_source = "azure-identity"

        self.logger.debug(f"Subscription ID from {sub_source}, access token from {token_source}")
        return ResolvedCredentials(sub, token, sub_source, token_source)
