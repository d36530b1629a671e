"""Pytest configuration and fixtures for azrg-inventory tests"""

import logging
from unittest.mock import Mock

import pytest
from helpers import SUBSCRIPTION_ID

from azrg_inventory.core.colors import ConsoleColors


@pytest.fixture(autouse=True)
def no_colors():
    """Keep console output free of ANSI codes in assertions"""
    previous = ConsoleColors.is_enabled()
    ConsoleColors.set_enabled(False)
    yield
    ConsoleColors.set_enabled(previous)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Tests never see credentials or tuning variables from the host"""
    for name in (
        "AZURE_SUBSCRIPTION_ID",
        "AZURE_ACCESS_TOKEN",
        "MAX_CONCURRENCY",
        "MAX_RETRIES",
        "RETRY_BASE_DELAY",
        "RETRY_MAX_JITTER",
        "LOG_LEVEL",
        "LOG_FORMAT",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def mock_logger():
    """Create a mock logger"""
    logger = Mock(spec=logging.Logger)
    logger.info = Mock()
    logger.debug = Mock()
    logger.warning = Mock()
    logger.error = Mock()
    return logger


@pytest.fixture
def resource_group_payload():
    """Sample resource group listing"""
    return {
        "value": [
            {
                "id": f"/subscriptions/{SUBSCRIPTION_ID}/resourceGroups/DefaultResourceGroup-EUS",
                "name": "DefaultResourceGroup-EUS",
                "location": "eastus",
                "properties": {"provisioningState": "Succeeded"},
            },
            {
                "id": f"/subscriptions/{SUBSCRIPTION_ID}/resourceGroups/my-custom-rg",
                "name": "my-custom-rg",
                "location": "westeurope",
                "properties": {"provisioningState": "Succeeded"},
            },
        ]
    }


@pytest.fixture
def resources_payload():
    """Sample resource listing for one resource group"""
    return {
        "value": [
            {
                "id": "/subscriptions/x/resourceGroups/rg/providers/Microsoft.Web/sites/app",
                "name": "app",
                "type": "Microsoft.Web/sites",
                "createdTime": "2023-05-02T10:00:00.1234567Z",
            },
            {
                "id": "/subscriptions/x/resourceGroups/rg/providers/Microsoft.Storage/storageAccounts/st",
                "name": "st",
                "type": "Microsoft.Storage/storageAccounts",
                "createdTime": "2021-03-04T08:30:00Z",
            },
            {
                "id": "/subscriptions/x/resourceGroups/rg/providers/Microsoft.Network/networkWatchers/nw",
                "name": "nw",
                "type": "Microsoft.Network/networkWatchers",
            },
        ]
    }


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo handlers installed by setup_logging during a test"""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            handler.close()
            root.removeHandler(handler)
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
