"""
Tests for argument parsing, configuration and the command entry point
"""

import argparse
from unittest.mock import patch

import pytest
from helpers import SUBSCRIPTION_ID, FakeSession, make_response, storage_account_payload

from azrg_inventory.api.client import AzureManagementClient
from azrg_inventory.api.transport import RateLimitedTransport
from azrg_inventory.cli.main import (
    EXIT_CONFIG_ERROR,
    EXIT_ERROR,
    EXIT_INTERRUPTED,
    EXIT_OK,
    main,
)
from azrg_inventory.cli.parser import parse_arguments
from azrg_inventory.core.config import (
    InventoryConfig,
    RetryConfig,
    coerce_concurrency,
    env_numeric_default,
)
from azrg_inventory.core.exceptions import OutputError


class TestParseArguments:
    """Command-line parsing and environment defaults"""

    def test_defaults(self):
        args = parse_arguments([])
        assert args.command == "resource-groups"
        assert args.max_concurrency == 10
        assert args.max_retries == 5
        assert args.retry_base_delay == 1.0
        assert args.list_resources is False
        assert args.porcelain is False
        assert args.output_csv == ""
        assert args.log_level == "INFO"

    def test_storage_accounts_command(self):
        assert parse_arguments(["storage-accounts"]).command == "storage-accounts"

    def test_unknown_command_rejected(self):
        with pytest.raises(SystemExit):
            parse_arguments(["virtual-machines"])

    def test_flags(self):
        args = parse_arguments(
            [
                "--subscription-id",
                SUBSCRIPTION_ID,
                "--access-token",
                "tok",
                "--list-resources",
                "--porcelain",
                "--output-csv",
                "out.csv",
                "--max-concurrency",
                "3",
                "--no-jitter",
            ]
        )
        assert args.subscription_id == SUBSCRIPTION_ID
        assert args.access_token == "tok"
        assert args.list_resources and args.porcelain and args.no_jitter
        assert args.output_csv == "out.csv"
        assert args.max_concurrency == 3

    def test_environment_defaults(self, monkeypatch):
        monkeypatch.setenv("MAX_CONCURRENCY", "4")
        monkeypatch.setenv("MAX_RETRIES", "2")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        args = parse_arguments([])

        assert args.max_concurrency == 4
        assert args.max_retries == 2
        assert args.log_level == "DEBUG"

    def test_flag_beats_environment(self, monkeypatch):
        monkeypatch.setenv("MAX_CONCURRENCY", "4")
        assert parse_arguments(["--max-concurrency", "8"]).max_concurrency == 8

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            parse_arguments(["--version"])
        assert exc_info.value.code == 0
        assert "azrginventory" in capsys.readouterr().out


class TestEnvNumericDefault:
    def test_valid(self, monkeypatch):
        monkeypatch.setenv("RETRY_BASE_DELAY", "0.25")
        assert env_numeric_default("RETRY_BASE_DELAY", float, 1.0) == 0.25

    @pytest.mark.parametrize("raw", ["abc", "-3", "nan", "inf"])
    def test_invalid_falls_back(self, monkeypatch, raw):
        monkeypatch.setenv("RETRY_BASE_DELAY", raw)
        assert env_numeric_default("RETRY_BASE_DELAY", float, 1.0) == 1.0

    def test_unset(self):
        assert env_numeric_default("MAX_RETRIES", int, 5) == 5


class TestInventoryConfig:
    """Configuration built from parsed arguments"""

    def test_from_args(self):
        args = parse_arguments(["storage-accounts", "--max-retries", "7", "--retry-max-jitter", "0.5", "--quiet"])

        config = InventoryConfig.from_args(args, "sub", "token")

        assert config.command == "storage-accounts"
        assert config.subscription_id == "sub"
        assert config.retry.max_retries == 7
        assert config.retry.max_jitter == 0.5
        assert config.workers.show_progress is False
        assert "token" not in repr(config)

    def test_zero_concurrency_means_default(self):
        config = InventoryConfig.from_args(parse_arguments(["--max-concurrency", "0"]))
        assert config.workers.max_concurrency == 10

    def test_negative_concurrency_coerced(self):
        config = InventoryConfig.from_args(parse_arguments(["--max-concurrency", "-4"]))
        assert config.workers.max_concurrency == 1

    def test_from_bare_namespace(self):
        config = InventoryConfig.from_args(argparse.Namespace())
        assert config.command == "resource-groups"
        assert config.retry == RetryConfig(max_retries=5, base_delay=1.0, max_jitter=1.0, jitter=True)

    def test_porcelain_disables_progress(self):
        assert InventoryConfig(porcelain=True).workers.show_progress is False

    def test_coerce_concurrency(self, mock_logger):
        assert coerce_concurrency(3, mock_logger) == 3
        mock_logger.warning.assert_not_called()
        assert coerce_concurrency(0, mock_logger) == 1
        mock_logger.warning.assert_called_once()


def _fake_client(outcomes):
    transport = RateLimitedTransport(
        FakeSession(outcomes), RetryConfig(max_retries=0, jitter=False), sleep=lambda _: None
    )
    return AzureManagementClient(SUBSCRIPTION_ID, transport)


BASE_ARGS = ["--subscription-id", SUBSCRIPTION_ID, "--access-token", "tok", "--no-log-file"]


class TestMain:
    """Exit codes and output of the entry point"""

    def test_missing_subscription(self, capsys):
        assert main(["--access-token", "tok", "--no-log-file"]) == EXIT_CONFIG_ERROR
        assert "Subscription ID is required" in capsys.readouterr().err

    def test_missing_token_without_chain(self, capsys):
        code = main(["--subscription-id", SUBSCRIPTION_ID, "--no-credential-chain", "--no-log-file"])
        assert code == EXIT_CONFIG_ERROR
        assert "Access token is required" in capsys.readouterr().err

    def test_credentials_from_environment(self, monkeypatch, capsys):
        monkeypatch.setenv("AZURE_SUBSCRIPTION_ID", SUBSCRIPTION_ID)
        monkeypatch.setenv("AZURE_ACCESS_TOKEN", "env-token")
        client = _fake_client([make_response(200, {"value": []})])

        with patch("azrg_inventory.cli.main.create_client", return_value=client) as create:
            code = main(["--porcelain", "--no-log-file"])

        assert code == EXIT_OK
        assert create.call_args[0][:2] == (SUBSCRIPTION_ID, "env-token")

    def test_porcelain_resource_groups(self, resource_group_payload, capsys):
        client = _fake_client(
            [
                make_response(200, resource_group_payload),
                make_response(200, {"value": [{"name": "r", "type": "t", "createdTime": "2020-01-01T00:00:00Z"}]}),
                make_response(200, {"value": [{"name": "r", "type": "t", "createdTime": "2020-01-01T00:00:00Z"}]}),
            ]
        )

        with patch("azrg_inventory.cli.main.create_client", return_value=client):
            code = main([*BASE_ARGS, "--porcelain", "--max-concurrency", "1"])

        assert code == EXIT_OK
        lines = capsys.readouterr().out.splitlines()
        assert lines[0].startswith("NAME\t")
        assert lines[1] == "DefaultResourceGroup-EUS\teastus\tSucceeded\t2020-01-01T00:00:00Z\ttrue"
        assert lines[2] == "my-custom-rg\twesteurope\tSucceeded\t2020-01-01T00:00:00Z\tfalse"

    def test_console_storage_accounts(self, capsys):
        payload = {"value": [storage_account_payload("st1"), storage_account_payload("st2", location="westus")]}
        client = _fake_client([make_response(200, payload)])

        with patch("azrg_inventory.cli.main.create_client", return_value=client):
            code = main(["storage-accounts", *BASE_ARGS, "--quiet"])

        out = capsys.readouterr().out
        assert code == EXIT_OK
        assert "Found 2 storage accounts:" in out
        assert "Fetching storage accounts..." not in out

    def test_listing_failure_exit_code(self, capsys):
        client = _fake_client([make_response(403, text="AuthorizationFailed")])

        with patch("azrg_inventory.cli.main.create_client", return_value=client):
            code = main(BASE_ARGS)

        assert code == EXIT_ERROR
        assert "Error fetching resource groups" in capsys.readouterr().err

    def test_output_error_exit_code(self, capsys):
        with patch("azrg_inventory.cli.main.run_inventory", side_effect=OutputError("Failed to write CSV file")):
            assert main(BASE_ARGS) == EXIT_ERROR
        assert "Failed to write CSV file" in capsys.readouterr().err

    def test_interrupted(self):
        with patch("azrg_inventory.cli.main.run_inventory", side_effect=KeyboardInterrupt):
            assert main(BASE_ARGS) == EXIT_INTERRUPTED

    def test_csv_output(self, resource_group_payload, tmp_path, capsys):
        path = tmp_path / "groups.csv"
        client = _fake_client(
            [make_response(200, resource_group_payload), make_response(500), make_response(500)]
        )

        with patch("azrg_inventory.cli.main.create_client", return_value=client):
            code = main([*BASE_ARGS, "--output-csv", str(path)])

        assert code == EXIT_OK
        assert path.exists()
        out = capsys.readouterr().out
        assert "Resource Group: DefaultResourceGroup-EUS" in out
        assert "Resource Group: my-custom-rg" in out
        assert f"CSV output written to: {path}" in out
