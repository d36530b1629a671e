"""Allow ``python -m azrg_inventory``."""

from azrg_inventory.cli.main import cli_entry

if __name__ == "__main__":
    cli_entry()
