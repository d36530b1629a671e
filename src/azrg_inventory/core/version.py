"""Version information for azrg-inventory."""

__version__ = "1.2.0"
