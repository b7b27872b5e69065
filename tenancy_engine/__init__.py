"""Tenancy settlement and utility billing calculation engine."""

__version__ = "0.1.0"
