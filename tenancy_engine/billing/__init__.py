"""Utility billing: charge calculation and completeness gating."""

from tenancy_engine.billing.calculator import calculate, consumption_and_cost
from tenancy_engine.billing.completeness import check

__all__ = ["calculate", "check", "consumption_and_cost"]
