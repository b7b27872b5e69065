"""Deposit settlement and its orchestration."""

from tenancy_engine.settlement.deposit import late_days, late_fee, settle
from tenancy_engine.settlement.jobs import (
    BillingJob,
    SettlementJob,
    run_billing_job,
    run_settlement_job,
)
from tenancy_engine.settlement.orchestrator import SettlementOrchestrator

__all__ = [
    "BillingJob",
    "SettlementJob",
    "SettlementOrchestrator",
    "late_days",
    "late_fee",
    "run_billing_job",
    "run_settlement_job",
    "settle",
]
