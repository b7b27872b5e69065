"""Self-contained calculation jobs.

A job carries every input of one pure calculation, so it can be pickled to
a worker process and recomputed with a bit-identical result.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from tenancy_engine.billing import calculate
from tenancy_engine.config import SettlementConfig
from tenancy_engine.models import (
    CommunalCalculation,
    Decision,
    DepositPolicy,
    LeaseTerms,
    MeterCatalog,
    MeterReading,
    MoveOutRecord,
    Obligation,
    SettlementResult,
)
from tenancy_engine.settlement.deposit import REASON_METERS_UNRESOLVED, settle

logger = logging.getLogger(__name__)


@dataclass
class BillingJob:
    """Inputs of one (apartment, period) bill."""

    catalog: MeterCatalog
    apartment_id: str
    period: str
    readings: list[MeterReading] = field(default_factory=list)
    previous: dict[str, Decimal] = field(default_factory=dict)
    apartment_area: Decimal = Decimal("0")
    total_building_area: Decimal | None = None


@dataclass
class SettlementJob:
    """Inputs of one tenancy settlement request.

    ``gate_reasons`` lists the periods whose required meters are not
    resolved; a job with gate reasons is blocked without a refund figure.
    """

    tenancy_id: str
    deposit: Decimal
    policy: DepositPolicy
    today: date
    config: SettlementConfig
    obligations: list[Obligation] = field(default_factory=list)
    move_out: MoveOutRecord | None = None
    outstanding_debt: Decimal = Decimal("0")
    gate_reasons: list[str] = field(default_factory=list)
    lease: LeaseTerms | None = None


def run_billing_job(job: BillingJob) -> CommunalCalculation:
    return calculate(
        job.catalog,
        job.readings,
        job.apartment_area,
        job.total_building_area,
        period=job.period,
        apartment_id=job.apartment_id,
        previous=job.previous,
    )


def run_settlement_job(job: SettlementJob) -> SettlementResult:
    if job.gate_reasons:
        return SettlementResult(
            decision=Decision.BLOCKED,
            refundable_amount=None,
            blocking_reasons=[REASON_METERS_UNRESOLVED, *job.gate_reasons],
            tenancy_id=job.tenancy_id,
        )

    result = settle(
        job.deposit,
        job.obligations,
        job.move_out,
        job.policy,
        job.today,
        config=job.config,
        outstanding_debt=job.outstanding_debt,
        lease=job.lease,
    )
    result.tenancy_id = job.tenancy_id
    logger.debug(
        "Tenancy %s settled: %s",
        job.tenancy_id,
        result.decision.value,
        extra={"tenancy_id": job.tenancy_id, "decision": result.decision.value},
    )
    return result
