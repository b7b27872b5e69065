"""Settlement orchestration over injected providers."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date
from decimal import Decimal

from tenancy_engine.billing import check
from tenancy_engine.config import SettlementConfig
from tenancy_engine.exceptions import ConfigurationError, ContractViolationError
from tenancy_engine.models import (
    CommunalCalculation,
    CompletenessReport,
    Obligation,
    ObligationKind,
    SettlementResult,
    TenancySnapshot,
)
from tenancy_engine.money import to_decimal
from tenancy_engine.periods import parse_period
from tenancy_engine.settlement.jobs import (
    BillingJob,
    SettlementJob,
    run_billing_job,
    run_settlement_job,
)
from tenancy_engine.store.providers import (
    CatalogProvider,
    MoveOutProvider,
    ObligationProvider,
    ReadingProvider,
)

logger = logging.getLogger(__name__)


class SettlementOrchestrator:
    """Compose billing, the completeness gate and deposit settlement.

    All provider lookups happen while preparing a job; the calculation
    itself is pure. Provider errors propagate unchanged so the caller can
    decide whether to retry.

    Parameters
    ----------
    catalogs : CatalogProvider
        Meter catalogs per address.
    readings : ReadingProvider
        Stored meter readings.
    obligations : ObligationProvider
        Debt items per tenancy.
    move_outs : MoveOutProvider
        Move-out records per tenancy.
    config : SettlementConfig
        Late-fee rate and deadlines.
    """

    def __init__(
        self,
        catalogs: CatalogProvider,
        readings: ReadingProvider,
        obligations: ObligationProvider,
        move_outs: MoveOutProvider,
        config: SettlementConfig,
    ) -> None:
        if config is None:
            raise ConfigurationError("Settlement configuration is required")
        self.catalogs = catalogs
        self.readings = readings
        self.obligations = obligations
        self.move_outs = move_outs
        self.config = config

    def prepare_billing_job(
        self,
        address_id: str,
        apartment_id: str,
        period: str,
        apartment_area: Decimal | int | str,
        total_building_area: Decimal | int | str | None,
    ) -> BillingJob:
        """Fetch the readings of a period and one previous reading per meter."""
        parse_period(period)
        catalog = self.catalogs.get_catalog(address_id)
        current = self.readings.list_readings(apartment_id, period)

        previous: dict[str, Decimal] = {}
        for meter in catalog.individual_meters():
            reading = self.readings.get_previous_approved_reading(
                meter.meter_id, apartment_id, period
            )
            if reading is not None:
                previous[meter.meter_id] = to_decimal(reading.value)

        return BillingJob(
            catalog=catalog,
            apartment_id=apartment_id,
            period=period,
            readings=list(current),
            previous=previous,
            apartment_area=to_decimal(apartment_area),
            total_building_area=(
                to_decimal(total_building_area) if total_building_area is not None else None
            ),
        )

    def build_calculation(
        self,
        address_id: str,
        apartment_id: str,
        period: str,
        apartment_area: Decimal | int | str,
        total_building_area: Decimal | int | str | None,
    ) -> CommunalCalculation:
        job = self.prepare_billing_job(
            address_id, apartment_id, period, apartment_area, total_building_area
        )
        return run_billing_job(job)

    def check_completeness(
        self, address_id: str, apartment_id: str, period: str
    ) -> CompletenessReport:
        parse_period(period)
        catalog = self.catalogs.get_catalog(address_id)
        return check(catalog, self.readings.list_readings(apartment_id, period))

    def prepare_settlement_job(self, snapshot: TenancySnapshot, today: date) -> SettlementJob:
        """Gate every unpaid and final period, then gather settlement inputs.

        When a period is incomplete no bill is computed and the returned job
        carries the gate reasons only. Utility debt comes from the bills of
        ``unpaid_periods``; confirmed ``UNPAID_UTILITIES`` obligations are
        only used when no unpaid period is given.
        """
        if snapshot.policy is None:
            raise ContractViolationError(
                f"Deposit policy missing for tenancy {snapshot.tenancy_id}"
            )

        periods = sorted({*snapshot.unpaid_periods, snapshot.final_period})
        gate_reasons: list[str] = []
        for period in periods:
            report = self.check_completeness(snapshot.address_id, snapshot.apartment_id, period)
            if not report.complete:
                gate_reasons.append(_describe_incomplete(period, report))

        job = SettlementJob(
            tenancy_id=snapshot.tenancy_id,
            deposit=to_decimal(snapshot.deposit),
            policy=snapshot.policy,
            today=today,
            config=self.config,
            gate_reasons=gate_reasons,
            lease=snapshot.lease,
        )
        if gate_reasons:
            logger.info(
                "Tenancy %s has unresolved meters in %d period(s)",
                snapshot.tenancy_id,
                len(gate_reasons),
                extra={"tenancy_id": snapshot.tenancy_id},
            )
            return job

        outstanding = Decimal("0")
        for period in sorted(set(snapshot.unpaid_periods)):
            calculation = self.build_calculation(
                snapshot.address_id,
                snapshot.apartment_id,
                period,
                snapshot.apartment_area,
                snapshot.total_building_area,
            )
            outstanding += calculation.total_amount

        job.outstanding_debt = outstanding
        job.obligations = _without_billed_utilities(
            self.obligations.list_obligations(snapshot.tenancy_id), snapshot
        )
        job.move_out = self.move_outs.get_move_out_record(snapshot.tenancy_id)
        return job

    def settle_tenancy(self, snapshot: TenancySnapshot, today: date) -> SettlementResult:
        """Settle the deposit of one tenancy."""
        return run_settlement_job(self.prepare_settlement_job(snapshot, today))


def _describe_incomplete(period: str, report: CompletenessReport) -> str:
    parts = []
    if report.missing:
        parts.append(f"missing {', '.join(report.missing)}")
    if report.pending:
        parts.append(f"pending {', '.join(report.pending)}")
    return f"{period}: {'; '.join(parts)}"


def _without_billed_utilities(
    obligations: Iterable[Obligation], snapshot: TenancySnapshot
) -> list[Obligation]:
    """Drop utility debt items when the unpaid periods are billed from readings.

    Bills recomputed for ``unpaid_periods`` are the source of truth for
    utility debt; a confirmed ``UNPAID_UTILITIES`` obligation would count
    the same months twice.
    """
    items = list(obligations)
    if not snapshot.unpaid_periods:
        return items

    kept = [o for o in items if o.kind != ObligationKind.UNPAID_UTILITIES]
    dropped = len(items) - len(kept)
    if dropped:
        logger.warning(
            "Ignoring %d utility obligation(s) of tenancy %s, unpaid periods are billed"
            " from readings",
            dropped,
            snapshot.tenancy_id,
            extra={"tenancy_id": snapshot.tenancy_id},
        )
    return kept
