"""Generators for readings, obligations and move-out records of a tenancy."""

from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from decimal import Decimal

from tenancy_engine.generators.base import BaseGenerator
from tenancy_engine.models import (
    LateFeeStatus,
    LeaseTerms,
    MeterCatalog,
    MeterKind,
    MeterReading,
    MoveOutRecord,
    Obligation,
    ObligationKind,
    ReadingStatus,
)
from tenancy_engine.periods import next_period, parse_period


class TenancyGenerator(BaseGenerator):
    """Generate synthetic tenancy activity."""

    # Typical monthly consumption ranges per kind
    CONSUMPTION_RANGES = {
        MeterKind.COLD_WATER: (2, 8),
        MeterKind.HOT_WATER: (1, 5),
        MeterKind.ELECTRICITY: (80, 350),
        MeterKind.HEATING: (0, 900),
        MeterKind.GAS: (5, 60),
    }
    OBLIGATION_AMOUNTS = {
        ObligationKind.UNPAID_RENT: (200, 800),
        ObligationKind.CLEANING: (30, 150),
        ObligationKind.DAMAGE: (50, 600),
        ObligationKind.OTHER: (10, 100),
    }

    def generate_readings(
        self,
        catalog: MeterCatalog,
        apartment_id: str,
        periods: list[str],
        pending_rate: float = 0.0,
        rollback_rate: float = 0.0,
    ) -> list[MeterReading]:
        """Generate cumulative readings for every individual meter and period.

        Parameters
        ----------
        catalog : MeterCatalog
            Catalog of the apartment's address.
        apartment_id : str
            Apartment identifier.
        periods : list[str]
            Ordered periods to generate.
        pending_rate : float
            Probability that a reading of the last period is still pending.
        rollback_rate : float
            Probability that a reading goes below the previous one (meter swap).

        Returns
        -------
        list[MeterReading]
            Readings ordered by period, then catalog order.
        """
        values = {
            m.meter_id: Decimal(self.rng.randint(0, 5000)) for m in catalog.individual_meters()
        }
        readings = []
        for i, period in enumerate(periods):
            year, month = parse_period(period)
            is_last = i == len(periods) - 1
            for meter in catalog.individual_meters():
                low, high = self.CONSUMPTION_RANGES.get(meter.kind, (0, 50))
                if self.chance(rollback_rate):
                    values[meter.meter_id] = Decimal(self.rng.randint(0, 10))
                else:
                    values[meter.meter_id] += Decimal(self.rng.randint(low, high))

                status = ReadingStatus.APPROVED
                if is_last and self.chance(pending_rate):
                    status = ReadingStatus.PENDING
                submitted_at = datetime(
                    year, month, self.rng.randint(20, 28), self.rng.randint(8, 20)
                )
                readings.append(
                    MeterReading(
                        reading_id=self.make_id(),
                        meter_id=meter.meter_id,
                        apartment_id=apartment_id,
                        period=period,
                        value=values[meter.meter_id],
                        status=status,
                        submitted_at=submitted_at,
                        approved_at=(
                            submitted_at + timedelta(days=1)
                            if status == ReadingStatus.APPROVED
                            else None
                        ),
                    )
                )
        return readings

    def generate_obligations(
        self,
        tenancy_id: str,
        max_items: int = 3,
        unconfirmed_rate: float = 0.1,
    ) -> list[Obligation]:
        """Generate up to ``max_items`` obligations for a tenancy."""
        obligations = []
        for _ in range(self.rng.randint(0, max_items)):
            kind = self.rng.choice(list(self.OBLIGATION_AMOUNTS))
            low, high = self.OBLIGATION_AMOUNTS[kind]
            obligations.append(
                Obligation(
                    obligation_id=self.make_id(),
                    tenancy_id=tenancy_id,
                    kind=kind,
                    amount=self.money(low, high),
                    confirmed=not self.chance(unconfirmed_rate),
                    description=self.fake.sentence(nb_words=4),
                )
            )
        return obligations

    def generate_move_out(
        self,
        tenancy_id: str,
        final_period: str,
        late_rate: float = 0.2,
        still_living_rate: float = 0.05,
    ) -> MoveOutRecord:
        """Generate a move-out planned for the last day of ``final_period``."""
        year, month = parse_period(final_period)
        planned = date(year, month, calendar.monthrange(year, month)[1])
        notice = planned - timedelta(days=self.rng.randint(10, 60))

        if self.chance(still_living_rate):
            actual = None
        elif self.chance(late_rate):
            actual = planned + timedelta(days=self.rng.randint(1, 7))
        else:
            actual = planned - timedelta(days=self.rng.randint(0, 2))

        late = actual is not None and actual > planned
        return MoveOutRecord(
            tenancy_id=tenancy_id,
            notice_date=notice,
            planned_date=planned,
            actual_date=actual,
            inspection_date=actual + timedelta(days=self.rng.randint(0, 3)) if actual else None,
            late_fee_status=(
                self.rng.choice(list(LateFeeStatus))
                if late
                else LateFeeStatus.UNRESOLVED
            ),
        )

    def generate_lease(
        self,
        final_period: str,
        deposit: Decimal,
        early_rate: float = 0.15,
    ) -> LeaseTerms:
        """Generate fixed-term lease facts for a tenancy ending in ``final_period``.

        Most contracts end on the planned move-out date; with ``early_rate``
        probability the contract runs one to three months longer.
        """
        end_period = final_period
        if self.chance(early_rate):
            for _ in range(self.rng.randint(1, 3)):
                end_period = next_period(end_period)
        year, month = parse_period(end_period)
        end = date(year, month, calendar.monthrange(year, month)[1])
        return LeaseTerms(
            contract_end_date=end,
            monthly_rent=Decimal(self.rng.randrange(300, 1500, 50)),
            deposit_paid=deposit,
        )
