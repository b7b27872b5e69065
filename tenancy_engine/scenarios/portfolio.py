"""Rental portfolio scenario for exercising billing and settlement at scale."""

from __future__ import annotations

import logging
import random
from decimal import Decimal

from tenancy_engine.generators import CatalogGenerator, TenancyGenerator
from tenancy_engine.models import DepositPolicy, TenancySnapshot
from tenancy_engine.periods import previous_period
from tenancy_engine.store import InMemoryTenancyStore

logger = logging.getLogger(__name__)


class PortfolioScenario:
    """Generate a rental portfolio whose tenancies all end in ``end_period``.

    This scenario creates:
    - Addresses, each with its own meter catalog
    - Apartments with monthly readings over ``months`` periods
    - Obligations, move-out records and unpaid utility periods per tenancy
    - Some pending final readings so the completeness gate has work to do
    """

    def __init__(
        self,
        num_addresses: int = 10,
        apartments_per_address: int = 8,
        months: int = 6,
        end_period: str = "2024-06",
        pending_rate: float = 0.05,
        no_offset_rate: float = 0.2,
        unpaid_rate: float = 0.3,
        seed: int | None = None,
    ) -> None:
        """Initialize portfolio scenario.

        Parameters
        ----------
        num_addresses : int
            Number of property addresses.
        apartments_per_address : int
            Apartments (one tenancy each) per address.
        months : int
            Billing periods of history per apartment.
        end_period : str
            Final billing period of every tenancy.
        pending_rate : float
            Probability that a final-period reading is still pending.
        no_offset_rate : float
            Share of tenancies whose policy forbids debt offset.
        unpaid_rate : float
            Probability that a period's utility bill is unpaid.
        seed : int | None
            Random seed for reproducibility.
        """
        self.num_addresses = num_addresses
        self.apartments_per_address = apartments_per_address
        self.months = months
        self.end_period = end_period
        self.pending_rate = pending_rate
        self.no_offset_rate = no_offset_rate
        self.unpaid_rate = unpaid_rate
        self.seed = seed

        self.rng = random.Random(seed)
        self.store = InMemoryTenancyStore()
        self.snapshots: list[TenancySnapshot] = []
        self._catalog_gen = CatalogGenerator(seed=seed)
        self._tenancy_gen = TenancyGenerator(seed=seed)

    def periods(self) -> list[str]:
        """Billing periods, oldest first."""
        periods = [self.end_period]
        while len(periods) < self.months:
            periods.append(previous_period(periods[-1]))
        return list(reversed(periods))

    def generate(self) -> InMemoryTenancyStore:
        """Generate all data for the portfolio scenario.

        Returns
        -------
        InMemoryTenancyStore
            Store containing all generated data; snapshots are kept on
            ``self.snapshots``.
        """
        logger.info(
            "Starting portfolio scenario: %d addresses x %d apartments, %d months",
            self.num_addresses,
            self.apartments_per_address,
            self.months,
        )
        periods = self.periods()
        # The first period only seeds baselines, it is never billed
        billable = periods[1:]

        for _ in range(self.num_addresses):
            catalog = self._catalog_gen.generate()
            self.store.add_catalog(catalog)

            areas = [Decimal(self.rng.randint(30, 110)) for _ in range(self.apartments_per_address)]
            building_area = sum(areas, Decimal("0")) + Decimal(self.rng.randint(0, 200))

            for area in areas:
                apartment_id = self._tenancy_gen.make_id()
                tenancy_id = self._tenancy_gen.make_id()

                for reading in self._tenancy_gen.generate_readings(
                    catalog, apartment_id, periods, pending_rate=self.pending_rate
                ):
                    self.store.add_reading(reading)
                for obligation in self._tenancy_gen.generate_obligations(tenancy_id):
                    self.store.add_obligation(obligation)
                self.store.add_move_out(
                    self._tenancy_gen.generate_move_out(tenancy_id, self.end_period)
                )

                unpaid = tuple(p for p in billable if self.rng.random() < self.unpaid_rate)
                deposit = Decimal(self.rng.choice([300, 500, 800, 1000]))
                self.snapshots.append(
                    TenancySnapshot(
                        tenancy_id=tenancy_id,
                        address_id=catalog.address_id,
                        apartment_id=apartment_id,
                        deposit=deposit,
                        policy=DepositPolicy(
                            allow_debt_offset=self.rng.random() >= self.no_offset_rate
                        ),
                        final_period=self.end_period,
                        unpaid_periods=unpaid,
                        apartment_area=area,
                        total_building_area=building_area,
                        lease=self._tenancy_gen.generate_lease(self.end_period, deposit),
                    )
                )

        logger.info("Portfolio generated: %s", self.store.summary())
        return self.store
