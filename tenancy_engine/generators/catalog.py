"""Meter catalog generator."""

from __future__ import annotations

from decimal import Decimal

from tenancy_engine.generators.base import BaseGenerator
from tenancy_engine.models import MeterCatalog, MeterDefinition, MeterKind, PriceSchedule


class CatalogGenerator(BaseGenerator):
    """Generate synthetic meter catalogs for property addresses."""

    # (kind, name, unit, required, individual, base price)
    METER_TEMPLATES = [
        (MeterKind.COLD_WATER, "Cold water", "m3", True, True, "1.32"),
        (MeterKind.HOT_WATER, "Hot water", "m3", True, True, "3.50"),
        (MeterKind.ELECTRICITY, "Electricity", "kWh", True, True, "0.23"),
        (MeterKind.HEATING, "Heating", "kWh", False, True, "0.095"),
        (MeterKind.GAS, "Gas", "m3", False, True, "0.99"),
        (MeterKind.CUSTOM, "Stairwell electricity", "month", False, False, "40.00"),
    ]
    OPTIONAL_RATE = 0.6

    def generate(self, address_id: str | None = None) -> MeterCatalog:
        """Generate a catalog.

        Required meters are always present; optional meters are included
        with ``OPTIONAL_RATE`` probability.

        Parameters
        ----------
        address_id : str | None
            Address identifier; a UUID is generated when omitted.

        Returns
        -------
        MeterCatalog
            Generated catalog.
        """
        meters = []
        unit_prices: dict[MeterKind, Decimal] = {}
        for idx, (kind, name, unit, required, individual, base) in enumerate(self.METER_TEMPLATES, 1):
            if not required and not self.chance(self.OPTIONAL_RATE):
                continue
            # +/-10% price variation between addresses
            price = (Decimal(base) * Decimal(str(round(self.rng.uniform(0.9, 1.1), 2)))).quantize(
                Decimal("0.001")
            )
            unit_prices[kind] = price
            meters.append(
                MeterDefinition(
                    meter_id=f"m{idx}",
                    name=name,
                    kind=kind,
                    unit=unit,
                    is_required=required,
                    has_individual_meter=individual,
                )
            )

        updated_at = self.fake.date_time_between(start_date="-1y", end_date="now")
        return MeterCatalog(
            address_id=address_id or self.make_id(),
            meters=tuple(meters),
            prices=PriceSchedule(
                unit_prices=unit_prices,
                garbage=Decimal(self.rng.choice(["4.00", "5.00", "6.50"])),
                maintenance=Decimal(self.rng.choice(["0.00", "10.00", "15.00"])),
                updated_at=updated_at,
            ),
            updated_at=updated_at,
        )
