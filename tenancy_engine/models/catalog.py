"""Meter catalog models: which utilities an address bills and at what price."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from tenancy_engine.exceptions import ContractViolationError
from tenancy_engine.models.enums import MeterKind


@dataclass(frozen=True)
class MeterDefinition:
    """A utility configured for an address."""

    meter_id: str
    name: str
    kind: MeterKind
    unit: str  # m3, kWh, month
    is_required: bool
    has_individual_meter: bool
    unit_price: Decimal | None = None  # None falls back to the price schedule


@dataclass(frozen=True)
class PriceSchedule:
    """Per-utility unit prices plus flat monthly fixed charges."""

    unit_prices: dict[MeterKind, Decimal] = field(default_factory=dict)
    garbage: Decimal = Decimal("0")
    maintenance: Decimal = Decimal("0")
    updated_at: datetime | None = None

    @property
    def fixed_total(self) -> Decimal:
        return self.garbage + self.maintenance


@dataclass(frozen=True)
class MeterCatalog:
    """Meters and prices for one property address.

    Versioned by ``updated_at``; a new configuration is a new catalog.
    """

    address_id: str
    meters: tuple[MeterDefinition, ...]
    prices: PriceSchedule = field(default_factory=PriceSchedule)
    updated_at: datetime | None = None

    def get_meter(self, meter_id: str) -> MeterDefinition | None:
        for meter in self.meters:
            if meter.meter_id == meter_id:
                return meter
        return None

    def price_for(self, meter: MeterDefinition) -> Decimal:
        """Unit price of a meter, from its own definition or the schedule."""
        if meter.unit_price is not None:
            return meter.unit_price
        return self.prices.unit_prices.get(meter.kind, Decimal("0"))

    def required_meters(self) -> list[MeterDefinition]:
        return [m for m in self.meters if m.is_required]

    def individual_meters(self) -> list[MeterDefinition]:
        return [m for m in self.meters if m.has_individual_meter]

    def shared_meters(self) -> list[MeterDefinition]:
        return [m for m in self.meters if not m.has_individual_meter]

    def validate(self) -> None:
        """Reject catalogs that would silently produce wrong charges.

        Raises
        ------
        ContractViolationError
            On duplicate meter ids or any negative price.
        """
        seen: set[str] = set()
        for meter in self.meters:
            if meter.meter_id in seen:
                raise ContractViolationError(
                    f"Duplicate meter {meter.meter_id} in catalog for {self.address_id}"
                )
            seen.add(meter.meter_id)
            if self.price_for(meter) < 0:
                raise ContractViolationError(
                    f"Negative unit price for meter {meter.meter_id} ({meter.name})"
                )
        for kind, price in self.prices.unit_prices.items():
            if price < 0:
                raise ContractViolationError(f"Negative unit price for {kind.value}")
        if self.prices.garbage < 0 or self.prices.maintenance < 0:
            raise ContractViolationError(f"Negative fixed charge in catalog for {self.address_id}")
