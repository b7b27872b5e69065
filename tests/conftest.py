"""Pytest configuration and fixtures."""

from datetime import datetime
from decimal import Decimal

import pytest

from tenancy_engine.config import SettlementConfig
from tenancy_engine.models import (
    MeterCatalog,
    MeterDefinition,
    MeterKind,
    MeterReading,
    PriceSchedule,
    ReadingStatus,
)


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def sample_address_id() -> str:
    return "addr-test-001"


@pytest.fixture
def sample_apartment_id() -> str:
    return "apt-test-001"


@pytest.fixture
def sample_tenancy_id() -> str:
    return "ten-test-001"


@pytest.fixture
def settlement_config() -> SettlementConfig:
    """Settlement config with a 25/day late fee."""
    return SettlementConfig(daily_late_rate=Decimal("25"))


@pytest.fixture
def catalog(sample_address_id: str) -> MeterCatalog:
    """Catalog with two required meters, one optional and one shared meter."""
    return MeterCatalog(
        address_id=sample_address_id,
        meters=(
            MeterDefinition(
                meter_id="m1",
                name="Cold water",
                kind=MeterKind.COLD_WATER,
                unit="m3",
                is_required=True,
                has_individual_meter=True,
                unit_price=Decimal("1.32"),
            ),
            MeterDefinition(
                meter_id="m2",
                name="Electricity",
                kind=MeterKind.ELECTRICITY,
                unit="kWh",
                is_required=True,
                has_individual_meter=True,
                unit_price=Decimal("0.23"),
            ),
            MeterDefinition(
                meter_id="m3",
                name="Heating",
                kind=MeterKind.HEATING,
                unit="kWh",
                is_required=False,
                has_individual_meter=True,
            ),
            MeterDefinition(
                meter_id="m4",
                name="Stairwell electricity",
                kind=MeterKind.CUSTOM,
                unit="month",
                is_required=False,
                has_individual_meter=False,
                unit_price=Decimal("40.00"),
            ),
        ),
        prices=PriceSchedule(
            unit_prices={MeterKind.HEATING: Decimal("0.095")},
            garbage=Decimal("5.00"),
            maintenance=Decimal("10.00"),
        ),
    )


@pytest.fixture
def make_reading(sample_apartment_id: str):
    """Factory for readings of the sample apartment."""

    def _make(
        meter_id: str,
        value: str | int,
        period: str = "2024-02",
        status: ReadingStatus = ReadingStatus.APPROVED,
        apartment_id: str | None = None,
    ) -> MeterReading:
        return MeterReading(
            reading_id=f"r-{meter_id}-{period}",
            meter_id=meter_id,
            apartment_id=apartment_id or sample_apartment_id,
            period=period,
            value=Decimal(str(value)),
            status=status,
            submitted_at=datetime(2024, 2, 25, 10, 0),
        )

    return _make
