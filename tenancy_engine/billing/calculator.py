"""Consumption & charge calculation for one apartment and period."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from decimal import Decimal

from tenancy_engine.exceptions import ContractViolationError
from tenancy_engine.models import (
    ChargeLine,
    CommunalCalculation,
    MeterCatalog,
    MeterDefinition,
    MeterReading,
)
from tenancy_engine.money import to_decimal
from tenancy_engine.periods import parse_period

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def consumption_and_cost(
    catalog: MeterCatalog,
    meter_id: str,
    current: Decimal | int | str,
    previous: Decimal | int | str,
) -> tuple[Decimal, Decimal]:
    """Consumption and cost of a single meter between two readings.

    Unknown meters are priced at zero.
    """
    consumption = max(ZERO, to_decimal(current) - to_decimal(previous))
    meter = catalog.get_meter(meter_id)
    price = catalog.price_for(meter) if meter is not None else ZERO
    return consumption, consumption * price


def calculate(
    catalog: MeterCatalog,
    readings: Iterable[MeterReading],
    apartment_area: Decimal | int | str,
    total_building_area: Decimal | int | str | None,
    *,
    period: str,
    apartment_id: str,
    previous: Mapping[str, Decimal] | None = None,
) -> CommunalCalculation:
    """Compute the utility bill of one apartment for one period.

    Parameters
    ----------
    catalog : MeterCatalog
        Meters and prices of the apartment's address.
    readings : Iterable[MeterReading]
        Readings submitted for the period. Only approved ones are billed.
    apartment_area : Decimal | int | str
        Floor area of the apartment.
    total_building_area : Decimal | int | str | None
        Floor area of the building; zero or unknown disables shared costs.
    period : str
        Billing period, ``YYYY-MM``.
    apartment_id : str
        Apartment being billed.
    previous : Mapping[str, Decimal] | None
        Previous approved reading value per meter id.

    Returns
    -------
    CommunalCalculation
        Charge lines in catalog order, individual meters first.

    Raises
    ------
    ContractViolationError
        On a malformed period, negative prices or area, or two readings
        for the same meter.
    """
    parse_period(period)
    catalog.validate()
    area = to_decimal(apartment_area)
    if area < 0:
        raise ContractViolationError(f"Negative apartment area {area} for {apartment_id}")
    previous = previous or {}

    calculation = CommunalCalculation(apartment_id=apartment_id, period=period)
    approved = _approved_by_meter(catalog, readings, apartment_id, period, calculation.warnings)

    for meter in catalog.individual_meters():
        reading = approved.get(meter.meter_id)
        if reading is None:
            continue
        calculation.lines.append(
            _individual_line(catalog, meter, reading, previous.get(meter.meter_id), calculation.warnings)
        )

    building_area = to_decimal(total_building_area) if total_building_area is not None else ZERO
    shared = catalog.shared_meters()
    if shared and building_area <= 0:
        warning = f"Total building area unknown for {apartment_id}, shared costs reported as zero"
        logger.warning(warning)
        calculation.warnings.append(warning)

    for meter in shared:
        price = catalog.price_for(meter)
        share = area / building_area if building_area > 0 else ZERO
        calculation.lines.append(
            ChargeLine(
                meter_id=meter.meter_id,
                current=ZERO,
                previous=ZERO,
                consumption=share,
                unit_price=price,
                total=share * price,
                shared=True,
            )
        )

    calculation.variable_charges = sum((line.total for line in calculation.lines), ZERO)
    calculation.fixed_charges = catalog.prices.fixed_total
    calculation.total_amount = calculation.fixed_charges + calculation.variable_charges

    logger.debug(
        "Calculated %s %s: %d lines, total=%s",
        apartment_id,
        period,
        len(calculation.lines),
        calculation.total_amount,
        extra={"apartment_id": apartment_id, "period": period},
    )
    return calculation


def _approved_by_meter(
    catalog: MeterCatalog,
    readings: Iterable[MeterReading],
    apartment_id: str,
    period: str,
    warnings: list[str],
) -> dict[str, MeterReading]:
    """Index the period's approved readings by meter id."""
    seen: set[str] = set()
    approved: dict[str, MeterReading] = {}
    for reading in readings:
        if reading.apartment_id != apartment_id or reading.period != period:
            continue
        if reading.meter_id in seen:
            raise ContractViolationError(
                f"More than one reading for meter {reading.meter_id} in {apartment_id} {period}"
            )
        seen.add(reading.meter_id)
        if catalog.get_meter(reading.meter_id) is None:
            warning = f"Reading {reading.reading_id} references unknown meter {reading.meter_id}"
            logger.warning(warning)
            warnings.append(warning)
            continue
        if reading.is_approved:
            approved[reading.meter_id] = reading
    return approved


def _individual_line(
    catalog: MeterCatalog,
    meter: MeterDefinition,
    reading: MeterReading,
    previous_value: Decimal | None,
    warnings: list[str],
) -> ChargeLine:
    current = to_decimal(reading.value)
    if previous_value is None:
        warning = f"No previous reading for {meter.name}, current reading used as baseline"
        logger.warning(warning)
        warnings.append(warning)
        previous = current
    else:
        previous = to_decimal(previous_value)

    if current < previous:
        warning = f"{meter.name} reading {current} is below previous reading {previous}"
        logger.warning(warning)
        warnings.append(warning)

    consumption, total = consumption_and_cost(catalog, meter.meter_id, current, previous)
    return ChargeLine(
        meter_id=meter.meter_id,
        current=current,
        previous=previous,
        consumption=consumption,
        unit_price=catalog.price_for(meter),
        total=total,
    )
