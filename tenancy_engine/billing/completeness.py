"""Required-meter completeness gate."""

from collections.abc import Iterable

from tenancy_engine.models import CompletenessReport, MeterCatalog, MeterReading, ReadingStatus


def check(catalog: MeterCatalog, readings: Iterable[MeterReading]) -> CompletenessReport:
    """Classify the catalog's required meters as missing or pending.

    A rejected reading has to be resubmitted, so it counts as missing.
    Callers pass the readings of a single apartment and period.
    """
    by_meter = {reading.meter_id: reading for reading in readings}
    report = CompletenessReport()

    for meter in catalog.required_meters():
        reading = by_meter.get(meter.meter_id)
        if reading is None or reading.status == ReadingStatus.REJECTED:
            report.missing.append(meter.name)
        elif reading.status == ReadingStatus.PENDING:
            report.pending.append(meter.name)

    return report
