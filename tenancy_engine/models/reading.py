"""Meter reading model."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from tenancy_engine.models.enums import ReadingStatus


@dataclass
class MeterReading:
    """A submitted meter value for one apartment and period.

    Only an approval action changes ``status``; readings are never deleted.
    """

    reading_id: str
    meter_id: str
    apartment_id: str
    period: str  # YYYY-MM
    value: Decimal
    status: ReadingStatus
    submitted_at: datetime
    approved_at: datetime | None = None

    @property
    def is_approved(self) -> bool:
        return self.status == ReadingStatus.APPROVED
