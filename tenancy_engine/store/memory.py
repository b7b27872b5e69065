"""In-memory tenancy data store implementing every provider interface."""

from dataclasses import dataclass, field
from datetime import datetime

from tenancy_engine.exceptions import (
    CatalogNotFoundError,
    DuplicateReadingError,
    EntityNotFoundError,
    InvalidReadingStateError,
)
from tenancy_engine.models import (
    MeterCatalog,
    MeterReading,
    MoveOutRecord,
    Obligation,
    ReadingStatus,
)
from tenancy_engine.periods import parse_period


@dataclass
class InMemoryTenancyStore:
    """In-memory store for catalogs, readings, obligations and move-outs.

    Enforces one live reading per (meter, apartment, period) and the
    pending -> approved | rejected lifecycle. Rejected readings are kept
    in ``readings`` but drop out of the indexes once resubmitted.
    """

    # Primary entities
    catalogs: dict[str, MeterCatalog] = field(default_factory=dict)
    readings: list[MeterReading] = field(default_factory=list)
    obligations: dict[str, Obligation] = field(default_factory=dict)
    move_outs: dict[str, MoveOutRecord] = field(default_factory=dict)

    # Relationship indexes
    _reading_keys: dict[tuple[str, str, str], int] = field(default_factory=dict)
    _reading_ids: dict[str, int] = field(default_factory=dict)
    _apartment_readings: dict[tuple[str, str], list[int]] = field(default_factory=dict)
    _tenancy_obligations: dict[str, list[str]] = field(default_factory=dict)

    def add_catalog(self, catalog: MeterCatalog) -> None:
        """Add or replace the catalog of an address."""
        catalog.validate()
        self.catalogs[catalog.address_id] = catalog

    def add_reading(self, reading: MeterReading) -> None:
        """Add a reading to the store.

        A rejected reading may be resubmitted: the new reading becomes the
        current one and the rejected one stays in ``readings`` as history.

        Raises
        ------
        DuplicateReadingError
            If a pending or approved reading already exists for the same
            meter, apartment and period.
        """
        parse_period(reading.period)
        key = (reading.meter_id, reading.apartment_id, reading.period)
        apartment_key = (reading.apartment_id, reading.period)
        current = self._reading_keys.get(key)
        if current is not None:
            if self.readings[current].status != ReadingStatus.REJECTED:
                raise DuplicateReadingError(
                    f"Reading for meter {reading.meter_id} in {reading.apartment_id} "
                    f"{reading.period} already exists"
                )
            self._apartment_readings[apartment_key].remove(current)

        idx = len(self.readings)
        self.readings.append(reading)
        self._reading_keys[key] = idx
        self._reading_ids[reading.reading_id] = idx
        self._apartment_readings.setdefault(apartment_key, []).append(idx)

    def add_obligation(self, obligation: Obligation) -> None:
        """Add an obligation to the store."""
        if obligation.obligation_id not in self.obligations:
            self._tenancy_obligations.setdefault(obligation.tenancy_id, []).append(
                obligation.obligation_id
            )
        self.obligations[obligation.obligation_id] = obligation

    def add_move_out(self, record: MoveOutRecord) -> None:
        self.move_outs[record.tenancy_id] = record

    def approve_reading(self, reading_id: str, when: datetime | None = None) -> MeterReading:
        """Move a pending reading to approved."""
        reading = self._pending_reading(reading_id)
        reading.status = ReadingStatus.APPROVED
        reading.approved_at = when or datetime.now()
        return reading

    def reject_reading(self, reading_id: str) -> MeterReading:
        """Move a pending reading to rejected."""
        reading = self._pending_reading(reading_id)
        reading.status = ReadingStatus.REJECTED
        return reading

    def _pending_reading(self, reading_id: str) -> MeterReading:
        if reading_id not in self._reading_ids:
            raise EntityNotFoundError(f"Reading {reading_id} not found")
        reading = self.readings[self._reading_ids[reading_id]]
        if reading.status != ReadingStatus.PENDING:
            raise InvalidReadingStateError(
                f"Reading {reading_id} is {reading.status.value}, only PENDING readings change state"
            )
        return reading

    # Provider interface

    def get_catalog(self, address_id: str) -> MeterCatalog:
        if address_id not in self.catalogs:
            raise CatalogNotFoundError(f"No meter catalog for address {address_id}")
        return self.catalogs[address_id]

    def get_approved_reading(
        self, meter_id: str, apartment_id: str, period: str
    ) -> MeterReading | None:
        idx = self._reading_keys.get((meter_id, apartment_id, period))
        if idx is None:
            return None
        reading = self.readings[idx]
        return reading if reading.is_approved else None

    def get_previous_approved_reading(
        self, meter_id: str, apartment_id: str, before_period: str
    ) -> MeterReading | None:
        parse_period(before_period)
        candidates = [
            r
            for r in self.readings
            if r.meter_id == meter_id
            and r.apartment_id == apartment_id
            and r.period < before_period
            and r.is_approved
        ]
        if not candidates:
            return None
        return max(candidates, key=lambda r: r.period)

    def list_readings(self, apartment_id: str, period: str) -> list[MeterReading]:
        return [self.readings[i] for i in self._apartment_readings.get((apartment_id, period), [])]

    def list_obligations(self, tenancy_id: str) -> list[Obligation]:
        return [self.obligations[oid] for oid in self._tenancy_obligations.get(tenancy_id, [])]

    def get_move_out_record(self, tenancy_id: str) -> MoveOutRecord | None:
        return self.move_outs.get(tenancy_id)

    def summary(self) -> dict[str, int]:
        """Return summary counts of all entities."""
        return {
            "catalogs": len(self.catalogs),
            "readings": len(self.readings),
            "pending_readings": sum(1 for r in self.readings if r.status == ReadingStatus.PENDING),
            "obligations": len(self.obligations),
            "move_outs": len(self.move_outs),
        }
