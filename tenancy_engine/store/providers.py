"""Provider interfaces the orchestrator consumes.

Persistence, identity and transport live behind these protocols. Errors
raised by an implementation propagate to the caller unchanged.
"""

from typing import Protocol, runtime_checkable

from tenancy_engine.models import MeterCatalog, MeterReading, MoveOutRecord, Obligation


@runtime_checkable
class CatalogProvider(Protocol):
    def get_catalog(self, address_id: str) -> MeterCatalog:
        """Return the catalog of an address or raise ``CatalogNotFoundError``."""
        ...


@runtime_checkable
class ReadingProvider(Protocol):
    """Stored meter readings.

    The completeness gate and the bill both read a period through
    ``list_readings``, so it must return the current submission per meter:
    a rejected reading that was resubmitted is left out.
    ``get_approved_reading`` is a point lookup for callers outside the
    settlement flow.
    """

    def get_approved_reading(
        self, meter_id: str, apartment_id: str, period: str
    ) -> MeterReading | None:
        ...

    def get_previous_approved_reading(
        self, meter_id: str, apartment_id: str, before_period: str
    ) -> MeterReading | None:
        """Latest approved reading strictly before ``before_period``."""
        ...

    def list_readings(self, apartment_id: str, period: str) -> list[MeterReading]:
        """Current readings of an apartment for a period, whatever their status."""
        ...


@runtime_checkable
class ObligationProvider(Protocol):
    def list_obligations(self, tenancy_id: str) -> list[Obligation]:
        ...


@runtime_checkable
class MoveOutProvider(Protocol):
    def get_move_out_record(self, tenancy_id: str) -> MoveOutRecord | None:
        ...
