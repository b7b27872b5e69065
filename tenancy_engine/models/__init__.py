"""Domain models for tenancy billing and settlement."""

from tenancy_engine.models.billing import ChargeLine, CommunalCalculation, CompletenessReport
from tenancy_engine.models.catalog import MeterCatalog, MeterDefinition, PriceSchedule
from tenancy_engine.models.enums import (
    ContractPhase,
    Decision,
    LateFeeStatus,
    MeterKind,
    MoveOutTiming,
    NoticeStatus,
    ObligationKind,
    ReadingStatus,
)
from tenancy_engine.models.reading import MeterReading
from tenancy_engine.models.settlement import (
    DepositPolicy,
    LeaseTerms,
    MoveOutRecord,
    Obligation,
    SettlementResult,
    TenancySnapshot,
)

__all__ = [
    "ChargeLine",
    "CommunalCalculation",
    "CompletenessReport",
    "ContractPhase",
    "Decision",
    "DepositPolicy",
    "LateFeeStatus",
    "LeaseTerms",
    "MeterCatalog",
    "MeterDefinition",
    "MeterKind",
    "MeterReading",
    "MoveOutRecord",
    "MoveOutTiming",
    "NoticeStatus",
    "Obligation",
    "ObligationKind",
    "PriceSchedule",
    "ReadingStatus",
    "SettlementResult",
    "TenancySnapshot",
]
