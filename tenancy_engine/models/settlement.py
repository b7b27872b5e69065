"""Tenancy settlement models."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from tenancy_engine.models.enums import (
    ContractPhase,
    Decision,
    LateFeeStatus,
    MoveOutTiming,
    NoticeStatus,
    ObligationKind,
)


@dataclass
class Obligation:
    """Non-utility debt item owed by a tenant."""

    obligation_id: str
    tenancy_id: str
    kind: ObligationKind
    amount: Decimal
    confirmed: bool  # binding against the deposit once confirmed by the landlord
    description: str = ""


@dataclass
class MoveOutRecord:
    """Move-out dates of a tenancy."""

    tenancy_id: str
    notice_date: date | None = None
    planned_date: date | None = None
    actual_date: date | None = None
    inspection_date: date | None = None
    late_fee_status: LateFeeStatus = LateFeeStatus.UNRESOLVED


@dataclass(frozen=True)
class LeaseTerms:
    """Fixed-term contract facts that drive the notice deduction.

    ``deposit_paid`` is the amount actually received; it replaces the
    nominal deposit as the settlement base when set.
    """

    contract_end_date: date
    monthly_rent: Decimal
    deposit_paid: Decimal | None = None


@dataclass(frozen=True)
class DepositPolicy:
    """Whether debt may be deducted from the deposit instead of invoiced."""

    allow_debt_offset: bool


@dataclass
class SettlementResult:
    """End-of-tenancy deposit decision."""

    decision: Decision
    refundable_amount: Decimal | None  # None when no figure was computed
    additional_due: Decimal = Decimal("0.00")
    total_debt: Decimal = Decimal("0.00")
    confirmed_charges: Decimal = Decimal("0.00")
    late_fee: Decimal = Decimal("0.00")
    late_days: int = 0
    blocking_reasons: list[str] = field(default_factory=list)
    notice_days: int | None = None
    notice_status: NoticeStatus = NoticeStatus.NONE
    refund_deadline: date | None = None
    tenancy_id: str = ""
    notice_deduction: Decimal = Decimal("0.00")
    notice_deduction_reason: str = ""
    contract_phase: ContractPhase | None = None  # None without lease terms
    move_out_timing: MoveOutTiming | None = None


@dataclass
class TenancySnapshot:
    """Tenancy facts the orchestrator needs beyond what providers supply."""

    tenancy_id: str
    address_id: str
    apartment_id: str
    deposit: Decimal
    policy: DepositPolicy | None
    final_period: str  # YYYY-MM of the last billed month
    unpaid_periods: tuple[str, ...] = ()
    apartment_area: Decimal = Decimal("0")
    total_building_area: Decimal | None = None
    lease: LeaseTerms | None = None
