"""Deposit settlement: late fees, debt aggregation and the refund decision."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import date, timedelta
from decimal import Decimal

from tenancy_engine.config import SettlementConfig
from tenancy_engine.exceptions import ConfigurationError, ContractViolationError
from tenancy_engine.models import (
    ContractPhase,
    Decision,
    DepositPolicy,
    LateFeeStatus,
    LeaseTerms,
    MoveOutRecord,
    MoveOutTiming,
    NoticeStatus,
    Obligation,
    SettlementResult,
)
from tenancy_engine.money import ZERO, is_zero, settle_amount, to_decimal
from tenancy_engine.periods import days_between

logger = logging.getLogger(__name__)

REASON_POLICY_FORBIDS_OFFSET = "policy forbids debt offset"
REASON_METERS_UNRESOLVED = "required meters unresolved"


def late_days(move_out: MoveOutRecord | None, today: date) -> int:
    """Days the tenant stayed past the planned move-out date.

    Counts up to the actual move-out date, or ``today`` while the tenant
    has not left yet.
    """
    if move_out is None or move_out.planned_date is None:
        return 0
    end = move_out.actual_date or today
    return max(0, days_between(move_out.planned_date, end))


def late_fee(days: int, config: SettlementConfig) -> Decimal:
    return Decimal(days) * config.daily_late_rate


def assess_notice(
    move_out: MoveOutRecord | None,
    config: SettlementConfig,
    contract_end: date | None = None,
) -> tuple[int | None, NoticeStatus]:
    """Notice period given before moving out.

    Counted to the planned move-out date, else the actual one, else the
    contract end when lease terms are known.
    """
    if move_out is None or move_out.notice_date is None:
        return None, NoticeStatus.NONE
    target = move_out.planned_date or move_out.actual_date or contract_end
    if target is None:
        return None, NoticeStatus.NONE
    days = days_between(move_out.notice_date, target)
    status = NoticeStatus.ADEQUATE if days >= config.min_notice_days else NoticeStatus.SHORT
    return days, status


def contract_phase(lease: LeaseTerms, on: date) -> ContractPhase:
    """``ACTIVE`` up to and including the contract end date."""
    if on <= lease.contract_end_date:
        return ContractPhase.ACTIVE
    return ContractPhase.INDEFINITE


def move_out_timing(
    lease: LeaseTerms, move_out: MoveOutRecord | None, on: date
) -> MoveOutTiming:
    """Planned move-out relative to the contract end.

    Without a planned date the tenant is expected to leave at the contract
    end, or counts as late once the fixed term is over.
    """
    planned = move_out.planned_date if move_out is not None else None
    if planned is None:
        if contract_phase(lease, on) == ContractPhase.INDEFINITE:
            return MoveOutTiming.LATE
        return MoveOutTiming.AT_END
    if planned == lease.contract_end_date:
        return MoveOutTiming.AT_END
    if planned < lease.contract_end_date:
        return MoveOutTiming.EARLY
    return MoveOutTiming.LATE


def notice_deduction(
    lease: LeaseTerms,
    move_out: MoveOutRecord | None,
    held: Decimal,
    today: date,
    config: SettlementConfig,
) -> tuple[Decimal, str, ContractPhase, MoveOutTiming]:
    """Amount withheld from the deposit for an early move-out or short notice.

    The phase is judged on the actual move-out date, or ``today`` while the
    tenant has not left.

    Parameters
    ----------
    lease : LeaseTerms
        Contract end date and monthly rent.
    move_out : MoveOutRecord | None
        Notice, planned and actual dates.
    held : Decimal
        Deposit held; the deduction never exceeds it.
    today : date
        Reference date while the tenant is still in the apartment.
    config : SettlementConfig
        Minimum notice days.

    Returns
    -------
    tuple[Decimal, str, ContractPhase, MoveOutTiming]
        Deduction, its reason, the contract phase and the move-out timing.
    """
    on = move_out.actual_date if move_out is not None and move_out.actual_date else today
    phase = contract_phase(lease, on)
    timing = move_out_timing(lease, move_out, on)
    _, notice = assess_notice(move_out, config, lease.contract_end_date)
    rent = to_decimal(lease.monthly_rent)

    if phase == ContractPhase.INDEFINITE:
        situation, with_notice, without_notice = "indefinite term", ZERO, rent
    elif timing == MoveOutTiming.AT_END:
        situation, with_notice, without_notice = "move-out at contract end", ZERO, rent
    elif timing == MoveOutTiming.EARLY:
        situation, with_notice, without_notice = "early move-out", rent, held
    else:
        return ZERO, "move-out after contract end", phase, timing

    if notice == NoticeStatus.ADEQUATE:
        amount, reason = with_notice, f"{situation}, adequate notice"
    elif notice == NoticeStatus.SHORT:
        amount, reason = without_notice, f"{situation}, short notice"
    else:
        amount, reason = without_notice, f"{situation}, no notice"
    return min(amount, max(held, ZERO)), reason, phase, timing


def dedupe_obligations(obligations: Iterable[Obligation]) -> list[Obligation]:
    """Drop repeated obligation ids, keeping the first occurrence."""
    seen: set[str] = set()
    unique: list[Obligation] = []
    for obligation in obligations:
        if obligation.obligation_id in seen:
            continue
        seen.add(obligation.obligation_id)
        unique.append(obligation)
    return unique


def settle(
    deposit: Decimal | int | str,
    obligations: Iterable[Obligation],
    move_out: MoveOutRecord | None,
    policy: DepositPolicy | None,
    today: date,
    *,
    config: SettlementConfig | None,
    outstanding_debt: Decimal | int | str = ZERO,
    unresolved_meters: Sequence[str] = (),
    lease: LeaseTerms | None = None,
) -> SettlementResult:
    """Decide how a deposit is settled at the end of a tenancy.

    Parameters
    ----------
    deposit : Decimal | int | str
        Deposit held by the landlord.
    obligations : Iterable[Obligation]
        Debt items and one-off charges of the tenancy.
    move_out : MoveOutRecord | None
        Move-out dates; ``None`` when no move-out has been recorded.
    policy : DepositPolicy | None
        Debt offset policy. Required.
    today : date
        Reference date for late-fee accrual.
    config : SettlementConfig | None
        Late-fee rate and deadlines. Required.
    outstanding_debt : Decimal | int | str
        Unpaid utility charges computed by the caller.
    unresolved_meters : Sequence[str]
        Required meters that are not yet approved.
    lease : LeaseTerms | None
        Fixed-term contract facts. When given, a notice deduction is
        withheld like a confirmed charge and ``deposit_paid`` replaces
        ``deposit`` as the base.

    Returns
    -------
    SettlementResult
        Decision with every blocking reason collected.

    Raises
    ------
    ContractViolationError
        If the policy is missing or an amount is negative.
    ConfigurationError
        If no settlement configuration is given.
    """
    if policy is None:
        raise ContractViolationError("Deposit policy is required to settle a tenancy")
    if config is None:
        raise ConfigurationError("Settlement configuration is required to settle a tenancy")

    deposit_amount = to_decimal(deposit)
    if lease is not None and lease.deposit_paid is not None:
        deposit_amount = to_decimal(lease.deposit_paid)
    if deposit_amount < 0:
        raise ContractViolationError(f"Deposit must be >= 0, got {deposit_amount}")
    debt = to_decimal(outstanding_debt)
    if debt < 0:
        raise ContractViolationError(f"Outstanding debt must be >= 0, got {debt}")
    if lease is not None and to_decimal(lease.monthly_rent) < 0:
        raise ContractViolationError(f"Monthly rent must be >= 0, got {lease.monthly_rent}")

    unique = dedupe_obligations(obligations)
    for obligation in unique:
        if to_decimal(obligation.amount) < 0:
            raise ContractViolationError(
                f"Obligation {obligation.obligation_id} has negative amount {obligation.amount}"
            )

    confirmed = [o for o in unique if o.confirmed]
    unconfirmed = [o for o in unique if not o.confirmed]
    debt += sum((to_decimal(o.amount) for o in confirmed if o.kind.is_debt), ZERO)
    charges = sum((to_decimal(o.amount) for o in confirmed if not o.kind.is_debt), ZERO)

    deduction, deduction_reason, phase, timing = ZERO, "", None, None
    if lease is not None:
        deduction, deduction_reason, phase, timing = notice_deduction(
            lease, move_out, deposit_amount, today, config
        )

    days = late_days(move_out, today)
    fee = late_fee(days, config)
    fee_status = move_out.late_fee_status if move_out is not None else LateFeeStatus.UNRESOLVED
    if fee_status == LateFeeStatus.APPLIED:
        debt += fee

    total_debt = settle_amount(debt)
    if policy.allow_debt_offset:
        refundable = settle_amount(deposit_amount - debt - charges - deduction)
        invoiced_debt = ZERO
    else:
        refundable = settle_amount(deposit_amount - charges - deduction)
        invoiced_debt = total_debt

    reasons: list[str] = []
    if not policy.allow_debt_offset and not is_zero(total_debt):
        reasons.append(REASON_POLICY_FORBIDS_OFFSET)
    if unresolved_meters:
        reasons.append(f"{REASON_METERS_UNRESOLVED}: {', '.join(unresolved_meters)}")
    settled_fee = settle_amount(fee)
    if not is_zero(settled_fee) and fee_status == LateFeeStatus.UNRESOLVED:
        reasons.append(f"unresolved late fee: {settled_fee}")
    for obligation in unconfirmed:
        if not is_zero(obligation.amount):
            amount = settle_amount(obligation.amount)
            reasons.append(f"unconfirmed obligation {obligation.kind.value.lower()}: {amount}")

    if reasons:
        decision = Decision.BLOCKED
    elif refundable >= 0:
        decision = Decision.REFUND
    else:
        decision = Decision.INVOICE

    notice_days, notice_status = assess_notice(
        move_out, config, lease.contract_end_date if lease is not None else None
    )
    result = SettlementResult(
        decision=decision,
        refundable_amount=refundable,
        additional_due=settle_amount(max(ZERO, -refundable) + invoiced_debt),
        total_debt=total_debt,
        confirmed_charges=settle_amount(charges),
        late_fee=settled_fee,
        late_days=days,
        blocking_reasons=reasons,
        notice_days=notice_days,
        notice_status=notice_status,
        refund_deadline=_refund_deadline(decision, move_out, config),
        notice_deduction=settle_amount(deduction),
        notice_deduction_reason=deduction_reason,
        contract_phase=phase,
        move_out_timing=timing,
    )

    if reasons:
        logger.info("Settlement blocked: %s", "; ".join(reasons))
    else:
        logger.debug("Settlement decided: %s %s", decision.value, refundable)
    return result


def _refund_deadline(
    decision: Decision, move_out: MoveOutRecord | None, config: SettlementConfig
) -> date | None:
    """Latest date the refund is due, counted from inspection or move-out."""
    if decision != Decision.REFUND or move_out is None:
        return None
    start = move_out.inspection_date or move_out.actual_date
    if start is None:
        return None
    return start + timedelta(days=config.refund_deadline_days)
