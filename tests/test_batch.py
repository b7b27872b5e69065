"""Tests for parallel batch execution."""

from datetime import date
from decimal import Decimal

from tenancy_engine.batch import run_billing_batch, run_jobs, run_settlement_batch
from tenancy_engine.models import Decision, DepositPolicy
from tenancy_engine.settlement import BillingJob, SettlementJob


def double(value: int) -> int:
    return value * 2


class TestRunJobs:
    """Tests for run_jobs."""

    def test_in_process(self) -> None:
        assert run_jobs(double, [1, 2, 3]) == [2, 4, 6]

    def test_empty(self) -> None:
        assert run_jobs(double, [], workers=4) == []

    def test_single_job_stays_in_process(self) -> None:
        assert run_jobs(double, [21], workers=8) == [42]


class TestBatches:
    """Tests for billing and settlement batches."""

    def test_billing_batch_matches_in_process(self, catalog, make_reading) -> None:
        jobs = [
            BillingJob(
                catalog=catalog,
                apartment_id="apt-test-001",
                period="2024-02",
                readings=[make_reading("m1", 45 + n), make_reading("m2", 1300)],
                previous={"m1": Decimal("45"), "m2": Decimal("1200")},
                apartment_area=Decimal("50"),
                total_building_area=Decimal("1000"),
            )
            for n in range(6)
        ]

        parallel = run_billing_batch(jobs, workers=2, chunksize=2)
        serial = run_billing_batch(jobs)

        assert parallel == serial
        assert [c.lines[0].consumption for c in parallel] == [Decimal(n) for n in range(6)]

    def test_settlement_batch(self, settlement_config) -> None:
        jobs = [
            SettlementJob(
                tenancy_id=f"ten-{n}",
                deposit=Decimal("300"),
                policy=DepositPolicy(allow_debt_offset=True),
                today=date(2024, 2, 1),
                config=settlement_config,
                outstanding_debt=Decimal(n * 100),
            )
            for n in range(5)
        ]

        results = run_settlement_batch(jobs, workers=2)

        assert [r.tenancy_id for r in results] == [f"ten-{n}" for n in range(5)]
        assert [r.decision for r in results] == [Decision.REFUND] * 4 + [Decision.INVOICE]
        assert results[4].additional_due == Decimal("100.00")

    def test_gated_job_blocked(self, settlement_config) -> None:
        job = SettlementJob(
            tenancy_id="ten-1",
            deposit=Decimal("300"),
            policy=DepositPolicy(allow_debt_offset=True),
            today=date(2024, 2, 1),
            config=settlement_config,
            gate_reasons=["2024-02: missing Cold water"],
        )

        [result] = run_settlement_batch([job])

        assert result.decision == Decision.BLOCKED
        assert result.refundable_amount is None
        assert result.blocking_reasons == [
            "required meters unresolved",
            "2024-02: missing Cold water",
        ]
