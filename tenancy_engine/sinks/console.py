"""Console sink: one readable line per bill or settlement."""

import json
from collections import Counter
from typing import Any

from tenancy_engine.models import CommunalCalculation, SettlementResult
from tenancy_engine.money import is_zero
from tenancy_engine.periods import format_period
from tenancy_engine.sinks.serialization import to_dict


def describe(record: Any) -> str:
    """Single-line summary of a result record, JSON for anything else."""
    if isinstance(record, SettlementResult):
        amount = "-" if record.refundable_amount is None else str(record.refundable_amount)
        line = f"{record.tenancy_id or '?'}  {record.decision.value:<7}  refundable {amount}"
        if not is_zero(record.additional_due):
            line += f"  due {record.additional_due}"
        if not is_zero(record.notice_deduction):
            line += f"  notice deduction {record.notice_deduction}"
        if record.blocking_reasons:
            line += f"  ({'; '.join(record.blocking_reasons)})"
        return line
    if isinstance(record, CommunalCalculation):
        line = (
            f"{record.apartment_id}  {format_period(record.period)}  "
            f"total {record.total_amount} ({len(record.lines)} lines)"
        )
        if record.warnings:
            line += f"  {len(record.warnings)} warning(s)"
        return line
    return json.dumps(to_dict(record), ensure_ascii=False, default=str)


class ConsoleSink:
    """Print results to stdout for a quick look at a run."""

    def __init__(self, summary: bool = True, max_records: int | None = None) -> None:
        """Initialize console sink.

        Parameters
        ----------
        summary : bool
            Print one summary line per record; ``False`` prints full JSON.
        max_records : int | None
            Maximum records to print per batch (None for all).
        """
        self.summary = summary
        self.max_records = max_records
        self._counts: Counter[str] = Counter()
        self._decisions: Counter[str] = Counter()

    def write_batch(self, entity_type: str, records: list[Any]) -> None:
        print(f"\n{entity_type} ({len(records)} records)")
        print("-" * 60)

        shown = records[: self.max_records] if self.max_records else records
        for record in shown:
            if self.summary:
                print(describe(record))
            else:
                print(json.dumps(to_dict(record), ensure_ascii=False, default=str))
        if self.max_records and len(records) > self.max_records:
            print(f"... and {len(records) - self.max_records} more records")

        self._counts[entity_type] += len(records)
        self._decisions.update(
            r.decision.value for r in records if isinstance(r, SettlementResult)
        )

    def close(self) -> None:
        """Print record counts and the decision tally."""
        print("\nSummary")
        print("-" * 60)
        for entity_type, count in self._counts.items():
            print(f"  {entity_type}: {count} records")
        if self._decisions:
            tally = ", ".join(f"{name}={n}" for name, n in sorted(self._decisions.items()))
            print(f"  decisions: {tally}")
