"""Derived billing results."""

from dataclasses import dataclass, field
from decimal import Decimal


@dataclass
class ChargeLine:
    """One meter's contribution to a period bill.

    For shared meters ``consumption`` holds the apartment's floor-area share.
    """

    meter_id: str
    current: Decimal
    previous: Decimal
    consumption: Decimal
    unit_price: Decimal
    total: Decimal
    shared: bool = False


@dataclass
class CommunalCalculation:
    """Utility bill of one apartment for one period."""

    apartment_id: str
    period: str
    lines: list[ChargeLine] = field(default_factory=list)
    fixed_charges: Decimal = Decimal("0")
    variable_charges: Decimal = Decimal("0")
    total_amount: Decimal = Decimal("0")
    warnings: list[str] = field(default_factory=list)


@dataclass
class CompletenessReport:
    """Resolution state of the required meters for a period."""

    missing: list[str] = field(default_factory=list)
    pending: list[str] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.missing and not self.pending
