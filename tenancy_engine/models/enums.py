"""Enumeration types for tenancy billing and settlement entities."""

from enum import Enum


class MeterKind(str, Enum):
    COLD_WATER = "COLD_WATER"
    HOT_WATER = "HOT_WATER"
    ELECTRICITY = "ELECTRICITY"
    HEATING = "HEATING"
    GAS = "GAS"
    GARBAGE = "GARBAGE"
    CUSTOM = "CUSTOM"


class ReadingStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class ObligationKind(str, Enum):
    UNPAID_RENT = "UNPAID_RENT"
    UNPAID_UTILITIES = "UNPAID_UTILITIES"
    CLEANING = "CLEANING"
    DAMAGE = "DAMAGE"
    OTHER = "OTHER"

    @property
    def is_debt(self) -> bool:
        """Whether the item is outstanding debt rather than a one-off charge."""
        return self in (ObligationKind.UNPAID_RENT, ObligationKind.UNPAID_UTILITIES)


class LateFeeStatus(str, Enum):
    UNRESOLVED = "UNRESOLVED"
    APPLIED = "APPLIED"
    WAIVED = "WAIVED"


class Decision(str, Enum):
    REFUND = "REFUND"
    INVOICE = "INVOICE"
    BLOCKED = "BLOCKED"


class NoticeStatus(str, Enum):
    ADEQUATE = "ADEQUATE"
    SHORT = "SHORT"
    NONE = "NONE"


class ContractPhase(str, Enum):
    ACTIVE = "ACTIVE"
    INDEFINITE = "INDEFINITE"  # fixed term over, tenancy continues until notice


class MoveOutTiming(str, Enum):
    EARLY = "EARLY"
    AT_END = "AT_END"
    LATE = "LATE"
