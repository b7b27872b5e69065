"""Seeded randomness shared by the tenancy data generators."""

from __future__ import annotations

import random
from abc import ABC
from decimal import Decimal

from faker import Faker


class BaseGenerator(ABC):
    """Base class for the catalog and tenancy generators.

    Faker supplies identifiers and free text, ``rng`` supplies numbers.
    Both are per-instance, so two generators built with the same seed
    produce the same data regardless of what else runs in the process.

    Parameters
    ----------
    seed : int | None
        Random seed for reproducibility.
    locale : str
        Faker locale (default ``en_US``).
    """

    def __init__(self, seed: int | None = None, locale: str = "en_US") -> None:
        self.fake = Faker(locale)
        self.rng = random.Random(seed)
        if seed is not None:
            self.fake.seed_instance(seed)

    def make_id(self) -> str:
        return self.fake.uuid4()

    def chance(self, rate: float) -> bool:
        """True with probability ``rate``."""
        return self.rng.random() < rate

    def money(self, low: int, high: int) -> Decimal:
        """Whole-cent amount between ``low`` and ``high`` currency units."""
        return Decimal(self.rng.randint(low * 100, high * 100)) / 100
