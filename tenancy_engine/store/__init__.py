"""Provider interfaces and the in-memory reference store."""

from tenancy_engine.store.memory import InMemoryTenancyStore
from tenancy_engine.store.providers import (
    CatalogProvider,
    MoveOutProvider,
    ObligationProvider,
    ReadingProvider,
)

__all__ = [
    "CatalogProvider",
    "InMemoryTenancyStore",
    "MoveOutProvider",
    "ObligationProvider",
    "ReadingProvider",
]
