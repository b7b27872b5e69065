"""Synthetic data generators."""

from tenancy_engine.generators.catalog import CatalogGenerator
from tenancy_engine.generators.tenancy import TenancyGenerator

__all__ = ["CatalogGenerator", "TenancyGenerator"]
