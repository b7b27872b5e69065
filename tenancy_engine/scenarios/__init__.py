"""Scenarios for generating realistic rental portfolios."""

from tenancy_engine.scenarios.portfolio import PortfolioScenario

__all__ = ["PortfolioScenario"]
