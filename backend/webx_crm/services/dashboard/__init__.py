"""Dashboard aggregation services."""

from webx_crm.services.dashboard.aggregator import DashboardAggregator, DashboardResult
from webx_crm.services.dashboard.repository import DashboardRepository

__all__ = ["DashboardAggregator", "DashboardRepository", "DashboardResult"]
