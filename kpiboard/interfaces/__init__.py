"""Abstract interfaces for infrastructure abstraction."""

from kpiboard.interfaces.kpi_store import IKpiStore

__all__ = ["IKpiStore"]
