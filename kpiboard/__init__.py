"""KPI Board: departmental KPI and goal tracking backend."""

__version__ = "0.1.0"
