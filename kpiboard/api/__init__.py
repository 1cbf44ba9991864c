"""API routers."""

from kpiboard.api import backup, config, departments, logs, overview, session, snapshots

__all__ = [
    "session",
    "departments",
    "overview",
    "snapshots",
    "config",
    "backup",
    "logs",
]
