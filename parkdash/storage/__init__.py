from .base import DashboardStore
from .sqlite_storage import SQLiteDashboardStore

__all__ = ['DashboardStore', 'SQLiteDashboardStore']
