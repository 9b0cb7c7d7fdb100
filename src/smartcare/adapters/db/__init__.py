"""Database adapters."""

from smartcare.adapters.db.app_db import AppDatabase

__all__ = ["AppDatabase"]
