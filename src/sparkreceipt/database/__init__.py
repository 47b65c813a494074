"""Record store layer for sparkreceipt."""

from sparkreceipt.database.base import Database
from sparkreceipt.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
