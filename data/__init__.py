"""Data management"""

from .database import Database, init_database, get_connection
from .loader import load_csv, get_data_info
from .workbook import WorkbookStore, create_workbook

__all__ = [
    "Database",
    "init_database",
    "get_connection",
    "load_csv",
    "get_data_info",
    "WorkbookStore",
    "create_workbook",
]
