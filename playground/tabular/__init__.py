"""Tabular path — in-memory operators over workbook sheets."""

from .engine import TabularEngine, load_sheet
from .export import export_result

__all__ = [
    "TabularEngine",
    "load_sheet",
    "export_result",
]
