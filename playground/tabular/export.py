"""Result exporter — persists a ResultSet as a workbook sheet.

Export is a write side effect of a read query. Failures never discard the
computed result: the engine turns ExportError into a ResultSet warning.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from playground.errors import ExportError
from playground.rows import ResultSet

if TYPE_CHECKING:
    from data.workbook import WorkbookStore

logger = logging.getLogger(__name__)


def export_result(result: ResultSet, sheet_name: str, workbook: WorkbookStore) -> None:
    """
    Write `result` to `sheet_name`, replacing a same-named sheet.

    Header comes from the first row's columns; every row's values are
    written in that row's order, as text.

    Raises:
        ExportError: The workbook could not be opened, modified or saved
    """
    if not result:
        return

    header = list(result.rows[0].columns)
    rows = [[value.as_text() for value in row.values()] for row in result.rows]

    try:
        workbook.replace_sheet(sheet_name, header, rows)
    except Exception as e:
        logger.error(f"Export to sheet '{sheet_name}' failed: {e}")
        raise ExportError(f"Export to sheet '{sheet_name}' failed: {e}") from e
