"""Workbook storage — openpyxl sheet accessor for the tabular engine.

Operations:
- open(): scoped read-only reader (sheet_names, read_sheet)
- replace_sheet(): delete + recreate one sheet and save
- install(): make an uploaded file the active workbook

Writes to the same path are serialised by a per-path lock. Saves go to a
temporary file that is renamed over the original, so readers (which take no
lock) always see a complete workbook.
"""

import logging
import os
import re
import shutil
import tempfile
import threading
from contextlib import contextmanager
from datetime import date, datetime, time
from pathlib import Path
from typing import Any, Iterator, Sequence

from openpyxl import Workbook, load_workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.table import Table, TableStyleInfo

from constants import (
    EXPORT_MAX_COLUMN_WIDTH,
    EXPORT_MIN_COLUMN_WIDTH,
    EXPORT_TABLE_STYLE,
)
from playground.errors import ConfigurationError, SheetNotFound, SourceNotFound
from playground.values import format_number

logger = logging.getLogger(__name__)


# =============================================================================
# Writer locks (one per resolved workbook path)
# =============================================================================

_writer_locks: dict[str, threading.Lock] = {}
_writer_locks_guard = threading.Lock()


def writer_lock(path: str | Path) -> threading.Lock:
    """Get the lock serialising writes to `path` (thread-safe)."""
    key = str(Path(path).resolve())
    with _writer_locks_guard:
        lock = _writer_locks.get(key)
        if lock is None:
            lock = threading.Lock()
            _writer_locks[key] = lock
    return lock


# =============================================================================
# Cell helpers
# =============================================================================

def cell_text(value: Any) -> str:
    """Textual form of an openpyxl cell value (None → "")."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float):
        return format_number(value)
    if isinstance(value, datetime):
        return value.isoformat(sep=" ")
    if isinstance(value, (date, time)):
        return value.isoformat()
    return str(value)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _find_sheet_name(names: Sequence[str], wanted: str) -> str | None:
    """Sheet names are case-insensitive in Excel."""
    folded = wanted.casefold()
    for name in names:
        if name.casefold() == folded:
            return name
    return None


# =============================================================================
# Reader
# =============================================================================

class SheetReader:
    """Read-only view over an open workbook. Obtain via WorkbookStore.open()."""

    def __init__(self, workbook):
        self._workbook = workbook

    def sheet_names(self) -> list[str]:
        return list(self._workbook.sheetnames)

    def read_sheet(self, name: str) -> tuple[list[str], list[list[str]]]:
        """
        Read a sheet as header + data rows, all cells as text.

        The first row with any content is the header; later rows with any
        content are data. Columns start at the leftmost used column and end
        at the header's last non-blank cell.

        Raises:
            SheetNotFound: No sheet with this name (case-insensitive)
        """
        actual = _find_sheet_name(self._workbook.sheetnames, name)
        if actual is None:
            raise SheetNotFound(f"Sheet '{name}' not found in Excel workbook.")

        used = [
            list(values)
            for values in self._workbook[actual].iter_rows(values_only=True)
            if values and not all(_is_blank(v) for v in values)
        ]
        if not used:
            return [], []

        first_col = min(
            next(i for i, v in enumerate(values) if not _is_blank(v))
            for values in used
        )
        header_cells = used[0][first_col:]
        while header_cells and _is_blank(header_cells[-1]):
            header_cells.pop()
        header = [cell_text(v) for v in header_cells]

        rows = []
        for values in used[1:]:
            cells = values[first_col:first_col + len(header)]
            cells += [None] * (len(header) - len(cells))
            rows.append([cell_text(v) for v in cells])

        return header, rows


# =============================================================================
# Store
# =============================================================================

class WorkbookStore:
    """
    Handle to one workbook file.

    Args:
        path: Workbook path (None/empty = not configured)
    """

    def __init__(self, path: str | None):
        self.path = path

    def _require_path(self, must_exist: bool = True) -> Path:
        if not self.path:
            raise ConfigurationError("Excel file path not configured (WORKBOOK_PATH).")
        path = Path(self.path)
        if must_exist and not path.exists():
            raise SourceNotFound(f"Excel file not found: {self.path}")
        return path

    def exists(self) -> bool:
        return bool(self.path) and Path(self.path).exists()

    @contextmanager
    def open(self) -> Iterator[SheetReader]:
        """Scoped read-only access; the workbook is closed on exit."""
        workbook = load_workbook(self._require_path(), read_only=True, data_only=True)
        try:
            yield SheetReader(workbook)
        finally:
            workbook.close()

    def sheet_names(self) -> list[str]:
        with self.open() as reader:
            return reader.sheet_names()

    def replace_sheet(
        self,
        name: str,
        header: Sequence[str],
        rows: Sequence[Sequence[str]],
    ) -> None:
        """
        Replace (or create) a sheet with header + rows and save.

        Any sheet whose name matches case-insensitively is deleted first.
        The header row is bold and the written range becomes an Excel table.
        """
        path = self._require_path()

        with writer_lock(path):
            workbook = load_workbook(path, keep_vba=_is_macro_enabled(path))
            try:
                existing = _find_sheet_name(workbook.sheetnames, name)
                if existing is not None:
                    del workbook[existing]
                    logger.info(f"Replacing sheet '{existing}' in {path}")

                sheet = workbook.create_sheet(name)
                _write_table(workbook, sheet, header, rows)
                _save_atomic(workbook, path)
            finally:
                workbook.close()

        logger.info(f"Wrote sheet '{name}' ({len(rows)} rows) to {path}")

    def install(self, source: str | Path) -> Path:
        """
        Copy `source` over the active workbook path.

        The source must be a readable workbook; it is validated before the
        active file is touched.
        """
        path = self._require_path(must_exist=False)
        load_workbook(source, read_only=True).close()

        path.parent.mkdir(parents=True, exist_ok=True)
        with writer_lock(path):
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, suffix=path.suffix)
            os.close(fd)
            try:
                shutil.copyfile(source, tmp_name)
                if path.exists():
                    shutil.copymode(path, tmp_name)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise

        logger.info(f"Installed workbook {source} as {path}")
        return path


def create_workbook(path: str | Path, sheets: dict[str, Sequence[Sequence[Any]]]) -> Path:
    """
    Write a new workbook with the given sheets (first row = header).

    Used by fixtures and the CLI to seed data.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    workbook = Workbook()
    workbook.remove(workbook.active)
    for name, values in sheets.items():
        sheet = workbook.create_sheet(name)
        for row in values:
            sheet.append(list(row))

    with writer_lock(path):
        _save_atomic(workbook, path)
    return path


# =============================================================================
# Internal
# =============================================================================

TABLE_NAME_CHARS = re.compile(r"[^A-Za-z0-9_]")

# Table names Excel would read as a cell reference (A1 or R1C1 style)
CELL_REFERENCE_NAME = re.compile(r"^(?:[A-Za-z]{1,3}\d+|[Rr]\d*(?:[Cc]\d*)?|[Cc]\d*)$")


def _table_name(workbook, sheet_name: str) -> str:
    """Unique, Excel-valid table name derived from the sheet name."""
    base = TABLE_NAME_CHARS.sub("_", sheet_name) or "Result"
    if not (base[0].isalpha() or base[0] == "_") or CELL_REFERENCE_NAME.match(base):
        base = f"T_{base}"

    taken = {
        table_name.casefold()
        for ws in workbook.worksheets
        for table_name in ws.tables.keys()
    }
    candidate = base
    suffix = 1
    while candidate.casefold() in taken:
        suffix += 1
        candidate = f"{base}_{suffix}"
    return candidate


def _write_table(workbook, sheet, header: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
    bold = Font(bold=True)
    for col, name in enumerate(header, start=1):
        cell = sheet.cell(row=1, column=col, value=name)
        cell.font = bold

    for r, values in enumerate(rows, start=2):
        for col, value in enumerate(values, start=1):
            sheet.cell(row=r, column=col, value=value)

    if header:
        ref = f"A1:{get_column_letter(len(header))}{len(rows) + 1}"
        table = Table(displayName=_table_name(workbook, sheet.title), ref=ref)
        table.tableStyleInfo = TableStyleInfo(name=EXPORT_TABLE_STYLE, showRowStripes=True)
        sheet.add_table(table)

    # Size columns to content
    widths: dict[int, int] = {}
    for values in [list(header), *rows]:
        for col, value in enumerate(values, start=1):
            widths[col] = max(widths.get(col, 0), len(str(value)))
    for col, width in widths.items():
        width = min(max(width + 2, EXPORT_MIN_COLUMN_WIDTH), EXPORT_MAX_COLUMN_WIDTH)
        sheet.column_dimensions[get_column_letter(col)].width = width


def _save_atomic(workbook, path: Path) -> None:
    """Save to a temp file next to `path`, then rename over it."""
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, suffix=path.suffix)
    os.close(fd)
    try:
        workbook.save(tmp_name)
        if path.exists():
            shutil.copymode(path, tmp_name)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def _is_macro_enabled(path: Path) -> bool:
    return path.suffix.lower() == ".xlsm"
