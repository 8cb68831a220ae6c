"""
End-to-end tests for the tabular engine over a real workbook.

Run: pytest playground/tests/test_tabular.py -v
"""

import pytest
from openpyxl import load_workbook

from data import WorkbookStore, create_workbook
from playground import (
    ConfigurationError,
    JoinKeyNotFound,
    QueryRequest,
    QueryTimeout,
    SheetFormatError,
    SheetNotFound,
    SourceNotFound,
)
from playground.tabular import TabularEngine


def run(workbook, **fields):
    request = QueryRequest(engine="tabular", **fields)
    return TabularEngine().execute(request, workbook)


class TestScenarios:
    """Employees sheet: Ann/Eng, Bob/Ops."""

    def test_filter(self, workbook):
        result = run(workbook, table="Employees", filter="dept = Eng")
        assert result.to_records() == [{"id": "1", "name": "Ann", "dept": "Eng"}]

    def test_order_desc(self, workbook):
        result = run(workbook, table="Employees", order_by="id DESC")
        assert [r["id"] for r in result.to_records()] == ["2", "1"]

    def test_limit_offset(self, workbook):
        result = run(workbook, table="Employees", limit=1, offset=1)
        assert result.to_records() == [{"id": "2", "name": "Bob", "dept": "Ops"}]

    def test_values_load_as_text(self, workbook):
        result = run(workbook, table="Orders")
        assert result.to_records()[0] == {"order_id": "100", "emp_id": "1", "amount": "25.5"}

    def test_unparseable_filter_ignored(self, workbook):
        result = run(workbook, table="Employees", filter="not-an-equality")
        assert len(result) == 2

    def test_sheet_lookup_case_insensitive(self, workbook):
        assert len(run(workbook, table="employees")) == 2


class TestPagination:

    @pytest.mark.parametrize("offset,limit", [(0, 1), (1, 2), (2, 5), (0, 0), (3, 1), (10, 2)])
    def test_matches_slice(self, workbook, offset, limit):
        full = run(workbook, table="Orders").to_records()
        page = run(workbook, table="Orders", offset=offset, limit=limit).to_records()
        assert page == full[offset:offset + limit]

    def test_offset_beyond_rows(self, workbook):
        assert len(run(workbook, table="Employees", offset=99)) == 0


class TestJoins:

    def test_join_and_collision(self, workbook):
        # Depts also has a "name" column: the department name replaces the
        # employee name after the join.
        result = run(
            workbook,
            table="Employees",
            joins=[{"table": "Depts", "leftColumn": "dept", "rightColumn": "code"}],
            order_by="id",
        )
        assert result.to_records() == [
            {"id": "1", "name": "Engineering", "dept": "Eng", "code": "Eng", "floor": "3"},
            {"id": "2", "name": "Operations", "dept": "Ops", "code": "Ops", "floor": "1"},
        ]

    def test_join_chain(self, workbook):
        result = run(
            workbook,
            table="Employees",
            joins=[
                {"table": "Orders", "leftColumn": "id", "rightColumn": "emp_id"},
                {"table": "Depts", "leftColumn": "dept", "rightColumn": "code"},
            ],
            filter="floor = 3",
            order_by="amount DESC",
            columns=["order_id", "amount", "id"],
        )
        assert result.to_records() == [
            {"id": "1", "order_id": "100", "amount": "25.5"},
            {"id": "1", "order_id": "101", "amount": "7"},
        ]

    def test_unknown_join_key(self, workbook):
        with pytest.raises(JoinKeyNotFound):
            run(
                workbook,
                table="Employees",
                joins=[{"table": "Depts", "leftColumn": "dept", "rightColumn": "nope"}],
            )


class TestProjection:

    def test_columns_keep_sheet_order(self, workbook):
        result = run(workbook, table="Employees", columns=["dept", "id"])
        assert result.columns == ("id", "dept")

    def test_order_by_hidden_column(self, workbook):
        result = run(workbook, table="Employees", columns=["name"], order_by="id DESC")
        assert result.to_records() == [{"name": "Bob"}, {"name": "Ann"}]


class TestExport:

    def test_export_writes_sheet(self, workbook, workbook_path):
        result = run(workbook, table="Employees", filter="dept = Eng", export_sheet_name="EngOnly")

        assert result.to_records() == [{"id": "1", "name": "Ann", "dept": "Eng"}]
        assert result.warnings == []

        wb = load_workbook(workbook_path)
        sheet = wb["EngOnly"]
        assert [c.value for c in sheet[1]] == ["id", "name", "dept"]
        assert [c.value for c in sheet[2]] == ["1", "Ann", "Eng"]
        assert sheet["A1"].font.bold
        assert len(sheet.tables) == 1
        table = next(iter(sheet.tables.values()))
        assert table.ref == "A1:C2"
        assert table.tableStyleInfo.name == "TableStyleMedium2"

    def test_export_replaces_same_name_case_insensitive(self, workbook, workbook_path):
        run(workbook, table="Employees", export_sheet_name="Result")
        run(workbook, table="Employees", filter="dept = Ops", export_sheet_name="RESULT")

        wb = load_workbook(workbook_path)
        matching = [name for name in wb.sheetnames if name.casefold() == "result"]
        assert matching == ["RESULT"]
        assert wb["RESULT"].max_row == 2

        # Exported sheet is queryable like any other
        again = run(workbook, table="result")
        assert again.to_records() == [{"id": "2", "name": "Bob", "dept": "Ops"}]

    def test_empty_result_not_exported(self, workbook, workbook_path):
        run(workbook, table="Employees", filter="dept = HR", export_sheet_name="Nobody")
        assert "Nobody" not in load_workbook(workbook_path).sheetnames

    def test_export_failure_is_warning(self, workbook, monkeypatch):
        def broken(*args, **kwargs):
            raise PermissionError("workbook is locked")

        monkeypatch.setattr(WorkbookStore, "replace_sheet", broken)
        result = run(workbook, table="Employees", export_sheet_name="Out")

        assert len(result) == 2
        assert len(result.warnings) == 1
        assert "workbook is locked" in result.warnings[0]


class TestErrors:

    def test_missing_sheet(self, workbook):
        with pytest.raises(SheetNotFound):
            run(workbook, table="Nope")

    def test_missing_file(self, tmp_path):
        with pytest.raises(SourceNotFound):
            run(WorkbookStore(str(tmp_path / "absent.xlsx")), table="Employees")

    def test_not_configured(self):
        with pytest.raises(ConfigurationError):
            run(WorkbookStore(None), table="Employees")

    def test_duplicate_header(self, tmp_path):
        path = create_workbook(tmp_path / "dup.xlsx", {"S": [["a", "a"], ["1", "2"]]})
        with pytest.raises(SheetFormatError):
            run(WorkbookStore(str(path)), table="S")

    def test_deadline(self, workbook):
        request = QueryRequest(engine="tabular", table="Employees")
        with pytest.raises(QueryTimeout):
            TabularEngine().execute(request, workbook, timeout=1e-9)
