"""Unit tests for the tracker Excel export import."""

from datetime import date, datetime
from io import BytesIO

import pytest
from openpyxl import Workbook
from sqlalchemy.exc import OperationalError

from fleet_tracker.core.database.entities import Vehicle
from fleet_tracker.core.errors import ImportValidationError
from fleet_tracker.server.services import excel_mileage
from fleet_tracker.server.services.excel_mileage import (
    MileageRow,
    import_workbook,
    parse_row,
    read_rows,
    validate_row,
)

TODAY = date(2026, 10, 18)
HEADERS = ["Device", "Route Length", "Mileage", "First Movement", "Last Stop"]


def workbook_bytes(rows, headers=HEADERS) -> bytes:
    workbook = Workbook()
    sheet = workbook.active
    sheet.append(["Daily report"])
    sheet.append(headers)
    for row in rows:
        sheet.append(row)
    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def _row(**overrides) -> MileageRow:
    values = {"device": "Ford Transit", "daily_mileage": 120, "odometer_reading": 45210, "record_date": "2026-10-17"}
    values.update(overrides)
    return MileageRow(**values)


class TestReadRows:
    def test_rows_are_keyed_by_header(self):
        content = workbook_bytes([["Ford Transit", "123.4 mi", "45210 mi", "2026-10-17 07:01", "2026-10-17 17:45"]])

        assert read_rows(content) == [
            {
                "Device": "Ford Transit",
                "Route Length": "123.4 mi",
                "Mileage": "45210 mi",
                "First Movement": "2026-10-17 07:01",
                "Last Stop": "2026-10-17 17:45",
            }
        ]

    def test_blank_rows_are_dropped(self):
        content = workbook_bytes([["Ford Transit", 10, None, None, None], [None, None, None, None, None]])

        assert len(read_rows(content)) == 1

    def test_header_only_sheet(self):
        assert read_rows(workbook_bytes([])) == []

    def test_not_a_workbook(self):
        with pytest.raises(ImportValidationError, match="Could not read Excel file"):
            read_rows(b"not an excel file")

    def test_too_many_rows(self, monkeypatch):
        monkeypatch.setattr(excel_mileage, "MAX_ROWS", 2)
        content = workbook_bytes([["Van", 1, 1, None, None]] * 3)

        with pytest.raises(ImportValidationError, match="Too many rows. Maximum is 2 rows."):
            read_rows(content)

    def test_file_too_large(self, monkeypatch):
        monkeypatch.setattr(excel_mileage, "MAX_FILE_SIZE", 10)

        with pytest.raises(ImportValidationError, match="File too large"):
            read_rows(b"x" * 11)


class TestParseRow:
    def test_leading_numbers_and_last_stop_date(self):
        row = parse_row(
            {
                "Device": " Ford Transit ",
                "Route Length": "123.6 mi",
                "Mileage": "45210.2 mi",
                "First Movement": "2026-10-16 07:01",
                "Last Stop": "2026-10-17 17:45",
            },
            TODAY,
        )

        assert row == MileageRow(
            device="Ford Transit", daily_mileage=124, odometer_reading=45210, record_date="2026-10-17"
        )

    def test_numeric_cells_and_datetime(self):
        row = parse_row(
            {"Device": "Van", "Route Length": 12.4, "Mileage": 900, "Last Stop": datetime(2026, 10, 17, 18, 0)},
            TODAY,
        )

        assert row.daily_mileage == 12
        assert row.odometer_reading == 900
        assert row.record_date == "2026-10-17"

    def test_falls_back_to_first_movement_then_today(self):
        assert parse_row({"Device": "Van", "First Movement": "2026-10-10 08:00"}, TODAY).record_date == "2026-10-10"
        assert parse_row({"Device": "Van"}, TODAY).record_date == "2026-10-18"

    def test_unparseable_numbers(self):
        row = parse_row({"Device": "Van", "Route Length": "n/a", "Mileage": "unknown"}, TODAY)

        assert row.daily_mileage == 0
        assert row.odometer_reading is None

    @pytest.mark.parametrize("device", [None, "", "   ", "Device"])
    def test_rows_without_a_device(self, device):
        assert parse_row({"Device": device, "Route Length": 10}, TODAY) is None


class TestValidateRow:
    def test_valid(self):
        assert validate_row(_row(), TODAY) == []

    def test_mileage_limits(self):
        assert validate_row(_row(daily_mileage=5000), TODAY) == ["Daily mileage out of range (0-2000): 5000"]
        assert validate_row(_row(odometer_reading=1_000_001), TODAY) == [
            "Odometer reading out of range (0-1000000): 1000001"
        ]

    @pytest.mark.parametrize(
        "record_date,expected",
        [
            ("17/10/2026", "Invalid date format: 17/10/2026"),
            ("2026-13-01", "Invalid date format: 2026-13-01"),
            ("2026-10-19", "Date out of acceptable range: 2026-10-19"),
            ("2025-10-17", "Date out of acceptable range: 2025-10-17"),
        ],
    )
    def test_dates(self, record_date, expected):
        assert validate_row(_row(record_date=record_date), TODAY) == [expected]

    def test_one_year_old_is_accepted(self):
        assert validate_row(_row(record_date="2025-10-18"), TODAY) == []


class TestImportWorkbook:
    async def test_no_vehicles(self, repos):
        content = workbook_bytes([["Ford Transit", 10, 100, None, "2026-10-17"]])

        assert await import_workbook(repos, content, TODAY) == {
            "error": "No vehicles found for this user",
            "results": [],
        }

    async def test_imports_matching_rows(self, repos):
        van = await repos.vehicles.create(Vehicle(registration="AB12 CDE", make="Ford", model="Transit"))
        content = workbook_bytes(
            [
                ["Ford Transit", "123 mi", "45210 mi", None, "2026-10-17 17:45"],
                ["Tesla Model 3", "50 mi", "1000 mi", None, "2026-10-17 17:45"],
                ["Ford Transit", "0 mi", None, None, "2026-10-16 17:45"],
                ["Ford Transit", "5000 mi", None, None, "2026-10-15 17:45"],
            ]
        )

        result = await import_workbook(repos, content, TODAY)

        assert [r["status"] for r in result["results"]] == ["success", "not_found", "skipped", "validation_error"]
        assert result["results"][1]["error"] == "No matching vehicle in user's fleet"
        assert result["results"][2]["error"] == "No mileage data"
        assert (result["processed"], result["skipped"], result["errors"]) == (1, 1, 2)

        records = await repos.mileage_records.list()
        assert len(records) == 1
        assert records[0].vehicle_id == van.id
        assert records[0].daily_mileage == 123
        assert records[0].odometer_reading == 45210
        assert records[0].source == "n8n_excel"

    async def test_reimport_replaces_the_day(self, repos):
        await repos.vehicles.create(Vehicle(registration="AB12 CDE", make="Ford", model="Transit"))

        await import_workbook(repos, workbook_bytes([["Ford Transit", 100, None, None, "2026-10-17"]]), TODAY)
        await import_workbook(repos, workbook_bytes([["Ford Transit", 140, None, None, "2026-10-17"]]), TODAY)

        records = await repos.mileage_records.list()
        assert [r.daily_mileage for r in records] == [140]

    async def test_other_users_vehicles_are_not_matched(self, repos, other_repos):
        await other_repos.vehicles.create(Vehicle(registration="ZZ99 ZZZ", make="Ford", model="Transit"))
        await repos.vehicles.create(Vehicle(registration="AB12 CDE", make="Vauxhall", model="Vivaro"))

        result = await import_workbook(repos, workbook_bytes([["Ford Transit", 10, None, None, "2026-10-17"]]), TODAY)

        assert result["results"][0]["status"] == "not_found"
        assert await other_repos.mileage_records.list() == []

    async def test_database_error_fails_only_its_row(self, repos, monkeypatch):
        van = await repos.vehicles.create(Vehicle(registration="AB12 CDE", make="Ford", model="Transit"))
        van_id = van.id
        upsert = repos.mileage_records.upsert
        calls = []

        async def upsert_failing_once(*args, **kwargs):
            calls.append(args)
            if len(calls) == 1:
                raise OperationalError("INSERT INTO mileage_records", {}, Exception("database is locked"))
            return await upsert(*args, **kwargs)

        monkeypatch.setattr(repos.mileage_records, "upsert", upsert_failing_once)
        content = workbook_bytes(
            [
                ["Ford Transit", 80, None, None, "2026-10-16"],
                ["Ford Transit", 95, None, None, "2026-10-17"],
            ]
        )

        result = await import_workbook(repos, content, TODAY)

        assert [r["status"] for r in result["results"]] == ["error", "success"]
        assert "database is locked" in result["results"][0]["error"]
        assert (result["processed"], result["skipped"], result["errors"]) == (1, 0, 1)

        records = await repos.mileage_records.list()
        assert [(r.vehicle_id, r.record_date, r.daily_mileage) for r in records] == [(van_id, date(2026, 10, 17), 95)]
