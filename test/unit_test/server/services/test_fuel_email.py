"""Unit tests for the fuel invoice email import."""

from datetime import date

from sqlalchemy.exc import OperationalError

from fleet_tracker.core.database.entities import Vehicle
from fleet_tracker.core.models.domain.extraction import FuelInvoiceExtraction, FuelInvoiceLineItem
from fleet_tracker.server.services.fuel_email import process_fuel_email

TODAY = date(2026, 10, 18)


class FakeExtractor:
    def __init__(self, extraction: FuelInvoiceExtraction):
        self.extraction = extraction
        self.calls = []

    async def extract_email_invoice(self, file_content, file_name, vehicle_registrations=()):
        self.calls.append((file_content, file_name, list(vehicle_registrations)))
        return self.extraction


async def test_creates_records_for_fleet_vehicles(repos):
    van = await repos.vehicles.create(Vehicle(registration="AB12 CDE", make="Ford", model="Transit"))
    extractor = FakeExtractor(
        FuelInvoiceExtraction(
            invoice_date="2026-10-02",
            station="UK Fuels",
            line_items=[
                FuelInvoiceLineItem(registration="ab12cde", litres=50, cost_per_litre=1.45, mileage=12000.4),
                FuelInvoiceLineItem(registration="XX99 XXX", litres=20, cost_per_litre=1.5, total_cost=30),
            ],
        )
    )

    result = await process_fuel_email(repos, extractor, "invoice text", "october.pdf", TODAY)

    assert result.success is True
    assert result.message == "Processed invoice: 1 records created, 1 failed"
    assert extractor.calls == [("invoice text", "october.pdf", ["AB12 CDE"])]

    created = result.created_records[0]
    assert created["vehicle_id"] == str(van.id)
    assert created["fill_date"] == "2026-10-02"
    assert created["total_cost"] == 72.5
    assert created["mileage"] == 12000
    assert created["station"] == "UK Fuels"
    assert created["notes"] == "Auto-imported from email: october.pdf"

    failed = result.failed_records[0]
    assert failed.registration == "XX99 XXX"
    assert failed.reason == 'Vehicle registration "XX99 XXX" not found in fleet'


async def test_nothing_extracted(repos):
    extraction = FuelInvoiceExtraction(station="UK Fuels")

    result = await process_fuel_email(repos, FakeExtractor(extraction), "junk", "junk.pdf", TODAY)

    assert result.success is False
    assert result.message == "No fuel data could be extracted from the invoice"
    assert result.extracted_data == extraction
    assert await repos.fuel_records.list() == []


async def test_unparseable_invoice_date_uses_today(repos):
    await repos.vehicles.create(Vehicle(registration="AB12 CDE", make="Ford", model="Transit"))
    extractor = FakeExtractor(
        FuelInvoiceExtraction(
            invoice_date="2nd October",
            line_items=[FuelInvoiceLineItem(registration="AB12 CDE", litres=10, cost_per_litre=1.5)],
        )
    )

    await process_fuel_email(repos, extractor, "invoice", "invoice.pdf", TODAY)

    records = await repos.fuel_records.list()
    assert records[0].fill_date == TODAY
    assert records[0].total_cost == 15


async def test_only_own_vehicles_are_matched(repos, other_repos):
    await other_repos.vehicles.create(Vehicle(registration="AB12 CDE", make="Ford", model="Transit"))
    extractor = FakeExtractor(
        FuelInvoiceExtraction(line_items=[FuelInvoiceLineItem(registration="AB12 CDE", litres=10, cost_per_litre=1.5)])
    )

    result = await process_fuel_email(repos, extractor, "invoice", "invoice.pdf", TODAY)

    assert result.created_records == []
    assert len(result.failed_records) == 1
    assert extractor.calls[0][2] == []
    assert await other_repos.fuel_records.list() == []


async def test_serializes_camel_case(repos):
    extractor = FakeExtractor(FuelInvoiceExtraction(line_items=[FuelInvoiceLineItem(registration="AB12 CDE")]))

    result = await process_fuel_email(repos, extractor, "invoice", "invoice.pdf", TODAY)

    body = result.model_dump(mode="json", by_alias=True)
    assert set(body) == {"success", "message", "createdRecords", "failedRecords", "extractedData"}


async def test_database_error_fails_only_its_line_item(repos, monkeypatch):
    await repos.vehicles.create(Vehicle(registration="AB12 CDE", make="Ford", model="Transit"))
    create = repos.fuel_records.create
    calls = []

    async def create_failing_once(record):
        calls.append(record)
        if len(calls) == 1:
            raise OperationalError("INSERT INTO fuel_records", {}, Exception("database is locked"))
        return await create(record)

    monkeypatch.setattr(repos.fuel_records, "create", create_failing_once)
    extractor = FakeExtractor(
        FuelInvoiceExtraction(
            invoice_date="2026-10-02",
            line_items=[
                FuelInvoiceLineItem(registration="AB12 CDE", litres=40, cost_per_litre=1.5),
                FuelInvoiceLineItem(registration="AB12 CDE", litres=30, cost_per_litre=1.5),
            ],
        )
    )

    result = await process_fuel_email(repos, extractor, "invoice", "invoice.pdf", TODAY)

    assert result.message == "Processed invoice: 1 records created, 1 failed"
    assert result.failed_records[0].litres == 40
    assert result.failed_records[0].reason.startswith("Database error:")
    assert result.created_records[0]["litres"] == 30

    records = await repos.fuel_records.list()
    assert [r.litres for r in records] == [30]
