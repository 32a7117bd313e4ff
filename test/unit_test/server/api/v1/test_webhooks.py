import base64
from datetime import date, timedelta
from io import BytesIO

import pytest
import pytest_asyncio
from httpx import AsyncClient
from openpyxl import Workbook

from fleet_tracker.core.database.entities import Vehicle
from fleet_tracker.core.errors import ExtractionError
from fleet_tracker.core.models.domain.extraction import FuelInvoiceExtraction, FuelInvoiceLineItem
from fleet_tracker.server.main import app
from fleet_tracker.server.services.invoice_extraction import get_invoice_extractor

pytestmark = pytest.mark.asyncio

BASE = "/api/v1/webhooks"

EXCEL_HEADERS = ["Device", "Route Length", "Mileage", "First Movement", "Last Stop"]
PNG_BYTES = b"\x89PNG\r\n"


@pytest_asyncio.fixture
async def vehicle(repos):
    return await repos.vehicles.create(
        Vehicle(registration="AB12 CDE", make="Ford", model="Transit", fuel_type="diesel")
    )


@pytest_asyncio.fixture
async def foreign_vehicle(other_repos):
    return await other_repos.vehicles.create(Vehicle(registration="XY99 ZZZ", make="Vauxhall", model="Vivaro"))


def build_workbook(rows) -> bytes:
    """A tracker export: title row, header row, then one row per device."""
    workbook = Workbook()
    sheet = workbook.active
    sheet.append(["Daily mileage report"])
    sheet.append(EXCEL_HEADERS)
    for row in rows:
        sheet.append(row)
    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


class FakeExtractor:
    """Stands in for the AI extractor; returns a canned extraction or raises."""

    def __init__(self, extraction=None, error=None):
        self.extraction = extraction
        self.error = error
        self.calls = []

    async def extract_email_invoice(self, file_content, file_name, vehicle_registrations=()):
        self.calls.append((file_content, file_name, list(vehicle_registrations)))
        if self.error:
            raise self.error
        return self.extraction


@pytest.fixture
def use_extractor():
    def install(extractor):
        app.dependency_overrides[get_invoice_extractor] = lambda: extractor
        return extractor

    return install


class TestImportMileage:
    async def test_requires_bearer_token(self, client: AsyncClient):
        response = await client.post(f"{BASE}/import-mileage", json={"registration": "AB12 CDE", "daily_mileage": 10})
        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized: Missing or invalid authorization header"}

    async def test_imports_record(self, client: AsyncClient, auth_headers, vehicle):
        response = await client.post(
            f"{BASE}/import-mileage",
            json={"registration": "ab12cde", "daily_mileage": 42, "record_date": "2026-10-01", "odometer_reading": 12042},
            headers=auth_headers,
        )
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["record"]["vehicle_id"] == str(vehicle.id)
        assert data["record"]["source"] == "zapier"
        assert data["record"]["odometer_reading"] == 12042

    async def test_same_day_is_replaced(self, client: AsyncClient, auth_headers, repos, vehicle):
        for miles in (42, 60):
            await client.post(
                f"{BASE}/import-mileage",
                json={"registration": "AB12 CDE", "daily_mileage": miles, "record_date": "2026-10-01"},
                headers=auth_headers,
            )

        records = await repos.mileage_records.list()
        assert [r.daily_mileage for r in records] == [60]

    async def test_record_date_defaults_to_today(self, client: AsyncClient, auth_headers, vehicle):
        response = await client.post(
            f"{BASE}/import-mileage", json={"registration": "AB12 CDE", "daily_mileage": 5}, headers=auth_headers
        )
        assert response.json()["record"]["record_date"] == date.today().isoformat()

    async def test_missing_fields(self, client: AsyncClient, auth_headers):
        response = await client.post(f"{BASE}/import-mileage", json={"registration": "AB12 CDE"}, headers=auth_headers)
        assert response.status_code == 400
        assert response.json() == {"error": "Missing required fields: registration, daily_mileage"}

    async def test_bad_date(self, client: AsyncClient, auth_headers, vehicle):
        response = await client.post(
            f"{BASE}/import-mileage",
            json={"registration": "AB12 CDE", "daily_mileage": 5, "record_date": "01/10/2026"},
            headers=auth_headers,
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid record_date: 01/10/2026. Expected YYYY-MM-DD"

    async def test_invalid_json(self, client: AsyncClient, auth_headers):
        response = await client.post(
            f"{BASE}/import-mileage",
            content=b"{not json",
            headers={**auth_headers, "Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid JSON body"}

    async def test_wrong_field_type(self, client: AsyncClient, auth_headers):
        response = await client.post(
            f"{BASE}/import-mileage",
            json={"registration": "AB12 CDE", "daily_mileage": "lots"},
            headers=auth_headers,
        )
        assert response.status_code == 400
        assert response.json()["error"].startswith("Invalid payload:")

    async def test_other_users_registration_is_forbidden(self, client: AsyncClient, auth_headers, foreign_vehicle):
        response = await client.post(
            f"{BASE}/import-mileage", json={"registration": "XY99ZZZ", "daily_mileage": 5}, headers=auth_headers
        )
        assert response.status_code == 403
        assert response.json() == {"error": "Unauthorized: vehicle does not belong to user"}

    async def test_unknown_registration(self, client: AsyncClient, auth_headers, vehicle):
        response = await client.post(
            f"{BASE}/import-mileage", json={"registration": "NO99 NEE", "daily_mileage": 5}, headers=auth_headers
        )
        assert response.status_code == 404
        assert response.json() == {"error": "Vehicle not found: NO99 NEE"}


class TestImportMileageExcel:
    URL = f"{BASE}/import-mileage-excel"

    @pytest.fixture
    def headers(self, webhook_keys, user_id):
        return {"x-api-key": webhook_keys.mileage_import_api_key, "x-user-id": str(user_id)}

    async def test_key_not_configured(self, client: AsyncClient, monkeypatch, user_id):
        from fleet_tracker.server.core.config import settings

        monkeypatch.setattr(settings, "mileage_import_api_key", None)
        response = await client.post(self.URL, content=b"x", headers={"x-api-key": "anything", "x-user-id": str(user_id)})
        assert response.status_code == 500
        assert response.json() == {"error": "Server configuration error"}

    async def test_wrong_key(self, client: AsyncClient, webhook_keys, user_id):
        response = await client.post(self.URL, content=b"x", headers={"x-api-key": "nope", "x-user-id": str(user_id)})
        assert response.status_code == 401
        assert response.json() == {"error": "Invalid or missing API key"}

    async def test_fuel_key_is_not_accepted(self, client: AsyncClient, webhook_keys, user_id):
        response = await client.post(
            self.URL, content=b"x", headers={"x-api-key": webhook_keys.fuel_email_api_key, "x-user-id": str(user_id)}
        )
        assert response.status_code == 401

    async def test_missing_user_id(self, client: AsyncClient, webhook_keys):
        response = await client.post(self.URL, content=b"x", headers={"x-api-key": webhook_keys.mileage_import_api_key})
        assert response.status_code == 400
        assert response.json() == {"error": "x-user-id header is required for API key authentication"}

    async def test_invalid_user_id(self, client: AsyncClient, webhook_keys):
        response = await client.post(
            self.URL, content=b"x", headers={"x-api-key": webhook_keys.mileage_import_api_key, "x-user-id": "bob"}
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid user ID format"}

    async def test_unreadable_file(self, client: AsyncClient, headers, vehicle):
        response = await client.post(self.URL, content=b"not a workbook", headers=headers)
        assert response.status_code == 400
        assert response.json()["error"].startswith("Could not read Excel file")

    async def test_empty_body(self, client: AsyncClient, headers):
        response = await client.post(self.URL, content=b"", headers=headers)
        assert response.status_code == 400
        assert response.json() == {"error": "No file provided"}

    async def test_no_vehicles(self, client: AsyncClient, headers):
        content = build_workbook([["Ford Transit", "10 mi", 1000, None, None]])
        response = await client.post(self.URL, content=content, headers=headers)
        assert response.status_code == 200
        assert response.json() == {"error": "No vehicles found for this user", "results": []}

    async def test_multipart_upload(self, client: AsyncClient, headers, repos, vehicle):
        yesterday = date.today() - timedelta(days=1)
        content = build_workbook(
            [
                ["Ford Transit", "123.4 mi", 45210, None, f"{yesterday.isoformat()} 17:45:00"],
                ["Tesla Model 3", "50 mi", 1000, None, None],
                ["Ford Transit Spare", "0 mi", None, None, None],
            ]
        )
        response = await client.post(
            self.URL,
            files={"file": ("report.xlsx", content, "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet")},
            headers=headers,
        )
        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Import complete"
        assert [r["status"] for r in data["results"]] == ["success", "not_found", "skipped"]
        assert (data["processed"], data["skipped"], data["errors"]) == (1, 1, 1)

        records = await repos.mileage_records.list()
        assert len(records) == 1
        assert records[0].daily_mileage == 123
        assert records[0].odometer_reading == 45210
        assert records[0].record_date == yesterday
        assert records[0].source == "n8n_excel"

    async def test_base64_json_body(self, client: AsyncClient, headers, vehicle):
        content = build_workbook([["Ford Transit", "40 mi", 1040, None, None]])
        response = await client.post(
            self.URL, json={"file_base64": base64.b64encode(content).decode()}, headers=headers
        )
        assert response.status_code == 200
        assert response.json()["processed"] == 1

    async def test_invalid_base64(self, client: AsyncClient, headers):
        response = await client.post(self.URL, json={"file_base64": "abc"}, headers=headers)
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid base64 file content"}

    async def test_json_without_file(self, client: AsyncClient, headers):
        response = await client.post(self.URL, json={}, headers=headers)
        assert response.status_code == 400
        assert response.json() == {"error": "No file_base64 provided"}

    async def test_validation_errors_are_reported_per_row(self, client: AsyncClient, headers, vehicle):
        content = build_workbook([["Ford Transit", "5000 mi", 1000, None, None]])
        response = await client.post(self.URL, content=content, headers=headers)
        result = response.json()["results"][0]
        assert result["status"] == "validation_error"
        assert result["error"] == "Daily mileage out of range (0-2000): 5000"


class TestFuelEmail:
    URL = f"{BASE}/fuel-email"

    @pytest.fixture
    def headers(self, webhook_keys):
        return {"x-api-key": webhook_keys.fuel_email_api_key}

    @pytest.fixture
    def extraction(self):
        return FuelInvoiceExtraction(
            invoice_date="2026-10-02",
            station="UK Fuels",
            line_items=[
                FuelInvoiceLineItem(registration="ab12 cde", litres=40, cost_per_litre=1.5, total_cost=60, mileage=12000.4),
                FuelInvoiceLineItem(registration="ZZ00 ZZZ", litres=10, cost_per_litre=1.5, total_cost=15),
            ],
        )

    async def test_requires_api_key(self, client: AsyncClient, webhook_keys, user_id):
        response = await client.post(self.URL, json={"fileContent": "x", "userId": str(user_id)})
        assert response.status_code == 401
        assert response.json() == {"error": "Invalid or missing API key"}

    async def test_creates_records_for_fleet_vehicles(
        self, client: AsyncClient, headers, use_extractor, extraction, repos, user_id, vehicle
    ):
        extractor = use_extractor(FakeExtractor(extraction))

        response = await client.post(
            self.URL,
            json={"fileContent": "invoice text", "fileName": "october.pdf", "userId": str(user_id)},
            headers=headers,
        )
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["message"] == "Processed invoice: 1 records created, 1 failed"
        assert len(data["createdRecords"]) == 1
        assert data["failedRecords"][0]["reason"] == 'Vehicle registration "ZZ00 ZZZ" not found in fleet'
        assert data["extractedData"]["station"] == "UK Fuels"
        assert extractor.calls == [("invoice text", "october.pdf", ["AB12 CDE"])]

        records = await repos.fuel_records.list()
        assert len(records) == 1
        assert records[0].fill_date == date(2026, 10, 2)
        assert records[0].mileage == 12000
        assert records[0].station == "UK Fuels"
        assert records[0].notes == "Auto-imported from email: october.pdf"

    async def test_nothing_extracted(self, client: AsyncClient, headers, use_extractor, user_id, vehicle):
        use_extractor(FakeExtractor(FuelInvoiceExtraction()))

        response = await client.post(self.URL, json={"fileContent": "x", "userId": str(user_id)}, headers=headers)
        assert response.status_code == 200
        assert response.json()["success"] is False
        assert response.json()["message"] == "No fuel data could be extracted from the invoice"

    async def test_multipart_attachment(self, client: AsyncClient, headers, use_extractor, extraction, user_id, vehicle):
        extractor = use_extractor(FakeExtractor(extraction))

        response = await client.post(
            self.URL,
            data={"userId": str(user_id)},
            files={"attachment": ("receipt.png", PNG_BYTES, "image/png")},
            headers=headers,
        )
        assert response.status_code == 200
        content, file_name, _ = extractor.calls[0]
        assert file_name == "receipt.png"
        assert content == "data:image/png;base64," + base64.b64encode(PNG_BYTES).decode()

    async def test_missing_content(self, client: AsyncClient, headers, user_id):
        response = await client.post(self.URL, json={"userId": str(user_id)}, headers=headers)
        assert response.status_code == 400
        assert response.json()["error"].startswith("No file content provided")

    async def test_missing_user(self, client: AsyncClient, headers):
        response = await client.post(self.URL, json={"fileContent": "x"}, headers=headers)
        assert response.status_code == 400
        assert response.json()["error"].startswith("No user ID provided")

    async def test_invalid_user(self, client: AsyncClient, headers):
        response = await client.post(self.URL, json={"fileContent": "x", "userId": "someone"}, headers=headers)
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid user ID format"}

    async def test_provider_rate_limit(self, client: AsyncClient, headers, use_extractor, user_id, vehicle):
        use_extractor(
            FakeExtractor(
                error=ExtractionError(
                    "Rate limit exceeded. Please try again in a moment.", status_code=429, user_message=True
                )
            )
        )

        response = await client.post(self.URL, json={"fileContent": "x", "userId": str(user_id)}, headers=headers)
        assert response.status_code == 429
        assert response.json() == {"error": "Rate limit exceeded. Please try again in a moment.", "userMessage": True}

    async def test_unexpected_failure(self, client: AsyncClient, headers, use_extractor, user_id, vehicle):
        use_extractor(FakeExtractor(error=RuntimeError("boom")))

        response = await client.post(self.URL, json={"fileContent": "x", "userId": str(user_id)}, headers=headers)
        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error", "details": "boom"}
