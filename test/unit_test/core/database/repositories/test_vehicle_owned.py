"""Unit tests for repositories of rows owned through a vehicle.

Service records, documents, fuel and mileage records carry no ``user_id``;
ownership is checked through the referenced vehicle on every write and
enforced by a join on every read.
"""

from __future__ import annotations

import uuid
from datetime import date

import pytest

from fleet_tracker.core.database.entities import Document, FuelRecord, ServiceRecord, Vehicle
from fleet_tracker.core.errors import OwnershipError, VehicleNotFoundError


def _fuel(vehicle_id: uuid.UUID, fill_date: date, litres: float = 40.0, **kwargs) -> FuelRecord:
    return FuelRecord(
        vehicle_id=vehicle_id,
        fill_date=fill_date,
        litres=litres,
        cost_per_litre=1.5,
        total_cost=round(litres * 1.5, 2),
        **kwargs,
    )


class TestOwnershipOnWrite:
    async def test_create_for_other_users_vehicle_raises(self, repos, stranger_vehicle):
        with pytest.raises(OwnershipError):
            await repos.service_records.create(
                ServiceRecord(vehicle_id=stranger_vehicle.id, service_date=date(2026, 9, 1), service_type="MOT")
            )

    async def test_create_for_unknown_vehicle_raises(self, repos):
        with pytest.raises(VehicleNotFoundError):
            await repos.fuel_records.create(_fuel(uuid.uuid4(), date(2026, 9, 1)))

    async def test_update_moving_record_to_foreign_vehicle_raises(self, repos, vehicle, stranger_vehicle):
        record = await repos.service_records.create(
            ServiceRecord(vehicle_id=vehicle.id, service_date=date(2026, 9, 1), service_type="MOT", cost=54.85)
        )

        record.vehicle_id = stranger_vehicle.id
        with pytest.raises(OwnershipError):
            await repos.service_records.update(record)

    async def test_document_service_record_must_match_vehicle(self, repos, vehicle):
        other = await repos.vehicles.create(Vehicle(registration="CD34 EFG", make="Ford", model="Fiesta"))
        record = await repos.service_records.create(
            ServiceRecord(vehicle_id=other.id, service_date=date(2026, 9, 1), service_type="Repair")
        )

        with pytest.raises(OwnershipError):
            await repos.documents.create(
                Document(
                    vehicle_id=vehicle.id,
                    service_record_id=record.id,
                    file_name="invoice.pdf",
                    file_path="docs/invoice.pdf",
                )
            )


class TestScopedReads:
    async def test_list_joins_through_vehicle(self, repos, stranger_repos, vehicle, stranger_vehicle):
        mine = await repos.fuel_records.create(_fuel(vehicle.id, date(2026, 9, 1)))
        await stranger_repos.fuel_records.create(_fuel(stranger_vehicle.id, date(2026, 9, 1)))

        records = await repos.fuel_records.list()

        assert [r.id for r in records] == [mine.id]

    async def test_get_by_id_of_other_users_record(self, repos, stranger_repos, stranger_vehicle):
        theirs = await stranger_repos.fuel_records.create(_fuel(stranger_vehicle.id, date(2026, 9, 1)))

        assert await repos.fuel_records.get_by_id(theirs.id) is None

    async def test_fuel_records_newest_first(self, repos, vehicle):
        for day in (3, 1, 2):
            await repos.fuel_records.create(_fuel(vehicle.id, date(2026, 9, day)))

        records = await repos.fuel_records.list()

        assert [r.fill_date.day for r in records] == [3, 2, 1]

    async def test_filter_by_vehicle(self, repos, vehicle):
        other = await repos.vehicles.create(Vehicle(registration="CD34 EFG", make="Ford", model="Fiesta"))
        await repos.fuel_records.create(_fuel(vehicle.id, date(2026, 9, 1)))
        await repos.fuel_records.create(_fuel(other.id, date(2026, 9, 1)))

        records = await repos.fuel_records.list(filters={"vehicle_id": other.id})

        assert [r.vehicle_id for r in records] == [other.id]

    async def test_list_for_day(self, repos, vehicle):
        await repos.fuel_records.create(_fuel(vehicle.id, date(2026, 9, 1)))
        await repos.fuel_records.create(_fuel(vehicle.id, date(2026, 9, 2)))

        same_day = await repos.fuel_records.list_for_day(vehicle.id, date(2026, 9, 1))

        assert len(same_day) == 1

    async def test_list_with_invoices(self, repos, vehicle):
        await repos.fuel_records.create(_fuel(vehicle.id, date(2026, 9, 1)))
        with_invoice = await repos.fuel_records.create(
            _fuel(vehicle.id, date(2026, 9, 2), invoice_file_path="fuel/1700000000-shell-invoice.pdf")
        )

        records = await repos.fuel_records.list_with_invoices()

        assert [r.id for r in records] == [with_invoice.id]

    async def test_documents_with_costs(self, repos, vehicle):
        await repos.documents.create(Document(vehicle_id=vehicle.id, file_name="a.pdf", file_path="docs/a.pdf"))
        costed = await repos.documents.create(
            Document(vehicle_id=vehicle.id, file_name="b.pdf", file_path="docs/b.pdf", extracted_cost=120.0)
        )

        documents = await repos.documents.list_with_costs()

        assert [d.id for d in documents] == [costed.id]


class TestMileageUpsert:
    async def test_upsert_inserts_then_replaces(self, repos, vehicle):
        first = await repos.mileage_records.upsert(vehicle.id, date(2026, 10, 1), 40, 12000, "manual")
        second = await repos.mileage_records.upsert(vehicle.id, date(2026, 10, 1), 55, 12015, "zapier")

        records = await repos.mileage_records.list()

        assert second.id == first.id
        assert len(records) == 1
        assert records[0].daily_mileage == 55
        assert records[0].odometer_reading == 12015
        assert records[0].source == "zapier"

    async def test_upsert_for_other_users_vehicle_raises(self, repos, stranger_vehicle):
        with pytest.raises(OwnershipError):
            await repos.mileage_records.upsert(stranger_vehicle.id, date(2026, 10, 1), 40)

    async def test_latest_odometers(self, repos, vehicle):
        await repos.mileage_records.upsert(vehicle.id, date(2026, 10, 1), 40, 12000)
        await repos.mileage_records.upsert(vehicle.id, date(2026, 10, 3), 30, 12070)
        await repos.mileage_records.upsert(vehicle.id, date(2026, 10, 4), 10, None)

        latest = await repos.mileage_records.latest_odometers()

        assert latest == {vehicle.id: 12070}
