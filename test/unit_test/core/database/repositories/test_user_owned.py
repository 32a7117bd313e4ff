"""Unit tests for drivers, maintenance schedules and saved reports."""

from __future__ import annotations

from datetime import date

import pytest

from fleet_tracker.core.database.entities import Driver, MaintenanceSchedule, SavedReport
from fleet_tracker.core.errors import OwnershipError


class TestDriverRepository:
    async def test_drivers_sorted_by_name_and_scoped(self, repos, stranger_repos):
        await repos.drivers.create(Driver(name="Zoe"))
        await repos.drivers.create(Driver(name="Adam"))
        await stranger_repos.drivers.create(Driver(name="Mallory"))

        drivers = await repos.drivers.list()

        assert [d.name for d in drivers] == ["Adam", "Zoe"]

    async def test_update_bumps_updated_at(self, repos):
        driver = await repos.drivers.create(Driver(name="Adam"))
        created_at = driver.updated_at

        driver.phone = "07700 900123"
        updated = await repos.drivers.update(driver)

        assert updated.phone == "07700 900123"
        assert updated.updated_at >= created_at


class TestMaintenanceScheduleRepository:
    async def test_fleet_wide_schedule_needs_no_vehicle(self, repos, owner_id):
        schedule = await repos.maintenance_schedules.create(MaintenanceSchedule(maintenance_type="fire-extinguisher"))

        assert schedule.user_id == owner_id
        assert schedule.vehicle_id is None

    async def test_schedule_for_other_users_vehicle_raises(self, repos, stranger_vehicle):
        with pytest.raises(OwnershipError):
            await repos.maintenance_schedules.create(
                MaintenanceSchedule(vehicle_id=stranger_vehicle.id, maintenance_type="oil-change")
            )

    async def test_list_soonest_due_first_with_undated_last(self, repos):
        await repos.maintenance_schedules.create(MaintenanceSchedule(maintenance_type="custom"))
        await repos.maintenance_schedules.create(
            MaintenanceSchedule(maintenance_type="tyres", next_due_date=date(2026, 12, 1))
        )
        await repos.maintenance_schedules.create(
            MaintenanceSchedule(maintenance_type="brakes", next_due_date=date(2026, 11, 1))
        )

        schedules = await repos.maintenance_schedules.list()

        assert [s.maintenance_type for s in schedules] == ["brakes", "tyres", "custom"]

    async def test_mark_completed_rolls_due_forward(self, repos, vehicle):
        schedule = await repos.maintenance_schedules.create(
            MaintenanceSchedule(
                vehicle_id=vehicle.id,
                maintenance_type="oil-change",
                interval_miles=10000,
                interval_months=12,
            )
        )

        updated = await repos.maintenance_schedules.mark_completed(schedule.id, date(2026, 1, 31), 25000)

        assert updated.last_completed_date == date(2026, 1, 31)
        assert updated.last_completed_mileage == 25000
        assert updated.next_due_date == date(2027, 1, 31)
        assert updated.next_due_mileage == 35000

    async def test_mark_completed_without_mileage_clears_next_mileage(self, repos):
        schedule = await repos.maintenance_schedules.create(
            MaintenanceSchedule(maintenance_type="tyres", interval_miles=20000, next_due_mileage=40000)
        )

        updated = await repos.maintenance_schedules.mark_completed(schedule.id, date(2026, 10, 18))

        assert updated.next_due_mileage is None
        assert updated.next_due_date is None

    async def test_mark_completed_for_other_user_returns_none(self, repos, stranger_repos):
        theirs = await stranger_repos.maintenance_schedules.create(MaintenanceSchedule(maintenance_type="tyres"))

        assert await repos.maintenance_schedules.mark_completed(theirs.id, date(2026, 10, 18)) is None


class TestSavedReportRepository:
    async def test_config_round_trips_as_json(self, repos):
        config = {"vehicleIds": [], "metrics": ["fuel", "service"], "groupBy": "month", "includeInactive": False}
        report = await repos.saved_reports.create(SavedReport(name="Monthly", report_type="costs", config=config))

        loaded = await repos.saved_reports.get_by_id(report.id)

        assert loaded.config == config

    async def test_reports_are_scoped(self, repos, stranger_repos):
        theirs = await stranger_repos.saved_reports.create(SavedReport(name="Theirs", report_type="fuel", config={}))

        assert await repos.saved_reports.list() == []
        assert await repos.saved_reports.get_by_id(theirs.id) is None
