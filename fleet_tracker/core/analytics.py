"""
Fleet cost, mileage and emissions aggregation.

Every function here is pure: it takes already-loaded entities (all belonging
to one user) and a reference date, and returns a result model. The analytics
API loads the rows and calls these.
"""

from __future__ import annotations

import math
from collections import defaultdict
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Sequence

from dateutil.relativedelta import relativedelta

from fleet_tracker.core.database.entities import (
    Document,
    Driver,
    FuelRecord,
    MaintenanceSchedule,
    MileageRecord,
    ServiceRecord,
    Vehicle,
)
from fleet_tracker.core.models.domain.analytics import (
    CarbonReport,
    CostBreakdown,
    CostByType,
    DateRange,
    FleetAnalytics,
    FuelEfficiency,
    MileageAnalytics,
    MOTStats,
    MonthlyCost,
    MonthlyMileage,
    Reminder,
    UpcomingMOT,
    VehicleCarbon,
    VehicleComparison,
    VehicleCost,
    VehicleMileage,
    VehicleMPG,
    VehicleRef,
)
from fleet_tracker.core.models.domain.enums import DueStatus, MaintenanceStatus, ReminderKind
from fleet_tracker.core.status import check_code_status, days_until, maintenance_status, mot_status

LITRES_PER_UK_GALLON = 4.546

# kg CO2 per litre burned
CO2_FACTORS: Dict[str, float] = {
    "petrol": 2.31,
    "diesel": 2.68,
    "hybrid": 1.85,
    "plug-in hybrid": 1.20,
    "electric": 0.0,
}
CO2_PER_TREE_PER_YEAR = 22.0

UPCOMING_MOT_DAYS = 60
DRIVER_REMINDER_DAYS = 60
MAINTENANCE_REMINDER_DAYS = 30
TOP_COST_TYPES = 5
MAX_REMINDERS = 8


def _ref(vehicle: Vehicle) -> dict:
    return {
        "vehicle_id": vehicle.id,
        "registration": vehicle.registration,
        "make": vehicle.make,
        "model": vehicle.model,
    }


def trailing_months(today: date, count: int = 12) -> List[date]:
    """First day of each of the last ``count`` calendar months, oldest first, ending with today's month."""
    current = today.replace(day=1)
    return [current - relativedelta(months=offset) for offset in range(count - 1, -1, -1)]


def month_key(value: date) -> str:
    return value.strftime("%Y-%m")


def month_label(value: date) -> str:
    """Short month label such as 'Oct 26'."""
    return value.strftime("%b %y")


def fuel_distance(records: Iterable[FuelRecord]) -> int:
    """Miles covered according to pump odometer readings: highest minus lowest.

    Needs at least two readings, otherwise 0.
    """
    readings = sorted(r.mileage for r in records if r.mileage is not None)
    if len(readings) < 2:
        return 0
    return readings[-1] - readings[0]


def miles_per_gallon(miles: float, litres: float) -> float:
    if miles <= 0 or litres <= 0:
        return 0.0
    return miles / (litres / LITRES_PER_UK_GALLON)


def _upcoming_mot(vehicle: Vehicle, days: int, status: DueStatus) -> UpcomingMOT:
    return UpcomingMOT(**_ref(vehicle), mot_due_date=vehicle.mot_due_date, days_until=days, status=status)


def co2_factor(fuel_type: Optional[str]) -> float:
    """kg CO2 per litre; unknown fuel types use the petrol factor."""
    return CO2_FACTORS.get((fuel_type or "petrol").lower(), CO2_FACTORS["petrol"])


# ---------------------------------------------------------------------------
# Fleet costs
# ---------------------------------------------------------------------------


def fleet_analytics(
    vehicles: Sequence[Vehicle],
    service_records: Sequence[ServiceRecord],
    documents: Sequence[Document],
    fuel_records: Sequence[FuelRecord],
    today: Optional[date] = None,
) -> FleetAnalytics:
    """Dashboard headline numbers.

    Total cost is service record costs plus AI-extracted document costs plus
    fuel plus each vehicle's annual tax. Monthly costs cover the trailing 12
    calendar months; documents are attributed to the month they were uploaded.
    """
    today = today or date.today()

    service_cost = sum(r.cost or 0 for r in service_records)
    document_cost = sum(d.extracted_cost or 0 for d in documents)
    fuel_cost = sum(f.total_cost for f in fuel_records)
    tax_cost = sum(v.annual_tax or 0 for v in vehicles)

    service_by_vehicle: Dict = defaultdict(float)
    for record in service_records:
        service_by_vehicle[record.vehicle_id] += record.cost or 0
    for document in documents:
        service_by_vehicle[document.vehicle_id] += document.extracted_cost or 0
    fuel_by_vehicle: Dict = defaultdict(float)
    for record in fuel_records:
        fuel_by_vehicle[record.vehicle_id] += record.total_cost

    cost_by_vehicle = sorted(
        (
            VehicleCost(
                **_ref(v),
                cost=service_by_vehicle[v.id] + fuel_by_vehicle[v.id] + (v.annual_tax or 0),
                fuel_cost=fuel_by_vehicle[v.id],
            )
            for v in vehicles
        ),
        key=lambda c: c.cost,
        reverse=True,
    )

    cost_by_month = []
    for month in trailing_months(today):
        key = month_key(month)
        month_service = sum(r.cost or 0 for r in service_records if month_key(r.service_date) == key)
        month_docs = sum(d.extracted_cost or 0 for d in documents if month_key(d.created_at) == key)
        month_fuel = sum(f.total_cost for f in fuel_records if month_key(f.fill_date) == key)
        cost_by_month.append(
            MonthlyCost(
                month=month_label(month),
                month_key=key,
                cost=month_service + month_docs + month_fuel,
                fuel_cost=month_fuel,
            )
        )

    stats = MOTStats()
    upcoming: List[UpcomingMOT] = []
    overdue: List[VehicleRef] = []
    for vehicle in vehicles:
        status = mot_status(vehicle.mot_due_date, today)
        days = days_until(vehicle.mot_due_date, today)
        if status is DueStatus.valid:
            stats.valid += 1
            if days <= UPCOMING_MOT_DAYS:
                upcoming.append(_upcoming_mot(vehicle, days, status))
        elif status is DueStatus.due_soon:
            stats.due_soon += 1
            upcoming.append(_upcoming_mot(vehicle, days, status))
        elif status is DueStatus.overdue:
            stats.overdue += 1
            overdue.append(VehicleRef(**_ref(vehicle)))
        else:
            stats.unknown += 1
    upcoming.sort(key=lambda m: m.days_until)

    return FleetAnalytics(
        total_vehicles=len(vehicles),
        total_cost=service_cost + document_cost + fuel_cost + tax_cost,
        total_service_cost=service_cost,
        total_document_cost=document_cost,
        total_fuel_cost=fuel_cost,
        total_tax_cost=tax_cost,
        cost_by_vehicle=cost_by_vehicle,
        cost_by_month=cost_by_month,
        mot_stats=stats,
        upcoming_mots=upcoming,
        overdue_mots=overdue,
    )


def cost_breakdown_by_type(
    service_records: Sequence[ServiceRecord],
    documents: Sequence[Document],
    top: int = TOP_COST_TYPES,
) -> CostBreakdown:
    """Service spend grouped by service type, largest first.

    Documents count under the service type the extractor found for them;
    documents without one still count towards the total. Percentages are of
    the combined service and document cost.
    """
    document_cost = sum(d.extracted_cost or 0 for d in documents)
    service_cost = sum(r.cost or 0 for r in service_records)
    total = document_cost + service_cost

    by_type: Dict[str, float] = defaultdict(float)
    for document in documents:
        service_type = (document.ai_extracted_data or {}).get("serviceType")
        if service_type and document.extracted_cost:
            by_type[service_type] += document.extracted_cost
    for record in service_records:
        by_type[record.service_type] += record.cost or 0

    ranked = sorted(by_type.items(), key=lambda item: item[1], reverse=True)[:top]
    return CostBreakdown(
        total_cost=total,
        service_cost=service_cost,
        document_cost=document_cost,
        completed_documents=sum(1 for d in documents if d.processing_status == "completed"),
        by_type=[
            CostByType(
                service_type=service_type,
                cost=cost,
                percentage=round(cost / total * 100, 1) if total > 0 else 0.0,
            )
            for service_type, cost in ranked
        ],
    )


# ---------------------------------------------------------------------------
# Mileage and fuel economy
# ---------------------------------------------------------------------------


def mileage_analytics(
    mileage_records: Sequence[MileageRecord],
    vehicles: Sequence[Vehicle],
    fuel_records: Sequence[FuelRecord],
    today: Optional[date] = None,
) -> MileageAnalytics:
    """Mileage totals per active vehicle and per month, plus fuel economy per vehicle.

    MPG uses UK gallons and the distance between the lowest and highest pump
    odometer readings; vehicles without a usable MPG figure are left out.
    """
    today = today or date.today()
    records = sorted(mileage_records, key=lambda m: m.record_date, reverse=True)
    active = [v for v in vehicles if v.is_active]

    by_vehicle = []
    for vehicle in active:
        own = [m for m in records if m.vehicle_id == vehicle.id]
        total = sum(m.daily_mileage for m in own)
        by_vehicle.append(
            VehicleMileage(
                **_ref(vehicle),
                total_mileage=total,
                avg_daily_mileage=round(total / len(own), 1) if own else 0.0,
                record_count=len(own),
                latest_odometer=own[0].odometer_reading if own else None,
            )
        )
    by_vehicle.sort(key=lambda v: v.total_mileage, reverse=True)

    by_month = []
    for month in trailing_months(today):
        key = month_key(month)
        own = [m for m in records if month_key(m.record_date) == key]
        total = sum(m.daily_mileage for m in own)
        by_month.append(
            MonthlyMileage(
                month=month_label(month),
                month_key=key,
                total_mileage=total,
                avg_daily_mileage=round(total / len(own), 1) if own else 0.0,
                record_count=len(own),
            )
        )

    mpg_by_vehicle = []
    for vehicle in active:
        own_fuel = [f for f in fuel_records if f.vehicle_id == vehicle.id]
        miles = fuel_distance(own_fuel)
        litres = sum(f.litres for f in own_fuel)
        spend = sum(f.total_cost for f in own_fuel)
        mpg = round(miles_per_gallon(miles, litres), 1)
        if mpg <= 0:
            continue
        mpg_by_vehicle.append(
            VehicleMPG(
                **_ref(vehicle),
                total_miles=miles,
                total_litres=round(litres, 1),
                mpg=mpg,
                cost_per_mile=round(spend / miles, 2),
            )
        )
    mpg_by_vehicle.sort(key=lambda v: v.mpg, reverse=True)

    total = sum(m.daily_mileage for m in records)
    return MileageAnalytics(
        total_mileage=total,
        avg_daily_mileage=round(total / len(records), 1) if records else 0.0,
        record_count=len(records),
        mileage_by_vehicle=by_vehicle,
        mileage_by_month=by_month,
        mpg_by_vehicle=mpg_by_vehicle,
    )


def rolling_mpg(
    mileage_records: Iterable[MileageRecord],
    fuel_records: Iterable[FuelRecord],
    today: Optional[date] = None,
    days: int = 30,
) -> Optional[float]:
    """Fleet MPG over the ``days`` before ``today``, both ends inclusive.

    Distance comes from daily mileage records and fuel from fill-ups in the
    same window. None when either total is zero.
    """
    today = today or date.today()
    start = today - timedelta(days=days)

    miles = sum(m.daily_mileage for m in mileage_records if start <= m.record_date <= today)
    litres = sum(f.litres for f in fuel_records if start <= f.fill_date <= today)
    if miles <= 0 or litres <= 0:
        return None
    return round(miles_per_gallon(miles, litres), 1)


def fuel_efficiency(
    mileage_records: Sequence[MileageRecord],
    fuel_records: Sequence[FuelRecord],
    today: Optional[date] = None,
    days: int = 30,
) -> FuelEfficiency:
    today = today or date.today()
    start = today - timedelta(days=days)
    current = rolling_mpg(mileage_records, fuel_records, today, days)
    # previous window ends the day before the current one starts
    previous = rolling_mpg(mileage_records, fuel_records, start - timedelta(days=1), days - 1)

    trend = None
    if current and previous:
        trend = "up" if current > previous else "down" if current < previous else "same"

    return FuelEfficiency(
        window_days=days,
        total_miles=sum(m.daily_mileage for m in mileage_records if start <= m.record_date <= today),
        total_litres=round(sum(f.litres for f in fuel_records if start <= f.fill_date <= today), 2),
        current_mpg=current,
        previous_mpg=previous,
        trend=trend,
    )


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------


def vehicle_comparison(
    vehicle: Vehicle,
    fuel_records: Sequence[FuelRecord],
    service_records: Sequence[ServiceRecord],
    documents: Sequence[Document],
    date_range: Optional[DateRange] = None,
) -> VehicleComparison:
    """Cost, economy and emissions for one vehicle over an optional date range.

    Fixed costs (tax and finance) are prorated over the calendar months the
    range touches, or twelve months without a range.
    """

    def in_range(value: date) -> bool:
        return date_range is None or date_range.contains(value)

    fuel = [f for f in fuel_records if f.vehicle_id == vehicle.id and in_range(f.fill_date)]
    services = [r for r in service_records if r.vehicle_id == vehicle.id and in_range(r.service_date)]
    docs = [d for d in documents if d.vehicle_id == vehicle.id and in_range(d.created_at.date())]

    fuel_cost = sum(f.total_cost for f in fuel)
    litres = sum(f.litres for f in fuel)
    service_cost = sum(r.cost or 0 for r in services) + sum(d.extracted_cost or 0 for d in docs)

    months = date_range.months if date_range else 12
    fixed_cost = (vehicle.annual_tax or 0) / 12 * months + (vehicle.monthly_finance or 0) * months
    total_cost = fuel_cost + service_cost + fixed_cost

    miles = fuel_distance(fuel)

    avg_days = 0
    if len(services) >= 2:
        dates = sorted(r.service_date for r in services)
        avg_days = round((dates[-1] - dates[0]).days / (len(services) - 1))

    fuel_type = vehicle.fuel_type or "petrol"
    return VehicleComparison(
        **_ref(vehicle),
        fuel_type=fuel_type,
        total_cost=total_cost,
        fuel_cost=fuel_cost,
        service_cost=service_cost,
        fixed_cost=fixed_cost,
        total_miles=miles,
        cost_per_mile=total_cost / miles if miles > 0 else 0.0,
        mpg=miles_per_gallon(miles, litres),
        litres_used=litres,
        service_count=len(services),
        avg_days_between_service=avg_days,
        co2_emissions=litres * co2_factor(fuel_type),
    )


def environmental_rating(avg_co2_per_mile: float) -> str:
    """Rating bands on average grams of CO2 per mile."""
    if avg_co2_per_mile <= 0:
        return "No Data"
    if avg_co2_per_mile < 100:
        return "Excellent"
    if avg_co2_per_mile < 150:
        return "Good"
    if avg_co2_per_mile < 200:
        return "Average"
    if avg_co2_per_mile < 250:
        return "Poor"
    return "Very Poor"


def carbon_footprint(
    vehicles: Sequence[Vehicle],
    fuel_records: Sequence[FuelRecord],
    date_range: DateRange,
) -> CarbonReport:
    """CO2 emitted by each active vehicle within the range, and the trees needed to offset it.

    Tree counts are based on the emissions annualized over the months the
    range covers. Vehicles that bought no fuel in the range are left out.
    """
    entries = []
    for vehicle in vehicles:
        if not vehicle.is_active:
            continue
        fuel = [f for f in fuel_records if f.vehicle_id == vehicle.id and date_range.contains(f.fill_date)]
        litres = sum(f.litres for f in fuel)
        if litres <= 0:
            continue
        fuel_type = vehicle.fuel_type or "petrol"
        co2 = litres * co2_factor(fuel_type)
        miles = fuel_distance(fuel)
        annualized = co2 / date_range.months * 12
        entries.append(
            VehicleCarbon(
                **_ref(vehicle),
                fuel_type=fuel_type,
                litres_used=litres,
                co2_emissions=co2,
                co2_per_mile=co2 / miles * 1000 if miles > 0 else 0.0,
                trees_needed=math.ceil(annualized / CO2_PER_TREE_PER_YEAR),
            )
        )

    by_fuel: Dict[str, float] = defaultdict(float)
    for entry in entries:
        by_fuel[entry.fuel_type] += entry.co2_emissions

    avg_per_mile = sum(e.co2_per_mile for e in entries) / len(entries) if entries else 0.0
    return CarbonReport(
        date_range=date_range,
        vehicles=entries,
        total_emissions=sum(e.co2_emissions for e in entries),
        total_trees_needed=sum(e.trees_needed for e in entries),
        avg_co2_per_mile=avg_per_mile,
        emissions_by_fuel_type=dict(by_fuel),
        rating=environmental_rating(avg_per_mile),
    )


# ---------------------------------------------------------------------------
# Reminders
# ---------------------------------------------------------------------------

_STATUS_ORDER = {"overdue": 0, "due-soon": 1, "ok": 2, "valid": 3}


def combined_reminders(
    vehicles: Sequence[Vehicle],
    drivers: Sequence[Driver],
    schedules: Sequence[MaintenanceSchedule],
    today: Optional[date] = None,
    limit: int = MAX_REMINDERS,
) -> List[Reminder]:
    """MOT, licence check code and maintenance reminders in one list.

    Overdue first, then due soon, then the rest, each by days remaining.
    """
    today = today or date.today()
    registrations = {v.id: v.registration for v in vehicles}
    reminders: List[Reminder] = []

    for vehicle in vehicles:
        status = mot_status(vehicle.mot_due_date, today)
        days = days_until(vehicle.mot_due_date, today)
        if status is DueStatus.unknown:
            continue
        if status is DueStatus.valid and days > UPCOMING_MOT_DAYS:
            continue
        reminders.append(
            Reminder(
                kind=ReminderKind.mot,
                id=vehicle.id,
                title=vehicle.registration,
                subtitle=f"{vehicle.make} {vehicle.model}",
                due_date=vehicle.mot_due_date,
                status=status,
                days=days,
            )
        )

    for driver in drivers:
        if driver.next_check_code_due is None:
            continue
        status = check_code_status(driver.next_check_code_due, today)
        days = days_until(driver.next_check_code_due, today)
        if status is DueStatus.valid and days > DRIVER_REMINDER_DAYS:
            continue
        reminders.append(
            Reminder(
                kind=ReminderKind.check_code,
                id=driver.id,
                title=driver.name,
                subtitle="Check code due",
                due_date=driver.next_check_code_due,
                status=status,
                days=days,
            )
        )

    for schedule in schedules:
        if schedule.next_due_date is None or not schedule.is_active:
            continue
        status = maintenance_status(schedule.next_due_date, schedule.next_due_mileage, None, today)
        days = days_until(schedule.next_due_date, today)
        if status is MaintenanceStatus.ok and days > MAINTENANCE_REMINDER_DAYS:
            continue
        reminders.append(
            Reminder(
                kind=ReminderKind.maintenance,
                id=schedule.id,
                title=schedule.maintenance_type,
                subtitle=registrations.get(schedule.vehicle_id, "All vehicles"),
                due_date=schedule.next_due_date,
                status=status,
                days=days,
            )
        )

    reminders.sort(key=lambda r: (_STATUS_ORDER.get(r.status.value, 3), r.days if r.days is not None else 999))
    return reminders[:limit]
