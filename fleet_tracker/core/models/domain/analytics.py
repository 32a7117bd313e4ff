"""
Analytics result models.

Plain Pydantic models returned by ``fleet_tracker.core.analytics`` and served
as-is by the analytics API.
"""

from __future__ import annotations

import uuid
from datetime import date
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, model_validator

from .enums import DueStatus, MaintenanceStatus, ReminderKind


class DateRange(BaseModel):
    """Inclusive date range."""

    start: date
    end: date

    @model_validator(mode="after")
    def _check_order(self) -> "DateRange":
        if self.end < self.start:
            raise ValueError("date range end must not be before start")
        return self

    def contains(self, value: Optional[date]) -> bool:
        return value is not None and self.start <= value <= self.end

    @property
    def months(self) -> int:
        """Calendar months touched by the range, at least one."""
        return max(1, (self.end.year - self.start.year) * 12 + (self.end.month - self.start.month) + 1)


class VehicleRef(BaseModel):
    vehicle_id: uuid.UUID
    registration: str
    make: str
    model: str


class VehicleCost(VehicleRef):
    cost: float = Field(description="Service, document, fuel and annual tax costs combined")
    fuel_cost: float


class MonthlyCost(BaseModel):
    month: str = Field(description="Short label, e.g. 'Oct 26'")
    month_key: str = Field(description="YYYY-MM")
    cost: float
    fuel_cost: float


class MOTStats(BaseModel):
    valid: int = 0
    due_soon: int = 0
    overdue: int = 0
    unknown: int = 0


class UpcomingMOT(VehicleRef):
    mot_due_date: date
    days_until: int
    status: DueStatus


class FleetAnalytics(BaseModel):
    total_vehicles: int
    total_cost: float
    total_service_cost: float
    total_document_cost: float
    total_fuel_cost: float
    total_tax_cost: float
    cost_by_vehicle: List[VehicleCost]
    cost_by_month: List[MonthlyCost]
    mot_stats: MOTStats
    upcoming_mots: List[UpcomingMOT]
    overdue_mots: List[VehicleRef]


class CostByType(BaseModel):
    service_type: str
    cost: float
    percentage: float = Field(description="Share of the combined service and document cost, 0-100")


class CostBreakdown(BaseModel):
    total_cost: float
    service_cost: float
    document_cost: float
    completed_documents: int
    by_type: List[CostByType]


class VehicleMileage(VehicleRef):
    total_mileage: int
    avg_daily_mileage: float
    record_count: int
    latest_odometer: Optional[int]


class MonthlyMileage(BaseModel):
    month: str
    month_key: str
    total_mileage: int
    avg_daily_mileage: float
    record_count: int


class VehicleMPG(VehicleRef):
    total_miles: int
    total_litres: float
    mpg: float
    cost_per_mile: float


class MileageAnalytics(BaseModel):
    total_mileage: int
    avg_daily_mileage: float
    record_count: int
    mileage_by_vehicle: List[VehicleMileage]
    mileage_by_month: List[MonthlyMileage]
    mpg_by_vehicle: List[VehicleMPG]


class FuelEfficiency(BaseModel):
    """Rolling fuel economy over the last window compared with the one before."""

    window_days: int
    total_miles: int
    total_litres: float
    current_mpg: Optional[float]
    previous_mpg: Optional[float]
    trend: Optional[str] = Field(default=None, description="up, down or same; None without both readings")


class VehicleComparison(VehicleRef):
    fuel_type: str
    total_cost: float
    fuel_cost: float
    service_cost: float
    fixed_cost: float
    total_miles: int
    cost_per_mile: float
    mpg: float
    litres_used: float
    service_count: int
    avg_days_between_service: int
    co2_emissions: float = Field(description="kg CO2")


class VehicleCarbon(VehicleRef):
    fuel_type: str
    litres_used: float
    co2_emissions: float = Field(description="kg CO2")
    co2_per_mile: float = Field(description="g CO2 per mile")
    trees_needed: int


class CarbonReport(BaseModel):
    date_range: DateRange
    vehicles: List[VehicleCarbon]
    total_emissions: float
    total_trees_needed: int
    avg_co2_per_mile: float
    emissions_by_fuel_type: Dict[str, float]
    rating: str


class Reminder(BaseModel):
    kind: ReminderKind
    id: uuid.UUID
    title: str
    subtitle: str
    due_date: date
    status: DueStatus | MaintenanceStatus
    days: Optional[int]
