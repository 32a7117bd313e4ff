"""
CSV exports of fuel records, service records and a fleet summary.

Every cell is quoted, dates are written day first (``dd/mm/yyyy``) and money
as pounds with thousands separators (``£1,234.56``) so the files open cleanly
in UK spreadsheet software.
"""

from __future__ import annotations

import csv
import io
import uuid
from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Sequence

from fleet_tracker.core.database.entities import Document, FuelRecord, ServiceRecord, Vehicle

FUEL_HEADERS = ["Date", "Vehicle", "Station", "Litres", "Cost/Litre", "Total Cost", "Mileage"]
SERVICE_HEADERS = ["Date", "Vehicle", "Type", "Description", "Provider", "Cost", "Mileage"]
SUMMARY_SERVICE_HEADERS = ["Date", "Vehicle", "Type", "Provider", "Cost", "Mileage"]
VEHICLE_HEADERS = ["Registration", "Make", "Model", "Year", "Annual Tax", "Monthly Finance"]


def format_currency(value: Optional[float]) -> str:
    return f"£{value or 0:,.2f}"


def format_date(value: date | datetime) -> str:
    return value.strftime("%d/%m/%Y")


def _optional(value: Optional[object]) -> str:
    return "" if value is None else str(value)


def export_filename(prefix: str, today: Optional[date] = None) -> str:
    """``fuel-records-2026-10-18.csv`` style download name."""
    return f"{prefix}-{(today or date.today()).isoformat()}.csv"


def vehicle_label(vehicle_id: uuid.UUID, vehicles: Dict[uuid.UUID, Vehicle]) -> str:
    vehicle = vehicles.get(vehicle_id)
    return vehicle.label if vehicle else "Unknown"


def _to_csv(rows: Iterable[Sequence[str]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerows(rows)
    return buffer.getvalue()


def _fuel_row(record: FuelRecord, vehicles: Dict[uuid.UUID, Vehicle]) -> List[str]:
    return [
        format_date(record.fill_date),
        vehicle_label(record.vehicle_id, vehicles),
        record.station or "",
        f"{record.litres:.2f}",
        format_currency(record.cost_per_litre),
        format_currency(record.total_cost),
        _optional(record.mileage),
    ]


def fuel_records_csv(records: Sequence[FuelRecord], vehicles: Sequence[Vehicle]) -> str:
    by_id = {v.id: v for v in vehicles}
    return _to_csv([FUEL_HEADERS, *(_fuel_row(r, by_id) for r in records)])


def service_records_csv(records: Sequence[ServiceRecord], vehicles: Sequence[Vehicle]) -> str:
    by_id = {v.id: v for v in vehicles}
    rows = [
        [
            format_date(r.service_date),
            vehicle_label(r.vehicle_id, by_id),
            r.service_type,
            r.description or "",
            r.provider or "",
            format_currency(r.cost),
            _optional(r.mileage),
        ]
        for r in records
    ]
    return _to_csv([SERVICE_HEADERS, *rows])


@dataclass(frozen=True)
class FleetCostSummary:
    total_cost: float
    fuel_cost: float
    service_cost: float
    finance_cost: float
    tax_cost: float
    total_litres: float
    avg_cost_per_litre: float


def summarize_costs(
    vehicles: Sequence[Vehicle],
    fuel_records: Sequence[FuelRecord],
    service_records: Sequence[ServiceRecord],
    documents: Sequence[Document] = (),
) -> FleetCostSummary:
    """Annual view of fleet spend: recorded fuel and service costs plus twelve months of finance and tax."""
    fuel_cost = sum(f.total_cost for f in fuel_records)
    service_cost = sum(r.cost or 0 for r in service_records) + sum(d.extracted_cost or 0 for d in documents)
    finance_cost = sum((v.monthly_finance or 0) * 12 for v in vehicles)
    tax_cost = sum(v.annual_tax or 0 for v in vehicles)
    litres = sum(f.litres for f in fuel_records)
    return FleetCostSummary(
        total_cost=fuel_cost + service_cost + finance_cost + tax_cost,
        fuel_cost=fuel_cost,
        service_cost=service_cost,
        finance_cost=finance_cost,
        tax_cost=tax_cost,
        total_litres=litres,
        avg_cost_per_litre=fuel_cost / litres if litres > 0 else 0.0,
    )


def fleet_summary_csv(
    vehicles: Sequence[Vehicle],
    fuel_records: Sequence[FuelRecord],
    service_records: Sequence[ServiceRecord],
    documents: Sequence[Document] = (),
    generated_at: Optional[datetime] = None,
) -> str:
    """Sectioned report: cost breakdown, fuel statistics, then vehicle, fuel and service listings."""
    by_id = {v.id: v for v in vehicles}
    summary = summarize_costs(vehicles, fuel_records, service_records, documents)
    generated_at = generated_at or datetime.now()

    rows: List[Sequence[str]] = [
        ["FLEET SUMMARY REPORT"],
        [f"Generated: {generated_at.strftime('%d/%m/%Y %H:%M')}"],
        [""],
        ["COST BREAKDOWN"],
        ["Category", "Amount"],
        ["Total Fleet Cost", format_currency(summary.total_cost)],
        ["Fuel Costs", format_currency(summary.fuel_cost)],
        ["Service Costs", format_currency(summary.service_cost)],
        ["Finance Costs", format_currency(summary.finance_cost)],
        ["Tax Costs", format_currency(summary.tax_cost)],
        [""],
        ["FUEL STATISTICS"],
        ["Total Litres", f"{summary.total_litres:.1f}L"],
        ["Average Cost/Litre", format_currency(summary.avg_cost_per_litre)],
        [""],
        ["VEHICLES"],
        VEHICLE_HEADERS,
    ]
    rows.extend(
        [
            v.registration,
            v.make,
            v.model,
            _optional(v.year),
            format_currency(v.annual_tax),
            format_currency(v.monthly_finance),
        ]
        for v in vehicles
    )
    rows.extend([[""], ["FUEL RECORDS"], FUEL_HEADERS])
    rows.extend(_fuel_row(r, by_id) for r in fuel_records)
    rows.extend([[""], ["SERVICE RECORDS"], SUMMARY_SERVICE_HEADERS])
    rows.extend(
        [
            format_date(r.service_date),
            vehicle_label(r.vehicle_id, by_id),
            r.service_type,
            r.provider or "",
            format_currency(r.cost),
            _optional(r.mileage),
        ]
        for r in service_records
    )
    return _to_csv(rows)
