"""
Sanity checks on AI-extracted fuel invoice line items.

A line item is kept only when all of these hold:

- date, registration, litres, cost per litre and total cost are present
- litres x cost per litre is within £2 or 5% of the total
- cost per litre (VAT inclusive) is between £1.10 and £2.50
- litres is between 1 and 150, total cost between £1 and £500
- the date is ``YYYY-MM-DD``, not in the future and at most two years old
"""

from __future__ import annotations

import re
from datetime import date
from typing import List, Optional

from dateutil.relativedelta import relativedelta

from fleet_tracker.core.logging_config import get_logger
from fleet_tracker.core.models.domain.extraction import (
    FuelInvoiceExtraction,
    FuelInvoiceLineItem,
    RejectedFuelLineItem,
)
from fleet_tracker.core.models.io.webhooks import ValidatedFuelInvoice

logger = get_logger(__name__)

MATH_TOLERANCE_POUNDS = 2.0
MATH_TOLERANCE_PERCENT = 5.0
MIN_COST_PER_LITRE = 1.10
MAX_COST_PER_LITRE = 2.50
MIN_LITRES = 1
MAX_LITRES = 150
MIN_TOTAL_COST = 1
MAX_TOTAL_COST = 500
MAX_AGE_YEARS = 2

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def line_item_issues(item: FuelInvoiceLineItem, today: Optional[date] = None) -> List[str]:
    """Reasons to reject a line item; empty when it looks plausible."""
    today = today or date.today()
    issues: List[str] = []

    if not (item.transaction_date and item.registration and item.litres and item.cost_per_litre and item.total_cost):
        issues.append("Missing required fields")

    if item.litres and item.cost_per_litre and item.total_cost:
        calculated = item.litres * item.cost_per_litre
        diff = abs(calculated - item.total_cost)
        percent_diff = diff / item.total_cost * 100
        if not (diff < MATH_TOLERANCE_POUNDS or percent_diff < MATH_TOLERANCE_PERCENT):
            issues.append(f"Math mismatch: calculated £{calculated:.2f} vs reported £{item.total_cost:.2f}")

    if item.cost_per_litre and not MIN_COST_PER_LITRE <= item.cost_per_litre <= MAX_COST_PER_LITRE:
        issues.append(f"Cost per litre £{item.cost_per_litre:.4f} outside UK range (£1.10-£2.50)")

    if item.litres and item.litres > MAX_LITRES:
        issues.append(f"Litres {item.litres:g} exceeds maximum (150L)")
    if item.litres and item.litres < MIN_LITRES:
        issues.append(f"Litres {item.litres:g} too small (< 1L)")

    if item.total_cost and not MIN_TOTAL_COST <= item.total_cost <= MAX_TOTAL_COST:
        issues.append(f"Total cost £{item.total_cost:g} outside expected range (£1-£500)")

    if item.transaction_date:
        issues.extend(_date_issues(item.transaction_date, today))

    return issues


def _date_issues(value: str, today: date) -> List[str]:
    if not _ISO_DATE.match(value):
        return [f"Invalid date format: {value}"]
    try:
        parsed = date.fromisoformat(value)
    except ValueError:
        return [f"Invalid date: {value}"]

    issues = []
    if parsed > today:
        issues.append(f"Future date: {value}")
    if parsed < today - relativedelta(years=MAX_AGE_YEARS):
        issues.append(f"Date too old: {value}")
    return issues


def validate_invoice(extraction: FuelInvoiceExtraction, today: Optional[date] = None) -> ValidatedFuelInvoice:
    """Split extracted line items into plausible ones and rejected ones with reasons."""
    valid: List[FuelInvoiceLineItem] = []
    rejected: List[RejectedFuelLineItem] = []

    for index, item in enumerate(extraction.line_items, start=1):
        issues = line_item_issues(item, today)
        if issues:
            logger.info(f"Line item {index} ({item.registration}) rejected: {'; '.join(issues)}")
            rejected.append(RejectedFuelLineItem(**item.model_dump(), rejection_reasons=issues))
        else:
            valid.append(item)

    logger.info(f"Fuel invoice validation: {len(valid)} valid, {len(rejected)} rejected")
    return ValidatedFuelInvoice(
        invoice_date=extraction.invoice_date,
        station=extraction.station,
        invoice_total=extraction.invoice_total,
        line_items=valid,
        rejected_line_items=rejected,
    )
