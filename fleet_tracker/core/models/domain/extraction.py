"""
Structured outputs of the AI document extractors.

These models are handed to the pydantic-ai agent as its output type, so their
field descriptions double as extraction instructions. Field names are exposed
in camelCase, which is also the shape the scan endpoints return.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FuelInvoiceLineItem(_CamelModel):
    """One fuel purchase on a fuel card invoice. Costs include VAT."""

    transaction_date: Optional[str] = Field(
        default=None, description="The actual transaction/fill date in YYYY-MM-DD format (from the Date column)"
    )
    registration: Optional[str] = Field(default=None, description="Vehicle registration number")
    litres: Optional[float] = Field(default=None, description="Litres of fuel from the Quantity column")
    cost_per_litre: Optional[float] = Field(default=None, description="Cost per litre in GBP including VAT")
    total_cost: Optional[float] = Field(default=None, description="Total cost in GBP including VAT")
    mileage: Optional[float] = Field(default=None, description="Vehicle mileage if shown")
    station: Optional[str] = Field(default=None, description="Station name for this transaction")


class RejectedFuelLineItem(FuelInvoiceLineItem):
    rejection_reasons: List[str] = Field(default_factory=list)


class FuelInvoiceExtraction(_CamelModel):
    """Fuel invoice header and its line items."""

    invoice_date: Optional[str] = Field(default=None, description="Invoice date in YYYY-MM-DD format (for reference)")
    station: Optional[str] = Field(default=None, description="Fuel station or supplier name")
    invoice_total: Optional[float] = Field(default=None, description="Total gross invoice amount in GBP")
    line_items: List[FuelInvoiceLineItem] = Field(
        default_factory=list, description="Individual fuel purchase line items with their own transaction dates"
    )


class ServiceLineItem(_CamelModel):
    description: Optional[str] = None
    cost: Optional[float] = None


class ServiceDocumentExtraction(_CamelModel):
    """Data pulled from a service invoice, receipt or MOT certificate."""

    total_cost: Optional[float] = Field(default=None, description="Total cost in GBP")
    service_type: Optional[str] = Field(default=None, description="Type of service performed")
    service_date: Optional[str] = Field(default=None, description="Date of service in YYYY-MM-DD format")
    provider: Optional[str] = Field(default=None, description="Name of the service provider/garage")
    registration: Optional[str] = Field(default=None, description="Vehicle registration number")
    mileage: Optional[float] = Field(default=None, description="Vehicle mileage at time of service")
    description: Optional[str] = Field(default=None, description="Description of work performed")
    line_items: List[ServiceLineItem] = Field(default_factory=list)
