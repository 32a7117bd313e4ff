"""
AI extraction of fuel invoices and service documents.

A thin wrapper over a pydantic-ai ``Agent`` whose output type is the
extraction schema. Images arrive as ``data:`` URLs and are sent to the model
as binary content; anything else is sent as text, truncated to
``MAX_CONTENT_LENGTH`` characters.

Provider failures are raised as ``ExtractionError``: rate limits (429) and
exhausted credits (402) keep their status and carry a user-facing message,
context-length failures become 400, everything else 500.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Type, TypeVar, Union

from pydantic import BaseModel
from pydantic_ai import Agent, BinaryContent
from pydantic_ai.exceptions import ModelHTTPError, UnexpectedModelBehavior, UserError

from fleet_tracker.core.errors import ExtractionError
from fleet_tracker.core.logging_config import get_logger
from fleet_tracker.core.models.domain.extraction import FuelInvoiceExtraction, ServiceDocumentExtraction
from fleet_tracker.server.core.config import settings

logger = get_logger(__name__)

OutputT = TypeVar("OutputT", bound=BaseModel)

MAX_CONTENT_LENGTH = 500_000
MAX_IMAGE_LENGTH = MAX_CONTENT_LENGTH * 2
TRUNCATION_MARKER = "\n\n[Content truncated due to length...]"

FUEL_INVOICE_PROMPT = """You are an expert fuel invoice analyzer for UK fleet management.

Analyze the provided fuel invoice and extract detailed information about each fuel purchase line item.

{vehicle_list}

CRITICAL - UK FUELS / FUEL CARD INVOICE FORMAT:
These invoices have a "Transaction Detail" table with columns that can be confusing:
- "Quantity" column = LITRES of fuel (e.g., 54.75, 95.42, 65.51)
- "PPL" column = Price Per Litre in PENCE (e.g., 116.42 means £1.1642 per litre)
- "Net Amount £" column = Cost BEFORE VAT in pounds
- "Date" column = The ACTUAL TRANSACTION DATE when fuel was purchased (use this as the fill date, not the invoice date)

PPL is in PENCE: divide by 100 to get pounds.

VAT: UK fuel invoices typically show NET amounts. Add 20% VAT to get the cost actually paid:
- costPerLitre: (PPL / 100) x 1.2
- totalCost: Net Amount x 1.2

For EACH transaction row, extract transactionDate (YYYY-MM-DD, from the row), registration, litres,
costPerLitre, totalCost, mileage (if shown) and station.

Also extract invoiceDate (for reference only) and invoiceTotal (gross amount including VAT).

Each line item has its OWN transactionDate. Always return costs INCLUDING VAT."""

EMAIL_INVOICE_PROMPT = """You are a fuel invoice data extractor. Extract fuel purchase details from the provided document.

Known vehicle registrations: {registrations}

Extract:
- invoiceDate: The date of the invoice (YYYY-MM-DD format)
- station: The fuel station or supplier name
- lineItems: fuel purchases, each with registration (match to known registrations if possible),
  litres, costPerLitre, totalCost and mileage if shown."""

SERVICE_DOCUMENT_PROMPT = """You are an expert document analyzer specializing in vehicle service records, invoices, and MOT certificates.

Analyze the provided document content and extract:
- Total cost/amount (in GBP)
- Service type (e.g., MOT, Oil Change, Tire Replacement, General Service, Repair)
- Service date (if visible)
- Provider/garage name
- Vehicle registration (if visible)
- Mileage (if visible)
- Description of work performed
- Any individual line items with their costs

If you cannot determine a value, use null. Always try to extract as much information as possible."""


@dataclass(frozen=True)
class PreparedContent:
    """File content ready to hand to the model."""

    is_image: bool
    text: Optional[str] = None
    image: Optional[BinaryContent] = None
    truncated: bool = False


def prepare_content(file_content: str) -> PreparedContent:
    """Split ``data:image/...`` uploads from text and enforce the size limits.

    Raises:
        ExtractionError: 400 with a user-facing message when an image is too
            large or cannot be decoded
    """
    if file_content.startswith("data:image/"):
        if len(file_content) > MAX_IMAGE_LENGTH:
            raise ExtractionError(
                "Image file is too large for AI processing. Please upload a smaller image (under 5MB) "
                "or use a PDF/text document instead.",
                status_code=400,
                user_message=True,
            )
        header, _, encoded = file_content.partition(",")
        if not header.endswith(";base64"):
            raise ExtractionError("Image content is not a base64 data URL", status_code=400, user_message=True)
        media_type = header[len("data:") :].split(";", 1)[0]
        try:
            data = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError):
            raise ExtractionError("Image content is not valid base64", status_code=400, user_message=True)
        return PreparedContent(is_image=True, image=BinaryContent(data=data, media_type=media_type))

    if len(file_content) > MAX_CONTENT_LENGTH:
        logger.info(f"Content truncated from {len(file_content)} to {MAX_CONTENT_LENGTH} characters")
        return PreparedContent(
            is_image=False, text=file_content[:MAX_CONTENT_LENGTH] + TRUNCATION_MARKER, truncated=True
        )
    return PreparedContent(is_image=False, text=file_content)


def _provider_error(exc: ModelHTTPError, fallback: str) -> ExtractionError:
    body = str(exc.body or "")
    if exc.status_code == 429:
        return ExtractionError("Rate limit exceeded. Please try again in a moment.", status_code=429, user_message=True)
    if exc.status_code == 402:
        return ExtractionError("AI usage limit reached. Please add credits.", status_code=402, user_message=True)
    if "context length" in body or "too many tokens" in body:
        return ExtractionError(
            "Document is too large to process. Please try a smaller file.", status_code=400, user_message=True
        )
    return ExtractionError(fallback)


class InvoiceExtractor:
    """Runs the extraction agents against a configured model.

    ``model`` is anything pydantic-ai accepts as a model: an identifier such
    as ``"openai:gpt-4o-mini"`` or a ``Model`` instance (tests pass
    ``TestModel`` or ``FunctionModel``).
    """

    def __init__(self, model: Any) -> None:
        self._model = model

    async def _run(
        self,
        output_type: Type[OutputT],
        system_prompt: str,
        instruction: str,
        file_content: str,
        failure_message: str,
    ) -> OutputT:
        if not self._model:
            raise ExtractionError("AI processing not configured")

        content = prepare_content(file_content)
        prompt: Union[str, List[Any]]
        if content.is_image:
            prompt = [instruction, content.image]
        else:
            prompt = f"{instruction}\n\n{content.text}"

        try:
            agent = Agent(self._model, output_type=output_type, system_prompt=system_prompt)
            result = await agent.run(prompt)
        except ModelHTTPError as e:
            logger.error(f"AI provider error {e.status_code}: {e.body}")
            raise _provider_error(e, failure_message) from e
        except UserError as e:
            logger.error(f"AI extraction is misconfigured: {e}")
            raise ExtractionError("AI processing not configured") from e
        except UnexpectedModelBehavior as e:
            logger.error(f"AI returned an unusable response: {e}")
            raise ExtractionError(failure_message) from e

        return result.output

    async def scan_fuel_invoice(
        self, file_content: str, file_name: str, vehicle_registrations: Sequence[str] = ()
    ) -> FuelInvoiceExtraction:
        """Extract every fuel purchase from a fuel card invoice, with per-line dates and VAT-inclusive costs."""
        vehicle_list = (
            f"Known vehicle registrations in the fleet: {', '.join(vehicle_registrations)}"
            if vehicle_registrations
            else ""
        )
        extraction = await self._run(
            FuelInvoiceExtraction,
            FUEL_INVOICE_PROMPT.format(vehicle_list=vehicle_list),
            f"Please analyze this fuel invoice ({file_name}) and extract all fuel purchase line items:",
            file_content,
            "Failed to analyze fuel invoice",
        )
        logger.info(f"Extracted {len(extraction.line_items)} line items from {file_name}")
        return extraction

    async def extract_email_invoice(
        self, file_content: str, file_name: str, vehicle_registrations: Sequence[str] = ()
    ) -> FuelInvoiceExtraction:
        return await self._run(
            FuelInvoiceExtraction,
            EMAIL_INVOICE_PROMPT.format(registrations=", ".join(vehicle_registrations) or "None provided"),
            f"Extract fuel data from this invoice: {file_name}",
            file_content,
            "Failed to process invoice with AI",
        )

    async def scan_document(self, file_content: str, file_name: str) -> ServiceDocumentExtraction:
        """Extract cost and service details from a service invoice, receipt or MOT certificate."""
        return await self._run(
            ServiceDocumentExtraction,
            SERVICE_DOCUMENT_PROMPT,
            f"Please analyze this service document ({file_name}) and extract the cost and service information:",
            file_content,
            "Failed to analyze document",
        )


def get_invoice_extractor() -> InvoiceExtractor:
    """Dependency returning an extractor for the configured model."""
    return InvoiceExtractor(settings.ai.model)
