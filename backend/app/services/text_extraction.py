"""Free-text extraction — rate items and tender lines pulled out of pasted text by the LLM."""
import logging
from typing import List

from pydantic import ValidationError

from app.models.catalog_schema import CatalogItemInput
from app.models.tool_schemas import TenderRequest, output_schema, parse_tool_output
from app.services.errors import ExternalCapabilityError, ExtractionFailedError
from app.services.llm_client import LLMClient, get_system_prompt

logger = logging.getLogger("smartrate-extraction")


class TextExtractor:
    def __init__(self, llm: LLMClient):
        self.llm = llm

    async def _extract(self, tool_name: str, instructions: str, text: str):
        if not text or not text.strip():
            raise ValueError("No text to extract from")
        prompt = (
            f"{instructions}\n\n"
            'Return a JSON object {"items": [...]} matching this schema:\n'
            f"{output_schema(tool_name)}\n\n"
            f"Text:\n{text}"
        )
        messages = [
            {"role": "system", "content": get_system_prompt("rate_analyst")},
            {"role": "user", "content": prompt},
        ]
        try:
            raw = await self.llm.chat(messages, json_mode=True)
            return parse_tool_output(tool_name, raw)
        except (ExternalCapabilityError, ValueError, ValidationError) as e:
            logger.error(f"{tool_name} failed: {e}", exc_info=True)
            raise ExtractionFailedError(f"Could not extract items from text ({tool_name})") from e

    async def parse_rates(self, text: str) -> List[CatalogItemInput]:
        """Schedule of Rates items (name, unit, rate, scope, source) found in text."""
        result = await self._extract(
            "extract_rates",
            "Extract Schedule of Rates (SOR) items from the following text. For each item, identify "
            "the name, unit of measurement, rate in ₹, scope of work description, and source reference.",
            text,
        )
        logger.info(f"Extracted {len(result.items)} rate items")
        return list(result.items)

    async def parse_tender_items(self, text: str) -> List[TenderRequest]:
        """Tender lines (name, quantity, requested scope, estimated rate if stated) found in text."""
        result = await self._extract(
            "extract_tender_items",
            "Extract items from this tender/quotation text into a structured list. For each item, "
            "identify the name, quantity, requested scope of work, and estimated rate/price if mentioned.",
            text,
        )
        logger.info(f"Extracted {len(result.items)} tender items")
        return list(result.items)
