"""
Structured Tool Schemas for the SmartRate external AI capabilities.

These Pydantic models define the input/output contract for every LLM call.
They are used in two ways:
  1. Rendered into prompts as JSON schema (via .model_json_schema())
  2. As validation models for LLM response parsing — an AI response is
     untrusted input and is rejected when it does not fit the Output model

Usage:
    from app.models.tool_schemas import SiteAnalysisTool, parse_tool_output

    schema = SiteAnalysisTool.Output.model_json_schema()
    result = parse_tool_output("analyze_site_image", llm_response)
"""

from __future__ import annotations

import json
import re
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.models.catalog_schema import CatalogItemInput, CatalogItemRef


ProblemCategory = Literal["Civil", "Electrical", "Mechanical", "Safety", "General"]
Severity = Literal["Low", "Medium", "High"]


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# ── Tool 1: Analyze Site Image ────────────────────────────────────────────────

class Problem(_CamelModel):
    """A single defect observed in the site photo."""
    category: ProblemCategory = Field(..., description="Trade the defect belongs to")
    description: str = Field(..., description="What is wrong and where")
    severity: Severity = Field(..., description="Low, Medium or High")


class WorkItem(_CamelModel):
    """One quantified repair/maintenance need. item should be a catalog name, verbatim."""
    item: str = Field(..., min_length=1, description="Work item name, copied verbatim from the catalog when possible")
    unit: str = Field("", description="Unit of measurement, e.g., m², kg, each")
    quantity: float = Field(..., gt=0, allow_inf_nan=False, description="Quantity required")
    estimated_scope: str = Field("", alias="estimatedScope", description="Why this item is needed")


class FacilityWorkItems(_CamelModel):
    """Work items for one facility (e.g., Canopy)."""
    facility: str
    items: List[WorkItem] = Field(default_factory=list)


class SiteAnalysisTool(BaseModel):
    """
    Inspect a petrol pump site photo, list defects by trade and severity, and
    produce the bill of materials needed to fix them.
    """

    class Input(BaseModel):
        mime_type: str = Field(..., description="Image MIME type, e.g., image/jpeg")
        work_type: str = Field(..., description="Repair, Maintenance, New Construction or Upgrade")
        facilities: List[str] = Field(default_factory=list, description="Selected facility labels")
        dimensions: dict = Field(default_factory=dict, description="Free-text dimensions per facility")
        catalog: List[CatalogItemInput] = Field(default_factory=list, description="Catalog subset visible to the facilities")

    class Output(_CamelModel):
        summary: str = Field(..., description="Two or three sentence overview of site condition")
        problems: List[Problem] = Field(default_factory=list)
        bom: Optional[List[WorkItem]] = Field(None, description="Flat bill of materials when no facility is selected")
        facility_estimates: Optional[List[FacilityWorkItems]] = Field(
            None, alias="facilityEstimates", description="Per-facility bill of materials"
        )

        @model_validator(mode="after")
        def _has_items(self):
            if self.bom is None and self.facility_estimates is None:
                raise ValueError("response has neither 'bom' nor 'facilityEstimates'")
            return self


# ── Tool 2: Match Catalog Item ────────────────────────────────────────────────

class MatchCatalogItemTool(BaseModel):
    """
    Match a tender requirement to the most technically similar catalog entry.
    Returns the id of the best match, or an empty string when nothing fits.
    """

    class Input(BaseModel):
        name: str = Field(..., description="Tender item name")
        requested_scope: str = Field("", description="Scope of work requested in the tender")
        candidates: List[CatalogItemRef] = Field(..., description="Catalog entries to choose from")

    class Output(BaseModel):
        id: str = Field("", description="The id of the matching item, or an empty string if no reasonable match")


# ── Tool 3: Extract Rates ─────────────────────────────────────────────────────

class ExtractRatesTool(BaseModel):
    """
    Extract Schedule of Rates items (name, unit, rate in ₹, scope of work,
    source reference) from pasted text.
    """

    class Input(BaseModel):
        text: str

    class Output(BaseModel):
        items: List[CatalogItemInput] = Field(default_factory=list)


# ── Tool 4: Extract Tender Items ──────────────────────────────────────────────

class TenderRequest(_CamelModel):
    """A line of a tender or quotation request."""
    name: str = Field(..., min_length=1)
    quantity: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    requested_scope: str = Field("", alias="requestedScope")
    estimated_rate: Optional[float] = Field(None, alias="estimatedRate", allow_inf_nan=False)

    @model_validator(mode="before")
    @classmethod
    def _accept_bom_shape(cls, data):
        # BOM lines from site analysis use item/estimatedScope
        if isinstance(data, dict):
            data = dict(data)
            if not data.get("name") and data.get("item"):
                data["name"] = data["item"]
            if not data.get("requestedScope") and not data.get("requested_scope") and data.get("estimatedScope"):
                data["requestedScope"] = data["estimatedScope"]
        return data

    @classmethod
    def from_work_item(cls, item: WorkItem) -> "TenderRequest":
        return cls(name=item.item, quantity=item.quantity, requested_scope=item.estimated_scope)


class ExtractTenderItemsTool(BaseModel):
    """
    Extract tender/quotation lines (name, quantity, requested scope of work and
    estimated rate when mentioned) from pasted text.
    """

    class Input(BaseModel):
        text: str

    class Output(BaseModel):
        items: List[TenderRequest] = Field(default_factory=list)


# ── Tool registry: maps tool names to schema classes ─────────────────────────

TOOL_REGISTRY: dict[str, type[BaseModel]] = {
    "analyze_site_image": SiteAnalysisTool,
    "match_catalog_item": MatchCatalogItemTool,
    "extract_rates": ExtractRatesTool,
    "extract_tender_items": ExtractTenderItemsTool,
}

_FENCE_RE = re.compile(r"^\s*```(?:json)?\s*(.*?)\s*```\s*$", re.DOTALL)


def _strip_fences(raw: str) -> str:
    m = _FENCE_RE.match(raw)
    return m.group(1) if m else raw


def output_schema(tool_name: str) -> str:
    """Output JSON schema of a tool, as compact text for embedding in a prompt."""
    output_cls = TOOL_REGISTRY[tool_name].Output
    return json.dumps(output_cls.model_json_schema(by_alias=True), ensure_ascii=False)


def parse_tool_output(tool_name: str, raw_json: str | dict | list) -> BaseModel:
    """
    Parse and validate LLM tool output against the Output schema.

    Bare JSON arrays are accepted for list-shaped tools and wrapped as
    {"items": [...]}.

    Raises:
        KeyError: If tool_name not in registry
        json.JSONDecodeError: If the response is not JSON
        pydantic.ValidationError: If the response does not match the Output schema
    """
    schema_class = TOOL_REGISTRY[tool_name]
    output_cls = schema_class.Output

    if isinstance(raw_json, str):
        data = json.loads(_strip_fences(raw_json))
    else:
        data = raw_json

    if isinstance(data, list) and "items" in output_cls.model_fields:
        data = {"items": data}

    return output_cls.model_validate(data)
