"""
Site analysis — boundary to the external image-analysis capability.

Builds the inspection prompt (work type, selected facilities, per-facility
dimensions, the catalog subset those facilities can draw on) and validates the
JSON that comes back. The model is told to copy item names verbatim from the
catalog, but nothing guarantees it; pricing treats every name as untrusted.
"""
import base64
import json
import logging
from typing import Dict, List, Optional, Sequence, get_args

from pydantic import ValidationError

from app import config
from app.models.catalog_schema import CatalogItem
from app.models.tool_schemas import ProblemCategory, Severity, SiteAnalysisTool, output_schema, parse_tool_output
from app.services.errors import AnalysisFailedError, ExternalCapabilityError
from app.services.llm_client import LLMClient, get_system_prompt

logger = logging.getLogger("smartrate-vision")


def _catalog_lines(catalog: Sequence[CatalogItem]) -> str:
    rows = [
        {"name": c.name, "unit": c.unit, "rate": c.rate, "scopeOfWork": c.scope_of_work, "facility": c.source}
        for c in catalog
    ]
    return json.dumps(rows, ensure_ascii=False)


def build_site_analysis_prompt(
    work_type: str,
    facilities: Sequence[str],
    dimensions: Dict[str, str],
    catalog: Sequence[CatalogItem],
) -> str:
    parts = [
        get_system_prompt("inspector"),
        f"Work type: {work_type}.",
        "Analyze this site image.",
        "1. Identify specific problems/defects in:",
        "   - Civil works (pavement cracks, canopy damage, paint, drainage)",
        "   - Electrical works (lighting, exposed wiring, DU display, earthing)",
        "   - Mechanical works (DU nozzles, hoses, air towers, STP issues)",
        "   - Safety (fire extinguishers, signage, hazards)",
        f"   Give each a category ({', '.join(get_args(ProblemCategory))}) and a severity ({', '.join(get_args(Severity))}).",
    ]

    if facilities:
        parts.append("2. For each of these facilities, list the work items needed: " + ", ".join(facilities) + ".")
        dims = [f"   - {f}: {dimensions[f]}" for f in facilities if dimensions.get(f)]
        if dims:
            parts.append("   Use these site dimensions to size quantities:")
            parts.extend(dims)
        parts.append("   Return them under 'facilityEstimates', one entry per facility, and omit 'bom'.")
    else:
        parts.append("2. Generate a structured Bill of Materials (BOM) for the necessary repair/maintenance work.")
        parts.append("   Return it under 'bom' and omit 'facilityEstimates'.")

    if catalog:
        parts.append(
            "Each work item name MUST be copied verbatim from this Schedule of Rates "
            "(use the closest entry; do not invent names):"
        )
        parts.append(_catalog_lines(catalog))

    parts.append("Return the analysis as a single JSON object matching this schema:")
    parts.append(output_schema("analyze_site_image"))
    return "\n".join(parts)


class SiteAnalyzer:
    def __init__(self, llm: LLMClient):
        self.llm = llm

    async def analyze(
        self,
        image: bytes,
        mime_type: str,
        work_type: str,
        facilities: Optional[Sequence[str]] = None,
        dimensions: Optional[Dict[str, str]] = None,
        catalog: Sequence[CatalogItem] = (),
    ) -> SiteAnalysisTool.Output:
        """
        Run the external analysis and return the validated result.

        Raises:
            ValueError: unknown work type or empty image (caller error, nothing sent)
            AnalysisFailedError: transport failure or a response that does not fit the schema
        """
        if work_type not in config.WORK_TYPES:
            raise ValueError(f"Unknown work type '{work_type}'. Expected one of {', '.join(config.WORK_TYPES)}")
        if not image:
            raise ValueError("Image is empty")

        selected: List[str] = list(dict.fromkeys(facilities or []))
        prompt = build_site_analysis_prompt(work_type, selected, dimensions or {}, catalog)
        image_b64 = base64.b64encode(image).decode("ascii")

        try:
            raw = await self.llm.vision([image_b64], prompt, mime_type=mime_type, json_mode=True)
            result = parse_tool_output("analyze_site_image", raw)
        except (ExternalCapabilityError, ValueError, ValidationError) as e:
            logger.error(f"Site analysis failed: {e}", exc_info=True)
            raise AnalysisFailedError("Analysis failed. Please try again.") from e

        logger.info(
            f"Site analysis: {len(result.problems)} problems, "
            f"{len(result.bom or [])} flat items, {len(result.facility_estimates or [])} facility groups"
        )
        return result
