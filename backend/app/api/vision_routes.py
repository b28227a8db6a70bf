"""Vision API — site photo in, damage assessment and priced estimate out."""
import json
import logging
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from app import config
from app.api.deps import get_llm_client, get_repository, read_upload
from app.services.catalog_repository import CatalogRepository
from app.services.errors import AnalysisFailedError
from app.services.estimate_engine import aggregate, aggregate_by_facility
from app.services.llm_client import LLMClient
from app.services.site_analysis import SiteAnalyzer

router = APIRouter(prefix="/api/vision", tags=["Site Analysis"])
logger = logging.getLogger("smartrate-vision")


def _parse_facilities(raw: Optional[str]) -> List[str]:
    """Accepts a JSON array or a comma-separated list."""
    if not raw or not raw.strip():
        return []
    raw = raw.strip()
    if raw.startswith("["):
        try:
            values = json.loads(raw)
        except json.JSONDecodeError:
            raise HTTPException(status_code=400, detail="facilities is not valid JSON")
        if not isinstance(values, list):
            raise HTTPException(status_code=400, detail="facilities must be a list")
        return [str(v).strip() for v in values if str(v).strip()]
    return [v.strip() for v in raw.split(",") if v.strip()]


def _parse_dimensions(raw: Optional[str]) -> Dict[str, str]:
    if not raw or not raw.strip():
        return {}
    try:
        values = json.loads(raw)
    except json.JSONDecodeError:
        raise HTTPException(status_code=400, detail="dimensions is not valid JSON")
    if not isinstance(values, dict):
        raise HTTPException(status_code=400, detail="dimensions must be an object of facility -> text")
    return {str(k): str(v) for k, v in values.items() if v is not None}


@router.post("/analyze")
async def analyze_site(
    image: UploadFile = File(...),
    work_type: str = Form("Repair"),
    facilities: Optional[str] = Form(None),
    dimensions: Optional[str] = Form(None),
    repo: CatalogRepository = Depends(get_repository),
    llm: LLMClient = Depends(get_llm_client),
):
    """
    Run the AI damage assessment on an uploaded site photo, then price its
    work items against the catalog (exact-name matching).

    facilities: JSON array or comma list of facility labels (catalog sources)
    dimensions: JSON object mapping facility label -> free-text dimensions
    """
    mime_type = (image.content_type or "").lower()
    if mime_type not in config.ALLOWED_IMAGE_TYPES:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported image type '{mime_type}'. Allowed: {', '.join(config.ALLOWED_IMAGE_TYPES)}",
        )
    if work_type not in config.WORK_TYPES:
        raise HTTPException(status_code=400, detail=f"work_type must be one of {', '.join(config.WORK_TYPES)}")

    selected = _parse_facilities(facilities)
    unknown = [f for f in selected if f not in repo.facilities()]
    if unknown:
        raise HTTPException(status_code=400, detail=f"Unknown facilities: {', '.join(unknown)}")

    contents = await read_upload(image, config.MAX_IMAGE_MB)
    catalog_subset = repo.for_facilities(selected)

    try:
        analysis = await SiteAnalyzer(llm).analyze(
            contents,
            mime_type,
            work_type,
            facilities=selected,
            dimensions=_parse_dimensions(dimensions),
            catalog=catalog_subset,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except AnalysisFailedError as e:
        raise HTTPException(status_code=502, detail=str(e))

    catalog = repo.items()
    if analysis.facility_estimates is not None:
        estimate = aggregate_by_facility(analysis.facility_estimates, catalog).to_dict()
    else:
        estimate = aggregate(analysis.bom or [], catalog).to_dict()

    return {
        "analysis": analysis.model_dump(by_alias=True, exclude_none=True),
        "estimate": estimate,
    }
