"""Tender API — reconcile tender lines (pasted text or AI BOM) against the catalog."""
import logging
import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.api.deps import get_llm_client, get_repository
from app.models.catalog_schema import CatalogItem
from app.models.tool_schemas import TenderRequest
from app.services import catalog_io
from app.services.catalog_repository import CatalogRepository
from app.services.errors import ExternalCapabilityError
from app.services.llm_client import LLMClient
from app.services.matcher import CatalogMatcher, ReconcilingMatcher, SemanticMatcher
from app.services.tender_engine import TenderEngine, TenderItem, TenderQuotation
from app.services.text_extraction import TextExtractor

router = APIRouter(prefix="/api/tender", tags=["Tender"])
logger = logging.getLogger("smartrate-tender")


class TenderProcessRequest(BaseModel):
    text: Optional[str] = None
    items: Optional[List[TenderRequest]] = None

    @model_validator(mode="after")
    def _one_source(self):
        if bool(self.text and self.text.strip()) == bool(self.items):
            raise ValueError("provide exactly one of 'text' or 'items'")
        return self


class QuotedItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str
    quantity: float = 1
    requested_scope: str = Field("", alias="requestedScope")
    estimated_rate: Optional[float] = Field(None, alias="estimatedRate")
    matched_rate: Optional[CatalogItem] = Field(None, alias="matchedRate")


class TenderExportRequest(BaseModel):
    items: List[QuotedItem]


@router.post("/process")
async def process_tender(
    req: TenderProcessRequest,
    repo: CatalogRepository = Depends(get_repository),
    llm: LLMClient = Depends(get_llm_client),
):
    """
    Match every line to a catalog rate: exact name first, then one semantic
    match call per line that missed. Any failed external call aborts the run.
    """
    catalog = repo.items()
    matcher = ReconcilingMatcher(CatalogMatcher(catalog), SemanticMatcher(llm, catalog))
    engine = TenderEngine(matcher, TextExtractor(llm))

    try:
        if req.items:
            quotation = await engine.process(req.items)
        else:
            quotation = await engine.process_text(req.text or "")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ExternalCapabilityError as e:
        raise HTTPException(status_code=502, detail=str(e))

    return quotation.to_dict()


@router.post("/export/csv")
async def export_tender_csv(req: TenderExportRequest):
    """Quotation CSV for a previously processed tender (the /process response items)."""
    quotation = TenderQuotation(items=[
        TenderItem(
            id=i.id,
            name=i.name,
            quantity=i.quantity,
            requested_scope=i.requested_scope,
            estimated_rate=i.estimated_rate,
            matched_rate=i.matched_rate,
        )
        for i in req.items
    ])
    return Response(
        content=catalog_io.export_tender_csv(quotation).encode("utf-8"),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{catalog_io.backup_filename("SmartRate_Quotation", "csv")}"'},
    )
