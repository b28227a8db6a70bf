"""Estimate API — price work items against the current catalog."""
from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.api.deps import get_repository
from app.models.tool_schemas import FacilityWorkItems, WorkItem
from app.services.catalog_repository import CatalogRepository
from app.services.estimate_engine import aggregate, aggregate_by_facility

router = APIRouter(prefix="/api/estimates", tags=["Estimates"])


class AggregateRequest(BaseModel):
    items: List[WorkItem]


class FacilityAggregateRequest(BaseModel):
    facilities: List[FacilityWorkItems]


@router.post("/aggregate")
async def aggregate_estimate(req: AggregateRequest, repo: CatalogRepository = Depends(get_repository)):
    return aggregate(req.items, repo.items()).to_dict()


@router.post("/aggregate-by-facility")
async def aggregate_facility_estimate(
    req: FacilityAggregateRequest,
    repo: CatalogRepository = Depends(get_repository),
):
    return aggregate_by_facility(req.facilities, repo.items()).to_dict()
