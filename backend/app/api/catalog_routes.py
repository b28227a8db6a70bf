"""Catalog API routes — browse, edit, backup/restore, CSV, bulk add from text."""
import logging
from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from fastapi.responses import Response
from pydantic import BaseModel, Field

from app import config
from app.api.deps import get_llm_client, get_repository, read_upload
from app.models.catalog_schema import CatalogItemInput
from app.services import catalog_io
from app.services.catalog_repository import CatalogRepository
from app.services.errors import CatalogImportError, CatalogItemNotFound, ExtractionFailedError
from app.services.llm_client import LLMClient
from app.services.text_extraction import TextExtractor

router = APIRouter(prefix="/api/catalog", tags=["Catalog"])
logger = logging.getLogger("smartrate-catalog")


class BulkTextRequest(BaseModel):
    text: str = Field(..., min_length=1)


class BulkConfirmRequest(BaseModel):
    items: List[CatalogItemInput]


def _commit(repo: CatalogRepository) -> None:
    """Persist the catalog; on failure reload the store so memory matches disk."""
    try:
        repo.save()
    except OSError as e:
        logger.error(f"Catalog save failed: {e}", exc_info=True)
        repo.load(seed=False)
        raise HTTPException(status_code=500, detail="Could not save catalog")


def _not_found(item_id: str) -> HTTPException:
    return HTTPException(status_code=404, detail=f"Catalog item '{item_id}' not found")


def _attachment(body: str, media_type: str, filename: str) -> Response:
    return Response(
        content=body.encode("utf-8"),
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("")
async def list_catalog(
    q: str = Query("", description="Case-insensitive search on name or source"),
    repo: CatalogRepository = Depends(get_repository),
):
    items = repo.search(q)
    return {"total": len(items), "items": [i.to_store() for i in items]}


@router.get("/facilities")
async def list_facilities(repo: CatalogRepository = Depends(get_repository)):
    """Distinct source labels, usable as facility selections for site analysis."""
    facilities = repo.facilities()
    return {
        "facilities": [
            {"facility": f, "itemCount": len(repo.for_facilities([f]))}
            for f in facilities
        ]
    }


@router.get("/export/json")
async def export_backup(repo: CatalogRepository = Depends(get_repository)):
    return _attachment(
        catalog_io.export_json(repo.items()),
        "application/json",
        catalog_io.backup_filename("smartrate_backup", "json"),
    )


@router.get("/export/csv")
async def export_csv(repo: CatalogRepository = Depends(get_repository)):
    return _attachment(
        catalog_io.export_csv(repo.items()),
        "text/csv; charset=utf-8",
        catalog_io.backup_filename("SmartRate_Database", "csv"),
    )


@router.post("/restore")
async def restore_backup(
    file: UploadFile = File(...),
    repo: CatalogRepository = Depends(get_repository),
):
    """Replace the whole catalog with a JSON backup. Invalid files leave the catalog untouched."""
    contents = await read_upload(file, config.MAX_IMPORT_MB)
    try:
        items = catalog_io.parse_backup(contents)
    except CatalogImportError as e:
        logger.warning(f"Rejected backup {file.filename}: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    async with repo.lock:
        previous = len(repo)
        repo.replace_all(items)
        _commit(repo)
    logger.info(f"Catalog restored from {file.filename}: {previous} -> {len(items)} items")
    return {"status": "restored", "previous_count": previous, "total": len(items)}


@router.post("/import/csv")
async def import_csv(
    file: UploadFile = File(...),
    repo: CatalogRepository = Depends(get_repository),
):
    """Append rows of a catalog CSV as new items."""
    contents = await read_upload(file, config.MAX_IMPORT_MB)
    try:
        inputs = catalog_io.parse_csv(contents)
    except CatalogImportError as e:
        logger.warning(f"Rejected CSV {file.filename}: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    async with repo.lock:
        created = repo.add_many(inputs)
        _commit(repo)
    return {"status": "imported", "new_entries": len(created), "total": len(repo)}


@router.post("/bulk/preview")
async def bulk_preview(
    req: BulkTextRequest,
    llm: LLMClient = Depends(get_llm_client),
):
    """Extract rate items from pasted text — returns preview WITHOUT saving."""
    try:
        items = await TextExtractor(llm).parse_rates(req.text)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ExtractionFailedError as e:
        raise HTTPException(status_code=502, detail=str(e))

    if not items:
        raise HTTPException(status_code=422, detail="No rate items could be extracted from this text.")
    return {
        "total_extracted": len(items),
        "items": [i.model_dump(by_alias=True) for i in items],
    }


@router.post("/bulk/confirm", status_code=201)
async def bulk_confirm(
    req: BulkConfirmRequest,
    repo: CatalogRepository = Depends(get_repository),
):
    """Save previewed (and possibly user-edited) items with fresh ids and timestamps."""
    async with repo.lock:
        created = repo.add_many(req.items)
        _commit(repo)
    return {"status": "saved", "new_entries": len(created), "items": [i.to_store() for i in created]}


@router.post("", status_code=201)
async def create_item(
    item: CatalogItemInput,
    repo: CatalogRepository = Depends(get_repository),
):
    async with repo.lock:
        created = repo.add(item)
        _commit(repo)
    return created.to_store()


@router.get("/{item_id}")
async def get_item(item_id: str, repo: CatalogRepository = Depends(get_repository)):
    try:
        return repo.get(item_id).to_store()
    except CatalogItemNotFound:
        raise _not_found(item_id)


@router.put("/{item_id}")
async def update_item(
    item_id: str,
    item: CatalogItemInput,
    repo: CatalogRepository = Depends(get_repository),
):
    async with repo.lock:
        try:
            updated = repo.update(item_id, item)
        except CatalogItemNotFound:
            raise _not_found(item_id)
        _commit(repo)
    return updated.to_store()


@router.delete("/{item_id}")
async def delete_item(item_id: str, repo: CatalogRepository = Depends(get_repository)):
    async with repo.lock:
        try:
            removed = repo.delete(item_id)
        except CatalogItemNotFound:
            raise _not_found(item_id)
        _commit(repo)
    return {"status": "deleted", "id": removed.id}
