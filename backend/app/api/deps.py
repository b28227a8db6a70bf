"""FastAPI dependency injection — catalog repository and LLM client handles."""
from fastapi import HTTPException, Request, UploadFile, status

from app.services.catalog_repository import CatalogRepository
from app.services.llm_client import LLMClient


def get_repository(request: Request) -> CatalogRepository:
    repo = getattr(request.app.state, "catalog", None)
    if repo is None:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Catalog not loaded")
    return repo


def get_llm_client(request: Request) -> LLMClient:
    llm = getattr(request.app.state, "llm", None)
    if llm is None:
        llm = LLMClient()
        request.app.state.llm = llm
    return llm


async def read_upload(file: UploadFile, max_mb: int) -> bytes:
    """Read an upload fully, rejecting empty or oversized files with 400."""
    try:
        contents = await file.read()
    except Exception as e:
        raise HTTPException(status_code=400, detail=f"Failed to read uploaded file: {e}")
    if not contents:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")
    if len(contents) > max_mb * 1024 * 1024:
        raise HTTPException(status_code=400, detail=f"File too large (max {max_mb}MB)")
    return contents
