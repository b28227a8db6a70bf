"""
SmartRate Estimator API v1.0
FastAPI backend: petrol pump Schedule of Rates catalog, AI site-photo damage
assessment, and tender reconciliation/pricing against the catalog.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from dotenv import load_dotenv

# .env must be loaded before app.config reads the environment
load_dotenv()

from app import config
from app.data.default_catalog import DEFAULT_CATALOG
from app.services.catalog_repository import CatalogRepository
from app.services.llm_client import LLMClient
from app.services.logging_config import setup_logging
from app.services.middleware import RequestTimingMiddleware

setup_logging(level=config.LOG_LEVEL, json_output=config.LOG_FORMAT != "text")
logger = logging.getLogger("smartrate-api")

if not config.LLM_API_KEY_SET:
    logger.warning("No LLM API key set; site analysis, bulk parsing and semantic matching will fail")


@asynccontextmanager
async def lifespan(app: FastAPI):
    repo = CatalogRepository(
        config.DATA_DIR,
        config.CATALOG_STORE_KEY,
        seed=DEFAULT_CATALOG if config.SEED_DEFAULT_CATALOG else None,
    )
    app.state.catalog = repo.load()
    app.state.llm = LLMClient()
    logger.info(f"Catalog ready: {len(repo)} items, {len(repo.facilities())} facilities")
    yield
    app.state.catalog = None


app = FastAPI(
    title="SmartRate Estimator API",
    version=config.APP_VERSION,
    description="Schedule of Rates catalog, AI site assessment and tender pricing for petrol pump works",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Accept", "X-Requested-With", "X-Request-ID"],
    expose_headers=["Content-Disposition", "X-Request-ID"],
)
# Request timing + X-Request-ID must be outermost so it wraps all other middleware
app.add_middleware(RequestTimingMiddleware)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    # Rejected inputs can be NaN or Infinity, which a JSON response cannot carry
    errors = [{k: v for k, v in err.items() if k != "input"} for err in exc.errors()]
    return JSONResponse(status_code=422, content={"detail": jsonable_encoder(errors)})


# Routers
from app.api.catalog_routes import router as catalog_router
from app.api.estimate_routes import router as estimate_router
from app.api.vision_routes import router as vision_router
from app.api.tender_routes import router as tender_router

app.include_router(catalog_router)
app.include_router(estimate_router)
app.include_router(vision_router)
app.include_router(tender_router)


@app.get("/health")
async def health_check():
    repo = getattr(app.state, "catalog", None)
    return {
        "status": "active",
        "version": config.APP_VERSION,
        "catalog_loaded": repo is not None,
        "catalog_items": len(repo) if repo is not None else 0,
        "llm_primary": config.LLM_PRIMARY_MODEL,
        "llm_fallback": config.LLM_FALLBACK_MODEL or None,
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
