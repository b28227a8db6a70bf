"""
Runtime configuration — single source of truth for storage paths, LLM routing
and upload limits.

Import from here in services and routes rather than calling os.getenv() inline.
"""
from __future__ import annotations

import os


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


# ── Catalog store ──────────────────────────────────────────────────────────────

DATA_DIR: str = os.getenv("DATA_DIR", "data")

# Key the catalog JSON array is persisted under (<DATA_DIR>/<key>.json)
CATALOG_STORE_KEY: str = os.getenv("CATALOG_STORE_KEY", "smart_rate_store_v3")

# Seed the bundled schedule of rates when no store exists yet
SEED_DEFAULT_CATALOG: bool = _env_bool("SEED_DEFAULT_CATALOG", True)


# ── LLM routing ────────────────────────────────────────────────────────────────

LLM_PRIMARY_MODEL: str = os.getenv("LLM_PRIMARY_MODEL", "gemini/gemini-2.0-flash")

# Empty string disables the fallback provider
LLM_FALLBACK_MODEL: str = os.getenv("LLM_FALLBACK_MODEL", "")

LLM_TEMPERATURE: float = float(os.getenv("LLM_TEMPERATURE", "0.1"))
LLM_MAX_TOKENS: int = int(os.getenv("LLM_MAX_TOKENS", "4096"))
LLM_TIMEOUT_S: float = float(os.getenv("LLM_TIMEOUT_S", "60"))


# ── Uploads ────────────────────────────────────────────────────────────────────

MAX_IMAGE_MB: int = int(os.getenv("MAX_IMAGE_MB", "10"))
MAX_IMPORT_MB: int = int(os.getenv("MAX_IMPORT_MB", "5"))

ALLOWED_IMAGE_TYPES: tuple[str, ...] = (
    "image/jpeg",
    "image/png",
    "image/webp",
    "image/heic",
)


# ── Site analysis vocabulary ───────────────────────────────────────────────────

WORK_TYPES: tuple[str, ...] = ("Repair", "Maintenance", "New Construction", "Upgrade")


# ── HTTP ───────────────────────────────────────────────────────────────────────

CORS_ORIGINS: list[str] = [
    o.strip()
    for o in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173").split(",")
    if o.strip()
]

APP_VERSION: str = "1.0.0"


# ── Logging ────────────────────────────────────────────────────────────────────

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

# "json" for log shippers, "text" for a terminal
LOG_FORMAT: str = os.getenv("LOG_FORMAT", "json").lower()

# Provider keys litellm reads; none set means every AI call will fail
LLM_API_KEY_VARS: tuple[str, ...] = ("GEMINI_API_KEY", "OPENAI_API_KEY", "ANTHROPIC_API_KEY", "GROQ_API_KEY")
LLM_API_KEY_SET: bool = any(os.getenv(v) for v in LLM_API_KEY_VARS)
