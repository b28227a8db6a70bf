import time
import uuid
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _now_ms() -> int:
    return int(time.time() * 1000)


def _new_id() -> str:
    return str(uuid.uuid4())


class CatalogItemInput(BaseModel):
    """
    A priced work item as entered by a user, parsed from text or read from CSV.
    The repository assigns id and timestamp on add.
    """
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1, description="e.g., TMT steel Fe500D; the matching key")
    unit: str = Field("", description="e.g., kg, m³, each")
    rate: float = Field(..., ge=0, allow_inf_nan=False, description="Unit rate in ₹")
    scope_of_work: str = Field("", alias="scopeOfWork", description="What the rate covers")
    source: str = Field("", description="Category / facility, e.g., Canopy")

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, v: str) -> str:
        # Kept verbatim: the name is the exact-match key
        if not v.strip():
            raise ValueError("name must not be blank")
        return v


class CatalogItem(CatalogItemInput):
    """
    Rate catalog entry as persisted in the store.

    Field names serialise in camelCase so backups stay compatible with the
    browser-era store format.
    """
    id: str = Field(default_factory=_new_id)
    timestamp: int = Field(default_factory=_now_ms, description="Creation time, epoch milliseconds")

    @classmethod
    def from_input(cls, item: CatalogItemInput, *, id: Optional[str] = None,
                   timestamp: Optional[int] = None) -> "CatalogItem":
        data = item.model_dump()
        if id is not None:
            data["id"] = id
        if timestamp is not None:
            data["timestamp"] = timestamp
        return cls(**data)

    def to_store(self) -> dict:
        return self.model_dump(by_alias=True)


class CatalogItemRef(BaseModel):
    """The slim {id, name} view sent to the semantic matcher."""
    id: str
    name: str
