"""
TenderEngine — reconciles tender (or AI bill-of-materials) lines against the catalog.

Items are resolved one at a time, in input order: exact name first, then one
external semantic-match call per item that missed. No batching, no parallel
fan-out. If any external call fails the whole run aborts and nothing is
returned, so a quotation is never half-matched.
"""
import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Sequence

from app.models.catalog_schema import CatalogItem
from app.models.tool_schemas import TenderRequest, WorkItem
from app.services.matcher import ReconcilingMatcher
from app.services.text_extraction import TextExtractor

logger = logging.getLogger("smartrate-tender")

MatchStatus = Literal["matched", "no-match"]


@dataclass(frozen=True)
class TenderItem:
    id: str
    name: str
    quantity: float
    requested_scope: str
    estimated_rate: Optional[float]
    matched_rate: Optional[CatalogItem]

    @property
    def status(self) -> MatchStatus:
        return "matched" if self.matched_rate is not None else "no-match"

    @property
    def quoted_rate(self) -> float:
        return self.matched_rate.rate if self.matched_rate is not None else 0.0

    @property
    def total_quoted(self) -> float:
        return self.quantity * self.quoted_rate

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "quantity": self.quantity,
            "requestedScope": self.requested_scope,
            "estimatedRate": self.estimated_rate,
            "matchedRate": self.matched_rate.to_store() if self.matched_rate is not None else None,
            "status": self.status,
            "totalQuoted": self.total_quoted,
        }


@dataclass(frozen=True)
class TenderQuotation:
    items: List[TenderItem] = field(default_factory=list)

    @property
    def total(self) -> float:
        return sum(i.total_quoted for i in self.items)

    @property
    def matched_count(self) -> int:
        return sum(1 for i in self.items if i.status == "matched")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": [i.to_dict() for i in self.items],
            "total": self.total,
            "matchedCount": self.matched_count,
            "noMatchCount": len(self.items) - self.matched_count,
        }


class TenderEngine:
    def __init__(self, matcher: ReconcilingMatcher, extractor: Optional[TextExtractor] = None):
        self.matcher = matcher
        self.extractor = extractor

    async def process(self, requests: Sequence[TenderRequest | WorkItem]) -> TenderQuotation:
        items: List[TenderItem] = []
        for req in requests:
            if isinstance(req, WorkItem):
                req = TenderRequest.from_work_item(req)
            match = await self.matcher.resolve(req.name, req.requested_scope)
            items.append(TenderItem(
                id=str(uuid.uuid4()),
                name=req.name,
                # Missing or zero quantity counts as one unit
                quantity=req.quantity or 1,
                requested_scope=req.requested_scope,
                estimated_rate=req.estimated_rate,
                matched_rate=match,
            ))
        quotation = TenderQuotation(items=items)
        logger.info(f"Tender reconciled: {quotation.matched_count}/{len(items)} matched, total {quotation.total:.2f}")
        return quotation

    async def process_text(self, text: str) -> TenderQuotation:
        if self.extractor is None:
            raise RuntimeError("TenderEngine has no TextExtractor configured")
        requests = await self.extractor.parse_tender_items(text)
        return await self.process(requests)
