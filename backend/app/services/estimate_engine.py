"""
Estimate aggregation — prices work items against the rate catalog.

For each work item: rate = exact-match catalog rate (0 when nothing matches),
line_total = quantity × rate. Totals are plain sums; rounding is left to
display. Input order is preserved.

The result is a snapshot: it copies the rates it used, so later catalog
edits or deletions do not change it. Re-aggregate to pick them up.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from app.models.catalog_schema import CatalogItem
from app.models.tool_schemas import FacilityWorkItems, WorkItem
from app.services.matcher import CatalogMatcher


@dataclass(frozen=True)
class EstimateLine:
    item: str
    unit: str
    quantity: float
    rate: float
    line_total: float
    catalog_item_id: Optional[str] = None
    estimated_scope: str = ""

    @property
    def matched(self) -> bool:
        return self.catalog_item_id is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "item": self.item,
            "unit": self.unit,
            "quantity": self.quantity,
            "rate": self.rate,
            "lineTotal": self.line_total,
            "matched": self.matched,
            "catalogItemId": self.catalog_item_id,
            "estimatedScope": self.estimated_scope,
        }


@dataclass(frozen=True)
class Estimate:
    lines: List[EstimateLine] = field(default_factory=list)
    total: float = 0.0

    @property
    def unmatched(self) -> List[EstimateLine]:
        return [ln for ln in self.lines if not ln.matched]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lines": [ln.to_dict() for ln in self.lines],
            "total": self.total,
            "unmatchedCount": len(self.unmatched),
        }


@dataclass(frozen=True)
class FacilityEstimate:
    facility: str
    lines: List[EstimateLine] = field(default_factory=list)
    subtotal: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "facility": self.facility,
            "lines": [ln.to_dict() for ln in self.lines],
            "subtotal": self.subtotal,
        }


@dataclass(frozen=True)
class FacilityGroupedEstimate:
    facilities: List[FacilityEstimate] = field(default_factory=list)
    grand_total: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "facilities": [f.to_dict() for f in self.facilities],
            "grandTotal": self.grand_total,
        }


def price_line(work_item: WorkItem, matcher: CatalogMatcher) -> EstimateLine:
    match = matcher.match(work_item.item)
    rate = match.rate if match is not None else 0.0
    return EstimateLine(
        item=work_item.item,
        unit=work_item.unit or (match.unit if match is not None else ""),
        quantity=work_item.quantity,
        rate=rate,
        line_total=work_item.quantity * rate,
        catalog_item_id=match.id if match is not None else None,
        estimated_scope=work_item.estimated_scope,
    )


def aggregate(work_items: Sequence[WorkItem], catalog: Sequence[CatalogItem]) -> Estimate:
    """Flat estimate. An empty catalog yields all-zero lines, never an error."""
    matcher = CatalogMatcher(catalog)
    lines = [price_line(w, matcher) for w in work_items]
    return Estimate(lines=lines, total=sum(ln.line_total for ln in lines))


def aggregate_by_facility(
    facility_groups: Sequence[FacilityWorkItems], catalog: Sequence[CatalogItem]
) -> FacilityGroupedEstimate:
    """Per-facility subtotals plus grand total = sum of subtotals."""
    matcher = CatalogMatcher(catalog)
    groups: List[FacilityEstimate] = []
    for group in facility_groups:
        lines = [price_line(w, matcher) for w in group.items]
        groups.append(FacilityEstimate(
            facility=group.facility,
            lines=lines,
            subtotal=sum(ln.line_total for ln in lines),
        ))
    return FacilityGroupedEstimate(
        facilities=groups,
        grand_total=sum(g.subtotal for g in groups),
    )
