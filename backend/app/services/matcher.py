"""
Catalog matching — resolves a work-item name to at most one catalog entry.

Two separate strategies:
  - CatalogMatcher: exact, case-insensitive name equality. Local, pure, no I/O.
  - SemanticMatcher: asks the external matching capability for the best id.
ReconcilingMatcher chains them: exact fast path first, semantic call only on a miss.
"""
import json
import logging
from typing import Optional, Sequence

from pydantic import ValidationError

from app.models.catalog_schema import CatalogItem, CatalogItemRef
from app.models.tool_schemas import parse_tool_output
from app.services.errors import ExternalCapabilityError, MatchingFailedError
from app.services.llm_client import LLMClient, get_system_prompt

logger = logging.getLogger("smartrate-matcher")


class CatalogMatcher:
    """
    Exact-name lookup. Names are compared lowercased and otherwise verbatim:
    no whitespace, unit or synonym normalisation. With duplicate names the
    first entry in catalog order wins.
    """

    def __init__(self, catalog: Sequence[CatalogItem]):
        self.catalog = catalog

    def match(self, work_item_name: str) -> Optional[CatalogItem]:
        wanted = (work_item_name or "").lower()
        for entry in self.catalog:
            if entry.name.lower() == wanted:
                return entry
        return None


def build_match_prompt(name: str, scope: str, candidates: Sequence[CatalogItemRef]) -> str:
    db_items = json.dumps([c.model_dump() for c in candidates], ensure_ascii=False)
    return (
        "Match this tender requirement to the most appropriate database item.\n"
        f"Tender Item Name: {name}\n"
        f"Requested Scope: {scope}\n\n"
        "Available Database Items:\n"
        f"{db_items}\n\n"
        'Analyze the technical similarity. Return JSON of the form {"id": "<id>"} with the id '
        "of the best match. If no match is found, return an empty string as the id."
    )


class SemanticMatcher:
    """Delegates matching to the LLM. Ids the catalog does not hold count as no match."""

    def __init__(self, llm: LLMClient, catalog: Sequence[CatalogItem]):
        self.llm = llm
        self.catalog = catalog

    async def find_best_match(self, name: str, scope: str = "") -> Optional[CatalogItem]:
        if not self.catalog:
            return None

        candidates = [CatalogItemRef(id=c.id, name=c.name) for c in self.catalog]
        messages = [
            {"role": "system", "content": get_system_prompt("matcher")},
            {"role": "user", "content": build_match_prompt(name, scope, candidates)},
        ]
        try:
            raw = await self.llm.chat(messages, json_mode=True)
            result = parse_tool_output("match_catalog_item", raw)
        except (ExternalCapabilityError, ValueError, ValidationError) as e:
            logger.error(f"Semantic matching failed for '{name}': {e}", exc_info=True)
            raise MatchingFailedError(f"Semantic matching failed for '{name}'") from e

        matched_id = result.id.strip()
        if not matched_id:
            return None
        for entry in self.catalog:
            if entry.id == matched_id:
                return entry
        logger.warning(f"Semantic matcher returned unknown id '{matched_id}' for '{name}'; treating as no match")
        return None


class ReconcilingMatcher:
    """Exact match first; the semantic call is made only when the exact lookup misses."""

    def __init__(self, exact: CatalogMatcher, semantic: Optional[SemanticMatcher] = None):
        self.exact = exact
        self.semantic = semantic

    async def resolve(self, name: str, scope: str = "") -> Optional[CatalogItem]:
        hit = self.exact.match(name)
        if hit is not None or self.semantic is None:
            return hit
        return await self.semantic.find_best_match(name, scope)
