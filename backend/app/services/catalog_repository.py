"""
CatalogRepository — the rate catalog, owned by one process-wide object.

Lifecycle: load() once at startup, mutate through the repository's methods,
then save() explicitly. Mutations never persist on their own.

The store is a JSON array of CatalogItem kept under a fixed key
(<data_dir>/<store_key>.json), the same shape as a JSON backup.
"""
import asyncio
import json
import logging
import os
import tempfile
from typing import Iterable, Iterator, List, Optional, Sequence

from pydantic import ValidationError

from app.models.catalog_schema import CatalogItem, CatalogItemInput
from app.services.errors import CatalogItemNotFound

logger = logging.getLogger("smartrate-catalog")


class CatalogRepository:
    def __init__(self, data_dir: str, store_key: str, seed: Optional[Sequence[dict]] = None):
        self.path = os.path.join(data_dir, f"{store_key}.json")
        self._seed = seed
        self._items: List[CatalogItem] = []
        # Held by the HTTP layer around mutate + save
        self.lock = asyncio.Lock()

    # ── persistence ──────────────────────────────────────────────────────────

    def load(self, seed: bool = True) -> "CatalogRepository":
        """
        Read the store. Seeds (and saves) it when absent and a seed was given,
        unless seed=False; starts empty when unreadable.
        """
        if not os.path.exists(self.path):
            if seed and self._seed:
                self._items = [CatalogItem.model_validate(row) for row in self._seed]
                logger.info(f"Seeded catalog with {len(self._items)} default items")
                self.save()
            else:
                self._items = []
            return self

        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                raw = json.load(fh)
            if not isinstance(raw, list):
                raise ValueError(f"expected a JSON array, got {type(raw).__name__}")
            self._items = [CatalogItem.model_validate(row) for row in raw]
        except (OSError, ValueError, ValidationError) as e:
            logger.error(f"Failed to load saved catalog from {self.path}: {e}")
            self._items = []
            return self

        logger.info(f"Loaded {len(self._items)} catalog items from {self.path}")
        return self

    def save(self) -> None:
        """Write the whole catalog atomically (temp file + rename)."""
        directory = os.path.dirname(self.path) or "."
        os.makedirs(directory, exist_ok=True)
        payload = [item.to_store() for item in self._items]
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".catalog-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(payload, fh, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
        logger.debug(f"Saved {len(payload)} catalog items")

    # ── reads ────────────────────────────────────────────────────────────────

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[CatalogItem]:
        return iter(list(self._items))

    def items(self) -> List[CatalogItem]:
        return list(self._items)

    def get(self, item_id: str) -> CatalogItem:
        for item in self._items:
            if item.id == item_id:
                return item
        raise CatalogItemNotFound(item_id)

    def find(self, item_id: str) -> Optional[CatalogItem]:
        try:
            return self.get(item_id)
        except CatalogItemNotFound:
            return None

    def search(self, query: str) -> List[CatalogItem]:
        """Case-insensitive substring match on name or source."""
        q = (query or "").lower()
        if not q:
            return self.items()
        return [i for i in self._items if q in i.name.lower() or q in i.source.lower()]

    def facilities(self) -> List[str]:
        """Distinct source labels in catalog order."""
        return list(dict.fromkeys(i.source for i in self._items if i.source))

    def for_facilities(self, facilities: Iterable[str]) -> List[CatalogItem]:
        """Items whose source is one of facilities; the whole catalog when none given."""
        wanted = set(facilities)
        if not wanted:
            return self.items()
        return [i for i in self._items if i.source in wanted]

    # ── mutations (call save() afterwards) ───────────────────────────────────

    def add(self, item: CatalogItemInput) -> CatalogItem:
        """New items go to the front, matching the order users see them in."""
        created = CatalogItem.from_input(item)
        self._items.insert(0, created)
        return created

    def add_many(self, items: Iterable[CatalogItemInput]) -> List[CatalogItem]:
        created = [CatalogItem.from_input(i) for i in items]
        self._items[:0] = created
        return created

    def update(self, item_id: str, item: CatalogItemInput) -> CatalogItem:
        """Replace fields of an existing item; id and timestamp are kept."""
        for idx, existing in enumerate(self._items):
            if existing.id == item_id:
                updated = CatalogItem.from_input(item, id=existing.id, timestamp=existing.timestamp)
                self._items[idx] = updated
                return updated
        raise CatalogItemNotFound(item_id)

    def delete(self, item_id: str) -> CatalogItem:
        for idx, existing in enumerate(self._items):
            if existing.id == item_id:
                return self._items.pop(idx)
        raise CatalogItemNotFound(item_id)

    def replace_all(self, items: Sequence[CatalogItem]) -> None:
        """Swap in a restored catalog wholesale."""
        self._items = list(items)
