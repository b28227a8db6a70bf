"""
test_catalog_repository.py — Unit tests for CatalogRepository.

Tests cover:
  - load(): seeding an absent store, reading an existing one, corrupt stores
  - save(): explicit persistence only, camelCase store format
  - add / add_many / update / delete semantics (ids, timestamps, ordering)
  - search, facilities, facility subsets
"""

import json
import os

import pytest

from app.data.default_catalog import DEFAULT_CATALOG
from app.models.catalog_schema import CatalogItemInput
from app.services.catalog_repository import CatalogRepository
from app.services.errors import CatalogItemNotFound


def _input(name="Ridge sheet", rate=375.10, source="Canopy"):
    return CatalogItemInput(name=name, unit="m", rate=rate, scope_of_work="Ridge pieces", source=source)


# ===========================================================================
# Class 1: Load / save lifecycle
# ===========================================================================

class TestLifecycle:

    def test_absent_store_is_seeded_and_saved(self, tmp_path):
        repo = CatalogRepository(str(tmp_path), "store", seed=DEFAULT_CATALOG).load()
        assert len(repo) == len(DEFAULT_CATALOG) == 51
        assert os.path.exists(repo.path)
        assert len({i.id for i in repo}) == 51

    def test_absent_store_without_seed_is_empty(self, tmp_path):
        repo = CatalogRepository(str(tmp_path), "store").load()
        assert len(repo) == 0
        assert not os.path.exists(repo.path)

    def test_existing_store_is_not_reseeded(self, repo, tmp_path):
        reloaded = CatalogRepository(str(tmp_path), "test_store", seed=DEFAULT_CATALOG).load()
        assert [i.id for i in reloaded] == [i.id for i in repo]

    def test_store_uses_camel_case_fields(self, repo):
        with open(repo.path, encoding="utf-8") as fh:
            raw = json.load(fh)
        assert isinstance(raw, list)
        assert set(raw[0]) == {"id", "name", "unit", "rate", "scopeOfWork", "source", "timestamp"}

    def test_unicode_units_survive_round_trip(self, repo, tmp_path):
        reloaded = CatalogRepository(str(tmp_path), "test_store").load()
        assert reloaded.get("sheet").unit == "m²"

    def test_corrupt_store_loads_empty(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("{not json", encoding="utf-8")
        repo = CatalogRepository(str(tmp_path), "store", seed=DEFAULT_CATALOG).load()
        assert len(repo) == 0

    def test_non_array_store_loads_empty(self, tmp_path):
        (tmp_path / "store.json").write_text('{"items": []}', encoding="utf-8")
        assert len(CatalogRepository(str(tmp_path), "store").load()) == 0

    def test_mutations_are_not_persisted_until_save(self, repo, tmp_path):
        repo.delete("tmt")
        assert len(CatalogRepository(str(tmp_path), "test_store").load()) == 5

        repo.save()
        assert len(CatalogRepository(str(tmp_path), "test_store").load()) == 4

    def test_load_without_seeding_leaves_absent_store_alone(self, tmp_path):
        repo = CatalogRepository(str(tmp_path), "store", seed=DEFAULT_CATALOG).load(seed=False)
        assert len(repo) == 0
        assert not os.path.exists(repo.path)

    def test_name_whitespace_survives_round_trip(self, tmp_path):
        repo = CatalogRepository(str(tmp_path), "store").load()
        repo.add(_input(name="  Ridge sheet "))
        repo.save()
        reloaded = CatalogRepository(str(tmp_path), "store").load()
        assert reloaded.items()[0].name == "  Ridge sheet "

    def test_store_with_infinite_rate_loads_empty(self, tmp_path):
        (tmp_path / "store.json").write_text('[{"name": "A", "rate": Infinity}]', encoding="utf-8")
        assert len(CatalogRepository(str(tmp_path), "store").load()) == 0

    def test_save_creates_missing_directory(self, tmp_path):
        repo = CatalogRepository(str(tmp_path / "nested" / "dir"), "store").load()
        repo.add(_input())
        repo.save()
        assert os.path.exists(repo.path)


# ===========================================================================
# Class 2: Mutations
# ===========================================================================

class TestMutations:

    def test_add_assigns_id_and_timestamp_and_prepends(self, repo):
        created = repo.add(_input())
        assert created.id
        assert created.timestamp > 0
        assert repo.items()[0].id == created.id

    def test_add_many_keeps_given_order_at_front(self, repo):
        created = repo.add_many([_input("A"), _input("B")])
        assert [i.name for i in repo.items()[:2]] == ["A", "B"]
        assert len({c.id for c in created}) == 2

    def test_update_keeps_id_and_timestamp(self, repo):
        before = repo.get("paint")
        updated = repo.update("paint", _input(name="Enamel paint", rate=170.0))
        assert updated.id == "paint"
        assert updated.timestamp == before.timestamp
        assert repo.get("paint").rate == 170.0
        assert [i.id for i in repo.items()].index("paint") == 2

    def test_update_unknown_raises(self, repo):
        with pytest.raises(CatalogItemNotFound):
            repo.update("nope", _input())

    def test_delete_removes_item(self, repo):
        removed = repo.delete("yard")
        assert removed.name == "LED Yard light 100 W"
        assert repo.find("yard") is None
        assert len(repo) == 4

    def test_delete_unknown_raises(self, repo):
        with pytest.raises(CatalogItemNotFound):
            repo.delete("nope")

    def test_items_returns_a_copy(self, repo):
        items = repo.items()
        items.clear()
        assert len(repo) == 5


# ===========================================================================
# Class 3: Queries
# ===========================================================================

class TestQueries:

    def test_search_by_name_case_insensitive(self, repo):
        assert [i.id for i in repo.search("ROOFING")] == ["sheet"]

    def test_search_by_source(self, repo):
        assert {i.id for i in repo.search("culvert")} == {"tmt", "gsb"}

    def test_empty_search_returns_everything(self, repo):
        assert len(repo.search("")) == 5

    def test_facilities_in_catalog_order(self, repo):
        assert repo.facilities() == ["Culvert & Approach", "Canopy", "Electrification"]

    def test_for_facilities_filters_by_source(self, repo):
        assert {i.id for i in repo.for_facilities(["Canopy"])} == {"sheet", "paint"}

    def test_for_no_facilities_is_whole_catalog(self, repo):
        assert len(repo.for_facilities([])) == 5


def test_seeded_catalog_facilities(tmp_path):
    repo = CatalogRepository(str(tmp_path), "store", seed=DEFAULT_CATALOG).load()
    assert repo.facilities() == [
        "Driveway Works", "Culvert & Approach", "Canopy", "Hoarding Board", "Kerb Wall",
        "Miscellaneous", "Non-Civil", "Electrification", "Air Facility",
    ]
