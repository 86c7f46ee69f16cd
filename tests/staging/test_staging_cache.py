from __future__ import annotations

import json

import pytest

from registros_system.core.enums import ActiveStatus
from registros_system.core.exceptions import ValidationError
from registros_system.records.model import Record
from registros_system.staging.cache import StagingCache
from registros_system.staging.identifiers import AuthoritativeId, TemporaryId
from registros_system.staging.slot import JsonFileSlot


class BrokenSlot:
    def read(self):
        return None

    def write(self, items):
        raise OSError("disk full")

    def clear(self):
        pass


@pytest.mark.parametrize("field", ["project", "national_id", "full_name"])
def test_add_one_rejects_missing_required_field(make_draft, field):
    cache = StagingCache()
    cache.add_one(make_draft())

    with pytest.raises(ValidationError):
        cache.add_one(make_draft(**{field: ""}))

    assert len(cache) == 1


def test_add_one_assigns_temporary_id_and_appends(make_draft):
    cache = StagingCache()

    first = cache.add_one(make_draft(full_name="A"))
    second = cache.add_one(make_draft(full_name="B"))

    assert isinstance(first.identifier, TemporaryId)
    assert first.identifier != second.identifier
    assert [r.draft.full_name for r in cache] == ["A", "B"]


def test_add_many_keeps_valid_subset_in_order(make_draft):
    cache = StagingCache()
    drafts = [
        make_draft(full_name="A"),
        make_draft(full_name=""),
        make_draft(full_name="C"),
        make_draft(project=""),
        make_draft(full_name="E"),
    ]

    result = cache.add_many(drafts)

    assert [r.draft.full_name for r in cache] == ["A", "C", "E"]
    assert [index for index, _ in result.rejected] == [1, 3]
    assert len(result.added) == 3


def test_duplicate_temporary_tokens_are_regenerated(make_draft):
    tokens = iter(["aaaaaaaaa", "aaaaaaaaa", "bbbbbbbbb"])
    cache = StagingCache(id_factory=lambda: TemporaryId(next(tokens)))

    cache.add_many([make_draft(), make_draft()])

    assert [r.identifier.text for r in cache] == ["aaaaaaaaa", "bbbbbbbbb"]


def test_duplicate_national_ids_are_allowed(make_draft):
    cache = StagingCache()

    cache.add_many([make_draft(national_id="1"), make_draft(national_id="1")])

    assert len(cache) == 2


def test_remove_and_clear(make_draft):
    cache = StagingCache()
    cache.replace_all([Record(record_id=5, project="P", national_id="1", full_name="N")])
    staged = cache.add_one(make_draft())

    assert cache.remove(AuthoritativeId(5)) is True
    assert cache.remove(AuthoritativeId(5)) is False
    assert cache.records == [staged]

    cache.clear()
    assert len(cache) == 0


def test_staged_lists_only_temporary_records(make_draft):
    cache = StagingCache()
    cache.replace_all([Record(record_id=1, project="P", national_id="1", full_name="N")])
    staged = cache.add_one(make_draft())

    assert cache.staged() == [staged]


def test_slot_mirrors_every_mutation(tmp_path, make_draft):
    path = tmp_path / "cache.json"
    cache = StagingCache(JsonFileSlot(path))

    cache.add_one(make_draft(full_name="A", status=ActiveStatus.INACTIVE))
    cache.replace_all(cache.records)
    cache.add_one(make_draft(full_name="B"))

    saved = json.loads(path.read_text(encoding="utf-8"))["registros.staging"]
    assert [item["nombre"] for item in saved] == ["A", "B"]
    assert saved[0]["status"] == "NO"

    restored = StagingCache(JsonFileSlot(path))
    assert restored.restore() is True
    assert restored.records == cache.records


def test_clear_removes_slot(tmp_path, make_draft):
    path = tmp_path / "cache.json"
    cache = StagingCache(JsonFileSlot(path))
    cache.add_one(make_draft())

    cache.clear()

    assert not path.exists()
    assert StagingCache(JsonFileSlot(path)).restore() is False


def test_failed_slot_write_leaves_cache_unchanged(make_draft):
    cache = StagingCache(BrokenSlot())

    with pytest.raises(OSError):
        cache.add_one(make_draft())

    assert len(cache) == 0


def test_restore_without_slot_is_noop():
    assert StagingCache().restore() is False
