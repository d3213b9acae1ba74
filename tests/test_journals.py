"""Tests for journey.store.journals — whole-file journal persistence."""

import json

import pytest

from journey.core.types import Journal
from journey.store.journals import JournalStore


class TestLoadSave:
    def test_missing_file_loads_empty(self, journals):
        assert not journals.path.exists()
        assert journals.load() == []

    def test_save_then_load_roundtrip(self, journals, make_journal):
        items = [
            make_journal(0, title="A", location="Seattle, WA", content="one"),
            make_journal(1, images=["f1.jpg", "https://example.com/x.png"]),
            make_journal(2),
        ]
        journals.save(items)
        assert journals.load() == items

    def test_order_preserved(self, journals, make_journal):
        items = [make_journal(i, title=str(i)) for i in (2, 0, 1)]
        journals.save(items)
        assert [j.title for j in journals.load()] == ["2", "0", "1"]

    def test_corrupt_file_loads_empty(self, journals):
        journals.path.write_text("{not json", encoding="utf-8")
        assert journals.load() == []

    def test_non_array_loads_empty(self, journals):
        journals.path.write_text('{"id": "a"}', encoding="utf-8")
        assert journals.load() == []

    def test_bad_record_loads_empty(self, journals):
        journals.path.write_text('[{"title": "no id"}]', encoding="utf-8")
        assert journals.load() == []

    def test_wire_format(self, journals, make_journal):
        journals.save([make_journal(title="T")])
        raw = json.loads(journals.path.read_text(encoding="utf-8"))
        assert isinstance(raw, list)
        assert raw[0]["title"] == "T"
        assert raw[0]["createdAt"].endswith("Z")

    def test_reads_reference_date_numbers(self, journals):
        journals.path.write_text(
            json.dumps(
                [{"id": "legacy-1", "createdAt": 784111777.0, "updatedAt": 784111777.0, "title": "Old"}]
            ),
            encoding="utf-8",
        )
        loaded = journals.load()
        assert len(loaded) == 1
        assert loaded[0].created_at.year == 2025

    @pytest.mark.parametrize("stamp", ["1e20", "Infinity", "-Infinity", "NaN"])
    def test_out_of_range_timestamp_loads_empty(self, journals, stamp):
        journals.path.write_text(
            '[{"id": "a", "createdAt": ' + stamp + ', "updatedAt": 0}]', encoding="utf-8"
        )
        assert journals.load() == []

    def test_deeply_nested_file_loads_empty(self, journals):
        journals.path.write_text("[" * 100000 + "]" * 100000, encoding="utf-8")
        assert journals.load() == []

    def test_non_utf8_file_loads_empty(self, journals):
        journals.path.write_bytes(b"\xff\xfe\x00[]")
        assert journals.load() == []

    def test_save_failure_is_swallowed(self, tmp_path, make_journal):
        blocker = tmp_path / "blocker"
        blocker.write_text("file, not a directory")
        store = JournalStore.__new__(JournalStore)
        store.path = blocker / "journals.json"
        store.images = None
        store.lock_timeout = 1.0
        store.save([make_journal()])
        assert store.load() == []

    def test_no_temp_files_left(self, journals, make_journal):
        journals.save([make_journal()])
        leftovers = [p.name for p in journals.path.parent.iterdir() if p.name.endswith(".tmp")]
        assert leftovers == []


class TestUpsert:
    def test_new_id_appends(self, journals, make_journal):
        journals.save([make_journal(title="first")])
        journals.upsert(make_journal(title="second"))
        loaded = journals.load()
        assert len(loaded) == 2
        assert loaded[-1].title == "second"

    def test_existing_id_replaces(self, journals, make_journal):
        original = make_journal(title="draft")
        journals.save([original, make_journal(title="other")])
        edited = Journal(
            id=original.id,
            title="final",
            created_at=original.created_at,
            updated_at=original.updated_at,
        )
        stored = journals.upsert(edited)
        loaded = journals.load()
        assert len(loaded) == 2
        match = [j for j in loaded if j.id == original.id]
        assert len(match) == 1
        assert match[0].title == "final"
        assert match[0].updated_at > original.updated_at
        assert stored == match[0]

    def test_upsert_into_empty(self, journals, make_journal):
        j = make_journal(title="only")
        assert journals.upsert(j) == j
        assert journals.load() == [j]

    def test_lock_released(self, journals, make_journal):
        journals.upsert(make_journal())
        assert not (journals.path.parent / "journals.json.lock").exists()

    def test_get(self, journals, make_journal):
        j = make_journal(title="find me")
        journals.upsert(j)
        assert journals.get(j.id) == j
        assert journals.get("missing") is None


class TestDelete:
    def test_removes_entry_and_images(self, journals, images, make_journal):
        f1 = images.save(b"photo")
        keep_file = images.save(b"other")
        doomed = make_journal(title="gone", images=[f1])
        kept = make_journal(title="kept", images=[keep_file])
        journals.save([doomed, kept])

        assert journals.delete_by_id(doomed.id) is True

        loaded = journals.load()
        assert [j.id for j in loaded] == [kept.id]
        assert not images.exists(f1)
        assert images.exists(keep_file)

    def test_delete_named_file(self, journals, images, make_journal):
        (images.images_dir / "f1.jpg").write_bytes(b"x")
        entry = make_journal(images=["f1.jpg"])
        journals.save([entry])
        journals.delete_by_id(entry.id)
        assert not (images.images_dir / "f1.jpg").exists()
        assert entry.id not in {j.id for j in journals.load()}

    def test_missing_id_is_noop(self, journals, make_journal):
        items = [make_journal(title="a"), make_journal(title="b")]
        journals.save(items)
        assert journals.delete_by_id("nope") is False
        assert journals.load() == items

    def test_remote_images_skipped(self, journals, images, make_journal):
        entry = make_journal(images=["https://i.imgur.com/IdorGF4.png"])
        journals.save([entry])
        assert journals.delete_by_id(entry.id) is True
        assert journals.load() == []

    def test_missing_image_file_tolerated(self, journals, make_journal):
        entry = make_journal(images=["already-gone.jpg"])
        journals.save([entry])
        assert journals.delete_by_id(entry.id) is True
        assert journals.load() == []
