from schoolwatch.cache import FileTimetableCache, InMemoryTimetableCache
from schoolwatch.models import TimetableSnapshot
from tests.conftest import timetable_payload


def test_file_cache_starts_empty(tmp_path):
    cache = FileTimetableCache(state_dir=str(tmp_path / "state"))
    assert cache.load() is None
    assert (tmp_path / "state").is_dir()


def test_file_cache_round_trip(tmp_path, snapshot):
    cache = FileTimetableCache(state_dir=str(tmp_path))
    cache.save(snapshot)

    assert cache.cache_file == tmp_path / "cachedTimetable.json"
    assert FileTimetableCache(state_dir=str(tmp_path)).load() == snapshot


def test_file_cache_stores_wire_format(tmp_path, snapshot):
    cache = FileTimetableCache(state_dir=str(tmp_path))
    cache.save(snapshot)

    raw = cache.cache_file.read_text(encoding="utf-8")
    assert '"update_date"' in raw
    assert '"timetable"' in raw


def test_file_cache_overwrites_whole_slot(tmp_path, snapshot):
    cache = FileTimetableCache(state_dir=str(tmp_path))
    cache.save(snapshot)
    newer = TimetableSnapshot.model_validate(timetable_payload("2024-10-01 08:00:00"))
    cache.save(newer)

    assert cache.load() == newer
    assert [p.name for p in tmp_path.iterdir()] == ["cachedTimetable.json"]


def test_file_cache_ignores_corrupt_file(tmp_path):
    cache = FileTimetableCache(state_dir=str(tmp_path))
    cache.cache_file.write_text("{not json", encoding="utf-8")
    assert cache.load() is None


def test_file_cache_custom_key(tmp_path, snapshot):
    cache = FileTimetableCache(state_dir=str(tmp_path), key="grade1_class3")
    cache.save(snapshot)
    assert (tmp_path / "grade1_class3.json").exists()


def test_file_cache_clear(tmp_path, snapshot):
    cache = FileTimetableCache(state_dir=str(tmp_path))
    cache.save(snapshot)
    cache.clear()
    assert cache.load() is None
    cache.clear()


def test_memory_cache(snapshot):
    cache = InMemoryTimetableCache()
    assert cache.load() is None
    cache.save(snapshot)
    assert cache.load() is snapshot
    assert cache.save_count == 1
