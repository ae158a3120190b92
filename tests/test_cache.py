"""Tests for the in-memory TTL result cache."""
import threading

from pharmaprice.schemas.search import ResultRecord
from pharmaprice.utils.cache import ResultCache


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def _record(name="Dolo 650"):
    return ResultRecord(
        source_id="testpharma",
        pharmacy_name="Test Pharma",
        drug_name=name,
        price="31",
        image_url="https://placehold.co/150x150.png?text=Dol",
    )


class TestResultCache:
    def test_miss_returns_none(self):
        assert ResultCache().get("testpharma", "dolo") is None

    def test_put_then_get(self):
        cache = ResultCache()
        cache.put("testpharma", "dolo", [_record()])
        assert cache.get("testpharma", "dolo") == [_record()]

    def test_empty_results_are_a_hit(self):
        cache = ResultCache()
        cache.put("testpharma", "dolo", [])
        assert cache.get("testpharma", "dolo") == []

    def test_query_is_case_folded(self):
        cache = ResultCache()
        cache.put("testpharma", "Paracetamol", [_record()])
        assert cache.get("testpharma", "paracetamol") is not None
        assert cache.get("testpharma", "  PARACETAMOL ") is not None

    def test_keyed_by_source(self):
        cache = ResultCache()
        cache.put("testpharma", "dolo", [_record()])
        assert cache.get("otherpharma", "dolo") is None

    def test_expires_at_ttl(self):
        clock = FakeClock()
        cache = ResultCache(ttl_seconds=10800, clock=clock)
        cache.put("testpharma", "dolo", [_record()])
        clock.advance(10799)
        assert cache.get("testpharma", "dolo") is not None
        clock.advance(1)
        assert cache.get("testpharma", "dolo") is None
        assert len(cache) == 0

    def test_overwrite_refreshes_timestamp(self):
        clock = FakeClock()
        cache = ResultCache(ttl_seconds=100, clock=clock)
        cache.put("testpharma", "dolo", [])
        clock.advance(90)
        cache.put("testpharma", "dolo", [_record()])
        clock.advance(50)
        assert cache.get("testpharma", "dolo") == [_record()]

    def test_returned_list_is_a_copy(self):
        cache = ResultCache()
        cache.put("testpharma", "dolo", [_record()])
        cache.get("testpharma", "dolo").clear()
        assert len(cache.get("testpharma", "dolo")) == 1

    def test_clear(self):
        cache = ResultCache()
        cache.put("testpharma", "dolo", [])
        cache.clear()
        assert len(cache) == 0

    def test_concurrent_writers(self):
        cache = ResultCache()

        def writer(source):
            for i in range(200):
                cache.put(source, f"q{i}", [])
                cache.get(source, f"q{i}")

        threads = [threading.Thread(target=writer, args=(f"s{n}",)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(cache) == 800
