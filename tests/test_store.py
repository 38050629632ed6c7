"""Tests for the in-memory and JSON-file diagnosis stores."""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from kostolany.data.store import InMemoryDiagnosisStore, JsonFileDiagnosisStore
from kostolany.exceptions import StorageError
from kostolany.features.coaching import generate
from kostolany.features.portfolio import analyze, snapshot
from kostolany.models.diagnosis import DiagnosisAnswers, DiagnosisHistory, DiagnosisResult
from kostolany.models.phase import InterestRateTrend
from kostolany.models.portfolio import Holding
from kostolany.phases.classifier import classify

_T0 = datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)


def _make_result(offset: int = 0, trend: InterestRateTrend = InterestRateTrend.PEAK) -> DiagnosisResult:
    created_at = _T0 + timedelta(minutes=offset)
    holdings = [Holding(name="Bitcoin", ticker="BTC", current_value=600.0), Holding(name="Cash", current_value=400.0)]
    classification = classify(trend)
    analysis = analyze(holdings)
    return DiagnosisResult(
        answers=DiagnosisAnswers(interest_rate_trend=trend, timestamp=created_at),
        classification=classification,
        coaching_message=generate(classification, analysis),
        market_drivers=[],
        portfolio_snapshot=snapshot(holdings),
        portfolio_analysis=analysis,
        created_at=created_at,
    )


def _history(*results: DiagnosisResult) -> DiagnosisHistory:
    """Newest first, as the service stores it."""
    ordered = sorted(results, key=lambda r: r.created_at, reverse=True)
    return DiagnosisHistory(
        latest=ordered[0] if ordered else None,
        entries=ordered,
        last_updated=ordered[0].created_at if ordered else None,
    )


@pytest.fixture(params=["memory", "json"])
def any_store(request, tmp_path):
    if request.param == "memory":
        return InMemoryDiagnosisStore()
    return JsonFileDiagnosisStore("user-1", storage_dir=tmp_path)


class TestCommonBehavior:
    def test_empty_store(self, any_store):
        history = asyncio.run(any_store.load())
        assert history.latest is None
        assert history.entries == []
        assert asyncio.run(any_store.load_latest()) is None
        assert asyncio.run(any_store.load_history()) == []

    def test_save_then_load(self, any_store):
        results = [_make_result(i) for i in range(3)]
        asyncio.run(any_store.save(_history(*results)))

        assert asyncio.run(any_store.load_latest()) == results[-1]
        assert asyncio.run(any_store.load_history()) == list(reversed(results))

    def test_find_by_timestamp(self, any_store):
        results = [_make_result(i) for i in range(3)]
        asyncio.run(any_store.save(_history(*results)))

        assert asyncio.run(any_store.find_by_timestamp(results[1].created_at)) == results[1]
        assert asyncio.run(any_store.find_by_timestamp(_T0 - timedelta(days=1))) is None

    def test_delete_middle_keeps_latest(self, any_store):
        results = [_make_result(i) for i in range(3)]
        asyncio.run(any_store.save(_history(*results)))

        asyncio.run(any_store.delete_by_timestamp(results[1].created_at))

        assert asyncio.run(any_store.load_latest()) == results[2]
        assert asyncio.run(any_store.load_history()) == [results[2], results[0]]

    def test_delete_stamps_given_time(self, any_store):
        results = [_make_result(i) for i in range(2)]
        asyncio.run(any_store.save(_history(*results)))
        stamp = _T0 + timedelta(hours=5)

        asyncio.run(any_store.delete_by_timestamp(results[0].created_at, updated_at=stamp))

        assert asyncio.run(any_store.stats()).last_updated == stamp

    def test_delete_only_entry_clears_latest(self, any_store):
        result = _make_result()
        asyncio.run(any_store.save(_history(result)))

        asyncio.run(any_store.delete_by_timestamp(result.created_at))

        stats = asyncio.run(any_store.stats())
        assert stats.has_latest is False
        assert stats.history_count == 0
        assert stats.last_updated is not None

    def test_stats(self, any_store):
        results = [_make_result(i) for i in range(4)]
        asyncio.run(any_store.save(_history(*results)))

        stats = asyncio.run(any_store.stats())
        assert stats.has_latest is True
        assert stats.history_count == 4
        assert stats.last_updated == results[-1].created_at

    def test_clear_all(self, any_store):
        asyncio.run(any_store.save(_history(_make_result())))
        asyncio.run(any_store.clear_all())
        assert asyncio.run(any_store.load()) == DiagnosisHistory()

    def test_clear_all_on_empty_store(self, any_store):
        asyncio.run(any_store.clear_all())
        assert asyncio.run(any_store.load_latest()) is None


class TestInMemoryStore:
    def test_loaded_copy_is_isolated(self):
        store = InMemoryDiagnosisStore()
        asyncio.run(store.save(_history(_make_result())))

        loaded = asyncio.run(store.load())
        loaded.entries.clear()

        assert len(asyncio.run(store.load_history())) == 1

    def test_saved_copy_is_isolated(self):
        store = InMemoryDiagnosisStore()
        history = _history(_make_result())
        asyncio.run(store.save(history))

        history.entries.append(_make_result(5))

        assert len(asyncio.run(store.load_history())) == 1


class TestJsonFileStore:
    def test_survives_new_instance(self, tmp_path):
        results = [_make_result(i, trend) for i, trend in enumerate(
            [InterestRateTrend.PEAK, InterestRateTrend.RISING, InterestRateTrend.BOTTOM]
        )]
        asyncio.run(JsonFileDiagnosisStore("alice", storage_dir=tmp_path).save(_history(*results)))

        reopened = JsonFileDiagnosisStore("alice", storage_dir=tmp_path)
        history = asyncio.run(reopened.load())
        assert history == _history(*results)
        assert history.latest.created_at.tzinfo is not None

    def test_users_use_separate_files(self, tmp_path):
        alice = JsonFileDiagnosisStore("alice", storage_dir=tmp_path)
        bob = JsonFileDiagnosisStore("bob", storage_dir=tmp_path)
        asyncio.run(alice.save(_history(_make_result())))

        assert alice.path != bob.path
        assert asyncio.run(bob.load_latest()) is None

    def test_user_key_is_sanitized(self, tmp_path):
        store = JsonFileDiagnosisStore("../evil/user@example.com", storage_dir=tmp_path)
        assert store.path.parent == tmp_path
        assert store.path.name == ".._evil_user_example.com.json"

    def test_creates_storage_dir(self, tmp_path):
        store = JsonFileDiagnosisStore("alice", storage_dir=tmp_path / "nested" / "dir")
        asyncio.run(store.save(_history(_make_result())))
        assert store.path.exists()

    def test_no_temp_files_left(self, tmp_path):
        store = JsonFileDiagnosisStore("alice", storage_dir=tmp_path)
        asyncio.run(store.save(_history(_make_result())))
        assert [p.name for p in tmp_path.iterdir()] == ["alice.json"]

    def test_corrupt_file_raises_storage_error(self, tmp_path):
        store = JsonFileDiagnosisStore("alice", storage_dir=tmp_path)
        store.path.write_text("{not json", encoding="utf-8")

        with pytest.raises(StorageError) as exc_info:
            asyncio.run(store.load())
        assert exc_info.value.store == "json"
        assert str(exc_info.value).startswith("[json]")

    def test_clear_removes_file(self, tmp_path):
        store = JsonFileDiagnosisStore("alice", storage_dir=tmp_path)
        asyncio.run(store.save(_history(_make_result())))
        asyncio.run(store.clear_all())
        assert not store.path.exists()

    def test_default_dir_from_settings(self, tmp_path, monkeypatch):
        from kostolany.config import get_settings

        monkeypatch.setattr(get_settings().diagnosis, "storage_dir", str(tmp_path))
        assert JsonFileDiagnosisStore("alice").path == tmp_path / "alice.json"
