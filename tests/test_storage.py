"""
Unit tests for the key-value stores, result store and settings provider.
"""
import json

import pytest

from phish_agent.analyzer.errors import ConfigurationError, StorageError
from phish_agent.analyzer.models import AnalysisResult, StoredAnalysis
from phish_agent.config.models import DEFAULT_ENDPOINT, DEFAULT_MODEL, DEFAULT_THRESHOLD, Settings
from phish_agent.config.settings import SettingsProvider, clamp_threshold
from phish_agent.storage.kv import JSONFileStore, MemoryStore
from phish_agent.storage.results import ResultStore


def make_record(timestamp, subject="s"):
    return StoredAnalysis(
        result=AnalysisResult(True, 80, ("x",), "Careful."),
        timestamp=timestamp,
        email_summary={"from": "a@b.c", "subject": subject},
        settings_snapshot={"model": "m", "threshold": 70},
    )


class TestResultStore:
    """Tests for result persistence and retention."""

    def test_wire_format(self, kv, result_store):
        """Records are stored under analysis_ keys in camelCase."""
        result_store.put("analysis_abc", make_record(1000))

        assert kv.get_all()["analysis_abc"] == {
            "isPhishing": True,
            "confidence": 80,
            "indicators": ["x"],
            "recommendation": "Careful.",
            "timestamp": 1000,
            "emailData": {"from": "a@b.c", "subject": "s"},
            "settings": {"model": "m", "threshold": 70},
        }

    def test_put_adds_prefix(self, kv, result_store):
        """Bare keys are namespaced."""
        result_store.put("abc", make_record(1))

        assert "analysis_abc" in kv.get_all()

    def test_make_key(self, kv):
        """Email id when present, clock otherwise."""
        store = ResultStore(kv, clock=lambda: 42)

        assert store.make_key("m-1") == "analysis_m-1"
        assert store.make_key(None) == "analysis_42"

    def test_latest_empty(self, result_store):
        """No records, no latest."""
        assert result_store.latest() is None

    def test_latest_uses_timestamp(self, result_store):
        """Opaque ids do not decide recency; timestamps do."""
        result_store.put("analysis_zzz", make_record(100, subject="old"))
        result_store.put("analysis_aaa", make_record(200, subject="new"))

        assert result_store.latest().email_summary["subject"] == "new"

    def test_latest_ties_broken_by_key(self, result_store):
        """Equal timestamps fall back to key order."""
        result_store.put("analysis_1", make_record(0, subject="one"))
        result_store.put("analysis_2", make_record(0, subject="two"))

        assert result_store.latest().email_summary["subject"] == "two"

    def test_settings_keys_ignored(self, kv, result_store):
        """Only analysis_ keys are records."""
        kv.set({"or_api_key": "sk-or-x", "user_threshold": 50})

        assert result_store.latest() is None
        assert result_store.evict_excess(0) == []
        assert kv.get_all()["or_api_key"] == "sk-or-x"

    def test_evict_keeps_ten_most_recent(self, kv, result_store):
        """15 records pruned to the 10 with greatest keys and timestamps."""
        for i in range(15):
            result_store.put(f"analysis_{1000 + i}", make_record(1000 + i))

        removed = result_store.evict_excess(10)

        remaining = sorted(k for k in kv.get_all() if k.startswith("analysis_"))
        assert len(remaining) == 10
        assert remaining == [f"analysis_{1000 + i}" for i in range(5, 15)]
        assert sorted(removed) == [f"analysis_{1000 + i}" for i in range(5)]

    def test_evict_under_limit_is_noop(self, result_store):
        """Nothing removed when under the limit."""
        for i in range(3):
            result_store.put(f"analysis_{i}", make_record(i))

        assert result_store.evict_excess(10) == []
        assert len(result_store.items()) == 3

    def test_items_newest_first(self, result_store):
        """Items come back most recent first."""
        for ts in (5, 50, 20):
            result_store.put(f"analysis_{ts}", make_record(ts))

        assert [key for key, _ in result_store.items()] == ["analysis_50", "analysis_20", "analysis_5"]


class TestJSONFileStore:
    """Tests for the on-disk store."""

    def test_missing_file_is_empty(self, tmp_path):
        """A fresh path reads as empty."""
        assert JSONFileStore(str(tmp_path / "store.json")).get_all() == {}

    def test_set_get_remove(self, tmp_path):
        """Values persist across instances."""
        path = tmp_path / "nested" / "store.json"
        JSONFileStore(str(path)).set({"a": 1, "b": {"c": [1, 2]}})

        store = JSONFileStore(str(path))
        assert store.get(["a", "missing"]) == {"a": 1}
        store.remove(["a"])

        assert json.loads(path.read_text()) == {"b": {"c": [1, 2]}}
        assert store.keys() == ["b"]

    def test_corrupt_file_raises(self, tmp_path):
        """A corrupt store is fatal."""
        path = tmp_path / "store.json"
        path.write_text("{not json")

        with pytest.raises(StorageError):
            JSONFileStore(str(path)).get_all()

    def test_non_object_raises(self, tmp_path):
        """The document must be an object."""
        path = tmp_path / "store.json"
        path.write_text("[1, 2]")

        with pytest.raises(StorageError):
            JSONFileStore(str(path)).get_all()

    def test_memory_store_prefix_keys(self):
        """Prefix scan over keys."""
        store = MemoryStore({"analysis_1": {}, "or_model": "m"})

        assert store.keys("analysis_") == ["analysis_1"]


class TestSettingsProvider:
    """Tests for settings resolution and validation."""

    def test_defaults(self, settings_provider):
        """Empty storage resolves to defaults and no key."""
        assert settings_provider.resolve() == Settings(
            api_key=None,
            endpoint=DEFAULT_ENDPOINT,
            model=DEFAULT_MODEL,
            threshold=DEFAULT_THRESHOLD,
        )

    def test_save_and_resolve(self, kv, settings_provider):
        """Saved settings round-trip under the documented keys."""
        settings_provider.save("  sk-or-abc  ", "https://x.example/v1", "my/model", "55")

        assert kv.get_all() == {
            "or_api_key": "sk-or-abc",
            "or_endpoint": "https://x.example/v1",
            "or_model": "my/model",
            "user_threshold": 55,
        }
        assert settings_provider.resolve().threshold == 55

    def test_blank_values_use_defaults(self, settings_provider):
        """Blank endpoint and model fall back to defaults."""
        saved = settings_provider.save("sk-or-abc", "", "  ", 70)

        assert saved.endpoint == DEFAULT_ENDPOINT
        assert saved.model == DEFAULT_MODEL

    @pytest.mark.parametrize("api_key", ["", "   ", "sk-abc", "or-sk-123"])
    def test_invalid_key_rejected(self, kv, settings_provider, api_key):
        """Empty or wrongly prefixed keys are not stored."""
        with pytest.raises(ConfigurationError):
            settings_provider.save(api_key)

        assert kv.get_all() == {}

    def test_stored_key_trusted_on_read(self, kv, settings_provider):
        """Format is checked at write time only."""
        kv.set({"or_api_key": "legacy-key"})

        assert settings_provider.resolve().api_key == "legacy-key"

    def test_clear_key_keeps_results(self, kv, settings_provider, result_store):
        """Clearing the credential leaves stored analyses."""
        settings_provider.save("sk-or-abc")
        result_store.put("analysis_1", make_record(1))

        settings_provider.clear_api_key()

        assert settings_provider.resolve().has_api_key is False
        assert result_store.latest() is not None
        assert kv.get_all()["or_model"] == DEFAULT_MODEL

    @pytest.mark.parametrize("value,expected", [
        (70, 70), ("42", 42), (0, 70), (-5, 1), (150, 100), ("abc", 70), (None, 70),
    ])
    def test_clamp_threshold(self, value, expected):
        """Thresholds are integers in 1-100, default 70."""
        assert clamp_threshold(value) == expected


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
