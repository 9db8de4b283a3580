"""Tests for settings loading."""

from keycache.config import Settings


class TestSettings:
    """Test environment-driven configuration."""

    def test_defaults(self, monkeypatch) -> None:
        monkeypatch.delenv("KEYCACHE_ENABLE_CACHE", raising=False)
        config = Settings(_env_file=None)

        assert config.enable_cache is False
        assert config.primary_key == "_id"
        assert config.additional_cache_keys == []
        assert config.heal_malformed is False

    def test_env_overrides(self, monkeypatch) -> None:
        monkeypatch.setenv("KEYCACHE_ENABLE_CACHE", "true")
        monkeypatch.setenv("KEYCACHE_ADDITIONAL_CACHE_KEYS", '["slug", "isbn"]')
        monkeypatch.setenv("REDIS_URL", "redis://cache:6379/1")

        config = Settings(_env_file=None)

        assert config.enable_cache is True
        assert config.additional_cache_keys == ["slug", "isbn"]
        assert config.redis_url == "redis://cache:6379/1"
