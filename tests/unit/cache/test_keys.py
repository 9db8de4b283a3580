"""Tests for cache key generation."""

from keycache.cache.keys import CacheKeys


class TestCacheKeys:
    """Test cache key generation."""

    def test_entity_is_lowercased(self) -> None:
        """Entity name is lowercased in the prefix."""
        assert CacheKeys.with_prefix("Entry", "id1") == "entry:id1"

    def test_raw_key_is_unchanged(self) -> None:
        """Raw key keeps its case and separators."""
        assert CacheKeys.with_prefix("BlogPost", "My:Slug") == "blogpost:My:Slug"

    def test_empty_key(self) -> None:
        """Empty raw key still gets the prefix."""
        assert CacheKeys.with_prefix("Entry", "") == "entry:"

