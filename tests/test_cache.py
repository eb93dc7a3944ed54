"""Tests for the local location cache."""

import json

from jotam.cache import LocalLocationCache
from jotam.config import LOCATION_CACHE_KEY, SCOPE_CACHE_KEY
from jotam.models import ResolvedLocation, Scope


class TestLocalLocationCache:
    """Durable key-value cache behaviour."""

    def test_round_trip(self, cache, sao_paulo):
        """A saved location loads back equal."""
        assert cache.save_location(sao_paulo).ok
        assert cache.save_scope(Scope.CONDO).ok

        assert cache.load_location() == sao_paulo
        assert cache.load_scope() == Scope.CONDO

    def test_round_trip_preserves_float_precision(self, cache):
        location = ResolvedLocation(
            condo="Rua 1", neighborhood="Centro", city="Natal",
            latitude=-5.794478123456789, longitude=-35.21095012345678,
        )
        cache.save_location(location)

        assert LocalLocationCache(cache.path).load_location() == location

    def test_missing_file(self, cache):
        assert cache.load_location() is None
        assert cache.load_scope() == Scope.NEIGHBORHOOD

    def test_corrupt_file(self, cache):
        cache.path.write_text("{not json", encoding="utf-8")

        assert cache.load_location() is None
        assert cache.load_scope() == Scope.NEIGHBORHOOD

    def test_invalid_values(self, cache):
        cache.path.write_text(
            json.dumps({LOCATION_CACHE_KEY: '{"city": "X"}', SCOPE_CACHE_KEY: "planet"}),
            encoding="utf-8",
        )

        assert cache.load_location() is None
        assert cache.load_scope() == Scope.NEIGHBORHOOD

    def test_keys_are_independent(self, cache, sao_paulo):
        cache.save_scope(Scope.CITY)
        cache.save_location(sao_paulo)

        data = json.loads(cache.path.read_text(encoding="utf-8"))
        assert set(data) == {LOCATION_CACHE_KEY, SCOPE_CACHE_KEY}
        assert data[SCOPE_CACHE_KEY] == "city"

    def test_write_failure_returns_result(self, tmp_path, sao_paulo):
        """Storage errors are reported, not raised."""
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        cache = LocalLocationCache(blocker / "location.json")

        result = cache.save_location(sao_paulo)

        assert result.ok is False
        assert result.error is not None
        assert result.error.user_visible is False

    def test_invalid_utf8_file(self, cache, sao_paulo):
        """Undecodable bytes read as an empty cache and get overwritten."""
        cache.path.write_bytes(b"\xff\xfe\x00garbage")

        assert cache.load_location() is None
        assert cache.load_scope() == Scope.NEIGHBORHOOD

        assert cache.save_location(sao_paulo).ok
        assert cache.load_location() == sao_paulo
