"""Unit tests for distance, route-cache keys and the defaulting policy."""

import math

import pytest

from src.domain.cache_key import make_route_cache_key
from src.domain.coercion import first_present, is_real_number, to_number
from src.domain.distance import haversine_km


class TestHaversine:
    def test_same_point_is_zero(self):
        assert haversine_km(12.9352, 77.6245, 12.9352, 77.6245) == 0.0

    def test_one_degree_of_latitude(self):
        assert haversine_km(0.0, 0.0, 1.0, 0.0) == pytest.approx(111.195, abs=0.01)

    def test_known_distance(self):
        # Koramangala -> MG Road ~5 km (approx)
        d = haversine_km(12.9352, 77.6245, 12.9756, 77.6050)
        assert 4.0 < d < 6.0

    def test_symmetric(self):
        d1 = haversine_km(12.0, 77.0, 13.0, 78.0)
        d2 = haversine_km(13.0, 78.0, 12.0, 77.0)
        assert abs(d1 - d2) < 1e-9


class TestRouteCacheKey:
    def test_format(self):
        assert (
            make_route_cache_key(12.9716, 77.5946, -1.5, 0)
            == "12_9716_77_5946_m1_5000_0_0000"
        )

    def test_deterministic(self):
        args = (12.93521, 77.62449, 12.9279, 77.6271)
        assert make_route_cache_key(*args) == make_route_cache_key(*args)

    def test_numeric_strings_match_floats(self):
        assert make_route_cache_key("12.9716", "77.5946", "-1.5", "0") == (
            make_route_cache_key(12.9716, 77.5946, -1.5, 0)
        )

    def test_distinct_at_four_decimals(self):
        base = [12.9716, 77.5946, 12.9279, 77.6271]
        keys = {make_route_cache_key(*base)}
        for i in range(4):
            shifted = list(base)
            shifted[i] += 1e-4
            keys.add(make_route_cache_key(*shifted))
        assert len(keys) == 5

    def test_sign_distinguishes_keys(self):
        assert make_route_cache_key(1, 1, 1, 1) != make_route_cache_key(-1, 1, 1, 1)

    def test_ties_round_away_from_zero(self):
        assert make_route_cache_key(1.03125, 0, 0, 0) == "1_0313_0_0000_0_0000_0_0000"
        assert make_route_cache_key(-1.03125, 0, 0, 0) == "m1_0313_0_0000_0_0000_0_0000"

    def test_tiny_negative_keeps_sign(self):
        assert make_route_cache_key(-0.00001, 0, 0, 0).startswith("m0_0000_")

    def test_invalid_values_become_zero(self):
        assert make_route_cache_key(None, "abc", float("nan"), "") == (
            "0_0000_0_0000_0_0000_0_0000"
        )


class TestDefaultingPolicy:
    @pytest.mark.parametrize(
        "value", [None, "", "   ", "abc", float("nan"), "0", 0, -0.0, [], {}]
    )
    def test_collapses_to_zero(self, value):
        result = to_number(value)
        assert result == 0.0
        assert math.copysign(1.0, result) == 1.0

    def test_parses_numeric_strings(self):
        assert to_number("12.5") == 12.5
        assert to_number(" -77.25 ") == -77.25

    def test_keeps_numbers(self):
        assert to_number(3) == 3.0
        assert to_number(-0.5) == -0.5

    def test_oversized_integer_collapses_to_zero(self):
        assert to_number(10**400) == 0.0
        assert to_number(-(10**400)) == 0.0

    def test_booleans(self):
        assert to_number(True) == 1.0
        assert to_number(False) == 0.0

    def test_first_present_skips_none_only(self):
        assert first_present(None, 0, 5) == 0
        assert first_present(None, False) is False
        assert first_present(None, None) is None

    def test_is_real_number(self):
        assert is_real_number(1)
        assert is_real_number(1.5)
        assert not is_real_number(True)
        assert not is_real_number("1.5")
        assert not is_real_number(None)
