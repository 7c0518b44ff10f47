"""Tests for the fixed daily slot grid."""

from datetime import time

import pytest

from services.slots import build_slot_grid, is_prime_time, parse_start_time


class TestSlotGrid:
    def test_default_grid_is_hourly_from_eight_to_twenty_one(self):
        grid = build_slot_grid()
        assert [s.start_time.hour for s in grid] == list(range(8, 22))
        assert grid[-1].end_time == time(22, 0)

    def test_prime_time_windows(self):
        prime = {s.start_time.hour for s in build_slot_grid() if s.is_prime_time}
        assert prime == {8, 9, 10, 11, 15, 16, 17}

    def test_prime_time_ignores_minutes_but_not_hour_bounds(self):
        assert is_prime_time(time(11, 59))
        assert not is_prime_time(time(12, 0))
        assert not is_prime_time(time(18, 0))

    def test_custom_hours(self):
        grid = build_slot_grid(opening_hour=10, closing_hour=12, prime_windows=[(11, 12)])
        assert [(s.label(), s.is_prime_time) for s in grid] == [("10:00", False), ("11:00", True)]

    @pytest.mark.parametrize("opening, closing", [(22, 8), (8, 8), (-1, 10), (8, 25)])
    def test_invalid_hours_rejected(self, opening, closing):
        with pytest.raises(ValueError):
            build_slot_grid(opening, closing)


class TestParseStartTime:
    def test_accepts_hh_mm(self):
        assert parse_start_time("15:00") == time(15, 0)

    def test_passes_time_through(self):
        assert parse_start_time(time(9, 0)) == time(9, 0)

    @pytest.mark.parametrize("value", ["3pm", "", None, 15, "25:00"])
    def test_rejects_garbage(self, value):
        assert parse_start_time(value) is None
