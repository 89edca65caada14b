"""Tests for the pydantic configuration models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from focusledger.models.config_models import AppConfig, Scope, TimerConfig


class TestTimerConfig:
    def test_defaults(self):
        config = TimerConfig()
        assert config.intervals_minutes == [5, 15, 30, 35, 45]
        assert config.default_interval_index == 4
        assert config.min_tracked_ms == 60_000
        assert config.ding_min_gap_ms == 5_000
        assert config.interval_durations_ms[4] == 45 * 60_000

    def test_empty_intervals_rejected(self):
        with pytest.raises(ValidationError):
            TimerConfig(intervals_minutes=[], default_interval_index=0)

    def test_non_positive_interval_rejected(self):
        with pytest.raises(ValidationError):
            TimerConfig(intervals_minutes=[5, 0], default_interval_index=0)

    def test_default_index_out_of_range_rejected(self):
        with pytest.raises(ValidationError, match="out of range"):
            TimerConfig(intervals_minutes=[5, 10], default_interval_index=2)

    @pytest.mark.parametrize("index,expected", [(-1, False), (0, True), (4, True), (5, False)])
    def test_is_valid_index(self, index, expected):
        assert TimerConfig().is_valid_index(index) is expected


class TestScopes:
    def test_default_scopes(self):
        names = [scope.name for scope in AppConfig().scopes]
        assert names == ["Work", "PMD"]

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError):
            Scope(id=1, name="  ")

    def test_duplicate_ids_rejected(self):
        with pytest.raises(ValidationError, match="unique"):
            AppConfig(scopes=[Scope(id=1, name="A"), Scope(id=1, name="B")])

    def test_find_scope_by_id(self):
        assert AppConfig().find_scope("2").name == "PMD"
        assert AppConfig().find_scope(1).name == "Work"

    def test_find_scope_by_name_case_insensitive(self):
        assert AppConfig().find_scope("work").id == 1

    def test_find_scope_missing(self):
        with pytest.raises(ValueError, match="not found"):
            AppConfig().find_scope("Gardening")
