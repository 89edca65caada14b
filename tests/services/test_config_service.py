"""Tests for ConfigService."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from focusledger.models.config_models import AppConfig
from focusledger.services.config_service import ConfigService, get_config_service


@pytest.fixture()
def service() -> ConfigService:
    return ConfigService()


class TestLoad:
    def test_first_run_writes_defaults(self, service):
        config = service.load_config()

        assert config == AppConfig()
        assert service.config_path.exists()
        assert service.config_path.stat().st_mode & 0o777 == 0o600

    def test_reads_existing_file(self, service):
        service.config_path.write_text(
            json.dumps({"timer": {"intervals_minutes": [10, 20], "default_interval_index": 1}}),
            encoding="utf-8",
        )

        config = service.load_config()

        assert config.timer.intervals_minutes == [10, 20]
        assert config.timer.default_interval_index == 1
        assert [scope.name for scope in config.scopes] == ["Work", "PMD"]

    def test_invalid_file_falls_back_to_defaults(self, service):
        service.config_path.write_text("{not json", encoding="utf-8")

        assert service.load_config() == AppConfig()
        # The broken file is left for the user to inspect
        assert service.config_path.read_text(encoding="utf-8") == "{not json"

    def test_invalid_values_fall_back_to_defaults(self, service):
        service.config_path.write_text(
            json.dumps({"timer": {"default_interval_index": 12}}), encoding="utf-8"
        )
        assert service.load_config().timer.default_interval_index == 4


class TestGetSet:
    def test_get_dotted_key(self, service):
        assert service.get("timer.default_interval_index") == 4
        assert service.get("storage.retention_days") == 2

    @pytest.mark.parametrize("key", ["nope", "timer.nope", "timer.intervals_minutes.0"])
    def test_get_unknown_key(self, service, key):
        assert service.get(key) is None

    def test_set_persists(self, service):
        service.set("timer.default_interval_index", 1)

        saved = json.loads(service.config_path.read_text(encoding="utf-8"))
        assert saved["timer"]["default_interval_index"] == 1
        assert ConfigService().load_config().timer.default_interval_index == 1

    def test_set_list_value(self, service):
        service.set("timer.intervals_minutes", [25, 50])
        assert service.config.timer.interval_durations_ms == [25 * 60_000, 50 * 60_000]

    @pytest.mark.parametrize("key", ["nope", "timer.nope", "scopes.name"])
    def test_set_unknown_key(self, service, key):
        with pytest.raises(KeyError):
            service.set(key, 1)

    def test_set_invalid_value_keeps_old_config(self, service):
        with pytest.raises(ValueError, match="timer.default_interval_index"):
            service.set("timer.default_interval_index", 9)
        assert service.get("timer.default_interval_index") == 4

    def test_reset(self, service):
        service.set("storage.retention_days", 7)
        assert service.reset_config().storage.retention_days == 2
        assert ConfigService().load_config().storage.retention_days == 2


class TestStoreDir:
    def test_defaults_to_data_dir(self, service):
        assert service.store_dir == service.data_dir / "store"

    def test_configured_path_is_expanded(self, service, tmp_path):
        service.set("storage.path", "~/focus-store")
        assert service.store_dir == Path("~/focus-store").expanduser()


def test_get_config_service_is_cached():
    assert get_config_service() is get_config_service()
