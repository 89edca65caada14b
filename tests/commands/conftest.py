"""CLI fixtures: every invocation boots a fresh FocusService over one shared store."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from focusledger.services.focus_service import FocusService


@pytest.fixture()
def booted(app_config, store, clock):
    """Patch the service factory so each command simulates a new process."""
    services: list[FocusService] = []

    def factory() -> FocusService:
        service = FocusService(app_config, store, clock=clock)
        services.append(service)
        return service

    with (
        patch("focusledger.commands.focus.get_focus_service", side_effect=factory),
        patch("focusledger.commands.entries.get_focus_service", side_effect=factory),
        patch("focusledger.commands.scopes.get_focus_service", side_effect=factory),
    ):
        yield services
