"""TUI-specific pytest configuration and fixtures."""

from __future__ import annotations

import pytest


def pytest_configure(config):
    """Register TUI test markers."""
    config.addinivalue_line(
        "markers",
        "tui_fast: Fast unit tests with fakes, no app lifecycle",
    )


@pytest.fixture
def tui_app_factory(debug_config, view_model_factory, fake_system):
    """Factory for ClawdisApp instances that are constructed but never run.

    ``exit`` and ``notify`` are replaced with recorders so actions can be
    exercised without an event loop.
    """
    from clawdis.ui.tui.app import ClawdisApp

    def _create_app(**view_model_overrides):
        app = ClawdisApp(
            debug_config,
            view_model=view_model_factory(**view_model_overrides),
            system=fake_system,
        )
        app.exits = []
        app.toasts = []
        app.exit = lambda result=None, return_code=0, message=None: app.exits.append(return_code)
        app.notify = lambda message, **kwargs: app.toasts.append((message, kwargs.get("severity")))
        return app

    return _create_app
