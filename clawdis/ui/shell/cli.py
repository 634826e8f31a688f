"""
CLI entry point for single-shot debug commands.

Exposes the debug panel actions (log path, catalog reload, relay root,
test notification) for scripting without starting the TUI.
"""

from __future__ import annotations

import asyncio
from typing import Optional

from clawdis.config.models import ClawdisConfig
from clawdis.logging import get_logger
from clawdis.ui.tui.state import DebugSettingsViewModel, build_view_model

logger = get_logger(__name__)


def _view_model(config: ClawdisConfig, view_model: Optional[DebugSettingsViewModel]) -> DebugSettingsViewModel:
    return view_model if view_model is not None else build_view_model(config)


def run_log_path(args, config: ClawdisConfig, *, view_model: Optional[DebugSettingsViewModel] = None) -> int:
    """Print the log file the panel would open today."""
    vm = _view_model(config, view_model)
    print(vm.log_path)
    return 0


def run_open_log(args, config: ClawdisConfig, *, view_model: Optional[DebugSettingsViewModel] = None) -> int:
    """Open today's log file with the platform opener."""
    vm = _view_model(config, view_model)
    path = vm.log_path
    if not vm.open_log():
        print(f"Could not open {path}")
        return 1
    print(f"Opened {path}")
    return 0


def run_models(args, config: ClawdisConfig, *, view_model: Optional[DebugSettingsViewModel] = None) -> int:
    """Run the models command (``reload [--path P]``)."""
    command = getattr(args, "models_command", None)
    if command != "reload":
        print("Missing models subcommand. Use `clawdis models --help` for options.")
        return 2

    vm = _view_model(config, view_model)
    path = getattr(args, "path", None)
    if path is not None:
        vm.choose_catalog_file(path)

    logger.info("Reloading model catalog from %s", vm.model_catalog_path)
    asyncio.run(vm.reload_models())

    if vm.models_error is not None:
        print(f"Error: {vm.models_error}")
        return 1
    print(f"Loaded {vm.models_count} models")
    return 0


def run_relay_root(args, config: ClawdisConfig, *, view_model: Optional[DebugSettingsViewModel] = None) -> int:
    """Run the relay-root command (``show``, ``set PATH``, ``reset``)."""
    command = getattr(args, "relay_root_command", None)
    vm = _view_model(config, view_model)

    if command == "show":
        print(vm.relay_root_input)
        return 0
    if command == "set":
        vm.set_relay_root_input(args.path)
        if not vm.save_relay_root():
            print(f"Error: could not save relay project root {args.path}")
            return 1
        print(vm.relay_root_input)
        return 0
    if command == "reset":
        print(vm.reset_relay_root())
        return 0

    print("Missing relay-root subcommand. Use `clawdis relay-root --help` for options.")
    return 2


def run_notify_test(args, config: ClawdisConfig, *, view_model: Optional[DebugSettingsViewModel] = None) -> int:
    """Send the test notification. Delivery failures are not reported."""
    vm = _view_model(config, view_model)
    asyncio.run(vm.send_test_notification())
    return 0
