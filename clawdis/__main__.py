"""
Main CLI entry point for the Clawdis debug panel.

Runs the Textual debug panel by default, or a single debug action when a
subcommand is given.
"""

import argparse
import sys
from pathlib import Path

from clawdis.logging import configure_logging_from_args, get_logger
from clawdis.paths import get_default_config_path


def build_parser() -> argparse.ArgumentParser:
    """
    Build the main argument parser with subcommands.

    Returns:
        Configured ArgumentParser
    """
    default_config_path = get_default_config_path()
    parser = argparse.ArgumentParser(
        prog="clawdis",
        description="Clawdis debug panel - diagnostics and developer actions",
        epilog="Use 'clawdis <command> --help' for more information on a specific command.",
    )

    # Global flags (available to all commands)
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help=f"Path to configuration file (default: {default_config_path} when present)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output (DEBUG level)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set logging level (overrides --verbose)",
    )
    parser.add_argument(
        "--log-file",
        nargs="?",
        const="",
        default=None,
        metavar="PATH",
        help="Also write logs to PATH (without PATH: today's /tmp/clawdis rolling log)",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        description="Available commands",
        required=False,  # No command starts the TUI
    )

    subparsers.add_parser(
        "log-path",
        help="Print today's log file path",
    )
    subparsers.add_parser(
        "open-log",
        help="Open today's log file",
    )

    # -------------------------------------------------------------------------
    # Model catalog subcommand
    # -------------------------------------------------------------------------
    models_parser = subparsers.add_parser(
        "models",
        help="Model catalog commands",
    )
    models_subparsers = models_parser.add_subparsers(
        dest="models_command",
        title="models commands",
        required=True,
    )
    reload_parser = models_subparsers.add_parser(
        "reload",
        help="Reload the model catalog and print the model count",
    )
    reload_parser.add_argument(
        "--path",
        type=str,
        help="Pick a different catalog file before reloading (persisted)",
    )

    # -------------------------------------------------------------------------
    # Relay project root subcommand
    # -------------------------------------------------------------------------
    relay_parser = subparsers.add_parser(
        "relay-root",
        help="Show or change the relay project root",
    )
    relay_subparsers = relay_parser.add_subparsers(
        dest="relay_root_command",
        title="relay-root commands",
        required=True,
    )
    relay_subparsers.add_parser("show", help="Print the current project root")
    set_parser = relay_subparsers.add_parser("set", help="Save a new project root")
    set_parser.add_argument("path", type=str, help="Project root path (saved verbatim)")
    relay_subparsers.add_parser("reset", help="Restore the default project root")

    subparsers.add_parser(
        "notify-test",
        help="Send a test notification",
    )

    return parser


def _load_config(config_arg, logger):
    from clawdis.config import default_config, load_config_from_file

    if config_arg is not None:
        cfg_path = Path(config_arg).expanduser().resolve()
        logger.info(f"Loading configuration from: {cfg_path}")
        return load_config_from_file(cfg_path)

    cfg_path = get_default_config_path()
    if cfg_path.exists():
        logger.info(f"Loading configuration from: {cfg_path}")
        return load_config_from_file(cfg_path)

    logger.debug("No config file found, using defaults")
    return default_config()


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the Clawdis CLI.

    Args:
        argv: Command-line arguments (for testing)

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging_from_args(
        verbose=args.verbose,
        log_level=args.log_level,
        log_file=args.log_file,
    )

    logger = get_logger(__name__)
    logger.debug(f"Parsed arguments: {args}")

    if args.config is not None and not Path(args.config).expanduser().exists():
        cfg_path = Path(args.config).expanduser().resolve()
        logger.error(f"Config file not found: {cfg_path}")
        print(f"Error: Configuration file not found: {cfg_path}")
        return 1

    try:
        config = _load_config(args.config, logger)

        # TUI interface if no command specified
        if not args.command:
            logger.info("Starting TUI interface")
            from clawdis.ui.tui.app import run_tui
            return run_tui(config)

        from clawdis.ui.shell import cli

        handlers = {
            "log-path": cli.run_log_path,
            "open-log": cli.run_open_log,
            "models": cli.run_models,
            "relay-root": cli.run_relay_root,
            "notify-test": cli.run_notify_test,
        }
        handler = handlers.get(args.command)
        if handler is None:
            parser.print_help()
            return 1
        logger.info(f"Starting {args.command} command")
        return handler(args, config)

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        print("\nInterrupted by user.")
        return 130  # Standard exit code for SIGINT

    except Exception as e:
        logger.exception("Unhandled exception in main")
        print(f"\nError: {e}", file=sys.stderr)
        if args.verbose:
            raise
        return 1


if __name__ == "__main__":
    sys.exit(main())
