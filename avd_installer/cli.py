# avd_installer/cli.py
# -*- coding: utf-8 -*-
"""
Command-line interface for the AVD golden image installer.
"""

import argparse
import logging
import sys
from typing import Dict, List, Optional

from avd_installer.common.logging_config import setup_logging
from avd_installer.common.registry_utils import WindowsRegistryAccessor
from avd_installer.components import load_all_components
from avd_installer.config import SCRIPT_VERSION
from avd_installer.config_loader import DEFAULT_CONFIG_FILE, load_app_settings
from avd_installer.config_models import AppSettings
from avd_installer.image_build import build_image_orchestrator, install_component
from avd_installer.registry import ComponentRegistry

SERVICE_NAME = "avd-installer"


def parse_overrides(pairs: Optional[List[str]]) -> Dict[str, str]:
    """
    Turns ``KEY=VALUE`` strings into a dictionary of setting overrides.

    Raises:
        ValueError: If an entry has no ``=`` or an empty key.
    """
    overrides: Dict[str, str] = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise ValueError(f"Expected KEY=VALUE, got '{pair}'")
        overrides[key.strip()] = value
    return overrides


def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog=SERVICE_NAME,
        description="Installer for Azure Virtual Desktop golden images",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose output"
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {SCRIPT_VERSION}"
    )
    parser.add_argument(
        "--config",
        default=DEFAULT_CONFIG_FILE,
        help=f"Path to the YAML configuration file (default: {DEFAULT_CONFIG_FILE})",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write JSON log lines to this file",
    )
    parser.add_argument(
        "--work-dir", default=None, help="Override the build working directory"
    )
    parser.add_argument(
        "--timezone", default=None, help="Override the Windows timezone ID"
    )

    subparsers = parser.add_subparsers(
        dest="command", help="Command to execute", required=True
    )

    apply_parser = subparsers.add_parser(
        "apply", help="Run the full image build sequence"
    )
    apply_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="List the build steps without running them",
    )
    apply_parser.add_argument(
        "--skip",
        dest="skip_steps",
        action="append",
        default=None,
        metavar="STEP",
        help="Leave a step or component out of the build (repeatable)",
    )

    install_parser = subparsers.add_parser(
        "install", help="Install a single component"
    )
    install_parser.add_argument("component", help="Component to install")
    install_parser.add_argument(
        "--url",
        dest="overrides",
        action="append",
        default=None,
        metavar="KEY=VALUE",
        help="Override a setting of the component, e.g. url=https://... (repeatable)",
    )

    subparsers.add_parser(
        "list", help="List available components and the build sequence"
    )

    return parser.parse_args(args)


def _list_components(logger: logging.Logger, app_settings: AppSettings) -> None:
    components = ComponentRegistry.get_all_components()
    if not components:
        logger.info("No components available.")
        return
    logger.info("Available components:")
    for name in sorted(components):
        component_class = components[name]
        description = component_class.metadata.get("description", "")
        estimate = component_class.metadata.get("estimated_time", 0)
        logger.info(f"  - {name}: {description} (~{estimate}s)")

    orchestrator = build_image_orchestrator(app_settings, None, logger)
    logger.info("Image build sequence:")
    for i, step in enumerate(orchestrator.task_names(), 1):
        logger.info(f"  {i}. {step}")


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point for the AVD golden image installer."""
    parsed_args = parse_args(args)
    logger = setup_logging(
        SERVICE_NAME,
        log_level="DEBUG" if parsed_args.verbose else None,
        enable_file=bool(parsed_args.log_file),
        log_file_path=parsed_args.log_file,
    )
    logger.info(f"AVD image installer v{SCRIPT_VERSION}")

    logger.debug("Loading all available components...")
    load_all_components(logger)

    try:
        app_settings = load_app_settings(
            parsed_args, parsed_args.config, current_logger=logger
        )

        if parsed_args.command == "list":
            _list_components(logger, app_settings)
            return 0

        if parsed_args.command == "install":
            overrides = parse_overrides(parsed_args.overrides)
            ran = install_component(
                parsed_args.component,
                app_settings,
                current_logger=logger,
                overrides=overrides,
            )
            if not ran:
                logger.info(
                    f"Component '{parsed_args.component}' was already present."
                )
            return 0

        if parsed_args.command == "apply":
            registry_accessor = (
                None if parsed_args.dry_run else WindowsRegistryAccessor()
            )
            orchestrator = build_image_orchestrator(
                app_settings, registry_accessor, current_logger=logger
            )
            orchestrator.run(dry_run=parsed_args.dry_run)
            return 0

        logger.error(f"Unknown command: {parsed_args.command}")
        return 1
    except (KeyError, ValueError) as e:
        logger.error(f"Invalid request: {e}")
        return 1
    except Exception as e:
        logger.critical(f"Image build failed: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
