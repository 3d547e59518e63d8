# avd_installer/system_tweaks.py
# -*- coding: utf-8 -*-
"""
Operating system changes made around the product installs: optional
features, QuickAssist removal, timezone and first-run suppression.
"""

import logging
from typing import Optional

from avd_installer.common.command_utils import (
    get_symbols,
    log_message,
    quote_powershell,
    run_command,
    run_powershell,
)
from avd_installer.common.registry_utils import RegistryAccessor
from avd_installer.config import (
    OOBE_REGISTRY_VALUES,
    QUICK_ASSIST_APPX,
    QUICK_ASSIST_CAPABILITY,
)
from avd_installer.config_models import AppSettings

module_logger = logging.getLogger(__name__)


def enable_windows_features(
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """Enables each configured optional feature, without restarting."""
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    features = app_settings.system.windows_features
    if not features:
        log_message(
            f"{symbols.get('info', 'ℹ️')} No optional Windows features configured.",
            "info",
            logger_to_use,
            app_settings,
        )
        return
    for feature in features:
        log_message(
            f"{symbols.get('step', '➡️')} Enabling Windows feature {feature}...",
            "info",
            logger_to_use,
            app_settings,
        )
        run_powershell(
            f"Enable-WindowsOptionalFeature -Online -FeatureName {quote_powershell(feature)} -All -NoRestart",
            app_settings,
            check=True,
            current_logger=logger_to_use,
        )


def remove_quick_assist(
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> bool:
    """
    Removes the QuickAssist capability and its Store app.

    Failure is logged as a warning and reported through the return value;
    it never interrupts the image build.

    Returns:
        bool: True if removal succeeded (or is disabled), False if it failed.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    if not app_settings.system.remove_quick_assist:
        log_message(
            f"{symbols.get('info', 'ℹ️')} QuickAssist removal disabled in configuration. Skipping.",
            "info",
            logger_to_use,
            app_settings,
        )
        return True

    log_message(
        f"{symbols.get('step', '➡️')} Removing QuickAssist...",
        "info",
        logger_to_use,
        app_settings,
    )
    try:
        run_powershell(
            f"Remove-WindowsCapability -Online -Name {quote_powershell(QUICK_ASSIST_CAPABILITY)} -ErrorAction Stop; "
            f"Get-AppxPackage -AllUsers -Name {quote_powershell(QUICK_ASSIST_APPX)} "
            "| Remove-AppxPackage -AllUsers -ErrorAction Stop",
            app_settings,
            check=True,
            capture_output=True,
            current_logger=logger_to_use,
        )
    except Exception as e:
        log_message(
            f"{symbols.get('warning', '⚠️')} QuickAssist removal failed: {e}",
            "warning",
            logger_to_use,
            app_settings,
        )
        return False
    log_message(
        f"{symbols.get('success', '✅')} QuickAssist removed.",
        "success",
        logger_to_use,
        app_settings,
    )
    return True


def set_timezone(
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    logger_to_use = current_logger if current_logger else module_logger
    timezone_id = app_settings.system.timezone
    log_message(
        f"{get_symbols(app_settings).get('gear', '⚙️')} Setting timezone to {timezone_id}",
        "info",
        logger_to_use,
        app_settings,
    )
    run_command(
        ["tzutil.exe", "/s", timezone_id],
        app_settings,
        check=True,
        current_logger=logger_to_use,
    )


def suppress_first_run_experience(
    app_settings: AppSettings,
    registry_accessor: RegistryAccessor,
    current_logger: Optional[logging.Logger] = None,
) -> int:
    """
    Writes the OOBE, first-logon animation and first-run policy values.

    Returns:
        int: The number of registry values written.
    """
    logger_to_use = current_logger if current_logger else module_logger
    for path, value_name, value in OOBE_REGISTRY_VALUES:
        logger_to_use.debug(f"Setting {path}\\{value_name} = {value}")
        registry_accessor.set_value(path, value_name, value)
    log_message(
        f"{get_symbols(app_settings).get('success', '✅')} First-run experience suppressed "
        f"({len(OOBE_REGISTRY_VALUES)} registry values).",
        "success",
        logger_to_use,
        app_settings,
    )
    return len(OOBE_REGISTRY_VALUES)
