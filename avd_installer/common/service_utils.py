# avd_installer/common/service_utils.py
# -*- coding: utf-8 -*-
"""
Windows service and process control through PowerShell and taskkill.
"""

import logging
import time
from typing import Callable, Dict, List, Optional, Sequence

from avd_installer.config import TASKKILL_NOT_FOUND_EXIT_CODE
from avd_installer.config_models import AppSettings

from .command_utils import (
    get_symbols,
    log_message,
    quote_powershell,
    run_command,
    run_powershell,
)

module_logger = logging.getLogger(__name__)


def _name_list(names: Sequence[str]) -> str:
    return ", ".join(quote_powershell(name) for name in names)


def get_services_by_prefix(
    prefix: str,
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
) -> List[str]:
    """Returns the names of all services whose name starts with ``prefix``."""
    result = run_powershell(
        f"Get-Service -Name {quote_powershell(prefix + '*')} -ErrorAction SilentlyContinue "
        "| Select-Object -ExpandProperty Name",
        app_settings,
        check=True,
        capture_output=True,
        current_logger=current_logger,
    )
    return [line.strip() for line in (result.stdout or "").splitlines() if line.strip()]


def get_service_states(
    names: Sequence[str],
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
) -> Dict[str, str]:
    """Maps each existing service name to its status (Running, Stopped, ...)."""
    if not names:
        return {}
    result = run_powershell(
        f"Get-Service -Name {_name_list(names)} -ErrorAction SilentlyContinue "
        "| ForEach-Object { \"$($_.Name)=$($_.Status)\" }",
        app_settings,
        check=True,
        capture_output=True,
        current_logger=current_logger,
    )
    states: Dict[str, str] = {}
    for line in (result.stdout or "").splitlines():
        name, sep, status = line.strip().partition("=")
        if sep:
            states[name] = status
    return states


def stop_services(
    names: Sequence[str],
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """Force-stops the named services. An empty list is a no-op."""
    if not names:
        return
    run_powershell(
        f"Stop-Service -Name {_name_list(names)} -Force",
        app_settings,
        check=True,
        current_logger=current_logger,
    )


def start_services(
    names: Sequence[str],
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """Starts the named services. An empty list is a no-op."""
    if not names:
        return
    run_powershell(
        f"Start-Service -Name {_name_list(names)}",
        app_settings,
        check=True,
        current_logger=current_logger,
    )


def kill_process(
    image_name: str,
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
) -> bool:
    """
    Force-kills every process running ``image_name``.

    Returns:
        bool: True if a process was killed, False if none was running.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    result = run_command(
        ["taskkill.exe", "/F", "/IM", image_name],
        app_settings,
        check=False,
        capture_output=True,
        current_logger=logger_to_use,
    )
    if result.returncode == 0:
        return True
    if result.returncode == TASKKILL_NOT_FOUND_EXIT_CODE:
        log_message(
            f"{symbols.get('info', 'ℹ️')} No running process named {image_name}.",
            "info",
            logger_to_use,
            app_settings,
        )
        return False
    log_message(
        f"{symbols.get('warning', '⚠️')} taskkill for {image_name} exited with {result.returncode}.",
        "warning",
        logger_to_use,
        app_settings,
    )
    return False


def await_service_state(
    names: Sequence[str],
    target_state: str,
    timeout_budget: float,
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
    initial_interval: float = 5.0,
    backoff_factor: float = 2.0,
    max_interval: float = 60.0,
    sleep: Callable[[float], None] = time.sleep,
) -> bool:
    """
    Polls until every named service reports ``target_state``.

    The delay between polls starts at ``initial_interval`` and grows by
    ``backoff_factor`` up to ``max_interval``. The total time slept never
    exceeds ``timeout_budget``. An empty ``names`` returns at once.

    Returns:
        bool: True if all services reached the state, False if the timeout ran out.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    if not names:
        return True

    waited = 0.0
    interval = initial_interval
    while True:
        states = get_service_states(names, app_settings, logger_to_use)
        pending = [n for n in names if states.get(n) != target_state]
        if not pending:
            log_message(
                f"{symbols.get('success', '✅')} Services {', '.join(names)} are {target_state}.",
                "success",
                logger_to_use,
                app_settings,
            )
            return True
        remaining = timeout_budget - waited
        if remaining <= 0:
            log_message(
                f"{symbols.get('warning', '⚠️')} Gave up after {waited:.0f}s waiting for "
                f"{', '.join(pending)} to reach {target_state}.",
                "warning",
                logger_to_use,
                app_settings,
            )
            return False
        delay = min(interval, remaining)
        log_message(
            f"Waiting {delay:.0f}s for {', '.join(pending)} to reach {target_state}...",
            "debug",
            logger_to_use,
            app_settings,
        )
        sleep(delay)
        waited += delay
        interval = min(interval * backoff_factor, max_interval)
