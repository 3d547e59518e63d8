# avd_installer/image_build.py
# -*- coding: utf-8 -*-
"""
The image build sequence.

Steps run once, top to bottom: optional Windows features, Chocolatey and its
packages, the configured product installers, QuickAssist removal, timezone,
then first-run suppression. The only ordering between steps is this list.
"""

import logging
from typing import Any, Dict, Optional

from avd_installer.common.orchestrator import Orchestrator
from avd_installer.common.registry_utils import RegistryAccessor
from avd_installer.components import load_all_components
from avd_installer.config_models import AppSettings
from avd_installer.registry import ComponentRegistry
from avd_installer.system_tweaks import (
    enable_windows_features,
    remove_quick_assist,
    set_timezone,
    suppress_first_run_experience,
)

module_logger = logging.getLogger(__name__)

STEP_FEATURES = "features"
STEP_CHOCOLATEY = "chocolatey"
STEP_QUICK_ASSIST = "quickassist"
STEP_TIMEZONE = "timezone"
STEP_OOBE = "oobe"


def install_component(
    name: str,
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
    registry_accessor: Optional[RegistryAccessor] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> bool:
    """
    Instantiates the registered component ``name`` and installs it.

    Returns:
        True if the installer ran, False if its precondition skipped it.

    Raises:
        KeyError: If no component is registered under ``name``.
    """
    component_class = ComponentRegistry.get_component(name)
    component = component_class(
        app_settings,
        current_logger,
        registry_accessor=registry_accessor,
        overrides=overrides,
    )
    return component.install()


def build_image_orchestrator(
    app_settings: AppSettings,
    registry_accessor: Optional[RegistryAccessor],
    current_logger: Optional[logging.Logger] = None,
) -> Orchestrator:
    """
    Builds the orchestrator for a full image build.

    Steps named in ``app_settings.skip_steps`` (either a fixed step name or
    a component name) are left out.
    Chocolatey always runs once, right after the Windows features step,
    so a ``chocolatey`` entry in the install sequence is ignored.

    Raises:
        KeyError: If the install sequence names an unregistered component.
    """
    logger_to_use = current_logger if current_logger else module_logger
    load_all_components(logger_to_use)
    skipped = set(app_settings.skip_steps)
    orchestrator = Orchestrator(app_settings, logger_to_use)

    def add(step_name: str, func, kwargs: Dict[str, Any], fatal: bool = True) -> None:
        if step_name in skipped:
            logger_to_use.info(f"Step '{step_name}' skipped by configuration.")
            return
        orchestrator.add_task(step_name, func, kwargs=kwargs, fatal=fatal)

    def component_kwargs(component_name: str) -> Dict[str, Any]:
        return {
            "name": component_name,
            "current_logger": logger_to_use,
            "registry_accessor": registry_accessor,
        }

    add(STEP_FEATURES, enable_windows_features, {"current_logger": logger_to_use})
    add(STEP_CHOCOLATEY, install_component, component_kwargs(STEP_CHOCOLATEY))
    for component_name in app_settings.install_sequence:
        if component_name == STEP_CHOCOLATEY:
            logger_to_use.warning(
                "Chocolatey already runs as its own step; "
                "ignoring it in install_sequence."
            )
            continue
        # Fail before anything runs if the sequence names an unknown product.
        ComponentRegistry.get_component(component_name)
        add(component_name, install_component, component_kwargs(component_name))
    add(
        STEP_QUICK_ASSIST,
        remove_quick_assist,
        {"current_logger": logger_to_use},
        fatal=False,
    )
    add(STEP_TIMEZONE, set_timezone, {"current_logger": logger_to_use})
    add(
        STEP_OOBE,
        suppress_first_run_experience,
        {"registry_accessor": registry_accessor, "current_logger": logger_to_use},
    )
    return orchestrator
