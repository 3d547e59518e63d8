"""
Base component class for all product installers.

This module provides the InstallTask description and the base class that
every product installer inherits from.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from avd_installer.common.command_utils import get_symbols, log_message
from avd_installer.common.network_utils import download_and_run
from avd_installer.common.preconditions import PreconditionChecker
from avd_installer.common.registry_utils import (
    RegistryAccessor,
    WindowsRegistryAccessor,
)
from avd_installer.config_models import AppSettings


class InstallTask(BaseModel):
    """
    One download-and-run step, built from settings and never mutated.

    ``source_urls[0]`` is downloaded to ``local_file_name`` and launched with
    ``invocation_arguments``. Any further URLs are auxiliary downloads handled
    by the component itself.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    source_urls: List[str]
    local_file_name: str
    invocation_arguments: str = ""
    precondition: Optional[PreconditionChecker] = None
    post_actions: List[Callable[[], Any]] = Field(default_factory=list)


class BaseComponent(ABC):
    """
    Base class for all product installers.

    Subclasses name the section of ``AppSettings`` they read through
    ``settings_key`` and describe their work as an ``InstallTask``.
    Installers with extra steps override ``install``.
    """

    settings_key: str = ""

    # Class-level metadata, set by the registry decorator
    metadata: Dict[str, Any] = {
        "estimated_time": 0,  # Estimated installation time in seconds
        "description": "",
    }

    def __init__(
        self,
        app_settings: AppSettings,
        logger: Optional[logging.Logger] = None,
        registry_accessor: Optional[RegistryAccessor] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize the component.

        Args:
            app_settings: The application settings.
            logger: Optional logger instance. If not provided, a new logger will be created.
            registry_accessor: Registry used by presence probes. Defaults to the
                Windows registry, opened on first use.
            overrides: Field overrides (typically URLs) applied on top of this
                component's settings section.

        Raises:
            ValueError: If an override names a field the settings section does not have.
        """
        self.app_settings = app_settings
        self.logger = logger or logging.getLogger(self.__class__.__name__)
        self._registry_accessor = registry_accessor
        self.settings = self._apply_overrides(self._settings_section(), overrides)

    def _settings_section(self) -> BaseModel:
        return getattr(self.app_settings, self.settings_key)

    @staticmethod
    def _apply_overrides(
        section: BaseModel, overrides: Optional[Dict[str, Any]]
    ) -> BaseModel:
        if not overrides:
            return section
        unknown = set(overrides) - set(type(section).model_fields)
        if unknown:
            raise ValueError(
                f"Unknown setting(s) for {type(section).__name__}: {', '.join(sorted(unknown))}"
            )
        return section.model_copy(update=overrides)

    @property
    def registry(self) -> RegistryAccessor:
        if self._registry_accessor is None:
            self._registry_accessor = WindowsRegistryAccessor()
        return self._registry_accessor

    @property
    def symbols(self) -> Dict[str, str]:
        return get_symbols(self.app_settings)

    @abstractmethod
    def build_task(self) -> InstallTask:
        """
        Describe this component's download-and-run step.

        Returns:
            The InstallTask for this component.
        """
        pass

    def precondition(self) -> Optional[PreconditionChecker]:
        """Probe consulted before installing. None means always install."""
        return None

    def is_installed(self) -> bool:
        """
        Check if the component is already in place.

        Returns:
            True if the component's precondition is satisfied, False otherwise
            (including components without a precondition).
        """
        checker = self.precondition()
        return checker.probe() if checker else False

    def run_task(self, task: InstallTask) -> bool:
        """
        Runs one InstallTask: precondition, download-and-run, post actions.

        Returns:
            True if the installer ran, False if the precondition skipped it.
        """
        if task.precondition is not None and task.precondition.probe():
            log_message(
                f"{self.symbols.get('info', 'ℹ️')} {task.name} already present "
                f"({task.precondition.description}). Skipping.",
                "info",
                self.logger,
                self.app_settings,
            )
            return False

        log_message(
            f"{self.symbols.get('step', '➡️')} Installing {task.name}...",
            "info",
            self.logger,
            self.app_settings,
        )
        download_and_run(
            task.source_urls[0],
            task.local_file_name,
            task.invocation_arguments,
            self.app_settings,
            current_logger=self.logger,
        )
        for action in task.post_actions:
            action()
        log_message(
            f"{self.symbols.get('success', '✅')} {task.name} installed.",
            "success",
            self.logger,
            self.app_settings,
        )
        return True

    def install(self) -> bool:
        """
        Install the component.

        Returns:
            True if the installer ran, False if it was skipped.
        """
        return self.run_task(self.build_task())

    def get_estimated_time(self) -> int:
        """
        Get the estimated installation time.

        Returns:
            The estimated installation time in seconds.
        """
        return int(self.metadata.get("estimated_time", 0))

    def get_description(self) -> str:
        """
        Get the description of the component.

        Returns:
            The description of the component.
        """
        return str(self.metadata.get("description", ""))
