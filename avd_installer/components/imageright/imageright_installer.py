"""
ImageRight / WorkSmart installer module.

WorkSmart needs .NET Framework 4.8 and the WebView2 Runtime, so both are
installed first. The client installer is started from a generated batch
script with administrator rights. Its background service gives no signal
when provisioning is done, so the component waits a fixed time, kills the
installer's helper process, waits again, then swaps the client config files
while the ImageRight services are stopped.
"""

import logging
import time
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from avd_installer.base_component import BaseComponent, InstallTask
from avd_installer.common.command_utils import log_message, run_elevated_command
from avd_installer.common.file_utils import remove_file_if_exists, write_text_file
from avd_installer.common.network_utils import download_file
from avd_installer.common.registry_utils import RegistryAccessor
from avd_installer.common.service_utils import (
    await_service_state,
    get_services_by_prefix,
    kill_process,
    start_services,
    stop_services,
)
from avd_installer.components.dotnet.dotnet_installer import DotNetInstaller
from avd_installer.components.webview2.webview2_installer import WebView2Installer
from avd_installer.config import SCRIPT_VERSION, WORKSMART_BATCH_TEMPLATE
from avd_installer.config_models import AppSettings
from avd_installer.registry import ComponentRegistry


@ComponentRegistry.register(
    name="imageright",
    metadata={
        "estimated_time": 1500,
        "description": "ImageRight WorkSmart client (.NET 4.8 and WebView2 first)",
    },
)
class ImageRightInstaller(BaseComponent):
    settings_key = "imageright"

    def __init__(
        self,
        app_settings: AppSettings,
        logger: Optional[logging.Logger] = None,
        registry_accessor: Optional[RegistryAccessor] = None,
        overrides: Optional[Dict[str, Any]] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        super().__init__(app_settings, logger, registry_accessor, overrides)
        self.sleep = sleep

    @property
    def install_root(self) -> Path:
        return Path(self.settings.install_root)

    @property
    def installer_path(self) -> Path:
        return self.install_root / self.settings.installer_file_name

    @property
    def batch_path(self) -> Path:
        return self.install_root / self.settings.batch_file_name

    def build_task(self) -> InstallTask:
        return InstallTask(
            name="ImageRight WorkSmart",
            source_urls=[str(self.settings.installer_url)],
            local_file_name=self.settings.installer_file_name,
            invocation_arguments=self.settings.installer_arguments,
        )

    def install_prerequisites(self) -> None:
        for prerequisite in (DotNetInstaller, WebView2Installer):
            prerequisite(
                self.app_settings, self.logger, self._registry_accessor
            ).install()

    def render_batch_script(self, task: InstallTask) -> str:
        return WORKSMART_BATCH_TEMPLATE.format(
            script_version=SCRIPT_VERSION,
            install_root=self.install_root,
            installer_path=self.installer_path,
            installer_arguments=task.invocation_arguments,
        )

    def run_batch_installer(self, task: InstallTask) -> None:
        download_file(
            task.source_urls[0],
            self.install_root / task.local_file_name,
            self.app_settings.download,
            self.app_settings,
            current_logger=self.logger,
        )
        write_text_file(
            self.batch_path,
            self.render_batch_script(task),
            self.app_settings,
            self.logger,
        )
        result = run_elevated_command(
            ["cmd.exe", "/c", str(self.batch_path)],
            self.app_settings,
            check=False,
            current_logger=self.logger,
            cwd=str(self.install_root),
        )
        if result.returncode != 0:
            log_message(
                f"{self.symbols.get('warning', '⚠️')} WorkSmart batch exited with code {result.returncode}.",
                "warning",
                self.logger,
                self.app_settings,
            )

    def wait_for_installer(self) -> None:
        """Fixed delay, helper kill, fixed delay. Both delays always elapse in full."""
        log_message(
            f"{self.symbols.get('info', 'ℹ️')} Waiting {self.settings.pre_kill_wait_seconds}s "
            "for the WorkSmart installer to settle...",
            "info",
            self.logger,
            self.app_settings,
        )
        self.sleep(self.settings.pre_kill_wait_seconds)
        kill_process(
            self.settings.helper_process_name, self.app_settings, self.logger
        )
        log_message(
            f"{self.symbols.get('info', 'ℹ️')} Waiting {self.settings.post_kill_wait_seconds}s "
            "for ImageRight services to finish provisioning...",
            "info",
            self.logger,
            self.app_settings,
        )
        self.sleep(self.settings.post_kill_wait_seconds)

    def replace_config_files(self) -> None:
        config_dir = Path(self.settings.config_dir)
        base_url = str(self.settings.config_base_url).rstrip("/")
        for config_name in self.settings.config_files:
            remove_file_if_exists(
                config_dir / config_name, self.app_settings, self.logger
            )
        for config_name in self.settings.config_files:
            download_file(
                f"{base_url}/{config_name}",
                config_dir / config_name,
                self.app_settings.download,
                self.app_settings,
                current_logger=self.logger,
            )

    def refresh_services(self) -> List[str]:
        """
        Stops the ImageRight services, swaps the config files and restarts them.

        The new config files are not validated before the restart. The
        services are restarted even when a config download fails; the
        download error is raised afterwards. If no service matches the
        prefix, stop and start are skipped.

        Returns:
            The names of the services that were restarted.
        """
        services = get_services_by_prefix(
            self.settings.service_prefix, self.app_settings, self.logger
        )
        if not services:
            log_message(
                f"{self.symbols.get('warning', '⚠️')} No services match '{self.settings.service_prefix}*'.",
                "warning",
                self.logger,
                self.app_settings,
            )
        stop_services(services, self.app_settings, self.logger)
        try:
            self.replace_config_files()
        finally:
            start_services(services, self.app_settings, self.logger)
            await_service_state(
                services,
                "Running",
                self.settings.service_start_timeout_seconds,
                self.app_settings,
                self.logger,
                sleep=self.sleep,
            )
        return services

    def install(self) -> bool:
        task = self.build_task()
        self.install_prerequisites()
        log_message(
            f"{self.symbols.get('step', '➡️')} Installing {task.name}...",
            "info",
            self.logger,
            self.app_settings,
        )
        self.run_batch_installer(task)
        self.wait_for_installer()
        self.refresh_services()
        log_message(
            f"{self.symbols.get('success', '✅')} {task.name} installed.",
            "success",
            self.logger,
            self.app_settings,
        )
        return True
