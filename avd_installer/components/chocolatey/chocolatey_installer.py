"""
Chocolatey bootstrap and package installs.
"""

from typing import List

from avd_installer.base_component import BaseComponent, InstallTask
from avd_installer.common.command_utils import (
    command_exists,
    log_message,
    run_command,
)
from avd_installer.registry import ComponentRegistry


@ComponentRegistry.register(
    name="chocolatey",
    metadata={
        "estimated_time": 600,
        "description": "Chocolatey package manager and the image's package list",
    },
)
class ChocolateyInstaller(BaseComponent):
    """Runs the Chocolatey bootstrap script, then installs each package on its own."""

    settings_key = "chocolatey"

    def build_task(self) -> InstallTask:
        return InstallTask(
            name="Chocolatey",
            source_urls=[str(self.settings.bootstrap_url)],
            local_file_name=self.settings.script_file_name,
            post_actions=[self.install_packages],
        )

    def choco_executable(self) -> str:
        """The choco.exe the bootstrap installed, or ``choco`` from PATH."""
        if command_exists(self.settings.executable):
            return self.settings.executable
        return "choco"

    def install_package(self, choco: str, package: str) -> int:
        result = run_command(
            [choco, "install", package, *self.settings.install_flags],
            self.app_settings,
            check=False,
            current_logger=self.logger,
        )
        if result.returncode != 0:
            log_message(
                f"{self.symbols.get('warning', '⚠️')} choco install {package} exited with {result.returncode}.",
                "warning",
                self.logger,
                self.app_settings,
            )
        return result.returncode

    def install_packages(self) -> List[str]:
        """Installs the configured packages one at a time and returns them."""
        choco = self.choco_executable()
        for package in self.settings.packages:
            log_message(
                f"{self.symbols.get('package', '📦')} Installing {package} with Chocolatey...",
                "info",
                self.logger,
                self.app_settings,
            )
            self.install_package(choco, package)
        return list(self.settings.packages)
