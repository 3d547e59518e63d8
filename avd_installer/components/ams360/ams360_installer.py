"""
AMS360 client installer module.
"""

from avd_installer.base_component import BaseComponent, InstallTask
from avd_installer.common.file_utils import remove_files
from avd_installer.registry import ComponentRegistry


@ComponentRegistry.register(
    name="ams360",
    metadata={
        "estimated_time": 240,
        "description": "Vertafore AMS360 client, without its desktop shortcuts",
    },
)
class Ams360Installer(BaseComponent):
    """Installs the AMS360 client, then removes the shortcuts it drops on the Public Desktop."""

    settings_key = "ams360"

    def remove_shortcuts(self) -> None:
        removed = remove_files(
            self.settings.shortcuts, self.app_settings, self.logger
        )
        self.logger.info(
            f"Removed {len(removed)} of {len(self.settings.shortcuts)} AMS360 shortcuts."
        )

    def build_task(self) -> InstallTask:
        return InstallTask(
            name="AMS360",
            source_urls=[str(self.settings.url)],
            local_file_name=self.settings.file_name,
            invocation_arguments=self.settings.arguments,
            post_actions=[self.remove_shortcuts],
        )
