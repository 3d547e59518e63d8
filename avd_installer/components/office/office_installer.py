"""
Microsoft 365 Apps installer module, driven by the Office Deployment Tool.
"""

from pathlib import Path

from avd_installer.base_component import BaseComponent, InstallTask
from avd_installer.common.file_utils import write_text_file
from avd_installer.config import OFFICE_CONFIGURATION_TEMPLATE
from avd_installer.registry import ComponentRegistry


@ComponentRegistry.register(
    name="office",
    metadata={
        "estimated_time": 1200,
        "description": "Microsoft 365 Apps in shared computer activation mode",
    },
)
class OfficeInstaller(BaseComponent):
    settings_key = "office"

    @property
    def configuration_path(self) -> Path:
        return Path(self.app_settings.work_dir) / self.settings.configuration_file_name

    def render_configuration(self) -> str:
        excluded = "\n".join(
            f'      <ExcludeApp ID="{app_id}" />'
            for app_id in self.settings.excluded_apps
        )
        return OFFICE_CONFIGURATION_TEMPLATE.format(
            channel=self.settings.channel,
            product_id=self.settings.product_id,
            language=self.settings.language,
            excluded_apps=excluded,
            shared_computer_licensing=int(self.settings.shared_computer_licensing),
        )

    def build_task(self) -> InstallTask:
        return InstallTask(
            name="Microsoft 365 Apps",
            source_urls=[str(self.settings.setup_url)],
            local_file_name=self.settings.file_name,
            invocation_arguments=f'/configure "{self.configuration_path}"',
        )

    def install(self) -> bool:
        write_text_file(
            self.configuration_path,
            self.render_configuration(),
            self.app_settings,
            self.logger,
        )
        return self.run_task(self.build_task())
