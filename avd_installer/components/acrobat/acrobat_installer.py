"""
Adobe Acrobat installer module.

The enterprise package ships as a ZIP. It is extracted under the work
directory, the customization transform is downloaded into the package's
Transforms folder, and the extracted setup.exe is run with that transform.
"""

from pathlib import Path

from avd_installer.base_component import BaseComponent, InstallTask
from avd_installer.common.command_utils import log_message
from avd_installer.common.file_utils import extract_archive, get_temp_path
from avd_installer.common.network_utils import download_file, run_installer
from avd_installer.registry import ComponentRegistry


@ComponentRegistry.register(
    name="acrobat",
    metadata={
        "estimated_time": 900,
        "description": "Adobe Acrobat with the image's MST transform",
    },
)
class AcrobatInstaller(BaseComponent):
    settings_key = "acrobat"

    @property
    def setup_dir(self) -> Path:
        return Path(self.app_settings.work_dir) / self.settings.extracted_folder

    @property
    def transform_path(self) -> Path:
        return (
            self.setup_dir
            / self.settings.transform_subfolder
            / self.settings.transform_file_name
        )

    def build_task(self) -> InstallTask:
        return InstallTask(
            name="Adobe Acrobat",
            source_urls=[str(self.settings.url), str(self.settings.transform_url)],
            local_file_name=self.settings.archive_file_name,
            invocation_arguments=(
                f'{self.settings.arguments} TRANSFORMS="{self.transform_path}"'
            ),
        )

    def install(self) -> bool:
        task = self.build_task()
        archive_url, transform_url = task.source_urls
        log_message(
            f"{self.symbols.get('step', '➡️')} Installing {task.name}...",
            "info",
            self.logger,
            self.app_settings,
        )

        archive_path = download_file(
            archive_url,
            get_temp_path(task.local_file_name),
            self.app_settings.download,
            self.app_settings,
            current_logger=self.logger,
        )
        extract_archive(
            archive_path,
            self.app_settings.work_dir,
            self.app_settings,
            current_logger=self.logger,
        )
        download_file(
            transform_url,
            self.transform_path,
            self.app_settings.download,
            self.app_settings,
            current_logger=self.logger,
        )
        run_installer(
            self.setup_dir / self.settings.setup_file_name,
            task.invocation_arguments,
            self.app_settings,
            current_logger=self.logger,
            cwd=str(self.setup_dir),
        )
        log_message(
            f"{self.symbols.get('success', '✅')} {task.name} installed.",
            "success",
            self.logger,
            self.app_settings,
        )
        return True
