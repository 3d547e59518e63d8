"""
.NET Framework 4.8 installer module.
"""

from typing import Optional

from avd_installer.base_component import BaseComponent, InstallTask
from avd_installer.common.preconditions import (
    DotNetFrameworkCheck,
    PreconditionChecker,
)
from avd_installer.registry import ComponentRegistry


@ComponentRegistry.register(
    name="dotnet",
    metadata={
        "estimated_time": 300,
        "description": ".NET Framework 4.8 runtime (skipped when already present)",
    },
)
class DotNetInstaller(BaseComponent):
    """Installs .NET Framework 4.8 unless the registry reports it."""

    settings_key = "dotnet"

    def precondition(self) -> Optional[PreconditionChecker]:
        return DotNetFrameworkCheck(
            self.registry, self.settings.minimum_release, self.logger
        )

    def build_task(self) -> InstallTask:
        return InstallTask(
            name=".NET Framework 4.8",
            source_urls=[str(self.settings.url)],
            local_file_name=self.settings.file_name,
            invocation_arguments=self.settings.arguments,
            precondition=self.precondition(),
        )
