"""
Microsoft Edge WebView2 Runtime installer module.
"""

from typing import Optional

from avd_installer.base_component import BaseComponent, InstallTask
from avd_installer.common.preconditions import (
    InstalledProductCheck,
    PreconditionChecker,
)
from avd_installer.registry import ComponentRegistry


@ComponentRegistry.register(
    name="webview2",
    metadata={
        "estimated_time": 120,
        "description": "Edge WebView2 Runtime (skipped when already present)",
    },
)
class WebView2Installer(BaseComponent):
    """Installs the evergreen WebView2 Runtime unless it is listed as installed."""

    settings_key = "webview2"

    def precondition(self) -> Optional[PreconditionChecker]:
        return InstalledProductCheck(
            self.registry, self.settings.product_name, self.logger
        )

    def build_task(self) -> InstallTask:
        return InstallTask(
            name="Edge WebView2 Runtime",
            source_urls=[str(self.settings.url)],
            local_file_name=self.settings.file_name,
            invocation_arguments=self.settings.arguments,
            precondition=self.precondition(),
        )
