"""
Agents and clients installed with nothing beyond download-and-run:
security agent, VPN client, RMM agent and the Outlook add-in.

Each one reads its entry from ``AppSettings.agents``.
"""

from pydantic import BaseModel

from avd_installer.base_component import BaseComponent, InstallTask
from avd_installer.registry import ComponentRegistry


class AgentInstaller(BaseComponent):
    agent_key: str = ""

    def _settings_section(self) -> BaseModel:
        return self.app_settings.agents[self.agent_key]

    def build_task(self) -> InstallTask:
        return InstallTask(
            name=self.settings.display_name,
            source_urls=[str(self.settings.url)],
            local_file_name=self.settings.file_name,
            invocation_arguments=self.settings.arguments,
        )


@ComponentRegistry.register(
    name="security_agent",
    metadata={"estimated_time": 180, "description": "Endpoint security agent"},
)
class SecurityAgentInstaller(AgentInstaller):
    agent_key = "security_agent"


@ComponentRegistry.register(
    name="vpn_client",
    metadata={"estimated_time": 120, "description": "VPN client"},
)
class VpnClientInstaller(AgentInstaller):
    agent_key = "vpn_client"


@ComponentRegistry.register(
    name="rmm_agent",
    metadata={"estimated_time": 120, "description": "Remote monitoring and management agent"},
)
class RmmAgentInstaller(AgentInstaller):
    agent_key = "rmm_agent"


@ComponentRegistry.register(
    name="office_addin",
    metadata={"estimated_time": 60, "description": "Outlook add-in for the agency management system"},
)
class OfficeAddinInstaller(AgentInstaller):
    agent_key = "office_addin"
