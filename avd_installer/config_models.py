# avd_installer/config_models.py
# -*- coding: utf-8 -*-
"""
Pydantic models for the image build configuration.

This module defines the structured settings for every installer and system
tweak, including defaults, type annotations, and descriptions.
It utilizes Pydantic for data validation and settings management.
"""

from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field, HttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict

from avd_installer.config import DOTNET48_MINIMUM_RELEASE, SYMBOLS

# --- Default Static Values (can be overridden by config file/env/cli) ---
INSTALLER_STORAGE_BASE_URL_DEFAULT: str = (
    "https://avdimageassets.blob.core.windows.net/installers"
)
WORK_DIR_DEFAULT: str = r"C:\AVDBuild"
TIMEZONE_DEFAULT: str = "Eastern Standard Time"

DOTNET48_URL_DEFAULT: str = "https://go.microsoft.com/fwlink/?linkid=2088631"
WEBVIEW2_URL_DEFAULT: str = "https://go.microsoft.com/fwlink/p/?LinkId=2124703"
ACROBAT_URL_DEFAULT: str = (
    "https://trials.adobe.com/AdobeProducts/APRO/Acrobat_HelpX/win32/"
    "Acrobat_DC_Web_x64_WWMUI.zip"
)
CHOCOLATEY_BOOTSTRAP_URL_DEFAULT: str = "https://community.chocolatey.org/install.ps1"
OFFICE_SETUP_URL_DEFAULT: str = "https://officecdn.microsoft.com/pr/wsus/setup.exe"

CHOCOLATEY_PACKAGES_DEFAULT: List[str] = [
    "googlechrome",
    "firefox",
    "7zip",
    "notepadplusplus",
    "javaruntime",
    "vlc",
]

SYMBOLS_DEFAULT: Dict[str, str] = dict(SYMBOLS)


class DownloadSettings(BaseModel):
    """Options passed explicitly into every download."""

    show_progress: bool = Field(
        default=False,
        description="Log download progress per chunk.",
    )
    chunk_size: int = Field(default=1024 * 1024, description="Bytes per streamed chunk.")
    timeout_seconds: Optional[float] = Field(
        default=None,
        description="Socket timeout for downloads. None waits indefinitely.",
    )


class DotNetSettings(BaseModel):
    url: Union[HttpUrl, str] = Field(default=DOTNET48_URL_DEFAULT, description=".NET Framework 4.8 offline installer.")
    file_name: str = "ndp48-x86-x64-allos-enu.exe"
    arguments: str = "/q /norestart"
    minimum_release: int = Field(
        default=DOTNET48_MINIMUM_RELEASE,
        description="Minimum NDP\\v4\\Full Release value that counts as installed.",
    )


class WebView2Settings(BaseModel):
    url: Union[HttpUrl, str] = Field(default=WEBVIEW2_URL_DEFAULT, description="Evergreen bootstrapper URL.")
    file_name: str = "MicrosoftEdgeWebview2Setup.exe"
    arguments: str = "/silent /install"
    product_name: str = Field(
        default="WebView2 Runtime",
        description="Substring matched against installed products' DisplayName.",
    )


class AcrobatSettings(BaseModel):
    url: Union[HttpUrl, str] = Field(default=ACROBAT_URL_DEFAULT, description="Acrobat enterprise installer archive.")
    archive_file_name: str = "Acrobat_DC_Web_x64_WWMUI.zip"
    extracted_folder: str = Field(default="Adobe Acrobat", description="Folder created by the archive.")
    setup_file_name: str = "setup.exe"
    transform_url: Union[HttpUrl, str] = Field(
        default=f"{INSTALLER_STORAGE_BASE_URL_DEFAULT}/acrobat/AcroPro.mst",
        description="Customization Wizard transform applied at install time.",
    )
    transform_file_name: str = "AcroPro.mst"
    transform_subfolder: str = "Transforms"
    arguments: str = "/sAll /rs /msi EULA_ACCEPT=YES"


class Ams360Settings(BaseModel):
    url: Union[HttpUrl, str] = Field(
        default=f"{INSTALLER_STORAGE_BASE_URL_DEFAULT}/ams360/AMS360ClientSetup.exe",
        description="AMS360 client installer.",
    )
    file_name: str = "AMS360ClientSetup.exe"
    arguments: str = '/s /v"/qn REBOOT=ReallySuppress"'
    shortcuts: List[str] = Field(
        default_factory=lambda: [
            r"C:\Users\Public\Desktop\AMS360.lnk",
            r"C:\Users\Public\Desktop\AMS360 Client Setup.lnk",
        ],
        description="Shortcuts removed after install when present.",
    )


class ImageRightSettings(BaseModel):
    install_root: str = Field(default=r"C:\ImageRight", description="Vendor installation root.")
    installer_url: Union[HttpUrl, str] = Field(
        default=f"{INSTALLER_STORAGE_BASE_URL_DEFAULT}/imageright/WorkSmartSetup.exe",
        description="WorkSmart client installer.",
    )
    installer_file_name: str = "WorkSmartSetup.exe"
    installer_arguments: str = "/quiet /norestart"
    batch_file_name: str = "Install-WorkSmart.bat"
    helper_process_name: str = Field(
        default="ImageRight.Desktop.Helper.exe",
        description="Process killed once the installer has settled.",
    )
    service_prefix: str = Field(default="ImageRight", description="Services stopped and restarted around the config swap.")
    config_dir: str = Field(default=r"C:\ProgramData\ImageRight", description="Directory holding the client config files.")
    config_base_url: Union[HttpUrl, str] = f"{INSTALLER_STORAGE_BASE_URL_DEFAULT}/imageright/config"
    config_files: List[str] = Field(
        default_factory=lambda: ["ImageRight.Client.config", "WorkSmart.Settings.config"],
    )
    pre_kill_wait_seconds: int = Field(
        default=300,
        description="Delay before the helper process is killed (60s settle plus 4 x 60s).",
    )
    post_kill_wait_seconds: int = Field(default=300, description="Delay after the kill (5 x 60s).")
    service_start_timeout_seconds: int = Field(
        default=600,
        description="Ceiling for polling restarted services until they report Running.",
    )


class ChocolateySettings(BaseModel):
    bootstrap_url: Union[HttpUrl, str] = CHOCOLATEY_BOOTSTRAP_URL_DEFAULT
    script_file_name: str = "install-chocolatey.ps1"
    executable: str = r"C:\ProgramData\chocolatey\bin\choco.exe"
    packages: List[str] = Field(default_factory=lambda: list(CHOCOLATEY_PACKAGES_DEFAULT))
    install_flags: List[str] = Field(default_factory=lambda: ["-y", "--force", "--ignore-checksums"])


class OfficeSettings(BaseModel):
    setup_url: Union[HttpUrl, str] = Field(default=OFFICE_SETUP_URL_DEFAULT, description="Office Deployment Tool setup.exe.")
    file_name: str = "OfficeSetup.exe"
    configuration_file_name: str = "office-configuration.xml"
    product_id: str = "O365ProPlusRetail"
    channel: str = "MonthlyEnterprise"
    language: str = "en-us"
    shared_computer_licensing: bool = True
    excluded_apps: List[str] = Field(default_factory=lambda: ["Groove", "Lync", "OneDrive"])


class AgentSettings(BaseModel):
    """A product that needs nothing beyond download-and-run."""

    display_name: str
    url: Union[HttpUrl, str]
    file_name: str
    arguments: str


def _default_agents() -> Dict[str, AgentSettings]:
    return {
        "security_agent": AgentSettings(
            display_name="Endpoint security agent",
            url=f"{INSTALLER_STORAGE_BASE_URL_DEFAULT}/agents/SecurityAgentSetup.msi",
            file_name="SecurityAgentSetup.msi",
            arguments="/qn /norestart",
        ),
        "vpn_client": AgentSettings(
            display_name="VPN client",
            url=f"{INSTALLER_STORAGE_BASE_URL_DEFAULT}/agents/VPNClientSetup.exe",
            file_name="VPNClientSetup.exe",
            arguments="/quiet /norestart",
        ),
        "rmm_agent": AgentSettings(
            display_name="Remote monitoring agent",
            url=f"{INSTALLER_STORAGE_BASE_URL_DEFAULT}/agents/RMMAgentSetup.msi",
            file_name="RMMAgentSetup.msi",
            arguments="/qn /norestart",
        ),
        "office_addin": AgentSettings(
            display_name="Outlook add-in",
            url=f"{INSTALLER_STORAGE_BASE_URL_DEFAULT}/agents/OutlookAddinSetup.msi",
            file_name="OutlookAddinSetup.msi",
            arguments="/qn ALLUSERS=1",
        ),
    }


class SystemSettings(BaseModel):
    windows_features: List[str] = Field(
        default_factory=list,
        description="Optional Windows features enabled first, e.g. NetFx3.",
    )
    timezone: str = Field(default=TIMEZONE_DEFAULT, description="Windows timezone id passed to tzutil.")
    remove_quick_assist: bool = True


class AppSettings(BaseSettings):
    """Main application settings."""
    model_config = SettingsConfigDict(
        env_prefix="AVD_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    work_dir: str = Field(default=WORK_DIR_DEFAULT, description="Directory for extracted archives and generated files.")
    install_sequence: List[str] = Field(
        default_factory=lambda: [
            "imageright",
            "acrobat",
            "ams360",
            "office",
            "office_addin",
            "security_agent",
            "vpn_client",
            "rmm_agent",
        ],
        description="Product installers run by the orchestrator, in order.",
    )
    skip_steps: List[str] = Field(default_factory=list, description="Orchestration step names to leave out.")

    download: DownloadSettings = Field(default_factory=DownloadSettings)
    dotnet: DotNetSettings = Field(default_factory=DotNetSettings)
    webview2: WebView2Settings = Field(default_factory=WebView2Settings)
    acrobat: AcrobatSettings = Field(default_factory=AcrobatSettings)
    ams360: Ams360Settings = Field(default_factory=Ams360Settings)
    imageright: ImageRightSettings = Field(default_factory=ImageRightSettings)
    chocolatey: ChocolateySettings = Field(default_factory=ChocolateySettings)
    office: OfficeSettings = Field(default_factory=OfficeSettings)
    agents: Dict[str, AgentSettings] = Field(default_factory=_default_agents)
    system: SystemSettings = Field(default_factory=SystemSettings)

    symbols: Dict[str, str] = Field(default_factory=lambda: dict(SYMBOLS_DEFAULT))
