# avd_installer/config.py
# -*- coding: utf-8 -*-
"""
Centralized static constants for the AVD image build.

This module defines truly static values: logging symbols, registry key
paths used for presence probes and first-run suppression, and templates for
generated files.

Values that an operator may want to change per image (download URLs,
silent-install switches, package lists, timezone) are handled by
'avd_installer/config_models.py' and 'avd_installer/config_loader.py'.
"""

from typing import List, Tuple, Union

SCRIPT_VERSION: str = "2.3"

SYMBOLS: dict[str, str] = {
    "success": "✅",
    "error": "❌",
    "warning": "⚠️",
    "info": "ℹ️",
    "step": "➡️",
    "gear": "⚙️",
    "package": "📦",
    "rocket": "🚀",
    "sparkles": "✨",
    "critical": "🔥",
    "debug": "🐛",
}

# --- Registry locations probed before installing ---
DOTNET_FRAMEWORK_KEY: str = (
    r"HKLM:\SOFTWARE\Microsoft\NET Framework Setup\NDP\v4\Full"
)
DOTNET_RELEASE_VALUE: str = "Release"
# Release value written by .NET Framework 4.8 on every supported OS.
DOTNET48_MINIMUM_RELEASE: int = 528040

UNINSTALL_KEYS: List[str] = [
    r"HKLM:\SOFTWARE\Microsoft\Windows\CurrentVersion\Uninstall",
    r"HKLM:\SOFTWARE\WOW6432Node\Microsoft\Windows\CurrentVersion\Uninstall",
]

# --- First-run / OOBE suppression (hive path, value name, DWORD) ---
OOBE_REGISTRY_VALUES: List[Tuple[str, str, Union[int, str]]] = [
    (r"HKLM:\SOFTWARE\Policies\Microsoft\Windows\OOBE", "DisablePrivacyExperience", 1),
    (
        r"HKLM:\SOFTWARE\Microsoft\Windows\CurrentVersion\Policies\System",
        "EnableFirstLogonAnimation",
        0,
    ),
    (r"HKLM:\SOFTWARE\Microsoft\Windows NT\CurrentVersion\Winlogon", "EnableFirstLogonAnimation", 0),
    (r"HKLM:\SOFTWARE\Policies\Microsoft\Windows\CloudContent", "DisableWindowsConsumerFeatures", 1),
    (r"HKLM:\SOFTWARE\Policies\Microsoft\Edge", "HideFirstRunExperience", 1),
    (r"HKLM:\SOFTWARE\Policies\Microsoft\Office\16.0\Common\General", "ShownFirstRunOptin", 1),
]

# --- QuickAssist ---
QUICK_ASSIST_CAPABILITY: str = "App.Support.QuickAssist~~~~0.0.1.0"
QUICK_ASSIST_APPX: str = "MicrosoftCorporationII.QuickAssist"

# Installer exit codes that mean "success, reboot pending".
REBOOT_REQUIRED_EXIT_CODES: Tuple[int, ...] = (3010, 1641)

# taskkill.exe exit code when no process matched the image name.
TASKKILL_NOT_FOUND_EXIT_CODE: int = 128

WORKSMART_BATCH_TEMPLATE: str = """\
@echo off
rem WorkSmart client installation generated by avd-installer V{script_version}
cd /d "{install_root}"
"{installer_path}" {installer_arguments}
exit /b %ERRORLEVEL%
"""

OFFICE_CONFIGURATION_TEMPLATE: str = """\
<Configuration>
  <Add OfficeClientEdition="64" Channel="{channel}">
    <Product ID="{product_id}">
      <Language ID="{language}" />
{excluded_apps}
    </Product>
  </Add>
  <RemoveMSI />
  <Updates Enabled="FALSE" />
  <Display Level="None" AcceptEULA="TRUE" />
  <Property Name="FORCEAPPSHUTDOWN" Value="TRUE" />
  <Property Name="SharedComputerLicensing" Value="{shared_computer_licensing}" />
</Configuration>
"""
