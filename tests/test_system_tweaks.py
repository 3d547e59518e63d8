import subprocess
from unittest.mock import MagicMock

from avd_installer import system_tweaks
from avd_installer.config import OOBE_REGISTRY_VALUES
from avd_installer.system_tweaks import (
    enable_windows_features,
    remove_quick_assist,
    set_timezone,
    suppress_first_run_experience,
)


def test_enable_windows_features_none_configured(mocker, app_settings):
    mock_ps = mocker.patch.object(system_tweaks, "run_powershell")
    enable_windows_features(app_settings)
    mock_ps.assert_not_called()


def test_enable_windows_features(mocker, app_settings):
    app_settings.system.windows_features = ["NetFx3"]
    mock_ps = mocker.patch.object(system_tweaks, "run_powershell")

    enable_windows_features(app_settings)

    script = mock_ps.call_args.args[0]
    assert "Enable-WindowsOptionalFeature -Online -FeatureName 'NetFx3'" in script
    assert "-NoRestart" in script


def test_remove_quick_assist_failure_is_not_raised(mocker, app_settings, mock_logger):
    mocker.patch.object(
        system_tweaks,
        "run_powershell",
        side_effect=subprocess.CalledProcessError(1, "powershell.exe"),
    )

    assert remove_quick_assist(app_settings, mock_logger) is False
    assert "QuickAssist removal failed" in mock_logger.warning.call_args.args[0]


def test_remove_quick_assist_disabled(mocker, app_settings):
    app_settings.system.remove_quick_assist = False
    mock_ps = mocker.patch.object(system_tweaks, "run_powershell")

    assert remove_quick_assist(app_settings) is True
    mock_ps.assert_not_called()


def test_set_timezone(mocker, app_settings):
    mock_run = mocker.patch.object(
        system_tweaks, "run_command", return_value=MagicMock(returncode=0)
    )

    set_timezone(app_settings)

    assert mock_run.call_args.args[0] == ["tzutil.exe", "/s", "Eastern Standard Time"]
    assert mock_run.call_args.kwargs["check"] is True


def test_suppress_first_run_experience_writes_every_value(app_settings, fake_registry):
    count = suppress_first_run_experience(app_settings, fake_registry)

    assert count == len(OOBE_REGISTRY_VALUES)
    assert fake_registry.writes == list(OOBE_REGISTRY_VALUES)
    assert fake_registry.get_value(
        r"HKLM:\SOFTWARE\Policies\Microsoft\Edge", "HideFirstRunExperience"
    ) == 1
