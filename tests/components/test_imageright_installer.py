from pathlib import Path
from unittest.mock import MagicMock, call

import pytest
import requests

from avd_installer.components.imageright import imageright_installer
from avd_installer.components.imageright.imageright_installer import ImageRightInstaller
from avd_installer.config import (
    DOTNET_FRAMEWORK_KEY,
    DOTNET_RELEASE_VALUE,
    UNINSTALL_KEYS,
)


@pytest.fixture
def prerequisites_present(registry_factory):
    key = UNINSTALL_KEYS[0]
    return registry_factory(
        values={
            (DOTNET_FRAMEWORK_KEY, DOTNET_RELEASE_VALUE): 528040,
            (f"{key}\\WebView2", "DisplayName"): "Microsoft Edge WebView2 Runtime",
        },
        subkeys={key: ["WebView2"]},
    )


@pytest.fixture
def patched_steps(mocker):
    return {
        "download_file": mocker.patch.object(imageright_installer, "download_file"),
        "run_elevated_command": mocker.patch.object(
            imageright_installer,
            "run_elevated_command",
            return_value=MagicMock(returncode=0),
        ),
        "kill_process": mocker.patch.object(
            imageright_installer, "kill_process", return_value=True
        ),
        "get_services_by_prefix": mocker.patch.object(
            imageright_installer, "get_services_by_prefix", return_value=[]
        ),
    }


def test_install_without_services_sleeps_fixed_delays(
    mocker, prerequisites_present, patched_steps, app_settings, mock_logger
):
    mock_download_and_run = mocker.patch("avd_installer.base_component.download_and_run")
    sleep = MagicMock()
    installer = ImageRightInstaller(
        app_settings, mock_logger, prerequisites_present, sleep=sleep
    )

    assert installer.install() is True

    mock_download_and_run.assert_not_called()
    assert [c.args[0] for c in sleep.call_args_list] == [300, 300]
    patched_steps["kill_process"].assert_called_once_with(
        "ImageRight.Desktop.Helper.exe", app_settings, mock_logger
    )
    assert any(
        "No services match" in c.args[0] for c in mock_logger.warning.call_args_list
    )


def test_batch_script_written_and_run_elevated(
    prerequisites_present, patched_steps, app_settings, mock_logger
):
    installer = ImageRightInstaller(
        app_settings, mock_logger, prerequisites_present, sleep=MagicMock()
    )

    installer.install()

    install_root = Path(app_settings.imageright.install_root)
    batch = install_root / "Install-WorkSmart.bat"
    content = batch.read_text(encoding="utf-8")
    assert f'"{install_root / "WorkSmartSetup.exe"}" /quiet /norestart' in content
    assert str(installer.installer_path) in content
    assert "V2.3" in content
    assert patched_steps["download_file"].call_args_list[0].args[1] == (
        install_root / "WorkSmartSetup.exe"
    )
    args, kwargs = patched_steps["run_elevated_command"].call_args
    assert args[0] == ["cmd.exe", "/c", str(batch)]
    assert kwargs["check"] is False
    assert kwargs["cwd"] == str(install_root)


def test_refresh_services_swaps_config_between_stop_and_start(
    mocker, patched_steps, app_settings, mock_logger
):
    config_dir = Path(app_settings.imageright.config_dir)
    config_dir.mkdir(parents=True)
    for name in app_settings.imageright.config_files:
        (config_dir / name).write_text("old")
    patched_steps["get_services_by_prefix"].return_value = ["ImageRightClient"]
    manager = MagicMock()
    manager.attach_mock(
        mocker.patch.object(imageright_installer, "stop_services"), "stop"
    )
    manager.attach_mock(patched_steps["download_file"], "download")
    manager.attach_mock(
        mocker.patch.object(imageright_installer, "start_services"), "start"
    )
    manager.attach_mock(
        mocker.patch.object(
            imageright_installer, "await_service_state", return_value=True
        ),
        "await_state",
    )
    sleep = MagicMock()
    installer = ImageRightInstaller(app_settings, mock_logger, sleep=sleep)

    assert installer.refresh_services() == ["ImageRightClient"]

    names = [c[0] for c in manager.mock_calls]
    assert names == ["stop", "download", "download", "start", "await_state"]
    assert not any((config_dir / n).exists() for n in app_settings.imageright.config_files)
    assert manager.mock_calls[1].args[0] == (
        "https://assets.example.test/imageright/config/ImageRight.Client.config"
    )
    assert manager.mock_calls[4] == call.await_state(
        ["ImageRightClient"], "Running", 600, app_settings, mock_logger, sleep=sleep
    )


def test_services_restart_when_config_download_fails(
    mocker, patched_steps, app_settings, mock_logger
):
    patched_steps["get_services_by_prefix"].return_value = ["ImageRightClient"]
    patched_steps["download_file"].side_effect = requests.exceptions.HTTPError("503")
    mock_stop = mocker.patch.object(imageright_installer, "stop_services")
    mock_start = mocker.patch.object(imageright_installer, "start_services")
    mock_await = mocker.patch.object(
        imageright_installer, "await_service_state", return_value=True
    )
    installer = ImageRightInstaller(app_settings, mock_logger, sleep=MagicMock())

    with pytest.raises(requests.exceptions.HTTPError):
        installer.refresh_services()

    mock_stop.assert_called_once_with(["ImageRightClient"], app_settings, mock_logger)
    mock_start.assert_called_once_with(["ImageRightClient"], app_settings, mock_logger)
    assert mock_await.call_args.args[:2] == (["ImageRightClient"], "Running")


def test_prerequisites_installed_before_client(
    mocker, fake_registry, patched_steps, app_settings, mock_logger
):
    order = []
    mocker.patch(
        "avd_installer.base_component.download_and_run",
        side_effect=lambda url, file_name, *a, **k: order.append(file_name),
    )
    patched_steps["download_file"].side_effect = (
        lambda url, dest, *a, **k: order.append(Path(dest).name)
    )
    installer = ImageRightInstaller(
        app_settings, mock_logger, fake_registry, sleep=MagicMock()
    )

    installer.install()

    assert order[:3] == [
        "ndp48-x86-x64-allos-enu.exe",
        "MicrosoftEdgeWebview2Setup.exe",
        "WorkSmartSetup.exe",
    ]
