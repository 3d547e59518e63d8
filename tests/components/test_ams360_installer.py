from pathlib import Path

from avd_installer.components.ams360.ams360_installer import Ams360Installer


def test_ams360_runs_installer_then_removes_shortcuts(mocker, app_settings, mock_logger):
    mock_download_and_run = mocker.patch("avd_installer.base_component.download_and_run")
    shortcuts = [Path(p) for p in app_settings.ams360.shortcuts]
    for shortcut in shortcuts:
        shortcut.parent.mkdir(parents=True, exist_ok=True)
        shortcut.write_text("lnk")

    assert Ams360Installer(app_settings, mock_logger).install() is True

    mock_download_and_run.assert_called_once()
    assert mock_download_and_run.call_args.args[2] == '/s /v"/qn REBOOT=ReallySuppress"'
    assert not any(s.exists() for s in shortcuts)


def test_ams360_shortcut_removal_is_idempotent(mocker, app_settings, mock_logger):
    mocker.patch("avd_installer.base_component.download_and_run")
    installer = Ams360Installer(app_settings, mock_logger)

    installer.install()
    installer.install()

    mock_logger.info.assert_any_call("Removed 0 of 2 AMS360 shortcuts.")


def test_ams360_removes_only_the_shortcut_present(mocker, app_settings, mock_logger):
    mocker.patch("avd_installer.base_component.download_and_run")
    present, absent = [Path(p) for p in app_settings.ams360.shortcuts]
    present.parent.mkdir(parents=True, exist_ok=True)
    present.write_text("lnk")
    sibling = present.parent / "Outlook.lnk"
    sibling.write_text("lnk")

    assert Ams360Installer(app_settings, mock_logger).install() is True

    assert not present.exists()
    assert not absent.exists()
    assert sibling.exists()
    mock_logger.info.assert_any_call("Removed 1 of 2 AMS360 shortcuts.")
