from avd_installer.components.webview2.webview2_installer import WebView2Installer
from avd_installer.config import UNINSTALL_KEYS


def test_webview2_skipped_when_listed(
    mocker, registry_factory, app_settings, mock_logger
):
    wow64 = UNINSTALL_KEYS[1]
    registry = registry_factory(
        values={
            (f"{wow64}\\Microsoft EdgeWebView", "DisplayName"): "Microsoft Edge WebView2 Runtime"
        },
        subkeys={wow64: ["Microsoft EdgeWebView"]},
    )
    mock_download_and_run = mocker.patch("avd_installer.base_component.download_and_run")

    assert WebView2Installer(app_settings, mock_logger, registry).install() is False
    mock_download_and_run.assert_not_called()


def test_webview2_installed_when_absent(mocker, fake_registry, app_settings, mock_logger):
    mock_download_and_run = mocker.patch("avd_installer.base_component.download_and_run")

    assert WebView2Installer(app_settings, mock_logger, fake_registry).install() is True

    args = mock_download_and_run.call_args.args
    assert args[1:3] == ("MicrosoftEdgeWebview2Setup.exe", "/silent /install")
