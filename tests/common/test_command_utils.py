import subprocess
from unittest.mock import MagicMock

import pytest

from avd_installer.common.command_utils import (
    POWERSHELL_EXE,
    _get_elevated_command,
    command_exists,
    get_symbols,
    log_message,
    quote_powershell,
    run_command,
    run_elevated_command,
    run_powershell,
)
from avd_installer.config_models import SYMBOLS_DEFAULT


def test_log_message_levels(mock_logger):
    log_message("warn", "warning", mock_logger)
    log_message("boom", "error", mock_logger)
    log_message("done", "success", mock_logger)

    mock_logger.warning.assert_called_once_with("warn", exc_info=False)
    mock_logger.error.assert_called_once_with("boom", exc_info=False)
    mock_logger.info.assert_called_once_with("done", exc_info=False)


def test_get_symbols_falls_back_to_defaults(app_settings):
    app_settings.symbols = {}
    assert get_symbols(app_settings) == SYMBOLS_DEFAULT
    assert get_symbols(None) == SYMBOLS_DEFAULT


def test_quote_powershell_doubles_single_quotes():
    assert quote_powershell("O'Brien") == "'O''Brien'"


def test_run_command_string_passed_through(mocker, mock_logger, app_settings):
    mock_run = mocker.patch(
        "avd_installer.common.command_utils.subprocess.run",
        return_value=subprocess.CompletedProcess("cmd", 0),
    )
    command = '"C:\\Temp\\setup.exe" /s /v"/qn REBOOT=ReallySuppress"'

    result = run_command(command, app_settings, check=False, current_logger=mock_logger)

    assert result.returncode == 0
    assert mock_run.call_args.args[0] == command
    assert mock_run.call_args.kwargs["check"] is False


def test_run_command_logs_and_reraises_called_process_error(
    mocker, mock_logger, app_settings
):
    error = subprocess.CalledProcessError(
        2, ["tzutil.exe", "/s", "Nowhere"], output="", stderr="Invalid timezone"
    )
    mocker.patch(
        "avd_installer.common.command_utils.subprocess.run", side_effect=error
    )

    with pytest.raises(subprocess.CalledProcessError):
        run_command(
            ["tzutil.exe", "/s", "Nowhere"], app_settings, current_logger=mock_logger
        )

    logged = [c.args[0] for c in mock_logger.error.call_args_list]
    assert any("failed (rc 2)" in m for m in logged)
    assert any("Invalid timezone" in m for m in logged)


def test_run_command_missing_executable(mocker, mock_logger, app_settings):
    mocker.patch(
        "avd_installer.common.command_utils.subprocess.run",
        side_effect=FileNotFoundError(2, "not found", "missing.exe"),
    )

    with pytest.raises(FileNotFoundError):
        run_command(["missing.exe"], app_settings, current_logger=mock_logger)

    assert "missing.exe" in mock_logger.error.call_args.args[0]


def test_elevated_command_unchanged_when_admin(mocker):
    mocker.patch("avd_installer.common.command_utils.is_elevated", return_value=True)
    assert _get_elevated_command(["cmd.exe", "/c", "x.bat"]) == ["cmd.exe", "/c", "x.bat"]


def test_elevated_command_wraps_in_runas(mocker):
    mocker.patch("avd_installer.common.command_utils.is_elevated", return_value=False)

    command = _get_elevated_command(["cmd.exe", "/c", r"C:\ImageRight\Install-WorkSmart.bat"])

    assert command[0] == POWERSHELL_EXE
    script = command[-1]
    assert "-FilePath 'cmd.exe'" in script
    assert r"-ArgumentList '/c', 'C:\ImageRight\Install-WorkSmart.bat'" in script
    assert "-Verb RunAs -Wait -PassThru" in script
    assert script.endswith("exit $p.ExitCode")


def test_run_elevated_command_delegates(mocker, app_settings):
    mocker.patch("avd_installer.common.command_utils.is_elevated", return_value=True)
    mock_run = mocker.patch(
        "avd_installer.common.command_utils.run_command",
        return_value=MagicMock(returncode=0),
    )

    run_elevated_command(["cmd.exe", "/c", "a.bat"], app_settings, check=False, cwd="C:\\x")

    args, kwargs = mock_run.call_args
    assert args[0] == ["cmd.exe", "/c", "a.bat"]
    assert kwargs["check"] is False
    assert kwargs["cwd"] == "C:\\x"


def test_run_powershell_builds_noninteractive_command(mocker, app_settings):
    mock_run = mocker.patch(
        "avd_installer.common.command_utils.run_command",
        return_value=MagicMock(returncode=0),
    )

    run_powershell("Get-Service", app_settings, capture_output=True)

    command = mock_run.call_args.args[0]
    assert command[0] == POWERSHELL_EXE
    assert "-NonInteractive" in command
    assert command[-2:] == ["-Command", "Get-Service"]
    assert mock_run.call_args.kwargs["capture_output"] is True


def test_command_exists(mocker):
    mocker.patch("avd_installer.common.command_utils.shutil.which", return_value=None)
    assert command_exists("choco") is False
