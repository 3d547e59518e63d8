from unittest.mock import MagicMock

import pytest

from avd_installer.common import service_utils
from avd_installer.common.service_utils import (
    await_service_state,
    get_service_states,
    get_services_by_prefix,
    kill_process,
    start_services,
    stop_services,
)


@pytest.fixture
def mock_powershell(mocker):
    return mocker.patch.object(service_utils, "run_powershell")


def test_get_services_by_prefix_parses_lines(mock_powershell, app_settings):
    mock_powershell.return_value = MagicMock(
        stdout="ImageRightClientService\r\n\r\nImageRightUpdater\r\n"
    )

    services = get_services_by_prefix("ImageRight", app_settings)

    assert services == ["ImageRightClientService", "ImageRightUpdater"]
    assert "'ImageRight*'" in mock_powershell.call_args.args[0]


def test_get_service_states(mock_powershell, app_settings):
    mock_powershell.return_value = MagicMock(stdout="A=Running\nB=Stopped\n")
    assert get_service_states(["A", "B"], app_settings) == {
        "A": "Running",
        "B": "Stopped",
    }


def test_stop_and_start_skip_empty_lists(mock_powershell, app_settings):
    stop_services([], app_settings)
    start_services([], app_settings)
    assert get_service_states([], app_settings) == {}
    mock_powershell.assert_not_called()


def test_stop_and_start_services(mock_powershell, app_settings):
    stop_services(["A", "B"], app_settings)
    start_services(["A"], app_settings)

    stop_script = mock_powershell.call_args_list[0].args[0]
    start_script = mock_powershell.call_args_list[1].args[0]
    assert stop_script == "Stop-Service -Name 'A', 'B' -Force"
    assert start_script == "Start-Service -Name 'A'"


@pytest.mark.parametrize("returncode, expected", [(0, True), (128, False), (1, False)])
def test_kill_process(mocker, app_settings, mock_logger, returncode, expected):
    mock_run = mocker.patch.object(
        service_utils, "run_command", return_value=MagicMock(returncode=returncode)
    )

    assert kill_process("Helper.exe", app_settings, mock_logger) is expected
    assert mock_run.call_args.args[0] == ["taskkill.exe", "/F", "/IM", "Helper.exe"]
    if returncode == 1:
        mock_logger.warning.assert_called_once()


def test_await_service_state_no_services_returns_immediately(app_settings):
    sleep = MagicMock()
    assert await_service_state([], "Running", 600, app_settings, sleep=sleep) is True
    sleep.assert_not_called()


def test_await_service_state_backs_off_until_running(mocker, app_settings):
    mocker.patch.object(
        service_utils,
        "get_service_states",
        side_effect=[{"A": "StartPending"}, {"A": "StartPending"}, {"A": "Running"}],
    )
    sleep = MagicMock()

    assert await_service_state(["A"], "Running", 600, app_settings, sleep=sleep) is True
    assert [c.args[0] for c in sleep.call_args_list] == [5.0, 10.0]


def test_await_service_state_never_exceeds_timeout(mocker, app_settings, mock_logger):
    mocker.patch.object(
        service_utils, "get_service_states", return_value={"A": "Stopped"}
    )
    sleep = MagicMock()

    result = await_service_state(
        ["A"], "Running", 100, app_settings, mock_logger, sleep=sleep
    )

    assert result is False
    delays = [c.args[0] for c in sleep.call_args_list]
    assert delays == [5.0, 10.0, 20.0, 40.0, 25.0]
    assert sum(delays) == 100
    mock_logger.warning.assert_called_once()
