# avd_installer/common/network_utils.py
# -*- coding: utf-8 -*-
"""
Downloading installers and running them.

``download_and_run`` is the primitive every product installer is built on:
fetch a URL into the temp directory, launch the file with its silent-install
switches, and block until it exits.
"""

import logging
import subprocess
from pathlib import Path
from typing import Optional, Union

import requests

from avd_installer.config import REBOOT_REQUIRED_EXIT_CODES
from avd_installer.config_models import AppSettings, DownloadSettings

from .command_utils import get_symbols, log_message, run_command
from .file_utils import get_temp_path
from .logging_config import log_performance

module_logger = logging.getLogger(__name__)


def download_file(
    url: str,
    destination: Union[str, Path],
    download_settings: DownloadSettings,
    app_settings: Optional[AppSettings] = None,
    current_logger: Optional[logging.Logger] = None,
) -> Path:
    """
    Download ``url`` to ``destination``, replacing any existing file.

    Args:
        url: The HTTP(S) URL to fetch.
        destination: The file path where the content is written.
        download_settings: Chunk size, timeout and progress reporting for this download.
        app_settings: Application settings for log symbols.
        current_logger: Optional logger instance.

    Returns:
        The destination path.

    Raises:
        requests.exceptions.RequestException: On HTTP errors, connection errors or timeouts.
        OSError: If the destination cannot be written.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    download_path = Path(destination)
    log_message(
        f"{symbols.get('step', '➡️')} Downloading {url} to {download_path}",
        "info",
        logger_to_use,
        app_settings,
    )
    response: Optional[requests.Response] = None

    try:
        download_path.parent.mkdir(parents=True, exist_ok=True)
        response = requests.get(
            url, stream=True, timeout=download_settings.timeout_seconds
        )
        response.raise_for_status()

        total = int(response.headers.get("Content-Length") or 0)
        written = 0
        with open(download_path, "wb") as f:
            for chunk in response.iter_content(
                chunk_size=download_settings.chunk_size
            ):
                if chunk:
                    f.write(chunk)
                    written += len(chunk)
                    if download_settings.show_progress:
                        progress = f"{written}/{total}" if total else str(written)
                        log_message(
                            f"   {download_path.name}: {progress} bytes",
                            "debug",
                            logger_to_use,
                            app_settings,
                        )
        log_message(
            f"{symbols.get('success', '✅')} Downloaded {written} bytes to {download_path}",
            "success",
            logger_to_use,
            app_settings,
        )
        return download_path
    except requests.exceptions.HTTPError as http_err:
        status_code = response.status_code if response is not None else "Unknown"
        log_message(
            f"{symbols.get('error', '❌')} HTTP error downloading {url}: {http_err} - Status code: {status_code}",
            "error",
            logger_to_use,
            app_settings,
        )
        raise
    except requests.exceptions.RequestException as req_err:
        log_message(
            f"{symbols.get('error', '❌')} Download of {url} failed: {req_err}",
            "error",
            logger_to_use,
            app_settings,
        )
        raise
    except OSError as io_err:
        log_message(
            f"{symbols.get('error', '❌')} File I/O error saving {url} to {download_path}: {io_err}",
            "error",
            logger_to_use,
            app_settings,
        )
        raise
    finally:
        if response is not None:
            response.close()


def build_command_line(file_path: Union[str, Path], arguments: str) -> str:
    """
    Builds the command line that launches a downloaded file.

    MSI packages go through ``msiexec.exe /i`` and PowerShell scripts through
    ``powershell.exe -File``; anything else is executed directly.
    """
    path_str = str(file_path)
    suffix = Path(path_str).suffix.lower()
    if suffix == ".msi":
        command_line = f'msiexec.exe /i "{path_str}"'
    elif suffix == ".ps1":
        command_line = (
            "powershell.exe -NoProfile -NonInteractive -ExecutionPolicy Bypass "
            f'-File "{path_str}"'
        )
    else:
        command_line = f'"{path_str}"'
    return f"{command_line} {arguments}".rstrip()


def run_installer(
    file_path: Union[str, Path],
    arguments: str,
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
    cwd: Optional[str] = None,
) -> subprocess.CompletedProcess:
    """
    Launches an installer with its switches and waits for it to exit.

    Non-zero exit codes are logged and returned; they do not raise. Launch
    failures (missing file, access denied) propagate.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    result = run_command(
        build_command_line(file_path, arguments),
        app_settings,
        check=False,
        current_logger=logger_to_use,
        cwd=cwd,
    )
    if result.returncode in REBOOT_REQUIRED_EXIT_CODES:
        log_message(
            f"{symbols.get('info', 'ℹ️')} {Path(file_path).name} exited with {result.returncode} (reboot required).",
            "info",
            logger_to_use,
            app_settings,
        )
    elif result.returncode != 0:
        log_message(
            f"{symbols.get('warning', '⚠️')} {Path(file_path).name} exited with code {result.returncode}.",
            "warning",
            logger_to_use,
            app_settings,
        )
    return result


@log_performance
def download_and_run(
    url: str,
    file_name: str,
    arguments: str,
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> subprocess.CompletedProcess:
    """
    Downloads ``url`` to ``file_name`` and runs it with ``arguments``.

    The file lands in the OS temp directory. The same path that was
    written is the one launched.

    Args:
        url: Installer URL.
        file_name: Local file name for the download.
        arguments: Silent-install switches passed to the installer.
        app_settings: Application settings (download options, log symbols).
        current_logger: Optional logger instance.

    Returns:
        The completed installer process.
    """
    logger_to_use = current_logger if current_logger else module_logger
    local_path = get_temp_path(file_name)
    download_file(
        str(url),
        local_path,
        app_settings.download,
        app_settings,
        current_logger=logger_to_use,
    )
    return run_installer(
        local_path, arguments, app_settings, current_logger=logger_to_use
    )
