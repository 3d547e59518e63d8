# avd_installer/common/command_utils.py
# -*- coding: utf-8 -*-
"""
Utilities for executing commands and logging their output.
"""

import ctypes
import logging
import shutil
import subprocess
from typing import Dict, List, Optional, Union

from avd_installer.config_models import SYMBOLS_DEFAULT, AppSettings

module_logger = logging.getLogger(__name__)

POWERSHELL_EXE = "powershell.exe"


def log_message(
    message: str,
    level: str = "info",
    current_logger: Optional[logging.Logger] = None,
    app_settings: Optional[AppSettings] = None,
    exc_info: bool = False,
) -> None:
    """
    Logs a message at the requested level. Unknown levels (such as "success")
    are logged at INFO.

    Args:
        message (str): The log message to be recorded.
        level (str): The severity level of the log message. Defaults to "info". Common options
            include "debug", "info", "warning", "error", and "critical".
        current_logger (Optional[logging.Logger]): A logger instance to use for logging. If not provided,
            a module-level logger will be used.
        app_settings (Optional[AppSettings]): Optional application settings that can influence logging behavior.
        exc_info (bool): Indicator to include exception details in the log. By default, this is set to False.
    """
    effective_logger = current_logger if current_logger else module_logger

    if level == "warning":
        effective_logger.warning(message, exc_info=exc_info)
    elif level == "error":
        effective_logger.error(message, exc_info=exc_info)
    elif level == "critical":
        effective_logger.critical(message, exc_info=exc_info)
    elif level == "debug":
        effective_logger.debug(message, exc_info=exc_info)
    else:
        effective_logger.info(message, exc_info=exc_info)


def get_symbols(app_settings: Optional[AppSettings]) -> Dict[str, str]:
    """Returns the configured log symbols, falling back to the defaults."""
    return (
        app_settings.symbols
        if app_settings and app_settings.symbols
        else SYMBOLS_DEFAULT
    )


def is_elevated() -> bool:
    """
    Reports whether the current process holds administrator rights.

    Image builds normally run as SYSTEM or a local administrator, in which
    case no elevation wrapper is required. Off Windows ``ctypes.windll`` does
    not exist and the process is treated as not elevated.
    """
    try:
        return bool(ctypes.windll.shell32.IsUserAnAdmin())
    except AttributeError:
        return False


def quote_powershell(value: str) -> str:
    """Wraps a value in single quotes for PowerShell, doubling embedded quotes."""
    return "'" + value.replace("'", "''") + "'"


def _get_elevated_command(command: List[str]) -> List[str]:
    """
    Builds the command that runs ``command`` with administrator rights.

    When the process is already elevated the command is returned unchanged.
    Otherwise it is wrapped in ``Start-Process -Verb RunAs -Wait`` and the
    wrapper exits with the child's exit code.
    """
    if is_elevated():
        return list(command)
    file_path, *arguments = command
    argument_list = ", ".join(quote_powershell(arg) for arg in arguments)
    script = f"$p = Start-Process -FilePath {quote_powershell(file_path)}"
    if argument_list:
        script += f" -ArgumentList {argument_list}"
    script += " -Verb RunAs -Wait -PassThru; exit $p.ExitCode"
    return [
        POWERSHELL_EXE,
        "-NoProfile",
        "-NonInteractive",
        "-ExecutionPolicy",
        "Bypass",
        "-Command",
        script,
    ]


def run_command(
    command: Union[List[str], str],
    app_settings: Optional[AppSettings],
    check: bool = True,
    shell: bool = False,
    capture_output: bool = False,
    text: bool = True,
    cmd_input: Optional[str] = None,
    current_logger: Optional[logging.Logger] = None,
    cwd: Optional[str] = None,
    env: Optional[Dict[str, str]] = None,
) -> subprocess.CompletedProcess:
    """
    Executes a command, blocks until it exits, and logs the process details and
    results, including both standard output and error, if captured.

    A string command is passed through unchanged as a Windows command line, so
    installer switches that carry their own quoting (``TRANSFORMS="..."``,
    ``/v"/qn"``) reach the process exactly as written.

    Args:
        command (Union[List[str], str]): The command to execute, as an argument list or
            a complete command line.
        app_settings (Optional[AppSettings]): Application settings providing log symbols.
            If not provided, default symbols are used.
        check (bool): Whether to raise a CalledProcessError when a non-zero exit code is returned.
            Defaults to True.
        shell (bool): If True, the command is executed through the shell. Defaults to False.
        capture_output (bool): Whether to capture standard output and standard error. Defaults to False.
        text (bool): Indicates if the output streams should be interpreted as text. Defaults to True.
        cmd_input (Optional[str]): Input to be passed to the command's standard input. Defaults to None.
        current_logger (Optional[logging.Logger]): A logger to use for logging details. If not provided,
            a default logger will be used.
        cwd (Optional[str]): The working directory for the command.
        env (Optional[Dict[str, str]]): Environment variables for the command. Defaults to the
            inherited environment of the current process.

    Returns:
        subprocess.CompletedProcess: The completed process instance.

    Raises:
        subprocess.CalledProcessError: Raised if the process returns a non-zero exit code and the check
            parameter is set to True.
        FileNotFoundError: Raised if the executable does not exist.
        OSError: Raised if the process cannot be launched.
    """
    effective_logger = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    command_to_log_str = (
        subprocess.list2cmdline(command)
        if isinstance(command, list)
        else command
    )

    log_message(
        f"{symbols.get('gear', '⚙️')} Executing: {command_to_log_str} {f'(in {cwd})' if cwd else ''}",
        "info",
        effective_logger,
        app_settings,
    )
    try:
        result = subprocess.run(
            command,
            check=check,
            shell=shell,
            capture_output=capture_output,
            text=text,
            input=cmd_input,
            cwd=cwd,
            env=env,
        )
        if capture_output:
            if result.stdout and result.stdout.strip():
                log_message(
                    f"   stdout: {result.stdout.strip()}",
                    "info",
                    effective_logger,
                    app_settings,
                )
            if (
                result.stderr
                and result.stderr.strip()
                and (not check or result.returncode == 0)
            ):
                log_message(
                    f"   stderr: {result.stderr.strip()}",
                    "info",
                    effective_logger,
                    app_settings,
                )
        return result
    except subprocess.CalledProcessError as e:
        stdout_info = (
            e.stdout.strip()
            if e.stdout and hasattr(e.stdout, "strip")
            else "N/A"
        )
        stderr_info = (
            e.stderr.strip()
            if e.stderr and hasattr(e.stderr, "strip")
            else "N/A"
        )
        cmd_executed_str = (
            subprocess.list2cmdline(e.cmd)
            if isinstance(e.cmd, list)
            else str(e.cmd)
        )

        log_message(
            f"{symbols.get('error', '❌')} Command `{cmd_executed_str}` failed (rc {e.returncode}).",
            "error",
            effective_logger,
            app_settings,
        )
        if stdout_info != "N/A":
            log_message(
                f"   stdout: {stdout_info}",
                "error",
                effective_logger,
                app_settings,
            )
        if stderr_info != "N/A":
            log_message(
                f"   stderr: {stderr_info}",
                "error",
                effective_logger,
                app_settings,
            )
        raise
    except FileNotFoundError as e:
        log_message(
            f"{symbols.get('error', '❌')} Command not found: {e.filename}. Ensure it exists and is on PATH.",
            "error",
            effective_logger,
            app_settings,
        )
        raise
    except Exception as e:
        log_message(
            f"{symbols.get('error', '❌')} Unexpected error running command `{command_to_log_str}`: {e}",
            "error",
            effective_logger,
            app_settings,
            exc_info=True,
        )
        raise


def run_elevated_command(
    command: List[str],
    app_settings: Optional[AppSettings],
    check: bool = True,
    capture_output: bool = False,
    current_logger: Optional[logging.Logger] = None,
    cwd: Optional[str] = None,
) -> subprocess.CompletedProcess:
    """
    Executes a command with administrator rights and waits for it to exit.

    Args:
        command: The command to execute, provided as a list of strings.
        app_settings: The application settings providing log symbols.
        check: If True, raises CalledProcessError on a non-zero exit code. Defaults to True.
        capture_output: If True, captures the output of the command. Defaults to False.
        current_logger: Logger used for command output and errors. Defaults to None.
        cwd: The working directory for the command. Defaults to None.

    Returns:
        subprocess.CompletedProcess: The result of the command execution.
    """
    return run_command(
        _get_elevated_command(command),
        app_settings,
        check=check,
        shell=False,
        capture_output=capture_output,
        text=True,
        current_logger=current_logger,
        cwd=cwd,
    )


def run_powershell(
    script: str,
    app_settings: Optional[AppSettings],
    check: bool = True,
    capture_output: bool = False,
    current_logger: Optional[logging.Logger] = None,
) -> subprocess.CompletedProcess:
    """Runs a PowerShell snippet non-interactively with the execution policy bypassed."""
    return run_command(
        [
            POWERSHELL_EXE,
            "-NoProfile",
            "-NonInteractive",
            "-ExecutionPolicy",
            "Bypass",
            "-Command",
            script,
        ],
        app_settings,
        check=check,
        capture_output=capture_output,
        current_logger=current_logger,
    )


def command_exists(command_name: str) -> bool:
    """
    Check if a command exists in the system's PATH.

    Parameters:
        command_name (str): The name of the command to check for existence.

    Returns:
        bool: True if the command is found in the system's PATH, False otherwise.
    """
    return shutil.which(command_name) is not None
