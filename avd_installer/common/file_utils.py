# avd_installer/common/file_utils.py
# -*- coding: utf-8 -*-
"""
File system utility functions: temp paths, archive extraction, generated
files and shortcut cleanup.
"""

import logging
import tempfile
import zipfile
from pathlib import Path
from typing import Iterable, List, Optional, Union

from avd_installer.config_models import AppSettings

from .command_utils import get_symbols, log_message

module_logger = logging.getLogger(__name__)


def get_temp_path(file_name: str) -> Path:
    """
    Returns the absolute path of ``file_name`` inside the OS temp directory.

    The file is not created and may or may not exist.
    """
    return Path(tempfile.gettempdir()).resolve() / file_name


def remove_file_if_exists(
    file_path: Union[str, Path],
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
) -> bool:
    """
    Deletes a file when it exists.

    Returns:
        bool: True if a file was deleted, False if there was nothing to delete.

    Raises:
        OSError: If the file exists but cannot be removed (e.g. it is in use).
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    path = Path(file_path)
    if not path.is_file():
        log_message(
            f"{symbols.get('debug', '🐛')} {path} not present, nothing to remove.",
            "debug",
            logger_to_use,
            app_settings,
        )
        return False
    try:
        path.unlink()
    except OSError as e:
        log_message(
            f"{symbols.get('error', '❌')} Could not remove {path}: {e}",
            "error",
            logger_to_use,
            app_settings,
        )
        raise
    log_message(
        f"{symbols.get('success', '✅')} Removed {path}",
        "success",
        logger_to_use,
        app_settings,
    )
    return True


def remove_files(
    file_paths: Iterable[Union[str, Path]],
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
) -> List[Path]:
    """Removes each file that exists and returns the ones actually deleted."""
    return [
        Path(p)
        for p in file_paths
        if remove_file_if_exists(p, app_settings, current_logger)
    ]


def extract_archive(
    archive_path: Union[str, Path],
    extract_to_dir: Union[str, Path],
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
) -> Path:
    """
    Extracts a ZIP archive into a directory, overwriting files already there.

    Args:
        archive_path: The path to the ZIP file.
        extract_to_dir: The directory to extract files into. Created if missing.
        app_settings: Application settings for log symbols.
        current_logger: Optional logger instance.

    Returns:
        Path: The extraction directory.

    Raises:
        zipfile.BadZipFile: If the archive is corrupt or not a ZIP file.
        OSError: On any file system error.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    zip_path = Path(archive_path)
    extract_path = Path(extract_to_dir)

    log_message(
        f"{symbols.get('package', '📦')} Extracting '{zip_path}' to '{extract_path}'",
        "info",
        logger_to_use,
        app_settings,
    )
    try:
        extract_path.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(zip_path, "r") as zip_ref:
            zip_ref.extractall(extract_path)
    except zipfile.BadZipFile:
        log_message(
            f"{symbols.get('error', '❌')} '{zip_path}' is not a valid zip file or is corrupted.",
            "error",
            logger_to_use,
            app_settings,
        )
        raise
    except OSError as e:
        log_message(
            f"{symbols.get('error', '❌')} File I/O error during extraction of '{zip_path}': {e}",
            "error",
            logger_to_use,
            app_settings,
        )
        raise
    return extract_path


def write_text_file(
    file_path: Union[str, Path],
    content: str,
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
    encoding: str = "utf-8",
) -> Path:
    """Writes ``content`` to ``file_path``, creating parent directories as needed."""
    logger_to_use = current_logger if current_logger else module_logger
    path = Path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding=encoding)
    log_message(
        f"{get_symbols(app_settings).get('info', 'ℹ️')} Wrote {path}",
        "info",
        logger_to_use,
        app_settings,
    )
    return path
