# avd_installer/common/registry_utils.py
# -*- coding: utf-8 -*-
"""
Windows registry access.

Registry paths are written the PowerShell way (``HKLM:\\SOFTWARE\\...``).
Code that reads or writes the registry takes a ``RegistryAccessor`` so tests
can substitute an in-memory implementation.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, List, Optional, Tuple, Union

from avd_installer.config import UNINSTALL_KEYS

module_logger = logging.getLogger(__name__)

RegistryValue = Union[str, int]

HIVE_NAMES = ("HKLM", "HKCU", "HKCR", "HKU", "HKCC")


def split_registry_path(path: str) -> Tuple[str, str]:
    """
    Splits ``HKLM:\\SOFTWARE\\Foo`` into ``("HKLM", "SOFTWARE\\Foo")``.

    Raises:
        ValueError: If the path has no hive prefix or names an unknown hive.
    """
    cleaned = path.replace("/", "\\")
    marker = ":\\"
    if marker not in cleaned:
        raise ValueError(f"Invalid registry path: {path}")
    hive_name, subkey = cleaned.split(marker, 1)
    hive_name = hive_name.upper()
    if hive_name not in HIVE_NAMES:
        raise ValueError(f"Unsupported hive: {hive_name}")
    return hive_name, subkey.strip("\\")


class RegistryAccessor(ABC):
    """Read/write access to registry values."""

    @abstractmethod
    def get_value(self, path: str, value_name: str) -> Optional[RegistryValue]:
        """Returns the value, or None when the key or value does not exist."""

    @abstractmethod
    def set_value(self, path: str, value_name: str, value: RegistryValue) -> None:
        """Creates the key if needed and writes the value (int as DWORD, str as SZ)."""

    @abstractmethod
    def list_subkeys(self, path: str) -> List[str]:
        """Returns the names of the key's direct subkeys, or [] when the key is absent."""


class WindowsRegistryAccessor(RegistryAccessor):
    """Registry accessor backed by ``winreg``."""

    def __init__(self) -> None:
        import winreg

        self._winreg = winreg

    def _open(self, path: str, access: Optional[int] = None) -> Any:
        hive_name, subkey = split_registry_path(path)
        hive = getattr(self._winreg, _HIVE_CONSTANTS[hive_name])
        if access is None:
            access = self._winreg.KEY_READ
        return self._winreg.OpenKey(hive, subkey, 0, access)

    def get_value(self, path: str, value_name: str) -> Optional[RegistryValue]:
        try:
            with self._open(path) as key:
                value, _ = self._winreg.QueryValueEx(key, value_name)
                return value
        except FileNotFoundError:
            return None

    def set_value(self, path: str, value_name: str, value: RegistryValue) -> None:
        hive_name, subkey = split_registry_path(path)
        hive = getattr(self._winreg, _HIVE_CONSTANTS[hive_name])
        value_type = (
            self._winreg.REG_DWORD
            if isinstance(value, int)
            else self._winreg.REG_SZ
        )
        with self._winreg.CreateKeyEx(
            hive, subkey, 0, self._winreg.KEY_SET_VALUE
        ) as key:
            self._winreg.SetValueEx(key, value_name, 0, value_type, value)

    def list_subkeys(self, path: str) -> List[str]:
        names: List[str] = []
        try:
            with self._open(path) as key:
                index = 0
                while True:
                    try:
                        names.append(self._winreg.EnumKey(key, index))
                    except OSError:
                        break
                    index += 1
        except FileNotFoundError:
            return []
        return names


_HIVE_CONSTANTS = {
    "HKLM": "HKEY_LOCAL_MACHINE",
    "HKCU": "HKEY_CURRENT_USER",
    "HKCR": "HKEY_CLASSES_ROOT",
    "HKU": "HKEY_USERS",
    "HKCC": "HKEY_CURRENT_CONFIG",
}


def get_installed_products(
    registry: RegistryAccessor,
    current_logger: Optional[logging.Logger] = None,
) -> List[str]:
    """
    Lists the DisplayName of every product under the 64- and 32-bit
    Uninstall keys. Entries without a DisplayName are skipped.
    """
    logger_to_use = current_logger if current_logger else module_logger
    products: List[str] = []
    for uninstall_key in UNINSTALL_KEYS:
        for subkey in registry.list_subkeys(uninstall_key):
            display_name = registry.get_value(
                f"{uninstall_key}\\{subkey}", "DisplayName"
            )
            if display_name:
                products.append(str(display_name))
    logger_to_use.debug(f"Found {len(products)} installed products.")
    return products
