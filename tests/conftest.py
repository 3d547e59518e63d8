# tests/conftest.py
import logging
from typing import Dict, List, Optional, Tuple
from unittest.mock import MagicMock

import pytest

from avd_installer.common.preconditions import PreconditionChecker
from avd_installer.common.registry_utils import RegistryAccessor, RegistryValue
from avd_installer.components import load_all_components
from avd_installer.config_models import AppSettings


class FakeRegistryAccessor(RegistryAccessor):
    """In-memory registry keyed by (path, value name)."""

    def __init__(
        self,
        values: Optional[Dict[Tuple[str, str], RegistryValue]] = None,
        subkeys: Optional[Dict[str, List[str]]] = None,
    ):
        self.values = dict(values or {})
        self.subkeys = dict(subkeys or {})
        self.writes: List[Tuple[str, str, RegistryValue]] = []

    def get_value(self, path, value_name):
        return self.values.get((path, value_name))

    def set_value(self, path, value_name, value):
        self.values[(path, value_name)] = value
        self.writes.append((path, value_name, value))

    def list_subkeys(self, path):
        return list(self.subkeys.get(path, []))


class FakePreconditionChecker(PreconditionChecker):
    def __init__(self, satisfied: bool):
        self.satisfied = satisfied
        self.description = "fake probe"
        self.calls = 0

    def probe(self) -> bool:
        self.calls += 1
        return self.satisfied


@pytest.fixture(scope="session", autouse=True)
def registered_components():
    load_all_components()


@pytest.fixture
def fake_registry():
    return FakeRegistryAccessor()


@pytest.fixture
def mock_logger():
    return MagicMock(spec=logging.Logger)


@pytest.fixture
def app_settings(tmp_path):
    """AppSettings whose directories all live under tmp_path."""
    desktop = tmp_path / "Public" / "Desktop"
    return AppSettings(
        work_dir=str(tmp_path / "work"),
        ams360={
            "shortcuts": [
                str(desktop / "AMS360.lnk"),
                str(desktop / "AMS360 Client Setup.lnk"),
            ]
        },
        imageright={
            "install_root": str(tmp_path / "ImageRight"),
            "config_dir": str(tmp_path / "ProgramData" / "ImageRight"),
            "config_base_url": "https://assets.example.test/imageright/config",
        },
    )


@pytest.fixture
def registry_factory():
    """Builds FakeRegistryAccessor instances from values and subkeys."""
    return FakeRegistryAccessor


@pytest.fixture
def precondition_factory():
    return FakePreconditionChecker
