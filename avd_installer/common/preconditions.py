# avd_installer/common/preconditions.py
# -*- coding: utf-8 -*-
"""
Read-only probes that decide whether an install step is necessary.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from avd_installer.config import DOTNET_FRAMEWORK_KEY, DOTNET_RELEASE_VALUE

from .registry_utils import RegistryAccessor, get_installed_products

module_logger = logging.getLogger(__name__)


class PreconditionChecker(ABC):
    """A probe answering "is this already in place?"."""

    description: str = ""

    @abstractmethod
    def probe(self) -> bool:
        """
        Returns True when the install step can be skipped.

        Probes never raise for a missing registry key; absence means False.
        """


class DotNetFrameworkCheck(PreconditionChecker):
    """Satisfied when the .NET Framework 4.x Release value meets a minimum."""

    def __init__(
        self,
        registry: RegistryAccessor,
        minimum_release: int,
        logger: Optional[logging.Logger] = None,
    ):
        self.registry = registry
        self.minimum_release = minimum_release
        self.logger = logger or module_logger
        self.description = f".NET Framework release >= {minimum_release}"

    def probe(self) -> bool:
        raw_release = self.registry.get_value(
            DOTNET_FRAMEWORK_KEY, DOTNET_RELEASE_VALUE
        )
        if raw_release is None:
            self.logger.info(
                f"No .NET Framework 4.x release found at {DOTNET_FRAMEWORK_KEY}."
            )
            return False
        try:
            release = int(raw_release)
        except (TypeError, ValueError):
            self.logger.warning(
                f"Unreadable .NET Framework release value {raw_release!r}; treating as not installed."
            )
            return False
        self.logger.info(
            f".NET Framework release {release} found (need {self.minimum_release})."
        )
        return release >= self.minimum_release


class InstalledProductCheck(PreconditionChecker):
    """Satisfied when an installed product's DisplayName contains a fragment."""

    def __init__(
        self,
        registry: RegistryAccessor,
        product_name: str,
        logger: Optional[logging.Logger] = None,
    ):
        self.registry = registry
        self.product_name = product_name
        self.logger = logger or module_logger
        self.description = f"installed product matching '{product_name}'"

    def probe(self) -> bool:
        needle = self.product_name.lower()
        for display_name in get_installed_products(self.registry, self.logger):
            if needle in display_name.lower():
                self.logger.info(f"Found installed product '{display_name}'.")
                return True
        return False
