"""
Product installer components.

Each product lives in its own subpackage as ``<name>/<name>_installer.py``
and registers itself with the ComponentRegistry on import.
"""

import importlib
import logging
import os
from typing import Optional

module_logger = logging.getLogger(__name__)


def load_all_components(logger: Optional[logging.Logger] = None) -> None:
    """Import every component module so it registers itself."""
    logger_to_use = logger or module_logger
    components_dir = os.path.dirname(__file__)

    for item in sorted(os.listdir(components_dir)):
        item_path = os.path.join(components_dir, item)
        if not os.path.isdir(item_path) or item.startswith("__"):
            continue
        module_name = f"{__name__}.{item}.{item}_installer"
        try:
            importlib.import_module(module_name)
        except ModuleNotFoundError as e:
            if e.name != module_name:
                raise
            logger_to_use.debug(f"No installer module found for {item}")
