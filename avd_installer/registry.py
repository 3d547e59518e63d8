"""
Registry for product installer components.

This module provides a registry for installer components to register
themselves and a decorator for registering component classes.
"""

from typing import Any, Dict, Optional, Type

from avd_installer.base_component import BaseComponent


class ComponentRegistry:
    """
    Registry for installer components.

    Components are looked up by name when the orchestrator runs the
    configured install sequence or when a single installer is run from
    the command line.
    """

    _registry: Dict[str, Type["BaseComponent"]] = {}

    @classmethod
    def register(cls, name: str, metadata: Optional[Dict[str, Any]] = None):
        """
        Decorator for registering component classes.

        Args:
            name: The name of the component.
            metadata: Optional metadata for the component, such as estimated
                      installation time and a description.

        Returns:
            A decorator function that registers the component class.
        """

        def decorator(
            component_class: Type["BaseComponent"],
        ) -> Type["BaseComponent"]:
            if name in cls._registry:
                raise ValueError(
                    f"Component with name '{name}' already registered"
                )

            if metadata:
                component_class.metadata = metadata

            cls._registry[name] = component_class
            return component_class

        return decorator

    @classmethod
    def get_component(cls, name: str) -> Type["BaseComponent"]:
        """
        Get a component class by name.

        Args:
            name: The name of the component.

        Returns:
            The component class.

        Raises:
            KeyError: If no component with the given name is registered.
        """
        if name not in cls._registry:
            raise KeyError(f"No component registered with name '{name}'")

        return cls._registry[name]

    @classmethod
    def get_all_components(cls) -> Dict[str, Type["BaseComponent"]]:
        """
        Get all registered components.

        Returns:
            A dictionary mapping component names to component classes.
        """
        return cls._registry.copy()
