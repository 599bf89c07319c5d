"""Component registry for EphysForge.

Current sources, channel filters and field solvers register themselves
under a short name so the YAML config can select them without if/else
chains.

Example:
    >>> from ephysforge.registry import SOLVER_REGISTRY
    >>> SOLVER_REGISTRY.register("my_solver", MySolver)
    >>> solver = SOLVER_REGISTRY.create("my_solver", noise_level=0.0)
"""

from __future__ import annotations

from typing import Any, Dict, List, Type
import warnings


class ComponentRegistry:
    """Name → class lookup for one component family.

    Attributes:
        _registry: Dict mapping component name → class.
    """

    def __init__(self, registry_name: str = "ComponentRegistry"):
        """Initialize empty registry.

        Args:
            registry_name: Name used in error messages.
        """
        self._registry: Dict[str, Type] = {}
        self._name = registry_name

    def register(self, name: str, cls: Type) -> None:
        """Register a component class under ``name``.

        Re-registering the same class is a no-op; registering a different
        class under a taken name warns and overwrites.
        """
        existing_cls = self._registry.get(name)
        if existing_cls is cls:
            return
        if existing_cls is not None:
            warnings.warn(
                f"{self._name}: Component '{name}' already registered with "
                f"{existing_cls.__name__}, overwriting with {cls.__name__}",
                UserWarning,
            )
        self._registry[name] = cls

    def get_class(self, name: str) -> Type:
        """Registered class for ``name``.

        Raises:
            KeyError: If name is not registered.
        """
        if name not in self._registry:
            available = ", ".join(sorted(self._registry.keys()))
            raise KeyError(
                f"{self._name}: Component '{name}' not registered. "
                f"Available: {available}"
            )
        return self._registry[name]

    def create(self, name: str, **kwargs) -> Any:
        """Instantiate the component registered as ``name`` with ``kwargs``.

        Raises:
            KeyError: If name is not registered.
        """
        return self.get_class(name)(**kwargs)

    def list_registered(self) -> List[str]:
        """Sorted list of registered names."""
        return sorted(self._registry.keys())

    def is_registered(self, name: str) -> bool:
        return name in self._registry


# Global registries for each component type
NEURON_REGISTRY = ComponentRegistry("NEURON_REGISTRY")
FILTER_REGISTRY = ComponentRegistry("FILTER_REGISTRY")
SOLVER_REGISTRY = ComponentRegistry("SOLVER_REGISTRY")
