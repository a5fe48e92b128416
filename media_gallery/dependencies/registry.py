# media_gallery/dependencies/registry.py
"""
Lazily built singletons.

Stores, pipelines and controllers are each created once, from a factory
registered at import time. Tests swap individual instances with
``replace_service`` before anything that depends on them gets built.
"""

import threading
from typing import Any, Callable, Dict

Factory = Callable[[], Any]


class ServiceRegistry:
    def __init__(self) -> None:
        self._factories: Dict[str, Factory] = {}
        self._instances: Dict[str, Any] = {}
        self._guard = threading.Lock()

    def register_factory(self, name: str, factory: Factory) -> None:
        with self._guard:
            self._factories[name] = factory

    def get_service(self, name: str) -> Any:
        """
        Instance for ``name``, built on first use.

        The factory runs outside the guard because it resolves its own
        dependencies through this registry.

        Raises:
            KeyError: nothing is registered under ``name``
        """
        with self._guard:
            existing = self._instances.get(name)
            if existing is not None:
                return existing
            factory = self._factories.get(name)
        if factory is None:
            raise KeyError(f"No factory registered for service: {name}")

        built = factory()
        with self._guard:
            return self._instances.setdefault(name, built)

    def replace_service(self, name: str, instance: Any) -> None:
        with self._guard:
            self._instances[name] = instance

    def clear_all_services(self) -> None:
        """Drop every built instance; factories stay registered."""
        with self._guard:
            self._instances.clear()


_registry = ServiceRegistry()


def get_registry() -> ServiceRegistry:
    return _registry


def register_singleton_factory(name: str, factory: Factory) -> None:
    _registry.register_factory(name, factory)


def get_singleton_service(name: str) -> Any:
    return _registry.get_service(name)
