"""Dependency injection container.

This module provides a simple DI container without external frameworks.
It allows registering and resolving dependencies for the application.

Design principles:
1. No magic - explicit registration and resolution
2. Testable - easy to swap implementations
3. Lazy loading - adapters instantiated on first use
4. Thread-safe - for web server contexts
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, TypeVar

from .config import AppConfig, get_config

T = TypeVar("T")


@dataclass
class Container:
    """Dependency injection container.

    Usage:
        # Production
        container = Container.create_default()
        service = container.resolve(TripSearchService)

        # Testing
        container = Container.create_default()
        container.register(ChatOraclePort, lambda: StubOracle())
        service = container.resolve(TripSearchService)

    Attributes:
        config: Application configuration
    """

    config: AppConfig = field(default_factory=get_config)

    _factories: Dict[type[Any], Callable[[], Any]] = field(
        default_factory=dict, repr=False
    )
    _singletons: Dict[type[Any], Any] = field(default_factory=dict, repr=False)
    _singleton_types: set[type[Any]] = field(default_factory=set, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    def register(
        self,
        port_type: type[Any],
        factory: Callable[[], Any],
        singleton: bool = True,
    ) -> None:
        """Register a factory for a port type.

        Re-registering a type replaces its factory and drops any cached
        instance.

        Args:
            port_type: The type (usually a Protocol) to register.
            factory: A callable that creates instances of the type.
            singleton: If True, only one instance is created.
        """
        with self._lock:
            self._factories[port_type] = factory
            self._singletons.pop(port_type, None)
            if singleton:
                self._singleton_types.add(port_type)
            else:
                self._singleton_types.discard(port_type)

    def resolve(self, port_type: type[Any]) -> Any:
        """Resolve an instance of a port type.

        Args:
            port_type: The type to resolve.

        Returns:
            An instance of the requested type.

        Raises:
            KeyError: If the type is not registered.
        """
        with self._lock:
            if port_type not in self._factories:
                raise KeyError(f"Type not registered: {port_type}")

            if port_type in self._singleton_types:
                if port_type not in self._singletons:
                    self._singletons[port_type] = self._factories[port_type]()
                return self._singletons[port_type]

            return self._factories[port_type]()

    def is_registered(self, port_type: type[Any]) -> bool:
        return port_type in self._factories

    def clear_singletons(self) -> None:
        """Clear all cached singletons.

        Call this in tests to ensure fresh instances.
        """
        with self._lock:
            self._singletons.clear()

    def clear_all(self) -> None:
        """Clear all registrations and singletons."""
        with self._lock:
            self._factories.clear()
            self._singletons.clear()
            self._singleton_types.clear()

    @classmethod
    def create_default(cls, config: Optional[AppConfig] = None) -> Container:
        """Create a container with default production bindings.

        Args:
            config: Optional configuration override.

        Returns:
            A configured Container instance.
        """
        from .adapters.catalog import CSVCatalogRepository
        from .adapters.nlp import OpenAIChatOracle, RuleBasedQueryParser
        from .ports.catalog import CatalogRepositoryPort
        from .ports.nlp import ChatOraclePort, QueryInterpreterPort, QueryParserPort
        from .services import SemanticInterpreter, TripSearchService

        config = config or get_config()
        container = cls(config=config)

        # Catalog
        container.register(
            CatalogRepositoryPort,
            lambda: CSVCatalogRepository(config.catalog),
        )

        # NLP
        container.register(QueryParserPort, lambda: RuleBasedQueryParser())
        container.register(ChatOraclePort, lambda: OpenAIChatOracle(config.oracle))

        def create_interpreter() -> SemanticInterpreter:
            oracle = (
                container.resolve(ChatOraclePort) if config.oracle.enabled else None
            )
            return SemanticInterpreter(
                catalog=container.resolve(CatalogRepositoryPort).load(),
                fallback=container.resolve(QueryParserPort),
                oracle=oracle,
                config=config.oracle,
            )

        container.register(QueryInterpreterPort, create_interpreter)

        # Main service
        def create_search_service() -> TripSearchService:
            return TripSearchService(
                catalog=container.resolve(CatalogRepositoryPort).load(),
                parser=container.resolve(QueryParserPort),
                interpreter=container.resolve(QueryInterpreterPort),
            )

        container.register(TripSearchService, create_search_service)

        return container


# Global default container (lazy initialized)
_default_container: Optional[Container] = None
_container_lock = threading.Lock()


def get_container() -> Container:
    """Get the default application container.

    Returns:
        The default Container instance (creates one if needed).
    """
    global _default_container
    if _default_container is None:
        with _container_lock:
            if _default_container is None:
                _default_container = Container.create_default()
    return _default_container


def reset_container() -> None:
    """Reset the default container.

    Call this in tests to ensure a fresh container.
    """
    global _default_container
    with _container_lock:
        if _default_container is not None:
            _default_container.clear_all()
        _default_container = None
