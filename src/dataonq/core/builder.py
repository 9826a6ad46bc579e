"""ServiceBuilder and HandlerRegistry: setup-time handler registration.

Registration happens once, single-threaded, before dispatch begins.
``build()`` freezes the builder and returns a read-only registry.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from dataonq.core.handler import ServiceHandler
from dataonq.errors import RegistrationError, RegistryFrozenError, ResolutionError

if TYPE_CHECKING:
    from dataonq.container import ServiceProvider
    from dataonq.core.proxy import MessageProxy
    from dataonq.core.response import HandlerResponse

logger = logging.getLogger(__name__)

HandlerFactory = Callable[["ServiceProvider"], ServiceHandler]


@dataclass(frozen=True)
class HandlerRegistration:
    """One registered handler class and the factory that constructs it."""

    handler_type: type[ServiceHandler]
    factory: HandlerFactory
    service_types: tuple[type, ...]


def _default_factory(
    handler_type: type[ServiceHandler], options: dict[str, Any]
) -> HandlerFactory:
    def factory(provider: ServiceProvider) -> ServiceHandler:
        return handler_type(provider, **options)  # type: ignore[call-arg]

    return factory


class ServiceBuilder:
    """Collects handler classes keyed by the service types they handle.

    Usage::

        builder = ServiceBuilder(container)
        builder.register(AuthHandler)
        builder.register(AuthHandler)  # no-op
        registry = builder.build()
    """

    def __init__(self, provider: ServiceProvider, **handler_options: Any) -> None:
        self._provider = provider
        self._handler_options = handler_options
        self._registrations: dict[type[ServiceHandler], HandlerRegistration] = {}
        self._by_service: dict[type, type[ServiceHandler]] = {}
        self._registry: HandlerRegistry | None = None

    @property
    def is_frozen(self) -> bool:
        return self._registry is not None

    def register(
        self,
        handler_type: type[ServiceHandler],
        factory: HandlerFactory | None = None,
    ) -> None:
        """Add *handler_type* for every service type in its ``handles``.

        Registering the same class twice is a no-op. Without a *factory* the
        handler is built as ``handler_type(provider, **handler_options)``.

        Raises:
            TypeError: *handler_type* is not a ServiceHandler subclass.
            RegistrationError: No service types declared, or one of them is
                already claimed by a different handler.
            RegistryFrozenError: ``build()`` was already called.
        """
        if self._registry is not None:
            msg = f"Cannot register {handler_type!r}: registry already built"
            raise RegistryFrozenError(msg)

        if not (inspect.isclass(handler_type) and issubclass(handler_type, ServiceHandler)):
            msg = f"{handler_type!r} must be a ServiceHandler subclass"
            raise TypeError(msg)

        if handler_type in self._registrations:
            logger.debug("Handler %s already registered", handler_type.__qualname__)
            return

        service_types = tuple(dict.fromkeys(handler_type.handles))
        if not service_types:
            msg = f"{handler_type.__qualname__} declares no service types in 'handles'"
            raise RegistrationError(msg)

        for service_type in service_types:
            owner = self._by_service.get(service_type)
            if owner is not None:
                msg = (
                    f"{service_type.__qualname__} is already handled by "
                    f"{owner.__qualname__}; cannot add {handler_type.__qualname__}"
                )
                raise RegistrationError(msg)

        if factory is None:
            factory = _default_factory(handler_type, self._handler_options)

        self._registrations[handler_type] = HandlerRegistration(
            handler_type=handler_type,
            factory=factory,
            service_types=service_types,
        )
        for service_type in service_types:
            self._by_service[service_type] = handler_type
        logger.debug(
            "Registered handler %s for %s",
            handler_type.__qualname__,
            [t.__qualname__ for t in service_types],
        )

    def build(self) -> HandlerRegistry:
        """Instantiate each handler once and freeze the builder.

        Later calls return the same registry.
        """
        if self._registry is not None:
            return self._registry

        instances = {
            handler_type: registration.factory(self._provider)
            for handler_type, registration in self._registrations.items()
        }
        handlers = {
            service_type: instances[handler_type]
            for service_type, handler_type in self._by_service.items()
        }
        self._registry = HandlerRegistry(handlers, tuple(self._registrations.values()))
        return self._registry


class HandlerRegistry:
    """Read-only map from service type to handler instance."""

    def __init__(
        self,
        handlers: dict[type, ServiceHandler],
        registrations: tuple[HandlerRegistration, ...] = (),
    ) -> None:
        self._handlers = MappingProxyType(dict(handlers))
        self._registrations = registrations

    @property
    def registrations(self) -> tuple[HandlerRegistration, ...]:
        return self._registrations

    def handler_for(self, service_type: type) -> ServiceHandler:
        """Return the handler for *service_type*, walking its MRO.

        Raises:
            ResolutionError: No handler covers *service_type*.
        """
        for candidate in inspect.getmro(service_type):
            handler = self._handlers.get(candidate)
            if handler is not None:
                return handler
        raise ResolutionError(service_type, "no handler registered")

    def dispatch[S](self, proxy: MessageProxy[S]) -> HandlerResponse:
        """Hand *proxy* to the handler registered for its service type."""
        if proxy.service_type is None:
            raise ResolutionError(proxy, "proxy declares no service type")
        return self.handler_for(proxy.service_type).handle(proxy)

    def __contains__(self, service_type: object) -> bool:
        if not inspect.isclass(service_type):
            return False
        return any(t in self._handlers for t in inspect.getmro(service_type))

    def service_types(self) -> tuple[type, ...]:
        """Service types claimed directly by a registered handler."""
        return tuple(self._handlers)

    def __len__(self) -> int:
        """Number of registered handler classes."""
        return len(self._registrations)
