"""Minimal service container that supplies concrete service instances.

Handlers only depend on the :class:`ServiceProvider` protocol, so any
dependency-injection container exposing ``resolve(service_type)`` can be
plugged in instead.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from dataonq.errors import ResolutionError

logger = logging.getLogger(__name__)


@runtime_checkable
class ServiceProvider(Protocol):
    """Anything that can produce an instance of a service type."""

    def resolve[S](self, service_type: type[S]) -> S: ...


@dataclass
class _Provision:
    factory: Callable[[], Any]
    singleton: bool
    instance: Any = None
    created: bool = False
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


class ServiceContainer:
    """Type-indexed map of service factories and instances.

    Populated during setup; resolution never mutates the map except to
    cache singletons created on first use. Concurrent first resolutions of a
    singleton run its factory once.
    """

    def __init__(self) -> None:
        self._provisions: dict[type, _Provision] = {}

    def add_instance[S](self, service_type: type[S], instance: S) -> None:
        """Always resolve *service_type* to *instance*."""
        self._provisions[service_type] = _Provision(
            factory=lambda: instance, singleton=True, instance=instance, created=True
        )
        logger.debug("Registered instance for %s", service_type.__qualname__)

    def add_factory[S](
        self,
        service_type: type[S],
        factory: Callable[[], S],
        *,
        singleton: bool = False,
    ) -> None:
        """Resolve *service_type* by calling *factory* (once, if *singleton*)."""
        self._provisions[service_type] = _Provision(factory=factory, singleton=singleton)
        logger.debug("Registered factory for %s", service_type.__qualname__)

    def resolve[S](self, service_type: type[S]) -> S:
        provision = self._provisions.get(service_type)
        if provision is None:
            raise ResolutionError(service_type)

        if not provision.singleton:
            return _create(service_type, provision)
        if provision.created:
            return provision.instance
        with provision.lock:
            if not provision.created:
                provision.instance = _create(service_type, provision)
                provision.created = True
        return provision.instance

    def __contains__(self, service_type: object) -> bool:
        return service_type in self._provisions

    def service_types(self) -> list[type]:
        return list(self._provisions)


def _create(service_type: type, provision: _Provision) -> Any:
    try:
        return provision.factory()
    except Exception as exc:
        raise ResolutionError(service_type, f"factory failed: {exc}") from exc
