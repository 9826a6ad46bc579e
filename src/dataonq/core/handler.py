"""ServiceHandler: executes proxies against resolved service instances."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar

from dataonq.core.debug import verify_command
from dataonq.errors import ResolutionError

if TYPE_CHECKING:
    from dataonq.container import ServiceProvider
    from dataonq.core.proxy import MessageProxy
    from dataonq.core.response import HandlerResponse

logger = logging.getLogger(__name__)


class ServiceHandler(ABC):
    """Abstract executor for proxies bound to the service types in ``handles``.

    Implementations must not keep per-call state: the same instance may be
    asked to handle independent proxies concurrently.
    """

    handles: ClassVar[tuple[type, ...]] = ()

    @abstractmethod
    def handle[S](self, proxy: MessageProxy[S]) -> HandlerResponse:
        """Run *proxy* against an instance of its service type.

        Raises:
            ResolutionError: No instance of the service type is available.
        """


class ContainerServiceHandler(ServiceHandler):
    """Handler that obtains service instances from a :class:`ServiceProvider`.

    Subclass and set ``handles`` to claim service types in a
    :class:`~dataonq.core.builder.ServiceBuilder`.
    """

    def __init__(self, provider: ServiceProvider, *, verify_commands: bool = False) -> None:
        self._provider = provider
        self._verify_commands = verify_commands

    def handle[S](self, proxy: MessageProxy[S]) -> HandlerResponse:
        service_type = proxy.service_type
        if service_type is None:
            raise ResolutionError(proxy, "proxy declares no service type")

        service = self._provider.resolve(service_type)
        logger.debug("Dispatching %r to %s", proxy, type(service).__qualname__)

        if self._verify_commands:
            return verify_command(proxy, service)
        return proxy.execute(service)
