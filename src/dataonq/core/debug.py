"""Debug-time consistency check between a proxy's command and its execution.

``verify_command`` runs the proxy against a recording wrapper of the service
and fails loudly if a successful execution never called the declared member.
It is meant for tests and for development runs with
``dispatch.verify_commands`` enabled.

The wrapper reports the wrapped service's class to ``isinstance`` and
forwards the context-manager protocol. Other special methods (operators,
``len``, iteration) are looked up on the wrapper type and are not forwarded.
"""

from __future__ import annotations

import logging
from typing import Any

from dataonq.core.command import command_of
from dataonq.core.proxy import MessageProxy
from dataonq.core.response import HandlerResponse
from dataonq.errors import DescriptorMismatchError

logger = logging.getLogger(__name__)


class RecordingService:
    """Transparent wrapper that records which callable members are invoked."""

    def __init__(self, service: Any) -> None:
        object.__setattr__(self, "_service", service)
        object.__setattr__(self, "called", [])

    @property  # type: ignore[misc]
    def __class__(self) -> type:
        return type(self._service)

    def __getattr__(self, name: str) -> Any:
        attr = getattr(self._service, name)
        if not callable(attr):
            return attr

        def _recorded(*args: Any, **kwargs: Any) -> Any:
            self.called.append(name)
            return attr(*args, **kwargs)

        return _recorded

    def __setattr__(self, name: str, value: Any) -> None:
        setattr(self._service, name, value)

    def __enter__(self) -> Any:
        entered = type(self._service).__enter__(self._service)
        return self if entered is self._service else entered

    def __exit__(self, *exc_info: Any) -> Any:
        return type(self._service).__exit__(self._service, *exc_info)


def verify_command[S](proxy: MessageProxy[S], service: S) -> HandlerResponse:
    """Execute *proxy* and check that it called the member its command names.

    Proxies without a command descriptor are executed unchanged. Failed
    responses are returned as-is: an operation may fail before it reaches
    the service.

    Raises:
        DescriptorMismatchError: A successful execution never called the
            declared member.
    """
    command = command_of(proxy)
    if command is None:
        return proxy.execute(service)

    recorder = RecordingService(service)
    response = proxy.execute(recorder)  # type: ignore[arg-type]
    if not response.is_success:
        return response
    if command.member not in recorder.called:
        raise DescriptorMismatchError(command.qualified_name, list(recorder.called))
    logger.debug("Verified %s against calls %s", command, recorder.called)
    return response
