"""MessageProxy: a typed descriptor binding one operation to a service type.

The orchestrator owns the ``previous_response`` slot: it assigns the prior
step's response once, before execution. ``execute`` only reads it.

Failure boundary: any ``Exception`` raised while running the operation
becomes an unsuccessful :class:`HandlerResponse`, except ``DataOnQError``
subclasses (programming and configuration errors) and the types listed in
``propagate``. Non-``Exception`` errors such as ``KeyboardInterrupt`` are
never caught.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from typing import Any, ClassVar, TypeVar, get_args, get_origin

from dataonq.core.command import ServiceCommand
from dataonq.core.response import HandlerResponse, ResponseError
from dataonq.errors import DataOnQError, InvalidCommandError, ProxyStateError

logger = logging.getLogger(__name__)


def _infer_service_type(cls: type) -> type[Any] | None:
    """Find ``S`` in a ``MessageProxy[S]`` base of *cls*, if concrete."""
    for base in cls.__dict__.get("__orig_bases__", ()):
        origin = get_origin(base)
        if not (isinstance(origin, type) and issubclass(origin, MessageProxy)):
            continue
        args = get_args(base)
        if args and not isinstance(args[0], TypeVar):
            return args[0]
    return None


class MessageProxy[S](ABC):
    """Abstract operation against a service of type ``S``.

    Subclasses implement :meth:`run`. The service type is taken from the
    generic base when not declared explicitly::

        class LoginProxy(MessageProxy[AuthService]):
            command = ServiceCommand.of(AuthService, "login")

            def run(self, service: AuthService) -> LoginResult:
                return service.login(self.user, self.password)
    """

    service_type: type[Any] | None = None
    propagate: ClassVar[tuple[type[BaseException], ...]] = ()
    include_traceback: ClassVar[bool] = False

    _previous_response: HandlerResponse | None = None
    _previous_assigned: bool = False
    _executing: bool = False

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if cls.__dict__.get("service_type") is None:
            inferred = _infer_service_type(cls)
            if inferred is not None:
                cls.service_type = inferred

        command = cls.__dict__.get("command")
        if isinstance(command, ServiceCommand):
            if cls.service_type is None:
                cls.service_type = command.service_type
            elif not issubclass(cls.service_type, command.service_type):
                msg = (
                    f"{cls.__name__} is bound to {cls.service_type.__qualname__} "
                    f"but its command targets {command}"
                )
                raise InvalidCommandError(msg)

    # ------------------------------------------------------------------
    # Chaining slot
    # ------------------------------------------------------------------

    @property
    def previous_response(self) -> HandlerResponse | None:
        """Response of the preceding operation, or None for the first step."""
        return self._previous_response

    @previous_response.setter
    def previous_response(self, response: HandlerResponse | None) -> None:
        if self._executing:
            msg = f"{type(self).__name__}: previous_response cannot change during execute"
            raise ProxyStateError(msg)
        if self._previous_assigned:
            if response is self._previous_response:
                return
            msg = f"{type(self).__name__}: previous_response is already assigned"
            raise ProxyStateError(msg)
        if response is not None and not isinstance(response, HandlerResponse):
            msg = f"previous_response must be a HandlerResponse, got {type(response).__name__}"
            raise TypeError(msg)
        self._previous_response = response
        self._previous_assigned = True

    @property
    def has_previous_response(self) -> bool:
        return self._previous_response is not None

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    @property
    def op_name(self) -> str:
        """Name reported on responses: the command member, else the class name."""
        command = getattr(self, "command", None)
        if isinstance(command, ServiceCommand):
            return command.member
        return type(self).__name__

    @abstractmethod
    def run(self, service: S) -> Any:
        """Perform the operation against *service* and return its payload.

        Returning a :class:`HandlerResponse` passes it through unchanged.
        Raise :class:`~dataonq.errors.OperationError` for expected failures.
        """

    def execute(self, service: S) -> HandlerResponse:
        """Run the operation and normalise its outcome into a HandlerResponse."""
        if self._executing:
            msg = f"{type(self).__name__} is already executing"
            raise ProxyStateError(msg)

        op = self.op_name
        self._executing = True
        try:
            payload = self.run(service)
        except DataOnQError:
            raise
        except self.propagate:
            raise
        except Exception as exc:
            logger.debug("Operation %s failed: %s", op, exc, exc_info=True)
            error = ResponseError.from_exception(exc, include_traceback=self.include_traceback)
            return HandlerResponse.failure(error, op=op)
        finally:
            self._executing = False

        if isinstance(payload, HandlerResponse):
            return payload
        return HandlerResponse.success(payload, op=op)

    def __repr__(self) -> str:
        target = getattr(self.service_type, "__qualname__", None)
        return f"<{type(self).__name__} op={self.op_name!r} service={target}>"


class CommandProxy[S](MessageProxy[S]):
    """Proxy that calls a :class:`ServiceCommand` with bound arguments.

    *from_previous* maps the previous response to extra keyword arguments,
    which lets a step consume its predecessor's result without a subclass::

        fetch = CommandProxy(
            ServiceCommand.of(ProfileService, "fetch_profile"),
            from_previous=lambda prev: {"token": prev.get_result(LoginResult).token},
        )
    """

    def __init__(
        self,
        command: ServiceCommand[S],
        *args: Any,
        from_previous: Callable[[HandlerResponse], Mapping[str, Any]] | None = None,
        **kwargs: Any,
    ) -> None:
        self._command = command
        self.service_type = command.service_type
        self.args = args
        self.kwargs = kwargs
        self._from_previous = from_previous

    @property
    def command(self) -> ServiceCommand[S]:
        return self._command

    def run(self, service: S) -> Any:
        kwargs = dict(self.kwargs)
        if self._from_previous is not None:
            previous = self.previous_response
            if previous is None:
                msg = f"{self._command} needs a previous response but none was assigned"
                raise ProxyStateError(msg)
            kwargs.update(self._from_previous(previous))
        return self._command.invoke(service, *self.args, **kwargs)
