"""Symbolic command descriptors.

A :class:`ServiceCommand` names the member of a service type that a proxy
intends to call, without calling it. Routers, loggers and validators can
inspect a queue of proxies through these descriptors before anything runs.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from dataonq.errors import InvalidCommandError


@dataclass(frozen=True)
class ServiceCommand[S]:
    """Reference to a callable member of *service_type*.

    The member must exist on the class itself; instance-only attributes
    cannot be validated ahead of time and are rejected.
    """

    service_type: type[S]
    member: str

    def __post_init__(self) -> None:
        if not inspect.isclass(self.service_type):
            msg = f"Command target must be a class, got {self.service_type!r}"
            raise InvalidCommandError(msg)
        try:
            attr = inspect.getattr_static(self.service_type, self.member)
        except AttributeError:
            msg = f"{self.service_type.__qualname__} has no member {self.member!r}"
            raise InvalidCommandError(msg) from None
        if not (callable(attr) or isinstance(attr, (staticmethod, classmethod))):
            msg = f"{self.qualified_name} is not callable"
            raise InvalidCommandError(msg)

    @classmethod
    def of(cls, service_type: type[S], target: str | Callable[..., Any]) -> ServiceCommand[S]:
        """Build a command from a member name or a function defined on *service_type*.

        Usage::

            ServiceCommand.of(AuthService, "login")
            ServiceCommand.of(AuthService, AuthService.login)
        """
        if isinstance(target, str):
            return cls(service_type, target)

        name = getattr(target, "__name__", None)
        if name is None:
            msg = f"Cannot derive a member name from {target!r}"
            raise InvalidCommandError(msg)
        command = cls(service_type, name)
        declared = getattr(service_type, name)
        if getattr(declared, "__func__", declared) is not getattr(target, "__func__", target):
            msg = f"{target!r} is not the member {command.qualified_name}"
            raise InvalidCommandError(msg)
        return command

    @property
    def qualified_name(self) -> str:
        return f"{self.service_type.__qualname__}.{self.member}"

    def resolve(self, service: S) -> Callable[..., Any]:
        """Return the bound member on a concrete service instance."""
        return getattr(service, self.member)

    def invoke(self, service: S, *args: Any, **kwargs: Any) -> Any:
        return self.resolve(service)(*args, **kwargs)

    def __str__(self) -> str:
        return self.qualified_name


@runtime_checkable
class MessageProxyCommand[S](Protocol):
    """Capability of a proxy that can describe which member it targets."""

    @property
    def command(self) -> ServiceCommand[S]: ...


def command_of(proxy: object) -> ServiceCommand[Any] | None:
    """Return the command descriptor of *proxy*, or None if it declares none."""
    command = getattr(proxy, "command", None)
    if isinstance(command, ServiceCommand):
        return command
    return None
