"""Dispatch core: responses, proxies, command descriptors, handlers, registry."""

from dataonq.core.builder import HandlerRegistration, HandlerRegistry, ServiceBuilder
from dataonq.core.command import MessageProxyCommand, ServiceCommand, command_of
from dataonq.core.debug import verify_command
from dataonq.core.handler import ContainerServiceHandler, ServiceHandler
from dataonq.core.proxy import CommandProxy, MessageProxy
from dataonq.core.response import HandlerResponse, ResponseError

__all__ = [
    "CommandProxy",
    "ContainerServiceHandler",
    "HandlerRegistration",
    "HandlerRegistry",
    "HandlerResponse",
    "MessageProxy",
    "MessageProxyCommand",
    "ResponseError",
    "ServiceBuilder",
    "ServiceCommand",
    "ServiceHandler",
    "command_of",
    "verify_command",
]
