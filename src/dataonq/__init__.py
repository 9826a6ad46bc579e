"""dataonq: typed command dispatch against named services."""

from dataonq.container import ServiceContainer, ServiceProvider
from dataonq.core import (
    CommandProxy,
    ContainerServiceHandler,
    HandlerRegistry,
    HandlerResponse,
    MessageProxy,
    MessageProxyCommand,
    ResponseError,
    ServiceBuilder,
    ServiceCommand,
    ServiceHandler,
    command_of,
    verify_command,
)
from dataonq.errors import (
    DataOnQError,
    DescriptorMismatchError,
    InvalidCommandError,
    NoResultError,
    OperationError,
    ProxyStateError,
    RegistrationError,
    RegistryFrozenError,
    ResolutionError,
    TypeMismatchError,
)

__version__ = "0.1.0"

__all__ = [
    "CommandProxy",
    "ContainerServiceHandler",
    "DataOnQError",
    "DescriptorMismatchError",
    "HandlerRegistry",
    "HandlerResponse",
    "InvalidCommandError",
    "MessageProxy",
    "MessageProxyCommand",
    "NoResultError",
    "OperationError",
    "ProxyStateError",
    "RegistrationError",
    "RegistryFrozenError",
    "ResolutionError",
    "ResponseError",
    "ServiceBuilder",
    "ServiceCommand",
    "ServiceContainer",
    "ServiceHandler",
    "ServiceProvider",
    "TypeMismatchError",
    "__version__",
    "command_of",
    "verify_command",
]
