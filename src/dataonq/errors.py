"""Exception hierarchy for dataonq.

Only ``OperationError`` describes a runtime outcome; proxies convert it into
an unsuccessful :class:`~dataonq.core.response.HandlerResponse`. Every other
error here signals a programming or configuration mistake and propagates.
"""

from __future__ import annotations

from typing import Any


class DataOnQError(Exception):
    """Base class for all dataonq errors."""


class OperationError(Exception):
    """Raised by a service call to report an expected, recoverable failure.

    Deliberately not a :class:`DataOnQError`: proxies always convert it into a
    failed response instead of propagating it.
    """

    def __init__(
        self,
        message: str,
        *,
        code: str = "OPERATION_FAILED",
        detail: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.detail = detail or {}


class ResolutionError(DataOnQError):
    """No service instance or handler could be obtained for a service type."""

    def __init__(self, service_type: Any, reason: str = "no provider registered") -> None:
        name = getattr(service_type, "__qualname__", repr(service_type))
        super().__init__(f"Cannot resolve {name}: {reason}")
        self.service_type = service_type


class NoResultError(DataOnQError):
    """``get_result`` was called on a response that stores no payload."""


class TypeMismatchError(DataOnQError, TypeError):
    """``get_result`` was asked for a type incompatible with the payload."""

    def __init__(self, expected: Any, actual: type) -> None:
        expected_name = getattr(expected, "__qualname__", repr(expected))
        super().__init__(
            f"Result of type {actual.__qualname__} is not compatible with {expected_name}"
        )
        self.expected = expected
        self.actual = actual


class InvalidCommandError(DataOnQError):
    """A command descriptor names a member that the service type lacks."""


class DescriptorMismatchError(DataOnQError):
    """A proxy's command descriptor disagrees with what ``execute`` called."""

    def __init__(self, expected: str, called: list[str]) -> None:
        shown = ", ".join(called) if called else "nothing"
        super().__init__(f"Proxy declares command {expected!r} but called {shown}")
        self.expected = expected
        self.called = called


class RegistrationError(DataOnQError):
    """A handler registration conflicts with the current registry."""


class RegistryFrozenError(RegistrationError):
    """``register`` was called after the registry was built."""


class ProxyStateError(DataOnQError):
    """The previous-response slot or execution state of a proxy was misused."""
