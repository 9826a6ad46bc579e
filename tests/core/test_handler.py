"""Tests for ContainerServiceHandler."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from dataonq.container import ServiceContainer
from dataonq.core.command import ServiceCommand
from dataonq.core.handler import ContainerServiceHandler, ServiceHandler
from dataonq.core.proxy import CommandProxy, MessageProxy
from dataonq.errors import DescriptorMismatchError, OperationError, ResolutionError
from tests.support import AuthService, LoginResult, UnregisteredService


class TestContainerServiceHandler:
    def test_handles_proxy_with_resolved_instance(
        self, container: ServiceContainer, auth_service: AuthService
    ) -> None:
        handler = ContainerServiceHandler(container)
        proxy = CommandProxy(ServiceCommand.of(AuthService, "login"), "ada", "secret")
        response = handler.handle(proxy)
        assert response.get_result(LoginResult).token == "abc123"
        assert auth_service.calls == ["login"]

    def test_unregistered_service_raises_resolution_error(
        self, container: ServiceContainer
    ) -> None:
        handler = ContainerServiceHandler(container)
        proxy = CommandProxy(ServiceCommand.of(UnregisteredService, "ping"))
        with pytest.raises(ResolutionError, match="UnregisteredService") as exc_info:
            handler.handle(proxy)
        assert exc_info.value.service_type is UnregisteredService

    def test_proxy_without_service_type(self, container: ServiceContainer) -> None:
        class Unbound(MessageProxy):  # type: ignore[type-arg]
            def run(self, service: object) -> None:
                return None

        with pytest.raises(ResolutionError, match="no service type"):
            ContainerServiceHandler(container).handle(Unbound())

    def test_operation_failure_is_returned_not_raised(self, container: ServiceContainer) -> None:
        handler = ContainerServiceHandler(container)
        proxy = CommandProxy(ServiceCommand.of(AuthService, "login"), "ada", "nope")
        response = handler.handle(proxy)
        assert response.is_success is False

    def test_verify_commands_detects_mismatch(self, container: ServiceContainer) -> None:
        class Mislabelled(MessageProxy[AuthService]):
            command = ServiceCommand.of(AuthService, "logout")

            def run(self, service: AuthService) -> LoginResult:
                return service.login("ada", "secret")

        handler = ContainerServiceHandler(container, verify_commands=True)
        with pytest.raises(DescriptorMismatchError):
            handler.handle(Mislabelled())

    def test_verify_commands_keeps_early_failures(self, container: ServiceContainer) -> None:
        class Guarded(MessageProxy[AuthService]):
            command = ServiceCommand.of(AuthService, "login")

            def run(self, service: AuthService) -> LoginResult:
                raise OperationError("Device offline", code="OFFLINE")

        plain = ContainerServiceHandler(container).handle(Guarded())
        verified = ContainerServiceHandler(container, verify_commands=True).handle(Guarded())
        assert plain.is_success is False
        assert verified == plain

    def test_concurrent_handling_of_independent_proxies(
        self, container: ServiceContainer
    ) -> None:
        handler = ContainerServiceHandler(container)
        proxies = [
            CommandProxy(ServiceCommand.of(AuthService, "login"), "ada", "secret")
            for _ in range(16)
        ]
        with ThreadPoolExecutor(max_workers=4) as pool:
            responses = list(pool.map(handler.handle, proxies))
        assert all(r.is_success for r in responses)

    def test_is_a_service_handler(self, container: ServiceContainer) -> None:
        assert isinstance(ContainerServiceHandler(container), ServiceHandler)
