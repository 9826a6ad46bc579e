"""Tests for ServiceBuilder registration and HandlerRegistry lookup."""

from __future__ import annotations

import pytest

from dataonq.container import ServiceContainer
from dataonq.core.builder import HandlerRegistry, ServiceBuilder
from dataonq.core.command import ServiceCommand
from dataonq.core.handler import ContainerServiceHandler, ServiceHandler
from dataonq.core.proxy import CommandProxy, MessageProxy
from dataonq.core.response import HandlerResponse
from dataonq.errors import RegistrationError, RegistryFrozenError, ResolutionError
from tests.support import (
    AuthHandler,
    AuthService,
    LoginResult,
    ProfileHandler,
    ProfileService,
    UnregisteredService,
)


class _StaticHandler(ServiceHandler):
    """Handler that does not take a provider; needs an explicit factory."""

    handles = (UnregisteredService,)

    def handle(self, proxy: MessageProxy) -> HandlerResponse:  # type: ignore[type-arg, override]
        return proxy.execute(UnregisteredService())


class TestServiceBuilder:
    def test_register_twice_is_idempotent(self, container: ServiceContainer) -> None:
        builder = ServiceBuilder(container)
        builder.register(AuthHandler)
        builder.register(AuthHandler)
        registry = builder.build()
        assert len(registry) == 1
        assert [r.handler_type for r in registry.registrations] == [AuthHandler]

    def test_duplicate_registration_executes_once(
        self, container: ServiceContainer, auth_service: AuthService
    ) -> None:
        builder = ServiceBuilder(container)
        builder.register(AuthHandler)
        builder.register(AuthHandler)
        registry = builder.build()
        registry.dispatch(CommandProxy(ServiceCommand.of(AuthService, "login"), "ada", "secret"))
        assert auth_service.calls == ["login"]

    def test_conflicting_handler_rejected(self, container: ServiceContainer) -> None:
        class OtherAuthHandler(ContainerServiceHandler):
            handles = (AuthService,)

        builder = ServiceBuilder(container)
        builder.register(AuthHandler)
        with pytest.raises(RegistrationError, match="already handled by AuthHandler"):
            builder.register(OtherAuthHandler)

    def test_handler_without_service_types(self, container: ServiceContainer) -> None:
        builder = ServiceBuilder(container)
        with pytest.raises(RegistrationError, match="declares no service types"):
            builder.register(ContainerServiceHandler)

    def test_non_handler_rejected(self, container: ServiceContainer) -> None:
        builder = ServiceBuilder(container)
        with pytest.raises(TypeError):
            builder.register(AuthService)  # type: ignore[arg-type]

    def test_register_after_build(self, container: ServiceContainer) -> None:
        builder = ServiceBuilder(container)
        builder.register(AuthHandler)
        builder.build()
        assert builder.is_frozen is True
        with pytest.raises(RegistryFrozenError):
            builder.register(ProfileHandler)

    def test_re_register_after_build_still_frozen(self, container: ServiceContainer) -> None:
        builder = ServiceBuilder(container)
        builder.register(AuthHandler)
        builder.build()
        with pytest.raises(RegistryFrozenError):
            builder.register(AuthHandler)

    def test_build_twice_returns_same_registry(self, container: ServiceContainer) -> None:
        built: list[int] = []

        def factory(provider: ServiceContainer) -> AuthHandler:
            built.append(1)
            return AuthHandler(provider)

        builder = ServiceBuilder(container)
        builder.register(AuthHandler, factory=factory)
        first = builder.build()
        assert builder.build() is first
        assert built == [1]

    def test_custom_factory(self, container: ServiceContainer) -> None:
        builder = ServiceBuilder(container)
        builder.register(_StaticHandler, factory=lambda provider: _StaticHandler())
        registry = builder.build()
        response = registry.dispatch(CommandProxy(ServiceCommand.of(UnregisteredService, "ping")))
        assert response.get_result(str) == "pong"

    def test_handler_options_forwarded(self, container: ServiceContainer) -> None:
        builder = ServiceBuilder(container, verify_commands=True)
        builder.register(AuthHandler)
        handler = builder.build().handler_for(AuthService)
        assert isinstance(handler, AuthHandler)
        assert handler._verify_commands is True

    def test_one_instance_per_handler_class(self, container: ServiceContainer) -> None:
        class BothHandler(ContainerServiceHandler):
            handles = (AuthService, ProfileService)

        builder = ServiceBuilder(container)
        builder.register(BothHandler)
        registry = builder.build()
        assert registry.handler_for(AuthService) is registry.handler_for(ProfileService)
        assert len(registry) == 1


class TestHandlerRegistry:
    def test_dispatch_routes_by_service_type(self, registry: HandlerRegistry) -> None:
        response = registry.dispatch(
            CommandProxy(ServiceCommand.of(AuthService, "login"), "ada", "secret")
        )
        assert response.get_result(LoginResult).user == "ada"

    def test_unknown_service_type(self, registry: HandlerRegistry) -> None:
        with pytest.raises(ResolutionError, match="no handler registered"):
            registry.handler_for(UnregisteredService)

    def test_dispatch_unknown_service_produces_no_response(
        self, registry: HandlerRegistry
    ) -> None:
        with pytest.raises(ResolutionError):
            registry.dispatch(CommandProxy(ServiceCommand.of(UnregisteredService, "ping")))

    def test_subclass_uses_base_handler(self, registry: HandlerRegistry) -> None:
        class RemoteAuthService(AuthService):
            pass

        assert isinstance(registry.handler_for(RemoteAuthService), AuthHandler)
        assert RemoteAuthService in registry

    def test_contains(self, registry: HandlerRegistry) -> None:
        assert AuthService in registry
        assert ProfileService in registry
        assert UnregisteredService not in registry
        assert "AuthService" not in registry

    def test_service_types(self, registry: HandlerRegistry) -> None:
        assert set(registry.service_types()) == {AuthService, ProfileService}

    def test_multi_service_handler_counts_once(self, container: ServiceContainer) -> None:
        class BothHandler(ContainerServiceHandler):
            handles = (AuthService, ProfileService)

        builder = ServiceBuilder(container)
        builder.register(BothHandler)
        registry = builder.build()
        assert len(registry) == 1
        assert len(registry.registrations) == 1
        assert registry.service_types() == (AuthService, ProfileService)
