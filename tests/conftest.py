"""Shared pytest fixtures for dataonq tests."""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path

import pytest
import structlog
from click.testing import CliRunner

from dataonq.container import ServiceContainer
from dataonq.core.builder import HandlerRegistry, ServiceBuilder
from tests.support import AuthHandler, AuthService, ProfileHandler, ProfileService


@pytest.fixture
def cli_runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def auth_service() -> AuthService:
    return AuthService()


@pytest.fixture
def profile_service() -> ProfileService:
    return ProfileService()


@pytest.fixture
def container(auth_service: AuthService, profile_service: ProfileService) -> ServiceContainer:
    """Container holding one instance of each sample service."""
    c = ServiceContainer()
    c.add_instance(AuthService, auth_service)
    c.add_instance(ProfileService, profile_service)
    return c


@pytest.fixture
def registry(container: ServiceContainer) -> HandlerRegistry:
    builder = ServiceBuilder(container)
    builder.register(AuthHandler)
    builder.register(ProfileHandler)
    return builder.build()


@pytest.fixture(autouse=True)
def _isolated_cwd(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep config discovery independent of any dataonq.toml on the host."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("DATAONQ_CONFIG", raising=False)


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Undo logging configuration done by the CLI or logging tests."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    package_logger = logging.getLogger("dataonq")
    package_level = package_logger.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    package_logger.setLevel(package_level)
    structlog.reset_defaults()
