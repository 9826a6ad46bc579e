"""Sample services and handlers shared by the dataonq test suite."""

from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import BaseModel

from dataonq.core.handler import ContainerServiceHandler
from dataonq.errors import OperationError


class LoginResult(BaseModel):
    model_config = {"frozen": True}

    token: str
    user: str


class Profile(BaseModel):
    user: str
    display_name: str


@dataclass
class AuthService:
    """Fake authentication API."""

    passwords: dict[str, str] = field(default_factory=lambda: {"ada": "secret"})
    calls: list[str] = field(default_factory=list)

    def login(self, user: str, password: str) -> LoginResult:
        self.calls.append("login")
        if self.passwords.get(user) != password:
            raise OperationError("Bad credentials", code="AUTH_FAILED", detail={"user": user})
        return LoginResult(token="abc123", user=user)

    def logout(self, token: str) -> None:
        self.calls.append("logout")

    def crash(self) -> None:
        raise RuntimeError("connection reset")


@dataclass
class ProfileService:
    """Fake profile API that requires a token from AuthService."""

    seen_tokens: list[str] = field(default_factory=list)

    def fetch_profile(self, token: str) -> Profile:
        self.seen_tokens.append(token)
        if token != "abc123":
            raise OperationError("Unknown token", code="UNAUTHORIZED")
        return Profile(user="ada", display_name="Ada Lovelace")


class UnregisteredService:
    def ping(self) -> str:
        return "pong"


class AuthHandler(ContainerServiceHandler):
    handles = (AuthService,)


class ProfileHandler(ContainerServiceHandler):
    handles = (ProfileService,)


