"""Test data fixtures and factories for the OAuth2 engine.

This module provides an in-memory storage model (sync and async flavours) and
a factory for clients, users and requests, so tests exercise the engine
through the same hooks a real adapter implements.
"""

import base64
from collections.abc import Mapping
from typing import Any

from oauth2_core.models.entities import AuthorizationCode, Client, RefreshToken, Token
from oauth2_core.request import Request

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
REDIRECT_URI = "https://client.example.com/cb"
CLIENT_SECRET = "s3cret"
USER_PASSWORD = "hunter2"


class InMemoryModel:
    """Storage model keeping everything in dictionaries.

    Implements every hook the handlers use. Methods are plain functions; see
    ``AsyncInMemoryModel`` for the coroutine flavour.
    """

    def __init__(self) -> None:
        self.clients: dict[str, tuple[Client, str | None]] = {}
        self.users: dict[str, tuple[dict[str, Any], str]] = {}
        self.tokens: dict[str, Token] = {}
        self.refresh_tokens: dict[str, Token] = {}
        self.codes: dict[str, AuthorizationCode] = {}
        self.calls: list[str] = []

    def add_client(self, client: Client, secret: str | None = None) -> Client:
        self.clients[client.id] = (client, secret)
        return client

    def add_user(self, username: str, password: str, **extra: Any) -> dict[str, Any]:
        user = {"id": f"user-{username}", "username": username, **extra}
        self.users[username] = (user, password)
        return user

    def get_client(self, client_id: str, client_secret: str | None = None) -> Client | None:
        self.calls.append("get_client")
        entry = self.clients.get(client_id)
        if entry is None:
            return None
        client, secret = entry
        if client_secret is not None and client_secret != secret:
            return None
        return client

    def get_user(self, username: str, password: str) -> dict[str, Any] | None:
        self.calls.append("get_user")
        entry = self.users.get(username)
        if entry is None or entry[1] != password:
            return None
        return entry[0]

    def get_user_from_client(self, client: Client) -> dict[str, Any]:
        self.calls.append("get_user_from_client")
        return {"id": f"service-{client.id}"}

    def save_token(self, token: Token, client: Client, user: Any) -> Token:
        self.calls.append("save_token")
        saved = token.model_copy(update={"client": client, "user": user})
        self.tokens[saved.access_token] = saved
        if saved.refresh_token:
            self.refresh_tokens[saved.refresh_token] = saved
        return saved

    def get_access_token(self, access_token: str) -> Token | None:
        self.calls.append("get_access_token")
        return self.tokens.get(access_token)

    def get_refresh_token(self, refresh_token: str) -> RefreshToken | None:
        self.calls.append("get_refresh_token")
        token = self.refresh_tokens.get(refresh_token)
        if token is None:
            return None
        return RefreshToken(
            refresh_token=refresh_token,
            refresh_token_expires_at=token.refresh_token_expires_at,
            access_token=token.access_token,
            scope=token.scope,
            client=token.client,
            user=token.user,
        )

    def revoke_token(self, token: RefreshToken) -> bool:
        self.calls.append("revoke_token")
        return self.refresh_tokens.pop(token.refresh_token, None) is not None

    def save_authorization_code(
        self, code: AuthorizationCode, client: Client, user: Any
    ) -> AuthorizationCode:
        self.calls.append("save_authorization_code")
        saved = code.model_copy(update={"client": client, "user": user})
        self.codes[saved.authorization_code] = saved
        return saved

    def get_authorization_code(self, authorization_code: str) -> AuthorizationCode | None:
        self.calls.append("get_authorization_code")
        return self.codes.get(authorization_code)

    def revoke_authorization_code(self, code: AuthorizationCode) -> bool:
        self.calls.append("revoke_authorization_code")
        return self.codes.pop(code.authorization_code, None) is not None

    def verify_scope(self, token: Token, scope: str) -> bool:
        self.calls.append("verify_scope")
        if not token.scope:
            return False
        return set(scope.split()) <= set(token.scope.split())


class AsyncInMemoryModel(InMemoryModel):
    """Same storage as ``InMemoryModel`` with every hook as a coroutine."""

    async def get_client(self, client_id: str, client_secret: str | None = None) -> Client | None:
        return super().get_client(client_id, client_secret)

    async def get_user(self, username: str, password: str) -> dict[str, Any] | None:
        return super().get_user(username, password)

    async def get_user_from_client(self, client: Client) -> dict[str, Any]:
        return super().get_user_from_client(client)

    async def save_token(self, token: Token, client: Client, user: Any) -> Token:
        return super().save_token(token, client, user)

    async def get_access_token(self, access_token: str) -> Token | None:
        return super().get_access_token(access_token)

    async def get_refresh_token(self, refresh_token: str) -> RefreshToken | None:
        return super().get_refresh_token(refresh_token)

    async def revoke_token(self, token: RefreshToken) -> bool:
        return super().revoke_token(token)

    async def save_authorization_code(
        self, code: AuthorizationCode, client: Client, user: Any
    ) -> AuthorizationCode:
        return super().save_authorization_code(code, client, user)

    async def get_authorization_code(self, authorization_code: str) -> AuthorizationCode | None:
        return super().get_authorization_code(authorization_code)

    async def revoke_authorization_code(self, code: AuthorizationCode) -> bool:
        return super().revoke_authorization_code(code)

    async def verify_scope(self, token: Token, scope: str) -> bool:
        return super().verify_scope(token, scope)


class OAuth2TestDataFactory:
    """Factory for generating clients and requests with realistic values."""

    @staticmethod
    def create_client(
        client_id: str = "client-1",
        grants: list[str] | None = None,
        redirect_uris: list[str] | None = None,
        **overrides: Any,
    ) -> Client:
        return Client(
            id=client_id,
            grants=grants
            if grants is not None
            else ["authorization_code", "password", "refresh_token", "client_credentials", "implicit"],
            redirect_uris=redirect_uris if redirect_uris is not None else [REDIRECT_URI],
            **overrides,
        )

    @staticmethod
    def basic_auth(client_id: str, client_secret: str) -> str:
        credentials = base64.b64encode(f"{client_id}:{client_secret}".encode()).decode()
        return f"Basic {credentials}"

    @staticmethod
    def token_request(
        body: Mapping[str, Any],
        *,
        headers: Mapping[str, Any] | None = None,
        method: str = "POST",
    ) -> Request:
        return Request(
            headers={"Content-Type": FORM_CONTENT_TYPE, **(headers or {})},
            method=method,
            query={},
            body=body,
        )

    @staticmethod
    def authorize_request(
        query: Mapping[str, Any],
        *,
        body: Mapping[str, Any] | None = None,
        headers: Mapping[str, Any] | None = None,
        method: str = "GET",
    ) -> Request:
        return Request(
            headers=dict(headers or {}),
            method=method,
            query=query,
            body=body or {},
        )
