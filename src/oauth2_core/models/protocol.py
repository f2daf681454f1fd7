# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Capability contracts of the caller-supplied storage/identity model.

Each flow needs a different subset of hooks, so the contract is split into
small protocols. Hooks may be plain functions or coroutine functions and may
return the record types from ``entities`` or plain mappings with the same
fields. Handlers check the hooks they need when they are built and fail with
``InvalidArgumentError`` naming the first missing one.

Optional hooks (looked up at call time, never required):

- ``generate_access_token(client, user, scope)``
- ``generate_refresh_token(client, user, scope)``
- ``generate_authorization_code(client, user, scope)``
- ``validate_scope(user, client, scope) -> str | None``
"""

from typing import Any, Protocol, runtime_checkable

from .entities import AuthorizationCode, Client, RefreshToken, Token


@runtime_checkable
class ClientModel(Protocol):
    """Client lookup, needed by the authorize and token endpoints."""

    def get_client(self, client_id: str, client_secret: str | None = None) -> Client | None: ...


@runtime_checkable
class SaveTokenModel(Protocol):
    """Token persistence, needed by every grant type."""

    def save_token(self, token: Token, client: Client, user: Any) -> Token: ...


@runtime_checkable
class PasswordModel(SaveTokenModel, Protocol):
    """Password grant hooks."""

    def get_user(self, username: str, password: str) -> Any: ...


@runtime_checkable
class ClientCredentialsModel(SaveTokenModel, Protocol):
    """Client credentials grant hooks."""

    def get_user_from_client(self, client: Client) -> Any: ...


@runtime_checkable
class AuthorizationCodeModel(SaveTokenModel, Protocol):
    """Authorization code grant hooks."""

    def get_authorization_code(self, authorization_code: str) -> AuthorizationCode | None: ...

    def revoke_authorization_code(self, code: AuthorizationCode) -> bool: ...


@runtime_checkable
class SaveAuthorizationCodeModel(Protocol):
    """Code response type hook."""

    def save_authorization_code(
        self, code: AuthorizationCode, client: Client, user: Any
    ) -> AuthorizationCode: ...


@runtime_checkable
class RefreshTokenModel(SaveTokenModel, Protocol):
    """Refresh token grant hooks."""

    def get_refresh_token(self, refresh_token: str) -> RefreshToken | None: ...

    def revoke_token(self, token: RefreshToken) -> bool: ...


@runtime_checkable
class AccessTokenModel(Protocol):
    """Bearer token lookup, needed by the authenticate handler."""

    def get_access_token(self, access_token: str) -> Token | None: ...


@runtime_checkable
class VerifyScopeModel(Protocol):
    """Scope check for protected resources."""

    def verify_scope(self, token: Token, scope: str) -> bool: ...
