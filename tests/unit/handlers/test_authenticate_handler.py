"""Unit tests for bearer token authentication."""

from datetime import datetime, timedelta, timezone
from typing import Any
from unittest.mock import MagicMock

import pytest

from oauth2_core.errors import (
    InsufficientScopeError,
    InvalidArgumentError,
    InvalidRequestError,
    InvalidTokenError,
    ServerError,
    UnauthorizedRequestError,
)
from oauth2_core.handlers import AuthenticateHandler
from oauth2_core.models.entities import Client, Token
from oauth2_core.request import Request
from oauth2_core.response import Response
from tests.fixtures.test_data import FORM_CONTENT_TYPE, AsyncInMemoryModel, InMemoryModel


@pytest.fixture
def access_token(model: InMemoryModel, client: Client, user: dict[str, Any]) -> Token:
    return model.save_token(
        Token(
            access_token="valid-token",
            access_token_expires_at=datetime.now(timezone.utc) + timedelta(hours=1),
            scope="read write",
        ),
        client,
        user,
    )


def bearer_request(token: str = "valid-token", **kwargs: Any) -> Request:
    return Request(
        headers={"Authorization": f"Bearer {token}"}, method="GET", query={}, **kwargs
    )


class TestAuthenticateHandlerConstruction:
    """Test constructor checks."""

    def test_requires_model(self) -> None:
        with pytest.raises(InvalidArgumentError, match="`model`"):
            AuthenticateHandler()

    def test_requires_get_access_token(self) -> None:
        with pytest.raises(InvalidArgumentError, match="get_access_token"):
            AuthenticateHandler(model=MagicMock(spec=[]))

    def test_scope_requires_verify_scope(self) -> None:
        with pytest.raises(InvalidArgumentError, match="verify_scope"):
            AuthenticateHandler(model=MagicMock(spec=["get_access_token"]), scope="read")


class TestTokenExtraction:
    """Test where the token may come from."""

    def test_header(self, model: InMemoryModel) -> None:
        handler = AuthenticateHandler(model=model)

        assert handler.get_token_from_request(bearer_request("abc")) == "abc"

    def test_malformed_header(self, model: InMemoryModel) -> None:
        request = Request(headers={"Authorization": "Basic abc"}, method="GET", query={})

        with pytest.raises(InvalidRequestError) as exc_info:
            AuthenticateHandler(model=model).get_token_from_request(request)

        assert exc_info.value.message == "Invalid request: malformed authorization header"

    def test_query_requires_opt_in(self, model: InMemoryModel) -> None:
        request = Request(headers={}, method="GET", query={"access_token": "abc"})

        with pytest.raises(InvalidRequestError, match="do not send bearer tokens in query URLs"):
            AuthenticateHandler(model=model).get_token_from_request(request)

        handler = AuthenticateHandler(model=model, allow_bearer_tokens_in_query_string=True)
        assert handler.get_token_from_request(request) == "abc"

    def test_body(self, model: InMemoryModel) -> None:
        request = Request(
            headers={"Content-Type": FORM_CONTENT_TYPE},
            method="POST",
            query={},
            body={"access_token": "abc"},
        )

        assert AuthenticateHandler(model=model).get_token_from_request(request) == "abc"

    def test_body_not_allowed_on_get(self, model: InMemoryModel) -> None:
        request = Request(
            headers={"Content-Type": FORM_CONTENT_TYPE},
            method="GET",
            query={},
            body={"access_token": "abc"},
        )

        with pytest.raises(InvalidRequestError, match="GET verb"):
            AuthenticateHandler(model=model).get_token_from_request(request)

    def test_body_must_be_urlencoded(self, model: InMemoryModel) -> None:
        request = Request(
            headers={"Content-Type": "application/json"},
            method="POST",
            query={},
            body={"access_token": "abc"},
        )

        with pytest.raises(InvalidRequestError, match="x-www-form-urlencoded"):
            AuthenticateHandler(model=model).get_token_from_request(request)

    def test_only_one_method(self, model: InMemoryModel) -> None:
        request = bearer_request("abc", body={"access_token": "abc"})

        with pytest.raises(InvalidRequestError) as exc_info:
            AuthenticateHandler(model=model).get_token_from_request(request)

        assert exc_info.value.message == "Invalid request: only one authentication method is allowed"

    def test_no_token(self, model: InMemoryModel) -> None:
        with pytest.raises(UnauthorizedRequestError):
            AuthenticateHandler(model=model).get_token_from_request(
                Request(headers={}, method="GET", query={})
            )


class TestAuthenticateHandle:
    """Test the full authentication flow."""

    async def test_success(self, model: InMemoryModel, access_token: Token) -> None:
        response = Response()

        token = await AuthenticateHandler(model=model).handle(bearer_request(), response)

        assert token == access_token
        assert response.headers == {}

    async def test_async_model(
        self, async_model: AsyncInMemoryModel, client: Client, user: dict[str, Any]
    ) -> None:
        async_model.tokens["async-token"] = Token(access_token="async-token", client=client, user=user)

        token = await AuthenticateHandler(model=async_model).handle(
            bearer_request("async-token"), Response()
        )

        assert token.user == user

    async def test_no_authentication_sets_challenge(self, model: InMemoryModel) -> None:
        response = Response()

        with pytest.raises(UnauthorizedRequestError) as exc_info:
            await AuthenticateHandler(model=model).handle(
                Request(headers={}, method="GET", query={}), response
            )

        assert exc_info.value.code == 401
        assert response.get("WWW-Authenticate") == 'Bearer realm="Service"'

    async def test_unknown_token(self, model: InMemoryModel) -> None:
        with pytest.raises(InvalidTokenError) as exc_info:
            await AuthenticateHandler(model=model).handle(bearer_request("nope"), Response())

        assert exc_info.value.message == "Invalid token: access token is invalid"

    async def test_token_without_user(self, model: InMemoryModel) -> None:
        model.tokens["orphan"] = Token(access_token="orphan")

        with pytest.raises(ServerError):
            await AuthenticateHandler(model=model).handle(bearer_request("orphan"), Response())

    async def test_expired_token(
        self, model: InMemoryModel, client: Client, user: dict[str, Any]
    ) -> None:
        model.tokens["expired"] = Token(
            access_token="expired",
            access_token_expires_at=datetime.now(timezone.utc) - timedelta(seconds=1),
            client=client,
            user=user,
        )

        with pytest.raises(InvalidTokenError) as exc_info:
            await AuthenticateHandler(model=model).handle(bearer_request("expired"), Response())

        assert exc_info.value.message == "Invalid token: access token has expired"

    async def test_token_without_expiry_is_accepted(
        self, model: InMemoryModel, client: Client, user: dict[str, Any]
    ) -> None:
        model.tokens["forever"] = Token(access_token="forever", client=client, user=user)

        token = await AuthenticateHandler(model=model).handle(bearer_request("forever"), Response())

        assert token.access_token == "forever"

    async def test_scope_headers(self, model: InMemoryModel, access_token: Token) -> None:
        response = Response()

        await AuthenticateHandler(model=model, scope="read").handle(bearer_request(), response)

        assert response.get("X-Accepted-OAuth-Scopes") == "read"
        assert response.get("X-OAuth-Scopes") == "read write"

    async def test_scope_headers_can_be_disabled(
        self, model: InMemoryModel, access_token: Token
    ) -> None:
        response = Response()
        handler = AuthenticateHandler(
            model=model,
            scope="read",
            add_accepted_scopes_header=False,
            add_authorized_scopes_header=False,
        )

        await handler.handle(bearer_request(), response)

        assert response.headers == {}

    async def test_insufficient_scope(self, model: InMemoryModel, access_token: Token) -> None:
        with pytest.raises(InsufficientScopeError) as exc_info:
            await AuthenticateHandler(model=model, scope="admin").handle(
                bearer_request(), Response()
            )

        assert exc_info.value.code == 403

    async def test_contract_violation_is_server_error(self, model: InMemoryModel) -> None:
        model.get_access_token = MagicMock(  # type: ignore[method-assign]
            side_effect=InvalidArgumentError("Missing parameter: `client`")
        )

        with pytest.raises(ServerError) as exc_info:
            await AuthenticateHandler(model=model).handle(bearer_request(), Response())

        assert isinstance(exc_info.value.inner, InvalidArgumentError)
        assert exc_info.value.name == "server_error"

    async def test_unexpected_error_is_wrapped(self, model: InMemoryModel) -> None:
        model.get_access_token = MagicMock(side_effect=KeyError("boom"))  # type: ignore[method-assign]

        with pytest.raises(ServerError) as exc_info:
            await AuthenticateHandler(model=model).handle(bearer_request(), Response())

        assert isinstance(exc_info.value.inner, KeyError)
