"""Unit tests for the ``token`` response type."""

from typing import Any

import pytest

from oauth2_core.errors import InvalidArgumentError
from oauth2_core.models.entities import Client
from oauth2_core.redirect_uri import RedirectUri
from oauth2_core.request import Request
from oauth2_core.response_types import RESPONSE_TYPES, ResponseType, TokenResponseType
from tests.fixtures.test_data import REDIRECT_URI, InMemoryModel, OAuth2TestDataFactory

REQUEST = Request(headers={}, method="GET", query={})


class TestTokenResponseType:
    """Test implicit token issuance through the redirect fragment."""

    def test_registry(self) -> None:
        assert RESPONSE_TYPES[ResponseType.TOKEN.value] is TokenResponseType

    def test_requires_access_token_lifetime(self, model: InMemoryModel) -> None:
        with pytest.raises(InvalidArgumentError) as exc_info:
            TokenResponseType(model=model)

        assert exc_info.value.message == "Missing parameter: `access_token_lifetime`"

    async def test_handle_runs_implicit_grant(
        self, model: InMemoryModel, client: Client, user: dict[str, Any]
    ) -> None:
        response_type = TokenResponseType(model=model, access_token_lifetime=120)

        token = await response_type.handle(REQUEST, client, user, REDIRECT_URI, "read")

        assert response_type.access_token == token.access_token
        assert token.refresh_token is None
        assert model.tokens[token.access_token].user == user

    async def test_client_lifetime_overrides_default(
        self, model: InMemoryModel, user: dict[str, Any]
    ) -> None:
        client = OAuth2TestDataFactory.create_client(access_token_lifetime=60)
        response_type = TokenResponseType(model=model, access_token_lifetime=3600)

        await response_type.handle(REQUEST, client, user, REDIRECT_URI, None)
        fragment = response_type.build_redirect_uri(RedirectUri.parse(REDIRECT_URI)).fragment_dict()

        assert 58 <= int(fragment["expires_in"]) <= 60

    async def test_parameters_go_in_fragment(
        self, model: InMemoryModel, client: Client, user: dict[str, Any]
    ) -> None:
        response_type = TokenResponseType(model=model, access_token_lifetime=120)
        await response_type.handle(REQUEST, client, user, REDIRECT_URI, "read")

        uri = response_type.build_redirect_uri(RedirectUri.parse(REDIRECT_URI + "?keep=1"))

        assert uri.query_dict() == {"keep": "1"}
        fragment = uri.fragment_dict()
        assert fragment["access_token"] == response_type.access_token
        assert fragment["token_type"] == "Bearer"
        assert fragment["scope"] == "read"
        assert "expires_in" in fragment
