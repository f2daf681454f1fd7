"""Unit tests for the client credentials grant."""

from unittest.mock import MagicMock

import pytest

from oauth2_core.errors import InvalidArgumentError, InvalidGrantError
from oauth2_core.grant_types import ClientCredentialsGrantType
from oauth2_core.models.entities import Client
from oauth2_core.request import Request
from tests.fixtures.test_data import InMemoryModel


def make_request(**body: str) -> Request:
    return Request(headers={}, method="POST", query={}, body=body)


class TestClientCredentialsGrant:
    """Test the client credentials flow."""

    def test_requires_get_user_from_client(self) -> None:
        with pytest.raises(InvalidArgumentError) as exc_info:
            ClientCredentialsGrantType(
                model=MagicMock(spec=["save_token"]), access_token_lifetime=120
            )

        assert "get_user_from_client()" in exc_info.value.message

    async def test_issues_access_token_only(self, model: InMemoryModel, client: Client) -> None:
        grant = ClientCredentialsGrantType(
            model=model, access_token_lifetime=120, refresh_token_lifetime=600
        )

        token = await grant.handle(make_request(scope="read"), client)

        assert token.access_token
        assert token.refresh_token is None
        assert token.refresh_token_expires_at is None
        assert token.scope == "read"
        assert token.user == {"id": "service-client-1"}

    async def test_missing_user(self, model: InMemoryModel, client: Client) -> None:
        model.get_user_from_client = MagicMock(return_value=None)  # type: ignore[method-assign]
        grant = ClientCredentialsGrantType(model=model, access_token_lifetime=120)

        with pytest.raises(InvalidGrantError):
            await grant.handle(make_request(), client)
