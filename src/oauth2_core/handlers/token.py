# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Token endpoint handler.

See https://tools.ietf.org/html/rfc6749#section-3.2
"""

import base64
import binascii
from collections.abc import Mapping
from typing import Any

from beartype import beartype

from .. import validators
from ..core.awaitables import require_capability, require_model, resolve
from ..core.logging_utils import get_logger
from ..errors import (
    InvalidArgumentError,
    InvalidClientError,
    InvalidRequestError,
    OAuthError,
    ServerError,
    UnauthorizedClientError,
    UnsupportedGrantTypeError,
)
from ..grant_types import GRANT_TYPES, AbstractGrantType
from ..models.entities import Client, Token
from ..models.protocol import ClientModel
from ..models.token import TokenModel
from ..request import Request
from ..response import Response
from ..token_types import BearerTokenType

logger = get_logger(__name__)


@beartype
def parse_basic_auth(header: str | None) -> tuple[str, str] | None:
    """Decode an ``Authorization: Basic`` header into ``(client_id, client_secret)``."""
    if not header:
        return None

    scheme, _, encoded = header.strip().partition(" ")
    if scheme.lower() != "basic" or not encoded:
        return None

    try:
        decoded = base64.b64decode(encoded.strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None

    client_id, separator, client_secret = decoded.partition(":")
    if not separator:
        return None
    return client_id, client_secret


class TokenHandler:
    """Issue tokens for the grant type named in the request.

    Args:
        model: Storage model; must implement ``get_client``.
        access_token_lifetime: Default access token lifetime in seconds.
        refresh_token_lifetime: Default refresh token lifetime in seconds.
        always_issue_new_refresh_token: Rotate refresh tokens on refresh.
        allow_extended_token_attributes: Copy non-standard token fields into
            the response body.
        require_client_authentication: Grant types mapped to ``False`` do not
            require a client secret.
        extended_grant_types: Extra grant type classes keyed by grant name
            (usually an absolute URI).
    """

    def __init__(
        self,
        *,
        model: ClientModel | None = None,
        access_token_lifetime: int | None = None,
        refresh_token_lifetime: int | None = None,
        always_issue_new_refresh_token: bool = True,
        allow_extended_token_attributes: bool = False,
        require_client_authentication: Mapping[str, bool] | None = None,
        extended_grant_types: Mapping[str, type[AbstractGrantType]] | None = None,
    ) -> None:
        if not access_token_lifetime:
            raise InvalidArgumentError("Missing parameter: `access_token_lifetime`")

        self.model = require_model(model)

        if not refresh_token_lifetime:
            raise InvalidArgumentError("Missing parameter: `refresh_token_lifetime`")

        require_capability(self.model, "get_client")

        self.access_token_lifetime = access_token_lifetime
        self.refresh_token_lifetime = refresh_token_lifetime
        self.always_issue_new_refresh_token = always_issue_new_refresh_token
        self.allow_extended_token_attributes = allow_extended_token_attributes
        self.require_client_authentication = dict(require_client_authentication or {})
        self.grant_types: dict[str, type[AbstractGrantType]] = {
            **GRANT_TYPES,
            **(extended_grant_types or {}),
        }

    async def handle(self, request: Request, response: Response) -> Token:
        """Handle a token request and fill ``response`` with the result.

        Errors are written to ``response`` as ``{error, error_description}``
        with the error's status code, then re-raised.
        """
        if not isinstance(request, Request):
            raise InvalidArgumentError("Invalid argument: `request` must be an instance of Request")

        if not isinstance(response, Response):
            raise InvalidArgumentError("Invalid argument: `response` must be an instance of Response")

        if request.method != "POST":
            raise InvalidRequestError("Invalid request: method must be POST")

        if not request.is_type("application/x-www-form-urlencoded"):
            raise InvalidRequestError(
                "Invalid request: content must be application/x-www-form-urlencoded"
            )

        try:
            client = await self.get_client(request, response)
            token = await self.handle_grant_type(request, client)
            model = TokenModel.from_token(
                token,
                allow_extended_token_attributes=self.allow_extended_token_attributes,
            )
            token_type = self.get_token_type(model)
            self.update_success_response(response, token_type)
            return token
        except Exception as exc:
            # InvalidArgumentError is a contract violation, never a wire error.
            if isinstance(exc, OAuthError) and not isinstance(exc, InvalidArgumentError):
                error = exc
            else:
                error = self._wrap(exc)
            self.update_error_response(response, error)
            if error is exc:
                raise
            raise error from exc

    @staticmethod
    def _wrap(exc: Exception) -> ServerError:
        logger.warning("Unexpected error while issuing a token", exc_info=exc)
        return ServerError(exc)

    async def get_client(self, request: Request, response: Response) -> Client:
        """Authenticate the client from the request credentials."""
        grant_type = request.body.get("grant_type")
        credentials = self.get_client_credentials(request)
        client_id = credentials.get("client_id")
        client_secret = credentials.get("client_secret")

        if not client_id:
            raise InvalidRequestError("Missing parameter: `client_id`")

        if self.is_client_authentication_required(grant_type) and not client_secret:
            raise InvalidRequestError("Missing parameter: `client_secret`")

        if not validators.vschar(client_id):
            raise InvalidRequestError("Invalid parameter: `client_id`")

        if client_secret and not validators.vschar(client_secret):
            raise InvalidRequestError("Invalid parameter: `client_secret`")

        try:
            client = Client.coerce(await resolve(self.model.get_client(client_id, client_secret)))

            if client is None:
                raise InvalidClientError("Invalid client: client is invalid")

            if not client.grants:
                raise ServerError("Server error: missing client `grants`")

            return client
        except InvalidClientError as exc:
            # RFC 6749 section 5.2: 401 when the client tried the Authorization header.
            if request.get("authorization"):
                response.set("WWW-Authenticate", 'Basic realm="Service"')
                raise InvalidClientError(exc.message, code=401) from exc
            raise

    def get_client_credentials(self, request: Request) -> dict[str, str]:
        """Get client credentials.

        The client credentials may be sent using the HTTP Basic authentication
        scheme or, alternatively, the ``client_id`` and ``client_secret`` can
        be embedded in the body.

        See https://tools.ietf.org/html/rfc6749#section-2.3.1
        """
        credentials = parse_basic_auth(request.get("authorization"))
        grant_type = request.body.get("grant_type")

        if credentials:
            return {"client_id": credentials[0], "client_secret": credentials[1]}

        client_id = request.body.get("client_id")
        client_secret = request.body.get("client_secret")

        if client_id and client_secret:
            return {"client_id": client_id, "client_secret": client_secret}

        if not self.is_client_authentication_required(grant_type) and client_id:
            return {"client_id": client_id}

        raise InvalidClientError("Invalid client: cannot retrieve client credentials")

    async def handle_grant_type(self, request: Request, client: Client) -> Token:
        """Dispatch to the grant type named by ``grant_type``."""
        grant_type = request.body.get("grant_type")

        if not grant_type:
            raise InvalidRequestError("Missing parameter: `grant_type`")

        if not validators.nchar(grant_type) and not validators.uri(grant_type):
            raise InvalidRequestError("Invalid parameter: `grant_type`")

        if grant_type not in self.grant_types:
            raise UnsupportedGrantTypeError("Unsupported grant type: `grant_type` is invalid")

        if grant_type not in (client.grants or []):
            raise UnauthorizedClientError("Unauthorized client: `grant_type` is invalid")

        logger.debug("Handling grant type %s for client %s", grant_type, client.id)

        grant_class = self.grant_types[grant_type]
        grant = grant_class(
            model=self.model,
            access_token_lifetime=client.access_token_lifetime or self.access_token_lifetime,
            refresh_token_lifetime=client.refresh_token_lifetime or self.refresh_token_lifetime,
            always_issue_new_refresh_token=self.always_issue_new_refresh_token,
        )

        return await grant.handle(request, client)

    @beartype
    def get_token_type(self, model: TokenModel) -> BearerTokenType:
        """Build the token response envelope."""
        return BearerTokenType.from_token_model(model)

    @beartype
    def update_success_response(self, response: Response, token_type: BearerTokenType) -> None:
        response.body = token_type.to_dict()
        response.set("Cache-Control", "no-store")
        response.set("Pragma", "no-cache")

    @beartype
    def update_error_response(self, response: Response, error: OAuthError) -> None:
        response.body = error.to_dict()
        response.status = error.code

    @beartype
    def is_client_authentication_required(self, grant_type: Any) -> bool:
        """Whether ``grant_type`` needs a client secret (default: yes)."""
        if self.require_client_authentication:
            return self.require_client_authentication.get(grant_type) is not False
        return True
