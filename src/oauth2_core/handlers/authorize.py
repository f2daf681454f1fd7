# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Authorization endpoint handler.

Turns the resource owner's decision into an authorization code or an
implicit access token delivered through a redirect.

Errors found before the redirect URI is known (client and user resolution)
propagate to the caller. Every error after that point is written into the
redirect URI as ``error``/``error_description`` and then re-raised, so the
response is already a redirect when the caller sees the exception.

See https://tools.ietf.org/html/rfc6749#section-3.1
"""

from typing import Any

from beartype import beartype

from .. import validators
from ..core.awaitables import has_capability, require_capability, require_model, resolve
from ..core.logging_utils import get_logger
from ..errors import (
    AccessDeniedError,
    InvalidArgumentError,
    InvalidClientError,
    InvalidRequestError,
    InvalidScopeError,
    OAuthError,
    ServerError,
    UnauthorizedClientError,
    UnsupportedResponseTypeError,
)
from ..grant_types import AbstractGrantType, GrantType
from ..models.entities import AuthorizationCode, Client, Token
from ..redirect_uri import RedirectUri
from ..request import Request
from ..response import Response
from ..response_types import RESPONSE_TYPES, AbstractResponseType, ResponseType
from .authenticate import AuthenticateHandler

logger = get_logger(__name__)


class AuthorizeHandler:
    """Handle authorization requests.

    Args:
        model: Storage model; must implement ``get_client`` and
            ``save_authorization_code``.
        authenticate_handler: Resolves the resource owner. Either an object
            with a ``handle(request, response)`` method or a callable with the
            same signature returning the user. Defaults to an
            ``AuthenticateHandler`` over ``model``.
        authorization_code_lifetime: Authorization code lifetime in seconds.
        access_token_lifetime: Access token lifetime for the ``token``
            response type.
        allow_empty_state: Accept requests without ``state``.
        authenticate_options: Keyword arguments for the default
            ``AuthenticateHandler``.
    """

    def __init__(
        self,
        *,
        model: Any = None,
        authenticate_handler: Any = None,
        authorization_code_lifetime: int | None = None,
        access_token_lifetime: int | None = None,
        allow_empty_state: bool = False,
        **authenticate_options: Any,
    ) -> None:
        if authenticate_handler is not None and not (
            has_capability(authenticate_handler, "handle") or callable(authenticate_handler)
        ):
            raise InvalidArgumentError(
                "Invalid argument: authenticate_handler does not implement `handle()`"
            )

        if not authorization_code_lifetime:
            raise InvalidArgumentError("Missing parameter: `authorization_code_lifetime`")

        self.model = require_model(model)
        require_capability(self.model, "get_client", "save_authorization_code")

        self.authenticate_handler = authenticate_handler or AuthenticateHandler(
            model=self.model, **authenticate_options
        )
        self.authorization_code_lifetime = authorization_code_lifetime
        self.access_token_lifetime = access_token_lifetime
        self.allow_empty_state = allow_empty_state

    async def handle(self, request: Request, response: Response) -> AuthorizationCode | Token:
        """Authorize a client and redirect the user-agent back to it.

        Returns the issued authorization code (``code``) or access token
        (``token``).
        """
        if not isinstance(request, Request):
            raise InvalidArgumentError("Invalid argument: `request` must be an instance of Request")

        if not isinstance(response, Response):
            raise InvalidArgumentError("Invalid argument: `response` must be an instance of Response")

        if request.query.get("allowed") == "false":
            raise AccessDeniedError("Access denied: user denied access to application")

        try:
            client = await self.get_client(request)
            user = await self.get_user(request, response)
        except Exception as exc:
            if isinstance(exc, OAuthError) and not isinstance(exc, InvalidArgumentError):
                raise
            logger.warning("Unexpected error while resolving the authorization request", exc_info=exc)
            raise ServerError(exc) from exc

        uri = self.get_redirect_uri(request, client)
        state: str | None = None
        response_type: AbstractResponseType | None = None

        try:
            requested_scope = self.get_scope(request)
            scope = await self.validate_scope(user, client, requested_scope)
            state = self.get_state(request)
            response_type_class = self.get_response_type(request, client)
            response_type = response_type_class(
                model=self.model,
                authorization_code_lifetime=self.authorization_code_lifetime,
                access_token_lifetime=self.access_token_lifetime,
            )

            logger.debug(
                "Authorizing client %s with response type %s",
                client.id,
                request.param("response_type"),
            )

            artifact = await response_type.handle(request, client, user, uri, scope)
            redirect_uri = self.build_successful_redirect_uri(uri, response_type)
            self.update_response(response, redirect_uri, state, response_type)

            return artifact
        except Exception as exc:
            # InvalidArgumentError is a contract violation, never a wire error.
            if isinstance(exc, OAuthError) and not isinstance(exc, InvalidArgumentError):
                error = exc
            else:
                logger.warning("Unexpected error while authorizing client %s", client.id, exc_info=exc)
                error = ServerError(exc)

            if state is None:
                state = self.get_error_state(request)

            redirect_uri = self.build_error_redirect_uri(uri, error, response_type)
            self.update_response(response, redirect_uri, state, response_type)

            if error is exc:
                raise
            raise error from exc

    async def get_client(self, request: Request) -> Client:
        """Resolve the client and check it may use the requested flow."""
        client_id = request.param("client_id")

        if not client_id:
            raise InvalidRequestError("Missing parameter: `client_id`")

        if not validators.vschar(client_id):
            raise InvalidRequestError("Invalid parameter: `client_id`")

        redirect_uri = request.param("redirect_uri")

        if redirect_uri and not validators.uri(redirect_uri):
            raise InvalidRequestError("Invalid request: `redirect_uri` is not a valid URI")

        client = Client.coerce(await resolve(self.model.get_client(client_id, None)))

        if client is None:
            raise InvalidClientError("Invalid client: client credentials are invalid")

        if not client.grants:
            raise InvalidClientError("Invalid client: missing client `grants`")

        if request.param("response_type") == ResponseType.TOKEN.value:
            implied_grant = GrantType.IMPLICIT.value
        else:
            implied_grant = GrantType.AUTHORIZATION_CODE.value

        if implied_grant not in client.grants:
            raise UnauthorizedClientError("Unauthorized client: `grant_type` is invalid")

        if not client.redirect_uris:
            raise InvalidClientError("Invalid client: missing client `redirect_uris`")

        if redirect_uri and redirect_uri not in client.redirect_uris:
            raise InvalidClientError("Invalid client: `redirect_uri` does not match client value")

        return client

    async def get_user(self, request: Request, response: Response) -> Any:
        """Resolve the resource owner through the authenticate handler."""
        handler = self.authenticate_handler

        if has_capability(handler, "handle"):
            data = await resolve(handler.handle(request, response))
        else:
            data = await resolve(handler(request, response))

        user = data.user if isinstance(handler, AuthenticateHandler) else data

        if not user:
            raise ServerError("Server error: `handle()` did not return a `user` object")

        return user

    @beartype
    def get_redirect_uri(self, request: Request, client: Client) -> str:
        """Requested redirect URI, or the client's first registered one."""
        return request.param("redirect_uri") or client.redirect_uris[0]

    @staticmethod
    def get_scope(request: Request) -> str | None:
        return AbstractGrantType.get_scope(request)

    async def validate_scope(self, user: Any, client: Client, scope: str | None) -> str | None:
        """Let the model narrow the requested scope; pass it through otherwise."""
        if not has_capability(self.model, "validate_scope"):
            return scope

        validated = await resolve(self.model.validate_scope(user, client, scope))

        if not validated:
            raise InvalidScopeError("Invalid scope: Requested scope is invalid")

        return validated

    @beartype
    def get_state(self, request: Request) -> str | None:
        state = request.param("state")

        if not self.allow_empty_state and not state:
            raise InvalidRequestError("Missing parameter: `state`")

        if state and not validators.vschar(state):
            raise InvalidRequestError("Invalid parameter: `state`")

        return state or None

    @beartype
    def get_error_state(self, request: Request) -> str | None:
        """``state`` to echo on an error redirect raised before it was validated."""
        state = request.param("state")
        return state if validators.vschar(state) else None

    @beartype
    def get_response_type(self, request: Request, client: Client) -> type[AbstractResponseType]:
        response_type = request.param("response_type")

        if not response_type:
            raise InvalidRequestError("Missing parameter: `response_type`")

        if response_type not in RESPONSE_TYPES:
            raise UnsupportedResponseTypeError(
                "Unsupported response type: `response_type` is not supported"
            )

        if (
            response_type == ResponseType.TOKEN.value
            and GrantType.IMPLICIT.value not in (client.grants or [])
        ):
            raise UnauthorizedClientError("Unauthorized client: `grant_type` is invalid")

        return RESPONSE_TYPES[response_type]

    @beartype
    def build_successful_redirect_uri(
        self, uri: str, response_type: AbstractResponseType
    ) -> RedirectUri:
        return response_type.build_redirect_uri(RedirectUri.parse(uri))

    @beartype
    def build_error_redirect_uri(
        self,
        uri: str,
        error: OAuthError,
        response_type: AbstractResponseType | None = None,
    ) -> RedirectUri:
        """Put ``error`` and ``error_description`` where the flow carries its parameters.

        Falls back to the query string when the response type is unknown.
        """
        redirect_uri = RedirectUri.parse(uri)
        redirect_uri = self._set_param(redirect_uri, "error", error.name, response_type)
        if error.message:
            redirect_uri = self._set_param(
                redirect_uri, "error_description", error.message, response_type
            )
        return redirect_uri

    @beartype
    def update_response(
        self,
        response: Response,
        redirect_uri: RedirectUri,
        state: str | None,
        response_type: AbstractResponseType | None = None,
    ) -> None:
        if state:
            redirect_uri = self._set_param(redirect_uri, "state", state, response_type)

        response.redirect(redirect_uri.to_url())

    @staticmethod
    def _set_param(
        redirect_uri: RedirectUri,
        key: str,
        value: str,
        response_type: AbstractResponseType | None,
    ) -> RedirectUri:
        if response_type is None:
            return redirect_uri.with_query_param(key, value)
        return response_type.set_redirect_uri_param(redirect_uri, key, value)
