# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""OAuth2 authorization and token endpoints for FastAPI."""

from typing import Any

from fastapi import APIRouter
from fastapi import Request as StarletteRequest
from starlette.responses import Response as StarletteResponse

from ..core.logging_utils import get_logger
from ..errors import OAuthError
from ..response import Response
from ..server import OAuth2Server
from .bindings import to_oauth_request, to_starlette_response

logger = get_logger(__name__)


def create_oauth2_router(
    server: OAuth2Server,
    *,
    authenticate_handler: Any = None,
    prefix: str = "/oauth2",
) -> APIRouter:
    """Create the router exposing ``/authorize`` and ``/token``.

    Args:
        server: Configured authorization server.
        authenticate_handler: Resolves the resource owner on ``/authorize``;
            see ``AuthorizeHandler``.
        prefix: Router prefix.
    """
    router = APIRouter(prefix=prefix, tags=["oauth2"])

    @router.api_route("/authorize", methods=["GET", "POST"])
    async def authorize(request: StarletteRequest) -> StarletteResponse:
        """OAuth2 authorization endpoint.

        Redirects back to the client with the issued code or token, or with
        ``error`` parameters once the redirect URI is known. Earlier errors
        are returned as JSON.
        """
        oauth_request = await to_oauth_request(request)
        oauth_response = Response()

        try:
            await server.authorize(
                oauth_request, oauth_response, authenticate_handler=authenticate_handler
            )
        except OAuthError as exc:
            logger.info("Authorization request failed: %s", exc.name)
            if oauth_response.status != 302:
                oauth_response.body = exc.to_dict()
                oauth_response.status = exc.code

        return to_starlette_response(oauth_response)

    @router.post("/token")
    async def token(request: StarletteRequest) -> StarletteResponse:
        """OAuth2 token endpoint."""
        oauth_request = await to_oauth_request(request)
        oauth_response = Response()

        try:
            await server.token(oauth_request, oauth_response)
        except OAuthError as exc:
            logger.info("Token request failed: %s", exc.name)
            oauth_response.body = exc.to_dict()
            oauth_response.status = exc.code

        return to_starlette_response(oauth_response)

    return router
