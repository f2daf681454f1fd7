# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Conversion between Starlette/FastAPI requests and the engine value objects."""

from fastapi import Request as StarletteRequest
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.responses import Response as StarletteResponse

from ..request import Request
from ..response import Response

_FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


async def to_oauth_request(request: StarletteRequest) -> Request:
    """Build an engine ``Request`` from an incoming HTTP request.

    Form bodies are parsed; other bodies are left empty.
    """
    content_type = request.headers.get("content-type", "").split(";", 1)[0].strip().lower()

    body: dict[str, str] = {}
    if content_type in _FORM_TYPES:
        form = await request.form()
        body = {key: value for key, value in form.items() if isinstance(value, str)}

    return Request(
        headers=dict(request.headers),
        method=request.method,
        query=dict(request.query_params),
        body=body,
        extensions={"client_host": request.client.host if request.client else None},
    )


def to_starlette_response(response: Response) -> StarletteResponse:
    """Render an engine ``Response`` as a redirect or a JSON body."""
    location = response.get("location")

    if location and response.status in (301, 302, 303, 307, 308):
        headers = {k: v for k, v in response.headers.items() if k != "location"}
        return RedirectResponse(url=location, status_code=response.status, headers=headers)

    return JSONResponse(
        content=response.body,
        status_code=response.status,
        headers=dict(response.headers),
    )
