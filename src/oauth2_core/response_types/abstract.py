# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Shared contract of the authorize endpoint response types."""

from abc import ABC, abstractmethod
from typing import Any

from ..errors import InvalidArgumentError
from ..models.entities import Client
from ..redirect_uri import RedirectUri
from ..request import Request


class AbstractResponseType(ABC):
    """Base response type.

    Subclasses decide what gets issued (``handle``) and where its parameters
    go in the redirect URI (``set_redirect_uri_param``).
    """

    @abstractmethod
    async def handle(
        self,
        request: Request,
        client: Client,
        user: Any,
        uri: str,
        scope: str | None,
    ) -> Any:
        """Issue the artifact for an approved authorization request."""

    @abstractmethod
    def build_redirect_uri(self, redirect_uri: RedirectUri) -> RedirectUri:
        """Add the issued artifact to the redirect URI."""

    @abstractmethod
    def add_param(self, redirect_uri: RedirectUri, key: str, value: str) -> RedirectUri:
        """Put one parameter where this response type carries its parameters."""

    def set_redirect_uri_param(
        self, redirect_uri: RedirectUri | None, key: str | None, value: Any
    ) -> RedirectUri:
        """Return ``redirect_uri`` with ``key`` set to the percent-encoded ``value``."""
        if redirect_uri is None:
            raise InvalidArgumentError("Missing parameter: `redirect_uri`")

        if not key:
            raise InvalidArgumentError("Missing parameter: `key`")

        return self.add_param(redirect_uri, key, "" if value is None else str(value))

    @staticmethod
    def check_arguments(request: Request | None, client: Client | None, user: Any, uri: str | None) -> None:
        """Fail fast on malformed calls."""
        if request is None:
            raise InvalidArgumentError("Missing parameter: `request`")

        if client is None:
            raise InvalidArgumentError("Missing parameter: `client`")

        if user is None:
            raise InvalidArgumentError("Missing parameter: `user`")

        if not uri:
            raise InvalidArgumentError("Missing parameter: `uri`")
