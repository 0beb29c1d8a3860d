# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
from itertools import chain

import aiohttp
import yarl

from .._http import HTTPResponse, tuples_to_fields
from ..interfaces.http import HTTPClient, HTTPRequestConfiguration, Request

# aiohttp would otherwise add a Content-Type that takes no part in the signature.
_SKIP_AUTO_HEADERS = ("Content-Type",)


class AIOHTTPClient(HTTPClient):
    """Implementation of :py:class:`.interfaces.http.HTTPClient` using aiohttp."""

    def __init__(self, *, _session: aiohttp.ClientSession | None = None) -> None:
        """
        :param _session: An existing session to send requests with. When omitted a
            session is created on first use and closed by :py:meth:`close`.
        """
        self._session = _session
        self._owns_session = _session is None

    async def send(
        self,
        *,
        request: Request,
        request_config: HTTPRequestConfiguration | None = None,
    ) -> HTTPResponse:
        """Send HTTP request using aiohttp client.

        :param request: The request including destination URI, fields, payload.
        :param request_config: Configuration specific to this request.
        """
        request_config = request_config or HTTPRequestConfiguration()

        headers_list = list(
            chain.from_iterable(fld.as_tuples() for fld in request.fields)
        )

        # The destination is already encoded, it must reach the wire unchanged.
        url = yarl.URL(request.destination.build(), encoded=True)
        timeout = aiohttp.ClientTimeout(sock_read=request_config.read_timeout)

        async with self._get_session().request(
            method=request.method,
            url=url,
            headers=headers_list,
            data=request.body,
            timeout=timeout,
            skip_auto_headers=_SKIP_AUTO_HEADERS,
        ) as resp:
            return await self._marshal_response(resp)

    async def close(self) -> None:
        """Close the session if this client created it."""
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession()
        return self._session

    async def _marshal_response(self, aiohttp_resp: aiohttp.ClientResponse) -> HTTPResponse:
        """Convert a ``aiohttp.ClientResponse`` to an ``oss_client.HTTPResponse``"""
        return HTTPResponse(
            status=aiohttp_resp.status,
            fields=tuples_to_fields(aiohttp_resp.headers.items()),
            body=await aiohttp_resp.read(),
            reason=aiohttp_resp.reason,
        )
