# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
from collections import deque
from copy import deepcopy
from typing import Any

from .._http import HTTPResponse, tuples_to_fields
from ..aio.utils import async_list
from ..interfaces.http import HTTPClient, HTTPRequestConfiguration, Request


class MockHTTPClient(HTTPClient):
    """Implementation of :py:class:`.interfaces.http.HTTPClient` solely for testing
    purposes.

    Simulates HTTP request/response behavior. Responses are queued in FIFO order and
    requests are captured for inspection.
    """

    def __init__(self) -> None:
        self._response_queue: deque[dict[str, Any]] = deque()
        self._captured_requests: list[Request] = []
        self.closed = False

    def add_response(
        self,
        status: int = 200,
        headers: list[tuple[str, str]] | None = None,
        body: bytes | list[bytes] = b"",
        reason: str | None = None,
    ) -> None:
        """Queue a response for the next request.

        :param status: HTTP status code.
        :param headers: HTTP response headers as list of (name, value) tuples.
        :param body: Response body as bytes, or as the list of chunks it is streamed
            in.
        :param reason: The reason phrase.
        """
        self._response_queue.append(
            {
                "status": status,
                "headers": headers or [],
                "body": [body] if isinstance(body, bytes) else body,
                "reason": reason,
            }
        )

    async def send(
        self,
        *,
        request: Request,
        request_config: HTTPRequestConfiguration | None = None,
    ) -> HTTPResponse:
        """Send HTTP request and return configured response.

        :param request: The request including destination URI, fields, payload.
        :param request_config: Configuration specific to this request.
        :returns: Pre-configured HTTP response from the queue.
        :raises MockHTTPClientError: If no responses are queued.
        """
        self._captured_requests.append(deepcopy(request))

        if self._response_queue:
            response_data = self._response_queue.popleft()
            return HTTPResponse(
                status=response_data["status"],
                fields=tuples_to_fields(response_data["headers"]),
                body=async_list(response_data["body"]),
                reason=response_data["reason"],
            )
        else:
            raise MockHTTPClientError(
                "No responses queued in MockHTTPClient. Use add_response() to queue responses."
            )

    async def close(self) -> None:
        self.closed = True

    @property
    def call_count(self) -> int:
        """The number of requests made to this client."""
        return len(self._captured_requests)

    @property
    def captured_requests(self) -> list[Request]:
        """The list of all requests captured by this client."""
        return self._captured_requests.copy()

    def __deepcopy__(self, memo: Any) -> "MockHTTPClient":
        return self


class MockHTTPClientError(Exception):
    """Exception raised by MockHTTPClient for test setup issues."""
