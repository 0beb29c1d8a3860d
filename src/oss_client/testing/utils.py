# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
from .._http import URI, OSSRequest, tuples_to_fields


def create_test_request(
    method: str = "GET",
    host: str = "test-bucket.oss.example.com",
    path: str | None = None,
    headers: list[tuple[str, str]] | None = None,
    body: bytes | None = None,
) -> OSSRequest:
    """Create a test request.

    :param method: HTTP method (GET, POST, etc.)
    :param host: Host name (e.g., "test-bucket.oss.example.com")
    :param path: Optional path (e.g., "/object.txt")
    :param headers: Optional headers
    :param body: Optional body
    :returns: OSSRequest ready for MockHTTPClient.send()
    """
    return OSSRequest(
        destination=URI(host=host, path=path),
        method=method,
        fields=tuples_to_fields(headers or []),
        body=body,
    )
