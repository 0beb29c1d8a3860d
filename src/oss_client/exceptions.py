# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
from dataclasses import dataclass, field
from enum import Enum, StrEnum


class OSSSDKError(Exception):
    """Top-level exception to capture SDK-related errors."""


class MissingExpectedParameterError(OSSSDKError, ValueError):
    """Some signing flows require specific signing properties to be present."""


class ErrorKind(Enum):
    """The class of failure carried by an :py:class:`OSSClientError`."""

    ENCODING = "encoding"
    """A field name or value cannot be transmitted as an HTTP header."""

    OPERATION = "operation"
    """The service answered with a non-success status code."""

    DECODE = "decode"
    """A response document is malformed or holds an unparsable value."""

    TEXT_DECODE = "text-decode"
    """A buffered response body is not valid UTF-8."""

    CONFIGURATION = "configuration"
    """Required client configuration is missing or invalid."""


class Operation(StrEnum):
    """The object operation a request was issued for."""

    PUT = "PUT"
    GET = "GET"
    COPY = "COPY"
    DELETE = "DELETE"
    HEAD = "HEAD"


_OPERATION_VERBS: dict[Operation, str] = {
    Operation.PUT: "put",
    Operation.GET: "get",
    Operation.COPY: "copy",
    Operation.DELETE: "delete",
    Operation.HEAD: "head",
}


@dataclass(kw_only=True)
class OSSClientError(OSSSDKError):
    """Error raised by client operations.

    Every failure the client itself detects is one of these, tagged with an
    :py:class:`ErrorKind`. Transport failures raised by the HTTP client propagate
    unchanged.
    """

    kind: ErrorKind
    """The class of failure."""

    message: str = field(default="", kw_only=False)
    """A human-readable description of the failure."""

    operation: Operation | None = None
    """The operation that failed. Only set for ``ErrorKind.OPERATION``."""

    status: int | None = None
    """The HTTP status code. Only set for ``ErrorKind.OPERATION``."""

    def __post_init__(self):
        super().__init__(self.message)


def _format_status(status: int, reason: str | None) -> str:
    if reason:
        return f"{status} {reason}"
    return str(status)


def classify_response(
    *, operation: Operation, status: int, reason: str | None = None
) -> OSSClientError | None:
    """Map an HTTP status to the error for the given operation.

    :param operation: The operation the request was issued for.
    :param status: The HTTP status code of the response.
    :param reason: The reason phrase of the response, if any.
    :returns: ``None`` for any 2xx status, otherwise the typed operation error. The
        message always includes the numeric status code.
    """
    if 200 <= status < 300:
        return None
    verb = _OPERATION_VERBS[operation]
    return OSSClientError(
        f"{operation} ERROR: can not {verb} object, "
        f"status code: {_format_status(status, reason)}",
        kind=ErrorKind.OPERATION,
        operation=operation,
        status=status,
    )
