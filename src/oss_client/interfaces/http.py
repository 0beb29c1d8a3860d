# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from collections.abc import AsyncIterable, Iterable, Iterator
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


class Field(Protocol):
    """A header name with its values, in the order they were added."""

    name: str
    values: list[str]

    def add(self, value: str) -> None: ...

    def as_string(self, delimiter: str = ",") -> str:
        """All values joined with ``delimiter``."""
        ...

    def as_tuples(self) -> list[tuple[str, str]]:
        """One ``(name, value)`` pair per value."""
        ...


class Fields(Protocol):
    """Headers looked up by case-insensitive name."""

    # Keyed by lower-cased name.
    entries: dict[str, Field]

    def set_field(self, field: Field) -> None:
        """Store ``field``, replacing any field of the same name."""
        ...

    def extend(self, other: Iterable[Field]) -> None:
        """Append the values of ``other`` to fields already present and add the
        rest."""
        ...

    def __getitem__(self, name: str) -> Field: ...

    def __contains__(self, name: str) -> bool: ...

    def __iter__(self) -> Iterator[Field]: ...

    def __len__(self) -> int: ...


@runtime_checkable
class URI(Protocol):
    """Where a :py:class:`Request` is sent. Components are never escaped."""

    scheme: str
    host: str
    port: int | None
    path: str | None
    query: str | None

    def build(self) -> str:
        """Render ``{scheme}://{netloc}{path}?{query}``."""
        ...

    @property
    def netloc(self) -> str: ...


class Request(Protocol):
    """An HTTP request addressed to an OSS endpoint."""

    destination: URI
    method: str
    fields: Fields
    body: Iterable[bytes] | bytes | None


class Response(Protocol):
    """An HTTP response returned by an :py:class:`HTTPClient`."""

    @property
    def status(self) -> int: ...

    @property
    def fields(self) -> Fields: ...

    @property
    def reason(self) -> str | None:
        """The reason phrase sent with the status, if any."""
        ...

    @property
    def body(self) -> AsyncIterable[bytes] | bytes:
        """The whole payload, or an async iterable of its chunks."""
        ...

    async def consume_body_async(self) -> bytes:
        """Drain the body and return it as bytes."""
        ...


class HTTPClient(Protocol):
    """An asynchronous HTTP client interface.

    Connection pooling, TLS and timeouts belong to implementations of this protocol.
    Every call to ``send`` is exactly one round trip.
    """

    async def send(
        self,
        *,
        request: Request,
        request_config: HTTPRequestConfiguration | None = None,
    ) -> Response:
        """Send HTTP request over the wire and return the response.

        :param request: The request including destination URI, fields, payload.
        :param request_config: Configuration specific to this request.
        """
        ...


@dataclass(kw_only=True)
class HTTPRequestConfiguration:
    """Request-level HTTP configuration.

    :param read_timeout: How long, in seconds, the client will attempt to read the
        first byte over an established, open connection before timing out.
    """

    read_timeout: float | None = None
