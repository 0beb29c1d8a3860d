# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from collections.abc import AsyncIterable, Iterable, Iterator, Mapping
from copy import deepcopy
from dataclasses import dataclass, field, replace

import oss_client.interfaces.http as interfaces_http


def _key(name: str) -> str:
    return name.lower()


class Field(interfaces_http.Field):
    """One header of an OSS request or response.

    The name keeps the casing it was given, which is what goes on the wire. Values
    are kept verbatim, without trimming, in the order they were added.
    """

    def __init__(self, *, name: str, values: Iterable[str] | None = None):
        self.name = name
        self.values: list[str] = list(values or ())

    def add(self, value: str) -> None:
        self.values.append(value)

    def as_string(self, delimiter: str = ",") -> str:
        """Join the values with ``delimiter``.

        This is the form a repeated header takes in the string to sign. A field
        without values renders as the empty string.
        """
        return delimiter.join(self.values)

    def as_tuples(self) -> list[tuple[str, str]]:
        """One ``(name, value)`` pair per value, as handed to the transport."""
        return [(self.name, value) for value in self.values]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Field):
            return False
        return self.name == other.name and self.values == other.values

    def __repr__(self) -> str:
        return f"Field(name={self.name!r}, values={self.values!r})"


class Fields(interfaces_http.Fields):
    """Headers of a request or response, looked up by case-insensitive name.

    Fields whose names differ only in case are merged into the first of them, their
    values appended in arrival order. This lets a response's raw header list be
    loaded as is.
    """

    def __init__(self, initial: Iterable[interfaces_http.Field] | None = None):
        """
        :param initial: Fields to start with. They are copied, the caller's objects
            are never modified.
        """
        self.entries: dict[str, interfaces_http.Field] = {}
        if initial is not None:
            self.extend(initial)

    def set_field(self, field: interfaces_http.Field) -> None:
        """Store ``field``, replacing any field of the same name."""
        self.entries[_key(field.name)] = field

    def extend(self, other: Iterable[interfaces_http.Field]) -> None:
        """Merge ``other`` into these fields.

        Values of a name already present are appended to it. Any other field is
        copied in.
        """
        for other_field in other:
            if (current := self.entries.get(_key(other_field.name))) is not None:
                for value in other_field.values:
                    current.add(value)
            else:
                self.set_field(deepcopy(other_field))

    def __getitem__(self, name: str) -> interfaces_http.Field:
        return self.entries[_key(name)]

    def __contains__(self, name: str) -> bool:
        return _key(name) in self.entries

    def __iter__(self) -> Iterator[interfaces_http.Field]:
        yield from self.entries.values()

    def __len__(self) -> int:
        return len(self.entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Fields):
            return False
        return list(self.entries.items()) == list(other.entries.items())

    def __repr__(self) -> str:
        return f"Fields({list(self.entries.values())!r})"


def tuples_to_fields(tuples: Iterable[tuple[str, str]]) -> Fields:
    """Load ``(name, value)`` pairs, such as a response's raw headers, into
    ``Fields``. Repeated names are merged in the order they appear."""
    return Fields(Field(name=name, values=[value]) for name, value in tuples)


def mapping_to_fields(mapping: Mapping[str, str] | None) -> Fields:
    """Convert a plain ``{name: value}`` mapping to ``Fields``."""
    return tuples_to_fields((mapping or {}).items())


@dataclass(kw_only=True, frozen=True)
class URI(interfaces_http.URI):
    """Where an :py:class:`OSSRequest` is sent.

    No component is escaped by :py:meth:`build`. Bucket names, object keys and query
    values are emitted exactly as supplied.
    """

    scheme: str = "http"
    host: str
    """The virtual-hosted name, e.g. ``my-bucket.oss-cn-hangzhou.aliyuncs.com``."""
    port: int | None = None
    path: str | None = None
    query: str | None = None

    @property
    def netloc(self) -> str:
        """``host`` or ``host:port`` when a port is set."""
        return self.host if self.port is None else f"{self.host}:{self.port}"

    def build(self) -> str:
        """Render ``{scheme}://{netloc}{path}?{query}``, leaving out an empty query."""
        path = self.path or ""
        if path and not path.startswith("/"):
            path = f"/{path}"
        uri = f"{self.scheme}://{self.netloc}{path}"
        return f"{uri}?{self.query}" if self.query else uri

    def with_query(self, query: str | None) -> URI:
        """Return a copy of this URI carrying a different query string."""
        return replace(self, query=query)


@dataclass(kw_only=True)
class OSSRequest(interfaces_http.Request):
    """A request bound for an OSS endpoint."""

    destination: URI
    method: str
    fields: Fields = field(default_factory=Fields)
    body: bytes | None = field(default=None, repr=False)

    def __deepcopy__(self, memo: dict[int, OSSRequest] | None = None) -> OSSRequest:
        if memo is None:
            memo = {}

        if id(self) in memo:
            return memo[id(self)]

        # Only the fields are mutable, the URI and bytes body are shared.
        new_instance = self.__class__(
            destination=self.destination,
            method=self.method,
            fields=deepcopy(self.fields, memo),
            body=self.body,
        )
        memo[id(self)] = new_instance
        return new_instance


@dataclass(kw_only=True)
class HTTPResponse:
    """Basic implementation of :py:class:`.interfaces.http.Response`.

    Implementations of :py:class:`.interfaces.http.HTTPClient` may return instances of
    this class or of custom response implementations.
    """

    body: AsyncIterable[bytes] | bytes = field(repr=False, default=b"")
    """The whole payload, or an async iterable of its chunks."""

    status: int
    fields: Fields
    reason: str | None = None

    async def consume_body_async(self) -> bytes:
        """Drain the body and return it as bytes."""
        if isinstance(self.body, bytes | bytearray):
            return bytes(self.body)
        full = b""
        async for chunk in self.body:
            full += chunk
        return full
