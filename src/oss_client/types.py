# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

from dataclasses import dataclass, field, replace

from ._http import Fields
from .exceptions import ErrorKind, OSSClientError


@dataclass(kw_only=True, frozen=True)
class ListOptions:
    """Options for a version 2 object listing.

    Follow-up pages are requested with :py:meth:`next_page` or
    :py:func:`dataclasses.replace`.
    """

    prefix: str = ""
    """Only keys starting with this prefix are listed."""

    marker: str = ""
    """The continuation token returned by a truncated listing. Opaque."""

    delimiter: str = ""
    """Keys sharing a prefix up to this character are grouped as common prefixes."""

    max_keys: int | None = None
    """The maximum number of entries per page. ``None`` leaves the page size to the
    service, which defaults to 1000."""

    def next_page(self, marker: str) -> ListOptions:
        """Return options continuing the listing from ``marker``."""
        return replace(self, marker=marker)


@dataclass(kw_only=True)
class PutOptions:
    """Options for uploading an object."""

    content_type: str | None = None
    meta: dict[str, str] = field(default_factory=dict)
    """User metadata, sent as ``x-oss-meta-*`` headers."""

    headers: dict[str, str] = field(default_factory=dict)
    """Additional request headers."""

    params: dict[str, str | None] = field(default_factory=dict)
    """Query parameters. Only sub-resources take part in the signature."""


@dataclass(kw_only=True)
class ObjectSummary:
    """A single entry of a detailed listing, as found on the wire."""

    key: str = ""
    last_modified: str = ""
    etag: str = ""
    size: str = ""

    @property
    def size_bytes(self) -> int:
        """The object size parsed to an integer."""
        return int(self.size)


@dataclass(kw_only=True)
class ListPage:
    """One page of a detailed listing.

    When ``is_truncated`` is false the listing is complete and ``next_marker`` is
    empty. Otherwise passing ``next_marker`` back as the marker of the next request
    yields the following page.
    """

    objects: list[ObjectSummary] = field(default_factory=list)
    prefixes: list[str] = field(default_factory=list)
    is_truncated: bool = False
    next_marker: str = ""


@dataclass(kw_only=True)
class GetObjectOutput:
    content: str
    meta: dict[str, str] = field(default_factory=dict)
    fields: Fields = field(default_factory=Fields)


@dataclass(kw_only=True)
class GetBufferedObjectOutput:
    content: bytes = field(repr=False)
    meta: dict[str, str] = field(default_factory=dict)
    fields: Fields = field(default_factory=Fields)

    def decode(self) -> GetObjectOutput:
        """Convert the buffered content to text.

        :raises OSSClientError: If the content is not valid UTF-8.
        """
        try:
            content = self.content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise OSSClientError(
                f"Object content is not valid UTF-8: {e}",
                kind=ErrorKind.TEXT_DECODE,
            ) from e
        return GetObjectOutput(content=content, meta=self.meta, fields=self.fields)
