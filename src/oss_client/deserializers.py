# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
"""Streaming decoder for object listing documents.

The document is consumed as a forward-only stream of start and end events, so the
size of a listing does not dictate the memory needed to decode it. A typical
document looks like::

    <ListBucketResult>
      <Name>examplebucket</Name>
      <Prefix>fun/</Prefix>
      <MaxKeys>100</MaxKeys>
      <Delimiter>/</Delimiter>
      <IsTruncated>true</IsTruncated>
      <NextContinuationToken>CgJiYw--</NextContinuationToken>
      <Contents>
        <Key>fun/movie/001.avi</Key>
        <LastModified>2012-02-24T08:43:07.000Z</LastModified>
        <ETag>"5B3C1A2E053D763E1B002CC607C5A0FE1****"</ETag>
        <Size>344606</Size>
      </Contents>
      <CommonPrefixes>
        <Prefix>fun/test/</Prefix>
      </CommonPrefixes>
    </ListBucketResult>
"""

from collections.abc import Iterable
from enum import Enum, StrEnum
from xml.etree.ElementTree import Element, ParseError, XMLPullParser

from .exceptions import ErrorKind, OSSClientError
from .types import ListPage, ObjectSummary


class ListTag(StrEnum):
    CONTENTS = "Contents"
    COMMON_PREFIXES = "CommonPrefixes"
    PREFIX = "Prefix"
    IS_TRUNCATED = "IsTruncated"
    NEXT_CONTINUATION_TOKEN = "NextContinuationToken"


# Child tags of Contents mapped to the ObjectSummary attribute they populate.
_SUMMARY_FIELDS: dict[str, str] = {
    "Key": "key",
    "LastModified": "last_modified",
    "ETag": "etag",
    "Size": "size",
}


class ListParserState(Enum):
    IDLE = 0
    IN_CONTENTS = 1
    IN_COMMON_PREFIXES = 2


def _local_name(tag: str) -> str:
    # ElementTree reports namespaced tags as "{uri}local".
    return tag.rpartition("}")[2]


def _parse_bool(given: str) -> bool:
    match given:
        case "true":
            return True
        case "false":
            return False
        case _:
            raise OSSClientError(
                f"Expected 'true' or 'false' in {ListTag.IS_TRUNCATED}, "
                f"found: {given!r}",
                kind=ErrorKind.DECODE,
            )


class ListObjectsDeserializer:
    """Incrementally decodes a listing document into a :py:class:`ListPage`.

    Chunks of the document are handed to :py:meth:`feed` as they arrive and
    :py:meth:`close` returns the decoded page. Any failure aborts the decode, no
    partially populated page is ever returned.
    """

    def __init__(self) -> None:
        self._parser = XMLPullParser(events=("start", "end"))
        self._state = ListParserState.IDLE
        self._current = ObjectSummary()
        self._page = ListPage()
        self._stack: list[Element] = []
        self._received_data = False

    def feed(self, data: bytes) -> None:
        """Consume the next chunk of the document."""
        if data.strip():
            self._received_data = True
        try:
            self._parser.feed(data)
            self._process_events()
        except ParseError as e:
            raise self._parse_error(e) from e

    def close(self) -> ListPage:
        """Signal the end of the document and return the decoded page.

        :raises OSSClientError: With ``ErrorKind.DECODE`` if the document is malformed
            or ends while an element is still open.
        """
        if not self._received_data:
            return ListPage()
        try:
            self._parser.close()
            self._process_events()
        except ParseError as e:
            raise self._parse_error(e) from e
        page = self._page
        if not page.is_truncated:
            page.next_marker = ""
        return page

    def _parse_error(self, error: ParseError) -> OSSClientError:
        return OSSClientError(
            f"Unable to parse listing document: {error}", kind=ErrorKind.DECODE
        )

    def _process_events(self) -> None:
        for event, element in self._parser.read_events():
            if event == "start":
                self._stack.append(element)
                self._on_start(_local_name(element.tag))
            else:
                self._stack.pop()
                self._on_end(_local_name(element.tag), element.text or "")
                # Completed children of the root are no longer needed.
                if len(self._stack) == 1:
                    self._stack[0].remove(element)

    def _on_start(self, tag: str) -> None:
        match self._state, tag:
            case ListParserState.IDLE, ListTag.CONTENTS:
                self._current = ObjectSummary()
                self._state = ListParserState.IN_CONTENTS
            case ListParserState.IDLE, ListTag.COMMON_PREFIXES:
                self._state = ListParserState.IN_COMMON_PREFIXES
            case _:
                pass

    def _on_end(self, tag: str, text: str) -> None:
        match self._state:
            case ListParserState.IN_CONTENTS:
                if tag == ListTag.CONTENTS:
                    self._page.objects.append(self._current)
                    self._current = ObjectSummary()
                    self._state = ListParserState.IDLE
                elif (attribute := _SUMMARY_FIELDS.get(tag)) is not None:
                    setattr(self._current, attribute, text)
            case ListParserState.IN_COMMON_PREFIXES:
                if tag == ListTag.COMMON_PREFIXES:
                    self._state = ListParserState.IDLE
                elif tag == ListTag.PREFIX:
                    self._page.prefixes.append(text)
            case ListParserState.IDLE:
                if tag == ListTag.IS_TRUNCATED:
                    self._page.is_truncated = _parse_bool(text.strip())
                elif tag == ListTag.NEXT_CONTINUATION_TOKEN:
                    self._page.next_marker = text


def _chunks(body: bytes | Iterable[bytes]) -> Iterable[bytes]:
    if isinstance(body, bytes | bytearray):
        return [bytes(body)]
    return body


def deserialize_list_page(body: bytes | Iterable[bytes]) -> ListPage:
    """Decode a listing document into a :py:class:`ListPage`.

    :param body: The document, whole or as an iterable of chunks.
    :raises OSSClientError: With ``ErrorKind.DECODE`` on malformed input.
    """
    deserializer = ListObjectsDeserializer()
    for chunk in _chunks(body):
        deserializer.feed(chunk)
    return deserializer.close()


def deserialize_keys(body: bytes | Iterable[bytes]) -> list[str]:
    """Decode a listing document into the flat list of its object keys."""
    return [summary.key for summary in deserialize_list_page(body).objects]
