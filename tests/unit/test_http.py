# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from copy import deepcopy

import pytest
from oss_client import URI, Field, Fields, HTTPResponse, OSSRequest
from oss_client._http import mapping_to_fields, tuples_to_fields
from oss_client.aio.utils import async_list


def test_field_single_valued() -> None:
    field = Field(name="fname", values=["fval"])
    assert field.name == "fname"
    assert field.values == ["fval"]
    assert field.as_string() == "fval"
    assert field.as_tuples() == [("fname", "fval")]


def test_field_multi_valued_joined_verbatim() -> None:
    field = Field(name="fname", values=["a", "b c", "d,e"])
    assert field.as_string() == "a,b c,d,e"
    assert field.as_string(delimiter=", ") == "a, b c, d,e"


def test_field_add() -> None:
    field = Field(name="fname")
    assert field.as_string() == ""
    field.add("one")
    field.add("two")
    assert field.values == ["one", "two"]


def test_field_equality() -> None:
    assert Field(name="a", values=["1"]) == Field(name="a", values=["1"])
    assert Field(name="a", values=["1"]) != Field(name="a", values=["2"])
    assert Field(name="a", values=["1"]) != Field(name="A", values=["1"])


def test_fields_are_case_insensitive() -> None:
    fields = Fields([Field(name="Content-Type", values=["text/plain"])])
    assert "content-type" in fields
    assert fields["CONTENT-TYPE"].as_string() == "text/plain"
    assert "content-length" not in fields
    assert fields["Content-type"].name == "Content-Type"


def test_fields_merge_repeated_initial_names() -> None:
    first = Field(name="x-oss-meta-a", values=["1"])
    fields = Fields([first, Field(name="X-OSS-Meta-A", values=["2"])])
    assert len(fields) == 1
    assert fields["x-oss-meta-a"].name == "x-oss-meta-a"
    assert fields["x-oss-meta-a"].values == ["1", "2"]
    # the caller's field is left untouched
    assert first.values == ["1"]


def test_set_field_replaces_any_casing() -> None:
    fields = Fields([Field(name="Date", values=["old"])])
    fields.set_field(Field(name="date", values=["new"]))
    assert len(fields) == 1
    assert fields["DATE"] == Field(name="date", values=["new"])


def test_fields_extend_appends_to_existing() -> None:
    fields = Fields([Field(name="x-oss-meta-a", values=["1"])])
    other = Fields(
        [
            Field(name="X-OSS-Meta-A", values=["2"]),
            Field(name="x-oss-meta-b", values=["3"]),
        ]
    )
    fields.extend(other)
    assert fields["x-oss-meta-a"].values == ["1", "2"]
    assert fields["x-oss-meta-b"].values == ["3"]
    # extend copies new fields
    assert fields["x-oss-meta-b"] is not other["x-oss-meta-b"]


def test_tuples_to_fields_merges_repeated_names() -> None:
    fields = tuples_to_fields([("Set-Cookie", "a"), ("set-cookie", "b"), ("ETag", "x")])
    assert fields["set-cookie"].values == ["a", "b"]
    assert fields["etag"].as_string() == "x"


def test_mapping_to_fields() -> None:
    assert len(mapping_to_fields(None)) == 0
    fields = mapping_to_fields({"Cache-Control": "no-cache"})
    assert fields["cache-control"].as_string() == "no-cache"


@pytest.mark.parametrize(
    "uri, expected",
    [
        (URI(host="b.example.com"), "http://b.example.com"),
        (URI(host="b.example.com", path="o.txt"), "http://b.example.com/o.txt"),
        (
            URI(scheme="https", host="b.example.com", port=8443, path="/o.txt"),
            "https://b.example.com:8443/o.txt",
        ),
        (
            URI(host="b.example.com", path="/a b/c", query="prefix=x y&acl"),
            "http://b.example.com/a b/c?prefix=x y&acl",
        ),
    ],
)
def test_uri_build(uri: URI, expected: str) -> None:
    assert uri.build() == expected


def test_uri_with_query() -> None:
    uri = URI(host="b.example.com", path="/o.txt", query="acl")
    updated = uri.with_query("uploads")
    assert updated.query == "uploads"
    assert uri.query == "acl"
    assert updated.netloc == "b.example.com"


def test_request_deepcopy_copies_fields() -> None:
    request = OSSRequest(
        destination=URI(host="b.example.com"),
        method="PUT",
        fields=Fields([Field(name="a", values=["1"])]),
        body=b"payload",
    )
    copied = deepcopy(request)
    copied.fields["a"].add("2")
    assert request.fields["a"].values == ["1"]
    assert copied.destination is request.destination
    assert copied.body == b"payload"


async def test_response_consume_bytes_body() -> None:
    response = HTTPResponse(status=200, fields=Fields(), body=b"content")
    assert await response.consume_body_async() == b"content"


async def test_response_consume_streamed_body() -> None:
    response = HTTPResponse(
        status=200, fields=Fields(), body=async_list([b"con", b"", b"tent"])
    )
    assert await response.consume_body_async() == b"content"
