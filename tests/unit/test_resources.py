# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

import pytest
from oss_client import ListOptions
from oss_client.resources import (
    SUB_RESOURCES,
    add_resource,
    build_query,
    canonicalize_resources,
    list_v2_params,
)


def test_keeps_only_sub_resources() -> None:
    params = {"acl": None, "foo": "bar"}
    assert canonicalize_resources(params) == "acl"


def test_allow_listed_value_is_kept() -> None:
    params = {"response-content-type": "text/plain", "not-signed": "x"}
    assert canonicalize_resources(params) == "response-content-type=text/plain"


def test_sorted_by_name() -> None:
    params = {"uploadId": "abc", "partNumber": "1", "acl": None}
    assert canonicalize_resources(params) == "acl&partNumber=1&uploadId=abc"


def test_sort_uses_code_point_order() -> None:
    params = {"udfName": "n", "udfImageDesc": None, "udfId": "1", "udf": None}
    assert canonicalize_resources(params) == "udf&udfId=1&udfImageDesc&udfName=n"


def test_is_deterministic() -> None:
    params = {"uploads": None, "acl": None, "delete": None, "tagging": None}
    reordered = dict(reversed(list(params.items())))
    results = {canonicalize_resources(params) for _ in range(3)}
    results.add(canonicalize_resources(reordered))
    assert results == {"acl&delete&tagging&uploads"}


def test_empty_value_keeps_equals_sign() -> None:
    assert canonicalize_resources({"continuation-token": ""}) == "continuation-token="


@pytest.mark.parametrize("params", [None, {}, {"foo": "bar", "max-keys": "10"}])
def test_no_sub_resources(params: dict[str, str | None] | None) -> None:
    assert canonicalize_resources(params) == ""


def test_sub_resources_include_listing_token() -> None:
    assert {"continuation-token", "security-token", "x-oss-process"} <= SUB_RESOURCES
    assert "max-keys" not in SUB_RESOURCES
    assert "prefix" not in SUB_RESOURCES


@pytest.mark.parametrize(
    "resources, expected",
    [
        ("", "security-token=tok"),
        ("acl", "acl&security-token=tok"),
        (
            "x-oss-process=image/resize,w_100",
            "security-token=tok&x-oss-process=image/resize,w_100",
        ),
        ("tagging&uploadId=1", "security-token=tok&tagging&uploadId=1"),
        ("continuation-token=", "continuation-token=&security-token=tok"),
    ],
)
def test_add_resource_keeps_sort_order(resources: str, expected: str) -> None:
    assert add_resource(resources, "security-token", "tok") == expected


def test_add_resource_without_value() -> None:
    assert add_resource("uploadId=1", "acl", None) == "acl&uploadId=1"


def test_build_query_keeps_every_param_in_order() -> None:
    params = {"foo": "bar", "acl": None, "response-content-type": "text/plain"}
    assert build_query(params) == "foo=bar&acl&response-content-type=text/plain"


def test_build_query_does_not_escape() -> None:
    assert build_query({"prefix": "a b/c"}) == "prefix=a b/c"


def test_build_query_empty() -> None:
    assert build_query(None) == ""


@pytest.mark.parametrize(
    "options, expected_query, expected_resources",
    [
        (ListOptions(), "list-type=2", ""),
        (
            ListOptions(prefix="photos/", delimiter="/", max_keys=100),
            "list-type=2&delimiter=/&max-keys=100&prefix=photos/",
            "",
        ),
        (
            ListOptions(marker="CgJiYw--", max_keys=2),
            "list-type=2&continuation-token=CgJiYw--&max-keys=2",
            "continuation-token=CgJiYw--",
        ),
    ],
)
def test_list_v2_params(
    options: ListOptions, expected_query: str, expected_resources: str
) -> None:
    assert list_v2_params(options) == (expected_query, expected_resources)
