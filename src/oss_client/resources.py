# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
"""Selection of the query parameters that participate in request signing."""

from collections.abc import Mapping
from typing import TypeAlias

from .types import ListOptions

# Sub-resources recognised by the service. Only these query parameters are part of
# the canonicalized resource, every other parameter is sent but never signed.
SUB_RESOURCES: frozenset[str] = frozenset(
    (
        "acl",
        "uploads",
        "location",
        "cors",
        "logging",
        "website",
        "referer",
        "lifecycle",
        "delete",
        "append",
        "tagging",
        "objectMeta",
        "uploadId",
        "partNumber",
        "security-token",
        "position",
        "img",
        "style",
        "styleName",
        "replication",
        "replicationProgress",
        "replicationLocation",
        "cname",
        "bucketInfo",
        "comp",
        "qos",
        "live",
        "status",
        "vod",
        "startTime",
        "endTime",
        "symlink",
        "x-oss-process",
        "response-content-type",
        "response-content-language",
        "response-expires",
        "response-cache-control",
        "response-content-disposition",
        "response-content-encoding",
        "udf",
        "udfName",
        "udfImage",
        "udfId",
        "udfImageDesc",
        "udfApplication",
        "udfApplicationLog",
        "restore",
        "callback",
        "callback-var",
        "continuation-token",
    )
)

QueryParams: TypeAlias = Mapping[str, str | None]


def _join_params(params: list[tuple[str, str | None]]) -> str:
    return "&".join(name if value is None else f"{name}={value}" for name, value in params)


def canonicalize_resources(params: QueryParams | None) -> str:
    """Build the canonicalized resource string from query parameters.

    Parameters outside :py:data:`SUB_RESOURCES` are dropped. The rest are sorted by
    name and rendered as ``name`` when they carry no value or ``name=value``
    otherwise, joined by ``&``.

    :param params: Query parameter names mapped to an optional value.
    """
    if not params:
        return ""
    return _join_params(
        sorted(
            ((name, value) for name, value in params.items() if name in SUB_RESOURCES),
            key=lambda param: param[0],
        )
    )


def add_resource(resources: str, name: str, value: str | None) -> str:
    """Insert one sub-resource into an already canonicalized resource string,
    keeping the entries sorted by name.

    :param resources: A string produced by :py:func:`canonicalize_resources`.
    :param name: The sub-resource name.
    :param value: The sub-resource value, ``None`` for a bare name.
    """
    params = [
        (entry_name, entry_value if sep else None)
        for entry_name, sep, entry_value in (
            entry.partition("=") for entry in resources.split("&") if entry
        )
    ]
    params.append((name, value))
    return _join_params(sorted(params, key=lambda param: param[0]))


def build_query(params: QueryParams | None) -> str:
    """Build the URL query string from every query parameter, in insertion order.

    Names and values are not escaped. Callers passing values with reserved
    characters must escape them beforehand.
    """
    if not params:
        return ""
    return _join_params(list(params.items()))


def list_v2_params(options: ListOptions) -> tuple[str, str]:
    """Build the query string and canonicalized resource of a version 2 listing.

    :param options: The listing options.
    :returns: A ``(query, resources)`` tuple. Only the continuation token is signed.
    """
    max_keys = "" if options.max_keys is None else str(options.max_keys)
    params = (
        ("continuation-token", options.marker),
        ("delimiter", options.delimiter),
        ("max-keys", max_keys),
        ("prefix", options.prefix),
    )
    query = "&".join(
        ["list-type=2", *(f"{name}={value}" for name, value in params if value)]
    )
    resources = f"continuation-token={options.marker}" if options.marker else ""
    return query, resources
