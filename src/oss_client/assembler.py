# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import datetime
from collections.abc import Iterable, Mapping

from ._http import URI, Field, Fields, OSSRequest
from ._identity import OSSCredentialIdentity
from .interfaces.http import Field as _Field
from .resources import QueryParams, build_query, canonicalize_resources
from .signers import OSS_META_PREFIX, OSSSigner, OSSSigningProperties

DEFAULT_SCHEME = "http"


def meta_to_fields(meta: Mapping[str, str] | None) -> Fields:
    """Convert user metadata to ``x-oss-meta-`` prefixed fields."""
    fields = Fields()
    for key, value in (meta or {}).items():
        fields.set_field(Field(name=f"{OSS_META_PREFIX}{key}", values=[value]))
    return fields


def fields_to_meta(
    fields: Iterable[_Field], keys: Iterable[str] | None = None
) -> dict[str, str]:
    """Extract user metadata from ``x-oss-meta-`` prefixed fields.

    The prefix is stripped and the remaining key lower-cased.

    :param fields: Response fields.
    :param keys: When given, only these metadata keys are returned.
    """
    wanted = None if keys is None else {key.lower() for key in keys}
    meta: dict[str, str] = {}
    for field in fields:
        name = field.name.lower()
        if not name.startswith(OSS_META_PREFIX):
            continue
        key = name.removeprefix(OSS_META_PREFIX)
        if wanted is None or key in wanted:
            meta[key] = field.as_string()
    return meta


def split_endpoint(endpoint: str) -> tuple[str, str]:
    """Split an endpoint such as ``https://oss-cn-hangzhou.aliyuncs.com`` into its
    scheme and host. Endpoints without a scheme default to ``http``."""
    scheme, sep, host = endpoint.partition("://")
    if not sep:
        return DEFAULT_SCHEME, endpoint.rstrip("/")
    return scheme.lower(), host.rstrip("/")


class RequestAssembler:
    """Turns operation inputs into signed, fully addressed requests.

    Requests target ``<scheme>://<bucket>.<host>/<object_key>?<query>``. Bucket names
    and object keys are inserted exactly as given, escaping them is the caller's
    responsibility.
    """

    def __init__(
        self,
        *,
        identity: OSSCredentialIdentity,
        endpoint: str,
        signer: OSSSigner | None = None,
    ) -> None:
        self._identity = identity
        self._scheme, self._host = split_endpoint(endpoint)
        self._signer = signer or OSSSigner()

    def destination(
        self, *, bucket: str, object_key: str, query: str | None = None
    ) -> URI:
        return URI(
            scheme=self._scheme,
            host=f"{bucket}.{self._host}",
            path=f"/{object_key}",
            query=query or None,
        )

    def assemble(
        self,
        *,
        method: str,
        bucket: str,
        object_key: str = "",
        fields: Iterable[_Field] | None = None,
        params: QueryParams | None = None,
        query: str | None = None,
        resources: str | None = None,
        body: bytes | None = None,
        date: str | None = None,
    ) -> OSSRequest:
        """Build and sign a request.

        :param method: The HTTP verb.
        :param bucket: The target bucket.
        :param object_key: The target object, empty for bucket level requests.
        :param fields: Extra request fields, including user metadata fields.
        :param params: Query parameters. All of them are sent, only the allow-listed
            sub-resources are signed.
        :param query: A prebuilt query string, used instead of one built from
            ``params``.
        :param resources: A prebuilt canonicalized resource, used instead of one
            built from ``params``.
        :param body: The request payload.
        :param date: The request date, defaults to the current time.
        """
        request_fields = Fields()
        if fields is not None:
            request_fields.extend(fields)
        if body is not None:
            request_fields.set_field(
                Field(name="Content-Length", values=[str(len(body))])
            )

        if query is None:
            query = build_query(params)
        if resources is None:
            resources = canonicalize_resources(params)

        request = OSSRequest(
            destination=self.destination(
                bucket=bucket, object_key=object_key, query=query
            ),
            method=method,
            fields=request_fields,
            body=body,
        )
        signing_properties = OSSSigningProperties(
            bucket=bucket, object_key=object_key, resources=resources
        )
        if date is not None:
            signing_properties["date"] = date
        return self._signer.sign(
            signing_properties=signing_properties,
            request=request,
            identity=self._identity,
        )

    def presign(
        self,
        *,
        method: str,
        bucket: str,
        object_key: str,
        expires: int,
        params: QueryParams | None = None,
    ) -> str:
        """Build a URL carrying its own signature, valid until ``expires``.

        :param expires: Expiry as a Unix timestamp in seconds.
        """
        request = OSSRequest(
            destination=self.destination(
                bucket=bucket, object_key=object_key, query=build_query(params)
            ),
            method=method,
        )
        signed = self._signer.presign(
            signing_properties=OSSSigningProperties(
                bucket=bucket,
                object_key=object_key,
                resources=canonicalize_resources(params),
                expires=expires,
            ),
            request=request,
            identity=self._identity,
        )
        return signed.destination.build()


def expires_in(seconds: int, *, now: datetime.datetime | None = None) -> int:
    """Unix timestamp ``seconds`` from ``now``."""
    now = now or datetime.datetime.now(datetime.UTC)
    return int(now.timestamp()) + seconds
