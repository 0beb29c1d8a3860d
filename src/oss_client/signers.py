# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import datetime
import hmac
import logging
import re
from base64 import b64encode
from collections.abc import Iterable
from copy import deepcopy
from email.utils import format_datetime
from hashlib import sha1
from typing import Required, TypedDict
from urllib.parse import quote

from ._http import Field, OSSRequest
from ._identity import OSSCredentialIdentity
from .exceptions import ErrorKind, MissingExpectedParameterError, OSSClientError
from .interfaces.http import Field as _Field
from .interfaces.identity import OSSCredentialsIdentity as _OSSCredentialsIdentity
from .resources import add_resource

logger = logging.getLogger(__name__)

OSS_HEADER_PREFIX: str = "x-oss-"
OSS_META_PREFIX: str = "x-oss-meta-"
SECURITY_TOKEN_FIELD: str = "x-oss-security-token"
SECURITY_TOKEN_PARAM: str = "security-token"

# RFC 9110 token, the only characters allowed in a field name.
_FIELD_NAME_RE = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")
# Control characters other than horizontal tab may not appear in a field value.
_FIELD_VALUE_INVALID_RE = re.compile(r"[\x00-\x08\x0a-\x1f\x7f]")


class OSSSigningProperties(TypedDict, total=False):
    bucket: Required[str]
    object_key: str
    resources: str
    date: str
    expires: int


def format_http_date(value: datetime.datetime) -> str:
    """Render a timestamp as an RFC 1123 date in GMT, e.g.
    ``Mon, 01 Jan 2024 00:00:00 GMT``."""
    return format_datetime(value.astimezone(datetime.UTC), usegmt=True)


class OSSSigner:
    """Request signer for the OSS header and query string signature algorithm.

    The string to sign is::

        <VERB>\\n
        <Content-MD5>\\n
        <Content-Type>\\n
        <Date or Expires>\\n
        <CanonicalizedOSSHeaders><CanonicalizedResource>

    and the signature is the base64 encoded HMAC-SHA1 of it, keyed with the
    AccessKey secret.
    """

    def sign(
        self,
        *,
        signing_properties: OSSSigningProperties,
        request: OSSRequest,
        identity: OSSCredentialIdentity,
    ) -> OSSRequest:
        """Generate and apply an ``Authorization`` field to a copy of the supplied
        request.

        :param signing_properties: OSSSigningProperties naming the bucket, object key,
            canonicalized resource and, optionally, the request date.
        :param request: An OSSRequest to sign prior to sending to the service.
        :param identity: The credentials to sign with.
        """
        self._validate_identity(identity=identity)
        new_request = deepcopy(request)
        self._apply_required_fields(
            request=new_request,
            signing_properties=signing_properties,
            identity=identity,
        )
        signature = self.generate_signature(
            method=new_request.method,
            fields=new_request.fields,
            signing_properties=signing_properties,
            identity=identity,
        )
        new_request.fields.set_field(
            self.generate_authorization_field(
                access_key_id=identity.access_key_id, signature=signature
            )
        )
        self.validate_fields(fields=new_request.fields)
        return new_request

    def presign(
        self,
        *,
        signing_properties: OSSSigningProperties,
        request: OSSRequest,
        identity: OSSCredentialIdentity,
    ) -> OSSRequest:
        """Sign a copy of the supplied request through its query string.

        The expiry, AccessKey ID and signature are appended to the destination's
        query, so the resulting URL can be used without credentials until
        ``signing_properties["expires"]`` has passed.

        :param signing_properties: OSSSigningProperties, ``expires`` is required.
        :param request: An OSSRequest to presign.
        :param identity: The credentials to sign with.
        """
        self._validate_identity(identity=identity)
        expires = signing_properties.get("expires")
        if expires is None:
            raise MissingExpectedParameterError(
                "Cannot presign a request without an expires timestamp "
                "in the signing properties."
            )

        new_properties = OSSSigningProperties(**signing_properties)
        if identity.security_token is not None:
            new_properties["resources"] = add_resource(
                new_properties.get("resources", ""),
                SECURITY_TOKEN_PARAM,
                identity.security_token,
            )

        new_request = deepcopy(request)
        self.validate_fields(fields=new_request.fields)
        signature = self.generate_signature(
            method=new_request.method,
            fields=new_request.fields,
            signing_properties=new_properties,
            identity=identity,
        )

        query_params = [
            f"OSSAccessKeyId={quote(identity.access_key_id, safe='')}",
            f"Expires={expires}",
            f"Signature={quote(signature, safe='')}",
        ]
        if identity.security_token is not None:
            query_params.append(
                f"{SECURITY_TOKEN_PARAM}={quote(identity.security_token, safe='')}"
            )
        if existing := new_request.destination.query:
            query_params.insert(0, existing)
        new_request.destination = new_request.destination.with_query(
            "&".join(query_params)
        )
        return new_request

    def generate_signature(
        self,
        *,
        method: str,
        fields: Iterable[_Field],
        signing_properties: OSSSigningProperties,
        identity: OSSCredentialIdentity,
    ) -> str:
        """Compute the signature of a request without modifying anything.

        :param method: The HTTP verb.
        :param fields: The outgoing request fields.
        :param signing_properties: OSSSigningProperties for the request.
        :param identity: The credentials to sign with.
        """
        string_to_sign = self.string_to_sign(
            method=method, fields=fields, signing_properties=signing_properties
        )
        return self.signature(
            string_to_sign=string_to_sign, secret_key=identity.access_key_secret
        )

    def generate_authorization_field(
        self, *, access_key_id: str, signature: str
    ) -> Field:
        """Generate the ``Authorization`` field, ``OSS <access_key_id>:<signature>``."""
        return Field(name="Authorization", values=[f"OSS {access_key_id}:{signature}"])

    def string_to_sign(
        self,
        *,
        method: str,
        fields: Iterable[_Field],
        signing_properties: OSSSigningProperties,
    ) -> str:
        """Build the exact string hashed to produce the signature.

        The fourth line holds ``signing_properties["expires"]`` when present (query
        string signing), otherwise the request's ``Date`` field, falling back to
        ``signing_properties["date"]``.

        :param method: The HTTP verb.
        :param fields: The outgoing request fields.
        :param signing_properties: OSSSigningProperties for the request.
        """
        fields = list(fields)
        content_md5 = self._find_field_value(fields, "content-md5")
        content_type = self._find_field_value(fields, "content-type")
        date = self._date_or_expires(fields=fields, signing_properties=signing_properties)
        result = (
            f"{method.upper()}\n"
            f"{content_md5}\n"
            f"{content_type}\n"
            f"{date}\n"
            f"{self.canonical_fields(fields=fields)}"
            f"{self.canonical_resource(signing_properties=signing_properties)}"
        )
        logger.debug("String to sign: %r", result)
        return result

    def signature(self, *, string_to_sign: str, secret_key: str) -> str:
        """Base64 encoded HMAC-SHA1 of the string to sign."""
        digest = hmac.new(
            key=secret_key.encode(), msg=string_to_sign.encode(), digestmod=sha1
        ).digest()
        return b64encode(digest).decode()

    def canonical_fields(self, *, fields: Iterable[_Field]) -> str:
        """Render the ``x-oss-`` prefixed fields taking part in the signature.

        Names are lower-cased and sorted. Values of fields whose names collide once
        lower-cased are joined with ``,`` in the order they appear. Each entry is
        rendered as ``name:value`` followed by a newline.
        """
        merged: dict[str, list[str]] = {}
        for field in fields:
            name = field.name.lower()
            if name.startswith(OSS_HEADER_PREFIX):
                merged.setdefault(name, []).extend(field.values)
        return "".join(
            f"{name}:{','.join(values)}\n" for name, values in sorted(merged.items())
        )

    def canonical_resource(self, *, signing_properties: OSSSigningProperties) -> str:
        """Render ``/<bucket>/<object_key>`` followed by ``?<resources>`` when the
        canonicalized sub-resources are not empty."""
        bucket = signing_properties["bucket"]
        object_key = signing_properties.get("object_key", "")
        resources = signing_properties.get("resources", "")
        resource = f"/{bucket}/{object_key}"
        if resources:
            resource += f"?{resources}"
        return resource

    def validate_fields(self, *, fields: Iterable[_Field]) -> None:
        """Ensure every field can be transmitted as an HTTP header.

        :raises OSSClientError: With ``ErrorKind.ENCODING`` for the first invalid
            name or value.
        """
        for field in fields:
            if not _FIELD_NAME_RE.match(field.name):
                raise OSSClientError(
                    f"Invalid header name: {field.name!r}",
                    kind=ErrorKind.ENCODING,
                )
            for value in field.values:
                if _FIELD_VALUE_INVALID_RE.search(value):
                    raise OSSClientError(
                        f"Invalid value for header {field.name!r}: {value!r}",
                        kind=ErrorKind.ENCODING,
                    )

    def _find_field_value(self, fields: list[_Field], name: str) -> str:
        for field in fields:
            if field.name.lower() == name:
                return field.as_string()
        return ""

    def _date_or_expires(
        self, *, fields: list[_Field], signing_properties: OSSSigningProperties
    ) -> str:
        if (expires := signing_properties.get("expires")) is not None:
            return str(expires)
        if date := self._find_field_value(fields, "date"):
            return date
        if (date := signing_properties.get("date")) is not None:
            return date
        raise MissingExpectedParameterError(
            "Cannot generate string_to_sign without a Date field or a date "
            "in your signing_properties."
        )

    def _validate_identity(self, *, identity: OSSCredentialIdentity) -> None:
        """Perform runtime and expiration checks before attempting signing."""
        if not isinstance(identity, _OSSCredentialsIdentity):  # pyright: ignore
            raise ValueError(
                "Received unexpected value for identity parameter. Expected "
                f"OSSCredentialIdentity but received {type(identity)}."
            )
        elif identity.is_expired:
            raise ValueError(
                f"Provided identity expired at {identity.expiration}. Please "
                "refresh the credentials or update the expiration parameter."
            )

    def _apply_required_fields(
        self,
        *,
        request: OSSRequest,
        signing_properties: OSSSigningProperties,
        identity: OSSCredentialIdentity,
    ) -> None:
        if "Date" not in request.fields:
            date = signing_properties.get("date")
            if date is None:
                date = format_http_date(datetime.datetime.now(datetime.UTC))
            request.fields.set_field(Field(name="Date", values=[date]))
        if (
            SECURITY_TOKEN_FIELD not in request.fields
            and identity.security_token is not None
        ):
            request.fields.set_field(
                Field(name=SECURITY_TOKEN_FIELD, values=[identity.security_token])
            )
