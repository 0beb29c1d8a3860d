# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import os
from dataclasses import dataclass

from ._identity import OSSCredentialIdentity
from .exceptions import ErrorKind, OSSClientError

ENV_ACCESS_KEY_ID = "OSS_ACCESS_KEY_ID"
ENV_ACCESS_KEY_SECRET = "OSS_ACCESS_KEY_SECRET"
ENV_SECURITY_TOKEN = "OSS_SECURITY_TOKEN"
ENV_ENDPOINT = "OSS_ENDPOINT"
ENV_BUCKET = "OSS_BUCKET"


@dataclass(kw_only=True, frozen=True)
class OSSClientConfig:
    """Everything a client needs to address and authenticate against a bucket."""

    endpoint: str
    """The service endpoint, e.g. ``https://oss-cn-hangzhou.aliyuncs.com``."""

    bucket: str
    """The bucket requests are addressed to."""

    identity: OSSCredentialIdentity
    """The credentials requests are signed with."""

    @classmethod
    def from_environment(
        cls,
        *,
        endpoint: str | None = None,
        bucket: str | None = None,
        identity: OSSCredentialIdentity | None = None,
    ) -> "OSSClientConfig":
        """Resolve configuration from system environment variables.

        Explicit arguments take precedence over the environment. The variables read
        are ``OSS_ACCESS_KEY_ID``, ``OSS_ACCESS_KEY_SECRET``, ``OSS_SECURITY_TOKEN``
        (optional), ``OSS_ENDPOINT`` and ``OSS_BUCKET``.

        :raises OSSClientError: With ``ErrorKind.CONFIGURATION`` if a required value
            is missing.
        """
        if identity is None:
            access_key_id = os.getenv(ENV_ACCESS_KEY_ID)
            access_key_secret = os.getenv(ENV_ACCESS_KEY_SECRET)
            if not access_key_id or not access_key_secret:
                raise OSSClientError(
                    f"{ENV_ACCESS_KEY_ID} and {ENV_ACCESS_KEY_SECRET} are required",
                    kind=ErrorKind.CONFIGURATION,
                )
            identity = OSSCredentialIdentity(
                access_key_id=access_key_id,
                access_key_secret=access_key_secret,
                security_token=os.getenv(ENV_SECURITY_TOKEN) or None,
            )

        endpoint = endpoint or os.getenv(ENV_ENDPOINT)
        bucket = bucket or os.getenv(ENV_BUCKET)
        if not endpoint or not bucket:
            raise OSSClientError(
                f"{ENV_ENDPOINT} and {ENV_BUCKET} are required",
                kind=ErrorKind.CONFIGURATION,
            )
        return cls(endpoint=endpoint, bucket=bucket, identity=identity)
