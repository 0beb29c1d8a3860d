# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from datetime import UTC, datetime, timedelta

import pytest
from oss_client import OSSCredentialIdentity
from oss_client.interfaces.identity import OSSCredentialsIdentity


@pytest.mark.parametrize(
    "security_token,expiration",
    [
        (None, None),
        ("STS.TOKEN1234", None),
        (None, datetime(2024, 5, 1, 0, 0, 0, tzinfo=UTC)),
        ("STS.TOKEN1234", datetime(2024, 5, 1, 0, 0, 0, tzinfo=UTC)),
    ],
)
def test_oss_credential_identity(
    security_token: str | None, expiration: datetime | None
) -> None:
    creds = OSSCredentialIdentity(
        access_key_id="LTAI1234EXAMPLE",
        access_key_secret="SECRET1234",
        security_token=security_token,
        expiration=expiration,
    )
    assert creds.access_key_id == "LTAI1234EXAMPLE"
    assert creds.access_key_secret == "SECRET1234"
    assert creds.security_token == security_token
    assert creds.expiration == expiration
    assert isinstance(creds, OSSCredentialsIdentity)


@pytest.mark.parametrize(
    "expiration,is_expired",
    [
        (None, False),
        (datetime(2024, 5, 1, 0, 0, 0, tzinfo=UTC), True),
        (datetime.now(UTC) + timedelta(hours=1), False),
    ],
)
def test_oss_credential_identity_expired(
    expiration: datetime | None, is_expired: bool
) -> None:
    creds = OSSCredentialIdentity(
        access_key_id="LTAI1234EXAMPLE",
        access_key_secret="SECRET1234",
        expiration=expiration,
    )
    assert creds.is_expired is is_expired


def test_secrets_are_not_in_repr() -> None:
    creds = OSSCredentialIdentity(
        access_key_id="LTAI1234EXAMPLE",
        access_key_secret="SECRET1234",
        security_token="STS.TOKEN1234",
    )
    assert "SECRET1234" not in repr(creds)
    assert "STS.TOKEN1234" not in repr(creds)
