# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
"""OSS Client provides signed access to objects stored in OSS buckets: upload,
download, copy, delete, metadata lookup, paginated listing and presigned URLs."""

from __future__ import annotations

from ._http import URI, Field, Fields, HTTPResponse, OSSRequest
from ._identity import OSSCredentialIdentity
from .assembler import RequestAssembler
from .client import OSSClient
from .config import OSSClientConfig
from .exceptions import (
    ErrorKind,
    MissingExpectedParameterError,
    Operation,
    OSSClientError,
    OSSSDKError,
)
from .signers import OSSSigner, OSSSigningProperties
from .types import (
    GetBufferedObjectOutput,
    GetObjectOutput,
    ListOptions,
    ListPage,
    ObjectSummary,
    PutOptions,
)

__license__ = "Apache-2.0"
__version__ = "0.1.0"

__all__ = (
    "URI",
    "ErrorKind",
    "Field",
    "Fields",
    "GetBufferedObjectOutput",
    "GetObjectOutput",
    "HTTPResponse",
    "ListOptions",
    "ListPage",
    "MissingExpectedParameterError",
    "OSSClient",
    "OSSClientConfig",
    "OSSClientError",
    "OSSCredentialIdentity",
    "OSSRequest",
    "OSSSDKError",
    "OSSSigner",
    "OSSSigningProperties",
    "ObjectSummary",
    "Operation",
    "PutOptions",
    "RequestAssembler",
)
