# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

"""Shared utilities for testing code built on the OSS client."""

from .mockhttp import MockHTTPClient, MockHTTPClientError
from .utils import create_test_request

__all__ = (
    "MockHTTPClient",
    "MockHTTPClientError",
    "create_test_request",
)
