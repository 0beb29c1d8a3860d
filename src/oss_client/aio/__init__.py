# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
from .aiohttp import AIOHTTPClient

__all__ = ("AIOHTTPClient",)
