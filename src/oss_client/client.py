# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import logging
from collections.abc import Iterable
from types import TracebackType
from typing import Self

from ._http import Field, Fields, OSSRequest, mapping_to_fields
from ._identity import OSSCredentialIdentity
from .aio import AIOHTTPClient
from .assembler import RequestAssembler, expires_in, fields_to_meta, meta_to_fields
from .config import OSSClientConfig
from .deserializers import ListObjectsDeserializer
from .exceptions import Operation, classify_response
from .interfaces.http import HTTPClient, HTTPRequestConfiguration, Response
from .resources import QueryParams, list_v2_params
from .signers import OSSSigner
from .types import (
    GetBufferedObjectOutput,
    GetObjectOutput,
    ListOptions,
    ListPage,
    PutOptions,
)

logger = logging.getLogger(__name__)

DEFAULT_PRESIGN_EXPIRES = 60
COPY_SOURCE_FIELD = "x-oss-copy-source"


class OSSClient:
    """Client for the object operations of a single bucket.

    Every operation is exactly one request, awaited by the caller, with no retries.
    Failures surface as :py:class:`~oss_client.exceptions.OSSClientError`, or as the
    transport's own exception for connection level failures.

    Clients are immutable. Use :py:meth:`with_bucket` to address another bucket.
    """

    def __init__(
        self,
        *,
        identity: OSSCredentialIdentity,
        endpoint: str,
        bucket: str,
        http_client: HTTPClient | None = None,
        signer: OSSSigner | None = None,
        request_config: HTTPRequestConfiguration | None = None,
    ) -> None:
        """
        :param identity: The credentials requests are signed with.
        :param endpoint: The service endpoint, with or without a scheme.
        :param bucket: The bucket requests are addressed to.
        :param http_client: The transport. Defaults to an :py:class:`AIOHTTPClient`.
        :param signer: The request signer.
        :param request_config: Per-request transport configuration.
        """
        self._identity = identity
        self._endpoint = endpoint
        self._bucket = bucket
        self._http_client = http_client or AIOHTTPClient()
        self._signer = signer or OSSSigner()
        self._request_config = request_config
        self._owns_http_client = True
        self._assembler = RequestAssembler(
            identity=identity, endpoint=endpoint, signer=self._signer
        )

    @classmethod
    def from_config(
        cls, config: OSSClientConfig, *, http_client: HTTPClient | None = None
    ) -> Self:
        return cls(
            identity=config.identity,
            endpoint=config.endpoint,
            bucket=config.bucket,
            http_client=http_client,
        )

    @property
    def bucket(self) -> str:
        return self._bucket

    @property
    def endpoint(self) -> str:
        return self._endpoint

    @property
    def identity(self) -> OSSCredentialIdentity:
        return self._identity

    def with_bucket(self, bucket: str) -> "OSSClient":
        """Return a client for ``bucket`` sharing this client's transport.

        The returned client borrows the transport. Closing it, directly or through
        ``async with``, leaves the transport open. Only the client the transport was
        handed to closes it.
        """
        client = OSSClient(
            identity=self._identity,
            endpoint=self._endpoint,
            bucket=bucket,
            http_client=self._http_client,
            signer=self._signer,
            request_config=self._request_config,
        )
        client._owns_http_client = False
        return client

    async def get(
        self,
        object_key: str,
        *,
        meta_keys: Iterable[str] | None = None,
        params: QueryParams | None = None,
    ) -> GetObjectOutput:
        """Download an object as text.

        :param object_key: The object to download.
        :param meta_keys: Metadata keys to return. All user metadata when omitted.
        :param params: Extra query parameters, e.g. ``response-content-type``.
        :raises OSSClientError: On a non-success status, or with
            ``ErrorKind.TEXT_DECODE`` if the content is not valid UTF-8.
        """
        buffered = await self.get_as_buffer(
            object_key, meta_keys=meta_keys, params=params
        )
        return buffered.decode()

    async def get_as_buffer(
        self,
        object_key: str,
        *,
        meta_keys: Iterable[str] | None = None,
        params: QueryParams | None = None,
    ) -> GetBufferedObjectOutput:
        """Download an object as bytes."""
        request = self._assembler.assemble(
            method="GET", bucket=self._bucket, object_key=object_key, params=params
        )
        response = await self._send(request, Operation.GET)
        content = await response.consume_body_async()
        return GetBufferedObjectOutput(
            content=content,
            meta=fields_to_meta(response.fields, meta_keys),
            fields=response.fields,
        )

    async def put(
        self, body: bytes, object_key: str, options: PutOptions | None = None
    ) -> None:
        """Upload ``body`` as ``object_key``."""
        options = options or PutOptions()
        request = self._assembler.assemble(
            method="PUT",
            bucket=self._bucket,
            object_key=object_key,
            fields=self._put_fields(options),
            params=options.params,
            body=body,
        )
        await self._send(request, Operation.PUT)

    async def copy(
        self,
        source_key: str,
        object_key: str,
        *,
        source_bucket: str | None = None,
        options: PutOptions | None = None,
    ) -> None:
        """Copy ``source_key`` to ``object_key`` on the service side.

        :param source_key: The object to copy.
        :param object_key: The destination object in this client's bucket.
        :param source_bucket: The bucket holding the source, this client's bucket
            when omitted.
        :param options: Metadata and headers for the destination object.
        """
        options = options or PutOptions()
        fields = self._put_fields(options)
        fields.set_field(
            Field(
                name=COPY_SOURCE_FIELD,
                values=[f"/{source_bucket or self._bucket}/{source_key}"],
            )
        )
        request = self._assembler.assemble(
            method="PUT",
            bucket=self._bucket,
            object_key=object_key,
            fields=fields,
            params=options.params,
            body=b"",
        )
        await self._send(request, Operation.COPY)

    async def delete(self, object_key: str) -> None:
        request = self._assembler.assemble(
            method="DELETE", bucket=self._bucket, object_key=object_key
        )
        await self._send(request, Operation.DELETE)

    async def delete_multi(self, object_keys: Iterable[str]) -> None:
        """Delete each object in turn, stopping at the first failure."""
        for object_key in object_keys:
            await self.delete(object_key)

    async def head(self, object_key: str) -> dict[str, str]:
        """Fetch the user metadata of an object, keys without the
        ``x-oss-meta-`` prefix."""
        request = self._assembler.assemble(
            method="HEAD", bucket=self._bucket, object_key=object_key
        )
        response = await self._send(request, Operation.HEAD)
        return fields_to_meta(response.fields)

    async def list_objects(self, options: ListOptions | None = None) -> list[str]:
        """List the keys of one page of objects."""
        page = await self.list_details(options)
        return [summary.key for summary in page.objects]

    async def list_details(self, options: ListOptions | None = None) -> ListPage:
        """List one page of objects and common prefixes.

        Pagination is driven by the caller::

            page = await client.list_details(options)
            while page.is_truncated:
                options = options.next_page(page.next_marker)
                page = await client.list_details(options)

        :raises OSSClientError: On a non-success status, or with ``ErrorKind.DECODE``
            if the listing document cannot be decoded.
        """
        query, resources = list_v2_params(options or ListOptions())
        request = self._assembler.assemble(
            method="GET",
            bucket=self._bucket,
            query=query,
            resources=resources,
        )
        response = await self._send(request, Operation.GET)
        return await self._decode_listing(response)

    def presign_url(
        self,
        object_key: str,
        *,
        expires: int | None = None,
        method: str = "GET",
        params: QueryParams | None = None,
    ) -> str:
        """Build a URL granting ``method`` on ``object_key`` without credentials.

        :param expires: Expiry as a Unix timestamp in seconds. Defaults to one minute
            from now.
        :param params: Extra query parameters, sub-resources among them are signed.
        """
        if expires is None:
            expires = expires_in(DEFAULT_PRESIGN_EXPIRES)
        return self._assembler.presign(
            method=method,
            bucket=self._bucket,
            object_key=object_key,
            expires=expires,
            params=params,
        )

    async def close(self) -> None:
        """Release the transport, if it holds resources.

        Clients created by :py:meth:`with_bucket` do not own the transport and leave
        it open.
        """
        if not self._owns_http_client:
            return
        if (close := getattr(self._http_client, "close", None)) is not None:
            await close()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        await self.close()

    def _put_fields(self, options: PutOptions) -> Fields:
        fields = meta_to_fields(options.meta)
        fields.extend(mapping_to_fields(options.headers))
        if options.content_type is not None:
            fields.set_field(Field(name="Content-Type", values=[options.content_type]))
        return fields

    async def _send(self, request: OSSRequest, operation: Operation) -> Response:
        logger.debug(
            "Sending %s request to %s://%s%s",
            request.method,
            request.destination.scheme,
            request.destination.netloc,
            request.destination.path,
        )
        response = await self._http_client.send(
            request=request, request_config=self._request_config
        )
        logger.debug("Received %s response with status %s", operation, response.status)
        if error := classify_response(
            operation=operation, status=response.status, reason=response.reason
        ):
            raise error
        return response

    async def _decode_listing(self, response: Response) -> ListPage:
        deserializer = ListObjectsDeserializer()
        body = response.body
        if isinstance(body, bytes | bytearray):
            deserializer.feed(bytes(body))
        else:
            async for chunk in body:
                deserializer.feed(chunk)
        return deserializer.close()
