# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""HTTPX connection wrapper that delivers response bodies chunk by chunk."""

import httpx
import logging
from aws_query_signer.utils import host_and_port, request_path
from typing import Any, Mapping, Optional, Protocol, Union


logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class ChunkSink(Protocol):
    """Receives a response body as it arrives over the wire."""

    def __call__(self, chunk: bytes, remaining: Optional[int], total: Optional[int]) -> None: ...

    def finish(self) -> None: ...

    def fail(self, error: BaseException) -> None: ...


def _content_length(response: httpx.Response) -> Optional[int]:
    try:
        return int(response.headers['Content-Length'])
    except (KeyError, ValueError):
        return None


def _log_error_response(response: httpx.Response) -> None:
    """Log HTTP error responses.

    The body has already been handed to the chunk sink, so only the status
    and request line are logged. The caller decides what to do with the error.

    Args:
        response: The HTTP response object
    """
    log_level = logging.WARNING
    if response.status_code in (404, 405):
        log_level = logging.DEBUG

    logger.log(
        log_level,
        'HTTP %d Error for %s %s',
        response.status_code,
        response.request.method,
        request_path(response.request.url),
    )


class HTTPConnector:
    """A persistent connection to one AWS endpoint.

    Requests are sent with the query string exactly as given, so a signed
    query reaches the server byte for byte.
    """

    def __init__(
        self,
        endpoint: str,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Union[float, httpx.Timeout, None] = DEFAULT_TIMEOUT,
        **kwargs: Any,
    ):
        """Initialize the connector.

        Args:
            endpoint: The endpoint URL, e.g. ``https://sdb.amazonaws.com``
            headers: Headers to include in every request
            timeout: Timeout configuration for the HTTP client
            **kwargs: Additional arguments to pass to httpx.Client

        Raises:
            ValueError: If the host or port cannot be determined from the endpoint
        """
        self.url = httpx.URL(endpoint)
        self.host, self.port = host_and_port(self.url)
        self.path = request_path(self.url)

        client_kwargs = {
            'timeout': timeout,
            **kwargs,
        }

        logger.debug('Creating httpx.Client for endpoint %s with headers: %s', endpoint, headers)
        self.client = httpx.Client(headers=dict(headers or {}), **client_kwargs)

    @property
    def host_and_port(self) -> str:
        """Returns ``host:port`` as used in the string to sign."""
        return f'{self.host}:{self.port}'

    def request(
        self,
        method: str,
        path: Optional[str] = None,
        query: str = '',
        headers: Optional[Mapping[str, str]] = None,
        content: Optional[Union[str, bytes]] = None,
        response_block: Optional[ChunkSink] = None,
    ) -> httpx.Response:
        """Perform one HTTP exchange.

        The response body is passed to ``response_block`` chunk by chunk, followed
        by ``finish``. A transport error raised while the body streams is handed
        to ``response_block.fail`` instead of being raised here. Without a
        ``response_block`` the body is read into the returned response.

        Args:
            method: HTTP method
            path: Request path; defaults to the endpoint path
            query: Query string, sent without re-encoding
            headers: Headers added to the connector defaults
            content: Request body
            response_block: Sink for the response body

        Returns:
            The closed httpx.Response

        Raises:
            httpx.HTTPError: If the request fails before a response arrives
        """
        raw_path = path or self.path
        if query:
            raw_path = f'{raw_path}?{query}'
        url = self.url.copy_with(raw_path=raw_path.encode('ascii'))

        request = self.client.build_request(method.upper(), url, headers=headers, content=content)
        logger.debug('Sending %s %s to %s', request.method, path or self.path, self.host_and_port)

        response = self.client.send(request, stream=True)
        try:
            if response_block is None:
                response.read()
            else:
                self._deliver(response, response_block)
        finally:
            response.close()

        if response.is_error:
            _log_error_response(response)

        return response

    def _deliver(self, response: httpx.Response, response_block: ChunkSink) -> None:
        if response.is_stream_consumed:
            # Transports may hand back a body httpx has already loaded.
            content = response.content
            response_block(content, 0, len(content))
            response_block.finish()
            return

        total = _content_length(response)
        received = 0
        try:
            for chunk in response.iter_raw():
                received += len(chunk)
                remaining = total - received if total is not None else None
                response_block(chunk, remaining, total)
        except httpx.TransportError as e:
            logger.warning(
                'Transport error after %d bytes from %s: %s', received, self.host_and_port, e
            )
            response_block.fail(e)
            return

        response_block.finish()

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self.client.close()
