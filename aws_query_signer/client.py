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

"""HTTP client that signs AWS Query API requests."""

import httpx
import logging
import threading
from aws_query_signer.connector import HTTPConnector
from aws_query_signer.defaults import ClientDefaults
from aws_query_signer.exceptions import MissingEndpoint, MissingKey, MissingSecret
from aws_query_signer.query import build_query, resolve_params
from aws_query_signer.secret import Secret
from aws_query_signer.signer import Signer
from aws_query_signer.streamer import StreamBuffer
from typing import Any, Dict, Mapping, Optional, Union


logger = logging.getLogger(__name__)


class QueryClient:
    """Signs requests to an AWS Query API and streams the responses.

    Subclasses may pin API specific parameters through ``defaults``:

        class SimpleDB(QueryClient):
            defaults = ClientDefaults().with_params(Version='2009-04-15')

    Every verb method returns an ``httpx.Response`` whose ``stream`` is a
    ``StreamBuffer`` holding the raw body chunks.
    """

    defaults: ClientDefaults = ClientDefaults()

    def __init__(
        self,
        endpoint: Optional[str] = None,
        key: Optional[str] = None,
        secret: Optional[Union[str, bytes]] = None,
        token: Optional[str] = None,
        defaults: Optional[ClientDefaults] = None,
        **connector_kwargs: Any,
    ):
        """Initialize the client.

        Nothing is validated here; missing settings are reported when a
        request needs them.

        Args:
            endpoint: The endpoint URL, e.g. ``https://sdb.amazonaws.com``
            key: AWS access key id
            secret: AWS secret access key
            token: AWS session token for temporary credentials
            defaults: Headers and parameters for every request
            **connector_kwargs: Additional arguments to pass to HTTPConnector
        """
        if defaults is not None:
            self.defaults = defaults
        self.token = token
        self._connector_kwargs = connector_kwargs
        self._connection: Optional[HTTPConnector] = None
        self._connection_lock = threading.Lock()

        self._endpoint = endpoint
        self._key = key
        self._secret = Secret(secret) if secret is not None else None

    @property
    def endpoint(self) -> str:
        """Gets the AWS endpoint.

        Raises:
            MissingEndpoint: If the endpoint is not set
        """
        if not self._endpoint:
            raise MissingEndpoint()
        return self._endpoint

    @endpoint.setter
    def endpoint(self, value: Optional[str]) -> None:
        with self._connection_lock:
            self._endpoint = value
            connection, self._connection = self._connection, None
        if connection is not None:
            connection.close()

    @property
    def key(self) -> str:
        """Gets the AWS access key id.

        Raises:
            MissingKey: If the key is not set
        """
        if not self._key:
            raise MissingKey()
        return self._key

    @key.setter
    def key(self, value: Optional[str]) -> None:
        self._key = value

    @property
    def secret(self) -> Secret:
        """Gets the AWS secret access key.

        Raises:
            MissingSecret: If the secret is not set
        """
        if self._secret is None:
            raise MissingSecret()
        return self._secret

    @secret.setter
    def secret(self, value: Optional[Union[str, bytes, Secret]]) -> None:
        if value is None or isinstance(value, Secret):
            self._secret = value
        else:
            self._secret = Secret(value)

    @property
    def connection(self) -> HTTPConnector:
        """Returns the connector, creating it on first use.

        Raises:
            MissingEndpoint: If the endpoint is not set
        """
        with self._connection_lock:
            if self._connection is None:
                self._connection = HTTPConnector(
                    self.endpoint, headers=self.default_headers(), **self._connector_kwargs
                )
            return self._connection

    def default_headers(self) -> Dict[str, str]:
        """Returns the headers sent with every request."""
        return dict(self.defaults.headers)

    def signing_params(self) -> Dict[str, Any]:
        """Returns the default parameters, providers unresolved."""
        params = dict(self.defaults.params)
        if self.token:
            params['SecurityToken'] = self.token
        return params

    def default_params(self) -> Dict[str, Any]:
        """Returns the default request parameters with every provider resolved."""
        return resolve_params(self.signing_params(), self)

    def build_query(self, query: Optional[Mapping[str, Any]] = None) -> str:
        """Builds the sorted query for request specific parameters."""
        return build_query(self.default_params(), query)

    def sign(
        self,
        method: str,
        path: Optional[str] = None,
        query: Optional[Mapping[str, Any]] = None,
    ) -> str:
        """Sign a request against the configured endpoint.

        Args:
            method: HTTP method
            path: Request path; defaults to the endpoint path
            query: Request specific query parameters

        Returns:
            The signed query string
        """
        connection = self.connection
        signer = Signer(self, self.signing_params())
        return signer.sign_request(
            method, connection.host_and_port, path or connection.path, query
        )

    def request(
        self,
        method: str,
        path: Optional[str] = None,
        query: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        content: Optional[Union[str, bytes]] = None,
    ) -> httpx.Response:
        """Send a signed request.

        Configuration errors are raised before any network I/O: the endpoint
        is checked first, then the key and the secret while signing.

        Args:
            method: HTTP method
            path: Request path; defaults to the endpoint path
            query: Request specific query parameters
            headers: Headers added to or replacing the default headers
            content: Request body

        Returns:
            The response, its stream replaced with a StreamBuffer

        Raises:
            MissingEndpoint: If the endpoint is not set
            MissingKey: If the key is not set
            MissingSecret: If the secret is not set
        """
        connection = self.connection
        signed_query = self.sign(method, path, query)
        logger.debug('Signed %s request with access key %s', method.upper(), self.key)

        streamer = StreamBuffer()
        response = connection.request(
            method,
            path=path,
            query=signed_query,
            headers=headers,
            content=content,
            response_block=streamer,
        )

        return httpx.Response(
            status_code=response.status_code,
            headers=response.headers,
            stream=streamer,
            request=response.request,
            extensions=response.extensions,
        )

    def connect(self, **kwargs: Any) -> httpx.Response:
        """Send a signed CONNECT request."""
        return self.request('CONNECT', **kwargs)

    def delete(self, **kwargs: Any) -> httpx.Response:
        """Send a signed DELETE request."""
        return self.request('DELETE', **kwargs)

    def get(self, **kwargs: Any) -> httpx.Response:
        """Send a signed GET request."""
        return self.request('GET', **kwargs)

    def head(self, **kwargs: Any) -> httpx.Response:
        """Send a signed HEAD request."""
        return self.request('HEAD', **kwargs)

    def options(self, **kwargs: Any) -> httpx.Response:
        """Send a signed OPTIONS request."""
        return self.request('OPTIONS', **kwargs)

    def patch(self, **kwargs: Any) -> httpx.Response:
        """Send a signed PATCH request."""
        return self.request('PATCH', **kwargs)

    def post(self, **kwargs: Any) -> httpx.Response:
        """Send a signed POST request."""
        return self.request('POST', **kwargs)

    def put(self, **kwargs: Any) -> httpx.Response:
        """Send a signed PUT request."""
        return self.request('PUT', **kwargs)

    def trace(self, **kwargs: Any) -> httpx.Response:
        """Send a signed TRACE request."""
        return self.request('TRACE', **kwargs)

    def close(self) -> None:
        """Close the memoized connection, if any."""
        with self._connection_lock:
            connection, self._connection = self._connection, None
        if connection is not None:
            connection.close()

    def __enter__(self) -> 'QueryClient':
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
