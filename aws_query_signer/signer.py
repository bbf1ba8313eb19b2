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

"""Signature Version 2 helpers for AWS Query API request signing."""

import httpx
import logging
from aws_query_signer.defaults import DEFAULT_PARAMS, SIGNATURE_PARAMS
from aws_query_signer.exceptions import MissingSecret
from aws_query_signer.query import ParameterValue, build_query, escape
from aws_query_signer.secret import Secret
from aws_query_signer.utils import request_path, signing_host
from typing import Any, Generator, Mapping, Optional, Protocol, runtime_checkable


logger = logging.getLogger(__name__)


@runtime_checkable
class SigningCredentials(Protocol):
    """Anything that can supply an endpoint, an access key and a secret.

    Each accessor raises the matching ``Missing*`` error when unset.
    """

    @property
    def endpoint(self) -> str: ...

    @property
    def key(self) -> str: ...

    @property
    def secret(self) -> Secret: ...


def string_to_sign(method: str, host_and_port: str, path: str, query: str) -> str:
    """Assemble the Signature Version 2 string to sign.

    Args:
        method: HTTP method, upper-cased here
        host_and_port: ``host:port`` of the endpoint
        path: Request path
        query: Canonical query string

    Returns:
        The four components joined by newlines
    """
    return '\n'.join([method.upper(), host_and_port, path, query])


def sign_query(method: str, host_and_port: str, path: str, query: str, secret: Optional[Secret]) -> str:
    """Sign a canonical query and append the signature to it.

    Args:
        method: HTTP method
        host_and_port: ``host:port`` of the endpoint
        path: Request path
        query: Canonical query string
        secret: The secret to sign with

    Returns:
        The query with ``Signature`` appended as its last component

    Raises:
        MissingSecret: If no secret is given
    """
    if secret is None:
        raise MissingSecret()

    message = string_to_sign(method, host_and_port, path, query)
    logger.debug('String to sign: %r', message)
    signature = secret.sign(message)

    return '&'.join([query, f'Signature={escape(signature)}'])


def sign_request(
    method: str,
    host_and_port: str,
    path: str,
    query_overrides: Optional[Mapping[str, Any]],
    secret: Optional[Secret],
    params: Mapping[str, ParameterValue] = SIGNATURE_PARAMS,
    context: Any = None,
) -> str:
    """Build a canonical query from parameters and sign it.

    A bare secret carries no access key id, so by default only the
    key-free signing parameters (``SignatureVersion``, ``SignatureMethod``
    and ``Timestamp``) are added. Pass ``AWSAccessKeyId`` in
    ``query_overrides``, or use ``Signer`` with a credentials object to get
    ``DEFAULT_PARAMS``. Pass ``params={}`` to sign the overrides alone.

    Args:
        method: HTTP method
        host_and_port: ``host:port`` of the endpoint
        path: Request path
        query_overrides: Request specific query parameters
        secret: The secret to sign with
        params: Base parameters, possibly containing providers
        context: Object passed to parameter providers

    Returns:
        The signed query string

    Raises:
        MissingSecret: If no secret is given
    """
    query = build_query(params, query_overrides, context)
    return sign_query(method, host_and_port, path, query, secret)


class Signer:
    """Signs requests with the credentials of a ``SigningCredentials`` object.

    Parameter providers are resolved against the credentials object, so a
    provider such as the default ``AWSAccessKeyId`` one can read its key.
    """

    def __init__(
        self,
        credentials: SigningCredentials,
        params: Mapping[str, ParameterValue] = DEFAULT_PARAMS,
    ):
        """Initialize the signer.

        Args:
            credentials: Source of the access key and secret
            params: Base parameters included in every signed query
        """
        self.credentials = credentials
        self.params = params

    def sign_request(
        self,
        method: str,
        host_and_port: str,
        path: str,
        query_overrides: Optional[Mapping[str, Any]] = None,
    ) -> str:
        """Sign a request.

        Args:
            method: HTTP method
            host_and_port: ``host:port`` of the endpoint
            path: Request path
            query_overrides: Request specific query parameters

        Returns:
            The signed query string

        Raises:
            MissingKey: If the credentials have no access key
            MissingSecret: If the credentials have no secret
        """
        query = build_query(self.params, query_overrides, self.credentials)
        return sign_query(method, host_and_port, path, query, self.credentials.secret)


class QuerySignatureAuth(httpx.Auth):
    """HTTPX Auth class that signs request query strings with Signature Version 2.

    The query parameters already present on the request URL are treated as
    request specific parameters; any stale ``Signature`` is dropped before
    signing so that a retried request can be signed again.
    """

    def __init__(
        self,
        credentials: SigningCredentials,
        params: Mapping[str, ParameterValue] = DEFAULT_PARAMS,
    ):
        """Initialize QuerySignatureAuth.

        Args:
            credentials: Source of the access key and secret
            params: Base parameters included in every signed query
        """
        self.signer = Signer(credentials, params)

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        """Signs the request query and logs authentication failures."""
        response = yield self._sign_request(request)

        if response.status_code in (401, 403):
            logger.warning(
                'Authentication failed for endpoint %s (status: %s). '
                'Check credentials and endpoint configuration.',
                signing_host(request.url),
                response.status_code,
            )

    def _sign_request(self, request: httpx.Request) -> httpx.Request:
        """Replace the request query with its signed form.

        Args:
            request: The HTTP request to sign

        Returns:
            The signed HTTP request
        """
        overrides = dict(request.url.params.multi_items())
        overrides.pop('Signature', None)

        query = self.signer.sign_request(
            request.method,
            signing_host(request.url),
            request_path(request.url),
            overrides,
        )
        request.url = request.url.copy_with(query=query.encode('ascii'))
        return request
