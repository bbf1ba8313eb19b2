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

"""Default request headers and signing parameters."""

import socket
from aws_query_signer import __version__
from aws_query_signer.query import ParameterValue
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Mapping, Optional


TIMESTAMP_FORMAT = '%Y-%m-%dT%H:%M:%SZ'

# Amazon recommends that libraries identify themselves via a User Agent.
USER_AGENT = f'aws-query-signer/{__version__} (Language=Python; {socket.gethostname()})'


def utc_timestamp() -> str:
    """Return the current UTC time in ISO 8601 format."""
    return datetime.now(timezone.utc).strftime(TIMESTAMP_FORMAT)


def _access_key(client: Any) -> str:
    return client.key


def _timestamp(client: Any) -> str:
    return utc_timestamp()


DEFAULT_HEADERS: Mapping[str, str] = MappingProxyType({'User-Agent': USER_AGENT})

# Signing parameters that need nothing from the client.
SIGNATURE_PARAMS: Mapping[str, ParameterValue] = MappingProxyType(
    {
        'SignatureVersion': '2',
        'SignatureMethod': 'HmacSHA256',
        'Timestamp': _timestamp,
    }
)

DEFAULT_PARAMS: Mapping[str, ParameterValue] = MappingProxyType(
    {'AWSAccessKeyId': _access_key, **SIGNATURE_PARAMS}
)


@dataclass(frozen=True)
class ClientDefaults:
    """Headers and parameters sent with every request of a client.

    Both mappings are read-only. Use ``with_headers`` and ``with_params`` to
    derive a new set of defaults, e.g. to pin an API ``Version``.
    """

    headers: Mapping[str, str] = field(default_factory=lambda: DEFAULT_HEADERS)
    params: Mapping[str, ParameterValue] = field(default_factory=lambda: DEFAULT_PARAMS)

    def __post_init__(self):
        object.__setattr__(self, 'headers', MappingProxyType(dict(self.headers)))
        object.__setattr__(self, 'params', MappingProxyType(dict(self.params)))

    def with_headers(self, headers: Optional[Mapping[str, str]] = None, **kwargs: str) -> 'ClientDefaults':
        """Return a copy with additional or replaced headers."""
        return ClientDefaults(headers={**self.headers, **(headers or {}), **kwargs}, params=self.params)

    def with_params(
        self, params: Optional[Mapping[str, ParameterValue]] = None, **kwargs: ParameterValue
    ) -> 'ClientDefaults':
        """Return a copy with additional or replaced parameters."""
        return ClientDefaults(headers=self.headers, params={**self.params, **(params or {}), **kwargs})
