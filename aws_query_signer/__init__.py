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

"""Signature Version 2 signing and response streaming for AWS Query APIs."""

__version__ = '1.0.0'

from aws_query_signer.client import QueryClient  # noqa: E402
from aws_query_signer.defaults import ClientDefaults  # noqa: E402
from aws_query_signer.exceptions import (  # noqa: E402
    MissingEndpoint,
    MissingKey,
    MissingSecret,
    QuerySignerError,
    StreamClosed,
)
from aws_query_signer.query import build_query, escape  # noqa: E402
from aws_query_signer.secret import Secret  # noqa: E402
from aws_query_signer.signer import (  # noqa: E402
    QuerySignatureAuth,
    Signer,
    SigningCredentials,
    sign_request,
)
from aws_query_signer.streamer import StreamBuffer  # noqa: E402


__all__ = [
    'ClientDefaults',
    'MissingEndpoint',
    'MissingKey',
    'MissingSecret',
    'QueryClient',
    'QuerySignatureAuth',
    'QuerySignerError',
    'Secret',
    'Signer',
    'SigningCredentials',
    'StreamBuffer',
    'StreamClosed',
    'build_query',
    'escape',
    'sign_request',
]
