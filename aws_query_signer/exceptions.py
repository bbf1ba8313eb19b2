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

"""Exceptions raised by the query signer."""


class QuerySignerError(Exception):
    """Base class for all query signer errors."""


class MissingEndpoint(QuerySignerError, ValueError):
    """Raised when a request is attempted without an endpoint."""

    def __init__(self, message: str = 'No AWS endpoint configured'):
        super().__init__(message)


class MissingKey(QuerySignerError, ValueError):
    """Raised when a request is signed without an access key id."""

    def __init__(self, message: str = 'No AWS access key id configured'):
        super().__init__(message)


class MissingSecret(QuerySignerError, ValueError):
    """Raised when a request is signed without a secret access key."""

    def __init__(self, message: str = 'No AWS secret access key configured'):
        super().__init__(message)


class StreamClosed(QuerySignerError):
    """Raised when a chunk is delivered to a stream that already ended."""
