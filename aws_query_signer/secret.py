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

"""HMAC-SHA256 signing key."""

import base64
import hashlib
import hmac
from typing import Union


class Secret:
    """An AWS secret access key.

    The key is held as bytes and never exposed through ``repr``. Instances
    are immutable, so a single secret can be shared between threads.
    """

    __slots__ = ('_key',)

    def __init__(self, key: Union[str, bytes]):
        """Initialize the secret.

        Args:
            key: The secret access key, as text or raw bytes
        """
        if isinstance(key, str):
            key = key.encode('utf-8')
        object.__setattr__(self, '_key', bytes(key))

    def __setattr__(self, name, value):
        raise AttributeError(f'{type(self).__name__} is immutable')

    def __repr__(self) -> str:
        return f'{type(self).__name__}(****)'

    def __eq__(self, other) -> bool:
        if not isinstance(other, Secret):
            return NotImplemented
        return hmac.compare_digest(self._key, other._key)

    def __hash__(self) -> int:
        return hash(self._key)

    def sign(self, message: Union[str, bytes]) -> str:
        """Sign a message.

        Args:
            message: The message to sign; text is UTF-8 encoded first

        Returns:
            The base64 encoded HMAC-SHA256 digest of the message
        """
        if isinstance(message, str):
            message = message.encode('utf-8')
        digest = hmac.new(self._key, message, hashlib.sha256).digest()
        return base64.b64encode(digest).decode('ascii')
