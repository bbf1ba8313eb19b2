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

"""Utility functions for the AWS query signer."""

import argparse
import httpx
import logging
from typing import Dict, List, Optional, Tuple, Union


logger = logging.getLogger(__name__)

DEFAULT_PORTS = {'http': 80, 'https': 443}


def host_and_port(url: Union[str, httpx.URL]) -> Tuple[str, int]:
    """Determine the host and port a URL connects to.

    Args:
        url: The endpoint URL

    Returns:
        Tuple of host name and port; the scheme's default port is used when
        the URL does not name one

    Raises:
        ValueError: If the URL has no host or an unknown scheme without a port
    """
    url = httpx.URL(url)
    if not url.host:
        raise ValueError(f"Could not determine host from endpoint '{url}'")

    port = url.port or DEFAULT_PORTS.get(url.scheme)
    if port is None:
        raise ValueError(
            f"Could not determine port for endpoint '{url}'. "
            'Please include the port in the endpoint URL.'
        )
    return url.host, port


def signing_host(url: Union[str, httpx.URL]) -> str:
    """Return the ``host:port`` string used in the string to sign."""
    host, port = host_and_port(url)
    return f'{host}:{port}'


def request_path(url: Union[str, httpx.URL]) -> str:
    """Return the URL path as sent on the wire, defaulting to ``/``."""
    path = httpx.URL(url).raw_path.partition(b'?')[0]
    return path.decode('ascii') or '/'


def parse_pairs(values: Optional[List[str]], separator: str = '=') -> Dict[str, str]:
    """Parse ``Name=Value`` command line arguments into a dictionary.

    Args:
        values: Strings of the form ``Name<separator>Value``
        separator: The separator between name and value

    Returns:
        Dictionary of names to values; later duplicates win

    Raises:
        argparse.ArgumentTypeError: If a value has no separator or an empty name
    """
    pairs = {}
    for value in values or []:
        name, found, rest = value.partition(separator)
        name = name.strip()
        if not found or not name:
            raise argparse.ArgumentTypeError(f"'{value}' must be of the form Name{separator}Value")
        pairs[name] = rest.strip() if separator == ':' else rest
    return pairs


def within_range(min_value: float, max_value: Optional[float] = None):
    """Factory function to create range validators.

    Args:
        min_value: Minimum value
        max_value: Maximum value


    Returns:
        The argparse validator function

    Raises:
        argparse.ArgumentTypeError: If min and max are not within range
    """

    def validator(value):
        try:
            fvalue = float(value)
        except ValueError:
            raise argparse.ArgumentTypeError(f"'{value}' is not a valid number")

        if min_value is not None and fvalue < min_value:
            raise argparse.ArgumentTypeError(f"'{value}' must be >= {min_value}")

        if max_value is not None and fvalue > max_value:
            raise argparse.ArgumentTypeError(f"'{value}' must be <= {max_value}")

        return fvalue

    return validator
