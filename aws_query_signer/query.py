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

"""Canonical query string construction."""

from typing import Any, Callable, Dict, Mapping, Optional, Union
from urllib.parse import quote


# A parameter value is either static or a provider called with the signing
# context (usually the client) when the query is built.
ParameterValue = Union[str, int, float, bytes, None, Callable[[Any], Any]]


def escape(value: Any) -> str:
    """Percent-encode a query value.

    Every byte outside ``A-Z a-z 0-9 . _ ~ -`` is replaced with ``%XX`` using
    uppercase hex digits. Text is UTF-8 encoded first, so non-ASCII
    characters are escaped byte by byte.

    Args:
        value: The value to encode; ``None`` encodes as an empty string

    Returns:
        The encoded value
    """
    if value is None:
        return ''
    if not isinstance(value, (bytes, bytearray)):
        value = str(value).encode('utf-8')
    return quote(bytes(value), safe='')


def resolve_params(params: Mapping[str, ParameterValue], context: Any = None) -> Dict[str, Any]:
    """Resolve parameter providers against a context.

    Args:
        params: Parameter names mapped to static values or providers
        context: Object passed to each provider

    Returns:
        A new dictionary with every provider replaced by its value
    """
    return {name: value(context) if callable(value) else value for name, value in params.items()}


def build_query(
    params: Mapping[str, ParameterValue],
    overrides: Optional[Mapping[str, Any]] = None,
    context: Any = None,
) -> str:
    """Build a canonical query string.

    Base parameters are resolved against ``context``, request parameters are
    merged over them, values are percent-encoded, and the ``name=value``
    pairs are sorted and joined with ``&``.

    Args:
        params: Base parameters, possibly containing providers
        overrides: Request specific parameters; these win on name collision
        context: Object passed to parameter providers

    Returns:
        The canonical query string, empty when there are no parameters
    """
    merged = resolve_params(params, context)
    if overrides:
        merged.update(overrides)

    return '&'.join(sorted(f'{name}={escape(value)}' for name, value in merged.items()))
