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

"""Tests for default headers and parameters."""

import dataclasses
import pytest
import re
import socket
from aws_query_signer import __version__
from aws_query_signer.defaults import (
    DEFAULT_HEADERS,
    DEFAULT_PARAMS,
    SIGNATURE_PARAMS,
    USER_AGENT,
    ClientDefaults,
    utc_timestamp,
)
from types import SimpleNamespace
from unittest.mock import patch


def test_user_agent():
    """Test that the User-Agent names the library, language and host."""
    assert USER_AGENT == f'aws-query-signer/{__version__} (Language=Python; {socket.gethostname()})'
    assert DEFAULT_HEADERS['User-Agent'] == USER_AGENT


def test_utc_timestamp_format():
    """Test the ISO 8601 UTC timestamp layout."""
    assert re.fullmatch(r'\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z', utc_timestamp())


def test_default_params():
    """Test the static signing parameters."""
    assert DEFAULT_PARAMS['SignatureVersion'] == '2'
    assert DEFAULT_PARAMS['SignatureMethod'] == 'HmacSHA256'


def test_signature_params_need_no_key():
    """Test that the key-free parameters are the defaults minus the access key."""
    assert 'AWSAccessKeyId' not in SIGNATURE_PARAMS
    assert set(DEFAULT_PARAMS) == {'AWSAccessKeyId', *SIGNATURE_PARAMS}


def test_providers_read_the_client():
    """Test that the access key and timestamp are computed per request."""
    client = SimpleNamespace(key='AKID')

    with patch('aws_query_signer.defaults.utc_timestamp', return_value='2026-10-17T12:00:00Z'):
        timestamp = DEFAULT_PARAMS['Timestamp'](client)

    assert DEFAULT_PARAMS['AWSAccessKeyId'](client) == 'AKID'
    assert timestamp == '2026-10-17T12:00:00Z'


def test_default_mappings_are_read_only():
    """Test that the shared defaults cannot be modified."""
    with pytest.raises(TypeError):
        DEFAULT_PARAMS['Version'] = '1'
    with pytest.raises(TypeError):
        DEFAULT_HEADERS['X-Test'] = '1'


class TestClientDefaults:
    """Test cases for ClientDefaults."""

    def test_defaults(self):
        """Test that a new instance carries the default mappings."""
        defaults = ClientDefaults()

        assert dict(defaults.headers) == dict(DEFAULT_HEADERS)
        assert dict(defaults.params) == dict(DEFAULT_PARAMS)

    def test_with_params_returns_new_instance(self):
        """Test that with_params leaves the original untouched."""
        defaults = ClientDefaults()

        pinned = defaults.with_params(Version='2009-04-15')

        assert pinned.params['Version'] == '2009-04-15'
        assert pinned.params['SignatureVersion'] == '2'
        assert 'Version' not in defaults.params

    def test_with_params_mapping_and_keywords(self):
        """Test that keywords win over the mapping."""
        defaults = ClientDefaults().with_params({'Version': '1', 'A': 'a'}, Version='2')

        assert defaults.params['Version'] == '2'
        assert defaults.params['A'] == 'a'

    def test_with_headers_replaces_by_name(self):
        """Test that with_headers can replace the User-Agent."""
        defaults = ClientDefaults().with_headers({'User-Agent': 'custom'}, Accept='text/xml')

        assert defaults.headers == {'User-Agent': 'custom', 'Accept': 'text/xml'}
        assert ClientDefaults().headers['User-Agent'] == USER_AGENT

    def test_immutable(self):
        """Test that defaults can be neither reassigned nor mutated."""
        defaults = ClientDefaults()

        with pytest.raises(dataclasses.FrozenInstanceError):
            defaults.params = {}
        with pytest.raises(TypeError):
            defaults.params['Version'] = '1'

    def test_caller_mapping_is_copied(self):
        """Test that later changes to the passed mapping have no effect."""
        params = {'Version': '1'}
        defaults = ClientDefaults(params=params)

        params['Version'] = '2'

        assert defaults.params['Version'] == '1'
