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

"""Unit tests for canonical query construction."""

import pytest
import string
from aws_query_signer.query import build_query, escape, resolve_params
from unittest.mock import Mock


class TestEscape:
    """Test cases for the escape function."""

    def test_unreserved_characters_are_not_encoded(self):
        """Test that letters, digits and . _ ~ - pass through."""
        unreserved = string.ascii_letters + string.digits + '._~-'

        assert escape(unreserved) == unreserved

    def test_space_is_encoded_as_percent_20(self):
        """Test that a space becomes %20, not +."""
        assert escape('2 3') == '2%203'

    @pytest.mark.parametrize(
        'value,expected',
        [
            ('/', '%2F'),
            ('+', '%2B'),
            ('=', '%3D'),
            ('&', '%26'),
            ('*', '%2A'),
            (':', '%3A'),
            ('%', '%25'),
        ],
    )
    def test_reserved_characters_use_uppercase_hex(self, value, expected):
        """Test that reserved characters become % and two uppercase hex digits."""
        assert escape(value) == expected

    def test_non_ascii_is_encoded_byte_by_byte(self):
        """Test that multi-byte characters are UTF-8 expanded and encoded per byte."""
        assert escape('café') == 'caf%C3%A9'
        assert escape('日') == '%E6%97%A5'

    def test_bytes_are_encoded_as_given(self):
        """Test that bytes values are not re-encoded as text."""
        assert escape(b'\xff a') == '%FF%20a'

    def test_non_string_values_are_stringified(self):
        """Test that numbers are converted with str."""
        assert escape(2) == '2'
        assert escape(1.5) == '1.5'

    def test_none_is_empty(self):
        """Test that None encodes as an empty string."""
        assert escape(None) == ''

    def test_escape_is_stable_on_safe_output(self):
        """Test that escaping an already safe value changes nothing."""
        once = escape('a b/c')

        assert escape(escape('abc-._~')) == 'abc-._~'
        assert once == 'a%20b%2Fc'


class TestResolveParams:
    """Test cases for the resolve_params function."""

    def test_providers_are_called_with_context(self):
        """Test that callable values receive the context."""
        context = Mock()
        context.key = 'AKID'

        resolved = resolve_params({'AWSAccessKeyId': lambda c: c.key, 'SignatureVersion': '2'}, context)

        assert resolved == {'AWSAccessKeyId': 'AKID', 'SignatureVersion': '2'}

    def test_providers_are_called_each_time(self):
        """Test that providers are evaluated lazily, once per resolution."""
        provider = Mock(side_effect=['first', 'second'])

        assert resolve_params({'Timestamp': provider})['Timestamp'] == 'first'
        assert resolve_params({'Timestamp': provider})['Timestamp'] == 'second'

    def test_input_is_not_modified(self):
        """Test that a new dictionary is returned."""
        params = {'A': lambda c: 'x'}

        resolve_params(params)

        assert callable(params['A'])


class TestBuildQuery:
    """Test cases for the build_query function."""

    def test_sorted_and_encoded(self):
        """Test that pairs are sorted and values encoded."""
        query = build_query({'SignatureVersion': '2'}, {'Foo': '1', 'Bar': '2 3'})

        assert query == 'Bar=2%203&Foo=1&SignatureVersion=2'

    def test_overrides_win_on_collision(self):
        """Test that request parameters replace base parameters."""
        query = build_query({'Version': '2009-04-15', 'SignatureVersion': '2'}, {'Version': '2010-01-01'})

        assert query == 'SignatureVersion=2&Version=2010-01-01'

    def test_order_independent_of_insertion(self):
        """Test that the output does not depend on insertion order."""
        forward = {'Action': 'Put', 'Item.1': 'a', 'Attribute.1.Name': 'n'}
        backward = dict(reversed(list(forward.items())))

        assert build_query({}, forward) == build_query({}, backward)

    def test_sorts_by_whole_pair(self):
        """Test that sorting uses the full name=value string."""
        query = build_query({}, {'A': 'y', 'A1': 'x'})

        # '1' sorts before '='
        assert query == 'A1=x&A=y'

    def test_sort_is_case_sensitive(self):
        """Test that upper-case names sort before lower-case ones."""
        assert build_query({}, {'b': '1', 'C': '2', 'a': '3'}) == 'C=2&a=3&b=1'

    def test_names_are_not_encoded(self):
        """Test that only values are percent-encoded."""
        assert build_query({}, {'Attribute.1.Name': 'a b'}) == 'Attribute.1.Name=a%20b'

    def test_providers_resolved_against_context(self):
        """Test that base providers see the context."""
        context = Mock()
        context.key = 'AKID'

        query = build_query({'AWSAccessKeyId': lambda c: c.key}, {'Action': 'ListDomains'}, context)

        assert query == 'AWSAccessKeyId=AKID&Action=ListDomains'

    def test_empty_inputs(self):
        """Test that no parameters produce an empty string."""
        assert build_query({}) == ''
        assert build_query({}, {}) == ''

    def test_only_base_params(self):
        """Test that overrides are optional."""
        assert build_query({'SignatureMethod': 'HmacSHA256'}) == 'SignatureMethod=HmacSHA256'
