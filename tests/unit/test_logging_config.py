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

"""Tests for logging configuration."""

import io
import logging
import pytest
import sys
from aws_query_signer.logging_config import RedactingFilter, configure_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Put the root logger back the way pytest configured it."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


def test_configure_logging_default_level():
    """Test logging configuration with default level."""
    configure_logging()

    root_logger = logging.getLogger()
    assert root_logger.level == logging.INFO
    assert len(root_logger.handlers) == 1
    assert isinstance(root_logger.handlers[0], logging.StreamHandler)


def test_configure_logging_custom_level():
    """Test logging configuration with custom level."""
    configure_logging('debug')

    assert logging.getLogger().level == logging.DEBUG


def test_configure_logging_invalid_level():
    """Test logging configuration with invalid level."""
    with pytest.raises(AttributeError):
        configure_logging('INVALID_LEVEL')


def test_logs_go_to_stderr():
    """Test that log records do not mix with the response body on stdout."""
    configure_logging()

    assert logging.getLogger().handlers[0].stream is sys.stderr


def test_httpx_logging_level():
    """Test that httpx logging is set to WARNING."""
    configure_logging()

    assert logging.getLogger('httpx').level == logging.WARNING
    assert logging.getLogger('httpcore').level == logging.WARNING


def test_httpx_request_lines_when_debugging():
    """Test that httpx request lines are shown at DEBUG."""
    configure_logging('DEBUG')

    assert logging.getLogger('httpx').level == logging.INFO
    assert logging.getLogger('httpcore').level == logging.WARNING


def test_custom_stream():
    """Test that records can be written to another stream."""
    stream = io.StringIO()
    configure_logging('INFO', stream=stream)

    logging.getLogger('aws_query_signer.test').info('hello')

    assert stream.getvalue().endswith('| INFO | aws_query_signer.test | hello\n')


def test_signatures_are_redacted():
    """Test that signatures and session tokens never reach the log."""
    stream = io.StringIO()
    configure_logging('DEBUG', stream=stream)

    logging.getLogger('httpx').info(
        'HTTP Request: %s %s',
        'GET',
        'https://sdb.amazonaws.com/?AWSAccessKeyId=AKID&SecurityToken=tok%2F1'
        '&SignatureMethod=HmacSHA256&SignatureVersion=2&Signature=abc%2B%3D',
    )

    output = stream.getvalue()
    assert 'abc%2B%3D' not in output
    assert 'tok%2F1' not in output
    assert 'Signature=****' in output
    assert 'SecurityToken=****' in output
    assert 'SignatureMethod=HmacSHA256&SignatureVersion=2' in output
    assert 'AWSAccessKeyId=AKID' in output


def test_filter_leaves_other_records_alone():
    """Test that records without credentials keep their arguments."""
    record = logging.LogRecord('x', logging.INFO, __file__, 1, 'HTTP %d', (200,), None)

    assert RedactingFilter().filter(record) is True
    assert record.args == (200,)
