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

"""Logging setup for the ``aws-query-signer`` command.

Records go to stderr, leaving stdout to the response body. Signed query
strings show up in httpx request lines and in error messages, so every
record passes through ``RedactingFilter`` before it is written.
"""

import logging
import re
import sys
from typing import Optional, TextIO


LOG_FORMAT = '%(asctime)s | %(levelname)s | %(name)s | %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Query parameters that must never reach a log file.
_REDACTED = re.compile(r'\b(Signature|SecurityToken)=[^&\s\'"]+')


class RedactingFilter(logging.Filter):
    """Masks request signatures and session tokens in log messages."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = _REDACTED.sub(r'\1=****', message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def configure_logging(level: Optional[str] = None, stream: Optional[TextIO] = None) -> None:
    """Install a single formatted, redacting handler on the root logger.

    Args:
        level: Logging level name, usually ``Config.log_level``; case does not
               matter. Defaults to INFO.
        stream: Where records are written; defaults to stderr

    Raises:
        AttributeError: If ``level`` is not a logging level name
    """
    log_level = getattr(logging, level.upper()) if level else logging.INFO

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    handler.addFilter(RedactingFilter())

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    # httpx request lines are only useful when debugging a signature
    logging.getLogger('httpx').setLevel(logging.INFO if log_level <= logging.DEBUG else logging.WARNING)
    logging.getLogger('httpcore').setLevel(logging.WARNING)
