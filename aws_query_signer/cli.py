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

"""Command-line interface for sending signed AWS Query API requests."""

import argparse
import logging
import sys
from aws_query_signer import __version__
from aws_query_signer.config import create_client, load_config_file, merge_config
from aws_query_signer.logging_config import configure_logging
from aws_query_signer.utils import parse_pairs, within_range
from typing import List, Optional


logger = logging.getLogger(__name__)

HTTP_METHODS = ['CONNECT', 'DELETE', 'GET', 'HEAD', 'OPTIONS', 'PATCH', 'POST', 'PUT', 'TRACE']


def parse_args(argv: Optional[List[str]] = None):
    """Parse command line arguments.

    Args:
        argv: Arguments to parse; defaults to ``sys.argv[1:]``

    Returns:
        argparse.Namespace: Parsed command line arguments, with ``params`` and
        ``headers`` converted to dictionaries
    """
    parser = argparse.ArgumentParser(
        description=f'AWS Query API request signer v{__version__}',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # List SimpleDB domains
  aws-query-signer https://sdb.amazonaws.com Action=ListDomains Version=2009-04-15

  # Use credentials from a profile and a custom path
  aws-query-signer https://mws.amazonservices.com Action=GetServiceStatus --path /Orders/2013-09-01 --profile prod

  # Read the endpoint and credentials from a config file
  aws-query-signer --config ~/.aws-query-signer.yaml Action=ListDomains
        """,
    )

    parser.add_argument(
        'endpoint',
        nargs='?',
        default=None,
        help='AWS Query API endpoint URL (may be set in the config file instead)',
    )

    parser.add_argument(
        'params',
        nargs='*',
        metavar='Name=Value',
        help='Request parameters, e.g. Action=ListDomains',
    )

    parser.add_argument(
        '--method',
        type=str.upper,
        choices=HTTP_METHODS,
        default='GET',
        help='HTTP method (default: GET)',
    )

    parser.add_argument(
        '--path',
        help='Request path (defaults to the endpoint path)',
    )

    parser.add_argument(
        '--header',
        action='append',
        metavar='Name:Value',
        help='Additional request header; may be repeated',
    )

    parser.add_argument(
        '--config',
        help='Path to a YAML configuration file',
    )

    parser.add_argument(
        '--profile',
        help='AWS profile to read credentials from (uses AWS_PROFILE environment variable if not provided)',
    )

    parser.add_argument(
        '--timeout',
        type=within_range(0),
        default=None,
        help='Timeout (seconds) when calling the endpoint (default: 30)',
    )

    parser.add_argument(
        '--log-level',
        type=str.upper,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        default=None,
        help='Set the logging level (default: the config file value, else INFO)',
    )

    args = parser.parse_args(argv)

    # A single positional that looks like a parameter belongs to params when
    # the endpoint comes from the config file.
    if args.endpoint and '=' in args.endpoint and '://' not in args.endpoint:
        args.params.insert(0, args.endpoint)
        args.endpoint = None

    try:
        args.params = parse_pairs(args.params)
        args.headers = parse_pairs(args.header, separator=':')
    except argparse.ArgumentTypeError as e:
        parser.error(str(e))

    return args


def main(argv: Optional[List[str]] = None) -> int:
    """Send one signed request and stream the response body to stdout.

    Returns:
        Exit status: 0 on success, 1 when the service answers with an error
    """
    args = parse_args(argv)

    # The log level may come from the config file
    file_config = load_config_file(args.config) if args.config else None
    config = merge_config(file_config, args)
    configure_logging(config.log_level)

    try:
        with create_client(config) as client:
            response = client.request(args.method, path=args.path, query=args.params)
            logger.info('HTTP %d from %s', response.status_code, config.endpoint)

            output = sys.stdout.buffer
            for chunk in response.stream:
                output.write(chunk)
            output.flush()
    except Exception as e:
        logger.error('Request failed: %s', e)
        raise

    if response.is_error:
        logger.error('Service returned HTTP %d', response.status_code)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
