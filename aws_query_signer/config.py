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

"""Configuration file loading and credential resolution."""

import boto3
import logging
import os
import yaml
from aws_query_signer.client import QueryClient
from aws_query_signer.defaults import ClientDefaults
from pathlib import Path
from typing import Any, Dict, Optional, Tuple


logger = logging.getLogger(__name__)


class Config:
    """Configuration container for a query client."""

    def __init__(
        self,
        endpoint: str,
        key: Optional[str] = None,
        secret: Optional[str] = None,
        token: Optional[str] = None,
        profile: Optional[str] = None,
        log_level: str = 'INFO',
        timeout: float = 30.0,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, str]] = None,
    ):
        """Initialize configuration.

        Args:
            endpoint: AWS Query API endpoint URL
            key: AWS access key id
            secret: AWS secret access key
            token: AWS session token
            profile: AWS profile to read credentials from
            log_level: Logging level
            timeout: Timeout when calling the endpoint
            headers: Extra headers sent with every request
            params: Extra parameters sent with every request, e.g. ``Version``
        """
        self.endpoint = endpoint
        self.key = key
        self.secret = secret
        self.token = token
        self.profile = profile
        self.log_level = log_level
        self.timeout = timeout
        self.headers = headers or {}
        self.params = params or {}

    def __repr__(self) -> str:
        return (
            f'Config(endpoint={self.endpoint!r}, key={self.key!r}, '
            f'secret={"****" if self.secret else None}, profile={self.profile!r})'
        )


def load_config_file(config_path: str) -> Dict[str, Any]:
    """Load configuration from YAML file.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Dictionary containing configuration values

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If config file is invalid YAML
        ValueError: If config file has invalid structure
    """
    path = Path(config_path).expanduser()

    if not path.exists():
        raise FileNotFoundError(f'Configuration file not found: {config_path}')

    logger.info('Loading configuration from: %s', config_path)

    with open(path, 'r') as f:
        try:
            config_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f'Invalid YAML in configuration file: {e}')

    if not isinstance(config_data, dict):
        raise ValueError('Configuration file must contain a YAML dictionary')

    for section in ('headers', 'params'):
        if section in config_data and not isinstance(config_data[section], dict):
            raise ValueError(f"Configuration '{section}' must be a YAML dictionary")

    return config_data


def merge_config(file_config: Optional[Dict[str, Any]], cli_args: Any) -> Config:
    """Merge configuration from file and CLI arguments.

    CLI arguments take precedence over file configuration. Headers and
    parameters are merged name by name.

    Args:
        file_config: Configuration loaded from file (or None)
        cli_args: Parsed command-line arguments

    Returns:
        Config object with merged configuration
    """
    # Start with file config or empty dict
    config_dict = file_config.copy() if file_config else {}

    # CLI args override file config (only if explicitly provided)
    if getattr(cli_args, 'endpoint', None):
        config_dict['endpoint'] = cli_args.endpoint

    if getattr(cli_args, 'profile', None):
        config_dict['profile'] = cli_args.profile

    if getattr(cli_args, 'log_level', None):
        config_dict['log_level'] = cli_args.log_level

    if getattr(cli_args, 'timeout', None) is not None:
        config_dict['timeout'] = cli_args.timeout

    if getattr(cli_args, 'headers', None):
        config_dict['headers'] = {**config_dict.get('headers', {}), **cli_args.headers}

    # Validate required fields
    if not config_dict.get('endpoint'):
        raise ValueError('endpoint is required (provide via CLI or config file)')

    # Apply environment variable defaults if not set
    if 'profile' not in config_dict:
        config_dict['profile'] = os.getenv('AWS_PROFILE')

    return Config(**config_dict)


def create_aws_session(profile: Optional[str] = None) -> boto3.Session:
    """Create an AWS session with optional profile.

    Args:
        profile: AWS profile to use (optional)

    Returns:
        boto3.Session instance

    Raises:
        ValueError: If session creation fails or no credentials found
    """
    try:
        session = boto3.Session(profile_name=profile) if profile else boto3.Session()
    except Exception as e:
        raise ValueError(f"Failed to create AWS session with profile '{profile}': {e}")

    # Verify credentials are available
    credentials = session.get_credentials()
    if not credentials:
        profile_msg = f" with profile '{profile}'" if profile else ''
        raise ValueError(
            f'No AWS credentials found{profile_msg}. '
            "Please configure your AWS credentials using 'aws configure' or environment variables."
        )

    return session


def resolve_credentials(config: Config) -> Tuple[str, str, Optional[str]]:
    """Determine the access key, secret and session token to sign with.

    Explicit configuration wins, then the ``AWS_ACCESS_KEY_ID`` and
    ``AWS_SECRET_ACCESS_KEY`` environment variables, then the credential
    chain of a boto3 session for the configured profile.

    Args:
        config: The merged configuration

    Returns:
        Tuple of access key id, secret access key and session token

    Raises:
        ValueError: If no credentials can be found
    """
    if config.key and config.secret:
        logger.debug('Credentials determined through configuration')
        return config.key, config.secret, config.token

    environment_key = os.getenv('AWS_ACCESS_KEY_ID')
    environment_secret = os.getenv('AWS_SECRET_ACCESS_KEY')
    if environment_key and environment_secret and not config.profile:
        logger.debug('Credentials determined through environment variables')
        return environment_key, environment_secret, os.getenv('AWS_SESSION_TOKEN')

    session = create_aws_session(config.profile)
    credentials = session.get_credentials().get_frozen_credentials()
    logger.debug('Credentials determined through AWS profile %s', session.profile_name)
    return credentials.access_key, credentials.secret_key, credentials.token


def create_client(config: Config, **connector_kwargs: Any) -> QueryClient:
    """Create a QueryClient from configuration.

    Args:
        config: The merged configuration
        **connector_kwargs: Additional arguments to pass to HTTPConnector

    Returns:
        A QueryClient ready to send signed requests
    """
    key, secret, token = resolve_credentials(config)
    defaults = ClientDefaults().with_headers(config.headers).with_params(config.params)

    logger.info('Creating query client for endpoint %s with access key %s', config.endpoint, key)
    return QueryClient(
        endpoint=config.endpoint,
        key=key,
        secret=secret,
        token=token,
        defaults=defaults,
        timeout=config.timeout,
        **connector_kwargs,
    )
