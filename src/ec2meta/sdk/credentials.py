# SPDX-FileCopyrightText: 2026 The ec2meta Authors
# SPDX-License-Identifier: Apache-2.0

"""AWS credential and region resolution.

Credentials come from explicit configuration when both an access key and a
secret are set (with the session token when present); otherwise the boto3
default chain is used (environment, shared credentials file, instance
profile, ...).

The region is taken from configuration, then ``AWS_REGION``, then the boto3
session.  A missing region is a :class:`~ec2meta.exceptions.ConfigurationError`.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional, Tuple

import boto3
from botocore.config import Config

from ec2meta.clients.ec2 import Ec2Client
from ec2meta.exceptions import ConfigurationError

if TYPE_CHECKING:
    from ec2meta.sdk.config import Ec2MetaConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AwsCredentials:
    """Explicit static credentials.  ``None`` fields defer to the boto3 chain."""

    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None
    session_token: Optional[str] = None

    @property
    def is_explicit(self) -> bool:
        return bool(self.access_key_id and self.secret_access_key)

    def __repr__(self) -> str:
        return f"AwsCredentials(explicit={self.is_explicit})"


class CredentialProvider:
    """Resolve credentials and region for the EC2 client."""

    def __init__(self, config: Ec2MetaConfig) -> None:
        self._config = config

    def get_credentials(self) -> AwsCredentials:
        cfg = self._config
        if cfg.aws_access_key_id and cfg.aws_secret_access_key:
            return AwsCredentials(
                access_key_id=cfg.aws_access_key_id,
                secret_access_key=cfg.aws_secret_access_key,
                session_token=cfg.aws_session_token or None,
            )
        return AwsCredentials()

    def get_region(self) -> str:
        region = self._config.aws_region or os.getenv("AWS_REGION") or boto3.session.Session().region_name
        if not region:
            raise ConfigurationError(
                "AWS region must be configured via config file, aws_region or the AWS_REGION environment variable"
            )
        return region

    def resolve(self) -> Tuple[AwsCredentials, str]:
        return self.get_credentials(), self.get_region()

    def session(self) -> boto3.session.Session:
        credentials, region = self.resolve()
        if credentials.is_explicit:
            logger.debug("Using explicit AWS credentials")
            return boto3.session.Session(
                aws_access_key_id=credentials.access_key_id,
                aws_secret_access_key=credentials.secret_access_key,
                aws_session_token=credentials.session_token,
                region_name=region,
            )
        logger.debug("Using the boto3 default credential chain")
        return boto3.session.Session(region_name=region)


def create_ec2_client(provider: CredentialProvider, config: Ec2MetaConfig) -> Ec2Client:
    """Build an :class:`Ec2Client` from *provider* with the configured timeouts."""
    botocore_config = Config(
        connect_timeout=config.api_connect_timeout,
        read_timeout=config.api_read_timeout,
        retries={"max_attempts": 1, "mode": "standard"},
    )
    client: Any = provider.session().client("ec2", config=botocore_config)
    return Ec2Client(client, max_attempts=config.api_max_attempts)
