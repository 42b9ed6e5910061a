# SPDX-FileCopyrightText: 2026 The ec2meta Authors
# SPDX-License-Identifier: Apache-2.0

"""ec2meta SDK components."""

from __future__ import annotations

from ec2meta.sdk.bootstrap import disable, enable, get_attributes, get_config, is_enabled
from ec2meta.sdk.config import Ec2MetaConfig
from ec2meta.sdk.credentials import AwsCredentials, CredentialProvider, create_ec2_client
from ec2meta.sdk.span_helpers import emit_instance_trace, set_instance_attributes

__all__ = [
    "AwsCredentials",
    "CredentialProvider",
    "Ec2MetaConfig",
    "create_ec2_client",
    "disable",
    "emit_instance_trace",
    "enable",
    "get_attributes",
    "get_config",
    "is_enabled",
    "set_instance_attributes",
]
