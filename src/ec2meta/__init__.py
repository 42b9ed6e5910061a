# SPDX-FileCopyrightText: 2026 The ec2meta Authors
# SPDX-License-Identifier: Apache-2.0

"""ec2meta - cost-attribution attributes for OpenTelemetry on Amazon EC2.

Quick Start::

    from ec2meta import enable

    enable()  # reads EC2META_OTLP_ENDPOINT, EC2META_API_KEY, AWS_REGION env vars

Or resolve the attribute set directly::

    from ec2meta import AttributeAssembler, AttributeCache, CredentialProvider, Ec2MetaConfig, create_ec2_client

    config = Ec2MetaConfig()
    client = create_ec2_client(CredentialProvider(config), config)
    assembler = AttributeAssembler.from_client(client, AttributeCache())
    attributes = assembler.assemble("i-0abc123")
"""

from __future__ import annotations

from ec2meta._version import __version__

# Errors
from ec2meta.exceptions import ConfigurationError, Ec2MetaError, NotFound

# Records
from ec2meta.models.instance import AttributeSet, InstanceRecord

# Resolution
from ec2meta.resolvers.cache import AttributeCache
from ec2meta.resources.assembler import AttributeAssembler
from ec2meta.resources.detector import Ec2InstanceResourceDetector

# Bootstrap
from ec2meta.sdk.bootstrap import (
    disable,
    enable,
    get_attributes,
    is_enabled,
)

# Configuration
from ec2meta.sdk.config import Ec2MetaConfig
from ec2meta.sdk.credentials import CredentialProvider, create_ec2_client

# Span helpers
from ec2meta.sdk.span_helpers import emit_instance_trace, set_instance_attributes

__all__ = [
    "__version__",
    # Bootstrap
    "enable",
    "disable",
    "is_enabled",
    "get_attributes",
    # Configuration
    "Ec2MetaConfig",
    "CredentialProvider",
    "create_ec2_client",
    # Resolution
    "AttributeAssembler",
    "AttributeCache",
    "Ec2InstanceResourceDetector",
    "AttributeSet",
    "InstanceRecord",
    # Span helpers
    "emit_instance_trace",
    "set_instance_attributes",
    # Errors
    "Ec2MetaError",
    "NotFound",
    "ConfigurationError",
]
