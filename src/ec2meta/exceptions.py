# SPDX-FileCopyrightText: 2026 The ec2meta Authors
# SPDX-License-Identifier: Apache-2.0

"""Errors raised while resolving instance attributes.

Only two failures are meaningful to callers:

- :class:`NotFound` -- no instance matches the requested id (or the account
  has none).  Fatal to the resolution.
- :class:`ConfigurationError` -- required configuration such as the OTLP
  endpoint or the AWS region is missing.  Fatal at startup.

Every other control-plane failure is a plain ``botocore`` exception and is
propagated unchanged.
"""

from __future__ import annotations

from typing import Optional


class Ec2MetaError(Exception):
    """Base class for ec2meta errors."""


class NotFound(Ec2MetaError):
    """Raised when no EC2 instance matches the lookup."""

    def __init__(self, instance_id: Optional[str] = None) -> None:
        self.instance_id = instance_id
        if instance_id:
            message = f"EC2 instance with id '{instance_id}' not found"
        else:
            message = "No EC2 instances found in the account"
        super().__init__(message)


class ConfigurationError(Ec2MetaError):
    """Raised when required configuration cannot be resolved."""


__all__ = ["ConfigurationError", "Ec2MetaError", "NotFound"]
