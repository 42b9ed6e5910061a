# SPDX-FileCopyrightText: 2026 The ec2meta Authors
# SPDX-License-Identifier: Apache-2.0

"""EC2 instance resource attributes for cost attribution.

:class:`AttributeAssembler` resolves the attribute set through the EC2 API;
:class:`Ec2InstanceResourceDetector` exposes it as an OpenTelemetry
resource.
"""

from __future__ import annotations

from ec2meta.resources.assembler import REQUIRED_KEYS, AttributeAssembler, build_attributes
from ec2meta.resources.detector import Ec2InstanceResourceDetector
from ec2meta.resources.imds import detect_instance_id

__all__ = [
    "REQUIRED_KEYS",
    "AttributeAssembler",
    "Ec2InstanceResourceDetector",
    "build_attributes",
    "detect_instance_id",
]
