# SPDX-FileCopyrightText: 2026 The ec2meta Authors
# SPDX-License-Identifier: Apache-2.0

"""OpenTelemetry resource detector for EC2 cost attribution.

Wraps :class:`~ec2meta.resources.assembler.AttributeAssembler` in the OTel
``ResourceDetector`` interface so the attribute set can be merged with other
detectors via ``get_aggregated_resources`` or used on its own::

    detector = Ec2InstanceResourceDetector(assembler, instance_id="i-0abc123")
    resource = detector.detect()
"""

from __future__ import annotations

import logging
from typing import Optional

from opentelemetry.sdk.resources import Resource, ResourceDetector

from ec2meta.models.instance import AttributeSet
from ec2meta.resources.assembler import AttributeAssembler
from ec2meta.resources.imds import detect_instance_id

logger = logging.getLogger(__name__)


class Ec2InstanceResourceDetector(ResourceDetector):
    """Detect the cost-attribution attributes of an EC2 instance.

    Args:
        assembler: The attribute assembler to resolve through.
        instance_id: Explicit instance id.  When omitted and
            *use_instance_metadata* is set, the id is read from IMDS; when
            that also fails the sole instance of the account is described.
        use_instance_metadata: Query IMDS for the local instance id.
        raise_on_error: Passed to ``ResourceDetector``; only consulted by
            ``get_aggregated_resources``.
    """

    def __init__(
        self,
        assembler: AttributeAssembler,
        instance_id: Optional[str] = None,
        use_instance_metadata: bool = True,
        raise_on_error: bool = True,
    ) -> None:
        super().__init__(raise_on_error=raise_on_error)
        self._assembler = assembler
        self._instance_id = instance_id
        self._use_instance_metadata = use_instance_metadata

    def resolve_instance_id(self) -> Optional[str]:
        if self._instance_id:
            return self._instance_id
        if self._use_instance_metadata:
            self._instance_id = detect_instance_id()
            if self._instance_id:
                logger.debug("Instance id from IMDS: %s", self._instance_id)
        return self._instance_id

    def detect_attributes(self) -> AttributeSet:
        return self._assembler.assemble(self.resolve_instance_id())

    def detect(self) -> Resource:
        return Resource(self.detect_attributes())
