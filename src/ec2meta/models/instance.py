# SPDX-FileCopyrightText: 2026 The ec2meta Authors
# SPDX-License-Identifier: Apache-2.0

"""Instance records - immutable snapshots of EC2 control-plane responses.

Each record is built from a single ``Describe*`` response item and is never
mutated afterwards.  Records are owned by the resolution that fetched them;
only the values derived from them are shared, via the attribute cache.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional, Tuple, Union

AttributeValue = Union[str, bool, int]
AttributeSet = Dict[str, AttributeValue]


class Tenancy(str, Enum):
    """Placement tenancy.  ``default`` is what the cost engine calls "shared"."""

    DEFAULT = "default"
    DEDICATED = "dedicated"
    HOST = "host"


class Lifecycle(str, Enum):
    """Instance lifecycle.  EC2 omits the field entirely for on-demand."""

    NORMAL = "normal"
    SPOT = "spot"
    SCHEDULED = "scheduled"
    CAPACITY_BLOCK = "capacity-block"


@dataclass(frozen=True)
class InstanceRecord:
    """Canonical description of one EC2 instance."""

    instance_id: str
    instance_type: str
    region: str
    platform_details: str
    tenancy: str = Tenancy.DEFAULT.value
    image_id: Optional[str] = None
    lifecycle: Optional[str] = None
    capacity_reservation_id: Optional[str] = None
    licenses: Tuple[str, ...] = ()

    @classmethod
    def from_api(cls, item: Dict[str, Any], region: str) -> InstanceRecord:
        """Build a record from a ``DescribeInstances`` instance item."""
        placement = item.get("Placement") or {}
        licenses = tuple(
            lic["LicenseConfigurationArn"] for lic in item.get("Licenses") or [] if lic.get("LicenseConfigurationArn")
        )
        return cls(
            instance_id=item["InstanceId"],
            instance_type=item.get("InstanceType", ""),
            region=region,
            platform_details=item.get("PlatformDetails") or "",
            tenancy=placement.get("Tenancy") or Tenancy.DEFAULT.value,
            image_id=item.get("ImageId") or None,
            lifecycle=item.get("InstanceLifecycle") or None,
            capacity_reservation_id=item.get("CapacityReservationId") or None,
            licenses=licenses,
        )

    @property
    def has_licenses(self) -> bool:
        return bool(self.licenses)


@dataclass(frozen=True)
class ImageRecord:
    """The subset of an AMI needed to disambiguate a platform label."""

    image_id: str
    name: str = ""
    description: str = ""
    platform_details: Optional[str] = None

    @classmethod
    def from_api(cls, item: Dict[str, Any]) -> ImageRecord:
        return cls(
            image_id=item["ImageId"],
            name=item.get("Name") or "",
            description=item.get("Description") or "",
            platform_details=item.get("PlatformDetails") or None,
        )


@dataclass(frozen=True)
class CapacityReservationRecord:
    capacity_reservation_id: str
    available_instance_count: int = 0

    @classmethod
    def from_api(cls, item: Dict[str, Any]) -> CapacityReservationRecord:
        return cls(
            capacity_reservation_id=item["CapacityReservationId"],
            available_instance_count=max(0, int(item.get("AvailableInstanceCount") or 0)),
        )


@dataclass(frozen=True)
class FleetRecord:
    fleet_id: str
    active_instance_ids: FrozenSet[str] = frozenset()

    def contains(self, instance_id: str) -> bool:
        return instance_id in self.active_instance_ids
