# SPDX-FileCopyrightText: 2026 The ec2meta Authors
# SPDX-License-Identifier: Apache-2.0

"""ec2meta data models."""

from ec2meta.models.instance import (
    AttributeSet,
    AttributeValue,
    CapacityReservationRecord,
    FleetRecord,
    ImageRecord,
    InstanceRecord,
    Lifecycle,
    Tenancy,
)

__all__ = [
    "AttributeSet",
    "AttributeValue",
    "CapacityReservationRecord",
    "FleetRecord",
    "ImageRecord",
    "InstanceRecord",
    "Lifecycle",
    "Tenancy",
]
