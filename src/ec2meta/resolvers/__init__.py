# SPDX-FileCopyrightText: 2026 The ec2meta Authors
# SPDX-License-Identifier: Apache-2.0

"""Per-field resolvers used by the attribute assembler."""

from ec2meta.resolvers.cache import AttributeCache, CachedValue
from ec2meta.resolvers.capacity import CapacityReservationResolver
from ec2meta.resolvers.describer import InstanceDescriber
from ec2meta.resolvers.fleet import FleetMembershipResolver
from ec2meta.resolvers.platform import PlatformDetailsClarifier, clarify_platform_label

__all__ = [
    "AttributeCache",
    "CachedValue",
    "CapacityReservationResolver",
    "FleetMembershipResolver",
    "InstanceDescriber",
    "PlatformDetailsClarifier",
    "clarify_platform_label",
]
