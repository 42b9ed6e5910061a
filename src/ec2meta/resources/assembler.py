# SPDX-FileCopyrightText: 2026 The ec2meta Authors
# SPDX-License-Identifier: Apache-2.0

"""Attribute Assembler -- the instance attribute set handed to the cost engine.

Resolution is a small task graph::

    describe instance ──┬── clarify platform details
                        ├── capacity reservation preference
                        └── fleet membership

The describe call is required; the three lookups after it are independent,
each goes through the :class:`~ec2meta.resolvers.cache.AttributeCache`, and
with ``parallel=True`` they run concurrently and are joined before assembly.

Key presence rules:

- Always present: instance id, instance type, region, ``os.type``,
  ``cloud.platform``, license model and tenancy.
- ``aws.ec2.platform_details`` only when the label is not a provider default
  (``Linux/UNIX`` / ``Windows``).
- Lifecycle, capacity reservation id/preference and fleet id only when
  the provider reports (or the resolver finds) a value.

The key strings are the compatibility surface with the downstream cost
attribution system and must not be renamed.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, Optional

from ec2meta.clients.ec2 import Ec2Client
from ec2meta.models.instance import AttributeSet, InstanceRecord
from ec2meta.resolvers.cache import AttributeCache
from ec2meta.resolvers.capacity import CapacityReservationResolver
from ec2meta.resolvers.describer import InstanceDescriber
from ec2meta.resolvers.fleet import FleetMembershipResolver
from ec2meta.resolvers.platform import DEFAULT_PLATFORMS, PlatformDetailsClarifier

logger = logging.getLogger(__name__)

# =========================================================================
# Attribute keys
# =========================================================================

INSTANCE_ID = "aws.ec2.instance_id"
INSTANCE_TYPE = "aws.ec2.instance_type"
REGION = "aws.region"
OS_TYPE = "os.type"
CLOUD_PLATFORM = "cloud.platform"
PLATFORM_DETAILS = "aws.ec2.platform_details"
LICENSE_MODEL = "aws.ec2.license_model"
TENANCY = "aws.ec2.tenancy"
INSTANCE_LIFECYCLE = "aws.ec2.instance_lifecycle"
CAPACITY_RESERVATION_ID = "aws.ec2.capacity_reservation_id"
CAPACITY_RESERVATION_PREFERENCE = "aws.ec2.capacity_reservation_preference"
FLEET_ID = "aws.ec2.fleet_id"

REQUIRED_KEYS = frozenset({INSTANCE_ID, INSTANCE_TYPE, REGION, OS_TYPE, CLOUD_PLATFORM})

CLOUD_PLATFORM_EC2 = "aws_ec2"
OS_TYPE_WINDOWS = "windows"
OS_TYPE_LINUX = "linux"
LICENSE_BYOL = "bring your own license"
LICENSE_NONE = "no license required"

# Cache field names
FIELD_PLATFORM_DETAILS = "platform_details"
FIELD_CAPACITY_PREFERENCE = "capacity_reservation_preference"
FIELD_FLEET_ID = "fleet_id"


def os_type_for(platform_details: str) -> str:
    return OS_TYPE_WINDOWS if "windows" in platform_details.lower() else OS_TYPE_LINUX


def license_model_for(instance: InstanceRecord) -> str:
    return LICENSE_BYOL if instance.has_licenses else LICENSE_NONE


def build_attributes(
    instance: InstanceRecord,
    platform_details: str,
    capacity_reservation_preference: Optional[str] = None,
    fleet_id: Optional[str] = None,
) -> AttributeSet:
    """Combine an instance record and its resolved fields into an attribute set."""
    attrs: AttributeSet = {
        INSTANCE_ID: instance.instance_id,
        INSTANCE_TYPE: instance.instance_type,
        REGION: instance.region,
        OS_TYPE: os_type_for(platform_details),
        CLOUD_PLATFORM: CLOUD_PLATFORM_EC2,
    }

    if platform_details and platform_details not in DEFAULT_PLATFORMS:
        attrs[PLATFORM_DETAILS] = platform_details

    attrs[LICENSE_MODEL] = license_model_for(instance)
    attrs[TENANCY] = instance.tenancy

    if instance.lifecycle:
        attrs[INSTANCE_LIFECYCLE] = instance.lifecycle
    if instance.capacity_reservation_id:
        attrs[CAPACITY_RESERVATION_ID] = instance.capacity_reservation_id
    if capacity_reservation_preference:
        attrs[CAPACITY_RESERVATION_PREFERENCE] = capacity_reservation_preference
    if fleet_id:
        attrs[FLEET_ID] = fleet_id

    return attrs


class AttributeAssembler:
    """Resolve the cost-attribution attribute set of an EC2 instance.

    Example::

        >>> cache = AttributeCache()              # one per process
        >>> assembler = AttributeAssembler.from_client(ec2, cache)
        >>> assembler.assemble("i-0abc123")
        {'aws.ec2.instance_id': 'i-0abc123', ...}

    Args:
        describer: Instance lookup.
        clarifier: Platform label disambiguation.
        capacity_resolver: Capacity reservation preference lookup.
        fleet_resolver: Fleet membership lookup.
        cache: Shared per-process cache.
        parallel: Run the three post-describe lookups concurrently.
    """

    def __init__(
        self,
        describer: InstanceDescriber,
        clarifier: PlatformDetailsClarifier,
        capacity_resolver: CapacityReservationResolver,
        fleet_resolver: FleetMembershipResolver,
        cache: AttributeCache,
        parallel: bool = False,
    ) -> None:
        self._describer = describer
        self._clarifier = clarifier
        self._capacity_resolver = capacity_resolver
        self._fleet_resolver = fleet_resolver
        self._cache = cache
        self._parallel = parallel

    @classmethod
    def from_client(cls, client: Ec2Client, cache: AttributeCache, parallel: bool = False) -> AttributeAssembler:
        return cls(
            describer=InstanceDescriber(client),
            clarifier=PlatformDetailsClarifier(client),
            capacity_resolver=CapacityReservationResolver(client),
            fleet_resolver=FleetMembershipResolver(client),
            cache=cache,
            parallel=parallel,
        )

    @property
    def cache(self) -> AttributeCache:
        return self._cache

    def assemble(self, instance_id: Optional[str] = None) -> AttributeSet:
        """Resolve the attribute set for *instance_id* (or the sole instance).

        Raises:
            NotFound: No instance matches.
        """
        instance = self._describer.describe(instance_id)
        key = instance.instance_id

        lookups: Dict[str, Callable[[], object]] = {
            FIELD_PLATFORM_DETAILS: lambda: self._clarifier.clarify(instance.platform_details, instance.image_id),
            FIELD_CAPACITY_PREFERENCE: lambda: self._capacity_resolver.resolve(instance.capacity_reservation_id),
            FIELD_FLEET_ID: lambda: self._fleet_resolver.resolve(key),
        }

        if self._parallel:
            with ThreadPoolExecutor(max_workers=len(lookups), thread_name_prefix="ec2meta") as pool:
                futures = {
                    field: pool.submit(self._cache.get_or_resolve, key, field, resolver)
                    for field, resolver in lookups.items()
                }
                resolved = {field: future.result() for field, future in futures.items()}
        else:
            resolved = {field: self._cache.get_or_resolve(key, field, resolver) for field, resolver in lookups.items()}

        attrs = build_attributes(
            instance,
            platform_details=resolved[FIELD_PLATFORM_DETAILS] or instance.platform_details,
            capacity_reservation_preference=resolved[FIELD_CAPACITY_PREFERENCE],
            fleet_id=resolved[FIELD_FLEET_ID],
        )
        logger.info("Resolved %d attributes for %s", len(attrs), key)
        return attrs
