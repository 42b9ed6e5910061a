# SPDX-FileCopyrightText: 2026 The ec2meta Authors
# SPDX-License-Identifier: Apache-2.0

"""EC2 Fleet membership lookup.

EC2 has no "which fleet owns this instance" query, so every fleet in the
account is enumerated and its active instances listed until one contains the
instance.  That is one ``DescribeFleetInstances`` call per fleet, the most
expensive step of a resolution; the assembler caches the result.
"""

from __future__ import annotations

import logging
from typing import Optional

from ec2meta.clients.ec2 import Ec2Client

logger = logging.getLogger(__name__)


class FleetMembershipResolver:
    def __init__(self, client: Ec2Client) -> None:
        self._client = client

    def resolve(self, instance_id: str) -> Optional[str]:
        """Return the id of the first fleet containing *instance_id*.

        Fleets are scanned in the order EC2 returns them, which is not
        guaranteed to be stable.
        """
        fleet_ids = self._client.list_fleet_ids()
        for fleet_id in fleet_ids:
            if self._client.describe_fleet(fleet_id).contains(instance_id):
                logger.debug("Instance %s belongs to fleet %s", instance_id, fleet_id)
                return fleet_id

        logger.debug("Instance %s is not in any of %d fleets", instance_id, len(fleet_ids))
        return None
