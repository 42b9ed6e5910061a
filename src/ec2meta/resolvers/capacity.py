# SPDX-FileCopyrightText: 2026 The ec2meta Authors
# SPDX-License-Identifier: Apache-2.0

"""Capacity reservation preference.

Only binary availability is modelled: a reservation with spare instances is
``"open"``, one without (or one that no longer exists) is ``"none"``.  AWS's
full targeting states are not reflected.
"""

from __future__ import annotations

import logging
from typing import Optional

from botocore.exceptions import ClientError

from ec2meta.clients.ec2 import Ec2Client, error_code

logger = logging.getLogger(__name__)

PREFERENCE_OPEN = "open"
PREFERENCE_NONE = "none"

_NOT_FOUND_CODES = frozenset({"InvalidCapacityReservationId.NotFound", "InvalidCapacityReservationId.Malformed"})


class CapacityReservationResolver:
    def __init__(self, client: Ec2Client) -> None:
        self._client = client

    def resolve(self, capacity_reservation_id: Optional[str]) -> Optional[str]:
        """Return ``"open"``/``"none"``, or ``None`` when there is no reservation id."""
        if not capacity_reservation_id:
            return None

        try:
            reservation = self._client.describe_capacity_reservation(capacity_reservation_id)
        except ClientError as exc:
            if error_code(exc) not in _NOT_FOUND_CODES:
                raise
            reservation = None

        if reservation is None:
            logger.debug("Capacity reservation %s not found", capacity_reservation_id)
            return PREFERENCE_NONE

        return PREFERENCE_OPEN if reservation.available_instance_count > 0 else PREFERENCE_NONE
