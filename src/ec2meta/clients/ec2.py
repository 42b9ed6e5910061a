# SPDX-FileCopyrightText: 2026 The ec2meta Authors
# SPDX-License-Identifier: Apache-2.0

"""Thin wrapper around a boto3 EC2 client.

One method per control-plane operation used by the resolvers.  Responses are
converted into the immutable records from :mod:`ec2meta.models.instance` and
paginated operations are followed to the end.

Throttling errors are retried with exponential backoff via ``tenacity``; all
other errors propagate unchanged.  Botocore's own retry handler is disabled by
:func:`ec2meta.sdk.credentials.create_ec2_client` so the two never stack.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterator, List, Optional

from botocore.exceptions import ClientError
from tenacity import Retrying, before_sleep_log, retry_if_exception, stop_after_attempt, wait_exponential

from ec2meta.models.instance import CapacityReservationRecord, FleetRecord, ImageRecord

logger = logging.getLogger(__name__)

THROTTLING_ERROR_CODES = frozenset({"Throttling", "ThrottlingException", "RequestLimitExceeded"})


def error_code(exc: BaseException) -> str:
    """Return the AWS error code of a ``ClientError`` (empty string otherwise)."""
    if isinstance(exc, ClientError):
        return exc.response.get("Error", {}).get("Code", "")
    return ""


def is_throttling_error(exc: BaseException) -> bool:
    return error_code(exc) in THROTTLING_ERROR_CODES


class Ec2Client:
    """Resolver-facing view of the EC2 API.

    Args:
        client: A boto3 ``ec2`` client.
        max_attempts: Attempts per call when throttled (``1`` disables retry).
        backoff_multiplier: Multiplier for the exponential backoff, in seconds.
        max_backoff: Upper bound on a single backoff sleep, in seconds.
    """

    def __init__(
        self,
        client: Any,
        *,
        max_attempts: int = 3,
        backoff_multiplier: float = 1.0,
        max_backoff: float = 10.0,
    ) -> None:
        self._client = client
        self._max_attempts = max(1, max_attempts)
        self._backoff_multiplier = backoff_multiplier
        self._max_backoff = max_backoff

    @property
    def region(self) -> str:
        return self._client.meta.region_name

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def describe_instances(self, instance_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """Return the raw instance items of one ``DescribeInstances`` call."""
        kwargs: Dict[str, Any] = {}
        if instance_id:
            kwargs["InstanceIds"] = [instance_id]
        response = self._call("describe_instances", **kwargs)
        return [item for reservation in response.get("Reservations", []) for item in reservation.get("Instances", [])]

    def describe_image(self, image_id: str) -> Optional[ImageRecord]:
        response = self._call("describe_images", ImageIds=[image_id])
        images = response.get("Images", [])
        return ImageRecord.from_api(images[0]) if images else None

    def describe_capacity_reservation(self, capacity_reservation_id: str) -> Optional[CapacityReservationRecord]:
        response = self._call("describe_capacity_reservations", CapacityReservationIds=[capacity_reservation_id])
        reservations = response.get("CapacityReservations", [])
        return CapacityReservationRecord.from_api(reservations[0]) if reservations else None

    def list_fleet_ids(self) -> List[str]:
        """Enumerate every fleet visible to the caller, in provider order."""
        return [
            fleet["FleetId"]
            for page in self._paginate("describe_fleets")
            for fleet in page.get("Fleets", [])
            if fleet.get("FleetId")
        ]

    def describe_fleet(self, fleet_id: str) -> FleetRecord:
        """Return *fleet_id* together with its active instance ids."""
        active = frozenset(
            instance["InstanceId"]
            for page in self._paginate("describe_fleet_instances", FleetId=fleet_id)
            for instance in page.get("ActiveInstances", [])
            if instance.get("InstanceId")
        )
        return FleetRecord(fleet_id=fleet_id, active_instance_ids=active)

    # ------------------------------------------------------------------
    # Plumbing
    # ------------------------------------------------------------------

    def _paginate(self, operation: str, **kwargs: Any) -> Iterator[Dict[str, Any]]:
        while True:
            page = self._call(operation, **kwargs)
            yield page
            token = page.get("NextToken")
            if not token:
                return
            kwargs["NextToken"] = token

    def _call(self, operation: str, **kwargs: Any) -> Dict[str, Any]:
        method: Callable[..., Dict[str, Any]] = getattr(self._client, operation)
        retrying = Retrying(
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_exponential(multiplier=self._backoff_multiplier, max=self._max_backoff),
            retry=retry_if_exception(is_throttling_error),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        logger.debug("EC2 %s %s", operation, kwargs)
        return retrying(method, **kwargs)
