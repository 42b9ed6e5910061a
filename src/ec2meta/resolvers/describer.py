# SPDX-FileCopyrightText: 2026 The ec2meta Authors
# SPDX-License-Identifier: Apache-2.0

"""Fetch the canonical record of the instance being attributed."""

from __future__ import annotations

import logging
from typing import Optional

from botocore.exceptions import ClientError

from ec2meta.clients.ec2 import Ec2Client, error_code
from ec2meta.exceptions import NotFound
from ec2meta.models.instance import InstanceRecord

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = frozenset({"InvalidInstanceID.NotFound", "InvalidInstanceID.Malformed"})


class InstanceDescriber:
    def __init__(self, client: Ec2Client) -> None:
        self._client = client

    def describe(self, instance_id: Optional[str] = None) -> InstanceRecord:
        """Describe *instance_id*, or the first instance in the account.

        Without an id the first instance EC2 enumerates is returned, which is
        only meaningful when the account holds exactly one instance.

        Raises:
            NotFound: The id does not exist, or the account has no instances.
        """
        instance_id = (instance_id or "").strip() or None
        try:
            items = self._client.describe_instances(instance_id)
        except ClientError as exc:
            if error_code(exc) in _NOT_FOUND_CODES:
                raise NotFound(instance_id) from exc
            raise

        if not items:
            raise NotFound(instance_id)

        record = InstanceRecord.from_api(items[0], region=self._client.region)
        logger.debug("Described %s (%s, %s)", record.instance_id, record.instance_type, record.platform_details)
        return record
