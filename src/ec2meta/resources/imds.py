# SPDX-FileCopyrightText: 2026 The ec2meta Authors
# SPDX-License-Identifier: Apache-2.0

"""Instance id discovery from the EC2 instance metadata service (IMDSv2)."""

from __future__ import annotations

import logging
import urllib.request
from typing import Optional

logger = logging.getLogger(__name__)

IMDS_BASE_URL = "http://169.254.169.254/latest"
IMDS_TOKEN_TTL_SECONDS = 21600


def _fetch_token(timeout: float) -> Optional[str]:
    req = urllib.request.Request(
        f"{IMDS_BASE_URL}/api/token",
        method="PUT",
        headers={"X-aws-ec2-metadata-token-ttl-seconds": str(IMDS_TOKEN_TTL_SECONDS)},
    )
    with urllib.request.urlopen(req, timeout=timeout) as resp:  # noqa: S310
        return resp.read().decode("utf-8").strip() or None


def detect_instance_id(timeout: float = 0.5) -> Optional[str]:
    """Return the id of the instance this process runs on, or ``None``.

    Any failure (not on EC2, IMDS disabled, hop limit exceeded) yields
    ``None``; callers then fall back to describing the sole instance.
    """
    try:
        token = _fetch_token(timeout)
        headers = {"Accept": "text/plain"}
        if token:
            headers["X-aws-ec2-metadata-token"] = token
        req = urllib.request.Request(f"{IMDS_BASE_URL}/meta-data/instance-id", headers=headers)
        with urllib.request.urlopen(req, timeout=timeout) as resp:  # noqa: S310
            instance_id = resp.read().decode("utf-8").strip()
    except Exception:
        logger.debug("Instance metadata service unavailable", exc_info=True)
        return None
    return instance_id or None
