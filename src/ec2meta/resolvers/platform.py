# SPDX-FileCopyrightText: 2026 The ec2meta Authors
# SPDX-License-Identifier: Apache-2.0

"""Platform label disambiguation.

EC2 reports ``PlatformDetails`` for every instance, but for some database
engine images the label names only the engine ("SQL Server Standard") and not
the operating system underneath it.  The cost engine prices the OS and the
engine together, so for those labels we look at the AMI and sniff its name and
description for an OS hint.

The decision itself is :func:`clarify_platform_label`, a pure function over
the tables below.  :class:`PlatformDetailsClarifier` only adds the image
lookup around it.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from botocore.exceptions import BotoCoreError, ClientError

from ec2meta.clients.ec2 import Ec2Client
from ec2meta.models.instance import ImageRecord

logger = logging.getLogger(__name__)

# Labels that name an engine edition without the OS it runs on.
ENGINE_ONLY_PLATFORMS: frozenset = frozenset(
    {
        "SQL Server Standard",
        "SQL Server Enterprise",
        "SQL Server Web",
        "SQL Server Express",
    }
)

# (keywords, OS label) -- checked in order, first match wins.
OS_HINTS: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("amazon linux", "amzn"), "Amazon Linux 2"),
    (("windows",), "Windows"),
    (("ubuntu",), "Ubuntu"),
    (("red hat", "rhel"), "Red Hat Enterprise Linux"),
)

# Provider defaults; their absence is already the default downstream.
DEFAULT_PLATFORMS: frozenset = frozenset({"Linux/UNIX", "Windows"})


def is_ambiguous(platform_label: str) -> bool:
    return platform_label in ENGINE_ONLY_PLATFORMS


def detect_os(text: str) -> Optional[str]:
    """Return the first OS whose keywords occur in *text* (case-insensitive)."""
    haystack = text.lower()
    for keywords, os_label in OS_HINTS:
        if any(keyword in haystack for keyword in keywords):
            return os_label
    return None


def clarify_platform_label(platform_label: str, image: Optional[ImageRecord]) -> str:
    """Qualify an engine-only *platform_label* with the OS found on *image*.

    Total: any label outside :data:`ENGINE_ONLY_PLATFORMS`, or a missing
    image, yields *platform_label* unchanged.
    """
    if not is_ambiguous(platform_label) or image is None:
        return platform_label

    os_label = detect_os(f"{image.name} {image.description}")
    if os_label:
        return f"{os_label} with {platform_label}"

    return image.platform_details or platform_label


class PlatformDetailsClarifier:
    """Best-effort platform clarification backed by ``DescribeImages``."""

    def __init__(self, client: Ec2Client) -> None:
        self._client = client

    def clarify(self, platform_label: str, image_id: Optional[str] = None) -> str:
        if not is_ambiguous(platform_label) or not image_id:
            return platform_label

        try:
            image = self._client.describe_image(image_id)
        except (ClientError, BotoCoreError):
            # Clarification never fails the resolution.
            logger.debug("Image lookup for %s failed", image_id, exc_info=True)
            return platform_label

        if image is None:
            logger.debug("Image %s not found, keeping platform %r", image_id, platform_label)
        return clarify_platform_label(platform_label, image)
