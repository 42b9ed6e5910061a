# SPDX-FileCopyrightText: 2026 The ec2meta Authors
# SPDX-License-Identifier: Apache-2.0

"""AWS API clients."""

from ec2meta.clients.ec2 import Ec2Client, is_throttling_error

__all__ = ["Ec2Client", "is_throttling_error"]
