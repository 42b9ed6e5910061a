# SPDX-FileCopyrightText: 2026 The ec2meta Authors
# SPDX-License-Identifier: Apache-2.0

"""ec2meta span processors."""

from ec2meta.processors.enricher import InstanceAttributeEnricher

__all__ = ["InstanceAttributeEnricher"]
