# SPDX-FileCopyrightText: 2026 The ec2meta Authors
# SPDX-License-Identifier: Apache-2.0

"""InstanceAttributeEnricher -- stamp instance attributes onto every span.

Resource attributes travel once per export batch; some cost pipelines only
read span attributes.  This processor copies the resolved instance attribute
set onto each span as it starts, so server, client and auto-instrumented
spans all carry it.
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional

from opentelemetry import context
from opentelemetry.sdk.trace import ReadableSpan, SpanProcessor
from opentelemetry.trace import Span

from ec2meta.models.instance import AttributeValue

logger = logging.getLogger(__name__)


class InstanceAttributeEnricher(SpanProcessor):
    """Enriches ALL spans with the instance attribute set.

    Attributes already set on a span are left untouched.
    """

    def __init__(self, attributes: Mapping[str, AttributeValue]) -> None:
        self._attributes = dict(attributes)

    @property
    def attributes(self) -> Mapping[str, AttributeValue]:
        return dict(self._attributes)

    def on_start(
        self,
        span: Span,
        parent_context: Optional[context.Context] = None,
    ) -> None:
        """Called when a span starts -- enrich with instance attributes."""
        existing = span.attributes or {}
        for key, value in self._attributes.items():
            if key not in existing:
                span.set_attribute(key, value)

    def on_end(self, span: ReadableSpan) -> None:
        pass

    def shutdown(self) -> None:
        pass

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        return True
