# SPDX-FileCopyrightText: 2026 The ec2meta Authors
# SPDX-License-Identifier: Apache-2.0

"""Helper functions for attaching instance attributes to spans."""

from __future__ import annotations

import logging
from typing import Mapping, Optional

from opentelemetry import trace
from opentelemetry.trace import Span, SpanKind

from ec2meta.models.instance import AttributeValue

logger = logging.getLogger(__name__)

TRACER_NAME = "ec2meta"


def set_instance_attributes(
    attributes: Mapping[str, AttributeValue],
    span: Optional[Span] = None,
) -> None:
    """Set every instance attribute on *span* (default: the current span).

    Does nothing if the target span is not recording.
    """
    target = span or trace.get_current_span()
    if not target.is_recording():
        return
    for key, value in attributes.items():
        target.set_attribute(key, value)


def emit_instance_trace(
    attributes: Mapping[str, AttributeValue],
    name: str = "EC2::Query",
    statement: Optional[str] = None,
    db_system: str = "postgresql",
) -> None:
    """Emit a single client span enriched with the instance attributes.

    Useful to verify end-to-end that the cost attribution pipeline receives
    the attribute set.  When *statement* is given the span also carries the
    ``db.*`` attributes of a query executed from the instance.

    Example::

        >>> emit_instance_trace(get_attributes(), statement="SELECT NOW()")
    """
    tracer = trace.get_tracer(TRACER_NAME)
    with tracer.start_as_current_span(name, kind=SpanKind.CLIENT) as span:
        set_instance_attributes(attributes, span)
        if statement:
            span.set_attribute("db.system", db_system)
            span.set_attribute("db.operation", "query")
            span.set_attribute("db.statement", statement)
    logger.info("Emitted %s trace for %s", name, attributes.get("aws.ec2.instance_id"))
