# SPDX-FileCopyrightText: 2026 The ec2meta Authors
# SPDX-License-Identifier: Apache-2.0

"""Shared test fixtures for ec2meta tests."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional
from unittest import mock

import pytest
from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.sdk.trace.sampling import ALWAYS_ON

from ec2meta.clients.ec2 import Ec2Client

# Module-level provider and exporter to avoid "cannot override" warnings
_provider: TracerProvider = None
_exporter: InMemorySpanExporter = None


def _get_or_create_provider() -> tuple[TracerProvider, InMemorySpanExporter]:
    """Get or create the global test provider."""
    global _provider, _exporter

    if _provider is None:
        _provider = TracerProvider(sampler=ALWAYS_ON)
        _exporter = InMemorySpanExporter()
        _provider.add_span_processor(SimpleSpanProcessor(_exporter))
        trace.set_tracer_provider(_provider)

    return _provider, _exporter


@pytest.fixture(autouse=True)
def reset_tracing():
    """Reset tracing state before each test."""
    _, exporter = _get_or_create_provider()
    exporter.clear()
    yield
    exporter.clear()


@pytest.fixture
def tracer_provider():
    """Get the test TracerProvider."""
    provider, _ = _get_or_create_provider()
    return provider


@pytest.fixture
def memory_exporter():
    """Get the in-memory span exporter for testing."""
    _, exporter = _get_or_create_provider()
    return exporter


# ---------------------------------------------------------------------------
# Fake EC2 API
# ---------------------------------------------------------------------------


def instance_item(
    instance_id: str = "i-abc123",
    instance_type: str = "t3.micro",
    platform: str = "Linux/UNIX",
    tenancy: str = "default",
    image_id: Optional[str] = "ami-0123456789",
    lifecycle: Optional[str] = None,
    capacity_reservation_id: Optional[str] = None,
    licenses: Iterable[str] = (),
) -> Dict[str, Any]:
    """A ``DescribeInstances`` instance item."""
    item: Dict[str, Any] = {
        "InstanceId": instance_id,
        "InstanceType": instance_type,
        "PlatformDetails": platform,
        "Placement": {"AvailabilityZone": "us-east-1a", "Tenancy": tenancy},
    }
    if image_id:
        item["ImageId"] = image_id
    if lifecycle:
        item["InstanceLifecycle"] = lifecycle
    if capacity_reservation_id:
        item["CapacityReservationId"] = capacity_reservation_id
    if licenses:
        item["Licenses"] = [{"LicenseConfigurationArn": arn} for arn in licenses]
    return item


def make_boto_client(
    instances: Iterable[Dict[str, Any]] = (),
    images: Iterable[Dict[str, Any]] = (),
    reservations: Iterable[Dict[str, Any]] = (),
    fleets: Optional[Dict[str, List[str]]] = None,
    region: str = "us-east-1",
) -> mock.MagicMock:
    """A mock boto3 EC2 client answering from fixed data.

    *fleets* maps fleet id to its active instance ids, in enumeration order.
    """
    fleets = fleets or {}
    instances = list(instances)

    client = mock.MagicMock()
    client.meta.region_name = region
    client.describe_instances.return_value = (
        {"Reservations": [{"Instances": instances}]} if instances else {"Reservations": []}
    )
    client.describe_images.return_value = {"Images": list(images)}
    client.describe_capacity_reservations.return_value = {"CapacityReservations": list(reservations)}
    client.describe_fleets.return_value = {"Fleets": [{"FleetId": fleet_id} for fleet_id in fleets]}
    client.describe_fleet_instances.side_effect = lambda FleetId, **_: {
        "ActiveInstances": [{"InstanceId": iid, "InstanceType": "t3.micro"} for iid in fleets[FleetId]],
        "FleetId": FleetId,
    }
    return client


@pytest.fixture
def make_ec2():
    """Factory: ``make_ec2(**fake_data) -> (Ec2Client, boto_mock)`` with zero backoff."""

    def _make(**kwargs: Any) -> tuple[Ec2Client, mock.MagicMock]:
        boto = make_boto_client(**kwargs)
        return Ec2Client(boto, backoff_multiplier=0), boto

    return _make


@pytest.fixture
def make_instance():
    """Factory for ``DescribeInstances`` instance items."""
    return instance_item
