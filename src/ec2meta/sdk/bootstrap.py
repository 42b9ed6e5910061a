# SPDX-FileCopyrightText: 2026 The ec2meta Authors
# SPDX-License-Identifier: Apache-2.0

"""ec2meta Bootstrap -- one call to export traces carrying EC2 cost attributes.

1. Resolves the instance attribute set through the EC2 API
2. Configures the OTel SDK with those attributes on the ``Resource``
3. Adds :class:`~ec2meta.processors.enricher.InstanceAttributeEnricher`
   (copies the attributes onto every span)
4. Exports spans over OTLP/HTTP with the API key header

Usage::

    from ec2meta import enable
    enable()  # reads EC2META_OTLP_ENDPOINT, EC2META_API_KEY, AWS_REGION from env

Attribute resolution happens once, at startup.  A hung control-plane call
therefore blocks ``enable()``; configure ``api_connect_timeout`` and
``api_read_timeout`` accordingly.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Dict, Optional

from ec2meta.exceptions import ConfigurationError

if TYPE_CHECKING:
    from ec2meta.clients.ec2 import Ec2Client
    from ec2meta.models.instance import AttributeSet
    from ec2meta.resolvers.cache import AttributeCache
    from ec2meta.sdk.config import Ec2MetaConfig

logger = logging.getLogger(__name__)

_lock = threading.RLock()
_initialized = False
_current_config: Optional[Ec2MetaConfig] = None
_current_attributes: Optional[Dict[str, object]] = None


def enable(
    service_name: Optional[str] = None,
    otlp_endpoint: Optional[str] = None,
    instance_id: Optional[str] = None,
    api_key: Optional[str] = None,
    log_level: str = "INFO",
    config: Optional[Ec2MetaConfig] = None,
    config_file: Optional[str] = None,
    ec2_client: Optional[Ec2Client] = None,
    cache: Optional[AttributeCache] = None,
) -> bool:
    """Resolve instance attributes and install a tracer provider exporting them.

    Args:
        service_name: Service name.
        otlp_endpoint: OTLP/HTTP traces endpoint.
        instance_id: EC2 instance to attribute (default: IMDS, then the sole instance).
        api_key: Ingest API key, sent in ``config.api_key_header``.
        log_level: Logging level (default: ``"INFO"``).
        config: Full :class:`Ec2MetaConfig` (overrides individual params).
        config_file: Path to YAML config file.
        ec2_client: Pre-built :class:`~ec2meta.clients.ec2.Ec2Client`
            (default: built from the configured credentials).
        cache: Process attribute cache (default: a fresh one).

    Returns:
        ``True`` if successfully initialized, ``False`` if already initialized
        or the OTel SDK could not be configured.

    Raises:
        ConfigurationError: No OTLP endpoint or AWS region is configured.
        NotFound: The instance to attribute does not exist.
    """
    global _initialized, _current_config, _current_attributes

    with _lock:
        if _initialized:
            logger.warning("ec2meta already initialized")
            return False

        logging.basicConfig(level=getattr(logging, log_level.upper()))

        from ec2meta.sdk.config import Ec2MetaConfig as ConfigClass

        if config is not None:
            cfg = config
        elif config_file is not None:
            cfg = ConfigClass.from_yaml(config_file)
        else:
            cfg = ConfigClass.from_file_or_env()

        if service_name is not None:
            cfg.service_name = service_name
        if otlp_endpoint is not None:
            cfg.otlp_endpoint = otlp_endpoint
        if instance_id is not None:
            cfg.instance_id = instance_id
        if api_key is not None:
            cfg.api_key = api_key

        if not cfg.otlp_endpoint:
            raise ConfigurationError("OTLP endpoint is not configured (set EC2META_OTLP_ENDPOINT or otlp_endpoint)")
        if not cfg.api_key:
            logger.warning("No API key configured; spans are exported without the %s header", cfg.api_key_header)

        attributes = _resolve_attributes(cfg, ec2_client, cache)
        _current_config = cfg

        logger.info(
            "Initializing ec2meta: service=%s, instance=%s, endpoint=%s",
            cfg.service_name,
            attributes.get("aws.ec2.instance_id"),
            cfg.otlp_endpoint,
        )

        try:
            from opentelemetry import trace
            from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
            from opentelemetry.sdk.resources import Resource
            from opentelemetry.sdk.trace import TracerProvider
            from opentelemetry.sdk.trace.export import BatchSpanProcessor, SimpleSpanProcessor
            from opentelemetry.sdk.trace.sampling import ALWAYS_ON

            from ec2meta._version import __version__
            from ec2meta.processors import InstanceAttributeEnricher

            resource_attrs: Dict[str, object] = {
                "service.name": cfg.service_name,
                "telemetry.sdk.name": "ec2meta",
                "telemetry.sdk.version": __version__,
            }
            resource_attrs.update(attributes)
            resource = Resource.create(resource_attrs)

            existing = trace.get_tracer_provider()
            if isinstance(existing, TracerProvider):
                provider = existing
                logger.info("Reusing existing TracerProvider -- adding ec2meta processors")
            else:
                provider = TracerProvider(resource=resource, sampler=ALWAYS_ON)
                trace.set_tracer_provider(provider)

            if cfg.enrich_all_spans:
                provider.add_span_processor(InstanceAttributeEnricher(attributes))

            exporter = OTLPSpanExporter(
                endpoint=cfg.otlp_endpoint,
                headers=cfg.exporter_headers,
            )
            if cfg.export_processor == "batch":
                provider.add_span_processor(BatchSpanProcessor(exporter))
            else:
                provider.add_span_processor(SimpleSpanProcessor(exporter))

            _current_attributes = dict(attributes)
            _initialized = True
            logger.info("ec2meta tracing initialized")
            return True

        except Exception as exc:
            logger.error("Failed to initialize ec2meta: %s", exc, exc_info=True)
            return False


def _resolve_attributes(
    cfg: Ec2MetaConfig,
    ec2_client: Optional[Ec2Client],
    cache: Optional[AttributeCache],
) -> AttributeSet:
    from ec2meta.resolvers.cache import AttributeCache as CacheClass
    from ec2meta.resources.assembler import AttributeAssembler
    from ec2meta.resources.detector import Ec2InstanceResourceDetector
    from ec2meta.sdk.credentials import CredentialProvider, create_ec2_client

    if ec2_client is None:
        ec2_client = create_ec2_client(CredentialProvider(cfg), cfg)

    assembler = AttributeAssembler.from_client(
        ec2_client,
        cache if cache is not None else CacheClass(),
        parallel=cfg.parallel_lookups,
    )
    detector = Ec2InstanceResourceDetector(
        assembler,
        instance_id=cfg.instance_id,
        use_instance_metadata=cfg.detect_instance_id,
    )
    return detector.detect_attributes()


def is_enabled() -> bool:
    """Check if ec2meta is initialized."""
    return _initialized


def get_config() -> Optional[Ec2MetaConfig]:
    """Get the current ec2meta configuration."""
    return _current_config


def get_attributes() -> Optional[Dict[str, object]]:
    """Get the instance attribute set resolved by :func:`enable`."""
    return dict(_current_attributes) if _current_attributes is not None else None


def disable() -> None:
    """Flush and shut down the tracer provider.

    Call on application shutdown for clean exit.
    """
    global _initialized, _current_config, _current_attributes

    with _lock:
        if not _initialized:
            return

        try:
            from opentelemetry import trace

            provider = trace.get_tracer_provider()
            if hasattr(provider, "force_flush"):
                provider.force_flush(timeout_millis=5000)
            if hasattr(provider, "shutdown"):
                provider.shutdown()

            _initialized = False
            _current_config = None
            _current_attributes = None
            logger.info("ec2meta shutdown complete")

        except Exception as exc:
            logger.error("Error during ec2meta shutdown: %s", exc)
