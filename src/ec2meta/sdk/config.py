# SPDX-FileCopyrightText: 2026 The ec2meta Authors
# SPDX-License-Identifier: Apache-2.0

"""Configuration for ec2meta.

Configuration precedence (highest to lowest):
1. Code arguments (explicit values passed to Ec2MetaConfig)
2. Environment variables (EC2META_*, OTEL_*, AWS_*)
3. YAML config file (ec2meta.yaml or specified path)
4. Built-in defaults

Every layered field defaults to ``None`` in the constructor, meaning "not
given"; :meth:`Ec2MetaConfig.__post_init__` fills it from the lower layers.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

EXPORT_PROCESSORS = ("simple", "batch")


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).lower() in ("true", "1", "yes")


# field -> environment variables, first set one wins
_ENV_VARS: Dict[str, Tuple[str, ...]] = {
    "service_name": ("OTEL_SERVICE_NAME",),
    "instance_id": ("EC2META_INSTANCE_ID",),
    "detect_instance_id": ("EC2META_DETECT_INSTANCE_ID",),
    "aws_region": ("AWS_REGION", "AWS_DEFAULT_REGION"),
    "aws_access_key_id": ("AWS_ACCESS_KEY_ID",),
    "aws_secret_access_key": ("AWS_SECRET_ACCESS_KEY",),
    "aws_session_token": ("AWS_SESSION_TOKEN",),
    "api_max_attempts": ("EC2META_API_MAX_ATTEMPTS",),
    "parallel_lookups": ("EC2META_PARALLEL_LOOKUPS",),
    "otlp_endpoint": ("EC2META_OTLP_ENDPOINT", "OTEL_EXPORTER_OTLP_TRACES_ENDPOINT"),
    "api_key": ("EC2META_API_KEY",),
    "export_processor": ("EC2META_EXPORT_PROCESSOR",),
}

_DEFAULTS: Dict[str, Any] = {
    "service_name": "unknown_service",
    "detect_instance_id": True,
    "api_max_attempts": 3,
    "api_connect_timeout": 5.0,
    "api_read_timeout": 10.0,
    "parallel_lookups": False,
    "api_key_header": "x-bkpt-key",
    "export_processor": "simple",
    "enrich_all_spans": True,
}

_CONVERTERS: Dict[str, Callable[[Any], Any]] = {
    "detect_instance_id": _as_bool,
    "parallel_lookups": _as_bool,
    "enrich_all_spans": _as_bool,
    "api_max_attempts": int,
    "api_connect_timeout": float,
    "api_read_timeout": float,
}

_LAYERED_FIELDS = tuple(dict.fromkeys((*_ENV_VARS, *_DEFAULTS, "otlp_headers")))


@dataclass
class Ec2MetaConfig:
    """Configuration for EC2 attribute resolution and trace export.

    Example::

        >>> config = Ec2MetaConfig(
        ...     service_name="billing-api",
        ...     otlp_endpoint="https://ingest.example.com/v1/traces",
        ...     api_key="secret",
        ... )

        >>> # Or load from YAML
        >>> config = Ec2MetaConfig.from_yaml("config/ec2meta.yaml")
    """

    # Service identification
    service_name: Optional[str] = None

    # Instance to attribute (None -> IMDS, then the sole instance)
    instance_id: Optional[str] = None
    detect_instance_id: Optional[bool] = None

    # AWS access (None -> boto3 default chain)
    aws_region: Optional[str] = None
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    aws_session_token: Optional[str] = None

    # Control-plane calls
    api_max_attempts: Optional[int] = None
    api_connect_timeout: Optional[float] = None
    api_read_timeout: Optional[float] = None
    parallel_lookups: Optional[bool] = None

    # OTLP exporter configuration
    otlp_endpoint: Optional[str] = None
    api_key: Optional[str] = None
    api_key_header: Optional[str] = None
    otlp_headers: Optional[Dict[str, str]] = None
    export_processor: Optional[str] = None

    # Copy instance attributes onto every span, not just the resource
    enrich_all_spans: Optional[bool] = None

    # Config file path (for tracking where config was loaded from)
    _config_file: Optional[str] = field(default=None, repr=False)

    # Values read from the config file, applied beneath the environment
    _file_values: Optional[Dict[str, Any]] = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Fill fields not given explicitly from env, then the file, then defaults."""
        file_values = self._file_values or {}

        for name in _LAYERED_FIELDS:
            if getattr(self, name) is not None:
                continue
            value = _env_value(name)
            if value is None:
                value = file_values.get(name)
            if value is None:
                value = _DEFAULTS.get(name)
            if value is not None and name in _CONVERTERS:
                value = _CONVERTERS[name](value)
            setattr(self, name, value)

        if self.export_processor not in EXPORT_PROCESSORS:
            logger.warning("Unknown export processor %r, using 'simple'", self.export_processor)
            self.export_processor = "simple"

    @property
    def exporter_headers(self) -> Dict[str, str]:
        """OTLP headers, including the API key header when a key is set."""
        headers = dict(self.otlp_headers or {})
        if self.api_key:
            headers[self.api_key_header] = self.api_key
        return headers

    # ------------------------------------------------------------------
    # YAML loading
    # ------------------------------------------------------------------

    @classmethod
    def from_yaml(cls, path: Optional[str] = None) -> Ec2MetaConfig:
        """Load configuration from a YAML file.

        Supports environment variable interpolation using ``${VAR_NAME}`` syntax.

        Args:
            path: Path to YAML config file.

        Raises:
            FileNotFoundError: If config file doesn't exist.
            ValueError: If YAML is malformed.
        """
        if path is None:
            raise FileNotFoundError("No config file path provided")

        resolved = Path(path)
        if not resolved.exists():
            raise FileNotFoundError(f"Config file not found: {resolved}")

        import yaml

        with open(resolved) as fh:
            raw_content = fh.read()

        content = _interpolate_env_vars(raw_content)

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {resolved}: {exc}") from exc

        if data is None:
            data = {}

        return cls._from_dict(data, config_file=str(resolved))

    @classmethod
    def from_file_or_env(cls, path: Optional[str] = None) -> Ec2MetaConfig:
        """Load config from file if exists, otherwise use environment variables.

        Search order:
        1. Explicit *path* argument
        2. ``EC2META_CONFIG_FILE`` env var
        3. ``./ec2meta.yaml``
        4. ``./config/ec2meta.yaml``
        5. Falls back to env-only config
        """
        search_paths: List[Path] = []

        if path:
            search_paths.append(Path(path))

        env_path = os.getenv("EC2META_CONFIG_FILE")
        if env_path:
            search_paths.append(Path(env_path))

        search_paths.extend(
            [
                Path("ec2meta.yaml"),
                Path("ec2meta.yml"),
                Path("config/ec2meta.yaml"),
                Path("config/ec2meta.yml"),
            ]
        )

        for candidate in search_paths:
            if candidate.exists():
                logger.info("Loading config from: %s", candidate)
                return cls.from_yaml(str(candidate))

        logger.debug("No config file found, using environment variables only")
        return cls()

    @classmethod
    def _from_dict(
        cls,
        data: Dict[str, Any],
        config_file: Optional[str] = None,
    ) -> Ec2MetaConfig:
        """Create config from dictionary (parsed YAML).

        The file values sit beneath environment variables.
        """
        service = data.get("service") or {}
        instance = data.get("instance") or {}
        aws = data.get("aws") or {}
        credentials = aws.get("credentials") or {}
        api = aws.get("api") or {}
        otlp = data.get("otlp") or {}

        file_values = {
            "service_name": service.get("name"),
            "instance_id": instance.get("id"),
            "detect_instance_id": instance.get("detect"),
            "enrich_all_spans": instance.get("enrich_all_spans"),
            "aws_region": aws.get("region"),
            "aws_access_key_id": credentials.get("access_key_id"),
            "aws_secret_access_key": credentials.get("secret_access_key"),
            "aws_session_token": credentials.get("session_token"),
            "api_max_attempts": api.get("max_attempts"),
            "api_connect_timeout": api.get("connect_timeout"),
            "api_read_timeout": api.get("read_timeout"),
            "parallel_lookups": api.get("parallel"),
            "otlp_endpoint": otlp.get("endpoint"),
            "api_key": otlp.get("api_key"),
            "api_key_header": otlp.get("api_key_header"),
            "otlp_headers": otlp.get("headers"),
            "export_processor": otlp.get("processor"),
        }
        return cls(
            _config_file=config_file,
            _file_values={name: value for name, value in file_values.items() if value is not None},
        )

    def to_dict(self) -> Dict[str, Any]:
        """Export configuration as dictionary (credentials are not exported)."""
        return {
            "service": {
                "name": self.service_name,
            },
            "instance": {
                "id": self.instance_id,
                "detect": self.detect_instance_id,
                "enrich_all_spans": self.enrich_all_spans,
            },
            "aws": {
                "region": self.aws_region,
                "api": {
                    "max_attempts": self.api_max_attempts,
                    "connect_timeout": self.api_connect_timeout,
                    "read_timeout": self.api_read_timeout,
                    "parallel": self.parallel_lookups,
                },
            },
            "otlp": {
                "endpoint": self.otlp_endpoint,
                "api_key_header": self.api_key_header,
                "headers": self.otlp_headers,
                "processor": self.export_processor,
            },
        }


def _env_value(name: str) -> Optional[str]:
    for var in _ENV_VARS.get(name, ()):
        value = os.getenv(var)
        if value:
            return value
    return None


def _interpolate_env_vars(content: str) -> str:
    """Interpolate ``${VAR_NAME}`` and ``${VAR_NAME:-default}`` in *content*."""
    pattern = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-([^}]*))?\}")

    def _replace(match: re.Match) -> str:  # type: ignore[type-arg]
        var_name = match.group(1)
        default = match.group(2)
        value = os.getenv(var_name)
        if value is not None:
            return value
        if default is not None:
            return default
        return match.group(0)

    return pattern.sub(_replace, content)
