# SPDX-FileCopyrightText: 2026 The ec2meta Authors
# SPDX-License-Identifier: Apache-2.0

"""Tests for Ec2MetaConfig."""

from __future__ import annotations

import os
from unittest import mock

import pytest

from ec2meta.sdk.config import Ec2MetaConfig, _interpolate_env_vars


class TestInterpolateEnvVars:
    """Tests for environment variable interpolation."""

    def test_interpolates_env_vars(self):
        with mock.patch.dict(os.environ, {"MY_VAR": "my_value"}):
            result = _interpolate_env_vars("endpoint: ${MY_VAR}")
            assert result == "endpoint: my_value"

    def test_preserves_unset_vars(self):
        result = _interpolate_env_vars("endpoint: ${UNSET_VAR}")
        assert result == "endpoint: ${UNSET_VAR}"

    def test_default_value_when_unset(self):
        result = _interpolate_env_vars("endpoint: ${UNSET_VAR:-default_value}")
        assert result == "endpoint: default_value"

    def test_default_value_ignored_when_set(self):
        with mock.patch.dict(os.environ, {"MY_VAR": "actual_value"}):
            result = _interpolate_env_vars("endpoint: ${MY_VAR:-default_value}")
            assert result == "endpoint: actual_value"


class TestEc2MetaConfigDefaults:
    """Tests for Ec2MetaConfig defaults and environment variables."""

    def test_default_values(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            config = Ec2MetaConfig()

            assert config.service_name == "unknown_service"
            assert config.instance_id is None
            assert config.aws_region is None
            assert config.otlp_endpoint is None
            assert config.api_key is None
            assert config.api_key_header == "x-bkpt-key"
            assert config.export_processor == "simple"
            assert config.api_max_attempts == 3
            assert config.parallel_lookups is False
            assert config.detect_instance_id is True
            assert config.enrich_all_spans is True

    def test_env_vars(self):
        env = {
            "OTEL_SERVICE_NAME": "billing-api",
            "EC2META_INSTANCE_ID": "i-abc123",
            "AWS_REGION": "eu-west-1",
            "EC2META_OTLP_ENDPOINT": "https://ingest.example.com/v1/traces",
            "EC2META_API_KEY": "secret",
            "EC2META_API_MAX_ATTEMPTS": "5",
            "EC2META_PARALLEL_LOOKUPS": "true",
            "EC2META_EXPORT_PROCESSOR": "batch",
            "EC2META_DETECT_INSTANCE_ID": "0",
        }
        with mock.patch.dict(os.environ, env, clear=True):
            config = Ec2MetaConfig()

            assert config.service_name == "billing-api"
            assert config.instance_id == "i-abc123"
            assert config.aws_region == "eu-west-1"
            assert config.otlp_endpoint == "https://ingest.example.com/v1/traces"
            assert config.api_key == "secret"
            assert config.api_max_attempts == 5
            assert config.parallel_lookups is True
            assert config.export_processor == "batch"
            assert config.detect_instance_id is False

    def test_default_region_fallback(self):
        with mock.patch.dict(os.environ, {"AWS_DEFAULT_REGION": "us-west-2"}, clear=True):
            assert Ec2MetaConfig().aws_region == "us-west-2"

    def test_otel_traces_endpoint_fallback(self):
        env = {"OTEL_EXPORTER_OTLP_TRACES_ENDPOINT": "http://collector:4318/v1/traces"}
        with mock.patch.dict(os.environ, env, clear=True):
            assert Ec2MetaConfig().otlp_endpoint == "http://collector:4318/v1/traces"

    def test_explicit_values_override_env(self):
        with mock.patch.dict(os.environ, {"EC2META_INSTANCE_ID": "i-env"}):
            config = Ec2MetaConfig(instance_id="i-explicit")
            assert config.instance_id == "i-explicit"

    @pytest.mark.parametrize(
        ("kwargs", "env", "attr", "expected"),
        [
            ({"parallel_lookups": True}, {"EC2META_PARALLEL_LOOKUPS": "false"}, "parallel_lookups", True),
            ({"detect_instance_id": False}, {"EC2META_DETECT_INSTANCE_ID": "true"}, "detect_instance_id", False),
            ({"api_max_attempts": 1}, {"EC2META_API_MAX_ATTEMPTS": "7"}, "api_max_attempts", 1),
            ({"export_processor": "simple"}, {"EC2META_EXPORT_PROCESSOR": "batch"}, "export_processor", "simple"),
        ],
    )
    def test_explicit_typed_values_override_env(self, kwargs, env, attr, expected):
        with mock.patch.dict(os.environ, env, clear=True):
            config = Ec2MetaConfig(**kwargs)
            assert getattr(config, attr) == expected

    def test_invalid_export_processor_falls_back(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            config = Ec2MetaConfig(export_processor="carrier-pigeon")
            assert config.export_processor == "simple"

    def test_exporter_headers_include_api_key(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            config = Ec2MetaConfig(api_key="secret", otlp_headers={"x-tenant": "acme"})
            assert config.exporter_headers == {"x-tenant": "acme", "x-bkpt-key": "secret"}

    def test_exporter_headers_without_api_key(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            assert Ec2MetaConfig().exporter_headers == {}


class TestEc2MetaConfigFromYaml:
    """Tests for loading config from YAML."""

    def test_from_yaml(self, tmp_path):
        yaml_content = """
service:
  name: yaml-service
instance:
  id: i-yaml
  enrich_all_spans: false
aws:
  region: eu-central-1
  credentials:
    access_key_id: AKIA_TEST
    secret_access_key: shh
  api:
    max_attempts: 4
    parallel: true
otlp:
  endpoint: https://ingest.example.com/v1/traces
  api_key: yaml-key
  processor: batch
"""
        yaml_file = tmp_path / "ec2meta.yaml"
        yaml_file.write_text(yaml_content)

        with mock.patch.dict(os.environ, {}, clear=True):
            config = Ec2MetaConfig.from_yaml(str(yaml_file))

        assert config.service_name == "yaml-service"
        assert config.instance_id == "i-yaml"
        assert config.enrich_all_spans is False
        assert config.aws_region == "eu-central-1"
        assert config.aws_access_key_id == "AKIA_TEST"
        assert config.aws_secret_access_key == "shh"
        assert config.api_max_attempts == 4
        assert config.parallel_lookups is True
        assert config.otlp_endpoint == "https://ingest.example.com/v1/traces"
        assert config.api_key == "yaml-key"
        assert config.export_processor == "batch"

    def test_from_yaml_interpolates_env(self, tmp_path):
        yaml_file = tmp_path / "ec2meta.yaml"
        yaml_file.write_text("otlp:\n  api_key: ${INGEST_KEY}\n  endpoint: ${INGEST_URL:-http://localhost:4318}\n")

        with mock.patch.dict(os.environ, {"INGEST_KEY": "from-env"}, clear=True):
            config = Ec2MetaConfig.from_yaml(str(yaml_file))

        assert config.api_key == "from-env"
        assert config.otlp_endpoint == "http://localhost:4318"

    def test_env_overrides_yaml(self, tmp_path):
        yaml_file = tmp_path / "ec2meta.yaml"
        yaml_file.write_text(
            "otlp:\n  endpoint: http://yaml\n  processor: simple\n"
            "aws:\n  region: eu-central-1\n  api:\n    max_attempts: 4\n    parallel: false\n"
        )
        env = {
            "EC2META_OTLP_ENDPOINT": "http://env",
            "EC2META_EXPORT_PROCESSOR": "batch",
            "EC2META_API_MAX_ATTEMPTS": "6",
            "EC2META_PARALLEL_LOOKUPS": "true",
        }

        with mock.patch.dict(os.environ, env, clear=True):
            config = Ec2MetaConfig.from_yaml(str(yaml_file))

        assert config.otlp_endpoint == "http://env"
        assert config.export_processor == "batch"
        assert config.api_max_attempts == 6
        assert config.parallel_lookups is True
        assert config.aws_region == "eu-central-1"

    def test_yaml_overrides_defaults(self, tmp_path):
        yaml_file = tmp_path / "ec2meta.yaml"
        yaml_file.write_text("instance:\n  detect: false\notlp:\n  api_key_header: x-api-key\n")

        with mock.patch.dict(os.environ, {}, clear=True):
            config = Ec2MetaConfig.from_yaml(str(yaml_file))

        assert config.detect_instance_id is False
        assert config.api_key_header == "x-api-key"
        assert config.api_max_attempts == 3

    def test_from_yaml_empty_file(self, tmp_path):
        yaml_file = tmp_path / "empty.yaml"
        yaml_file.write_text("")

        with mock.patch.dict(os.environ, {}, clear=True):
            config = Ec2MetaConfig.from_yaml(str(yaml_file))
        assert config.service_name == "unknown_service"

    def test_from_yaml_missing_file(self):
        with pytest.raises(FileNotFoundError):
            Ec2MetaConfig.from_yaml("/nonexistent/ec2meta.yaml")

    def test_from_yaml_no_path(self):
        with pytest.raises(FileNotFoundError):
            Ec2MetaConfig.from_yaml(None)

    def test_from_yaml_malformed(self, tmp_path):
        yaml_file = tmp_path / "bad.yaml"
        yaml_file.write_text("otlp: [unclosed")

        with pytest.raises(ValueError, match="Invalid YAML"):
            Ec2MetaConfig.from_yaml(str(yaml_file))

    def test_from_file_or_env_uses_env_var_path(self, tmp_path):
        yaml_file = tmp_path / "custom.yaml"
        yaml_file.write_text("service:\n  name: from-file\n")

        with mock.patch.dict(os.environ, {"EC2META_CONFIG_FILE": str(yaml_file)}, clear=True):
            config = Ec2MetaConfig.from_file_or_env()
        assert config.service_name == "from-file"

    def test_from_file_or_env_falls_back_to_env(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with mock.patch.dict(os.environ, {"OTEL_SERVICE_NAME": "env-only"}, clear=True):
            config = Ec2MetaConfig.from_file_or_env()
        assert config.service_name == "env-only"

    def test_to_dict_omits_credentials(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            config = Ec2MetaConfig(aws_access_key_id="AKIA", aws_secret_access_key="shh", api_key="k")
            data = config.to_dict()

        assert data["otlp"]["api_key_header"] == "x-bkpt-key"
        assert "credentials" not in data["aws"]
        assert "shh" not in str(data)
        assert "api_key" not in data["otlp"]
