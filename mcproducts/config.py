"""Service configuration loaded from YAML."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from typing import Any

import yaml


@dataclass
class ServiceConfig:
    """Addresses and environment of this service."""

    env: str = ""
    service_grpc_url: str = ""
    common_service_grpc_url: str = ""

    def __str__(self) -> str:
        return f"ServiceConfig {self.env} {self.service_grpc_url} {self.common_service_grpc_url}"


@dataclass
class Config:
    """Top-level service configuration."""

    service: ServiceConfig = field(default_factory=ServiceConfig)

    def __str__(self) -> str:
        return str(self.service)

    @classmethod
    def from_dict(cls, data: Any) -> "Config":
        """Build a configuration from parsed data, raising ``ValueError`` on bad input."""
        if not isinstance(data, Mapping):
            raise ValueError("invalid type: expected a mapping")
        if "service" not in data:
            raise ValueError("missing field `service`")
        service = data["service"]
        if not isinstance(service, Mapping):
            raise ValueError("service: invalid type: expected a mapping")
        values = {}
        for item in fields(ServiceConfig):
            if item.name not in service:
                raise ValueError(f"service: missing field `{item.name}`")
            value = service[item.name]
            if not isinstance(value, str):
                raise ValueError(f"service.{item.name}: invalid type: expected a string")
            values[item.name] = value
        return cls(service=ServiceConfig(**values))

    @classmethod
    def from_yaml(cls, text: str) -> "Config":
        """Parse a YAML document into a configuration."""
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ValueError(f"invalid YAML: {exc}") from exc
        return cls.from_dict(data)