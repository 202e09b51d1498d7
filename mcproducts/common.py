"""Client of the shared common service: configuration and translations."""

from __future__ import annotations

import abc
import asyncio
import copy
import json
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field, fields
from typing import Any

import grpc

from .config import Config
from .errors import AppErrorMessage, InternalError, app_error_from_proto_app_error
from .net import validate_url_target
from .trans import TranslationElement, TranslationElements

REQUEST_TIMEOUT = 5.0
CONNECT_TIMEOUT = 5.0
COMMON_SERVICE = "common.v1.CommonService"


@dataclass
class ServicesConfig:
    """Addresses of the services, as shared by the common service."""

    products_service_grpc_url: str = ""


@dataclass
class SharedConfig:
    """Configuration shared between services."""

    services: ServicesConfig | None = None


@dataclass
class ConfigGetResponse:
    """Reply to a configuration request: either data or an error."""

    data: SharedConfig | None = None
    error: AppErrorMessage | None = None


@dataclass
class TranslationsGetResponse:
    """Reply to a translations request."""

    data: dict[str, TranslationElements] = field(default_factory=dict)
    error: AppErrorMessage | None = None


class CommonServiceClient(abc.ABC):
    """Operations offered by the common service."""

    @abc.abstractmethod
    async def ping(self) -> None:
        """Check that the service answers."""

    @abc.abstractmethod
    async def config_get(self) -> ConfigGetResponse:
        """Fetch the shared configuration."""

    @abc.abstractmethod
    async def translations_get(self) -> TranslationsGetResponse:
        """Fetch the translations of every language."""

    @abc.abstractmethod
    async def close(self) -> None:
        """Release the connection."""


def _encode(message: Mapping[str, Any]) -> bytes:
    return json.dumps(dict(message)).encode("utf-8")


def _decode(raw: bytes) -> dict[str, Any]:
    if not raw:
        return {}
    value = json.loads(raw)
    if not isinstance(value, dict):
        raise ValueError("expected a JSON object")
    return value


def _mapping(value: Any, what: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ValueError(f"{what}: expected an object")
    return value


def _shared_config_from_dict(data: Any) -> SharedConfig:
    raw = _mapping(data, "config")
    services = raw.get("services")
    if services is None:
        return SharedConfig()
    services = _mapping(services, "services")
    return SharedConfig(
        services=ServicesConfig(
            products_service_grpc_url=str(services.get("products_service_grpc_url", ""))
        )
    )


def _app_error_from_dict(data: Any) -> AppErrorMessage:
    raw = _mapping(data, "error")
    known = {item.name for item in fields(AppErrorMessage)}
    return AppErrorMessage(**{k: v for k, v in raw.items() if k in known})


def _translations_from_dict(data: Any) -> dict[str, TranslationElements]:
    result = {}
    for lang, elements in _mapping(data, "data").items():
        items = _mapping(elements, lang).get("trans") or []
        result[lang] = TranslationElements(
            trans=[
                TranslationElement(id=str(el.get("id", "")), tr=str(el.get("tr", "")))
                for el in (_mapping(item, "trans") for item in items)
            ]
        )
    return result


def _grpc_target(url: str) -> str:
    _, sep, rest = url.partition("://")
    if not sep:
        return url
    return rest.split("/", 1)[0].split("?", 1)[0].split("#", 1)[0]


class GrpcCommonServiceClient(CommonServiceClient):
    """Common service client speaking JSON-encoded messages over gRPC."""

    def __init__(self, channel: grpc.aio.Channel, service: str = COMMON_SERVICE) -> None:
        self._channel = channel

        def method(name: str) -> Any:
            return channel.unary_unary(
                f"/{service}/{name}",
                request_serializer=_encode,
                response_deserializer=_decode,
            )

        self._ping = method("Ping")
        self._config_get = method("ConfigGet")
        self._translations_get = method("TranslationsGet")

    @classmethod
    async def connect(cls, url: str) -> "GrpcCommonServiceClient":
        """Open a channel to ``url`` and wait until it is ready."""
        channel = grpc.aio.insecure_channel(_grpc_target(url))
        try:
            await asyncio.wait_for(channel.channel_ready(), CONNECT_TIMEOUT)
        except BaseException:
            await channel.close()
            raise
        return cls(channel)

    async def ping(self) -> None:
        await self._ping({})

    async def config_get(self) -> ConfigGetResponse:
        reply = await self._config_get({})
        data = reply.get("data")
        error = reply.get("error")
        return ConfigGetResponse(
            data=None if data is None else _shared_config_from_dict(data),
            error=None if error is None else _app_error_from_dict(error),
        )

    async def translations_get(self) -> TranslationsGetResponse:
        reply = await self._translations_get({})
        error = reply.get("error")
        return TranslationsGetResponse(
            data=_translations_from_dict(reply.get("data")),
            error=None if error is None else _app_error_from_dict(error),
        )

    async def close(self) -> None:
        await self._channel.close()


Connector = Callable[[str], Awaitable[CommonServiceClient]]


@dataclass
class CommonArgs:
    service_config: Config

    def __str__(self) -> str:
        return str(self.service_config)


class Common:
    """Connection to the common service and the configuration it provides."""

    def __init__(self, service_config: Config, connector: Connector | None = None) -> None:
        self.shared_config = SharedConfig()
        self.service_config = service_config
        self.request_timeout = REQUEST_TIMEOUT
        self._connector: Connector = connector or GrpcCommonServiceClient.connect
        self._client: CommonServiceClient | None = None

    @classmethod
    async def create(cls, args: CommonArgs, connector: Connector | None = None) -> "Common":
        """Connect to the common service and check that it answers."""
        common = cls(args.service_config, connector)
        common._client = await common._init_common_client()
        return common

    async def _init_common_client(self) -> CommonServiceClient:
        path = "products.common.init_common_client"
        url = self.service_config.service.common_service_grpc_url
        try:
            validate_url_target(url)
        except ValueError as exc:
            raise InternalError("failed to validate common client URL", path, exc) from exc

        try:
            client = await self._connector(url)
        except Exception as exc:
            raise InternalError("failed to connect to common client", path, exc) from exc

        try:
            await asyncio.wait_for(client.ping(), self.request_timeout)
        except asyncio.TimeoutError as exc:
            await client.close()
            raise InternalError(
                "the ping to common client service timedout", path, exc
            ) from exc
        except Exception as exc:
            await client.close()
            raise InternalError("failed to ping the common client service", path, exc) from exc
        return client

    async def run(self) -> None:
        await self.config_get()

    async def close(self) -> None:
        """Drop the client, closing its connection."""
        client, self._client = self._client, None
        if client is not None:
            await client.close()

    async def reconnect(self) -> None:
        """Close any current client and connect anew."""
        await self.close()
        self._client = await self._init_common_client()

    def client(self) -> CommonServiceClient:
        """The connected client; raises ``RuntimeError`` when there is none."""
        if self._client is None:
            raise RuntimeError("client not connected")
        return self._client

    async def config_get(self) -> SharedConfig:
        """Fetch the shared configuration, store it and return a copy."""
        err_msg = "failed to get configurations from common service"
        path = "products.common.config_get"
        client = self.client()
        try:
            res = await asyncio.wait_for(client.config_get(), self.request_timeout)
        except asyncio.TimeoutError as exc:
            raise InternalError(
                "failed to get configurations: request timeout", path, exc
            ) from exc
        except Exception as exc:
            raise InternalError(err_msg, path, exc) from exc

        if res.data is not None:
            self.shared_config = res.data
        elif res.error is not None:
            raise InternalError(err_msg, path, app_error_from_proto_app_error(res.error))
        else:
            raise InternalError("missing response field in config_get", path, "empty")
        return copy.deepcopy(self.shared_config)

    async def translations_get(self) -> dict[str, TranslationElements]:
        """Fetch the translations of every language."""
        err_msg = "failed to get configurations from common service"
        path = "products.common.config_get"
        client = self.client()
        try:
            res = await asyncio.wait_for(client.translations_get(), self.request_timeout)
        except asyncio.TimeoutError as exc:
            raise InternalError(
                "failed to get configurations: request timeout", path, exc
            ) from exc
        except Exception as exc:
            raise InternalError(err_msg, path, exc) from exc

        if res.error is not None:
            raise InternalError(err_msg, path, app_error_from_proto_app_error(res.error))
        return copy.deepcopy(res.data)