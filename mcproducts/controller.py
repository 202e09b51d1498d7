"""The products gRPC service."""

from __future__ import annotations

import dataclasses
import ipaddress
import json
import logging
from dataclasses import dataclass
from typing import Any

import grpc

from .common import SharedConfig
from .errors import InternalError
from .net import validate_url_target

logger = logging.getLogger(__name__)

PRODUCTS_SERVICE = "products.v1.ProductsService"


@dataclass
class ProductCreateRequest:
    """Request to create a product."""


@dataclass
class ProductCreateResponse:
    """Reply to a product creation."""


@dataclass
class ControllerArgs:
    cfg: SharedConfig


def _parse_socket_addr(url: str) -> str:
    host, sep, port = url.rpartition(":")
    if not sep or not port.isdigit() or int(port) > 65535:
        raise ValueError(f"invalid socket address: {url}")
    if host.startswith("[") and host.endswith("]"):
        version = ipaddress.ip_address(host[1:-1]).version
        expected = 6
    else:
        version = ipaddress.ip_address(host).version
        expected = 4
    if version != expected:
        raise ValueError(f"invalid socket address: {url}")
    return url


def _decode_request(raw: bytes) -> ProductCreateRequest:
    if raw and not isinstance(json.loads(raw), dict):
        raise ValueError("expected a JSON object")
    return ProductCreateRequest()


def _encode_response(response: ProductCreateResponse) -> bytes:
    return json.dumps(dataclasses.asdict(response)).encode("utf-8")


class Controller:
    """Serves the products service on the address from the shared configuration."""

    def __init__(self, args: ControllerArgs) -> None:
        self.cfg = args.cfg

    async def product_create(self, request: ProductCreateRequest) -> ProductCreateResponse:
        return ProductCreateResponse()

    def _handler(self) -> Any:
        async def create(request: ProductCreateRequest, context: Any) -> ProductCreateResponse:
            return await self.product_create(request)

        return grpc.method_handlers_generic_handler(
            PRODUCTS_SERVICE,
            {
                "ProductCreate": grpc.unary_unary_rpc_method_handler(
                    create,
                    request_deserializer=_decode_request,
                    response_serializer=_encode_response,
                )
            },
        )

    async def run(self) -> None:
        """Serve until cancelled."""
        msg = "failed to run products service server"
        path = "products.controller.run"
        if self.cfg.services is None:
            raise InternalError(msg, path, ValueError("missing services configuration"))
        url = self.cfg.services.products_service_grpc_url
        try:
            validate_url_target(url)
            address = _parse_socket_addr(url)
        except ValueError as exc:
            raise InternalError(msg, path, exc) from exc

        server = grpc.aio.server()
        server.add_generic_rpc_handlers((self._handler(),))
        server.add_insecure_port(address)
        logger.info("products service server is running on: %s", url)
        await server.start()
        try:
            await server.wait_for_termination()
        finally:
            await server.stop(None)