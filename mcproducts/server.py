"""Service start-up: configuration, common service, translations and serving."""

from __future__ import annotations

import argparse
import asyncio
import copy
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

from .common import Common, CommonArgs, Connector, SharedConfig
from .config import Config
from .controller import Controller, ControllerArgs
from .errors import InternalError
from .trans import TranslationError, translations_init

CONFIG_PATH = "config.yaml"
ERROR_QUEUE_SIZE = 100
TRANSLATION_POOL_SIZE = 5


@dataclass
class ServerArgs:
    config_path: str = CONFIG_PATH


def load_service_config(path: str = CONFIG_PATH) -> Config:
    """Read and parse the service configuration file."""
    where = "products.server.load_service_config"
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise InternalError("failed to load service config file", where, exc) from exc
    try:
        return Config.from_yaml(text)
    except ValueError as exc:
        raise InternalError("failed to parse config data", where, exc) from exc


class Server:
    """The products service and everything it needs to run."""

    def __init__(self, args: ServerArgs | None = None) -> None:
        self.args = args or ServerArgs()
        self.common: Common | None = None
        self.service_config = Config()
        self.shared_config = SharedConfig()
        self._errors: asyncio.Queue[InternalError] = asyncio.Queue(maxsize=ERROR_QUEUE_SIZE)
        self._listener: asyncio.Task[None] | None = None

    @classmethod
    async def create(
        cls, args: ServerArgs | None = None, connector: Connector | None = None
    ) -> "Server":
        """Load configuration, connect to the common service and fetch shared config."""
        server = cls(args)
        await server.init_service_config()
        server.common = await Common.create(
            CommonArgs(copy.deepcopy(server.service_config)), connector
        )
        server.shared_config = await server.common.config_get()
        server._listener = asyncio.get_running_loop().create_task(server._errors_listener())
        return server

    async def init_service_config(self) -> None:
        self.service_config = load_service_config(self.args.config_path)

    async def run(self) -> None:
        """Load translations and serve the products service."""
        cfg = copy.deepcopy(self.shared_config)
        if self.common is None:
            raise RuntimeError("common service client is not initialized")
        translations = await self.common.translations_get()
        try:
            translations_init(translations, TRANSLATION_POOL_SIZE)
        except TranslationError as exc:
            raise InternalError(
                "failed to initialize translations", "products.server.run", exc
            ) from exc
        await Controller(ControllerArgs(cfg)).run()

    async def report_error(self, error: InternalError) -> None:
        """Queue an error for the background listener."""
        await self._errors.put(error)

    async def _errors_listener(self) -> None:
        while True:
            error = await self._errors.get()
            print(f"from here {error}")
            self._errors.task_done()


async def _serve(args: ServerArgs) -> None:
    server = await Server.create(args)
    await server.run()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="mcproducts", description="Run the products service.")
    parser.add_argument("--config", default=CONFIG_PATH, help="service configuration file")
    options = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG)
    try:
        asyncio.run(_serve(ServerArgs(config_path=options.config)))
    except KeyboardInterrupt:
        return 130
    except Exception as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())