"""Run the exchange gateway under uvicorn."""
from __future__ import annotations

import asyncio
import logging
from contextlib import suppress

import uvicorn

from .config import Settings, get_settings
from .main import create_app

LOGGER = logging.getLogger(__name__)


async def serve(settings: Settings) -> None:
    app = create_app(settings)
    config = uvicorn.Config(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
    server = uvicorn.Server(config)
    LOGGER.info("Starting exchange gateway on %s:%s", settings.host, settings.port)
    await server.serve()


def main() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    # httpx logs full URLs at INFO, including signed query strings.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    with suppress(KeyboardInterrupt):
        asyncio.run(serve(settings))


if __name__ == "__main__":
    main()
