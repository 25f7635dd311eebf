"""
Application factory and entry point for the vault HTTP service.
"""
import logging
from typing import Optional

from aiohttp import web

from .config import VaultConfig
from .handlers import (
    MAX_EXPIRATION_KEY,
    SERVICE_KEY,
    request_id_middleware,
    setup_routes,
)
from .service import SecretService
from .storage import AbstractStore, store_from_url

logger = logging.getLogger("ephemeral_vault")

STORE_KEY = web.AppKey("vault.store", AbstractStore)


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger for the service process."""
    root = logging.getLogger()
    root.setLevel(level)
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )
    root.addHandler(handler)


async def _open_store(app: web.Application) -> None:
    await app[STORE_KEY].open()
    logger.info("Secret store ready: %s", type(app[STORE_KEY]).__name__)


async def _close_store(app: web.Application) -> None:
    await app[STORE_KEY].close()


def create_app(
    config: Optional[VaultConfig] = None,
    store: Optional[AbstractStore] = None,
) -> web.Application:
    """Build the aiohttp application.

    Args:
        config: Service settings; defaults are used when omitted.
        store: Store to use instead of the one described by config.

    Returns:
        Configured aiohttp Application.
    """
    config = config or VaultConfig()
    if store is None:
        store = store_from_url(
            config.store_url,
            timeout=config.store_timeout,
            prefix=config.key_prefix,
        )
    app = web.Application(middlewares=[request_id_middleware])
    app[STORE_KEY] = store
    app[SERVICE_KEY] = SecretService(store)
    app[MAX_EXPIRATION_KEY] = config.max_expiration_hours
    app.on_startup.append(_open_store)
    app.on_cleanup.append(_close_store)
    setup_routes(app)
    return app


def main() -> None:
    """Run the vault service with settings from the environment."""
    config = VaultConfig.from_env()
    setup_logging(config.log_level)
    app = create_app(config)
    logger.info("Starting vault server on %s:%s", config.host, config.port)
    web.run_app(app, host=config.host, port=config.port, print=None)
