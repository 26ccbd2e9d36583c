"""Server lifecycle: config load, ledger wiring, startup integrity gate."""

import asyncio
import os

from ..runtime import open_credentials, open_ledger
from ..store import SqliteStore, check_db_integrity
from ..utils.config_loader import EduPassConfig, config_loader
from ..utils.logging_config import StructuredLogger, setup_logging

logger = StructuredLogger(__name__)


async def startup_event(app):
    """Called on FastAPI startup. Handles injected by the caller are kept."""
    strict_startup = os.getenv("EDUPASS_STARTUP_STRICT", "0").strip() == "1"

    try:
        config = config_loader.load_config()
    except ValueError as exc:
        logger.error("Config load failed on startup", error=str(exc), strict=strict_startup)
        if strict_startup:
            raise
        config = EduPassConfig()

    setup_logging(config.log_level())

    if app.state.ledger is None:
        app.state.ledger = await asyncio.to_thread(open_ledger, config)
    if app.state.credentials is None:
        app.state.credentials = await asyncio.to_thread(open_credentials, config)

    store = app.state.ledger.store
    if isinstance(store, SqliteStore):
        ok = await asyncio.to_thread(check_db_integrity, store.path)
        if not ok:
            logger.error("Startup database integrity failed", path=store.path, strict=strict_startup)
            if strict_startup:
                raise RuntimeError(f"Ledger database failed integrity checks: {store.path}")

    logger.info(
        "Ledger server started",
        initialized=app.state.ledger.is_initialized(),
        require_initialized=app.state.ledger.require_initialized,
    )
