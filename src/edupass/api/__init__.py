"""EduPass HTTP application package.

Creates the FastAPI app, registers routers, and wires up lifecycle events.
Re-exports `app` so the server can be started with:
    uvicorn edupass.api:app
"""

import os

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..ledger import LedgerError
from ..utils.logging_config import setup_logging

load_dotenv()
setup_logging(os.getenv("EDUPASS_LOG_LEVEL", "INFO"))


def _split_csv_env(name: str) -> list[str]:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


def create_app(ledger=None, credentials=None) -> FastAPI:
    """Build the app. Ledger and credential handles left as None are opened from config on startup."""
    app = FastAPI(title="EduPass Ledger", version=__version__)
    app.state.ledger = ledger
    app.state.credentials = credentials

    cors_origins = _split_csv_env("EDUPASS_CORS_ORIGINS")
    if cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins,
            allow_credentials="*" not in cors_origins,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.exception_handler(LedgerError)
    async def _ledger_error(request: Request, exc: LedgerError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    # --- Lifecycle ---
    from .lifecycle import startup_event

    @app.on_event("startup")
    async def _startup():
        await startup_event(app)

    # --- Routers ---
    from .admin import router as admin_router
    from .routes import router as ledger_router

    app.include_router(admin_router)
    app.include_router(ledger_router)
    return app


app = create_app()

__all__ = ["app", "create_app"]
