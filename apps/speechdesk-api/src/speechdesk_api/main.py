"""FastAPI application for speechdesk-api."""

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from speechdesk_common.errors import register_error_handlers
from speechdesk_common.health import create_health_router
from speechdesk_common.logging import get_logger, setup_logging
from speechdesk_common.middleware import add_common_middleware

from . import __version__
from .blobs import FileBlobStore
from .config import APIConfig, configure_google_credentials
from .engine import SynthesisGateway
from .routes import router as tts_router
from .store import SpeechStore

log = get_logger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / "static"


def _create_gateway(config: APIConfig) -> SynthesisGateway:
    """Create the synthesis gateway named by config."""
    if config.provider == "google":
        from .engines.google_cloud import GoogleSynthesisGateway
        configure_google_credentials(config)
        return GoogleSynthesisGateway()
    raise ValueError(f"Unknown TTS provider: {config.provider}")


def _create_store(config: APIConfig) -> SpeechStore:
    if config.database_url.startswith("sqlite:///"):
        db_path = Path(config.database_url.removeprefix("sqlite:///"))
        if str(db_path) != ":memory:":
            db_path.parent.mkdir(parents=True, exist_ok=True)
    store = SpeechStore(config.database_url, FileBlobStore(config.audio_dir))
    store.init_db()
    return store


def create_app(
    config: APIConfig | None = None,
    gateway: SynthesisGateway | None = None,
    store: SpeechStore | None = None,
) -> FastAPI:
    """Build the app. ``gateway`` and ``store`` are created at startup unless given."""
    config = config or APIConfig()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging("speechdesk-api", config.log_level, json_output=config.log_format == "json")

        owns_store = app.state.store is None
        if app.state.gateway is None:
            app.state.gateway = _create_gateway(config)
        if owns_store:
            app.state.store = _create_store(config)
        log.info("speechdesk_api_ready", provider=app.state.gateway.name, database_url=config.database_url)

        yield

        if owns_store:
            app.state.store.close()

    app = FastAPI(title="speechdesk-api", version=__version__, lifespan=lifespan)
    app.state.config = config
    app.state.gateway = gateway
    app.state.store = store

    def _health_check() -> tuple[bool, str]:
        if app.state.store is None:
            return False, "store not initialized"
        return app.state.store.validate_store()

    register_error_handlers(app)
    add_common_middleware(app, allowed_origins=config.cors_origins)
    app.include_router(create_health_router("speechdesk-api", __version__, check_fn=_health_check))
    app.include_router(tts_router)

    if STATIC_DIR.is_dir():
        app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

        @app.get("/", include_in_schema=False)
        def index() -> FileResponse:
            return FileResponse(STATIC_DIR / "index.html")

    return app
