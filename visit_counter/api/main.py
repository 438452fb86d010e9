from fastapi import FastAPI
from fastapi.responses import FileResponse, HTMLResponse
from fastapi.middleware.cors import CORSMiddleware
import os
import logging
from typing import Optional
from contextlib import asynccontextmanager

from visit_counter import __version__, metrics
from visit_counter.api import badges as _badges_module
from visit_counter.api import counter as _counter_module
from visit_counter.api import metrics as _metrics_module
from visit_counter.config import Settings, load_settings, require_valid
from visit_counter.store import CounterStore

# Configure logging
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan handler: load the persisted counters into a CounterStore.

    A store injected through create_app() is used as-is.
    """
    created = False
    if getattr(app.state, "store", None) is None:
        settings: Settings = app.state.settings
        app.state.store = CounterStore(settings.counters_path)
        created = True
        logger.info(f"Counter store ready at {settings.counters_path} ({len(app.state.store)} counters)")
    try:
        yield
    finally:
        logger.info("Shutting down visit counter service")
        if created:
            app.state.store = None


def create_app(settings: Optional[Settings] = None, store: Optional[CounterStore] = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Service settings; resolved from the environment when None
        store: Pre-built store to serve instead of opening settings.counters_path
    """
    settings = require_valid(settings) if settings is not None else load_settings()

    app = FastAPI(title="Visit Counter", version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "x-api-key"],
        # credentials cannot be combined with a wildcard origin
        allow_credentials="*" not in settings.cors_origins,
    )

    @app.get("/api/health")
    def health():
        """Health endpoint; reports 'degraded' once a snapshot write has failed."""
        failures = metrics.get("persist_failure")
        current = getattr(app.state, "store", None)
        return {
            "status": "degraded" if failures else "ok",
            "service": "visit-counter",
            "version": __version__,
            "counters": len(current) if current is not None else 0,
            "persist_failures": failures,
        }

    @app.get("/")
    def index():
        """Serve the configuration UI index.html if built, otherwise a simple HTML page."""
        index_path = os.path.join(settings.frontend_dir, "index.html")
        if os.path.exists(index_path):
            return FileResponse(index_path, media_type="text/html")
        return HTMLResponse("<html><body><h1>Visit Counter</h1><p>Frontend not built.</p></body></html>")

    app.include_router(_counter_module.router)
    app.include_router(_counter_module.svg_router)
    app.include_router(_badges_module.router)
    app.include_router(_metrics_module.router)
    return app


app = create_app()
