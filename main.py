import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware

from src.core.config import JourneySettings, journey_settings
from src.core.logging_config import setup_logging
from src.routers import journey as journey_router
from src.services.storage import get_session_storage
from services.journey_engine.loader import CatalogValidationError, load_question_catalog_from_file
from services.journey_engine.models import StorageError
from services.journey_engine.store import SessionStore

logger = logging.getLogger(__name__)


def create_app(settings: JourneySettings = journey_settings, storage=None) -> FastAPI:
    """
    Builds the journey API. Each app owns exactly one SessionStore.

    Args:
        settings: Journey settings (env prefix JOURNEY_).
        storage: Optional storage backend; built from settings when omitted.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.log_level)
        backend = storage if storage is not None else get_session_storage(settings.storage_backend)
        app.state.session_store = SessionStore(
            storage=backend,
            key_prefix=settings.storage_key_prefix,
            assumed_total_data_points=settings.assumed_total_data_points,
            max_live_sessions=settings.max_live_sessions,
        )
        try:
            app.state.question_catalog = load_question_catalog_from_file(settings.question_catalog_path)
        except CatalogValidationError as e:
            # Responses then need an explicit weight
            logger.error(f"Question catalog unavailable: {e}")
            app.state.question_catalog = None
        logger.info("Journey engine ready")
        yield
        logger.info("Journey engine shutting down")

    app = FastAPI(title="Journey Scoring & Progression Engine", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(journey_router.router, prefix="/api/v1", tags=["journey"])

    @app.get("/", tags=["Health Check"])
    async def read_root():
        """
        Root endpoint for basic health check.
        """
        return {"status": "ok", "message": "Journey engine is running."}

    @app.get("/health/storage", tags=["Health Check"])
    def health_check_storage(request: Request):
        """
        Performs a storage health check by setting, getting and deleting a key.
        """
        store: SessionStore = request.app.state.session_store
        key = f"{store.key_prefix}:health"
        value = "pong"
        try:
            store.storage.set(key, value)
            retrieved_value: Optional[str] = store.storage.get(key)
            store.storage.delete(key)
        except StorageError as e:
            logger.error(f"Storage health check failed: {e}")
            raise HTTPException(status_code=503, detail=f"Storage error: {e}")
        if retrieved_value != value:
            logger.error(f"Storage health check failed: Retrieved value '{retrieved_value}' does not match expected '{value}'")
            raise HTTPException(status_code=503, detail="Storage error: Value mismatch")
        return {"status": "ok", "storage_check": "set_get_successful"}

    return app


app = create_app()
