import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import models  # noqa: F401  registers tables on SQLModel.metadata
from config import Settings, load_settings
from database import create_db_and_tables, create_db_engine
from errors import register_error_handlers
from logging_setup import setup_logging
from routes import auth, tasks
from services.session_issuer import SessionIssuer

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application

    Settings are read from the environment when not given, once, and are
    immutable for the lifetime of the app.
    """
    if settings is None:
        settings = load_settings()

    setup_logging(settings.log_level, settings.log_file)

    engine = create_db_engine(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Create database tables on startup"""
        create_db_and_tables(engine)
        logger.info("Agenda API started (%s)", settings.environment)
        yield
        engine.dispose()

    app = FastAPI(
        title="Agenda API",
        description="Personal agenda tracker with cookie-based sessions",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_issuer = SessionIssuer(settings)

    # CORS configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    # Include routers
    app.include_router(auth.router, prefix="/api", tags=["auth"])
    app.include_router(tasks.router, prefix="/api", tags=["tasks"])

    @app.get("/")
    def read_root():
        """Root endpoint"""
        return {
            "message": "Agenda API is running",
            "version": "1.0.0",
            "docs": "/docs"
        }

    @app.get("/health")
    def health_check():
        """Health check endpoint"""
        return {"status": "healthy"}

    return app
