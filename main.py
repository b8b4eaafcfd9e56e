"""
Credential auth backend — application entry point.
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.middleware import register_middleware
from api.routes import health_router
from api.routes import router as user_router
from auth.jwt import TokenIssuer
from auth.password import PasswordHasher
from auth.routes import router as auth_router
from auth.service import AuthService
from config.settings import Settings, get_settings
from database.session import Database

config = get_settings()

logging.basicConfig(
    level=logging.DEBUG if config.debug else config.log_level.upper(),
    format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
    stream=sys.stdout,
)
for _noisy in ("sqlalchemy.engine", "asyncio", "uvicorn.access"):
    logging.getLogger(_noisy).setLevel(logging.DEBUG if config.debug else logging.WARNING)
logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, db: Optional[Database] = None) -> FastAPI:
    settings = settings or get_settings()
    db = db or Database.from_settings(settings)
    tokens = TokenIssuer.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if await db.ping():
            logger.info("Database connected successfully")
        else:
            logger.error("Database connection error; requests will fail until it is reachable")
        logger.info("Application ready to accept requests.")
        yield
        await db.dispose()

    app = FastAPI(
        title="Credential Auth Backend",
        version="1.0.0",
        description="Email + password signup/login issuing bearer tokens.",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.db = db
    app.state.token_issuer = tokens
    app.state.auth_service = AuthService(db, PasswordHasher(), tokens)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_middleware(app, debug=settings.debug)

    # Routes
    app.include_router(health_router)
    app.include_router(auth_router, prefix="/api/auth")
    app.include_router(user_router, prefix="/api/user")

    return app


app = create_app(config)

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level="debug" if config.debug else "info",
    )
