"""
FastAPI application factory.
create_app() is the single entry point for building the app.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pymongo.asynchronous.mongo_client import AsyncMongoClient

from config import AppSettings
from errors import register_error_handlers
from infrastructure.email.smtp import SmtpEmailProvider
from repositories import MongoQuestionRepository, MongoTokenRepository, MongoUserRepository
from repositories.indexes import ensure_indexes
from repositories.question_repository import QUESTIONS_COLLECTION
from repositories.user_repository import USERS_COLLECTION
from routes.auth_routes import router as auth_router
from routes.health_routes import router as health_router
from routes.question_routes import router as question_router
from schemas.models.token import TOKEN_COLLECTIONS, TokenKind
from services.auth_service import AuthService
from services.question_service import QuestionService
from services.token_service import (
    PasswordResetTokenService,
    RefreshTokenService,
    VerificationTokenService,
)
from shared.logging import get_logger
from shared.logging_config import setup_logging

log = get_logger(__name__)


def build_services(app: FastAPI, settings: AppSettings, db) -> None:
    """Wire repositories, token services and the email provider onto app.state."""
    users = MongoUserRepository(db[USERS_COLLECTION])

    def tokens(kind: TokenKind) -> MongoTokenRepository:
        return MongoTokenRepository(db[TOKEN_COLLECTIONS[kind]])

    email_provider = SmtpEmailProvider(
        settings.email,
        frontend_url=settings.frontend_url,
        app_name=settings.app_name,
        log_links=not settings.is_production,
    )

    app.state.auth_service = AuthService(
        users=users,
        verification_tokens=VerificationTokenService(
            tokens(TokenKind.EMAIL_VERIFICATION), users
        ),
        reset_tokens=PasswordResetTokenService(tokens(TokenKind.PASSWORD_RESET), users),
        refresh_tokens=RefreshTokenService(tokens(TokenKind.REFRESH), users),
        email_provider=email_provider,
        jwt_settings=settings.jwt,
        password_hash_cost=settings.security.password_hash_cost,
    )
    app.state.question_service = QuestionService(
        MongoQuestionRepository(db[QUESTIONS_COLLECTION])
    )


def create_app(settings: Optional[AppSettings] = None) -> FastAPI:
    """Create and return a fully configured FastAPI application."""
    if settings is None:
        settings = AppSettings()

    setup_logging(settings.logging, env=settings.env)

    # Initialise Sentry before anything else so it captures startup errors
    if settings.sentry.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry.sentry_dsn,
            send_default_pii=settings.sentry.sentry_send_pii,
            traces_sample_rate=settings.sentry.sentry_traces_sample_rate,
            environment=settings.env,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # ── Startup ──────────────────────────────────────────────────────────
        mongo_client: AsyncMongoClient = AsyncMongoClient(
            settings.db.mongodb_uri, tz_aware=True
        )
        app.state.mongo_client = mongo_client
        app.state.db = mongo_client[settings.db.db_name]
        app.state.settings = settings

        await ensure_indexes(app.state.db)
        build_services(app, settings, app.state.db)
        log.info("app_started", env=settings.env, db_name=settings.db.db_name)

        yield

        # ── Shutdown ─────────────────────────────────────────────────────────
        await mongo_client.close()
        log.info("app_stopped")

    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        docs_url=settings.docs_url,
        redoc_url=None,
        lifespan=lifespan,
    )

    # Credentials are bearer headers, not cookies
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)
    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(question_router)

    return app
