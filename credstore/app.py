"""FastAPI application factory for the credential service."""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from credstore.auth import (
    CredentialError,
    CredentialStore,
    configure_auth_router,
    credential_error_handler,
    request_validation_error_handler,
)

from .config import configure_logging, load_config_from_env

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from .config import AppConfig

LOGGER = logging.getLogger(__name__)


def configure_fastapi_app(
    config: AppConfig,
    store: CredentialStore | None = None,
) -> FastAPI:
    """Configure and return the FastAPI application.

    :param config: Application configuration
    :param store: Credential store to serve, a new empty one if not given
    :return: Configured FastAPI application
    """
    if store is None:
        store = CredentialStore(config.password_hasher, max_workers=config.hash_workers)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[Any, Any]:
        """Application lifespan manager.

        Starts and stops the store's hashing thread pool.
        """
        LOGGER.info("Credential service is starting")

        async with store:
            yield

        LOGGER.info("Credential service is shutting down")

    app = FastAPI(
        title="Credential Service",
        version="0.1.0",
        lifespan=lifespan,
        root_path=config.root_path,
    )
    app.state.credential_store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(CredentialError, credential_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)

    app.include_router(configure_auth_router(APIRouter(), store), tags=["auth"])

    @app.get("/")
    def read_root() -> str:
        return "hello from server"

    return app


def create_app(env_file: str | None = os.environ.get("ENV_FILE", ".env")) -> FastAPI:
    """Create and configure the FastAPI application.

    The default here is for uvicorn command line usage, in which case the user
    should set ENV_FILE environment variable if they want a different file.

    :param env_file: Optional path to the environment configuration file
    :return: Configured FastAPI application
    """
    config = load_config_from_env(env_file)
    configure_logging(config)
    return configure_fastapi_app(config)
