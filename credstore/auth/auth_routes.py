"""Registration and login routes for the FastAPI application.

Bodies are accepted as arbitrary JSON and judged by the credential core;
credential errors are rendered by :func:`credential_error_handler`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Annotated, Any

from fastapi import APIRouter, Body, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from . import service
from .errors import CredentialError, MissingCredentials, ValidationViolations
from .models import MessageResponse, ValidationErrorResponse, ViolationDetail
from .validation import Violation

if TYPE_CHECKING:
    from .store import CredentialStore

LOGGER = logging.getLogger(__name__)
LOGGER.setLevel(logging.DEBUG)


async def credential_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render a CredentialError as a status code and a message body.

    :param request: The failing request
    :param exc: The raised CredentialError
    :return: JSON response for the error
    """
    if not isinstance(exc, CredentialError):
        raise exc

    if isinstance(exc, ValidationViolations):
        body = ValidationErrorResponse(
            message=str(exc),
            details=[ViolationDetail.from_violation(v) for v in exc.violations],
        )
    else:
        body = MessageResponse(message=str(exc))

    LOGGER.debug(
        "%s %s -> %d %s",
        request.method,
        request.url.path,
        exc.status_code,
        type(exc).__name__,
    )
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


async def request_validation_error_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Render an unparseable request body as a credential error.

    Login bodies become MissingCredentials, anything else is reported as
    invalid user data with the parser's reasons as violations.

    :param request: The failing request
    :param exc: The raised RequestValidationError
    :return: JSON response for the error
    """
    if not isinstance(exc, RequestValidationError):
        raise exc

    if request.url.path.endswith("/login"):
        return await credential_error_handler(request, MissingCredentials())

    violations = [
        Violation(
            field=".".join(str(part) for part in detail.get("loc") or ("body",)),
            message=detail.get("msg", "Invalid request body"),
            code=detail.get("type", "invalid"),
        )
        for detail in exc.errors()
    ]
    return await credential_error_handler(request, ValidationViolations(violations))


def configure_auth_router(router: APIRouter, store: CredentialStore) -> APIRouter:
    """Configure the authentication router.

    :param router: The APIRouter to configure
    :param store: The CredentialStore backing registration and login
    :return: The configured APIRouter
    """

    @router.post(
        "/register",
        status_code=status.HTTP_201_CREATED,
        response_model=MessageResponse,
        responses={
            status.HTTP_400_BAD_REQUEST: {"model": ValidationErrorResponse},
            status.HTTP_409_CONFLICT: {"model": MessageResponse},
        },
    )
    async def register(
        payload: Annotated[Any, Body()] = None,
    ) -> MessageResponse:
        await service.register(store, payload)
        return MessageResponse(message="User registered successfully")

    @router.post(
        "/login",
        response_model=MessageResponse,
        responses={
            status.HTTP_400_BAD_REQUEST: {"model": MessageResponse},
            status.HTTP_401_UNAUTHORIZED: {"model": MessageResponse},
        },
    )
    async def login(
        payload: Annotated[Any, Body()] = None,
    ) -> MessageResponse:
        await service.verify(store, payload)
        return MessageResponse(message="Login successful")

    return router
