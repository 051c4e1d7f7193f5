"""
sqlswitch: Backend API

FastAPI application for starting, stopping and checking a Cloud SQL instance.
"""

import logging
from typing import Optional

import httpx
from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import ClientDisconnect

from .config import Settings, load_settings
from .errors import AuthError, InstanceLookupError, ServiceError, SQLAdminError
from .models import PolicyRejected, decode_body, parse_activation_policy
from .responses import write_error, write_success
from .sqladmin import SQLAdminProvider, SQLAdminSession, get_status

logger = logging.getLogger(__name__)

router = APIRouter()


# ── Dependencies ────────────────────────────────
def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_provider(request: Request) -> SQLAdminProvider:
    return request.app.state.provider


async def open_session(provider: SQLAdminProvider) -> SQLAdminSession:
    try:
        return await provider.open_session()
    except AuthError as e:
        raise ServiceError(401, "Service Account not found.", e)


async def lookup_instance(session: SQLAdminSession, settings: Settings):
    try:
        return await get_status(session, settings.PROJECT_ID, settings.INSTANCE_ID)
    except InstanceLookupError as e:
        raise ServiceError(500, "Instances not found.", str(e))


async def read_policy(request: Request):
    """Read the body and validate ActivationPolicy before anything is mutated."""
    try:
        body = await request.body()
    except ClientDisconnect as e:
        raise ServiceError(400, "Failed to read request body.", e)

    try:
        payload = decode_body(body)
    except ValueError as e:
        raise ServiceError(400, "Invalid JSON format.", e)

    result = parse_activation_policy(payload)
    if isinstance(result, PolicyRejected):
        raise ServiceError(400, result.reason, "")
    return result.policy


# ═══════════════════════════════════════════════
# ROUTES
# ═══════════════════════════════════════════════


@router.post("/start")
async def start_instance(
    request: Request,
    settings: Settings = Depends(get_settings),
    provider: SQLAdminProvider = Depends(get_provider),
):
    """
    Set the activation policy from the body.
    The current state is looked up but deliberately not checked.
    """
    session = await open_session(provider)
    async with session:
        await lookup_instance(session, settings)
        policy = await read_policy(request)

        try:
            result = await session.set_activation_policy(
                settings.PROJECT_ID, settings.INSTANCE_ID, policy
            )
        except (SQLAdminError, httpx.HTTPError, ValueError) as e:
            logger.error(f"Failed to start instance {settings.INSTANCE_ID}: {e}")
            raise ServiceError(500, "Failed to start instance.", e)

    return write_success(200, "Instance successfully started. Check console for details.", result)


@router.post("/stop")
async def stop_instance(
    request: Request,
    settings: Settings = Depends(get_settings),
    provider: SQLAdminProvider = Depends(get_provider),
):
    """Set the activation policy from the body; the instance must be RUNNABLE."""
    session = await open_session(provider)
    async with session:
        status = await lookup_instance(session, settings)
        if status.state != "RUNNABLE":
            raise ServiceError(400, f"Instance currently in {status.state} state.", "")

        policy = await read_policy(request)

        try:
            result = await session.set_activation_policy(
                settings.PROJECT_ID, settings.INSTANCE_ID, policy
            )
        except (SQLAdminError, httpx.HTTPError, ValueError) as e:
            logger.error(f"Failed to stop instance {settings.INSTANCE_ID}: {e}")
            raise ServiceError(500, "Failed to stop instance.", e)

    return write_success(200, "Instance successfully stopped. Check console for details.", result)


@router.get("/check")
async def check_instance(
    settings: Settings = Depends(get_settings),
    provider: SQLAdminProvider = Depends(get_provider),
):
    """Fetch the instance and return its public snapshot."""
    session = await open_session(provider)
    async with session:
        snapshot = await lookup_instance(session, settings)

    return write_success(200, "Successfully fetch instances detail.", snapshot)


# ── Error Handlers ──────────────────────────────
async def service_error_handler(_request: Request, exc: ServiceError) -> JSONResponse:
    return write_error(exc.status_code, exc.message, exc.cause)


async def http_error_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 405:
        return write_error(405, "Method not allowed.", "")
    if exc.status_code == 404:
        return write_error(404, "Not found.", "")
    return write_error(exc.status_code, str(exc.detail), "")


async def generic_error_handler(_request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unexpected error: {exc}")
    return write_error(500, "Internal server error.", exc)


# ── App Setup ───────────────────────────────────
def create_app(
    settings: Optional[Settings] = None,
    provider: Optional[SQLAdminProvider] = None,
) -> FastAPI:
    """Build the application around an explicit configuration."""
    settings = settings or load_settings()

    app = FastAPI(
        title="sqlswitch",
        description="Start, stop and inspect a Cloud SQL instance",
        version="0.1.0",
        redirect_slashes=False,
    )
    app.state.settings = settings
    app.state.provider = provider or SQLAdminProvider(settings)

    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)
    app.include_router(router)

    return app
