"""Cloud SQL Admin API access: authentication, instance reads and patches."""

import asyncio
import logging
from typing import Callable, Optional

import httpx
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request as AuthRequest
from google.oauth2 import service_account
from pydantic import ValidationError

from .config import Settings
from .errors import AuthError, InstanceLookupError, SQLAdminError
from .models import ActivationPolicy, InstanceSnapshot

logger = logging.getLogger(__name__)

SQLADMIN_SCOPES = ["https://www.googleapis.com/auth/sqlservice.admin"]


def load_access_token(credentials_file: str) -> str:
    """Load a service account file and exchange it for an access token. Blocking."""
    credentials = service_account.Credentials.from_service_account_file(
        credentials_file, scopes=SQLADMIN_SCOPES
    )
    credentials.refresh(AuthRequest())
    return credentials.token


def _raise_for_status(resp: httpx.Response) -> None:
    if resp.status_code < 400:
        return

    message = resp.text or resp.reason_phrase
    try:
        body = resp.json()
    except ValueError:
        body = None

    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict) and error.get("message"):
        message = str(error["message"])
    elif isinstance(body, str) and body:
        message = body
    raise SQLAdminError(resp.status_code, message)


class SQLAdminSession:
    """An authenticated connection to the Admin API. Close it when done."""

    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    def _instance_path(self, project_id: str, instance_id: str) -> str:
        return f"/projects/{project_id}/instances/{instance_id}"

    async def get_instance(self, project_id: str, instance_id: str) -> dict:
        resp = await self.client.get(self._instance_path(project_id, instance_id))
        _raise_for_status(resp)
        return resp.json()

    async def patch_instance(self, project_id: str, instance_id: str, body: dict) -> dict:
        resp = await self.client.patch(self._instance_path(project_id, instance_id), json=body)
        _raise_for_status(resp)
        return resp.json()

    async def set_activation_policy(
        self, project_id: str, instance_id: str, policy: ActivationPolicy
    ) -> dict:
        """Patch settings.activationPolicy and return the provider's response."""
        logger.info(f"Setting activation policy of {project_id}:{instance_id} to {policy.value}")
        return await self.patch_instance(
            project_id, instance_id, {"settings": {"activationPolicy": policy.value}}
        )

    async def aclose(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> "SQLAdminSession":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


class SQLAdminProvider:
    """
    Opens a fresh authenticated session per request.

    ``token_loader`` and ``transport`` exist so tests can run without
    credentials or network access.
    """

    def __init__(
        self,
        settings: Settings,
        token_loader: Optional[Callable[[str], str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings
        self.token_loader = token_loader or load_access_token
        self.transport = transport

    async def open_session(self) -> SQLAdminSession:
        try:
            token = await asyncio.to_thread(self.token_loader, self.settings.CREDENTIALS_FILE)
        except (OSError, ValueError, GoogleAuthError) as e:
            logger.error(f"Failed to authenticate with {self.settings.CREDENTIALS_FILE}: {e}")
            raise AuthError(str(e)) from e

        client = httpx.AsyncClient(
            base_url=self.settings.SQLADMIN_BASE_URL,
            headers={"Authorization": f"Bearer {token}"},
            timeout=self.settings.SQLADMIN_TIMEOUT,
            transport=self.transport,
        )
        return SQLAdminSession(client)


async def get_status(session: SQLAdminSession, project_id: str, instance_id: str) -> InstanceSnapshot:
    """
    Read the instance and project it into an InstanceSnapshot.

    Every failure, including a missing instance, raises InstanceLookupError
    carrying the provider's message.
    """
    try:
        resource = await session.get_instance(project_id, instance_id)
    except (SQLAdminError, httpx.HTTPError, ValueError) as e:
        logger.warning(f"Lookup of {project_id}:{instance_id} failed: {e}")
        raise InstanceLookupError(
            f"failed to get instance details, instances not found.: {e}"
        ) from e

    if not isinstance(resource, dict):
        logger.warning(f"Lookup of {project_id}:{instance_id} returned a {type(resource).__name__}")
        raise InstanceLookupError(
            f"failed to get instance details, instances not found.: "
            f"unexpected response body of type {type(resource).__name__}"
        )

    try:
        return InstanceSnapshot.from_resource(resource)
    except ValidationError as e:
        raise InstanceLookupError(
            f"failed to get instance details, instances not found.: {e}"
        ) from e
