"""Shared test fixtures: a fake Cloud SQL Admin API behind httpx.MockTransport."""

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from sqlswitch.config import Settings
from sqlswitch.main import create_app
from sqlswitch.sqladmin import SQLAdminProvider

PROJECT_ID = "demo-project"
INSTANCE_ID = "demo-db"


def instance_resource(state: str = "RUNNABLE") -> dict:
    return {
        "kind": "sql#instance",
        "name": INSTANCE_ID,
        "project": PROJECT_ID,
        "databaseVersion": "POSTGRES_15",
        "region": "europe-west1",
        "state": state,
        "gceZone": "europe-west1-b",
        "connectionName": f"{PROJECT_ID}:europe-west1:{INSTANCE_ID}",
        "settings": {"tier": "db-f1-micro", "activationPolicy": "ALWAYS"},
    }


class FakeSQLAdmin:
    """Records every request and answers like the Admin API would."""

    def __init__(self):
        self.instance = instance_resource()
        self.requests: list[httpx.Request] = []
        self.get_error = None
        self.raw_error_body = False
        self.patch_error = None

    @property
    def patches(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == "PATCH"]

    def set_state(self, state: str):
        self.instance["state"] = state

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if request.method == "GET":
            if self.get_error:
                code, message = self.get_error
                if self.raw_error_body:
                    return httpx.Response(code, json=message)
                return httpx.Response(code, json={"error": {"code": code, "message": message}})
            return httpx.Response(200, json=self.instance)

        if request.method == "PATCH":
            if self.patch_error:
                code, message = self.patch_error
                return httpx.Response(code, json={"error": {"code": code, "message": message}})
            body = json.loads(request.content)
            return httpx.Response(
                200,
                json={
                    "kind": "sql#operation",
                    "name": "op-1234",
                    "operationType": "UPDATE",
                    "status": "PENDING",
                    "targetId": INSTANCE_ID,
                    "targetProject": PROJECT_ID,
                    "requested": body,
                },
            )

        return httpx.Response(405)


@pytest.fixture
def settings():
    return Settings(
        PROJECT_ID=PROJECT_ID,
        INSTANCE_ID=INSTANCE_ID,
        CREDENTIALS_FILE="service_account.json",
        SQLADMIN_BASE_URL="https://sqladmin.test/sql/v1beta4",
    )


@pytest.fixture
def fake_admin():
    return FakeSQLAdmin()


@pytest.fixture
def token_calls():
    return []


@pytest.fixture
def provider(settings, fake_admin, token_calls):
    def load_token(credentials_file):
        token_calls.append(credentials_file)
        return "test-token"

    return SQLAdminProvider(
        settings, token_loader=load_token, transport=httpx.MockTransport(fake_admin)
    )


@pytest.fixture
def client(settings, provider):
    with TestClient(create_app(settings, provider)) as test_client:
        yield test_client


@pytest.fixture
def unauthenticated_client(settings, fake_admin):
    """A client whose credential file cannot be loaded."""

    def load_token(credentials_file):
        raise FileNotFoundError(2, "No such file or directory", credentials_file)

    provider = SQLAdminProvider(
        settings, token_loader=load_token, transport=httpx.MockTransport(fake_admin)
    )
    with TestClient(create_app(settings, provider)) as test_client:
        yield test_client
