"""
Route-level fixtures: a FastAPI app wired to the in-memory services.

Mirrors create_app() minus MongoDB: the lifespan puts the services on
app.state exactly where dependencies.py looks for them.
"""

from contextlib import asynccontextmanager

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from errors import register_error_handlers
from routes.auth_routes import router as auth_router
from routes.question_routes import router as question_router


@pytest.fixture
def client(auth_service, question_service):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.auth_service = auth_service
        app.state.question_service = question_service
        yield

    app = FastAPI(lifespan=lifespan)
    register_error_handlers(app)
    app.include_router(auth_router)
    app.include_router(question_router)
    with TestClient(app) as c:
        yield c


def _bearer(client: TestClient, email: str) -> dict:
    resp = client.post("/auth/login", json={"email": email, "password": "Secret123"})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['accessToken']}"}


@pytest.fixture
def admin_headers(client, admin):
    return _bearer(client, admin.email)


@pytest.fixture
def participant_headers(client, participant):
    return _bearer(client, participant.email)
