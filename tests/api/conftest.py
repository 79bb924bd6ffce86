"""API-specific test fixtures."""

from contextlib import asynccontextmanager

import fakeredis
import fakeredis.aioredis
import pytest
from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient

from lens.api.deps import StudioRegistry, get_gateway, get_profile_store, get_registry
from lens.api.routes import api_router
from lens.core.exceptions import AuthorizationFailure, GenerationError
from lens.gateway.fake import GatewayFake
from lens.main import (
    authorization_failure_handler,
    generation_error_handler,
    generic_exception_handler,
    http_exception_handler,
)
from lens.middleware.correlation import setup_correlation_middleware
from lens.services.profile_store import ProfileStore


@pytest.fixture
def registry():
    return StudioRegistry()


@pytest.fixture
def redis_server():
    """Shared fakeredis server; each request gets its own client bound to its loop."""
    return fakeredis.FakeServer()


def _build_app(gateway: GatewayFake, registry: StudioRegistry, redis_server) -> FastAPI:
    @asynccontextmanager
    async def test_lifespan(app: FastAPI):
        yield

    app = FastAPI(title="SoloPreneur Lens - Test Client", lifespan=test_lifespan)
    setup_correlation_middleware(app)

    # Exception handlers (needed for reauth_required and debug_id testing)
    app.exception_handler(AuthorizationFailure)(authorization_failure_handler)
    app.exception_handler(GenerationError)(generation_error_handler)
    app.exception_handler(HTTPException)(http_exception_handler)
    app.exception_handler(Exception)(generic_exception_handler)

    app.include_router(api_router, prefix="/api")

    app.dependency_overrides[get_gateway] = lambda: gateway
    app.dependency_overrides[get_registry] = lambda: registry
    app.dependency_overrides[get_profile_store] = lambda: ProfileStore(
        fakeredis.aioredis.FakeRedis(server=redis_server, decode_responses=True)
    )
    return app


@pytest.fixture
def api_client(gateway, registry, redis_server):
    """Test client over the happy-path GatewayFake."""
    with TestClient(_build_app(gateway, registry, redis_server), raise_server_exceptions=False) as client:
        yield client


@pytest.fixture
def auth_failure_client(gateway_auth_failure, registry, redis_server):
    with TestClient(_build_app(gateway_auth_failure, registry, redis_server), raise_server_exceptions=False) as client:
        yield client


@pytest.fixture
def backend_failure_client(gateway_backend_failure, registry, redis_server):
    with TestClient(
        _build_app(gateway_backend_failure, registry, redis_server), raise_server_exceptions=False
    ) as client:
        yield client


@pytest.fixture
def studio_id(api_client):
    response = api_client.post("/api/studios")
    assert response.status_code == 201
    return response.json()["id"]
