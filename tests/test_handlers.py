"""Tests for the error envelope produced by the exception handlers."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pymongo.errors import DuplicateKeyError, OperationFailure, ServerSelectionTimeoutError

from common.utils import RateLimitException, register_exception_handlers


@pytest.fixture
def client():
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/duplicate")
    async def duplicate():
        raise DuplicateKeyError("E11000 duplicate key error")

    @app.get("/unreachable")
    async def unreachable():
        raise ServerSelectionTimeoutError("no servers")

    @app.get("/failed-query")
    async def failed_query():
        raise OperationFailure("bad pipeline")

    @app.get("/throttled")
    async def throttled():
        raise RateLimitException(retry_after=30)

    @app.get("/boom")
    async def boom():
        raise RuntimeError("secret internals")

    return TestClient(app, raise_server_exceptions=False)


class TestDriverErrors:
    def test_duplicate_key_is_conflict(self, client):
        response = client.get("/duplicate")

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "CONFLICT"

    def test_connection_failure_is_503(self, client):
        response = client.get("/unreachable")

        assert response.status_code == 503
        assert response.json()["error"]["code"] == "DATABASE_ERROR"

    def test_other_database_errors_are_generic_500(self, client):
        response = client.get("/failed-query")

        assert response.status_code == 500
        assert "bad pipeline" not in response.text


class TestAPIErrors:
    def test_rate_limit_carries_retry_after(self, client):
        response = client.get("/throttled")

        assert response.status_code == 429
        assert response.headers["Retry-After"] == "30"
        assert response.json()["error"]["details"] == {"retryAfter": 30}

    def test_unhandled_error_hides_message(self, client):
        response = client.get("/boom")

        body = response.json()
        assert response.status_code == 500
        assert body["success"] is False
        assert body["error"]["code"] == "INTERNAL_ERROR"
        assert "secret internals" not in response.text
