"""Unit tests for AuthMiddleware (the access guard)."""

from datetime import timedelta
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from common.auth import TokenPurpose
from common.utils.exceptions import ForbiddenException, UnauthorizedException
from fittrack.middleware.auth import AuthMiddleware


def _request(authorization=None):
    request = MagicMock()
    request.headers = {"Authorization": authorization} if authorization is not None else {}
    request.state = SimpleNamespace()
    return request


@pytest.fixture
def accounts():
    service = MagicMock()
    service.get_by_id = AsyncMock()
    return service


@pytest.fixture
def guard(token_issuer, accounts):
    return AuthMiddleware(token_issuer, accounts)


# ─────────────────────────────────────────────────────────────────
# require_auth
# ─────────────────────────────────────────────────────────────────


class TestRequireAuth:
    @pytest.mark.asyncio
    async def test_attaches_user(self, guard, accounts, token_issuer, make_user_doc):
        user = make_user_doc()
        accounts.get_by_id.return_value = user
        token = token_issuer.issue(str(user["_id"]), TokenPurpose.ACCESS)
        request = _request(f"Bearer {token}")

        result = await guard.require_auth(request)

        assert result is user
        assert request.state.user is user
        assert request.state.user_id == str(user["_id"])
        accounts.get_by_id.assert_awaited_once_with(str(user["_id"]))

    @pytest.mark.asyncio
    @pytest.mark.parametrize("header", [None, "", "Token abc", "bearer abc", "Bearer a b"])
    async def test_missing_or_malformed_header(self, guard, header):
        with pytest.raises(UnauthorizedException) as exc_info:
            await guard.require_auth(_request(header))

        assert exc_info.value.code == "NO_TOKEN"

    @pytest.mark.asyncio
    async def test_expired_token(self, guard, token_issuer, sample_user_id):
        token = token_issuer.issue(sample_user_id, TokenPurpose.ACCESS, ttl=timedelta(seconds=-1))

        with pytest.raises(UnauthorizedException) as exc_info:
            await guard.require_auth(_request(f"Bearer {token}"))

        assert exc_info.value.code == "TOKEN_EXPIRED"

    @pytest.mark.asyncio
    async def test_refresh_token_is_rejected(self, guard, accounts, token_issuer, sample_user_id):
        token = token_issuer.issue(sample_user_id, TokenPurpose.REFRESH)

        with pytest.raises(UnauthorizedException) as exc_info:
            await guard.require_auth(_request(f"Bearer {token}"))

        assert exc_info.value.code == "TOKEN_INVALID"
        accounts.get_by_id.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_deleted_account(self, guard, accounts, token_issuer, sample_user_id):
        accounts.get_by_id.return_value = None
        token = token_issuer.issue(sample_user_id, TokenPurpose.ACCESS)

        with pytest.raises(UnauthorizedException) as exc_info:
            await guard.require_auth(_request(f"Bearer {token}"))

        assert exc_info.value.code == "TOKEN_INVALID"

    @pytest.mark.asyncio
    async def test_inactive_account(self, guard, accounts, token_issuer, make_user_doc):
        user = make_user_doc(isActive=False)
        accounts.get_by_id.return_value = user
        token = token_issuer.issue(str(user["_id"]), TokenPurpose.ACCESS)

        with pytest.raises(UnauthorizedException) as exc_info:
            await guard.require_auth(_request(f"Bearer {token}"))

        assert exc_info.value.code == "TOKEN_INVALID"

    @pytest.mark.asyncio
    async def test_suspended_account(self, guard, accounts, token_issuer, make_user_doc):
        user = make_user_doc(suspended=True)
        accounts.get_by_id.return_value = user
        token = token_issuer.issue(str(user["_id"]), TokenPurpose.ACCESS)

        with pytest.raises(ForbiddenException) as exc_info:
            await guard.require_auth(_request(f"Bearer {token}"))

        assert exc_info.value.status_code == 403
        assert exc_info.value.code == "ACCOUNT_SUSPENDED"


# ─────────────────────────────────────────────────────────────────
# require_admin
# ─────────────────────────────────────────────────────────────────


class TestRequireAdmin:
    @pytest.mark.asyncio
    async def test_admin_passes(self, guard, accounts, token_issuer, make_user_doc):
        admin = make_user_doc(role="admin")
        accounts.get_by_id.return_value = admin
        token = token_issuer.issue(str(admin["_id"]), TokenPurpose.ACCESS)

        assert await guard.require_admin(_request(f"Bearer {token}")) is admin

    @pytest.mark.asyncio
    async def test_regular_user_rejected(self, guard, accounts, token_issuer, make_user_doc):
        user = make_user_doc()
        accounts.get_by_id.return_value = user
        token = token_issuer.issue(str(user["_id"]), TokenPurpose.ACCESS)

        with pytest.raises(ForbiddenException) as exc_info:
            await guard.require_admin(_request(f"Bearer {token}"))

        assert exc_info.value.code == "ADMIN_REQUIRED"
