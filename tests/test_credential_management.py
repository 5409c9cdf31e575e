"""자격 증명 관리 유즈케이스 테스트"""

from datetime import timedelta
from unittest.mock import AsyncMock

import pytest

from core.domain.exceptions import AuthError
from core.usecases.credential_management import CredentialManager
from helpers import NOW


@pytest.fixture
def manager(mock_crm_client, mock_logger, clock):
    return CredentialManager(crm_api_client=mock_crm_client, logger=mock_logger, clock=clock)


@pytest.mark.asyncio
async def test_refresh_applies_new_credential_to_account(manager, mock_crm_client, account):
    credential = await manager.refresh(account)

    mock_crm_client.refresh_access_token.assert_awaited_once_with("refresh-token")
    assert credential.access_token == "fresh-token"
    assert credential.expires_at == NOW + timedelta(seconds=1800)
    assert account.access_token == "fresh-token"
    assert account.expires_at == NOW + timedelta(seconds=1800)


@pytest.mark.asyncio
async def test_rejected_refresh_raises_auth_error_with_hub_id(manager, mock_crm_client, account):
    mock_crm_client.refresh_access_token = AsyncMock(side_effect=AuthError("invalid_grant"))

    with pytest.raises(AuthError) as exc_info:
        await manager.refresh(account)

    assert exc_info.value.hub_id == account.hub_id
    # 기존 토큰은 그대로 유지
    assert account.access_token == "current-token"


@pytest.mark.asyncio
async def test_refresh_without_access_token_is_auth_error(manager, mock_crm_client, account):
    mock_crm_client.refresh_access_token = AsyncMock(return_value={"expires_in": 1800})

    with pytest.raises(AuthError):
        await manager.refresh(account)


@pytest.mark.asyncio
async def test_refresh_if_expired_skips_valid_credential(manager, mock_crm_client, account):
    refreshed = await manager.refresh_if_expired(account)

    assert refreshed is False
    mock_crm_client.refresh_access_token.assert_not_awaited()


@pytest.mark.asyncio
async def test_refresh_if_expired_refreshes_past_expiry(manager, mock_crm_client, account):
    account.expires_at = NOW - timedelta(minutes=1)

    refreshed = await manager.refresh_if_expired(account)

    assert refreshed is True
    assert account.access_token == "fresh-token"
