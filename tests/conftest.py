"""
테스트 공통 픽스처

모든 테스트는 testing 환경 설정으로 실행됩니다.
"""

import os

os.environ.setdefault("ENVIRONMENT", "testing")

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from core.domain.entities import Account
from core.domain.ports import CrmApiClientPort, LoggerPort
from helpers import NOW, search_page


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def mock_logger():
    """LoggerPort 목 객체"""
    return MagicMock(spec=LoggerPort)


@pytest.fixture
def mock_crm_client():
    """CrmApiClientPort 목 객체"""
    client = MagicMock(spec=CrmApiClientPort)
    client.search_objects = AsyncMock(return_value=search_page([]))
    client.batch_read_associations = AsyncMock(return_value=[])
    client.batch_read_objects = AsyncMock(return_value=[])
    client.refresh_access_token = AsyncMock(
        return_value={"access_token": "fresh-token", "expires_in": 1800}
    )
    return client


@pytest.fixture
def account():
    return Account(
        hub_id=12345,
        access_token="current-token",
        refresh_token="refresh-token",
        expires_at=datetime(2024, 3, 1, 13, 0, 0, tzinfo=timezone.utc),
    )
