"""설정 어댑터 테스트"""

import pytest
from pydantic import ValidationError

from config.adapters import ConfigAdapter, DevelopmentConfig, ProductionConfig, TestingConfig


def test_testing_environment_is_selected(monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "testing")

    config = ConfigAdapter.create_config()

    assert isinstance(config, TestingConfig)
    assert config.is_persistence_enabled() is False
    assert config.get_sync_retry_base_seconds() == 0


def test_sync_defaults():
    config = DevelopmentConfig()

    assert config.get_sync_config() == {
        "page_size": 100,
        "max_offset": 9900,
        "max_attempts": 5,
        "retry_base_seconds": 5.0,
        "flush_threshold": 2000,
    }
    assert config.get_hubspot_base_url() == "https://api.hubapi.com"
    assert config.get_analytics_url() is None


def test_settings_are_read_from_environment(monkeypatch):
    monkeypatch.setenv("HUBSPOT_CID", "client-123")
    monkeypatch.setenv("SYNC_FLUSH_THRESHOLD", "500")
    monkeypatch.setenv("PERSIST_ACCOUNTS", "false")

    config = DevelopmentConfig()

    assert config.get_hubspot_client_id() == "client-123"
    assert config.get_sync_flush_threshold() == 500
    assert config.is_persistence_enabled() is False


def test_encryption_key_is_normalized_to_32_characters():
    config = TestingConfig(encryption_key="short")

    assert len(config.get_encryption_key()) == 32


def test_page_size_above_search_limit_is_rejected():
    with pytest.raises(ValidationError):
        TestingConfig(sync_page_size=500)


def test_production_rejects_sqlite(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///./prod.db")
    monkeypatch.setenv("ENCRYPTION_KEY", "prod_encryption_key_32_bytes_long")
    monkeypatch.setenv("HUBSPOT_CID", "cid")
    monkeypatch.setenv("HUBSPOT_CS", "real-secret")

    with pytest.raises(ValidationError):
        ProductionConfig()
