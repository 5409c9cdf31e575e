"""
설정 어댑터

환경 변수와 .env 파일에서 HubSpot 동기화 설정을 읽어오는 어댑터입니다.
"""

import os
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.ports import ConfigPort


class BaseConfig(BaseSettings, ConfigPort):
    """기본 설정 클래스"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # 환경 설정
    environment: str = Field(default="development")
    debug: bool = Field(default=False)

    # 데이터베이스 설정
    database_url: str = Field(...)
    # False면 계정 상태를 저장하지 않음 (테스트용)
    persist_accounts: bool = Field(default=True)

    # 암호화 설정
    encryption_key: str = Field(...)

    # HubSpot 앱 설정
    hubspot_cid: str = Field(...)
    hubspot_cs: str = Field(...)
    hubspot_base_url: str = Field(default="https://api.hubapi.com")
    http_timeout: float = Field(default=30.0)

    # 분석 시스템 설정
    analytics_url: Optional[str] = Field(default=None)
    analytics_api_key: Optional[str] = Field(default=None)

    # 로깅 설정
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    # 동기화 설정
    sync_page_size: int = Field(default=100)
    sync_max_offset: int = Field(default=9900)
    sync_max_attempts: int = Field(default=5)
    sync_retry_base_seconds: float = Field(default=5.0)
    sync_flush_threshold: int = Field(default=2000)

    @field_validator("encryption_key")
    @classmethod
    def validate_encryption_key(cls, v):
        """암호화 키 검증"""
        if len(v) < 32:
            # 32바이트 미만이면 패딩
            v = v.ljust(32, '0')
        elif len(v) > 32:
            # 32바이트 초과면 자르기
            v = v[:32]
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """로그 레벨 검증"""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"로그 레벨은 {valid_levels} 중 하나여야 합니다")
        return v.upper()

    @field_validator("sync_page_size")
    @classmethod
    def validate_sync_page_size(cls, v):
        """HubSpot 검색 API는 페이지당 최대 100개"""
        if not 1 <= v <= 100:
            raise ValueError("페이지 크기는 1에서 100 사이여야 합니다")
        return v

    @field_validator("sync_max_attempts")
    @classmethod
    def validate_sync_max_attempts(cls, v):
        if v < 1:
            raise ValueError("최대 시도 횟수는 1 이상이어야 합니다")
        return v

    # ConfigPort 인터페이스 구현
    def get_environment(self) -> str:
        return self.environment

    def is_debug(self) -> bool:
        return self.debug

    def get_database_url(self) -> str:
        return self.database_url

    def is_persistence_enabled(self) -> bool:
        return self.persist_accounts

    def get_encryption_key(self) -> str:
        return self.encryption_key

    def get_hubspot_client_id(self) -> str:
        return self.hubspot_cid

    def get_hubspot_client_secret(self) -> str:
        return self.hubspot_cs

    def get_hubspot_base_url(self) -> str:
        return self.hubspot_base_url

    def get_http_timeout(self) -> float:
        return self.http_timeout

    def get_analytics_url(self) -> Optional[str]:
        return self.analytics_url

    def get_analytics_api_key(self) -> Optional[str]:
        return self.analytics_api_key

    def get_log_level(self) -> str:
        return self.log_level

    def get_log_format(self) -> str:
        return self.log_format

    def get_sync_page_size(self) -> int:
        return self.sync_page_size

    def get_sync_max_offset(self) -> int:
        return self.sync_max_offset

    def get_sync_max_attempts(self) -> int:
        return self.sync_max_attempts

    def get_sync_retry_base_seconds(self) -> float:
        return self.sync_retry_base_seconds

    def get_sync_flush_threshold(self) -> int:
        return self.sync_flush_threshold

    def get_sync_config(self) -> dict:
        """동기화 설정 조회"""
        return {
            "page_size": self.sync_page_size,
            "max_offset": self.sync_max_offset,
            "max_attempts": self.sync_max_attempts,
            "retry_base_seconds": self.sync_retry_base_seconds,
            "flush_threshold": self.sync_flush_threshold,
        }


class DevelopmentConfig(BaseConfig):
    """개발 환경 설정"""

    environment: str = "development"
    debug: bool = True
    log_level: str = "DEBUG"

    # 개발용 기본값들
    database_url: str = Field(default="sqlite+aiosqlite:///./dev_database.db")

    # 개발용 더미 값들 (실제 사용 시 .env 파일에서 설정)
    encryption_key: str = Field(default="dev_encryption_key_32_bytes_long")
    hubspot_cid: str = Field(default="dev_hubspot_client_id")
    hubspot_cs: str = Field(default="dev_hubspot_client_secret")


class ProductionConfig(BaseConfig):
    """운영 환경 설정"""

    environment: str = "production"
    debug: bool = False
    log_level: str = "INFO"

    @field_validator("database_url")
    @classmethod
    def validate_production_database_url(cls, v):
        """운영 환경에서는 데이터베이스 URL이 필수"""
        if not v or v.startswith("sqlite"):
            raise ValueError("운영 환경에서는 PostgreSQL 데이터베이스가 필요합니다")
        return v

    @field_validator("hubspot_cs", "encryption_key")
    @classmethod
    def validate_production_secrets(cls, v):
        """운영 환경에서는 모든 시크릿이 필수"""
        if not v or v.startswith("dev_"):
            raise ValueError("운영 환경에서는 실제 시크릿 값이 필요합니다")
        return v


class TestingConfig(BaseConfig):
    """테스트 환경 설정"""

    environment: str = "testing"
    debug: bool = True
    log_level: str = "WARNING"

    # 테스트용 기본값들
    database_url: str = "sqlite+aiosqlite:///:memory:"
    persist_accounts: bool = False

    # 테스트용 더미 값들
    encryption_key: str = "test_encryption_key_32_bytes_long"
    hubspot_cid: str = "test_hubspot_client_id"
    hubspot_cs: str = "test_hubspot_client_secret"
    sync_retry_base_seconds: float = 0.0


class ConfigAdapter:
    """설정 어댑터 팩토리"""

    @staticmethod
    def create_config() -> ConfigPort:
        """환경에 따른 설정 객체를 생성합니다."""
        environment = os.getenv("ENVIRONMENT", "development").lower()

        if environment == "production":
            return ProductionConfig()
        elif environment == "testing":
            return TestingConfig()
        else:
            return DevelopmentConfig()


# 전역 설정 인스턴스
_config: Optional[ConfigPort] = None


def get_config() -> ConfigPort:
    """전역 설정 인스턴스를 반환합니다."""
    global _config
    if _config is None:
        _config = ConfigAdapter.create_config()
    return _config
