"""
어댑터 팩토리

모든 어댑터들을 생성하고 의존성을 주입하는 팩토리 클래스입니다.
클린 아키텍처의 의존성 역전 원칙을 구현합니다.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from core.domain.ports import (
    AccountRepositoryPort,
    AnalyticsSinkPort,
    ConfigPort,
    CrmApiClientPort,
    EncryptionServicePort,
    LoggerPort,
)
from core.usecases.association_resolution import AssociationResolver
from core.usecases.credential_management import CredentialManager
from core.usecases.crm_sync import SyncOrchestrator
from core.usecases.paginated_fetch import PaginatedFetcher

from .db.repositories import NoOpAccountPersistence, SqlAccountRepositoryAdapter
from .external.analytics_client import HttpAnalyticsSinkAdapter, LoggingAnalyticsSinkAdapter
from .external.encryption_service import EncryptionServiceAdapter
from .external.hubspot_api_client import HubspotApiClientAdapter
from .logger import LoggerAdapter
from config.adapters import get_config


class AdapterFactory:
    """어댑터 팩토리"""

    def __init__(self, config: Optional[ConfigPort] = None):
        self.config = config or get_config()
        self._logger: Optional[LoggerPort] = None
        self._encryption_service: Optional[EncryptionServicePort] = None
        self._crm_api_client: Optional[CrmApiClientPort] = None
        self._analytics_sink: Optional[AnalyticsSinkPort] = None

    def create_logger(self) -> LoggerPort:
        """로거 어댑터를 생성합니다."""
        if self._logger is None:
            self._logger = LoggerAdapter(
                name="crmsync",
                level=self.config.get_log_level(),
                format_string=self.config.get_log_format(),
            )
        return self._logger

    def create_encryption_service(self) -> EncryptionServicePort:
        """암호화 서비스 어댑터를 생성합니다."""
        if self._encryption_service is None:
            self._encryption_service = EncryptionServiceAdapter(
                encryption_key=self.config.get_encryption_key(),
                logger=self.create_logger(),
            )
        return self._encryption_service

    def create_crm_api_client(self) -> CrmApiClientPort:
        """HubSpot API 클라이언트 어댑터를 생성합니다."""
        if self._crm_api_client is None:
            self._crm_api_client = HubspotApiClientAdapter(
                client_id=self.config.get_hubspot_client_id(),
                client_secret=self.config.get_hubspot_client_secret(),
                logger=self.create_logger(),
                base_url=self.config.get_hubspot_base_url(),
                timeout=self.config.get_http_timeout(),
            )
        return self._crm_api_client

    def create_analytics_sink(self) -> AnalyticsSinkPort:
        """분석 시스템 전송 어댑터를 생성합니다."""
        if self._analytics_sink is None:
            logger = self.create_logger()

            # 분석 API URL이 설정되어 있으면 HTTP 전송, 아니면 로그로만 출력
            analytics_url = self.config.get_analytics_url()
            if analytics_url:
                self._analytics_sink = HttpAnalyticsSinkAdapter(
                    url=analytics_url,
                    logger=logger,
                    api_key=self.config.get_analytics_api_key(),
                    timeout=self.config.get_http_timeout(),
                )
            else:
                logger.info("분석 API 설정이 없어 이벤트를 로그로만 출력합니다")
                self._analytics_sink = LoggingAnalyticsSinkAdapter(logger=logger)

        return self._analytics_sink

    def create_account_repository(self, session: AsyncSession) -> SqlAccountRepositoryAdapter:
        """계정 Repository 어댑터를 생성합니다."""
        return SqlAccountRepositoryAdapter(session, self.create_encryption_service())

    def create_sync_repository(self, session: AsyncSession) -> AccountRepositoryPort:
        """동기화용 계정 Repository를 생성합니다. 저장 비활성화 시 저장을 건너뜀"""
        repository = self.create_account_repository(session)
        if self.config.is_persistence_enabled():
            return repository
        return NoOpAccountPersistence(repository, self.create_logger())

    def create_credential_manager(self) -> CredentialManager:
        """자격 증명 관리자를 생성합니다."""
        return CredentialManager(
            crm_api_client=self.create_crm_api_client(),
            logger=self.create_logger(),
        )

    def create_sync_orchestrator(self, session: AsyncSession) -> SyncOrchestrator:
        """동기화 오케스트레이터를 생성합니다."""
        logger = self.create_logger()
        crm_api_client = self.create_crm_api_client()
        credential_manager = self.create_credential_manager()

        fetcher = PaginatedFetcher(
            crm_api_client=crm_api_client,
            credential_manager=credential_manager,
            logger=logger,
            page_size=self.config.get_sync_page_size(),
            max_offset=self.config.get_sync_max_offset(),
            max_attempts=self.config.get_sync_max_attempts(),
            retry_base_seconds=self.config.get_sync_retry_base_seconds(),
        )

        return SyncOrchestrator(
            account_repository=self.create_sync_repository(session),
            credential_manager=credential_manager,
            fetcher=fetcher,
            association_resolver=AssociationResolver(crm_api_client=crm_api_client, logger=logger),
            analytics_sink=self.create_analytics_sink(),
            logger=logger,
            flush_threshold=self.config.get_sync_flush_threshold(),
        )

    def get_config(self) -> ConfigPort:
        """설정 객체를 반환합니다."""
        return self.config


# 전역 팩토리 인스턴스
_factory: Optional[AdapterFactory] = None


def get_adapter_factory() -> AdapterFactory:
    """전역 어댑터 팩토리 인스턴스를 반환합니다."""
    global _factory
    if _factory is None:
        _factory = AdapterFactory()
    return _factory


def initialize_adapter_factory(config: Optional[ConfigPort] = None) -> AdapterFactory:
    """어댑터 팩토리를 초기화합니다."""
    global _factory
    _factory = AdapterFactory(config)
    return _factory
