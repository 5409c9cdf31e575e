"""
포트 인터페이스 정의

클린 아키텍처의 핵심으로, Core 레이어와 외부 어댑터 간의 계약을 정의합니다.
모든 포트는 추상 기본 클래스(ABC)로 정의되어 구현을 강제합니다.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

from .entities import Account, OutputEvent


class AccountRepositoryPort(ABC):
    """계정 저장소 포트"""

    @abstractmethod
    async def find_accounts(self) -> List[Account]:
        """동기화 대상 계정 목록 조회"""
        pass

    @abstractmethod
    async def get_by_hub_id(self, hub_id: int) -> Optional[Account]:
        """포털 ID로 계정 조회"""
        pass

    @abstractmethod
    async def create(self, account: Account) -> Account:
        """계정 생성"""
        pass

    @abstractmethod
    async def persist(self, account: Account) -> Account:
        """자격 증명과 워터마크 저장"""
        pass


class CrmApiClientPort(ABC):
    """HubSpot CRM API 클라이언트 포트

    모든 호출은 액세스 토큰을 명시적으로 전달받습니다.
    """

    @abstractmethod
    async def search_objects(
        self,
        access_token: str,
        object_type: str,
        search_request: Dict[str, Any],
    ) -> Dict[str, Any]:
        """객체 검색 (filterGroups, sorts, properties, limit, after)"""
        pass

    @abstractmethod
    async def batch_read_associations(
        self,
        access_token: str,
        from_object_type: str,
        to_object_type: str,
        ids: Sequence[str],
    ) -> List[Dict[str, Any]]:
        """연관 관계 일괄 조회"""
        pass

    @abstractmethod
    async def batch_read_objects(
        self,
        access_token: str,
        object_type: str,
        ids: Sequence[str],
        properties: Sequence[str],
    ) -> List[Dict[str, Any]]:
        """객체 일괄 조회"""
        pass

    @abstractmethod
    async def refresh_access_token(self, refresh_token: str) -> Dict[str, Any]:
        """리프레시 토큰으로 액세스 토큰 갱신 (access_token, expires_in)"""
        pass


class AnalyticsSinkPort(ABC):
    """분석 시스템 전송 포트"""

    @abstractmethod
    async def submit(self, events: List[OutputEvent]) -> None:
        """이벤트 목록 전송. 실패 시 예외 발생"""
        pass


class EncryptionServicePort(ABC):
    """암호화 서비스 포트"""

    @abstractmethod
    async def encrypt(self, data: str) -> str:
        """데이터 암호화"""
        pass

    @abstractmethod
    async def decrypt(self, encrypted_data: str) -> str:
        """데이터 복호화"""
        pass


class LoggerPort(ABC):
    """로거 포트"""

    @abstractmethod
    def info(self, message: str, **kwargs) -> None:
        """정보 로그"""
        pass

    @abstractmethod
    def warning(self, message: str, **kwargs) -> None:
        """경고 로그"""
        pass

    @abstractmethod
    def error(self, message: str, **kwargs) -> None:
        """오류 로그"""
        pass

    @abstractmethod
    def debug(self, message: str, **kwargs) -> None:
        """디버그 로그"""
        pass


class ConfigPort(ABC):
    """설정 포트"""

    # 환경 설정
    @abstractmethod
    def get_environment(self) -> str:
        """환경 조회 (development, production, testing)"""
        pass

    @abstractmethod
    def is_debug(self) -> bool:
        """디버그 모드 여부"""
        pass

    # 데이터베이스 설정
    @abstractmethod
    def get_database_url(self) -> str:
        """데이터베이스 URL 조회"""
        pass

    @abstractmethod
    def is_persistence_enabled(self) -> bool:
        """계정 상태 저장 여부 (False면 저장을 건너뜀)"""
        pass

    # 보안 설정
    @abstractmethod
    def get_encryption_key(self) -> str:
        """암호화 키 조회"""
        pass

    # HubSpot 설정
    @abstractmethod
    def get_hubspot_client_id(self) -> str:
        """HubSpot 앱 클라이언트 ID 조회"""
        pass

    @abstractmethod
    def get_hubspot_client_secret(self) -> str:
        """HubSpot 앱 클라이언트 시크릿 조회"""
        pass

    @abstractmethod
    def get_hubspot_base_url(self) -> str:
        """HubSpot API 베이스 URL 조회"""
        pass

    @abstractmethod
    def get_http_timeout(self) -> float:
        """HTTP 요청 타임아웃(초) 조회"""
        pass

    # 분석 시스템 설정
    @abstractmethod
    def get_analytics_url(self) -> Optional[str]:
        """분석 API URL 조회 (없으면 로그로만 출력)"""
        pass

    @abstractmethod
    def get_analytics_api_key(self) -> Optional[str]:
        """분석 API 키 조회"""
        pass

    # 로깅 설정
    @abstractmethod
    def get_log_level(self) -> str:
        """로그 레벨 조회"""
        pass

    @abstractmethod
    def get_log_format(self) -> str:
        """로그 포맷 조회"""
        pass

    # 동기화 설정
    @abstractmethod
    def get_sync_page_size(self) -> int:
        """검색 페이지 크기 조회"""
        pass

    @abstractmethod
    def get_sync_max_offset(self) -> int:
        """오프셋 커서 최대값 조회"""
        pass

    @abstractmethod
    def get_sync_max_attempts(self) -> int:
        """페이지 조회 최대 시도 횟수 조회"""
        pass

    @abstractmethod
    def get_sync_retry_base_seconds(self) -> float:
        """재시도 백오프 기준 시간(초) 조회"""
        pass

    @abstractmethod
    def get_sync_flush_threshold(self) -> int:
        """이벤트 일괄 전송 기준 개수 조회"""
        pass

    # 복합 설정 조회 메서드
    @abstractmethod
    def get_sync_config(self) -> dict:
        """동기화 설정 조회"""
        pass
