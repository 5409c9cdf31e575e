"""
동기화 예외 정의

계정, 엔티티 종류 단위로 격리되는 오류들을 정의합니다.
변환 단계의 누락 데이터는 예외가 아니라 이벤트 미생성(None)으로 처리합니다.
"""

from typing import Optional


class CrmSyncError(Exception):
    """동기화 오류 기본 클래스"""
    pass


class AuthError(CrmSyncError):
    """리프레시 토큰이 거부된 경우

    재시도하지 않습니다. 계정의 이번 동기화는 중단됩니다.
    """

    def __init__(self, message: str, hub_id: Optional[int] = None):
        super().__init__(message)
        self.hub_id = hub_id


class CrmApiError(CrmSyncError):
    """HubSpot API가 실패 응답을 반환한 경우"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class FetchError(CrmSyncError):
    """엔티티 종류 하나의 동기화를 중단시키는 조회 오류"""

    def __init__(self, message: str, entity_kind: Optional[str] = None):
        super().__init__(message)
        self.entity_kind = entity_kind


class FetchExhaustedError(FetchError):
    """페이지 조회가 최대 시도 횟수를 모두 실패한 경우"""

    def __init__(self, entity_kind: str, attempts: int, last_error: Optional[BaseException] = None):
        super().__init__(
            f"Failed to fetch {entity_kind} after {attempts} attempts. Aborting.",
            entity_kind=entity_kind,
        )
        self.attempts = attempts
        self.last_error = last_error


class PaginationStalledError(FetchError):
    """오프셋 한도 도달 후 수정 시각 커서가 더 이상 전진하지 않는 경우"""
    pass


class AssociationError(FetchError):
    """연관 관계 조회 실패. 조회 오류와 같은 범위로 격리됩니다."""
    pass


class AnalyticsSubmissionError(CrmSyncError):
    """분석 시스템 전송 실패. 동기화를 중단시키지 않습니다."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
