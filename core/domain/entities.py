"""
도메인 엔티티 정의

HubSpot 증분 동기화의 핵심 개념을 나타내는 엔티티들을 정의합니다.
모든 엔티티는 Pydantic 모델을 기반으로 하여 타입 안정성을 보장합니다.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# 워터마크가 없는 경우의 기준 시각
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def utc_now() -> datetime:
    """현재 UTC 시간을 반환합니다."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """타임존 정보가 없는 시간을 UTC로 간주합니다."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def to_epoch_millis(value: datetime) -> int:
    """HubSpot 검색 필터에 사용하는 밀리초 타임스탬프로 변환합니다."""
    return int(ensure_utc(value).timestamp() * 1000)


def parse_hubspot_datetime(value: Any) -> Optional[datetime]:
    """HubSpot 날짜 값을 파싱합니다. 비어 있거나 잘못된 값이면 None"""
    if not value:
        return None

    if isinstance(value, datetime):
        return ensure_utc(value)

    if isinstance(value, str):
        try:
            return ensure_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))
        except ValueError:
            pass
        # 일부 속성은 밀리초 타임스탬프 문자열로 내려옴
        if value.isdigit():
            return datetime.fromtimestamp(int(value) / 1000, tz=timezone.utc)

    return None


class EntityKind(str, Enum):
    """동기화 대상 엔티티 종류"""
    COMPANIES = "companies"
    CONTACTS = "contacts"
    MEETINGS = "meetings"


class PropertyGroup(str, Enum):
    """출력 이벤트의 속성 그룹 이름"""
    COMPANY = "companyProperties"
    USER = "userProperties"
    MEETING = "meetingProperties"


class SyncStatus(str, Enum):
    """동기화 상태"""
    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"
    PROCESSING = "processing"


class AccountSyncState(str, Enum):
    """계정 단위 동기화 상태 머신"""
    REFRESHING_CREDENTIAL = "refreshing_credential"
    SYNCING_COMPANIES = "syncing_companies"
    SYNCING_CONTACTS = "syncing_contacts"
    SYNCING_MEETINGS = "syncing_meetings"
    DRAINING = "draining"
    DONE = "done"


class Credential(BaseModel):
    """액세스 토큰과 만료 시각"""

    access_token: str = Field(..., description="액세스 토큰")
    expires_at: datetime = Field(..., description="만료 시간")


class Account(BaseModel):
    """HubSpot 계정 엔티티"""

    hub_id: int = Field(..., description="HubSpot 포털 ID")
    access_token: str = Field(default="", description="액세스 토큰")
    refresh_token: str = Field(..., description="리프레시 토큰")
    expires_at: Optional[datetime] = Field(None, description="액세스 토큰 만료 시간")
    last_pulled_dates: Dict[str, datetime] = Field(
        default_factory=dict, description="엔티티 종류별 마지막 동기화 시각"
    )

    @field_validator("last_pulled_dates")
    @classmethod
    def validate_last_pulled_dates(cls, v):
        """워터마크는 모두 UTC로 저장"""
        return {key: ensure_utc(value) for key, value in v.items()}

    def get_watermark(self, key: str) -> datetime:
        """엔티티 종류의 워터마크를 조회합니다. 없으면 epoch"""
        return self.last_pulled_dates.get(key, EPOCH)

    def advance_watermark(self, key: str, instant: datetime) -> bool:
        """워터마크를 앞으로만 이동시킵니다."""
        instant = ensure_utc(instant)
        if instant <= self.get_watermark(key):
            return False
        self.last_pulled_dates[key] = instant
        return True

    def is_credential_expired(self, now: datetime) -> bool:
        """저장된 만료 시각이 지났는지 확인"""
        if self.expires_at is None:
            return False
        return ensure_utc(now) > ensure_utc(self.expires_at)

    def apply_credential(self, credential: Credential) -> None:
        """새 액세스 토큰을 계정에 반영합니다."""
        self.access_token = credential.access_token
        self.expires_at = credential.expires_at


class SyncWindow(BaseModel):
    """엔티티 종류 하나에 대한 한 번의 동기화 구간"""

    entity_kind: EntityKind
    hub_id: int
    lower_bound: datetime = Field(..., description="이전 워터마크")
    upper_bound: datetime = Field(..., description="동기화 시작 시각")
    after: Optional[int] = Field(None, description="오프셋 커서")
    last_modified_date: Optional[datetime] = Field(
        None, description="오프셋 한도 도달 후 사용하는 수정 시각 커서"
    )

    @property
    def lower_effective_bound(self) -> datetime:
        return self.last_modified_date or self.lower_bound

    def is_saturated(self) -> bool:
        """오프셋 커서 대신 수정 시각 커서를 사용 중인지 확인"""
        return self.last_modified_date is not None

    def restart_from(self, last_modified: datetime) -> None:
        """오프셋을 0으로 되돌리고 하한을 마지막 레코드의 수정 시각으로 옮깁니다."""
        self.after = 0
        self.last_modified_date = ensure_utc(last_modified)


class RawRecord(BaseModel):
    """HubSpot 검색 API가 반환한 레코드"""

    entity_kind: EntityKind
    id: str
    created_at: datetime
    updated_at: datetime
    properties: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_api(cls, entity_kind: EntityKind, data: Dict[str, Any]) -> "RawRecord":
        """검색 결과 항목을 RawRecord로 변환합니다."""
        return cls(
            entity_kind=entity_kind,
            id=str(data["id"]),
            created_at=ensure_utc(parse_hubspot_datetime(data.get("createdAt")) or EPOCH),
            updated_at=ensure_utc(parse_hubspot_datetime(data.get("updatedAt")) or EPOCH),
            properties=data.get("properties") or {},
        )

    def get(self, name: str) -> Any:
        return self.properties.get(name)


class OutputEvent(BaseModel):
    """분석 시스템으로 전송되는 정규화된 이벤트"""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="액션 이름")
    timestamp: datetime = Field(..., description="액션 시각")
    property_group: PropertyGroup
    properties: Dict[str, Any] = Field(default_factory=dict)
    identity: Optional[str] = Field(None, description="사용자 식별자 (이메일)")
    include_in_analytics: Optional[int] = None

    def to_payload(self) -> Dict[str, Any]:
        """분석 API 전송 형식으로 변환합니다."""
        payload: Dict[str, Any] = {
            "actionName": self.name,
            "actionDate": self.timestamp.isoformat(),
            self.property_group.value: dict(self.properties),
        }
        if self.identity is not None:
            payload["identity"] = self.identity
        if self.include_in_analytics is not None:
            payload["includeInAnalytics"] = self.include_in_analytics
        return payload


class SyncResult(BaseModel):
    """계정/엔티티 종류별 동기화 결과"""

    hub_id: int = Field(..., description="HubSpot 포털 ID")
    entity_kind: EntityKind
    status: SyncStatus = Field(default=SyncStatus.PROCESSING)
    started_at: datetime = Field(default_factory=utc_now, description="시작 시간")
    completed_at: Optional[datetime] = Field(None, description="완료 시간")
    fetched_count: int = Field(default=0, description="조회한 레코드 수")
    emitted_count: int = Field(default=0, description="생성한 이벤트 수")
    error_message: Optional[str] = Field(None, description="오류 메시지")

    def mark_as_completed(self) -> None:
        self.status = SyncStatus.SUCCESS
        self.completed_at = utc_now()

    def mark_as_failed(self, error_message: str) -> None:
        self.status = SyncStatus.FAILED
        self.completed_at = utc_now()
        self.error_message = error_message

    def mark_as_skipped(self, reason: str) -> None:
        """자격 증명 갱신 실패 등으로 건너뜀"""
        self.status = SyncStatus.SKIPPED
        self.completed_at = utc_now()
        self.error_message = reason

    def is_completed(self) -> bool:
        return self.status in [SyncStatus.SUCCESS, SyncStatus.FAILED, SyncStatus.SKIPPED]
