"""
엔티티 종류별 디스크립터

어떤 속성을 요청하고 출력 이벤트의 속성을 어떻게 채우는지 정의하는 설정 데이터입니다.
하나의 범용 동기화 루프가 이 디스크립터를 받아 회사, 연락처, 미팅을 처리합니다.
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from ..domain.entities import AccountSyncState, EntityKind, PropertyGroup, RawRecord


PropertyBuilder = Callable[[RawRecord, Mapping[str, Any]], Dict[str, Any]]


@dataclass(frozen=True)
class EntityDescriptor:
    """엔티티 종류 하나의 조회/변환 설정"""

    kind: EntityKind
    label: str
    properties: Tuple[str, ...]
    property_group: PropertyGroup
    build_properties: PropertyBuilder
    sync_state: AccountSyncState
    # None이면 properties 자체가 비어 있지 않아야 함
    required_property: Optional[str] = None
    identity_property: Optional[str] = None
    include_in_analytics: Optional[int] = 0
    # 생성 이벤트의 시각을 createdAt 대신 이 속성에서 읽음
    created_at_property: Optional[str] = None
    timestamp_offset: timedelta = timedelta(0)
    association_target: Optional[EntityKind] = None
    drop_null_properties: bool = False

    @property
    def watermark_key(self) -> str:
        return self.kind.value

    @property
    def object_type(self) -> str:
        return self.kind.value

    def event_name(self, is_created: bool) -> str:
        return f"{self.label} {'Created' if is_created else 'Updated'}"


def _parse_score(value: Any) -> int:
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return 0


def build_company_properties(record: RawRecord, associations: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        "company_id": record.id,
        "company_domain": record.get("domain"),
        "company_industry": record.get("industry"),
    }


def build_contact_properties(record: RawRecord, associations: Mapping[str, Any]) -> Dict[str, Any]:
    name = f"{record.get('firstname') or ''} {record.get('lastname') or ''}".strip()
    return {
        "company_id": associations.get(record.id),
        "contact_name": name,
        "contact_title": record.get("jobtitle"),
        "contact_source": record.get("hs_analytics_source"),
        "contact_status": record.get("hs_lead_status"),
        "contact_score": _parse_score(record.get("hubspotscore")),
    }


def build_meeting_properties(record: RawRecord, associations: Mapping[str, Any]) -> Dict[str, Any]:
    contact = associations.get(record.id) or {}
    return {
        "meeting_id": record.id,
        "meeting_title": record.get("hs_meeting_title"),
        "start_time": record.get("hs_meeting_start_time"),
        "end_time": record.get("hs_meeting_end_time"),
        "contact_email": contact.get("email"),
    }


COMPANY_DESCRIPTOR = EntityDescriptor(
    kind=EntityKind.COMPANIES,
    label="Company",
    properties=(
        "name",
        "domain",
        "country",
        "industry",
        "description",
        "annualrevenue",
        "numberofemployees",
        "hs_lead_status",
    ),
    property_group=PropertyGroup.COMPANY,
    build_properties=build_company_properties,
    sync_state=AccountSyncState.SYNCING_COMPANIES,
    # 같은 시각의 연락처 이벤트보다 먼저 정렬되도록 2초 앞당김
    timestamp_offset=timedelta(seconds=-2),
)

CONTACT_DESCRIPTOR = EntityDescriptor(
    kind=EntityKind.CONTACTS,
    label="Contact",
    properties=(
        "firstname",
        "lastname",
        "jobtitle",
        "email",
        "hubspotscore",
        "hs_lead_status",
        "hs_analytics_source",
        "hs_latest_source",
    ),
    property_group=PropertyGroup.USER,
    build_properties=build_contact_properties,
    sync_state=AccountSyncState.SYNCING_CONTACTS,
    required_property="email",
    identity_property="email",
    association_target=EntityKind.COMPANIES,
    drop_null_properties=True,
)

MEETING_DESCRIPTOR = EntityDescriptor(
    kind=EntityKind.MEETINGS,
    label="Meeting",
    properties=(
        "hs_meeting_title",
        "hs_meeting_start_time",
        "hs_meeting_end_time",
        "hs_meeting_created_at",
    ),
    property_group=PropertyGroup.MEETING,
    build_properties=build_meeting_properties,
    sync_state=AccountSyncState.SYNCING_MEETINGS,
    required_property="hs_meeting_title",
    include_in_analytics=None,
    created_at_property="hs_meeting_created_at",
    association_target=EntityKind.CONTACTS,
)

# 처리 순서: 회사 → 연락처 → 미팅
DEFAULT_DESCRIPTORS: Tuple[EntityDescriptor, ...] = (
    COMPANY_DESCRIPTOR,
    CONTACT_DESCRIPTOR,
    MEETING_DESCRIPTOR,
)
