"""
엔티티 변환

조회한 레코드를 출력 이벤트 0개 또는 1개로 변환합니다.
필수 필드가 없는 레코드는 오류가 아니라 이벤트를 만들지 않습니다.
"""

from datetime import datetime
from typing import Any, Mapping, Optional

from ..domain.entities import OutputEvent, RawRecord, parse_hubspot_datetime
from .entity_descriptors import EntityDescriptor


def is_created(record: RawRecord, watermark: Optional[datetime]) -> bool:
    """워터마크 이후에 생성된 레코드면 생성, 아니면 수정으로 판단"""
    return watermark is None or record.created_at > watermark


def is_transformable(record: RawRecord, descriptor: EntityDescriptor) -> bool:
    """필수 필드가 있는지 확인"""
    if not record.properties:
        return False
    if descriptor.required_property is None:
        return True
    return bool(record.get(descriptor.required_property))


def event_timestamp(record: RawRecord, created: bool, descriptor: EntityDescriptor) -> datetime:
    """이벤트 시각은 항상 레코드의 생성/수정 시각에서 계산"""
    if created:
        timestamp = record.created_at
        if descriptor.created_at_property:
            timestamp = parse_hubspot_datetime(record.get(descriptor.created_at_property)) or timestamp
    else:
        timestamp = record.updated_at
    return timestamp + descriptor.timestamp_offset


def transform(
    record: RawRecord,
    created: bool,
    associations: Mapping[str, Any],
    descriptor: EntityDescriptor,
) -> Optional[OutputEvent]:
    """
    레코드를 출력 이벤트로 변환합니다.

    Args:
        record: 조회한 레코드
        created: 생성 이벤트 여부
        associations: 이번 배치의 연관 관계 조회 결과
        descriptor: 엔티티 종류 디스크립터

    Returns:
        출력 이벤트, 필수 필드가 없으면 None
    """
    if not is_transformable(record, descriptor):
        return None

    properties = descriptor.build_properties(record, associations)
    if descriptor.drop_null_properties:
        properties = {key: value for key, value in properties.items() if value is not None}

    identity = None
    if descriptor.identity_property:
        identity = record.get(descriptor.identity_property)

    return OutputEvent(
        name=descriptor.event_name(created),
        timestamp=event_timestamp(record, created, descriptor),
        property_group=descriptor.property_group,
        properties=properties,
        identity=identity,
        include_in_analytics=descriptor.include_in_analytics,
    )
