"""
연관 관계 조회 유즈케이스

조회한 페이지 단위로 연관 관계를 일괄 조회합니다.
- 연락처 → 회사: 연락처마다 첫 번째 회사 ID
- 미팅 → 연락처: 연락처 ID 조회 후 연락처 이메일을 일괄 조회
"""

from typing import Any, Dict, List, Optional, Sequence

from ..domain.entities import EntityKind
from ..domain.exceptions import AssociationError, AuthError
from ..domain.ports import CrmApiClientPort, LoggerPort


class AssociationResolver:
    """연관 관계 조회기"""

    CONTACT_IDENTITY_PROPERTIES = ("email",)
    FIRST_TARGET_PAIRS = ((EntityKind.CONTACTS, EntityKind.COMPANIES),)
    MEETING_CONTACT_PAIR = (EntityKind.MEETINGS, EntityKind.CONTACTS)

    def __init__(self, crm_api_client: CrmApiClientPort, logger: LoggerPort):
        self.crm_api_client = crm_api_client
        self.logger = logger

    async def resolve(
        self,
        access_token: str,
        ids: Sequence[str],
        source_kind: EntityKind,
        target_kind: EntityKind,
    ) -> Dict[str, Any]:
        """
        소스 ID 목록의 연관 대상을 조회합니다.

        연관 대상이 없는 ID는 결과에 포함되지 않습니다.

        Args:
            access_token: 계정 액세스 토큰
            ids: 소스 엔티티 ID 목록 (한 페이지)
            source_kind: 소스 엔티티 종류
            target_kind: 대상 엔티티 종류

        Returns:
            소스 ID → 대상 ID (또는 대상 필드 투영)

        Raises:
            AssociationError: 원격 조회 실패
        """
        pair = (source_kind, target_kind)
        if pair not in (self.FIRST_TARGET_PAIRS + (self.MEETING_CONTACT_PAIR,)):
            raise AssociationError(
                f"지원하지 않는 연관 관계입니다: {source_kind.value} → {target_kind.value}",
                entity_kind=source_kind.value,
            )

        if not ids:
            return {}

        try:
            if pair == self.MEETING_CONTACT_PAIR:
                return await self._resolve_meeting_contacts(access_token, ids)
            return await self._resolve_first_targets(access_token, ids, source_kind, target_kind)
        except (AssociationError, AuthError):
            raise
        except Exception as e:
            self.logger.error(
                f"연관 관계 조회 실패: {source_kind.value} → {target_kind.value}, 오류: {str(e)}",
                operation="resolve_associations",
                entity_kind=source_kind.value,
            )
            raise AssociationError(
                f"Failed to resolve {source_kind.value} → {target_kind.value} associations: {str(e)}",
                entity_kind=source_kind.value,
            ) from e

    async def _read_associations(
        self,
        access_token: str,
        ids: Sequence[str],
        source_kind: EntityKind,
        target_kind: EntityKind,
    ) -> Dict[str, str]:
        """소스 ID마다 첫 번째 대상 ID를 반환합니다."""
        results = await self.crm_api_client.batch_read_associations(
            access_token=access_token,
            from_object_type=source_kind.value,
            to_object_type=target_kind.value,
            ids=list(ids),
        )

        first_targets: Dict[str, str] = {}
        for result in results:
            source = (result.get("from") or {}).get("id")
            targets = result.get("to") or []
            if not source or not targets:
                continue
            target_id = targets[0].get("id") or targets[0].get("toObjectId")
            if target_id is None:
                continue
            first_targets[str(source)] = str(target_id)

        return first_targets

    async def _resolve_first_targets(
        self,
        access_token: str,
        ids: Sequence[str],
        source_kind: EntityKind,
        target_kind: EntityKind,
    ) -> Dict[str, str]:
        associations = await self._read_associations(access_token, ids, source_kind, target_kind)
        self.logger.debug(
            f"연관 관계 조회 완료: {source_kind.value} → {target_kind.value}, "
            f"{len(associations)}/{len(ids)}개"
        )
        return associations

    async def _resolve_meeting_contacts(
        self,
        access_token: str,
        meeting_ids: Sequence[str],
    ) -> Dict[str, Optional[Dict[str, Any]]]:
        """미팅 ID → 연락처 식별 필드 (email)"""
        meeting_contacts = await self._read_associations(
            access_token, meeting_ids, EntityKind.MEETINGS, EntityKind.CONTACTS
        )

        contact_ids = list(dict.fromkeys(meeting_contacts.values()))
        if not contact_ids:
            return {}

        contacts = await self.crm_api_client.batch_read_objects(
            access_token=access_token,
            object_type=EntityKind.CONTACTS.value,
            ids=contact_ids,
            properties=list(self.CONTACT_IDENTITY_PROPERTIES),
        )
        contact_map = {
            str(contact.get("id")): contact.get("properties") or {}
            for contact in contacts
        }

        self.logger.debug(
            f"미팅 연락처 조회 완료: 미팅 {len(meeting_contacts)}개, 연락처 {len(contact_map)}/{len(contact_ids)}개"
        )
        return {
            meeting_id: contact_map.get(contact_id)
            for meeting_id, contact_id in meeting_contacts.items()
        }
