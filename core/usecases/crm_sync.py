"""
CRM 동기화 유즈케이스

계정과 엔티티 종류를 순서대로 처리하며 각 단계의 실패를 격리합니다.
계정마다: 토큰 갱신 → 회사 → 연락처 → 미팅 → 버퍼 전송 → 완료
워터마크는 해당 엔티티 종류가 성공했을 때만 동기화 시작 시각으로 이동합니다.
"""

from datetime import datetime
from typing import Callable, Iterable, List, Optional, Sequence

from ..domain.entities import (
    Account,
    AccountSyncState,
    SyncResult,
    SyncStatus,
    SyncWindow,
    utc_now,
)
from ..domain.ports import AccountRepositoryPort, AnalyticsSinkPort, LoggerPort
from .association_resolution import AssociationResolver
from .batching_sink import BatchingSink
from .credential_management import CredentialManager
from .entity_descriptors import DEFAULT_DESCRIPTORS, EntityDescriptor
from .entity_transform import is_created, transform
from .paginated_fetch import PaginatedFetcher


class SyncOrchestrator:
    """HubSpot 증분 동기화 오케스트레이터"""

    def __init__(
        self,
        account_repository: AccountRepositoryPort,
        credential_manager: CredentialManager,
        fetcher: PaginatedFetcher,
        association_resolver: AssociationResolver,
        analytics_sink: AnalyticsSinkPort,
        logger: LoggerPort,
        descriptors: Sequence[EntityDescriptor] = DEFAULT_DESCRIPTORS,
        flush_threshold: int = 2000,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.account_repository = account_repository
        self.credential_manager = credential_manager
        self.fetcher = fetcher
        self.association_resolver = association_resolver
        self.analytics_sink = analytics_sink
        self.logger = logger
        self.descriptors = tuple(descriptors)
        self.flush_threshold = flush_threshold
        self.clock = clock

    async def run(self, hub_ids: Optional[Iterable[int]] = None) -> List[SyncResult]:
        """
        모든 계정을 순서대로 동기화합니다.

        실패는 계정/엔티티 종류 단위로 기록되고 상위로 전파되지 않습니다.

        Args:
            hub_ids: 지정하면 해당 포털만 동기화

        Returns:
            계정/엔티티 종류별 동기화 결과
        """
        self.logger.info("HubSpot 데이터 동기화 시작")

        accounts = await self.account_repository.find_accounts()
        if hub_ids is not None:
            selected = set(hub_ids)
            accounts = [account for account in accounts if account.hub_id in selected]

        results: List[SyncResult] = []
        for account in accounts:
            results.extend(await self.sync_account(account))

        failed = sum(1 for result in results if result.status != SyncStatus.SUCCESS)
        self.logger.info(f"HubSpot 데이터 동기화 완료: 계정 {len(accounts)}개, 실패/건너뜀 {failed}건")
        return results

    async def sync_account(self, account: Account) -> List[SyncResult]:
        """계정 하나를 동기화합니다. 버퍼 전송은 항상 한 번 실행됩니다."""
        self.logger.info(f"계정 처리 시작: {account.hub_id}", hub_id=account.hub_id)

        self._transition(account, AccountSyncState.REFRESHING_CREDENTIAL)
        credential_error: Optional[str] = None
        try:
            await self.credential_manager.refresh(account)
        except Exception as e:
            credential_error = str(e)
            self.logger.error(
                f"토큰 갱신 실패: {account.hub_id}, 오류: {credential_error}",
                hub_id=account.hub_id,
                operation="refresh_access_token",
            )

        sink = BatchingSink(
            analytics_sink=self.analytics_sink,
            logger=self.logger,
            flush_threshold=self.flush_threshold,
            hub_id=account.hub_id,
        )

        results: List[SyncResult] = []
        for descriptor in self.descriptors:
            self._transition(account, descriptor.sync_state)
            result = SyncResult(hub_id=account.hub_id, entity_kind=descriptor.kind)

            if credential_error is not None:
                result.mark_as_skipped(f"토큰 갱신 실패: {credential_error}")
                results.append(result)
                continue

            try:
                await self.sync_entity_kind(account, descriptor, sink, result)
            except Exception as e:
                result.mark_as_failed(str(e))
                self.logger.error(
                    f"{descriptor.kind.value} 동기화 실패: {account.hub_id}, 오류: {str(e)}",
                    hub_id=account.hub_id,
                    operation=f"process_{descriptor.kind.value}",
                    entity_kind=descriptor.kind.value,
                )
            results.append(result)

        self._transition(account, AccountSyncState.DRAINING)
        try:
            await sink.drain()
        except Exception as e:
            self.logger.error(
                f"버퍼 전송 실패: {account.hub_id}, 오류: {str(e)}",
                hub_id=account.hub_id,
                operation="drain",
            )

        await self._persist(account)

        self._transition(account, AccountSyncState.DONE)
        self.logger.info(f"계정 처리 완료: {account.hub_id}", hub_id=account.hub_id)
        return results

    async def sync_entity_kind(
        self,
        account: Account,
        descriptor: EntityDescriptor,
        sink: BatchingSink,
        result: Optional[SyncResult] = None,
    ) -> SyncResult:
        """
        엔티티 종류 하나를 증분 동기화합니다.

        Args:
            account: 동기화할 계정
            descriptor: 엔티티 종류 디스크립터
            sink: 계정의 이벤트 버퍼
            result: 결과를 기록할 객체 (없으면 생성)

        Returns:
            동기화 결과

        Raises:
            FetchError, AuthError: 이 엔티티 종류의 동기화가 중단된 경우
        """
        if result is None:
            result = SyncResult(hub_id=account.hub_id, entity_kind=descriptor.kind)

        started_at = self.clock()
        watermark = account.get_watermark(descriptor.watermark_key)
        window = SyncWindow(
            entity_kind=descriptor.kind,
            hub_id=account.hub_id,
            lower_bound=watermark,
            upper_bound=started_at,
        )

        async for batch in self.fetcher.fetch(account, descriptor, window):
            associations = {}
            if descriptor.association_target is not None:
                associations = await self.association_resolver.resolve(
                    access_token=account.access_token,
                    ids=[record.id for record in batch],
                    source_kind=descriptor.kind,
                    target_kind=descriptor.association_target,
                )

            for record in batch:
                event = transform(record, is_created(record, watermark), associations, descriptor)
                if event is not None:
                    sink.push(event)
                    result.emitted_count += 1
            result.fetched_count += len(batch)

        account.advance_watermark(descriptor.watermark_key, started_at)
        await self._persist(account)

        result.mark_as_completed()
        self.logger.info(
            f"{descriptor.kind.value} 동기화 완료: {account.hub_id}, "
            f"조회 {result.fetched_count}개, 이벤트 {result.emitted_count}개",
            hub_id=account.hub_id,
            entity_kind=descriptor.kind.value,
        )
        return result

    async def _persist(self, account: Account) -> None:
        """계정 상태를 저장합니다. 실패는 로그로만 남김"""
        try:
            await self.account_repository.persist(account)
        except Exception as e:
            self.logger.error(
                f"계정 저장 실패: {account.hub_id}, 오류: {str(e)}",
                hub_id=account.hub_id,
                operation="persist_account",
            )

    def _transition(self, account: Account, state: AccountSyncState) -> None:
        self.logger.debug(f"상태 전이: {account.hub_id} → {state.value}", hub_id=account.hub_id)
