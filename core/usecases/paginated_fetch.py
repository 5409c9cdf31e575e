"""
페이지 조회 유즈케이스

엔티티 종류 하나를 수정 시각 구간으로 검색하며 커서 기반으로 페이지를 넘깁니다.
- 수정 시각 오름차순, 페이지 크기 100
- 오프셋 커서가 9900에 도달하면 마지막 레코드의 수정 시각부터 다시 조회
- 페이지마다 최대 5회 시도, 재시도 전 토큰 만료 확인 및 갱신
"""

from functools import partial
from typing import Any, AsyncIterator, Dict, List, Optional

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_not_exception_type,
    stop_after_attempt,
)

from ..domain.entities import Account, RawRecord, SyncWindow, to_epoch_millis
from ..domain.exceptions import AuthError, FetchExhaustedError, PaginationStalledError
from ..domain.ports import CrmApiClientPort, LoggerPort
from .credential_management import CredentialManager
from .entity_descriptors import EntityDescriptor

LAST_MODIFIED_PROPERTY = "hs_lastmodifieddate"


class PaginatedFetcher:
    """커서 기반 페이지 조회기"""

    def __init__(
        self,
        crm_api_client: CrmApiClientPort,
        credential_manager: CredentialManager,
        logger: LoggerPort,
        page_size: int = 100,
        max_offset: int = 9900,
        max_attempts: int = 5,
        retry_base_seconds: float = 5.0,
    ):
        self.crm_api_client = crm_api_client
        self.credential_manager = credential_manager
        self.logger = logger
        self.page_size = page_size
        self.max_offset = max_offset
        self.max_attempts = max_attempts
        self.retry_base_seconds = retry_base_seconds

    async def fetch(
        self,
        account: Account,
        descriptor: EntityDescriptor,
        window: SyncWindow,
    ) -> AsyncIterator[List[RawRecord]]:
        """
        구간 안의 레코드를 페이지 단위 배치로 반환합니다.

        Args:
            account: 조회할 계정 (재시도 중 토큰이 갱신될 수 있음)
            descriptor: 엔티티 종류 디스크립터
            window: 동기화 구간 (커서 상태가 갱신됨)

        Raises:
            FetchExhaustedError: 한 페이지가 최대 시도 횟수를 모두 실패한 경우
            PaginationStalledError: 수정 시각 커서가 전진하지 않는 경우
            AuthError: 재시도 중 토큰 갱신이 거부된 경우
        """
        page = 0
        while True:
            search_request = self._build_search_request(descriptor, window)
            response = await self._search_with_retry(account, descriptor, search_request)

            records = [
                RawRecord.from_api(descriptor.kind, item)
                for item in response.get("results") or []
            ]
            page += 1
            self.logger.debug(
                f"{descriptor.kind.value} 페이지 조회: {page}페이지, {len(records)}개",
                hub_id=account.hub_id,
                entity_kind=descriptor.kind.value,
            )

            if records:
                yield records

            next_after = self._parse_after(response)
            if next_after is None:
                break

            if next_after >= self.max_offset:
                if not records:
                    break
                self._restart_window(window, records[-1], descriptor)
            else:
                window.after = next_after

    def _build_search_request(self, descriptor: EntityDescriptor, window: SyncWindow) -> Dict[str, Any]:
        """검색 요청 본문을 구성합니다."""
        search_request: Dict[str, Any] = {
            "filterGroups": [
                {
                    "filters": [
                        {
                            "propertyName": LAST_MODIFIED_PROPERTY,
                            "operator": "GTE",
                            "value": str(to_epoch_millis(window.lower_effective_bound)),
                        },
                        {
                            "propertyName": LAST_MODIFIED_PROPERTY,
                            "operator": "LTE",
                            "value": str(to_epoch_millis(window.upper_bound)),
                        },
                    ]
                }
            ],
            "sorts": [{"propertyName": LAST_MODIFIED_PROPERTY, "direction": "ASCENDING"}],
            "properties": list(descriptor.properties),
            "limit": self.page_size,
        }
        if window.after is not None:
            search_request["after"] = str(window.after)
        return search_request

    def _parse_after(self, response: Dict[str, Any]) -> Optional[int]:
        after = ((response.get("paging") or {}).get("next") or {}).get("after")
        if after in (None, ""):
            return None
        try:
            return int(after)
        except (TypeError, ValueError):
            self.logger.warning(f"해석할 수 없는 페이지 커서: {after}")
            return None

    def _restart_window(self, window: SyncWindow, last_record: RawRecord, descriptor: EntityDescriptor) -> None:
        """오프셋 한도 도달 시 수정 시각 커서로 전환합니다."""
        previous_bound = window.lower_effective_bound
        if window.is_saturated() and last_record.updated_at <= previous_bound:
            raise PaginationStalledError(
                f"{descriptor.kind.value} 페이지 커서가 {previous_bound.isoformat()}에서 전진하지 않습니다",
                entity_kind=descriptor.kind.value,
            )

        window.restart_from(last_record.updated_at)
        self.logger.info(
            f"오프셋 한도 도달, 수정 시각 커서로 전환: {descriptor.kind.value}, "
            f"{window.lower_effective_bound.isoformat()}",
            hub_id=window.hub_id,
            entity_kind=descriptor.kind.value,
        )

    def _backoff(self, retry_state: RetryCallState) -> float:
        """재시도 대기 시간: base * 2^attempt"""
        return self.retry_base_seconds * (2 ** retry_state.attempt_number)

    def _log_retry(
        self,
        account: Account,
        descriptor: EntityDescriptor,
        retry_state: RetryCallState,
    ) -> None:
        exception = retry_state.outcome.exception() if retry_state.outcome else None
        self.logger.warning(
            f"페이지 조회 실패, 재시도 예정: {retry_state.attempt_number}/{self.max_attempts}, "
            f"오류: {str(exception)}",
            hub_id=account.hub_id,
            operation="fetch",
            entity_kind=descriptor.kind.value,
        )

    async def _search_with_retry(
        self,
        account: Account,
        descriptor: EntityDescriptor,
        search_request: Dict[str, Any],
    ) -> Dict[str, Any]:
        """검색 요청을 재시도 정책에 따라 실행합니다."""
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=self._backoff,
            retry=retry_if_not_exception_type(AuthError),
            before_sleep=partial(self._log_retry, account, descriptor),
        )

        try:
            async for attempt in retrying:
                with attempt:
                    if attempt.retry_state.attempt_number > 1:
                        await self.credential_manager.refresh_if_expired(account)
                    return await self.crm_api_client.search_objects(
                        access_token=account.access_token,
                        object_type=descriptor.object_type,
                        search_request=search_request,
                    )
        except RetryError as e:
            last_error = e.last_attempt.exception()
            self.logger.error(
                f"{descriptor.kind.value} 조회 재시도 소진: {str(last_error)}",
                hub_id=account.hub_id,
                operation="fetch",
                entity_kind=descriptor.kind.value,
            )
            raise FetchExhaustedError(descriptor.kind.value, self.max_attempts, last_error) from last_error

        raise FetchExhaustedError(descriptor.kind.value, self.max_attempts)
