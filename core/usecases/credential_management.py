"""
자격 증명 관리 유즈케이스

HubSpot OAuth 리프레시 토큰으로 액세스 토큰을 갱신합니다.
갱신된 토큰은 전역 클라이언트가 아니라 계정 엔티티에 직접 반영됩니다.
"""

from datetime import datetime, timedelta
from typing import Callable

from ..domain.entities import Account, Credential, utc_now
from ..domain.exceptions import AuthError
from ..domain.ports import CrmApiClientPort, LoggerPort


class CredentialManager:
    """자격 증명 관리자"""

    def __init__(
        self,
        crm_api_client: CrmApiClientPort,
        logger: LoggerPort,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.crm_api_client = crm_api_client
        self.logger = logger
        self.clock = clock

    async def refresh(self, account: Account) -> Credential:
        """
        계정의 액세스 토큰을 갱신합니다.

        만료 전에 호출해도 안전합니다.

        Args:
            account: 갱신할 계정 (access_token, expires_at이 교체됨)

        Returns:
            새 자격 증명

        Raises:
            AuthError: 리프레시 토큰이 거부된 경우
        """
        self.logger.info(f"토큰 갱신 시작: {account.hub_id}", hub_id=account.hub_id)

        try:
            token_response = await self.crm_api_client.refresh_access_token(account.refresh_token)
        except AuthError as e:
            self.logger.error(
                f"토큰 갱신 거부: {account.hub_id}, 오류: {str(e)}",
                hub_id=account.hub_id,
                operation="refresh_access_token",
            )
            if e.hub_id is None:
                e.hub_id = account.hub_id
            raise

        access_token = token_response.get("access_token")
        if not access_token:
            raise AuthError(f"토큰 응답에 access_token이 없습니다: {account.hub_id}", hub_id=account.hub_id)

        expires_in = int(token_response.get("expires_in", 0))
        credential = Credential(
            access_token=access_token,
            expires_at=self.clock() + timedelta(seconds=expires_in),
        )
        account.apply_credential(credential)

        self.logger.info(
            f"토큰 갱신 완료: {account.hub_id}, 만료: {credential.expires_at.isoformat()}",
            hub_id=account.hub_id,
        )
        return credential

    async def refresh_if_expired(self, account: Account) -> bool:
        """저장된 만료 시각이 지났으면 갱신합니다."""
        if not account.is_credential_expired(self.clock()):
            return False

        self.logger.info(f"토큰이 만료되어 갱신 시도: {account.hub_id}", hub_id=account.hub_id)
        await self.refresh(account)
        return True
