"""
데이터베이스 Repository 어댑터

Core 레이어의 AccountRepositoryPort를 구현하는 SQLAlchemy 기반 어댑터입니다.
토큰은 암호화 서비스로 암호화하여 저장합니다.
"""

from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from core.domain.entities import Account, ensure_utc
from core.domain.ports import AccountRepositoryPort, EncryptionServicePort, LoggerPort
from .models import HubspotAccountModel


class SqlAccountRepositoryAdapter(AccountRepositoryPort):
    """HubSpot 계정 Repository 어댑터"""

    def __init__(self, session: AsyncSession, encryption_service: EncryptionServicePort):
        self.session = session
        self.encryption_service = encryption_service

    async def find_accounts(self) -> List[Account]:
        """동기화 대상 계정을 포털 ID 순으로 조회합니다."""
        stmt = select(HubspotAccountModel).order_by(HubspotAccountModel.hub_id)
        result = await self.session.execute(stmt)
        models = result.scalars().all()

        return [await self._model_to_entity(model) for model in models]

    async def list_all(self) -> List[Account]:
        return await self.find_accounts()

    async def get_by_hub_id(self, hub_id: int) -> Optional[Account]:
        """포털 ID로 계정을 조회합니다."""
        model = await self._get_model(hub_id)
        if model is None:
            return None
        return await self._model_to_entity(model)

    async def create(self, account: Account) -> Account:
        """계정을 생성합니다."""
        model = HubspotAccountModel(hub_id=account.hub_id)
        await self._apply_entity(model, account)

        self.session.add(model)
        await self.session.commit()
        await self.session.refresh(model)

        return await self._model_to_entity(model)

    async def register(self, hub_id: int, refresh_token: str) -> Account:
        """
        계정을 등록합니다. 이미 있으면 리프레시 토큰만 교체합니다.

        Args:
            hub_id: HubSpot 포털 ID
            refresh_token: OAuth 리프레시 토큰

        Returns:
            등록된 계정
        """
        existing = await self.get_by_hub_id(hub_id)
        if existing is None:
            return await self.create(Account(hub_id=hub_id, refresh_token=refresh_token))

        existing.refresh_token = refresh_token
        existing.access_token = ""
        existing.expires_at = None
        return await self.persist(existing)

    async def persist(self, account: Account) -> Account:
        """자격 증명과 워터마크를 저장합니다."""
        model = await self._get_model(account.hub_id)
        if model is None:
            raise ValueError(f"계정을 찾을 수 없습니다: {account.hub_id}")

        await self._apply_entity(model, account)

        await self.session.commit()
        await self.session.refresh(model)

        return await self._model_to_entity(model)

    async def reset_watermark(self, hub_id: int, key: Optional[str] = None) -> bool:
        """워터마크를 초기화합니다. key가 없으면 모든 엔티티 종류"""
        model = await self._get_model(hub_id)
        if model is None:
            return False

        watermarks = dict(model.last_pulled_dates or {})
        if key is None:
            watermarks = {}
        else:
            watermarks.pop(key, None)
        model.last_pulled_dates = watermarks

        await self.session.commit()
        return True

    async def delete(self, hub_id: int) -> bool:
        """계정을 삭제합니다."""
        model = await self._get_model(hub_id)
        if model is None:
            return False

        await self.session.delete(model)
        await self.session.commit()
        return True

    async def _get_model(self, hub_id: int) -> Optional[HubspotAccountModel]:
        stmt = select(HubspotAccountModel).where(HubspotAccountModel.hub_id == hub_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def _apply_entity(self, model: HubspotAccountModel, account: Account) -> None:
        model.access_token = await self.encryption_service.encrypt(account.access_token)
        model.refresh_token = await self.encryption_service.encrypt(account.refresh_token)
        model.expires_at = account.expires_at
        # JSON 컬럼은 새 객체를 할당해야 변경이 감지됨
        model.last_pulled_dates = {
            key: ensure_utc(value).isoformat() for key, value in account.last_pulled_dates.items()
        }

    async def _model_to_entity(self, model: HubspotAccountModel) -> Account:
        """모델을 엔티티로 변환합니다."""
        # SQLite는 타임존 정보를 저장하지 않음
        expires_at = ensure_utc(model.expires_at) if model.expires_at else None

        return Account(
            hub_id=model.hub_id,
            access_token=await self.encryption_service.decrypt(model.access_token or ""),
            refresh_token=await self.encryption_service.decrypt(model.refresh_token),
            expires_at=expires_at,
            last_pulled_dates=self._parse_watermarks(model.last_pulled_dates),
        )

    @staticmethod
    def _parse_watermarks(raw: Optional[Dict[str, str]]) -> Dict[str, datetime]:
        return {
            key: ensure_utc(datetime.fromisoformat(value))
            for key, value in (raw or {}).items()
            if value
        }


class NoOpAccountPersistence(AccountRepositoryPort):
    """조회는 위임하고 저장은 건너뛰는 Repository (PERSIST_ACCOUNTS=false)"""

    def __init__(self, repository: AccountRepositoryPort, logger: LoggerPort):
        self.repository = repository
        self.logger = logger

    async def find_accounts(self) -> List[Account]:
        return await self.repository.find_accounts()

    async def get_by_hub_id(self, hub_id: int) -> Optional[Account]:
        return await self.repository.get_by_hub_id(hub_id)

    async def create(self, account: Account) -> Account:
        return await self.repository.create(account)

    async def persist(self, account: Account) -> Account:
        self.logger.debug(f"계정 저장 생략: {account.hub_id}", hub_id=account.hub_id)
        return account
