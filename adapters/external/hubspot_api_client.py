"""
HubSpot CRM API 클라이언트 어댑터

HubSpot CRM v3 API와의 통신을 담당하는 어댑터입니다.
객체 검색, 연관 관계 일괄 조회, 객체 일괄 조회, OAuth 토큰 갱신을 구현합니다.
"""

from typing import Any, Dict, List, Optional, Sequence

import httpx

from core.domain.exceptions import AuthError, CrmApiError
from core.domain.ports import CrmApiClientPort, LoggerPort


class HubspotApiClientAdapter(CrmApiClientPort):
    """HubSpot CRM API 클라이언트 어댑터"""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        logger: LoggerPort,
        base_url: str = "https://api.hubapi.com",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.logger = logger
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    @staticmethod
    def _headers(access_token: str) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {access_token}",
            "Content-Type": "application/json",
        }

    async def _post_json(self, url: str, access_token: str, body: Dict[str, Any], operation: str) -> Dict[str, Any]:
        async with self._client() as client:
            response = await client.post(url, headers=self._headers(access_token), json=body)

            if response.status_code not in [200, 201, 207]:
                error_msg = f"{operation} 실패: {response.status_code} - {response.text}"
                self.logger.error(error_msg, operation=operation)
                raise CrmApiError(error_msg, status_code=response.status_code)

            return response.json() if response.content else {}

    async def search_objects(
        self,
        access_token: str,
        object_type: str,
        search_request: Dict[str, Any],
    ) -> Dict[str, Any]:
        """객체를 검색합니다."""
        self.logger.debug(f"객체 검색: object_type={object_type}, after={search_request.get('after')}")

        url = f"{self.base_url}/crm/v3/objects/{object_type}/search"
        result = await self._post_json(url, access_token, search_request, "객체 검색")

        self.logger.debug(f"객체 검색 성공: {len(result.get('results', []))}개")
        return result

    async def batch_read_associations(
        self,
        access_token: str,
        from_object_type: str,
        to_object_type: str,
        ids: Sequence[str],
    ) -> List[Dict[str, Any]]:
        """연관 관계를 일괄 조회합니다."""
        self.logger.debug(f"연관 관계 조회: {from_object_type} → {to_object_type}, {len(ids)}개")

        url = f"{self.base_url}/crm/v3/associations/{from_object_type}/{to_object_type}/batch/read"
        body = {"inputs": [{"id": str(object_id)} for object_id in ids]}
        result = await self._post_json(url, access_token, body, "연관 관계 조회")

        return result.get("results", [])

    async def batch_read_objects(
        self,
        access_token: str,
        object_type: str,
        ids: Sequence[str],
        properties: Sequence[str],
    ) -> List[Dict[str, Any]]:
        """객체를 일괄 조회합니다."""
        self.logger.debug(f"객체 일괄 조회: object_type={object_type}, {len(ids)}개")

        url = f"{self.base_url}/crm/v3/objects/{object_type}/batch/read"
        body = {
            "properties": list(properties),
            "inputs": [{"id": str(object_id)} for object_id in ids],
        }
        result = await self._post_json(url, access_token, body, "객체 일괄 조회")

        return result.get("results", [])

    async def refresh_access_token(self, refresh_token: str) -> Dict[str, Any]:
        """
        리프레시 토큰으로 액세스 토큰을 갱신합니다.

        Raises:
            AuthError: 리프레시 토큰이 거부된 경우 (400, 401)
            CrmApiError: 그 밖의 실패 응답
        """
        self.logger.debug(f"토큰 갱신: client_id={self.client_id}")

        url = f"{self.base_url}/oauth/v1/token"

        data = {
            "grant_type": "refresh_token",
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "refresh_token": refresh_token,
        }

        async with self._client() as client:
            response = await client.post(
                url,
                data=data,
                headers={"Content-Type": "application/x-www-form-urlencoded"}
            )

            if response.status_code in [400, 401]:
                error_msg = f"토큰 갱신 거부: {response.status_code} - {response.text}"
                self.logger.error(error_msg, operation="refresh_access_token")
                raise AuthError(error_msg)

            if response.status_code != 200:
                error_msg = f"토큰 갱신 실패: {response.status_code} - {response.text}"
                self.logger.error(error_msg, operation="refresh_access_token")
                raise CrmApiError(error_msg, status_code=response.status_code)

            result = response.json()
            self.logger.debug("토큰 갱신 성공")
            return result
